"""Pytest fixtures — file-backed SQLite database, fresh per test."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "10")

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from marketplace.database import Base, get_db  # noqa: E402
from marketplace.main import app  # noqa: E402
from marketplace.models.account import Account, AccountRole, AccountStatus  # noqa: E402
from marketplace.services import credential_service, profile_service  # noqa: E402

SQLITE_URL = "sqlite:///./test.db"
PASSWORD = "correct-horse-42"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session for direct service calls and assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def register(client: TestClient, username: str, role: str = "customer", password: str = PASSWORD) -> dict:
    """Helper — POST /api/register and return response JSON."""
    resp = client.post("/api/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client: TestClient, username: str, password: str = PASSWORD) -> dict:
    """Helper — POST /api/login and return bearer auth headers."""
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def create_staff(db, username: str, role: AccountRole = AccountRole.admin) -> Account:
    """Helper — insert an active admin/employee account with its profile."""
    account = credential_service.register(
        db, username, f"{username}@example.com", PASSWORD, role, AccountStatus.active,
    )
    profile_service.resolve(db, account)
    db.refresh(account)
    return account


def customer(client: TestClient, username: str = "carol") -> dict:
    """Helper — register and log in a customer; returns auth headers."""
    register(client, username, "customer")
    return login(client, username)


def provider(client: TestClient, db, username: str = "pat") -> dict:
    """Helper — register a provider, approve it and log in; returns auth headers."""
    data = register(client, username, "provider")
    credential_service.set_status(db, data["id"], AccountStatus.active)
    return login(client, username)


def staff(client: TestClient, db, username: str = "ada", role: AccountRole = AccountRole.admin) -> dict:
    """Helper — create a staff account and log in; returns auth headers."""
    create_staff(db, username, role)
    return login(client, username)
