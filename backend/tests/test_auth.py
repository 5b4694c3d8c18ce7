"""Tests for registration, login / logout and the current-account view.

Covers:
- Registration creates exactly one profile and one activity
- Duplicate username / email → 409
- Staff roles cannot self-register
- Generic 401 for unknown user and wrong password
- Pending provider with correct password → 403, no token
- Stored password hash is salted scrypt, never the plain password
- Token re-resolution: a deactivated account loses access at once
"""
from jose import jwt

from marketplace.config import settings
from marketplace.models.account import Account, AccountRole, AccountStatus
from marketplace.models.activity import Activity
from marketplace.models.profile import CustomerProfile, ProviderProfile
from marketplace.services import credential_service
from tests.conftest import PASSWORD, create_staff, login, register


class TestRegister:
    """Public sign-up."""

    def test_register_customer(self, client, db):
        data = register(client, "carol", "customer")
        assert data["role"] == "customer"
        assert data["status"] == "active"
        assert "password_hash" not in data

        profiles = db.query(CustomerProfile).filter(CustomerProfile.account_id == data["id"]).all()
        assert len(profiles) == 1
        activities = db.query(Activity).filter(Activity.action == "registration").all()
        assert len(activities) == 1
        assert activities[0].actor_account_id == data["id"]

    def test_register_provider_starts_pending(self, client, db):
        data = register(client, "pat", "provider")
        assert data["status"] == "pending"
        profile = db.query(ProviderProfile).filter(ProviderProfile.account_id == data["id"]).one()
        assert profile.display_name == "pat"
        assert profile.verified is False

    def test_duplicate_username_conflict(self, client):
        register(client, "carol")
        resp = client.post("/api/register", json={
            "username": "carol", "email": "other@example.com", "password": PASSWORD, "role": "customer",
        })
        assert resp.status_code == 409

    def test_duplicate_email_conflict(self, client):
        register(client, "carol")
        resp = client.post("/api/register", json={
            "username": "carol2", "email": "carol@example.com", "password": PASSWORD, "role": "customer",
        })
        assert resp.status_code == 409

    def test_staff_roles_cannot_self_register(self, client, db):
        for role in ("admin", "employee"):
            resp = client.post("/api/register", json={
                "username": f"sneaky-{role}", "email": f"{role}@example.com", "password": PASSWORD, "role": role,
            })
            assert resp.status_code == 422
        assert db.query(Account).count() == 0

    def test_unknown_role_rejected(self, client):
        resp = client.post("/api/register", json={
            "username": "x-user", "email": "x@example.com", "password": PASSWORD, "role": "superuser",
        })
        assert resp.status_code == 422

    def test_password_is_hashed_with_salt(self, client, db):
        register(client, "carol")
        register(client, "dave")
        hashes = [a.password_hash for a in db.query(Account).order_by(Account.id).all()]
        assert all(h.startswith("$scrypt$") for h in hashes)
        assert all(PASSWORD not in h for h in hashes)
        # Same password, different salts.
        assert hashes[0] != hashes[1]
        assert credential_service.verify_password(PASSWORD, hashes[0])
        assert not credential_service.verify_password("wrong", hashes[0])


class TestLogin:
    """Credential verification and session issue."""

    def test_login_returns_token_and_context(self, client, db):
        data = register(client, "carol")
        resp = client.post("/api/login", json={"username": "carol", "password": PASSWORD})
        assert resp.status_code == 200
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["context"]["account_id"] == data["id"]
        assert body["context"]["role"] == "customer"

        profile = db.query(CustomerProfile).filter(CustomerProfile.account_id == data["id"]).one()
        assert body["context"]["profile_id"] == profile.id
        assert db.query(Activity).filter(Activity.action == "login").count() == 1

    def test_wrong_password_and_unknown_user_look_the_same(self, client):
        register(client, "carol")
        wrong = client.post("/api/login", json={"username": "carol", "password": "nope-nope"})
        unknown = client.post("/api/login", json={"username": "nobody", "password": PASSWORD})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    def test_pending_provider_refused(self, client):
        register(client, "pat", "provider")
        resp = client.post("/api/login", json={"username": "pat", "password": PASSWORD})
        assert resp.status_code == 403
        assert "access_token" not in resp.json()

    def test_approved_provider_can_log_in(self, client, db):
        data = register(client, "pat", "provider")
        credential_service.set_status(db, data["id"], AccountStatus.active)
        headers = login(client, "pat")
        assert client.get("/api/user", headers=headers).status_code == 200

    def test_login_updates_last_login(self, client, db):
        data = register(client, "carol")
        login(client, "carol")
        account = db.get(Account, data["id"])
        db.refresh(account)
        assert account.last_login_at is not None


class TestSession:
    """Per-request context resolution."""

    def test_current_user(self, client):
        data = register(client, "carol")
        headers = login(client, "carol")
        resp = client.get("/api/user", headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["account"]["id"] == data["id"]
        assert "password_hash" not in body["account"]
        assert body["context"]["role"] == "customer"

    def test_missing_token_unauthorized(self, client):
        assert client.get("/api/user").status_code == 401

    def test_garbage_token_unauthorized(self, client):
        resp = client.get("/api/user", headers={"Authorization": "Bearer not.a.jwt"})
        assert resp.status_code == 401

    def test_deactivated_account_loses_access(self, client, db):
        data = register(client, "carol")
        headers = login(client, "carol")
        credential_service.set_status(db, data["id"], AccountStatus.inactive)
        assert client.get("/api/user", headers=headers).status_code == 403

    def test_logout_records_activity(self, client, db):
        register(client, "carol")
        headers = login(client, "carol")
        resp = client.post("/api/logout", headers=headers)
        assert resp.status_code == 204
        assert db.query(Activity).filter(Activity.action == "logout").count() == 1

    def test_token_refused_after_logout(self, client):
        register(client, "carol")
        headers = login(client, "carol")
        assert client.post("/api/logout", headers=headers).status_code == 204
        assert client.get("/api/user", headers=headers).status_code == 401
        assert client.post("/api/logout", headers=headers).status_code == 401

    def test_logout_ends_every_open_session(self, client):
        register(client, "carol")
        laptop = login(client, "carol")
        phone = login(client, "carol")
        client.post("/api/logout", headers=laptop)
        assert client.get("/api/user", headers=phone).status_code == 401

    def test_fresh_login_after_logout(self, client):
        register(client, "carol")
        client.post("/api/logout", headers=login(client, "carol"))
        headers = login(client, "carol")
        assert client.get("/api/user", headers=headers).status_code == 200

    def test_token_without_version_refused(self, client):
        data = register(client, "carol")
        token = jwt.encode({"sub": str(data["id"])}, settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)
        resp = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401


class TestAccountAdministration:
    """Admin-only account management."""

    def test_admin_approves_provider(self, client, db):
        create_staff(db, "ada")
        admin_headers = login(client, "ada")
        pending = register(client, "pat", "provider")

        resp = client.patch(f"/api/users/{pending['id']}/status", json={"status": "active"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "active"
        assert db.query(Activity).filter(Activity.action == "account_status_update").count() == 1
        login(client, "pat")

    def test_employee_cannot_change_status(self, client, db):
        create_staff(db, "eve", AccountRole.employee)
        headers = login(client, "eve")
        pending = register(client, "pat", "provider")
        resp = client.patch(f"/api/users/{pending['id']}/status", json={"status": "active"}, headers=headers)
        assert resp.status_code == 403

    def test_list_users_filtered(self, client, db):
        create_staff(db, "ada")
        headers = login(client, "ada")
        register(client, "pat", "provider")
        register(client, "carol", "customer")

        resp = client.get("/api/users", params={"status": "pending"}, headers=headers)
        assert resp.status_code == 200
        assert [u["username"] for u in resp.json()] == ["pat"]

    def test_customer_cannot_list_users(self, client):
        register(client, "carol")
        headers = login(client, "carol")
        assert client.get("/api/users", headers=headers).status_code == 403

    def test_admin_creates_employee(self, client, db):
        create_staff(db, "ada")
        headers = login(client, "ada")
        resp = client.post("/api/users", json={
            "username": "eve", "email": "eve@example.com", "password": PASSWORD, "role": "employee",
        }, headers=headers)
        assert resp.status_code == 201
        assert resp.json()["status"] == "active"
        login(client, "eve")
