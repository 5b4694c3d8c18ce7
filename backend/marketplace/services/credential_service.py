"""Credential store — account identity, password hashing and session tokens.

Passwords are hashed with scrypt through passlib. The stored string keeps
the random salt next to the digest, and verification recomputes the digest
with that salt and compares in constant time.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.config import settings
from marketplace.errors import AccountNotActiveError, AuthenticationError, ConflictError, NotFoundError
from marketplace.models.account import Account, AccountRole, AccountStatus

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["scrypt"],
    deprecated="auto",
    scrypt__default_rounds=settings.PASSWORD_HASH_ROUNDS,
)

# Verifying against this keeps the timing of "no such user" close to "wrong password".
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unrecognised or malformed stored hash.
        logger.warning("Stored password hash could not be parsed")
        return False


def get_account(db: Session, account_id: int) -> Account:
    account = db.get(Account, account_id)
    if not account:
        raise NotFoundError("Account not found")
    return account


def register(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: AccountRole,
    status: Optional[AccountStatus] = None,
) -> Account:
    """Insert a new account row. Fails with ConflictError on duplicate username/email.

    The caller owns the transaction: the account is flushed, not committed, so
    the profile can be created in the same unit of work.
    """
    existing = (
        db.query(Account)
        .filter(or_(Account.username == username, Account.email == email))
        .first()
    )
    if existing:
        raise ConflictError("Username or email already registered")

    if status is None:
        if role == AccountRole.provider and settings.PROVIDER_REQUIRES_APPROVAL:
            status = AccountStatus.pending
        else:
            status = AccountStatus.active

    account = Account(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role,
        status=status,
    )
    db.add(account)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already registered")
    return account


def verify(db: Session, username: str, password: str) -> Account:
    """Return the account for valid credentials.

    Unknown user and wrong password both raise the same AuthenticationError.
    A correct password on a non-active account raises AccountNotActiveError.
    """
    account = db.query(Account).filter(Account.username == username).first()
    if account is None:
        verify_password(password, _DUMMY_HASH)
        logger.warning("Failed login for username '%s'", username)
        raise AuthenticationError()
    if not verify_password(password, account.password_hash):
        logger.warning("Failed login for username '%s'", username)
        raise AuthenticationError()
    if account.status != AccountStatus.active:
        logger.warning("Login refused for %s account %s", account.status.value, account.id)
        raise AccountNotActiveError(f"Your account is {account.status.value}. Please contact support for assistance.")
    return account


def touch_login(db: Session, account_id: int) -> None:
    account = get_account(db, account_id)
    account.last_login_at = datetime.now(timezone.utc)
    db.commit()


def set_status(db: Session, account_id: int, status: AccountStatus) -> Account:
    account = get_account(db, account_id)
    account.status = status
    db.commit()
    db.refresh(account)
    logger.info("Account %s status set to %s", account_id, status.value)
    return account


# ── Session tokens ─────────────────────────────────────────────────

def issue_token(account: Account, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(account.id), "ver": account.token_version or 0, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)


def decode_token(token: str) -> tuple[int, int]:
    """Return ``(account_id, token_version)`` from a signed session token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.TOKEN_ALGORITHM])
        subject = payload.get("sub")
        version = payload.get("ver")
        if subject is None or version is None:
            raise AuthenticationError("Could not validate credentials")
        return int(subject), int(version)
    except (JWTError, ValueError):
        raise AuthenticationError("Could not validate credentials")


def revoke_sessions(db: Session, account_id: int) -> None:
    """Invalidate every token issued to ``account_id`` so far."""
    updated = (
        db.query(Account)
        .filter(Account.id == account_id)
        .update({Account.token_version: Account.token_version + 1}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise NotFoundError("Account not found")
    db.commit()
    logger.info("Revoked sessions for account %s", account_id)
