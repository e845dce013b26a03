"""Local identity provider: accounts in the database, session in a TOML file."""

import hashlib
import hmac
import os
import secrets
import sqlite3
import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

from fairsplit.config import get_config_dir
from fairsplit.store.queries import get_user_by_email, get_user_by_id, insert_user

MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 200_000


class AuthenticationError(Exception):
    """Sign-up or sign-in was refused."""


@dataclass(frozen=True)
class Identity:
    """The signed-in user."""

    user_id: int
    email: str


def get_session_path() -> Path:
    """Get the session file path (next to the config file)."""
    return get_config_dir() / "session.toml"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    """Hash a password with PBKDF2-SHA256.

    Args:
        password: Plain text password.
        salt: Hex encoded salt. If None, a new random salt is generated.

    Returns:
        Tuple of (hash_hex, salt_hex).
    """
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return digest.hex(), salt


def verify_password(password: str, password_hash: str, salt: str) -> bool:
    candidate, _ = hash_password(password, salt)
    return hmac.compare_digest(candidate, password_hash)


def sign_up(email: str, password: str, db_path: Path | None = None) -> Identity:
    """Register a new account.

    Args:
        email: Email address (case insensitive).
        password: Plain text password.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Identity of the new account.

    Raises:
        AuthenticationError: If the email is invalid or taken, or the password is too short.
        sqlite3.Error: If database operation fails.
    """
    email = normalize_email(email)
    if "@" not in email:
        raise AuthenticationError(f"'{email}' is not a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthenticationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    password_hash, salt = hash_password(password)
    try:
        user_id = insert_user(email, password_hash, salt, db_path)
    except sqlite3.IntegrityError as e:
        raise AuthenticationError(f"An account for {email} already exists") from e
    return Identity(user_id=user_id, email=email)


def _write_session(identity: Identity, session_path: Path) -> None:
    session_path.parent.mkdir(parents=True, exist_ok=True)
    with open(session_path, "wb") as f:
        tomli_w.dump({"user_id": identity.user_id, "email": identity.email}, f)
    os.chmod(session_path, 0o600)


def sign_in(
    email: str, password: str, db_path: Path | None = None, session_path: Path | None = None
) -> Identity:
    """Verify credentials and start a session.

    Raises:
        AuthenticationError: If the email or password is wrong.
        sqlite3.Error: If database operation fails.
    """
    if session_path is None:
        session_path = get_session_path()

    user = get_user_by_email(normalize_email(email), db_path)
    if user is None or not verify_password(password, user["password_hash"], user["salt"]):
        raise AuthenticationError("Invalid email or password")

    identity = Identity(user_id=user["id"], email=user["email"])
    _write_session(identity, session_path)
    return identity


def sign_out(session_path: Path | None = None) -> bool:
    """End the current session.

    Returns:
        True if a session was open.
    """
    if session_path is None:
        session_path = get_session_path()

    if not session_path.exists():
        return False
    session_path.unlink()
    return True


def current_identity(db_path: Path | None = None, session_path: Path | None = None) -> Identity | None:
    """Get the signed-in identity.

    A session pointing at a user that no longer exists counts as signed out.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if session_path is None:
        session_path = get_session_path()

    try:
        with open(session_path, "rb") as f:
            session = tomllib.load(f)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None

    user_id = session.get("user_id")
    if not isinstance(user_id, int):
        return None

    user = get_user_by_id(user_id, db_path)
    if user is None:
        return None
    return Identity(user_id=user["id"], email=user["email"])
