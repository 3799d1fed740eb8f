"""Identity provider — username/password accounts stored in the users table.

Usernames are reduced to a lower-cased local part ("Ana@x" -> "ana") and
mapped to a synthetic email identifier.  Accounts are created by the demo
seed or an administrator; there is no self-registration route.
"""

import logging
import sqlite3
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from kitchen_ledger.db.database import get_connection

logger = logging.getLogger(__name__)

EMAIL_DOMAIN = "kitchenledger.local"


class AuthenticationError(Exception):
    """Sign-in failed for an unexpected reason."""

    def __init__(self, message: str = "An unexpected error occurred while signing in."):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Unknown user or wrong password."""

    def __init__(self):
        super().__init__("Incorrect username or password.")


def normalize_username(username: str) -> str:
    return (username or "").split("@")[0].strip().lower()


def synthetic_email(username: str) -> str:
    return f"{normalize_username(username)}@{EMAIL_DOMAIN}"


def create_user(username: str, password: str) -> int:
    """Create an account and return its user id.  Raises ValueError on bad input or duplicates."""
    name = normalize_username(username)
    if not name:
        raise ValueError("Username is required.")
    if not password:
        raise ValueError("Password is required.")
    conn = get_connection()
    try:
        cursor = conn.execute(
            "INSERT INTO users (username, email, password_hash) VALUES (?, ?, ?)",
            (name, synthetic_email(name), generate_password_hash(password)),
        )
        conn.commit()
        logger.info("Created user %s", name)
        return cursor.lastrowid
    except sqlite3.IntegrityError:
        raise ValueError(f"User '{name}' already exists.")
    finally:
        conn.close()


def get_user_id(username: str) -> Optional[int]:
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id FROM users WHERE username = ?", (normalize_username(username),)
        ).fetchone()
        return row["id"] if row else None
    finally:
        conn.close()


def get_email(user_id: int) -> Optional[str]:
    conn = get_connection()
    try:
        row = conn.execute("SELECT email FROM users WHERE id = ?", (user_id,)).fetchone()
        return row["email"] if row else None
    finally:
        conn.close()


def authenticate(username: str, password: str) -> int:
    """Return the user id for valid credentials.

    Raises InvalidCredentialsError for an unknown user or wrong password and
    AuthenticationError for anything else.
    """
    name = normalize_username(username)
    try:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, password_hash FROM users WHERE username = ?", (name,)
            ).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.exception("User lookup failed for %s", name)
        raise AuthenticationError() from e

    if row is None or not password or not check_password_hash(row["password_hash"], password):
        logger.warning("Rejected sign-in for %s", name or "<empty>")
        raise InvalidCredentialsError()
    return row["id"]
