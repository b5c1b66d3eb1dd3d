# Overview: Service-layer operations for user accounts; registration, login, profile and cascading delete.

"""
User accounts.

Passwords are hashed with bcrypt. The cost factor comes from configuration so
tests can run with a cheap one. Lookups and writes go through the
DatabaseClient handed in by the caller.
"""

from __future__ import annotations

import bcrypt
from sqlalchemy.exc import IntegrityError

from ..db_client import DatabaseClient
from ..models import User
from ..validation import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    check_length,
    require_fields,
)


DEFAULT_BCRYPT_ROUNDS = 12

# Children before parents so foreign keys hold at every step
USER_DELETE_SEQUENCE = [
    ("Ghost_Buster_Fights_Ghost", "DELETE FROM Ghost_Buster_Fights_Ghost WHERE userID = ?"),
    ("Ghost_Buster", "DELETE FROM Ghost_Buster WHERE userID = ?"),
    ("Sighting_Comment", "DELETE FROM Sighting_Comment WHERE userID = ?"),
    ("Ghost_Comment", "DELETE FROM Ghost_Comment WHERE userID = ?"),
    ("Tour_Sign_Up", "DELETE FROM Tour_Sign_Up WHERE userID = ?"),
    (
        "Sighting_Reports_Ghost",
        "DELETE FROM Sighting_Reports_Ghost WHERE sightingID IN (SELECT id FROM Sighting WHERE userReportID = ?)",
    ),
    (
        "Sighting_Comment",
        "DELETE FROM Sighting_Comment WHERE sightingID IN (SELECT id FROM Sighting WHERE userReportID = ?)",
    ),
    ("Sighting", "DELETE FROM Sighting WHERE userReportID = ?"),
    ("User", "DELETE FROM User WHERE id = ?"),
]


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")  # Store as string in database


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Verify password against bcrypt hash.

    Anything that is not a bcrypt hash (e.g. legacy placeholder values)
    never matches.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def user_to_dict(row: dict) -> dict:
    return {
        "id": row["id"],
        "username": row["username"],
        "email": row["email"],
    }


def require_user(client: DatabaseClient, user_id: int) -> dict:
    row = client.query_one("SELECT id, username, email FROM User WHERE id = ?", (user_id,))
    if row is None:
        raise NotFoundError("not_found", entity="user")
    return row


def get_user(client: DatabaseClient, user_id: int) -> dict:
    return user_to_dict(require_user(client, user_id))


def list_users(client: DatabaseClient) -> list[dict]:
    rows = client.query("SELECT id, username, email FROM User ORDER BY id")
    return [user_to_dict(r) for r in rows]


def _check_user_fields(username: str, email: str) -> None:
    check_length(username, User.__table__.c.username, "username")
    check_length(email, User.__table__.c.email, "email")
    if "@" not in email:
        raise ValidationError("invalid_field", field="email")


def register_user(
    client: DatabaseClient,
    username: str | None,
    email: str | None,
    password: str | None,
    *,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> dict:
    """
    Create an account. Username and email must both be unused.

    Raises ValidationError for missing fields and ConflictError when either
    value is taken (including when a concurrent insert wins the race).
    """
    require_fields(
        {"username": username, "email": email, "password": password},
        "username", "email", "password",
    )
    username = str(username).strip()
    email = str(email).strip()
    _check_user_fields(username, email)

    existing = client.query_one(
        "SELECT id FROM User WHERE username = ? OR email = ?",
        (username, email),
    )
    if existing:
        raise ConflictError("username_or_email_taken")

    hashed = hash_password(str(password), rounds=rounds)
    try:
        result = client.run(
            "INSERT INTO User (username, password, email) VALUES (?, ?, ?)",
            (username, hashed, email),
        )
    except IntegrityError:
        raise ConflictError("username_or_email_taken")

    return {"id": result.generated_id, "username": username, "email": email}


def authenticate(client: DatabaseClient, username: str | None, password: str | None) -> dict:
    """
    Check credentials and return the public profile.

    The identifier may be a username or an email address.
    """
    require_fields({"username": username, "password": password}, "username", "password")
    identifier = str(username).strip()
    row = client.query_one(
        "SELECT id, username, password, email FROM User WHERE username = ? OR email = ? ORDER BY id LIMIT 1",
        (identifier, identifier),
    )
    if row is None or not verify_password(str(password), row["password"]):
        raise AuthenticationError("invalid_credentials")
    return user_to_dict(row)


def update_user(
    client: DatabaseClient,
    user_id: int,
    data: dict,
    *,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> dict:
    """Partial update of username, email and/or password."""
    current = require_user(client, user_id)

    username = str(data.get("username") or current["username"]).strip()
    email = str(data.get("email") or current["email"]).strip()
    _check_user_fields(username, email)

    clash = client.query_one(
        "SELECT id FROM User WHERE (username = ? OR email = ?) AND id <> ?",
        (username, email, user_id),
    )
    if clash:
        raise ConflictError("username_or_email_taken")

    try:
        if data.get("password"):
            client.run(
                "UPDATE User SET username = ?, password = ?, email = ? WHERE id = ?",
                (username, hash_password(str(data["password"]), rounds=rounds), email, user_id),
            )
        else:
            client.run(
                "UPDATE User SET username = ?, email = ? WHERE id = ?",
                (username, email, user_id),
            )
    except IntegrityError:
        raise ConflictError("username_or_email_taken")

    return get_user(client, user_id)


def delete_user(client: DatabaseClient, user_id: int) -> dict:
    """
    Remove a user and everything that hangs off them, in one transaction.

    Returns the number of rows removed per table.
    """
    removed: dict[str, int] = {}
    with client.transaction():
        require_user(client, user_id)
        for table, sql in USER_DELETE_SEQUENCE:
            result = client.run(sql, (user_id,))
            removed[table] = removed.get(table, 0) + result.affected_count
    return removed
