# Overview: Service-layer operations for sighting and ghost comments.

"""
Comments on sightings and on ghosts.

Both kinds behave identically and differ only in the table and target key.
A user holds at most one comment per target: posting again rewrites the text
and timestamp of the existing row.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..db_client import DatabaseClient
from ..models import GhostComment, SightingComment
from ..time_utils import serialize_db_datetime, to_db_datetime, utcnow
from ..validation import NotFoundError, check_length, coerce_int, require_fields
from .user_service import require_user


@dataclass(frozen=True)
class CommentTarget:
    """Where a family of comments lives. Names are fixed identifiers, never user input."""
    table: str
    key: str
    parent_table: str
    entity: str
    model: type


SIGHTING_COMMENTS = CommentTarget("Sighting_Comment", "sightingID", "Sighting", "sighting", SightingComment)
GHOST_COMMENTS = CommentTarget("Ghost_Comment", "ghostID", "Ghost", "ghost", GhostComment)


def _require_target(client: DatabaseClient, target: CommentTarget, target_id: int) -> None:
    row = client.query_one(f"SELECT id FROM {target.parent_table} WHERE id = ?", (target_id,))
    if row is None:
        raise NotFoundError("not_found", entity=target.entity)


def comment_to_dict(row: dict, target: CommentTarget) -> dict:
    user_id = row["userID"]
    return {
        "userID": user_id,
        target.key: row[target.key],
        "reportTime": serialize_db_datetime(row.get("reportTime")),
        "description": row.get("description") or "",
        "username": row.get("username") or f"User {user_id}",
    }


def _select(target: CommentTarget) -> str:
    return (
        f"SELECT C.userID, C.{target.key}, C.reportTime, C.description, U.username "
        f"FROM {target.table} C LEFT JOIN User U ON U.id = C.userID "
    )


def list_comments(client: DatabaseClient, target: CommentTarget, target_id: int) -> list[dict]:
    """Oldest first."""
    _require_target(client, target, target_id)
    rows = client.query(
        _select(target) + f"WHERE C.{target.key} = ? ORDER BY C.reportTime ASC, C.userID ASC",
        (target_id,),
    )
    return [comment_to_dict(r, target) for r in rows]


def get_comment(client: DatabaseClient, target: CommentTarget, user_id: int, target_id: int) -> dict | None:
    row = client.query_one(
        _select(target) + f"WHERE C.userID = ? AND C.{target.key} = ?",
        (user_id, target_id),
    )
    return comment_to_dict(row, target) if row else None


def upsert_comment(
    client: DatabaseClient,
    target: CommentTarget,
    target_id: int,
    data: dict,
) -> tuple[dict, bool]:
    """
    Post a comment, or rewrite this user's existing one on the same target.

    Returns (comment, created).
    """
    require_fields(data, "userID", "description")
    user_id = coerce_int(data["userID"], "userID")
    description = str(data["description"]).strip()
    check_length(description, target.model.__table__.c.description, "description")
    now = to_db_datetime(utcnow())

    with client.transaction():
        require_user(client, user_id)
        _require_target(client, target, target_id)

        existing = client.query_one(
            f"SELECT userID FROM {target.table} WHERE userID = ? AND {target.key} = ?",
            (user_id, target_id),
        )
        if existing:
            client.run(
                f"UPDATE {target.table} SET reportTime = ?, description = ? "
                f"WHERE userID = ? AND {target.key} = ?",
                (now, description, user_id, target_id),
            )
            created = False
        else:
            client.run(
                f"INSERT INTO {target.table} (userID, {target.key}, reportTime, description) "
                f"VALUES (?, ?, ?, ?)",
                (user_id, target_id, now, description),
            )
            created = True

    return get_comment(client, target, user_id, target_id), created
