# Overview: Service-layer operations for ghosts; catalogue CRUD, linked sightings and cascading delete.

from __future__ import annotations

from ..db_client import DatabaseClient
from ..models import Ghost
from ..validation import (
    NotFoundError,
    ValidationError,
    check_length,
    check_visibility,
    clean_text,
    coerce_int,
    require_fields,
    visibility_label,
)


UNKNOWN_GHOST_NAME = "Unknown"
UNKNOWN_GHOST_DESCRIPTION = "Placeholder for sightings reported without an identified ghost."

GHOST_COLUMNS = "G.id, G.type, G.name, G.description, G.visibility"

GHOST_DELETE_SEQUENCE = [
    ("Sighting_Reports_Ghost", "DELETE FROM Sighting_Reports_Ghost WHERE ghostID = ?"),
    ("Ghost_Comment", "DELETE FROM Ghost_Comment WHERE ghostID = ?"),
    ("Tour_Includes", "DELETE FROM Tour_Includes WHERE ghostID = ?"),
    ("Ghost_Buster_Fights_Ghost", "DELETE FROM Ghost_Buster_Fights_Ghost WHERE ghostID = ?"),
    ("Ghost", "DELETE FROM Ghost WHERE id = ?"),
]


def ghost_to_dict(row: dict) -> dict:
    visibility = row.get("visibility")
    visibility = int(visibility) if visibility is not None else None
    return {
        "id": row["id"],
        "type": row.get("type"),
        "name": row["name"],
        "description": row.get("description") or "",
        "visibility": visibility,
        "visibilityLevel": visibility_label(visibility),
    }


def require_ghost(client: DatabaseClient, ghost_id: int) -> dict:
    row = client.query_one(f"SELECT {GHOST_COLUMNS} FROM Ghost G WHERE G.id = ?", (ghost_id,))
    if row is None:
        raise NotFoundError("not_found", entity="ghost")
    return row


def get_ghost(client: DatabaseClient, ghost_id: int) -> dict:
    return ghost_to_dict(require_ghost(client, ghost_id))


def list_ghosts(client: DatabaseClient) -> list[dict]:
    rows = client.query(f"SELECT {GHOST_COLUMNS} FROM Ghost G ORDER BY G.id")
    return [ghost_to_dict(r) for r in rows]


def find_or_create_unknown(client: DatabaseClient) -> int:
    """
    Id of the shared "Unknown" ghost, creating it on first use.

    The sentinel is the row whose type and name are both "Unknown"; catalogue
    writes cannot produce that name, so no user ghost is ever picked up.
    """
    row = client.query_one(
        "SELECT id FROM Ghost WHERE name = ? AND type = ? ORDER BY id LIMIT 1",
        (UNKNOWN_GHOST_NAME, UNKNOWN_GHOST_NAME),
    )
    if row is not None:
        return row["id"]
    result = client.run(
        "INSERT INTO Ghost (type, name, description, visibility) VALUES (?, ?, ?, ?)",
        (UNKNOWN_GHOST_NAME, UNKNOWN_GHOST_NAME, UNKNOWN_GHOST_DESCRIPTION, None),
    )
    return result.generated_id


def is_unknown(row: dict | None) -> bool:
    return (
        row is not None
        and row.get("name") == UNKNOWN_GHOST_NAME
        and row.get("type") == UNKNOWN_GHOST_NAME
    )


def check_name_available(name: str, field: str = "name") -> None:
    """The name "Unknown" is reserved for the sentinel ghost."""
    if name.casefold() == UNKNOWN_GHOST_NAME.casefold():
        raise ValidationError("reserved_name", field=field)


def _ghost_fields(data: dict, current: dict | None = None) -> tuple:
    current = current or {}
    table = Ghost.__table__.c

    name = clean_text(data["name"]) if "name" in data else current.get("name")
    if not name:
        raise ValidationError("missing_fields", fields=["name"])
    check_length(name, table.name, "name")
    if "name" in data:
        check_name_available(name)

    ghost_type = clean_text(data["type"]) if "type" in data else current.get("type")
    if ghost_type:
        check_length(ghost_type, table.type, "type")

    description = clean_text(data["description"]) if "description" in data else current.get("description")
    if description:
        check_length(description, table.description, "description")

    visibility = current.get("visibility")
    if data.get("visibility") is not None:
        visibility = check_visibility(coerce_int(data["visibility"], "visibility"))

    return ghost_type or None, name, description or "", visibility


def create_ghost(client: DatabaseClient, data: dict) -> dict:
    require_fields(data, "name")
    fields = _ghost_fields(data)
    result = client.run(
        "INSERT INTO Ghost (type, name, description, visibility) VALUES (?, ?, ?, ?)",
        fields,
    )
    return get_ghost(client, result.generated_id)


def update_ghost(client: DatabaseClient, ghost_id: int, data: dict) -> dict:
    with client.transaction():
        current = require_ghost(client, ghost_id)
        fields = _ghost_fields(data, current)
        client.run(
            "UPDATE Ghost SET type = ?, name = ?, description = ?, visibility = ? WHERE id = ?",
            (*fields, ghost_id),
        )
    return get_ghost(client, ghost_id)


def delete_ghost(client: DatabaseClient, ghost_id: int) -> dict:
    """Remove a ghost with its comments, sighting links, tour slots and fights."""
    removed: dict[str, int] = {}
    with client.transaction():
        require_ghost(client, ghost_id)
        for table, sql in GHOST_DELETE_SEQUENCE:
            removed[table] = client.run(sql, (ghost_id,)).affected_count
    return removed


def list_ghost_sightings(client: DatabaseClient, ghost_id: int) -> list[dict]:
    """Sightings linked to this ghost, newest first, named after this ghost."""
    from .sighting_service import SIGHTING_COLUMNS, sighting_to_dict

    require_ghost(client, ghost_id)
    rows = client.query(
        f"""
        SELECT {SIGHTING_COLUMNS}, G.id AS ghostID, G.name AS ghostName
        FROM Sighting S
        JOIN Sighting_Reports_Ghost SRG ON SRG.sightingID = S.id
        JOIN Ghost G ON G.id = SRG.ghostID
        LEFT JOIN User U ON U.id = S.userReportID
        WHERE SRG.ghostID = ?
        ORDER BY S.time DESC, S.id DESC
        """,
        (ghost_id,),
    )
    return [sighting_to_dict(r) for r in rows]
