# Overview: Service-layer operations for sightings; listing, reporting, ghost renaming and deletion.

"""
Sightings.

Listing joins each sighting to its reporter (for a display name) and to one
linked ghost. When a sighting links to several ghosts, the one with the
lowest id is shown; there is no notion of a primary link.

A reported "time of sighting" is free text. It is stored as an annotation
line at the top of the description rather than in a column of its own.
"""

from __future__ import annotations

from ..db_client import DatabaseClient
from ..models import Ghost
from ..time_utils import serialize_db_datetime, to_db_datetime, utcnow
from ..validation import (
    NotFoundError,
    ValidationError,
    check_length,
    clean_text,
    coerce_int,
    optional_float,
    optional_int,
    require_fields,
    sighting_visibility,
    visibility_label,
)
from . import ghost_service
from .user_service import require_user


UNKNOWN_USERNAME = "Unknown"
REPORTED_TIME_PREFIX = "Reported time: "

SIGHTING_COLUMNS = (
    "S.id, S.visibility, S.time, S.userReportID, S.latitude, S.longitude, "
    "S.description, U.username"
)

SIGHTING_SELECT = f"""
    SELECT {SIGHTING_COLUMNS}, G.id AS ghostID, G.name AS ghostName
    FROM Sighting S
    LEFT JOIN User U ON U.id = S.userReportID
    LEFT JOIN Ghost G ON G.id = (
        SELECT MIN(SRG.ghostID) FROM Sighting_Reports_Ghost SRG WHERE SRG.sightingID = S.id
    )
"""

SIGHTING_DELETE_SEQUENCE = [
    ("Sighting_Comment", "DELETE FROM Sighting_Comment WHERE sightingID = ?"),
    ("Sighting_Reports_Ghost", "DELETE FROM Sighting_Reports_Ghost WHERE sightingID = ?"),
    ("Sighting", "DELETE FROM Sighting WHERE id = ?"),
]


def _coordinate(value) -> float | None:
    # MySQL returns Decimal for NUMERIC columns
    return float(value) if value is not None else None


def sighting_to_dict(row: dict) -> dict:
    visibility = int(row["visibility"]) if row.get("visibility") is not None else None
    return {
        "id": row["id"],
        "visibility": visibility,
        "visibilityLevel": visibility_label(visibility),
        "time": serialize_db_datetime(row.get("time")),
        "userReportID": row.get("userReportID"),
        "username": row.get("username") or UNKNOWN_USERNAME,
        "latitude": _coordinate(row.get("latitude")),
        "longitude": _coordinate(row.get("longitude")),
        "description": row.get("description") or "",
        "ghostID": row.get("ghostID"),
        "ghostName": row.get("ghostName") or ghost_service.UNKNOWN_GHOST_NAME,
    }


def annotate_description(description: str, time_of_sighting: str | None) -> str:
    if not time_of_sighting:
        return description
    return f"{REPORTED_TIME_PREFIX}{time_of_sighting}\n{description}"


def list_sightings(client: DatabaseClient) -> list[dict]:
    rows = client.query(f"{SIGHTING_SELECT} ORDER BY S.time DESC, S.id DESC")
    return [sighting_to_dict(r) for r in rows]


def get_sighting(client: DatabaseClient, sighting_id: int) -> dict:
    row = client.query_one(f"{SIGHTING_SELECT} WHERE S.id = ?", (sighting_id,))
    if row is None:
        raise NotFoundError("not_found", entity="sighting")
    return sighting_to_dict(row)


def _check_coordinates(latitude: float | None, longitude: float | None) -> None:
    if latitude is not None and not -90 <= latitude <= 90:
        raise ValidationError("invalid_field", field="latitude")
    if longitude is not None and not -180 <= longitude <= 180:
        raise ValidationError("invalid_field", field="longitude")


def create_sighting(client: DatabaseClient, data: dict) -> dict:
    """
    Report a sighting and link it to a ghost.

    Without a ghost id the sighting is linked to the shared "Unknown" ghost,
    created on first use. The insert, the sentinel lookup and the link all
    commit together.
    """
    require_fields(data, "userReportID", "description")
    reporter_id = coerce_int(data["userReportID"], "userReportID")
    ghost_id = optional_int(data.get("ghostID"), "ghostID")
    latitude = optional_float(data.get("latitude"), "latitude")
    longitude = optional_float(data.get("longitude"), "longitude")
    _check_coordinates(latitude, longitude)
    visibility = sighting_visibility(data.get("visibility"))
    description = annotate_description(
        str(data["description"]),
        clean_text(data.get("timeOfSighting")),
    )

    with client.transaction():
        require_user(client, reporter_id)
        if ghost_id is None:
            ghost_id = ghost_service.find_or_create_unknown(client)
        else:
            ghost_service.require_ghost(client, ghost_id)

        result = client.run(
            "INSERT INTO Sighting (visibility, time, userReportID, latitude, longitude, description) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (visibility, to_db_datetime(utcnow()), reporter_id, latitude, longitude, description),
        )
        sighting_id = result.generated_id
        client.run(
            "INSERT INTO Sighting_Reports_Ghost (sightingID, ghostID) VALUES (?, ?)",
            (sighting_id, ghost_id),
        )

    return get_sighting(client, sighting_id)


def rename_sighting_ghost(client: DatabaseClient, sighting_id: int, new_name: str | None) -> dict:
    """
    Give the sighting's ghost a name.

    A real ghost is renamed in place. The shared "Unknown" ghost is never
    renamed: the sighting is moved onto a new ghost carrying the name.
    """
    require_fields({"newName": new_name}, "newName")
    name = clean_text(new_name)
    check_length(name, Ghost.__table__.c.name, "newName")
    ghost_service.check_name_available(name, "newName")

    with client.transaction():
        sighting = get_sighting(client, sighting_id)
        current_id = sighting["ghostID"]
        current = ghost_service.require_ghost(client, current_id) if current_id is not None else None

        if current is not None and not ghost_service.is_unknown(current):
            client.run("UPDATE Ghost SET name = ? WHERE id = ?", (name, current_id))
        else:
            created = client.run(
                "INSERT INTO Ghost (type, name, description, visibility) VALUES (?, ?, ?, ?)",
                (None, name, "", sighting["visibility"]),
            )
            if current_id is not None:
                client.run(
                    "DELETE FROM Sighting_Reports_Ghost WHERE sightingID = ? AND ghostID = ?",
                    (sighting_id, current_id),
                )
            client.run(
                "INSERT INTO Sighting_Reports_Ghost (sightingID, ghostID) VALUES (?, ?)",
                (sighting_id, created.generated_id),
            )

    return get_sighting(client, sighting_id)


def delete_sighting(client: DatabaseClient, sighting_id: int) -> dict:
    removed: dict[str, int] = {}
    with client.transaction():
        get_sighting(client, sighting_id)
        for table, sql in SIGHTING_DELETE_SEQUENCE:
            removed[table] = client.run(sql, (sighting_id,)).affected_count
    return removed
