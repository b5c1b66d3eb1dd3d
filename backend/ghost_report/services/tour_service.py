# Overview: Service-layer operations for tours; scheduling, ghost inclusion and sign-ups.

from __future__ import annotations

from ..db_client import DatabaseClient
from ..models import Tour
from ..time_utils import parse_iso_datetime, serialize_db_datetime, to_db_datetime
from ..validation import (
    NotFoundError,
    ValidationError,
    check_length,
    clean_text,
    coerce_int,
    id_list,
    require_fields,
)
from .ghost_service import GHOST_COLUMNS, ghost_to_dict
from .user_service import require_user


TOUR_COUNTS = """
    SELECT T.id, T.startTime, T.endTime, T.guide, T.path,
           (SELECT COUNT(*) FROM Tour_Includes TI WHERE TI.tourID = T.id) AS ghostCount,
           (SELECT COUNT(*) FROM Tour_Sign_Up TS WHERE TS.tourID = T.id) AS signupCount
"""

VIEWER_SIGNED_UP = """,
           (SELECT COUNT(*) FROM Tour_Sign_Up TV WHERE TV.tourID = T.id AND TV.userID = ?) AS viewerSignedUp
"""

TOUR_DELETE_SEQUENCE = [
    ("Tour_Sign_Up", "DELETE FROM Tour_Sign_Up WHERE tourID = ?"),
    ("Tour_Includes", "DELETE FROM Tour_Includes WHERE tourID = ?"),
    ("Tour", "DELETE FROM Tour WHERE id = ?"),
]


def tour_to_dict(row: dict, with_viewer: bool = False) -> dict:
    tour = {
        "id": row["id"],
        "startTime": serialize_db_datetime(row.get("startTime")),
        "endTime": serialize_db_datetime(row.get("endTime")),
        "guide": row.get("guide") or "",
        "path": row.get("path") or "",
        "ghostCount": int(row.get("ghostCount") or 0),
        "signupCount": int(row.get("signupCount") or 0),
    }
    if with_viewer:
        tour["isSignedUp"] = bool(row.get("viewerSignedUp"))
    return tour


def _tour_query(viewer_id: int | None) -> tuple[str, list]:
    if viewer_id is None:
        return TOUR_COUNTS + " FROM Tour T ", []
    return TOUR_COUNTS + VIEWER_SIGNED_UP + " FROM Tour T ", [viewer_id]


def list_tours(client: DatabaseClient, viewer_id: int | None = None) -> list[dict]:
    """
    Newest start first. isSignedUp is only reported when a viewer is given.
    """
    sql, params = _tour_query(viewer_id)
    rows = client.query(sql + "ORDER BY T.startTime DESC, T.id DESC", params)
    return [tour_to_dict(r, with_viewer=viewer_id is not None) for r in rows]


def get_tour(client: DatabaseClient, tour_id: int, viewer_id: int | None = None) -> dict:
    sql, params = _tour_query(viewer_id)
    row = client.query_one(sql + "WHERE T.id = ?", [*params, tour_id])
    if row is None:
        raise NotFoundError("not_found", entity="tour")
    return tour_to_dict(row, with_viewer=viewer_id is not None)


def _require_tour(client: DatabaseClient, tour_id: int) -> None:
    if client.query_one("SELECT id FROM Tour WHERE id = ?", (tour_id,)) is None:
        raise NotFoundError("not_found", entity="tour")


def _parse_time(value, field: str):
    try:
        parsed = parse_iso_datetime(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError("invalid_field", field=field)
    return parsed


def create_tour(client: DatabaseClient, data: dict) -> dict:
    """
    Schedule a tour covering at least one ghost.

    The tour row and all of its inclusion rows are written together.
    """
    require_fields(data, "guide", "path", "startTime", "endTime", "ghostIDs")
    ghost_ids = id_list(data["ghostIDs"], "ghostIDs")
    if not ghost_ids:
        raise ValidationError("missing_fields", fields=["ghostIDs"])

    guide = clean_text(data["guide"])
    check_length(guide, Tour.__table__.c.guide, "guide")
    path = clean_text(data["path"])

    start = _parse_time(data["startTime"], "startTime")
    end = _parse_time(data["endTime"], "endTime")
    # Compared at the stored (whole second) precision
    start_text, end_text = to_db_datetime(start), to_db_datetime(end)
    if start_text >= end_text:
        raise ValidationError("end_time_before_start_time")

    with client.transaction():
        placeholders = ", ".join("?" for _ in ghost_ids)
        found = client.query(f"SELECT id FROM Ghost WHERE id IN ({placeholders})", ghost_ids)
        missing = sorted(set(ghost_ids) - {r["id"] for r in found})
        if missing:
            raise ValidationError("unknown_ghosts", ghostIDs=missing)

        result = client.run(
            "INSERT INTO Tour (startTime, endTime, guide, path) VALUES (?, ?, ?, ?)",
            (start_text, end_text, guide, path),
        )
        tour_id = result.generated_id
        for ghost_id in ghost_ids:
            client.run("INSERT INTO Tour_Includes (tourID, ghostID) VALUES (?, ?)", (tour_id, ghost_id))

    return get_tour(client, tour_id)


def list_tour_ghosts(client: DatabaseClient, tour_id: int) -> list[dict]:
    _require_tour(client, tour_id)
    rows = client.query(
        f"SELECT {GHOST_COLUMNS} FROM Ghost G "
        "JOIN Tour_Includes TI ON TI.ghostID = G.id "
        "WHERE TI.tourID = ? ORDER BY G.id",
        (tour_id,),
    )
    return [ghost_to_dict(r) for r in rows]


def list_participants(client: DatabaseClient, tour_id: int) -> list[dict]:
    _require_tour(client, tour_id)
    rows = client.query(
        "SELECT U.id, U.username FROM User U "
        "JOIN Tour_Sign_Up TS ON TS.userID = U.id "
        "WHERE TS.tourID = ? ORDER BY U.username, U.id",
        (tour_id,),
    )
    return [{"id": r["id"], "username": r["username"]} for r in rows]


def _member_user_id(data: dict) -> int:
    require_fields(data, "userID")
    return coerce_int(data["userID"], "userID")


def join_tour(client: DatabaseClient, tour_id: int, data: dict) -> dict:
    """Sign up. Joining twice is a no-op success."""
    user_id = _member_user_id(data)
    require_user(client, user_id)
    _require_tour(client, tour_id)
    result = client.run(
        client.insert_ignore("Tour_Sign_Up", ["userID", "tourID"]),
        (user_id, tour_id),
    )
    return {
        "tourID": tour_id,
        "userID": user_id,
        "isSignedUp": True,
        "changed": result.affected_count > 0,
    }


def leave_tour(client: DatabaseClient, tour_id: int, data: dict) -> dict:
    """Withdraw. Leaving a tour one never joined removes nothing and succeeds."""
    user_id = _member_user_id(data)
    _require_tour(client, tour_id)
    result = client.run(
        "DELETE FROM Tour_Sign_Up WHERE userID = ? AND tourID = ?",
        (user_id, tour_id),
    )
    return {
        "tourID": tour_id,
        "userID": user_id,
        "isSignedUp": False,
        "changed": result.affected_count > 0,
    }


def delete_tour(client: DatabaseClient, tour_id: int) -> dict:
    removed: dict[str, int] = {}
    with client.transaction():
        _require_tour(client, tour_id)
        for table, sql in TOUR_DELETE_SEQUENCE:
            removed[table] = client.run(sql, (tour_id,)).affected_count
    return removed
