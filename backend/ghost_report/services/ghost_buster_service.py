# Overview: Service-layer operations for the ghost buster role and ghost fights.

from __future__ import annotations

from ..db_client import DatabaseClient
from ..models import GhostBuster
from ..validation import ValidationError, check_length
from .ghost_service import require_ghost
from .user_service import require_user


def _buster_row(client: DatabaseClient, user_id: int) -> dict | None:
    return client.query_one(
        "SELECT userID, ghosts_busted, alias FROM Ghost_Buster WHERE userID = ?",
        (user_id,),
    )


def get_status(client: DatabaseClient, user_id: int) -> dict:
    require_user(client, user_id)
    row = _buster_row(client, user_id)
    return {
        "userID": user_id,
        "isGhostBuster": row is not None,
        "ghostsBusted": int(row["ghosts_busted"] or 0) if row else 0,
        "alias": row["alias"] if row else None,
    }


def set_ghost_buster(client: DatabaseClient, user_id: int, enabled: bool, alias: str | None = None) -> dict:
    """
    Toggle the role. Turning it on creates a zero-count row (or keeps the
    existing one); turning it off removes the row and any fights in progress.
    """
    if alias is not None:
        alias = alias.strip() or None
    if alias:
        check_length(alias, GhostBuster.__table__.c.alias, "alias")

    with client.transaction():
        require_user(client, user_id)
        if enabled:
            client.run(
                client.insert_ignore("Ghost_Buster", ["userID", "ghosts_busted", "alias"]),
                (user_id, 0, alias),
            )
            if alias is not None:
                client.run("UPDATE Ghost_Buster SET alias = ? WHERE userID = ?", (alias, user_id))
        else:
            client.run("DELETE FROM Ghost_Buster_Fights_Ghost WHERE userID = ?", (user_id,))
            client.run("DELETE FROM Ghost_Buster WHERE userID = ?", (user_id,))

    return get_status(client, user_id)


def _is_fighting(client: DatabaseClient, user_id: int, ghost_id: int) -> bool:
    row = client.query_one(
        "SELECT userID FROM Ghost_Buster_Fights_Ghost WHERE userID = ? AND ghostID = ?",
        (user_id, ghost_id),
    )
    return row is not None


def get_fight(client: DatabaseClient, user_id: int, ghost_id: int) -> dict:
    require_user(client, user_id)
    require_ghost(client, ghost_id)
    return {"userID": user_id, "ghostID": ghost_id, "fighting": _is_fighting(client, user_id, ghost_id)}


def set_fight(client: DatabaseClient, user_id: int, ghost_id: int, fighting: bool) -> dict:
    """Start or stop fighting a ghost. Only ghost busters can start a fight."""
    with client.transaction():
        require_user(client, user_id)
        require_ghost(client, ghost_id)
        if fighting:
            if _buster_row(client, user_id) is None:
                raise ValidationError("not_a_ghost_buster")
            client.run(
                client.insert_ignore("Ghost_Buster_Fights_Ghost", ["userID", "ghostID"]),
                (user_id, ghost_id),
            )
        else:
            client.run(
                "DELETE FROM Ghost_Buster_Fights_Ghost WHERE userID = ? AND ghostID = ?",
                (user_id, ghost_id),
            )
    return get_fight(client, user_id, ghost_id)


def bust_ghost(client: DatabaseClient, user_id: int, ghost_id: int) -> dict:
    """
    Record a won fight: the fight row goes away and the buster's counter
    goes up, together or not at all.
    """
    with client.transaction():
        require_user(client, user_id)
        require_ghost(client, ghost_id)
        if _buster_row(client, user_id) is None:
            raise ValidationError("not_a_ghost_buster")

        removed = client.run(
            "DELETE FROM Ghost_Buster_Fights_Ghost WHERE userID = ? AND ghostID = ?",
            (user_id, ghost_id),
        )
        if not removed.affected_count:
            raise ValidationError("not_fighting")

        client.run(
            "UPDATE Ghost_Buster SET ghosts_busted = ghosts_busted + 1 WHERE userID = ?",
            (user_id,),
        )

    status = get_status(client, user_id)
    status["ghostID"] = ghost_id
    status["fighting"] = False
    return status
