# Overview: Idempotent schema creation and one-time demonstration seeding.

"""
Startup bootstrap.

Runs on every process start:

1. Every table is created if absent. A failure creating a table that already
   exists is ignored.
2. Only when the User table is empty, a fixed list of seed inserts runs in
   dependency order. Each statement stands alone: a failure is logged and
   that statement skipped, never fatal to startup.

Seed rows carry explicit ids so the link rows stay consistent even if an
earlier statement is skipped.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .db_client import DatabaseClient
from .extensions import db
from .services.user_service import hash_password


SEED_USERS = [
    (1, "spooky_sam", "sam@ghosthunters.com"),
    (2, "paranormal_pat", "pat@spiritwatch.com"),
    (3, "ecto_emily", "emily@ghostbusters.net"),
    (4, "phantom_phil", "phil@hauntedplaces.org"),
    (5, "mystic_maya", "maya@supernatural.com"),
]

SEED_GHOST_BUSTERS = [
    (1, 47, "The Specter Detector"),
    (3, 23, "Ectoplasm Expert"),
    (4, 89, "Phantom Finder"),
]

SEED_GHOSTS = [
    (1, "Poltergeist", "The Knocker", "A mischievous spirit known for rapping on walls and moving objects in abandoned warehouses", 3),
    (2, "Apparition", "Lady Grey", "A Victorian-era woman in a grey dress, often seen wandering old manors at midnight", 4),
    (3, "Shadow Person", "The Dark Watcher", "A tall shadowy figure that appears in peripheral vision, particularly in dimly lit corridors", 2),
    (4, "Phantom", "Weeping William", "The ghost of a sailor who can be heard crying near old docks and harbors", 3),
    (5, "Specter", "The Headless Coachman", "A headless figure driving a phantom carriage through foggy streets", 5),
]

SEED_SIGHTINGS = [
    (1, 8, "2024-10-31 23:45:00", 1, 40.7128, -74.0060, "Knocking from inside the old warehouse, then a shadow crossed the loading dock."),
    (2, 5, "2024-11-01 02:30:00", 2, 51.5074, -0.1278, "A woman in grey drifted along the upstairs gallery and vanished at the stairs."),
    (3, 9, "2024-11-02 00:15:00", 3, 34.0522, -118.2437, "Tall dark figure at the end of the corridor, clearly visible for several seconds."),
    (4, 3, "2024-11-03 03:20:00", 4, 41.8781, -87.6298, "Faint crying near the harbor wall, nothing visible through the fog."),
    (5, 7, "2024-11-04 01:00:00", 5, 29.7604, -95.3698, "Hoofbeats and a carriage outline passing under the street lamps."),
]

SEED_TOURS = [
    (1, "2024-11-15 19:00:00", "2024-11-15 22:00:00", "Ghostly Gerald", "Old Town Square -> Haunted Manor -> Cemetery Gates -> Abandoned Hospital"),
    (2, "2024-11-16 20:00:00", "2024-11-16 23:00:00", "Spooky Susan", "Waterfront Docks -> Colonial Church -> Historic Theater -> Witch Trial Site"),
    (3, "2024-11-17 18:30:00", "2024-11-17 21:30:00", "Creepy Carl", "Victorian District -> Old Prison -> Haunted Bridge -> Ghost Alley"),
    (4, "2024-11-22 19:30:00", "2024-11-22 22:30:00", "Paranormal Pam", "Ancient Graveyard -> Cursed Mansion -> Phantom Forest Trail"),
]

SEED_SIGHTING_COMMENTS = [
    (2, 1, "2024-11-01 10:00:00", "I saw the same thing in that area last week! Definitely legitimate."),
    (3, 1, "2024-11-01 12:30:00", "The temperature dropped significantly when I visited this location."),
    (1, 2, "2024-11-01 15:00:00", "Classic apparition behavior. Well documented sighting."),
    (4, 3, "2024-11-02 09:00:00", "I captured some EVP recordings near this location around the same time!"),
    (5, 4, "2024-11-03 11:00:00", "This matches historical records of hauntings in this building."),
]

SEED_GHOST_COMMENTS = [
    (1, 1, "2024-10-25 14:00:00", "Encountered this entity three times. Very active poltergeist, handles with care."),
    (2, 2, "2024-10-26 16:30:00", "Lady Grey is a peaceful spirit. She seems to be searching for something."),
    (3, 3, "2024-10-27 11:00:00", "The Dark Watcher appears most frequently between 2-4 AM. Non-threatening but unsettling."),
    (4, 4, "2024-10-28 13:45:00", "Heard the weeping near the old harbor. Very melancholic presence."),
    (5, 5, "2024-10-29 10:00:00", "Historical records confirm sightings of this phantom carriage dating back to 1823."),
]

SEED_SIGHTING_GHOSTS = [(1, 1), (1, 3), (2, 2), (3, 3), (4, 4), (5, 5)]
SEED_TOUR_GHOSTS = [(1, 1), (1, 2), (1, 3), (2, 4), (2, 2), (3, 3), (3, 5), (4, 1), (4, 2)]
SEED_TOUR_SIGN_UPS = [(1, 1), (2, 1), (2, 2), (3, 3), (4, 2), (4, 4), (5, 1), (5, 3), (5, 4)]
# Seeded directly; the ghosts_busted counts above already include history
SEED_FIGHTS = [(1, 1), (1, 3), (1, 5), (3, 2), (3, 4), (4, 1), (4, 2), (4, 3), (4, 5)]


def seed_statements(password_hash: str) -> list[tuple[str, tuple]]:
    """The ordered seed inserts, parents before children."""
    statements: list[tuple[str, tuple]] = []

    def add(sql: str, rows):
        statements.extend((sql, tuple(row)) for row in rows)

    add(
        "INSERT INTO User (id, username, password, email) VALUES (?, ?, ?, ?)",
        [(uid, name, password_hash, email) for uid, name, email in SEED_USERS],
    )
    add("INSERT INTO Ghost_Buster (userID, ghosts_busted, alias) VALUES (?, ?, ?)", SEED_GHOST_BUSTERS)
    add("INSERT INTO Ghost (id, type, name, description, visibility) VALUES (?, ?, ?, ?, ?)", SEED_GHOSTS)
    add(
        "INSERT INTO Sighting (id, visibility, time, userReportID, latitude, longitude, description) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        SEED_SIGHTINGS,
    )
    add("INSERT INTO Tour (id, startTime, endTime, guide, path) VALUES (?, ?, ?, ?, ?)", SEED_TOURS)
    add(
        "INSERT INTO Sighting_Comment (userID, sightingID, reportTime, description) VALUES (?, ?, ?, ?)",
        SEED_SIGHTING_COMMENTS,
    )
    add(
        "INSERT INTO Ghost_Comment (userID, ghostID, reportTime, description) VALUES (?, ?, ?, ?)",
        SEED_GHOST_COMMENTS,
    )
    add("INSERT INTO Sighting_Reports_Ghost (sightingID, ghostID) VALUES (?, ?)", SEED_SIGHTING_GHOSTS)
    add("INSERT INTO Tour_Includes (tourID, ghostID) VALUES (?, ?)", SEED_TOUR_GHOSTS)
    add("INSERT INTO Tour_Sign_Up (userID, tourID) VALUES (?, ?)", SEED_TOUR_SIGN_UPS)
    add("INSERT INTO Ghost_Buster_Fights_Ghost (userID, ghostID) VALUES (?, ?)", SEED_FIGHTS)
    return statements


def ensure_schema(client: DatabaseClient) -> None:
    """Create every missing table, in dependency order."""
    for table in db.metadata.sorted_tables:
        try:
            table.create(bind=client.engine, checkfirst=True)
        except SQLAlchemyError:
            # Another process may have created it between the check and the create
            current_app.logger.debug("Table %s not created; assuming it exists", table.name)


def seed_if_empty(client: DatabaseClient, *, password: str, rounds: int) -> bool:
    """
    Seed demonstration data when, and only when, no users exist.

    Returns True when seeding ran.
    """
    user_count = client.scalar("SELECT COUNT(*) AS cnt FROM User") or 0
    if user_count:
        current_app.logger.info("Schema ensured; existing data preserved (seed skipped).")
        return False

    password_hash = hash_password(password, rounds=rounds)
    skipped = 0
    for sql, params in seed_statements(password_hash):
        try:
            client.run(sql, params)
        except SQLAlchemyError as exc:
            skipped += 1
            current_app.logger.warning("Seed statement failed: %s", getattr(exc, "orig", exc))

    if skipped:
        current_app.logger.info("Database initialized with seed data (%d statements skipped).", skipped)
    else:
        current_app.logger.info("Database initialized with seed data.")
    return True


def bootstrap(client: DatabaseClient, *, seed: bool = True) -> bool:
    """
    Ensure the schema and optionally seed. Must run inside an app context.

    Returns True when seed data was written.
    """
    ensure_schema(client)
    if not seed:
        return False
    config = current_app.config
    return seed_if_empty(
        client,
        password=config["SEED_PASSWORD"],
        rounds=config["BCRYPT_ROUNDS"],
    )
