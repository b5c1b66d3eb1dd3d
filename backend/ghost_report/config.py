# backend/ghost_report/config.py
from __future__ import annotations
import os

from sqlalchemy.engine import URL


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _database_uri() -> str:
    """
    DATABASE_URL wins when set. Otherwise DB_ENGINE picks between the local
    SQLite file (development) and MySQL (production).
    """
    explicit = os.environ.get("DATABASE_URL", "").strip()
    if explicit:
        return explicit

    engine = os.environ.get("DB_ENGINE", "sqlite").strip().lower()
    if engine == "mysql":
        url = URL.create(
            "mysql+pymysql",
            username=os.environ.get("MYSQL_USER", "root"),
            password=os.environ.get("MYSQL_PASSWORD", "password"),
            host=os.environ.get("MYSQL_HOST", "localhost"),
            port=int(os.environ.get("MYSQL_PORT", "3306")),
            database=os.environ.get("MYSQL_DATABASE", "ghost_report"),
            query={"charset": "utf8mb4"},
        )
        return url.render_as_string(hide_password=False)
    if engine != "sqlite":
        raise ValueError(f"Unsupported DB_ENGINE: {engine}")

    # Relative paths resolve inside the Flask instance folder
    return "sqlite:///" + os.environ.get("SQLITE_FILE", "ghost_report.sqlite3")


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    DB_ENGINE = os.environ.get("DB_ENGINE", "sqlite").strip().lower()
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Demo data is only written into an empty store
    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", True)
    SEED_PASSWORD = os.environ.get("SEED_PASSWORD", "boo123")

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
