# backend/ghost_report/routes/system.py
"""
System health endpoint.

Reports whether the configured database answers a trivial round trip.
"""

import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from ..db_client import get_client


system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity.

    Returns dict with status and details.
    """
    client = get_client()
    start_time = time.time()
    try:
        client.scalar("SELECT 1 AS ok")
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "engine": client.engine_name,
            "latency_ms": round(elapsed_ms, 2),
        }
    except SQLAlchemyError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "engine": client.engine_name,
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/api/health")
def health_route():
    health = check_database_health()
    status_code = 200 if health["status"] == "healthy" else 503
    return jsonify(health), status_code
