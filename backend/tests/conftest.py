"""
Pytest fixtures for ghost report backend tests.

Every test gets its own SQLite file, so schema bootstrap and seeding run
exactly as they do on a real start.
"""

import pytest

from ghost_report import create_app
from ghost_report.db_client import EXTENSION_KEY


@pytest.fixture(scope='function')
def make_app(tmp_path):
    """Factory for apps bound to a fresh database file."""
    def _make(**overrides):
        config = {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'ghost_report.sqlite3'}",
            'SEED_ON_STARTUP': False,
            'BCRYPT_ROUNDS': 4,
        }
        config.update(overrides)
        return create_app(config)

    return _make


@pytest.fixture(scope='function')
def app(make_app):
    """Application with an empty, fully created schema."""
    return make_app()


@pytest.fixture(scope='function')
def seeded_app(make_app):
    """Application bootstrapped with the demo data set."""
    return make_app(SEED_ON_STARTUP=True)


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seeded_client(seeded_app):
    return seeded_app.test_client()


@pytest.fixture(scope='function')
def db_client(app):
    return app.extensions[EXTENSION_KEY]


# =============================================================================
# FACTORIES
# =============================================================================


@pytest.fixture(scope='function')
def register(client):
    """Register a user over the API and return its JSON body."""
    counter = {"n": 0}

    def _register(username=None, email=None, password="boo123"):
        counter["n"] += 1
        username = username or f"hunter{counter['n']}"
        email = email or f"{username}@example.com"
        resp = client.post(
            "/api/register",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _register


@pytest.fixture(scope='function')
def make_ghost(client):
    def _make_ghost(name="Lady Grey", **fields):
        resp = client.post("/api/ghosts", json={"name": name, **fields})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make_ghost


@pytest.fixture(scope='function')
def report(client):
    """Report a sighting and return its JSON body."""
    def _report(user_id, description="Cold spot by the stairs", **fields):
        resp = client.post(
            "/api/sightings",
            json={"userReportID": user_id, "description": description, **fields},
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _report
