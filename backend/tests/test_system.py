"""
Health endpoint, CORS headers, error envelope and CLI commands.
"""

from ghost_report.db_client import EXTENSION_KEY


class TestHealth:

    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "healthy"
        assert data["engine"] == "sqlite"


class TestCors:

    def test_allowed_origin_echoed(self, client):
        resp = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_other_origin_ignored(self, client):
        resp = client.get("/api/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers


class TestInternalErrors:

    def test_database_failure_is_opaque(self, app, client, db_client):
        db_client.run("DROP TABLE Sighting_Comment")
        db_client.run("DROP TABLE Sighting_Reports_Ghost")
        db_client.run("DROP TABLE Sighting")
        resp = client.get("/api/sightings")
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "internal"}


class TestCli:

    def test_system_init_seeds_empty_database(self, app):
        result = app.test_cli_runner().invoke(args=["system", "init"])
        assert result.exit_code == 0
        assert "seed data written" in result.output
        assert app.extensions[EXTENSION_KEY].scalar("SELECT COUNT(*) AS cnt FROM User") == 5

    def test_system_init_preserves_data(self, seeded_app):
        result = seeded_app.test_cli_runner().invoke(args=["system", "init"])
        assert "existing data preserved" in result.output

    def test_reset_db(self, seeded_app):
        client = seeded_app.extensions[EXTENSION_KEY]
        client.run("DELETE FROM Ghost_Comment")
        result = seeded_app.test_cli_runner().invoke(args=["system", "reset-db", "--yes"])
        assert result.exit_code == 0
        assert client.scalar("SELECT COUNT(*) AS cnt FROM Ghost_Comment") == 5

    def test_users_list(self, seeded_app):
        result = seeded_app.test_cli_runner().invoke(args=["users", "list"])
        assert "spooky_sam" in result.output
        assert "Yes (47 busted)" in result.output

    def test_users_delete(self, seeded_app):
        runner = seeded_app.test_cli_runner()
        result = runner.invoke(args=["users", "delete", "2", "--yes"])
        assert result.exit_code == 0
        assert "Deleted user 2" in result.output
        result = runner.invoke(args=["users", "delete", "2", "--yes"])
        assert result.exit_code != 0

    def test_ghosts_delete(self, seeded_app):
        result = seeded_app.test_cli_runner().invoke(args=["ghosts", "delete", "5", "--yes"])
        assert result.exit_code == 0
        assert seeded_app.extensions[EXTENSION_KEY].scalar("SELECT COUNT(*) AS cnt FROM Ghost") == 4
