"""
Sighting reports, listing, ghost renaming and deletion.
"""

import pytest


class TestReportSighting:

    def test_report_without_ghost_links_unknown(self, client, register):
        user = register()
        resp = client.post(
            "/api/sightings",
            json={"userReportID": str(user["id"]), "description": "saw a shadow", "visibility": 9},
        )
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["visibility"] == 9
        assert data["visibilityLevel"] == "Very Clear"
        assert "saw a shadow" in data["description"]
        assert data["ghostName"] == "Unknown"
        assert data["username"] == user["username"]

        unknown = client.get(f"/api/ghosts/{data['ghostID']}").get_json()
        assert unknown["name"] == "Unknown"

    def test_unknown_ghost_is_shared(self, register, report, db_client):
        user = register()
        first = report(user["id"])
        second = report(user["id"])
        assert first["ghostID"] == second["ghostID"]
        assert db_client.scalar("SELECT COUNT(*) AS cnt FROM Ghost WHERE name = ?", ("Unknown",)) == 1

    def test_report_with_ghost(self, register, make_ghost, report):
        user = register()
        ghost = make_ghost(name="The Knocker")
        sighting = report(user["id"], ghostID=ghost["id"], latitude=40.7128, longitude="-74.006")
        assert sighting["ghostID"] == ghost["id"]
        assert sighting["ghostName"] == "The Knocker"
        assert sighting["latitude"] == pytest.approx(40.7128)
        assert sighting["longitude"] == pytest.approx(-74.006)

    @pytest.mark.parametrize("raw, expected", [
        (None, 5),
        ("bright", 5),
        ("Very Clear", 9),
        ("Faint", 3),
        ("7", 7),
        (0, 0),
    ])
    def test_visibility_defaults_and_labels(self, register, report, raw, expected):
        user = register()
        fields = {} if raw is None else {"visibility": raw}
        assert report(user["id"], **fields)["visibility"] == expected

    def test_visibility_out_of_range(self, client, register):
        user = register()
        resp = client.post(
            "/api/sightings",
            json={"userReportID": user["id"], "description": "too bright", "visibility": 11},
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "invalid_field", "field": "visibility"}

    def test_time_of_sighting_annotates_description(self, register, report):
        user = register()
        sighting = report(user["id"], description="Knocking", timeOfSighting="around midnight")
        assert sighting["description"] == "Reported time: around midnight\nKnocking"

    def test_missing_fields(self, client):
        resp = client.post("/api/sightings", json={})
        assert resp.status_code == 400
        assert set(resp.get_json()["fields"]) == {"userReportID", "description"}

    def test_unknown_reporter(self, client):
        resp = client.post("/api/sightings", json={"userReportID": 77, "description": "?"})
        assert resp.status_code == 404
        assert resp.get_json()["entity"] == "user"

    def test_unknown_ghost_id_writes_nothing(self, client, register, db_client):
        user = register()
        resp = client.post(
            "/api/sightings",
            json={"userReportID": user["id"], "description": "?", "ghostID": 999},
        )
        assert resp.status_code == 404
        assert db_client.scalar("SELECT COUNT(*) AS cnt FROM Sighting") == 0

    @pytest.mark.parametrize("raw_id", ["\u00b2", "\u2460", "12a"])
    def test_malformed_reporter_id(self, client, raw_id):
        resp = client.post("/api/sightings", json={"userReportID": raw_id, "description": "x"})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "invalid_field", "field": "userReportID"}

    def test_fractional_visibility_out_of_range(self, client, register):
        user = register()
        resp = client.post(
            "/api/sightings",
            json={"userReportID": user["id"], "description": "glare", "visibility": 10.9},
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "invalid_field", "field": "visibility"}

    def test_catalogue_ghost_named_like_sentinel_is_not_reused(self, client, db_client, register, report):
        db_client.run(
            "INSERT INTO Ghost (type, name) VALUES (?, ?)",
            ("Poltergeist", "Unknown"),
        )
        user = register()
        sighting = report(user["id"])
        linked = client.get(f"/api/ghosts/{sighting['ghostID']}").get_json()
        assert linked["type"] == "Unknown"
        assert db_client.scalar("SELECT COUNT(*) AS cnt FROM Ghost WHERE name = ?", ("Unknown",)) == 2

    def test_bad_latitude(self, client, register):
        user = register()
        resp = client.post(
            "/api/sightings",
            json={"userReportID": user["id"], "description": "?", "latitude": 123},
        )
        assert resp.status_code == 400
        assert resp.get_json()["field"] == "latitude"


class TestListSightings:

    def test_newest_first(self, client, register, report):
        user = register()
        first = report(user["id"], description="first")
        second = report(user["id"], description="second")
        ids = [s["id"] for s in client.get("/api/sightings").get_json()]
        assert ids == [second["id"], first["id"]]

    def test_empty(self, client):
        resp = client.get("/api/sightings")
        assert resp.status_code == 200
        assert resp.get_json() == []

    def test_seeded_sighting_shows_lowest_linked_ghost(self, seeded_client):
        # Seed sighting 1 is linked to ghosts 1 and 3
        sighting = seeded_client.get("/api/sightings/1").get_json()
        assert sighting["ghostID"] == 1
        assert sighting["ghostName"] == "The Knocker"
        assert sighting["time"] == "2024-10-31T23:45:00"

    def test_get_missing(self, client):
        assert client.get("/api/sightings/5").status_code == 404


class TestRenameGhost:

    def test_rename_unknown_creates_new_ghost(self, client, register, report):
        user = register()
        sighting = report(user["id"])
        unknown_id = sighting["ghostID"]

        resp = client.put(f"/api/sightings/{sighting['id']}/ghost-name", json={"newName": "Weeping William"})
        assert resp.status_code == 200
        renamed = resp.get_json()
        assert renamed["ghostName"] == "Weeping William"
        assert renamed["ghostID"] != unknown_id
        # The shared sentinel keeps its name
        assert client.get(f"/api/ghosts/{unknown_id}").get_json()["name"] == "Unknown"

    def test_rename_real_ghost_in_place(self, client, register, make_ghost, report):
        user = register()
        ghost = make_ghost(name="Grey")
        sighting = report(user["id"], ghostID=ghost["id"])

        resp = client.put(f"/api/sightings/{sighting['id']}/ghost-name", json={"newName": "Lady Grey"})
        assert resp.get_json()["ghostID"] == ghost["id"]
        assert client.get(f"/api/ghosts/{ghost['id']}").get_json()["name"] == "Lady Grey"

    def test_rename_requires_name(self, client, register, report):
        user = register()
        sighting = report(user["id"])
        resp = client.put(f"/api/sightings/{sighting['id']}/ghost-name", json={"newName": "  "})
        assert resp.status_code == 400

    def test_rename_to_reserved_name(self, client, register, report):
        user = register()
        sighting = report(user["id"])
        resp = client.put(f"/api/sightings/{sighting['id']}/ghost-name", json={"newName": "unknown"})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "reserved_name", "field": "newName"}

    def test_rename_missing_sighting(self, client):
        resp = client.put("/api/sightings/9/ghost-name", json={"newName": "Nobody"})
        assert resp.status_code == 404


class TestDeleteSighting:

    def test_delete_removes_links_and_comments(self, client, db_client, register, report):
        user = register()
        sighting = report(user["id"])
        client.post(f"/api/sightings/{sighting['id']}/comments", json={"userID": user["id"], "description": "hm"})

        resp = client.delete(f"/api/sightings/{sighting['id']}")
        assert resp.status_code == 200
        assert resp.get_json()["removed"] == {
            "Sighting_Comment": 1,
            "Sighting_Reports_Ghost": 1,
            "Sighting": 1,
        }
        assert db_client.scalar("SELECT COUNT(*) AS cnt FROM Sighting_Reports_Ghost") == 0
        assert client.get(f"/api/sightings/{sighting['id']}").status_code == 404
