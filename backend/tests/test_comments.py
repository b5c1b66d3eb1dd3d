"""
Comments on sightings and ghosts: one per user per target, oldest first.
"""

import pytest


@pytest.fixture
def sighting_target(register, report):
    user = register()
    return f"/api/sightings/{report(user['id'])['id']}/comments"


@pytest.fixture
def ghost_target(make_ghost):
    return f"/api/ghosts/{make_ghost()['id']}/comments"


@pytest.fixture(params=["sighting_target", "ghost_target"])
def target(request):
    return request.getfixturevalue(request.param)


class TestPostComment:

    def test_first_post_creates(self, client, register, target):
        user = register(username="pat")
        resp = client.post(target, json={"userID": user["id"], "description": "Definitely legit"})
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["status"] == "created"
        assert data["description"] == "Definitely legit"
        assert data["username"] == "pat"
        assert data["reportTime"]

    def test_second_post_rewrites(self, client, register, target):
        user = register()
        client.post(target, json={"userID": user["id"], "description": "first take"})
        resp = client.post(target, json={"userID": user["id"], "description": "second take"})
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "updated"

        comments = client.get(target).get_json()
        assert len(comments) == 1
        assert comments[0]["description"] == "second take"

    def test_missing_fields(self, client, target):
        resp = client.post(target, json={"description": "anonymous"})
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["userID"]

    def test_unknown_user(self, client, target):
        resp = client.post(target, json={"userID": 999, "description": "who am I"})
        assert resp.status_code == 404

    def test_description_too_long(self, client, register, target):
        user = register()
        resp = client.post(target, json={"userID": user["id"], "description": "o" * 513})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "field_too_long"


class TestListComments:

    def test_oldest_first(self, client, db_client, register, ghost_target):
        ghost_id = int(ghost_target.split("/")[3])
        early, late = register(), register()
        db_client.run(
            "INSERT INTO Ghost_Comment (userID, ghostID, reportTime, description) VALUES (?, ?, ?, ?)",
            (late["id"], ghost_id, "2024-10-29 10:00:00", "later"),
        )
        db_client.run(
            "INSERT INTO Ghost_Comment (userID, ghostID, reportTime, description) VALUES (?, ?, ?, ?)",
            (early["id"], ghost_id, "2024-10-25 14:00:00", "earlier"),
        )
        comments = client.get(ghost_target).get_json()
        assert [c["description"] for c in comments] == ["earlier", "later"]
        assert comments[0]["reportTime"] == "2024-10-25T14:00:00"

    def test_missing_target(self, client):
        resp = client.get("/api/sightings/404/comments")
        assert resp.status_code == 404
        assert resp.get_json()["entity"] == "sighting"

    def test_seeded_comments(self, seeded_client):
        comments = seeded_client.get("/api/sightings/1/comments").get_json()
        assert [c["username"] for c in comments] == ["paranormal_pat", "ecto_emily"]
