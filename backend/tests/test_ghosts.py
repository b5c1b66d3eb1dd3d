"""
Ghost catalogue CRUD and cascading delete.
"""


class TestGhostCatalogue:

    def test_create_and_get(self, client):
        resp = client.post(
            "/api/ghosts",
            json={"name": "Lady Grey", "type": "Apparition", "description": "Grey dress", "visibility": 4},
        )
        assert resp.status_code == 201
        ghost = resp.get_json()
        assert ghost["visibilityLevel"] == "Faint"

        resp = client.get(f"/api/ghosts/{ghost['id']}")
        assert resp.get_json() == ghost

    def test_list_in_id_order(self, client, make_ghost):
        a = make_ghost(name="A")
        b = make_ghost(name="B")
        assert [g["id"] for g in client.get("/api/ghosts").get_json()] == [a["id"], b["id"]]

    def test_name_required(self, client):
        resp = client.post("/api/ghosts", json={"type": "Phantom"})
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["name"]

    def test_unknown_name_is_reserved(self, client):
        resp = client.post("/api/ghosts", json={"name": "Unknown", "type": "Poltergeist"})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "reserved_name", "field": "name"}

    def test_rename_to_unknown_rejected(self, client, make_ghost):
        ghost = make_ghost(name="The Knocker")
        resp = client.put(f"/api/ghosts/{ghost['id']}", json={"name": " UNKNOWN "})
        assert resp.status_code == 400
        assert client.get(f"/api/ghosts/{ghost['id']}").get_json()["name"] == "The Knocker"

    def test_visibility_range(self, client):
        resp = client.post("/api/ghosts", json={"name": "Blinding", "visibility": 12})
        assert resp.status_code == 400

    def test_partial_update(self, client, make_ghost):
        ghost = make_ghost(name="Weeping William", type="Phantom", visibility=3)
        resp = client.put(f"/api/ghosts/{ghost['id']}", json={"visibility": 8})
        assert resp.status_code == 200
        updated = resp.get_json()
        assert updated["name"] == "Weeping William"
        assert updated["type"] == "Phantom"
        assert updated["visibility"] == 8
        assert updated["visibilityLevel"] == "Very Clear"

    def test_update_missing(self, client):
        assert client.put("/api/ghosts/1", json={"name": "x"}).status_code == 404


class TestGhostSightings:

    def test_lists_linked_sightings(self, client, register, make_ghost, report):
        user = register()
        ghost = make_ghost()
        linked = report(user["id"], ghostID=ghost["id"])
        report(user["id"])
        sightings = client.get(f"/api/ghosts/{ghost['id']}/sightings").get_json()
        assert [s["id"] for s in sightings] == [linked["id"]]
        assert sightings[0]["ghostName"] == ghost["name"]


class TestDeleteGhost:

    def test_seeded_ghost_delete_cascades(self, seeded_client, seeded_app):
        resp = seeded_client.delete("/api/ghosts/2")
        assert resp.status_code == 200
        removed = resp.get_json()["removed"]
        assert removed["Ghost"] == 1
        assert removed["Tour_Includes"] == 3
        assert removed["Sighting_Reports_Ghost"] == 1
        assert removed["Ghost_Buster_Fights_Ghost"] == 2
        assert seeded_client.get("/api/ghosts/2").status_code == 404
        # The sighting stays; its ghost falls back to the Unknown label
        assert seeded_client.get("/api/sightings/2").get_json()["ghostName"] == "Unknown"

    def test_delete_missing(self, client):
        assert client.delete("/api/ghosts/3").status_code == 404
