"""HTTP surface of /api/v1/folders."""

from cipherdrive.consts import DAY_MS

from conftest import auth

URL = "/api/v1/folders"


def _create(client, name="Docs", parent_id=None):
    body = {"name": name}
    if parent_id is not None:
        body["parentId"] = parent_id
    resp = client.post(URL, json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestAuth:
    def test_missing_token_is_401(self, anon_client):
        resp = anon_client.get(URL)
        assert resp.status_code == 401
        body = resp.json()
        assert body["success"] is False
        assert body["errors"][-1]["code"] == "unauthorized"

    def test_delete_without_token_is_401(self, anon_client):
        resp = anon_client.delete(URL, params={"id": "abc"})
        assert resp.status_code == 401


class TestCreate:
    def test_scenario_create_under_root(self, client):
        folder = _create(client)

        assert folder["name"] == "Docs"
        assert folder["parent_id"] == "root"
        assert folder["is_starred"] is False
        assert "deleted_at" not in folder

        listed = client.get(URL).json()["data"]
        assert [f["id"] for f in listed] == [folder["id"]]

    def test_missing_name(self, client):
        resp = client.post(URL, json={"name": "  "})
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"] == "Folder name is required."
        assert body["errors"][-1] == {
            "code": "validation_error",
            "message": "Folder name is required.",
            "field": "name",
        }

    def test_invalid_parent(self, client):
        resp = client.post(URL, json={"name": "Reports", "parentId": "missing"})
        assert resp.status_code == 400
        assert resp.json()["errors"][-1]["code"] == "not_found"

    def test_folders_are_per_user(self, client):
        _create(client)
        other = client.get(URL, headers=auth("user_2")).json()["data"]
        assert other == []


class TestDelete:
    def test_root_is_400(self, client):
        resp = client.delete(URL, params={"id": "root"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Cannot delete root folder."

    def test_soft_delete_then_trash_listing(self, client):
        docs = _create(client)
        reports = _create(client, "Reports", docs["id"])

        resp = client.delete(URL, params={"id": docs["id"]})
        assert resp.status_code == 200
        assert resp.json()["success"] is True

        live = client.get(URL).json()["data"]
        assert [f["id"] for f in live] == [reports["id"]]
        assert live[0]["parent_id"] == docs["id"]

        trash = client.get(URL, params={"trash": "true"}).json()["data"]
        assert [f["id"] for f in trash] == [docs["id"]]
        assert trash[0]["deleted_at"] is not None

    def test_unknown_folder_is_404(self, client):
        resp = client.delete(URL, params={"id": "missing"})
        assert resp.status_code == 404

    def test_permanent_delete_waits_for_retention(self, client, clock):
        docs = _create(client)
        client.delete(URL, params={"id": docs["id"]})

        clock.advance(10 * DAY_MS)
        resp = client.delete(URL, params={"id": docs["id"], "permanent": "true"})
        assert resp.status_code == 400
        assert resp.json()["errors"][-1]["code"] == "precondition_failed"

        clock.advance(21 * DAY_MS)
        resp = client.delete(URL, params={"id": docs["id"], "permanent": "true"})
        assert resp.status_code == 200
        assert client.get(URL, params={"trash": "true"}).json()["data"] == []


class TestPatch:
    def test_star_and_unstar(self, client):
        docs = _create(client)

        resp = client.patch(URL, json={"folderId": docs["id"], "action": "star", "isStarred": True})
        assert resp.status_code == 200
        assert client.get(URL).json()["data"][0]["is_starred"] is True

        client.patch(URL, json={"folderId": docs["id"], "action": "star", "isStarred": False})
        assert client.get(URL).json()["data"][0]["is_starred"] is False

    def test_star_requires_flag(self, client):
        docs = _create(client)
        resp = client.patch(URL, json={"folderId": docs["id"], "action": "star"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "isStarred boolean is required."

    def test_unknown_action(self, client):
        docs = _create(client)
        resp = client.patch(URL, json={"folderId": docs["id"], "action": "rename"})
        assert resp.status_code == 400
        assert resp.json()["errors"][-1]["field"] == "action"

    def test_star_trashed_folder(self, client):
        docs = _create(client)
        client.delete(URL, params={"id": docs["id"]})

        resp = client.patch(URL, json={"folderId": docs["id"], "action": "star", "isStarred": True})
        assert resp.status_code == 400
        assert resp.json()["errors"][-1]["code"] == "invalid_operation"

    def test_restore(self, client):
        docs = _create(client)
        client.delete(URL, params={"id": docs["id"]})

        resp = client.patch(URL, json={"folderId": docs["id"], "action": "restore"})
        assert resp.status_code == 200
        assert [f["id"] for f in client.get(URL).json()["data"]] == [docs["id"]]

    def test_restore_under_trashed_parent(self, client):
        docs = _create(client)
        reports = _create(client, "Reports", docs["id"])
        client.delete(URL, params={"id": reports["id"]})
        client.delete(URL, params={"id": docs["id"]})

        resp = client.patch(URL, json={"folderId": reports["id"], "action": "restore"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Parent folder no longer exists or is in trash."


def test_children_count(client):
    docs = _create(client)
    _create(client, "A", docs["id"])
    _create(client, "B", docs["id"])

    resp = client.get(URL, params={"folderId": docs["id"], "count": "true"})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"folders": 2, "files": 0}


def test_health(anon_client):
    resp = anon_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
