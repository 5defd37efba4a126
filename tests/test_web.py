"""Unit tests for the recut web API."""

from unittest.mock import MagicMock

import pytest

from recut.web import create_app

ANALYSIS = {
    "duration": 60.0,
    "annotations": [
        {"id": "s1", "type": "silence", "startTime": 10, "endTime": 12, "confidence": 0.9},
        {"id": "s2", "type": "silence", "startTime": 30, "endTime": 33, "confidence": 0.9},
    ],
}


@pytest.fixture
def interpreter():
    return MagicMock(return_value={
        "success": True,
        "interpretation": "Double speed for the outro",
        "edits": [{"type": "speed", "startTime": 40, "endTime": 60, "params": {"factor": 2}}],
    })


@pytest.fixture
def app(interpreter):
    app = create_app(interpreter=interpreter)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _create(client, **payload):
    payload.setdefault("analysis", ANALYSIS)
    return client.post("/api/sessions", json=payload)


def _cut(start, end, id_=None):
    edit = {"type": "cut", "startTime": start, "endTime": end}
    if id_:
        edit["id"] = id_
    return edit


class TestCreateSession:
    def test_from_analysis(self, client):
        resp = _create(client)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["duration"] == 60.0
        assert data["edits"] == []
        assert data["can_undo"] is False

    def test_requires_duration_or_analysis(self, client):
        resp = client.post("/api/sessions", json={})
        assert resp.status_code == 400

    def test_invalid_edit(self, client):
        resp = _create(client, edits=[{"type": "cut", "startTime": 5, "endTime": 1}])
        assert resp.status_code == 400

    def test_delete_session(self, client):
        sid = _create(client).get_json()["session_id"]
        resp = client.delete(f"/api/sessions/{sid}")
        assert resp.status_code == 200
        assert resp.get_json()["deleted"] is True
        assert client.get(f"/api/sessions/{sid}").status_code == 404
        assert client.delete(f"/api/sessions/{sid}").status_code == 404

    def test_unknown_session(self, client):
        assert client.get("/api/sessions/nonexistent").status_code == 404
        assert client.post("/api/sessions/nonexistent/undo").status_code == 404
        assert client.get("/api/sessions/nonexistent/preview").status_code == 404


class TestEdits:
    def test_add_remove_undo_redo(self, client):
        sid = _create(client).get_json()["session_id"]

        resp = client.post(f"/api/sessions/{sid}/edits", json={"edits": [_cut(0, 10, "c1")]})
        assert resp.get_json()["added"] == ["c1"]

        resp = client.delete(f"/api/sessions/{sid}/edits/c1")
        assert resp.get_json()["removed"] is True
        assert resp.get_json()["edits"] == []

        resp = client.post(f"/api/sessions/{sid}/undo")
        assert [e["id"] for e in resp.get_json()["edits"]] == ["c1"]

        resp = client.post(f"/api/sessions/{sid}/redo")
        assert resp.get_json()["edits"] == []
        assert resp.get_json()["changed"] is True

    def test_remove_unknown_edit_is_noop(self, client):
        sid = _create(client).get_json()["session_id"]
        resp = client.delete(f"/api/sessions/{sid}/edits/missing")
        assert resp.status_code == 200
        assert resp.get_json()["removed"] is False

    def test_clear_empty_is_noop(self, client):
        sid = _create(client).get_json()["session_id"]
        resp = client.post(f"/api/sessions/{sid}/clear")
        assert resp.get_json()["changed"] is False
        assert resp.get_json()["can_undo"] is False

    def test_invalid_edit_rejected(self, client):
        sid = _create(client).get_json()["session_id"]
        resp = client.post(
            f"/api/sessions/{sid}/edits",
            json={"edits": [{"type": "speed", "startTime": 0, "endTime": 1}]},
        )
        assert resp.status_code == 400


class TestDerivedViews:
    def test_preview_map_export(self, client):
        sid = _create(client, edits=[_cut(0, 10), _cut(40, 50)]).get_json()["session_id"]

        preview = client.get(f"/api/sessions/{sid}/preview").get_json()
        assert preview["preview_duration"] == 40.0
        assert preview["cut_count"] == 2

        mapped = client.get(f"/api/sessions/{sid}/map?original=15").get_json()
        assert mapped["preview"] == 5.0
        cut = client.get(f"/api/sessions/{sid}/map?original=45").get_json()
        assert cut["preview"] is None
        back = client.get(f"/api/sessions/{sid}/map?preview=35").get_json()
        assert back["original"] == 55.0

        plan = client.get(f"/api/sessions/{sid}/export").get_json()
        assert len(plan["segments"]) == 2
        assert "concat=n=2" in plan["filter_graph"]
        assert plan["output_maps"] == ["-map", "[outv]", "-map", "[outa]"]

    def test_map_requires_one_parameter(self, client):
        sid = _create(client).get_json()["session_id"]
        assert client.get(f"/api/sessions/{sid}/map").status_code == 400
        assert client.get(f"/api/sessions/{sid}/map?original=1&preview=1").status_code == 400

    def test_duration_change(self, client):
        sid = _create(client, edits=[_cut(50, 60)]).get_json()["session_id"]
        client.put(f"/api/sessions/{sid}/duration", json={"duration": 55})
        preview = client.get(f"/api/sessions/{sid}/preview").get_json()
        assert preview["preview_duration"] == 50.0


class TestCommands:
    def test_quick_command(self, client, interpreter):
        sid = _create(client).get_json()["session_id"]
        resp = client.post(f"/api/sessions/{sid}/commands", json={"command": "remove all silence"})
        data = resp.get_json()
        assert data["result"]["success"] is True
        assert len(data["edits"]) == 2
        assert data["command_history"] == ["remove all silence"]
        interpreter.assert_not_called()

    def test_interpreted_command(self, client, interpreter):
        sid = _create(client).get_json()["session_id"]
        resp = client.post(f"/api/sessions/{sid}/commands", json={"command": "speed up the outro"})
        data = resp.get_json()
        assert data["result"]["success"] is True
        assert data["edits"][0]["type"] == "speed"
        preview = client.get(f"/api/sessions/{sid}/preview").get_json()
        assert preview["preview_duration"] == 50.0

    def test_missing_command(self, client):
        sid = _create(client).get_json()["session_id"]
        resp = client.post(f"/api/sessions/{sid}/commands", json={})
        assert resp.status_code == 400
