"""HTTP surface tests"""

import pytest
from fastapi.testclient import TestClient

from activity_graph.activities.board import ActivityBoard
from activity_graph.activities.source import InMemoryActivitySource
from activity_graph.api import routes
from activity_graph.api.routes import reset_activity_board
from activity_graph.graph.engine import GraphEngine
from activity_graph.graph.errors import ActivitySourceError
from activity_graph.graph.types import Activity
from activity_graph.main import app


@pytest.fixture
def client():
    board = ActivityBoard(
        source=InMemoryActivitySource([
            Activity("1", "Excavate"),
            Activity("2", "Formwork"),
            Activity("3", "Pour"),
        ]),
        engine=GraphEngine(strict=True),
    )
    board.refresh()
    reset_activity_board(board)
    yield TestClient(app)
    reset_activity_board(None)


def place_all(client):
    for activity_id in ("1", "2", "3"):
        assert client.post("/graph/nodes", json={"activity_id": activity_id}).status_code == 201


def test_activities(client):
    assert [a["id"] for a in client.get("/activities").json()] == ["1", "2", "3"]

    res = client.post("/activities", json={"name": "Cure"})
    assert res.status_code == 201
    assert res.json() == {"id": "4", "name": "Cure"}

    res = client.post("/activities", json={"name": "   "})
    assert res.status_code == 400
    assert res.json()["errorName"] == "InvalidActivityNameError"


def test_cycle_is_rejected(client):
    place_all(client)

    res = client.post("/graph/edges", json={"source": "1", "target": "2", "relation": "one_from_one"})
    assert res.status_code == 201
    assert res.json()["edge"]["label"] == "one_from_one"

    res = client.post("/graph/edges", json={"source": "2", "target": "1", "relation": "one_from_one"})
    assert res.status_code == 409
    assert res.json()["errorName"] == "CycleError"
    assert len(client.get("/graph").json()["edges"]) == 1


def test_second_parent_needs_group_logic(client):
    place_all(client)
    first = client.post("/graph/edges", json={"source": "1", "target": "3", "relation": "one_from_one"})
    first_id = first.json()["edge"]["id"]

    res = client.post(
        "/graph/edges",
        json={"source": "2", "target": "3", "relation": "one_from_many", "logic": "AND"},
    )
    assert res.status_code == 202
    body = res.json()
    assert body["status"] == "needs_resolution"
    assert body["proposal"]["requirements"] == ["group_logic"]

    proposal_id = body["proposal"]["id"]
    res = client.post(f"/graph/edges/proposals/{proposal_id}/confirm", json={"group_logic": "OR"})
    assert res.status_code == 201
    assert res.json()["edge"]["label"] == "one_from_many (AND)"

    nodes = {n["id"]: n for n in client.get("/graph").json()["nodes"]}
    assert nodes["3"]["label"] == "Pour [OR of 2 parents]"

    res = client.delete(f"/graph/edges/{first_id}")
    assert res.status_code == 200
    assert res.json()["target_group"]["logic"] is None

    nodes = {n["id"]: n for n in client.get("/graph").json()["nodes"]}
    assert nodes["3"]["label"] == "Pour"


def test_remove_node_returns_activity_to_pool(client):
    place_all(client)
    client.post("/graph/edges", json={"source": "1", "target": "2", "relation": "one_from_one"})
    client.post("/graph/edges", json={"source": "2", "target": "3", "relation": "one_from_one"})
    assert client.get("/activities").json() == []

    res = client.delete("/graph/nodes/2")
    assert res.status_code == 200
    assert len(res.json()["removed_edges"]) == 2

    assert client.get("/activities").json() == [{"id": "2", "name": "Formwork"}]
    assert client.get("/graph").json()["edges"] == []
    assert client.get("/graph/validation").json()["is_valid"] is True


def test_cancel_and_unknown_proposal(client):
    place_all(client)
    res = client.post("/graph/edges", json={"source": "1", "target": "2"})
    assert res.status_code == 202
    proposal_id = res.json()["proposal"]["id"]

    assert client.delete(f"/graph/edges/proposals/{proposal_id}").status_code == 200
    res = client.post(f"/graph/edges/proposals/{proposal_id}/confirm", json={})
    assert res.status_code == 404
    assert res.json()["errorName"] == "UnknownProposalError"


def test_bad_requests(client):
    place_all(client)
    res = client.post("/graph/edges", json={"source": "1", "target": "9", "relation": "one_from_one"})
    assert res.status_code == 422
    assert res.json()["errorName"] == "UnknownEndpointError"

    res = client.post("/graph/edges", json={"source": "1", "target": "2", "relation": "sideways"})
    assert res.status_code == 422

    assert client.post("/graph/nodes", json={"activity_id": "1"}).status_code == 409
    assert client.delete("/graph/edges/nope").status_code == 404


class FlakySource(InMemoryActivitySource):
    """Fails the first catalog request, then answers normally"""

    def __init__(self, activities):
        super().__init__(activities)
        self.calls = 0

    def list_activities(self):
        self.calls += 1
        if self.calls == 1:
            raise ActivitySourceError("catalog unreachable")
        return super().list_activities()


def test_failed_catalog_load_is_retried(monkeypatch):
    source = FlakySource([Activity("1", "Excavate")])
    monkeypatch.setattr(routes, "get_activity_source", lambda: source)
    reset_activity_board(None)
    client = TestClient(app)

    try:
        res = client.get("/activities")
        assert res.status_code == 502
        assert res.json()["errorName"] == "ActivitySourceError"

        assert client.get("/activities").json() == [{"id": "1", "name": "Excavate"}]
        assert client.post("/graph/nodes", json={"activity_id": "1"}).status_code == 201
    finally:
        reset_activity_board(None)
