"""Tests for the graph REST API."""

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient

from graphserver import __version__
from graphserver.api.app import create_app
from graphserver.api.graph import node_id_from
from graphserver.errors import InvalidRequestError
from graphserver.graph.database import SqlGraphDatabase
from graphserver.graph.factory import EphemeralGraphDatabaseFactory

BASE = "/db/data"


def create_node(client: TestClient, data: dict | None = None) -> dict:
    response = client.post(f"{BASE}/node", json=data)
    assert response.status_code == 201
    return response.json()


class TestServiceRoot:
    def test_links(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/")

        assert response.status_code == 200
        body = response.json()
        assert body["node"] == f"http://testserver{BASE}/node"
        assert body["node_index"] == f"http://testserver{BASE}/index/node"
        assert body["relationship_types"] == f"http://testserver{BASE}/relationship/types"
        assert body["version"] == __version__


class TestNodes:
    def test_create_node(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        body = create_node(client, {"name": "alice"})

        assert body["data"] == {"name": "alice"}
        assert body["self"] == f"http://testserver{BASE}/node/{body['id']}"
        assert body["properties"] == f"http://testserver{BASE}/node/{body['id']}/properties"
        assert graph.get_node(body["id"]).properties == {"name": "alice"}

    def test_create_node_without_body(self, client: TestClient) -> None:
        assert create_node(client)["data"] == {}

    def test_get_node(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        node = graph.create_node({"name": "bob"})

        response = client.get(f"{BASE}/node/{node.id}")

        assert response.status_code == 200
        assert response.json()["data"] == {"name": "bob"}

    def test_get_missing_node(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/node/999")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "NODE_NOT_FOUND", "message": "Node 999 not found"}
        }

    def test_properties_roundtrip(self, client: TestClient) -> None:
        node_id = create_node(client, {"name": "alice"})["id"]

        put = client.put(f"{BASE}/node/{node_id}/properties", json={"age": 31})
        get = client.get(f"{BASE}/node/{node_id}/properties")

        assert put.status_code == 204
        assert get.json() == {"age": 31}

    def test_delete_node(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        node_id = create_node(client)["id"]

        response = client.delete(f"{BASE}/node/{node_id}")

        assert response.status_code == 204
        assert graph.count_nodes() == 0

    def test_delete_node_in_use(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a, b = graph.create_node(), graph.create_node()
        graph.create_relationship(a.id, b.id, "KNOWS")

        response = client.delete(f"{BASE}/node/{a.id}")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "NODE_IN_USE"


class TestRelationships:
    def test_create_by_uri(self, client: TestClient) -> None:
        alice = create_node(client, {"name": "alice"})
        bob = create_node(client, {"name": "bob"})

        response = client.post(
            f"{BASE}/node/{alice['id']}/relationships",
            json={"to": bob["self"], "type": "KNOWS", "data": {"since": 2010}},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["type"] == "KNOWS"
        assert body["start"] == alice["self"]
        assert body["end"] == bob["self"]
        assert body["data"] == {"since": 2010}

    def test_create_by_id(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a, b = graph.create_node(), graph.create_node()

        response = client.post(
            f"{BASE}/node/{a.id}/relationships", json={"to": b.id, "type": "LIKES"}
        )

        assert response.status_code == 201
        assert graph.relationships(a.id)[0].end_node_id == b.id

    def test_empty_type_rejected(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a = graph.create_node()

        response = client.post(f"{BASE}/node/{a.id}/relationships", json={"to": a.id, "type": ""})

        assert response.status_code == 422

    def test_bad_node_reference(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a = graph.create_node()

        response = client.post(
            f"{BASE}/node/{a.id}/relationships", json={"to": "not-a-node", "type": "KNOWS"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_list_by_direction(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a, b = graph.create_node(), graph.create_node()
        graph.create_relationship(a.id, b.id, "KNOWS")

        out = client.get(f"{BASE}/node/{a.id}/relationships/out").json()
        incoming = client.get(f"{BASE}/node/{a.id}/relationships/in").json()
        everything = client.get(f"{BASE}/node/{b.id}/relationships/all").json()

        assert [r["type"] for r in out] == ["KNOWS"]
        assert incoming == []
        assert len(everything) == 1

    def test_invalid_direction(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a = graph.create_node()

        assert client.get(f"{BASE}/node/{a.id}/relationships/sideways").status_code == 422

    def test_types(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a, b = graph.create_node(), graph.create_node()
        graph.create_relationship(a.id, b.id, "LIKES")
        graph.create_relationship(a.id, b.id, "KNOWS")

        assert client.get(f"{BASE}/relationship/types").json() == ["KNOWS", "LIKES"]

    def test_get_and_delete(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        a, b = graph.create_node(), graph.create_node()
        rel = graph.create_relationship(a.id, b.id, "KNOWS")

        assert client.get(f"{BASE}/relationship/{rel.id}").json()["id"] == rel.id
        assert client.delete(f"{BASE}/relationship/{rel.id}").status_code == 204

        response = client.get(f"{BASE}/relationship/{rel.id}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RELATIONSHIP_NOT_FOUND"


class TestIndexes:
    def test_add_and_query(self, client: TestClient) -> None:
        alice = create_node(client, {"name": "alice"})

        added = client.post(
            f"{BASE}/index/node/people",
            json={"key": "name", "value": "alice", "uri": alice["self"]},
        )
        found = client.get(f"{BASE}/index/node/people/name/alice")

        assert added.status_code == 201
        assert [n["id"] for n in found.json()] == [alice["id"]]
        assert client.get(f"{BASE}/index/node").json() == ["people"]

    def test_numeric_value_matches_path(self, client: TestClient) -> None:
        node = create_node(client)
        client.post(f"{BASE}/index/node/ages", json={"key": "age", "value": 30, "uri": node["id"]})

        assert len(client.get(f"{BASE}/index/node/ages/age/30").json()) == 1

    def test_missing_node(self, client: TestClient) -> None:
        response = client.post(
            f"{BASE}/index/node/people", json={"key": "name", "value": "x", "uri": 999}
        )

        assert response.status_code == 404


class TestAppLevel:
    def test_health(self, client: TestClient, graph: SqlGraphDatabase) -> None:
        graph.create_node()

        body = client.get("/health").json()

        assert body == {"status": "healthy", "version": __version__, "nodes": 1}

    def test_metrics(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "graphserver_starts_total" in response.text

    def test_unhandled_error_returns_500(self, graph: SqlGraphDatabase) -> None:
        app = create_app(graph)
        router = APIRouter()

        @router.get("/boom")
        def boom() -> None:
            raise RuntimeError("boom")

        app.include_router(router)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

    def test_each_app_has_its_own_graph(self, graph: SqlGraphDatabase) -> None:
        other = EphemeralGraphDatabaseFactory().create_database("", {})
        other.create_node()
        try:
            with TestClient(create_app(graph)) as first, TestClient(create_app(other)) as second:
                assert first.get("/health").json()["nodes"] == 0
                assert second.get("/health").json()["nodes"] == 1
        finally:
            other.shutdown()


class TestNodeIdFrom:
    @pytest.mark.parametrize(
        ("reference", "expected"),
        [
            (7, 7),
            ("12", 12),
            ("http://localhost:7473/db/data/node/42", 42),
            ("http://localhost:7473/db/data/node/42/", 42),
        ],
    )
    def test_valid(self, reference: int | str, expected: int) -> None:
        assert node_id_from(reference) == expected

    def test_invalid(self) -> None:
        with pytest.raises(InvalidRequestError):
            node_id_from("http://localhost/db/data/node/")
