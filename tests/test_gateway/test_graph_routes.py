"""
Route tests for the FastAPI gateway using an in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from src.annotation_graph.service import AnnotationGraphService
from src.annotation_graph.store import MemoryGraphStore
from src.gateway.app import create_app

from samples import AGENT_DOCUMENT, MISSING_TEXT_DOCUMENT, SAMPLE_DOCUMENT


@pytest.fixture
def client(settings):
    app = create_app()
    app.state.graph_service = AnnotationGraphService(MemoryGraphStore(), settings)
    with TestClient(app) as test_client:
        yield test_client


def _load(client, *docs):
    return client.post(
        "/api/documents",
        json={"documents": [{"name": name, "content": content} for name, content in docs]},
    )


class TestDocuments:

    def test_load_documents(self, client):
        response = _load(client, ("s.xml", SAMPLE_DOCUMENT))

        assert response.status_code == 200
        body = response.json()
        assert body["documents"] == 1
        assert body["nodes"] == 4
        assert body["edges"] == 3
        assert body["reconcile"]["deleted_nodes"] == 0

    def test_malformed_batch_is_422(self, client):
        response = _load(client, ("ok.xml", AGENT_DOCUMENT), ("bad.xml", MISSING_TEXT_DOCUMENT))

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "AggregationError"
        assert body["failures"][0]["document"] == "bad.xml"

    def test_empty_batch_rejected(self, client):
        response = client.post("/api/documents", json={"documents": []})

        assert response.status_code == 422


class TestGraphViews:

    def test_get_graph(self, client):
        _load(client, ("a.xml", AGENT_DOCUMENT))

        body = client.get("/api/graph").json()

        assert set(body["nodes"]) == {"r", "c1"}
        assert body["edges"] == [
            {"id": "edge_0", "source": "r", "target": "c1", "type": "Agent", "function": None}
        ]

    def test_view_ego_network(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        body = client.post("/api/graph/view", json={"center": "r", "depth": 0}).json()

        assert list(body["nodes"]) == ["r"]
        assert body["edges"] == []

    def test_view_filters_without_center(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        body = client.post("/api/graph/view", json={"edge_types": ["Theme"]}).json()

        assert len(body["nodes"]) == 4
        assert [e["type"] for e in body["edges"]] == ["Theme"]

    def test_view_unknown_center_is_404(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        response = client.post("/api/graph/view", json={"center": "ghost", "depth": 1})

        assert response.status_code == 404

    def test_view_depth_over_limit_is_422(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        response = client.post("/api/graph/view", json={"center": "r", "depth": 50})

        assert response.status_code == 422

    def test_filters(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        body = client.get("/api/graph/filters").json()

        assert body["node_types"] == ["Entity", "Event"]
        assert body["default_center"] == "r"
        assert body["default_depth"] == 1


class TestExportAndClear:

    def test_export_is_attachment(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        response = client.post("/api/graph/export", json={"lemmas": ["book", "student"]})

        assert response.status_code == 200
        assert "graph_export.json" in response.headers["content-disposition"]
        body = response.json()
        assert [n["id"] for n in body["nodes"]] == ["node_2", "x"]
        assert [(e["source"], e["target"]) for e in body["edges"]] == [("node_2", "x")]

    def test_clear(self, client):
        _load(client, ("s.xml", SAMPLE_DOCUMENT))

        assert client.delete("/api/graph").json() == {"status": "cleared"}
        assert client.get("/api/graph").json() == {"nodes": {}, "edges": []}

    def test_health_and_root(self, client):
        _load(client, ("a.xml", AGENT_DOCUMENT))

        health = client.get("/api/health").json()
        root = client.get("/").json()

        assert health == {
            "status": "healthy", "store_backend": "memory",
            "node_count": 2, "edge_count": 1, "error": None,
        }
        assert root["status"] == "operational"
