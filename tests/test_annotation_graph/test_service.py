"""
Unit tests for the service layer, document input and export.
"""

import json

import pytest

from src.annotation_graph.documents import (
    DocumentSource,
    discover_documents,
    read_document,
    read_documents,
)
from src.annotation_graph.ego_network import EgoQuery
from src.annotation_graph.export import export_json, export_selection
from src.annotation_graph.models import Graph
from src.annotation_graph.service import AnnotationGraphService
from src.annotation_graph.store import create_graph_store, MemoryGraphStore
from src.annotation_graph.tree_walker import parse_document
from src.shared.exceptions import AggregationError, MalformedDocument

from samples import AGENT_DOCUMENT, MISSING_TEXT_DOCUMENT, SAMPLE_DOCUMENT


# ─── Document input ─────────────────────────────────────────


class TestDocuments:

    def test_discover_only_xml_sorted(self, tmp_path):
        (tmp_path / "b.xml").write_text(AGENT_DOCUMENT, encoding="utf-8")
        (tmp_path / "a.XML").write_text(SAMPLE_DOCUMENT, encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignore me", encoding="utf-8")

        paths = discover_documents(tmp_path)

        assert [p.name for p in paths] == ["a.XML", "b.xml"]

    def test_discover_missing_folder(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            discover_documents(tmp_path / "nope")

    async def test_read_documents_keeps_order(self, tmp_path):
        first = tmp_path / "one.xml"
        second = tmp_path / "two.xml"
        first.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
        second.write_text(AGENT_DOCUMENT, encoding="utf-8")

        docs = await read_documents([first, second])

        assert [d.name for d in docs] == ["one.xml", "two.xml"]
        assert docs[1].content == AGENT_DOCUMENT

    async def test_undecodable_document(self, tmp_path):
        good = tmp_path / "good.xml"
        bad = tmp_path / "bad.xml"
        good.write_text(AGENT_DOCUMENT, encoding="utf-8")
        bad.write_bytes(b"<OpenText><text><node id=\"\xff\"/></text></OpenText>")

        with pytest.raises(MalformedDocument) as exc_info:
            await read_document(bad)
        assert exc_info.value.document == "bad.xml"

        with pytest.raises(AggregationError) as exc_info:
            await read_documents([good, bad])
        assert [name for name, _ in exc_info.value.failures] == ["bad.xml"]


# ─── Export ─────────────────────────────────────────────────


class TestExport:

    def test_selection_keeps_selected_nodes_and_inner_edges(self):
        graph = parse_document(SAMPLE_DOCUMENT)

        exported = export_selection(graph, ["give", "teacher", "student"])

        assert [n["id"] for n in exported["nodes"]] == ["r", "a", "x"]
        # node_2 (book) is not selected, so node_2 -> x is dropped
        assert [(e["source"], e["target"]) for e in exported["edges"]] == [("r", "a")]

    def test_wire_keys(self):
        graph = parse_document(SAMPLE_DOCUMENT)

        node = export_selection(graph, ["book"])["nodes"][0]

        assert node == {
            "id": "node_2", "type": "Entity", "class": "N",
            "nuclearLemmas": "book", "values": "sg",
        }

    def test_empty_selection(self):
        graph = parse_document(SAMPLE_DOCUMENT)

        assert export_selection(graph, []) == {"nodes": [], "edges": []}

    def test_json_document(self):
        graph = parse_document(AGENT_DOCUMENT)

        assert json.loads(export_json(graph, [])) == {"nodes": [], "edges": []}


# ─── Service ────────────────────────────────────────────────


class TestAnnotationGraphService:

    async def test_load_documents_persists(self, service, memory_store):
        graph, stats = await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        assert graph.node_count == 4
        assert stats.upserted_edges == 3
        assert await memory_store.read_all() == graph
        assert await service.current_graph() is graph

    async def test_new_session_restores_from_store(self, service, memory_store, settings):
        graph, _ = await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        restored = AnnotationGraphService(memory_store, settings)

        assert await restored.current_graph() == graph

    async def test_failed_batch_leaves_store_untouched(self, service, memory_store):
        await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        with pytest.raises(AggregationError):
            await service.load_documents([
                DocumentSource("agent.xml", AGENT_DOCUMENT),
                DocumentSource("bad.xml", MISSING_TEXT_DOCUMENT),
            ])

        assert set((await memory_store.read_all()).nodes) == {"r", "a", "node_2", "x"}

    async def test_load_folder(self, service, tmp_path):
        (tmp_path / "agent.xml").write_text(AGENT_DOCUMENT, encoding="utf-8")

        graph, _ = await service.load_folder(tmp_path)

        assert set(graph.nodes) == {"r", "c1"}

    async def test_empty_folder_leaves_store_untouched(self, service, memory_store, tmp_path):
        await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        with pytest.raises(MalformedDocument, match="no documents"):
            await service.load_folder(tmp_path)

        assert (await memory_store.read_all()).node_count == 4
        assert (await service.current_graph()).node_count == 4

    async def test_undecodable_file_fails_folder_load(self, service, memory_store, tmp_path):
        await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])
        (tmp_path / "good.xml").write_text(AGENT_DOCUMENT, encoding="utf-8")
        (tmp_path / "bad.xml").write_bytes(b"<OpenText>\xff</OpenText>")

        with pytest.raises(AggregationError, match="bad.xml"):
            await service.load_folder(tmp_path)

        assert (await memory_store.read_all()).node_count == 4

    async def test_view_and_depth_limit(self, service):
        await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        view = await service.view(EgoQuery(center="x", depth=1))
        assert set(view.nodes) == {"x", "node_2"}

        with pytest.raises(ValueError):
            await service.view(EgoQuery(center="x", depth=service.settings.max_ego_depth + 1))

    async def test_filter_options(self, service):
        await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        options = await service.filter_options()

        assert options["node_types"] == ["Entity", "Event"]
        assert options["edge_types"] == ["Agent", "Recipient", "Theme"]
        assert options["lemmas"] == ["book", "give", "student", "teacher"]
        assert options["default_center"] == "r"

    async def test_clear(self, service, memory_store):
        await service.load_documents([DocumentSource("s.xml", SAMPLE_DOCUMENT)])

        await service.clear()

        assert await memory_store.read_all() == Graph()
        assert (await service.current_graph()).node_count == 0

    async def test_export(self, service):
        await service.load_documents([DocumentSource("a.xml", AGENT_DOCUMENT)])

        exported = await service.export(["missing"])

        assert exported == {"nodes": [], "edges": []}


class TestStoreFactory:

    def test_memory_backend(self, settings):
        assert isinstance(create_graph_store(settings), MemoryGraphStore)

    def test_unknown_backend(self, settings):
        settings.store_backend = "cassandra"

        with pytest.raises(ValueError):
            create_graph_store(settings)
