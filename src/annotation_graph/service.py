"""
Annotation Graph Service

Ties the pipeline together for the MCP server and the HTTP gateway:
parse a document batch, merge, reconcile into the store, and answer
view/export queries over the merged graph.
"""

import logging
from pathlib import Path
from typing import Any, Collection, Sequence

from src.annotation_graph.config import AnnotationGraphSettings
from src.annotation_graph.documents import (
    DocumentSource,
    discover_documents,
    read_documents,
)
from src.annotation_graph.ego_network import EgoQuery, render_view
from src.annotation_graph.export import export_selection
from src.annotation_graph.merger import parse_documents
from src.annotation_graph.models import Graph
from src.annotation_graph.reconciler import ReconcileStats, reconcile
from src.annotation_graph.store import GraphStore, create_graph_store

logger = logging.getLogger("annotation-graph.service")


class AnnotationGraphService:
    """
    Owns a graph store and the most recently loaded merged graph.

    The merged graph is kept in memory for view and export queries;
    when nothing has been loaded in this process, the store snapshot
    from a previous session is used instead.
    """

    def __init__(
        self,
        store: GraphStore,
        settings: AnnotationGraphSettings | None = None,
    ):
        self._store = store
        self._settings = settings or AnnotationGraphSettings()
        self._graph: Graph | None = None

    @classmethod
    async def create(cls, settings: AnnotationGraphSettings | None = None) -> "AnnotationGraphService":
        """Build the configured store, connect it, and return a service."""
        settings = settings or AnnotationGraphSettings()
        store = create_graph_store(settings)
        await store.connect()
        return cls(store, settings)

    @property
    def store(self) -> GraphStore:
        return self._store

    @property
    def settings(self) -> AnnotationGraphSettings:
        return self._settings

    # ─── Loading ──────────────────────────────────────────

    async def load_documents(self, documents: Sequence[DocumentSource]) -> tuple[Graph, ReconcileStats]:
        """
        Parse, merge and persist a document batch.

        Raises:
            AggregationError: If any document fails to parse (store untouched).
            StoreIOError: If reconciliation fails part-way.
        """
        graph = await parse_documents(
            documents, max_concurrency=self._settings.max_concurrent_documents,
        )
        stats = await reconcile(
            graph, self._store, match_edge_type=self._settings.match_edge_type,
        )
        self._graph = graph
        return graph, stats

    async def load_paths(self, paths: Sequence[str | Path]) -> tuple[Graph, ReconcileStats]:
        documents = await read_documents(list(paths))
        return await self.load_documents(documents)

    async def load_folder(self, folder: str | Path) -> tuple[Graph, ReconcileStats]:
        """Load every document with the configured suffix in a folder."""
        paths = discover_documents(folder, self._settings.document_suffix)
        return await self.load_paths(paths)

    # ─── Queries ──────────────────────────────────────────

    async def current_graph(self) -> Graph:
        """Return the last loaded graph, or the persisted snapshot."""
        if self._graph is None:
            self._graph = await self._store.read_all()
            logger.info(
                "Restored graph from %s store: %d nodes, %d edges",
                self._store.backend_name, self._graph.node_count, self._graph.edge_count,
            )
        return self._graph

    async def view(self, query: EgoQuery) -> Graph:
        """Filtered graph, bounded to the ego network when a centre is set."""
        if query.depth > self._settings.max_ego_depth:
            raise ValueError(
                f"Ego depth {query.depth} exceeds maximum {self._settings.max_ego_depth}"
            )
        return render_view(await self.current_graph(), query)

    async def filter_options(self) -> dict[str, Any]:
        """Vocabularies for building filters and selections in a client."""
        graph = await self.current_graph()
        return {
            "node_types": sorted({n.type for n in graph.nodes.values() if n.type}),
            "edge_types": sorted({e.type for e in graph.edges if e.type}),
            "lemmas": sorted({n.nuclear_lemmas for n in graph.nodes.values() if n.nuclear_lemmas}),
            "default_center": self.default_center(graph),
            "default_depth": self._settings.default_ego_depth,
        }

    @staticmethod
    def default_center(graph: Graph) -> str | None:
        """The first node of the graph, used as the initial ego centre."""
        return next(iter(graph.nodes), None)

    async def export(self, lemmas: Collection[str]) -> dict[str, list[dict[str, Any]]]:
        return export_selection(await self.current_graph(), lemmas)

    # ─── Maintenance ──────────────────────────────────────

    async def clear(self) -> None:
        """Wipe the store and forget the in-memory graph."""
        await self._store.clear()
        self._graph = Graph()

    async def close(self) -> None:
        """Close the store. Close failures are logged, never raised."""
        try:
            await self._store.close()
        except Exception as e:
            logger.warning("Ignoring error while closing %s store: %s", self._store.backend_name, e)
