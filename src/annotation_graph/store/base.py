"""
Graph Store Base

Abstract persistence collaborator for the reconciler: two key-value
collections, nodes keyed by node id and edges keyed by edge id.
"""

from abc import ABC, abstractmethod

from src.annotation_graph.models import Edge, Graph, Node


class GraphStore(ABC):
    """Abstract base for graph persistence backends."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return backend identifier (e.g. 'memory', 'neo4j')."""

    async def connect(self) -> None:
        """Open backend resources if the backend needs it."""
        return None

    @abstractmethod
    async def upsert_node(self, node: Node) -> None:
        """Insert or fully replace a node keyed by its id."""

    @abstractmethod
    async def delete_node(self, node_id: str) -> None:
        """Delete a node by id (no-op if absent)."""

    @abstractmethod
    async def upsert_edge(self, edge: Edge) -> None:
        """Insert or fully replace an edge keyed by its id."""

    @abstractmethod
    async def delete_edge(self, edge_id: str) -> None:
        """Delete an edge by id (no-op if absent)."""

    @abstractmethod
    async def read_all(self) -> Graph:
        """Return a full snapshot of the persisted graph."""

    @abstractmethod
    async def clear(self) -> None:
        """Delete every persisted node and edge."""

    async def close(self) -> None:
        """Release backend resources."""
        return None
