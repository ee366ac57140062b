"""In-process graph store, used as the default backend and in tests."""

from src.annotation_graph.models import Edge, Graph, Node
from src.annotation_graph.store.base import GraphStore


class MemoryGraphStore(GraphStore):
    """Dict-backed store that lives as long as the process."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, Edge] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    async def upsert_node(self, node: Node) -> None:
        self._nodes[node.id] = node

    async def delete_node(self, node_id: str) -> None:
        self._nodes.pop(node_id, None)

    async def upsert_edge(self, edge: Edge) -> None:
        self._edges[edge.id] = edge

    async def delete_edge(self, edge_id: str) -> None:
        self._edges.pop(edge_id, None)

    async def read_all(self) -> Graph:
        return Graph(nodes=self._nodes, edges=list(self._edges.values()))

    async def clear(self) -> None:
        self._nodes.clear()
        self._edges.clear()
