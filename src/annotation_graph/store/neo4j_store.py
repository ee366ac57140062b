"""
Neo4j Graph Store

Persists the annotation graph in Neo4j as two keyed record collections:
``:AnnotationNode {id, ...}`` and ``:AnnotationEdge {id, source, target, ...}``.

Edges are stored as records rather than relationships because an edge
may be persisted independently of its endpoint nodes. Every driver
failure surfaces as ``StoreIOError``.
"""

import logging
from typing import Any

from src.annotation_graph.models import Edge, Graph, Node
from src.annotation_graph.store.base import GraphStore
from src.shared.database import Neo4jHandler
from src.shared.exceptions import StoreIOError

logger = logging.getLogger("annotation-graph.neo4j_store")

CONSTRAINTS = [
    "CREATE CONSTRAINT annotation_node_id IF NOT EXISTS "
    "FOR (n:AnnotationNode) REQUIRE n.id IS UNIQUE",
    "CREATE CONSTRAINT annotation_edge_id IF NOT EXISTS "
    "FOR (e:AnnotationEdge) REQUIRE e.id IS UNIQUE",
]

UPSERT_NODE = """
MERGE (n:AnnotationNode {id: $id})
SET n = $props
"""

DELETE_NODE = "MATCH (n:AnnotationNode {id: $id}) DELETE n"

UPSERT_EDGE = """
MERGE (e:AnnotationEdge {id: $id})
SET e = $props
"""

DELETE_EDGE = "MATCH (e:AnnotationEdge {id: $id}) DELETE e"

READ_NODES = "MATCH (n:AnnotationNode) RETURN properties(n) AS props"

READ_EDGES = "MATCH (e:AnnotationEdge) RETURN properties(e) AS props ORDER BY e.seq, e.id"

CLEAR = "MATCH (n) WHERE n:AnnotationNode OR n:AnnotationEdge DETACH DELETE n"


def _node_props(node: Node) -> dict[str, Any]:
    props = {
        "id": node.id,
        "type": node.type,
        "class": node.node_class,
        "nuclearLemmas": node.nuclear_lemmas,
        "values": node.values,
    }
    # Neo4j drops null-valued properties on SET anyway
    return {k: v for k, v in props.items() if v is not None}


def _edge_props(edge: Edge) -> dict[str, Any]:
    props = edge.to_dict()
    seq = edge.id.rsplit("_", 1)[-1]
    if seq.isdigit():
        props["seq"] = int(seq)
    return {k: v for k, v in props.items() if v is not None}


class Neo4jGraphStore(GraphStore):
    """Graph store backed by a shared ``Neo4jHandler``."""

    def __init__(self, handler: Neo4jHandler):
        self._handler = handler

    @property
    def backend_name(self) -> str:
        return "neo4j"

    async def connect(self) -> None:
        await self._handler.connect()
        await self.ensure_schema()

    async def ensure_schema(self) -> None:
        """Create id uniqueness constraints if they don't exist."""
        for stmt in CONSTRAINTS:
            try:
                await self._handler.write(stmt)
            except Exception as e:
                logger.debug(f"Schema statement skipped: {e}")
        logger.info("Neo4j annotation schema ensured")

    async def _write(self, query: str, params: dict | None = None) -> None:
        try:
            await self._handler.write(query, params)
        except Exception as e:
            raise StoreIOError(f"Neo4j write failed: {e}") from e

    async def _run(self, query: str, params: dict | None = None) -> list[dict]:
        try:
            return await self._handler.run(query, params)
        except Exception as e:
            raise StoreIOError(f"Neo4j read failed: {e}") from e

    async def upsert_node(self, node: Node) -> None:
        await self._write(UPSERT_NODE, {"id": node.id, "props": _node_props(node)})

    async def delete_node(self, node_id: str) -> None:
        await self._write(DELETE_NODE, {"id": node_id})

    async def upsert_edge(self, edge: Edge) -> None:
        await self._write(UPSERT_EDGE, {"id": edge.id, "props": _edge_props(edge)})

    async def delete_edge(self, edge_id: str) -> None:
        await self._write(DELETE_EDGE, {"id": edge_id})

    async def read_all(self) -> Graph:
        node_rows = await self._run(READ_NODES)
        edge_rows = await self._run(READ_EDGES)
        return Graph.build(
            (Node.from_dict(row["props"]) for row in node_rows),
            (Edge.from_dict(row["props"]) for row in edge_rows),
        )

    async def clear(self) -> None:
        await self._write(CLEAR)
        logger.warning("Cleared persisted annotation graph")

    async def close(self) -> None:
        try:
            await self._handler.close()
        except Exception as e:
            logger.warning("Ignoring error while closing Neo4j store: %s", e)
