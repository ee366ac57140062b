"""
Ego-Network Extractor

Bounded bidirectional expansion around a centre node, computed over a
type-filtered view of the graph. Pure and synchronous: it works on an
in-memory Graph and never touches the store.

Traversal runs level by level, so every node is reached at its shortest
hop distance and the resulting node set does not depend on edge order.
Each level rescans the full edge list (O(V·E)), which is fine at
single-document scale.

Node and edge filters are applied independently. An edge whose endpoint
was dropped by the node filter survives the edge filter on its own and
can still be traversed and returned with a dangling endpoint.

The returned edges are the induced subgraph on the reached nodes: every
filtered edge whose endpoints were both reached is kept, including an
edge between two nodes at the depth limit that the expansion itself
never followed.
"""

import logging
from dataclasses import dataclass, field
from typing import Collection

from src.annotation_graph.models import Edge, Graph

logger = logging.getLogger("annotation-graph.ego_network")


@dataclass(frozen=True)
class EgoQuery:
    """Parameters of a rendered view: filters plus an optional ego centre."""

    node_types: frozenset[str] = field(default_factory=frozenset)
    edge_types: frozenset[str] = field(default_factory=frozenset)
    center: str | None = None
    depth: int = 1


def _edge_type_key(edge: Edge) -> str:
    return edge.type or ""


def apply_filters(
    graph: Graph,
    node_types: Collection[str] = (),
    edge_types: Collection[str] = (),
) -> Graph:
    """
    Keep only nodes whose type is in ``node_types`` and edges whose type is
    in ``edge_types``. An empty allow-list disables that filter. Untyped
    edges match the empty string.
    """
    nodes = graph.nodes
    edges = graph.edges
    if node_types:
        nodes = {nid: n for nid, n in nodes.items() if n.type in node_types}
    if edge_types:
        edges = tuple(e for e in edges if _edge_type_key(e) in edge_types)
    return Graph(nodes=nodes, edges=edges)


def collect_ego_ids(edges: Collection[Edge], center: str, depth: int) -> set[str]:
    """Return the ids reachable from ``center`` within ``depth`` hops, ignoring direction."""
    visited = {center}
    frontier = [center]
    for _ in range(depth):
        next_frontier: list[str] = []
        for node_id in frontier:
            for edge in edges:
                if edge.source == node_id:
                    far = edge.target
                elif edge.target == node_id:
                    far = edge.source
                else:
                    continue
                if far not in visited:
                    visited.add(far)
                    next_frontier.append(far)
        if not next_frontier:
            break
        frontier = next_frontier
    return visited


def extract_ego_network(
    graph: Graph,
    center: str,
    depth: int,
    node_types: Collection[str] = (),
    edge_types: Collection[str] = (),
) -> Graph:
    """
    Extract the induced subgraph within ``depth`` hops of ``center``.

    Args:
        graph: The merged graph.
        center: Id of the centre node.
        depth: Maximum hop distance (``0`` yields only the centre).
        node_types: Node-type allow-list (empty = all).
        edge_types: Edge-type allow-list (empty = all).

    Returns:
        Graph of the filtered nodes whose ids were reached, and the
        filtered edges (in input order) whose endpoints were both reached.

    Raises:
        ValueError: If depth is negative.
    """
    if depth < 0:
        raise ValueError(f"Ego depth must be >= 0, got {depth}")

    filtered = apply_filters(graph, node_types, edge_types)
    reached = collect_ego_ids(filtered.edges, center, depth)

    nodes = {nid: n for nid, n in filtered.nodes.items() if nid in reached}
    edges = [
        e for e in filtered.edges
        if depth > 0 and e.source in reached and e.target in reached
    ]
    logger.debug(
        "Ego network of %s at depth %d: %d nodes, %d edges",
        center, depth, len(nodes), len(edges),
    )
    return Graph(nodes=nodes, edges=edges)


def render_view(graph: Graph, query: EgoQuery) -> Graph:
    """Compute the graph a renderer should draw: filtered, and ego-bounded if a centre is set."""
    if query.center is None:
        return apply_filters(graph, query.node_types, query.edge_types)
    return extract_ego_network(
        graph, query.center, query.depth, query.node_types, query.edge_types,
    )
