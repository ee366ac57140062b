"""
Graph Store Reconciler — diff-sync of a freshly parsed graph into the store.

Compares the desired graph (new parse) against the store's current
snapshot, deletes what disappeared, then upserts everything desired.

Nodes are matched by id. Persisted edges are kept if their endpoint pair
still occurs in the desired edge list (optionally also requiring the same
edge type). Desired edges are written under their own ids, so an edge that
moved between endpoints or changed id leaves its predecessor in place
until that predecessor's endpoint pair disappears.

The pass is not atomic: a store failure aborts the remaining steps and
already-applied writes stay applied. The next full load converges again.
"""

import logging
from dataclasses import asdict, dataclass, field

from src.annotation_graph.models import Edge, Graph
from src.annotation_graph.store.base import GraphStore

logger = logging.getLogger("annotation-graph.reconciler")


# ─── Data Structures ────────────────────────────────────────


@dataclass
class GraphDiff:
    """Ids to delete from the store, computed before any write."""

    deleted_nodes: list[str] = field(default_factory=list)
    deleted_edges: list[str] = field(default_factory=list)


@dataclass
class ReconcileStats:
    """Counts of the operations applied in one reconciliation pass."""

    deleted_nodes: int = 0
    deleted_edges: int = 0
    upserted_nodes: int = 0
    upserted_edges: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


# ─── Core Diff Logic ────────────────────────────────────────


def _edge_key(edge: Edge, match_edge_type: bool) -> tuple:
    if match_edge_type:
        return (edge.source, edge.target, edge.type)
    return (edge.source, edge.target)


def compute_graph_diff(
    current: Graph,
    desired: Graph,
    match_edge_type: bool = False,
) -> GraphDiff:
    """
    Compare the persisted graph against the desired graph.

    Args:
        current: Snapshot read from the store.
        desired: Freshly parsed graph.
        match_edge_type: Also require equal edge type when matching
            persisted edges against desired ones.

    Returns:
        GraphDiff listing node ids and edge ids to delete.
    """
    diff = GraphDiff()

    for node_id in current.nodes:
        if node_id not in desired.nodes:
            diff.deleted_nodes.append(node_id)

    desired_keys = {_edge_key(e, match_edge_type) for e in desired.edges}
    for edge in current.edges:
        if _edge_key(edge, match_edge_type) not in desired_keys:
            diff.deleted_edges.append(edge.id)

    return diff


# ─── Main Entry Point ───────────────────────────────────────


async def reconcile(
    desired: Graph,
    store: GraphStore,
    match_edge_type: bool = False,
) -> ReconcileStats:
    """
    Align the store with the desired graph.

    Args:
        desired: The merged graph from the latest parse.
        store: Persistence backend to update.
        match_edge_type: See ``compute_graph_diff``.

    Returns:
        ReconcileStats with the count of each applied operation.

    Raises:
        StoreIOError: On any store read/write failure. Remaining steps
            are skipped and nothing is rolled back.
    """
    stats = ReconcileStats()

    # ── Phase 1: Read current state ──────────────────────────
    current = await store.read_all()
    diff = compute_graph_diff(current, desired, match_edge_type)

    logger.info(
        "Diff result — nodes: %d current, %d desired, -%d | edges: %d current, %d desired, -%d",
        current.node_count, desired.node_count, len(diff.deleted_nodes),
        current.edge_count, desired.edge_count, len(diff.deleted_edges),
    )

    # ── Phase 2: Deletions ───────────────────────────────────
    for node_id in diff.deleted_nodes:
        await store.delete_node(node_id)
        stats.deleted_nodes += 1

    for edge_id in diff.deleted_edges:
        await store.delete_edge(edge_id)
        stats.deleted_edges += 1

    # ── Phase 3: Upserts ─────────────────────────────────────
    for node in desired.nodes.values():
        await store.upsert_node(node)
        stats.upserted_nodes += 1

    for edge in desired.edges:
        await store.upsert_edge(edge)
        stats.upserted_edges += 1

    logger.info("Reconciliation complete — %s", stats.to_dict())
    return stats
