"""
Selection Export

Builds the downloadable subset of a graph for a set of selected
nuclear lemmas.
"""

import json
from typing import Any, Collection

from src.annotation_graph.models import Graph

EXPORT_FILENAME = "graph_export.json"


def export_selection(graph: Graph, lemmas: Collection[str]) -> dict[str, list[dict[str, Any]]]:
    """
    Keep nodes whose ``nuclearLemmas`` is selected and edges whose
    endpoints are both kept nodes.

    Returns:
        ``{"nodes": [...], "edges": [...]}`` in graph order.
    """
    selected = set(lemmas)
    nodes = [n for n in graph.nodes.values() if n.nuclear_lemmas in selected]
    kept_ids = {n.id for n in nodes}
    edges = [e for e in graph.edges if e.source in kept_ids and e.target in kept_ids]
    return {
        "nodes": [n.to_dict() for n in nodes],
        "edges": [e.to_dict() for e in edges],
    }


def export_json(graph: Graph, lemmas: Collection[str]) -> str:
    """Serialise a selection export as an indented JSON document."""
    return json.dumps(export_selection(graph, lemmas), ensure_ascii=False, indent=2)
