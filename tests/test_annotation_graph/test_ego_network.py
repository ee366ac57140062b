"""
Unit tests for ego-network extraction and type filters.
"""

import pytest

from src.annotation_graph.ego_network import (
    EgoQuery,
    apply_filters,
    extract_ego_network,
    render_view,
)
from src.annotation_graph.models import Edge, Graph, Node


def _graph(nodes: dict[str, str], edges: list[tuple[str, str, str | None]]) -> Graph:
    return Graph.build(
        (Node(id=nid, type=ntype) for nid, ntype in nodes.items()),
        (Edge(id=f"edge_{i}", source=s, target=t, type=et) for i, (s, t, et) in enumerate(edges)),
    )


@pytest.fixture
def chain() -> Graph:
    """a -> b -> c -> d, plus an unconnected island e -> f."""
    return _graph(
        {"a": "Event", "b": "Entity", "c": "Entity", "d": "Event", "e": "Event", "f": "Entity"},
        [("a", "b", "Agent"), ("b", "c", "Theme"), ("c", "d", None), ("e", "f", "Agent")],
    )


class TestExtractEgoNetwork:
    """Bounded bidirectional traversal."""

    def test_depth_zero_is_center_only(self, chain):
        ego = extract_ego_network(chain, "b", 0)

        assert set(ego.nodes) == {"b"}
        assert ego.edges == ()

    def test_depth_one_follows_both_directions(self, chain):
        ego = extract_ego_network(chain, "b", 1)

        assert set(ego.nodes) == {"a", "b", "c"}
        assert [e.id for e in ego.edges] == ["edge_0", "edge_1"]

    def test_depth_two(self, chain):
        ego = extract_ego_network(chain, "b", 2)

        assert set(ego.nodes) == {"a", "b", "c", "d"}
        assert ego.edge_count == 3

    def test_large_depth_is_connected_component(self, chain):
        ego = extract_ego_network(chain, "a", 3)

        assert set(ego.nodes) == {"a", "b", "c", "d"}
        assert extract_ego_network(chain, "a", 10) == ego

    def test_edges_between_boundary_nodes_included(self):
        triangle = _graph(
            {"c": "Event", "x": "Entity", "y": "Entity"},
            [("c", "x", None), ("c", "y", None), ("x", "y", None)],
        )

        ego = extract_ego_network(triangle, "c", 1)

        assert ego.edge_count == 3

    def test_node_set_independent_of_edge_order(self):
        edges = [("a", "b", None), ("b", "c", None), ("a", "c", None), ("c", "d", None)]
        nodes = {n: "Entity" for n in "abcd"}

        forward = extract_ego_network(_graph(nodes, edges), "a", 1)
        backward = extract_ego_network(_graph(nodes, list(reversed(edges))), "a", 1)

        assert set(forward.nodes) == set(backward.nodes) == {"a", "b", "c"}

    def test_unknown_center_yields_empty_graph(self, chain):
        ego = extract_ego_network(chain, "missing", 2)

        assert ego.node_count == 0
        assert ego.edge_count == 0

    def test_negative_depth_rejected(self, chain):
        with pytest.raises(ValueError):
            extract_ego_network(chain, "a", -1)


class TestFilters:
    """Node and edge type allow-lists."""

    def test_empty_filters_keep_everything(self, chain):
        assert apply_filters(chain) == chain

    def test_node_type_filter(self, chain):
        filtered = apply_filters(chain, node_types={"Event"})

        assert set(filtered.nodes) == {"a", "d", "e"}
        assert filtered.edge_count == chain.edge_count

    def test_edge_type_filter(self, chain):
        filtered = apply_filters(chain, edge_types={"Agent"})

        assert [e.id for e in filtered.edges] == ["edge_0", "edge_3"]

    def test_untyped_edges_match_empty_string(self, chain):
        filtered = apply_filters(chain, edge_types={""})

        assert [e.id for e in filtered.edges] == ["edge_2"]

    def test_edge_filter_limits_traversal(self, chain):
        ego = extract_ego_network(chain, "a", 5, edge_types={"Agent"})

        assert set(ego.nodes) == {"a", "b"}

    def test_filtered_node_leaves_dangling_edge(self, chain):
        ego = extract_ego_network(chain, "b", 1, node_types={"Entity"})

        assert set(ego.nodes) == {"b", "c"}
        # a was filtered out but the edge pointing at it was not
        assert ("a", "b") in [e.endpoints for e in ego.edges]


class TestRenderView:
    """Full-graph vs ego views."""

    def test_no_center_returns_filtered_graph(self, chain):
        view = render_view(chain, EgoQuery(node_types=frozenset({"Entity"})))

        assert set(view.nodes) == {"b", "c", "f"}

    def test_center_returns_ego_network(self, chain):
        view = render_view(chain, EgoQuery(center="e", depth=1))

        assert set(view.nodes) == {"e", "f"}
        assert [e.id for e in view.edges] == ["edge_3"]
