"""
Markup Tree Walker

Depth-first descent over nested ``node``/``edge`` elements that flattens
one annotated document into a node map and an ordered edge list.

Each ``node`` element becomes a Node. The edge linking it to its parent
carries the type/function of the *visited* node's first ``edge`` wrapper,
so a node holds the metadata for the edge pointing into it. Children are
reached two ways: ``node`` elements directly under the node, then ``node``
elements nested inside its first ``edge`` wrapper.
"""

import logging
from dataclasses import dataclass, field

from src.annotation_graph.markup_tree import MarkupNode, locate_root, parse_markup
from src.annotation_graph.models import Edge, Graph, Node

logger = logging.getLogger("annotation-graph.tree_walker")

# Attribute names as they appear in the markup
ID_ATTR = "id"
TYPE_ATTR = "type"
CLASS_ATTR = "class"
LEMMAS_ATTR = "nuclear_lemmas"
VALUES_ATTR = "values"
FUNCTION_ATTR = "function"


@dataclass
class WalkState:
    """
    Accumulator threaded through a single walk.

    Synthesised ids come from the current sizes of ``nodes`` and
    ``edges``, so every walk numbers from zero independently.
    """

    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)

    def next_node_id(self) -> str:
        return f"node_{len(self.nodes)}"

    def next_edge_id(self) -> str:
        return f"edge_{len(self.edges)}"


class TreeWalker:
    """Visitor that converts a ``MarkupNode`` tree into a Graph."""

    def walk(self, root: MarkupNode) -> Graph:
        state = WalkState()
        self._visit(root, None, state)
        return Graph(nodes=state.nodes, edges=state.edges)

    def _visit(self, element: MarkupNode, parent_id: str | None, state: WalkState) -> None:
        attrs = element.attributes
        node_id = attrs.get(ID_ATTR) or state.next_node_id()

        state.nodes[node_id] = Node(
            id=node_id,
            type=attrs.get(TYPE_ATTR),
            node_class=attrs.get(CLASS_ATTR),
            nuclear_lemmas=attrs.get(LEMMAS_ATTR),
            values=attrs.get(VALUES_ATTR),
        )

        wrapper = element.edge_wrapper()

        if parent_id:
            wrapper_attrs = wrapper.attributes if wrapper is not None else {}
            state.edges.append(
                Edge(
                    id=state.next_edge_id(),
                    source=parent_id,
                    target=node_id,
                    type=wrapper_attrs.get(TYPE_ATTR),
                    function=wrapper_attrs.get(FUNCTION_ATTR),
                )
            )

        for child in element.child_nodes():
            self._visit(child, node_id, state)

        # Cross-references embedded inside the edge wrapper
        if wrapper is not None:
            for child in wrapper.child_nodes():
                self._visit(child, node_id, state)


def walk_tree(root: MarkupNode) -> Graph:
    """Flatten a located root node into a Graph."""
    return TreeWalker().walk(root)


def parse_document(text: str, name: str | None = None) -> Graph:
    """
    Parse one OpenText document into a Graph.

    Args:
        text: Raw XML document text.
        name: Optional document name, used in error messages and logs.

    Returns:
        The document's Graph.

    Raises:
        MalformedDocument: If the XML is ill-formed or the
            ``OpenText/text/node`` root path is absent.
    """
    element = parse_markup(text, name)
    graph = walk_tree(locate_root(element, name))
    logger.debug(
        "Parsed %s: %d nodes, %d edges",
        name or "<document>", graph.node_count, graph.edge_count,
    )
    return graph
