"""
Annotation Graph Models

Immutable value types shared by the tree walker, merger, ego-network
extractor and reconciler. Serialised keys follow the wire shape consumed
by the rendering client (``class``, ``nuclearLemmas``).
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class Node:
    """An annotated unit with a type/class label and lemma text."""

    id: str
    type: str | None = None
    node_class: str | None = None
    nuclear_lemmas: str | None = None
    values: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type,
            "class": self.node_class,
            "nuclearLemmas": self.nuclear_lemmas,
        }
        if self.values is not None:
            data["values"] = self.values
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Node":
        return cls(
            id=data["id"],
            type=data.get("type"),
            node_class=data.get("class"),
            nuclear_lemmas=data.get("nuclearLemmas"),
            values=data.get("values"),
        )


@dataclass(frozen=True)
class Edge:
    """A directed, optionally typed relation from a parent to a child node."""

    id: str
    source: str
    target: str
    type: str | None = None
    function: str | None = None

    @property
    def endpoints(self) -> tuple[str, str]:
        return (self.source, self.target)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "function": self.function,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Edge":
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            type=data.get("type"),
            function=data.get("function"),
        )


@dataclass(frozen=True)
class Graph:
    """
    A flat annotation graph: node map keyed by id plus edges in discovery order.

    Instances are never mutated after construction; a re-parse produces
    a new Graph.
    """

    nodes: Mapping[str, Node] = field(default_factory=dict)
    edges: tuple[Edge, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(self, "edges", tuple(self.edges))

    @classmethod
    def build(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> "Graph":
        """Build a graph from a node sequence; later duplicates win."""
        return cls(nodes={node.id: node for node in nodes}, edges=tuple(edges))

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": {node_id: node.to_dict() for node_id, node in self.nodes.items()},
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Graph":
        raw_nodes = data.get("nodes", {})
        if isinstance(raw_nodes, Mapping):
            raw_nodes = raw_nodes.values()
        return cls.build(
            (Node.from_dict(n) for n in raw_nodes),
            (Edge.from_dict(e) for e in data.get("edges", [])),
        )


EMPTY_GRAPH = Graph()
