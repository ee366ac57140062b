"""Persistence backends for the annotation graph."""

from src.annotation_graph.store.base import GraphStore
from src.annotation_graph.store.factory import create_graph_store
from src.annotation_graph.store.memory import MemoryGraphStore

__all__ = [
    "GraphStore",
    "MemoryGraphStore",
    "create_graph_store",
]
