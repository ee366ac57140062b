"""Select a graph store backend from settings."""

import logging

from src.annotation_graph.store.base import GraphStore
from src.annotation_graph.store.memory import MemoryGraphStore
from src.shared.config import BaseServiceSettings

logger = logging.getLogger("annotation-graph.store")


def create_graph_store(settings: BaseServiceSettings) -> GraphStore:
    """
    Build the configured store. The store is not connected yet;
    call ``await store.connect()`` before use.

    Raises:
        ValueError: If the backend name is unknown.
    """
    backend = settings.store_backend.lower()
    if backend == "memory":
        store: GraphStore = MemoryGraphStore()
    elif backend == "neo4j":
        from src.annotation_graph.store.neo4j_store import Neo4jGraphStore
        from src.shared.database import Neo4jHandler

        store = Neo4jGraphStore(Neo4jHandler.from_settings(settings))
    else:
        raise ValueError(f"Unknown store backend: {settings.store_backend!r}")

    logger.info("Using %s graph store", store.backend_name)
    return store
