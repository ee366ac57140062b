"""
Shared fixtures: memory-backed store, settings and service.
"""

import pytest

from src.annotation_graph.config import AnnotationGraphSettings
from src.annotation_graph.service import AnnotationGraphService
from src.annotation_graph.store import MemoryGraphStore


@pytest.fixture
def settings() -> AnnotationGraphSettings:
    return AnnotationGraphSettings(store_backend="memory", max_concurrent_documents=4)


@pytest.fixture
def memory_store() -> MemoryGraphStore:
    return MemoryGraphStore()


@pytest.fixture
def service(memory_store, settings) -> AnnotationGraphService:
    return AnnotationGraphService(memory_store, settings)
