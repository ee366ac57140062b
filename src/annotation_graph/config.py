"""Annotation graph service configuration."""

from src.shared.config import BaseServiceSettings


class AnnotationGraphSettings(BaseServiceSettings):
    """Settings specific to parsing, ego extraction and reconciliation."""

    max_concurrent_documents: int = 10
    document_suffix: str = ".xml"
    default_ego_depth: int = 1
    max_ego_depth: int = 5
    # Match persisted edges on (source, target, type) instead of (source, target)
    match_edge_type: bool = False

    class Config(BaseServiceSettings.Config):
        env_prefix = "ANNOTATION_GRAPH_"
