"""Annotation graph core: tree walker, merger, ego-network extractor and reconciler."""

from src.annotation_graph.ego_network import EgoQuery, extract_ego_network, render_view
from src.annotation_graph.merger import merge_graphs, parse_documents
from src.annotation_graph.models import Edge, Graph, Node
from src.annotation_graph.reconciler import reconcile
from src.annotation_graph.service import AnnotationGraphService
from src.annotation_graph.tree_walker import parse_document, walk_tree

__all__ = [
    "Node",
    "Edge",
    "Graph",
    "EgoQuery",
    "parse_document",
    "walk_tree",
    "merge_graphs",
    "parse_documents",
    "extract_ego_network",
    "render_view",
    "reconcile",
    "AnnotationGraphService",
]
