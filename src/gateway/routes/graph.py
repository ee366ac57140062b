"""
Graph routes — document loading, graph views, filters and export.
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from src.annotation_graph.documents import DocumentSource
from src.annotation_graph.ego_network import EgoQuery
from src.annotation_graph.export import EXPORT_FILENAME, export_json
from src.annotation_graph.service import AnnotationGraphService
from src.shared.logging import setup_logging

logger = setup_logging("gateway.routes.graph", level="INFO")

router = APIRouter()


def _service(request: Request) -> AnnotationGraphService:
    return request.app.state.graph_service


# ─── Request/Response Models ────────────────────────────────


class DocumentPayload(BaseModel):
    """A single OpenText XML document."""

    name: str = Field(..., description="Document name (e.g. file name)")
    content: str = Field(..., description="Raw XML text")


class LoadRequest(BaseModel):
    """Request model for POST /api/documents."""

    documents: list[DocumentPayload] = Field(
        ..., min_length=1, description="Documents to parse, merge and persist"
    )


class LoadResponse(BaseModel):
    """Response model for POST /api/documents."""

    documents: int = Field(..., description="Number of documents loaded")
    nodes: int = Field(..., description="Nodes in the merged graph")
    edges: int = Field(..., description="Edges in the merged graph")
    reconcile: dict[str, int] = Field(..., description="Store operations applied")


class ViewRequest(BaseModel):
    """Request model for POST /api/graph/view."""

    node_types: list[str] = Field(default_factory=list, description="Node-type allow-list")
    edge_types: list[str] = Field(default_factory=list, description="Edge-type allow-list")
    center: str | None = Field(None, description="Ego centre id; null for the full graph")
    depth: int = Field(1, ge=0, description="Ego depth in hops")


class ExportRequest(BaseModel):
    """Request model for POST /api/graph/export."""

    lemmas: list[str] = Field(..., description="Selected nuclear lemma values")


# ─── Routes ─────────────────────────────────────────────────


@router.post("/documents", response_model=LoadResponse)
async def load_documents(request: Request, body: LoadRequest) -> LoadResponse:
    """Parse, merge and persist a batch of documents."""
    sources = [DocumentSource(name=d.name, content=d.content) for d in body.documents]
    logger.info(f"Loading {len(sources)} document(s)")
    graph, stats = await _service(request).load_documents(sources)
    return LoadResponse(
        documents=len(sources),
        nodes=graph.node_count,
        edges=graph.edge_count,
        reconcile=stats.to_dict(),
    )


@router.get("/graph")
async def get_graph(request: Request) -> dict[str, Any]:
    """Return the current merged graph."""
    graph = await _service(request).current_graph()
    return graph.to_dict()


@router.delete("/graph")
async def clear_graph(request: Request) -> dict[str, str]:
    """Delete everything from the store."""
    await _service(request).clear()
    return {"status": "cleared"}


@router.post("/graph/view")
async def get_view(request: Request, body: ViewRequest) -> dict[str, Any]:
    """Return the filtered graph, bounded to an ego network when a centre is set."""
    service = _service(request)
    if body.center is not None:
        graph = await service.current_graph()
        if body.center not in graph.nodes:
            raise HTTPException(status_code=404, detail=f"Unknown node: {body.center}")

    query = EgoQuery(
        node_types=frozenset(body.node_types),
        edge_types=frozenset(body.edge_types),
        center=body.center,
        depth=body.depth,
    )
    try:
        view = await service.view(query)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return view.to_dict()


@router.get("/graph/filters")
async def get_filters(request: Request) -> dict[str, Any]:
    """Return node/edge type and lemma vocabularies plus the default ego centre."""
    return await _service(request).filter_options()


@router.post("/graph/export")
async def export_graph(request: Request, body: ExportRequest) -> Response:
    """Download the selected lemmas' nodes and the edges between them as JSON."""
    graph = await _service(request).current_graph()
    return Response(
        content=export_json(graph, body.lemmas),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
