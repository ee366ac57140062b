"""
Health route — GET /api/health.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from src.shared.logging import setup_logging

logger = setup_logging("gateway.routes.health", level="INFO")

router = APIRouter()


class HealthResponse(BaseModel):
    """Gateway and store health."""

    status: str = Field(..., description="healthy or unhealthy")
    store_backend: str = Field(..., description="Configured graph store backend")
    node_count: int | None = Field(None, description="Nodes in the current graph")
    edge_count: int | None = Field(None, description="Edges in the current graph")
    error: str | None = Field(None, description="Error message if unhealthy")


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report whether the current graph can be read."""
    service = request.app.state.graph_service
    try:
        graph = await service.current_graph()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return HealthResponse(
            status="unhealthy",
            store_backend=service.store.backend_name,
            error=str(e),
        )
    return HealthResponse(
        status="healthy",
        store_backend=service.store.backend_name,
        node_count=graph.node_count,
        edge_count=graph.edge_count,
    )
