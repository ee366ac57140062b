"""
FastAPI Gateway — HTTP API layer.

External interface for the rendering client: load documents, fetch the
graph or a filtered ego view, list filter vocabularies and export a
lemma selection.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.annotation_graph.config import AnnotationGraphSettings
from src.annotation_graph.service import AnnotationGraphService
from src.gateway.config import GatewaySettings
from src.gateway.routes import graph, health
from src.shared.exceptions import (
    AggregationError,
    GraphServiceError,
    MalformedDocument,
    StoreIOError,
)
from src.shared.logging import setup_logging

# Global settings
settings = GatewaySettings()

logger = setup_logging("gateway.app", level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the FastAPI app.

    Connects the configured graph store on startup unless a service was
    already attached (tests), and closes it on shutdown.
    """
    logger.info("Starting FastAPI Gateway")

    if getattr(app.state, "graph_service", None) is None:
        app.state.graph_service = await AnnotationGraphService.create(AnnotationGraphSettings())

    logger.info(
        "Gateway initialized with %s store", app.state.graph_service.store.backend_name
    )

    yield

    logger.info("Shutting down FastAPI Gateway")
    await app.state.graph_service.close()
    app.state.graph_service = None


def _status_for(exc: GraphServiceError) -> int:
    if isinstance(exc, (MalformedDocument, AggregationError)):
        return 422
    if isinstance(exc, StoreIOError):
        return 503
    return 500


async def graph_error_handler(request: Request, exc: GraphServiceError) -> JSONResponse:
    """Report domain errors with their component tag and message."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = {"error": type(exc).__name__, "component": exc.component, "detail": exc.detail}
    if isinstance(exc, AggregationError):
        body["failures"] = [{"document": name, "reason": reason} for name, reason in exc.failures]
    return JSONResponse(status_code=_status_for(exc), content=body)


def create_app() -> FastAPI:
    """Build the gateway application."""
    app = FastAPI(
        title="Annotation Graph Gateway",
        description="Parse discourse annotation markup into a graph and explore ego networks",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GraphServiceError, graph_error_handler)

    app.include_router(graph.router, prefix="/api", tags=["Graph"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "Annotation Graph Gateway",
            "version": "0.1.0",
            "status": "operational",
            "endpoints": {
                "documents": "/api/documents",
                "graph": "/api/graph",
                "view": "/api/graph/view",
                "filters": "/api/graph/filters",
                "export": "/api/graph/export",
                "health": "/api/health",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.gateway.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )
