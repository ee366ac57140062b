"""
Annotation Graph — MCP Server

Handles document loading and graph queries over the merged annotation graph.
Loading tools run in the background and return a job_id immediately.
Use get_load_status(job_id) to poll progress.

MCP Tools:
  - load_documents: Parse, merge and persist inline XML documents
  - load_folder: Same, for every document in a folder
  - get_load_status: Report job progress and graph statistics
  - get_ego_network: Filtered ego-network (or full filtered graph)
  - get_filter_options: Node/edge type and lemma vocabularies
  - export_selection: Nodes/edges for a set of selected lemmas

Run as:  python -m src.annotation_graph.server        (stdio transport)
"""

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timezone

from mcp.server.fastmcp import FastMCP

from src.annotation_graph.config import AnnotationGraphSettings
from src.annotation_graph.documents import DocumentSource
from src.annotation_graph.ego_network import EgoQuery
from src.annotation_graph.models import Graph
from src.annotation_graph.reconciler import ReconcileStats
from src.annotation_graph.service import AnnotationGraphService
from src.shared.exceptions import GraphServiceError
from src.shared.logging import generate_correlation_id, setup_logging

settings = AnnotationGraphSettings()
logger = setup_logging("annotation-graph.server", level=settings.log_level)


# ─── Job Management ──────────────────────────────────────────


@dataclass
class Job:
    """Tracks a background tool execution."""

    job_id: str
    tool_name: str
    status: str = "pending"           # pending -> running -> completed | failed
    progress: str = ""
    result: dict | None = None
    error: str | None = None
    created_at: str = ""
    completed_at: str | None = None


_jobs: dict[str, Job] = {}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _create_job(tool_name: str) -> Job:
    """Create and register a new background job."""
    job = Job(
        job_id=generate_correlation_id(),
        tool_name=tool_name,
        created_at=_now(),
    )
    _jobs[job.job_id] = job
    return job


def _job_to_dict(job: Job) -> dict:
    """Serialize a Job for JSON output."""
    d = {
        "job_id": job.job_id,
        "tool_name": job.tool_name,
        "status": job.status,
        "progress": job.progress,
        "created_at": job.created_at,
        "completed_at": job.completed_at,
    }
    if job.result is not None:
        d["result"] = job.result
    if job.error is not None:
        d["error"] = job.error
    return d


def _load_summary(graph: Graph, stats: ReconcileStats) -> dict:
    return {
        "nodes": graph.node_count,
        "edges": graph.edge_count,
        "reconcile": stats.to_dict(),
    }


# ─── FastMCP setup ───────────────────────────────────────────


mcp = FastMCP("AnnotationGraph")


# ─── Shared resources (lazy init) ────────────────────────────


_service: AnnotationGraphService | None = None


async def _get_service() -> AnnotationGraphService:
    """Lazy-initialise the store and service on first use."""
    global _service
    if _service is None:
        _service = await AnnotationGraphService.create(settings)
    return _service


# ─── Background workers ─────────────────────────────────────


async def _run_load_documents_job(job: Job, documents: list[DocumentSource]) -> None:
    """Parse, merge and reconcile a document batch, updating job progress."""
    try:
        job.status = "running"
        job.progress = f"Parsing {len(documents)} document(s)..."
        service = await _get_service()

        graph, stats = await service.load_documents(documents)

        job.result = _load_summary(graph, stats)
        job.status = "completed"
        job.progress = "Load complete"
        job.completed_at = _now()
        logger.info("[%s] Loaded %d document(s): %s", job.job_id, len(documents), job.result)

    except Exception as e:
        logger.error("load_documents job failed: %s", e, exc_info=True)
        job.status = "failed"
        job.error = str(e)
        job.completed_at = _now()


async def _run_load_folder_job(job: Job, folder: str) -> None:
    """Load every document in a folder, updating job progress."""
    try:
        job.status = "running"
        job.progress = f"Reading documents from {folder}..."
        service = await _get_service()

        graph, stats = await service.load_folder(folder)

        job.result = {"folder": folder, **_load_summary(graph, stats)}
        job.status = "completed"
        job.progress = "Load complete"
        job.completed_at = _now()
        logger.info("[%s] Loaded folder %s: %s", job.job_id, folder, job.result)

    except Exception as e:
        logger.error("load_folder job failed: %s", e, exc_info=True)
        job.status = "failed"
        job.error = str(e)
        job.completed_at = _now()


# ─── MCP Tool 1 ─────────────────────────────────────────────


@mcp.tool()
async def load_documents(documents: list[dict]) -> str:
    """Parse, merge and persist OpenText XML documents.

    Every document is parsed concurrently; if any one fails the whole batch
    fails and the store is left untouched.  On success the store is
    reconciled with the merged graph.

    Returns a job_id — use get_load_status to poll.

    Args:
        documents: List of {"name": ..., "content": <xml text>} objects.
    """
    sources = [
        DocumentSource(name=d.get("name") or f"document_{i}", content=d["content"])
        for i, d in enumerate(documents)
    ]
    job = _create_job("load_documents")
    asyncio.create_task(_run_load_documents_job(job, sources))
    return json.dumps({"job_id": job.job_id, "status": "pending"})


# ─── MCP Tool 2 ─────────────────────────────────────────────


@mcp.tool()
async def load_folder(folder: str) -> str:
    """Parse, merge and persist every XML document in a folder.

    Returns a job_id — use get_load_status to poll.

    Args:
        folder: Path of a directory containing .xml documents.
    """
    job = _create_job("load_folder")
    asyncio.create_task(_run_load_folder_job(job, folder))
    return json.dumps({"job_id": job.job_id, "status": "pending"})


# ─── MCP Tool 3 ─────────────────────────────────────────────


@mcp.tool()
async def get_load_status(job_id: str = "") -> str:
    """Check job progress and graph statistics.

    If job_id is provided, returns that job's status, progress message,
    and result (if completed) or error (if failed).  If job_id is empty,
    returns all jobs plus current node and edge counts.

    Args:
        job_id: ID of a specific job to check.  Empty returns overview.
    """
    if job_id:
        job = _jobs.get(job_id)
        if job is None:
            return json.dumps({"error": f"Job '{job_id}' not found"})
        return json.dumps(_job_to_dict(job), default=str)

    overview: dict = {
        "jobs": [_job_to_dict(j) for j in _jobs.values()],
    }
    try:
        graph = await (await _get_service()).current_graph()
        overview["node_count"] = graph.node_count
        overview["edge_count"] = graph.edge_count
    except GraphServiceError as e:
        overview["graph_error"] = str(e)

    return json.dumps(overview, default=str)


# ─── MCP Tool 4 ─────────────────────────────────────────────


@mcp.tool()
async def get_ego_network(
    center: str = "",
    depth: int = 1,
    node_types: list[str] | None = None,
    edge_types: list[str] | None = None,
) -> str:
    """Return the graph a client should draw.

    Filters by node and edge type (empty = no filter), then, if a centre
    is given, keeps only the nodes within `depth` hops of it and the edges
    between them.

    Args:
        center: Id of the ego centre.  Empty returns the full filtered graph.
        depth: Maximum hop distance from the centre.
        node_types: Node-type allow-list.
        edge_types: Edge-type allow-list.
    """
    query = EgoQuery(
        node_types=frozenset(node_types or ()),
        edge_types=frozenset(edge_types or ()),
        center=center or None,
        depth=depth,
    )
    try:
        view = await (await _get_service()).view(query)
    except (GraphServiceError, ValueError) as e:
        return json.dumps({"error": str(e)})
    return json.dumps(view.to_dict())


# ─── MCP Tool 5 ─────────────────────────────────────────────


@mcp.tool()
async def get_filter_options() -> str:
    """List node types, edge types and lemmas present in the current graph."""
    try:
        options = await (await _get_service()).filter_options()
    except GraphServiceError as e:
        return json.dumps({"error": str(e)})
    return json.dumps(options)


# ─── MCP Tool 6 ─────────────────────────────────────────────


@mcp.tool()
async def export_selection(lemmas: list[str]) -> str:
    """Export the nodes whose nuclear lemmas are selected, and the edges between them.

    Args:
        lemmas: Selected nuclear lemma values.
    """
    try:
        exported = await (await _get_service()).export(lemmas)
    except GraphServiceError as e:
        return json.dumps({"error": str(e)})
    return json.dumps(exported, ensure_ascii=False)


# ─── Entry point ─────────────────────────────────────────────


if __name__ == "__main__":
    logger.info("Starting Annotation Graph MCP server (stdio transport)")
    mcp.run(transport="stdio")
