"""
Graph Assembly Merger

Combines per-document graphs into one aggregate graph and owns the
concurrent parse-then-join of a document batch.
"""

import asyncio
import dataclasses
import logging
from typing import Iterable, Sequence

from src.annotation_graph.documents import DocumentSource
from src.annotation_graph.models import Edge, Graph, Node
from src.annotation_graph.tree_walker import parse_document
from src.shared.exceptions import AggregationError, MalformedDocument

logger = logging.getLogger("annotation-graph.merger")


def merge_graphs(graphs: Iterable[Graph]) -> Graph:
    """
    Merge graphs in order.

    Nodes are unioned by id with the later graph winning on collision.
    Edges are concatenated in input order and never deduplicated; each
    merged edge is numbered ``edge_<n>`` by its position in the merged
    list, so edge ids stay unique across documents.
    """
    nodes: dict[str, Node] = {}
    edges: list[Edge] = []
    for graph in graphs:
        nodes.update(graph.nodes)
        for edge in graph.edges:
            edges.append(dataclasses.replace(edge, id=f"edge_{len(edges)}"))
    return Graph(nodes=nodes, edges=edges)


async def parse_documents(
    documents: Sequence[DocumentSource],
    max_concurrency: int = 10,
) -> Graph:
    """
    Parse a batch of documents concurrently and merge the results.

    All parses are awaited before merging. If any document fails, the
    whole batch fails and no partial graph is returned.

    Raises:
        MalformedDocument: If the batch is empty.
        AggregationError: Listing every document that failed.
    """
    if not documents:
        raise MalformedDocument("no documents to load")

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _parse_one(doc: DocumentSource) -> Graph:
        async with semaphore:
            logger.info("Parsing %s", doc.name)
            return await asyncio.to_thread(parse_document, doc.content, doc.name)

    results = await asyncio.gather(
        *(_parse_one(doc) for doc in documents), return_exceptions=True
    )

    failures: list[tuple[str, str]] = []
    for doc, result in zip(documents, results):
        if isinstance(result, Exception):
            logger.warning("Failed to parse %s: %s", doc.name, result)
            failures.append((doc.name, str(result)))
        elif isinstance(result, BaseException):
            raise result

    if failures:
        raise AggregationError(failures)

    merged = merge_graphs(results)
    logger.info(
        "Merged %d document(s): %d nodes, %d edges",
        len(documents), merged.node_count, merged.edge_count,
    )
    return merged
