"""
Document Input

Locates and reads OpenText XML documents from disk. Reading is done
off the event loop so a batch of files can be loaded concurrently.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from src.shared.exceptions import AggregationError, GraphServiceError, MalformedDocument

logger = logging.getLogger("annotation-graph.documents")

DEFAULT_SUFFIX = ".xml"


@dataclass(frozen=True)
class DocumentSource:
    """A named markup document ready for parsing."""

    name: str
    content: str


def discover_documents(folder: str | Path, suffix: str = DEFAULT_SUFFIX) -> list[Path]:
    """
    Find all markup documents directly inside a folder.

    Returns:
        Paths sorted by name, so batch order is reproducible.
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Document folder not found: {folder}")

    paths = sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.name.lower().endswith(suffix.lower())
    )
    logger.info("Discovered %d document(s) in %s", len(paths), folder)
    return paths


async def read_document(path: str | Path) -> DocumentSource:
    """
    Read a single document file as UTF-8 text.

    Raises:
        MalformedDocument: If the file is not valid UTF-8.
    """
    path = Path(path)
    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"not valid UTF-8 ({e.reason})", document=path.name) from e
    return DocumentSource(name=path.name, content=content)


async def read_documents(paths: list[str | Path]) -> list[DocumentSource]:
    """
    Read several documents concurrently, preserving input order.

    Raises:
        AggregationError: Listing every document that could not be decoded.
    """
    results = await asyncio.gather(
        *(read_document(p) for p in paths), return_exceptions=True
    )

    failures: list[tuple[str, str]] = []
    for path, result in zip(paths, results):
        if isinstance(result, GraphServiceError):
            logger.warning("Failed to read %s: %s", path, result)
            failures.append((Path(path).name, str(result)))
        elif isinstance(result, BaseException):
            raise result

    if failures:
        raise AggregationError(failures)
    return list(results)
