"""
Custom exception hierarchy for the annotation graph service.

All service errors inherit from GraphServiceError so they can be caught
uniformly at the MCP server or gateway level.
"""


class GraphServiceError(Exception):
    """Base exception for all annotation graph errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        self.detail = message
        super().__init__(f"[{component}] {message}")


class MalformedDocument(GraphServiceError):
    """A document is not well-formed or lacks the OpenText/text/node root."""

    def __init__(self, message: str, document: str | None = None):
        self.document = document
        if document:
            message = f"{document}: {message}"
        super().__init__(message, component="tree_walker")


class AggregationError(GraphServiceError):
    """At least one document of a concurrently parsed batch failed."""

    def __init__(self, failures: list[tuple[str, str]]):
        self.failures = failures
        summary = "; ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(
            f"{len(failures)} document(s) failed to parse: {summary}",
            component="merger",
        )


class StoreIOError(GraphServiceError):
    """A persisted store read or write failed."""

    def __init__(self, message: str):
        super().__init__(message, component="store")


class DatabaseConnectionError(StoreIOError):
    """Failed to connect to Neo4j."""
    pass
