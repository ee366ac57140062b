"""
Structured logging with correlation IDs.

Provides a consistent logging setup for the MCP server, the gateway
and the command-line entry point so that a load job can be traced
from request to store.
"""

import logging
import uuid


def setup_logging(component: str, level: str = "INFO") -> logging.Logger:
    """
    Configure structured logging for a service component.

    Args:
        component: Name of the component (used as logger name).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(component)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for tracing a load job."""
    return uuid.uuid4().hex[:12]
