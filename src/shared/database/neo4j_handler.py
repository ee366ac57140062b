"""
Neo4j Connection Handler

Owns the async driver used by the Neo4j graph store. Credentials come
from service settings, falling back to NEO4J_* environment variables
(a local .env file is honoured).
"""

import os
import logging
from typing import Any

from dotenv import load_dotenv
from neo4j import AsyncGraphDatabase, AsyncDriver

from src.shared.config import BaseServiceSettings
from src.shared.exceptions import DatabaseConnectionError

load_dotenv()

logger = logging.getLogger("annotation-graph.neo4j_handler")


class Neo4jHandler:
    """
    One lazily opened async driver plus read/write helpers.

        handler = Neo4jHandler.from_settings(settings)
        await handler.connect()
        rows = await handler.run("MATCH (n:AnnotationNode) RETURN n.id AS id")
        await handler.close()
    """

    def __init__(
        self,
        uri: str | None = None,
        username: str | None = None,
        password: str | None = None,
        database: str | None = None,
    ):
        self._uri = uri or os.getenv("NEO4J_URI")
        self._username = username or os.getenv("NEO4J_USERNAME")
        self._password = password or os.getenv("NEO4J_PASSWORD")
        self._database = database or os.getenv("NEO4J_DATABASE", "neo4j")
        self._driver: AsyncDriver | None = None

        missing = [
            name for name, value in (
                ("NEO4J_URI", self._uri),
                ("NEO4J_USERNAME", self._username),
                ("NEO4J_PASSWORD", self._password),
            )
            if not value
        ]
        if missing:
            raise DatabaseConnectionError(f"Missing Neo4j settings: {', '.join(missing)}")

    @classmethod
    def from_settings(cls, settings: BaseServiceSettings) -> "Neo4jHandler":
        """Build a handler from service settings; empty fields fall back to env vars."""
        return cls(
            uri=settings.neo4j_uri or None,
            username=settings.neo4j_username or None,
            password=settings.neo4j_password or None,
            database=settings.neo4j_database or None,
        )

    @property
    def database(self) -> str:
        return self._database

    async def connect(self) -> "Neo4jHandler":
        """Open the driver and verify the server answers.

        Raises:
            DatabaseConnectionError: If connectivity cannot be verified.
        """
        if self._driver is not None:
            return self

        driver = AsyncGraphDatabase.driver(self._uri, auth=(self._username, self._password))
        try:
            await driver.verify_connectivity()
        except Exception as e:
            await driver.close()
            raise DatabaseConnectionError(f"Cannot reach Neo4j at {self._uri}: {e}") from e

        self._driver = driver
        logger.info("Connected to Neo4j at %s (db=%s)", self._uri, self._database)
        return self

    async def close(self) -> None:
        if self._driver:
            await self._driver.close()
            self._driver = None
            logger.info("Neo4j connection closed")

    def _session(self):
        if self._driver is None:
            raise DatabaseConnectionError("Neo4jHandler is not connected, call connect() first")
        return self._driver.session(database=self._database)

    async def run(self, query: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Execute a read query and return every record as a dict."""
        async with self._session() as session:
            result = await session.run(query, params or {})
            return [record.data() async for record in result]

    async def write(self, query: str, params: dict[str, Any] | None = None) -> None:
        """Execute a write query and wait for it to be applied."""
        async with self._session() as session:
            result = await session.run(query, params or {})
            await result.consume()
