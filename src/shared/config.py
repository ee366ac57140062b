"""
Base configuration for the annotation graph service.

Uses Pydantic Settings for environment-based configuration.
Each component extends BaseServiceSettings with its own prefix.
"""

from pydantic_settings import BaseSettings


class BaseServiceSettings(BaseSettings):
    """Base settings shared by the MCP server and the gateway."""


    # Persistence backend: "memory" or "neo4j"
    store_backend: str = "memory"

    # Neo4j connection
    neo4j_uri: str = ""
    neo4j_username: str = "neo4j"
    neo4j_password: str = ""
    neo4j_database: str = "neo4j"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
