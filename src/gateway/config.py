"""Gateway configuration."""

from src.shared.config import BaseServiceSettings


class GatewaySettings(BaseServiceSettings):
    """Settings specific to the FastAPI Gateway."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    class Config(BaseServiceSettings.Config):
        env_prefix = "GATEWAY_"
