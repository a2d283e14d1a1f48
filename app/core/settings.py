"""Application settings using Pydantic."""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MEDIA_SERVERS = [
    "https://player1.lbry.tv",
    "https://player2.lbry.tv",
    "https://player3.lbry.tv",
    "https://player4.lbry.tv",
    "https://player5.lbry.tv",
]


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = Field(default="Gateway Health", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(
        default=None,
        description="Directory for rotating log files (console only when unset)",
    )

    # Monitored targets
    media_servers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MEDIA_SERVERS),
        description="Downstream media server addresses probed on every recompute",
    )
    backend_nodes: Dict[str, str] = Field(
        default_factory=lambda: {"default": "http://localhost:5279/"},
        description="Initial node directory membership (name -> address)",
    )
    node_group: str = Field(
        default="lbrynet", description="Status group name for backend nodes"
    )
    media_group: str = Field(
        default="player", description="Status group name for media servers"
    )

    # Status aggregation
    status_cache_validity: float = Field(
        default=120.0,
        description="Seconds a status snapshot is served before recomputing",
        gt=0,
    )
    probe_timeout: float = Field(
        default=5.0, description="Per-probe timeout in seconds", gt=0, le=60
    )
    probe_sentinel_status: int = Field(
        default=404,
        description="Response code a healthy idle media server answers probes with",
        ge=100,
        le=599,
    )

    # Server
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port", ge=1, le=65535)
    reload: bool = Field(default=False, description="Enable auto-reload")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("media_servers")
    @classmethod
    def validate_media_servers(cls, v: List[str]) -> List[str]:
        """Drop blank entries and surrounding whitespace."""
        return [address.strip() for address in v if address.strip()]


# Global settings instance
settings = Settings()
