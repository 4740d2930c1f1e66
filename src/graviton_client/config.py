"""Configuration management for graviton-client."""

import json
import os
from pathlib import Path
from typing import Any, Literal, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from loguru import logger
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from graviton_client.utils import setup_logging

DATA_DIR_NAME = ".graviton"
CONFIG_FILE_NAME = "config.json"
DEFAULT_HTTP_URI = "http://localhost:50010"
WEBSOCKETS_PATH = "/websockets"

Environment = Literal["test", "dev", "user"]


def default_ws_uri(http_uri: str, token: str, state_id: int) -> str:
    """Build the push-socket URI the Core serves next to its JSON-RPC endpoint."""
    parts = urlsplit(http_uri)
    scheme = "wss" if parts.scheme == "https" else "ws"
    query = urlencode({"token": token, "state_id": state_id})
    return urlunsplit((scheme, parts.netloc, WEBSOCKETS_PATH, query, ""))


class GravitonConfig(BaseSettings):
    """Pydantic model for the client configuration."""

    env: Environment = Field(default="dev", description="Environment name")

    log_level: str = "INFO"

    # Network strategy endpoints
    http_uri: str = Field(
        default=DEFAULT_HTTP_URI,
        description="Base URI of the Core JSON-RPC endpoint",
    )
    ws_uri: Optional[str] = Field(
        default=None,
        description="URI of the Core push socket. Derived from http_uri, token and state_id when unset.",
    )

    # Session binding, attached to every request
    state_id: int = Field(default=1, description="Session state identifier", ge=0)
    token: str = Field(default="", description="Authentication token sent with every request")

    filesystem_name: str = Field(
        default="local",
        description="Name of the filesystem installed in the Core used by the explorer",
    )

    request_timeout: Optional[float] = Field(
        default=30.0,
        description="Seconds to wait for a single Core request. None waits forever.",
        gt=0,
    )
    connect_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for the channel handshake. None waits forever.",
        gt=0,
    )
    embedded_connect_delay: float = Field(
        default=0.001,
        description="Delay in seconds before the embedded strategy reports itself connected",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAVITON_",
        extra="ignore",
    )

    @model_validator(mode="after")
    def fill_ws_uri(self) -> "GravitonConfig":
        if not self.ws_uri:
            self.ws_uri = default_ws_uri(self.http_uri, self.token, self.state_id)
        return self

    @property
    def is_test_env(self) -> bool:
        """Check if running in a test environment."""
        return (
            self.env == "test"
            or os.getenv("GRAVITON_ENV", "").lower() == "test"
            or os.getenv("PYTEST_CURRENT_TEST") is not None
        )


# Module-level cache for configuration
_CONFIG_CACHE: Optional[GravitonConfig] = None


class ConfigManager:
    """Manages the on-disk client configuration."""

    def __init__(self) -> None:
        home = os.getenv("HOME", Path.home())
        if isinstance(home, str):
            home = Path(home)

        # Allow override via environment variable
        if config_dir := os.getenv("GRAVITON_CONFIG_DIR"):
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = home / DATA_DIR_NAME

        self.config_file = self.config_dir / CONFIG_FILE_NAME

    @property
    def config(self) -> GravitonConfig:
        """Get configuration, loading it lazily if needed."""
        return self.load_config()

    def load_config(self) -> GravitonConfig:
        """Load configuration from file or create default.

        Environment variables take precedence over file values.
        """
        global _CONFIG_CACHE

        if _CONFIG_CACHE is not None:
            return _CONFIG_CACHE

        file_data: dict[str, Any] = {}
        if self.config_file.exists():
            try:
                file_data = json.loads(self.config_file.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in config file {self.config_file}: {e}")
                file_data = {}

        # Drop file values that the environment overrides
        for field_name in GravitonConfig.model_fields:
            if os.getenv(f"GRAVITON_{field_name.upper()}") is not None:
                file_data.pop(field_name, None)

        _CONFIG_CACHE = GravitonConfig(**file_data)
        return _CONFIG_CACHE

    def save_config(self, config: GravitonConfig) -> None:
        """Save configuration to file and invalidate the cache."""
        global _CONFIG_CACHE
        self.config_dir.mkdir(parents=True, exist_ok=True)
        save_graviton_config(self.config_file, config)
        _CONFIG_CACHE = None


def save_graviton_config(file_path: Path, config: GravitonConfig) -> None:
    """Save configuration to file."""
    config_dict = config.model_dump(mode="json")
    # A derived socket URI is recomputed on load, not persisted
    if config.ws_uri == default_ws_uri(config.http_uri, config.token, config.state_id):
        config_dict.pop("ws_uri", None)
    file_path.write_text(json.dumps(config_dict, indent=2))


def reset_config_cache() -> None:
    """Forget the cached configuration, used when the environment changes."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = None


# Logging initialization functions for different entry points


def init_cli_logging() -> None:  # pragma: no cover
    """Initialize logging for CLI commands - file only.

    CLI commands should not log to stdout to avoid interfering with
    command output and shell integration.
    """
    log_level = os.getenv("GRAVITON_LOG_LEVEL", "INFO")
    setup_logging(log_level=log_level, log_to_file=True)


def init_embedded_logging() -> None:  # pragma: no cover
    """Initialize logging when running inside a native host - stderr only."""
    log_level = os.getenv("GRAVITON_LOG_LEVEL", "INFO")
    setup_logging(log_level=log_level, log_to_stdout=True)
