"""Pick the transport strategy for the hosting environment."""

from typing import Optional

from loguru import logger

from graviton_client.clients.base import CoreClient
from graviton_client.clients.embedded import EmbeddedClient, HostBridge, get_host_bridge
from graviton_client.clients.http import HTTPClient
from graviton_client.config import ConfigManager, GravitonConfig


def is_embedded(bridge: Optional[HostBridge] = None) -> bool:
    """True when a native host bridge is available."""
    return (bridge or get_host_bridge()) is not None


def create_client(
    config: Optional[GravitonConfig] = None,
    bridge: Optional[HostBridge] = None,
) -> CoreClient:
    """Create the Core client for this process.

    The embedded strategy is chosen when a host bridge is passed in or was
    registered with register_host_bridge; otherwise the network strategy.
    """
    config = config or ConfigManager().config
    bridge = bridge or get_host_bridge()

    if bridge is not None:
        logger.info(f"Using embedded Core client for state {config.state_id}")
        return EmbeddedClient(config, bridge)

    logger.info(f"Using network Core client at {config.http_uri} for state {config.state_id}")
    return HTTPClient(config)
