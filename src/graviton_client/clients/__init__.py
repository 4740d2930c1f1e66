"""Core clients.

``CoreClient`` is the single contract; ``HTTPClient`` and ``EmbeddedClient``
are its transport strategies and ``create_client`` picks one.
"""

from graviton_client.clients.base import CoreClient, CoreRequest
from graviton_client.clients.embedded import (
    EmbeddedClient,
    HostBridge,
    get_host_bridge,
    register_host_bridge,
)
from graviton_client.clients.events import EventEmitter
from graviton_client.clients.factory import create_client, is_embedded
from graviton_client.clients.http import HTTPClient

__all__ = [
    "CoreClient",
    "CoreRequest",
    "EmbeddedClient",
    "EventEmitter",
    "HTTPClient",
    "HostBridge",
    "create_client",
    "get_host_bridge",
    "is_embedded",
    "register_host_bridge",
]
