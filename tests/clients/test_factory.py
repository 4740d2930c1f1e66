"""Tests for strategy selection."""

from typing import Any, Callable, Dict

import pytest

from graviton_client.clients.embedded import EmbeddedClient, get_host_bridge, register_host_bridge
from graviton_client.clients.factory import create_client, is_embedded
from graviton_client.clients.http import HTTPClient


class MinimalBridge:
    async def invoke(self, command: str, args: Dict[str, Any]) -> Any:
        return None

    def listen(self, event: str, handler: Callable[[Any], None]) -> Callable[[], None]:
        return lambda: None

    async def emit(self, event: str, payload: str) -> None:
        return None


@pytest.fixture(autouse=True)
def clear_host_bridge():
    register_host_bridge(None)
    yield
    register_host_bridge(None)


@pytest.mark.asyncio
async def test_without_bridge_uses_network(app_config):
    assert is_embedded() is False

    client = create_client(app_config)

    assert isinstance(client, HTTPClient)
    await client.close()


def test_explicit_bridge_uses_embedded(app_config):
    bridge = MinimalBridge()

    client = create_client(app_config, bridge=bridge)

    assert isinstance(client, EmbeddedClient)
    assert client.bridge is bridge


def test_registered_bridge_uses_embedded(app_config):
    bridge = MinimalBridge()
    register_host_bridge(bridge)

    assert get_host_bridge() is bridge
    assert is_embedded() is True
    assert isinstance(create_client(app_config), EmbeddedClient)


@pytest.mark.asyncio
async def test_config_defaults_to_config_manager(config_home, monkeypatch):
    monkeypatch.setenv("GRAVITON_HTTP_URI", "http://remote.test:6000")

    client = create_client()

    assert isinstance(client, HTTPClient)
    assert client.config.http_uri == "http://remote.test:6000"
    await client.close()
