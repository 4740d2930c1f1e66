"""Embedded strategy: requests and push messages through a native host bridge."""

import asyncio
import json
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable

from loguru import logger

from graviton_client.clients.base import CoreClient, CoreRequest
from graviton_client.config import GravitonConfig
from graviton_client.exceptions import CoreRPCError, CoreTimeoutError

TO_WEBVIEW_CHANNEL = "to_webview"
TO_CORE_CHANNEL = "to_core"


@runtime_checkable
class HostBridge(Protocol):
    """What a native host exposes to an embedded client.

    ``invoke`` runs a Core command with named arguments and returns its
    decoded result; a rejected command raises, and the client reports it as
    CoreRPCError. ``listen`` subscribes to a named channel and returns an
    unsubscribe function. ``emit`` sends a string payload on a named channel.
    """

    async def invoke(self, command: str, args: Dict[str, Any]) -> Any: ...

    def listen(self, event: str, handler: Callable[[Any], None]) -> Callable[[], None]: ...

    async def emit(self, event: str, payload: str) -> None: ...


_host_bridge: Optional[HostBridge] = None


def register_host_bridge(bridge: Optional[HostBridge]) -> None:
    """Install (or with None, remove) the process-wide host bridge."""
    global _host_bridge
    _host_bridge = bridge


def get_host_bridge() -> Optional[HostBridge]:
    return _host_bridge


class EmbeddedClient(CoreClient):
    """Talks to a Core living in the same native host.

    The bridge is available as soon as the module loads, so ``when_connected``
    only subscribes and returns at once. Connected fires after
    ``embedded_connect_delay``.
    """

    def __init__(self, config: GravitonConfig, bridge: HostBridge):
        super().__init__(config)
        self.bridge = bridge
        self._unlisten: Optional[Callable[[], None]] = None
        self._connect_handle: Optional[asyncio.TimerHandle] = None

    async def connect(self) -> None:
        if self._unlisten is not None:
            return
        self._unlisten = self.bridge.listen(TO_WEBVIEW_CHANNEL, self._on_host_event)
        self._connect_handle = asyncio.get_running_loop().call_later(
            self.config.embedded_connect_delay, self._mark_connected
        )

    async def when_connected(self, timeout: Optional[float] = None) -> None:
        await self.connect()

    def _on_host_event(self, payload: Any) -> None:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON on {TO_WEBVIEW_CHANNEL}: {str(payload)[:100]}")
                return
        if not isinstance(payload, dict):
            logger.warning(f"Unexpected payload on {TO_WEBVIEW_CHANNEL}: {payload!r}")
            return
        self._dispatch_envelope(payload)

    async def _send_request(self, request: CoreRequest) -> Any:
        logger.debug(f"Invoke {request.method} through host bridge")
        try:
            return await asyncio.wait_for(
                self.bridge.invoke(request.method, request.named()),
                self.config.request_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Invoke {request.method} timed out")
            raise CoreTimeoutError(
                f"{request.method} timed out after {self.config.request_timeout}s"
            ) from e
        except CoreRPCError:
            raise
        except Exception as e:
            logger.warning(f"Host bridge rejected {request.method}: {e}")
            raise CoreRPCError(request.method, str(e)) from e

    async def _send_signal(self, payload: Dict[str, Any]) -> None:
        await self.bridge.emit(TO_CORE_CHANNEL, json.dumps(payload))

    async def close(self) -> None:
        if self._connect_handle is not None:
            self._connect_handle.cancel()
            self._connect_handle = None
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None
