"""Network strategy: JSON-RPC over HTTP plus a WebSocket for push messages."""

import asyncio
import itertools
import json
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
import websockets
from loguru import logger
from websockets.exceptions import ConnectionClosed, WebSocketException

from graviton_client.clients.base import CoreClient, CoreRequest
from graviton_client.config import GravitonConfig
from graviton_client.exceptions import CoreRPCError, CoreTimeoutError, CoreTransportError

SocketFactory = Callable[[str], Awaitable[Any]]


class HTTPClient(CoreClient):
    """Talks to a Core served over the network.

    Requests are JSON-RPC 2.0 calls with positional params POSTed to
    ``config.http_uri``. Push messages arrive on an independent socket at
    ``config.ws_uri``; Connected fires when that socket opens.

    Usage:
        async with HTTPClient(config) as client:
            await client.when_connected()
            listing = await client.list_dir_by_path("/", "local")
    """

    def __init__(
        self,
        config: GravitonConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        socket_factory: Optional[SocketFactory] = None,
    ):
        """Initialize the network client.

        Args:
            config: Client configuration (endpoints, session id, token, timeouts)
            http_client: HTTPX AsyncClient to reuse; one is created when omitted
            socket_factory: Coroutine opening the push socket, websockets.connect by default
        """
        super().__init__(config)
        self._owns_http = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=config.request_timeout)
        self._socket_factory = socket_factory or websockets.connect
        self._socket: Any = None
        self._reader: Optional[asyncio.Task] = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        if self._reader is None:
            self._reader = asyncio.create_task(self._run_socket())

    async def _run_socket(self) -> None:
        """Open the push socket and dispatch every inbound frame until it closes."""
        ws_uri = self.config.ws_uri or ""
        try:
            socket = await self._socket_factory(ws_uri)
        except (OSError, WebSocketException) as e:
            # Connected never fires; when_connected waits or times out
            logger.error(f"Could not open Core socket at {ws_uri}: {e}")
            return

        self._socket = socket
        self._mark_connected()
        try:
            async for frame in socket:
                self._on_frame(frame)
        except ConnectionClosed as e:
            logger.info(f"Core socket closed: {e}")
        finally:
            self._socket = None

    def _on_frame(self, frame: Any) -> None:
        try:
            envelope = json.loads(frame)
        except json.JSONDecodeError:
            logger.warning(f"Invalid JSON from Core socket: {str(frame)[:100]}")
            return
        if not isinstance(envelope, dict):
            logger.warning(f"Unexpected frame from Core socket: {str(frame)[:100]}")
            return
        self._dispatch_envelope(envelope)

    async def _send_request(self, request: CoreRequest) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "method": request.method,
            "params": request.positional(),
            "id": next(self._ids),
        }
        logger.debug(f"RPC {request.method} -> {self.config.http_uri}")

        try:
            response = await self.http_client.post(self.config.http_uri, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"RPC {request.method} timed out")
            raise CoreTimeoutError(
                f"{request.method} timed out after {self.config.request_timeout}s"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"RPC {request.method} failed: {e}")
            raise CoreTransportError(f"{request.method} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"RPC {request.method} returned a non-JSON body: {response.text[:100]}")
            raise CoreTransportError(f"{request.method} returned a non-JSON body") from e
        if not isinstance(body, dict):
            logger.error(f"RPC {request.method} returned an unexpected body: {str(body)[:100]}")
            raise CoreTransportError(f"{request.method} returned an unexpected body")

        error = body.get("error")
        if error:
            logger.warning(f"RPC {request.method} rejected: {error}")
            if not isinstance(error, dict):
                raise CoreRPCError(request.method, str(error))
            raise CoreRPCError(
                request.method,
                error.get("message", "unknown error"),
                code=error.get("code"),
                data=error.get("data"),
            )
        return body.get("result")

    async def _send_signal(self, payload: Dict[str, Any]) -> None:
        if self._socket is None:
            raise CoreTransportError("Core socket is not connected")
        await self._socket.send(json.dumps(payload))

    async def close(self) -> None:
        if self._socket is not None:
            await self._socket.close()
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self._owns_http:
            await self.http_client.aclose()
