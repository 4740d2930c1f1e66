"""Transport-independent Core client.

``CoreClient`` defines every Core operation exactly once. Each operation
builds a ``CoreRequest`` holding the method name and its ordered, named
parameters; the session id and token bound at construction are appended
here, never by callers. Strategies only decide how a request travels:
positionally over JSON-RPC, or by camelCase name through a host bridge.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from graviton_client.clients.events import EventEmitter
from graviton_client.config import GravitonConfig
from graviton_client.exceptions import CoreOperationError, CoreTimeoutError, StateNotFoundError
from graviton_client.schemas.core import (
    CoreResponse,
    DirItemInfo,
    ExtensionInfo,
    FileInfo,
    StateData,
)
from graviton_client.schemas.messages import Connected, ListenToState, parse_message
from graviton_client.utils import to_camel_case


@dataclass(frozen=True)
class CoreRequest:
    """A Core call: method name plus parameters in wire order."""

    method: str
    params: List[Tuple[str, Any]] = field(default_factory=list)

    def positional(self) -> List[Any]:
        return [value for _, value in self.params]

    def named(self) -> Dict[str, Any]:
        return {to_camel_case(name): value for name, value in self.params}


class CoreClient(EventEmitter, ABC):
    """Request/response operations plus push events, over some channel to the Core."""

    def __init__(self, config: GravitonConfig):
        super().__init__()
        self.config = config
        self.state_id = config.state_id
        self.token = config.token
        self._connected = asyncio.Event()

    # --- Strategy hooks ---

    @abstractmethod
    async def connect(self) -> None:
        """Open the push channel. Connected is emitted once it is ready."""

    @abstractmethod
    async def close(self) -> None:
        """Release the channel."""

    @abstractmethod
    async def _send_request(self, request: CoreRequest) -> Any:
        """Deliver ``request`` and return the decoded result."""

    @abstractmethod
    async def _send_signal(self, payload: Dict[str, Any]) -> None:
        """Send a fire-and-forget message on the push channel."""

    async def __aenter__(self) -> "CoreClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # --- Connection state ---

    @property
    def is_connected(self) -> bool:
        return self._connected.is_set()

    def _mark_connected(self) -> None:
        if self._connected.is_set():
            return
        self._connected.set()
        logger.info(f"{type(self).__name__} connected for state {self.state_id}")
        self.emit(Connected(state_id=self.state_id))

    async def when_connected(self, timeout: Optional[float] = None) -> None:
        """Open the channel if needed, then wait until it is ready.

        Without a timeout argument the configured ``connect_timeout`` applies;
        when that is None too, this waits forever.
        """
        await self.connect()
        timeout = timeout if timeout is not None else self.config.connect_timeout
        try:
            await asyncio.wait_for(self._connected.wait(), timeout)
        except asyncio.TimeoutError as e:
            raise CoreTimeoutError(f"Core channel not ready after {timeout}s") from e

    def _dispatch_envelope(self, envelope: Dict[str, Any]) -> None:
        message = parse_message(envelope)
        if message is not None:
            logger.debug(f"Received {message.msg_type} for state {message.state_id}")
            self.emit(message)

    # --- Core operations ---

    def _request(self, method: str, *params: Tuple[str, Any]) -> CoreRequest:
        return CoreRequest(
            method=method,
            params=[*params, ("state_id", self.state_id), ("token", self.token)],
        )

    async def get_state_by_id(self) -> StateData:
        """Fetch the persisted session state.

        Raises:
            StateNotFoundError: If the Core has no state for this id and token
            CoreRPCError: If the Core rejected the call
        """
        result = await self._send_request(self._request("get_state_by_id"))
        if result is None:
            raise StateNotFoundError(self.state_id)
        return StateData.model_validate(result)

    async def set_state_by_id(self, state: Union[StateData, Dict[str, Any]]) -> None:
        """Replace the persisted session state. The session id is injected here."""
        state_data = state.model_dump() if isinstance(state, StateData) else dict(state)
        state_data["id"] = self.state_id
        # The session id travels first, ahead of the state itself
        request = CoreRequest(
            method="set_state_by_id",
            params=[
                ("state_id", self.state_id),
                ("state_data", state_data),
                ("token", self.token),
            ],
        )
        result = await self._send_request(request)
        if isinstance(result, dict) and "Err" in result:
            logger.error(f"Core refused state update for state {self.state_id}: {result['Err']}")
            raise CoreOperationError(result["Err"])

    async def read_file_by_path(
        self, path: str, filesystem_name: str
    ) -> CoreResponse[FileInfo]:
        result = await self._send_request(
            self._request("read_file_by_path", ("path", path), ("filesystem_name", filesystem_name))
        )
        return CoreResponse[FileInfo].model_validate(result)

    async def write_file_by_path(
        self, path: str, content: str, filesystem_name: str
    ) -> CoreResponse[None]:
        result = await self._send_request(
            self._request(
                "write_file_by_path",
                ("path", path),
                ("content", content),
                ("filesystem_name", filesystem_name),
            )
        )
        return CoreResponse[None].model_validate(result)

    async def list_dir_by_path(
        self, path: str, filesystem_name: str
    ) -> CoreResponse[List[DirItemInfo]]:
        result = await self._send_request(
            self._request("list_dir_by_path", ("path", path), ("filesystem_name", filesystem_name))
        )
        return CoreResponse[List[DirItemInfo]].model_validate(result)

    async def get_ext_info_by_id(self, extension_id: str) -> CoreResponse[ExtensionInfo]:
        result = await self._send_request(
            self._request("get_ext_info_by_id", ("extension_id", extension_id))
        )
        return CoreResponse[ExtensionInfo].model_validate(result)

    async def get_ext_list_by_id(self) -> CoreResponse[List[str]]:
        result = await self._send_request(self._request("get_ext_list_by_id"))
        return CoreResponse[List[str]].model_validate(result)

    async def listen_to_state(self) -> None:
        """Ask the Core to push state updates for this session."""
        await self._send_signal(ListenToState(state_id=self.state_id).model_dump())
