"""Tests for the network strategy (JSON-RPC over HTTP plus push socket)."""

import asyncio
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from graviton_client.clients.http import HTTPClient
from graviton_client.exceptions import (
    CoreRPCError,
    CoreTimeoutError,
    CoreTransportError,
    StateNotFoundError,
)
from graviton_client.schemas.messages import Connected, ShowPopup, StateUpdated


class FakeSocket:
    """Stands in for a websockets connection: frames are fed by the test."""

    def __init__(self) -> None:
        self.frames: asyncio.Queue = asyncio.Queue()
        self.sent: List[str] = []
        self.closed = False

    def feed(self, frame: Any) -> None:
        self.frames.put_nowait(frame)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Any:
        frame = await self.frames.get()
        if frame is None:
            raise StopAsyncIteration
        return frame

    async def send(self, data: str) -> None:
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True
        self.frames.put_nowait(None)


def rpc_transport(
    results: Dict[str, Any], calls: List[Dict[str, Any]]
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append(body)
        answer = results[body["method"]]
        if callable(answer):
            return answer(request, body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": answer})

    return httpx.MockTransport(handler)


@pytest.fixture
def make_http_client(app_config) -> Callable[..., HTTPClient]:
    def _make(results: Dict[str, Any], calls: List[Dict[str, Any]], socket=None) -> HTTPClient:
        async def open_socket(uri: str):
            if socket is None:
                raise OSError("connection refused")
            return socket

        return HTTPClient(
            app_config,
            http_client=httpx.AsyncClient(transport=rpc_transport(results, calls)),
            socket_factory=open_socket,
        )

    return _make


async def settle(predicate: Callable[[], bool]) -> None:
    for _ in range(100):
        if predicate():
            return
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_list_dir_sends_positional_params(make_http_client):
    calls: List[Dict[str, Any]] = []
    listing = [{"path": "/a", "name": "a", "is_file": False}]
    client = make_http_client({"list_dir_by_path": {"Ok": listing}}, calls)

    response = await client.list_dir_by_path("/", "local")

    assert response.is_ok
    assert [item.path for item in response.ok] == ["/a"]
    assert calls[0]["jsonrpc"] == "2.0"
    assert calls[0]["method"] == "list_dir_by_path"
    assert calls[0]["params"] == ["/", "local", 1, "secret"]
    await client.close()


@pytest.mark.asyncio
async def test_request_ids_increase(make_http_client):
    calls: List[Dict[str, Any]] = []
    client = make_http_client({"get_ext_list_by_id": {"Ok": []}}, calls)

    await client.get_ext_list_by_id()
    await client.get_ext_list_by_id()

    assert [call["id"] for call in calls] == [1, 2]
    assert calls[0]["params"] == [1, "secret"]
    await client.close()


@pytest.mark.asyncio
async def test_set_state_params_order(make_http_client):
    calls: List[Dict[str, Any]] = []
    client = make_http_client({"set_state_by_id": {"Ok": None}}, calls)

    await client.set_state_by_id({"opened_tabs": []})

    assert calls[0]["params"] == [1, {"opened_tabs": [], "id": 1}, "secret"]
    await client.close()


@pytest.mark.asyncio
async def test_write_file_unit_ok(make_http_client):
    calls: List[Dict[str, Any]] = []
    client = make_http_client({"write_file_by_path": {"Ok": None}}, calls)

    response = await client.write_file_by_path("/a.txt", "hello", "local")

    assert response.is_ok is True
    assert calls[0]["params"] == ["/a.txt", "hello", "local", 1, "secret"]
    await client.close()


@pytest.mark.asyncio
async def test_rpc_error_raises(make_http_client):
    def reject(request, body):
        return httpx.Response(
            200,
            json={
                "jsonrpc": "2.0",
                "id": body["id"],
                "error": {"code": -32601, "message": "Method not found"},
            },
        )

    client = make_http_client({"get_state_by_id": reject}, [])

    with pytest.raises(CoreRPCError) as exc_info:
        await client.get_state_by_id()

    assert exc_info.value.code == -32601
    assert exc_info.value.method == "get_state_by_id"
    await client.close()


@pytest.mark.asyncio
async def test_null_state_raises_not_found(make_http_client):
    client = make_http_client({"get_state_by_id": None}, [])

    with pytest.raises(StateNotFoundError):
        await client.get_state_by_id()
    await client.close()


@pytest.mark.asyncio
async def test_http_failure_raises_transport_error(make_http_client):
    client = make_http_client(
        {"list_dir_by_path": lambda request, body: httpx.Response(502, text="bad gateway")}, []
    )

    with pytest.raises(CoreTransportError):
        await client.list_dir_by_path("/", "local")
    await client.close()


@pytest.mark.asyncio
async def test_http_timeout_raises_timeout_error(make_http_client):
    def hang(request, body):
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_http_client({"list_dir_by_path": hang}, [])

    with pytest.raises(CoreTimeoutError):
        await client.list_dir_by_path("/", "local")
    await client.close()


@pytest.mark.asyncio
async def test_socket_open_fires_connected_and_dispatches_frames(make_http_client):
    socket = FakeSocket()
    client = make_http_client({}, [], socket=socket)
    connected: List[Connected] = []
    popups: List[ShowPopup] = []
    states: List[StateUpdated] = []
    client.on(Connected, connected.append)
    client.on(ShowPopup, popups.append)
    client.on(StateUpdated, states.append)

    await client.connect()
    await client.when_connected(timeout=1)

    socket.feed(
        json.dumps(
            {
                "state_id": 1,
                "trigger": "core",
                "msg_type": "ShowPopup",
                "popup_id": "welcome",
                "title": "Hi",
                "content": "Welcome",
            }
        )
    )
    socket.feed("not json")
    socket.feed(json.dumps({"state_id": 1, "trigger": "core", "msg_type": "Unknown"}))
    socket.feed(
        json.dumps(
            {
                "state_id": 1,
                "trigger": "core",
                "msg_type": "ListenToState",
                "state_data": {"id": 1, "opened_tabs": []},
            }
        )
    )
    await settle(lambda: len(states) == 1)

    assert len(connected) == 1
    assert [popup.popup_id for popup in popups] == ["welcome"]
    assert states[0].state_data.id == 1

    await client.close()
    assert socket.closed is True


@pytest.mark.asyncio
async def test_listen_to_state_goes_over_socket(make_http_client):
    socket = FakeSocket()
    client = make_http_client({}, [], socket=socket)

    await client.connect()
    await client.when_connected(timeout=1)
    await client.listen_to_state()

    assert [json.loads(frame) for frame in socket.sent] == [
        {"trigger": "client", "msg_type": "ListenToState", "state_id": 1}
    ]
    await client.close()


@pytest.mark.asyncio
async def test_listen_to_state_without_socket_raises(make_http_client):
    client = make_http_client({}, [])

    with pytest.raises(CoreTransportError):
        await client.listen_to_state()
    await client.close()


@pytest.mark.asyncio
async def test_refused_socket_never_connects(make_http_client):
    client = make_http_client({}, [])

    await client.connect()

    with pytest.raises(CoreTimeoutError):
        await client.when_connected(timeout=0.05)
    assert client.is_connected is False
    await client.close()


@pytest.mark.asyncio
async def test_requests_work_without_socket(make_http_client):
    """The RPC channel is independent from the push socket."""
    client = make_http_client({"get_ext_list_by_id": {"Ok": ["git"]}}, [])

    response = await client.get_ext_list_by_id()

    assert response.ok == ["git"]
    await client.close()


@pytest.mark.asyncio
async def test_when_connected_opens_socket(make_http_client):
    socket = FakeSocket()
    client = make_http_client({}, [], socket=socket)
    connected: List[Connected] = []
    client.on(Connected, connected.append)

    await asyncio.wait_for(client.when_connected(), 0.5)

    assert client.is_connected is True
    assert len(connected) == 1
    await client.close()


@pytest.mark.asyncio
async def test_non_json_body_raises_transport_error(make_http_client):
    client = make_http_client(
        {"list_dir_by_path": lambda request, body: httpx.Response(200, text="<html>proxy</html>")},
        [],
    )

    with pytest.raises(CoreTransportError):
        await client.list_dir_by_path("/", "local")
    await client.close()


@pytest.mark.asyncio
async def test_string_error_member_raises_rpc_error(make_http_client):
    def reject(request, body):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": "invalid token"})

    client = make_http_client({"get_state_by_id": reject}, [])

    with pytest.raises(CoreRPCError, match="invalid token") as exc_info:
        await client.get_state_by_id()

    assert exc_info.value.code is None
    await client.close()
