"""Common test fixtures."""

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from graviton_client import config as config_module
from graviton_client.clients.base import CoreClient, CoreRequest
from graviton_client.config import GravitonConfig


class StubCoreClient(CoreClient):
    """In-memory Core: answers directory listings from a dict and records every request."""

    def __init__(
        self,
        config: GravitonConfig,
        listings: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        results: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(config)
        self.listings = listings if listings is not None else {}
        self.results = results if results is not None else {}
        self.requests: List[CoreRequest] = []
        self.signals: List[Dict[str, Any]] = []
        self.closed = False

    async def connect(self) -> None:
        self._mark_connected()

    async def close(self) -> None:
        self.closed = True

    async def _send_request(self, request: CoreRequest) -> Any:
        self.requests.append(request)
        params = dict(request.params)
        if request.method == "list_dir_by_path":
            entries = self.listings.get(params["path"])
            if entries is None:
                return {"Err": {"Fs": "DirectoryNotFound"}}
            return {"Ok": entries}
        if request.method == "get_ext_info_by_id":
            return self.results["get_ext_info_by_id"][params["extension_id"]]
        return self.results.get(request.method)

    async def _send_signal(self, payload: Dict[str, Any]) -> None:
        self.signals.append(payload)

    def listing_calls(self, path: str) -> int:
        return sum(
            1
            for request in self.requests
            if request.method == "list_dir_by_path" and dict(request.params)["path"] == path
        )


def entry(path: str, is_file: bool = False) -> Dict[str, Any]:
    """A directory listing entry as the Core sends it."""
    name = path.rstrip("/").rsplit("/", 1)[-1]
    return {"path": path, "name": name, "is_file": is_file}


@pytest.fixture(autouse=True)
def reset_config_cache():
    config_module.reset_config_cache()
    yield
    config_module.reset_config_cache()


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    # Patch HOME environment variable for the duration of the test
    monkeypatch.setenv("HOME", str(tmp_path))
    # On Windows, also set USERPROFILE
    if os.name == "nt":
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
    monkeypatch.delenv("GRAVITON_CONFIG_DIR", raising=False)
    return tmp_path


@pytest.fixture
def app_config(config_home) -> GravitonConfig:
    return GravitonConfig(
        env="test",
        http_uri="http://core.test:50010",
        state_id=1,
        token="secret",
        request_timeout=5.0,
    )


@pytest.fixture
def make_client(app_config) -> Callable[..., StubCoreClient]:
    def _make(**kwargs: Any) -> StubCoreClient:
        return StubCoreClient(app_config, **kwargs)

    return _make


@pytest.fixture
def project_listings() -> Dict[str, List[Dict[str, Any]]]:
    """Listings of a small project.

    /
    ├── src
    │   ├── lib
    │   │   └── util.py
    │   └── main.py
    ├── empty
    └── README.md
    """
    return {
        "/": [entry("/src"), entry("/empty"), entry("/README.md", is_file=True)],
        "/src": [entry("/src/lib"), entry("/src/main.py", is_file=True)],
        "/src/lib": [entry("/src/lib/util.py", is_file=True)],
        "/empty": [],
    }


@pytest.fixture
def core_client(make_client, project_listings) -> StubCoreClient:
    return make_client(listings=project_listings)


@pytest.fixture
def make_entry() -> Callable[..., Dict[str, Any]]:
    return entry
