"""Tests for loading extension manifests."""

import pytest

from graviton_client.schemas.core import ExtensionInfo
from graviton_client.services.extension_service import load_extensions


@pytest.mark.asyncio
async def test_load_extensions(make_client):
    client = make_client(
        results={
            "get_ext_list_by_id": {"Ok": ["git", "lint"]},
            "get_ext_info_by_id": {
                "git": {"Ok": {"id": "git", "name": "Git for Graviton"}},
                "lint": {"Ok": {"id": "lint", "name": "Linter"}},
            },
        }
    )

    extensions = await load_extensions(client)

    assert extensions == [
        ExtensionInfo(id="git", name="Git for Graviton"),
        ExtensionInfo(id="lint", name="Linter"),
    ]
    assert [request.method for request in client.requests] == [
        "get_ext_list_by_id",
        "get_ext_info_by_id",
        "get_ext_info_by_id",
    ]


@pytest.mark.asyncio
async def test_load_extensions_skips_failed_manifest(make_client):
    client = make_client(
        results={
            "get_ext_list_by_id": {"Ok": ["git", "broken"]},
            "get_ext_info_by_id": {
                "git": {"Ok": {"id": "git", "name": "Git for Graviton"}},
                "broken": {"Err": "ExtensionNotFound"},
            },
        }
    )

    extensions = await load_extensions(client)

    assert [extension.id for extension in extensions] == ["git"]


@pytest.mark.asyncio
async def test_load_extensions_when_list_is_refused(make_client):
    client = make_client(results={"get_ext_list_by_id": {"Err": "BadToken"}})

    assert await load_extensions(client) == []
    assert len(client.requests) == 1
