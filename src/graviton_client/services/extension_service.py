"""Extension service for reading the manifests of loaded extensions."""

import asyncio
from typing import List

from loguru import logger

from graviton_client.clients.base import CoreClient
from graviton_client.schemas.core import ExtensionInfo


async def load_extensions(client: CoreClient) -> List[ExtensionInfo]:
    """Return the manifest of every extension loaded in the client's session.

    The id list is fetched first, then every manifest concurrently. Returns an
    empty list when the Core refuses the id list; manifests that fail to load
    are skipped.
    """
    ids_response = await client.get_ext_list_by_id()
    if not ids_response.is_ok:
        logger.warning(f"Could not list extensions: {ids_response.err!r}")
        return []

    extension_ids = ids_response.ok or []
    responses = await asyncio.gather(
        *(client.get_ext_info_by_id(extension_id) for extension_id in extension_ids)
    )

    extensions: List[ExtensionInfo] = []
    for extension_id, response in zip(extension_ids, responses):
        if response.is_ok and response.ok is not None:
            extensions.append(response.ok)
        else:
            logger.warning(f"Could not load extension {extension_id}: {response.err!r}")
    return extensions
