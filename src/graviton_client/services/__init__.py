"""Services for graviton-client."""

from graviton_client.services.explorer_service import ExplorerService
from graviton_client.services.extension_service import load_extensions

__all__ = ["ExplorerService", "load_extensions"]
