"""CLI commands for graviton-client."""

from graviton_client.cli.commands import core, explorer

__all__ = ["core", "explorer"]
