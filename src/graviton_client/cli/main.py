"""Main CLI entry point for graviton-client."""

from graviton_client.cli.app import app  # pragma: no cover

# Register commands
from graviton_client.cli.commands import core, explorer  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
