"""Session and extension commands."""

import asyncio
import json
from typing import List

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from graviton_client.cli.app import app
from graviton_client.clients import create_client
from graviton_client.config import GravitonConfig
from graviton_client.exceptions import CoreClientError
from graviton_client.schemas.core import ExtensionInfo, StateData
from graviton_client.services.extension_service import load_extensions

console = Console()


async def run_extensions(config: GravitonConfig) -> List[ExtensionInfo]:
    client = create_client(config)
    try:
        return await load_extensions(client)
    finally:
        await client.close()


async def run_state(config: GravitonConfig) -> StateData:
    client = create_client(config)
    try:
        return await client.get_state_by_id()
    finally:
        await client.close()


@app.command()
def extensions(ctx: typer.Context):
    """List the extensions loaded in the session."""
    config: GravitonConfig = ctx.obj
    try:
        loaded = asyncio.run(run_extensions(config))
    except CoreClientError as e:
        logger.error(f"Error listing extensions: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not loaded:
        console.print("No extensions loaded")
        return

    table = Table(title=f"Extensions in state {config.state_id}")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    for extension in loaded:
        table.add_row(extension.id, extension.name)
    console.print(table)


@app.command()
def state(ctx: typer.Context):
    """Print the persisted session state as JSON."""
    config: GravitonConfig = ctx.obj
    try:
        state_data = asyncio.run(run_state(config))
    except CoreClientError as e:
        logger.error(f"Error reading state {config.state_id}: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    typer.echo(json.dumps(state_data.model_dump(mode="json"), indent=2))
