"""Explorer commands: browse and read files through the Core."""

import asyncio
from typing import Annotated, List

import typer
from loguru import logger
from rich.console import Console
from rich.tree import Tree

from graviton_client.cli.app import app
from graviton_client.clients import create_client
from graviton_client.config import GravitonConfig
from graviton_client.exceptions import CoreClientError
from graviton_client.schemas.tree import DisplayRow
from graviton_client.services.explorer_service import ExplorerService

console = Console()


def build_tree(route: str, rows: List[DisplayRow]) -> Tree:
    """Turn projected rows back into a rich Tree, using depth for nesting."""
    tree = Tree(f"[bold]{route}[/bold]")
    # branches[d] is the branch rows at depth d attach to
    branches = [tree]
    for row in rows:
        del branches[row.depth + 1 :]
        label = row.name if row.is_file else f"[bold blue]{row.name}/[/bold blue]"
        branches.append(branches[row.depth].add(label))
    return tree


async def expand_to_depth(explorer: ExplorerService, depth: int) -> List[DisplayRow]:
    """Load the root, then expand every directory down to ``depth`` levels."""
    await explorer.load_root()
    for level in range(1, depth):
        directories = [row for row in explorer.rows if row.depth == level - 1 and not row.is_file]
        for row in directories:
            await explorer.expand(row.path)
    return explorer.rows


async def run_tree(config: GravitonConfig, path: str, filesystem: str, depth: int) -> Tree:
    client = create_client(config)
    try:
        explorer = ExplorerService(client, path, filesystem_name=filesystem)
        rows = await expand_to_depth(explorer, depth)
        return build_tree(path, rows)
    finally:
        await client.close()


async def run_cat(config: GravitonConfig, path: str, filesystem: str) -> str:
    client = create_client(config)
    try:
        file_info = (await client.read_file_by_path(path, filesystem)).unwrap()
    finally:
        await client.close()
    if file_info.is_binary:
        raise typer.BadParameter(f"{path} is a binary file")
    return file_info.content


@app.command()
def tree(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to open the explorer at")] = "/",
    filesystem: Annotated[
        str, typer.Option("--fs", help="Filesystem installed in the Core")
    ] = "",
    depth: Annotated[int, typer.Option(help="Number of directory levels to expand", min=1)] = 1,
):
    """Show the project tree of a Core filesystem."""
    config: GravitonConfig = ctx.obj
    try:
        rendered = asyncio.run(run_tree(config, path, filesystem or config.filesystem_name, depth))
    except CoreClientError as e:
        logger.error(f"Error listing {path}: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(rendered)


@app.command()
def cat(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to print")],
    filesystem: Annotated[
        str, typer.Option("--fs", help="Filesystem installed in the Core")
    ] = "",
):
    """Print the content of a file read through the Core."""
    config: GravitonConfig = ctx.obj
    try:
        content = asyncio.run(run_cat(config, path, filesystem or config.filesystem_name))
    except CoreClientError as e:
        logger.error(f"Error reading {path}: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    typer.echo(content, nl=False)
