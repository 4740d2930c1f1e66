from typing import Optional

import typer

from graviton_client.config import ConfigManager, GravitonConfig, init_cli_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import graviton_client

        typer.echo(f"graviton-client version: {graviton_client.__version__}")
        raise typer.Exit()


app = typer.Typer(name="graviton", help="Browse a Graviton Core from the terminal")


@app.callback()
def app_callback(
    ctx: typer.Context,
    http_uri: Optional[str] = typer.Option(None, "--http-uri", help="Core JSON-RPC endpoint"),
    token: Optional[str] = typer.Option(None, "--token", help="Authentication token"),
    state_id: Optional[int] = typer.Option(None, "--state-id", help="Session state id"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Graviton editor client."""
    init_cli_logging()

    config = ConfigManager().config
    overrides = {
        key: value
        for key, value in {"http_uri": http_uri, "token": token, "state_id": state_id}.items()
        if value is not None
    }
    if overrides:
        # ws_uri is derived again from the overridden values
        config = GravitonConfig(**{**config.model_dump(exclude={"ws_uri"}), **overrides})
    ctx.obj = config
