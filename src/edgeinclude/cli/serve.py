"""edgeinclude serve command - run the origin app for a callback registry."""

from pathlib import Path

import click
from rich.console import Console

from edgeinclude.cli.utils import import_object
from edgeinclude.config.loader import load_config
from edgeinclude.core.errors import ConfigError
from edgeinclude.core.logging import configure_logging
from edgeinclude.daemon.app import create_app
from edgeinclude.daemon.lifecycle import run_server
from edgeinclude.esi.dispatch import CallbackDispatcher


@click.command("serve")
@click.argument("target")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML config file",
)
@click.option("--host", help="Override bind address")
@click.option("--port", type=int, help="Override port")
@click.pass_context
def serve_command(
    ctx: click.Context,
    target: str,
    config_path: Path | None,
    host: str | None,
    port: int | None,
) -> None:
    """Serve TARGET, a 'module:attribute' callback registry, behind ESI."""
    overrides: dict[str, dict[str, object]] = {}
    if host is not None:
        overrides.setdefault("server", {})["host"] = host
    if port is not None:
        overrides.setdefault("server", {})["port"] = port

    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    dispatcher = import_object(target)
    if not isinstance(dispatcher, CallbackDispatcher):
        raise click.ClickException(f"{target} is not a callback dispatcher")

    if ctx.obj and ctx.obj.get("verbose"):
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)

    console = Console(stderr=True)
    console.print(
        f"[bold]edgeinclude[/bold] serving [cyan]{target}[/cyan] on "
        f"http://{config.server.host}:{config.server.port}"
    )
    run_server(create_app(dispatcher, config.esi), config)
