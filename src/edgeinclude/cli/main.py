"""edgeinclude CLI."""

import click

from edgeinclude.cli.ident import decode_command, encode_command
from edgeinclude.cli.serve import serve_command
from edgeinclude.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="edgeinclude")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """edgeinclude - defer page fragments to an ESI surrogate."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(serve_command, name="serve")
cli.add_command(encode_command, name="encode")
cli.add_command(decode_command, name="decode")


if __name__ == "__main__":
    cli()
