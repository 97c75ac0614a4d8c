"""edgeinclude encode/decode commands - inspect placeholder identifiers."""

import json

import click

from edgeinclude.core.errors import PlaceholderError
from edgeinclude.esi.codec import PlaceholderCodec
from edgeinclude.esi.negotiation import CapabilityNegotiator
from edgeinclude.esi.rewriter import PlaceholderRewriter


@click.command("encode")
@click.argument("callback")
@click.argument("args_json", default="[]")
@click.option("--base-url", default="", help="Prefix for the directive URL")
def encode_command(callback: str, args_json: str, base_url: str) -> None:
    """Print the identifier and directive for CALLBACK called with ARGS_JSON."""
    try:
        arguments = json.loads(args_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="ARGS_JSON") from e
    if not isinstance(arguments, list):
        raise click.BadParameter("must be a JSON array", param_hint="ARGS_JSON")

    codec = PlaceholderCodec()
    rewriter = PlaceholderRewriter(CapabilityNegotiator(), codec, base_url=base_url)
    try:
        identifier = codec.encode(callback, arguments)
    except PlaceholderError as e:
        raise click.ClickException(e.message) from e

    click.echo(identifier)
    click.echo(f'<esi:include src="{rewriter.fragment_url(callback, arguments)}" />')


@click.command("decode")
@click.argument("identifier")
def decode_command(identifier: str) -> None:
    """Print the callback and JSON arguments encoded in IDENTIFIER."""
    try:
        callback, arguments = PlaceholderCodec().decode(identifier)
    except PlaceholderError as e:
        raise click.ClickException(e.message) from e

    click.echo(callback)
    click.echo(json.dumps(arguments, ensure_ascii=False))
