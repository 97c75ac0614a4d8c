"""edgeinclude - Edge Side Include placeholders for Starlette origins."""

from edgeinclude.daemon.app import create_app
from edgeinclude.esi import (
    CallbackRegistry,
    CapabilityNegotiator,
    Directive,
    FragmentEndpoint,
    PlaceholderCodec,
    PlaceholderDescriptor,
    PlaceholderPipeline,
    PlaceholderRewriter,
    ResponseAnnotatorMiddleware,
)

__all__ = [
    "CallbackRegistry",
    "CapabilityNegotiator",
    "Directive",
    "FragmentEndpoint",
    "PlaceholderCodec",
    "PlaceholderDescriptor",
    "PlaceholderPipeline",
    "PlaceholderRewriter",
    "ResponseAnnotatorMiddleware",
    "create_app",
]
