"""ESI placeholder strategy: negotiation, identifiers, rewriting, fragments."""

from edgeinclude.esi.codec import PlaceholderCodec, decode, encode
from edgeinclude.esi.dispatch import CallbackDispatcher, CallbackRegistry, Fragment
from edgeinclude.esi.endpoint import FragmentEndpoint
from edgeinclude.esi.middleware import ResponseAnnotatorMiddleware, build_middleware
from edgeinclude.esi.models import Directive, PlaceholderDescriptor
from edgeinclude.esi.negotiation import CapabilityNegotiator, negotiation_state
from edgeinclude.esi.pipeline import PlaceholderPipeline
from edgeinclude.esi.rewriter import PlaceholderRewriter

__all__ = [
    "CallbackDispatcher",
    "CallbackRegistry",
    "CapabilityNegotiator",
    "Directive",
    "Fragment",
    "FragmentEndpoint",
    "PlaceholderCodec",
    "PlaceholderDescriptor",
    "PlaceholderPipeline",
    "PlaceholderRewriter",
    "ResponseAnnotatorMiddleware",
    "build_middleware",
    "decode",
    "encode",
    "negotiation_state",
]
