"""ESI component wiring.

Single object holding the negotiator, codec, rewriter, fragment endpoint
and pipeline built from one ``EsiConfig`` and one dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass

from edgeinclude.config.models import EsiConfig
from edgeinclude.esi.codec import PlaceholderCodec
from edgeinclude.esi.dispatch import CallbackDispatcher
from edgeinclude.esi.endpoint import FragmentEndpoint
from edgeinclude.esi.negotiation import CapabilityNegotiator
from edgeinclude.esi.pipeline import PlaceholderPipeline
from edgeinclude.esi.rewriter import PlaceholderRewriter


@dataclass
class EsiContext:
    config: EsiConfig
    dispatcher: CallbackDispatcher
    negotiator: CapabilityNegotiator
    codec: PlaceholderCodec
    rewriter: PlaceholderRewriter
    endpoint: FragmentEndpoint
    pipeline: PlaceholderPipeline

    @classmethod
    def create(cls, dispatcher: CallbackDispatcher, config: EsiConfig | None = None) -> EsiContext:
        """Factory to create context with all components wired together."""
        config = config or EsiConfig()
        negotiator = CapabilityNegotiator(
            capability_header=config.capability_header,
            control_header=config.control_header,
            protocol_token=config.protocol_token,
        )
        codec = PlaceholderCodec()
        rewriter = PlaceholderRewriter(
            negotiator,
            codec,
            dispatcher=dispatcher,
            base_url=config.base_url,
            fragment_path=config.fragment_path,
        )
        return cls(
            config=config,
            dispatcher=dispatcher,
            negotiator=negotiator,
            codec=codec,
            rewriter=rewriter,
            endpoint=FragmentEndpoint(codec, dispatcher),
            pipeline=PlaceholderPipeline(rewriter, dispatcher),
        )
