"""Replace lazy-renderable placeholders with ESI include directives."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import urlencode

from edgeinclude.config.constants import FRAGMENT_PATH, FRAGMENT_QUERY_PARAM
from edgeinclude.core.logging import get_logger
from edgeinclude.esi.codec import PlaceholderCodec
from edgeinclude.esi.dispatch import CallbackDispatcher
from edgeinclude.esi.models import Directive, PlaceholderDescriptor
from edgeinclude.esi.negotiation import CapabilityNegotiator

log = get_logger("edgeinclude.rewriter")

Headers = Mapping[str, str] | Iterable[tuple[Any, Any]]


class PlaceholderRewriter:
    """Decides, per placeholder, whether the surrogate should render it.

    Only descriptors with a callback reference are rewritten. When a
    dispatcher is supplied, callbacks it can't serve are left alone too, so
    the fragment endpoint never gets a directive it would answer with 404.
    """

    def __init__(
        self,
        negotiator: CapabilityNegotiator,
        codec: PlaceholderCodec,
        *,
        dispatcher: CallbackDispatcher | None = None,
        base_url: str = "",
        fragment_path: str = FRAGMENT_PATH,
    ) -> None:
        self.negotiator = negotiator
        self.codec = codec
        self.dispatcher = dispatcher
        self.base_url = base_url.rstrip("/")
        self.fragment_path = fragment_path

    def fragment_url(self, callback_name: str, arguments: Iterable[Any]) -> str:
        identifier = self.codec.encode(callback_name, tuple(arguments))
        query = urlencode({FRAGMENT_QUERY_PARAM: identifier})
        return f"{self.base_url}{self.fragment_path}?{query}"

    def process(
        self,
        headers: Headers,
        descriptors: Mapping[str, PlaceholderDescriptor],
    ) -> dict[str, Directive]:
        """Directives for the keys that were rewritten; absent keys use the default."""
        if not self.negotiator.has_capability(headers):
            return {}
        return self.rewrite(descriptors)

    def rewrite(self, descriptors: Mapping[str, PlaceholderDescriptor]) -> dict[str, Directive]:
        """Rewrite without re-checking capability (caller already negotiated)."""
        directives: dict[str, Directive] = {}
        for key, descriptor in descriptors.items():
            name = descriptor.callback_name
            if not name:
                continue
            if self.dispatcher is not None and not self.dispatcher.has_callback(name):
                log.debug("placeholder_not_dispatchable", placeholder=key, callback=name)
                continue
            directives[key] = Directive(url=self.fragment_url(name, descriptor.arguments))

        log.debug("placeholders_rewritten", rewritten=len(directives), total=len(descriptors))
        return directives
