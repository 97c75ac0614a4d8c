"""Substitute placeholders in page markup.

ESI-rewritten placeholders become ``<esi:include>`` directives; every other
placeholder falls back to inline rendering, which is what a page gets when
no surrogate is in front of the origin.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping

from starlette.requests import HTTPConnection

from edgeinclude.core.logging import get_logger
from edgeinclude.esi.dispatch import CallbackDispatcher
from edgeinclude.esi.models import PlaceholderDescriptor
from edgeinclude.esi.negotiation import negotiation_state
from edgeinclude.esi.rewriter import Headers, PlaceholderRewriter

log = get_logger("edgeinclude.pipeline")


class PlaceholderPipeline:
    def __init__(self, rewriter: PlaceholderRewriter, dispatcher: CallbackDispatcher) -> None:
        self.rewriter = rewriter
        self.dispatcher = dispatcher

    async def render(
        self,
        markup: str,
        descriptors: Mapping[str, PlaceholderDescriptor],
        headers: Headers,
    ) -> str:
        """Return ``markup`` with every known placeholder key replaced.

        Raises:
            RenderFailure: If an inline fallback render fails.
            PlaceholderError: If an inline fallback names an unknown callback.
        """
        directives = self.rewriter.process(headers, descriptors)
        return await self._substitute(markup, descriptors, directives)

    async def render_for(
        self,
        conn: HTTPConnection,
        markup: str,
        descriptors: Mapping[str, PlaceholderDescriptor],
    ) -> str:
        """Like ``render`` but reuses the request's cached negotiation state."""
        if negotiation_state(conn, self.rewriter.negotiator):
            directives = self.rewriter.rewrite(descriptors)
        else:
            directives = {}
        return await self._substitute(markup, descriptors, directives)

    async def _substitute(
        self,
        markup: str,
        descriptors: Mapping[str, PlaceholderDescriptor],
        directives: Mapping[str, object],
    ) -> str:
        present = {k: d for k, d in descriptors.items() if k and k in markup}

        async def resolve(key: str, descriptor: PlaceholderDescriptor) -> str:
            if key in directives:
                return str(directives[key])
            if descriptor.callback_name:
                fragment = await self.dispatcher.invoke(
                    descriptor.callback_name, descriptor.arguments, root_only=True
                )
                return fragment.content
            return descriptor.markup

        replacements = await asyncio.gather(*(resolve(k, d) for k, d in present.items()))
        if present:
            # Single pass, longest key first: rendered content is never rescanned.
            lookup = dict(zip(present, replacements, strict=True))
            pattern = re.compile("|".join(map(re.escape, sorted(lookup, key=len, reverse=True))))
            markup = pattern.sub(lambda m: lookup[m.group(0)], markup)

        esi = sum(1 for k in present if k in directives)
        log.debug("placeholders_substituted", esi=esi, inline=len(present) - esi)
        return markup
