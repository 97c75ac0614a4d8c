"""Response annotation for ESI-capable surrogates.

Middleware priority: ``build_middleware()`` puts the annotator first in the
Starlette middleware list, which makes it the outermost layer. It therefore
sees ``http.response.start`` after every host middleware has finished with
the headers, and its ``Surrogate-Control`` value is the one transmitted.

The header is attached to every response of a capable request, whether or
not the body holds any directives. A surrogate scanning a body with no
``<esi:include>`` tags does nothing with it.
"""

from __future__ import annotations

from collections.abc import Sequence

from starlette.datastructures import MutableHeaders
from starlette.middleware import Middleware
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from edgeinclude.esi.negotiation import CapabilityNegotiator, negotiation_state


class ResponseAnnotatorMiddleware:
    """Set the surrogate control header on responses to capable requests."""

    def __init__(self, app: ASGIApp, negotiator: CapabilityNegotiator | None = None) -> None:
        self.app = app
        self.negotiator = negotiator or CapabilityNegotiator()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        scope.setdefault("headers", [])
        if not negotiation_state(HTTPConnection(scope), self.negotiator):
            await self.app(scope, receive, send)
            return

        header_name = self.negotiator.control_header
        header_value = self.negotiator.build_advertisement()

        async def send_with_control(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                headers = MutableHeaders(scope=message)
                headers[header_name] = header_value
            await send(message)

        await self.app(scope, receive, send_with_control)


def build_middleware(
    negotiator: CapabilityNegotiator,
    host_middleware: Sequence[Middleware] = (),
) -> list[Middleware]:
    """Ordered middleware list with the annotator outermost."""
    return [Middleware(ResponseAnnotatorMiddleware, negotiator=negotiator), *host_middleware]
