"""Fragment endpoint the surrogate calls for each ``<esi:include>``.

``GET /esi/block/?id=<identifier>`` answers:

- 200 with the callback's root-only markup,
- 400 with an empty body when ``id`` is missing or malformed,
- 404 with an empty body when the identifier names no registered callback,
- 500 with an empty body when the callback fails.

Every response carries ``Cache-Control: no-cache, max-age=0``; the endpoint
keeps no state between calls.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from edgeinclude.config.constants import (
    FRAGMENT_CACHE_CONTROL,
    FRAGMENT_PATH,
    FRAGMENT_QUERY_PARAM,
)
from edgeinclude.core.errors import MalformedIdentifier, PlaceholderError, RenderFailure
from edgeinclude.core.logging import get_logger, request_context
from edgeinclude.esi.codec import PlaceholderCodec
from edgeinclude.esi.dispatch import CallbackDispatcher

log = get_logger("edgeinclude.endpoint")

_NO_CACHE = {"Cache-Control": FRAGMENT_CACHE_CONTROL}


def _empty(status_code: int) -> Response:
    return Response(status_code=status_code, headers=_NO_CACHE)


class FragmentEndpoint:
    """Decodes an identifier and renders the referenced callback root-only."""

    def __init__(self, codec: PlaceholderCodec, dispatcher: CallbackDispatcher) -> None:
        self.codec = codec
        self.dispatcher = dispatcher

    async def handle(self, request: Request) -> Response:
        with request_context(request.headers.get("x-request-id")):
            return await self._handle(request)

    async def _handle(self, request: Request) -> Response:
        identifier = request.query_params.get(FRAGMENT_QUERY_PARAM, "")
        try:
            callback_name, arguments = self.codec.decode(identifier)
        except MalformedIdentifier as e:
            log.info("fragment_bad_identifier", reason=e.details.get("reason"))
            return _empty(400)

        try:
            fragment = await self.dispatcher.invoke(callback_name, arguments, root_only=True)
        except RenderFailure:
            log.exception("fragment_render_failed", callback=callback_name)
            return _empty(500)
        except PlaceholderError as e:
            log.info("fragment_unknown_callback", callback=callback_name, error=e.error_name)
            return _empty(404)

        log.debug("fragment_rendered", callback=callback_name, size=len(fragment.content))
        return Response(fragment.content, media_type=fragment.media_type, headers=_NO_CACHE)

    def route(self, path: str = FRAGMENT_PATH) -> Route:
        return Route(path, self.handle, methods=["GET"], name="esi_fragment")
