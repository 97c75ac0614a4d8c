"""Starlette application factory."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from edgeinclude.config.models import EsiConfig
from edgeinclude.daemon.context import EsiContext
from edgeinclude.daemon.routes import create_routes
from edgeinclude.esi.dispatch import CallbackDispatcher
from edgeinclude.esi.middleware import build_middleware


def create_app(
    dispatcher: CallbackDispatcher,
    config: EsiConfig | None = None,
    *,
    routes: Sequence[BaseRoute] = (),
    middleware: Sequence[Middleware] = (),
) -> Starlette:
    """Create the origin application.

    Host ``routes`` are mounted after the built-in ones. Host ``middleware``
    runs inside the response annotator, so the annotator always sets the
    surrogate control header last.
    """
    context = EsiContext.create(dispatcher, config)

    app = Starlette(
        routes=[*create_routes(context), *routes],
        middleware=build_middleware(context.negotiator, middleware),
    )
    app.state.esi = context
    return app
