"""HTTP routes served by the origin.

Provides a health endpoint and the ESI fragment endpoint.
"""

from __future__ import annotations

import importlib.metadata
import time
from typing import TYPE_CHECKING

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

if TYPE_CHECKING:
    from edgeinclude.daemon.context import EsiContext


def _get_version() -> str:
    """Get package version from installed metadata."""
    try:
        return importlib.metadata.version("edgeinclude")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def create_routes(context: EsiContext) -> list[Route]:
    """Create HTTP routes bound to the ESI context."""
    start_time = time.time()
    version = _get_version()

    async def health(request: Request) -> JSONResponse:
        """Health check endpoint suitable for liveness probes."""
        _ = request  # unused
        return JSONResponse(
            {
                "status": "healthy",
                "version": version,
                "uptime_seconds": round(time.time() - start_time, 1),
                "fragment_path": context.config.fragment_path,
            }
        )

    return [
        Route("/health", health, methods=["GET"]),
        context.endpoint.route(context.config.fragment_path),
    ]
