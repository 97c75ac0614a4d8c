"""Server lifecycle management."""

from __future__ import annotations

import uvicorn
from starlette.applications import Starlette

from edgeinclude.config.models import EdgeIncludeConfig
from edgeinclude.core.logging import get_logger

logger = get_logger("edgeinclude.lifecycle")


def build_server(app: Starlette, config: EdgeIncludeConfig) -> uvicorn.Server:
    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",  # Use structlog instead
        ws="none",
    )
    return uvicorn.Server(uvicorn_config)


def run_server(app: Starlette, config: EdgeIncludeConfig) -> None:
    """Serve ``app`` until interrupted. uvicorn installs its own signal handlers."""
    server = build_server(app, config)
    base_url = f"http://{config.server.host}:{config.server.port}"
    logger.info("server starting", url=base_url)
    logger.info("endpoint", name="health", url=f"{base_url}/health")
    logger.info("endpoint", name="fragment", url=f"{base_url}{config.esi.fragment_path}")
    server.run()
    logger.info("server stopped")
