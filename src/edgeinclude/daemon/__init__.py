"""edgeinclude daemon - Starlette origin app serving ESI fragments."""

from edgeinclude.daemon.app import create_app
from edgeinclude.daemon.context import EsiContext
from edgeinclude.daemon.lifecycle import run_server

__all__ = [
    "EsiContext",
    "create_app",
    "run_server",
]
