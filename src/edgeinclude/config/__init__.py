"""Config module exports."""

from edgeinclude.config.loader import load_config
from edgeinclude.config.models import (
    EdgeIncludeConfig,
    EsiConfig,
    LoggingConfig,
    LogOutputConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "EdgeIncludeConfig",
    "EsiConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ServerConfig",
]
