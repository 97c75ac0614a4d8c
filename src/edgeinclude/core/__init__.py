"""Core module exports."""

from edgeinclude.core.errors import (
    ConfigError,
    EdgeIncludeError,
    ErrorCode,
    MalformedIdentifier,
    PlaceholderError,
    RenderFailure,
)
from edgeinclude.core.logging import (
    configure_logging,
    current_request_id,
    get_logger,
    request_context,
)

__all__ = [
    # Errors
    "ConfigError",
    "EdgeIncludeError",
    "ErrorCode",
    "MalformedIdentifier",
    "PlaceholderError",
    "RenderFailure",
    # Logging
    "configure_logging",
    "current_request_id",
    "get_logger",
    "request_context",
]
