"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (EDGEINCLUDE__SECTION__KEY)
3. YAML config file passed to load_config()
4. Global YAML (~/.config/edgeinclude/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    EDGEINCLUDE__<SECTION>__<KEY>=<VALUE>

Examples:
    EDGEINCLUDE__LOGGING__LEVEL=DEBUG
    EDGEINCLUDE__SERVER__PORT=8080
    EDGEINCLUDE__ESI__BASE_URL=https://origin.example.com
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from edgeinclude.config.constants import (
    ESI_PROTOCOL_TOKEN,
    FRAGMENT_PATH,
    PORT_MAX,
    PORT_MIN,
    SURROGATE_CAPABILITY_HEADER,
    SURROGATE_CONTROL_HEADER,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        EDGEINCLUDE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every rewritten placeholder.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """Server configuration.

    Env vars:
        EDGEINCLUDE__SERVER__HOST: Bind address (default: 127.0.0.1)
        EDGEINCLUDE__SERVER__PORT: Port number (default: 8000)
    """

    host: str = Field(
        default="127.0.0.1",
        description="Bind address. The surrogate must be able to reach it.",
    )
    port: int = Field(
        default=8000,
        description="Server port.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (PORT_MIN <= v <= PORT_MAX):
            raise ValueError(f"Port must be {PORT_MIN}-{PORT_MAX}, got {v}")
        return v


class EsiConfig(BaseModel):
    """Surrogate negotiation and fragment routing.

    Env vars:
        EDGEINCLUDE__ESI__BASE_URL: Prefix for directive URLs (default: "")
        EDGEINCLUDE__ESI__FRAGMENT_PATH: Fragment endpoint path
        EDGEINCLUDE__ESI__CAPABILITY_HEADER: Request header to inspect
        EDGEINCLUDE__ESI__CONTROL_HEADER: Response header to set
        EDGEINCLUDE__ESI__PROTOCOL_TOKEN: Capability token to look for
    """

    base_url: str = Field(
        default="",
        description="Prefix for <esi:include> src URLs. Empty keeps them host-relative, "
        "which most surrogates resolve against the original request.",
    )
    fragment_path: str = Field(
        default=FRAGMENT_PATH,
        description="Path of the fragment endpoint. Must start and end with '/'.",
    )
    capability_header: str = SURROGATE_CAPABILITY_HEADER
    control_header: str = SURROGATE_CONTROL_HEADER
    protocol_token: str = Field(
        default=ESI_PROTOCOL_TOKEN,
        min_length=1,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("fragment_path")
    @classmethod
    def validate_fragment_path(cls, v: str) -> str:
        if not (v.startswith("/") and v.endswith("/")):
            raise ValueError(f"fragment_path must start and end with '/': {v}")
        return v


class EdgeIncludeConfig(BaseModel):
    """Root configuration for edgeinclude.

    All settings can be configured via:
    1. Environment variables: EDGEINCLUDE__SECTION__KEY
    2. YAML config files
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    esi: EsiConfig = Field(default_factory=EsiConfig)
