"""structlog setup for the origin daemon.

Events go through the stdlib root logger so uvicorn and host-library records
share the same handlers. Each configured output gets its own handler, level
and renderer (console or JSON).

Request correlation rides on ``structlog.contextvars``: anything bound inside
``request_context()`` is merged into every event logged from that task.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from structlog.contextvars import bound_contextvars, get_contextvars

if TYPE_CHECKING:
    from edgeinclude.config.models import LoggingConfig, LogOutputConfig

REQUEST_ID_KEY = "request_id"


@contextmanager
def request_context(request_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block.

    A fresh 12-hex-digit id is generated when none (or an empty one) is given.
    """
    rid = request_id or uuid4().hex[:12]
    with bound_contextvars(**{REQUEST_ID_KEY: rid}):
        yield rid


def current_request_id() -> str | None:
    return get_contextvars().get(REQUEST_ID_KEY)


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
]


def _renderer(output: LogOutputConfig) -> list[structlog.types.Processor]:
    if output.format == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    stream = sys.stdout if output.destination == "stdout" else sys.stderr
    tty = output.destination in ("stderr", "stdout") and stream.isatty()
    return [structlog.dev.ConsoleRenderer(colors=tty, pad_event_to=0, pad_level=False)]


def _handler(output: LogOutputConfig, level: int) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer(output),
            ],
        )
    )
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install handlers for every output and route structlog through them.

    ``config`` wins when given; otherwise a single stderr output is built
    from ``json_format`` and ``level``. Safe to call again, since handlers are
    replaced and loggers are not cached.
    """
    from edgeinclude.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level, logging.INFO)

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_handler(output, _level(output.level, root_level)))

    # uvicorn's access log duplicates what the proxy already records
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger  # type: ignore[no-any-return]
