"""Callback dispatch: the host-side renderer that fragments are built with.

Callbacks are named, argument-parameterized units of rendering that can be
invoked outside the page they were first placed in. The fragment endpoint
and the placeholder pipeline receive a dispatcher explicitly; nothing here
is a global.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from starlette.concurrency import run_in_threadpool

from edgeinclude.config.constants import DEFAULT_MEDIA_TYPE
from edgeinclude.core.errors import PlaceholderError, RenderFailure
from edgeinclude.core.logging import get_logger

log = get_logger("edgeinclude.dispatch")

RenderCallback = Callable[..., str | Awaitable[str]]
Layout = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class Fragment:
    """Rendered output of a single callback."""

    content: str
    media_type: str = DEFAULT_MEDIA_TYPE


@runtime_checkable
class CallbackDispatcher(Protocol):
    """What the rewriter and the fragment endpoint need from a renderer."""

    def has_callback(self, name: str) -> bool: ...

    async def invoke(
        self, name: str, arguments: Sequence[Any], *, root_only: bool = True
    ) -> Fragment: ...


@dataclass(frozen=True, slots=True)
class _Entry:
    func: RenderCallback
    media_type: str


class CallbackRegistry:
    """Name -> callback table implementing ``CallbackDispatcher``.

    Sync callbacks run in Starlette's thread pool so a slow one doesn't block
    other fragment requests on the event loop. ``layout``, if given, wraps
    output in page chrome for non-root renders; root-only renders never see it.
    """

    def __init__(self, layout: Layout | None = None) -> None:
        self._callbacks: dict[str, _Entry] = {}
        self.layout = layout

    def register(
        self, name: str, *, media_type: str = DEFAULT_MEDIA_TYPE
    ) -> Callable[[RenderCallback], RenderCallback]:
        """Decorator registering a callback under ``name``."""

        def decorator(func: RenderCallback) -> RenderCallback:
            self.add(name, func, media_type=media_type)
            return func

        return decorator

    def add(self, name: str, func: RenderCallback, *, media_type: str = DEFAULT_MEDIA_TYPE) -> None:
        if not name:
            raise ValueError("callback name must be non-empty")
        if name in self._callbacks:
            raise ValueError(f"callback already registered: {name}")
        self._callbacks[name] = _Entry(func=func, media_type=media_type)

    def has_callback(self, name: str) -> bool:
        return name in self._callbacks

    def names(self) -> list[str]:
        return sorted(self._callbacks)

    async def invoke(
        self, name: str, arguments: Sequence[Any], *, root_only: bool = True
    ) -> Fragment:
        """Render ``name(*arguments)``.

        Raises:
            PlaceholderError: If no callback is registered under ``name``.
            RenderFailure: If the callback raises or returns a non-string.
        """
        entry = self._callbacks.get(name)
        if entry is None:
            raise PlaceholderError.unknown_callback(name)

        try:
            if inspect.iscoroutinefunction(entry.func):
                result = await entry.func(*arguments)
            else:
                result = await run_in_threadpool(entry.func, *arguments)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as e:
            raise RenderFailure.from_exception(name, e) from e

        if not isinstance(result, str):
            raise RenderFailure.from_exception(
                name, TypeError(f"callback returned {type(result).__name__}, expected str")
            )

        if not root_only and self.layout is not None:
            result = self.layout(result)
        log.debug("callback_rendered", callback=name, root_only=root_only, size=len(result))
        return Fragment(content=result, media_type=entry.media_type)
