"""Request-scoped value types for placeholder rewriting."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PlaceholderDescriptor:
    """A deferred position in a rendered page.

    ``placeholder_key`` is the literal token standing in for the content in
    the page markup and is unique within one page render. Descriptors with a
    ``callback_name`` are lazy-renderable and eligible for ESI; others carry
    their content in ``markup`` and are always handled inline.
    """

    placeholder_key: str
    callback_name: str | None = None
    arguments: tuple[Any, ...] = field(default_factory=tuple)
    markup: str = ""

    @property
    def is_lazy(self) -> bool:
        return bool(self.callback_name)


@dataclass(frozen=True, slots=True)
class Directive:
    """An ESI include pointing the surrogate at a fragment URL."""

    url: str

    @property
    def markup(self) -> str:
        return f'<esi:include src="{html.escape(self.url, quote=True)}" />'

    def __str__(self) -> str:
        return self.markup
