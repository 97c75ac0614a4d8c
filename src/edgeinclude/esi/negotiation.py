"""Surrogate capability negotiation.

A surrogate that processes ESI announces it on every request with a header
such as ``Surrogate-Capability: abc="ESI/1.0"``. Matching is a plain
substring test on the protocol token, the way surrogates themselves read
the header, rather than a structured parse of the device/capability list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from starlette.requests import HTTPConnection

from edgeinclude.config.constants import (
    ESI_PROTOCOL_TOKEN,
    SURROGATE_CAPABILITY_HEADER,
    SURROGATE_CONTROL_HEADER,
)

# Key under the ASGI scope "state" dict holding the per-request decision
STATE_KEY = "esi_capable"


def _header_values(headers: Mapping[str, str] | Iterable[tuple[Any, Any]], name: str) -> list[str]:
    """All values of a header, matched case-insensitively.

    Accepts Starlette ``Headers`` (repeated headers preserved), plain
    mappings, or raw ASGI ``(bytes, bytes)`` pairs.
    """
    lowered = name.lower()
    items = headers.items() if isinstance(headers, Mapping) else headers
    values: list[str] = []
    for key, value in items:
        if isinstance(key, bytes):
            key = key.decode("latin-1")
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        if key.lower() == lowered:
            values.append(value)
    return values


class CapabilityNegotiator:
    """Decides whether the caller is an ESI surrogate and builds the reply header."""

    def __init__(
        self,
        capability_header: str = SURROGATE_CAPABILITY_HEADER,
        control_header: str = SURROGATE_CONTROL_HEADER,
        protocol_token: str = ESI_PROTOCOL_TOKEN,
    ) -> None:
        self.capability_header = capability_header
        self.control_header = control_header
        self.protocol_token = protocol_token

    def has_capability(self, headers: Mapping[str, str] | Iterable[tuple[Any, Any]]) -> bool:
        """True iff a capability header value contains the protocol token."""
        return any(
            self.protocol_token in value
            for value in _header_values(headers, self.capability_header)
        )

    def build_advertisement(self) -> str:
        """Value for the control header, e.g. ``content="ESI/1.0"``."""
        return f'content="{self.protocol_token}"'


def negotiation_state(conn: HTTPConnection, negotiator: CapabilityNegotiator) -> bool:
    """Per-request capability decision, computed once and cached in scope state."""
    state = conn.scope.setdefault("state", {})
    if STATE_KEY not in state:
        state[STATE_KEY] = negotiator.has_capability(conn.headers)
    return bool(state[STATE_KEY])
