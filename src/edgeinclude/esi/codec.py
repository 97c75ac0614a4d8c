"""Placeholder identifier encoding.

An identifier is the URL-safe base64 (unpadded) form of the compact JSON
array ``[callback_name, [arg, ...]]``. It contains only ``[A-Za-z0-9_-]``
so it can be dropped into a query string without further escaping, and it
is a pure function of its inputs: the same callback and arguments always
produce the same identifier.

Supported argument values are ``None``, ``bool``, ``int``, finite ``float``,
``str``, and lists or string-keyed mappings of those. Tuples are accepted
and come back as lists. Mapping key order and string contents are kept
verbatim. Nesting is capped at ``MAX_ARGUMENT_DEPTH`` levels on both sides,
so a hostile identifier can't exhaust the parser's recursion limit.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import re
from collections.abc import Sequence
from typing import Any

from edgeinclude.core.errors import MalformedIdentifier, PlaceholderError

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_-]+")

MAX_ARGUMENT_DEPTH = 32
"""Deepest list/mapping nesting accepted inside a single argument."""


def _check_argument(value: Any, path: str, depth: int = 0) -> str | None:
    """Return a reason string if value can't round-trip through JSON."""
    if depth > MAX_ARGUMENT_DEPTH:
        return f"{path} nests deeper than {MAX_ARGUMENT_DEPTH} levels"
    if value is None or isinstance(value, (bool, int, str)):
        return None
    if isinstance(value, float):
        return None if math.isfinite(value) else f"{path} is not a finite number"
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                return f"{path} has non-string key {key!r}"
            if reason := _check_argument(item, f"{path}[{key!r}]", depth + 1):
                return reason
        return None
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            if reason := _check_argument(item, f"{path}[{i}]", depth + 1):
                return reason
        return None
    return f"{path} has unsupported type {type(value).__name__}"


def encode(callback_name: str, arguments: Sequence[Any] = ()) -> str:
    """Encode a callback reference and its arguments into an identifier.

    Raises:
        PlaceholderError: If the callback name is empty or an argument
            can't be represented losslessly.
    """
    if not isinstance(callback_name, str) or not callback_name:
        raise PlaceholderError.unencodable_argument(str(callback_name), "callback name is empty")
    if isinstance(arguments, (str, bytes)) or not isinstance(arguments, Sequence):
        raise PlaceholderError.unencodable_argument(callback_name, "arguments must be a sequence")

    args = list(arguments)
    for i, value in enumerate(args):
        if reason := _check_argument(value, f"args[{i}]"):
            raise PlaceholderError.unencodable_argument(callback_name, reason)

    payload = json.dumps([callback_name, args], separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(payload.encode("utf-8")).rstrip(b"=").decode("ascii")


def decode(identifier: str) -> tuple[str, list[Any]]:
    """Decode an identifier back into ``(callback_name, arguments)``.

    Raises:
        MalformedIdentifier: If the identifier doesn't have the
            two-part callback/arguments shape.
    """
    if not isinstance(identifier, str) or not _IDENTIFIER_RE.fullmatch(identifier):
        raise MalformedIdentifier.from_reason(str(identifier), "not URL-safe base64")

    try:
        raw = base64.urlsafe_b64decode(identifier + "=" * (-len(identifier) % 4))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        raise MalformedIdentifier.from_reason(identifier, str(e)) from e

    if not (isinstance(payload, list) and len(payload) == 2):
        raise MalformedIdentifier.from_reason(identifier, "expected [callback, arguments]")
    callback_name, arguments = payload
    if not isinstance(callback_name, str) or not callback_name:
        raise MalformedIdentifier.from_reason(identifier, "callback name missing")
    if not isinstance(arguments, list):
        raise MalformedIdentifier.from_reason(identifier, "arguments must be a list")
    for i, value in enumerate(arguments):
        if reason := _check_argument(value, f"args[{i}]"):
            raise MalformedIdentifier.from_reason(identifier, reason)
    return callback_name, arguments


class PlaceholderCodec:
    """Identifier codec handed to the rewriter and the fragment endpoint."""

    def encode(self, callback_name: str, arguments: Sequence[Any] = ()) -> str:
        return encode(callback_name, arguments)

    def decode(self, identifier: str) -> tuple[str, list[Any]]:
        return decode(identifier)
