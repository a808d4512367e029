"""Filtered JSON decoding into a navigable, type-coercing document.

``decode`` reads a byte stream to completion, parses it and materializes only
the parts selected by an optional filter, within a node budget. Field access
goes through :class:`JsonView`, which never raises: a missing or wrong-typed
path coerces to the zero value of the requested type.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, BinaryIO

from .exceptions import DecodeError, DecodeErrorCode

DEFAULT_MAX_NODES = 65536
DEFAULT_MAX_DEPTH = 10

# True keeps a subtree, False drops it, a dict recurses by key and a
# one-element list applies its element to every array item.
DocumentFilter = bool | dict[str, "DocumentFilter"] | list["DocumentFilter"]

_MISSING = object()


class JsonView:
    """Read-only cursor over a decoded value with coercing accessors."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = None) -> None:
        self._value = value

    def __getitem__(self, key: str | int) -> JsonView:
        value = self._value
        if isinstance(key, str) and isinstance(value, dict):
            return JsonView(value.get(key))
        if isinstance(key, int) and isinstance(value, list) and 0 <= key < len(value):
            return JsonView(value[key])
        return JsonView(None)

    def exists(self) -> bool:
        return self._value is not None

    def __len__(self) -> int:
        if isinstance(self._value, (list, dict)):
            return len(self._value)
        return 0

    def elements(self) -> Iterator[JsonView]:
        """Iterate array items; non-arrays yield nothing."""
        if isinstance(self._value, list):
            for item in self._value:
                yield JsonView(item)

    def as_int(self) -> int:
        value = self._value
        if isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else 0
        return 0

    def as_float(self) -> float:
        value = self._value
        if isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float)):
            return float(value)
        return 0.0

    def as_str(self) -> str:
        if isinstance(self._value, str):
            return self._value
        return ""

    def raw(self) -> Any:
        return self._value

    def __repr__(self) -> str:
        return f"JsonView({self._value!r})"


@dataclass(slots=True)
class Document:
    """Decoded document plus the decoder's overflow indicator."""

    root: Any
    overflowed: bool = False

    def view(self) -> JsonView:
        return JsonView(self.root)

    def __getitem__(self, key: str | int) -> JsonView:
        return self.view()[key]


class _Materializer:
    def __init__(self, max_nodes: int, max_depth: int) -> None:
        self.remaining = max_nodes
        self.max_depth = max_depth
        self.overflowed = False

    def _take(self) -> bool:
        if self.remaining <= 0:
            self.overflowed = True
            return False
        self.remaining -= 1
        return True

    def build(self, value: Any, selector: DocumentFilter | None, depth: int) -> Any:
        if not self._take():
            return _MISSING
        if isinstance(value, dict):
            if depth >= self.max_depth:
                raise DecodeError(
                    f"Document nesting exceeds {self.max_depth} levels.",
                    code=DecodeErrorCode.TOO_DEEP,
                )
            result: dict[str, Any] = {}
            for key, child in value.items():
                child_selector = _select_member(selector, key)
                if child_selector is False:
                    continue
                built = self.build(child, child_selector, depth + 1)
                if built is _MISSING:
                    break
                result[key] = built
            return result
        if isinstance(value, list):
            if depth >= self.max_depth:
                raise DecodeError(
                    f"Document nesting exceeds {self.max_depth} levels.",
                    code=DecodeErrorCode.TOO_DEEP,
                )
            element_selector = _select_element(selector)
            if element_selector is False:
                return []
            items: list[Any] = []
            for child in value:
                built = self.build(child, element_selector, depth + 1)
                if built is _MISSING:
                    break
                items.append(built)
            return items
        return value


def _select_member(selector: DocumentFilter | None, key: str) -> DocumentFilter | None:
    if selector is None or selector is True:
        return selector
    if isinstance(selector, dict):
        return selector.get(key, False)
    return False


def _select_element(selector: DocumentFilter | None) -> DocumentFilter | None:
    if selector is None or selector is True:
        return selector
    if isinstance(selector, list):
        return selector[0] if selector else False
    return False


def _classify_syntax_error(text: str, exc: json.JSONDecodeError) -> DecodeErrorCode:
    if exc.pos >= len(text.rstrip()):
        return DecodeErrorCode.INCOMPLETE_INPUT
    if exc.msg.startswith("Unterminated string"):
        return DecodeErrorCode.INCOMPLETE_INPUT
    return DecodeErrorCode.INVALID_INPUT


def decode(
    stream: BinaryIO,
    filter: DocumentFilter | None = None,
    *,
    max_nodes: int = DEFAULT_MAX_NODES,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Document:
    """Read ``stream`` to completion and decode it through ``filter``.

    Raises DecodeError on read failure or malformed input. Running out of
    node budget is not an error: remaining content is dropped and
    ``Document.overflowed`` is set.
    """
    try:
        payload = stream.read()
    except OSError as exc:
        raise DecodeError(
            f"Failed reading response stream: {exc}", code=DecodeErrorCode.IO_ERROR
        ) from exc

    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else str(payload)
    except UnicodeDecodeError as exc:
        raise DecodeError(
            f"Response body is not valid UTF-8: {exc}", code=DecodeErrorCode.INVALID_INPUT
        ) from exc

    if not text.strip():
        raise DecodeError("Response body is empty.", code=DecodeErrorCode.EMPTY_INPUT)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        code = _classify_syntax_error(text, exc)
        raise DecodeError(f"Malformed JSON document: {exc}", code=code) from exc
    except RecursionError as exc:
        raise DecodeError(
            "Document nesting too deep to parse.", code=DecodeErrorCode.TOO_DEEP
        ) from exc

    materializer = _Materializer(max_nodes=max_nodes, max_depth=max_depth)
    root = materializer.build(parsed, filter, depth=0)
    if root is _MISSING:
        root = None
    return Document(root=root, overflowed=materializer.overflowed)
