"""Helpers for redacting API keys from logs and dumped documents."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

_SENSITIVE_KEY_RE = re.compile(
    r"(appid|api[_-]?key|apikey|token|secret|sig)",
    re.IGNORECASE,
)
_QUERY_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (
      appid|
      api[_-]?key|
      apikey|
      token|
      secret|
      sig
    )
    (\s*[:=]\s*)
    ([^\s&,;"']+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact key/value secrets embedded in plain text and request URLs."""
    return _QUERY_SECRET_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}{REDACTED}", text)


def sanitize_for_logging(value: Any) -> Any:
    """Recursively redact sensitive values in nested structures."""
    if isinstance(value, dict):
        sanitized: dict[Any, Any] = {}
        for key, child in value.items():
            if _SENSITIVE_KEY_RE.fullmatch(str(key)):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_for_logging(child)
        return sanitized
    if isinstance(value, list):
        return [sanitize_for_logging(item) for item in value]
    if isinstance(value, tuple):
        return tuple(sanitize_for_logging(item) for item in value)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
