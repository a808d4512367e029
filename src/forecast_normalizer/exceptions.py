"""Application exception classes."""

from __future__ import annotations

from enum import Enum


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class DecodeErrorCode(str, Enum):
    """Failure categories reported by the document decoder."""

    EMPTY_INPUT = "EmptyInput"
    INCOMPLETE_INPUT = "IncompleteInput"
    INVALID_INPUT = "InvalidInput"
    TOO_DEEP = "TooDeep"
    IO_ERROR = "IoError"


class DecodeError(Exception):
    """Raised when a response body cannot be decoded into a document.

    Normalizers raise this before writing any field, so the destination
    model is left exactly as it was.
    """

    def __init__(self, message: str, *, code: DecodeErrorCode) -> None:
        super().__init__(message)
        self.code = code


class TransportError(Exception):
    """Raised when fetching a response body over HTTP fails."""
