"""Decoder behaviour: filtering, coercion defaults, overflow and failures."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest

from forecast_normalizer.decoder import JsonView, decode
from forecast_normalizer.exceptions import DecodeError, DecodeErrorCode


def _stream(payload: Any) -> io.BytesIO:
    return io.BytesIO(json.dumps(payload).encode("utf-8"))


class _BrokenStream(io.RawIOBase):
    def read(self, size: int = -1) -> bytes:
        raise OSError("connection reset")


def test_decode_without_filter_keeps_everything() -> None:
    doc = decode(_stream({"a": {"b": [1, 2, 3]}, "c": "x"}))
    assert doc.root == {"a": {"b": [1, 2, 3]}, "c": "x"}
    assert doc.overflowed is False


def test_filter_drops_unselected_members() -> None:
    selector = {"keep": True, "drop": False, "nested": {"inner": True}}
    doc = decode(
        _stream({"keep": 1, "drop": 2, "other": 3, "nested": {"inner": 4, "outer": 5}}),
        selector,
    )
    assert doc.root == {"keep": 1, "nested": {"inner": 4}}


def test_list_filter_applies_to_every_element() -> None:
    selector = {"items": [{"event": True, "description": False}]}
    doc = decode(
        _stream({"items": [{"event": "a", "description": "long"}, {"event": "b"}]}),
        selector,
    )
    assert doc.root == {"items": [{"event": "a"}, {"event": "b"}]}


def test_overflow_truncates_trailing_content() -> None:
    doc = decode(_stream({"values": list(range(100))}), max_nodes=10)
    assert doc.overflowed is True
    values = doc["values"].raw()
    assert values == list(range(len(values)))
    assert len(values) < 100


def test_too_deep_document_fails() -> None:
    payload: Any = 1
    for _ in range(12):
        payload = [payload]
    with pytest.raises(DecodeError) as excinfo:
        decode(_stream(payload), max_depth=10)
    assert excinfo.value.code is DecodeErrorCode.TOO_DEEP


@pytest.mark.parametrize(
    ("body", "code"),
    [
        (b"", DecodeErrorCode.EMPTY_INPUT),
        (b"   \n", DecodeErrorCode.EMPTY_INPUT),
        (b'{"lat": 1.0, "hourly": [', DecodeErrorCode.INCOMPLETE_INPUT),
        (b'{"lat": }', DecodeErrorCode.INVALID_INPUT),
        (b"\xff\xfe", DecodeErrorCode.INVALID_INPUT),
    ],
)
def test_malformed_bodies_raise_decode_error(body: bytes, code: DecodeErrorCode) -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode(io.BytesIO(body))
    assert excinfo.value.code is code


def test_stream_read_failure_is_io_error() -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode(_BrokenStream())  # type: ignore[arg-type]
    assert excinfo.value.code is DecodeErrorCode.IO_ERROR
    assert isinstance(excinfo.value.__cause__, OSError)


def test_view_lookup_never_raises() -> None:
    view = JsonView({"rain": {"1h": 0.5}, "weather": [], "name": "x"})
    assert view["rain"]["1h"].as_float() == 0.5
    assert view["snow"]["1h"].as_float() == 0.0
    assert view["weather"][0]["id"].as_int() == 0
    assert view["name"][3].as_str() == ""
    assert view["name"]["x"].exists() is False
    assert len(view["weather"]) == 0
    assert list(view["name"].elements()) == []


@pytest.mark.parametrize(
    ("value", "as_int", "as_float", "as_str"),
    [
        (7, 7, 7.0, ""),
        (7.9, 7, 7.9, ""),
        (-7.9, -7, -7.9, ""),
        ("12", 0, 0.0, "12"),
        (True, 0, 0.0, ""),
        (None, 0, 0.0, ""),
        ([1], 0, 0.0, ""),
    ],
)
def test_view_coercions(value: Any, as_int: int, as_float: float, as_str: str) -> None:
    view = JsonView(value)
    assert view.as_int() == as_int
    assert view.as_float() == as_float
    assert view.as_str() == as_str
