"""Normalize OneCall, MeteoBlue and air quality feeds into one bounded model."""

from .config import NormalizeOptions, Settings, load_settings
from .decoder import Document, JsonView, decode
from .exceptions import ConfigError, DecodeError, DecodeErrorCode, TransportError
from .filters import build_onecall_filter
from .models import AirQualityReport, WeatherReport
from .normalizers import (
    Provider,
    normalize,
    normalize_air_quality,
    normalize_meteoblue,
    normalize_onecall,
)
from .timestamps import parse_timestamp

__all__ = [
    "AirQualityReport",
    "ConfigError",
    "DecodeError",
    "DecodeErrorCode",
    "Document",
    "JsonView",
    "NormalizeOptions",
    "Provider",
    "Settings",
    "TransportError",
    "WeatherReport",
    "build_onecall_filter",
    "decode",
    "load_settings",
    "normalize",
    "normalize_air_quality",
    "normalize_meteoblue",
    "normalize_onecall",
    "parse_timestamp",
]
