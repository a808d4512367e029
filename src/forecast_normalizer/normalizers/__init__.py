"""Provider normalizers writing into the canonical weather model."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import BinaryIO

from ..config import NormalizeOptions
from ..models import WeatherReport
from .air_quality import normalize_air_quality
from .meteoblue import normalize_meteoblue
from .onecall import normalize_onecall


class Provider(str, Enum):
    """Forecast feeds that map into a WeatherReport."""

    ONECALL = "onecall"
    METEOBLUE = "meteoblue"


ForecastNormalizer = Callable[..., None]

_FORECAST_NORMALIZERS: dict[Provider, ForecastNormalizer] = {
    Provider.ONECALL: normalize_onecall,
    Provider.METEOBLUE: normalize_meteoblue,
}


def normalize(
    provider: Provider | str,
    stream: BinaryIO,
    report: WeatherReport,
    options: NormalizeOptions | None = None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Normalize a forecast body with the implementation chosen by ``provider``."""
    normalizer = _FORECAST_NORMALIZERS[Provider(provider)]
    normalizer(stream, report, options, logger=logger)


__all__ = [
    "Provider",
    "normalize",
    "normalize_air_quality",
    "normalize_meteoblue",
    "normalize_onecall",
]
