"""Air pollution feed normalization into parallel bounded sequences."""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..config import NormalizeOptions
from ..decoder import decode
from ..diagnostics import report_document
from ..models import POLLUTANTS, AirQualityReport

_logger = logging.getLogger("forecast_normalizer.air_quality")


def normalize_air_quality(
    stream: BinaryIO,
    report: AirQualityReport,
    options: NormalizeOptions | None = None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Decode an air pollution response and overwrite ``report`` with it.

    Raises DecodeError before touching ``report`` if the body cannot be
    decoded. Samples past capacity are dropped, earliest wins.
    """
    options = options or NormalizeOptions()
    logger = logger or _logger

    document = decode(stream, max_nodes=options.max_nodes, max_depth=options.max_depth)
    report_document(
        document,
        diagnostic_level=options.diagnostic_level,
        source="air_quality",
        logger=logger,
    )

    report.lat = document["coord"]["lat"].as_float()
    report.lon = document["coord"]["lon"].as_float()
    report.clear()
    for sample in document["list"].elements():
        components = sample["components"]
        stored = report.append(
            aqi=sample["main"]["aqi"].as_int(),
            components={name: components[name].as_float() for name in POLLUTANTS},
            dt=sample["dt"].as_int(),
        )
        if not stored:
            break

    logger.debug("Air quality normalized: samples=%d", len(report))
