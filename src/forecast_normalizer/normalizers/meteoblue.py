"""MeteoBlue-style forecast normalization.

MeteoBlue returns column-oriented tables (``data_current``, ``data_1h``,
``data_day``) with Celsius temperatures and text timestamps. There is no
dedicated current-conditions table beyond temperature and time, so current
values are read from the hourly row nearest to the observation time, and
the hourly sequence starts at that same row.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..config import NormalizeOptions
from ..decoder import Document, JsonView, decode
from ..diagnostics import report_document
from ..exceptions import DecodeError, DecodeErrorCode
from ..models import (
    CurrentConditions,
    DailyEntry,
    DailyTemperature,
    HourlyEntry,
    Location,
    WeatherCondition,
    WeatherReport,
)
from ..timestamps import icon_for, parse_timestamp

KELVIN_OFFSET = 273.15

_logger = logging.getLogger("forecast_normalizer.meteoblue")


def celsius_to_kelvin(value: float) -> float:
    return value + KELVIN_OFFSET


def skip_preamble(stream: BinaryIO) -> bytes:
    """Consume the single non-JSON line the relay sends ahead of the body.

    Blocks until a newline arrives or the stream closes; an unbounded wait
    is left to the transport's timeout.
    """
    try:
        return stream.readline()
    except OSError as exc:
        raise DecodeError(
            f"Failed reading response preamble: {exc}", code=DecodeErrorCode.IO_ERROR
        ) from exc


def find_today_index(day_times: JsonView, current_time: str) -> int:
    """Index of the first date label sharing the observation's date, else 0."""
    if not current_time:
        return 0
    prefix = current_time[:10]
    for index, label in enumerate(day_times.elements()):
        if label.as_str()[:10] == prefix:
            return index
    return 0


def find_nearest_index(hour_times: JsonView, observed: int) -> int:
    """Index of the hourly timestamp closest to ``observed``; ties keep the first."""
    nearest = 0
    best: int | None = None
    for index, label in enumerate(hour_times.elements()):
        diff = abs(observed - parse_timestamp(label.as_str()))
        if best is None or diff < best:
            best = diff
            nearest = index
    return nearest


def _column_time(table: JsonView, column: str, index: int, base_date: str) -> int:
    if not table[column].exists():
        return 0
    return parse_timestamp(table[column][index].as_str(), base_date)


def _hourly_row(
    hourly: JsonView, index: int, sunrise: int, sunset: int
) -> HourlyEntry:
    dt = parse_timestamp(hourly["time"][index].as_str())
    pictocode = hourly["pictocode"][index].as_int()
    return HourlyEntry(
        dt=dt,
        temp=celsius_to_kelvin(hourly["temperature"][index].as_float()),
        feels_like=celsius_to_kelvin(hourly["felttemperature"][index].as_float()),
        pressure=hourly["sealevelpressure"][index].as_int(),
        humidity=hourly["relativehumidity"][index].as_int(),
        dew_point=0.0,
        clouds=hourly["totalcloudcover"][index].as_int(),
        uvi=hourly["uvindex"][index].as_float(),
        visibility=hourly["visibility"][index].as_int(),
        wind_speed=hourly["windspeed"][index].as_float(),
        wind_gust=0.0,
        wind_deg=hourly["winddirection"][index].as_int(),
        pop=hourly["precipitation_probability"][index].as_float() / 100.0,
        rain_1h=hourly["precipitation"][index].as_float(),
        snow_1h=0.0,
        weather=WeatherCondition(
            id=pictocode,
            icon=icon_for(pictocode, dt, sunrise, sunset),
        ),
    )


def _current(
    current: JsonView, hourly: JsonView, daily: JsonView
) -> tuple[CurrentConditions, int]:
    current_time = current["time"].as_str()
    dt = parse_timestamp(current_time)
    today = find_today_index(daily["time"], current_time)
    base_date = current_time[:10]
    sunrise = _column_time(daily, "sunrise", today, base_date)
    sunset = _column_time(daily, "sunset", today, base_date)
    nearest = find_nearest_index(hourly["time"], dt)

    pictocode = hourly["pictocode"][nearest].as_int()
    conditions = CurrentConditions(
        dt=dt,
        sunrise=sunrise,
        sunset=sunset,
        temp=celsius_to_kelvin(current["temperature"].as_float()),
        feels_like=celsius_to_kelvin(hourly["felttemperature"][nearest].as_float()),
        pressure=hourly["sealevelpressure"][nearest].as_int(),
        humidity=hourly["relativehumidity"][nearest].as_int(),
        dew_point=0.0,
        clouds=hourly["totalcloudcover"][nearest].as_int(),
        uvi=hourly["uvindex"][nearest].as_float(),
        visibility=hourly["visibility"][nearest].as_int(),
        wind_speed=hourly["windspeed"][nearest].as_float(),
        wind_gust=0.0,
        wind_deg=hourly["winddirection"][nearest].as_int(),
        rain_1h=hourly["precipitation"][nearest].as_float(),
        snow_1h=0.0,
        weather=WeatherCondition(
            id=pictocode,
            icon=icon_for(pictocode, dt, sunrise, sunset),
        ),
    )
    return conditions, nearest


def _daily_row(daily: JsonView, index: int) -> DailyEntry:
    date_label = daily["time"][index].as_str()
    pictocode = daily["pictocode"][index].as_int()
    return DailyEntry(
        dt=parse_timestamp(date_label),
        sunrise=_column_time(daily, "sunrise", index, date_label),
        sunset=_column_time(daily, "sunset", index, date_label),
        moonrise=_column_time(daily, "moonrise", index, date_label),
        moonset=_column_time(daily, "moonset", index, date_label),
        moon_phase=0.0,
        temp=DailyTemperature(
            day=celsius_to_kelvin(daily["temperature_mean"][index].as_float()),
            min=celsius_to_kelvin(daily["temperature_min"][index].as_float()),
            max=celsius_to_kelvin(daily["temperature_max"][index].as_float()),
        ),
        feels_like=DailyTemperature(
            day=celsius_to_kelvin(daily["felttemperature_mean"][index].as_float()),
        ),
        pressure=daily["sealevelpressure_mean"][index].as_int(),
        humidity=daily["relativehumidity_mean"][index].as_int(),
        dew_point=0.0,
        clouds=daily["totalcloudcover_mean"][index].as_int(),
        uvi=daily["uvindex"][index].as_float(),
        visibility=daily["visibility_mean"][index].as_int(),
        wind_speed=daily["windspeed_mean"][index].as_float(),
        wind_gust=daily["windspeed_max"][index].as_float(),
        wind_deg=daily["winddirection"][index].as_int(),
        pop=daily["precipitation_probability"][index].as_float() / 100.0,
        rain=daily["precipitation"][index].as_float(),
        snow=0.0,
        # No day/night split at daily granularity.
        weather=WeatherCondition(id=pictocode, icon=f"{pictocode}d"),
    )


def _apply(document: Document, report: WeatherReport) -> None:
    metadata = document["metadata"]
    report.location = Location(
        lat=metadata["latitude"].as_float(),
        lon=metadata["longitude"].as_float(),
        timezone=metadata["timezone_abbrevation"].as_str(),
        # Fractional offsets are kept (5.5 -> 19800); firmware truncated to whole hours.
        timezone_offset=round(metadata["utc_timeoffset"].as_float() * 3600),
    )

    hourly = document["data_1h"]
    daily = document["data_day"]
    report.current, nearest = _current(document["data_current"], hourly, daily)

    report.hourly.clear()
    for index in range(nearest, len(hourly["time"])):
        row = _hourly_row(hourly, index, report.current.sunrise, report.current.sunset)
        if not report.hourly.push(row):
            break

    report.daily.clear()
    for index in range(len(daily["time"])):
        if not report.daily.push(_daily_row(daily, index)):
            break

    report.alerts.clear()


def normalize_meteoblue(
    stream: BinaryIO,
    report: WeatherReport,
    options: NormalizeOptions | None = None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Skip the relay preamble, decode the body and overwrite ``report``.

    Raises DecodeError before touching ``report`` if the body cannot be
    decoded. The alert section is always cleared.
    """
    options = options or NormalizeOptions()
    logger = logger or _logger

    preamble = skip_preamble(stream)
    logger.debug("MeteoBlue preamble: %r", preamble.rstrip(b"\r\n"))

    document = decode(stream, max_nodes=options.max_nodes, max_depth=options.max_depth)
    report_document(
        document,
        diagnostic_level=options.diagnostic_level,
        source="meteoblue",
        logger=logger,
    )

    _apply(document, report)
    logger.debug(
        "MeteoBlue normalized: hourly=%d daily=%d",
        len(report.hourly),
        len(report.daily),
    )
