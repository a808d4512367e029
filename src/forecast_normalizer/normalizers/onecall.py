"""OneCall-style forecast normalization.

OneCall responses already nest one object per entry with the canonical field
names, so this is a direct projection. Every optional path defaults to zero.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..config import NormalizeOptions
from ..decoder import JsonView, decode
from ..diagnostics import report_document
from ..filters import build_onecall_filter
from ..models import (
    AlertEntry,
    CurrentConditions,
    DailyEntry,
    DailyTemperature,
    HourlyEntry,
    Location,
    WeatherCondition,
    WeatherReport,
)

_logger = logging.getLogger("forecast_normalizer.onecall")


def _condition(weather_list: JsonView) -> WeatherCondition:
    # An empty weather list yields a zero-valued condition.
    first = weather_list[0]
    return WeatherCondition(
        id=first["id"].as_int(),
        main=first["main"].as_str(),
        description=first["description"].as_str(),
        icon=first["icon"].as_str(),
    )


def _current(current: JsonView) -> CurrentConditions:
    return CurrentConditions(
        dt=current["dt"].as_int(),
        sunrise=current["sunrise"].as_int(),
        sunset=current["sunset"].as_int(),
        temp=current["temp"].as_float(),
        feels_like=current["feels_like"].as_float(),
        pressure=current["pressure"].as_int(),
        humidity=current["humidity"].as_int(),
        dew_point=current["dew_point"].as_float(),
        clouds=current["clouds"].as_int(),
        uvi=current["uvi"].as_float(),
        visibility=current["visibility"].as_int(),
        wind_speed=current["wind_speed"].as_float(),
        wind_gust=current["wind_gust"].as_float(),
        wind_deg=current["wind_deg"].as_int(),
        rain_1h=current["rain"]["1h"].as_float(),
        snow_1h=current["snow"]["1h"].as_float(),
        weather=_condition(current["weather"]),
    )


def _hourly(hour: JsonView) -> HourlyEntry:
    return HourlyEntry(
        dt=hour["dt"].as_int(),
        temp=hour["temp"].as_float(),
        feels_like=hour["feels_like"].as_float(),
        pressure=hour["pressure"].as_int(),
        humidity=hour["humidity"].as_int(),
        dew_point=hour["dew_point"].as_float(),
        clouds=hour["clouds"].as_int(),
        uvi=hour["uvi"].as_float(),
        visibility=hour["visibility"].as_int(),
        wind_speed=hour["wind_speed"].as_float(),
        wind_gust=hour["wind_gust"].as_float(),
        wind_deg=hour["wind_deg"].as_int(),
        pop=hour["pop"].as_float(),
        rain_1h=hour["rain"]["1h"].as_float(),
        snow_1h=hour["snow"]["1h"].as_float(),
        weather=_condition(hour["weather"]),
    )


def _temperatures(section: JsonView) -> DailyTemperature:
    return DailyTemperature(
        morn=section["morn"].as_float(),
        day=section["day"].as_float(),
        eve=section["eve"].as_float(),
        night=section["night"].as_float(),
        min=section["min"].as_float(),
        max=section["max"].as_float(),
    )


def _daily(day: JsonView) -> DailyEntry:
    return DailyEntry(
        dt=day["dt"].as_int(),
        sunrise=day["sunrise"].as_int(),
        sunset=day["sunset"].as_int(),
        moonrise=day["moonrise"].as_int(),
        moonset=day["moonset"].as_int(),
        moon_phase=day["moon_phase"].as_float(),
        temp=_temperatures(day["temp"]),
        feels_like=_temperatures(day["feels_like"]),
        pressure=day["pressure"].as_int(),
        humidity=day["humidity"].as_int(),
        dew_point=day["dew_point"].as_float(),
        clouds=day["clouds"].as_int(),
        uvi=day["uvi"].as_float(),
        visibility=day["visibility"].as_int(),
        wind_speed=day["wind_speed"].as_float(),
        wind_gust=day["wind_gust"].as_float(),
        wind_deg=day["wind_deg"].as_int(),
        pop=day["pop"].as_float(),
        rain=day["rain"].as_float(),
        snow=day["snow"].as_float(),
        weather=_condition(day["weather"]),
    )


def _alert(alert: JsonView) -> AlertEntry:
    return AlertEntry(
        event=alert["event"].as_str(),
        start=alert["start"].as_int(),
        end=alert["end"].as_int(),
        tags=alert["tags"][0].as_str(),
    )


def normalize_onecall(
    stream: BinaryIO,
    report: WeatherReport,
    options: NormalizeOptions | None = None,
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Decode a OneCall response and overwrite ``report`` with it.

    Raises DecodeError before touching ``report`` if the body cannot be
    decoded. Entries past a section's capacity are dropped, earliest wins.
    """
    options = options or NormalizeOptions()
    logger = logger or _logger

    document = decode(
        stream,
        build_onecall_filter(options.alerts_enabled),
        max_nodes=options.max_nodes,
        max_depth=options.max_depth,
    )
    report_document(
        document,
        diagnostic_level=options.diagnostic_level,
        source="onecall",
        logger=logger,
    )

    report.location = Location(
        lat=document["lat"].as_float(),
        lon=document["lon"].as_float(),
        timezone=document["timezone"].as_str(),
        timezone_offset=document["timezone_offset"].as_int(),
    )
    report.current = _current(document["current"])

    report.hourly.clear()
    for hour in document["hourly"].elements():
        if not report.hourly.push(_hourly(hour)):
            break

    report.daily.clear()
    for day in document["daily"].elements():
        if not report.daily.push(_daily(day)):
            break

    report.alerts.clear()
    if options.alerts_enabled:
        for alert in document["alerts"].elements():
            if not report.alerts.push(_alert(alert)):
                break

    logger.debug(
        "OneCall normalized: hourly=%d daily=%d alerts=%d",
        len(report.hourly),
        len(report.daily),
        len(report.alerts),
    )
