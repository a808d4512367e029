"""CLI: fetch or load a forecast response, normalize it and print a summary."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from rich.console import Console
from rich.table import Table

from .config import NormalizeOptions, Settings, load_settings
from .exceptions import ConfigError, DecodeError, TransportError
from .log_setup import setup_logger
from .models import AirQualityReport, WeatherReport
from .normalizers import Provider, normalize, normalize_air_quality
from .transport import HttpTransport


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse forecast CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Normalize a OneCall, MeteoBlue or air quality response."
    )
    parser.add_argument(
        "--provider",
        choices=[provider.value for provider in Provider],
        default=None,
        help="Forecast provider; defaults to FORECAST_PROVIDER.",
    )
    parser.add_argument(
        "--air-quality",
        action="store_true",
        help="Normalize an air pollution response instead of a forecast.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Read a captured response body from this file instead of fetching.",
    )
    parser.add_argument("--json", action="store_true", help="Print the model as JSON.")
    parser.add_argument(
        "--max-print",
        type=int,
        default=8,
        help="Number of hourly/daily rows to print.",
    )
    return parser.parse_args(argv)


def _fmt_time(epoch: int) -> str:
    if epoch == 0:
        return "-"
    return datetime.fromtimestamp(epoch, UTC).strftime("%Y-%m-%d %H:%M")


def _fmt_celsius(kelvin: float) -> str:
    return f"{kelvin - 273.15:.1f}"


def _print_forecast(console: Console, report: WeatherReport, max_print: int) -> None:
    current = report.current
    console.print(
        f"Location=({report.location.lat:.4f}, {report.location.lon:.4f}) "
        f"tz={report.location.timezone or '-'} offset={report.location.timezone_offset}s"
    )
    console.print(
        f"Now {_fmt_time(current.dt)} UTC: {_fmt_celsius(current.temp)} C "
        f"(feels {_fmt_celsius(current.feels_like)} C) icon={current.weather.icon or '-'} "
        f"sunrise={_fmt_time(current.sunrise)} sunset={_fmt_time(current.sunset)}"
    )

    hourly = Table(title=f"Hourly ({len(report.hourly)}/{report.hourly.capacity})")
    for column in ("Time (UTC)", "Temp C", "PoP", "Rain mm", "Wind", "Icon"):
        hourly.add_column(column)
    for hour in report.hourly[:max_print]:
        hourly.add_row(
            _fmt_time(hour.dt),
            _fmt_celsius(hour.temp),
            f"{hour.pop:.0%}",
            f"{hour.rain_1h:g}",
            f"{hour.wind_speed:g} @ {hour.wind_deg}",
            hour.weather.icon or "-",
        )
    console.print(hourly)

    daily = Table(title=f"Daily ({len(report.daily)}/{report.daily.capacity})")
    for column in ("Date (UTC)", "Min C", "Max C", "PoP", "Rain mm", "Icon"):
        daily.add_column(column)
    for day in report.daily[:max_print]:
        daily.add_row(
            _fmt_time(day.dt),
            _fmt_celsius(day.temp.min),
            _fmt_celsius(day.temp.max),
            f"{day.pop:.0%}",
            f"{day.rain:g}",
            day.weather.icon or "-",
        )
    console.print(daily)

    for alert in report.alerts:
        console.print(
            f"Alert: {alert.event} [{alert.tags or '-'}] "
            f"{_fmt_time(alert.start)} -> {_fmt_time(alert.end)}"
        )


def _print_air_quality(console: Console, report: AirQualityReport, max_print: int) -> None:
    table = Table(title=f"Air quality ({len(report)}/{report.capacity})")
    for column in ("Time (UTC)", "AQI", "PM2.5", "PM10", "O3", "NO2"):
        table.add_column(column)
    for index in range(min(len(report), max_print)):
        table.add_row(
            _fmt_time(report.dt[index]),
            str(report.aqi[index]),
            f"{report.components['pm2_5'][index]:g}",
            f"{report.components['pm10'][index]:g}",
            f"{report.components['o3'][index]:g}",
            f"{report.components['no2'][index]:g}",
        )
    console.print(table)


def _open_body(args: argparse.Namespace, transport: HttpTransport | None) -> BinaryIO:
    if args.input is not None:
        try:
            return args.input.open("rb")
        except OSError as exc:
            raise TransportError(f"Failed opening {args.input}: {exc}") from exc
    if transport is None:
        raise TransportError("No input file given and no transport available.")
    if args.air_quality:
        return transport.fetch_air_quality()
    if args.provider == Provider.METEOBLUE.value:
        return transport.fetch_meteoblue()
    return transport.fetch_onecall()


def run(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    """Normalize one response according to ``args``; return the exit code."""
    logger = setup_logger()
    options = NormalizeOptions.from_settings(settings)
    args.provider = args.provider or settings.forecast_provider
    if args.max_print <= 0:
        logger.error("--max-print must be > 0.")
        return 2

    transport = HttpTransport(settings, logger) if args.input is None else None
    try:
        with _open_body(args, transport) as body:
            if args.air_quality:
                air = AirQualityReport(settings.air_max)
                normalize_air_quality(body, air, options, logger=logger)
                payload = air.to_dict()
                if not args.json:
                    _print_air_quality(console, air, args.max_print)
            else:
                report = WeatherReport.allocate(
                    hourly_max=settings.hourly_max,
                    daily_max=settings.daily_max,
                    alerts_max=settings.alerts_max,
                )
                normalize(args.provider, body, report, options, logger=logger)
                payload = report.to_dict()
                if not args.json:
                    _print_forecast(console, report, args.max_print)
    except (TransportError, DecodeError) as exc:
        logger.error("Normalization failure: %s", exc)
        return 4
    finally:
        if transport is not None:
            transport.close()

    if args.json:
        console.print_json(json.dumps(payload))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the forecast-normalize command."""
    args = parse_args(argv)
    logger = setup_logger()
    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger.info("Settings: %s", settings.safe_summary())
    return run(args, settings, Console())


if __name__ == "__main__":
    sys.exit(main())
