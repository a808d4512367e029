"""Settings validation, logging redaction and the forecast CLI."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import pytest
from rich.console import Console

from forecast_normalizer.cli import main, parse_args, run
from forecast_normalizer.config import NormalizeOptions, Settings, load_settings
from forecast_normalizer.exceptions import ConfigError, TransportError
from forecast_normalizer.log_setup import JsonConsoleFormatter
from forecast_normalizer.redaction import REDACTED, sanitize_for_logging, sanitize_text
from forecast_normalizer.transport import HttpTransport

_ONECALL = {
    "lat": 51.5,
    "lon": -0.12,
    "timezone": "Europe/London",
    "timezone_offset": 0,
    "current": {"dt": 1_710_050_400, "temp": 283.15, "weather": [{"id": 800, "icon": "01d"}]},
    "hourly": [{"dt": 1_710_050_400 + 3600 * i, "temp": 283.0 + i} for i in range(6)],
    "daily": [{"dt": 1_710_028_800, "temp": {"min": 280.0, "max": 290.0}}],
}


def _settings(monkeypatch: pytest.MonkeyPatch, **env: str) -> Settings:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(monkeypatch)
    assert settings.forecast_provider == "onecall"
    assert settings.alerts_enabled is True
    assert settings.diagnostic_level == 0
    assert (settings.hourly_max, settings.daily_max, settings.alerts_max, settings.air_max) == (
        48,
        8,
        8,
        24,
    )


def test_settings_from_env_and_options(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(
        monkeypatch,
        ALERTS_ENABLED="false",
        DIAGNOSTIC_LEVEL="2",
        DECODER_MAX_NODES="500",
        LATITUDE="",
        LONGITUDE="",
    )
    options = NormalizeOptions.from_settings(settings)
    assert options == NormalizeOptions(
        alerts_enabled=False, diagnostic_level=2, max_nodes=500, max_depth=10
    )
    assert settings.latitude is None


@pytest.mark.parametrize(
    "env",
    [
        {"DIAGNOSTIC_LEVEL": "3"},
        {"HOURLY_MAX": "0"},
        {"LATITUDE": "40.0"},
        {"LATITUDE": "91", "LONGITUDE": "0"},
        {"HTTP_TIMEOUT_SECONDS": "0"},
        {"FORECAST_PROVIDER": "darksky"},
    ],
)
def test_invalid_settings_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, env: dict[str, str]
) -> None:
    monkeypatch.chdir(tmp_path)
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_safe_summary_hides_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(monkeypatch, OWM_API_KEY="abc123secret")
    summary = settings.safe_summary()
    assert summary["owm_api_key_set"] is True
    assert "abc123secret" not in json.dumps(summary)
    assert "abc123secret" not in repr(settings)


def test_redaction_of_query_keys() -> None:
    url = "https://api.openweathermap.org/data/3.0/onecall?lat=1&appid=abc123&units=standard"
    assert sanitize_text(url) == url.replace("abc123", REDACTED)
    assert sanitize_for_logging({"appid": "abc", "nested": [{"apikey": "x"}], "lat": 1}) == {
        "appid": REDACTED,
        "nested": [{"apikey": REDACTED}],
        "lat": 1,
    }


def test_json_formatter_redacts_message() -> None:
    record = logging.LogRecord(
        "forecast_normalizer", logging.INFO, __file__, 1, "GET %s", ("/x?appid=k3y",), None
    )
    event = json.loads(JsonConsoleFormatter().format(record))
    assert event["level"] == "INFO"
    assert "k3y" not in event["message"]


def test_transport_wraps_http_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(monkeypatch, OWM_API_KEY="k", LATITUDE="1", LONGITUDE="2")
    transport = HttpTransport(settings, logging.getLogger("test_transport"))

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, request=request, text="bad key")

    transport.close()
    transport._client = httpx.Client(transport=httpx.MockTransport(_handler))
    with transport, pytest.raises(TransportError, match="status 401") as excinfo:
        transport.fetch_onecall()
    assert "appid=k&" not in str(excinfo.value)


def test_transport_returns_body_stream(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(monkeypatch, OWM_API_KEY="k", LATITUDE="1", LONGITUDE="2")
    transport = HttpTransport(settings, logging.getLogger("test_transport"))
    seen: list[httpx.URL] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, request=request, json={"list": []})

    transport.close()
    transport._client = httpx.Client(transport=httpx.MockTransport(_handler))
    with transport:
        body = transport.fetch_air_quality()
    assert json.loads(body.read()) == {"list": []}
    assert seen[0].path == "/data/2.5/air_pollution/forecast"
    assert seen[0].params["appid"] == "k"


def test_transport_requires_location(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = _settings(monkeypatch, OWM_API_KEY="k")
    with HttpTransport(settings, logging.getLogger("test_transport")) as transport:
        with pytest.raises(TransportError, match="LATITUDE"):
            transport.fetch_onecall()


def _run(
    monkeypatch: pytest.MonkeyPatch, argv: list[str], **env: str
) -> tuple[int, str]:
    settings = _settings(monkeypatch, **env)
    console = Console(file=io.StringIO(), width=200)
    code = run(parse_args(argv), settings, console)
    return code, console.file.getvalue()  # type: ignore[attr-defined]


def test_cli_prints_json_for_captured_onecall(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    body = tmp_path / "onecall.json"
    body.write_text(json.dumps(_ONECALL), encoding="utf-8")

    code, output = _run(monkeypatch, ["--input", str(body), "--json"], HOURLY_MAX="4")
    assert code == 0
    data: dict[str, Any] = json.loads(output)
    assert data["location"]["timezone"] == "Europe/London"
    assert [hour["dt"] for hour in data["hourly"]] == [
        hour["dt"] for hour in _ONECALL["hourly"][:4]
    ]


def test_cli_renders_tables(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    body = tmp_path / "onecall.json"
    body.write_text(json.dumps(_ONECALL), encoding="utf-8")
    code, output = _run(monkeypatch, ["--input", str(body), "--max-print", "2"])
    assert code == 0
    assert "Hourly (6/48)" in output
    assert "Daily (1/8)" in output


def test_cli_air_quality_table(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    body = tmp_path / "air.json"
    body.write_text(
        json.dumps({"list": [{"main": {"aqi": 2}, "components": {"pm2_5": 4.5}, "dt": 0}]}),
        encoding="utf-8",
    )
    code, output = _run(monkeypatch, ["--input", str(body), "--air-quality"], AIR_MAX="3")
    assert code == 0
    assert "Air quality (1/3)" in output


def test_cli_meteoblue_decode_failure_exit_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    body = tmp_path / "meteoblue.txt"
    body.write_bytes(b"preamble\n{broken")
    code, _ = _run(monkeypatch, ["--input", str(body), "--provider", "meteoblue"])
    assert code == 4


def test_cli_missing_input_file_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    code, _ = _run(monkeypatch, ["--input", str(tmp_path / "absent.json")])
    assert code == 4


def test_main_reports_config_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DIAGNOSTIC_LEVEL", "9")
    assert main(["--input", str(tmp_path / "x.json")]) == 2
