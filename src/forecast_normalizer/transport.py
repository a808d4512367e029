"""HTTP transport that delivers raw response bodies to the normalizers."""

from __future__ import annotations

import io
import logging
from typing import Any

import httpx

from .config import Settings
from .exceptions import TransportError
from .redaction import sanitize_text


class HttpTransport:
    """Fetch provider response bodies; a failed request is reported once."""

    def __init__(self, settings: Settings, logger: logging.Logger) -> None:
        self.settings = settings
        self.logger = logger
        self._client = httpx.Client(
            timeout=settings.http_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _owm_url(self, path: str) -> str:
        return str(self.settings.owm_api_base_url).rstrip("/") + path

    def _owm_params(self) -> dict[str, Any]:
        if not self.settings.owm_api_key:
            raise TransportError("OWM_API_KEY is required to fetch OpenWeatherMap data.")
        if self.settings.latitude is None or self.settings.longitude is None:
            raise TransportError("LATITUDE and LONGITUDE are required to fetch forecasts.")
        return {
            "lat": self.settings.latitude,
            "lon": self.settings.longitude,
            "appid": self.settings.owm_api_key,
        }

    def fetch_onecall(self) -> io.BytesIO:
        params = self._owm_params()
        params.update({"lang": self.settings.owm_lang, "units": "standard", "exclude": "minutely"})
        return self.get(self._owm_url("/data/3.0/onecall"), params=params, context="onecall")

    def fetch_air_quality(self) -> io.BytesIO:
        return self.get(
            self._owm_url("/data/2.5/air_pollution/forecast"),
            params=self._owm_params(),
            context="air quality",
        )

    def fetch_meteoblue(self) -> io.BytesIO:
        if self.settings.meteoblue_url is None:
            raise TransportError("METEOBLUE_URL is required to fetch MeteoBlue data.")
        return self.get(str(self.settings.meteoblue_url), params=None, context="meteoblue")

    def get(self, url: str, *, params: dict[str, Any] | None, context: str) -> io.BytesIO:
        """GET ``url`` and return the body as a stream positioned at its start."""
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"{context} request failed with status {exc.response.status_code} "
                f"at {sanitize_text(str(exc.request.url))}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{context} request failed ({type(exc).__name__}): {sanitize_text(str(exc))}"
            ) from exc

        self.logger.info(
            "Fetched %s response: %d bytes from %s",
            context,
            len(response.content),
            sanitize_text(str(response.url)),
        )
        return io.BytesIO(response.content)
