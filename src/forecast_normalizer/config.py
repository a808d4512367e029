"""Typed settings loader for forecast normalization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .decoder import DEFAULT_MAX_DEPTH, DEFAULT_MAX_NODES
from .exceptions import ConfigError
from .models import AIR_MAX, ALERTS_MAX, DAILY_MAX, HOURLY_MAX


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    forecast_provider: Literal["onecall", "meteoblue"] = Field(
        default="onecall",
        alias="FORECAST_PROVIDER",
    )
    alerts_enabled: bool = Field(default=True, alias="ALERTS_ENABLED")
    diagnostic_level: int = Field(default=0, alias="DIAGNOSTIC_LEVEL")

    hourly_max: int = Field(default=HOURLY_MAX, alias="HOURLY_MAX")
    daily_max: int = Field(default=DAILY_MAX, alias="DAILY_MAX")
    alerts_max: int = Field(default=ALERTS_MAX, alias="ALERTS_MAX")
    air_max: int = Field(default=AIR_MAX, alias="AIR_MAX")
    decoder_max_nodes: int = Field(default=DEFAULT_MAX_NODES, alias="DECODER_MAX_NODES")
    decoder_max_depth: int = Field(default=DEFAULT_MAX_DEPTH, alias="DECODER_MAX_DEPTH")

    owm_api_key: str | None = Field(default=None, alias="OWM_API_KEY", repr=False)
    owm_api_base_url: AnyUrl = Field(
        default=AnyUrl("https://api.openweathermap.org"),
        alias="OWM_API_BASE_URL",
    )
    owm_lang: str = Field(default="en", alias="OWM_LANG")
    meteoblue_url: AnyUrl | None = Field(default=None, alias="METEOBLUE_URL")
    latitude: float | None = Field(default=None, alias="LATITUDE")
    longitude: float | None = Field(default=None, alias="LONGITUDE")
    http_timeout_seconds: float = Field(default=15.0, alias="HTTP_TIMEOUT_SECONDS")

    @field_validator("latitude", "longitude", "meteoblue_url", "owm_api_key", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset optional fields."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_limits(self) -> Settings:
        """Validate capacities, timeouts and the location pair."""
        for name in (
            "hourly_max",
            "daily_max",
            "alerts_max",
            "air_max",
            "decoder_max_nodes",
            "decoder_max_depth",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be > 0.")
        if self.http_timeout_seconds <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be > 0.")
        if self.diagnostic_level not in (0, 1, 2):
            raise ValueError("DIAGNOSTIC_LEVEL must be 0, 1 or 2.")

        has_lat = self.latitude is not None
        has_lon = self.longitude is not None
        if has_lat != has_lon:
            raise ValueError("LATITUDE and LONGITUDE must be set together.")
        if has_lat and not (-90 <= self.latitude <= 90):
            raise ValueError("LATITUDE must be between -90 and 90.")
        if has_lon and not (-180 <= self.longitude <= 180):
            raise ValueError("LONGITUDE must be between -180 and 180.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "forecast_provider": self.forecast_provider,
            "alerts_enabled": self.alerts_enabled,
            "diagnostic_level": self.diagnostic_level,
            "hourly_max": self.hourly_max,
            "daily_max": self.daily_max,
            "alerts_max": self.alerts_max,
            "air_max": self.air_max,
            "decoder_max_nodes": self.decoder_max_nodes,
            "decoder_max_depth": self.decoder_max_depth,
            "owm_api_base_url": str(self.owm_api_base_url),
            "owm_api_key_set": bool(self.owm_api_key),
            "meteoblue_url_set": self.meteoblue_url is not None,
            "http_timeout_seconds": self.http_timeout_seconds,
        }


@dataclass(frozen=True, slots=True)
class NormalizeOptions:
    """Runtime switches passed into every normalizer call."""

    alerts_enabled: bool = True
    diagnostic_level: int = 0
    max_nodes: int = DEFAULT_MAX_NODES
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_settings(cls, settings: Settings) -> NormalizeOptions:
        return cls(
            alerts_enabled=settings.alerts_enabled,
            diagnostic_level=settings.diagnostic_level,
            max_nodes=settings.decoder_max_nodes,
            max_depth=settings.decoder_max_depth,
        )


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
