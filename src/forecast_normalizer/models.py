"""Canonical, capacity-bounded weather model shared by all normalizers.

All temperatures are Kelvin. Every numeric field defaults to a zero of its
type so a section that a source leaves out still reads as a defined value.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .bounded import BoundedSequence

HOURLY_MAX = 48
DAILY_MAX = 8
ALERTS_MAX = 8
AIR_MAX = 24

POLLUTANTS = ("co", "no", "no2", "o3", "so2", "pm2_5", "pm10", "nh3")


@dataclass(slots=True)
class WeatherCondition:
    """Numeric condition code plus its display strings."""

    id: int = 0
    main: str = ""
    description: str = ""
    icon: str = ""


@dataclass(slots=True)
class CurrentConditions:
    dt: int = 0
    sunrise: int = 0
    sunset: int = 0
    temp: float = 0.0
    feels_like: float = 0.0
    pressure: int = 0
    humidity: int = 0
    dew_point: float = 0.0
    clouds: int = 0
    uvi: float = 0.0
    visibility: int = 0
    wind_speed: float = 0.0
    wind_gust: float = 0.0
    wind_deg: int = 0
    rain_1h: float = 0.0
    snow_1h: float = 0.0
    weather: WeatherCondition = field(default_factory=WeatherCondition)


@dataclass(slots=True)
class HourlyEntry:
    dt: int = 0
    temp: float = 0.0
    feels_like: float = 0.0
    pressure: int = 0
    humidity: int = 0
    dew_point: float = 0.0
    clouds: int = 0
    uvi: float = 0.0
    visibility: int = 0
    wind_speed: float = 0.0
    wind_gust: float = 0.0
    wind_deg: int = 0
    pop: float = 0.0
    rain_1h: float = 0.0
    snow_1h: float = 0.0
    weather: WeatherCondition = field(default_factory=WeatherCondition)


@dataclass(slots=True)
class DailyTemperature:
    """Per-part-of-day temperatures; ``min``/``max`` stay 0 for feels-like."""

    morn: float = 0.0
    day: float = 0.0
    eve: float = 0.0
    night: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass(slots=True)
class DailyEntry:
    dt: int = 0
    sunrise: int = 0
    sunset: int = 0
    moonrise: int = 0
    moonset: int = 0
    moon_phase: float = 0.0
    temp: DailyTemperature = field(default_factory=DailyTemperature)
    feels_like: DailyTemperature = field(default_factory=DailyTemperature)
    pressure: int = 0
    humidity: int = 0
    dew_point: float = 0.0
    clouds: int = 0
    uvi: float = 0.0
    visibility: int = 0
    wind_speed: float = 0.0
    wind_gust: float = 0.0
    wind_deg: int = 0
    pop: float = 0.0
    rain: float = 0.0
    snow: float = 0.0
    weather: WeatherCondition = field(default_factory=WeatherCondition)


@dataclass(slots=True)
class AlertEntry:
    event: str = ""
    start: int = 0
    end: int = 0
    tags: str = ""


@dataclass(slots=True)
class Location:
    lat: float = 0.0
    lon: float = 0.0
    timezone: str = ""
    timezone_offset: int = 0


@dataclass(slots=True)
class WeatherReport:
    """Destination of the OneCall and MeteoBlue normalizers."""

    location: Location = field(default_factory=Location)
    current: CurrentConditions = field(default_factory=CurrentConditions)
    hourly: BoundedSequence[HourlyEntry] = field(
        default_factory=lambda: BoundedSequence(HOURLY_MAX)
    )
    daily: BoundedSequence[DailyEntry] = field(
        default_factory=lambda: BoundedSequence(DAILY_MAX)
    )
    alerts: BoundedSequence[AlertEntry] = field(
        default_factory=lambda: BoundedSequence(ALERTS_MAX)
    )

    @classmethod
    def allocate(
        cls,
        *,
        hourly_max: int = HOURLY_MAX,
        daily_max: int = DAILY_MAX,
        alerts_max: int = ALERTS_MAX,
    ) -> WeatherReport:
        """Create an empty report with explicit section capacities."""
        return cls(
            hourly=BoundedSequence(hourly_max),
            daily=BoundedSequence(daily_max),
            alerts=BoundedSequence(alerts_max),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": asdict(self.location),
            "current": asdict(self.current),
            "hourly": [asdict(entry) for entry in self.hourly],
            "daily": [asdict(entry) for entry in self.daily],
            "alerts": [asdict(entry) for entry in self.alerts],
        }


class AirQualityReport:
    """Air quality samples stored as parallel sequences sharing one index.

    ``aqi``, each pollutant sequence and ``dt`` always have the same length;
    ``append`` writes all of them or none.
    """

    def __init__(self, capacity: int = AIR_MAX) -> None:
        self.capacity = capacity
        self.lat = 0.0
        self.lon = 0.0
        self.aqi: BoundedSequence[int] = BoundedSequence(capacity)
        self.components: dict[str, BoundedSequence[float]] = {
            name: BoundedSequence(capacity) for name in POLLUTANTS
        }
        self.dt: BoundedSequence[int] = BoundedSequence(capacity)

    def append(self, *, aqi: int, components: dict[str, float], dt: int) -> bool:
        """Store one sample at the next index; return False once full."""
        if self.aqi.is_full():
            return False
        self.aqi.push(aqi)
        for name in POLLUTANTS:
            self.components[name].push(components.get(name, 0.0))
        self.dt.push(dt)
        return True

    def clear(self) -> None:
        self.aqi.clear()
        for sequence in self.components.values():
            sequence.clear()
        self.dt.clear()

    def __len__(self) -> int:
        return len(self.aqi)

    def to_dict(self) -> dict[str, Any]:
        return {
            "coord": {"lat": self.lat, "lon": self.lon},
            "aqi": self.aqi.snapshot(),
            "components": {name: seq.snapshot() for name, seq in self.components.items()},
            "dt": self.dt.snapshot(),
        }
