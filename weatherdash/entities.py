from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def label(self) -> str:
        """Fallback display label used when no place name can be derived."""
        return f"{self.lat:.2f}, {self.lon:.2f}"


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class GeocodeCandidate:
    """One Nominatim result, either from a search or a reverse lookup."""

    coordinates: Coordinates
    type: Optional[str] = None
    address: Mapping[str, str] = field(default_factory=dict)
    name: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "GeocodeCandidate":
        """Build a candidate from Nominatim JSON; raises ``ValueError`` without coordinates."""
        # Nominatim sends coordinates as strings
        try:
            coordinates = Coordinates(lat=float(payload["lat"]), lon=float(payload["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("geocode result without coordinates") from exc
        address = payload.get("address")
        return cls(
            coordinates=coordinates,
            type=_text(payload.get("type")),
            address=dict(address) if isinstance(address, Mapping) else {},
            name=_text(payload.get("name")),
            display_name=_text(payload.get("display_name")),
        )


@dataclass(frozen=True)
class CanonicalPlace:
    label: str
    coordinates: Coordinates

    def __post_init__(self) -> None:
        if not self.label:
            raise ValueError("place label must not be empty")

    def as_dict(self) -> dict:
        return {"label": self.label, "lat": self.coordinates.lat, "lon": self.coordinates.lon}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CanonicalPlace":
        return cls(label=payload["label"], coordinates=Coordinates(lat=payload["lat"], lon=payload["lon"]))


@dataclass(frozen=True)
class DailyForecast:
    date: date
    temperature_max_c: Optional[float]
    temperature_min_c: Optional[float]
    weather_code: Optional[int]


@dataclass(frozen=True)
class ForecastSnapshot:
    """Current conditions plus daily and hourly series for one location.

    Temperatures are in Celsius and wind speed in km/h, as delivered by
    Open-Meteo. Index 0 of ``daily`` is today. ``humidity`` stays aligned to
    the hourly timestamps, so missing hours are ``None``.
    """

    temperature_c: float
    weather_code: Optional[int]
    wind_speed_kmh: Optional[float]
    daily: Tuple[DailyForecast, ...]
    humidity: Tuple[Optional[float], ...] = ()

    def as_dict(self) -> dict:
        return {
            "temperature_c": self.temperature_c,
            "weather_code": self.weather_code,
            "wind_speed_kmh": self.wind_speed_kmh,
            "daily": [
                [day.date.isoformat(), day.temperature_max_c, day.temperature_min_c, day.weather_code]
                for day in self.daily
            ],
            "humidity": list(self.humidity),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ForecastSnapshot":
        return cls(
            temperature_c=payload["temperature_c"],
            weather_code=payload["weather_code"],
            wind_speed_kmh=payload["wind_speed_kmh"],
            daily=tuple(
                DailyForecast(date.fromisoformat(day), high, low, code)
                for day, high, low, code in payload["daily"]
            ),
            humidity=tuple(payload["humidity"]),
        )


class DisplayUnit(enum.Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def symbol(self) -> str:
        return "C" if self is DisplayUnit.CELSIUS else "F"

    def toggled(self) -> "DisplayUnit":
        if self is DisplayUnit.CELSIUS:
            return DisplayUnit.FAHRENHEIT
        return DisplayUnit.CELSIUS


__all__ = [
    "CanonicalPlace",
    "Coordinates",
    "DailyForecast",
    "DisplayUnit",
    "ForecastSnapshot",
    "GeocodeCandidate",
]
