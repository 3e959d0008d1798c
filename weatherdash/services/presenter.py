from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional, Tuple

from .. import weather_codes
from ..entities import DisplayUnit, ForecastSnapshot


FORECAST_DAYS = 3
PLACEHOLDER = "--"
DESCRIPTION_PLACEHOLDER = "---"
WIND_UNIT = "km/h"
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class ForecastCard:
    day: str
    icon: str
    temperature_min: Optional[int]
    temperature_max: Optional[int]
    summary: str


@dataclass(frozen=True)
class DisplayModel:
    location: str
    temperature: str
    unit: str
    description: str
    icon: str
    humidity: str
    wind_speed: str
    wind_unit: str
    forecast: Tuple[ForecastCard, ...]
    toggle_label: str

    def as_dict(self) -> dict:
        payload = asdict(self)
        payload["forecast"] = [asdict(card) for card in self.forecast]
        return payload


def convert_temperature(celsius: float, unit: DisplayUnit) -> float:
    if unit is DisplayUnit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    return celsius


def round_half_up(value: float) -> int:
    """Round .5 towards positive infinity, so 2.5 -> 3 and -2.5 -> -2."""
    return math.floor(value + 0.5)


def _rounded(celsius: Optional[float], unit: DisplayUnit) -> Optional[int]:
    if celsius is None:
        return None
    return round_half_up(convert_temperature(celsius, unit))


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def toggle_label(unit: DisplayUnit) -> str:
    """Caption for the unit switch, naming the unit it switches to."""
    return f"Switch to °{unit.toggled().symbol}"


def _degrees(value: Optional[int]) -> str:
    return PLACEHOLDER if value is None else f"{value}°"


def render_cards(snapshot: ForecastSnapshot, unit: DisplayUnit) -> Tuple[ForecastCard, ...]:
    # index 0 is today and is shown as current conditions
    cards: List[ForecastCard] = []
    for day in snapshot.daily[1 : FORECAST_DAYS + 1]:
        low = _rounded(day.temperature_min_c, unit)
        high = _rounded(day.temperature_max_c, unit)
        cards.append(
            ForecastCard(
                day=weekday_name(day.date),
                icon=weather_codes.icon(day.weather_code),
                temperature_min=low,
                temperature_max=high,
                summary=f"{_degrees(low)} / {_degrees(high)}",
            )
        )
    return tuple(cards)


def render(snapshot: ForecastSnapshot, unit: DisplayUnit, location: str) -> DisplayModel:
    """Build the display model for ``snapshot`` in ``unit``. Pure; the snapshot is never modified."""
    humidity = snapshot.humidity[0] if snapshot.humidity else None
    wind = snapshot.wind_speed_kmh if snapshot.wind_speed_kmh is not None else 0
    return DisplayModel(
        location=location,
        temperature=f"{_rounded(snapshot.temperature_c, unit)} °{unit.symbol}",
        unit=unit.symbol,
        description=weather_codes.describe(snapshot.weather_code),
        icon=weather_codes.icon(snapshot.weather_code),
        humidity=PLACEHOLDER if humidity is None else f"{humidity:g}",
        wind_speed=str(round_half_up(wind)),
        wind_unit=WIND_UNIT,
        forecast=render_cards(snapshot, unit),
        toggle_label=toggle_label(unit),
    )


def empty_display(location: str, unit: DisplayUnit = DisplayUnit.CELSIUS) -> DisplayModel:
    return DisplayModel(
        location=location,
        temperature=PLACEHOLDER,
        unit=unit.symbol,
        description=DESCRIPTION_PLACEHOLDER,
        icon="",
        humidity=PLACEHOLDER,
        wind_speed=PLACEHOLDER,
        wind_unit=WIND_UNIT,
        forecast=(),
        toggle_label=toggle_label(unit),
    )


__all__ = [
    "DisplayModel",
    "ForecastCard",
    "convert_temperature",
    "empty_display",
    "render",
    "render_cards",
    "round_half_up",
    "toggle_label",
    "weekday_name",
]
