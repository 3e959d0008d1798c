from __future__ import annotations

import logging
import math
from datetime import date
from typing import List, Optional

from .base import HttpProvider, ServiceError
from ..entities import DailyForecast, ForecastSnapshot


class OpenMeteoProvider(HttpProvider):
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self._log = logging.getLogger(self.__class__.__name__)

    def forecast(self, latitude: float, longitude: float) -> ForecastSnapshot:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current_weather": "true",
            "hourly": "relativehumidity_2m",
            "daily": "temperature_2m_max,temperature_2m_min,weathercode",
            "timezone": "auto",
        }
        data = self._get_json(self.base_url, params)
        if not isinstance(data, dict):
            raise ServiceError("forecast response is not an object")

        current = data.get("current_weather")
        if not isinstance(current, dict):
            raise ServiceError("missing current weather")
        temperature = _safe_float(current.get("temperature"))
        if temperature is None:
            raise ServiceError("missing current temperature")

        daily = data.get("daily")
        if not isinstance(daily, dict):
            raise ServiceError("missing daily data")
        dates = daily.get("time")
        if not isinstance(dates, list) or not dates:
            raise ServiceError("missing daily data")
        temps_max = daily.get("temperature_2m_max") or []
        temps_min = daily.get("temperature_2m_min") or []
        codes = daily.get("weathercode") or []
        days: List[DailyForecast] = []
        for idx, date_str in enumerate(dates):
            days.append(
                DailyForecast(
                    date=self._parse_date(date_str),
                    temperature_max_c=_safe_index(temps_max, idx),
                    temperature_min_c=_safe_index(temps_min, idx),
                    weather_code=_safe_int(_safe_index(codes, idx)),
                )
            )

        # keep hour alignment, a null first hour means "no humidity"
        hourly = data.get("hourly")
        series = hourly.get("relativehumidity_2m") if isinstance(hourly, dict) else None
        humidity = tuple(_safe_float(v) for v in series) if isinstance(series, list) else ()
        return ForecastSnapshot(
            temperature_c=temperature,
            weather_code=_safe_int(current.get("weathercode")),
            wind_speed_kmh=_safe_float(current.get("windspeed")),
            daily=tuple(days),
            humidity=humidity,
        )

    # helpers ------------------------------------------------------------
    def _parse_date(self, value: object) -> date:
        if not isinstance(value, str):
            raise ServiceError(f"invalid daily date {value!r}")
        try:
            return date.fromisoformat(value[:10])
        except ValueError as exc:
            self._log.error("Invalid daily date %r", value)
            raise ServiceError(f"invalid daily date {value!r}") from exc


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _safe_int(value: Optional[object]) -> Optional[int]:
    number = _safe_float(value)
    if number is None:
        return None
    return int(number)


def _safe_index(values: List[Optional[float]], index: int) -> Optional[float]:
    try:
        value = values[index]
    except (IndexError, KeyError, TypeError):
        return None
    return _safe_float(value)


__all__ = ["OpenMeteoProvider"]
