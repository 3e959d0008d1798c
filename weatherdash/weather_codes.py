"""WMO weather interpretation codes as reported by Open-Meteo.

Two tables live here. ``DESCRIPTIONS`` names every code the service documents.
``CATEGORIES`` groups codes into coarse visual buckets for icons and is
deliberately coarser: freezing rain and all snow grades share one bucket.
Code 83 only appears in the icon grouping, so it renders with the showers
icon and an "Unknown" description.
"""
from __future__ import annotations

from typing import Dict, Optional

UNKNOWN_DESCRIPTION = "Unknown"
PLACEHOLDER_ICON = "⬜"

DESCRIPTIONS: Dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

ICONS: Dict[str, str] = {
    "clear": "☀️",
    "mainly_clear": "🌤️",
    "partly_cloudy": "⛅",
    "overcast": "☁️",
    "fog": "░▒▓",
    "drizzle": "🌦️",
    "rain": "🌧️",
    "snow": "❄️",
    "showers": "☔",
    "storm": "⚡",
}

_GROUPS = {
    "clear": (0,),
    "mainly_clear": (1,),
    "partly_cloudy": (2,),
    "overcast": (3,),
    "fog": (45, 48),
    "drizzle": (51, 53, 55, 56, 57),
    "rain": (61, 63, 65),
    "snow": (66, 67, 71, 73, 75, 77, 85, 86),
    "showers": (80, 81, 82, 83),
    "storm": (95, 96, 99),
}

CATEGORIES: Dict[int, str] = {code: tag for tag, codes in _GROUPS.items() for code in codes}


def category(code: Optional[int]) -> Optional[str]:
    return CATEGORIES.get(code) if code is not None else None


def describe(code: Optional[int]) -> str:
    if code is None:
        return UNKNOWN_DESCRIPTION
    return DESCRIPTIONS.get(code, UNKNOWN_DESCRIPTION)


def icon(code: Optional[int]) -> str:
    tag = category(code)
    if tag is None:
        return PLACEHOLDER_ICON
    return ICONS[tag]


__all__ = [
    "CATEGORIES",
    "DESCRIPTIONS",
    "ICONS",
    "PLACEHOLDER_ICON",
    "UNKNOWN_DESCRIPTION",
    "category",
    "describe",
    "icon",
]
