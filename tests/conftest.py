from __future__ import annotations

import pytest


@pytest.fixture
def paris_search_payload() -> list:
    return [
        {
            "lat": "48.8588897",
            "lon": "2.3200410",
            "type": "administrative",
            "name": "Paris",
            "display_name": "Paris, Ile-de-France, Metropolitan France, France",
            "address": {"city": "Paris", "state": "Ile-de-France", "country": "France"},
        },
        {
            "lat": "33.6617962",
            "lon": "-95.5555130",
            "type": "town",
            "name": "Paris",
            "display_name": "Paris, Lamar County, Texas, United States",
            "address": {"town": "Paris", "county": "Lamar County", "state": "Texas", "country": "United States"},
        },
    ]


@pytest.fixture
def forecast_payload() -> dict:
    return {
        "latitude": 48.86,
        "longitude": 2.34,
        "timezone": "Europe/Paris",
        "current_weather": {
            "time": "2024-05-06T12:00",
            "temperature": 15,
            "windspeed": 11.6,
            "winddirection": 250,
            "weathercode": 3,
        },
        "hourly": {
            "time": ["2024-05-06T00:00", "2024-05-06T01:00"],
            "relativehumidity_2m": [71, 70],
        },
        "daily": {
            "time": ["2024-05-06", "2024-05-07", "2024-05-08", "2024-05-09"],
            "temperature_2m_max": [18.0, 20.4, 22.5, 17.0],
            "temperature_2m_min": [9.0, 10.6, 12.5, 8.0],
            "weathercode": [3, 61, 0, 95],
        },
    }
