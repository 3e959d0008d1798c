from __future__ import annotations

import enum
import itertools
import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Iterator, Mapping, Optional

from ..entities import CanonicalPlace, DisplayUnit, ForecastSnapshot
from ..providers.base import NotFound, ServiceError
from .location import LocationResolver
from .presenter import DisplayModel, empty_display, render


DETECTING = "Detecting location..."
CITY_NOT_FOUND = "City not found!"
SEARCH_FAILED = "Search failed."
LOAD_FAILED = "Failed to load."
LOCATION_NOT_ALLOWED = "Location not allowed."
GEOLOCATION_UNSUPPORTED = "Geolocation not supported."

GEOLOCATION_OPTIONS = {"enableHighAccuracy": True, "timeout": 10000}


class GeolocationError(enum.Enum):
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"

    @property
    def message(self) -> str:
        if self is GeolocationError.UNSUPPORTED:
            return GEOLOCATION_UNSUPPORTED
        return LOCATION_NOT_ALLOWED


@dataclass(frozen=True)
class DashboardState:
    place: Optional[CanonicalPlace] = None
    snapshot: Optional[ForecastSnapshot] = None
    unit: DisplayUnit = DisplayUnit.CELSIUS
    status: Optional[str] = DETECTING
    sequence: int = 0

    def as_dict(self) -> dict:
        """Plain JSON form, as kept in the browser session."""
        return {
            "place": self.place.as_dict() if self.place else None,
            "snapshot": self.snapshot.as_dict() if self.snapshot else None,
            "unit": self.unit.value,
            "status": self.status,
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DashboardState":
        place = payload.get("place")
        snapshot = payload.get("snapshot")
        return cls(
            place=CanonicalPlace.from_dict(place) if place else None,
            snapshot=ForecastSnapshot.from_dict(snapshot) if snapshot else None,
            unit=DisplayUnit(payload.get("unit", DisplayUnit.CELSIUS.value)),
            status=payload.get("status"),
            sequence=int(payload.get("sequence", 0)),
        )


class Dashboard:
    """Application state plus the user actions that change it.

    Every action returns the display model to paint and never raises for
    service trouble. Each fetch chain takes a token when it starts; with
    ``discard_stale`` a chain that finishes after a newer one has been applied
    is dropped, otherwise the last chain to finish wins.

    A dashboard may start from a saved ``state``; ``tokens`` lets several
    dashboards draw from one counter so their tokens stay ordered.
    """

    def __init__(
        self,
        *,
        resolver: LocationResolver,
        weather_provider,
        discard_stale: bool = False,
        state: Optional[DashboardState] = None,
        tokens: Optional[Iterator[int]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.resolver = resolver
        self.weather = weather_provider
        self.discard_stale = discard_stale
        self._state = state or DashboardState()
        self._lock = threading.Lock()
        self._tokens = tokens if tokens is not None else itertools.count(1)
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @property
    def state(self) -> DashboardState:
        return self._state

    # Public API ---------------------------------------------------------
    def display(self) -> DisplayModel:
        state = self._state
        if state.snapshot is None or state.place is None:
            return empty_display(state.status or DETECTING, state.unit)
        return render(state.snapshot, state.unit, state.status or state.place.label)

    def search(self, city: str) -> DisplayModel:
        city = (city or "").strip()
        if not city:
            return self.display()
        token = self._next_token()
        try:
            place = self.resolver.resolve_by_search(city)
        except NotFound:
            self._log.info("No place found for %r", city)
            return self._apply(token, status=CITY_NOT_FOUND)
        except ServiceError as exc:
            self._log.error("Search for %r failed: %s", city, exc)
            return self._apply(token, status=SEARCH_FAILED)
        return self._load(token, place)

    def locate(self, latitude: float, longitude: float) -> DisplayModel:
        token = self._next_token()
        place = self.resolver.resolve_by_coordinates(latitude, longitude)
        return self._load(token, place)

    def geolocation_failed(self, error: GeolocationError) -> DisplayModel:
        self._log.warning("Geolocation error: %s", error.value)
        return self._apply(self._next_token(), status=error.message)

    def toggle_unit(self) -> DisplayModel:
        with self._lock:
            self._state = replace(self._state, unit=self._state.unit.toggled())
        return self.display()

    # Helpers ------------------------------------------------------------
    def _next_token(self) -> int:
        with self._lock:
            return next(self._tokens)

    def _load(self, token: int, place: CanonicalPlace) -> DisplayModel:
        lat, lon = place.coordinates.lat, place.coordinates.lon
        try:
            snapshot = self.weather.forecast(lat, lon)
        except ServiceError as exc:
            self._log.error("Weather fetch for %s failed: %s", place.label, exc)
            return self._apply(token, status=LOAD_FAILED, place=None, snapshot=None)
        return self._apply(token, status=None, place=place, snapshot=snapshot)

    def _apply(self, token: int, **changes) -> DisplayModel:
        with self._lock:
            if self.discard_stale and token < self._state.sequence:
                self._log.info("Dropping stale result %s (current %s)", token, self._state.sequence)
            else:
                self._state = replace(self._state, sequence=max(token, self._state.sequence), **changes)
        return self.display()


__all__ = [
    "Dashboard",
    "DashboardState",
    "GEOLOCATION_OPTIONS",
    "GeolocationError",
]
