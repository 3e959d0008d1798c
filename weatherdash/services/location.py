"""Turn free-text queries or raw coordinates into a displayable place."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from ..entities import CanonicalPlace, Coordinates, GeocodeCandidate
from ..providers.base import NotFound, ServiceError


logger = logging.getLogger(__name__)

PLACE_KEYS = ("city", "town", "village", "hamlet", "municipality", "county", "state")
SETTLEMENT_TYPES = frozenset({"city", "town", "village", "municipality"})
SETTLEMENT_ADDRESS_KEYS = ("city", "town", "village", "hamlet")

Extractor = Callable[[GeocodeCandidate], Optional[str]]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _address_value(key: str) -> Extractor:
    def extract(candidate: GeocodeCandidate) -> Optional[str]:
        return _clean(candidate.address.get(key))

    extract.__name__ = f"address_{key}"
    return extract


def _name(candidate: GeocodeCandidate) -> Optional[str]:
    return _clean(candidate.name)


def _first_display_segment(candidate: GeocodeCandidate) -> Optional[str]:
    if not candidate.display_name:
        return None
    return _clean(candidate.display_name.split(",")[0])


def _last_display_segment(candidate: GeocodeCandidate) -> Optional[str]:
    if not candidate.display_name:
        return None
    return _clean(candidate.display_name.split(",")[-1])


PLACE_STRATEGIES: Sequence[Extractor] = (
    *(_address_value(key) for key in PLACE_KEYS),
    _name,
    _first_display_segment,
)
COUNTRY_STRATEGIES: Sequence[Extractor] = (
    _address_value("country"),
    _last_display_segment,
)


def first_match(candidate: GeocodeCandidate, strategies: Iterable[Extractor]) -> Optional[str]:
    for strategy in strategies:
        value = strategy(candidate)
        if value:
            return value
    return None


def format_label(candidate: Optional[GeocodeCandidate]) -> Optional[str]:
    """Build a ``"Place, Country"`` label, or ``None`` if nothing usable is present."""
    if candidate is None:
        return None
    place = first_match(candidate, PLACE_STRATEGIES)
    country = first_match(candidate, COUNTRY_STRATEGIES)
    if place and country:
        return f"{place}, {country}"
    return place or country


def choose_candidate(candidates: Sequence[GeocodeCandidate]) -> GeocodeCandidate:
    """Pick one search result: settlement type first, then settlement address, then the first."""
    if not candidates:
        raise NotFound("no candidates")
    for candidate in candidates:
        if (candidate.type or "").lower() in SETTLEMENT_TYPES:
            return candidate
    for candidate in candidates:
        if any(_clean(candidate.address.get(key)) for key in SETTLEMENT_ADDRESS_KEYS):
            return candidate
    return candidates[0]


class LocationResolver:
    def __init__(self, geocoder) -> None:
        self.geocoder = geocoder

    def resolve_by_search(self, query: str) -> CanonicalPlace:
        query = (query or "").strip()
        if not query:
            raise ValueError("query must not be empty")
        candidates: List[GeocodeCandidate] = self.geocoder.search(query)
        if not candidates:
            raise NotFound(f"no place matches {query!r}")
        chosen = choose_candidate(candidates)
        coords = chosen.coordinates
        label = format_label(chosen) or _clean(chosen.display_name) or f"{coords.lat}, {coords.lon}"
        logger.debug("Resolved %r to %s (%s)", query, label, coords)
        return CanonicalPlace(label=label, coordinates=coords)

    def resolve_by_coordinates(self, latitude: float, longitude: float) -> CanonicalPlace:
        coords = Coordinates(lat=latitude, lon=longitude)
        try:
            label = format_label(self.geocoder.reverse(latitude, longitude))
        except ServiceError as exc:
            logger.warning("Reverse geocoding failed for %s: %s", coords.label(), exc)
            label = None
        return CanonicalPlace(label=label or coords.label(), coordinates=coords)


__all__ = [
    "COUNTRY_STRATEGIES",
    "LocationResolver",
    "PLACE_STRATEGIES",
    "choose_candidate",
    "first_match",
    "format_label",
]
