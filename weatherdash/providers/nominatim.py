from __future__ import annotations

import logging
from typing import List, Optional

from .base import HttpProvider, ServiceError
from ..entities import GeocodeCandidate


DEFAULT_USER_AGENT = "weatherdash/1.0"


class NominatimGeocoder(HttpProvider):
    base_url = "https://nominatim.openstreetmap.org"
    search_limit = 5

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = (base_url or self.base_url).rstrip("/")
        self.headers = {"Accept-Language": "en", "User-Agent": user_agent}
        self._log = logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def search(self, query: str) -> List[GeocodeCandidate]:
        params = {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "limit": self.search_limit,
        }
        data = self._get_json(f"{self.base_url}/search", params)
        if not isinstance(data, list):
            raise ServiceError("search response is not a list")
        return [self._candidate(item) for item in data if isinstance(item, dict)]

    def reverse(self, latitude: float, longitude: float) -> GeocodeCandidate:
        params = {
            "lat": latitude,
            "lon": longitude,
            "format": "json",
            "addressdetails": 1,
        }
        data = self._get_json(f"{self.base_url}/reverse", params)
        if not isinstance(data, dict):
            raise ServiceError("reverse response is not an object")
        if "error" in data:
            # Nominatim answers 200 with {"error": "Unable to geocode"} over open sea
            raise ServiceError(str(data["error"]))
        return self._candidate(data)

    # Helpers ------------------------------------------------------------
    def _candidate(self, payload: dict) -> GeocodeCandidate:
        try:
            return GeocodeCandidate.from_payload(payload)
        except ValueError as exc:
            self._log.error("Unusable geocode result: %s", exc)
            raise ServiceError(str(exc)) from exc


__all__ = ["NominatimGeocoder"]
