"""REST API views backing the dashboard page."""
from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from weatherdash.providers.base import RequestConfig
from weatherdash.providers.nominatim import NominatimGeocoder
from weatherdash.providers.openmeteo import OpenMeteoProvider
from weatherdash.services.dashboard import GEOLOCATION_OPTIONS, Dashboard, DashboardState, GeolocationError
from weatherdash.services.location import LocationResolver
from weatherdash.services.presenter import DisplayModel


logger = logging.getLogger(__name__)

SESSION_KEY = "dashboard"


@dataclass(frozen=True)
class Services:
    resolver: LocationResolver
    weather: OpenMeteoProvider
    tokens: Iterator[int]


@lru_cache(maxsize=1)
def get_services() -> Services:
    request_config = RequestConfig(timeout=settings.DASHBOARD_HTTP_TIMEOUT)
    geocoder = NominatimGeocoder(
        base_url=settings.NOMINATIM_BASE_URL,
        user_agent=settings.NOMINATIM_USER_AGENT,
        request_config=request_config,
    )
    weather = OpenMeteoProvider(base_url=settings.OPEN_METEO_URL, request_config=request_config)
    return Services(resolver=LocationResolver(geocoder), weather=weather, tokens=itertools.count(1))


def get_dashboard(request) -> Dashboard:
    """Dashboard for the caller's browser session, starting from its saved state."""
    services = get_services()
    return Dashboard(
        resolver=services.resolver,
        weather_provider=services.weather,
        discard_stale=settings.DASHBOARD_DISCARD_STALE,
        state=_load_state(request),
        tokens=services.tokens,
    )


def _load_state(request) -> DashboardState:
    saved = request.session.get(SESSION_KEY)
    if not saved:
        return DashboardState()
    try:
        return DashboardState.from_dict(saved)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Discarding unreadable dashboard session: %s", exc)
        return DashboardState()


def _respond(request, dashboard: Dashboard, model: DisplayModel) -> Response:
    request.session[SESSION_KEY] = dashboard.state.as_dict()
    payload = model.as_dict()
    payload["geolocation"] = GEOLOCATION_OPTIONS
    return Response(payload, status=status.HTTP_200_OK)


def _bad_request(detail: str) -> Response:
    return Response({"detail": detail}, status=status.HTTP_400_BAD_REQUEST)


class DashboardView(APIView):
    """Return what the page should currently show."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        dashboard = get_dashboard(request)
        return _respond(request, dashboard, dashboard.display())


class SearchView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):  # noqa: D401
        city = request.data.get("city") if isinstance(request.data, Mapping) else None
        if not isinstance(city, str):
            return _bad_request("city must be a string")
        dashboard = get_dashboard(request)
        return _respond(request, dashboard, dashboard.search(city))


class LocateView(APIView):
    """Accept the browser's geolocation result: coordinates or an error kind."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):  # noqa: D401
        data = request.data
        if not isinstance(data, Mapping):
            return _bad_request("body must be a JSON object")
        if "error" in data:
            try:
                error = GeolocationError(data["error"])
            except (TypeError, ValueError):
                choices = ", ".join(kind.value for kind in GeolocationError)
                return _bad_request(f"error must be one of: {choices}")
            dashboard = get_dashboard(request)
            return _respond(request, dashboard, dashboard.geolocation_failed(error))

        try:
            latitude = float(data["latitude"])
            longitude = float(data["longitude"])
        except KeyError:
            return _bad_request("latitude and longitude are required")
        except (TypeError, ValueError):
            return _bad_request("latitude and longitude must be numbers")
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            return _bad_request("coordinates out of range")

        dashboard = get_dashboard(request)
        return _respond(request, dashboard, dashboard.locate(latitude, longitude))


class UnitToggleView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):  # noqa: D401
        dashboard = get_dashboard(request)
        return _respond(request, dashboard, dashboard.toggle_unit())
