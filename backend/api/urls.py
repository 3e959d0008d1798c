"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import DashboardView, LocateView, SearchView, UnitToggleView

urlpatterns = [
    path("dashboard", DashboardView.as_view(), name="dashboard"),
    path("search", SearchView.as_view(), name="search"),
    path("locate", LocateView.as_view(), name="locate"),
    path("unit", UnitToggleView.as_view(), name="unit"),
]
