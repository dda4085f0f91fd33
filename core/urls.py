"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("api/spending-chart/", views.spending_chart, name="spending_chart"),
    path("api/spending-chart/presets/", views.range_presets, name="range_presets"),
]
