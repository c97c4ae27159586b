"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import AirQualityView, FavoriteCheckView, FavoriteClearView, FavoritesView

urlpatterns = [
    path("air-quality", AirQualityView.as_view(), name="air-quality"),
    path("favorites", FavoritesView.as_view(), name="favorites"),
    path("favorites/all", FavoriteClearView.as_view(), name="favorites-clear"),
    path("favorites/check", FavoriteCheckView.as_view(), name="favorites-check"),
]
