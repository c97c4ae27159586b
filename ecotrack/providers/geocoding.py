from __future__ import annotations

import logging
from typing import Optional

from .base import HttpProvider
from ..entities import Coordinates


class OpenMeteoGeocoder(HttpProvider):
    """Place-name search via Open-Meteo, reverse lookups via Nominatim."""

    base_url = "https://geocoding-api.open-meteo.com/v1/search"
    reverse_url = "https://nominatim.openstreetmap.org/reverse"

    def __init__(
        self,
        base_url: Optional[str] = None,
        reverse_url: Optional[str] = None,
        language: str = "en",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self.reverse_url = reverse_url or self.reverse_url
        self.language = language
        self._log = logging.getLogger(self.__class__.__name__)

    def forward(self, name: str) -> Optional[Coordinates]:
        """Return the single best match for ``name`` or ``None`` if there is none."""
        params = {
            "name": name,
            "count": 1,
            "language": self.language,
            "format": "json",
        }
        data = self._get_json(self.base_url, params)
        results = (data or {}).get("results") or []
        if not results:
            self._log.info("No geocoding results for %r", name)
            return None
        best = results[0]
        latitude = best.get("latitude")
        longitude = best.get("longitude")
        if latitude is None or longitude is None:
            self._log.warning("Geocoding result without coordinates for %r", name)
            return None
        return Coordinates(
            latitude=float(latitude),
            longitude=float(longitude),
            display_name=best.get("name"),
        )

    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        params = {
            "lat": latitude,
            "lon": longitude,
            "format": "jsonv2",
            "accept-language": self.language,
        }
        data = self._get_json(self.reverse_url, params) or {}
        if data.get("error"):
            self._log.info("Reverse geocoding found nothing at %s,%s: %s", latitude, longitude, data["error"])
            return None
        return data.get("name") or data.get("display_name") or None


__all__ = ["OpenMeteoGeocoder"]
