"""Management command to look up air quality using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api.views import get_air_quality_service, get_favorite_store
from ecotrack.entities import FavoriteLocation
from ecotrack.favorites import FavoriteStorageError
from ecotrack.services.lookup import AirQualityMonitor


class Command(BaseCommand):
    help = "Print the air quality report for a city, country or 'lat,lon' literal"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("location", type=str, help="City, country or coordinates such as 41.0082,28.9784")
        parser.add_argument("--favorite", action="store_true", help="Also store the location as a favorite")
        parser.add_argument("--no-series", action="store_true", help="Omit the 24h history and forecast")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        monitor = AirQualityMonitor(get_air_quality_service())
        result = monitor.search(options["location"], include_series=not options.get("no_series"))
        if not result.ok:
            raise CommandError(result.error)

        report = result.report
        payload = report.as_dict()

        if options.get("favorite"):
            coordinates = report.coordinates
            location = FavoriteLocation(
                name=report.location,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                display_name=coordinates.display_name,
            )
            try:
                added = get_favorite_store().add(location)
            except FavoriteStorageError as exc:
                self.stderr.write(f"Could not store {report.location} as a favorite: {exc}")
            else:
                if not added:
                    self.stderr.write(f"{report.location} is already a favorite")

        self.stdout.write(json.dumps(payload, ensure_ascii=False))
