from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, List, Optional

from ..coordinates import parse_coordinates
from ..entities import Coordinates, TimeSeriesPoint, format_coordinates
from ..providers.base import ProviderError
from ..report import AirQualityReport


NOT_FOUND_MESSAGE = "Location not found. Please enter a valid city, country or coordinates."
UNAVAILABLE_MESSAGE = "Air quality data could not be retrieved."
GENERIC_ERROR_MESSAGE = "An error occurred. Please try again."


class LookupFailed(RuntimeError):
    """Base class for failures that end a search without a report."""

    message = GENERIC_ERROR_MESSAGE


class LocationNotFound(LookupFailed):
    message = NOT_FOUND_MESSAGE


class DataUnavailable(LookupFailed):
    message = UNAVAILABLE_MESSAGE

    def __init__(self, coordinates: Coordinates) -> None:
        super().__init__(f"no air quality data for {coordinates.label()}")
        self.coordinates = coordinates


class LocationResolver:
    """Coordinate literals first, geocoding second."""

    def __init__(self, geocoder: Any, logger: Optional[logging.Logger] = None) -> None:
        self.geocoder = geocoder
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def resolve(self, query: str) -> Coordinates:
        literal = parse_coordinates(query)
        if literal is not None:
            return self._annotate(literal)
        coordinates = self.geocoder.forward(query.strip())
        if coordinates is None:
            raise LocationNotFound(query)
        return coordinates

    def _annotate(self, literal: Coordinates) -> Coordinates:
        # Reverse lookups are cosmetic; the literal is already usable.
        try:
            name = self.geocoder.reverse(literal.latitude, literal.longitude)
        except ProviderError as exc:
            self._log.warning("Reverse geocoding failed for %s,%s: %s", literal.latitude, literal.longitude, exc)
            name = None
        return Coordinates(
            latitude=literal.latitude,
            longitude=literal.longitude,
            display_name=name or format_coordinates(literal.latitude, literal.longitude),
        )


class AirQualityService:
    def __init__(
        self,
        *,
        resolver: LocationResolver,
        provider: Any,
        max_workers: int = 3,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.resolver = resolver
        self.provider = provider
        self.max_workers = max_workers
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def lookup(self, query: str, include_series: bool = True) -> AirQualityReport:
        """Resolve ``query`` and build a report.

        Raises :class:`LocationNotFound`, :class:`DataUnavailable` or
        :class:`ProviderError`. History and forecast are optional extras: their
        failures are logged and leave the corresponding report field empty.
        With ``include_series=False`` only the current reading is requested.
        """
        coordinates = self.resolver.resolve(query)
        return self.report_for(coordinates, include_series=include_series)

    def report_for(self, coordinates: Coordinates, include_series: bool = True) -> AirQualityReport:
        lat, lon = coordinates.latitude, coordinates.longitude
        history = forecast = None
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            current_future = pool.submit(self.provider.current, lat, lon)
            if include_series:
                history_future = pool.submit(self.provider.history, lat, lon)
                forecast_future = pool.submit(self.provider.forecast, lat, lon)
            current = current_future.result()
            if include_series:
                history = self._optional_series("history", history_future)
                forecast = self._optional_series("forecast", forecast_future)
        if current is None:
            raise DataUnavailable(coordinates)
        return AirQualityReport.build(coordinates, current, history=history, forecast=forecast)

    # Helpers ------------------------------------------------------------
    def _optional_series(self, kind: str, future: Future) -> Optional[List[TimeSeriesPoint]]:
        try:
            series = future.result()
        except ProviderError as exc:
            self._log.warning("Air quality %s failed: %s", kind, exc)
            return None
        except Exception:  # noqa: BLE001 - any series failure leaves the field empty
            self._log.exception("Air quality %s crashed", kind)
            return None
        if series is None:
            self._log.info("Air quality %s unavailable", kind)
        return series


@dataclass(frozen=True)
class SearchResult:
    query: str
    generation: int
    report: Optional[AirQualityReport] = None
    coordinates: Optional[Coordinates] = None
    error: Optional[str] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.report is not None


class AirQualityMonitor:
    """Turns lookups into user-facing results; the latest search wins.

    Every search takes a new generation number. When a search finishes after
    a newer one was started, its result is handed back marked ``stale`` and
    ``latest`` keeps showing the newer search.
    """

    def __init__(self, service: AirQualityService, logger: Optional[logging.Logger] = None) -> None:
        self.service = service
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[SearchResult] = None

    @property
    def latest(self) -> Optional[SearchResult]:
        return self._latest

    @property
    def generation(self) -> int:
        return self._generation

    def search(self, query: str, include_series: bool = True) -> SearchResult:
        with self._lock:
            self._generation += 1
            generation = self._generation
        result = self._run(query, generation, include_series)
        with self._lock:
            if generation != self._generation:
                self._log.info("Dropping stale result for %r (generation %s < %s)", query, generation, self._generation)
                return replace(result, stale=True)
            self._latest = result
        return result

    def _run(self, query: str, generation: int, include_series: bool = True) -> SearchResult:
        try:
            report = self.service.lookup(query, include_series=include_series)
        except LocationNotFound as exc:
            self._log.info("Location not found: %s", exc)
            return SearchResult(query=query, generation=generation, error=exc.message)
        except DataUnavailable as exc:
            self._log.warning("%s", exc)
            return SearchResult(query=query, generation=generation, coordinates=exc.coordinates, error=exc.message)
        except ProviderError as exc:
            self._log.error("Lookup for %r failed: %s", query, exc)
            return SearchResult(query=query, generation=generation, error=GENERIC_ERROR_MESSAGE)
        return SearchResult(query=query, generation=generation, report=report, coordinates=report.coordinates)


__all__ = [
    "AirQualityMonitor",
    "AirQualityService",
    "DataUnavailable",
    "GENERIC_ERROR_MESSAGE",
    "LocationNotFound",
    "LocationResolver",
    "LookupFailed",
    "NOT_FOUND_MESSAGE",
    "SearchResult",
    "UNAVAILABLE_MESSAGE",
]
