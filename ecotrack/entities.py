from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """A resolved location.

    Only the coordinate parser and the geocoding client build these; the rest
    of the code base receives them and never constructs its own.
    """

    latitude: float
    longitude: float
    display_name: Optional[str] = None

    def label(self) -> str:
        return self.display_name or format_coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class AirQualitySnapshot:
    """Most recent hourly reading.

    Pollutants are carried exactly as the provider sends them:
    - particulate matter, CO, NO2, O3 and SO2 in micrograms per cubic metre
    - ``aqi`` on the US AQI scale, unclamped
    Any field may be missing independently of the others.
    """

    pm10: Optional[float] = None
    pm2_5: Optional[float] = None
    co: Optional[float] = None
    no2: Optional[float] = None
    o3: Optional[float] = None
    so2: Optional[float] = None
    aqi: Optional[float] = None
    time: Optional[str] = None


@dataclass(frozen=True)
class TimeSeriesPoint:
    """One hourly bucket of a history or forecast series."""

    time: str
    pm10: float
    pm2_5: float
    co: float
    no2: float
    o3: float
    so2: float
    aqi: float


class Tier(str, Enum):
    GOOD = "good"
    MODERATE = "moderate"
    UNHEALTHY_FOR_SENSITIVE = "unhealthy_for_sensitive"
    UNHEALTHY = "unhealthy"
    VERY_UNHEALTHY = "very_unhealthy"
    HAZARDOUS = "hazardous"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    Tier.GOOD: "Good",
    Tier.MODERATE: "Moderate",
    Tier.UNHEALTHY_FOR_SENSITIVE: "Unhealthy for Sensitive Groups",
    Tier.UNHEALTHY: "Unhealthy",
    Tier.VERY_UNHEALTHY: "Very Unhealthy",
    Tier.HAZARDOUS: "Hazardous",
}


class OverallStatus(str, Enum):
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"
    VERY_POOR = "very_poor"


@dataclass(frozen=True)
class Recommendation:
    outdoor_activity: str
    health_advice: str
    mask_advice: str
    overall_status: OverallStatus


@dataclass(frozen=True)
class FavoriteLocation:
    name: str
    latitude: float
    longitude: float
    last_updated: Optional[datetime] = None
    display_name: Optional[str] = None


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude}, {longitude}"


__all__ = [
    "AirQualitySnapshot",
    "Coordinates",
    "FavoriteLocation",
    "OverallStatus",
    "Recommendation",
    "Tier",
    "TimeSeriesPoint",
    "format_coordinates",
]
