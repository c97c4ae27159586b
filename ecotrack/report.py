"""Report handed to presentation and export layers.

Nothing is computed here beyond what the classification engine already
produced; the report only bundles the pieces field for field.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .classification import build_recommendation, classify_snapshot
from .entities import AirQualitySnapshot, Coordinates, Recommendation, Tier, TimeSeriesPoint


@dataclass(frozen=True)
class AirQualityReport:
    location: str
    coordinates: Coordinates
    current: AirQualitySnapshot
    recommendation: Recommendation
    tiers: Dict[str, Tier] = field(default_factory=dict)
    history: Optional[List[TimeSeriesPoint]] = None
    forecast: Optional[List[TimeSeriesPoint]] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def build(
        cls,
        coordinates: Coordinates,
        current: AirQualitySnapshot,
        history: Optional[List[TimeSeriesPoint]] = None,
        forecast: Optional[List[TimeSeriesPoint]] = None,
    ) -> "AirQualityReport":
        return cls(
            location=coordinates.label(),
            coordinates=coordinates,
            current=current,
            recommendation=build_recommendation(current),
            tiers=classify_snapshot(current),
            history=history,
            forecast=forecast,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "coordinates": serialize_coordinates(self.coordinates),
            "current": asdict(self.current),
            "recommendation": serialize_recommendation(self.recommendation),
            "tiers": {name: {"tier": tier.value, "label": tier.label} for name, tier in self.tiers.items()},
            "history": [asdict(point) for point in self.history] if self.history is not None else None,
            "forecast": [asdict(point) for point in self.forecast] if self.forecast is not None else None,
            "generated_at": self.generated_at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
        }


def serialize_coordinates(coordinates: Coordinates) -> Dict[str, Any]:
    return {
        "latitude": coordinates.latitude,
        "longitude": coordinates.longitude,
        "displayName": coordinates.display_name,
    }


def serialize_recommendation(recommendation: Recommendation) -> Dict[str, str]:
    return {
        "outdoorActivity": recommendation.outdoor_activity,
        "healthAdvice": recommendation.health_advice,
        "maskAdvice": recommendation.mask_advice,
        "overallStatus": recommendation.overall_status.value,
    }


__all__ = ["AirQualityReport", "serialize_coordinates", "serialize_recommendation"]
