"""Pure mapping from pollutant readings to risk tiers and advice.

Breakpoints are closed on the upper end: a reading equal to a breakpoint
belongs to the lower tier. Every pollutant is classified on its own; the only
place readings are combined is :func:`build_recommendation`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .entities import AirQualitySnapshot, OverallStatus, Recommendation, Tier


_TIER_ORDER: Tuple[Tier, ...] = (
    Tier.GOOD,
    Tier.MODERATE,
    Tier.UNHEALTHY_FOR_SENSITIVE,
    Tier.UNHEALTHY,
    Tier.VERY_UNHEALTHY,
)

AQI_BREAKPOINTS: Tuple[float, ...] = (50, 100, 150, 200, 300)
PM2_5_BREAKPOINTS: Tuple[float, ...] = (12, 35.4, 55.4, 150.4, 250.4)
PM10_BREAKPOINTS: Tuple[float, ...] = (54, 154, 254, 354, 424)

PM2_5_ELEVATED = 35.4
PM10_ELEVATED = 54


def _classify(value: float, breakpoints: Sequence[float]) -> Tier:
    for tier, upper in zip(_TIER_ORDER, breakpoints):
        if value <= upper:
            return tier
    return Tier.HAZARDOUS


def classify_aqi(aqi: float) -> Tier:
    return _classify(aqi, AQI_BREAKPOINTS)


def classify_pm2_5(value: float) -> Tier:
    return _classify(value, PM2_5_BREAKPOINTS)


def classify_pm10(value: float) -> Tier:
    return _classify(value, PM10_BREAKPOINTS)


def classify_snapshot(snapshot: AirQualitySnapshot) -> Dict[str, Tier]:
    """Tiers for the classified pollutants present in ``snapshot``."""
    tiers: Dict[str, Tier] = {}
    if snapshot.aqi is not None:
        tiers["aqi"] = classify_aqi(snapshot.aqi)
    if snapshot.pm2_5 is not None:
        tiers["pm2_5"] = classify_pm2_5(snapshot.pm2_5)
    if snapshot.pm10 is not None:
        tiers["pm10"] = classify_pm10(snapshot.pm10)
    return tiers


@dataclass(frozen=True)
class _Advice:
    outdoor_activity: str
    health_advice: str
    mask_advice: str


ADVICE: Dict[OverallStatus, _Advice] = {
    OverallStatus.GOOD: _Advice(
        outdoor_activity="Air quality is good. It is a great time for outdoor activities.",
        health_advice="Air pollution poses little or no risk to health.",
        mask_advice="No mask needed.",
    ),
    OverallStatus.MODERATE: _Advice(
        outdoor_activity="Outdoor activities are fine, but unusually sensitive people should limit prolonged exertion.",
        health_advice="Air quality is acceptable; people sensitive to air pollution may notice mild symptoms.",
        mask_advice="Sensitive groups may consider wearing a mask outdoors.",
    ),
    OverallStatus.POOR: _Advice(
        outdoor_activity="Reduce prolonged or heavy outdoor exertion, especially for children and older adults.",
        health_advice="Sensitive groups may experience health effects; the general public is less likely to be affected.",
        mask_advice="Wearing a mask outdoors is recommended.",
    ),
    OverallStatus.VERY_POOR: _Advice(
        outdoor_activity="Avoid outdoor activities and keep windows closed.",
        health_advice="Everyone may experience health effects; sensitive groups may experience serious effects.",
        mask_advice="Wear a mask if you have to go outside.",
    ),
}

PARTICULATE_CLAUSE = " Particulate matter levels are elevated."
N95_MASK_ADVICE = "Use an N95/FFP2 mask outdoors because of high PM2.5 levels."


def overall_status(aqi: Optional[float]) -> OverallStatus:
    value = aqi or 0
    if value <= 50:
        return OverallStatus.GOOD
    if value <= 100:
        return OverallStatus.MODERATE
    if value <= 150:
        return OverallStatus.POOR
    return OverallStatus.VERY_POOR


def build_recommendation(snapshot: AirQualitySnapshot) -> Recommendation:
    """Advice for ``snapshot``.

    The band comes from AQI alone. Particulates can still escalate the advice
    inside any band: PM2.5 above 35.4 or PM10 above 54 appends a warning to the
    health advice, and PM2.5 above 35.4 replaces the mask advice outright.
    Missing readings count as 0.
    """
    status = overall_status(snapshot.aqi)
    advice = ADVICE[status]
    pm2_5 = snapshot.pm2_5 or 0
    pm10 = snapshot.pm10 or 0

    health_advice = advice.health_advice
    mask_advice = advice.mask_advice
    if pm2_5 > PM2_5_ELEVATED or pm10 > PM10_ELEVATED:
        health_advice += PARTICULATE_CLAUSE
        if pm2_5 > PM2_5_ELEVATED:
            mask_advice = N95_MASK_ADVICE

    return Recommendation(
        outdoor_activity=advice.outdoor_activity,
        health_advice=health_advice,
        mask_advice=mask_advice,
        overall_status=status,
    )


__all__ = [
    "ADVICE",
    "AQI_BREAKPOINTS",
    "N95_MASK_ADVICE",
    "PARTICULATE_CLAUSE",
    "PM10_BREAKPOINTS",
    "PM2_5_BREAKPOINTS",
    "build_recommendation",
    "classify_aqi",
    "classify_pm10",
    "classify_pm2_5",
    "classify_snapshot",
    "overall_status",
]
