from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import HttpProvider
from ..entities import AirQualitySnapshot, TimeSeriesPoint


# Upstream hourly variable -> snapshot field.
HOURLY_FIELDS = {
    "pm10": "pm10",
    "pm2_5": "pm2_5",
    "carbon_monoxide": "co",
    "nitrogen_dioxide": "no2",
    "ozone": "o3",
    "sulphur_dioxide": "so2",
    "us_aqi": "aqi",
}


class OpenMeteoAirQualityProvider(HttpProvider):
    base_url = "https://air-quality-api.open-meteo.com/v1/air-quality"

    def __init__(self, base_url: Optional[str] = None, timezone: str = "auto", **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self.timezone = timezone
        self._log = logging.getLogger(self.__class__.__name__)

    def current(self, latitude: float, longitude: float) -> Optional[AirQualitySnapshot]:
        """Latest hourly bucket of today's series, or ``None`` when there is no data."""
        hourly = self._hourly(latitude, longitude)
        if hourly is None:
            return None
        timestamps = hourly["time"]
        last = len(timestamps) - 1
        values = {field: _safe_index(hourly.get(name), last) for name, field in HOURLY_FIELDS.items()}
        return AirQualitySnapshot(time=timestamps[last], **values)

    def history(self, latitude: float, longitude: float) -> Optional[List[TimeSeriesPoint]]:
        hourly = self._hourly(latitude, longitude, past_days=1)
        if hourly is None:
            return None
        return self._series(hourly)

    def forecast(self, latitude: float, longitude: float) -> Optional[List[TimeSeriesPoint]]:
        hourly = self._hourly(latitude, longitude, forecast_days=1)
        if hourly is None:
            return None
        return self._series(hourly)

    # helpers ------------------------------------------------------------
    def _hourly(self, latitude: float, longitude: float, **window: int) -> Optional[Dict[str, Any]]:
        params: Dict[str, Any] = {
            "latitude": latitude,
            "longitude": longitude,
            "hourly": ",".join(HOURLY_FIELDS),
            "timezone": self.timezone,
        }
        params.update(window)
        data = self._get_json(self.base_url, params)
        if not isinstance(data, dict):
            self._log.warning("Unexpected air quality payload type %s", type(data).__name__)
            return None
        hourly = data.get("hourly")
        if not isinstance(hourly, dict) or not hourly.get("time"):
            self._log.warning(
                "No hourly air quality data for %s,%s (%s)", latitude, longitude, data.get("reason", "empty response")
            )
            return None
        timestamps = hourly["time"]
        if not isinstance(timestamps, list) or not all(isinstance(ts, str) for ts in timestamps):
            self._log.warning("Malformed hourly time axis for %s,%s: %r", latitude, longitude, timestamps)
            return None
        return hourly

    def _series(self, hourly: Dict[str, Any]) -> List[TimeSeriesPoint]:
        result: List[TimeSeriesPoint] = []
        for idx, ts in enumerate(hourly["time"]):
            values = {field: _safe_index(hourly.get(name), idx) or 0.0 for name, field in HOURLY_FIELDS.items()}
            result.append(TimeSeriesPoint(time=_format_hour(ts), **values))
        return result


def _format_hour(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%H:%M")
    except (TypeError, ValueError):
        return str(value)


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_index(values: Optional[List[Optional[float]]], index: int) -> Optional[float]:
    try:
        value = values[index]  # type: ignore[index]
    except (IndexError, TypeError):
        return None
    return _safe_float(value)


__all__ = ["HOURLY_FIELDS", "OpenMeteoAirQualityProvider"]
