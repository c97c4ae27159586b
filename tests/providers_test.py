from __future__ import annotations

import pytest
import requests

from ecotrack.providers.base import ProviderError, QuotaExceeded
from ecotrack.providers.geocoding import OpenMeteoGeocoder
from ecotrack.providers.openmeteo import OpenMeteoAirQualityProvider


AIR_URL = "https://airquality.test/v1/air-quality"
GEO_URL = "https://geocoding.test/v1/search"
REVERSE_URL = "https://reverse.test/reverse"


def hourly_payload(times, **overrides):
    size = len(times)
    hourly = {
        "time": times,
        "pm10": [10.0 + i for i in range(size)],
        "pm2_5": [5.0 + i for i in range(size)],
        "carbon_monoxide": [200.0 + i for i in range(size)],
        "nitrogen_dioxide": [20.0 + i for i in range(size)],
        "ozone": [60.0 + i for i in range(size)],
        "sulphur_dioxide": [3.0 + i for i in range(size)],
        "us_aqi": [30 + i for i in range(size)],
    }
    hourly.update(overrides)
    return {"latitude": 41.0, "longitude": 29.0, "hourly": hourly}


def make_provider():
    return OpenMeteoAirQualityProvider(base_url=AIR_URL)


def make_geocoder():
    return OpenMeteoGeocoder(base_url=GEO_URL, reverse_url=REVERSE_URL)


def test_current_uses_last_hourly_bucket(requests_mock):
    requests_mock.get(AIR_URL, json=hourly_payload(["2024-05-01T00:00", "2024-05-01T01:00", "2024-05-01T02:00"]))

    snapshot = make_provider().current(41.0082, 28.9784)

    assert snapshot.time == "2024-05-01T02:00"
    assert snapshot.pm10 == 12.0
    assert snapshot.pm2_5 == 7.0
    assert snapshot.co == 202.0
    assert snapshot.no2 == 22.0
    assert snapshot.o3 == 62.0
    assert snapshot.so2 == 5.0
    assert snapshot.aqi == 32
    qs = requests_mock.last_request.qs
    assert qs["hourly"] == ["pm10,pm2_5,carbon_monoxide,nitrogen_dioxide,ozone,sulphur_dioxide,us_aqi"]
    assert "past_days" not in qs
    assert "forecast_days" not in qs


def test_current_keeps_other_fields_when_pollutant_missing(requests_mock):
    payload = hourly_payload(["2024-05-01T00:00", "2024-05-01T01:00"])
    del payload["hourly"]["ozone"]
    payload["hourly"]["sulphur_dioxide"] = [1.0, None]
    requests_mock.get(AIR_URL, json=payload)

    snapshot = make_provider().current(41.0, 29.0)

    assert snapshot.o3 is None
    assert snapshot.so2 is None
    assert snapshot.pm2_5 == 6.0
    assert snapshot.aqi == 31


def test_values_are_not_rounded_or_clamped(requests_mock):
    requests_mock.get(
        AIR_URL,
        json=hourly_payload(["2024-05-01T00:00"], pm2_5=[12.3456], us_aqi=[612]),
    )

    snapshot = make_provider().current(41.0, 29.0)

    assert snapshot.pm2_5 == 12.3456
    assert snapshot.aqi == 612


@pytest.mark.parametrize("method", ["current", "history", "forecast"])
def test_empty_time_array_is_unavailable(requests_mock, method):
    requests_mock.get(AIR_URL, json=hourly_payload([]))

    assert getattr(make_provider(), method)(41.0, 29.0) is None


@pytest.mark.parametrize("method", ["current", "history", "forecast"])
def test_missing_hourly_block_is_unavailable(requests_mock, method):
    requests_mock.get(AIR_URL, json={"error": True, "reason": "Latitude must be in range of -90 to 90°."})

    assert getattr(make_provider(), method)(141.0, 29.0) is None


@pytest.mark.parametrize("method", ["current", "history", "forecast"])
@pytest.mark.parametrize("times", [[None, "2024-05-01T01:00"], "2024-05-01T00:00", [1714521600]])
def test_malformed_time_axis_is_unavailable(requests_mock, method, times):
    requests_mock.get(AIR_URL, json=hourly_payload(["2024-05-01T00:00", "2024-05-01T01:00"], time=times))

    assert getattr(make_provider(), method)(41.0, 29.0) is None


def test_history_maps_every_bucket_in_order(requests_mock):
    times = [f"2024-05-01T{hour:02d}:00" for hour in range(24)]
    requests_mock.get(AIR_URL, json=hourly_payload(times))

    history = make_provider().history(41.0, 29.0)

    assert len(history) == len(times)
    assert [point.time for point in history] == [f"{hour:02d}:00" for hour in range(24)]
    for idx, point in enumerate(history):
        assert point.pm10 == 10.0 + idx
        assert point.pm2_5 == 5.0 + idx
        assert point.aqi == 30 + idx
    assert requests_mock.last_request.qs["past_days"] == ["1"]


def test_forecast_requests_next_day_and_zero_fills_gaps(requests_mock):
    times = ["2024-05-02T10:00", "2024-05-02T11:00"]
    requests_mock.get(AIR_URL, json=hourly_payload(times, ozone=[None, 40.5], us_aqi=[55]))

    forecast = make_provider().forecast(41.0, 29.0)

    assert [point.time for point in forecast] == ["10:00", "11:00"]
    assert forecast[0].o3 == 0.0
    assert forecast[1].o3 == 40.5
    assert forecast[1].aqi == 0.0
    assert requests_mock.last_request.qs["forecast_days"] == ["1"]


def test_http_error_raises_provider_error(requests_mock):
    requests_mock.get(AIR_URL, status_code=502, text="bad gateway")

    with pytest.raises(ProviderError):
        make_provider().current(41.0, 29.0)


def test_quota_error_is_reported(requests_mock):
    requests_mock.get(AIR_URL, status_code=429, text="too many requests")

    with pytest.raises(QuotaExceeded):
        make_provider().history(41.0, 29.0)


def test_network_failure_raises_provider_error(requests_mock):
    requests_mock.get(AIR_URL, exc=requests.exceptions.ConnectionError("offline"))

    with pytest.raises(ProviderError):
        make_provider().forecast(41.0, 29.0)


def test_invalid_json_raises_provider_error(requests_mock):
    requests_mock.get(AIR_URL, text="<html>maintenance</html>")

    with pytest.raises(ProviderError):
        make_provider().current(41.0, 29.0)


def test_geocoder_forward_returns_first_result(requests_mock):
    requests_mock.get(
        GEO_URL,
        json={
            "results": [
                {"name": "Istanbul", "latitude": 41.01384, "longitude": 28.94966, "country": "Türkiye"},
                {"name": "Istanbul Park", "latitude": 40.95, "longitude": 29.4},
            ]
        },
    )

    coordinates = make_geocoder().forward("Istanbul")

    assert coordinates.latitude == 41.01384
    assert coordinates.longitude == 28.94966
    assert coordinates.display_name == "Istanbul"
    qs = requests_mock.last_request.qs
    assert qs["count"] == ["1"]
    assert qs["name"] == ["istanbul"]


@pytest.mark.parametrize("payload", [{"generationtime_ms": 0.4}, {"results": []}])
def test_geocoder_forward_not_found(requests_mock, payload):
    requests_mock.get(GEO_URL, json=payload)

    assert make_geocoder().forward("Nowhereville") is None


def test_geocoder_forward_transport_error(requests_mock):
    requests_mock.get(GEO_URL, status_code=500, text="boom")

    with pytest.raises(ProviderError):
        make_geocoder().forward("Ankara")


def test_geocoder_reverse_prefers_name(requests_mock):
    requests_mock.get(REVERSE_URL, json={"name": "Fatih", "display_name": "Fatih, Istanbul, Türkiye"})

    assert make_geocoder().reverse(41.0082, 28.9784) == "Fatih"
    assert requests_mock.last_request.qs["format"] == ["jsonv2"]


def test_geocoder_reverse_falls_back_to_display_name(requests_mock):
    requests_mock.get(REVERSE_URL, json={"name": "", "display_name": "Black Sea"})

    assert make_geocoder().reverse(42.5, 34.0) == "Black Sea"


def test_geocoder_reverse_no_match(requests_mock):
    requests_mock.get(REVERSE_URL, json={"error": "Unable to geocode"})

    assert make_geocoder().reverse(0.0, -160.0) is None
