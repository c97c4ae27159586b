"""Request validation for the favorites endpoints."""
from __future__ import annotations

from rest_framework import serializers

from ecotrack.entities import FavoriteLocation


class CoordinateQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90.0, max_value=90.0)
    lon = serializers.FloatField(min_value=-180.0, max_value=180.0)


class FavoriteLocationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    latitude = serializers.FloatField(min_value=-90.0, max_value=90.0)
    longitude = serializers.FloatField(min_value=-180.0, max_value=180.0)
    displayName = serializers.CharField(max_length=300, required=False, allow_null=True, allow_blank=True)

    def to_location(self) -> FavoriteLocation:
        data = self.validated_data
        return FavoriteLocation(
            name=data["name"],
            latitude=data["latitude"],
            longitude=data["longitude"],
            display_name=data.get("displayName") or None,
        )
