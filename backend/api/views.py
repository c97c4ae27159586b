"""REST API views for air quality lookups and favorites."""
from __future__ import annotations

from functools import lru_cache

from django.conf import settings
from django.core.cache import caches
from django.core.exceptions import ImproperlyConfigured
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api.serializers import CoordinateQuerySerializer, FavoriteLocationSerializer
from backend.api.storage import CacheStorage
from ecotrack.favorites import FavoriteStorageError, FavoriteStore, JsonFileStorage, serialize_favorite
from ecotrack.providers.base import ProviderError, RequestConfig
from ecotrack.providers.geocoding import OpenMeteoGeocoder
from ecotrack.providers.openmeteo import OpenMeteoAirQualityProvider
from ecotrack.report import serialize_coordinates
from ecotrack.services.lookup import (
    GENERIC_ERROR_MESSAGE,
    AirQualityService,
    DataUnavailable,
    LocationNotFound,
    LocationResolver,
)


@lru_cache(maxsize=1)
def get_air_quality_service() -> AirQualityService:
    config = settings.ECOTRACK
    request_config = RequestConfig(timeout=config["HTTP_TIMEOUT"], user_agent=config["USER_AGENT"])
    geocoder = OpenMeteoGeocoder(
        base_url=config["GEOCODING_URL"],
        reverse_url=config["REVERSE_GEOCODING_URL"],
        language=config["GEOCODING_LANGUAGE"],
        request_config=request_config,
    )
    provider = OpenMeteoAirQualityProvider(
        base_url=config["AIR_QUALITY_URL"],
        timezone=config["TIMEZONE"],
        request_config=request_config,
    )
    return AirQualityService(resolver=LocationResolver(geocoder), provider=provider)


FAVORITES_UNAVAILABLE_MESSAGE = "Favorites could not be updated. Please try again."


def build_favorite_storage():
    """Storage selected by ``ECOTRACK["FAVORITES_BACKEND"]``: ``cache`` or ``file``."""
    config = settings.ECOTRACK
    backend = config["FAVORITES_BACKEND"]
    if backend == "file":
        return JsonFileStorage(config["FAVORITES_DIR"])
    if backend == "cache":
        return CacheStorage(caches[settings.FAVORITES_CACHE_ALIAS])
    raise ImproperlyConfigured(f"Unknown favorites backend {backend!r}")


@lru_cache(maxsize=1)
def get_favorite_store() -> FavoriteStore:
    return FavoriteStore(build_favorite_storage(), key=settings.ECOTRACK["FAVORITES_KEY"])


def _favorites_payload(store: FavoriteStore) -> list:
    return [serialize_favorite(favorite) for favorite in store.list()]


class AirQualityView(APIView):
    """Resolve a location and return its air quality report."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the report for the ``q`` query parameter."""
        query = (request.query_params.get("q") or "").strip()
        if not query:
            return Response({"detail": "q query parameter is required"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            report = get_air_quality_service().lookup(query)
        except LocationNotFound as exc:
            return Response({"detail": exc.message}, status=status.HTTP_404_NOT_FOUND)
        except DataUnavailable as exc:
            return Response(
                {"detail": exc.message, "coordinates": serialize_coordinates(exc.coordinates)},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        except ProviderError:
            return Response({"detail": GENERIC_ERROR_MESSAGE}, status=status.HTTP_502_BAD_GATEWAY)

        payload = report.as_dict()
        payload["isFavorite"] = get_favorite_store().is_favorite(
            report.coordinates.latitude, report.coordinates.longitude
        )
        return Response(payload, status=status.HTTP_200_OK)


class FavoritesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        return Response(_favorites_payload(get_favorite_store()), status=status.HTTP_200_OK)

    def post(self, request, *args, **kwargs):
        serializer = FavoriteLocationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"detail": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
        store = get_favorite_store()
        try:
            inserted = store.add(serializer.to_location())
        except FavoriteStorageError:
            return Response({"detail": FAVORITES_UNAVAILABLE_MESSAGE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(
            _favorites_payload(store),
            status=status.HTTP_201_CREATED if inserted else status.HTTP_200_OK,
        )

    def delete(self, request, *args, **kwargs):
        query = CoordinateQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response({"detail": query.errors}, status=status.HTTP_400_BAD_REQUEST)
        store = get_favorite_store()
        try:
            store.remove(query.validated_data["lat"], query.validated_data["lon"])
        except FavoriteStorageError:
            return Response({"detail": FAVORITES_UNAVAILABLE_MESSAGE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(_favorites_payload(store), status=status.HTTP_200_OK)


class FavoriteClearView(APIView):
    permission_classes = [AllowAny]

    def delete(self, request, *args, **kwargs):
        get_favorite_store().clear()
        return Response(status=status.HTTP_204_NO_CONTENT)


class FavoriteCheckView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        query = CoordinateQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response({"detail": query.errors}, status=status.HTTP_400_BAD_REQUEST)
        is_favorite = get_favorite_store().is_favorite(query.validated_data["lat"], query.validated_data["lon"])
        return Response({"isFavorite": is_favorite}, status=status.HTTP_200_OK)
