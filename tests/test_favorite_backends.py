from __future__ import annotations

import json

import pytest
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from backend.api import views
from backend.api.storage import CacheStorage
from ecotrack.entities import FavoriteLocation
from ecotrack.favorites import JsonFileStorage


@pytest.fixture(autouse=True)
def fresh_store():
    views.get_favorite_store.cache_clear()
    yield
    views.get_favorite_store.cache_clear()


def ecotrack_settings(**overrides):
    return override_settings(ECOTRACK={**settings.ECOTRACK, **overrides})


def test_cache_backend_is_the_default():
    assert settings.ECOTRACK["FAVORITES_BACKEND"] == "cache"
    assert isinstance(views.get_favorite_store().storage, CacheStorage)


def test_file_backend_writes_plain_json(tmp_path):
    with ecotrack_settings(FAVORITES_BACKEND="file", FAVORITES_DIR=str(tmp_path), FAVORITES_KEY="ecotrack:favorites"):
        store = views.get_favorite_store()
        assert isinstance(store.storage, JsonFileStorage)
        store.add(FavoriteLocation(name="Ankara", latitude=39.9334, longitude=32.8597))

    [entry] = json.loads((tmp_path / "ecotrack_favorites.json").read_text(encoding="utf-8"))
    assert entry["name"] == "Ankara"
    assert entry["lastUpdated"].endswith("Z")


def test_unknown_backend_is_rejected():
    with ecotrack_settings(FAVORITES_BACKEND="redis"):
        with pytest.raises(ImproperlyConfigured):
            views.build_favorite_storage()
