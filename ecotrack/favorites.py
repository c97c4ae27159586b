"""Favorite locations persisted as one JSON blob in a key-value storage.

The store does read-modify-write on a single key with no locking. Two writers
racing on the same storage means the last one wins; mutations are rare and
user initiated so nothing more is attempted.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

from .entities import FavoriteLocation


logger = logging.getLogger(__name__)

DEFAULT_KEY = "ecotrack:favorites"


class FavoriteStorageError(RuntimeError):
    """Stored favorites could not be read, so they must not be overwritten."""


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryStorage:
    """Storage kept in a dict; used by tests and as a throwaway default."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """One file per key under ``directory``."""

    def __init__(self, directory: os.PathLike | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def _rounded(value: float) -> float:
    # Numeric so that -0.0 and 0.0 compare equal.
    return round(value, 2)


def same_place(lat_a: float, lon_a: float, lat_b: float, lon_b: float) -> bool:
    """Two points are the same place when both axes agree at two decimals."""
    return _rounded(lat_a) == _rounded(lat_b) and _rounded(lon_a) == _rounded(lon_b)


class FavoriteStore:
    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        key: str = DEFAULT_KEY,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.storage = storage
        self.key = key
        self._clock = clock

    # Public API ---------------------------------------------------------
    def list(self) -> List[FavoriteLocation]:
        """Stored favorites; empty when nothing is stored or storage is unusable."""
        try:
            return self._read()
        except FavoriteStorageError as exc:
            logger.warning("%s", exc)
            return []

    def add(self, location: FavoriteLocation) -> bool:
        """Insert ``location`` unless a favorite already rounds to the same place.

        Raises :class:`FavoriteStorageError` when the stored list cannot be
        read; writing anyway would drop every existing favorite.
        """
        if self.storage is None:
            logger.warning("No favorite storage configured, not storing %s", location.name)
            return False
        favorites = self._read()
        if any(same_place(f.latitude, f.longitude, location.latitude, location.longitude) for f in favorites):
            logger.debug("Favorite %s already stored", location.name)
            return False
        stamped = FavoriteLocation(
            name=location.name,
            latitude=location.latitude,
            longitude=location.longitude,
            last_updated=self._clock(),
            display_name=location.display_name,
        )
        favorites.append(stamped)
        self._write(favorites)
        return True

    def remove(self, latitude: float, longitude: float) -> None:
        favorites = self._read()
        remaining = [f for f in favorites if not (f.latitude == latitude and f.longitude == longitude)]
        if len(remaining) != len(favorites):
            self._write(remaining)

    def clear(self) -> None:
        if self.storage is None:
            return
        self.storage.delete(self.key)

    def is_favorite(self, latitude: float, longitude: float) -> bool:
        return self.get(latitude, longitude) is not None

    def get(self, latitude: float, longitude: float) -> Optional[FavoriteLocation]:
        for favorite in self.list():
            if same_place(favorite.latitude, favorite.longitude, latitude, longitude):
                return favorite
        return None

    # Helpers ------------------------------------------------------------
    def _read(self) -> List[FavoriteLocation]:
        if self.storage is None:
            return []
        try:
            raw = self.storage.get(self.key)
        except Exception as exc:  # noqa: BLE001 - storage backends raise anything
            raise FavoriteStorageError(f"Favorite storage unavailable: {exc}") from exc
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise FavoriteStorageError(f"Unreadable favorites blob under {self.key}") from exc
        if not isinstance(payload, list):
            raise FavoriteStorageError(f"Favorites blob under {self.key} is not a list")
        favorites = []
        for item in payload:
            location = _deserialize(item)
            if location is not None:
                favorites.append(location)
        return favorites

    def _write(self, favorites: List[FavoriteLocation]) -> None:
        if self.storage is None:
            return
        self.storage.set(self.key, json.dumps([serialize_favorite(f) for f in favorites]))


def serialize_favorite(location: FavoriteLocation) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": location.name,
        "latitude": location.latitude,
        "longitude": location.longitude,
    }
    if location.last_updated is not None:
        payload["lastUpdated"] = location.last_updated.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    if location.display_name is not None:
        payload["displayName"] = location.display_name
    return payload


def _deserialize(item: Any) -> Optional[FavoriteLocation]:
    if not isinstance(item, dict):
        return None
    try:
        latitude = float(item["latitude"])
        longitude = float(item["longitude"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Skipping malformed favorite entry: %r", item)
        return None
    last_updated = None
    if item.get("lastUpdated"):
        try:
            last_updated = datetime.fromisoformat(str(item["lastUpdated"]).replace("Z", "+00:00"))
        except ValueError:
            last_updated = None
    return FavoriteLocation(
        name=str(item.get("name") or ""),
        latitude=latitude,
        longitude=longitude,
        last_updated=last_updated,
        display_name=item.get("displayName"),
    )


__all__ = [
    "DEFAULT_KEY",
    "FavoriteStorageError",
    "FavoriteStore",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "same_place",
    "serialize_favorite",
]
