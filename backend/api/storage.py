"""Favorite storage on top of a Django cache alias."""
from __future__ import annotations

from typing import Optional

from django.core.cache.backends.base import BaseCache


class CacheStorage:
    """Adapts a Django cache to the favorites key-value storage interface."""

    def __init__(self, cache: BaseCache) -> None:
        self._cache = cache

    def get(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    def set(self, key: str, value: str) -> None:
        self._cache.set(key, value, timeout=None)

    def delete(self, key: str) -> None:
        self._cache.delete(key)
