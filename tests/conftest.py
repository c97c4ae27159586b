from __future__ import annotations

import pytest

from requests_mock import Mocker

from ecotrack.favorites import FavoriteStore, InMemoryStorage


@pytest.fixture
def requests_mock():
    with Mocker() as mock:
        yield mock


@pytest.fixture
def favorite_store():
    return FavoriteStore(InMemoryStorage())
