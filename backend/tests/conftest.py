"""Shared fixtures for the Fram backend tests."""

import json

import pytest

from app.core.config import Settings
from app.db.storage import InMemoryStorage, reset_memory_storage


SAMPLE_PRODUCTS = {
    "products": [
        {"id": 1, "name": "Apples", "price": "45 kr / kg", "quantity": "1 kg",
         "image": "images/apples.jpg", "popular": True},
        {"id": 2, "name": "Carrots", "price": "10 kr", "quantity": "1 kg",
         "image": "images/carrots.jpg", "popular": False},
        {"id": 3, "name": "Radishes", "price": "19 kr", "image": "images/radishes.jpg",
         "popular": True},
    ]
}


class FakeClock:
    """Controllable replacement for time.time()."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def products_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps(SAMPLE_PRODUCTS), encoding="utf-8")
    return path


@pytest.fixture
def test_settings(products_file):
    return Settings(
        STORAGE_BACKEND="memory",
        MEMORY_STORAGE_QUOTA_BYTES=None,
        PRODUCTS_FILE=products_file,
        OPENAI_API_KEY=None,
        FDC_API_KEY=None,
    )


@pytest.fixture(autouse=True)
def _clean_memory_storage():
    reset_memory_storage()
    yield
    reset_memory_storage()
