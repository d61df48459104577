"""Shared fixtures for the test suite."""

import os
from datetime import datetime, timezone

import pytest

from store.memory import load_store_file

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
STORE_FILE = os.path.join(FIXTURES_DIR, "store.yaml")

# Fixed "current time" so rendered pages are reproducible.
NOW = datetime(2019, 4, 2, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    """MemoryStore loaded from the fixture file."""
    return load_store_file(STORE_FILE)


@pytest.fixture
def now():
    return NOW
