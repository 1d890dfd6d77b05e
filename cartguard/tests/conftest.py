# tests/conftest.py
from datetime import datetime

import pytest

from cartguard.config import Settings
from cartguard.tests.factories import NOW


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def config() -> Settings:
    return Settings(_env_file=None)
