from datetime import date

import jax.numpy as jnp
import pytest

from celestialevents.config import set_dtype
from celestialevents.coordinates import GeoCoordinate


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    test_config.py switches to float32 in some tests; this fixture restores
    the default so no other test depends on test ordering.
    """
    set_dtype(jnp.float64)


@pytest.fixture
def london():
    return GeoCoordinate(51.5074, -0.1278)


@pytest.fixture
def equator():
    return GeoCoordinate(0.0, 0.0)


@pytest.fixture
def arctic():
    return GeoCoordinate(80.0, 0.0)


@pytest.fixture
def midsummer():
    return date(2024, 6, 21)


@pytest.fixture
def midwinter():
    return date(2024, 12, 21)
