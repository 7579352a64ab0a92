"""Tests for the celestialevents.config module."""

import jax
import jax.numpy as jnp
import pytest

from celestialevents.config import get_dtype, get_instant_eq_tolerance, set_dtype
from celestialevents.coordinates import gmst
from celestialevents.ephemerides import Body, equatorial_coordinates
from celestialevents.time import caldate_to_jd, delta_t


@pytest.fixture(autouse=True)
def reset_dtype():
    """Restore float64 after each test."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_x64_enabled_on_import(self):
        assert jax.config.jax_enable_x64 is True

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    @pytest.mark.parametrize("dtype", [jnp.int32, jnp.float16, jnp.bfloat16, "float64", None])
    def test_invalid_dtype_raises(self, dtype):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(dtype)

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestInstantEqTolerance:
    def test_float64_tolerance(self):
        assert get_instant_eq_tolerance() == 1e-3

    def test_float32_tolerance(self):
        set_dtype(jnp.float32)
        assert get_instant_eq_tolerance() == 60.0


class TestDtypeSwitchingOutputs:
    """Verify that output dtypes match the configured dtype."""

    @pytest.mark.parametrize("dtype", [jnp.float32, jnp.float64])
    def test_caldate_to_jd_dtype(self, dtype):
        set_dtype(dtype)
        assert caldate_to_jd(2024, 6, 21).dtype == dtype

    @pytest.mark.parametrize("dtype", [jnp.float32, jnp.float64])
    def test_delta_t_dtype(self, dtype):
        set_dtype(dtype)
        assert delta_t(2451545.0).dtype == dtype

    @pytest.mark.parametrize("dtype", [jnp.float32, jnp.float64])
    def test_gmst_dtype(self, dtype):
        set_dtype(dtype)
        assert gmst(2451545.0).dtype == dtype

    @pytest.mark.parametrize("dtype", [jnp.float32, jnp.float64])
    def test_equatorial_coordinates_dtype(self, dtype):
        set_dtype(dtype)
        ra, dec = equatorial_coordinates(Body.SUN, 36525.0)
        assert ra.dtype == dtype
        assert dec.dtype == dtype


class TestFloat64Precision:
    def test_jd_resolves_seconds(self):
        """A float64 Julian Date keeps the time of day to well under a millisecond."""
        jd = float(caldate_to_jd(2024, 6, 15, 6, 30, 0.0))
        fractional = jd - int(jd)
        expected = (6.0 * 3600 + 30.0 * 60 + 43200.0) / 86400.0
        assert abs(fractional - expected) < 1e-8

    def test_float32_loses_time_of_day(self):
        """float32 cannot hold a modern Julian Date to better than ~0.25 day."""
        set_dtype(jnp.float32)
        jd = float(caldate_to_jd(2024, 6, 15, 6, 30, 0.0))
        assert abs(jd - 2460476.770833) > 1e-3
