"""Calendar, Julian Date and time-scale conversions.

Calendar conversions use the proleptic Gregorian calendar throughout; there
is no Julian/Gregorian switchover.  UTC is converted to Terrestrial Time
(TT) by adding ΔT from the Espenak & Meeus piecewise polynomials, which
also stand in for UT1 - UTC (< 0.9 s).

All functions are written with ``jax.numpy`` and accept scalars or arrays.

References:

    1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and
       Applications*, 2012.
    2. F. Espenak and J. Meeus, *Five Millennium Canon of Solar Eclipses:
       -1999 to +3000*, NASA/TP-2006-214141, 2006.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from .config import get_dtype
from .constants import (
    DAYS_PER_JULIAN_YEAR,
    JD_J1900,
    JD_J2000,
    JD_MJD_OFFSET,
    SECONDS_PER_DAY,
)


def caldate_to_mjd(
    year: ArrayLike,
    month: ArrayLike,
    day: ArrayLike,
    hour: ArrayLike = 0,
    minute: ArrayLike = 0,
    second: ArrayLike = 0.0,
) -> jax.Array:
    """Convert a proleptic Gregorian calendar date to Modified Julian Date.

    Args:
        year (ArrayLike): Year of the calendar date.
        month (ArrayLike): Month of the calendar date.
        day (ArrayLike): Day of the calendar date.
        hour (ArrayLike): Hour of the calendar date. Default: ``0``
        minute (ArrayLike): Minute of the calendar date. Default: ``0``
        second (ArrayLike): Second of the calendar date. Default: ``0.0``

    Returns:
        Modified Julian Date.

    References:

        1. Montenbruck, O., & Gill, E. (2012). *Satellite Orbits: Models, Methods and Applications*. Springer Science & Business Media.
    """
    _float = get_dtype()

    is_jan_or_feb = month <= 2
    year = jnp.where(is_jan_or_feb, year - 1, year)
    month = jnp.where(is_jan_or_feb, month + 12, month)

    B = jnp.floor(year / 400) - jnp.floor(year / 100) + jnp.floor(year / 4)

    mjd = 365 * year - 679004 + B + jnp.floor(30.6001 * (month + 1)) + day

    frac_day = (hour + (minute + second / 60.0) / 60.0) / 24.0

    return jnp.asarray(mjd, dtype=_float) + jnp.asarray(frac_day, dtype=_float)


def caldate_to_jd(
    year: ArrayLike,
    month: ArrayLike,
    day: ArrayLike,
    hour: ArrayLike = 0,
    minute: ArrayLike = 0,
    second: ArrayLike = 0.0,
) -> jax.Array:
    """Convert a proleptic Gregorian calendar date to Julian Date.

    Args:
        year (ArrayLike): Year of the calendar date.
        month (ArrayLike): Month of the calendar date.
        day (ArrayLike): Day of the calendar date.
        hour (ArrayLike): Hour of the calendar date. Default: ``0``
        minute (ArrayLike): Minute of the calendar date. Default: ``0``
        second (ArrayLike): Second of the calendar date. Default: ``0.0``

    Returns:
        Julian Date.

    Examples:
        ```python
        from celestialevents.time import caldate_to_jd
        caldate_to_jd(2000, 1, 1, 12)  # 2451545.0
        ```
    """
    mjd = caldate_to_mjd(year, month, day, hour, minute, second)

    return mjd + JD_MJD_OFFSET


def jd_to_mjd(jd: ArrayLike) -> jax.Array:
    """Convert Julian Date to Modified Julian Date.

    Args:
        jd (ArrayLike): Julian Date.

    Returns:
        Modified Julian Date.
    """

    return jd - JD_MJD_OFFSET


def mjd_to_jd(mjd: ArrayLike) -> jax.Array:
    """Convert Modified Julian Date to Julian Date.

    Args:
        mjd (ArrayLike): Modified Julian Date.

    Returns:
        Julian Date.
    """

    return mjd + JD_MJD_OFFSET


def jd_to_caldate(
    jd: ArrayLike,
) -> tuple[jax.Array, jax.Array, jax.Array, jax.Array, jax.Array, jax.Array]:
    """Convert Julian Date to a proleptic Gregorian calendar date.

    Args:
        jd (ArrayLike): Julian Date.

    Returns:
        tuple[jax.Array, ...]: (year, month, day, hour, minute, second) where
            year/month/day/hour/minute are int32 and second is configurable float dtype.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and
           Applications*, 2012, p. 322.
    """
    jd_shifted = jnp.asarray(jd, dtype=get_dtype()) + 0.5
    z = jnp.floor(jd_shifted).astype(jnp.int32)
    # Round to integer milliseconds first; a fraction that rounds up to a
    # full day carries into the next date
    total_ms = jnp.round((jd_shifted - z) * 86400000.0).astype(jnp.int32)
    carry = total_ms >= 86400000
    z = jnp.where(carry, z + 1, z)
    total_ms = jnp.where(carry, total_ms - 86400000, total_ms)

    # Scaled integer arithmetic: (z - 1867216.25)/36524.25
    # = (100*z - 186721625) / 3652425
    alpha = (100 * z - 186721625) // 3652425
    a = z + 1 + alpha - alpha // 4

    b = a + 1524
    # Scaled: (b - 122.1)/365.25 = (100*b - 12210)/36525
    c = (100 * b - 12210) // 36525
    # Scaled: 365.25*c = 36525*c/100
    d = (36525 * c) // 100
    # Scaled: (b - d)/30.6001 = (b - d)*10000/306001
    e = ((b - d) * 10000) // 306001

    day = (b - d - (306001 * e) // 10000).astype(jnp.int32)

    month = jnp.where(e < 14, e - 1, e - 13)
    year = jnp.where(month > 2, c - 4716, c - 4715)

    hour = total_ms // 3600000
    total_ms = total_ms - hour * 3600000
    minute = total_ms // 60000
    total_ms = total_ms - minute * 60000
    second = jnp.asarray(total_ms, dtype=get_dtype()) / 1000.0

    return year, month, day, hour, minute, second


def mjd_to_caldate(
    mjd: ArrayLike,
) -> tuple[jax.Array, jax.Array, jax.Array, jax.Array, jax.Array, jax.Array]:
    """Convert Modified Julian Date to calendar date.

    Args:
        mjd (ArrayLike): Modified Julian Date.

    Returns:
        tuple[jax.Array, ...]: (year, month, day, hour, minute, second).
    """
    return jd_to_caldate(mjd + JD_MJD_OFFSET)


def decimal_year(jd: ArrayLike) -> jax.Array:
    """Return the decimal year of a Julian Date, counted in Julian years from J2000.

    Args:
        jd (ArrayLike): Julian Date.

    Returns:
        Decimal year, e.g. ``2000.0`` at JD 2451545.0.
    """
    jd = jnp.asarray(jd, dtype=get_dtype())
    return 2000.0 + (jd - JD_J2000) / DAYS_PER_JULIAN_YEAR


def _long_term_parabola(y: jax.Array) -> jax.Array:
    u = (y - 1820.0) / 100.0
    return -20.0 + 32.0 * u * u


def delta_t(jd: ArrayLike) -> jax.Array:
    """ΔT = TT - UT in seconds at the given Julian Date.

    Uses the Espenak & Meeus polynomial set, selected by decimal year.
    Before -500 and after 2150 the long-term parabola
    ``-20 + 32 u^2, u = (y - 1820)/100`` is used, so any finite input gives
    a finite result.  Adjacent brackets meet within 0.1 s between 1900 and
    2150.

    Args:
        jd (ArrayLike): Julian Date (UTC).

    Returns:
        ΔT in seconds.

    Examples:
        ```python
        from celestialevents.time import delta_t
        delta_t(2451545.0)  # 63.86
        ```
    """
    y = decimal_year(jd)

    u = y / 100.0
    dt_m500_500 = (10583.6 - 1014.41 * u + 33.78311 * u**2 - 5.952053 * u**3
                   - 0.1798452 * u**4 + 0.022174192 * u**5 + 0.0090316521 * u**6)

    u = (y - 1000.0) / 100.0
    dt_500_1600 = (1574.2 - 556.01 * u + 71.23472 * u**2 + 0.319781 * u**3
                   - 0.8503463 * u**4 - 0.005050998 * u**5 + 0.0083572073 * u**6)

    t = y - 1600.0
    dt_1600_1700 = 120.0 - 0.9808 * t - 0.01532 * t**2 + t**3 / 7129.0

    t = y - 1700.0
    dt_1700_1800 = (8.83 + 0.1603 * t - 0.0059285 * t**2 + 0.00013336 * t**3
                    - t**4 / 1174000.0)

    t = y - 1800.0
    dt_1800_1860 = (13.72 - 0.332447 * t + 0.0068612 * t**2 + 0.0041116 * t**3
                    - 0.00037436 * t**4 + 0.0000121272 * t**5
                    - 0.0000001699 * t**6 + 0.000000000875 * t**7)

    t = y - 1860.0
    dt_1860_1900 = (7.62 + 0.5737 * t - 0.251754 * t**2 + 0.01680668 * t**3
                    - 0.0004473624 * t**4 + t**5 / 233174.0)

    t = y - 1900.0
    dt_1900_1920 = (-2.79 + 1.494119 * t - 0.0598939 * t**2 + 0.0061966 * t**3
                    - 0.000197 * t**4)

    t = y - 1920.0
    dt_1920_1941 = 21.20 + 0.84493 * t - 0.076100 * t**2 + 0.0020936 * t**3

    t = y - 1950.0
    dt_1941_1961 = 29.07 + 0.407 * t - t**2 / 233.0 + t**3 / 2547.0

    t = y - 1975.0
    dt_1961_1986 = 45.45 + 1.067 * t - t**2 / 260.0 - t**3 / 718.0

    t = y - 2000.0
    dt_1986_2005 = (63.86 + 0.3345 * t - 0.060374 * t**2 + 0.0017275 * t**3
                    + 0.000651814 * t**4 + 0.00002373599 * t**5)

    dt_2005_2050 = 62.92 + 0.32217 * t + 0.005589 * t**2

    dt_2050_2150 = _long_term_parabola(y) - 0.5628 * (2150.0 - y)

    return jnp.select(
        [
            y < -500.0,
            y < 500.0,
            y < 1600.0,
            y < 1700.0,
            y < 1800.0,
            y < 1860.0,
            y < 1900.0,
            y < 1920.0,
            y < 1941.0,
            y < 1961.0,
            y < 1986.0,
            y < 2005.0,
            y < 2050.0,
            y < 2150.0,
        ],
        [
            _long_term_parabola(y),
            dt_m500_500,
            dt_500_1600,
            dt_1600_1700,
            dt_1700_1800,
            dt_1800_1860,
            dt_1860_1900,
            dt_1900_1920,
            dt_1920_1941,
            dt_1941_1961,
            dt_1961_1986,
            dt_1986_2005,
            dt_2005_2050,
            dt_2050_2150,
        ],
        default=_long_term_parabola(y),
    )


def jd_utc_to_tt(jd: ArrayLike) -> jax.Array:
    """Convert a UTC Julian Date to a TT Julian Date.

    Args:
        jd (ArrayLike): Julian Date (UTC).

    Returns:
        Julian Date (TT).
    """
    jd = jnp.asarray(jd, dtype=get_dtype())
    return jd + delta_t(jd) / SECONDS_PER_DAY


def jd_to_tt_day_offset(jd: ArrayLike) -> jax.Array:
    """Convert a UTC Julian Date to TT days elapsed since J1900.0 (JD 2415020.0).

    This is the time argument of the position model.

    Args:
        jd (ArrayLike): Julian Date (UTC).

    Returns:
        TT day offset from J1900.0.

    Examples:
        ```python
        from celestialevents.time import jd_to_tt_day_offset
        jd_to_tt_day_offset(2451545.0)  # 36525.000739...
        ```
    """
    return jd_utc_to_tt(jd) - JD_J1900
