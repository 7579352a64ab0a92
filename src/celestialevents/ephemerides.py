"""Low-precision analytical ephemerides for the Sun and Moon.

Provides apparent geocentric right ascension and declination as a function
of Terrestrial Time, counted in days from J1900.0 (JD 2415020.0).  The
Sun and the Moon share one computation shape: a mean longitude and a mean
anomaly that are linear in time, an equation of center built from
harmonics of the mean anomaly, and a rotation from ecliptic to equatorial
coordinates through the mean obliquity of the ecliptic.  The Moon adds
the leading solar perturbation terms and an ecliptic latitude series,
since its orbit is inclined ~5 deg to the ecliptic.

Accuracy is about 0.01 deg for the Sun and 0.3 deg for the Moon over
1900-2100.  Every function is continuous in its time argument and
returns finite values for any finite input; NaN or infinite inputs are
the caller's responsibility.

References:
    1. J. Meeus, *Astronomical Formulae for Calculators (4th Ed.)*, 1988,
       ch. 18 and 30.
    2. J. Meeus, *Astronomical Algorithms (2nd Ed.)*, 1998, ch. 25 and 47.
"""

from __future__ import annotations

import enum
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from celestialevents.config import get_dtype
from celestialevents.constants import DEG2RAD
from celestialevents.coordinates import (
    GeoCoordinate,
    HorizontalPosition,
    equatorial_to_horizontal,
    sin_altitude,
)
from celestialevents.instant import Instant, TimeScale
from celestialevents.time import jd_to_tt_day_offset
from celestialevents.utils import wrap_two_pi


class Body(enum.Enum):
    """Celestial body handled by the position model."""

    SUN = "sun"
    MOON = "moon"


class Position(NamedTuple):
    """Apparent geocentric equatorial position of a body.

    Attributes:
        right_ascension: Right ascension [rad] in ``[0, 2pi)``.
        declination: Declination [rad] in ``[-pi/2, pi/2]``.
    """

    right_ascension: float
    declination: float


class MoonIllumination(NamedTuple):
    """Illuminated fraction of the lunar disk.

    Attributes:
        fraction: Illuminated fraction in ``[0, 1]``.
        elongation: Geocentric Sun-Moon elongation [rad] in ``[0, pi]``.
        waxing: ``True`` while the Moon moves from new towards full.
    """

    fraction: float
    elongation: float
    waxing: bool


class _MeanElements(NamedTuple):
    """Linear mean elements and equation-of-center amplitudes [deg, deg/day]."""

    longitude_epoch: float
    longitude_rate: float
    anomaly_epoch: float
    anomaly_rate: float
    center: tuple[float, ...]  # amplitude of sin(k*M), k = 1, 2, ...


_SUN_ELEMENTS = _MeanElements(
    longitude_epoch=279.696678,
    longitude_rate=0.9856473354,
    anomaly_epoch=358.475845,
    anomaly_rate=0.985600267,
    center=(1.919460, 0.020094, 0.000293),
)

_MOON_ELEMENTS = _MeanElements(
    longitude_epoch=270.434164,
    longitude_rate=13.1763965268,
    anomaly_epoch=296.104608,
    anomaly_rate=13.0649924465,
    center=(6.288750, 0.213616),
)

# Mean elongation of the Moon from the Sun, and the Moon's argument of latitude
_MOON_ELONGATION = (350.737486, 12.1907491914)
_MOON_ARG_LATITUDE = (11.250889, 13.2293504490)

# Longitude of the Moon's ascending node
_MOON_NODE = (259.183275, -0.0529539222)


def _linear(coefficients: tuple[float, float], d: jax.Array) -> jax.Array:
    return coefficients[0] + coefficients[1] * d


def mean_obliquity(tt_day_offset: ArrayLike) -> jax.Array:
    """Mean obliquity of the ecliptic [rad].

    Args:
        tt_day_offset: TT days since J1900.0.

    Returns:
        Mean obliquity ``23.452294 - 3.5626e-7 * d`` deg, in radians.
    """
    d = jnp.asarray(tt_day_offset, dtype=get_dtype())
    return (23.452294 - 3.5626e-7 * d) * DEG2RAD


def _true_longitude(elements: _MeanElements, d: jax.Array) -> tuple[jax.Array, jax.Array]:
    """Mean longitude plus equation of center, and the mean anomaly [deg]."""
    mean_anomaly = elements.anomaly_epoch + elements.anomaly_rate * d
    m_rad = mean_anomaly * DEG2RAD
    center = sum(
        amplitude * jnp.sin((k + 1) * m_rad)
        for k, amplitude in enumerate(elements.center)
    )
    return elements.longitude_epoch + elements.longitude_rate * d + center, mean_anomaly


def _sun_ecliptic(d: jax.Array) -> tuple[jax.Array, jax.Array]:
    """Apparent ecliptic longitude and latitude of the Sun [rad]."""
    longitude, _ = _true_longitude(_SUN_ELEMENTS, d)

    # Aberration (-20.5") and the leading nutation term
    node = _linear(_MOON_NODE, d) * DEG2RAD
    longitude = longitude - 0.00569 - 0.00479 * jnp.sin(node)

    return longitude * DEG2RAD, jnp.zeros_like(longitude)


def _moon_ecliptic(d: jax.Array) -> tuple[jax.Array, jax.Array]:
    """Ecliptic longitude and latitude of the Moon [rad]."""
    longitude, anomaly = _true_longitude(_MOON_ELEMENTS, d)

    mp = anomaly * DEG2RAD
    m = (_SUN_ELEMENTS.anomaly_epoch + _SUN_ELEMENTS.anomaly_rate * d) * DEG2RAD
    D = _linear(_MOON_ELONGATION, d) * DEG2RAD
    F = _linear(_MOON_ARG_LATITUDE, d) * DEG2RAD

    # Evection, variation, annual equation and the next largest terms [deg]
    longitude = (
        longitude
        + 1.274018 * jnp.sin(2.0 * D - mp)
        + 0.658309 * jnp.sin(2.0 * D)
        - 0.185596 * jnp.sin(m)
        - 0.114336 * jnp.sin(2.0 * F)
        + 0.058793 * jnp.sin(2.0 * D - 2.0 * mp)
        + 0.057212 * jnp.sin(2.0 * D - m - mp)
        + 0.053320 * jnp.sin(2.0 * D + mp)
        + 0.045874 * jnp.sin(2.0 * D - m)
        + 0.041024 * jnp.sin(mp - m)
        - 0.034718 * jnp.sin(D)
        - 0.030465 * jnp.sin(m + mp)
    )

    latitude = (
        5.128189 * jnp.sin(F)
        + 0.280606 * jnp.sin(mp + F)
        + 0.277693 * jnp.sin(mp - F)
        + 0.173238 * jnp.sin(2.0 * D - F)
        + 0.055413 * jnp.sin(2.0 * D + F - mp)
        + 0.046272 * jnp.sin(2.0 * D - F - mp)
        + 0.032573 * jnp.sin(2.0 * D + F)
    )

    return longitude * DEG2RAD, latitude * DEG2RAD


_ECLIPTIC_MODELS = {
    Body.SUN: _sun_ecliptic,
    Body.MOON: _moon_ecliptic,
}


def ecliptic_coordinates(body: Body, tt_day_offset: ArrayLike) -> tuple[jax.Array, jax.Array]:
    """Geocentric ecliptic longitude and latitude of a body.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        tt_day_offset: TT days since J1900.0, scalar or array.

    Returns:
        tuple: ``(longitude, latitude)`` [rad], longitude in ``[0, 2pi)``.
    """
    d = jnp.asarray(tt_day_offset, dtype=get_dtype())
    longitude, latitude = _ECLIPTIC_MODELS[body](d)
    return wrap_two_pi(longitude), latitude


def equatorial_coordinates(body: Body, tt_day_offset: ArrayLike) -> tuple[jax.Array, jax.Array]:
    """Apparent right ascension and declination of a body.

    Vectorises over ``tt_day_offset`` and is traceable under ``jax.jit``
    (with ``body`` static) and ``jax.grad``.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        tt_day_offset: TT days since J1900.0, scalar or array.

    Returns:
        tuple: ``(right_ascension, declination)`` [rad].
    """
    d = jnp.asarray(tt_day_offset, dtype=get_dtype())
    longitude, latitude = _ECLIPTIC_MODELS[body](d)
    eps = mean_obliquity(d)

    right_ascension = jnp.arctan2(
        jnp.sin(longitude) * jnp.cos(eps) - jnp.tan(latitude) * jnp.sin(eps),
        jnp.cos(longitude),
    )
    # The clip only absorbs rounding beyond |1|
    sin_dec = (jnp.sin(latitude) * jnp.cos(eps)
               + jnp.cos(latitude) * jnp.sin(eps) * jnp.sin(longitude))
    declination = jnp.arcsin(jnp.clip(sin_dec, -1.0, 1.0))

    return wrap_two_pi(right_ascension), declination


def calculate_body_position(body: Body, tt_day_offset: float) -> Position:
    """Apparent equatorial position of a body at a TT day offset.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        tt_day_offset: TT days since J1900.0 (JD 2415020.0).  Must be finite.

    Returns:
        Position: Right ascension in ``[0, 2pi)`` and declination in
            ``[-pi/2, pi/2]``, radians.

    Examples:
        ```python
        from celestialevents import Body, calculate_body_position
        pos = calculate_body_position(Body.SUN, 2451723.0 - 2415020.0)
        pos.declination  # ~0.405 rad, June 2000
        ```
    """
    ra, dec = equatorial_coordinates(body, tt_day_offset)
    return Position(float(ra), float(dec))


def _require_instant(instant: Instant) -> None:
    if not isinstance(instant, Instant):
        raise ValueError(f"Expected an Instant, got {type(instant).__name__}")


def position(body: Body, instant: Instant) -> Position:
    """Apparent equatorial position of a body at an instant.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        instant: Instant in UTC or TT.

    Returns:
        Position: Right ascension and declination [rad].
    """
    _require_instant(instant)
    return calculate_body_position(body, instant.tt_day_offset())


def body_sin_altitude(
    body: Body,
    jd: ArrayLike,
    latitude: ArrayLike,
    longitude: ArrayLike,
) -> jax.Array:
    """Sine of a body's altitude at UTC Julian Date(s) for an observer.

    This is the function the event search samples and differentiates.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        jd: Julian Date (UTC), scalar or array.
        latitude: Observer latitude [rad].
        longitude: Observer longitude [rad], east positive.

    Returns:
        Sine of the altitude, same shape as ``jd``.
    """
    jd = jnp.asarray(jd, dtype=get_dtype())
    ra, dec = equatorial_coordinates(body, jd_to_tt_day_offset(jd))
    return sin_altitude(ra, dec, jd, latitude, longitude)


def horizontal_position(body: Body, instant: Instant, location: GeoCoordinate) -> HorizontalPosition:
    """Azimuth and altitude of a body seen from a location.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        instant: Instant of observation, UTC scale.
        location: Observer location.

    Returns:
        HorizontalPosition: Azimuth (from north through east) and altitude [rad].

    Raises:
        ValueError: If ``instant`` is not a UTC instant.
    """
    _require_instant(instant)
    if instant.scale is not TimeScale.UTC:
        raise ValueError("Horizontal coordinates need a UTC instant for sidereal time")
    ra, dec = equatorial_coordinates(body, instant.tt_day_offset())
    azimuth, alt = equatorial_to_horizontal(
        ra, dec, instant.jd, location.latitude_rad, location.longitude_rad
    )
    return HorizontalPosition(float(azimuth), float(alt))


def altitude(body: Body, instant: Instant, location: GeoCoordinate) -> float:
    """Geometric altitude of a body above the horizon [rad].

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        instant: Instant of observation, UTC scale.
        location: Observer location.

    Returns:
        float: Altitude in ``[-pi/2, pi/2]``.
    """
    return horizontal_position(body, instant, location).altitude


def moon_illumination(instant: Instant) -> MoonIllumination:
    """Illuminated fraction of the Moon.

    The phase angle is approximated by ``pi - elongation``, which is within
    ~0.15 deg for a geocentric observer, so ``fraction = (1 - cos E) / 2``.

    Args:
        instant: Instant of observation.

    Returns:
        MoonIllumination: Fraction, elongation and waxing flag.
    """
    _require_instant(instant)
    d = instant.tt_day_offset()
    sun_ra, sun_dec = equatorial_coordinates(Body.SUN, d)
    moon_ra, moon_dec = equatorial_coordinates(Body.MOON, d)

    cos_elongation = (jnp.sin(sun_dec) * jnp.sin(moon_dec)
                      + jnp.cos(sun_dec) * jnp.cos(moon_dec) * jnp.cos(moon_ra - sun_ra))
    elongation = jnp.arccos(jnp.clip(cos_elongation, -1.0, 1.0))

    sun_lon, _ = ecliptic_coordinates(Body.SUN, d)
    moon_lon, _ = ecliptic_coordinates(Body.MOON, d)
    waxing = wrap_two_pi(moon_lon - sun_lon) < jnp.pi

    return MoonIllumination(
        fraction=float((1.0 - jnp.cos(elongation)) / 2.0),
        elongation=float(elongation),
        waxing=bool(waxing),
    )
