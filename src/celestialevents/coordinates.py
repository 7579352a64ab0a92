"""Observer location and horizontal coordinate transformations.

Provides :class:`GeoCoordinate`, the validated geographic location of an
observer, and the conversion from equatorial (right ascension,
declination) to horizontal (azimuth, altitude) coordinates at that
location.

The horizontal frame is geocentric: the observer sits at the centre of the
Earth with the local horizon plane rotated to its latitude and longitude.
Lunar parallax is therefore not applied here; it is folded into the
moonrise altitude threshold instead.

Angles are in radians unless ``use_degrees=True`` is given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from celestialevents.config import get_dtype
from celestialevents.constants import JD_J2000
from celestialevents.utils import from_radians, wrap_two_pi


@dataclass(frozen=True)
class GeoCoordinate:
    """Geographic location of an observer.

    Values are validated on construction and never clamped.

    Args:
        latitude: Geodetic latitude [deg], within ``[-90, 90]``, north positive.
        longitude: Longitude [deg], within ``[-180, 180]``, east positive.

    Raises:
        ValueError: If a value is not a finite number or is out of range.

    Examples:
        ```python
        from celestialevents import GeoCoordinate
        london = GeoCoordinate(51.5074, -0.1278)
        ```
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {type(value).__name__}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(
                f"latitude must be within [-90, 90] degrees, got {self.latitude}"
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(
                f"longitude must be within [-180, 180] degrees, got {self.longitude}"
            )

    @property
    def latitude_rad(self) -> float:
        """Latitude in radians."""
        return math.radians(self.latitude)

    @property
    def longitude_rad(self) -> float:
        """Longitude in radians."""
        return math.radians(self.longitude)


class HorizontalPosition(NamedTuple):
    """Apparent direction of a body as seen from an observer.

    Attributes:
        azimuth: Azimuth [rad] in ``[0, 2pi)``, measured from north through east.
        altitude: Altitude above the geometric horizon [rad].
    """

    azimuth: float
    altitude: float


def gmst(jd: ArrayLike, use_degrees: bool = False) -> Array:
    """Greenwich Mean Sidereal Time at a UT Julian Date.

    Uses the IAU 1982 polynomial in days and Julian centuries from J2000,
    treating UTC as UT1 (error below one second).

    Args:
        jd (ArrayLike): Julian Date (UTC).
        use_degrees (bool): If True, return degrees. Default: False (radians).

    Returns:
        Greenwich Mean Sidereal Time in ``[0, 2pi)``.

    References:

        1. J. Meeus, *Astronomical Algorithms (2nd Ed.)*, 1998, eq. 12.4.
    """
    _float = get_dtype()
    jd = jnp.asarray(jd, dtype=_float)

    d = jd - JD_J2000
    t = d / 36525.0

    gmst_deg = (280.46061837
                + 360.98564736629 * d
                + 0.000387933 * t * t
                - t * t * t / 38710000.0)

    gmst_rad = wrap_two_pi(jnp.deg2rad(gmst_deg))

    return from_radians(gmst_rad, use_degrees)


def sin_altitude(
    right_ascension: ArrayLike,
    declination: ArrayLike,
    jd: ArrayLike,
    latitude: ArrayLike,
    longitude: ArrayLike,
) -> Array:
    """Sine of the altitude of an equatorial direction.

    ``sin(h) = sin(phi) sin(delta) + cos(phi) cos(delta) cos(H)`` with the
    local hour angle ``H = GMST + lambda - alpha``.  Working with the sine
    keeps the expression smooth at the zenith, where ``arcsin`` is not
    differentiable.

    Args:
        right_ascension: Right ascension [rad].
        declination: Declination [rad].
        jd: Julian Date (UTC) of observation.
        latitude: Observer latitude [rad].
        longitude: Observer longitude [rad], east positive.

    Returns:
        Sine of the altitude.
    """
    hour_angle = gmst(jd) + longitude - right_ascension
    return (jnp.sin(latitude) * jnp.sin(declination)
            + jnp.cos(latitude) * jnp.cos(declination) * jnp.cos(hour_angle))


def equatorial_to_horizontal(
    right_ascension: ArrayLike,
    declination: ArrayLike,
    jd: ArrayLike,
    latitude: ArrayLike,
    longitude: ArrayLike,
    use_degrees: bool = False,
) -> tuple[jax.Array, jax.Array]:
    """Convert equatorial coordinates to azimuth and altitude.

    Args:
        right_ascension: Right ascension [rad].
        declination: Declination [rad].
        jd: Julian Date (UTC) of observation.
        latitude: Observer latitude [rad].
        longitude: Observer longitude [rad], east positive.
        use_degrees: If ``True``, return the angles in degrees.

    Returns:
        tuple: ``(azimuth, altitude)``, azimuth in ``[0, 2pi)`` from north
            through east.
    """
    hour_angle = gmst(jd) + longitude - right_ascension

    sin_h = (jnp.sin(latitude) * jnp.sin(declination)
             + jnp.cos(latitude) * jnp.cos(declination) * jnp.cos(hour_angle))
    altitude = jnp.arcsin(jnp.clip(sin_h, -1.0, 1.0))

    azimuth = jnp.arctan2(
        -jnp.cos(declination) * jnp.sin(hour_angle),
        jnp.sin(declination) * jnp.cos(latitude)
        - jnp.cos(declination) * jnp.sin(latitude) * jnp.cos(hour_angle),
    )
    azimuth = wrap_two_pi(azimuth)

    return from_radians(azimuth, use_degrees), from_radians(altitude, use_degrees)
