"""Shared utility functions for angle conversions.

These helpers follow the ``use_degrees`` convention used throughout
celestialevents, providing JAX-traceable degree/radian conversion via
``jnp.where``.
"""

from jax import Array
import jax.numpy as jnp
from jax.typing import ArrayLike

from celestialevents.constants import TWO_PI


def from_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle from radians to degrees if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle in radians.
        use_degrees (bool): If ``True``, convert to degrees.

    Returns:
        Angle in radians or degrees.
    """
    return jnp.where(use_degrees, jnp.rad2deg(angle), angle)


def wrap_two_pi(angle: ArrayLike) -> Array:
    """Wrap an angle into ``[0, 2pi)``.

    ``jnp.mod`` follows the sign of the divisor, so negative inputs land in
    range.  A tiny negative input can still round up to exactly ``2pi``;
    that case is folded back to ``0``.

    Args:
        angle (ArrayLike): Angle [rad].

    Returns:
        Angle [rad] in ``[0, 2pi)``.
    """
    wrapped = jnp.mod(angle, TWO_PI)
    return jnp.where(wrapped >= TWO_PI, wrapped - TWO_PI, wrapped)
