"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
throughout celestialevents.  The default is ``jnp.float64``: Julian Dates
near 2.4 million need double precision to resolve seconds, so JAX's
64-bit mode (``jax_enable_x64``) is switched on when this module is
imported.

Call ``set_dtype`` **before** any JIT compilation.  Under JIT,
``get_dtype()`` runs during tracing and its result is baked into the
compiled program.  Lower precision dtypes are accepted, but event times
computed with them are only good to a few minutes.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for celestialevents.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: ``jnp.float32`` or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_instant_eq_tolerance() -> float:
    """Return the dtype-adaptive resolution of Instant equality.

    Two instants are equal when their times, rounded to a multiple of this
    resolution, agree. The same rounded value is hashed.

    - ``float32``: 60 s (a float32 Julian Date resolves ~0.25 day, the
      comparison itself is done on Python floats)
    - ``float64``: 1e-3 s

    Returns:
        float: Tolerance in seconds.
    """
    if _dtype == jnp.float64:
        return 1e-3
    return 60.0
