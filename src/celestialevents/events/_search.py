"""Sample-then-refine root finding over one day.

A function of the UTC Julian Date is evaluated on a regular grid covering
the day window plus a one hour margin on each side.  Every sign change
between neighbouring samples is a bracket; all brackets are then refined
together by vectorised bisection.  The number of halvings is the smaller of
the iteration budget and the count needed to shrink the grid step below the
tolerance, so every search terminates after a fixed amount of work.

Brackets that are still wider than the tolerance when the budget runs out
are dropped: a crossing that cannot be located is reported as absent.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from datetime import timedelta
from typing import NamedTuple

import jax
import jax.numpy as jnp
import numpy as np

from celestialevents.config import get_dtype
from celestialevents.constants import SECONDS_PER_DAY

logger = logging.getLogger(__name__)

_MARGIN_DAYS = 1.0 / 24.0


class DayWindow(NamedTuple):
    """Half-open search window ``[start_jd, end_jd)`` in UTC Julian Date."""

    start_jd: float
    end_jd: float

    def contains(self, jd: float) -> bool:
        return self.start_jd <= jd < self.end_jd


class Crossing(NamedTuple):
    """A located sign change.

    Attributes:
        jd: UTC Julian Date of the crossing.
        rising: ``True`` when the function goes from negative to non-negative.
    """

    jd: float
    rising: bool


def to_days(delta: timedelta) -> float:
    """Length of ``delta`` in days."""
    return delta.total_seconds() / SECONDS_PER_DAY


def sample_grid(window: DayWindow, step: timedelta) -> jax.Array:
    """Regular grid of Julian Dates covering the window and its margins.

    Args:
        window: Day window to cover.
        step: Grid spacing.

    Returns:
        1-D array of UTC Julian Dates, first sample one hour before the
            window start, last sample at or after one hour past the window end.
    """
    step_days = to_days(step)
    span = (window.end_jd - window.start_jd) + 2.0 * _MARGIN_DAYS
    count = int(math.ceil(span / step_days)) + 1
    start = window.start_jd - _MARGIN_DAYS
    return start + step_days * jnp.arange(count, dtype=get_dtype())


def _iteration_count(step_days: float, tolerance_days: float, max_iterations: int) -> int:
    needed = int(math.ceil(math.log2(step_days / tolerance_days))) if step_days > tolerance_days else 0
    return min(needed, max_iterations)


def bisect(
    fn: Callable[[jax.Array], jax.Array],
    lo: jax.Array,
    hi: jax.Array,
    f_lo: jax.Array,
    iterations: int,
) -> tuple[jax.Array, jax.Array]:
    """Refine sign-change brackets by bisection.

    All brackets are halved together, one call of ``fn`` per iteration.

    Args:
        fn: Vectorised function of the Julian Date.
        lo: Lower bracket ends.
        hi: Upper bracket ends.
        f_lo: ``fn(lo)``.
        iterations: Number of halvings.

    Returns:
        tuple: Refined ``(lo, hi)``.
    """
    for _ in range(iterations):
        mid = 0.5 * (lo + hi)
        f_mid = fn(mid)
        same_side = (f_mid < 0.0) == (f_lo < 0.0)
        lo = jnp.where(same_side, mid, lo)
        f_lo = jnp.where(same_side, f_mid, f_lo)
        hi = jnp.where(same_side, hi, mid)
    return lo, hi


def find_crossings(
    fn: Callable[[jax.Array], jax.Array],
    times: jax.Array,
    values: jax.Array,
    window: DayWindow,
    tolerance: timedelta,
    max_iterations: int,
) -> list[Crossing]:
    """Locate the sign changes of ``fn`` inside the window.

    Args:
        fn: Vectorised function of the Julian Date, used for refinement.
        times: Sample grid from :func:`sample_grid`.
        values: ``fn(times)``.
        window: Only crossings inside this window are returned.
        tolerance: Target bracket width.
        max_iterations: Bisection budget.

    Returns:
        list[Crossing]: Crossings in time order.
    """
    below = np.asarray(values < 0.0)
    idx = np.nonzero(below[:-1] != below[1:])[0]
    if idx.size == 0:
        return []

    times = jnp.asarray(times)
    lo = times[idx]
    hi = times[idx + 1]
    f_lo = jnp.asarray(values)[idx]

    tolerance_days = to_days(tolerance)
    step_days = float(times[1] - times[0])
    iterations = _iteration_count(step_days, tolerance_days, max_iterations)
    lo, hi = bisect(fn, lo, hi, f_lo, iterations)

    roots = np.asarray(0.5 * (lo + hi))
    converged = np.asarray(hi - lo) <= tolerance_days

    if not converged.all():
        logger.debug(
            "%d of %d bracket(s) not refined below %s within %d iterations",
            int((~converged).sum()), idx.size, tolerance, max_iterations,
        )

    return [
        Crossing(float(root), bool(rising))
        for root, rising, ok in zip(roots, below[idx], converged)
        if ok and window.contains(float(root))
    ]


def first_crossings(crossings: list[Crossing]) -> tuple[Crossing | None, Crossing | None]:
    """First rising and first falling crossing of a time-ordered list."""
    rising = next((c for c in crossings if c.rising), None)
    falling = next((c for c in crossings if not c.rising), None)
    return rising, falling
