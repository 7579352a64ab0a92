"""Configuration for event searches.

Provides :class:`EventPolicy`, the frozen set of options every event
function accepts.  A policy is validated once on construction; the search
itself never re-checks it.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import timedelta

from celestialevents.constants import (
    ASTRONOMICAL_TWILIGHT_DEG,
    CIVIL_TWILIGHT_DEG,
    NAUTICAL_TWILIGHT_DEG,
)
from celestialevents.events._types import MagicHourKind, ReferenceKind


class TwilightConvention(enum.Enum):
    """Solar depression that defines the generic ``DAWN``/``DUSK`` events."""

    CIVIL = "civil"
    NAUTICAL = "nautical"
    ASTRONOMICAL = "astronomical"

    @property
    def threshold_deg(self) -> float:
        """Altitude of the Sun at dawn and dusk for this convention [deg]."""
        return _TWILIGHT_THRESHOLDS_DEG[self]


_TWILIGHT_THRESHOLDS_DEG = {
    TwilightConvention.CIVIL: CIVIL_TWILIGHT_DEG,
    TwilightConvention.NAUTICAL: NAUTICAL_TWILIGHT_DEG,
    TwilightConvention.ASTRONOMICAL: ASTRONOMICAL_TWILIGHT_DEG,
}

# Largest civil UTC offsets in use are -12 h and +14 h
_MAX_UTC_OFFSET = timedelta(hours=14)


@dataclass(frozen=True)
class EventPolicy:
    """Options for the event search.

    Args:
        twilight_convention: Threshold used for ``EventType.DAWN`` and
            ``EventType.DUSK``.
        altitude_threshold_override_deg: Replaces the rise/set altitude of
            the body (-0.833 deg for the Sun, +0.125 deg for the Moon) when
            set.  Must lie in ``[-90, 90]``.
        search_refinement_tolerance: Width below which a bracketed crossing
            is considered located.
        sample_step: Spacing of the coarse altitude grid.  At most one hour.
        max_iterations: Upper bound on bisection halvings per bracket.
        magic_hour: Band searched by ``magic_hour``.
        relative_reference: Reference of relative event days, the body's
            culmination (``NOON``) or the day start (``MIDNIGHT``).
        day_start_utc_offset: UTC offset of the civil day to search.
            ``None`` uses local mean time, ``longitude / 15`` hours.

    Raises:
        ValueError: If an option is out of range.

    Examples:
        ```python
        from datetime import timedelta
        from celestialevents.events import EventPolicy, TwilightConvention
        policy = EventPolicy(
            twilight_convention=TwilightConvention.NAUTICAL,
            day_start_utc_offset=timedelta(hours=2),
        )
        ```
    """

    twilight_convention: TwilightConvention = TwilightConvention.CIVIL
    altitude_threshold_override_deg: float | None = None
    search_refinement_tolerance: timedelta = timedelta(seconds=5)
    sample_step: timedelta = timedelta(minutes=10)
    max_iterations: int = 50
    magic_hour: MagicHourKind = MagicHourKind.GOLDEN
    relative_reference: ReferenceKind = ReferenceKind.NOON
    day_start_utc_offset: timedelta | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.twilight_convention, TwilightConvention):
            raise ValueError(
                f"twilight_convention must be a TwilightConvention, "
                f"got {self.twilight_convention!r}"
            )
        override = self.altitude_threshold_override_deg
        if override is not None and not (
            isinstance(override, (int, float))
            and math.isfinite(override)
            and -90.0 <= override <= 90.0
        ):
            raise ValueError(
                f"altitude_threshold_override_deg must be within [-90, 90], got {override!r}"
            )
        if not isinstance(self.search_refinement_tolerance, timedelta) or (
            self.search_refinement_tolerance <= timedelta(0)
        ):
            raise ValueError(
                f"search_refinement_tolerance must be a positive timedelta, "
                f"got {self.search_refinement_tolerance!r}"
            )
        if not isinstance(self.sample_step, timedelta) or not (
            timedelta(0) < self.sample_step <= timedelta(hours=1)
        ):
            raise ValueError(
                f"sample_step must be a timedelta in (0, 1 h], got {self.sample_step!r}"
            )
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int) or (
            self.max_iterations < 1
        ):
            raise ValueError(
                f"max_iterations must be a positive integer, got {self.max_iterations!r}"
            )
        if not isinstance(self.magic_hour, MagicHourKind):
            raise ValueError(f"magic_hour must be a MagicHourKind, got {self.magic_hour!r}")
        if not isinstance(self.relative_reference, ReferenceKind):
            raise ValueError(
                f"relative_reference must be a ReferenceKind, got {self.relative_reference!r}"
            )
        offset = self.day_start_utc_offset
        if offset is not None and not (
            isinstance(offset, timedelta) and abs(offset) <= _MAX_UTC_OFFSET
        ):
            raise ValueError(
                f"day_start_utc_offset must be None or a timedelta within +/-14 h, got {offset!r}"
            )

    @property
    def twilight_threshold_deg(self) -> float:
        """Solar altitude of ``DAWN``/``DUSK`` under this policy [deg]."""
        return self.twilight_convention.threshold_deg
