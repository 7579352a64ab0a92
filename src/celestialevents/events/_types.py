"""Type definitions for event search results.

- :class:`EventType`: every classifiable crossing or extremum.
- :class:`DayType`: how a day relates to the body's rise/set threshold.
- :class:`AbsoluteEventDay`: a day's events as instants.
- :class:`RelativeEventDay`: a day's events as signed offsets from a
  reference instant.
- :class:`RelativeShortEvent`: a bounded window (golden hour, blue hour)
  as offsets from the day start.
- :class:`MagicHour`: the morning and evening windows of one kind.

All result types are :class:`~typing.NamedTuple` values.  Event mappings
are read-only; an event that does not occur on the day maps to ``None``.
"""

from __future__ import annotations

import enum
from datetime import date, timedelta
from types import MappingProxyType
from typing import Mapping, NamedTuple

from celestialevents.ephemerides import Body
from celestialevents.instant import Instant


class EventType(enum.Enum):
    """Astronomical event classified by the event engine."""

    # Sun
    SUNRISE = "sunrise"
    SUNSET = "sunset"
    SOLAR_NOON = "solar_noon"
    NADIR = "nadir"
    DAWN = "dawn"
    DUSK = "dusk"
    CIVIL_DAWN = "civil_dawn"
    CIVIL_DUSK = "civil_dusk"
    NAUTICAL_DAWN = "nautical_dawn"
    NAUTICAL_DUSK = "nautical_dusk"
    ASTRONOMICAL_DAWN = "astronomical_dawn"
    ASTRONOMICAL_DUSK = "astronomical_dusk"
    MORNING_GOLDEN_HOUR_START = "morning_golden_hour_start"
    MORNING_GOLDEN_HOUR_END = "morning_golden_hour_end"
    EVENING_GOLDEN_HOUR_START = "evening_golden_hour_start"
    EVENING_GOLDEN_HOUR_END = "evening_golden_hour_end"
    MORNING_BLUE_HOUR_START = "morning_blue_hour_start"
    MORNING_BLUE_HOUR_END = "morning_blue_hour_end"
    EVENING_BLUE_HOUR_START = "evening_blue_hour_start"
    EVENING_BLUE_HOUR_END = "evening_blue_hour_end"

    # Moon
    MOONRISE = "moonrise"
    MOONSET = "moonset"
    LUNAR_TRANSIT = "lunar_transit"
    LUNAR_NADIR = "lunar_nadir"


class DayType(enum.Enum):
    """Classification of a day against the body's rise/set threshold."""

    NORMAL = "normal"
    RISE_ONLY = "rise_only"
    SET_ONLY = "set_only"
    ALWAYS_ABOVE = "always_above"
    ALWAYS_BELOW = "always_below"


class ReferenceKind(enum.Enum):
    """Reference instant of a :class:`RelativeEventDay`."""

    NOON = "noon"
    MIDNIGHT = "midnight"


class AltitudeSample(NamedTuple):
    """Altitude of a body at one instant.

    Attributes:
        instant: UTC instant of the sample.
        altitude: Altitude above the horizon [rad].
    """

    instant: Instant
    altitude: float


class AbsoluteEventDay(NamedTuple):
    """One day's events for a body as UTC instants.

    Attributes:
        date: Civil date searched.
        body: Body the events belong to.
        day_start: Start of the 24 h search window (local midnight).
        day_type: Rise/set classification of the day.
        events: Read-only mapping of event type to instant, ``None`` when
            the event does not occur in the window.
    """

    date: date
    body: Body
    day_start: Instant
    day_type: DayType
    events: Mapping[EventType, Instant | None]

    def get(self, event: EventType) -> Instant | None:
        """Instant of ``event``, or ``None`` if it is absent or not tracked for this body."""
        return self.events.get(event)

    def __getitem__(self, key):
        if isinstance(key, EventType):
            return self.events[key]
        return tuple.__getitem__(self, key)


class RelativeEventDay(NamedTuple):
    """One day's events for a body as signed offsets from a reference.

    Attributes:
        date: Civil date searched.
        body: Body the events belong to.
        reference: Instant every offset is measured from.
        reference_kind: Whether ``reference`` is the culmination or the day start.
        day_type: Rise/set classification of the day.
        offsets: Read-only mapping of event type to ``event - reference``,
            ``None`` when the event does not occur in the window.
        time_above_horizon: Time within the window the body spends above
            its rise/set threshold.
    """

    date: date
    body: Body
    reference: Instant
    reference_kind: ReferenceKind
    day_type: DayType
    offsets: Mapping[EventType, timedelta | None]
    time_above_horizon: timedelta

    def get(self, event: EventType) -> timedelta | None:
        """Offset of ``event``, or ``None`` if it is absent or not tracked for this body."""
        return self.offsets.get(event)

    def __getitem__(self, key):
        if isinstance(key, EventType):
            return self.offsets[key]
        return tuple.__getitem__(self, key)


class RelativeShortEvent(NamedTuple):
    """A bounded window expressed as offsets from the day start.

    A boundary that falls outside the day is ``None``; for ``duration`` a
    missing start counts from the day start and a missing end counts to the
    day end, so ``duration >= 0`` always holds.

    Attributes:
        start: Offset of the window start from the day start, or ``None``.
        end: Offset of the window end from the day start, or ``None``.
        duration: Length of the window inside the day.
    """

    start: timedelta | None
    end: timedelta | None
    duration: timedelta


class MagicHourKind(enum.Enum):
    """Solar altitude band of a magic hour window."""

    GOLDEN = "golden"
    BLUE = "blue"


class MagicHour(NamedTuple):
    """Morning and evening magic hour windows of one day.

    Attributes:
        date: Civil date searched.
        kind: Golden or blue hour.
        morning: Window entered from below, or ``None``.
        evening: Window left downwards, or ``None``.
        all_day: ``True`` when the Sun stays inside the band for the whole day.
    """

    date: date
    kind: MagicHourKind
    morning: RelativeShortEvent | None
    evening: RelativeShortEvent | None
    all_day: bool


def freeze(mapping: dict) -> Mapping:
    """Return a read-only view of a freshly built mapping."""
    return MappingProxyType(dict(mapping))
