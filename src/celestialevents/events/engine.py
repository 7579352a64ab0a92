"""Rise, set, twilight, culmination and magic hour events for one day.

For a civil date and an observer, the engine samples ``sin(altitude)`` of
the body across a 24 hour window, finds where it crosses the sine of each
threshold altitude, and classifies every crossing as rising or falling.
Culminations are found the same way on the time derivative of
``sin(altitude)`` (``jax.grad``): a + to - change is the maximum, - to + the
minimum.

The window starts at local midnight: ``00:00 UTC - longitude / 15 h`` by
default (local mean time), or ``00:00 UTC - day_start_utc_offset`` when
the policy fixes an offset.  When a threshold is crossed more than once in
the same direction (the Moon can do this), the first rising and the first
falling crossing after the window start are reported.

Events that do not happen are ``None``: polar day, polar night and
crossings that could not be refined within the iteration budget are all
reported the same way.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from functools import partial

import jax
import jax.numpy as jnp
import numpy as np

from celestialevents.constants import (
    ASTRONOMICAL_TWILIGHT_DEG,
    BLUE_HOUR_BAND_DEG,
    CIVIL_TWILIGHT_DEG,
    GOLDEN_HOUR_BAND_DEG,
    MOONRISE_ALTITUDE_DEG,
    NAUTICAL_TWILIGHT_DEG,
    SECONDS_PER_DAY,
    SUNRISE_ALTITUDE_DEG,
)
from celestialevents.coordinates import GeoCoordinate
from celestialevents.ephemerides import Body, body_sin_altitude
from celestialevents.events._search import (
    Crossing,
    DayWindow,
    find_crossings,
    first_crossings,
    sample_grid,
    to_days,
)
from celestialevents.events._types import (
    AbsoluteEventDay,
    AltitudeSample,
    DayType,
    EventType,
    MagicHour,
    MagicHourKind,
    ReferenceKind,
    RelativeEventDay,
    RelativeShortEvent,
    freeze,
)
from celestialevents.events.config import EventPolicy
from celestialevents.instant import Instant
from celestialevents.time import caldate_to_jd

logger = logging.getLogger(__name__)

_DEFAULT_POLICY = EventPolicy()

_RISE_SET_DEG = {
    Body.SUN: SUNRISE_ALTITUDE_DEG,
    Body.MOON: MOONRISE_ALTITUDE_DEG,
}

_RISE_SET_EVENTS = {
    Body.SUN: (EventType.SUNRISE, EventType.SUNSET),
    Body.MOON: (EventType.MOONRISE, EventType.MOONSET),
}

_CULMINATION_EVENTS = {
    Body.SUN: (EventType.SOLAR_NOON, EventType.NADIR),
    Body.MOON: (EventType.LUNAR_TRANSIT, EventType.LUNAR_NADIR),
}

_TWILIGHT_EVENTS = (
    (EventType.CIVIL_DAWN, EventType.CIVIL_DUSK, CIVIL_TWILIGHT_DEG),
    (EventType.NAUTICAL_DAWN, EventType.NAUTICAL_DUSK, NAUTICAL_TWILIGHT_DEG),
    (EventType.ASTRONOMICAL_DAWN, EventType.ASTRONOMICAL_DUSK, ASTRONOMICAL_TWILIGHT_DEG),
)

_MAGIC_HOUR_BANDS = {
    MagicHourKind.GOLDEN: GOLDEN_HOUR_BAND_DEG,
    MagicHourKind.BLUE: BLUE_HOUR_BAND_DEG,
}

# (morning start, morning end, evening start, evening end)
_MAGIC_HOUR_EVENTS = {
    MagicHourKind.GOLDEN: (
        EventType.MORNING_GOLDEN_HOUR_START,
        EventType.MORNING_GOLDEN_HOUR_END,
        EventType.EVENING_GOLDEN_HOUR_START,
        EventType.EVENING_GOLDEN_HOUR_END,
    ),
    MagicHourKind.BLUE: (
        EventType.MORNING_BLUE_HOUR_START,
        EventType.MORNING_BLUE_HOUR_END,
        EventType.EVENING_BLUE_HOUR_START,
        EventType.EVENING_BLUE_HOUR_END,
    ),
}


@partial(jax.jit, static_argnums=0)
def _sin_altitude(body: Body, jd: jax.Array, latitude: float, longitude: float) -> jax.Array:
    return body_sin_altitude(body, jd, latitude, longitude)


@partial(jax.jit, static_argnums=0)
def _sin_altitude_rate(body: Body, jd: jax.Array, latitude: float, longitude: float) -> jax.Array:
    rate = jax.vmap(jax.grad(partial(body_sin_altitude, body)), in_axes=(0, None, None))
    return rate(jd, latitude, longitude)


# Input validation


def _coerce_date(value: date | str) -> date:
    if isinstance(value, datetime):
        raise ValueError("Expected a calendar date, got a datetime; pass dt.date()")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise ValueError(f'Invalid date string: "{value}" is not YYYY-MM-DD') from e
    raise ValueError(f"Expected a date, got {type(value).__name__}")


def _check_inputs(body, location, policy) -> EventPolicy:
    if not isinstance(body, Body):
        raise ValueError(f"body must be a Body, got {body!r}")
    if not isinstance(location, GeoCoordinate):
        raise ValueError(f"location must be a GeoCoordinate, got {type(location).__name__}")
    if policy is None:
        return _DEFAULT_POLICY
    if not isinstance(policy, EventPolicy):
        raise ValueError(f"policy must be an EventPolicy, got {type(policy).__name__}")
    return policy


def day_window(day: date, location: GeoCoordinate, policy: EventPolicy) -> DayWindow:
    """24 hour UTC window of the civil day ``day`` at ``location``.

    Args:
        day: Civil date.
        location: Observer location, its longitude sets local mean time.
        policy: Supplies ``day_start_utc_offset`` when fixed.

    Returns:
        DayWindow: ``[local midnight, local midnight + 24 h)`` in UTC Julian Date.
    """
    midnight_utc = float(caldate_to_jd(day.year, day.month, day.day))
    if policy.day_start_utc_offset is None:
        offset_days = location.longitude / 360.0
    else:
        offset_days = to_days(policy.day_start_utc_offset)
    start = midnight_utc - offset_days
    return DayWindow(start, start + 1.0)


class _DaySearch:
    """Crossing searches over one body, day and location.

    The altitude grid is evaluated once; crossings are computed per
    threshold on demand and kept for the lifetime of this object, which
    never outlives the public call that created it.
    """

    def __init__(self, body: Body, day: date, location: GeoCoordinate, policy: EventPolicy):
        self.body = body
        self.day = day
        self.policy = policy
        self.window = day_window(day, location, policy)
        self._lat = location.latitude_rad
        self._lon = location.longitude_rad
        self.times = sample_grid(self.window, policy.sample_step)
        self.sin_alt = _sin_altitude(body, self.times, self._lat, self._lon)
        self._crossings: dict[float, list[Crossing]] = {}

    @property
    def rise_set_deg(self) -> float:
        override = self.policy.altitude_threshold_override_deg
        return _RISE_SET_DEG[self.body] if override is None else override

    def sin_altitude_at(self, jd: float) -> float:
        return float(_sin_altitude(self.body, jnp.array([jd]), self._lat, self._lon)[0])

    def above_at_start(self, threshold_deg: float) -> bool:
        return self.sin_altitude_at(self.window.start_jd) >= math.sin(math.radians(threshold_deg))

    def crossings(self, threshold_deg: float) -> list[Crossing]:
        """Time-ordered crossings of ``threshold_deg`` inside the window."""
        if threshold_deg not in self._crossings:
            offset = math.sin(math.radians(threshold_deg))

            def fn(jd):
                return _sin_altitude(self.body, jd, self._lat, self._lon) - offset

            self._crossings[threshold_deg] = find_crossings(
                fn,
                self.times,
                self.sin_alt - offset,
                self.window,
                self.policy.search_refinement_tolerance,
                self.policy.max_iterations,
            )
        return self._crossings[threshold_deg]

    def pair(self, threshold_deg: float) -> tuple[Instant | None, Instant | None]:
        """First rising and first falling crossing as instants."""
        rising, falling = first_crossings(self.crossings(threshold_deg))
        return _instant(rising), _instant(falling)

    def culminations(self) -> tuple[Instant | None, Instant | None]:
        """First maximum and first minimum of the altitude in the window."""

        def fn(jd):
            return _sin_altitude_rate(self.body, jd, self._lat, self._lon)

        found = find_crossings(
            fn,
            self.times,
            fn(self.times),
            self.window,
            self.policy.search_refinement_tolerance,
            self.policy.max_iterations,
        )
        minimum, maximum = first_crossings(found)
        return _instant(maximum), _instant(minimum)

    def offset(self, jd: float) -> timedelta:
        return timedelta(seconds=(jd - self.window.start_jd) * SECONDS_PER_DAY)

    def day_type(self) -> DayType:
        rising, falling = first_crossings(self.crossings(self.rise_set_deg))
        if rising and falling:
            return DayType.NORMAL
        if rising:
            return DayType.RISE_ONLY
        if falling:
            return DayType.SET_ONLY
        if self.above_at_start(self.rise_set_deg):
            return DayType.ALWAYS_ABOVE
        return DayType.ALWAYS_BELOW

    def time_above(self, threshold_deg: float) -> timedelta:
        above = self.above_at_start(threshold_deg)
        last = self.window.start_jd
        total = 0.0
        for crossing in self.crossings(threshold_deg):
            # A dropped bracket leaves two crossings in the same direction
            if crossing.rising == above:
                continue
            if above:
                total += crossing.jd - last
            last = crossing.jd
            above = crossing.rising
        if above:
            total += self.window.end_jd - last
        return timedelta(seconds=total * SECONDS_PER_DAY)


def _instant(crossing: Crossing | None) -> Instant | None:
    if crossing is None:
        return None
    return Instant.from_jd(crossing.jd)


# Magic hour

# (edge, rising) -> position of the Sun after the crossing
_BAND_TRANSITIONS = {
    ("lower", True): "inside",
    ("lower", False): "below",
    ("upper", True): "above",
    ("upper", False): "inside",
}


def _band_intervals(search: _DaySearch, band: tuple[float, float]) -> list[list]:
    """Intervals the Sun spends inside ``band`` during the window.

    Each interval is ``[entry_jd, entry_side, exit_jd, exit_side]`` where
    the sides are ``"below"``/``"above"`` and ``None`` marks a boundary
    outside the window.  A crossing that does not change the Sun's
    position relative to the band is ignored, so a bracket dropped by the
    search loses at most the interval it belonged to.
    """
    lower, upper = band
    events = sorted(
        [(c.jd, "lower", c.rising) for c in search.crossings(lower)]
        + [(c.jd, "upper", c.rising) for c in search.crossings(upper)]
    )

    if not search.above_at_start(lower):
        state = "below"
    elif search.above_at_start(upper):
        state = "above"
    else:
        state = "inside"
    intervals = [[None, None, None, None]] if state == "inside" else []

    for jd, edge, rising in events:
        new_state = _BAND_TRANSITIONS[(edge, rising)]
        if new_state == state:
            continue
        side = "below" if edge == "lower" else "above"
        if state == "inside":
            intervals[-1][2] = jd
            intervals[-1][3] = side
        elif new_state == "inside":
            intervals.append([jd, side, None, None])
        state = new_state
    return intervals


def _select_windows(search: _DaySearch, kind: MagicHourKind) -> tuple[bool, list | None, list | None]:
    """All-day flag plus the morning and evening intervals of ``kind``."""
    intervals = _band_intervals(search, _MAGIC_HOUR_BANDS[kind])

    if len(intervals) == 1 and intervals[0][0] is None and intervals[0][2] is None:
        logger.debug("Sun inside the %s hour band all day on %s", kind.value, search.day)
        return True, None, None

    morning = next((iv for iv in intervals if iv[1] == "below"), None)
    if morning is None:
        morning = next((iv for iv in intervals if iv[0] is None and iv[3] == "above"), None)

    evening = next((iv for iv in reversed(intervals) if iv[3] == "below"), None)
    if evening is None:
        evening = next((iv for iv in reversed(intervals) if iv[2] is None and iv[1] == "above"), None)

    return False, morning, evening


def _short_event(search: _DaySearch, interval: list | None) -> RelativeShortEvent | None:
    if interval is None:
        return None
    entry_jd, _, exit_jd, _ = interval
    start = None if entry_jd is None else search.offset(entry_jd)
    end = None if exit_jd is None else search.offset(exit_jd)
    effective_start = start if start is not None else timedelta(0)
    effective_end = end if end is not None else search.offset(search.window.end_jd)
    return RelativeShortEvent(start, end, effective_end - effective_start)


def _magic_hour(search: _DaySearch, kind: MagicHourKind) -> MagicHour:
    all_day, morning, evening = _select_windows(search, kind)
    return MagicHour(
        search.day, kind, _short_event(search, morning), _short_event(search, evening), all_day
    )


def _window_events(search: _DaySearch, kind: MagicHourKind) -> dict[EventType, Instant | None]:
    _, morning, evening = _select_windows(search, kind)

    def at(interval: list | None, index: int) -> Instant | None:
        if interval is None or interval[index] is None:
            return None
        return Instant.from_jd(interval[index])

    names = _MAGIC_HOUR_EVENTS[kind]
    return {
        names[0]: at(morning, 0),
        names[1]: at(morning, 2),
        names[2]: at(evening, 0),
        names[3]: at(evening, 2),
    }


# Public operations


def _absolute(search: _DaySearch) -> AbsoluteEventDay:
    body = search.body
    events: dict[EventType, Instant | None] = {}

    rise, set_ = search.pair(search.rise_set_deg)
    rise_type, set_type = _RISE_SET_EVENTS[body]
    events[rise_type] = rise
    events[set_type] = set_

    high, low = search.culminations()
    high_type, low_type = _CULMINATION_EVENTS[body]
    events[high_type] = high
    events[low_type] = low

    if body is Body.SUN:
        for dawn_type, dusk_type, threshold in _TWILIGHT_EVENTS:
            events[dawn_type], events[dusk_type] = search.pair(threshold)
        events[EventType.DAWN], events[EventType.DUSK] = search.pair(
            search.policy.twilight_threshold_deg
        )
        for kind in MagicHourKind:
            events.update(_window_events(search, kind))

    day_type = search.day_type()
    if day_type is not DayType.NORMAL:
        logger.debug("%s on %s is %s", body.value, search.day, day_type.value)

    return AbsoluteEventDay(
        date=search.day,
        body=body,
        day_start=Instant.from_jd(search.window.start_jd),
        day_type=day_type,
        events=freeze(events),
    )


def compute_absolute_event_day(
    body: Body,
    day: date | str,
    location: GeoCoordinate,
    policy: EventPolicy | None = None,
) -> AbsoluteEventDay:
    """Events of one day for a body, as UTC instants.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        day: Civil date, or an ISO ``YYYY-MM-DD`` string.
        location: Observer location.
        policy: Search options. Default: ``EventPolicy()``.

    Returns:
        AbsoluteEventDay: Every event tracked for the body, ``None`` where
            the event does not occur.

    Raises:
        ValueError: If an argument is invalid.

    Examples:
        ```python
        from datetime import date
        from celestialevents import Body, GeoCoordinate
        from celestialevents.events import EventType, compute_absolute_event_day
        day = compute_absolute_event_day(Body.SUN, date(2024, 6, 21), GeoCoordinate(51.5, 0.0))
        day[EventType.SUNRISE]  # ~03:43 UTC
        ```
    """
    policy = _check_inputs(body, location, policy)
    return _absolute(_DaySearch(body, _coerce_date(day), location, policy))


def compute_relative_event_day(
    body: Body,
    day: date | str,
    location: GeoCoordinate,
    policy: EventPolicy | None = None,
) -> RelativeEventDay:
    """Events of one day for a body, as signed offsets from a reference.

    The reference is the body's upper culmination (solar noon, lunar
    transit) under ``ReferenceKind.NOON``, or the window start under
    ``ReferenceKind.MIDNIGHT``.  If the culmination does not occur that
    day the window start is used and ``reference_kind`` says so.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        day: Civil date, or an ISO ``YYYY-MM-DD`` string.
        location: Observer location.
        policy: Search options. Default: ``EventPolicy()``.

    Returns:
        RelativeEventDay: Offsets of every event tracked for the body.

    Raises:
        ValueError: If an argument is invalid.
    """
    policy = _check_inputs(body, location, policy)
    search = _DaySearch(body, _coerce_date(day), location, policy)
    absolute = _absolute(search)

    reference_kind = policy.relative_reference
    reference = None
    if reference_kind is ReferenceKind.NOON:
        reference = absolute.events[_CULMINATION_EVENTS[body][0]]
        if reference is None:
            logger.debug("No culmination for %s on %s, offsets from midnight", body.value, search.day)
            reference_kind = ReferenceKind.MIDNIGHT
    if reference is None:
        reference = absolute.day_start

    offsets = {
        event: None if instant is None else instant - reference
        for event, instant in absolute.events.items()
    }

    return RelativeEventDay(
        date=absolute.date,
        body=body,
        reference=reference,
        reference_kind=reference_kind,
        day_type=absolute.day_type,
        offsets=freeze(offsets),
        time_above_horizon=search.time_above(search.rise_set_deg),
    )


def magic_hour(
    day: date | str,
    location: GeoCoordinate,
    policy: EventPolicy | None = None,
) -> MagicHour:
    """Golden or blue hour windows of one day.

    The band is chosen by ``policy.magic_hour``: golden hour is a solar
    altitude between -4 and +6 deg, blue hour between -6 and -4 deg.  The
    morning window is the first stay in the band entered from below (or,
    failing that, one already under way at the day start and left
    upwards); the evening window is the last stay left downwards (or one
    entered from above and still under way at the day end).

    Args:
        day: Civil date, or an ISO ``YYYY-MM-DD`` string.
        location: Observer location.
        policy: Search options. Default: ``EventPolicy()``.

    Returns:
        MagicHour: Morning and evening windows as offsets from the day start.

    Raises:
        ValueError: If an argument is invalid.
    """
    policy = _check_inputs(Body.SUN, location, policy)
    search = _DaySearch(Body.SUN, _coerce_date(day), location, policy)
    return _magic_hour(search, policy.magic_hour)


def altitude_samples(
    body: Body,
    day: date | str,
    location: GeoCoordinate,
    policy: EventPolicy | None = None,
) -> list[AltitudeSample]:
    """Altitude of a body on the search grid of one day.

    Only samples inside the day window are returned.

    Args:
        body: ``Body.SUN`` or ``Body.MOON``.
        day: Civil date, or an ISO ``YYYY-MM-DD`` string.
        location: Observer location.
        policy: Search options; ``sample_step`` sets the spacing.

    Returns:
        list[AltitudeSample]: Samples in time order.
    """
    policy = _check_inputs(body, location, policy)
    search = _DaySearch(body, _coerce_date(day), location, policy)
    times = np.asarray(search.times)
    altitudes = np.asarray(jnp.arcsin(jnp.clip(search.sin_alt, -1.0, 1.0)))
    return [
        AltitudeSample(Instant.from_jd(jd), float(alt))
        for jd, alt in zip(times, altitudes)
        if search.window.contains(float(jd))
    ]


def solar_events_absolute(day, location, policy=None) -> AbsoluteEventDay:
    """Sun events of one day as UTC instants. See :func:`compute_absolute_event_day`."""
    return compute_absolute_event_day(Body.SUN, day, location, policy)


def solar_events_relative(day, location, policy=None) -> RelativeEventDay:
    """Sun events of one day as offsets. See :func:`compute_relative_event_day`."""
    return compute_relative_event_day(Body.SUN, day, location, policy)


def lunar_events_absolute(day, location, policy=None) -> AbsoluteEventDay:
    """Moon events of one day as UTC instants. See :func:`compute_absolute_event_day`."""
    return compute_absolute_event_day(Body.MOON, day, location, policy)


def lunar_events_relative(day, location, policy=None) -> RelativeEventDay:
    """Moon events of one day as offsets. See :func:`compute_relative_event_day`."""
    return compute_relative_event_day(Body.MOON, day, location, policy)
