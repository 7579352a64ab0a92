"""Event engine for the Sun and Moon.

Finds, for one civil day and one observer, the instants at which a body
crosses altitude thresholds or culminates:

- **Rise and set**: sunrise/sunset, moonrise/moonset
- **Twilight**: civil, nautical and astronomical dawn and dusk
- **Culmination**: solar noon and nadir, lunar transit and lunar nadir
- **Magic hour**: golden hour and blue hour windows

Results come as absolute UTC instants (:class:`AbsoluteEventDay`) or as
signed offsets from a reference instant (:class:`RelativeEventDay`).
"""

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
)
from celestialevents.events.config import EventPolicy, TwilightConvention
from celestialevents.events.engine import (
    altitude_samples,
    compute_absolute_event_day,
    compute_relative_event_day,
    day_window,
    lunar_events_absolute,
    lunar_events_relative,
    magic_hour,
    solar_events_absolute,
    solar_events_relative,
)

__all__ = [
    # Types
    "EventType",
    "DayType",
    "ReferenceKind",
    "MagicHourKind",
    "AltitudeSample",
    "AbsoluteEventDay",
    "RelativeEventDay",
    "RelativeShortEvent",
    "MagicHour",
    # Config
    "EventPolicy",
    "TwilightConvention",
    # Engine
    "compute_absolute_event_day",
    "compute_relative_event_day",
    "solar_events_absolute",
    "solar_events_relative",
    "lunar_events_absolute",
    "lunar_events_relative",
    "magic_hour",
    "altitude_samples",
    "day_window",
]
