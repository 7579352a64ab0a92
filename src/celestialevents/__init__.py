"""
celestialevents computes Sun and Moon positions and their daily events (rise, set, twilight, golden and blue hour) with JAX.
"""

from .config import set_dtype, get_dtype

from .constants import (
    DEG2RAD,
    RAD2DEG,
    JD_MJD_OFFSET,
    JD_J2000,
    JD_J1900,
    SUNRISE_ALTITUDE_DEG,
    CIVIL_TWILIGHT_DEG,
    NAUTICAL_TWILIGHT_DEG,
    ASTRONOMICAL_TWILIGHT_DEG,
    MOONRISE_ALTITUDE_DEG,
    GOLDEN_HOUR_BAND_DEG,
    BLUE_HOUR_BAND_DEG,
)

from .time import (
    caldate_to_mjd,
    caldate_to_jd,
    jd_to_mjd,
    mjd_to_jd,
    jd_to_caldate,
    mjd_to_caldate,
    decimal_year,
    delta_t,
    jd_utc_to_tt,
    jd_to_tt_day_offset,
)

from .instant import Instant, TimeScale

from .coordinates import (
    GeoCoordinate,
    HorizontalPosition,
    gmst,
)

from .ephemerides import (
    Body,
    Position,
    MoonIllumination,
    ecliptic_coordinates,
    equatorial_coordinates,
    calculate_body_position,
    position,
    horizontal_position,
    altitude,
    moon_illumination,
)

from .events import (
    EventType,
    DayType,
    ReferenceKind,
    MagicHourKind,
    AltitudeSample,
    AbsoluteEventDay,
    RelativeEventDay,
    RelativeShortEvent,
    MagicHour,
    EventPolicy,
    TwilightConvention,
    compute_absolute_event_day,
    compute_relative_event_day,
    solar_events_absolute,
    solar_events_relative,
    lunar_events_absolute,
    lunar_events_relative,
    magic_hour,
    altitude_samples,
)

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "JD_MJD_OFFSET",
    "JD_J2000",
    "JD_J1900",
    "SUNRISE_ALTITUDE_DEG",
    "CIVIL_TWILIGHT_DEG",
    "NAUTICAL_TWILIGHT_DEG",
    "ASTRONOMICAL_TWILIGHT_DEG",
    "MOONRISE_ALTITUDE_DEG",
    "GOLDEN_HOUR_BAND_DEG",
    "BLUE_HOUR_BAND_DEG",
    # Time
    "caldate_to_mjd",
    "caldate_to_jd",
    "jd_to_mjd",
    "mjd_to_jd",
    "jd_to_caldate",
    "mjd_to_caldate",
    "decimal_year",
    "delta_t",
    "jd_utc_to_tt",
    "jd_to_tt_day_offset",
    # Instant
    "Instant",
    "TimeScale",
    # Coordinates
    "GeoCoordinate",
    "HorizontalPosition",
    "gmst",
    # Ephemerides
    "Body",
    "Position",
    "MoonIllumination",
    "ecliptic_coordinates",
    "equatorial_coordinates",
    "calculate_body_position",
    "position",
    "horizontal_position",
    "altitude",
    "moon_illumination",
    # Events
    "EventType",
    "DayType",
    "ReferenceKind",
    "MagicHourKind",
    "AltitudeSample",
    "AbsoluteEventDay",
    "RelativeEventDay",
    "RelativeShortEvent",
    "MagicHour",
    "EventPolicy",
    "TwilightConvention",
    "compute_absolute_event_day",
    "compute_relative_event_day",
    "solar_events_absolute",
    "solar_events_relative",
    "lunar_events_absolute",
    "lunar_events_relative",
    "magic_hour",
    "altitude_samples",
]
