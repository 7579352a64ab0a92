"""The instant module provides the ``Instant`` class for single moments in time.

An ``Instant`` is a Julian Date tagged with the time scale it is expressed
in (``TimeScale.UTC`` or ``TimeScale.TT``).  Instants are immutable.  Two
instants can only be compared or subtracted when they share a scale; the
conversion from UTC to TT goes through ΔT and must be requested explicitly
with :meth:`Instant.to_tt`.

The Julian Date is held as a Python float (IEEE double, ~40 µs resolution
near the current epoch), independently of the JAX dtype setting.
"""

from __future__ import annotations

import calendar
import enum
import math
import re
from datetime import datetime, timedelta, timezone

from .config import get_instant_eq_tolerance
from .constants import JD_J1900, SECONDS_PER_DAY
from .time import caldate_to_jd, delta_t, jd_to_caldate

# Valid ISO 8601 instant string patterns
_INSTANT_PATTERNS = [
    # YYYY-MM-DD
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})$'),
    # YYYY-MM-DDTHH:MM:SSZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})Z$'),
    # YYYY-MM-DDTHH:MM:SS.fffZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})\.(\d+)Z$'),
]


class TimeScale(enum.Enum):
    """Time scale an :class:`Instant` is expressed in."""

    UTC = "UTC"
    TT = "TT"


class Instant:
    """A single moment in time: Julian Date plus time scale.

    Constructors:
        Instant(2024, 6, 21)
        Instant(2024, 6, 21, 12, 0, 0.0)
        Instant("2024-06-21T12:00:00Z")
        Instant(other_instant)
        Instant.from_jd(2460483.0, TimeScale.TT)
        Instant.from_datetime(datetime(2024, 6, 21, tzinfo=timezone.utc))

    Calendar and string constructors produce UTC instants.
    """

    __slots__ = ('_jd', '_scale')

    def __init__(self, *args: int | float | str | Instant) -> None:
        """Initialize Instant. Supports multiple constructor forms.

        Args:
            *args: Either (year, month, day[, hour, minute, second]),
                a string in ISO 8601 format, or another Instant.

        Raises:
            ValueError: If the arguments do not describe a valid instant.
        """
        if len(args) == 1:
            if isinstance(args[0], str):
                self._init_string(args[0])
            elif isinstance(args[0], Instant):
                self._set(args[0]._jd, args[0]._scale)
            else:
                raise ValueError(f"Cannot construct Instant from {type(args[0])}")
        elif 3 <= len(args) <= 6:
            self._init_date(*args)
        else:
            raise ValueError(
                "Instant requires date components (3-6 args), a string, or an Instant"
            )

    def _set(self, jd: float, scale: TimeScale) -> None:
        object.__setattr__(self, '_jd', jd)
        object.__setattr__(self, '_scale', scale)

    def __setattr__(self, name, value):
        raise AttributeError(f"Instant is immutable, cannot set {name!r}")

    @classmethod
    def from_jd(cls, jd: float, scale: TimeScale = TimeScale.UTC) -> Instant:
        """Create an Instant from a Julian Date.

        Args:
            jd (float): Julian Date.
            scale (TimeScale): Scale of ``jd``. Default: ``TimeScale.UTC``

        Returns:
            Instant: New Instant.

        Raises:
            ValueError: If ``jd`` is not finite or ``scale`` is not a TimeScale.
        """
        jd = float(jd)
        if not math.isfinite(jd):
            raise ValueError(f"Julian Date must be finite, got {jd}")
        if not isinstance(scale, TimeScale):
            raise ValueError(f"scale must be a TimeScale, got {scale!r}")
        obj = object.__new__(cls)
        obj._set(jd, scale)
        return obj

    @classmethod
    def from_datetime(cls, dt: datetime) -> Instant:
        """Create a UTC Instant from a ``datetime``.

        Timezone-aware datetimes are converted to UTC first.  Naive
        datetimes are taken to be UTC already.

        Args:
            dt (datetime): Civil date and time.

        Returns:
            Instant: New UTC Instant.
        """
        if not isinstance(dt, datetime):
            raise ValueError(f"Cannot construct Instant from {type(dt)}")
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute,
                   dt.second + dt.microsecond / 1e6)

    def _init_date(self, year, month, day, hour=0, minute=0, second=0.0):
        """Initialize from calendar date components.

        Args:
            year (int): Year.
            month (int): Month.
            day (int): Day.
            hour (int): Hour. Default: 0
            minute (int): Minute. Default: 0
            second (float): Second, may include fractional part. Default: 0.0
        """
        parts = {"year": year, "month": month, "day": day, "hour": hour, "minute": minute}
        for name, value in parts.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
        if isinstance(second, bool) or not isinstance(second, (int, float)):
            raise ValueError(f"second must be a number, got {type(second).__name__}")
        if not 1 <= month <= 12:
            raise ValueError(f"month must be in 1..12, got {month}")
        days_in_month = calendar.monthrange(year, month)[1]
        if not 1 <= day <= days_in_month:
            raise ValueError(f"day must be in 1..{days_in_month}, got {day}")
        if not (0 <= hour < 24 and 0 <= minute < 60 and 0.0 <= second < 60.0):
            raise ValueError(
                f"Invalid time of day {hour}:{minute}:{second}"
            )

        # Date part and time part are summed in Python floats so the JAX
        # dtype setting cannot truncate the time of day.
        jd_date = float(caldate_to_jd(year, month, day))
        jd = jd_date + (hour * 3600.0 + minute * 60.0 + second) / SECONDS_PER_DAY
        self._set(jd, TimeScale.UTC)

    def _init_string(self, string):
        """Initialize from an ISO 8601 string.

        Supported formats:
            - ``YYYY-MM-DD``
            - ``YYYY-MM-DDTHH:MM:SSZ``
            - ``YYYY-MM-DDTHH:MM:SS.fffZ``

        Args:
            string (str): ISO 8601 date/time string.
        """
        for pattern in _INSTANT_PATTERNS:
            m = pattern.match(string)
            if m:
                groups = m.groups()
                year = int(groups[0])
                month = int(groups[1])
                day = int(groups[2])

                hour = 0
                minute = 0
                second = 0.0

                if len(groups) >= 6:
                    hour = int(groups[3])
                    minute = int(groups[4])
                    second = float(groups[5])

                if len(groups) == 7:
                    second += float(f"0.{groups[6]}")

                self._init_date(year, month, day, hour, minute, second)
                return

        raise ValueError(
            f'Invalid Instant string: "{string}" is not ISO 8601 compliant'
        )

    # Accessors

    @property
    def jd(self) -> float:
        """Julian Date in this instant's scale."""
        return self._jd

    @property
    def scale(self) -> TimeScale:
        """Time scale of this instant."""
        return self._scale

    def to_tt(self) -> Instant:
        """Return this instant expressed in Terrestrial Time.

        UTC instants are shifted by ΔT; TT instants are returned unchanged.
        """
        if self._scale is TimeScale.TT:
            return self
        return Instant.from_jd(self._jd + float(delta_t(self._jd)) / SECONDS_PER_DAY,
                               TimeScale.TT)

    def tt_day_offset(self) -> float:
        """TT days since J1900.0 (JD 2415020.0), the position model's time argument."""
        return self.to_tt()._jd - JD_J1900

    def caldate(self) -> tuple[int, int, int, int, int, float]:
        """Return the calendar date components in this instant's scale.

        Returns:
            tuple: (year, month, day, hour, minute, second) where second
                includes fractional part.
        """
        year, month, day, hour, minute, second = jd_to_caldate(self._jd)
        return int(year), int(month), int(day), int(hour), int(minute), float(second)

    def to_datetime(self) -> datetime:
        """Return a timezone-aware UTC ``datetime`` (microsecond resolution).

        Raises:
            ValueError: If the instant is not in the UTC scale.
        """
        if self._scale is not TimeScale.UTC:
            raise ValueError("Only UTC instants convert to datetime; TT is not a civil scale")
        year, month, day, _, _, _ = self.caldate()
        jd_midnight = float(caldate_to_jd(year, month, day))
        seconds = (self._jd - jd_midnight) * SECONDS_PER_DAY
        return (datetime(year, month, day, tzinfo=timezone.utc)
                + timedelta(seconds=round(seconds, 6)))

    # Arithmetic operators

    def _check_scale(self, other: Instant) -> None:
        if self._scale is not other._scale:
            raise ValueError(
                f"Cannot mix time scales: {self._scale.value} and {other._scale.value}"
            )

    def __add__(self, delta: timedelta) -> Instant:
        if not isinstance(delta, timedelta):
            return NotImplemented
        return Instant.from_jd(self._jd + delta.total_seconds() / SECONDS_PER_DAY,
                               self._scale)

    __radd__ = __add__

    def __sub__(self, other: Instant | timedelta) -> Instant | timedelta:
        """Subtract a duration, or compute the duration between two instants.

        Args:
            other: If Instant (same scale), returns the signed difference as
                a ``timedelta``. If ``timedelta``, returns a new Instant.
        """
        if isinstance(other, Instant):
            self._check_scale(other)
            return timedelta(seconds=(self._jd - other._jd) * SECONDS_PER_DAY)
        if isinstance(other, timedelta):
            return self.__add__(-other)
        return NotImplemented

    # Comparison operators

    def _key(self) -> int:
        # Time rounded to the equality resolution. __eq__ and __hash__ both
        # use it, so equal instants always hash alike.
        return round(self._jd * SECONDS_PER_DAY / get_instant_eq_tolerance())

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        if self._scale is not other._scale:
            return False
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        self._check_scale(other)
        return self._jd < other._jd and not self == other

    def __le__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.__lt__(other) or self.__eq__(other)

    def __gt__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        self._check_scale(other)
        return self._jd > other._jd and not self == other

    def __ge__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.__gt__(other) or self.__eq__(other)

    # String representations

    def __str__(self):
        year, month, day, hour, minute, second = self.caldate()
        suffix = 'Z' if self._scale is TimeScale.UTC else ' TT'
        return (f'{year:04d}-{month:02d}-{day:02d}T'
                f'{hour:02d}:{minute:02d}:{second:06.3f}{suffix}')

    def __repr__(self):
        return f'Instant.from_jd({self._jd!r}, TimeScale.{self._scale.name})'

    def __hash__(self):
        return hash((self._key(), self._scale))
