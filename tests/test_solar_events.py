import math
from datetime import date, datetime, timedelta

import pytest

from celestialevents.coordinates import GeoCoordinate
from celestialevents.ephemerides import Body, altitude
from celestialevents.events import (
    DayType,
    EventPolicy,
    EventType,
    ReferenceKind,
    TwilightConvention,
    altitude_samples,
    compute_absolute_event_day,
    day_window,
    solar_events_absolute,
    solar_events_relative,
)
from celestialevents.events._search import Crossing
from celestialevents.events.engine import _DaySearch
from celestialevents.instant import Instant

_MINUTES = 60.0


def _minutes_between(a: Instant, b: Instant) -> float:
    return abs((a - b).total_seconds()) / _MINUTES


# ──────────────────────────────────────────────
# Day window
# ──────────────────────────────────────────────


class TestDayWindow:
    def test_local_mean_time(self):
        tokyo = GeoCoordinate(35.6762, 139.6503)
        window = day_window(date(2024, 6, 21), tokyo, EventPolicy())
        start = Instant.from_jd(window.start_jd)
        expected = Instant(2024, 6, 21) - timedelta(hours=139.6503 / 15.0)
        assert start == expected
        assert window.end_jd - window.start_jd == pytest.approx(1.0)

    def test_fixed_offset(self, london):
        policy = EventPolicy(day_start_utc_offset=timedelta(hours=1))
        window = day_window(date(2024, 6, 21), london, policy)
        assert Instant.from_jd(window.start_jd) == Instant(2024, 6, 20, 23)


# ──────────────────────────────────────────────
# London, midsummer
# ──────────────────────────────────────────────


class TestLondonMidsummer:
    @pytest.fixture
    def day(self, london, midsummer):
        return solar_events_absolute(midsummer, london)

    def test_sunrise(self, day):
        # 04:43 BST
        assert _minutes_between(day[EventType.SUNRISE], Instant(2024, 6, 21, 3, 43)) < 3.0

    def test_sunset(self, day):
        # 21:21 BST
        assert _minutes_between(day[EventType.SUNSET], Instant(2024, 6, 21, 20, 21)) < 3.0

    def test_solar_noon(self, day):
        assert _minutes_between(day[EventType.SOLAR_NOON], Instant(2024, 6, 21, 12, 2)) < 2.0

    def test_ordering(self, day):
        assert day[EventType.NAUTICAL_DAWN] < day[EventType.CIVIL_DAWN] < day[EventType.SUNRISE]
        assert day[EventType.SUNRISE] < day[EventType.SOLAR_NOON] < day[EventType.SUNSET]
        assert day[EventType.SUNSET] < day[EventType.CIVIL_DUSK] < day[EventType.NAUTICAL_DUSK]

    def test_no_astronomical_night(self, day):
        # The Sun only sinks to about -15 deg at 51.5 N in June
        assert day[EventType.ASTRONOMICAL_DAWN] is None
        assert day[EventType.ASTRONOMICAL_DUSK] is None

    def test_nadir_near_local_midnight(self, day):
        nadir = day[EventType.NADIR]
        assert nadir is not None
        assert min(_minutes_between(nadir, Instant(2024, 6, 21, 0, 2)),
                   _minutes_between(nadir, Instant(2024, 6, 22, 0, 2))) < 5.0

    def test_dawn_follows_convention(self, day):
        assert day[EventType.DAWN] == day[EventType.CIVIL_DAWN]
        assert day[EventType.DUSK] == day[EventType.CIVIL_DUSK]

    def test_day_metadata(self, day, midsummer):
        assert day.date == midsummer
        assert day.body is Body.SUN
        assert day.day_type is DayType.NORMAL
        assert day.get(EventType.MOONRISE) is None

    def test_events_inside_window(self, day):
        start = day.day_start
        end = start + timedelta(days=1)
        for instant in day.events.values():
            if instant is not None:
                assert start <= instant < end

    def test_events_read_only(self, day):
        with pytest.raises(TypeError):
            day.events[EventType.SUNRISE] = None

    def test_crossing_altitude(self, day, london):
        alt = altitude(Body.SUN, day[EventType.SUNRISE], london)
        assert math.degrees(alt) == pytest.approx(-0.833, abs=0.01)
        alt = altitude(Body.SUN, day[EventType.CIVIL_DUSK], london)
        assert math.degrees(alt) == pytest.approx(-6.0, abs=0.01)


class TestRelative:
    def test_offsets_from_noon(self, london, midsummer):
        absolute = solar_events_absolute(midsummer, london)
        relative = solar_events_relative(midsummer, london)
        noon = absolute[EventType.SOLAR_NOON]
        assert relative.reference_kind is ReferenceKind.NOON
        assert relative.reference == noon
        expected = absolute[EventType.SUNRISE] - noon
        assert relative[EventType.SUNRISE].total_seconds() == pytest.approx(expected.total_seconds(), abs=1e-3)
        assert relative[EventType.SUNRISE] < timedelta(0) < relative[EventType.SUNSET]
        assert relative[EventType.SOLAR_NOON] == timedelta(0)

    def test_offsets_from_midnight(self, london, midsummer):
        policy = EventPolicy(relative_reference=ReferenceKind.MIDNIGHT)
        absolute = solar_events_absolute(midsummer, london, policy)
        relative = solar_events_relative(midsummer, london, policy)
        assert relative.reference_kind is ReferenceKind.MIDNIGHT
        assert relative.reference == absolute.day_start
        assert relative[EventType.SUNRISE] > timedelta(0)

    def test_absent_events_are_none(self, london, midsummer):
        relative = solar_events_relative(midsummer, london)
        assert relative[EventType.ASTRONOMICAL_DAWN] is None

    def test_time_above_horizon(self, london, midsummer):
        absolute = solar_events_absolute(midsummer, london)
        relative = solar_events_relative(midsummer, london)
        daylight = absolute[EventType.SUNSET] - absolute[EventType.SUNRISE]
        assert relative.time_above_horizon.total_seconds() == pytest.approx(daylight.total_seconds(), abs=1.0)
        # ~16h38m
        assert relative.time_above_horizon.total_seconds() / 3600.0 == pytest.approx(16.63, abs=0.1)


# ──────────────────────────────────────────────
# Other locations
# ──────────────────────────────────────────────


def test_tokyo_sunrise_on_previous_utc_date():
    tokyo = GeoCoordinate(35.6762, 139.6503)
    day = solar_events_absolute(date(2024, 6, 21), tokyo)
    # 04:25 and 19:00 JST
    assert _minutes_between(day[EventType.SUNRISE], Instant(2024, 6, 20, 19, 25)) < 3.0
    assert _minutes_between(day[EventType.SUNSET], Instant(2024, 6, 21, 10, 0)) < 3.0


def test_southern_hemisphere_winter():
    sydney = GeoCoordinate(-33.8688, 151.2093)
    day = solar_events_relative(date(2024, 6, 21), sydney)
    # Shortest day: under ten hours of daylight
    assert 9.7 < day.time_above_horizon.total_seconds() / 3600.0 < 10.1


class TestPolar:
    def test_polar_night(self, arctic, midwinter):
        day = solar_events_absolute(midwinter, arctic)
        assert day.day_type is DayType.ALWAYS_BELOW
        assert day[EventType.SUNRISE] is None
        assert day[EventType.SUNSET] is None
        assert day[EventType.CIVIL_DAWN] is None
        # The Sun still culminates, below the horizon
        assert day[EventType.SOLAR_NOON] is not None

    def test_polar_night_twilight_follows_geometry(self, arctic, midwinter):
        # Solar altitude spans about -33 to -13 deg: only the -18 deg threshold is crossed
        day = solar_events_absolute(midwinter, arctic)
        assert day[EventType.NAUTICAL_DAWN] is None
        assert day[EventType.NAUTICAL_DUSK] is None
        assert day[EventType.ASTRONOMICAL_DAWN] is not None
        assert day[EventType.ASTRONOMICAL_DUSK] is not None
        assert day[EventType.ASTRONOMICAL_DAWN] < day[EventType.SOLAR_NOON] < day[EventType.ASTRONOMICAL_DUSK]

    def test_polar_day(self, arctic, midsummer):
        day = solar_events_absolute(midsummer, arctic)
        assert day.day_type is DayType.ALWAYS_ABOVE
        assert day[EventType.SUNRISE] is None
        assert day[EventType.SUNSET] is None

    def test_polar_time_above_horizon(self, arctic, midsummer, midwinter):
        assert solar_events_relative(midsummer, arctic).time_above_horizon == timedelta(days=1)
        assert solar_events_relative(midwinter, arctic).time_above_horizon == timedelta(0)

    def test_polar_day_logged(self, arctic, midsummer, caplog):
        with caplog.at_level("DEBUG", logger="celestialevents.events.engine"):
            solar_events_absolute(midsummer, arctic)
        assert "always_above" in caplog.text

    def test_first_sunrise_after_polar_night(self):
        # Svalbard: first sunrise of the year in mid February
        svalbard = GeoCoordinate(78.22, 15.65)
        before = solar_events_absolute(date(2024, 2, 10), svalbard)
        after = solar_events_absolute(date(2024, 2, 25), svalbard)
        assert before.day_type is DayType.ALWAYS_BELOW
        assert after.day_type is DayType.NORMAL


# ──────────────────────────────────────────────
# Policy
# ──────────────────────────────────────────────


class TestPolicy:
    def test_threshold_override(self, london, midsummer):
        policy = EventPolicy(altitude_threshold_override_deg=-6.0)
        day = solar_events_absolute(midsummer, london, policy)
        assert day[EventType.SUNRISE] == day[EventType.CIVIL_DAWN]

    def test_nautical_convention(self, london, midsummer):
        policy = EventPolicy(twilight_convention=TwilightConvention.NAUTICAL)
        day = solar_events_absolute(midsummer, london, policy)
        assert day[EventType.DAWN] == day[EventType.NAUTICAL_DAWN]

    def test_astronomical_convention_absent(self, london, midsummer):
        policy = EventPolicy(twilight_convention=TwilightConvention.ASTRONOMICAL)
        day = solar_events_absolute(midsummer, london, policy)
        assert day[EventType.DAWN] is None

    def test_fixed_offset_same_events(self, london, midsummer):
        default = solar_events_absolute(midsummer, london)
        shifted = solar_events_absolute(
            midsummer, london, EventPolicy(day_start_utc_offset=timedelta(hours=1))
        )
        assert shifted.day_start == Instant(2024, 6, 20, 23)
        assert abs((shifted[EventType.SUNRISE] - default[EventType.SUNRISE]).total_seconds()) < 10.0

    def test_finer_tolerance(self, london, midsummer):
        policy = EventPolicy(search_refinement_tolerance=timedelta(milliseconds=100))
        fine = solar_events_absolute(midsummer, london, policy)
        coarse = solar_events_absolute(midsummer, london)
        assert abs((fine[EventType.SUNRISE] - coarse[EventType.SUNRISE]).total_seconds()) < 5.0

    def test_tiny_iteration_budget_drops_events(self, london, midsummer):
        policy = EventPolicy(max_iterations=1)
        day = solar_events_absolute(midsummer, london, policy)
        assert day[EventType.SUNRISE] is None
        assert day[EventType.SOLAR_NOON] is None


# ──────────────────────────────────────────────
# Input handling
# ──────────────────────────────────────────────


class TestInputs:
    def test_iso_date_string(self, london, midsummer):
        assert solar_events_absolute("2024-06-21", london) == solar_events_absolute(midsummer, london)

    @pytest.mark.parametrize("value", [datetime(2024, 6, 21, 12), 20240621, "21/06/2024", None])
    def test_invalid_date(self, london, value):
        with pytest.raises(ValueError):
            solar_events_absolute(value, london)

    def test_invalid_location(self, midsummer):
        with pytest.raises(ValueError, match="GeoCoordinate"):
            solar_events_absolute(midsummer, (51.5, 0.0))

    def test_invalid_policy(self, london, midsummer):
        with pytest.raises(ValueError, match="EventPolicy"):
            solar_events_absolute(midsummer, london, {"sample_step": 60})

    def test_invalid_body(self, london, midsummer):
        with pytest.raises(ValueError, match="Body"):
            compute_absolute_event_day("sun", midsummer, london)


class TestAltitudeSamples:
    def test_samples_inside_window(self, london, midsummer):
        samples = altitude_samples(Body.SUN, midsummer, london)
        window = day_window(midsummer, london, EventPolicy())
        assert 143 <= len(samples) <= 145
        assert all(window.contains(s.instant.jd) for s in samples)
        assert [s.instant for s in samples] == sorted(s.instant for s in samples)

    def test_peak_altitude(self, london, midsummer):
        samples = altitude_samples(Body.SUN, midsummer, london)
        peak = max(s.altitude for s in samples)
        assert math.degrees(peak) == pytest.approx(61.93, abs=0.3)

    def test_step_follows_policy(self, london, midsummer):
        samples = altitude_samples(Body.SUN, midsummer, london, EventPolicy(sample_step=timedelta(hours=1)))
        assert 23 <= len(samples) <= 25


# ──────────────────────────────────────────────
# Unconverged crossings
# ──────────────────────────────────────────────


class TestDroppedCrossings:
    @pytest.fixture
    def search(self, london, midsummer):
        return _DaySearch(Body.SUN, midsummer, london, EventPolicy())

    def test_repeated_rising_keeps_first(self, search):
        threshold = search.rise_set_deg
        full = search.time_above(threshold)
        rise, set_ = search.crossings(threshold)
        assert rise.rising and not set_.rising

        # A second rising crossing with no falling one between them
        search._crossings[threshold] = [rise, Crossing(rise.jd + 0.1, True), set_]
        assert search.time_above(threshold) == full

    def test_repeated_falling_ignored(self, search):
        threshold = search.rise_set_deg
        full = search.time_above(threshold)
        rise, set_ = search.crossings(threshold)

        search._crossings[threshold] = [Crossing(rise.jd - 0.1, False), rise, set_]
        assert search.time_above(threshold) == full

    def test_lost_rising_drops_one_interval(self, search):
        threshold = search.rise_set_deg
        _, set_ = search.crossings(threshold)

        search._crossings[threshold] = [set_]
        assert search.time_above(threshold) == timedelta(0)
