"""
Tests for conflict detection and availability queries.
"""

import itertools
import logging

import pendulum
import pytest

from interviewslots.domain.availability import AvailabilityQuery, get_available_time_slots
from interviewslots.domain.conflicts import ConflictDetector, intervals_overlap
from interviewslots.domain.models import Interview, InterviewStatus, WallClockTime
from interviewslots.domain.office_hours import DEFAULT_POLICY, OfficeHoursPolicy

DAY = pendulum.date(2025, 6, 10)


def _clock(today):
    return lambda: today


def _query(today=pendulum.date(2025, 6, 1), policy=DEFAULT_POLICY, detector=None):
    return AvailabilityQuery(policy=policy, detector=detector, today=_clock(today))


def _interview(time, duration=60, status=InterviewStatus.SCHEDULED, day=DAY, interview_id=1):
    return Interview(
        id=interview_id,
        scheduled_date=day,
        scheduled_time=time,
        duration_minutes=duration,
        status=status,
    )


def _starts(slots):
    return [slot.start.format_24h() for slot in slots]


class TestIntervalsOverlap:
    """Tests for the interval predicate."""

    def test_touching_intervals_do_not_overlap(self):
        """Test [09:00, 10:00) and [10:00, 11:00) are compatible."""
        assert not intervals_overlap(540, 60, 600, 60)

    def test_partial_overlap(self):
        """Test a 30-minute overlap."""
        assert intervals_overlap(570, 60, 600, 60)

    def test_containment(self):
        """Test one interval inside another."""
        assert intervals_overlap(480, 600, 600, 15)

    def test_symmetry(self):
        """Test overlap(A, B) == overlap(B, A) on a grid of intervals."""
        starts = range(480, 720, 15)
        durations = (15, 30, 45, 60, 90)
        for s1, d1, s2, d2 in itertools.product(starts, durations, starts, durations):
            assert intervals_overlap(s1, d1, s2, d2) == intervals_overlap(s2, d2, s1, d1)


class TestConflictDetector:
    """Tests for ConflictDetector."""

    def test_scheduled_interview_conflicts(self):
        """Test a scheduled booking blocks overlapping candidates."""
        detector = ConflictDetector()
        interview = _interview("10:00 AM")

        assert detector.overlaps(WallClockTime.of(9, 30), 60, interview)
        assert detector.overlaps(WallClockTime.of(10), 30, interview)
        assert not detector.overlaps(WallClockTime.of(9), 60, interview)
        assert not detector.overlaps(WallClockTime.of(11), 60, interview)

    def test_completed_interview_conflicts(self):
        """Test completed interviews still occupy their slot."""
        detector = ConflictDetector()

        assert detector.overlaps(WallClockTime.of(10), 30, _interview("10:00", status="completed"))

    @pytest.mark.parametrize("status", [InterviewStatus.CANCELLED, InterviewStatus.NO_SHOW])
    def test_freed_statuses_never_conflict(self, status):
        """Test cancelled and no-show interviews free their slot."""
        detector = ConflictDetector()

        assert not detector.overlaps(WallClockTime.of(10), 60, _interview("10:00", status=status))

    def test_other_dates_never_conflict(self):
        """Test the on_date filter."""
        detector = ConflictDetector()
        interview = _interview("10:00")

        assert not detector.overlaps(WallClockTime.of(10), 60, interview, on_date=DAY.add(days=1))
        assert detector.overlaps(WallClockTime.of(10), 60, interview, on_date=DAY)

    def test_mixed_time_formats_compare(self):
        """Test 12-hour and 24-hour bookings are compared on one scale."""
        detector = ConflictDetector()

        assert detector.overlaps(WallClockTime.parse("14:30"), 30, _interview("2:30 PM"))

    def test_unparseable_time_is_skipped_and_reported(self, caplog):
        """Test malformed times are excluded but leave a diagnostic."""
        detector = ConflictDetector()
        interview = _interview("10", interview_id=42)

        with caplog.at_level(logging.WARNING, logger="interviewslots.domain.conflicts"):
            assert not detector.overlaps(WallClockTime.of(10), 60, interview)
            result = detector.scan(DAY, [interview])

        assert result.intervals == []
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].interview_id == 42
        assert result.diagnostics[0].raw_time == "10"
        assert "ignored for conflicts" in caplog.text

    def test_diagnostics_are_per_scan(self):
        """Test a reused detector does not accumulate diagnostics across queries."""
        detector = ConflictDetector()
        query = _query(detector=detector)

        for index in range(50):
            bad = _interview("10", interview_id=index)
            assert query.has_available_slots(DAY, [bad])
            assert len(detector.scan(DAY, [bad]).diagnostics) == 1

        assert detector.scan(DAY, [_interview("10:00")]).diagnostics == []

    def test_unparseable_time_blocks_day_in_strict_mode(self):
        """Test fail-closed mode treats the interview as occupying the day."""
        detector = ConflictDetector(block_on_unparseable=True)

        assert detector.overlaps(WallClockTime.of(17), 30, _interview("12:00 noon"))
        result = detector.scan(DAY, [_interview("12:00 noon")])
        assert result.intervals == [(0, 1440)]
        assert len(result.diagnostics) == 1

    def test_blocking_intervals(self):
        """Test intervals are collected per date and sorted."""
        detector = ConflictDetector()
        interviews = [
            _interview("2:00 PM", 30),
            _interview("09:00", 45),
            _interview("11:00", 60, status="cancelled"),
            _interview("10:00", 60, day=DAY.add(days=1)),
        ]

        assert detector.blocking_intervals(DAY, interviews) == [(540, 45), (840, 30)]

    def test_rejects_non_positive_candidate_duration(self):
        """Test invalid durations fail fast."""
        with pytest.raises(ValueError):
            ConflictDetector().overlaps(WallClockTime.of(10), 0, _interview("10:00"))


class TestAvailabilityQuery:
    """Tests for AvailabilityQuery."""

    def test_empty_day_sixty_minutes(self):
        """Test an empty day offers 19 hour-long slots from 08:00 to 17:00."""
        slots = _query().list_available_slots(DAY, [], 60)

        assert len(slots) == 19
        assert slots[0].start == WallClockTime.of(8)
        assert slots[-1].start == WallClockTime.of(17)
        assert all(slot.duration_minutes == 60 for slot in slots)
        assert all(slot.date == DAY for slot in slots)

    def test_scheduled_interview_removes_overlapping_slots(self):
        """Test a 10:00 booking removes 09:30, 10:00 and 10:30 but keeps 09:00."""
        starts = _starts(_query().list_available_slots(DAY, [_interview("10:00")], 60))

        assert "09:00" in starts
        assert "09:30" not in starts
        assert "10:00" not in starts
        assert "10:30" not in starts
        assert "11:00" in starts
        assert len(starts) == 16

    def test_cancelled_interview_keeps_slots(self):
        """Test a cancelled booking does not reduce availability."""
        query = _query()
        cancelled = _interview("10:00", status=InterviewStatus.CANCELLED)

        assert query.list_available_slots(DAY, [cancelled], 60) == query.list_available_slots(DAY, [], 60)

    def test_default_duration(self):
        """Test the policy default duration of 30 minutes is used."""
        slots = _query().list_available_slots(DAY, [])

        assert len(slots) == 20
        assert slots[-1].start == WallClockTime.of(17, 30)
        assert slots[0].duration_minutes == 30

    def test_past_day_has_no_slots(self):
        """Test days before today are not offered."""
        query = _query(today=DAY.add(days=1))

        assert query.list_available_slots(DAY, []) == []
        assert not query.has_available_slots(DAY, [])
        assert query.is_past(DAY)

    def test_today_is_offered(self):
        """Test today is not considered past."""
        query = _query(today=DAY)

        assert query.has_available_slots(DAY, [])
        assert not query.is_past(DAY)

    def test_closed_day(self):
        """Test closed days have no availability."""
        query = _query(policy=OfficeHoursPolicy(closed_weekdays=frozenset({2})))

        assert not query.has_available_slots(DAY, [])

    def test_fully_booked_day(self):
        """Test a booking covering office hours leaves nothing."""
        full_day = _interview("08:00", duration=600)

        assert not _query().has_available_slots(DAY, [full_day])

    def test_interviews_on_other_days_ignored(self):
        """Test bookings on other dates do not matter."""
        other_day = _interview("08:00", duration=600, day=DAY.add(days=1))

        assert len(_query().list_available_slots(DAY, [other_day], 60)) == 19

    def test_strict_mode_blocks_day(self):
        """Test fail-closed mode removes the whole day on a bad record."""
        query = _query(detector=ConflictDetector(block_on_unparseable=True))

        assert not query.has_available_slots(DAY, [_interview("10")])

    def test_has_available_slots_matches_list(self):
        """Test has_available_slots == bool(list_available_slots) across cases."""
        query = _query(today=pendulum.date(2025, 6, 9))
        cases = [
            [],
            [_interview("10:00")],
            [_interview("08:00", duration=600)],
            [_interview("08:00", duration=570)],
            [_interview("10:00", status="cancelled")],
        ]
        days = [pendulum.date(2025, 6, 8), DAY, pendulum.date(2025, 6, 11)]

        for day, interviews in itertools.product(days, cases):
            for duration in (None, 15, 30, 90):
                assert query.has_available_slots(day, interviews, duration) == bool(
                    query.list_available_slots(day, interviews, duration)
                )

    def test_iterator_is_lazy_and_restartable(self):
        """Test iteration can be stopped early and repeated."""
        query = _query()

        first = next(query.iter_available_slots(DAY, []))
        again = next(query.iter_available_slots(DAY, []))

        assert first == again
        assert first.start == WallClockTime.of(8)

    def test_available_start_times(self):
        """Test the string form offered by the booking form."""
        times = _query().available_start_times(DAY, [_interview("08:00", duration=540)], 30)

        assert times == ["17:00", "17:30"]

    def test_module_level_function(self):
        """Test the module function with a far-future date."""
        future = pendulum.today().date().add(years=1)

        slots = get_available_time_slots(future, [], 60)

        assert len(slots) == 19
