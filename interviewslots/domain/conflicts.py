"""
Conflict detection between candidate slots and existing interviews.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from .exceptions import TimeParseError
from .models import MINUTES_PER_DAY, DateLike, Interview, WallClockTime, as_date

logger = logging.getLogger(__name__)

# (start minute, duration in minutes)
Interval = Tuple[int, int]


def intervals_overlap(start1: int, duration1: int, start2: int, duration2: int) -> bool:
    """Half-open intervals [s1, s1+d1) and [s2, s2+d2) overlap."""
    return start1 < start2 + duration2 and start2 < start1 + duration1


@dataclass(frozen=True)
class TimeDiagnostic:
    """An interview whose stored time could not be normalized."""
    interview_id: Any
    scheduled_date: Any
    raw_time: str
    reason: str

    def format_display(self) -> str:
        return (
            f"Interview {self.interview_id} on {self.scheduled_date}: "
            f"unparseable time {self.raw_time!r} ({self.reason})"
        )


@dataclass
class DayConflicts:
    """Occupied intervals of one date plus the records that could not be read."""
    intervals: List[Interval] = field(default_factory=list)
    diagnostics: List[TimeDiagnostic] = field(default_factory=list)


class ConflictDetector:
    """
    Decides whether a candidate slot collides with booked interviews.

    Only interviews whose status occupies a slot (scheduled, completed)
    participate. Interviews with a malformed time are either skipped
    (default) or treated as blocking the whole day when
    ``block_on_unparseable`` is set. Either way a warning is logged and the
    record is returned as a diagnostic of that scan; the detector itself
    holds no per-query state, so one instance can serve concurrent callers.
    """

    def __init__(self, block_on_unparseable: bool = False):
        self.block_on_unparseable = block_on_unparseable

    def overlaps(
        self,
        candidate_start: WallClockTime,
        candidate_duration: int,
        interview: Interview,
        on_date: Optional[DateLike] = None,
    ) -> bool:
        """
        Check if a candidate slot overlaps an interview.

        Args:
            candidate_start: Slot start time
            candidate_duration: Slot length in minutes
            interview: Existing booking
            on_date: Date of the candidate; interviews on other dates never conflict

        Returns:
            True if the interview blocks the candidate
        """
        if candidate_duration <= 0:
            raise ValueError(f"candidate_duration must be positive, got {candidate_duration}")

        if on_date is not None and interview.scheduled_date != as_date(on_date):
            return False

        interval, _ = self._interval_for(interview)
        if interval is None:
            return False

        return intervals_overlap(candidate_start.minutes, candidate_duration, *interval)

    def scan(self, day: DateLike, interviews: Iterable[Interview]) -> DayConflicts:
        """
        Collect the occupied intervals on a date, sorted by start, together
        with diagnostics for interviews whose time could not be parsed.
        """
        day = as_date(day)
        result = DayConflicts()

        for interview in interviews:
            if interview.scheduled_date != day:
                continue
            interval, diagnostic = self._interval_for(interview)
            if interval is not None:
                result.intervals.append(interval)
            if diagnostic is not None:
                result.diagnostics.append(diagnostic)

        result.intervals.sort()
        return result

    def blocking_intervals(self, day: DateLike, interviews: Iterable[Interview]) -> List[Interval]:
        """Occupied intervals on a date, sorted by start."""
        return self.scan(day, interviews).intervals

    def is_free(self, start: WallClockTime, duration_minutes: int, intervals: Iterable[Interval]) -> bool:
        """Check a candidate against pre-collected intervals."""
        return not any(
            intervals_overlap(start.minutes, duration_minutes, busy_start, busy_duration)
            for busy_start, busy_duration in intervals
        )

    def _interval_for(self, interview: Interview) -> Tuple[Optional[Interval], Optional[TimeDiagnostic]]:
        if not interview.status.occupies_slot:
            return None, None

        try:
            start = interview.start_time()
        except TimeParseError as e:
            diagnostic = self._report(interview, str(e))
            if self.block_on_unparseable:
                return (0, MINUTES_PER_DAY), diagnostic
            return None, diagnostic

        return (start.minutes, interview.duration_minutes), None

    def _report(self, interview: Interview, reason: str) -> TimeDiagnostic:
        diagnostic = TimeDiagnostic(
            interview_id=interview.id,
            scheduled_date=interview.scheduled_date.format("YYYY-MM-DD"),
            raw_time=str(interview.scheduled_time),
            reason=reason,
        )
        action = "blocking the whole day" if self.block_on_unparseable else "ignored for conflicts"
        logger.warning("%s; %s", diagnostic.format_display(), action)
        return diagnostic
