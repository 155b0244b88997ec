"""
Availability queries: which slots of a day are still free.

Results are advisory. They are computed from the snapshot of interviews the
caller passes in, so two callers can still race for the same slot; the
booking store's atomic reserve decides the winner.
"""

from typing import Callable, Iterable, Iterator, List, Optional

import pendulum
from pendulum import Date

from .conflicts import ConflictDetector
from .models import DateLike, Interview, Slot, as_date
from .office_hours import DEFAULT_POLICY, OfficeHoursPolicy
from .slot_generator import SlotGenerator


def local_today(timezone: str = "local") -> Callable[[], Date]:
    """Clock returning today's date in the given timezone."""
    def _today() -> Date:
        return pendulum.today(timezone).date()
    return _today


class AvailabilityQuery:
    """
    Lists free interview slots for a date.

    Algorithm:
    1. Reject days strictly before today
    2. Generate candidate starts that fit the requested duration
    3. Collect the occupied intervals of that date once
    4. Keep candidates that overlap none of them
    """

    def __init__(
        self,
        policy: OfficeHoursPolicy = DEFAULT_POLICY,
        detector: Optional[ConflictDetector] = None,
        today: Optional[Callable[[], Date]] = None,
    ):
        self.policy = policy
        self.detector = detector or ConflictDetector()
        self.today = today or local_today()
        self._generator = SlotGenerator(policy)

    def is_past(self, day: DateLike) -> bool:
        return as_date(day) < self.today()

    def iter_available_slots(
        self,
        day: DateLike,
        interviews: Iterable[Interview],
        duration_minutes: Optional[int] = None,
    ) -> Iterator[Slot]:
        """
        Lazily yield free slots in chronological order.

        Calling again restarts the sequence.
        """
        day = as_date(day)
        if duration_minutes is None:
            duration_minutes = self.policy.default_duration_minutes

        candidates = self._generator.generate(day, duration_minutes)
        if not candidates or self.is_past(day):
            return

        busy = self.detector.blocking_intervals(day, interviews)

        for start in candidates:
            if self.detector.is_free(start, duration_minutes, busy):
                yield Slot(date=day, start=start, duration_minutes=duration_minutes)

    def list_available_slots(
        self,
        day: DateLike,
        interviews: Iterable[Interview],
        duration_minutes: Optional[int] = None,
    ) -> List[Slot]:
        """All free slots for a day."""
        return list(self.iter_available_slots(day, interviews, duration_minutes))

    def has_available_slots(
        self,
        day: DateLike,
        interviews: Iterable[Interview],
        duration_minutes: Optional[int] = None,
    ) -> bool:
        """Check if at least one slot is free on the day."""
        for _ in self.iter_available_slots(day, interviews, duration_minutes):
            return True
        return False

    def available_start_times(
        self,
        day: DateLike,
        interviews: Iterable[Interview],
        duration_minutes: Optional[int] = None,
    ) -> List[str]:
        """Free start times as ``HH:MM`` strings, as offered in the booking form."""
        return [
            slot.start.format_24h()
            for slot in self.iter_available_slots(day, interviews, duration_minutes)
        ]


def has_available_slots(
    day: DateLike,
    interviews: Iterable[Interview],
    duration_minutes: Optional[int] = None,
    policy: OfficeHoursPolicy = DEFAULT_POLICY,
) -> bool:
    """Check a day against the given policy, using the local "today"."""
    return AvailabilityQuery(policy).has_available_slots(day, interviews, duration_minutes)


def get_available_time_slots(
    day: DateLike,
    interviews: Iterable[Interview],
    duration_minutes: Optional[int] = None,
    policy: OfficeHoursPolicy = DEFAULT_POLICY,
) -> List[Slot]:
    """Free slots of a day under the given policy, using the local "today"."""
    return AvailabilityQuery(policy).list_available_slots(day, interviews, duration_minutes)
