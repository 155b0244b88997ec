"""
Booking boundary: turns a booking intent into a reserved interview.

Availability answers are computed from a snapshot and can be stale by the
time a user clicks "book". The store's ``reserve`` is the single point that
decides between two concurrent requests for the same slot.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Protocol, Union

from pendulum import Date

from ..domain.availability import AvailabilityQuery
from ..domain.conflicts import ConflictDetector
from ..domain.exceptions import InvalidDurationError, SlotUnavailableError
from ..domain.models import DateLike, Interview, InterviewStatus, Slot, WallClockTime, as_date


class BookingStoreProtocol(Protocol):
    """Persistence operations the booking service relies on."""

    def interviews_on(self, day: Date) -> List[Interview]:
        """Return all interviews stored for the date."""

    def reserve(self, slot: Slot, candidate_name: Optional[str] = None) -> Optional[Interview]:
        """
        Atomically store a scheduled interview for the slot.

        Returns None when an occupying interview overlaps the slot.
        """


@dataclass(frozen=True)
class BookingIntent:
    """A request to book a slot."""
    date: Date
    start: WallClockTime
    duration_minutes: int
    candidate_name: Optional[str] = None

    @classmethod
    def create(
        cls,
        day: DateLike,
        start: Union[str, WallClockTime],
        duration_minutes: int,
        candidate_name: Optional[str] = None,
    ) -> "BookingIntent":
        if isinstance(start, str):
            start = WallClockTime.parse(start)
        return cls(
            date=as_date(day),
            start=start,
            duration_minutes=duration_minutes,
            candidate_name=candidate_name,
        )

    def to_slot(self) -> Slot:
        return Slot(date=self.date, start=self.start, duration_minutes=self.duration_minutes)


class BookingService:
    """
    Validates booking intents and reserves them through the store.
    """

    def __init__(self, store: BookingStoreProtocol, availability: AvailabilityQuery) -> None:
        self._store = store
        self._availability = availability

    def book(self, intent: BookingIntent) -> Interview:
        """
        Book a slot.

        Raises:
            InvalidDurationError: If the duration is not a configured option
            SlotUnavailableError: If the slot is not offered or was taken
        """
        policy = self._availability.policy
        if not policy.is_duration_allowed(intent.duration_minutes):
            raise InvalidDurationError(
                f"Duration of {intent.duration_minutes} minutes is not offered; "
                f"choose one of {list(policy.duration_options)}"
            )

        slot = intent.to_slot()
        offered = self._availability.list_available_slots(
            intent.date,
            self._store.interviews_on(intent.date),
            intent.duration_minutes,
        )
        if slot not in offered:
            raise SlotUnavailableError(f"Slot {slot} is not available")

        interview = self._store.reserve(slot, candidate_name=intent.candidate_name)
        if interview is None:
            raise SlotUnavailableError(f"Slot {slot} was booked by another request")

        return interview


class InMemoryBookingStore:
    """
    Process-local store with a lock around check-and-insert.

    Meant for tests and the CLI; a database-backed store would use a unique
    constraint or a version check instead.
    """

    def __init__(self, interviews: Optional[List[Interview]] = None, detector: Optional[ConflictDetector] = None):
        self._interviews: List[Interview] = list(interviews or [])
        self._detector = detector or ConflictDetector()
        self._lock = threading.Lock()
        start_id = max((i.id for i in self._interviews if isinstance(i.id, int)), default=0) + 1
        self._ids = itertools.count(start_id)

    @property
    def interviews(self) -> List[Interview]:
        with self._lock:
            return list(self._interviews)

    def interviews_on(self, day: Date) -> List[Interview]:
        day = as_date(day)
        with self._lock:
            return [i for i in self._interviews if i.scheduled_date == day]

    def reserve(self, slot: Slot, candidate_name: Optional[str] = None) -> Optional[Interview]:
        with self._lock:
            busy = self._detector.blocking_intervals(slot.date, self._interviews)
            if not self._detector.is_free(slot.start, slot.duration_minutes, busy):
                return None

            interview = Interview(
                id=next(self._ids),
                scheduled_date=slot.date,
                scheduled_time=slot.start.format_24h(),
                duration_minutes=slot.duration_minutes,
                status=InterviewStatus.SCHEDULED,
                candidate_name=candidate_name,
            )
            self._interviews.append(interview)
            return interview

    def update_status(self, interview_id: Any, status: InterviewStatus) -> Interview:
        """
        Change an interview's status; cancelling frees its slot.

        Raises:
            KeyError: If no interview has the id
        """
        with self._lock:
            for index, interview in enumerate(self._interviews):
                if interview.id == interview_id:
                    updated = replace(interview, status=InterviewStatus(status))
                    self._interviews[index] = updated
                    return updated
        raise KeyError(f"Unknown interview id: {interview_id}")
