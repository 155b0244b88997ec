"""
Candidate start times for a day, derived from the office hours policy.
"""

from typing import List, Optional

from .models import DateLike, WallClockTime
from .office_hours import OfficeHoursPolicy


class SlotGenerator:
    """
    Produces the ordered candidate start times for a date.

    Starts are spaced by the window granularity, beginning at the opening
    time. A start is kept only while ``start + duration <= closes_at``; the
    duration defaults to the policy's shortest option.

    Example (08:00 - 18:00, 30 min grid):
    duration 15 -> 08:00, 08:30, ..., 17:30 (20 starts)
    duration 60 -> 08:00, 08:30, ..., 17:00 (19 starts)
    """

    def __init__(self, policy: OfficeHoursPolicy):
        self.policy = policy

    def generate(self, day: DateLike, duration_minutes: Optional[int] = None) -> List[WallClockTime]:
        """
        Generate candidate start times for a day.

        Args:
            day: Calendar date
            duration_minutes: Length the slot must fit; defaults to the
                policy's minimum duration

        Returns:
            Chronological list of start times, empty if the office is closed
        """
        if duration_minutes is None:
            duration_minutes = self.policy.minimum_duration_minutes
        _require_positive_duration(duration_minutes)

        window = self.policy.window_for(day)
        if window is None:
            return []

        starts: List[WallClockTime] = []
        current = window.opens_at.minutes

        while current + duration_minutes <= window.closes_at.minutes:
            starts.append(WallClockTime(current))
            current += window.granularity_minutes

        return starts


def generate(day: DateLike, policy: OfficeHoursPolicy, duration_minutes: Optional[int] = None) -> List[WallClockTime]:
    """Shortcut for ``SlotGenerator(policy).generate(day, duration_minutes)``."""
    return SlotGenerator(policy).generate(day, duration_minutes)


def _require_positive_duration(duration_minutes: int) -> None:
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise TypeError(f"duration_minutes must be an int, got {type(duration_minutes).__name__}")
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be positive, got {duration_minutes}")
