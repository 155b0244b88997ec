"""
Domain models for interviews, wall-clock times and bookable slots.
"""

import re
from dataclasses import dataclass
from datetime import date as _date
from datetime import datetime as _datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

import pendulum
from pendulum import Date

from .exceptions import TimeParseError

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(
    r"^\s*(?P<hour>\d{1,2}):(?P<minute>\d{2})\s*(?P<meridiem>[AaPp][Mm])?\s*$"
)

DateLike = Union[Date, _date, _datetime, str]


def as_date(value: DateLike) -> Date:
    """
    Normalize a date-like value to a pendulum Date without a time component.

    Accepts pendulum/stdlib dates and datetimes and ISO-8601 strings such as
    ``"2025-06-10"`` or ``"2025-06-10T00:00:00Z"``.

    Raises:
        TypeError: If value is None or not date-like
        ValueError: If a string cannot be parsed as a date
    """
    if value is None:
        raise TypeError("A date is required, got None")

    if isinstance(value, _datetime):
        return pendulum.date(value.year, value.month, value.day)

    if isinstance(value, _date):
        if isinstance(value, Date):
            return value
        return pendulum.date(value.year, value.month, value.day)

    if isinstance(value, str):
        parsed = pendulum.parse(value.strip())
        if isinstance(parsed, _datetime) or isinstance(parsed, _date):
            return pendulum.date(parsed.year, parsed.month, parsed.day)
        raise ValueError(f"Could not parse date: {value!r}")

    raise TypeError(f"Expected a date, got {type(value).__name__}")


@dataclass(frozen=True, order=True)
class WallClockTime:
    """
    Local wall-clock time stored as minutes since midnight.

    Invariant: 0 <= minutes < 1440.
    """
    minutes: int

    def __post_init__(self):
        if isinstance(self.minutes, bool) or not isinstance(self.minutes, int):
            raise TypeError(f"minutes must be an int, got {type(self.minutes).__name__}")
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValueError(f"minutes must be between 0 and 1439, got {self.minutes}")

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "WallClockTime":
        """Build a time from hour and minute fields."""
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {minute}")
        return cls(hour * 60 + minute)

    @classmethod
    def parse(cls, text: str) -> "WallClockTime":
        """
        Parse ``"HH:MM"`` (24-hour) or ``"H:MM AM/PM"`` (12-hour).

        A value without a meridiem marker is read on the 24-hour clock, so
        ``"12:00"`` is noon.

        Raises:
            TimeParseError: If the string is not a complete, in-range time
        """
        if not isinstance(text, str):
            raise TimeParseError(f"Time must be a string, got {type(text).__name__}")

        match = _TIME_PATTERN.match(text)
        if not match:
            raise TimeParseError(f"Unrecognized time format: {text!r}")

        hour = int(match.group("hour"))
        minute = int(match.group("minute"))
        meridiem = match.group("meridiem")

        if minute > 59:
            raise TimeParseError(f"Minute out of range in {text!r}")

        if meridiem:
            if not 1 <= hour <= 12:
                raise TimeParseError(f"12-hour clock value out of range in {text!r}")
            if meridiem.upper() == "PM" and hour != 12:
                hour += 12
            elif meridiem.upper() == "AM" and hour == 12:
                hour = 0
        elif hour > 23:
            raise TimeParseError(f"Hour out of range in {text!r}")

        return cls(hour * 60 + minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def add_minutes(self, minutes: int) -> "WallClockTime":
        """Return a new time shifted by the given minutes (same day only)."""
        return WallClockTime(self.minutes + minutes)

    def format_24h(self) -> str:
        """Format as ``HH:MM``."""
        return f"{self.hour:02d}:{self.minute:02d}"

    def format_12h(self) -> str:
        """Format as ``H:MM AM``."""
        meridiem = "PM" if self.hour >= 12 else "AM"
        display_hour = self.hour % 12 or 12
        return f"{display_hour}:{self.minute:02d} {meridiem}"

    def __str__(self) -> str:
        return self.format_24h()


class InterviewStatus(str, Enum):
    """Lifecycle status of an interview."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    @property
    def occupies_slot(self) -> bool:
        """Whether an interview in this status blocks new bookings."""
        return self in (InterviewStatus.SCHEDULED, InterviewStatus.COMPLETED)


class Granularity(str, Enum):
    """Calendar display unit."""
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


@dataclass(frozen=True)
class Interview:
    """
    An interview as held by the booking layer.

    ``scheduled_time`` keeps the raw upstream string; use ``start_time()`` to
    get the normalized value.
    """
    id: Any
    scheduled_date: Date
    scheduled_time: str
    duration_minutes: int
    status: InterviewStatus = InterviewStatus.SCHEDULED
    candidate_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "scheduled_date", as_date(self.scheduled_date))
        object.__setattr__(self, "status", InterviewStatus(self.status))

        if isinstance(self.duration_minutes, bool) or not isinstance(self.duration_minutes, int):
            raise TypeError("duration_minutes must be an int")
        if self.duration_minutes <= 0:
            raise ValueError(f"duration_minutes must be positive, got {self.duration_minutes}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Interview":
        """
        Build an interview from an upstream payload.

        Expected keys: id, scheduled_date, scheduled_time, duration_minutes,
        status; candidate_name is optional.
        """
        return cls(
            id=data.get("id"),
            scheduled_date=data["scheduled_date"],
            scheduled_time=data["scheduled_time"],
            duration_minutes=int(data["duration_minutes"]),
            status=data.get("status", InterviewStatus.SCHEDULED.value),
            candidate_name=data.get("candidate_name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the upstream payload field names."""
        data: Dict[str, Any] = {
            "id": self.id,
            "scheduled_date": self.scheduled_date.format("YYYY-MM-DD"),
            "scheduled_time": self.scheduled_time,
            "duration_minutes": self.duration_minutes,
            "status": self.status.value,
        }
        if self.candidate_name is not None:
            data["candidate_name"] = self.candidate_name
        return data

    def start_time(self) -> WallClockTime:
        """
        Parse the stored time string.

        Raises:
            TimeParseError: If the stored string is malformed
        """
        return WallClockTime.parse(self.scheduled_time)


@dataclass(frozen=True)
class OfficeWindow:
    """
    Bookable hours for one day.

    Invariant: closes_at > opens_at and granularity divides the window.
    """
    opens_at: WallClockTime
    closes_at: WallClockTime
    granularity_minutes: int

    def __post_init__(self):
        if self.closes_at <= self.opens_at:
            raise ValueError(
                f"Closing time {self.closes_at} must be after opening time {self.opens_at}"
            )
        if self.granularity_minutes <= 0:
            raise ValueError("granularity_minutes must be positive")
        if self.length_minutes() % self.granularity_minutes != 0:
            raise ValueError(
                f"Granularity of {self.granularity_minutes} minutes does not divide "
                f"the window {self.opens_at} - {self.closes_at}"
            )

    def length_minutes(self) -> int:
        return self.closes_at.minutes - self.opens_at.minutes

    def contains(self, start: WallClockTime, duration_minutes: int) -> bool:
        """Check that [start, start + duration) lies within the window."""
        return (
            start >= self.opens_at
            and start.minutes + duration_minutes <= self.closes_at.minutes
        )


@dataclass(frozen=True)
class Slot:
    """
    A bookable candidate: date, start time and duration.
    """
    date: Date
    start: WallClockTime
    duration_minutes: int

    @property
    def end(self) -> WallClockTime:
        return self.start.add_minutes(self.duration_minutes)

    def format_display(self) -> str:
        """Format: ``HH:MM - HH:MM``."""
        return f"{self.start.format_24h()} - {self.end.format_24h()}"

    def __str__(self) -> str:
        return f"{self.date.format('YYYY-MM-DD')} {self.format_display()}"


@dataclass(frozen=True)
class CalendarSelection:
    """
    The (year, month, week, day) tuple a calendar picker displays.

    ``week`` is the ISO week number of the selected date.
    """
    year: int
    month: int
    week: int
    day: int

    def to_date(self) -> Date:
        return pendulum.date(self.year, self.month, self.day)
