"""
Office hours policy: which hours of which days can be booked.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from pendulum import Date

from .models import DateLike, OfficeWindow, WallClockTime, as_date

DEFAULT_DURATION_OPTIONS: Tuple[int, ...] = (15, 30, 45, 60, 90)


@dataclass(frozen=True)
class OfficeHoursPolicy:
    """
    Configuration for bookable office hours.

    The default window applies to every ISO weekday (1=Monday, 7=Sunday)
    unless the weekday is closed or carries its own override. Durations are
    chosen at booking time from ``duration_options``.
    """
    opens_at: WallClockTime = WallClockTime.of(8)
    closes_at: WallClockTime = WallClockTime.of(18)
    granularity_minutes: int = 30
    duration_options: Tuple[int, ...] = DEFAULT_DURATION_OPTIONS
    default_duration_minutes: int = 30
    closed_weekdays: FrozenSet[int] = frozenset()
    weekday_overrides: Mapping[int, Tuple[WallClockTime, WallClockTime]] = field(
        default_factory=dict, hash=False
    )
    closed_dates: FrozenSet[Date] = frozenset()

    def __post_init__(self):
        if not self.duration_options:
            raise ValueError("duration_options must not be empty")
        if any(d <= 0 for d in self.duration_options):
            raise ValueError(f"duration_options must be positive, got {self.duration_options}")
        object.__setattr__(self, "duration_options", tuple(sorted(set(self.duration_options))))
        if self.default_duration_minutes not in self.duration_options:
            raise ValueError(
                f"default_duration_minutes={self.default_duration_minutes} "
                f"is not one of {self.duration_options}"
            )
        object.__setattr__(self, "closed_weekdays", frozenset(self.closed_weekdays))
        object.__setattr__(self, "weekday_overrides", MappingProxyType(dict(self.weekday_overrides)))
        object.__setattr__(self, "closed_dates", frozenset(as_date(d) for d in self.closed_dates))

        # Validates every configured window up front
        OfficeWindow(self.opens_at, self.closes_at, self.granularity_minutes)
        for opens_at, closes_at in self.weekday_overrides.values():
            OfficeWindow(opens_at, closes_at, self.granularity_minutes)

    @classmethod
    def from_config(cls, office_hours) -> "OfficeHoursPolicy":
        """Build a policy from an ``OfficeHoursConfig``."""
        return cls(
            opens_at=WallClockTime.parse(office_hours.opens_at),
            closes_at=WallClockTime.parse(office_hours.closes_at),
            granularity_minutes=office_hours.granularity_minutes,
            duration_options=tuple(office_hours.duration_options),
            default_duration_minutes=office_hours.default_duration_minutes,
            closed_weekdays=frozenset(office_hours.closed_weekdays),
            weekday_overrides={
                weekday: (WallClockTime.parse(hours.opens_at), WallClockTime.parse(hours.closes_at))
                for weekday, hours in office_hours.weekday_overrides.items()
            },
            closed_dates=frozenset(office_hours.closed_dates),
        )

    @property
    def minimum_duration_minutes(self) -> int:
        """Shortest bookable duration."""
        return self.duration_options[0]

    def is_duration_allowed(self, duration_minutes: int) -> bool:
        return duration_minutes in self.duration_options

    def is_open_on(self, day: DateLike) -> bool:
        """Check if the given date has any bookable hours."""
        return self.window_for(day) is not None

    def window_for(self, day: DateLike) -> Optional[OfficeWindow]:
        """
        Get the bookable window for a specific date.
        Returns None if the office is closed that day.
        """
        day = as_date(day)

        if day in self.closed_dates:
            return None

        weekday = day.isoweekday()
        if weekday in self.closed_weekdays:
            return None

        opens_at, closes_at = self.weekday_overrides.get(
            weekday, (self.opens_at, self.closes_at)
        )
        return OfficeWindow(
            opens_at=opens_at,
            closes_at=closes_at,
            granularity_minutes=self.granularity_minutes,
        )


DEFAULT_POLICY = OfficeHoursPolicy()
