"""
Application service composing calendar views.

The service resolves the dates a view shows, fetches the interviews for that
range through an interview source adapter and delegates availability to the
domain-level ``AvailabilityQuery``. The source is a simple protocol so the
persistence layer or a mock can be plugged in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Sequence, Tuple

from pendulum import Date

from ..domain import calendar
from ..domain.availability import AvailabilityQuery
from ..domain.exceptions import TimeParseError
from ..domain.models import DateLike, Granularity, Interview, Slot, as_date


class InterviewSourceProtocol(Protocol):
    """Protocol describing the interview source behaviour needed by the service."""

    async def list_interviews(self, start_date: Date, end_date: Date) -> List[Interview]:
        """Return interviews scheduled between the dates (inclusive)."""


@dataclass
class DayCell:
    """Everything a view renders for one date."""
    date: Date
    in_focus_month: bool
    is_today: bool
    is_past: bool
    interviews: List[Interview]
    has_available_slots: bool
    available_slots: List[Slot] = field(default_factory=list)

    @property
    def interview_count(self) -> int:
        return len(self.interviews)


@dataclass
class ScheduleView:
    """A rendered period: header label plus one cell per displayed date."""
    granularity: Granularity
    focus_date: Date
    label: str
    days: List[DayCell]

    def day(self, value: DateLike) -> DayCell:
        value = as_date(value)
        for cell in self.days:
            if cell.date == value:
                return cell
        raise KeyError(f"{value} is not part of this view")


class ScheduleViewService:
    """
    Orchestrates interview retrieval, navigation and availability.
    """

    def __init__(
        self,
        interview_source: InterviewSourceProtocol,
        availability: AvailabilityQuery,
    ) -> None:
        self._interview_source = interview_source
        self._availability = availability

    async def build_view(
        self,
        *,
        granularity: Granularity,
        focus_date: DateLike,
        duration_minutes: int | None = None,
    ) -> ScheduleView:
        """
        Fetch interviews for the displayed range and compose the view.
        """
        focus_date = as_date(focus_date)
        dates = calendar.display_range(granularity, focus_date)

        interviews = await self._interview_source.list_interviews(dates[0], dates[-1])

        return self.compose(
            granularity=granularity,
            focus_date=focus_date,
            interviews=interviews,
            duration_minutes=duration_minutes,
        )

    def compose(
        self,
        *,
        granularity: Granularity,
        focus_date: DateLike,
        interviews: Sequence[Interview],
        duration_minutes: int | None = None,
    ) -> ScheduleView:
        """Build the view from interviews already held by the caller."""
        granularity = Granularity(granularity)
        focus_date = as_date(focus_date)
        today = self._availability.today()
        by_date = self._group_by_date(interviews)

        cells: List[DayCell] = []
        for day in calendar.display_range(granularity, focus_date):
            day_interviews = by_date.get(day, [])
            slots: List[Slot] = []

            if granularity is Granularity.DAY:
                slots = self._availability.list_available_slots(day, day_interviews, duration_minutes)
                has_slots = bool(slots)
            else:
                has_slots = self._availability.has_available_slots(day, day_interviews, duration_minutes)

            cells.append(
                DayCell(
                    date=day,
                    in_focus_month=day.month == focus_date.month,
                    is_today=day == today,
                    is_past=day < today,
                    interviews=day_interviews,
                    has_available_slots=has_slots,
                    available_slots=slots,
                )
            )

        return ScheduleView(
            granularity=granularity,
            focus_date=focus_date,
            label=calendar.period_label(granularity, focus_date),
            days=cells,
        )

    @staticmethod
    def _group_by_date(interviews: Sequence[Interview]) -> Dict[Date, List[Interview]]:
        """
        Group interviews per date, each list in time order.

        Interviews with an unparseable time sort last instead of failing the
        whole view.
        """
        grouped: Dict[Date, List[Interview]] = {}
        for interview in interviews:
            grouped.setdefault(interview.scheduled_date, []).append(interview)

        for day_interviews in grouped.values():
            day_interviews.sort(key=_time_sort_key)

        return grouped


def _time_sort_key(interview: Interview) -> Tuple[int, int]:
    try:
        return (0, interview.start_time().minutes)
    except TimeParseError:
        return (1, 0)
