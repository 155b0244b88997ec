"""
Calendar navigation: ISO week arithmetic and safe field transitions.

All functions are pure and work on calendar dates only, so daylight saving
changes never shift a result.

Two week conventions meet here. Week *numbers* follow ISO-8601 (weeks start
on Monday, week 1 holds the year's first Thursday). The display *grid* is
Sunday-aligned, as in the month and week views. A grid row is numbered by
the ISO week of its Monday, i.e. of six of its seven days, and
``with_week(d, n)`` returns the Sunday of the row numbered ``n``.
"""

from typing import List

import pendulum
from pendulum import Date

from .models import CalendarSelection, DateLike, Granularity, as_date

LABEL_LOCALE = "en"


def _require_int(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def _require_month(month: int) -> int:
    _require_int(month, "month")
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return month


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    _require_int(year, "year")
    _require_month(month)
    return pendulum.date(year, month, 1).days_in_month


def iso_week_number(day: DateLike) -> int:
    """
    ISO-8601 week number (1..53).

    The week belongs to the year of its Thursday: shift to that Thursday and
    count sevens from the start of its year.
    """
    day = as_date(day)
    thursday = day.add(days=4 - day.isoweekday())
    return (thursday.day_of_year - 1) // 7 + 1


def iso_weeks_in_year(year: int) -> int:
    """52 or 53; December 28th always lies in the last ISO week."""
    _require_int(year, "year")
    return iso_week_number(pendulum.date(year, 12, 28))


def week_start(day: DateLike) -> Date:
    """Sunday of the display row containing the date."""
    day = as_date(day)
    return day.subtract(days=day.isoweekday() % 7)


def grid_week_number(day: DateLike) -> int:
    """ISO week number of the Sunday-aligned row containing the date."""
    return iso_week_number(week_start(day).add(days=1))


def weeks_in_month(year: int, month: int) -> List[int]:
    """
    Week numbers of every display row touching the month.

    Rows are Sunday-aligned; rows lying entirely in adjacent months are not
    included. Returned ascending and deduplicated.
    """
    first = pendulum.date(_require_int(year, "year"), _require_month(month), 1)
    last = first.add(days=first.days_in_month - 1)

    weeks = set()
    row = week_start(first)
    while row <= last:
        weeks.add(iso_week_number(row.add(days=1)))
        row = row.add(weeks=1)

    return sorted(weeks)


def with_day(day: DateLike, value: int) -> Date:
    """Same month with a new day, clamped to 1..days_in_month."""
    day = as_date(day)
    _require_int(value, "day")
    clamped = max(1, min(value, day.days_in_month))
    return pendulum.date(day.year, day.month, clamped)


def with_month(day: DateLike, month: int) -> Date:
    """
    Same day in another month of the same year.

    Example: 2024-01-31 -> February -> 2024-02-29
    """
    day = as_date(day)
    _require_month(month)
    clamped = min(day.day, days_in_month(day.year, month))
    return pendulum.date(day.year, month, clamped)


def with_year(day: DateLike, year: int) -> Date:
    """Same month and day in another year; Feb 29 clamps to Feb 28."""
    day = as_date(day)
    _require_int(year, "year")
    clamped = min(day.day, days_in_month(year, day.month))
    return pendulum.date(year, day.month, clamped)


def with_week(day: DateLike, week: int) -> Date:
    """
    Sunday starting ISO week ``week`` near the date.

    The week is taken from the date's ISO neighbourhood: in January, weeks
    52 and 53 mean the last rows of the previous year; in December, week 1
    means the row that opens the next year. Otherwise the date's own year is
    used. The number is clamped to the weeks that year actually has.

    Example: 2027-01-15, week 53 -> 2026-12-27
    """
    day = as_date(day)
    _require_int(week, "week")

    year = day.year
    if day.month == 1 and week >= 52:
        year -= 1
    elif day.month == 12 and week == 1:
        year += 1
    week = max(1, min(week, iso_weeks_in_year(year)))

    january_4th = pendulum.date(year, 1, 4)
    first_monday = january_4th.subtract(days=january_4th.isoweekday() - 1)
    monday = first_monday.add(weeks=week - 1)
    return monday.subtract(days=1)


def selection_for(day: DateLike) -> CalendarSelection:
    """Picker fields for a date; the week is the grid row's number."""
    day = as_date(day)
    return CalendarSelection(
        year=day.year,
        month=day.month,
        week=grid_week_number(day),
        day=day.day,
    )


def today(timezone: str = "local") -> Date:
    return pendulum.today(timezone).date()


def shift(granularity: Granularity, day: DateLike, steps: int = 1) -> Date:
    """
    Move a number of periods forward (or backward for negative steps).

    Months land on the first of the target month; weeks and days keep the
    weekday.
    """
    day = as_date(day)
    _require_int(steps, "steps")
    granularity = Granularity(granularity)

    if granularity is Granularity.MONTH:
        return pendulum.date(day.year, day.month, 1).add(months=steps)
    if granularity is Granularity.WEEK:
        return day.add(weeks=steps)
    return day.add(days=steps)


def previous_period(granularity: Granularity, day: DateLike) -> Date:
    return shift(granularity, day, -1)


def next_period(granularity: Granularity, day: DateLike) -> Date:
    return shift(granularity, day, 1)


def display_range(granularity: Granularity, day: DateLike) -> List[Date]:
    """
    Dates a view renders for the given focus date.

    month: full Sunday..Saturday grid covering the month
    week: Sunday..Saturday row
    day: the date itself
    """
    day = as_date(day)
    granularity = Granularity(granularity)

    if granularity is Granularity.DAY:
        return [day]

    if granularity is Granularity.WEEK:
        start = week_start(day)
        return [start.add(days=offset) for offset in range(7)]

    first = pendulum.date(day.year, day.month, 1)
    last = first.add(days=first.days_in_month - 1)
    start = week_start(first)
    end = last.add(days=6 - last.isoweekday() % 7)
    return [start.add(days=offset) for offset in range(start.diff(end).in_days() + 1)]


def period_label(granularity: Granularity, day: DateLike) -> str:
    """
    Header text for a view.

    month: "June 2025"
    week: "Jun 8 - Jun 14, 2025"
    day: "Tuesday, June 10, 2025"
    """
    day = as_date(day)
    granularity = Granularity(granularity)

    if granularity is Granularity.MONTH:
        return day.format("MMMM YYYY", locale=LABEL_LOCALE)

    if granularity is Granularity.WEEK:
        start = week_start(day)
        end = start.add(days=6)
        return (
            f"{start.format('MMM D', locale=LABEL_LOCALE)} - "
            f"{end.format('MMM D, YYYY', locale=LABEL_LOCALE)}"
        )

    return day.format("dddd, MMMM D, YYYY", locale=LABEL_LOCALE)
