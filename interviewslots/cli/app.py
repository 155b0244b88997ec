"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pendulum import Date
from rich.console import Console
from rich.table import Table

from ..adapters.json_interview_source import JsonInterviewSource
from ..config import AppConfig
from ..domain import calendar
from ..domain.availability import AvailabilityQuery, local_today
from ..domain.conflicts import ConflictDetector
from ..domain.exceptions import SchedulingError
from ..domain.models import Granularity
from ..domain.office_hours import OfficeHoursPolicy
from ..domain.status import policy_for
from ..services.booking import BookingIntent, BookingService, InMemoryBookingStore
from ..services.drafts import FeedbackDraftKeeper, JsonFileDraftStore
from ..services.schedule_view import ScheduleViewService

app = typer.Typer(
    name="interviewslots",
    help="Interview scheduling: free slots, calendar views and ISO weeks",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", help="Show debug messages.")] = False,
):
    """
    Interview scheduling: free slots, calendar views and ISO weeks.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
InterviewsOption = Annotated[
    Optional[Path],
    typer.Option("--interviews", "-i", help="JSON file with booked interviews. Defaults to bundled mock data."),
]


def _parse_date(value: Optional[str], timezone: str) -> Date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if not value:
        return calendar.today(timezone)
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Invalid date {value!r} (expected YYYY-MM-DD): {e}[/red]")
        raise typer.Exit(1)


def _build_availability(config: AppConfig) -> AvailabilityQuery:
    return AvailabilityQuery(
        policy=OfficeHoursPolicy.from_config(config.office_hours),
        detector=ConflictDetector(block_on_unparseable=config.block_on_unparseable_times),
        today=local_today(config.timezone),
    )


def _load(config_file: Optional[Path], interviews_file: Optional[Path]):
    config = AppConfig.load_or_default(config_file)
    source = JsonInterviewSource(interviews_file)
    return config, source, _build_availability(config)


@app.command()
def slots(
    date: Annotated[Optional[str], typer.Argument(help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Interview duration in minutes")] = None,
    config_file: ConfigOption = None,
    interviews_file: InterviewsOption = None,
):
    """
    List free interview slots for a day.

    Examples:

        interviewslots slots 2025-06-10
        interviewslots slots 2025-06-10 --duration 60
    """
    try:
        config, source, availability = _load(config_file, interviews_file)
        day = _parse_date(date, config.timezone)
        duration_minutes = duration if duration is not None else config.office_hours.default_duration_minutes

        free = availability.list_available_slots(day, source.interviews, duration_minutes)

        console.print()
        console.print(f"[bold cyan]{calendar.period_label(Granularity.DAY, day)}[/bold cyan]")
        console.print(f"Duration: {duration_minutes} minutes\n")

        if availability.is_past(day):
            console.print("[yellow]⚠ Past dates cannot be booked.[/yellow]\n")
            return
        if availability.policy.window_for(day) is None:
            console.print("[yellow]⚠ The office is closed on this day.[/yellow]\n")
            return
        if not free:
            console.print("[yellow]⚠ No available time slots on this day within office hours.[/yellow]\n")
            return

        console.print(f"[bold green]✓ {len(free)} available slot(s):[/bold green]\n")
        for slot in free:
            console.print(f"  {slot.format_display()}  ({slot.start.format_12h()})")
        console.print()

    except (FileNotFoundError, SchedulingError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command(name="calendar")
def show_calendar(
    view: Annotated[Granularity, typer.Option("--view", "-v", help="month, week or day")] = Granularity.MONTH,
    date: Annotated[Optional[str], typer.Option("--date", help="Focus date (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Interview duration in minutes")] = None,
    config_file: ConfigOption = None,
    interviews_file: InterviewsOption = None,
):
    """
    Show a month, week or day with interviews and availability.
    """
    try:
        config, source, availability = _load(config_file, interviews_file)
        focus = _parse_date(date, config.timezone)

        service = ScheduleViewService(interview_source=source, availability=availability)
        schedule = asyncio.run(
            service.build_view(granularity=view, focus_date=focus, duration_minutes=duration)
        )

        table = Table(title=schedule.label, show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold")
        table.add_column("Week", justify="right")
        table.add_column("Interviews")
        table.add_column("Free", justify="center")

        for cell in schedule.days:
            style = "dim" if not cell.in_focus_month or cell.is_past else None
            date_text = cell.date.format("ddd DD.MM.YYYY", locale="en")
            if cell.is_today:
                date_text = f"[blue]{date_text} (today)[/blue]"

            entries = []
            for interview in cell.interviews:
                status = policy_for(interview.status)
                name = interview.candidate_name or f"#{interview.id}"
                entries.append(f"[{status.color}]{interview.scheduled_time} {name} ({status.label})[/{status.color}]")

            if cell.available_slots:
                free_text = ", ".join(slot.start.format_24h() for slot in cell.available_slots)
            else:
                free_text = "[green]✓[/green]" if cell.has_available_slots else "[red]✗[/red]"

            table.add_row(
                date_text,
                str(calendar.grid_week_number(cell.date)),
                "\n".join(entries) or "-",
                free_text,
                style=style,
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, SchedulingError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def weeks(
    year: Annotated[int, typer.Argument(help="Year, e.g. 2025")],
    month: Annotated[int, typer.Argument(help="Month 1-12")],
):
    """
    List the week numbers shown for a month.
    """
    try:
        numbers = calendar.weeks_in_month(year, month)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    label = calendar.period_label(Granularity.MONTH, pendulum.date(year, month, 1))
    console.print(f"\n[bold cyan]{label}[/bold cyan]: weeks {', '.join(str(n) for n in numbers)}")
    console.print(f"Days in month: {calendar.days_in_month(year, month)}\n")


@app.command(name="week-number")
def week_number(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
):
    """
    Show the ISO week number of a date.
    """
    day = _parse_date(date, "local")
    console.print(
        f"\n{day.format('YYYY-MM-DD')}: ISO week [bold]{calendar.iso_week_number(day)}[/bold] "
        f"(grid row starting {calendar.week_start(day).format('YYYY-MM-DD')})\n"
    )


@app.command()
def book(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="Start time, e.g. 14:30 or 2:30 PM")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Interview duration in minutes")] = None,
    candidate: Annotated[Optional[str], typer.Option("--candidate", help="Candidate name")] = None,
    save: Annotated[bool, typer.Option("--save", help="Write the booking back to the interviews file.")] = False,
    config_file: ConfigOption = None,
    interviews_file: InterviewsOption = None,
):
    """
    Book an interview slot if it is still free.
    """
    try:
        config, source, availability = _load(config_file, interviews_file)
        day = _parse_date(date, config.timezone)

        store = InMemoryBookingStore(source.interviews, detector=availability.detector)
        service = BookingService(store=store, availability=availability)
        intent = BookingIntent.create(
            day,
            time,
            duration if duration is not None else config.office_hours.default_duration_minutes,
            candidate_name=candidate,
        )
        interview = service.book(intent)

        console.print(
            f"\n[bold green]✓ Booked[/bold green] interview #{interview.id} on "
            f"{interview.scheduled_date.format('YYYY-MM-DD')} at {intent.to_slot().format_display()}"
        )

        if save:
            source.save(store.interviews)
            console.print(f"[dim]Saved to {source.data_file}[/dim]")
        console.print()

    except (FileNotFoundError, SchedulingError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def draft(
    interview_id: Annotated[str, typer.Argument(help="Interview id")],
    clear: Annotated[bool, typer.Option("--clear", help="Delete the saved draft.")] = False,
    config_file: ConfigOption = None,
):
    """
    Show or clear a saved feedback draft.
    """
    try:
        config = AppConfig.load_or_default(config_file)
    except (FileNotFoundError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    keeper = FeedbackDraftKeeper(JsonFileDraftStore(config.resolve_drafts_path()))

    if clear:
        keeper.clear(interview_id)
        console.print(f"\n[green]✓ Draft for interview {interview_id} deleted.[/green]\n")
        return

    saved = keeper.load(interview_id)
    if saved is None:
        console.print(f"\n[yellow]No draft saved for interview {interview_id}.[/yellow]\n")
        return

    table = Table(title=f"Feedback draft #{interview_id}", show_header=False)
    table.add_column("Field", style="bold yellow")
    table.add_column("Value")
    for field_name, value in saved.model_dump().items():
        table.add_row(field_name, str(value))

    console.print()
    console.print(table)
    for problem in saved.validation_errors():
        console.print(f"[yellow]⚠ {problem}[/yellow]")
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]interviewslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
