"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.yaml_schedule_source import YamlScheduleSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingRejectedError, SalonSlotsError
from ..domain.models import DAY_NAMES, day_of_week_for, format_intervals
from ..services.availability_service import BookingAvailabilityService

app = typer.Typer(
    name="salonslots",
    help="Find bookable appointment times for a hair salon",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./salon.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _parse_date(value: Optional[str], tz: str):
    """Parse a YYYY-MM-DD option, defaulting to today in the salon's timezone."""
    if not value:
        return pendulum.today(tz).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Error parsing date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _build_service(config: AppConfig) -> BookingAvailabilityService:
    return BookingAvailabilityService(
        schedule_source=YamlScheduleSource(config),
        default_step_minutes=config.salon.slot_step_minutes,
        timezone=config.salon.timezone,
    )


def _stylist_names(config: AppConfig, stylist_ids) -> str:
    names = []
    for stylist_id in stylist_ids:
        stylist = config.find_stylist(stylist_id)
        names.append(stylist.name if stylist else stylist_id)
    return ", ".join(names)


@app.command()
def slots(
    service_id: Annotated[str, typer.Argument(help="Service id as configured in salon.yaml")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD), defaults to today")] = None,
    stylist: Annotated[Optional[str], typer.Option("--stylist", "-s", help="Stylist id or name; omit for no preference")] = None,
    step: Annotated[Optional[int], typer.Option("--step", help="Slot step in minutes, defaults to the salon setting")] = None,
    include_past: Annotated[bool, typer.Option("--include-past", help="Keep start times that have already passed.")] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List bookable start times for a service on a day.

    Examples:

        salonslots slots cut-women --date 2025-03-14

        salonslots slots colour --stylist anna --step 30
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.salon.timezone
        day = _parse_date(date, tz)

        service = _build_service(config)
        found = asyncio.run(
            service.find_slots(
                day=day,
                service_id=service_id,
                stylist_id=stylist,
                now=None if include_past else pendulum.now(tz),
                step_minutes=step,
            )
        )

        console.print()
        if not found:
            console.print(f"[yellow]⚠ No available times on {day.isoformat()} ({DAY_NAMES[day_of_week_for(day)]}).[/yellow]\n")
            return

        table = Table(
            title=f"{config.salon.name} – {day.isoformat()}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Time", style="bold yellow")
        table.add_column("Stylists", style="dim")

        for slot in found:
            table.add_row(slot.format_display(), _stylist_names(config, slot.stylist_ids))

        console.print(table)
        console.print(f"\n[bold green]✓ {len(found)} available time(s)[/bold green]\n")

    except (FileNotFoundError, ValueError, ValidationError, SalonSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def check(
    service_id: Annotated[str, typer.Argument(help="Service id as configured in salon.yaml")],
    start: Annotated[str, typer.Argument(help="Requested start time (HH:mm)")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD), defaults to today")] = None,
    stylist: Annotated[Optional[str], typer.Option("--stylist", "-s", help="Stylist id or name; omit for no preference")] = None,
    step: Annotated[Optional[int], typer.Option("--step", help="Slot step in minutes, defaults to the salon setting")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a start time can be booked.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.salon.timezone
        day = _parse_date(date, tz)

        service = _build_service(config)
        slot = asyncio.run(
            service.validate_booking(
                day=day,
                start=start,
                service_id=service_id,
                stylist_id=stylist,
                now=pendulum.now(tz),
                step_minutes=step,
            )
        )

        console.print(Panel.fit(
            f"[bold green]✓ {slot.format_display()} is available[/bold green]\n\n"
            f"[bold]Stylists:[/bold] {_stylist_names(config, slot.stylist_ids) or 'N/A'}",
            title=day.isoformat()
        ))

    except BookingRejectedError as e:
        console.print(f"[bold red]✗ Not bookable:[/bold red] {e}")
        raise typer.Exit(1)

    except (FileNotFoundError, ValueError, ValidationError, SalonSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hours(config_file: ConfigOption = None):
    """
    Show the salon's weekly opening hours.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(
        title=f"Opening hours – {config.salon.name}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Hours")

    # Monday first for display; numbering stays Sunday-first
    for day_of_week in (1, 2, 3, 4, 5, 6, 0):
        day = config.salon.hours_for(day_of_week)
        hours_str = format_intervals(day.open_intervals) or "[dim]closed[/dim]"
        table.add_row(DAY_NAMES[day_of_week], hours_str)

    console.print()
    console.print(table)
    console.print()


@app.command()
def stylists(config_file: ConfigOption = None):
    """
    List all configured stylists.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.stylists:
        console.print("[yellow]No stylists defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured stylists",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Active", style="dim")
    table.add_column("Own schedule", style="dim")

    for stylist in YamlScheduleSource(config).list_stylists():
        own_days = ", ".join(DAY_NAMES[day.day_of_week][:3] for day in stylist.schedule) or "salon hours"
        table.add_row(stylist.id, stylist.name, "yes" if stylist.is_active else "no", own_days)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
