"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.appointment_file import FileShopDataSource
from ..config import AppConfig, StaffMember, get_default_config_path
from ..domain.closure_resolver import resolve_closure
from ..domain.exceptions import AvailabilityError
from ..domain.models import FullDayClosure, PartialClosure
from ..domain.time_arithmetic import format_time, format_time_12h, parse_date, parse_time
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="barberslots",
    help="Compute bookable appointment slots for a barbershop",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Barbershop appointment availability.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _resolve_day(day: Optional[str], config: AppConfig):
    if day:
        return parse_date(day)
    return pendulum.today(config.timezone).date()


_WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _format_working_hours(member: StaffMember) -> str:
    schedule = member.to_schedule()
    if schedule is None:
        return "Shop hours"
    segments = sorted(schedule.segments, key=lambda s: (s.day_of_week, s.start))
    return ", ".join(f"{_WEEKDAY_NAMES[s.day_of_week]} {s.window}" for s in segments)


@app.command()
def slots(
    staff: Annotated[str, typer.Option("--staff", "-s", help="Staff id or name")],
    day: Annotated[Optional[str], typer.Argument(help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    config_file: ConfigOption = None,
    appointments: Annotated[Optional[Path], typer.Option("--appointments", "-a", help="Path to appointments JSON file")] = None,
    show_all: Annotated[bool, typer.Option("--all", help="Show every slot with the reason it is unavailable.")] = False,
):
    """
    List bookable slots for a staff member on a date.

    Examples:

        barberslots slots 2024-07-10 --staff alex

        barberslots slots 2024-07-10 --staff alex --duration 60 --all
    """
    try:
        config = _load_config(config_file)
        target_day = _resolve_day(day, config)
        staff_id = config.resolve_staff_id(staff)
        service_duration = duration if duration is not None else config.business_hours.slot_duration_minutes

        service = AvailabilityService(FileShopDataSource(config, appointments))

        console.print(
            f"\n[bold cyan]{config.shop_name}[/bold cyan] · "
            f"{target_day.strftime('%A, %d.%m.%Y')} · staff [bold]{staff_id}[/bold] · "
            f"{service_duration} min\n"
        )

        if show_all:
            grid = asyncio.run(
                service.slot_grid(
                    staff_id=staff_id,
                    day=target_day,
                    service_duration_minutes=service_duration,
                )
            )
            if not grid:
                console.print("[yellow]⚠ The shop is closed on this date.[/yellow]\n")
                return

            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("Time", style="bold")
            table.add_column("Status")
            for status in grid:
                label = (
                    "[green]available[/green]" if status.available
                    else f"[dim]{status.unavailable_reason.value}[/dim]"
                )
                table.add_row(f"{format_time(status.start)} – {format_time(status.end % 1440)}", label)
            console.print(table)
            console.print()
            return

        free = asyncio.run(
            service.bookable_slots(
                staff_id=staff_id,
                day=target_day,
                service_duration_minutes=service_duration,
            )
        )

        if not free:
            console.print("[yellow]⚠ No bookable slots found.[/yellow]\n")
            return

        console.print(f"[bold green]✓ {len(free)} bookable slot(s):[/bold green]\n")
        for minute in free:
            console.print(f"  {format_time(minute)}  ({format_time_12h(minute)})")
        console.print()

    except (AvailabilityError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def closed(
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    time: Annotated[Optional[str], typer.Argument(help="Time (HH:MM). Omit to describe the whole day.")] = None,
    config_file: ConfigOption = None,
):
    """
    Check whether the shop is closed on a date or at a specific time.
    """
    try:
        config = _load_config(config_file)
        target_day = parse_date(day)

        if time is not None:
            minute = parse_time(time)
            service = AvailabilityService(FileShopDataSource(config))
            is_closed = asyncio.run(service.is_closed_at(day=target_day, minute=minute))
            if is_closed:
                console.print(f"[red]Closed[/red] on {target_day} at {format_time(minute)}")
            else:
                console.print(f"[green]Open[/green] on {target_day} at {format_time(minute)}")
            return

        hours = config.to_business_hours()
        if not hours.is_working_day(target_day):
            console.print(f"[red]Closed[/red] on {target_day} (day off)")
            return

        closure = resolve_closure(target_day, config.to_closures())
        if isinstance(closure, FullDayClosure):
            console.print(f"[red]Closed all day[/red] on {target_day}: {closure.reason}")
        elif isinstance(closure, PartialClosure):
            console.print(
                f"[yellow]Partially closed[/yellow] on {target_day} "
                f"{closure.window}: {closure.reason}"
            )
        else:
            console.print(f"[green]Open[/green] on {target_day}")

    except (AvailabilityError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def closures(
    config_file: ConfigOption = None,
):
    """
    List all configured shop closures.
    """
    try:
        config = _load_config(config_file)

        if not config.closures:
            console.print("[yellow]No shop closures configured.[/yellow]")
            return

        table = Table(
            title="Shop closures",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold yellow")
        table.add_column("Type")
        table.add_column("Reason", style="dim")

        for closure in sorted(config.to_closures(), key=lambda c: c.date):
            kind = "Full day" if closure.is_full_day else str(closure.window)
            table.add_row(closure.date.isoformat(), kind, closure.reason)

        console.print()
        console.print(table)
        console.print()

    except (AvailabilityError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def staff(
    config_file: ConfigOption = None,
):
    """
    List all configured staff members.
    """
    try:
        config = _load_config(config_file)

        if not config.staff:
            console.print("[yellow]No staff members configured.[/yellow]")
            return

        table = Table(
            title="Staff",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Id", style="bold yellow")
        table.add_column("Name", style="dim")
        table.add_column("Working hours")

        for member in config.staff:
            table.add_row(member.id, member.name, _format_working_hours(member))

        console.print()
        console.print(table)
        console.print()

    except (AvailabilityError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
