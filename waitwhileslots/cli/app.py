"""
Main CLI application using Typer.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import WaitwhileError
from ..domain.models import HoursKind, Weekday, ms_to_minutes
from ..adapters.api_key_store import ApiKeyStore
from ..adapters.cached_provider import CachedScheduleProvider
from ..adapters.mock_waitwhile_client import MockWaitwhileClient
from ..adapters.payloads import BookingRequest, GuestRequest, with_country_code
from ..adapters.waitwhile_client import WaitwhileClient, parse_bookings
from ..services.schedule_service import ScheduleService

app = typer.Typer(
    name="waitwhileslots",
    help="Show Waitwhile opening hours and booking slots, and add guests to the queue",
    add_completion=False
)

console = Console()

WEEKDAY_NAMES = {
    Weekday.MON: "Monday",
    Weekday.TUE: "Tuesday",
    Weekday.WED: "Wednesday",
    Weekday.THU: "Thursday",
    Weekday.FRI: "Friday",
    Weekday.SAT: "Saturday",
    Weekday.SUN: "Sunday",
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled sample data instead of the Waitwhile API.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Waitwhile opening hours and booking slots.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    """Load the config; mock mode works without a config file."""
    config_path = config_file or get_default_config_path()

    if mock and not config_path.exists():
        return AppConfig(waitlist_id="mock-waitlist")

    return AppConfig.load_from_yaml(config_path)


def _create_client(config: AppConfig, mock: bool):
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using sample data[/yellow]\n")
        return MockWaitwhileClient(
            booking_length_minutes=config.booking_length_minutes,
            timezone=config.timezone
        )

    api_key = ApiKeyStore(config.waitlist_id).resolve(config.api_key)
    return WaitwhileClient(
        api_key=api_key,
        waitlist_id=config.waitlist_id,
        base_url=config.base_url,
        booking_length_minutes=config.booking_length_minutes,
        timeout=config.request_timeout_seconds
    )


def _create_provider(config: AppConfig, mock: bool) -> CachedScheduleProvider:
    return CachedScheduleProvider(
        _create_client(config, mock),
        ttl_seconds=config.cache_ttl_seconds
    )


def _create_service(config: AppConfig, provider: CachedScheduleProvider) -> ScheduleService:
    return ScheduleService(provider=provider, timezone=config.timezone)


def _parse_date(value: Optional[str], tz: str) -> date:
    """Parse a YYYY-MM-DD option, defaulting to today."""
    if not value:
        return pendulum.today(tz).date()

    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _format_periods(periods) -> str:
    return ", ".join(f"{p['from']} - {p['to']}" for p in periods) or "-"


@app.command()
def hours(
    kind: Annotated[HoursKind, typer.Option("--kind", "-k", help="Which schedule to show.")] = HoursKind.BUSINESS,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the weekly opening hours.
    """
    try:
        config = _load_config(config_file, mock)
        service = _create_service(config, _create_provider(config, mock))
        weekly = service.get_weekly_display(kind)
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    table = Table(
        title=f"{kind.value.capitalize()} hours",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Open")
    table.add_column("Hours")

    for index, day in weekly:
        table.add_row(
            WEEKDAY_NAMES[Weekday(index)],
            "yes" if day["isOpen"] else "no",
            _format_periods(day["periods"]) if day["isOpen"] else "closed"
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def week(
    kind: Annotated[HoursKind, typer.Option("--kind", "-k", help="Which schedule to show.")] = HoursKind.BUSINESS,
    on: Annotated[Optional[str], typer.Option("--date", help="Any date in the week to show (YYYY-MM-DD)")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the hours for each date of a week, special hours included.
    """
    try:
        config = _load_config(config_file, mock)
        today = _parse_date(on, config.timezone)
        service = _create_service(config, _create_provider(config, mock))
        absolute = service.get_absolute_hours(kind, today=today)

        rows = []
        for key, schedule in absolute.items():
            # Override keys come from the API as YYYYMMDD
            day = pendulum.date(key // 10000, key // 100 % 100, key % 100)
            rows.append((day, schedule))
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    table = Table(
        title=f"{kind.value.capitalize()} hours by date",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Day")
    table.add_column("Hours")

    for day, schedule in rows:
        display = schedule.to_display()
        table.add_row(
            day.format("DD.MM.YYYY"),
            WEEKDAY_NAMES[Weekday.for_date(day)],
            _format_periods(display["periods"]) if schedule.is_open else "closed"
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    on: Annotated[Optional[str], typer.Argument(help="Date to plan (YYYY-MM-DD). Defaults to today.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    only_available: Annotated[bool, typer.Option("--available", "-a", help="Hide taken slots.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the slots as JSON.")] = False,
):
    """
    List the booking slots of a day.

    Examples:

        waitwhileslots slots
        waitwhileslots slots 2024-11-25 --available
        waitwhileslots slots --mock --json
    """
    try:
        config = _load_config(config_file, mock)
        day = _parse_date(on, config.timezone)
        service = _create_service(config, _create_provider(config, mock))
        plan = service.get_booking_slots_for_date(day)
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    shown = plan.available_slots if only_available else list(plan.slots)

    if as_json:
        console.print_json(json.dumps({
            "date": day.isoformat(),
            "isOpen": plan.is_open,
            "slots": [slot.to_dict() for slot in shown],
        }))
        return

    date_str = pendulum.date(day.year, day.month, day.day).format("DD.MM.YYYY")

    if not plan.is_open:
        console.print(f"\n[yellow]Closed on {date_str}.[/yellow]\n")
        return

    if not shown:
        console.print(f"\n[yellow]⚠ No bookable slots left on {date_str}.[/yellow]\n")
        return

    console.print(
        f"\n[bold green]✓ {len(plan.available_slots)} of {len(plan.slots)} "
        f"{ms_to_minutes(shown[0].duration_ms)}-minute slot(s) "
        f"available on {date_str}:[/bold green]\n"
    )
    for slot in shown:
        status = "[green]available[/green]" if slot.available else "[red]taken[/red]"
        console.print(f"  {slot.start_label}  {status}")
    console.print()


@app.command()
def join(
    name: Annotated[str, typer.Option("--name", "-n", help="Guest name")],
    phone: Annotated[Optional[str], typer.Option("--phone", help="Phone number")] = None,
    email: Annotated[Optional[str], typer.Option("--email", help="E-mail address")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Notes for the staff")] = None,
    birthdate: Annotated[Optional[str], typer.Option("--birthdate", help="Birthdate")] = None,
    country_code: Annotated[Optional[str], typer.Option("--country-code", help="Prefix for phone numbers without +")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Add a guest to the waitlist queue.
    """
    try:
        config = _load_config(config_file, mock)
        provider = _create_provider(config, mock)
        guest = GuestRequest(
            name=name,
            email=email,
            phone=with_country_code(phone, country_code or config.default_country_code),
            notes=notes,
            birthdate=birthdate
        )
        response = provider.create_waiting_guest(guest)
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    console.print(f"\n[bold green]✓ {name} joined the queue[/bold green] (id: {response.get('_id', 'n/a')})\n")


@app.command()
def book(
    on: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    at: Annotated[str, typer.Argument(help="Slot start (HH:MM)")],
    name: Annotated[str, typer.Option("--name", "-n", help="Guest name")],
    phone: Annotated[Optional[str], typer.Option("--phone", help="Phone number")] = None,
    email: Annotated[Optional[str], typer.Option("--email", help="E-mail address")] = None,
    country_code: Annotated[Optional[str], typer.Option("--country-code", help="Prefix for phone numbers without +")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Book a guest into a free slot.
    """
    try:
        config = _load_config(config_file, mock)
        day = _parse_date(on, config.timezone)
        provider = _create_provider(config, mock)
        plan = _create_service(config, provider).get_booking_slots_for_date(day)

        slot = next((s for s in plan.slots if s.start_label == at), None)
        if slot is None or not slot.available:
            console.print(f"[bold red]Error:[/bold red] {at} on {on} is not an available slot.")
            raise typer.Exit(1)

        booking = BookingRequest(
            name=name,
            email=email,
            phone=with_country_code(phone, country_code or config.default_country_code),
            time=slot.start_epoch_ms,
            duration=slot.duration_ms // 1000
        )
        response = provider.create_booking(booking)
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Booked {name} on {on} at {at}[/bold green] (id: {response.get('_id', 'n/a')})\n")


@app.command()
def status(
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the queue, upcoming bookings and resources of the waitlist.
    """
    try:
        config = _load_config(config_file, mock)
        provider = _create_provider(config, mock)
        waitlist = provider.get_waitlist()
        queue_state = provider.get_waitlist_status()
        waiting = provider.get_waiting_guests()
        bookings = parse_bookings(provider.get_bookings())
        resources = provider.get_resources()
        now_ms = int(pendulum.now(config.timezone).timestamp() * 1000)
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    upcoming = sorted(b.time_ms for b in bookings if b.time_ms >= now_ms)
    next_booking = (
        pendulum.from_timestamp(upcoming[0] / 1000, tz=config.timezone).format("DD.MM.YYYY HH:mm")
        if upcoming else "-"
    )

    console.print(Panel.fit(
        f"[bold]Waitlist:[/bold] {waitlist.get('name', 'N/A')}\n"
        f"[bold]ID:[/bold] {waitlist.get('id', config.waitlist_id)}\n"
        f"[bold]Open:[/bold] {'yes' if queue_state.get('isOpen') else 'no'}\n"
        f"[bold]Waiting guests:[/bold] {len(waiting)}\n"
        f"[bold]Upcoming bookings:[/bold] {len(upcoming)} (next: {next_booking})\n"
        f"[bold]Resources:[/bold] {len(resources)}",
        title="Waitlist status"
    ))

    if waiting:
        table = Table(title="Waiting guests", show_header=True, header_style="bold cyan")
        table.add_column("#", style="bold yellow")
        table.add_column("Name")
        table.add_column("Phone")
        for position, guest in enumerate(waiting, start=1):
            table.add_row(str(position), guest.get("name", "-"), guest.get("phone", "-"))
        console.print(table)

    console.print()


@app.command()
def waitlists(
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List the waitlists the API key can see.
    """
    try:
        config = _load_config(config_file, mock)
        entries = _create_provider(config, mock).get_all_waitlists()
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    table = Table(title="Waitlists", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Configured")

    for entry in entries:
        entry_id = entry.get("id", entry.get("_id", "-"))
        table.add_row(
            str(entry_id),
            entry.get("name", "-"),
            "✓" if entry_id == config.waitlist_id else ""
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def test_connection(
    config_file: ConfigOption = None,
):
    """
    Test the Waitwhile API key.
    """
    try:
        config = _load_config(config_file, mock=False)
        client = _create_client(config, mock=False)
        waitlist = client.test_connection()
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ Connection successful![/bold green]\n\n"
        f"[bold]Waitlist:[/bold] {waitlist.get('name', 'N/A')}\n"
        f"[bold]ID:[/bold] {waitlist.get('id', config.waitlist_id)}",
        title="✓ Connection test"
    ))
    console.print()


@app.command()
def set_api_key(
    api_key: Annotated[str, typer.Option(prompt=True, hide_input=True, help="Waitwhile API key")],
    config_file: ConfigOption = None,
):
    """
    Store the API key in the system keyring.
    """
    try:
        config = _load_config(config_file, mock=False)
        ApiKeyStore(config.waitlist_id).save(api_key)
    except (FileNotFoundError, ValueError, WaitwhileError) as e:
        _fail(e)

    console.print("\n[green]✓ API key stored in keyring.[/green]\n")


@app.command()
def clear_api_key(
    config_file: ConfigOption = None,
):
    """
    Remove the stored API key from the keyring.
    """
    try:
        config = _load_config(config_file, mock=False)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    ApiKeyStore(config.waitlist_id).clear()
    console.print("\n[green]✓ API key removed.[/green]\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]waitwhileslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
