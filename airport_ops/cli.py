"""
Airport operations command line interface.

Uses Typer for commands and Rich for terminal output. Each command loads the
persisted dataset, runs one facade operation, renders the result and saves
again when the command changed anything.

Usage:
    airport-ops flights --origin LAX
    airport-ops book RIA101 --first Ada --last Lovelace --class business
    airport-ops delay RIA101 45 --username flight_mgr --password flight123
"""

import asyncio
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .errors import AirportOpsError
from .models.aircraft import AircraftModel
from .models.enums import AircraftStatus, SeatClass
from .models.flight import FlightModel
from .models.passenger import BookingModel, PassengerModel
from .services.data_manager import DataManager
from .utils.config import configure_logging, get_config
from .utils.helpers import format_currency, format_duration

app = typer.Typer(
    help="Airport operations: flights, bookings, simulation and admin controls",
    add_completion=False,
)
console = Console()

STATUS_STYLES = {
    "On Time": "green",
    "Boarding": "cyan",
    "Departed": "blue",
    "Arrived": "dim",
    "Cancelled": "red",
}


@contextmanager
def _operation() -> Iterator[None]:
    """Render domain failures as a red message and exit non-zero."""
    try:
        yield
    except (AirportOpsError, ValueError) as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.callback()
def startup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging once for every command."""
    with _operation():
        config = get_config()
    if verbose:
        config = config.model_copy(update={"debug": True})
    configure_logging(config)


def _open_manager() -> DataManager:
    with _operation():
        return asyncio.run(DataManager.create(get_config()))


def _save(manager: DataManager) -> None:
    with _operation():
        asyncio.run(manager.save_all_data())


def _status_text(display: str) -> str:
    style = "yellow" if display.startswith("Delayed") else STATUS_STYLES.get(display, "white")
    return f"[{style}]{display}[/{style}]"


def _flights_table(flights: List[FlightModel], title: str = "Flights") -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Flight", style="cyan bold")
    table.add_column("Route", style="white")
    table.add_column("Departure (UTC)", style="white")
    table.add_column("Duration", style="dim")
    table.add_column("Gate", style="white")
    table.add_column("Status")
    table.add_column("Seats E/B/F", justify="right")

    for flight in flights:
        seats = flight.seat_availability
        table.add_row(
            flight.flight_number,
            f"{flight.origin} → {flight.destination}",
            f"{flight.departure_time:%Y-%m-%d %H:%M}",
            format_duration(flight.duration()),
            flight.gate or "-",
            _status_text(flight.status_display()),
            f"{seats.economy}/{seats.business}/{seats.first_class}",
        )
    return table


def _aircraft_table(aircraft: List[AircraftModel]) -> Table:
    table = Table(title="Fleet", box=box.ROUNDED)
    table.add_column("Registration", style="cyan bold")
    table.add_column("Model", style="white")
    table.add_column("Age", justify="right")
    table.add_column("Seats", justify="right")
    table.add_column("Flight Hours", justify="right")
    table.add_column("Status")

    for plane in aircraft:
        table.add_row(
            plane.registration,
            plane.model,
            f"{plane.age()}y",
            str(plane.total_capacity),
            f"{plane.flight_hours:.1f}",
            plane.status_display(),
        )
    return table


def _booking_panel(booking: BookingModel, flight: Optional[FlightModel]) -> Panel:
    lines = [
        f"[cyan]Ticket:[/cyan] {booking.ticket_number}",
        f"[cyan]Passenger:[/cyan] {booking.passenger.full_name()}"
        + (f" (passport {booking.passenger.passport_number})" if booking.passenger.passport_number else ""),
        f"[cyan]Flight:[/cyan] {flight if flight else booking.flight_id}",
        f"[cyan]Class:[/cyan] {booking.seat_class.value}",
        f"[cyan]Seat:[/cyan] "
        + (
            f"{booking.seat_assignment.seat_number} ({booking.seat_assignment.seat_type()})"
            if booking.seat_assignment
            else "Not assigned"
        ),
        f"[cyan]Status:[/cyan] {booking.status_display()}",
        f"[cyan]Bags:[/cyan] {booking.baggage_count}",
        f"[cyan]Services:[/cyan] {', '.join(booking.special_services) or 'None'}",
        f"[cyan]Paid:[/cyan] {format_currency(booking.payment.total_amount, booking.payment.currency)}"
        f" ({booking.payment.payment_method})",
    ]
    return Panel("\n".join(lines), title="Booking", border_style="cyan", box=box.ROUNDED)


def _login(manager: DataManager, username: str, password: str) -> None:
    user = manager.authenticate(username, password)
    console.print(f"[dim]Authenticated as {user.username} ({user.level_display()})[/dim]")


def _find_booking_flight(manager: DataManager, booking: BookingModel) -> Optional[FlightModel]:
    try:
        return manager.get_flight(booking.flight_id)
    except AirportOpsError:
        return None


@app.command()
def flights(
    origin: Optional[str] = typer.Option(None, "--origin", "-o", help="Origin airport code"),
    destination: Optional[str] = typer.Option(None, "--destination", "-d", help="Destination airport code"),
    departure_date: Optional[datetime] = typer.Option(
        None, "--date", formats=["%Y-%m-%d"], help="Departure date (UTC), e.g. 2026-03-02"
    ),
    available: bool = typer.Option(False, "--available", "-a", help="Only flights open for booking"),
):
    """List flights, optionally filtered by route and departure date."""
    manager = _open_manager()
    results = manager.search_flights(
        origin=origin,
        destination=destination,
        departure_date=departure_date.date() if departure_date else None,
    )
    if available:
        bookable = {flight.id for flight in manager.get_available_flights()}
        results = [flight for flight in results if flight.id in bookable]

    if not results:
        console.print("[yellow]No flights match.[/yellow]")
        return
    console.print(_flights_table(results))


@app.command()
def flight(flight_number: str = typer.Argument(..., help="Flight number, e.g. RIA101")):
    """Show one flight with its current fares."""
    manager = _open_manager()
    with _operation():
        found = manager.find_flight(flight_number)
        plane = manager.get_aircraft_for_flight(found.id)

        table = Table(title=f"{found.flight_number} fares", box=box.ROUNDED)
        table.add_column("Class", style="cyan")
        table.add_column("Available", justify="right")
        table.add_column("Price", justify="right", style="green")
        table.add_column("Baggage", justify="right")
        for seat_class in SeatClass:
            table.add_row(
                seat_class.value,
                str(found.get_available_seats(seat_class)),
                format_currency(manager.price_quote(found.id, seat_class)),
                f"{found.baggage_allowance[seat_class]} kg",
            )

    console.print(Panel(
        f"[bold]{found.airline}[/bold]\n"
        f"{found.origin} → {found.destination} | Gate {found.gate or '-'}\n"
        f"Departs {found.departure_time:%Y-%m-%d %H:%M} UTC | Arrives {found.arrival_time:%Y-%m-%d %H:%M} UTC\n"
        f"Status: {_status_text(found.status_display())}\n"
        f"Aircraft: {plane.registration} | {plane.detailed_specs()}",
        title=found.flight_number,
        border_style="cyan",
    ))
    console.print(table)


@app.command()
def airports():
    """List airports."""
    manager = _open_manager()
    table = Table(title="Airports", box=box.ROUNDED)
    table.add_column("Code", style="cyan bold")
    table.add_column("Name", style="white")
    table.add_column("City", style="white")
    table.add_column("Size", style="white")
    table.add_column("Infrastructure", style="dim")
    for airport in manager.get_airports():
        table.add_row(
            f"{airport.code}/{airport.icao_code}",
            airport.name,
            f"{airport.city}, {airport.country}",
            airport.size_display(),
            airport.terminal_info(),
        )
    console.print(table)


@app.command("airport")
def show_airport(
    code: str = typer.Argument(..., help="IATA airport code, e.g. LAX"),
    runway: Optional[int] = typer.Option(
        None, "--runway", help="Check for an active runway at least this many meters long"
    ),
):
    """Show an airport with its departures and arrivals."""
    manager = _open_manager()
    with _operation():
        found = manager.get_airport(code)
    start, end = found.operating_hours

    console.print(Panel(
        f"[bold]{found.name}[/bold] ({found.code}/{found.icao_code})\n"
        f"{found.city}, {found.country} | {found.size_display()}\n"
        f"{found.terminal_info()} | Open {start:02d}:00-{end:02d}:00",
        title=found.code,
        border_style="cyan",
    ))
    if runway is not None:
        if found.can_handle_aircraft(runway):
            console.print(f"[green]✓ Has an active runway of at least {runway} m[/green]")
        else:
            console.print(f"[red]✗ No active runway of at least {runway} m[/red]")

    for title, listed in (
        (f"Departures from {found.code}", manager.get_departures(found.code)),
        (f"Arrivals at {found.code}", manager.get_arrivals(found.code)),
    ):
        if listed:
            console.print(_flights_table(listed, title=title))
        else:
            console.print(f"[dim]{title}: none[/dim]")


@app.command()
def aircraft(
    available: bool = typer.Option(False, "--available", "-a", help="Only aircraft free for a flight"),
):
    """List the fleet."""
    manager = _open_manager()
    fleet = manager.get_available_aircraft() if available else manager.get_aircraft()
    console.print(_aircraft_table(fleet))


@app.command()
def book(
    flight_number: str = typer.Argument(..., help="Flight number"),
    first_name: str = typer.Option(..., "--first", help="Passenger first name"),
    last_name: str = typer.Option(..., "--last", help="Passenger last name"),
    email: str = typer.Option("", "--email", help="Passenger email"),
    passport: Optional[str] = typer.Option(None, "--passport", help="Passport number"),
    seat_class: SeatClass = typer.Option(SeatClass.ECONOMY, "--class", "-c", help="Seat class"),
    extra_bags: int = typer.Option(0, "--bags", min=0, help="Checked bags beyond the included one"),
    services: Optional[List[str]] = typer.Option(
        None, "--service", help="Special service, e.g. Wheelchair (repeatable)"
    ),
):
    """Book a seat on a flight."""
    manager = _open_manager()
    with _operation():
        target = manager.find_flight(flight_number)
        passenger = PassengerModel(first_name=first_name, last_name=last_name, email=email)
        if passport:
            passenger.set_passport(passport)
        booking = manager.create_booking(target.id, passenger, seat_class)
        if extra_bags:
            manager.add_baggage(booking.ticket_number, extra_bags)
        for service in services or []:
            manager.add_special_service(booking.ticket_number, service)
    _save(manager)
    console.print(f"[green]✓ Booked {booking.ticket_number}[/green]")
    console.print(_booking_panel(booking, target))


@app.command()
def cancel(ticket_number: str = typer.Argument(..., help="Ticket number")):
    """Cancel a booking and release its seat."""
    manager = _open_manager()
    with _operation():
        booking = manager.cancel_booking(ticket_number)
    _save(manager)
    console.print(f"[green]✓ Booking {booking.ticket_number} cancelled[/green]")


@app.command("check-in")
def check_in(
    ticket_number: str = typer.Argument(..., help="Ticket number"),
    seat: Optional[str] = typer.Option(None, "--seat", help="Seat to assign, e.g. 14A"),
):
    """Check a passenger in."""
    manager = _open_manager()
    with _operation():
        if seat:
            manager.assign_seat(ticket_number, seat)
        booking = manager.check_in(ticket_number)
    _save(manager)
    console.print(f"[green]✓ {booking.passenger.full_name()} checked in[/green]")


@app.command()
def board(ticket_number: str = typer.Argument(..., help="Ticket number")):
    """Board a checked-in passenger."""
    manager = _open_manager()
    with _operation():
        booking = manager.board(ticket_number)
    _save(manager)
    console.print(f"[green]✓ {booking.passenger.full_name()} boarded[/green]")


@app.command("booking")
def show_booking(ticket_number: str = typer.Argument(..., help="Ticket number")):
    """Show a booking."""
    manager = _open_manager()
    with _operation():
        booking = manager.find_booking(ticket_number)
    console.print(_booking_panel(booking, _find_booking_flight(manager, booking)))


@app.command()
def simulate():
    """Advance flight and aircraft status to the current time."""
    manager = _open_manager()
    result = asyncio.run(manager.update_simulation())
    if not result.changed:
        console.print("[dim]No status changes[/dim]")
        return

    _save(manager)
    for change in result.flight_changes + result.aircraft_changes:
        console.print(f"  • {change}")
    console.print(
        f"[green]✓ {len(result.flight_changes)} flight(s) and "
        f"{len(result.aircraft_changes)} aircraft updated[/green]"
    )


@app.command()
def delay(
    flight_number: str = typer.Argument(..., help="Flight number"),
    minutes: int = typer.Argument(..., help="Delay in minutes; 0 clears the delay"),
    username: str = typer.Option(..., "--username", "-u", help="Admin username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    """Set or clear a flight delay (flight managers)."""
    manager = _open_manager()
    with _operation():
        _login(manager, username, password)
        updated = manager.set_flight_delay(flight_number, minutes)
        manager.logout()
    _save(manager)
    console.print(f"[green]✓ {updated.flight_number} is now {updated.status_display()}[/green]")


@app.command()
def pricing(
    flight_number: str = typer.Argument(..., help="Flight number"),
    multiplier: float = typer.Argument(..., help="Dynamic pricing multiplier"),
    username: str = typer.Option(..., "--username", "-u", help="Admin username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    """Set a flight's dynamic pricing multiplier (finance managers)."""
    manager = _open_manager()
    with _operation():
        _login(manager, username, password)
        updated = manager.set_dynamic_pricing(flight_number, multiplier)
        manager.logout()
    _save(manager)
    console.print(
        f"[green]✓ {updated.flight_number} multiplier set to {updated.pricing.dynamic_multiplier:.2f}[/green]"
    )


@app.command()
def rules():
    """List pricing rules in the order they are applied."""
    manager = _open_manager()
    table = Table(title="Pricing Rules", box=box.ROUNDED)
    table.add_column("Rule", style="cyan")
    table.add_column("Route", style="white")
    table.add_column("Hours", style="white")
    table.add_column("Multiplier", justify="right")
    table.add_column("Active")
    for rule in manager.get_pricing_rules():
        hours = f"{rule.time_period[0]:02d}-{rule.time_period[1]:02d}" if rule.time_period else "all"
        table.add_row(
            rule.rule_name,
            rule.route_pattern or "all",
            hours,
            f"×{rule.multiplier}",
            "[green]yes[/green]" if rule.is_active else "[red]no[/red]",
        )
    console.print(table)


@app.command("aircraft-status")
def aircraft_status(
    registration: str = typer.Argument(..., help="Aircraft registration"),
    status: AircraftStatus = typer.Argument(..., help="New status"),
    username: str = typer.Option(..., "--username", "-u", help="Admin username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
):
    """Change an aircraft's status (aircraft managers)."""
    manager = _open_manager()
    with _operation():
        _login(manager, username, password)
        plane = manager.set_aircraft_status(registration, status)
        manager.logout()
    _save(manager)
    console.print(f"[green]✓ {plane.registration} is now {plane.status_display()}[/green]")


@app.command()
def audit(
    username: str = typer.Option(..., "--username", "-u", help="Admin username"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
    limit: int = typer.Option(10, "--limit", "-n", help="Entries to show"),
):
    """Show the persisted audit log, newest first."""
    manager = _open_manager()
    with _operation():
        _login(manager, username, password)
        manager.admin.require("view_reports")
    for action in manager.recent_actions(limit):
        console.print(action.format_for_log())


@app.command()
def metrics():
    """Show system metrics and statistics."""
    manager = _open_manager()
    snapshot = manager.get_metrics()
    total, on_time, delayed, cancelled = manager.get_flight_statistics()
    bookings_total, bookings_active, bookings_cancelled = manager.get_booking_statistics()

    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan bold")
    table.add_column("Value", style="white")
    table.add_row("Flights", f"{total} ({on_time} on time, {delayed} delayed, {cancelled} cancelled)")
    table.add_row("Active flights", str(snapshot.active_flights))
    table.add_row("Aircraft", f"{snapshot.total_aircraft} ({snapshot.aircraft_in_maintenance} in maintenance)")
    table.add_row(
        "Bookings",
        f"{bookings_total} ({bookings_active} active, {bookings_cancelled} cancelled)",
    )
    table.add_row("Average load factor", f"{snapshot.average_load_factor:.1f}%")
    console.print(Panel.fit(table, title="System Metrics", border_style="cyan"))


@app.command()
def validate():
    """Check cross-references between flights, aircraft, bookings and airports."""
    manager = _open_manager()
    issues = manager.validate_integrity()
    if not issues:
        console.print("[green]✓ No integrity issues found[/green]")
        return
    for issue in issues:
        console.print(f"[red]✗ {issue}[/red]")
    raise typer.Exit(1)


@app.command()
def backup():
    """Copy the persisted data files into a timestamped backup directory."""
    manager = _open_manager()
    with _operation():
        target = asyncio.run(manager.create_backup())
    console.print(f"[green]✓ Backup created at {target}[/green]")


if __name__ == "__main__":
    app()
