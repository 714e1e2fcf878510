"""
Time-driven flight and aircraft status simulation.

Flights advance along OnTime/Delayed -> Boarding -> Departed -> Arrived
based on how close "now" is to their scheduled times. Aircraft follow their
flights: an Active aircraft with a boarding or departed flight goes InFlight,
and returns to Active once no such flight remains.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Set
from uuid import UUID

from ..models.admin import SystemMetricsModel
from ..models.aircraft import AircraftModel
from ..models.enums import AircraftStatus, FlightStatusKind
from ..models.flight import FlightModel, FlightStatusModel
from ..utils.helpers import utc_now

logger = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 60
AIRBORNE_KINDS = (FlightStatusKind.BOARDING, FlightStatusKind.DEPARTED)


@dataclass
class SimulationResult:
    """Outcome of a single simulator tick."""
    ran_at: datetime
    skipped: bool = False
    flight_changes: List[str] = field(default_factory=list)
    aircraft_changes: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.flight_changes or self.aircraft_changes)


def next_flight_status(
    flight: FlightModel, now: datetime, boarding_window: timedelta
) -> Optional[FlightStatusKind]:
    """Status the flight moves to at ``now``, or None if it stays put."""
    kind = flight.status.kind
    until_departure = flight.departure_time - now

    if kind in (FlightStatusKind.ON_TIME, FlightStatusKind.DELAYED):
        # A flight further out than the window stays put, even if a late tick
        # means it skipped the boarding window entirely.
        if timedelta(0) < until_departure <= boarding_window:
            return FlightStatusKind.BOARDING
        if flight.departure_time <= now < flight.arrival_time:
            return FlightStatusKind.DEPARTED
        if now >= flight.arrival_time:
            return FlightStatusKind.ARRIVED
        return None

    if kind == FlightStatusKind.BOARDING and now >= flight.departure_time:
        return FlightStatusKind.DEPARTED
    if kind == FlightStatusKind.DEPARTED and now >= flight.arrival_time:
        return FlightStatusKind.ARRIVED
    return None


class StatusSimulator:
    """
    Applies status transitions on a cooldown.

    ``last_run`` only moves when a tick actually runs, so calls inside the
    cooldown never push the next eligible tick further out.
    """

    def __init__(self, interval_seconds: int = MIN_INTERVAL_SECONDS, boarding_window_minutes: int = 30):
        if interval_seconds < MIN_INTERVAL_SECONDS:
            raise ValueError(f"Simulation interval must be at least {MIN_INTERVAL_SECONDS} seconds")
        self.interval = timedelta(seconds=interval_seconds)
        self.boarding_window = timedelta(minutes=boarding_window_minutes)
        self.last_run: Optional[datetime] = None

    def is_due(self, now: datetime) -> bool:
        return self.last_run is None or now - self.last_run >= self.interval

    def run(
        self,
        flights: Iterable[FlightModel],
        aircraft: Iterable[AircraftModel],
        metrics: Optional[SystemMetricsModel] = None,
        now: Optional[datetime] = None,
    ) -> SimulationResult:
        now = now or utc_now()
        if not self.is_due(now):
            logger.debug(f"Simulation skipped, last run at {self.last_run:%H:%M:%S}")
            return SimulationResult(ran_at=now, skipped=True)

        flights = list(flights)
        aircraft = list(aircraft)
        result = SimulationResult(ran_at=now)

        for flight in flights:
            new_kind = next_flight_status(flight, now, self.boarding_window)
            if new_kind is None:
                continue
            old_display = flight.status_display()
            flight.status = FlightStatusModel.of(new_kind)
            result.flight_changes.append(
                f"{flight.flight_number}: {old_display} -> {flight.status_display()}"
            )
            logger.debug(f"Flight {flight.flight_number} {old_display} -> {flight.status_display()}")

        result.aircraft_changes = self._update_aircraft(flights, aircraft)
        self.last_run = now

        if result.changed:
            if metrics is not None:
                metrics.update_flight_metrics(flights)
                metrics.update_aircraft_metrics(aircraft)
            logger.info(
                f"Simulation tick: {len(result.flight_changes)} flight(s), "
                f"{len(result.aircraft_changes)} aircraft changed"
            )
        return result

    @staticmethod
    def _update_aircraft(flights: List[FlightModel], aircraft: List[AircraftModel]) -> List[str]:
        busy: Set[UUID] = {
            flight.aircraft_id for flight in flights if flight.status.kind in AIRBORNE_KINDS
        }
        changes = []
        for plane in aircraft:
            if plane.status == AircraftStatus.ACTIVE and plane.id in busy:
                plane.set_status(AircraftStatus.IN_FLIGHT)
            elif plane.status == AircraftStatus.IN_FLIGHT and plane.id not in busy:
                plane.set_status(AircraftStatus.ACTIVE)
            else:
                continue
            changes.append(f"{plane.registration}: {plane.status_display()}")
            logger.debug(f"Aircraft {plane.registration} is now {plane.status_display()}")
        return changes
