"""
Data manager facade over the in-memory airport dataset.

The data manager owns the authoritative snapshot (flights, aircraft,
bookings, airports and the audit log) and routes every query and command
through one lock, so a booking's seat decrement and its insertion into
the booking list are never observed apart. Persistence goes through the
JSON document store only when ``save_all_data`` or ``create_backup`` is
called.
"""

import logging
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from ..errors import NotFoundError
from ..models.admin import AdminActionModel, AdminUserModel, PricingRuleModel, SystemMetricsModel
from ..models.aircraft import AircraftModel
from ..models.airport import AirportModel
from ..models.enums import AircraftStatus, BookingStatus, FlightStatusKind, SeatClass
from ..models.flight import FlightModel
from ..models.passenger import BookingModel, PassengerModel
from ..storage.json_store import Dataset, JsonDocumentStore, find_integrity_issues
from ..storage.sample_data import build_sample_dataset
from ..utils.config import AirportConfig, get_config
from ..utils.helpers import utc_now
from .admin_panel import AdminPanel
from .booking_manager import BookingManager
from .pricing_engine import PricingEngine, default_pricing_rules
from .status_simulator import SimulationResult, StatusSimulator

logger = logging.getLogger(__name__)


class DataManager:
    """
    Facade for all airport operations.

    Queries and commands are synchronous; loading, saving, backups and
    simulation ticks are coroutines so a host loop can schedule them.
    """

    def __init__(self, config: Optional[AirportConfig] = None, store: Optional[JsonDocumentStore] = None):
        self.config = config or get_config()
        self.store = store or JsonDocumentStore(self.config.data_dir, self.config.backup_dir)
        self._lock = threading.RLock()

        self.airports: Dict[str, AirportModel] = {}
        self.aircraft: Dict[UUID, AircraftModel] = {}
        self.flights: Dict[UUID, FlightModel] = {}
        self.bookings: Dict[UUID, BookingModel] = {}
        self.metrics = SystemMetricsModel()

        self.pricing_engine = PricingEngine()
        self.admin = AdminPanel(self.pricing_engine)
        self.booking_manager = BookingManager(
            self.flights,
            self.bookings,
            self.pricing_engine,
            self.metrics,
            ticket_prefix=self.config.ticket_prefix,
            currency=self.config.currency,
            payment_method=self.config.payment_method,
        )
        self.simulator = StatusSimulator(
            interval_seconds=self.config.simulation_interval_seconds,
            boarding_window_minutes=self.config.boarding_window_minutes,
        )
        self.initialized = False

    @classmethod
    async def create(
        cls, config: Optional[AirportConfig] = None, store: Optional[JsonDocumentStore] = None
    ) -> "DataManager":
        manager = cls(config, store)
        await manager.initialize()
        return manager

    async def initialize(self, now: Optional[datetime] = None) -> None:
        """Load persisted data, seeding sample data and default rules as configured."""
        dataset = self.store.load_all()
        if dataset.is_empty() and self.config.seed_sample_data:
            audit = dataset.audit
            dataset = build_sample_dataset(now)
            dataset.audit = audit
            self.store.save_all(dataset)
        self.load_dataset(dataset)

    def load_dataset(self, dataset: Dataset) -> List[str]:
        """Replace the in-memory snapshot; returns any integrity issues found."""
        with self._lock:
            self._replace_dataset(dataset)
            if self.config.seed_default_pricing_rules and len(self.pricing_engine) == 0:
                superuser = self.admin.get_account("admin")
                created_by = superuser.id if superuser else UUID(int=0)
                for rule in default_pricing_rules(created_by):
                    self.pricing_engine.add_rule(rule)
            self._refresh_metrics()
            issues = find_integrity_issues(self._snapshot())

        for issue in issues:
            logger.warning(f"Data integrity: {issue}")

        self.initialized = True
        logger.info(
            f"Data manager initialized: {len(self.flights)} flights, {len(self.aircraft)} aircraft, "
            f"{len(self.bookings)} bookings, {len(self.airports)} airports"
        )
        return issues

    def _replace_dataset(self, dataset: Dataset) -> None:
        # In-place so the booking manager keeps the same collections
        self.airports.clear()
        self.airports.update((airport.code, airport) for airport in dataset.airports)
        self.aircraft.clear()
        self.aircraft.update((plane.id, plane) for plane in dataset.aircraft)
        self.flights.clear()
        self.flights.update((flight.id, flight) for flight in dataset.flights)
        self.bookings.clear()
        self.bookings.update((booking.id, booking) for booking in dataset.bookings)
        self.booking_manager.reindex()
        self.admin.restore_audit_log(dataset.audit)
        self.metrics.total_bookings = len(self.bookings)

    def _snapshot(self) -> Dataset:
        return Dataset(
            airports=list(self.airports.values()),
            aircraft=list(self.aircraft.values()),
            flights=list(self.flights.values()),
            bookings=list(self.bookings.values()),
            audit=list(self.admin.audit_log),
        )

    def _refresh_metrics(self) -> None:
        self.metrics.update_flight_metrics(self.flights.values())
        self.metrics.update_aircraft_metrics(self.aircraft.values())

    # Flight queries

    def get_flights(self) -> List[FlightModel]:
        with self._lock:
            return list(self.flights.values())

    def get_flight(self, flight_id: UUID) -> FlightModel:
        with self._lock:
            flight = self.flights.get(flight_id)
            if flight is None:
                raise NotFoundError("Flight", flight_id)
            return flight

    def find_flight(self, flight_number: str) -> FlightModel:
        with self._lock:
            for flight in self.flights.values():
                if flight.flight_number == flight_number:
                    return flight
            raise NotFoundError("Flight", flight_number)

    def search_flights(
        self,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        status: Optional[FlightStatusKind] = None,
        departure_date: Optional[date] = None,
    ) -> List[FlightModel]:
        """Flights matching every given filter; the date is compared in UTC."""
        with self._lock:
            return [
                flight
                for flight in self.flights.values()
                if (origin is None or flight.origin == origin)
                and (destination is None or flight.destination == destination)
                and (status is None or flight.status.kind == status)
                and (departure_date is None or flight.departure_time.date() == departure_date)
            ]

    def get_departures(self, airport_code: str) -> List[FlightModel]:
        with self._lock:
            return [flight for flight in self.flights.values() if flight.origin == airport_code]

    def get_arrivals(self, airport_code: str) -> List[FlightModel]:
        with self._lock:
            return [flight for flight in self.flights.values() if flight.destination == airport_code]

    def get_available_flights(self, now: Optional[datetime] = None) -> List[FlightModel]:
        now = now or utc_now()
        with self._lock:
            return [flight for flight in self.flights.values() if flight.is_available_for_booking(now)]

    def price_quote(self, flight_id: UUID, seat_class: SeatClass) -> float:
        with self._lock:
            return self.booking_manager.quote(self.get_flight(flight_id), seat_class)

    # Aircraft and airport queries

    def get_aircraft(self) -> List[AircraftModel]:
        with self._lock:
            return list(self.aircraft.values())

    def get_aircraft_by_id(self, aircraft_id: UUID) -> AircraftModel:
        with self._lock:
            plane = self.aircraft.get(aircraft_id)
            if plane is None:
                raise NotFoundError("Aircraft", aircraft_id)
            return plane

    def find_aircraft(self, registration: str) -> AircraftModel:
        with self._lock:
            for plane in self.aircraft.values():
                if plane.registration == registration:
                    return plane
            raise NotFoundError("Aircraft", registration)

    def get_available_aircraft(self) -> List[AircraftModel]:
        with self._lock:
            return [plane for plane in self.aircraft.values() if plane.is_available_for_flight()]

    def get_aircraft_for_flight(self, flight_id: UUID) -> AircraftModel:
        with self._lock:
            return self.get_aircraft_by_id(self.get_flight(flight_id).aircraft_id)

    def get_airports(self) -> List[AirportModel]:
        with self._lock:
            return list(self.airports.values())

    def get_airport(self, code: str) -> AirportModel:
        with self._lock:
            airport = self.airports.get(code)
            if airport is None:
                raise NotFoundError("Airport", code)
            return airport

    # Bookings

    def get_bookings(self) -> List[BookingModel]:
        with self._lock:
            return list(self.bookings.values())

    def find_booking(self, ticket_number: str) -> BookingModel:
        with self._lock:
            return self.booking_manager.find_booking(ticket_number)

    def bookings_for_flight(self, flight_id: UUID) -> List[BookingModel]:
        with self._lock:
            return self.booking_manager.bookings_for_flight(flight_id)

    def create_booking(
        self,
        flight_id: UUID,
        passenger: PassengerModel,
        seat_class: SeatClass,
        now: Optional[datetime] = None,
    ) -> BookingModel:
        with self._lock:
            return self.booking_manager.create(flight_id, passenger, seat_class, now)

    def cancel_booking(self, ticket_number: str) -> BookingModel:
        with self._lock:
            return self.booking_manager.cancel(ticket_number)

    def check_in(self, ticket_number: str, now: Optional[datetime] = None) -> BookingModel:
        with self._lock:
            return self.booking_manager.check_in(ticket_number, now)

    def board(self, ticket_number: str, now: Optional[datetime] = None) -> BookingModel:
        with self._lock:
            return self.booking_manager.board(ticket_number, now)

    def complete_booking(self, ticket_number: str) -> BookingModel:
        with self._lock:
            return self.booking_manager.complete(ticket_number)

    def assign_seat(self, ticket_number: str, seat_number: str) -> BookingModel:
        with self._lock:
            return self.booking_manager.assign_seat(ticket_number, seat_number)

    def add_baggage(self, ticket_number: str, count: int = 1) -> BookingModel:
        with self._lock:
            return self.booking_manager.add_baggage(ticket_number, count)

    def add_special_service(self, ticket_number: str, service: str) -> BookingModel:
        with self._lock:
            return self.booking_manager.add_special_service(ticket_number, service)

    # Admin session passthroughs

    def authenticate(self, username: str, password: str, now: Optional[datetime] = None) -> AdminUserModel:
        with self._lock:
            return self.admin.authenticate(username, password, now)

    def logout(self) -> None:
        with self._lock:
            self.admin.logout()

    @property
    def current_admin(self) -> Optional[AdminUserModel]:
        return self.admin.current_admin

    def recent_actions(self, limit: int = 10) -> List[AdminActionModel]:
        with self._lock:
            return self.admin.recent_actions(limit)

    # Privileged flight and aircraft operations

    def set_flight_delay(self, flight_number: str, minutes: int) -> FlightModel:
        """Delay a flight (minutes > 0) or put it back on time (minutes <= 0)."""
        with self._lock:
            user = self.admin.require("manage_flights")
            flight = self.find_flight(flight_number)
            old_status = flight.status_display()
            flight.set_delay(minutes)
            self.admin.log_action(
                "SET_DELAY",
                f"Set delay for flight {flight_number}",
                affected_entity_id=flight.id,
                old_value=old_status,
                new_value=flight.status_display(),
            )
            logger.info(f"{user.username} set {flight_number} to {flight.status_display()}")
            return flight

    def set_dynamic_pricing(self, flight_number: str, multiplier: float) -> FlightModel:
        with self._lock:
            user = self.admin.require("manage_pricing")
            if multiplier <= 0:
                raise ValueError("Dynamic pricing multiplier must be positive")
            flight = self.find_flight(flight_number)
            old_multiplier = flight.pricing.dynamic_multiplier
            flight.pricing.dynamic_multiplier = multiplier
            self.admin.log_action(
                "SET_PRICING",
                f"Set dynamic pricing for flight {flight_number}",
                affected_entity_id=flight.id,
                old_value=f"{old_multiplier:.2f}",
                new_value=f"{multiplier:.2f}",
            )
            logger.info(f"{user.username} set {flight_number} pricing multiplier to {multiplier:.2f}")
            return flight

    def cancel_flight(self, flight_number: str) -> FlightModel:
        """Cancel a flight; its bookings are left as they are."""
        with self._lock:
            user = self.admin.require("manage_flights")
            flight = self.find_flight(flight_number)
            old_status = flight.status_display()
            flight.cancel()
            self.admin.log_action(
                "CANCEL_FLIGHT",
                f"Cancelled flight {flight_number}",
                affected_entity_id=flight.id,
                old_value=old_status,
                new_value=flight.status_display(),
            )
            self._refresh_metrics()
            logger.info(f"{user.username} cancelled flight {flight_number}")
            return flight

    def assign_gate(self, flight_number: str, gate: str) -> FlightModel:
        with self._lock:
            user = self.admin.require("manage_flights")
            flight = self.find_flight(flight_number)
            old_gate = flight.gate
            flight.set_gate(gate)
            self.admin.log_action(
                "SET_GATE",
                f"Assigned gate for flight {flight_number}",
                affected_entity_id=flight.id,
                old_value=old_gate,
                new_value=gate,
            )
            logger.info(f"{user.username} assigned gate {gate} to {flight_number}")
            return flight

    def set_aircraft_status(self, registration: str, status: AircraftStatus) -> AircraftModel:
        with self._lock:
            user = self.admin.require("manage_aircraft")
            plane = self.find_aircraft(registration)
            old_status = plane.status_display()
            plane.set_status(status)
            self.admin.log_action(
                "SET_AIRCRAFT_STATUS",
                f"Changed status of aircraft {registration}",
                affected_entity_id=plane.id,
                old_value=old_status,
                new_value=plane.status_display(),
            )
            self._refresh_metrics()
            logger.info(f"{user.username} set aircraft {registration} to {plane.status_display()}")
            return plane

    # Pricing rules

    def get_pricing_rules(self) -> List[PricingRuleModel]:
        with self._lock:
            return self.pricing_engine.rules

    def add_pricing_rule(
        self,
        rule_name: str,
        multiplier: float,
        route_pattern: Optional[str] = None,
        time_period: Optional[Tuple[int, int]] = None,
    ) -> PricingRuleModel:
        with self._lock:
            return self.admin.add_pricing_rule(rule_name, multiplier, route_pattern, time_period)

    def set_pricing_rule_active(self, rule_id: UUID, is_active: bool) -> PricingRuleModel:
        with self._lock:
            return self.admin.set_pricing_rule_active(rule_id, is_active)

    def remove_pricing_rule(self, rule_id: UUID) -> PricingRuleModel:
        with self._lock:
            return self.admin.remove_pricing_rule(rule_id)

    # Metrics and statistics

    def get_metrics(self) -> SystemMetricsModel:
        with self._lock:
            self._refresh_metrics()
            return self.metrics.model_copy()

    def get_flight_statistics(self) -> Tuple[int, int, int, int]:
        """(total, on time, delayed, cancelled)"""
        with self._lock:
            kinds = [flight.status.kind for flight in self.flights.values()]
        return (
            len(kinds),
            kinds.count(FlightStatusKind.ON_TIME),
            kinds.count(FlightStatusKind.DELAYED),
            kinds.count(FlightStatusKind.CANCELLED),
        )

    def get_booking_statistics(self) -> Tuple[int, int, int]:
        """(total, confirmed or checked in, cancelled)"""
        with self._lock:
            statuses = [booking.status for booking in self.bookings.values()]
        active = sum(
            1 for status in statuses if status in (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)
        )
        return len(statuses), active, statuses.count(BookingStatus.CANCELLED)

    def validate_integrity(self) -> List[str]:
        with self._lock:
            return find_integrity_issues(self._snapshot())

    # Simulation and persistence

    async def update_simulation(self, now: Optional[datetime] = None) -> SimulationResult:
        with self._lock:
            return self.simulator.run(
                self.flights.values(), self.aircraft.values(), self.metrics, now
            )

    async def save_all_data(self) -> None:
        with self._lock:
            self.store.save_all(self._snapshot())

    async def create_backup(self) -> Path:
        with self._lock:
            return self.store.backup()
