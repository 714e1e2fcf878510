"""
Administrative Pydantic models for the airport operations application.

This module contains admin users and their capabilities, the immutable
audit records, dynamic pricing rules and the aggregated system metrics.
"""

from datetime import datetime
from typing import Iterable, Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .aircraft import AircraftModel
from .enums import AdminLevel, AircraftStatus, FlightStatusKind
from .flight import FlightModel
from ..utils.helpers import calculate_load_factor, utc_now


class AdminUserModel(BaseModel):
    """Admin identity and role."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    username: str = Field(..., min_length=1, max_length=50)
    full_name: str
    email: str = ""
    level: AdminLevel = AdminLevel.VIEWER
    created_date: datetime = Field(default_factory=utc_now)
    last_login: Optional[datetime] = None
    is_active: bool = True

    def can_manage_flights(self) -> bool:
        return self.level in (AdminLevel.SUPER_ADMIN, AdminLevel.FLIGHT_MANAGER)

    def can_manage_aircraft(self) -> bool:
        return self.level in (AdminLevel.SUPER_ADMIN, AdminLevel.AIRCRAFT_MANAGER)

    def can_manage_pricing(self) -> bool:
        return self.level in (AdminLevel.SUPER_ADMIN, AdminLevel.FINANCE_MANAGER)

    def can_view_reports(self) -> bool:
        return True

    def login(self, now: Optional[datetime] = None) -> None:
        self.last_login = now or utc_now()

    def level_display(self) -> str:
        return {
            AdminLevel.SUPER_ADMIN: "Super Admin",
            AdminLevel.FLIGHT_MANAGER: "Flight Manager",
            AdminLevel.AIRCRAFT_MANAGER: "Aircraft Manager",
            AdminLevel.FINANCE_MANAGER: "Finance Manager",
            AdminLevel.VIEWER: "Viewer",
        }[self.level]


class AdminActionModel(BaseModel):
    """One audit log entry. Entries are never modified once appended."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    admin_id: UUID
    action_type: str = Field(..., description="Action tag (e.g., 'SET_DELAY')")
    description: str
    timestamp: datetime = Field(default_factory=utc_now)
    affected_entity_id: Optional[UUID] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    def format_for_log(self) -> str:
        if self.old_value is not None and self.new_value is not None:
            change_info = f" (Changed from '{self.old_value}' to '{self.new_value}')"
        elif self.new_value is not None:
            change_info = f" (Set to '{self.new_value}')"
        elif self.old_value is not None:
            change_info = f" (Removed '{self.old_value}')"
        else:
            change_info = ""
        return (
            f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] {self.action_type} - "
            f"{self.description}{change_info}"
        )


class PricingRuleModel(BaseModel):
    """
    Multiplicative pricing rule.

    ``route_pattern`` matches the route string "ORIGIN-DESTINATION":
    exact ("LAX-JFK"), suffix ("*-LHR"), prefix ("LAX-*") or substring
    ("*LAX*"). A pattern with a '*' anywhere else matches nothing.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    rule_name: str = Field(..., min_length=1)
    route_pattern: Optional[str] = Field(None, description="Route pattern; None matches all routes")
    time_period: Optional[Tuple[int, int]] = Field(
        None, description="Inclusive departure-hour range; None matches all hours"
    )
    multiplier: float = Field(..., gt=0)
    is_active: bool = True
    created_by: UUID = Field(default_factory=uuid4)
    created_date: datetime = Field(default_factory=utc_now)

    @field_validator("time_period")
    @classmethod
    def validate_hours(cls, v: Optional[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        if v is not None and not all(0 <= hour <= 23 for hour in v):
            raise ValueError("Hour range bounds must be between 0 and 23")
        return v

    def applies_to_route(self, origin: str, destination: str) -> bool:
        pattern = self.route_pattern
        if pattern is None:
            return True

        route = f"{origin}-{destination}"
        if "*" not in pattern:
            return route == pattern
        if pattern.startswith("*") and pattern.endswith("*"):
            return pattern.strip("*") in route
        if pattern.startswith("*"):
            return route.endswith(pattern[1:])
        if pattern.endswith("*"):
            return route.startswith(pattern[:-1])
        return False

    def applies_to_time(self, hour: int) -> bool:
        # Literal inclusive bounds: (22, 4) matches no hour at all.
        if self.time_period is None:
            return True
        start, end = self.time_period
        return start <= hour <= end


class SystemMetricsModel(BaseModel):
    """
    Aggregate counters for the admin dashboard.

    Flight and aircraft figures are recomputed from the full collections;
    booking and revenue counters accumulate as bookings are created.
    """

    total_flights: int = 0
    active_flights: int = 0
    delayed_flights: int = 0
    cancelled_flights: int = 0
    total_aircraft: int = 0
    active_aircraft: int = 0
    aircraft_in_maintenance: int = 0
    total_bookings: int = 0
    revenue_today: float = 0.0
    revenue_month: float = 0.0
    average_load_factor: float = Field(default=0.0, description="Mean percentage of seats filled")
    last_updated: datetime = Field(default_factory=utc_now)

    def update_flight_metrics(self, flights: Iterable[FlightModel]) -> None:
        flights = list(flights)
        kinds = [flight.status.kind for flight in flights]
        self.total_flights = len(flights)
        self.active_flights = sum(
            1 for kind in kinds if kind in (FlightStatusKind.ON_TIME, FlightStatusKind.DELAYED)
        )
        self.delayed_flights = kinds.count(FlightStatusKind.DELAYED)
        self.cancelled_flights = kinds.count(FlightStatusKind.CANCELLED)

        load_factors = [
            calculate_load_factor(
                flight.total_capacity - flight.seat_availability.total, flight.total_capacity
            )
            for flight in flights
            if flight.total_capacity > 0
        ]
        self.average_load_factor = sum(load_factors) / len(load_factors) if load_factors else 0.0
        self.last_updated = utc_now()

    def update_aircraft_metrics(self, aircraft: Iterable[AircraftModel]) -> None:
        statuses = [plane.status for plane in aircraft]
        self.total_aircraft = len(statuses)
        self.active_aircraft = sum(
            1 for status in statuses if status in (AircraftStatus.ACTIVE, AircraftStatus.IN_FLIGHT)
        )
        self.aircraft_in_maintenance = statuses.count(AircraftStatus.MAINTENANCE)
        self.last_updated = utc_now()

    def record_booking(self, total_bookings: int, amount: float) -> None:
        self.total_bookings = total_bookings
        self.revenue_today += amount
        self.revenue_month += amount
        self.last_updated = utc_now()

    def summary(self) -> str:
        return (
            f"Flights: {self.active_flights} active, {self.delayed_flights} delayed | "
            f"Aircraft: {self.active_aircraft} active, {self.aircraft_in_maintenance} maintenance | "
            f"Revenue: ${self.revenue_today:.2f} today"
        )
