"""
Aircraft Pydantic models for the airport operations application.

This module contains the fleet registry models: seat configuration,
performance specifications and per-airframe operational state.
"""

from typing import Dict, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict

from .enums import AircraftStatus, SeatClass
from .flight import DEFAULT_BAGGAGE_ALLOWANCE
from ..utils.helpers import utc_now

BAGGAGE_KG_PER_SEAT = 25
CARGO_KG_PER_SEAT = 35
MAINTENANCE_DUE_HOURS = 100.0


class SeatConfigurationModel(BaseModel):
    """Cabin layout as rows x seats per row for each class."""

    economy_rows: int = Field(..., ge=0)
    economy_seats_per_row: int = Field(..., ge=0)
    business_rows: int = Field(..., ge=0)
    business_seats_per_row: int = Field(..., ge=0)
    first_class_rows: int = Field(..., ge=0)
    first_class_seats_per_row: int = Field(..., ge=0)

    def seats_for_class(self, seat_class: SeatClass) -> int:
        rows = getattr(self, f"{seat_class.value}_rows")
        per_row = getattr(self, f"{seat_class.value}_seats_per_row")
        return rows * per_row

    @property
    def total_seats(self) -> int:
        return sum(self.seats_for_class(seat_class) for seat_class in SeatClass)


class PerformanceSpecsModel(BaseModel):
    """Published performance figures for an aircraft type."""

    max_speed_kmh: int = Field(..., ge=0)
    cruise_speed_kmh: int = Field(..., ge=0)
    max_altitude_m: int = Field(..., ge=0)
    range_km: int = Field(..., ge=0)
    fuel_efficiency_l_per_100km: float = Field(..., ge=0)


SEAT_CONFIGURATIONS: Dict[str, SeatConfigurationModel] = {
    "Boeing 737-800": SeatConfigurationModel(
        economy_rows=28, economy_seats_per_row=6,
        business_rows=4, business_seats_per_row=4,
        first_class_rows=2, first_class_seats_per_row=4,
    ),
    "Airbus A320": SeatConfigurationModel(
        economy_rows=25, economy_seats_per_row=6,
        business_rows=3, business_seats_per_row=4,
        first_class_rows=2, first_class_seats_per_row=4,
    ),
    "Boeing 777-300": SeatConfigurationModel(
        economy_rows=42, economy_seats_per_row=9,
        business_rows=8, business_seats_per_row=6,
        first_class_rows=4, first_class_seats_per_row=4,
    ),
    "Airbus A380": SeatConfigurationModel(
        economy_rows=50, economy_seats_per_row=10,
        business_rows=12, business_seats_per_row=6,
        first_class_rows=6, first_class_seats_per_row=4,
    ),
}

DEFAULT_SEAT_CONFIGURATION = SeatConfigurationModel(
    economy_rows=20, economy_seats_per_row=6,
    business_rows=3, business_seats_per_row=4,
    first_class_rows=2, first_class_seats_per_row=4,
)

PERFORMANCE_SPECS: Dict[str, PerformanceSpecsModel] = {
    "Boeing 737-800": PerformanceSpecsModel(
        max_speed_kmh=876, cruise_speed_kmh=828, max_altitude_m=12500,
        range_km=5665, fuel_efficiency_l_per_100km=3.2,
    ),
    "Airbus A320": PerformanceSpecsModel(
        max_speed_kmh=871, cruise_speed_kmh=828, max_altitude_m=12000,
        range_km=6150, fuel_efficiency_l_per_100km=2.9,
    ),
    "Boeing 777-300": PerformanceSpecsModel(
        max_speed_kmh=905, cruise_speed_kmh=892, max_altitude_m=13100,
        range_km=11135, fuel_efficiency_l_per_100km=4.8,
    ),
    "Airbus A380": PerformanceSpecsModel(
        max_speed_kmh=945, cruise_speed_kmh=903, max_altitude_m=13100,
        range_km=15200, fuel_efficiency_l_per_100km=6.2,
    ),
}

DEFAULT_PERFORMANCE_SPECS = PerformanceSpecsModel(
    max_speed_kmh=800, cruise_speed_kmh=750, max_altitude_m=11000,
    range_km=4000, fuel_efficiency_l_per_100km=3.5,
)


class AircraftModel(BaseModel):
    """
    A single airframe in the fleet.

    Active <-> InFlight is driven by the status simulator; Maintenance and
    Retired are only entered or left through explicit operations.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    registration: str = Field(..., max_length=10, description="Registration mark (e.g., 'N123RIA')")
    model: str = Field(..., description="Aircraft type (e.g., 'Boeing 737-800')")
    manufacturer: str = Field(..., description="Manufacturer name")
    year_manufactured: int = Field(..., ge=1900)
    status: AircraftStatus = Field(default=AircraftStatus.ACTIVE)
    seat_configuration: SeatConfigurationModel
    total_capacity: int = Field(..., ge=0)
    baggage_capacity_kg: int = Field(..., ge=0)
    max_cargo_weight_kg: int = Field(..., ge=0)
    performance: PerformanceSpecsModel
    maintenance_hours: float = Field(default=0.0, ge=0)
    flight_hours: float = Field(default=0.0, ge=0)

    @classmethod
    def create(
        cls,
        registration: str,
        model: str,
        manufacturer: str,
        year_manufactured: int,
    ) -> "AircraftModel":
        """Build an airframe with the standard layout and specs for its type."""
        seat_configuration = SEAT_CONFIGURATIONS.get(model, DEFAULT_SEAT_CONFIGURATION)
        total_capacity = seat_configuration.total_seats
        return cls(
            registration=registration,
            model=model,
            manufacturer=manufacturer,
            year_manufactured=year_manufactured,
            seat_configuration=seat_configuration.model_copy(),
            total_capacity=total_capacity,
            baggage_capacity_kg=total_capacity * BAGGAGE_KG_PER_SEAT,
            max_cargo_weight_kg=total_capacity * CARGO_KG_PER_SEAT,
            performance=PERFORMANCE_SPECS.get(model, DEFAULT_PERFORMANCE_SPECS).model_copy(),
        )

    def seats_for_class(self, seat_class: SeatClass) -> int:
        return self.seat_configuration.seats_for_class(seat_class)

    def is_available_for_flight(self) -> bool:
        return self.status == AircraftStatus.ACTIVE

    def set_status(self, status: AircraftStatus) -> None:
        self.status = status

    def add_flight_hours(self, hours: float) -> None:
        """Accumulate flight time; 100 h beyond the last maintenance grounds the aircraft."""
        self.flight_hours += hours
        if self.flight_hours - self.maintenance_hours >= MAINTENANCE_DUE_HOURS:
            self.status = AircraftStatus.MAINTENANCE

    def perform_maintenance(self, hours: float) -> None:
        self.maintenance_hours += hours
        if self.maintenance_hours >= self.flight_hours:
            self.status = AircraftStatus.ACTIVE

    def age(self, current_year: Optional[int] = None) -> int:
        return (current_year or utc_now().year) - self.year_manufactured

    def baggage_allowance(self) -> Dict[SeatClass, int]:
        return dict(DEFAULT_BAGGAGE_ALLOWANCE)

    def status_display(self) -> str:
        return {
            AircraftStatus.ACTIVE: "Active",
            AircraftStatus.MAINTENANCE: "Maintenance",
            AircraftStatus.RETIRED: "Retired",
            AircraftStatus.IN_FLIGHT: "In Flight",
        }[self.status]

    def detailed_specs(self) -> str:
        return (
            f"Model: {self.model} | Capacity: {self.total_capacity} seats | "
            f"Range: {self.performance.range_km} km | "
            f"Fuel Efficiency: {self.performance.fuel_efficiency_l_per_100km:.1f}L/100km"
        )

    def __str__(self) -> str:
        return (
            f"{self.registration} | {self.model} | {self.age()} | "
            f"{self.total_capacity} seats | {self.status_display()}"
        )
