"""
Flight-related Pydantic models for the airport operations application.

This module contains models for flight status, seat inventory, pricing and
complete flight information with proper validation and field constraints.
"""

from datetime import datetime, timedelta
from typing import Dict, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict, model_validator

from .enums import FlightStatusKind, SeatClass
from ..errors import InvalidStateTransitionError, ResourceExhaustedError
from ..utils.helpers import utc_now

ECONOMY_SHARE = 0.70
BUSINESS_SHARE = 0.25

DEFAULT_BASE_PRICES = {
    SeatClass.ECONOMY: 299.99,
    SeatClass.BUSINESS: 899.99,
    SeatClass.FIRST_CLASS: 1999.99,
}

# kg per seat class
DEFAULT_BAGGAGE_ALLOWANCE = {
    SeatClass.ECONOMY: 23,
    SeatClass.BUSINESS: 32,
    SeatClass.FIRST_CLASS: 46,
}


def class_shares(total_capacity: int) -> Dict[SeatClass, int]:
    """Seats per class for a capacity: 70% economy, 25% business, first class gets the rest."""
    economy = int(total_capacity * ECONOMY_SHARE)
    business = int(total_capacity * BUSINESS_SHARE)
    return {
        SeatClass.ECONOMY: economy,
        SeatClass.BUSINESS: business,
        SeatClass.FIRST_CLASS: total_capacity - economy - business,
    }


class FlightStatusModel(BaseModel):
    """
    Flight status as a tagged variant.

    ``kind`` selects the state; ``delay_minutes`` is present exactly when
    the kind is DELAYED.
    """
    model_config = ConfigDict(frozen=True)

    kind: FlightStatusKind = Field(default=FlightStatusKind.ON_TIME, description="Status tag")
    delay_minutes: Optional[int] = Field(None, ge=1, description="Minutes delayed (DELAYED only)")

    @model_validator(mode="after")
    def check_payload(self) -> "FlightStatusModel":
        if self.kind == FlightStatusKind.DELAYED and self.delay_minutes is None:
            raise ValueError("Delayed status requires delay_minutes")
        if self.kind != FlightStatusKind.DELAYED and self.delay_minutes is not None:
            raise ValueError(f"{self.kind.value} status cannot carry delay_minutes")
        return self

    @classmethod
    def of(cls, kind: FlightStatusKind) -> "FlightStatusModel":
        return cls(kind=kind)

    @classmethod
    def delayed(cls, minutes: int) -> "FlightStatusModel":
        return cls(kind=FlightStatusKind.DELAYED, delay_minutes=minutes)

    @property
    def is_bookable_kind(self) -> bool:
        return self.kind in (FlightStatusKind.ON_TIME, FlightStatusKind.DELAYED)

    def display(self) -> str:
        if self.kind == FlightStatusKind.DELAYED:
            return f"Delayed {self.delay_minutes} min"
        return {
            FlightStatusKind.ON_TIME: "On Time",
            FlightStatusKind.BOARDING: "Boarding",
            FlightStatusKind.DEPARTED: "Departed",
            FlightStatusKind.ARRIVED: "Arrived",
            FlightStatusKind.CANCELLED: "Cancelled",
        }[self.kind]


class SeatAvailabilityModel(BaseModel):
    """Remaining seats per class."""

    economy: int = Field(..., ge=0, description="Economy seats remaining")
    business: int = Field(..., ge=0, description="Business seats remaining")
    first_class: int = Field(..., ge=0, description="First class seats remaining")

    def get(self, seat_class: SeatClass) -> int:
        return getattr(self, seat_class.value)

    def adjust(self, seat_class: SeatClass, delta: int) -> None:
        updated = self.get(seat_class) + delta
        if updated < 0:
            raise ResourceExhaustedError(f"No {seat_class.value.replace('_', ' ')} seats available")
        setattr(self, seat_class.value, updated)

    @property
    def total(self) -> int:
        return self.economy + self.business + self.first_class


class FlightPricingModel(BaseModel):
    """Base fares per class plus the admin-controlled dynamic multiplier."""

    economy: float = Field(default=DEFAULT_BASE_PRICES[SeatClass.ECONOMY], ge=0)
    business: float = Field(default=DEFAULT_BASE_PRICES[SeatClass.BUSINESS], ge=0)
    first_class: float = Field(default=DEFAULT_BASE_PRICES[SeatClass.FIRST_CLASS], ge=0)
    dynamic_multiplier: float = Field(default=1.0, gt=0, description="Per-flight price override factor")

    def base_price(self, seat_class: SeatClass) -> float:
        return getattr(self, seat_class.value)


class FlightModel(BaseModel):
    """
    Complete flight information.

    Seat inventory is mutated by bookings and cancellations, status by
    admin delay/cancel operations and by the status simulator. Flights are
    never deleted, only cancelled.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    flight_number: str = Field(..., max_length=8, description="Flight number")
    airline: str = Field(default="", description="Operating airline name")
    origin: str = Field(..., min_length=3, max_length=3, description="Origin IATA code")
    destination: str = Field(..., min_length=3, max_length=3, description="Destination IATA code")
    departure_time: datetime = Field(..., description="Scheduled departure time")
    arrival_time: datetime = Field(..., description="Scheduled arrival time")
    status: FlightStatusModel = Field(default_factory=FlightStatusModel)
    aircraft_id: UUID = Field(..., description="Assigned aircraft")
    gate: Optional[str] = Field(None, max_length=10, description="Gate assignment")
    seat_availability: SeatAvailabilityModel
    pricing: FlightPricingModel = Field(default_factory=FlightPricingModel)
    total_capacity: int = Field(..., ge=0, description="Seats established at creation")
    baggage_allowance: Dict[SeatClass, int] = Field(
        default_factory=lambda: dict(DEFAULT_BAGGAGE_ALLOWANCE),
        description="Checked baggage allowance in kg per class",
    )

    @model_validator(mode="after")
    def check_capacity(self) -> "FlightModel":
        if self.seat_availability.total > self.total_capacity:
            raise ValueError(
                f"Flight {self.flight_number} has {self.seat_availability.total} seats "
                f"available but a capacity of {self.total_capacity}"
            )
        return self

    @classmethod
    def create(
        cls,
        flight_number: str,
        airline: str,
        origin: str,
        destination: str,
        departure_time: datetime,
        arrival_time: datetime,
        aircraft_id: UUID,
        total_capacity: int,
    ) -> "FlightModel":
        """Create an on-time flight with its full seat inventory."""
        shares = class_shares(total_capacity)
        return cls(
            flight_number=flight_number,
            airline=airline,
            origin=origin,
            destination=destination,
            departure_time=departure_time,
            arrival_time=arrival_time,
            aircraft_id=aircraft_id,
            total_capacity=total_capacity,
            seat_availability=SeatAvailabilityModel(
                economy=shares[SeatClass.ECONOMY],
                business=shares[SeatClass.BUSINESS],
                first_class=shares[SeatClass.FIRST_CLASS],
            ),
        )

    def duration(self) -> timedelta:
        return self.arrival_time - self.departure_time

    def is_available_for_booking(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return self.status.is_bookable_kind and self.departure_time > now

    def get_available_seats(self, seat_class: SeatClass) -> int:
        return self.seat_availability.get(seat_class)

    def get_price(self, seat_class: SeatClass) -> float:
        """Base fare for the class with the dynamic multiplier applied."""
        return self.pricing.base_price(seat_class) * self.pricing.dynamic_multiplier

    def book_seat(self, seat_class: SeatClass, now: Optional[datetime] = None) -> None:
        if not self.is_available_for_booking(now):
            raise InvalidStateTransitionError(
                f"Flight {self.flight_number} is not available for booking"
            )
        self.seat_availability.adjust(seat_class, -1)

    def class_capacity(self, seat_class: SeatClass) -> int:
        return class_shares(self.total_capacity)[seat_class]

    def can_release_seat(self, seat_class: SeatClass) -> bool:
        """A release never lifts a class above its share or the flight above capacity."""
        return (
            self.seat_availability.total < self.total_capacity
            and self.get_available_seats(seat_class) < self.class_capacity(seat_class)
        )

    def release_seat(self, seat_class: SeatClass) -> None:
        if not self.can_release_seat(seat_class):
            raise InvalidStateTransitionError(
                f"Flight {self.flight_number} already has all of its "
                f"{seat_class.value.replace('_', ' ')} seats available"
            )
        self.seat_availability.adjust(seat_class, 1)

    def set_delay(self, minutes: int) -> None:
        """
        Delay the flight or clear the delay.

        A positive delay pushes the arrival time later by that many minutes.
        Clearing (minutes <= 0) resets the status only; arrival is never
        moved earlier again.
        """
        if minutes > 0:
            self.status = FlightStatusModel.delayed(minutes)
            self.arrival_time = self.arrival_time + timedelta(minutes=minutes)
        else:
            self.status = FlightStatusModel.of(FlightStatusKind.ON_TIME)

    def set_gate(self, gate: str) -> None:
        self.gate = gate

    def cancel(self) -> None:
        if self.status.kind in (
            FlightStatusKind.DEPARTED,
            FlightStatusKind.ARRIVED,
            FlightStatusKind.CANCELLED,
        ):
            raise InvalidStateTransitionError(
                f"Flight {self.flight_number} cannot be cancelled while {self.status.display()}"
            )
        self.status = FlightStatusModel.of(FlightStatusKind.CANCELLED)

    def status_display(self) -> str:
        return self.status.display()

    def __str__(self) -> str:
        return (
            f"{self.flight_number} | {self.origin} → {self.destination} | "
            f"{self.departure_time:%H:%M} | {self.status_display()}"
        )
