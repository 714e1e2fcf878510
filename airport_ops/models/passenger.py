"""
Passenger and booking-related Pydantic models for the airport operations application.

This module contains models for passenger information, seat assignments,
payments and bookings. BookingModel owns the booking state machine:

    CONFIRMED -> CHECKED_IN -> BOARDED -> COMPLETED
    CONFIRMED | CHECKED_IN -> CANCELLED
"""

import re
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict

from .enums import BookingStatus, PassengerType, SeatClass
from ..errors import InvalidStateTransitionError
from ..utils.helpers import utc_now

EMERGENCY_EXIT_ROWS = range(12, 16)

STATUS_DISPLAY = {
    BookingStatus.CONFIRMED: "Confirmed",
    BookingStatus.CHECKED_IN: "Checked In",
    BookingStatus.BOARDED: "Boarded",
    BookingStatus.COMPLETED: "Completed",
    BookingStatus.CANCELLED: "Cancelled",
    BookingStatus.NO_SHOW: "No Show",
}


class PassengerModel(BaseModel):
    """
    Passenger information model with validation.

    Contains personal information and identification details
    for passengers in the airport system.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    first_name: str = Field(..., min_length=1, max_length=100, description="First name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name")
    email: str = Field(default="", description="Contact email")
    phone: str = Field(default="", description="Contact phone")
    passport_number: Optional[str] = Field(None, max_length=9, description="Passport number")
    date_of_birth: str = Field(default="", description="Date of birth, YYYY-MM-DD")
    passenger_type: PassengerType = PassengerType.ADULT
    special_requirements: List[str] = Field(
        default_factory=list,
        description="Special requirements (meals, accessibility, etc.)",
    )

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def add_special_requirement(self, requirement: str) -> None:
        if requirement not in self.special_requirements:
            self.special_requirements.append(requirement)

    def set_passport(self, passport_number: str) -> None:
        self.passport_number = passport_number


class SeatAssignmentModel(BaseModel):
    """A concrete seat and its characteristics."""

    seat_number: str = Field(..., max_length=4, description="Seat code (e.g., '12A')")
    seat_class: SeatClass
    is_window: bool = False
    is_aisle: bool = False
    is_emergency_exit: bool = False

    @classmethod
    def for_seat(cls, seat_number: str, seat_class: SeatClass) -> "SeatAssignmentModel":
        match = re.match(r"\d+", seat_number)
        row = int(match.group()) if match else 1
        return cls(
            seat_number=seat_number,
            seat_class=seat_class,
            is_window=seat_number.endswith(("A", "F")),
            is_aisle=seat_number.endswith(("C", "D")),
            is_emergency_exit=row in EMERGENCY_EXIT_ROWS,
        )

    def seat_type(self) -> str:
        if self.is_window:
            types = ["Window"]
        elif self.is_aisle:
            types = ["Aisle"]
        else:
            types = ["Middle"]
        if self.is_emergency_exit:
            types.append("Emergency Exit")
        return " + ".join(types)


class BookingPaymentModel(BaseModel):
    """Payment captured at booking time."""

    total_amount: float = Field(..., ge=0, description="Amount charged")
    currency: str = Field(default="USD", max_length=3)
    payment_method: str = Field(default="Credit Card")
    transaction_id: str = Field(default_factory=lambda: str(uuid4()))
    payment_date: datetime = Field(default_factory=utc_now)


class BookingModel(BaseModel):
    """
    Flight booking model with comprehensive booking information.

    The referenced flight is looked up by id, never embedded.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    ticket_number: str = Field(..., description="Human-readable ticket number")
    flight_id: UUID = Field(..., description="Associated flight ID")
    passenger: PassengerModel
    seat_assignment: Optional[SeatAssignmentModel] = None
    seat_class: SeatClass
    booking_date: datetime = Field(default_factory=utc_now)
    status: BookingStatus = BookingStatus.CONFIRMED
    payment: BookingPaymentModel
    baggage_count: int = Field(default=1, ge=0)
    special_services: List[str] = Field(default_factory=list)
    check_in_time: Optional[datetime] = None
    boarding_time: Optional[datetime] = None

    def ensure_cancellable(self) -> None:
        """Raise unless cancel() would succeed."""
        if self.status in (BookingStatus.BOARDED, BookingStatus.COMPLETED):
            raise InvalidStateTransitionError(
                "Cannot cancel - flight already boarded or completed"
            )
        if self.status not in (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN):
            raise InvalidStateTransitionError("Booking already cancelled or invalid status")

    def cancel(self) -> None:
        self.ensure_cancellable()
        self.status = BookingStatus.CANCELLED

    def check_in(self, now: Optional[datetime] = None) -> None:
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidStateTransitionError(
                "Cannot check in - booking not in confirmed status"
            )
        self.status = BookingStatus.CHECKED_IN
        self.check_in_time = now or utc_now()

    def board(self, now: Optional[datetime] = None) -> None:
        if self.status != BookingStatus.CHECKED_IN:
            raise InvalidStateTransitionError("Cannot board - must be checked in first")
        self.status = BookingStatus.BOARDED
        self.boarding_time = now or utc_now()

    def complete(self) -> None:
        if self.status != BookingStatus.BOARDED:
            raise InvalidStateTransitionError("Cannot complete - passenger has not boarded")
        self.status = BookingStatus.COMPLETED

    def can_be_modified(self) -> bool:
        return self.status in (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)

    def assign_seat(self, seat_number: str) -> None:
        self.seat_assignment = SeatAssignmentModel.for_seat(seat_number, self.seat_class)

    def add_baggage(self, count: int) -> None:
        self.baggage_count += count

    def add_special_service(self, service: str) -> None:
        if service not in self.special_services:
            self.special_services.append(service)

    def status_display(self) -> str:
        return STATUS_DISPLAY[self.status]

    def ticket_summary(self) -> str:
        if self.seat_assignment:
            seat_info = f"Seat: {self.seat_assignment.seat_number} ({self.seat_assignment.seat_type()})"
        else:
            seat_info = "Seat: Not assigned"
        return (
            f"Ticket: {self.ticket_number} | Passenger: {self.passenger.full_name()} | "
            f"Class: {self.seat_class.value} | {seat_info} | "
            f"Status: {self.status_display()} | Amount: ${self.payment.total_amount:.2f}"
        )

    def __str__(self) -> str:
        return self.ticket_summary()
