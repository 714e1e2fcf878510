"""
Booking state machine and seat inventory service.

Every operation validates the whole request before touching state, so a
failure leaves the flight's seat counters, the booking collection and the
metrics exactly as they were.
"""

import logging
import random
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from ..errors import InvalidStateTransitionError, NotFoundError, ResourceExhaustedError
from ..models.admin import SystemMetricsModel
from ..models.enums import SeatClass
from ..models.flight import FlightModel
from ..models.passenger import BookingModel, BookingPaymentModel, PassengerModel
from ..utils.helpers import utc_now
from .pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

TICKET_DIGITS = 6


class TicketNumberGenerator:
    """Airline prefix followed by a fixed-width random number, unique per dataset."""

    def __init__(self, prefix: str = "RIA", rng: Optional[random.Random] = None):
        self.prefix = prefix
        self._rng = rng or random.Random()

    def generate(self, taken: Dict[str, UUID]) -> str:
        low = 10 ** (TICKET_DIGITS - 1)
        high = 10 ** TICKET_DIGITS - 1
        while True:
            ticket = f"{self.prefix}{self._rng.randint(low, high)}"
            if ticket not in taken:
                return ticket


class BookingManager:
    """
    Creates bookings and drives them through their lifecycle.

    The manager works directly on the collections owned by the data manager:
    ``flights`` and ``bookings`` are keyed by id, and a ticket index maps
    ticket numbers to booking ids.
    """

    def __init__(
        self,
        flights: Dict[UUID, FlightModel],
        bookings: Dict[UUID, BookingModel],
        pricing_engine: PricingEngine,
        metrics: SystemMetricsModel,
        ticket_prefix: str = "RIA",
        currency: str = "USD",
        payment_method: str = "Credit Card",
        ticket_generator: Optional[TicketNumberGenerator] = None,
    ):
        self.flights = flights
        self.bookings = bookings
        self.pricing_engine = pricing_engine
        self.metrics = metrics
        self.currency = currency
        self.payment_method = payment_method
        self.ticket_generator = ticket_generator or TicketNumberGenerator(ticket_prefix)
        self._tickets: Dict[str, UUID] = {}
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the ticket index after the booking collection is replaced."""
        self._tickets = {booking.ticket_number: booking.id for booking in self.bookings.values()}

    def _flight(self, flight_id: UUID) -> FlightModel:
        flight = self.flights.get(flight_id)
        if flight is None:
            raise NotFoundError("Flight", flight_id)
        return flight

    def find_booking(self, ticket_number: str) -> BookingModel:
        booking_id = self._tickets.get(ticket_number)
        if booking_id is None:
            raise NotFoundError("Booking", ticket_number)
        return self.bookings[booking_id]

    def bookings_for_flight(self, flight_id: UUID) -> List[BookingModel]:
        return [booking for booking in self.bookings.values() if booking.flight_id == flight_id]

    def quote(self, flight: FlightModel, seat_class: SeatClass) -> float:
        """Final fare: base price, dynamic multiplier, then every matching pricing rule."""
        rules_multiplier = self.pricing_engine.applicable_multiplier(
            flight.origin, flight.destination, flight.departure_time.hour
        )
        return flight.get_price(seat_class) * rules_multiplier

    def create(
        self,
        flight_id: UUID,
        passenger: PassengerModel,
        seat_class: SeatClass,
        now: Optional[datetime] = None,
    ) -> BookingModel:
        now = now or utc_now()
        flight = self._flight(flight_id)

        if not flight.is_available_for_booking(now):
            raise InvalidStateTransitionError(
                f"Flight {flight.flight_number} is not available for booking"
            )
        if flight.get_available_seats(seat_class) == 0:
            raise ResourceExhaustedError(
                f"No {seat_class.value.replace('_', ' ')} seats available on {flight.flight_number}"
            )

        price = self.quote(flight, seat_class)
        booking = BookingModel(
            ticket_number=self.ticket_generator.generate(self._tickets),
            flight_id=flight.id,
            passenger=passenger,
            seat_class=seat_class,
            booking_date=now,
            payment=BookingPaymentModel(
                total_amount=price,
                currency=self.currency,
                payment_method=self.payment_method,
                payment_date=now,
            ),
        )

        flight.book_seat(seat_class, now)
        self.bookings[booking.id] = booking
        self._tickets[booking.ticket_number] = booking.id
        self.metrics.record_booking(len(self.bookings), price)

        logger.info(
            f"Booking {booking.ticket_number} created on {flight.flight_number} "
            f"({seat_class.value}) for ${price:.2f}"
        )
        return booking

    def cancel(self, ticket_number: str) -> BookingModel:
        """
        Cancel a booking and return its seat to the flight, whenever that happens.

        Only a missing ticket or a boarded/completed booking refuses the
        cancellation. A booking whose flight is gone, or whose class is
        already back at its full share, is still cancelled without a seat
        release.
        """
        booking = self.find_booking(ticket_number)
        booking.cancel()

        flight = self.flights.get(booking.flight_id)
        if flight is None:
            logger.warning(
                f"Booking {ticket_number} cancelled but flight {booking.flight_id} no longer exists"
            )
        elif not flight.can_release_seat(booking.seat_class):
            logger.warning(
                f"Booking {ticket_number} cancelled but {flight.flight_number} has no "
                f"{booking.seat_class.value} seat to return"
            )
        else:
            flight.release_seat(booking.seat_class)
            logger.info(f"Booking {ticket_number} cancelled, seat returned to {flight.flight_number}")
        return booking

    def check_in(self, ticket_number: str, now: Optional[datetime] = None) -> BookingModel:
        booking = self.find_booking(ticket_number)
        booking.check_in(now)
        logger.info(f"Booking {ticket_number} checked in")
        return booking

    def board(self, ticket_number: str, now: Optional[datetime] = None) -> BookingModel:
        booking = self.find_booking(ticket_number)
        booking.board(now)
        logger.info(f"Booking {ticket_number} boarded")
        return booking

    def complete(self, ticket_number: str) -> BookingModel:
        booking = self.find_booking(ticket_number)
        booking.complete()
        return booking

    def _modifiable(self, ticket_number: str) -> BookingModel:
        booking = self.find_booking(ticket_number)
        if not booking.can_be_modified():
            raise InvalidStateTransitionError(
                f"Booking {ticket_number} can no longer be modified ({booking.status_display()})"
            )
        return booking

    def assign_seat(self, ticket_number: str, seat_number: str) -> BookingModel:
        booking = self._modifiable(ticket_number)
        booking.assign_seat(seat_number)
        return booking

    def add_baggage(self, ticket_number: str, count: int) -> BookingModel:
        if count < 1:
            raise ValueError("Baggage count must be at least 1")
        booking = self._modifiable(ticket_number)
        booking.add_baggage(count)
        logger.info(f"Booking {ticket_number} now has {booking.baggage_count} bag(s)")
        return booking

    def add_special_service(self, ticket_number: str, service: str) -> BookingModel:
        booking = self._modifiable(ticket_number)
        booking.add_special_service(service)
        return booking
