"""
Tests for booking creation, cancellation and the booking lifecycle.
"""

import random
import re
from datetime import timedelta
from uuid import uuid4

import pytest

from airport_ops.errors import (
    InvalidStateTransitionError,
    NotFoundError,
    ResourceExhaustedError,
)
from airport_ops.models import (
    BookingStatus,
    PassengerModel,
    PricingRuleModel,
    SeatClass,
)
from airport_ops.services.booking_manager import BookingManager, TicketNumberGenerator

from conftest import NOW


@pytest.fixture
def passenger():
    return PassengerModel(first_name="Grace", last_name="Hopper", email="grace@example.com")


@pytest.fixture
def booking_manager(flight, pricing_engine, metrics):
    return BookingManager({flight.id: flight}, {}, pricing_engine, metrics)


class TestTicketNumbers:
    """Test ticket number format and uniqueness."""

    def test_format(self):
        ticket = TicketNumberGenerator("RIA").generate({})
        assert re.fullmatch(r"RIA\d{6}", ticket)

    def test_skips_taken_numbers(self):
        first = TicketNumberGenerator("RIA", random.Random(7)).generate({})
        second = TicketNumberGenerator("RIA", random.Random(7)).generate({first: uuid4()})
        assert second != first


class TestCreateBooking:
    """Test booking creation."""

    def test_peak_hour_scenario(self, booking_manager, flight, pricing_engine, passenger, metrics):
        """RIA101 economy departing 07:00 under a 06-09 ×1.3 rule costs 389.987."""
        pricing_engine.add_rule(
            PricingRuleModel(rule_name="Peak Hours Premium", time_period=(6, 9), multiplier=1.3)
        )
        assert flight.departure_time.hour == 7
        seats_before = flight.get_available_seats(SeatClass.ECONOMY)

        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)

        assert booking.payment.total_amount == pytest.approx(389.987)
        assert f"{booking.payment.total_amount:.2f}" == "389.99"
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats_before - 1
        assert flight.get_available_seats(SeatClass.BUSINESS) == 48
        assert booking.status == BookingStatus.CONFIRMED
        assert metrics.total_bookings == 1
        assert metrics.revenue_today == pytest.approx(389.987)

    def test_dynamic_multiplier_on_top_of_rules(self, booking_manager, flight, pricing_engine, passenger):
        flight.pricing.dynamic_multiplier = 2.0
        pricing_engine.add_rule(PricingRuleModel(rule_name="All", multiplier=0.5))
        booking = booking_manager.create(flight.id, passenger, SeatClass.FIRST_CLASS, now=NOW)
        assert booking.payment.total_amount == pytest.approx(1999.99)

    def test_unknown_flight(self, booking_manager, passenger):
        with pytest.raises(NotFoundError):
            booking_manager.create(uuid4(), passenger, SeatClass.ECONOMY, now=NOW)

    def test_departed_flight_not_bookable(self, booking_manager, flight, passenger):
        with pytest.raises(InvalidStateTransitionError):
            booking_manager.create(
                flight.id, passenger, SeatClass.ECONOMY, now=flight.departure_time + timedelta(minutes=1)
            )
        assert booking_manager.bookings == {}

    def test_delayed_flight_still_bookable(self, booking_manager, flight, passenger):
        flight.set_delay(20)
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        assert booking.flight_id == flight.id

    def test_no_seats_means_no_mutation(self, make_flight, pricing_engine, metrics, passenger):
        tiny = make_flight(capacity=1)
        bookings = {}
        manager = BookingManager({tiny.id: tiny}, bookings, pricing_engine, metrics)

        with pytest.raises(ResourceExhaustedError):
            manager.create(tiny.id, passenger, SeatClass.ECONOMY, now=NOW)

        assert tiny.get_available_seats(SeatClass.ECONOMY) == 0
        assert tiny.get_available_seats(SeatClass.FIRST_CLASS) == 1
        assert len(bookings) == 0
        assert metrics.total_bookings == 0
        assert metrics.revenue_today == 0.0


class TestCancelBooking:
    """Test cancellation and seat release."""

    def test_round_trip_restores_one_seat(self, booking_manager, flight, passenger):
        seats = flight.get_available_seats(SeatClass.ECONOMY)
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats - 1

        booking_manager.cancel(booking.ticket_number)
        assert booking.status == BookingStatus.CANCELLED
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats

        with pytest.raises(InvalidStateTransitionError):
            booking_manager.cancel(booking.ticket_number)
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats

    def test_cancel_after_boarding_fails(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.BUSINESS, now=NOW)
        booking_manager.check_in(booking.ticket_number, now=NOW)
        booking_manager.board(booking.ticket_number, now=NOW)
        seats = flight.get_available_seats(SeatClass.BUSINESS)

        with pytest.raises(InvalidStateTransitionError):
            booking_manager.cancel(booking.ticket_number)
        assert booking.status == BookingStatus.BOARDED
        assert flight.get_available_seats(SeatClass.BUSINESS) == seats

    def test_unknown_ticket(self, booking_manager):
        with pytest.raises(NotFoundError):
            booking_manager.cancel("RIA000000")

    def test_booking_without_flight_still_cancels(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        del booking_manager.flights[flight.id]

        cancelled = booking_manager.cancel(booking.ticket_number)
        assert cancelled.status == BookingStatus.CANCELLED

    def test_full_class_still_cancels_without_release(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.FIRST_CLASS, now=NOW)
        flight.seat_availability.first_class = flight.class_capacity(SeatClass.FIRST_CLASS)

        booking_manager.cancel(booking.ticket_number)
        assert booking.status == BookingStatus.CANCELLED
        assert flight.get_available_seats(SeatClass.FIRST_CLASS) == 10


class TestLifecycle:
    """Test check-in, boarding, completion and seat assignment."""

    def test_full_lifecycle(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        booking_manager.assign_seat(booking.ticket_number, "21C")
        booking_manager.check_in(booking.ticket_number, now=NOW)
        booking_manager.board(booking.ticket_number, now=NOW + timedelta(hours=2))
        booking_manager.complete(booking.ticket_number)

        assert booking.status == BookingStatus.COMPLETED
        assert booking.seat_assignment.is_aisle
        assert booking.boarding_time == NOW + timedelta(hours=2)
        assert booking_manager.bookings_for_flight(flight.id) == [booking]

    def test_seat_change_refused_after_boarding(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        booking_manager.check_in(booking.ticket_number, now=NOW)
        booking_manager.board(booking.ticket_number, now=NOW)
        with pytest.raises(InvalidStateTransitionError):
            booking_manager.assign_seat(booking.ticket_number, "1A")

    def test_complete_requires_boarding(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        with pytest.raises(InvalidStateTransitionError):
            booking_manager.complete(booking.ticket_number)

    def test_extras_while_modifiable(self, booking_manager, flight, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        booking_manager.add_baggage(booking.ticket_number, 1)
        booking_manager.add_special_service(booking.ticket_number, "Wheelchair")
        booking_manager.add_special_service(booking.ticket_number, "Wheelchair")
        assert booking.baggage_count == 2
        assert booking.special_services == ["Wheelchair"]

        with pytest.raises(ValueError):
            booking_manager.add_baggage(booking.ticket_number, 0)

        booking_manager.cancel(booking.ticket_number)
        with pytest.raises(InvalidStateTransitionError):
            booking_manager.add_special_service(booking.ticket_number, "Extra legroom")

    def test_reindex_finds_existing_bookings(self, booking_manager, flight, pricing_engine, metrics, passenger):
        booking = booking_manager.create(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        reloaded = BookingManager(
            {flight.id: flight}, dict(booking_manager.bookings), pricing_engine, metrics
        )
        assert reloaded.find_booking(booking.ticket_number) is booking
