"""
Tests for the data manager facade: queries, commands, admin gating,
simulation and persistence.
"""

import json
from datetime import timedelta
from pathlib import Path
from uuid import uuid4

import pytest

from airport_ops.errors import (
    InvalidStateTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from airport_ops.models import (
    AircraftStatus,
    BookingStatus,
    FlightStatusKind,
    PassengerModel,
    SeatClass,
)
from airport_ops.services.data_manager import DataManager
from airport_ops.storage.json_store import JsonDocumentStore

from conftest import NOW


@pytest.fixture
def passenger():
    return PassengerModel(first_name="Alan", last_name="Turing")


class TestQueries:
    """Test look-ups over the sample dataset."""

    def test_sample_dataset_loaded(self, manager):
        assert len(manager.get_flights()) == 10
        assert len(manager.get_aircraft()) == 6
        assert len(manager.get_airports()) == 6
        assert manager.get_bookings() == []
        assert manager.validate_integrity() == []

    def test_find_flight(self, manager):
        flight = manager.find_flight("RIA101")
        assert (flight.origin, flight.destination) == ("LAX", "JFK")
        assert flight.gate == "A1"
        assert manager.get_flight(flight.id) is flight

    def test_missing_entities(self, manager):
        with pytest.raises(NotFoundError):
            manager.find_flight("XX999")
        with pytest.raises(NotFoundError):
            manager.get_airport("ZZZ")
        with pytest.raises(NotFoundError):
            manager.find_aircraft("N000XX")
        with pytest.raises(NotFoundError):
            manager.find_booking("RIA000000")

    def test_search_flights(self, manager):
        from_lax = manager.search_flights(origin="LAX")
        assert sorted(f.flight_number for f in from_lax) == ["RIA101", "RIA701"]
        boarding = manager.search_flights(status=FlightStatusKind.BOARDING)
        assert all(f.status.kind == FlightStatusKind.BOARDING for f in boarding)

    def test_search_flights_by_departure_date(self, manager):
        next_day = (NOW + timedelta(days=1)).date()
        today = manager.search_flights(departure_date=NOW.date())
        tomorrow = manager.search_flights(departure_date=next_day)
        assert len(today) == 6
        assert sorted(f.flight_number for f in tomorrow) == ["RIA001", "RIA701", "RIA801", "RIA901"]

        lax_tomorrow = manager.search_flights(origin="LAX", departure_date=next_day)
        assert [f.flight_number for f in lax_tomorrow] == ["RIA701"]

    def test_departures_and_arrivals(self, manager):
        assert sorted(f.flight_number for f in manager.get_departures("LAX")) == ["RIA101", "RIA701"]
        assert sorted(f.flight_number for f in manager.get_arrivals("LAX")) == ["RIA001", "RIA601"]
        assert manager.get_departures("ZZZ") == []

    def test_available_aircraft(self, manager):
        assert len(manager.get_available_aircraft()) == 6
        manager.find_aircraft("N789RIA").set_status(AircraftStatus.MAINTENANCE)
        available = {plane.registration for plane in manager.get_available_aircraft()}
        assert len(available) == 5
        assert "N789RIA" not in available

    def test_aircraft_for_flight(self, manager):
        flight = manager.find_flight("RIA101")
        assert manager.get_aircraft_for_flight(flight.id).registration == "N123RIA"
        with pytest.raises(NotFoundError):
            manager.get_aircraft_for_flight(uuid4())

    def test_available_flights_exclude_boarding(self, manager):
        available = manager.get_available_flights(now=NOW)
        assert "RIA301" not in {f.flight_number for f in available}
        assert "RIA101" in {f.flight_number for f in available}

    def test_flight_statistics(self, manager):
        total, on_time, delayed, cancelled = manager.get_flight_statistics()
        assert total == 10
        assert on_time == 3
        assert delayed == 5
        assert cancelled == 0


class TestBookingCommands:
    """Test booking operations through the facade."""

    def test_create_and_cancel(self, manager, passenger):
        flight = manager.find_flight("RIA101")
        seats = flight.get_available_seats(SeatClass.ECONOMY)

        booking = manager.create_booking(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        assert manager.find_booking(booking.ticket_number) is booking
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats - 1
        assert manager.bookings_for_flight(flight.id) == [booking]

        manager.cancel_booking(booking.ticket_number)
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats
        assert manager.get_booking_statistics() == (1, 0, 1)

    def test_price_quote_without_rules(self, manager):
        flight = manager.find_flight("RIA101")
        assert manager.price_quote(flight.id, SeatClass.ECONOMY) == pytest.approx(299.99)

    def test_boarding_flight_not_bookable(self, manager, passenger):
        flight = manager.find_flight("RIA301")
        with pytest.raises(InvalidStateTransitionError):
            manager.create_booking(flight.id, passenger, SeatClass.ECONOMY, now=NOW)
        assert manager.get_bookings() == []

    def test_lifecycle(self, manager, passenger):
        flight = manager.find_flight("RIA201")
        booking = manager.create_booking(flight.id, passenger, SeatClass.BUSINESS, now=NOW)
        manager.assign_seat(booking.ticket_number, "2D")
        manager.check_in(booking.ticket_number, now=NOW)
        manager.board(booking.ticket_number, now=NOW)
        manager.complete_booking(booking.ticket_number)
        assert booking.status == BookingStatus.COMPLETED


class TestAdminCommands:
    """Test privileged operations and their audit entries."""

    def test_viewer_cannot_delay(self, manager):
        manager.authenticate("viewer", "viewer123")
        flight = manager.find_flight("RIA101")
        log_size = len(manager.admin.audit_log)

        with pytest.raises(PermissionDeniedError):
            manager.set_flight_delay("RIA101", 30)

        assert flight.status.kind == FlightStatusKind.ON_TIME
        assert len(manager.admin.audit_log) == log_size

    def test_unauthenticated_delay(self, manager):
        with pytest.raises(PermissionDeniedError):
            manager.set_flight_delay("RIA101", 30)
        assert manager.admin.audit_log == ()

    def test_set_delay_audited(self, manager):
        manager.authenticate("flight_mgr", "flight123")
        flight = manager.find_flight("RIA101")
        arrival = flight.arrival_time

        manager.set_flight_delay("RIA101", 30)
        assert flight.status_display() == "Delayed 30 min"
        assert flight.arrival_time == arrival + timedelta(minutes=30)

        entry = manager.recent_actions(1)[0]
        assert entry.action_type == "SET_DELAY"
        assert entry.affected_entity_id == flight.id
        assert (entry.old_value, entry.new_value) == ("On Time", "Delayed 30 min")

        manager.set_flight_delay("RIA101", 0)
        assert flight.status.kind == FlightStatusKind.ON_TIME
        assert flight.arrival_time == arrival + timedelta(minutes=30)

    def test_dynamic_pricing_requires_finance_role(self, manager):
        manager.authenticate("flight_mgr", "flight123")
        with pytest.raises(PermissionDeniedError):
            manager.set_dynamic_pricing("RIA101", 1.5)
        manager.logout()

        manager.authenticate("finance_mgr", "finance123")
        flight = manager.set_dynamic_pricing("RIA101", 1.5)
        assert flight.get_price(SeatClass.ECONOMY) == pytest.approx(299.99 * 1.5)
        entry = manager.recent_actions(1)[0]
        assert (entry.action_type, entry.old_value, entry.new_value) == ("SET_PRICING", "1.00", "1.50")

    def test_dynamic_pricing_rejects_non_positive(self, manager):
        manager.authenticate("admin", "admin123")
        with pytest.raises(ValueError):
            manager.set_dynamic_pricing("RIA101", 0)
        assert manager.find_flight("RIA101").pricing.dynamic_multiplier == 1.0

    def test_cancel_flight_and_gate(self, manager, passenger):
        flight = manager.find_flight("RIA101")
        booking = manager.create_booking(flight.id, passenger, SeatClass.ECONOMY, now=NOW)

        manager.authenticate("admin", "admin123")
        manager.assign_gate("RIA101", "B12")
        manager.cancel_flight("RIA101")

        assert flight.gate == "B12"
        assert flight.status.kind == FlightStatusKind.CANCELLED
        assert booking.status == BookingStatus.CONFIRMED
        assert [a.action_type for a in manager.recent_actions(2)] == ["CANCEL_FLIGHT", "SET_GATE"]
        assert manager.get_metrics().cancelled_flights == 1

    def test_aircraft_status_requires_aircraft_role(self, manager):
        manager.authenticate("flight_mgr", "flight123")
        with pytest.raises(PermissionDeniedError):
            manager.set_aircraft_status("N123RIA", AircraftStatus.MAINTENANCE)
        manager.logout()

        manager.authenticate("aircraft_mgr", "aircraft123")
        plane = manager.set_aircraft_status("N123RIA", AircraftStatus.MAINTENANCE)
        assert plane.status == AircraftStatus.MAINTENANCE
        assert manager.get_metrics().aircraft_in_maintenance == 1


class TestPeakHourScenario:
    """Booking price with a single peak-hour rule."""

    def test_ria101_peak_price(self, manager, passenger):
        manager.authenticate("finance_mgr", "finance123")
        manager.add_pricing_rule("Peak Hours Premium", 1.3, time_period=(6, 9))
        flight = manager.find_flight("RIA101")
        flight.departure_time = flight.departure_time.replace(hour=7)
        flight.arrival_time = flight.departure_time + timedelta(hours=8)
        seats = flight.get_available_seats(SeatClass.ECONOMY)

        booking = manager.create_booking(flight.id, passenger, SeatClass.ECONOMY, now=NOW)

        assert booking.payment.total_amount == pytest.approx(389.987)
        assert flight.get_available_seats(SeatClass.ECONOMY) == seats - 1


class TestAsyncOperations:
    """Test the coroutine entry points."""

    @pytest.mark.asyncio
    async def test_initialize_seeds_and_persists(self, config, store):
        manager = DataManager(config, store)
        await manager.initialize(now=NOW)

        assert manager.initialized
        assert len(manager.flights) == 10
        assert store.path_for("flights").exists()
        assert len(json.loads(store.path_for("aircraft").read_text())) == 6

    @pytest.mark.asyncio
    async def test_default_rules_seeded(self, config, store):
        seeded = config.model_copy(update={"seed_default_pricing_rules": True})
        manager = await DataManager.create(seeded, store)
        names = [rule.rule_name for rule in manager.get_pricing_rules()]
        assert names == ["Peak Hours Premium", "Weekend Discount", "Transatlantic Premium"]

    @pytest.mark.asyncio
    async def test_no_seed_starts_empty(self, config, store):
        empty = config.model_copy(update={"seed_sample_data": False})
        manager = await DataManager.create(empty, store)
        assert manager.get_flights() == []
        assert not store.path_for("flights").exists()

    @pytest.mark.asyncio
    async def test_save_and_reload(self, manager, config, passenger):
        flight = manager.find_flight("RIA101")
        booking = manager.create_booking(flight.id, passenger, SeatClass.FIRST_CLASS, now=NOW)
        await manager.save_all_data()

        reloaded = await DataManager.create(config, JsonDocumentStore(config.data_dir, config.backup_dir))
        found = reloaded.find_booking(booking.ticket_number)
        assert found.passenger.full_name() == "Alan Turing"
        assert reloaded.find_flight("RIA101").get_available_seats(SeatClass.FIRST_CLASS) == (
            flight.get_available_seats(SeatClass.FIRST_CLASS)
        )
        assert reloaded.find_flight("RIA201").status == manager.find_flight("RIA201").status

    @pytest.mark.asyncio
    async def test_update_simulation(self, manager):
        ria101 = manager.find_flight("RIA101")
        tick = ria101.departure_time - timedelta(minutes=20)

        result = await manager.update_simulation(now=tick)
        assert not result.skipped
        assert ria101.status.kind == FlightStatusKind.BOARDING
        assert manager.get_aircraft_by_id(ria101.aircraft_id).status == AircraftStatus.IN_FLIGHT

        again = await manager.update_simulation(now=tick + timedelta(seconds=30))
        assert again.skipped

    @pytest.mark.asyncio
    async def test_audit_log_survives_reload(self, manager, config):
        manager.authenticate("flight_mgr", "flight123", now=NOW)
        manager.set_flight_delay("RIA101", 45)
        manager.logout()
        await manager.save_all_data()

        reloaded = await DataManager.create(config, JsonDocumentStore(config.data_dir, config.backup_dir))
        actions = [action.action_type for action in reloaded.recent_actions()]
        assert actions == ["LOGOUT", "SET_DELAY", "LOGIN"]

        flight_mgr = reloaded.admin.get_account("flight_mgr")
        assert all(action.admin_id == flight_mgr.id for action in reloaded.recent_actions())

    @pytest.mark.asyncio
    async def test_create_backup(self, manager, config):
        await manager.save_all_data()
        target = await manager.create_backup()
        assert target.parent == Path(config.backup_dir)
        assert (target / "flights.json").exists()
