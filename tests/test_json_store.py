"""
Tests for the JSON document store, integrity checks and sample data.
"""

import json
import os
from datetime import timedelta
from uuid import uuid4

import pytest

from airport_ops.errors import PersistenceError
from airport_ops.models import AdminActionModel, BookingModel, BookingPaymentModel, PassengerModel, SeatClass
from airport_ops.storage.json_store import Dataset, JsonDocumentStore, find_integrity_issues
from airport_ops.storage.sample_data import build_sample_dataset

from conftest import NOW


@pytest.fixture
def dataset():
    return build_sample_dataset(NOW)


class TestJsonDocumentStore:
    """Test per-collection load and save."""

    def test_missing_files_load_empty(self, store):
        assert store.load("flights") == []
        assert store.load_all().is_empty()

    def test_unknown_collection(self, store):
        with pytest.raises(ValueError):
            store.load("pilots")

    def test_save_all_round_trip(self, store, dataset):
        store.save_all(dataset)
        loaded = store.load_all()

        assert [f.flight_number for f in loaded.flights] == [f.flight_number for f in dataset.flights]
        assert loaded.flights[1].status == dataset.flights[1].status
        assert loaded.airports[0].operating_hours == (5, 23)
        assert loaded.aircraft[0].seat_configuration == dataset.aircraft[0].seat_configuration

    def test_files_are_pretty_json_arrays(self, store, dataset):
        path = store.save("airports", dataset.airports)
        text = path.read_text()
        assert text.startswith("[\n")
        assert len(json.loads(text)) == 6

    def test_save_leaves_no_temp_files(self, store, dataset):
        store.save("flights", dataset.flights)
        store.save("flights", dataset.flights[:3])
        assert sorted(os.listdir(store.data_dir)) == ["flights.json"]
        assert len(store.load("flights")) == 3

    def test_audit_log_round_trip(self, store):
        entry = AdminActionModel(
            admin_id=uuid4(),
            action_type="SET_DELAY",
            description="Set delay for flight RIA101",
            timestamp=NOW,
            old_value="On Time",
            new_value="Delayed 45 min",
        )
        store.save_all(Dataset(audit=[entry]))
        loaded = store.load_all()

        assert loaded.audit == [entry]
        assert loaded.is_empty()

    def test_corrupt_file_raises_persistence_error(self, store):
        store.data_dir.mkdir(parents=True)
        store.path_for("bookings").write_text("{not json")
        with pytest.raises(PersistenceError):
            store.load("bookings")

    def test_unwritable_directory(self, tmp_path, dataset):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonDocumentStore(str(blocker / "data"))
        with pytest.raises(PersistenceError):
            store.save("airports", dataset.airports)

    def test_backup_copies_files(self, store, dataset):
        store.save_all(dataset)
        target = store.backup()
        assert target.parent == store.backup_dir
        assert sorted(p.name for p in target.iterdir()) == [
            "aircraft.json",
            "airports.json",
            "audit.json",
            "bookings.json",
            "flights.json",
        ]


class TestIntegrity:
    """Test cross-reference validation."""

    def test_sample_data_is_consistent(self, dataset):
        assert find_integrity_issues(dataset) == []

    def test_dangling_references(self, dataset):
        flight = dataset.flights[0]
        flight.aircraft_id = uuid4()
        flight.destination = "SFO"
        orphan = BookingModel(
            ticket_number="RIA654321",
            flight_id=uuid4(),
            passenger=PassengerModel(first_name="Lost", last_name="Passenger"),
            seat_class=SeatClass.ECONOMY,
            payment=BookingPaymentModel(total_amount=100.0),
        )
        dataset.bookings.append(orphan)

        issues = find_integrity_issues(dataset)

        assert issues == [
            f"Flight RIA101 references non-existent aircraft {flight.aircraft_id}",
            "Flight RIA101 has invalid destination airport: SFO",
            f"Booking RIA654321 references non-existent flight {orphan.flight_id}",
        ]

    def test_store_validates_persisted_data(self, store, dataset):
        dataset.airports = [a for a in dataset.airports if a.code != "LAX"]
        store.save_all(dataset)
        issues = store.validate_integrity()
        assert "Flight RIA101 has invalid origin airport: LAX" in issues


class TestSampleData:
    """Test the generated sample dataset."""

    def test_schedule(self, dataset):
        first, second = dataset.flights[0], dataset.flights[1]
        assert first.departure_time == NOW.replace(hour=6)
        assert second.departure_time - first.departure_time == timedelta(hours=3)
        assert (first.arrival_time - first.departure_time).total_seconds() == 8 * 3600
        assert [f.gate for f in dataset.flights][-1] == "E10"

    def test_statuses_cycle(self, dataset):
        displays = [f.status_display() for f in dataset.flights[:4]]
        assert displays == ["On Time", "Delayed 15 min", "Boarding", "Delayed 30 min"]

    def test_capacity_follows_aircraft(self, dataset):
        by_id = {plane.id: plane for plane in dataset.aircraft}
        for flight in dataset.flights:
            assert flight.total_capacity == by_id[flight.aircraft_id].total_capacity

    def test_empty_dataset(self):
        assert Dataset().is_empty()
