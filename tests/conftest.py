"""
Shared fixtures for the airport operations tests.

Everything time-dependent runs against a fixed clock so transitions and
booking windows are deterministic.
"""

from datetime import datetime, timedelta, timezone

import pytest

from airport_ops.models import AircraftModel, FlightModel, SystemMetricsModel
from airport_ops.services.data_manager import DataManager
from airport_ops.services.pricing_engine import PricingEngine
from airport_ops.storage.json_store import JsonDocumentStore
from airport_ops.storage.sample_data import build_sample_dataset
from airport_ops.utils.config import AirportConfig

# A Monday, 04:00 UTC
NOW = datetime(2026, 3, 2, 4, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def aircraft():
    return AircraftModel.create("N123RIA", "Boeing 737-800", "Boeing", 2020)


@pytest.fixture
def make_flight(aircraft):
    """Build flights on the shared aircraft relative to the fixed clock."""

    def _make(
        flight_number="RIA101",
        origin="LAX",
        destination="JFK",
        departs_in=timedelta(hours=3),
        duration=timedelta(hours=5),
        capacity=None,
    ):
        departure = NOW + departs_in
        return FlightModel.create(
            flight_number=flight_number,
            airline="Regional International Airways",
            origin=origin,
            destination=destination,
            departure_time=departure,
            arrival_time=departure + duration,
            aircraft_id=aircraft.id,
            total_capacity=aircraft.total_capacity if capacity is None else capacity,
        )

    return _make


@pytest.fixture
def flight(make_flight):
    return make_flight()


@pytest.fixture
def metrics():
    return SystemMetricsModel()


@pytest.fixture
def pricing_engine():
    return PricingEngine()


@pytest.fixture
def config(tmp_path):
    return AirportConfig(
        data_dir=str(tmp_path / "data"),
        seed_default_pricing_rules=False,
    )


@pytest.fixture
def store(config):
    return JsonDocumentStore(config.data_dir, config.backup_dir)


@pytest.fixture
def manager(config, store):
    """Data manager loaded with the sample dataset and no pricing rules."""
    data_manager = DataManager(config, store)
    data_manager.load_dataset(build_sample_dataset(NOW))
    return data_manager
