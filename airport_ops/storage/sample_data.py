"""
Sample dataset used on first start when no data has been persisted yet.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ..models.aircraft import AircraftModel
from ..models.airport import AirportModel
from ..models.flight import FlightModel, FlightStatusModel
from ..models.enums import FlightStatusKind
from ..utils.helpers import utc_now
from .json_store import Dataset

logger = logging.getLogger(__name__)

AIRLINE_NAME = "Regional International Airways"

# code, icao, name, city, country, timezone, latitude, longitude, elevation
SAMPLE_AIRPORTS = [
    ("LAX", "KLAX", "Los Angeles International Airport", "Los Angeles", "United States",
     "America/Los_Angeles", 33.9425, -118.4081, 38),
    ("JFK", "KJFK", "John F. Kennedy International Airport", "New York", "United States",
     "America/New_York", 40.6413, -73.7781, 4),
    ("LHR", "EGLL", "London Heathrow Airport", "London", "United Kingdom",
     "Europe/London", 51.4700, -0.4543, 25),
    ("CDG", "LFPG", "Charles de Gaulle Airport", "Paris", "France",
     "Europe/Paris", 49.0097, 2.5479, 119),
    ("NRT", "RJAA", "Narita International Airport", "Tokyo", "Japan",
     "Asia/Tokyo", 35.7653, 140.3856, 43),
    ("DXB", "OMDB", "Dubai International Airport", "Dubai", "United Arab Emirates",
     "Asia/Dubai", 25.2532, 55.3657, 20),
]

# registration, model, manufacturer, year
SAMPLE_AIRCRAFT = [
    ("N123RIA", "Boeing 737-800", "Boeing", 2020),
    ("N456RIA", "Airbus A320", "Airbus", 2019),
    ("N789RIA", "Boeing 777-300", "Boeing", 2021),
    ("N101RIA", "Airbus A380", "Airbus", 2018),
    ("N202RIA", "Boeing 737-800", "Boeing", 2022),
    ("N303RIA", "Airbus A320", "Airbus", 2023),
]

# flight number, origin, destination
SAMPLE_ROUTES = [
    ("RIA101", "LAX", "JFK"),
    ("RIA201", "JFK", "LHR"),
    ("RIA301", "LHR", "CDG"),
    ("RIA401", "CDG", "NRT"),
    ("RIA501", "NRT", "DXB"),
    ("RIA601", "DXB", "LAX"),
    ("RIA701", "LAX", "CDG"),
    ("RIA801", "JFK", "NRT"),
    ("RIA901", "LHR", "DXB"),
    ("RIA001", "CDG", "LAX"),
]

SAMPLE_GATES = ["A1", "A2", "B3", "B4", "C5", "C6", "D7", "D8", "E9", "E10"]

FIRST_DEPARTURE_OFFSET = timedelta(hours=2)
DEPARTURE_SPACING = timedelta(hours=3)


def _sample_status(index: int) -> FlightStatusModel:
    return [
        FlightStatusModel.of(FlightStatusKind.ON_TIME),
        FlightStatusModel.delayed(15),
        FlightStatusModel.of(FlightStatusKind.BOARDING),
        FlightStatusModel.delayed(30),
    ][index % 4]


def build_sample_airports() -> List[AirportModel]:
    return [AirportModel.create(*row) for row in SAMPLE_AIRPORTS]


def build_sample_aircraft() -> List[AircraftModel]:
    return [AircraftModel.create(*row) for row in SAMPLE_AIRCRAFT]


def build_sample_flights(aircraft: List[AircraftModel], now: datetime) -> List[FlightModel]:
    flights = []
    for index, (flight_number, origin, destination) in enumerate(SAMPLE_ROUTES):
        plane = aircraft[index % len(aircraft)]
        departure = now + FIRST_DEPARTURE_OFFSET + DEPARTURE_SPACING * index
        flight = FlightModel.create(
            flight_number=flight_number,
            airline=AIRLINE_NAME,
            origin=origin,
            destination=destination,
            departure_time=departure,
            arrival_time=departure + timedelta(hours=8 + index % 4),
            aircraft_id=plane.id,
            total_capacity=plane.total_capacity,
        )
        flight.status = _sample_status(index)
        flight.set_gate(SAMPLE_GATES[index])
        flights.append(flight)
    return flights


def build_sample_dataset(now: Optional[datetime] = None) -> Dataset:
    """Six airports, six aircraft and ten flights relative to ``now``."""
    now = now or utc_now()
    aircraft = build_sample_aircraft()
    dataset = Dataset(
        airports=build_sample_airports(),
        aircraft=aircraft,
        flights=build_sample_flights(aircraft, now),
    )
    logger.info(
        f"Generated sample data: {len(dataset.airports)} airports, "
        f"{len(dataset.aircraft)} aircraft, {len(dataset.flights)} flights"
    )
    return dataset
