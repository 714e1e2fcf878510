"""
Airport-related Pydantic models for the airport operations application.

Airports are static reference data: the simulator never mutates them.
"""

from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict

from .enums import AirportSize
from ..utils.helpers import calculate_distance

HUB_CODES = {"LAX", "JFK", "LHR", "CDG", "DXB", "ATL", "ORD", "DFW"}
LARGE_CODES = {"SFO", "MIA", "BOS", "SEA", "DEN", "LAS", "PHX", "IAH"}
MEDIUM_CODES = {"AUS", "SAN", "MSP", "DTW", "PHL", "CLT", "BWI", "MDW"}

ANNUAL_PASSENGERS = {
    AirportSize.SMALL: 500_000,
    AirportSize.MEDIUM: 5_000_000,
    AirportSize.LARGE: 25_000_000,
    AirportSize.HUB: 80_000_000,
}

DEFAULT_SERVICES = [
    "Car Rental",
    "Taxi Service",
    "Parking",
    "Dining",
    "Shopping",
    "WiFi",
    "ATM",
    "Lost & Found",
]


class CoordinatesModel(BaseModel):
    """Geographic position in decimal degrees."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class TerminalModel(BaseModel):
    """Passenger terminal with its gates."""

    id: str
    name: str
    gates: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    is_international: bool = False


class RunwayModel(BaseModel):
    """Runway dimensions and state."""

    id: str = Field(..., description="Runway designator (e.g., '07L/25R')")
    length_meters: int = Field(..., ge=0)
    width_meters: int = Field(..., ge=0)
    surface_type: str = Field(default="Asphalt")
    is_active: bool = True


def _gates(prefix: str, count: int) -> List[str]:
    return [f"{prefix}{i}" for i in range(1, count + 1)]


def _terminals_for(size: AirportSize) -> List[TerminalModel]:
    if size == AirportSize.HUB:
        return [
            TerminalModel(id="T1", name="Terminal 1 - International", gates=_gates("A", 30),
                          amenities=["Duty Free", "Lounges", "Restaurants"], is_international=True),
            TerminalModel(id="T2", name="Terminal 2 - Domestic", gates=_gates("B", 25),
                          amenities=["Fast Food", "Shops", "Business Center"]),
            TerminalModel(id="T3", name="Terminal 3 - Mixed", gates=_gates("C", 20),
                          amenities=["Restaurants", "Shopping"], is_international=True),
        ]
    if size == AirportSize.LARGE:
        return [
            TerminalModel(id="T1", name="Terminal 1", gates=_gates("A", 20),
                          amenities=["Restaurants", "Shops", "Lounges"], is_international=True),
            TerminalModel(id="T2", name="Terminal 2", gates=_gates("B", 15),
                          amenities=["Fast Food", "Shopping"]),
        ]
    if size == AirportSize.MEDIUM:
        return [
            TerminalModel(id="T1", name="Main Terminal", gates=_gates("A", 12),
                          amenities=["Restaurants", "Shops"], is_international=True),
        ]
    return [
        TerminalModel(id="T1", name="Terminal", gates=_gates("A", 6),
                      amenities=["Café", "Gift Shop"]),
    ]


def _runways_for(size: AirportSize) -> List[RunwayModel]:
    if size == AirportSize.HUB:
        return [
            RunwayModel(id="07L/25R", length_meters=4000, width_meters=60, surface_type="Concrete"),
            RunwayModel(id="07R/25L", length_meters=3800, width_meters=60, surface_type="Concrete"),
            RunwayModel(id="06L/24R", length_meters=3500, width_meters=45, surface_type="Asphalt"),
        ]
    if size == AirportSize.LARGE:
        return [
            RunwayModel(id="09/27", length_meters=3500, width_meters=45, surface_type="Concrete"),
            RunwayModel(id="04/22", length_meters=3200, width_meters=45, surface_type="Asphalt"),
        ]
    if size == AirportSize.MEDIUM:
        return [RunwayModel(id="12/30", length_meters=2800, width_meters=45)]
    return [RunwayModel(id="18/36", length_meters=2000, width_meters=30)]


def classify_airport(code: str) -> AirportSize:
    """Size class for well-known airport codes; anything else is Small."""
    if code in HUB_CODES:
        return AirportSize.HUB
    if code in LARGE_CODES:
        return AirportSize.LARGE
    if code in MEDIUM_CODES:
        return AirportSize.MEDIUM
    return AirportSize.SMALL


class AirportModel(BaseModel):
    """Airport information model."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(default_factory=uuid4)
    code: str = Field(..., min_length=3, max_length=3, description="IATA airport code")
    icao_code: str = Field(..., max_length=4, description="ICAO airport code")
    name: str = Field(..., description="Airport name")
    city: str
    country: str
    timezone: str = Field(..., description="IANA timezone (e.g., 'America/Los_Angeles')")
    coordinates: CoordinatesModel
    elevation_meters: int = 0
    airport_size: AirportSize = AirportSize.SMALL
    terminals: List[TerminalModel] = Field(default_factory=list)
    runways: List[RunwayModel] = Field(default_factory=list)
    annual_passengers: int = Field(default=0, ge=0)
    cargo_capacity_tonnes: int = Field(default=100_000, ge=0)
    operating_hours: Tuple[int, int] = Field(default=(5, 23), description="(start_hour, end_hour), 24h")
    services: List[str] = Field(default_factory=list)
    is_international: bool = True
    customs_available: bool = True

    @classmethod
    def create(
        cls,
        code: str,
        icao_code: str,
        name: str,
        city: str,
        country: str,
        timezone: str,
        latitude: float,
        longitude: float,
        elevation_meters: int,
    ) -> "AirportModel":
        """Create an airport with infrastructure generated from its size class."""
        size = classify_airport(code)
        return cls(
            code=code,
            icao_code=icao_code,
            name=name,
            city=city,
            country=country,
            timezone=timezone,
            coordinates=CoordinatesModel(latitude=latitude, longitude=longitude),
            elevation_meters=elevation_meters,
            airport_size=size,
            terminals=_terminals_for(size),
            runways=_runways_for(size),
            annual_passengers=ANNUAL_PASSENGERS[size],
            services=list(DEFAULT_SERVICES),
        )

    def all_gates(self) -> List[str]:
        return [gate for terminal in self.terminals for gate in terminal.gates]

    def find_available_gate(self) -> Optional[str]:
        # TODO: check gate usage against scheduled flights instead of taking the first gate
        if not self.terminals or not self.terminals[0].gates:
            return None
        return self.terminals[0].gates[0]

    def is_operating(self, hour: int) -> bool:
        """Inclusive hour check; overnight windows such as (22, 4) never match."""
        start, end = self.operating_hours
        return start <= hour <= end

    def can_handle_aircraft(self, required_runway_m: int) -> bool:
        return any(
            runway.is_active and runway.length_meters >= required_runway_m
            for runway in self.runways
        )

    def distance_to(self, other: "AirportModel") -> float:
        """Great-circle distance in kilometers."""
        return calculate_distance(
            self.coordinates.latitude,
            self.coordinates.longitude,
            other.coordinates.latitude,
            other.coordinates.longitude,
        )

    def terminal_info(self) -> str:
        gate_count = sum(len(terminal.gates) for terminal in self.terminals)
        return f"{len(self.terminals)} terminals, {gate_count} gates"

    def size_display(self) -> str:
        return {
            AirportSize.SMALL: "Regional Airport",
            AirportSize.MEDIUM: "City Airport",
            AirportSize.LARGE: "Major Airport",
            AirportSize.HUB: "International Hub",
        }[self.airport_size]

    def __str__(self) -> str:
        return f"{self.name} ({self.code}) | {self.city} | {self.country} | {self.size_display()}"
