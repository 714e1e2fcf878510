"""
Airport operations Pydantic models package.

This package contains all Pydantic v2 models used throughout the airport
operations application for data validation, serialization, and type safety.
"""

# Enums
from .enums import (
    FlightStatusKind,
    SeatClass,
    AircraftStatus,
    BookingStatus,
    PassengerType,
    AdminLevel,
    AirportSize,
)

# Core flight, aircraft and airport models
from .flight import (
    FlightStatusModel,
    SeatAvailabilityModel,
    FlightPricingModel,
    FlightModel,
)

from .aircraft import (
    SeatConfigurationModel,
    PerformanceSpecsModel,
    AircraftModel,
)

from .airport import (
    CoordinatesModel,
    TerminalModel,
    RunwayModel,
    AirportModel,
)

# Passenger and booking models
from .passenger import (
    PassengerModel,
    SeatAssignmentModel,
    BookingPaymentModel,
    BookingModel,
)

# Admin, pricing and metrics models
from .admin import (
    AdminUserModel,
    AdminActionModel,
    PricingRuleModel,
    SystemMetricsModel,
)

__all__ = [
    # Enums
    "FlightStatusKind",
    "SeatClass",
    "AircraftStatus",
    "BookingStatus",
    "PassengerType",
    "AdminLevel",
    "AirportSize",

    # Core models
    "FlightStatusModel",
    "SeatAvailabilityModel",
    "FlightPricingModel",
    "FlightModel",
    "SeatConfigurationModel",
    "PerformanceSpecsModel",
    "AircraftModel",
    "CoordinatesModel",
    "TerminalModel",
    "RunwayModel",
    "AirportModel",

    # Booking models
    "PassengerModel",
    "SeatAssignmentModel",
    "BookingPaymentModel",
    "BookingModel",

    # Admin models
    "AdminUserModel",
    "AdminActionModel",
    "PricingRuleModel",
    "SystemMetricsModel",
]
