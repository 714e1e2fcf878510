"""
Enums for the airport operations application.

This module contains all enumeration types used throughout the application
for consistent data validation and type safety.
"""

from enum import Enum


class FlightStatusKind(str, Enum):
    """Flight status tag; DELAYED carries its minutes on FlightStatusModel."""
    ON_TIME = "on_time"
    DELAYED = "delayed"
    BOARDING = "boarding"
    DEPARTED = "departed"
    ARRIVED = "arrived"
    CANCELLED = "cancelled"


class SeatClass(str, Enum):
    """Aircraft seat class categories."""
    ECONOMY = "economy"
    BUSINESS = "business"
    FIRST_CLASS = "first_class"


class AircraftStatus(str, Enum):
    """Operational status of an aircraft."""
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"
    IN_FLIGHT = "in_flight"


class BookingStatus(str, Enum):
    """Booking lifecycle states."""
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    BOARDED = "boarded"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"      # Reserved, nothing transitions here yet


class PassengerType(str, Enum):
    """Passenger age categories."""
    ADULT = "adult"
    CHILD = "child"
    INFANT = "infant"
    SENIOR = "senior"


class AdminLevel(str, Enum):
    """Administrative roles."""
    SUPER_ADMIN = "super_admin"            # Full system access
    FLIGHT_MANAGER = "flight_manager"      # Flight operations only
    AIRCRAFT_MANAGER = "aircraft_manager"  # Aircraft management only
    FINANCE_MANAGER = "finance_manager"    # Pricing and revenue only
    VIEWER = "viewer"                      # Read-only access


class AirportSize(str, Enum):
    """Airport size by annual passenger volume."""
    SMALL = "small"      # < 1M passengers/year
    MEDIUM = "medium"    # 1M - 10M passengers/year
    LARGE = "large"      # 10M - 40M passengers/year
    HUB = "hub"          # > 40M passengers/year
