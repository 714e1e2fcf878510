"""
Utility helpers shared across the airport operations application.
"""

import math
from datetime import datetime, timedelta, timezone

EARTH_RADIUS_KM = 6371.0
AVERAGE_CRUISE_SPEED_KMH = 850.0
SEAT_LETTERS = ["A", "B", "C", "D", "E", "F", "G", "H", "J", "K"]
CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points using the Haversine formula.

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_flight_duration(distance_km: float) -> timedelta:
    """Estimate block time from distance at an average cruise speed."""
    return timedelta(hours=distance_km / AVERAGE_CRUISE_SPEED_KMH)


def format_duration(duration: timedelta) -> str:
    total_minutes = int(duration.total_seconds() // 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def generate_seat_number(row: int, max_seats_per_row: int) -> str:
    seat_index = (row * max_seats_per_row) % len(SEAT_LETTERS)
    return f"{row}{SEAT_LETTERS[seat_index]}"


def validate_airport_code(code: str) -> bool:
    """IATA airport codes are exactly three uppercase ASCII letters."""
    return len(code) == 3 and all("A" <= c <= "Z" for c in code)


def validate_email(email: str) -> bool:
    """Basic sanity check, not RFC validation."""
    return "@" in email and "." in email and len(email) > 5


def format_currency(amount: float, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{symbol}{amount:.2f}"
    return f"{amount:.2f} {currency}"


def calculate_load_factor(booked_seats: int, total_capacity: int) -> float:
    """Percentage of seats filled."""
    if total_capacity == 0:
        return 0.0
    return booked_seats / total_capacity * 100.0
