"""
Business logic services for the airport operations core.

This module contains the pricing rule engine, the booking state machine,
the status simulator, admin authorization and the data manager facade.
"""

from .pricing_engine import PricingEngine, default_pricing_rules
from .booking_manager import BookingManager, TicketNumberGenerator
from .status_simulator import StatusSimulator, SimulationResult, next_flight_status
from .admin_panel import AdminPanel, AdminSession
from .data_manager import DataManager

__all__ = [
    'PricingEngine',
    'default_pricing_rules',
    'BookingManager',
    'TicketNumberGenerator',
    'StatusSimulator',
    'SimulationResult',
    'next_flight_status',
    'AdminPanel',
    'AdminSession',
    'DataManager',
]
