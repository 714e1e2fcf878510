"""
Airport operations core.

Models an airport's operational state: flights, aircraft, bookings, airports
and administrative controls, persisted as JSON documents. The core covers:
1. Dynamic pricing from layered, multiplicative pricing rules
2. The booking state machine and seat inventory
3. Time-driven flight and aircraft status simulation
4. Role-gated admin operations with an append-only audit log
"""

__version__ = "0.1.0"
