"""
JSON document store for the airport dataset.

Each entity collection lives in its own pretty-printed JSON array under the
data directory. A save replaces the whole file through a temporary sibling
and ``os.replace``, so a reader sees either the previous or the new file.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors import PersistenceError
from ..models.admin import AdminActionModel
from ..models.aircraft import AircraftModel
from ..models.airport import AirportModel
from ..models.flight import FlightModel
from ..models.passenger import BookingModel
from ..utils.helpers import utc_now

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "airports": AirportModel,
    "aircraft": AircraftModel,
    "flights": FlightModel,
    "bookings": BookingModel,
    "audit": AdminActionModel,
}

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass
class Dataset:
    """All persisted collections, in file order. The audit log is not entity data."""
    airports: List[AirportModel] = field(default_factory=list)
    aircraft: List[AircraftModel] = field(default_factory=list)
    flights: List[FlightModel] = field(default_factory=list)
    bookings: List[BookingModel] = field(default_factory=list)
    audit: List[AdminActionModel] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.airports or self.aircraft or self.flights or self.bookings)


def find_integrity_issues(dataset: Dataset) -> List[str]:
    """Cross-reference checks; one message per dangling reference."""
    aircraft_ids = {plane.id for plane in dataset.aircraft}
    flight_ids = {flight.id for flight in dataset.flights}
    airport_codes = {airport.code for airport in dataset.airports}
    issues = []

    for flight in dataset.flights:
        if flight.aircraft_id not in aircraft_ids:
            issues.append(
                f"Flight {flight.flight_number} references non-existent aircraft {flight.aircraft_id}"
            )
        if flight.origin not in airport_codes:
            issues.append(f"Flight {flight.flight_number} has invalid origin airport: {flight.origin}")
        if flight.destination not in airport_codes:
            issues.append(
                f"Flight {flight.flight_number} has invalid destination airport: {flight.destination}"
            )

    for booking in dataset.bookings:
        if booking.flight_id not in flight_ids:
            issues.append(
                f"Booking {booking.ticket_number} references non-existent flight {booking.flight_id}"
            )
    return issues


class JsonDocumentStore:
    """
    File-per-collection persistence.

    Missing files load as empty collections. I/O and decode failures are
    raised as PersistenceError; nothing is retried.
    """

    def __init__(self, data_dir: str = "data", backup_dir: Optional[str] = None):
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir) if backup_dir else self.data_dir / "backups"
        self._adapters: Dict[str, TypeAdapter] = {
            name: TypeAdapter(List[model]) for name, model in COLLECTIONS.items()
        }

    def path_for(self, collection: str) -> Path:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return self.data_dir / f"{collection}.json"

    def load(self, collection: str) -> List[Any]:
        path = self.path_for(collection)
        if not path.exists():
            logger.debug(f"No {collection} file at {path}, starting empty")
            return []
        try:
            return self._adapters[collection].validate_json(path.read_bytes())
        except (OSError, ValidationError) as e:
            raise PersistenceError(f"Failed to load {collection} from {path}: {e}") from e

    def save(self, collection: str, entities: List[Any]) -> Path:
        path = self.path_for(collection)
        payload = self._adapters[collection].dump_json(entities, indent=2)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{collection}.", suffix=".tmp", dir=self.data_dir)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except OSError:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to save {collection} to {path}: {e}") from e
        logger.debug(f"Saved {len(entities)} {collection} to {path}")
        return path

    def load_all(self) -> Dataset:
        return Dataset(
            airports=self.load("airports"),
            aircraft=self.load("aircraft"),
            flights=self.load("flights"),
            bookings=self.load("bookings"),
            audit=self.load("audit"),
        )

    def save_all(self, dataset: Dataset) -> None:
        self.save("airports", dataset.airports)
        self.save("aircraft", dataset.aircraft)
        self.save("flights", dataset.flights)
        self.save("bookings", dataset.bookings)
        self.save("audit", dataset.audit)
        logger.info(
            f"Saved {len(dataset.flights)} flights, {len(dataset.aircraft)} aircraft, "
            f"{len(dataset.bookings)} bookings, {len(dataset.airports)} airports and "
            f"{len(dataset.audit)} audit entries to {self.data_dir}"
        )

    def validate_integrity(self) -> List[str]:
        """Integrity check against what is currently on disk."""
        return find_integrity_issues(self.load_all())

    def backup(self) -> Path:
        """Copy every persisted collection into a timestamped directory."""
        target = self.backup_dir / utc_now().strftime(BACKUP_TIMESTAMP_FORMAT)
        try:
            target.mkdir(parents=True, exist_ok=True)
            for collection in COLLECTIONS:
                source = self.path_for(collection)
                if source.exists():
                    shutil.copy2(source, target / source.name)
        except OSError as e:
            raise PersistenceError(f"Backup to {target} failed: {e}") from e
        logger.info(f"Backup created at {target}")
        return target
