"""
Environment configuration loader with validation for the airport operations core.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
TRUTHY = ("true", "1", "yes", "on")


class AirportConfig(BaseModel):
    """Configuration model for the airport operations core with validation."""

    # Storage Configuration
    data_dir: str = Field(default="data", min_length=1, description="Directory holding the JSON documents")
    backup_dir: Optional[str] = Field(
        default=None, description="Backup root; defaults to <data_dir>/backups"
    )

    # Simulation Configuration
    simulation_interval_seconds: int = Field(
        default=60, ge=60, description="Minimum seconds between simulator runs"
    )
    boarding_window_minutes: int = Field(
        default=30, ge=1, description="Boarding opens this many minutes before departure"
    )

    # Booking Configuration
    ticket_prefix: str = Field(default="RIA", description="Airline prefix for ticket numbers")
    currency: str = Field(default="USD", min_length=3, max_length=3, description="Booking currency")
    payment_method: str = Field(default="Credit Card", description="Default payment method")

    # Seeding
    seed_sample_data: bool = Field(default=True, description="Create sample data on first start")
    seed_default_pricing_rules: bool = Field(
        default=True, description="Register the default pricing rules on start"
    )

    # Logging
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")
        return v.upper()

    @field_validator("ticket_prefix")
    @classmethod
    def validate_ticket_prefix(cls, v: str) -> str:
        """Ticket prefixes are 2-4 uppercase letters."""
        if not (2 <= len(v) <= 4 and v.isalpha() and v.isupper()):
            raise ValueError("Ticket prefix must be 2-4 uppercase letters")
        return v

    @field_validator("backup_dir")
    @classmethod
    def default_backup_dir(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Place backups under the data directory unless configured."""
        if v:
            return v
        return str(Path(info.data.get("data_dir", "data")) / "backups")

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def load_config(env_file: Optional[str] = None) -> AirportConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        AirportConfig: Validated configuration object

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    try:
        config_data: Dict[str, Any] = {
            "data_dir": os.getenv("AIRPORT_DATA_DIR", "data"),
            "backup_dir": os.getenv("AIRPORT_BACKUP_DIR") or None,
            "simulation_interval_seconds": int(os.getenv("SIMULATION_INTERVAL_SECONDS", "60")),
            "boarding_window_minutes": int(os.getenv("BOARDING_WINDOW_MINUTES", "30")),
            "ticket_prefix": os.getenv("TICKET_PREFIX", "RIA"),
            "currency": os.getenv("DEFAULT_CURRENCY", "USD"),
            "payment_method": os.getenv("DEFAULT_PAYMENT_METHOD", "Credit Card"),
            "seed_sample_data": os.getenv("SEED_SAMPLE_DATA", "true").lower() in TRUTHY,
            "seed_default_pricing_rules": os.getenv("SEED_DEFAULT_PRICING_RULES", "true").lower()
            in TRUTHY,
            "debug": os.getenv("AIRPORT_DEBUG", "false").lower() in TRUTHY,
            "log_level": os.getenv("AIRPORT_LOG_LEVEL", "INFO"),
        }
        return AirportConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


def configure_logging(config: AirportConfig) -> None:
    """Route all module loggers through a single root handler."""
    logging.basicConfig(level=config.effective_log_level, format=LOG_FORMAT, force=True)
    logger.debug(f"Logging configured at {config.effective_log_level}")


# Global configuration instance
_config: Optional[AirportConfig] = None


def get_config() -> AirportConfig:
    """
    Get the global configuration instance, loading it if necessary.

    Returns:
        AirportConfig: The global configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
        logger.info(
            f"Configuration loaded: data_dir={_config.data_dir}, "
            f"simulation_interval={_config.simulation_interval_seconds}s"
        )
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
