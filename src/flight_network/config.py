"""
Configuration module for the flight network service.

Loads environment variables (optionally from a .env file) and provides
centralized access to data file locations and logging settings.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Config:
    """
    Application configuration class.

    Attributes:
        DATA_DIR: Directory holding the OpenFlights data files.
        AIRLINES_FILE: File name of the airlines table.
        AIRPORTS_FILE: File name of the airports table.
        ROUTES_FILE: File name of the routes table.
        LOG_LEVEL: Root logger level name.
    """

    DATA_DIR: str = os.getenv("FLIGHT_NETWORK_DATA_DIR", "data")
    AIRLINES_FILE: str = os.getenv("FLIGHT_NETWORK_AIRLINES_FILE", "airlines.dat")
    AIRPORTS_FILE: str = os.getenv("FLIGHT_NETWORK_AIRPORTS_FILE", "airports.dat")
    ROUTES_FILE: str = os.getenv("FLIGHT_NETWORK_ROUTES_FILE", "routes.dat")
    LOG_LEVEL: str = os.getenv("FLIGHT_NETWORK_LOG_LEVEL", "INFO")

    @classmethod
    def data_paths(cls) -> Tuple[Path, Path, Path]:
        """Return (airlines, airports, routes) file paths."""
        data_dir = Path(cls.DATA_DIR)
        return (
            data_dir / cls.AIRLINES_FILE,
            data_dir / cls.AIRPORTS_FILE,
            data_dir / cls.ROUTES_FILE,
        )


def setup_logging(level: str = Config.LOG_LEVEL) -> None:
    """
    Configure the root logger to write formatted records to stdout.

    Safe to call more than once; handlers are only attached the first time.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if not root_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
