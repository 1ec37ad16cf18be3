"""
sectorgen Core Infrastructure

Configuration, logging, constants and formatting shared by every module.
"""

from .config import SectorGenSettings, get_settings, reset_settings
from .formatters import get_utc_timestamp
from .logging import get_logger

__all__ = [
    "SectorGenSettings",
    "get_settings",
    "reset_settings",
    "get_logger",
    "get_utc_timestamp",
]
