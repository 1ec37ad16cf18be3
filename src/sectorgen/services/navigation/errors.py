"""
Navigation Service Errors.

Domain-specific exceptions for route calculation operations.
These errors are independent of the transport layer (CLI, HTTP handlers, etc.).
"""

from __future__ import annotations


class NavigationError(Exception):
    """Base exception for navigation operations."""

    pass


class RouteNotFoundError(NavigationError):
    """Raised when no route exists between sectors."""

    def __init__(self, origin: int, destination: int, reason: str | None = None):
        self.origin = origin
        self.destination = destination
        self.reason = reason
        msg = f"No route from sector {origin} to sector {destination}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class SectorNotFoundError(NavigationError):
    """Raised when a sector id is not part of the universe."""

    def __init__(self, sector_id: int):
        self.sector_id = sector_id
        super().__init__(f"Unknown sector: {sector_id}")
