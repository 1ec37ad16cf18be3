"""
Navigation Service.

Shortest-path routing over a generated universe, shared by the generator
and by every consumer that needs to know how to get from sector A to
sector B.

Usage:
    from sectorgen.services.navigation import NavigationService, find_shortest_path

    path = find_shortest_path(universe.edges, 1, 42)
    service = NavigationService(universe)
    path = service.require_route(1, 42)
"""

from __future__ import annotations

__all__ = [
    # Core routing
    "find_shortest_path",
    "sectors_within",
    "NavigationService",
    # Errors
    "NavigationError",
    "RouteNotFoundError",
    "SectorNotFoundError",
    # Result utilities
    "RouteSummary",
    "compute_route_summary",
    "generate_warnings",
    "get_exposure_level",
]


def __getattr__(name: str):
    """Lazy import to avoid circular dependencies."""
    # Router
    if name in ("find_shortest_path", "sectors_within", "NavigationService"):
        from . import router

        return getattr(router, name)

    # Errors
    if name in ("NavigationError", "RouteNotFoundError", "SectorNotFoundError"):
        from . import errors

        return getattr(errors, name)

    # Result utilities
    if name in (
        "RouteSummary",
        "compute_route_summary",
        "generate_warnings",
        "get_exposure_level",
    ):
        from . import result_builder

        return getattr(result_builder, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
