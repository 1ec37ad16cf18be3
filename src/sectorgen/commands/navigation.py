"""
sectorgen Navigation Commands

Route planning over a saved universe file.
"""

import argparse
from pathlib import Path
from typing import Any

from ..core import get_settings, get_utc_timestamp
from ..services.navigation import (
    NavigationService,
    SectorNotFoundError,
    compute_route_summary,
    generate_warnings,
    get_exposure_level,
)
from ..universe import UniverseBuildError, UniverseGraph, load_universe


def _sector_info(universe: UniverseGraph, sector_id: int) -> dict[str, Any]:
    """Build the per-sector entry shown along a route."""
    sector = universe.sector(sector_id)
    info: dict[str, Any] = {
        "id": sector.id,
        "type": sector.type.value,
        "region_id": sector.region_id,
    }
    if sector.has_star_mall:
        info["star_mall"] = True
    if sector.has_seed_planet:
        info["seed_planet"] = True
    return info


def cmd_route(args: argparse.Namespace) -> dict[str, Any]:
    """
    Calculate the shortest route between two sectors.

    Args:
        args: Parsed arguments with origin, destination, graph, max_depth

    Returns:
        Route data dict with sectors, summary, exposure level and warnings
    """
    origin = args.origin
    destination = args.destination
    query_ts = get_utc_timestamp()

    graph = getattr(args, "graph", None)
    max_depth = getattr(args, "max_depth", None)
    if max_depth is None:
        max_depth = get_settings().max_route_depth
    if max_depth < 1:
        return {
            "error": "invalid_parameter",
            "message": "max_depth must be at least 1",
            "query_timestamp": query_ts,
        }

    try:
        universe = load_universe(Path(graph) if graph else None)
    except UniverseBuildError as e:
        return {
            "error": "graph_not_available",
            "message": str(e),
            "hint": "Run 'sectorgen generate <sectors>' to generate the graph.",
            "query_timestamp": query_ts,
        }

    nav_service = NavigationService(universe, max_depth=max_depth)

    try:
        path = nav_service.calculate_route(origin, destination)
    except SectorNotFoundError as e:
        return {
            "error": "sector_not_found",
            "message": str(e),
            "hint": f"Sector ids range from 1 to {universe.total_sectors}",
            "query_timestamp": query_ts,
        }

    if path is None:
        return {
            "error": "no_route",
            "message": f"No route available from {origin} to {destination}",
            "hint": f"No path with at most {max_depth} sectors. Try a larger --max-depth.",
            "query_timestamp": query_ts,
        }

    summary = compute_route_summary(universe, path)

    return {
        "query_timestamp": query_ts,
        "origin": origin,
        "destination": destination,
        "max_depth": max_depth,
        "total_jumps": summary.total_jumps,
        "route": [_sector_info(universe, sector_id) for sector_id in path],
        "summary": summary.to_dict(),
        "exposure_level": get_exposure_level(summary),
        "warnings": generate_warnings(universe, path),
    }


def register_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register navigation command parsers."""

    # Route command
    route_parser = subparsers.add_parser("route", help="Calculate route between sectors")
    route_parser.add_argument("origin", type=int, help="Origin sector id")
    route_parser.add_argument("destination", type=int, help="Destination sector id")
    route_parser.add_argument(
        "--graph",
        "-g",
        help="Universe file path (default: cache/universe.universe)",
    )
    route_parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum sectors on the route (default: 50)",
    )
    route_parser.set_defaults(func=cmd_route)
