"""
Route Result Construction.

Utilities for describing a route in terms of the sectors it crosses:
protected space, harmony corridors, one-way lanes and region changes.
Used by the CLI route command and by gameplay consumers that show a
plotted course.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Literal

from ...universe.graph import SectorType

if TYPE_CHECKING:
    from ...universe.graph import UniverseGraph


@dataclass
class RouteSummary:
    """Sector-type breakdown for a route."""

    total_jumps: int
    protected_sectors: int
    harmony_sectors: int
    standard_sectors: int
    one_way_sectors: int
    one_way_lanes: int
    regions_crossed: int
    star_mall_stops: list[int]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _lane_is_one_way(universe: UniverseGraph, from_id: int, to_id: int) -> bool:
    return any(e.to_id == to_id and e.one_way for e in universe.edges.get(from_id, ()))


def compute_route_summary(universe: UniverseGraph, path: list[int]) -> RouteSummary:
    """
    Compute the sector breakdown for a route.

    Args:
        universe: UniverseGraph for sector lookups
        path: Sector ids, origin first

    Returns:
        RouteSummary counting sectors by type along the path
    """
    counts = {t: 0 for t in SectorType}
    malls: list[int] = []
    for sector_id in path:
        sector = universe.sector(sector_id)
        counts[sector.type] += 1
        if sector.has_star_mall:
            malls.append(sector_id)

    one_way_lanes = 0
    regions_crossed = 0
    for a, b in zip(path, path[1:]):
        if _lane_is_one_way(universe, a, b):
            one_way_lanes += 1
        if universe.sector(a).region_id != universe.sector(b).region_id:
            regions_crossed += 1

    return RouteSummary(
        total_jumps=max(len(path) - 1, 0),
        protected_sectors=counts[SectorType.PROTECTED],
        harmony_sectors=counts[SectorType.HARMONY_ENFORCED],
        standard_sectors=counts[SectorType.STANDARD],
        one_way_sectors=counts[SectorType.ONE_WAY],
        one_way_lanes=one_way_lanes,
        regions_crossed=regions_crossed,
        star_mall_stops=malls,
    )


def generate_warnings(universe: UniverseGraph, path: list[int]) -> list[str]:
    """
    Generate route warnings for travelers.

    Warnings are generated for:
    - One-way lanes (the route cannot be retraced in reverse)
    - Leaving protected or harmony space into unprotected sectors
    """
    warnings = []

    one_way = [
        (a, b) for a, b in zip(path, path[1:]) if _lane_is_one_way(universe, a, b)
    ]
    if one_way:
        a, b = one_way[0]
        warnings.append(
            f"Route uses {len(one_way)} one-way lane(s), first {a} -> {b}; return trip differs"
        )

    safe = (SectorType.PROTECTED, SectorType.HARMONY_ENFORCED)
    exits = sum(
        1
        for a, b in zip(path, path[1:])
        if universe.sector(a).type in safe and universe.sector(b).type not in safe
    )
    if exits:
        warnings.append(f"Route leaves protected space {exits} time(s)")

    return warnings


def get_exposure_level(
    summary: RouteSummary,
) -> Literal["SHELTERED", "MIXED", "EXPOSED"]:
    """
    Classify how much of a route lies outside protected and harmony sectors.

    Returns:
        SHELTERED when every sector is protected or harmony-enforced,
        EXPOSED when most sectors are not, MIXED otherwise
    """
    total = summary.total_jumps + 1
    sheltered = summary.protected_sectors + summary.harmony_sectors
    if sheltered >= total:
        return "SHELTERED"
    elif sheltered * 2 < total:
        return "EXPOSED"
    return "MIXED"
