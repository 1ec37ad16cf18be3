"""
Postcondition checks for generated universes.

``collect_violations`` reports every broken invariant as a string so the
CLI can display them; ``verify_universe`` raises on the first report with
any violation so a broken topology is never persisted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.constants import SEED_PLANET_SCALE
from .errors import UniverseInvariantError
from .graph import SectorType

if TYPE_CHECKING:
    from .graph import UniverseGraph


def check_sector_ids(universe: UniverseGraph, expected_total: int | None = None) -> list[str]:
    """Sector ids must be exactly 1..N with every id present in the adjacency."""
    violations = []
    total = universe.total_sectors
    if expected_total is not None and total != expected_total:
        violations.append(f"expected {expected_total} sectors, found {total}")
    for idx, sector in enumerate(universe.sectors):
        if sector.id != idx + 1:
            violations.append(f"sector at position {idx} has id {sector.id}")
            break
    missing = [s.id for s in universe.sectors if s.id not in universe.edges]
    if missing:
        violations.append(f"{len(missing)} sectors missing from adjacency (first {missing[0]})")
    return violations


def check_degree(universe: UniverseGraph, max_degree: int) -> list[str]:
    """No sector may have more than ``max_degree`` outgoing lanes."""
    if not universe.sectors:
        return []
    degrees = universe.out_degrees()
    over = [int(i) + 1 for i in (degrees > max_degree).nonzero()[0]]
    if not over:
        return []
    return [
        f"{len(over)} sectors exceed {max_degree} lanes "
        f"(sector {over[0]} has {int(degrees[over[0] - 1])})"
    ]


def check_lanes(universe: UniverseGraph) -> list[str]:
    """Lanes must reference known sectors and one-way lanes must have no mirror."""
    violations = []
    mirrored = 0
    for edge in universe.iter_edges():
        if not universe.has_sector(edge.to_id):
            violations.append(f"lane {edge.from_id} -> {edge.to_id} targets an unknown sector")
            continue
        if edge.from_id == edge.to_id:
            violations.append(f"sector {edge.from_id} has a lane to itself")
        if edge.one_way and any(e.to_id == edge.from_id for e in universe.edges[edge.to_id]):
            mirrored += 1
    if mirrored:
        violations.append(f"{mirrored} one-way lanes have a reverse lane")
    return violations


def check_strong_connectivity(universe: UniverseGraph) -> list[str]:
    """Every sector must reach every other sector respecting lane direction."""
    if universe.total_sectors <= 1:
        return []
    g = universe.to_igraph()
    if g.is_connected(mode="strong"):
        return []
    components = len(g.connected_components(mode="strong"))
    return [f"universe is not strongly connected ({components} components)"]


def check_classification(universe: UniverseGraph) -> list[str]:
    """Star malls are protected; no sector holds both a mall and a seed planet."""
    violations = []
    for sector in universe.sectors:
        if sector.has_star_mall and sector.type is not SectorType.PROTECTED:
            violations.append(f"star mall sector {sector.id} has type {sector.type.value}")
        if sector.has_star_mall and sector.has_seed_planet:
            violations.append(f"sector {sector.id} holds both a star mall and a seed planet")

    if universe.sectors and not universe.star_mall_sectors:
        violations.append("no star mall placed")
    if universe.total_sectors >= SEED_PLANET_SCALE and not universe.seed_planet_sectors:
        violations.append("no seed planet placed")
    return violations


def collect_violations(
    universe: UniverseGraph,
    max_degree: int,
    expected_total: int | None = None,
) -> list[str]:
    """
    Run every postcondition check.

    Args:
        universe: Generated universe
        max_degree: Lane cap the universe was generated with
        expected_total: Requested sector count, if known

    Returns:
        Violation descriptions (empty when the universe is valid)
    """
    return [
        *check_sector_ids(universe, expected_total),
        *check_degree(universe, max_degree),
        *check_lanes(universe),
        *check_strong_connectivity(universe),
        *check_classification(universe),
    ]


def verify_universe(
    universe: UniverseGraph,
    max_degree: int,
    expected_total: int | None = None,
) -> None:
    """
    Assert every postcondition.

    Raises:
        UniverseInvariantError: If any check fails
    """
    violations = collect_violations(universe, max_degree, expected_total)
    if violations:
        raise UniverseInvariantError(violations)
