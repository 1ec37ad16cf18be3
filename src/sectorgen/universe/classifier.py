"""
Sector type classification.

Three ordered passes consume a shuffled sector-id list left to right,
never reusing an id across passes:

1. Star malls: protected hubs whose direct neighbors also become protected.
2. Seed planets: claimed from existing protected sectors first, then from
   fresh sectors forced to protected.
3. One-way lanes: a standard sector turns one of its lanes one-way when both
   endpoints keep at least one other outgoing lane.

After connectivity repair, harmony corridors are marked along the shortest
path between every star mall and every seed planet.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import SEED_PLANET_SCALE, STAR_MALL_SCALE
from ..core.logging import get_logger
from ..services.navigation.router import find_shortest_path
from .graph import Adjacency, Sector, SectorType
from .rng import SeededRng

logger = get_logger(__name__)


def star_mall_target(total_sectors: int, configured: int) -> int:
    """Star mall count: ``clamp(configured, 1, total // 100)``."""
    return max(1, min(configured, total_sectors // STAR_MALL_SCALE))


def seed_planet_target(total_sectors: int, configured: int) -> int:
    """Seed planet count: ``clamp(configured, 1, total // 300)``."""
    return max(1, min(configured, total_sectors // SEED_PLANET_SCALE))


def one_way_target(total_sectors: int, fraction: float) -> int:
    return math.floor(total_sectors * fraction)


@dataclass
class ClassificationResult:
    """Outcome of the classification passes."""

    star_malls: list[int]
    seed_planets: list[int]
    one_way_target: int
    one_way_sectors: list[int]
    ids_consumed: int


def assign_star_malls(
    sectors: list[Sector],
    edges: Adjacency,
    shuffled_ids: list[int],
    cursor: int,
    count: int,
) -> tuple[list[int], int]:
    """
    Turn the next ``count`` shuffled sectors into star malls.

    Each mall becomes protected, and every directly adjacent sector that is
    still standard becomes protected too.

    Returns:
        (star mall ids, updated cursor)
    """
    malls: list[int] = []
    while len(malls) < count and cursor < len(shuffled_ids):
        sector_id = shuffled_ids[cursor]
        cursor += 1

        sector = sectors[sector_id - 1]
        sector.type = SectorType.PROTECTED
        sector.has_star_mall = True
        malls.append(sector_id)

        for edge in edges[sector_id]:
            neighbor = sectors[edge.to_id - 1]
            if neighbor.type is SectorType.STANDARD:
                neighbor.type = SectorType.PROTECTED

    return malls, cursor


def assign_seed_planets(
    sectors: list[Sector],
    shuffled_ids: list[int],
    cursor: int,
    count: int,
) -> tuple[list[int], int]:
    """
    Place seed planets, preferring sectors that are already protected.

    Protected sectors (not malls) are claimed in id order first. Any
    shortfall is filled from fresh shuffled ids: standard sectors are
    forced to protected; other types are skipped but still consumed.

    Returns:
        (seed planet ids, updated cursor)
    """
    planets: list[int] = []
    for sector in sectors:
        if len(planets) >= count:
            break
        if sector.type is SectorType.PROTECTED and not sector.has_star_mall and not sector.has_seed_planet:
            sector.has_seed_planet = True
            planets.append(sector.id)

    while len(planets) < count and cursor < len(shuffled_ids):
        sector = sectors[shuffled_ids[cursor] - 1]
        cursor += 1
        if sector.type is SectorType.STANDARD:
            sector.type = SectorType.PROTECTED
            sector.has_seed_planet = True
            planets.append(sector.id)

    return planets, cursor


def convert_one_way_lanes(
    sectors: list[Sector],
    edges: Adjacency,
    shuffled_ids: list[int],
    cursor: int,
    count: int,
    rng: SeededRng,
) -> tuple[list[int], int]:
    """
    Convert lanes to one-way until ``count`` sectors are converted or the
    shuffled ids run out.

    A standard sector with at least two outgoing lanes shuffles its lanes and
    picks the first whose target also has at least two outgoing lanes. That
    lane is flagged one-way, the mirror entry is deleted and the sector
    becomes ``one_way``. Sectors with no such lane are skipped, so the
    realized count may fall short of the target.

    Returns:
        (converted sector ids, updated cursor)
    """
    converted: list[int] = []
    while cursor < len(shuffled_ids) and len(converted) < count:
        sector_id = shuffled_ids[cursor]
        cursor += 1

        sector = sectors[sector_id - 1]
        if sector.type is not SectorType.STANDARD:
            continue
        own_lanes = edges[sector_id]
        if len(own_lanes) < 2:
            continue

        for edge in rng.shuffle(own_lanes):
            target_lanes = edges[edge.to_id]
            if len(target_lanes) < 2:
                continue
            edge.one_way = True
            edges[edge.to_id] = [e for e in target_lanes if e.to_id != sector_id]
            sector.type = SectorType.ONE_WAY
            converted.append(sector_id)
            break

    return converted, cursor


def classify_sectors(
    sectors: list[Sector],
    edges: Adjacency,
    rng: SeededRng,
    *,
    num_star_malls: int,
    num_seed_planets: int,
    one_way_fraction: float,
) -> ClassificationResult:
    """
    Run the star mall, seed planet and one-way passes in order.

    Args:
        sectors: Sectors ordered by id (mutated)
        edges: Adjacency (mutated by one-way conversion)
        rng: Generation stream
        num_star_malls: Configured star mall upper bound
        num_seed_planets: Configured seed planet upper bound
        one_way_fraction: Fraction of sectors targeted for one-way conversion

    Returns:
        ClassificationResult describing what was assigned
    """
    total = len(sectors)
    shuffled = rng.shuffle([s.id for s in sectors])

    malls, cursor = assign_star_malls(
        sectors, edges, shuffled, 0, star_mall_target(total, num_star_malls)
    )
    planets, cursor = assign_seed_planets(
        sectors, shuffled, cursor, seed_planet_target(total, num_seed_planets)
    )
    target = one_way_target(total, one_way_fraction)
    one_way, cursor = convert_one_way_lanes(sectors, edges, shuffled, cursor, target, rng)

    if len(one_way) < target:
        logger.debug("Converted %d of %d targeted one-way sectors", len(one_way), target)

    return ClassificationResult(
        star_malls=malls,
        seed_planets=planets,
        one_way_target=target,
        one_way_sectors=one_way,
        ids_consumed=cursor,
    )


def mark_harmony_corridors(
    sectors: list[Sector],
    edges: Adjacency,
    max_depth: int,
) -> int:
    """
    Reclassify standard sectors on every star mall -> seed planet path.

    Pairs are visited in sector id order. Pairs with no path within
    ``max_depth`` are left alone.

    Returns:
        Number of sectors reclassified as harmony_enforced
    """
    malls = [s.id for s in sectors if s.has_star_mall]
    planets = [s.id for s in sectors if s.has_seed_planet]

    marked = 0
    for mall in malls:
        for planet in planets:
            path = find_shortest_path(edges, mall, planet, max_depth)
            if path is None:
                continue
            for sector_id in path:
                sector = sectors[sector_id - 1]
                if sector.type is SectorType.STANDARD:
                    sector.type = SectorType.HARMONY_ENFORCED
                    marked += 1

    logger.debug("Marked %d harmony corridor sectors", marked)
    return marked
