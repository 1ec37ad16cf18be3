"""
Base topology: regions, intra-region lanes and inter-region bridges.

Sectors are shuffled into irregular, seed-dependent clusters ("regions").
Each region gets a random spanning tree plus extra local lanes, then the
regions are tied together by a spanning tree over regions plus a few
extra cross-region lanes. Every lane created here is bidirectional.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ..core.constants import (
    INTER_REGION_EXTRA_EDGE_RATIO,
    INTRA_REGION_EXTRA_EDGE_RATIO,
    MIN_AVG_REGION_SIZE,
    MIN_REGION_SIZE,
    REGION_SIZE_JITTER_MIN,
    REGION_SIZE_JITTER_SPAN,
)
from ..core.logging import get_logger
from .errors import UniverseGenerationError
from .graph import Adjacency, Sector, add_lane
from .rng import SeededRng

logger = get_logger(__name__)


def average_region_size(total_sectors: int, sectors_per_region: int) -> int:
    """
    Target region size: the sector count spread evenly over
    ``ceil(total / sectors_per_region)`` regions, never below 5.
    """
    region_count = math.ceil(total_sectors / sectors_per_region)
    return max(MIN_AVG_REGION_SIZE, total_sectors // region_count)


def partition_regions(
    sectors: list[Sector],
    rng: SeededRng,
    sectors_per_region: int,
) -> list[list[int]]:
    """
    Split all sector ids into contiguous chunks of a shuffled id list.

    Chunk sizes are ``max(3, floor(avg * (0.6 + draw * 0.8)))``; the final
    chunk takes whatever is left. Region ids are assigned in chunk order
    starting at 0 and written onto the sectors.

    Args:
        sectors: Sectors ordered by id (mutated: region_id is set)
        rng: Generation stream
        sectors_per_region: Average region size tunable

    Returns:
        Regions as lists of sector ids, in region id order
    """
    total = len(sectors)
    avg_size = average_region_size(total, sectors_per_region)
    shuffled = rng.shuffle([s.id for s in sectors])

    regions: list[list[int]] = []
    idx = 0
    while idx < total:
        jitter = REGION_SIZE_JITTER_MIN + rng() * REGION_SIZE_JITTER_SPAN
        size = max(MIN_REGION_SIZE, math.floor(avg_size * jitter))
        region = shuffled[idx : idx + size]
        region_id = len(regions)
        for sector_id in region:
            sectors[sector_id - 1].region_id = region_id
        regions.append(region)
        idx += size

    logger.debug("Partitioned %d sectors into %d regions (avg size %d)", total, len(regions), avg_size)
    return regions


def _open_candidate(
    edges: Adjacency,
    candidates: Sequence[int],
    index: int,
    limit: int,
    max_degree: int,
) -> int | None:
    """
    Return ``candidates[index]`` if it is below the degree cap, otherwise the
    nearest candidate within ``candidates[:limit]`` that is.

    No random draws are made, so the stream stays aligned whether or not
    the cap is hit.
    """
    for distance in range(limit):
        for k in (index - distance, index + distance):
            if 0 <= k < limit and len(edges[candidates[k]]) < max_degree:
                return candidates[k]
    return None


def _require_open(
    edges: Adjacency,
    candidates: Sequence[int],
    index: int,
    limit: int,
    max_degree: int,
) -> int:
    chosen = _open_candidate(edges, candidates, index, limit, max_degree)
    if chosen is None:
        raise UniverseGenerationError(
            f"Every candidate sector is at the lane cap ({max_degree}); "
            "raise max_adjacent_sectors"
        )
    return chosen


def connect_within_regions(
    edges: Adjacency,
    regions: list[list[int]],
    rng: SeededRng,
    max_degree: int,
) -> int:
    """
    Build a random spanning tree per region, then add extra local lanes.

    Sector ``i > 0`` of a region links to a uniformly drawn earlier sector of
    the same region, giving exactly ``len(region) - 1`` tree lanes. Then
    ``floor(len(region) * 0.5)`` random pairs are tried; self-pairs,
    duplicates and pairs with an endpoint at the cap are skipped.

    Returns:
        Number of lanes added
    """
    added = 0
    for region in regions:
        for i in range(1, len(region)):
            target = _require_open(edges, region, rng.below(i), i, max_degree)
            if add_lane(edges, region[i], target):
                added += 1

        extra = math.floor(len(region) * INTRA_REGION_EXTRA_EDGE_RATIO)
        for _ in range(extra):
            a = rng.choice(region)
            b = rng.choice(region)
            if a == b:
                continue
            if len(edges[a]) >= max_degree or len(edges[b]) >= max_degree:
                continue
            if add_lane(edges, a, b):
                added += 1

    logger.debug("Added %d intra-region lanes", added)
    return added


def bridge_regions(
    edges: Adjacency,
    regions: list[list[int]],
    rng: SeededRng,
    max_degree: int,
) -> int:
    """
    Connect regions to each other.

    Region ``i > 0`` links to a uniformly drawn earlier region through one
    random sector on each side (a spanning tree over regions). Then
    ``floor(len(regions) * 0.3)`` extra lanes join random region pairs,
    skipping pairs that draw the same region twice.

    Returns:
        Number of lanes added
    """
    added = 0
    for i in range(1, len(regions)):
        target_region = regions[rng.below(i)]
        source_region = regions[i]
        source = _require_open(
            edges, source_region, rng.below(len(source_region)), len(source_region), max_degree
        )
        target = _require_open(
            edges, target_region, rng.below(len(target_region)), len(target_region), max_degree
        )
        if add_lane(edges, source, target):
            added += 1

    extra = math.floor(len(regions) * INTER_REGION_EXTRA_EDGE_RATIO)
    for _ in range(extra):
        region_a = rng.below(len(regions))
        region_b = rng.below(len(regions))
        if region_a == region_b:
            continue
        a = rng.choice(regions[region_a])
        b = rng.choice(regions[region_b])
        if len(edges[a]) >= max_degree or len(edges[b]) >= max_degree:
            continue
        if add_lane(edges, a, b):
            added += 1

    logger.debug("Added %d inter-region lanes across %d regions", added, len(regions))
    return added
