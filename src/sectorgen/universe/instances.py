"""
Universe instances ready for persistence.

The shared multiplayer universe is persisted with its generated ids. Every
single-player universe reuses one fixed-seed topology translated into a
disjoint id range: ``offset = max persisted sector id + 1`` and each
persisted id is ``offset + generated id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from ..core.constants import SINGLE_PLAYER_SEED, SINGLE_PLAYER_TOTAL_SECTORS
from .generator import GenerationConfig, generate_universe
from .graph import UniverseGraph


@dataclass
class UniverseInstance:
    """
    Sector and edge rows for one universe, ids already translated.

    Attributes:
        offset: Value added to every generated sector id
        sector_rows: Rows for the sector table
        edge_rows: Rows for the edge table
        star_mall_sector_ids: Persisted ids of star mall sectors
        seed_planet_sector_ids: Persisted ids of seed planet sectors
    """

    offset: int
    sector_rows: list[dict[str, Any]] = field(default_factory=list)
    edge_rows: list[dict[str, Any]] = field(default_factory=list)
    star_mall_sector_ids: list[int] = field(default_factory=list)
    seed_planet_sector_ids: list[int] = field(default_factory=list)

    @property
    def starting_sector_id(self) -> int | None:
        """Where a new player starts: the first star mall."""
        return self.star_mall_sector_ids[0] if self.star_mall_sector_ids else None

    @property
    def sector_id_range(self) -> tuple[int, int]:
        """Inclusive (first, last) persisted sector id."""
        return self.offset + 1, self.offset + len(self.sector_rows)

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "sector_id_range": list(self.sector_id_range),
            "starting_sector_id": self.starting_sector_id,
            "star_mall_sector_ids": self.star_mall_sector_ids,
            "seed_planet_sector_ids": self.seed_planet_sector_ids,
            "sectors": self.sector_rows,
            "edges": self.edge_rows,
        }


def compute_sector_offset(max_persisted_id: int | None) -> int:
    """Offset for a new instance: one past the highest persisted sector id."""
    return (max_persisted_id or 0) + 1


def instance_from_universe(universe: UniverseGraph, offset: int) -> UniverseInstance:
    """Translate a generated universe into persistence rows at ``offset``."""
    return UniverseInstance(
        offset=offset,
        sector_rows=universe.sector_rows(offset),
        edge_rows=universe.edge_rows(offset),
        star_mall_sector_ids=[offset + sid for sid in universe.star_mall_sectors],
        seed_planet_sector_ids=[offset + sid for sid in universe.seed_planet_sectors],
    )


def build_shared_instance(
    total_sectors: int | None = None,
    seed: int | None = None,
    config: GenerationConfig | None = None,
) -> UniverseInstance:
    """Rows for the shared multiplayer universe (generated ids, offset 0)."""
    return instance_from_universe(generate_universe(total_sectors, seed, config), 0)


@lru_cache(maxsize=1)
def single_player_topology() -> UniverseGraph:
    """
    The topology every single-player universe shares.

    Generated once per process; callers must treat it as read-only.
    """
    return generate_universe(SINGLE_PLAYER_TOTAL_SECTORS, SINGLE_PLAYER_SEED, GenerationConfig())


def build_single_player_instance(max_persisted_id: int | None) -> UniverseInstance:
    """
    Rows for a new single-player universe.

    Args:
        max_persisted_id: Highest sector id already stored (None if empty)

    Returns:
        UniverseInstance whose ids start at ``max_persisted_id + 2``
    """
    offset = compute_sector_offset(max_persisted_id)
    return instance_from_universe(single_player_topology(), offset)
