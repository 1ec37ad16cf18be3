"""
UniverseGraph - Core data structure for the sector map.

This module provides the Sector, SectorEdge and UniverseGraph dataclasses:
an in-memory representation of the generated universe with dense,
index-addressable sectors and per-sector outgoing lane lists.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import igraph as ig
import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


class SectorType(str, Enum):
    """Role of a sector in the universe."""

    STANDARD = "standard"
    ONE_WAY = "one_way"
    PROTECTED = "protected"
    HARMONY_ENFORCED = "harmony_enforced"


# Adjacency as consumed by the router: sector id -> outgoing lanes
Adjacency = dict[int, list["SectorEdge"]]


@dataclass(slots=True)
class Sector:
    """
    A node in the universe graph.

    Attributes:
        id: Sector id (1..N, dense)
        type: Sector classification
        has_star_mall: Sector hosts a star mall (always protected)
        has_seed_planet: Sector hosts a seed planet
        region_id: Region assigned at partition time, never changed
    """

    id: int
    type: SectorType = SectorType.STANDARD
    has_star_mall: bool = False
    has_seed_planet: bool = False
    region_id: int = 0


@dataclass(slots=True)
class SectorEdge:
    """
    A directed lane entry.

    Bidirectional lanes are stored as two symmetric entries with
    ``one_way=False``. A one-way lane has no mirror entry.
    """

    from_id: int
    to_id: int
    one_way: bool = False


def add_lane(edges: Adjacency, from_id: int, to_id: int, one_way: bool = False) -> bool:
    """
    Add a lane between two sectors.

    Duplicate lanes (same from/to pair) are silently rejected. For a
    bidirectional lane the mirror entry is added unless it already exists.

    Args:
        edges: Adjacency to mutate
        from_id: Source sector id
        to_id: Target sector id
        one_way: Whether the lane is one-way

    Returns:
        True if the forward entry was added
    """
    from_edges = edges.setdefault(from_id, [])
    if any(e.to_id == to_id for e in from_edges):
        return False

    from_edges.append(SectorEdge(from_id, to_id, one_way))

    if not one_way:
        to_edges = edges.setdefault(to_id, [])
        if not any(e.to_id == from_id for e in to_edges):
            to_edges.append(SectorEdge(to_id, from_id, False))

    return True


def has_lane(edges: Adjacency, from_id: int, to_id: int) -> bool:
    """Check whether a directed entry from_id -> to_id exists."""
    return any(e.to_id == to_id for e in edges.get(from_id, ()))


@dataclass(slots=True)
class UniverseGraph:
    """
    Generated universe: sectors plus adjacency.

    Sectors are stored densely so that sector ``id`` lives at index
    ``id - 1``. The graph is write-once: after generation, callers overlay
    their own entities keyed by sector id and never mutate sectors or lanes.

    Attributes:
        sectors: Sectors ordered by id
        edges: Outgoing lanes keyed by sector id (every id present)
        seed: Seed the universe was generated from
    """

    sectors: list[Sector]
    edges: Adjacency
    seed: int = 0

    # =========================================================================
    # Lookups
    # =========================================================================

    @property
    def total_sectors(self) -> int:
        return len(self.sectors)

    def sector(self, sector_id: int) -> Sector:
        """
        Get a sector by id.

        Raises:
            KeyError: If the id is outside 1..total_sectors
        """
        if not 1 <= sector_id <= len(self.sectors):
            raise KeyError(f"Unknown sector: {sector_id}")
        return self.sectors[sector_id - 1]

    def has_sector(self, sector_id: int) -> bool:
        return 1 <= sector_id <= len(self.sectors)

    def neighbors(self, sector_id: int) -> list[int]:
        """Sector ids reachable in one jump from ``sector_id``."""
        return [e.to_id for e in self.edges.get(sector_id, ())]

    def out_degree(self, sector_id: int) -> int:
        return len(self.edges.get(sector_id, ()))

    def iter_edges(self) -> Iterator[SectorEdge]:
        """Iterate every directed entry, in sector id order."""
        for sector in self.sectors:
            yield from self.edges.get(sector.id, ())

    @property
    def edge_count(self) -> int:
        """Number of directed entries (a bidirectional lane counts twice)."""
        return sum(len(lanes) for lanes in self.edges.values())

    @property
    def one_way_count(self) -> int:
        return sum(1 for e in self.iter_edges() if e.one_way)

    # =========================================================================
    # Pre-computed views
    # =========================================================================

    @property
    def region_ids(self) -> NDArray[np.int32]:
        """Region id per sector, indexed by ``id - 1``."""
        return np.array([s.region_id for s in self.sectors], dtype=np.int32)

    def out_degrees(self) -> NDArray[np.int32]:
        """Out-degree per sector, indexed by ``id - 1``."""
        return np.array([self.out_degree(s.id) for s in self.sectors], dtype=np.int32)

    @property
    def region_count(self) -> int:
        if not self.sectors:
            return 0
        return int(self.region_ids.max()) + 1

    def region_sectors(self) -> dict[int, list[int]]:
        """Map region id -> sector ids in that region (ascending)."""
        regions: dict[int, list[int]] = {}
        for sector in self.sectors:
            regions.setdefault(sector.region_id, []).append(sector.id)
        return regions

    @property
    def star_mall_sectors(self) -> list[int]:
        return [s.id for s in self.sectors if s.has_star_mall]

    @property
    def seed_planet_sectors(self) -> list[int]:
        return [s.id for s in self.sectors if s.has_seed_planet]

    def type_counts(self) -> dict[str, int]:
        """Number of sectors per SectorType value."""
        counts = {t.value: 0 for t in SectorType}
        for sector in self.sectors:
            counts[sector.type.value] += 1
        return counts

    # =========================================================================
    # Interop
    # =========================================================================

    def to_igraph(self) -> ig.Graph:
        """
        Build a directed igraph view (vertex ``id - 1`` is sector ``id``).

        Used for independent connectivity checks and statistics; routing
        stays on the native adjacency.
        """
        pairs = [(e.from_id - 1, e.to_id - 1) for e in self.iter_edges()]
        return ig.Graph(n=len(self.sectors), edges=pairs, directed=True)

    def fingerprint(self) -> str:
        """
        SHA-256 over sector classifications, regions and sorted lanes.

        Two universes with the same fingerprint have identical topology and
        sector annotations.
        """
        digest = hashlib.sha256()
        for s in self.sectors:
            digest.update(
                f"{s.id}:{s.type.value}:{int(s.has_star_mall)}:"
                f"{int(s.has_seed_planet)}:{s.region_id};".encode()
            )
        for from_id, to_id, one_way in sorted(
            (e.from_id, e.to_id, e.one_way) for e in self.iter_edges()
        ):
            digest.update(f"{from_id}>{to_id}:{int(one_way)};".encode())
        return digest.hexdigest()

    # =========================================================================
    # Persistence rows
    # =========================================================================

    def sector_rows(self, offset: int = 0) -> list[dict[str, Any]]:
        """
        Sector table rows, ids translated by ``offset``.

        Columns: id, type, has_star_mall, has_seed_planet, region_id.
        """
        return [
            {
                "id": offset + s.id,
                "type": s.type.value,
                "has_star_mall": s.has_star_mall,
                "has_seed_planet": s.has_seed_planet,
                "region_id": s.region_id,
            }
            for s in self.sectors
        ]

    def edge_rows(self, offset: int = 0) -> list[dict[str, Any]]:
        """
        Edge table rows, ids translated by ``offset``.

        Columns: from_sector_id, to_sector_id, one_way.
        """
        return [
            {
                "from_sector_id": offset + e.from_id,
                "to_sector_id": offset + e.to_id,
                "one_way": e.one_way,
            }
            for e in self.iter_edges()
        ]

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """
        Convert UniverseGraph to a columnar dictionary for msgpack.

        Sector attributes are stored as parallel lists indexed by ``id - 1``;
        lanes as ``[from, to, one_way]`` triples in sector order.
        """
        return {
            "seed": self.seed,
            "total_sectors": len(self.sectors),
            "types": [s.type.value for s in self.sectors],
            "star_malls": [s.has_star_mall for s in self.sectors],
            "seed_planets": [s.has_seed_planet for s in self.sectors],
            "region_ids": [s.region_id for s in self.sectors],
            "edges": [[e.from_id, e.to_id, e.one_way] for e in self.iter_edges()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UniverseGraph:
        """Reconstruct UniverseGraph from ``to_dict()`` output."""
        total = data["total_sectors"]
        sectors = [
            Sector(
                id=i + 1,
                type=SectorType(data["types"][i]),
                has_star_mall=bool(data["star_malls"][i]),
                has_seed_planet=bool(data["seed_planets"][i]),
                region_id=int(data["region_ids"][i]),
            )
            for i in range(total)
        ]
        edges: Adjacency = {i: [] for i in range(1, total + 1)}
        for from_id, to_id, one_way in data["edges"]:
            edges[from_id].append(SectorEdge(from_id, to_id, bool(one_way)))
        return cls(sectors=sectors, edges=edges, seed=data.get("seed", 0))
