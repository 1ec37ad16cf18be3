"""
sectorgen Test Suite - Shared Fixtures and Configuration

Provides small hand-built graphs for router and repair tests, generated
universes for end-to-end property tests, and the autouse reset of
module-level singletons.
"""

from __future__ import annotations

import pytest

from sectorgen.universe.graph import Adjacency, Sector, SectorType, UniverseGraph, add_lane


# =============================================================================
# Graph Builders
# =============================================================================


def make_adjacency(count: int, lanes: list[tuple[int, int]], one_way: tuple[tuple[int, int], ...] = ()) -> Adjacency:
    """
    Build an adjacency over sectors 1..count.

    Args:
        count: Number of sectors
        lanes: Bidirectional (a, b) pairs
        one_way: Directed (from, to) pairs with no mirror
    """
    edges: Adjacency = {i: [] for i in range(1, count + 1)}
    for a, b in lanes:
        add_lane(edges, a, b)
    for a, b in one_way:
        add_lane(edges, a, b, one_way=True)
    return edges


def make_universe(
    count: int,
    lanes: list[tuple[int, int]],
    one_way: tuple[tuple[int, int], ...] = (),
    types: dict[int, SectorType] | None = None,
    regions: dict[int, int] | None = None,
    star_malls: tuple[int, ...] = (),
    seed_planets: tuple[int, ...] = (),
) -> UniverseGraph:
    """Build a UniverseGraph from explicit lanes and sector annotations."""
    types = types or {}
    regions = regions or {}
    sectors = [
        Sector(
            id=i,
            type=types.get(i, SectorType.STANDARD),
            has_star_mall=i in star_malls,
            has_seed_planet=i in seed_planets,
            region_id=regions.get(i, 0),
        )
        for i in range(1, count + 1)
    ]
    return UniverseGraph(sectors=sectors, edges=make_adjacency(count, lanes, one_way), seed=7)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def line_universe():
    """
    Five sectors in a line, bidirectional lanes, sector 1 a star mall.

        1 -- 2 -- 3 -- 4 -- 5
    """
    return make_universe(
        5,
        [(1, 2), (2, 3), (3, 4), (4, 5)],
        types={1: SectorType.PROTECTED, 2: SectorType.PROTECTED, 5: SectorType.PROTECTED},
        regions={1: 0, 2: 0, 3: 1, 4: 1, 5: 1},
        star_malls=(1,),
        seed_planets=(5,),
    )


@pytest.fixture
def one_way_cycle():
    """
    Three sectors joined only by one-way lanes: 1 -> 2 -> 3 -> 1.
    """
    return make_adjacency(3, [], one_way=[(1, 2), (2, 3), (3, 1)])


@pytest.fixture(scope="session")
def generated_universe():
    """A 1000-sector universe, generated once per session."""
    from sectorgen.universe.generator import generate_universe

    return generate_universe(1000, 42)


@pytest.fixture
def tmp_universe_file(tmp_path, line_universe):
    """Saved copy of line_universe."""
    from sectorgen.universe.serialization import save_universe_graph

    path = tmp_path / "line.universe"
    save_universe_graph(line_universe, path)
    return path


# =============================================================================
# Singleton Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_all_singletons():
    """
    Reset module-level singletons between tests.

    Resets the settings cache first (other modules read from settings), then
    logging so caplog can capture records from sectorgen loggers.
    """

    def do_reset():
        from sectorgen.core.config import reset_settings
        from sectorgen.core.logging import reset_logging

        reset_settings()
        reset_logging()

    do_reset()
    yield
    do_reset()


