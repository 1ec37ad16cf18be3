"""
Tests for strongly connected components and connectivity repair.
"""

from __future__ import annotations

import pytest

from sectorgen.universe.connectivity import (
    _closest_pair,
    finish_order,
    repair_strong_connectivity,
    reverse_adjacency,
    strongly_connected_components,
)
from sectorgen.universe.errors import ConnectivityRepairError
from sectorgen.universe.graph import Sector, SectorType, has_lane
from tests.conftest import make_adjacency, make_universe


def _sectors(count: int, regions: dict[int, int] | None = None) -> list[Sector]:
    regions = regions or {}
    return [Sector(id=i, region_id=regions.get(i, 0)) for i in range(1, count + 1)]


def _component_sets(components):
    return sorted(sorted(c) for c in components)


# =============================================================================
# Kosaraju Tests
# =============================================================================


class TestFinishOrder:
    """Test finish_order."""

    def test_visits_every_sector_once(self):
        """Every sector appears exactly once in the finish order."""
        edges = make_adjacency(6, [(1, 2), (3, 4)], one_way=[(5, 6)])

        order = finish_order(edges, list(range(1, 7)))

        assert sorted(order) == [1, 2, 3, 4, 5, 6]

    def test_child_finishes_before_parent(self):
        """In a chain, the tail finishes first."""
        edges = make_adjacency(3, [], one_way=[(1, 2), (2, 3)])

        assert finish_order(edges, [1, 2, 3]) == [3, 2, 1]

    def test_deep_chain_no_recursion_error(self):
        """A chain far deeper than the recursion limit is handled."""
        count = 20000
        edges = make_adjacency(count, [], one_way=[(i, i + 1) for i in range(1, count)])

        order = finish_order(edges, list(range(1, count + 1)))

        assert len(order) == count
        assert order[0] == count


class TestReverseAdjacency:
    """Test reverse_adjacency."""

    def test_inverts_lanes(self):
        """Each lane a -> b appears as b <- a."""
        edges = make_adjacency(3, [], one_way=[(1, 2), (1, 3)])

        reverse = reverse_adjacency(edges, [1, 2, 3])

        assert reverse == {1: [], 2: [1], 3: [1]}


class TestStronglyConnectedComponents:
    """Test strongly_connected_components."""

    def test_single_component_for_bidirectional_graph(self, line_universe):
        """A graph of bidirectional lanes is one component."""
        components = strongly_connected_components(line_universe.edges, list(range(1, 6)))

        assert _component_sets(components) == [[1, 2, 3, 4, 5]]

    def test_one_way_cycle_is_one_component(self, one_way_cycle):
        """A directed cycle is strongly connected."""
        components = strongly_connected_components(one_way_cycle, [1, 2, 3])

        assert _component_sets(components) == [[1, 2, 3]]

    def test_one_way_chain_splits(self):
        """A one-way chain gives one component per sector."""
        edges = make_adjacency(3, [], one_way=[(1, 2), (2, 3)])

        components = strongly_connected_components(edges, [1, 2, 3])

        assert _component_sets(components) == [[1], [2], [3]]

    def test_two_clusters_joined_one_way(self):
        """Two bidirectional clusters joined by a one-way lane stay separate."""
        edges = make_adjacency(4, [(1, 2), (3, 4)], one_way=[(2, 3)])

        components = strongly_connected_components(edges, [1, 2, 3, 4])

        assert _component_sets(components) == [[1, 2], [3, 4]]

    def test_topological_order(self):
        """No lane leads from a later component into an earlier one."""
        edges = make_adjacency(6, [(1, 2), (3, 4), (5, 6)], one_way=[(2, 3), (4, 5)])

        components = strongly_connected_components(edges, list(range(1, 7)))
        position = {sid: idx for idx, comp in enumerate(components) for sid in comp}

        for sid, lanes in edges.items():
            for e in lanes:
                assert position[e.to_id] >= position[sid]

    def test_isolated_sectors(self):
        """Sectors without lanes are their own components."""
        edges = make_adjacency(3, [])

        assert len(strongly_connected_components(edges, [1, 2, 3])) == 3


# =============================================================================
# Repair Tests
# =============================================================================


class TestRepairStrongConnectivity:
    """Test repair_strong_connectivity."""

    def test_already_connected_is_untouched(self, line_universe):
        """A strongly connected graph needs no repair."""
        before = line_universe.edge_count

        report = repair_strong_connectivity(line_universe.sectors, line_universe.edges, 12)

        assert report.components_before == 1
        assert not report.repaired
        assert line_universe.edge_count == before

    def test_restores_one_way_lane(self):
        """A one-way lane between components is made bidirectional."""
        sectors = _sectors(4)
        edges = make_adjacency(4, [(1, 2), (3, 4)], one_way=[(2, 3)])

        report = repair_strong_connectivity(sectors, edges, 12)

        assert report.components_before == 2
        assert report.lanes_restored == 1
        assert has_lane(edges, 3, 2)
        assert all(not e.one_way for e in edges[2])

    def test_restored_sector_keeps_one_way_type(self):
        """The source sector of a restored lane keeps its one_way type."""
        sectors = _sectors(4)
        sectors[1].type = SectorType.ONE_WAY
        edges = make_adjacency(4, [(1, 2), (3, 4)], one_way=[(2, 3)])

        repair_strong_connectivity(sectors, edges, 12)

        assert sectors[1].type is SectorType.ONE_WAY

    def test_links_disconnected_clusters(self):
        """Clusters with no lane between them get a new bidirectional lane."""
        sectors = _sectors(4, regions={1: 0, 2: 0, 3: 1, 4: 1})
        edges = make_adjacency(4, [(1, 2), (3, 4)])

        report = repair_strong_connectivity(sectors, edges, 12)
        universe = make_universe(4, [])
        universe.edges = edges

        assert report.lanes_added >= 1
        assert universe.to_igraph().is_connected(mode="strong")

    def test_closest_pair_prefers_near_ids(self):
        """The new lane joins the closest ids of the two components."""
        sectors = _sectors(6)
        edges = make_adjacency(6, [(1, 2), (2, 3), (4, 5), (5, 6)])

        repair_strong_connectivity(sectors, edges, 12)

        assert has_lane(edges, 3, 4)
        assert has_lane(edges, 4, 3)

    def test_one_way_chain_becomes_strong(self):
        """A long one-way chain is fully repaired."""
        count = 50
        sectors = _sectors(count)
        edges = make_adjacency(count, [], one_way=[(i, i + 1) for i in range(1, count)])

        repair_strong_connectivity(sectors, edges, 12)

        assert len(strongly_connected_components(edges, list(range(1, count + 1)))) == 1

    def test_degree_cap_respected(self):
        """Repair never pushes a sector past the cap."""
        count = 30
        sectors = _sectors(count)
        edges = make_adjacency(count, [], one_way=[(i, i + 1) for i in range(1, count)])

        repair_strong_connectivity(sectors, edges, 2)

        assert max(len(lanes) for lanes in edges.values()) <= 2
        assert len(strongly_connected_components(edges, list(range(1, count + 1)))) == 1

    def test_no_open_endpoint_raises(self):
        """A component entirely at the cap cannot be linked."""
        sectors = _sectors(5)
        # Sector 5 is isolated; sectors 1..4 are a full cycle at cap 2
        edges = make_adjacency(5, [(1, 2), (2, 3), (3, 4), (4, 1)])

        with pytest.raises(ConnectivityRepairError):
            repair_strong_connectivity(sectors, edges, 2)


class TestClosestPair:
    """Test repair endpoint selection."""

    def test_region_distance_dominates(self):
        """A same-region pair beats a closer id in another region."""
        sectors = _sectors(4, regions={2: 1, 3: 0, 4: 1})
        edges = make_adjacency(4, [])

        assert _closest_pair(sectors, edges, [2], [3, 4], 12) == (2, 4)

    def test_ties_keep_first_pair(self):
        """Equal costs keep the lowest ids."""
        sectors = _sectors(4, regions={1: 0, 2: 1, 3: 0, 4: 1})
        edges = make_adjacency(4, [])

        assert _closest_pair(sectors, edges, [1, 2], [3, 4], 12) == (1, 3)

    def test_empty_component_raises(self):
        """Without a candidate on one side no pair exists."""
        sectors = _sectors(2)
        edges = make_adjacency(2, [])

        with pytest.raises(ConnectivityRepairError):
            _closest_pair(sectors, edges, [], [2], 12)
