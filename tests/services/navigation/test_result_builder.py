"""
Tests for route result construction.
"""

from __future__ import annotations

from sectorgen.services.navigation.result_builder import (
    RouteSummary,
    compute_route_summary,
    generate_warnings,
    get_exposure_level,
)
from tests.conftest import make_universe


def _summary(protected=0, harmony=0, standard=0, one_way=0) -> RouteSummary:
    total = protected + harmony + standard + one_way
    return RouteSummary(
        total_jumps=total - 1,
        protected_sectors=protected,
        harmony_sectors=harmony,
        standard_sectors=standard,
        one_way_sectors=one_way,
        one_way_lanes=0,
        regions_crossed=0,
        star_mall_stops=[],
    )


class TestComputeRouteSummary:
    """Test compute_route_summary."""

    def test_line_route(self, line_universe):
        """Counts sectors by type along the route."""
        summary = compute_route_summary(line_universe, [1, 2, 3, 4, 5])

        assert summary.total_jumps == 4
        assert summary.protected_sectors == 3
        assert summary.standard_sectors == 2
        assert summary.harmony_sectors == 0
        assert summary.one_way_lanes == 0
        assert summary.regions_crossed == 1
        assert summary.star_mall_stops == [1]

    def test_single_sector(self, line_universe):
        """A zero-jump route counts its one sector."""
        summary = compute_route_summary(line_universe, [3])

        assert summary.total_jumps == 0
        assert summary.standard_sectors == 1

    def test_one_way_lanes_counted(self):
        """Lanes without a mirror are counted as one-way."""
        universe = make_universe(3, [], one_way=((1, 2), (2, 3), (3, 1)))

        summary = compute_route_summary(universe, [1, 2, 3])

        assert summary.one_way_lanes == 2

    def test_to_dict(self, line_universe):
        """to_dict exposes every field."""
        data = compute_route_summary(line_universe, [1, 2]).to_dict()

        assert data["total_jumps"] == 1
        assert data["star_mall_stops"] == [1]
        assert set(data) == {
            "total_jumps",
            "protected_sectors",
            "harmony_sectors",
            "standard_sectors",
            "one_way_sectors",
            "one_way_lanes",
            "regions_crossed",
            "star_mall_stops",
        }


class TestGenerateWarnings:
    """Test generate_warnings."""

    def test_leaving_protected_space(self, line_universe):
        """Stepping from protected into standard space is flagged."""
        warnings = generate_warnings(line_universe, [1, 2, 3, 4, 5])

        assert warnings == ["Route leaves protected space 1 time(s)"]

    def test_sheltered_route_has_no_warnings(self, line_universe):
        """Protected-only routes produce nothing."""
        assert generate_warnings(line_universe, [1, 2]) == []

    def test_one_way_warning(self):
        """One-way lanes are reported with the first one named."""
        universe = make_universe(3, [], one_way=((1, 2), (2, 3), (3, 1)))

        warnings = generate_warnings(universe, [1, 2, 3])

        assert warnings == ["Route uses 2 one-way lane(s), first 1 -> 2; return trip differs"]


class TestGetExposureLevel:
    """Test get_exposure_level."""

    def test_sheltered(self):
        """All protected or harmony sectors is SHELTERED."""
        assert get_exposure_level(_summary(protected=2, harmony=3)) == "SHELTERED"

    def test_mixed(self):
        """Half or more sheltered is MIXED."""
        assert get_exposure_level(_summary(protected=2, standard=2)) == "MIXED"

    def test_exposed(self):
        """Mostly unprotected is EXPOSED."""
        assert get_exposure_level(_summary(protected=1, standard=2, one_way=1)) == "EXPOSED"

    def test_line_route_is_mixed(self, line_universe):
        """Three of five protected sectors is MIXED."""
        summary = compute_route_summary(line_universe, [1, 2, 3, 4, 5])

        assert get_exposure_level(summary) == "MIXED"
