"""
Tests for the universe CLI commands (generate, stats, verify, instance).
"""

from __future__ import annotations

import json

import pytest

from sectorgen.__main__ import build_parser, main
from sectorgen.universe.serialization import save_universe_graph
from tests.conftest import make_universe


def _run(argv: list[str]) -> dict:
    args = build_parser().parse_args(argv)
    return args.func(args)


# =============================================================================
# Generate Command
# =============================================================================


class TestGenerateCommand:
    """Test cmd_generate."""

    def test_generates_file(self, tmp_path):
        """A universe is generated, verified and saved."""
        path = tmp_path / "small.universe"

        result = _run(["generate", "200", "--seed", "3", "--output", str(path)])

        assert result["status"] == "success"
        assert result["seed"] == 3
        assert result["graph"]["sectors"] == 200
        assert result["verified"] is True
        assert result["output"]["path"] == str(path)
        assert path.exists()

    def test_refuses_existing_output(self, tmp_universe_file):
        """An existing file is not overwritten without --force."""
        result = _run(["generate", "50", "--output", str(tmp_universe_file)])

        assert result["error"] == "output_exists"
        assert "--force" in result["hint"]

    def test_force_overwrites(self, tmp_universe_file):
        """--force replaces the existing file."""
        result = _run(["generate", "50", "--seed", "1", "--output", str(tmp_universe_file), "--force"])

        assert result["status"] == "success"
        assert result["graph"]["sectors"] == 50

    def test_no_verify(self, tmp_path):
        """--no-verify is reflected in the output."""
        result = _run(["generate", "60", "--seed", "2", "--output", str(tmp_path / "u.universe"), "--no-verify"])

        assert result["verified"] is False

    def test_invalid_sector_count(self, tmp_path):
        """A zero sector count is reported as an invalid parameter."""
        result = _run(["generate", "0", "--output", str(tmp_path / "u.universe")])

        assert result["error"] == "invalid_parameter"
        assert not (tmp_path / "u.universe").exists()

    def test_main_exit_codes(self, tmp_path, capsys):
        """main returns 0 on success and 1 when the command reports an error."""
        path = tmp_path / "u.universe"

        assert main(["generate", "80", "--seed", "4", "--output", str(path)]) == 0
        assert json.loads(capsys.readouterr().out)["status"] == "success"

        assert main(["generate", "80", "--output", str(path)]) == 1
        assert json.loads(capsys.readouterr().out)["error"] == "output_exists"


# =============================================================================
# Stats Command
# =============================================================================


class TestStatsCommand:
    """Test cmd_stats."""

    def test_basic_stats(self, tmp_universe_file):
        """Counts reflect the saved universe."""
        result = _run(["stats", "--graph", str(tmp_universe_file)])

        assert result["sectors"]["total"] == 5
        assert result["sectors"]["protected"] == 3
        assert result["sectors"]["standard"] == 2
        assert result["sectors"]["protected_pct"] == 60.0
        assert result["lanes"] == {"directed_entries": 8, "bidirectional": 4, "one_way": 0}
        assert result["regions"] == 2
        assert result["star_malls"] == [1]
        assert result["seed_planets"] == [5]
        assert result["degree"] == {"min": 1, "max": 2, "average": 1.6}
        assert result["components"] == {"strong": 1, "weak": 1}
        assert "region_sizes" not in result

    def test_detailed_stats(self, tmp_universe_file):
        """--detailed adds region sizes, histogram and sampled paths."""
        result = _run(["stats", "--graph", str(tmp_universe_file), "--detailed"])

        assert result["region_sizes"] == {"min": 2, "max": 3, "average": 2.5}
        assert result["degree_histogram"] == {"1": 2, "2": 3}
        assert 1 <= result["sample_stats"]["min_path_length"]
        assert result["sample_stats"]["max_path_length"] <= 4

    def test_detailed_stats_stable(self, tmp_universe_file):
        """Sampled statistics repeat for the same file."""
        first = _run(["stats", "--graph", str(tmp_universe_file), "--detailed"])
        second = _run(["stats", "--graph", str(tmp_universe_file), "--detailed"])

        assert first["sample_stats"] == second["sample_stats"]

    def test_missing_graph(self, tmp_path):
        """A missing file is reported with a generate hint."""
        result = _run(["stats", "--graph", str(tmp_path / "missing.universe")])

        assert result["error"] == "graph_not_found"
        assert "sectorgen generate" in result["hint"]

    def test_unreadable_graph(self, tmp_path):
        """A file in another format fails to load."""
        path = tmp_path / "bad.universe"
        path.write_bytes(b"garbage")

        result = _run(["stats", "--graph", str(path)])

        assert result["error"] == "load_failed"


# =============================================================================
# Verify Command
# =============================================================================


class TestVerifyCommand:
    """Test cmd_verify."""

    def test_valid_universe(self, tmp_universe_file):
        """A valid universe passes every check."""
        result = _run(["verify", "--graph", str(tmp_universe_file)])

        assert result["status"] == "pass"
        assert [c["check"] for c in result["checks"]] == [
            "load",
            "sector_ids",
            "degree",
            "lanes",
            "strong_connectivity",
            "classification",
        ]
        assert "error" not in result

    def test_broken_universe(self, tmp_path):
        """A disconnected universe fails verification."""
        path = tmp_path / "broken.universe"
        save_universe_graph(make_universe(3, [(1, 2)], star_malls=(1,)), path)

        result = _run(["verify", "--graph", str(path)])

        assert result["status"] == "fail"
        assert result["error"] == "verification_failed"
        assert any("strongly connected" in e for e in result["errors"])
        assert any("star mall sector 1" in e for e in result["errors"])

    def test_main_exit_code_on_failure(self, tmp_path, capsys):
        """main returns 1 for a failed verification."""
        path = tmp_path / "broken.universe"
        save_universe_graph(make_universe(2, []), path)

        assert main(["verify", "--graph", str(path)]) == 1
        assert json.loads(capsys.readouterr().out)["status"] == "fail"


# =============================================================================
# Instance Command
# =============================================================================


class TestInstanceCommand:
    """Test cmd_instance."""

    def test_offset_after_persisted(self):
        """Ids start right after the persisted maximum."""
        result = _run(["instance", "--max-persisted-id", "5000"])

        assert result["offset"] == 5001
        assert result["sector_id_range"] == [5002, 6001]
        assert result["sector_rows"] == 1000
        assert result["starting_sector_id"] == result["star_mall_sector_ids"][0]
        assert "hint" in result

    def test_no_persisted_sectors(self):
        """Without persisted sectors the offset is one."""
        result = _run(["instance"])

        assert result["offset"] == 1

    def test_negative_id_rejected(self):
        """Negative maxima are invalid."""
        result = _run(["instance", "--max-persisted-id", "-3"])

        assert result["error"] == "invalid_parameter"

    def test_writes_rows(self, tmp_path):
        """--output writes sector and edge rows as JSON."""
        path = tmp_path / "rows" / "instance.json"

        result = _run(["instance", "--max-persisted-id", "10", "--output", str(path)])

        data = json.loads(path.read_text(encoding="utf-8"))
        assert result["output"]["path"] == str(path)
        assert data["offset"] == 11
        assert len(data["sectors"]) == 1000
        assert data["sectors"][0]["id"] == 12
        assert len(data["edges"]) == result["edge_rows"]


# =============================================================================
# Entry Point
# =============================================================================


class TestMain:
    """Test the CLI entry point."""

    @pytest.mark.parametrize("argv", [[], ["help"]])
    def test_help(self, argv, capsys):
        """No command and the help command both print usage."""
        assert main(argv) == 0
        assert "sectorgen generate" in capsys.readouterr().out

    def test_unknown_command_exits(self):
        """argparse rejects unknown commands."""
        with pytest.raises(SystemExit):
            main(["explode"])
