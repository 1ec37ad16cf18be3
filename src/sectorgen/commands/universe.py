"""
sectorgen Universe Commands

Generate, inspect and verify universe files, and emit instance rows
for persistence.
"""

import argparse
import dataclasses
import json
import time
from pathlib import Path
from typing import Any

import numpy as np

from ..core import get_settings, get_utc_timestamp
from ..core.formatters import format_percent
from ..universe.builder import UniverseBuildError, build_universe, load_universe
from ..universe.errors import (
    InvalidGenerationParameters,
    UniverseGenerationError,
    UniverseInvariantError,
)
from ..universe.generator import GenerationConfig
from ..universe.instances import build_single_player_instance
from ..universe.rng import SeededRng
from ..universe.validation import (
    check_classification,
    check_degree,
    check_lanes,
    check_sector_ids,
    check_strong_connectivity,
)

# Sample size for --detailed path length statistics
PATH_SAMPLE_PAIRS = 50


def _graph_path(args: argparse.Namespace) -> Path:
    graph = getattr(args, "graph", None)
    return Path(graph) if graph else get_settings().default_universe_path


def _load_or_error(graph_path: Path, query_ts: str) -> tuple[Any, dict | None]:
    """Load a universe file, or build the CLI error payload explaining why not."""
    if not graph_path.exists():
        return None, {
            "error": "graph_not_found",
            "message": f"Graph file not found: {graph_path}",
            "hint": "Run 'sectorgen generate <sectors>' first to create the graph",
            "query_timestamp": query_ts,
        }
    try:
        return load_universe(graph_path), None
    except UniverseBuildError as e:
        return None, {
            "error": "load_failed",
            "message": f"Could not load graph: {e}",
            "query_timestamp": query_ts,
        }


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> dict:
    """
    Generate a universe and save it as a .universe file.

    Postconditions are asserted unless --no-verify is given.
    """
    query_ts = get_utc_timestamp()

    output_path = Path(args.output) if args.output else get_settings().default_universe_path

    if output_path.exists() and not args.force:
        return {
            "error": "output_exists",
            "message": f"Output file exists: {output_path}",
            "hint": "Use --force to overwrite",
            "query_timestamp": query_ts,
        }

    config = GenerationConfig.from_settings()
    if getattr(args, "no_verify", False):
        config = dataclasses.replace(config, verify_postconditions=False)

    start = time.perf_counter()
    try:
        result = build_universe(args.sectors, args.seed, output_path, config)
    except InvalidGenerationParameters as e:
        return {
            "error": "invalid_parameter",
            "message": str(e),
            "query_timestamp": query_ts,
        }
    except UniverseInvariantError as e:
        return {
            "error": "invariant_violation",
            "message": str(e),
            "violations": e.violations,
            "query_timestamp": query_ts,
        }
    except (UniverseGenerationError, UniverseBuildError) as e:
        return {
            "error": "build_failed",
            "message": f"Build failed: {e}",
            "query_timestamp": query_ts,
        }
    elapsed = time.perf_counter() - start

    universe = result.universe
    report = result.report
    output: dict[str, Any] = {
        "query_timestamp": query_ts,
        "status": "success",
        "message": f"Generated universe in {elapsed:.2f}s",
        "seed": report.seed,
        "graph": {
            "sectors": universe.total_sectors,
            "regions": report.regions,
            "lanes": universe.edge_count,
            "one_way_lanes": universe.one_way_count,
            "star_malls": report.star_malls,
            "seed_planets": report.seed_planets,
        },
        "phases": {
            "intra_region_lanes": report.intra_region_lanes,
            "inter_region_lanes": report.inter_region_lanes,
            "one_way_target": report.one_way_target,
            "one_way_converted": report.one_way_converted,
            "components_before_repair": report.components_before_repair,
            "lanes_restored": report.lanes_restored,
            "lanes_added": report.lanes_added,
            "harmony_sectors": report.harmony_sectors,
        },
        "verified": config.verify_postconditions,
        "output": {
            "path": str(output_path),
            "size_kb": round(output_path.stat().st_size / 1024, 1),
        },
        "build_time_seconds": round(elapsed, 2),
    }
    if report.phase_seconds:
        output["phase_seconds"] = report.phase_seconds
    return output


# =============================================================================
# Stats Command
# =============================================================================


def cmd_stats(args: argparse.Namespace) -> dict:
    """
    Display universe statistics.

    Shows sector type breakdown, lane counts, degree spread and igraph
    component counts for a saved universe.
    """
    query_ts = get_utc_timestamp()
    graph_path = _graph_path(args)

    universe, error = _load_or_error(graph_path, query_ts)
    if error:
        return error

    total = universe.total_sectors
    degrees = universe.out_degrees()
    types = universe.type_counts()
    g = universe.to_igraph()
    one_way = universe.one_way_count

    result: dict[str, Any] = {
        "query_timestamp": query_ts,
        "graph_path": str(graph_path),
        "seed": universe.seed,
        "fingerprint": universe.fingerprint(),
        "sectors": {
            "total": total,
            **types,
            **{f"{name}_pct": format_percent(count, total) for name, count in types.items()},
        },
        "lanes": {
            "directed_entries": universe.edge_count,
            "bidirectional": (universe.edge_count - one_way) // 2,
            "one_way": one_way,
        },
        "regions": universe.region_count,
        "star_malls": universe.star_mall_sectors,
        "seed_planets": universe.seed_planet_sectors,
        "degree": {
            "min": int(degrees.min()) if total else 0,
            "max": int(degrees.max()) if total else 0,
            "average": round(float(degrees.mean()), 2) if total else 0.0,
        },
        "components": {
            "strong": len(g.connected_components(mode="strong")),
            "weak": len(g.connected_components(mode="weak")),
        },
    }

    if args.detailed and total:
        region_sizes = np.bincount(universe.region_ids)
        result["region_sizes"] = {
            "min": int(region_sizes.min()),
            "max": int(region_sizes.max()),
            "average": round(float(region_sizes.mean()), 1),
        }
        result["degree_histogram"] = {
            str(degree): int(count) for degree, count in enumerate(np.bincount(degrees)) if count
        }

        # Sample path lengths with a stream seeded from the universe for stable output
        sample_paths = []
        if total >= 2:
            rng = SeededRng(universe.seed)
            for _ in range(PATH_SAMPLE_PAIRS):
                a = rng.below(total)
                b = rng.below(total)
                if a == b:
                    continue
                paths = g.get_shortest_paths(a, b, mode="out")
                if paths and paths[0]:
                    sample_paths.append(len(paths[0]) - 1)
        if sample_paths:
            result["sample_stats"] = {
                "average_path_length": round(sum(sample_paths) / len(sample_paths), 1),
                "min_path_length": min(sample_paths),
                "max_path_length": max(sample_paths),
                "sample_size": len(sample_paths),
            }

    return result


# =============================================================================
# Verify Command
# =============================================================================


def cmd_verify(args: argparse.Namespace) -> dict:
    """
    Verify universe file integrity.

    Checks that the graph loads and satisfies every generation postcondition.
    """
    query_ts = get_utc_timestamp()
    graph_path = _graph_path(args)

    start = time.perf_counter()
    universe, error = _load_or_error(graph_path, query_ts)
    if error:
        return error
    load_time = time.perf_counter() - start

    max_degree = get_settings().max_adjacent_sectors
    checks: list[dict[str, Any]] = [
        {"check": "load", "status": "pass", "load_time_ms": round(load_time * 1000, 1)}
    ]
    errors: list[str] = []

    for name, violations in (
        ("sector_ids", check_sector_ids(universe)),
        ("degree", check_degree(universe, max_degree)),
        ("lanes", check_lanes(universe)),
        ("strong_connectivity", check_strong_connectivity(universe)),
        ("classification", check_classification(universe)),
    ):
        if violations:
            errors.extend(violations)
            checks.append({"check": name, "status": "fail", "violations": violations})
        else:
            checks.append({"check": name, "status": "pass"})

    result: dict[str, Any] = {
        "query_timestamp": query_ts,
        "graph_path": str(graph_path),
        "status": "fail" if errors else "pass",
        "checks": checks,
    }
    if errors:
        result["error"] = "verification_failed"
        result["message"] = f"{len(errors)} check(s) failed"
        result["errors"] = errors
    return result


# =============================================================================
# Instance Command
# =============================================================================


def cmd_instance(args: argparse.Namespace) -> dict:
    """
    Build rows for a new single-player universe.

    Translates the fixed single-player topology past the highest persisted
    sector id. Rows are written to --output as JSON when given.
    """
    query_ts = get_utc_timestamp()
    max_persisted_id = getattr(args, "max_persisted_id", None)

    if max_persisted_id is not None and max_persisted_id < 0:
        return {
            "error": "invalid_parameter",
            "message": "max_persisted_id must be non-negative",
            "query_timestamp": query_ts,
        }

    instance = build_single_player_instance(max_persisted_id)
    first_id, last_id = instance.sector_id_range

    result: dict[str, Any] = {
        "query_timestamp": query_ts,
        "offset": instance.offset,
        "sector_id_range": [first_id, last_id],
        "starting_sector_id": instance.starting_sector_id,
        "star_mall_sector_ids": instance.star_mall_sector_ids,
        "seed_planet_sector_ids": instance.seed_planet_sector_ids,
        "sector_rows": len(instance.sector_rows),
        "edge_rows": len(instance.edge_rows),
    }

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(instance.to_dict()), encoding="utf-8")
        result["output"] = {
            "path": str(output_path),
            "size_kb": round(output_path.stat().st_size / 1024, 1),
        }
    else:
        result["hint"] = "Use --output FILE to write sector and edge rows"

    return result


# =============================================================================
# Parser Registration
# =============================================================================


def register_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register universe command parsers."""

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a universe and save it as a .universe file",
    )
    generate_parser.add_argument(
        "sectors",
        type=int,
        help="Number of sectors to generate",
    )
    generate_parser.add_argument(
        "--seed",
        "-s",
        type=int,
        help="Generation seed (default: current time)",
    )
    generate_parser.add_argument(
        "--output",
        "-o",
        help="Output path (default: cache/universe.universe)",
    )
    generate_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Overwrite existing output file",
    )
    generate_parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip postcondition checks",
    )
    generate_parser.set_defaults(func=cmd_generate)

    # Stats command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Display universe statistics",
    )
    stats_parser.add_argument(
        "--graph",
        "-g",
        help="Universe file path (default: cache/universe.universe)",
    )
    stats_parser.add_argument(
        "--detailed",
        "-d",
        action="store_true",
        help="Include region sizes, degree histogram and sample path lengths",
    )
    stats_parser.set_defaults(func=cmd_stats)

    # Verify command
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify universe file integrity",
    )
    verify_parser.add_argument(
        "--graph",
        "-g",
        help="Universe file path (default: cache/universe.universe)",
    )
    verify_parser.set_defaults(func=cmd_verify)

    # Instance command
    instance_parser = subparsers.add_parser(
        "instance",
        help="Build rows for a new single-player universe",
    )
    instance_parser.add_argument(
        "--max-persisted-id",
        type=int,
        default=None,
        help="Highest sector id already stored (default: none)",
    )
    instance_parser.add_argument(
        "--output",
        "-o",
        help="Write sector and edge rows to this JSON file",
    )
    instance_parser.set_defaults(func=cmd_instance)
