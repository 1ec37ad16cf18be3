"""
Universe Builder - generate, verify and persist a universe file.

Wraps the pure generator with the side effects callers need at bootstrap:
logging a summary, writing the .universe container and loading it back.
Generation can take a while for large sector counts, so callers should run
build_universe as a background task rather than on a request path.
"""

from __future__ import annotations

import time
from pathlib import Path

from ..core.logging import get_logger
from .generator import GenerationConfig, GenerationResult, run_generation
from .graph import UniverseGraph
from .serialization import SerializationError, detect_format
from .serialization import load_universe_graph as load_safe
from .serialization import save_universe_graph as save_safe

logger = get_logger(__name__)


class UniverseBuildError(Exception):
    """Error building or loading a universe file."""

    pass


def default_universe_path() -> Path:
    """Universe file location from settings (SECTORGEN_UNIVERSE_PATH or cache dir)."""
    from ..core.config import get_settings

    return get_settings().default_universe_path


def build_universe(
    total_sectors: int | None = None,
    seed: int | None = None,
    output_path: Path | None = None,
    config: GenerationConfig | None = None,
) -> GenerationResult:
    """
    Generate a universe and optionally save it.

    Args:
        total_sectors: Sector count (defaults to config.total_sectors)
        seed: Generation seed (defaults to the current time)
        output_path: Optional path to save the .universe file
        config: Tunables (defaults to GenerationConfig.from_settings())

    Returns:
        GenerationResult with the universe and generation report

    Raises:
        UniverseGenerationError: If generation or a postcondition fails
        UniverseBuildError: If the file cannot be written
    """
    if config is None:
        config = GenerationConfig.from_settings()

    start = time.perf_counter()
    result = run_generation(total_sectors, seed, config)
    elapsed = time.perf_counter() - start
    report = result.report

    logger.info(
        "Generated %d sectors in %d regions (seed %d) in %.2fs",
        report.total_sectors,
        report.regions,
        report.seed,
        elapsed,
    )
    if report.one_way_converted < report.one_way_target:
        logger.warning(
            "Converted %d of %d targeted one-way sectors",
            report.one_way_converted,
            report.one_way_target,
        )
    if report.lanes_added:
        logger.warning(
            "Connectivity repair added %d new lanes across %d components",
            report.lanes_added,
            report.components_before_repair,
        )

    if output_path:
        try:
            save_safe(result.universe, output_path)
        except SerializationError as e:
            raise UniverseBuildError(f"Failed to write universe graph: {output_path}\n{e}") from e
        logger.info("Saved universe graph to %s", output_path)

    return result


def load_universe(graph_path: Path | None = None) -> UniverseGraph:
    """
    Load a pre-built universe file.

    Args:
        graph_path: Path to the .universe file (defaults to settings path)

    Raises:
        UniverseBuildError: If the file is missing, corrupted, or incompatible
    """
    if graph_path is None:
        graph_path = default_universe_path()

    if not graph_path.exists():
        raise UniverseBuildError(
            f"Universe graph not found: {graph_path}\n"
            "Run 'sectorgen generate <sectors>' to create it."
        )

    try:
        file_format = detect_format(graph_path)
    except SerializationError as e:
        raise UniverseBuildError(str(e)) from e

    if file_format != "universe":
        raise UniverseBuildError(
            f"Unknown file format for {graph_path}. Expected .universe format.\n"
            "Regenerate with 'sectorgen generate <sectors> --force'."
        )

    try:
        return load_safe(graph_path)
    except SerializationError as e:
        raise UniverseBuildError(
            f"Failed to load universe graph: {graph_path}\n"
            f"Error: {e}\n"
            "The file may be corrupted. Regenerate with 'sectorgen generate <sectors> --force'."
        ) from e
