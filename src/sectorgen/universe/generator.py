"""
Universe generation pipeline.

``generate_universe(total_sectors, seed)`` is a pure function: the same
arguments and config always produce the same sectors and lanes. The
pipeline runs strictly in order:

    seeded stream -> regions -> intra-region lanes -> region bridges
    -> sector classification -> strong-connectivity repair
    -> harmony corridors

No I/O happens during generation. Postconditions are asserted at the end
unless the config disables them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..core.config import is_timing_enabled
from ..core.constants import (
    DEFAULT_MAX_ROUTE_DEPTH,
    MAX_ADJACENT_SECTORS,
    MIN_ADJACENT_SECTORS,
    NUM_SEED_PLANETS,
    NUM_STAR_MALLS,
    ONE_WAY_FRACTION,
    SECTORS_PER_REGION,
    TOTAL_SECTORS,
)
from ..core.logging import get_logger
from .classifier import classify_sectors, mark_harmony_corridors
from .connectivity import repair_strong_connectivity
from .errors import InvalidGenerationParameters, UniverseInvariantError
from .graph import Adjacency, Sector, UniverseGraph
from .rng import SeededRng
from .topology import bridge_regions, connect_within_regions, partition_regions
from .validation import verify_universe

if TYPE_CHECKING:
    from ..core.config import SectorGenSettings

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationConfig:
    """
    Tunables for one generation run.

    Defaults mirror the shared-universe constants. The generator never
    reads the environment; use ``from_settings`` to build a config from
    SECTORGEN_* variables.
    """

    total_sectors: int = TOTAL_SECTORS
    sectors_per_region: int = SECTORS_PER_REGION
    max_adjacent_sectors: int = MAX_ADJACENT_SECTORS
    num_star_malls: int = NUM_STAR_MALLS
    num_seed_planets: int = NUM_SEED_PLANETS
    one_way_fraction: float = ONE_WAY_FRACTION
    max_route_depth: int = DEFAULT_MAX_ROUTE_DEPTH
    verify_postconditions: bool = True
    verify_determinism: bool = False

    @classmethod
    def from_settings(cls, settings: SectorGenSettings | None = None) -> GenerationConfig:
        """Build a config from validated settings (defaults to get_settings())."""
        if settings is None:
            from ..core.config import get_settings

            settings = get_settings()
        return cls(
            total_sectors=settings.total_sectors,
            sectors_per_region=settings.sectors_per_region,
            max_adjacent_sectors=settings.max_adjacent_sectors,
            num_star_malls=settings.num_star_malls,
            num_seed_planets=settings.num_seed_planets,
            one_way_fraction=settings.one_way_fraction,
            max_route_depth=settings.max_route_depth,
            verify_postconditions=settings.verify_postconditions,
            verify_determinism=settings.verify_determinism,
        )

    def validate(self) -> None:
        """
        Raises:
            InvalidGenerationParameters: If a tunable is out of range
        """
        if self.sectors_per_region < 1:
            raise InvalidGenerationParameters("sectors_per_region must be at least 1")
        if self.max_adjacent_sectors < MIN_ADJACENT_SECTORS:
            raise InvalidGenerationParameters(
                f"max_adjacent_sectors must be at least {MIN_ADJACENT_SECTORS}"
            )
        if self.num_star_malls < 1 or self.num_seed_planets < 1:
            raise InvalidGenerationParameters("star mall and seed planet counts must be at least 1")
        if not 0.0 <= self.one_way_fraction <= 1.0:
            raise InvalidGenerationParameters("one_way_fraction must be between 0 and 1")
        if self.max_route_depth < 1:
            raise InvalidGenerationParameters("max_route_depth must be at least 1")


@dataclass
class GenerationReport:
    """Counters gathered while generating, for logs and CLI output."""

    total_sectors: int
    seed: int
    regions: int = 0
    intra_region_lanes: int = 0
    inter_region_lanes: int = 0
    star_malls: int = 0
    seed_planets: int = 0
    one_way_target: int = 0
    one_way_converted: int = 0
    components_before_repair: int = 0
    lanes_restored: int = 0
    lanes_added: int = 0
    harmony_sectors: int = 0
    phase_seconds: dict[str, float] = field(default_factory=dict)


@dataclass
class GenerationResult:
    universe: UniverseGraph
    report: GenerationReport


class _PhaseTimer:
    """Records per-phase wall time into a report when timing is enabled."""

    def __init__(self, report: GenerationReport, enabled: bool):
        self.report = report
        self.enabled = enabled
        self._last = time.perf_counter()

    def mark(self, phase: str) -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        self.report.phase_seconds[phase] = round(now - self._last, 4)
        self._last = now


def default_seed() -> int:
    """Millisecond wall-clock seed, truncated to 32 bits."""
    return int(time.time() * 1000) & 0xFFFFFFFF


def run_generation(
    total_sectors: int | None = None,
    seed: int | None = None,
    config: GenerationConfig | None = None,
) -> GenerationResult:
    """
    Generate a universe and report what each phase did.

    Args:
        total_sectors: Sector count (defaults to config.total_sectors)
        seed: Seed for the stream (defaults to the current time)
        config: Tunables (defaults to GenerationConfig())

    Returns:
        GenerationResult with the universe and its report

    Raises:
        InvalidGenerationParameters: If arguments are out of range
        UniverseInvariantError: If a postcondition fails
    """
    config = config or GenerationConfig()
    config.validate()

    total = config.total_sectors if total_sectors is None else total_sectors
    if total < 1:
        raise InvalidGenerationParameters(f"total_sectors must be at least 1, got {total}")
    if seed is None:
        seed = default_seed()

    result = _generate(total, seed, config)

    if config.verify_postconditions:
        verify_universe(result.universe, config.max_adjacent_sectors, total)

    if config.verify_determinism:
        replay = _generate(total, seed, config)
        if replay.universe.fingerprint() != result.universe.fingerprint():
            raise UniverseInvariantError(
                [f"seed {seed} produced two different universes of {total} sectors"]
            )

    return result


def generate_universe(
    total_sectors: int | None = None,
    seed: int | None = None,
    config: GenerationConfig | None = None,
) -> UniverseGraph:
    """
    Generate a universe of ``total_sectors`` sectors from ``seed``.

    See run_generation for arguments and errors.
    """
    return run_generation(total_sectors, seed, config).universe


def _generate(total: int, seed: int, config: GenerationConfig) -> GenerationResult:
    report = GenerationReport(total_sectors=total, seed=seed)
    timer = _PhaseTimer(report, is_timing_enabled())
    rng = SeededRng(seed)
    max_degree = config.max_adjacent_sectors

    sectors = [Sector(id=i) for i in range(1, total + 1)]
    edges: Adjacency = {i: [] for i in range(1, total + 1)}

    regions = partition_regions(sectors, rng, config.sectors_per_region)
    report.regions = len(regions)
    timer.mark("partition")

    report.intra_region_lanes = connect_within_regions(edges, regions, rng, max_degree)
    timer.mark("intra_region")

    report.inter_region_lanes = bridge_regions(edges, regions, rng, max_degree)
    timer.mark("inter_region")

    classification = classify_sectors(
        sectors,
        edges,
        rng,
        num_star_malls=config.num_star_malls,
        num_seed_planets=config.num_seed_planets,
        one_way_fraction=config.one_way_fraction,
    )
    report.star_malls = len(classification.star_malls)
    report.seed_planets = len(classification.seed_planets)
    report.one_way_target = classification.one_way_target
    report.one_way_converted = len(classification.one_way_sectors)
    timer.mark("classify")

    repair = repair_strong_connectivity(sectors, edges, max_degree)
    report.components_before_repair = repair.components_before
    report.lanes_restored = repair.lanes_restored
    report.lanes_added = repair.lanes_added
    timer.mark("repair")

    report.harmony_sectors = mark_harmony_corridors(sectors, edges, config.max_route_depth)
    timer.mark("harmony")

    if report.phase_seconds:
        logger.debug("Generation timings (s): %s", report.phase_seconds)

    return GenerationResult(
        universe=UniverseGraph(sectors=sectors, edges=edges, seed=seed),
        report=report,
    )
