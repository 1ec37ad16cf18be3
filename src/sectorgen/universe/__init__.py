"""
Universe module for procedural sector map generation.

This module provides the core data structures and the deterministic
pipeline that turns a seed into a strongly connected sector graph.
"""

from sectorgen.universe.builder import UniverseBuildError, build_universe, load_universe
from sectorgen.universe.errors import (
    ConnectivityRepairError,
    InvalidGenerationParameters,
    UniverseGenerationError,
    UniverseInvariantError,
)
from sectorgen.universe.generator import (
    GenerationConfig,
    GenerationReport,
    GenerationResult,
    generate_universe,
    run_generation,
)
from sectorgen.universe.graph import Sector, SectorEdge, SectorType, UniverseGraph
from sectorgen.universe.instances import (
    UniverseInstance,
    build_shared_instance,
    build_single_player_instance,
    compute_sector_offset,
)
from sectorgen.universe.serialization import SerializationError

__all__ = [
    "UniverseGraph",
    "Sector",
    "SectorEdge",
    "SectorType",
    "GenerationConfig",
    "GenerationReport",
    "GenerationResult",
    "generate_universe",
    "run_generation",
    "UniverseGenerationError",
    "InvalidGenerationParameters",
    "ConnectivityRepairError",
    "UniverseInvariantError",
    "UniverseBuildError",
    "SerializationError",
    "build_universe",
    "load_universe",
    "UniverseInstance",
    "build_shared_instance",
    "build_single_player_instance",
    "compute_sector_offset",
]
