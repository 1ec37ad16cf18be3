"""
sectorgen - Procedural sector universe generation

Builds a deterministic, strongly connected graph of sectors and lanes
from a seed, and answers shortest-path queries over it.
Provides both library access and CLI commands.

Usage as library:
    from sectorgen import generate_universe, find_shortest_path

    universe = generate_universe(5000, seed=42)
    path = find_shortest_path(universe.edges, 1, 4200)

Usage as CLI:
    python -m sectorgen generate 5000 --seed 42
    python -m sectorgen route 1 4200
    python -m sectorgen stats --detailed

Package structure:
    sectorgen/
    ├── core/           # Config, logging, constants, formatters
    ├── universe/       # Generation pipeline, graph, persistence
    ├── services/       # Navigation (routing) over a generated universe
    └── commands/       # CLI command implementations
"""

__version__ = "1.0.0"

# Re-export commonly used names for convenience
from .core import get_utc_timestamp
from .services.navigation.router import find_shortest_path
from .universe import (
    GenerationConfig,
    SectorType,
    UniverseGenerationError,
    UniverseGraph,
    generate_universe,
)

__all__ = [
    "__version__",
    "generate_universe",
    "find_shortest_path",
    "GenerationConfig",
    "SectorType",
    "UniverseGraph",
    "UniverseGenerationError",
    "get_utc_timestamp",
]
