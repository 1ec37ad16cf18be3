"""
sectorgen Constants

Universe tunables shared by the generator, the settings layer and the CLI.
"""

# =============================================================================
# Shared Universe
# =============================================================================

TOTAL_SECTORS = 5000
SECTORS_PER_REGION = 35  # average cluster size
MAX_ADJACENT_SECTORS = 12
# Lowest lane cap generation can satisfy
MIN_ADJACENT_SECTORS = 3

NUM_STAR_MALLS = 8
NUM_SEED_PLANETS = 6

# Sectors per star mall / seed planet before the configured count is reached
STAR_MALL_SCALE = 100
SEED_PLANET_SCALE = 300

ONE_WAY_FRACTION = 0.05

# =============================================================================
# Generation Shape
#
# Multipliers applied to region sizes and edge counts.
# =============================================================================

MIN_REGION_SIZE = 3
MIN_AVG_REGION_SIZE = 5
REGION_SIZE_JITTER_MIN = 0.6
REGION_SIZE_JITTER_SPAN = 0.8
INTRA_REGION_EXTRA_EDGE_RATIO = 0.5
INTER_REGION_EXTRA_EDGE_RATIO = 0.3

# Region distance dominates sector-id distance when picking repair endpoints
REPAIR_REGION_WEIGHT = 1000

# =============================================================================
# Routing
# =============================================================================

DEFAULT_MAX_ROUTE_DEPTH = 50

# =============================================================================
# Single-Player Universes
#
# Every single-player universe shares one topology (same seed), translated
# into its own id range by an additive offset.
# =============================================================================

SINGLE_PLAYER_SEED = 1337
SINGLE_PLAYER_TOTAL_SECTORS = 1000
