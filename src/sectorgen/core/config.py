"""
sectorgen Centralized Configuration

Provides validated, type-safe access to all environment variables using Pydantic Settings.
All environment variables are validated at first access with helpful error messages.

Usage:
    from sectorgen.core.config import get_settings

    settings = get_settings()
    if settings.log_level == "DEBUG":
        ...

Data Paths:
    Generated universes are stored in {instance_root}/cache/:
    - cache/universe.universe: Shared universe graph

Environment Variables:
    SECTORGEN_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    SECTORGEN_DEBUG: Legacy debug flag (enables DEBUG level if set)
    SECTORGEN_LOG_JSON: Output logs as JSON
    SECTORGEN_DEBUG_TIMING: Log per-phase generation timings
    SECTORGEN_TOTAL_SECTORS: Default sector count for the shared universe
    SECTORGEN_SECTORS_PER_REGION: Average region size
    SECTORGEN_MAX_ADJACENT_SECTORS: Out-degree cap per sector
    SECTORGEN_NUM_STAR_MALLS: Upper bound on star malls
    SECTORGEN_NUM_SEED_PLANETS: Upper bound on seed planets
    SECTORGEN_ONE_WAY_FRACTION: Target fraction of one-way sectors
    SECTORGEN_MAX_ROUTE_DEPTH: Default depth bound for shortest-path queries
    SECTORGEN_VERIFY_POSTCONDITIONS: Assert graph invariants after generation
    SECTORGEN_VERIFY_DETERMINISM: Regenerate once and compare fingerprints
    SECTORGEN_UNIVERSE_PATH: Custom universe graph path
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_MAX_ROUTE_DEPTH,
    MAX_ADJACENT_SECTORS,
    MIN_ADJACENT_SECTORS,
    NUM_SEED_PLANETS,
    NUM_STAR_MALLS,
    ONE_WAY_FRACTION,
    SECTORS_PER_REGION,
    TOTAL_SECTORS,
)


def _find_project_root() -> Path | None:
    """
    Find the project root by searching upward for pyproject.toml.

    Returns:
        Directory containing pyproject.toml, or None if not found
    """
    current = Path(__file__).resolve().parent

    for _ in range(10):  # Limit search depth
        if (current / "pyproject.toml").exists():
            return current
        parent = current.parent
        if parent == current:
            break  # Reached filesystem root
        current = parent

    return None


def _find_project_env_file() -> Path | None:
    """Return the project's .env file if one sits next to pyproject.toml."""
    root = _find_project_root()
    if root is None:
        return None
    env_file = root / ".env"
    return env_file if env_file.exists() else None


def _find_instance_root() -> Path:
    """
    Find the instance root directory.

    Resolution order:
    1. SECTORGEN_INSTANCE_ROOT environment variable (explicit override)
    2. Project root (directory containing pyproject.toml)
    3. Current working directory (fallback)
    """
    import os

    override = os.environ.get("SECTORGEN_INSTANCE_ROOT")
    if override:
        return Path(override)

    return _find_project_root() or Path.cwd()


# Resolve paths at module load time
_ENV_FILE = _find_project_env_file()
_INSTANCE_ROOT = _find_instance_root()


class SectorGenSettings(BaseSettings):
    """
    sectorgen configuration settings with validation.

    Environment variables are automatically loaded with the SECTORGEN_ prefix.
    All settings have sensible defaults and validation.
    """

    model_config = SettingsConfigDict(
        env_prefix="SECTORGEN_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for sectorgen components",
    )

    debug: bool = Field(
        default=False,
        description="Legacy debug flag (enables DEBUG level if set)",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    debug_timing: bool = Field(
        default=False,
        description="Log per-phase generation timings",
    )

    # =========================================================================
    # Universe Generation
    # =========================================================================

    total_sectors: int = Field(
        default=TOTAL_SECTORS,
        ge=1,
        description="Sector count for the shared universe",
    )

    sectors_per_region: int = Field(
        default=SECTORS_PER_REGION,
        ge=1,
        description="Average region (cluster) size",
    )

    max_adjacent_sectors: int = Field(
        default=MAX_ADJACENT_SECTORS,
        ge=MIN_ADJACENT_SECTORS,
        description="Maximum outgoing lanes per sector",
    )

    num_star_malls: int = Field(
        default=NUM_STAR_MALLS,
        ge=1,
        description="Upper bound on star malls (scaled down for small universes)",
    )

    num_seed_planets: int = Field(
        default=NUM_SEED_PLANETS,
        ge=1,
        description="Upper bound on seed planets (scaled down for small universes)",
    )

    one_way_fraction: float = Field(
        default=ONE_WAY_FRACTION,
        ge=0.0,
        le=1.0,
        description="Target fraction of sectors converted to one-way",
    )

    max_route_depth: int = Field(
        default=DEFAULT_MAX_ROUTE_DEPTH,
        ge=1,
        description="Default depth bound for shortest-path queries",
    )

    # =========================================================================
    # Postconditions (disable only in production)
    # =========================================================================

    verify_postconditions: bool = Field(
        default=True,
        description="Assert connectivity/degree/classification invariants after generation",
    )

    verify_determinism: bool = Field(
        default=False,
        description="Regenerate once and compare fingerprints (doubles generation cost)",
    )

    # =========================================================================
    # Data Paths
    # =========================================================================

    universe_path: Optional[Path] = Field(
        default=None,
        description="Custom universe graph file path",
    )

    instance_root: Path = Field(
        default=_INSTANCE_ROOT,
        description="Instance root directory (project root containing pyproject.toml)",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> str:
        """
        Get effective log level, respecting legacy SECTORGEN_DEBUG.

        Priority:
        1. Explicit SECTORGEN_LOG_LEVEL
        2. SECTORGEN_DEBUG=1 -> DEBUG
        3. Default: WARNING
        """
        if self.debug and self.log_level == "WARNING":
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        """Get effective log level as logging constant."""
        return getattr(logging, self.effective_log_level)

    @property
    def cache_dir(self) -> Path:
        """Path to cache directory."""
        return self.instance_root / "cache"

    @property
    def default_universe_path(self) -> Path:
        """Universe graph path, honoring SECTORGEN_UNIVERSE_PATH."""
        if self.universe_path is not None:
            return self.universe_path
        return self.cache_dir / "universe.universe"


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> SectorGenSettings:
    """
    Get the singleton settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    The settings are validated at first access.
    """
    return SectorGenSettings()


def reset_settings() -> None:
    """
    Reset the settings cache (for testing).

    After calling this, the next get_settings() call will
    reload settings from environment variables.
    """
    get_settings.cache_clear()


# =============================================================================
# Convenience Functions
# =============================================================================


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled."""
    return get_settings().effective_log_level == "DEBUG"


def is_json_logging() -> bool:
    """Check if JSON logging is enabled."""
    return get_settings().log_json


def is_timing_enabled() -> bool:
    """Check if per-phase timing logs are enabled."""
    return get_settings().debug_timing
