"""
Universe Generation Errors.

Domain-specific exceptions raised while generating or validating a universe.
A postcondition failure indicates a logic defect, never a transient
condition, so none of these are meant to be retried.
"""

from __future__ import annotations


class UniverseGenerationError(Exception):
    """Base exception for universe generation."""

    pass


class InvalidGenerationParameters(UniverseGenerationError, ValueError):
    """Raised when generation arguments or tunables are out of range."""

    pass


class ConnectivityRepairError(UniverseGenerationError):
    """Raised when no lane endpoint under the degree cap can be found."""

    pass


class UniverseInvariantError(UniverseGenerationError):
    """
    Raised when a generated universe violates a postcondition.

    Attributes:
        violations: Human-readable description of every failed check
    """

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        summary = "; ".join(self.violations[:5])
        if len(self.violations) > 5:
            summary += f" (+{len(self.violations) - 5} more)"
        super().__init__(f"Universe invariants violated: {summary}")
