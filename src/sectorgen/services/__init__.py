"""
sectorgen Services.

Higher-level services built on top of a generated universe.
"""

from __future__ import annotations

__all__ = [
    "navigation",
]
