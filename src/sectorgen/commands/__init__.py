"""
sectorgen Commands

Command implementations for the sectorgen CLI.
Each module handles a logical group of related commands.
"""

from . import navigation, universe

__all__ = [
    "navigation",
    "universe",
]
