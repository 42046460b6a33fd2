"""Core domain types for Mosaic.

This module contains plain value types with no I/O.

Usage:
    from mosaic.core import Direction, Position, EdgeLabel, MosaicError
"""

from .errors import MosaicError
from .types import (
    Direction,
    EdgeLabel,
    Position,
    WorldPosition,
)

__all__ = [
    "MosaicError",
    "Direction",
    "EdgeLabel",
    "Position",
    "WorldPosition",
]
