"""Foundational types for Mosaic.

This module defines the core types used throughout the system:
- Direction: The four edges of a tile, with grid offsets
- Position: Grid coordinates (x, y)
- WorldPosition: Where a placed tile lands in the scene
- EdgeLabel: The label on one edge of a tile, with an optional suffix
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """The four edges of a square tile.

    Iteration order is UP, RIGHT, DOWN, LEFT (clockwise), which is also the
    order edge labels appear in a tileset record.
    """

    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (dx, dy) offset for this direction.

        Coordinate system: x increases to the right, y increases up.
        """
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @property
    def dx(self) -> int:
        return self.offset[0]

    @property
    def dy(self) -> int:
        return self.offset[1]


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.RIGHT: Direction.LEFT,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
}


class Position(NamedTuple):
    """A cell position in the grid.

    - x increases to the right
    - y increases up
    - (0, 0) is the bottom-left cell
    """

    x: int
    y: int

    def __add__(self, other: object) -> Position:
        """Add a direction offset or tuple to this position."""
        if isinstance(other, Direction):
            dx, dy = other.offset
            return Position(self.x + dx, self.y + dy)
        if isinstance(other, tuple) and len(other) == 2:
            return Position(self.x + other[0], self.y + other[1])
        return NotImplemented

    def neighbors(self) -> dict[Direction, Position]:
        """Get all adjacent positions keyed by direction."""
        return {d: self + d for d in Direction}

    def in_bounds(self, width: int, height: int) -> bool:
        """Check if position is within grid bounds (0 to width-1, 0 to height-1)."""
        return 0 <= self.x < width and 0 <= self.y < height


class WorldPosition(NamedTuple):
    """A position in scene space. Tiles are one unit wide and sit on z = 0."""

    x: float
    y: float
    z: float = 0.0

    @classmethod
    def of(cls, position: Position) -> WorldPosition:
        """World position of the tile placed at a grid position."""
        return cls(float(position.x), float(position.y), 0.0)


class EdgeLabel(NamedTuple):
    """The label on one edge of a tile.

    Two edges fit together when their labels are equal. A suffix tags an
    edge as belonging to one tile family; when both edges carry a suffix,
    they must also differ, so a rotated variant cannot sit against its own
    unrotated counterpart.
    """

    label: str
    suffix: str | None = None

    @classmethod
    def parse(cls, text: str) -> EdgeLabel:
        """Parse ``label`` or ``label:suffix``. An empty suffix counts as none."""
        label, _, suffix = text.partition(":")
        return cls(label, suffix or None)

    def matches(self, other: EdgeLabel) -> bool:
        if self.label != other.label:
            return False
        if self.suffix is not None and other.suffix is not None:
            return self.suffix != other.suffix
        return True

    def __str__(self) -> str:
        if self.suffix is None:
            return self.label
        return f"{self.label}:{self.suffix}"
