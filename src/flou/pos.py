"""Directions and the two grid coordinate spaces.

``IndexPos`` addresses cells of the author's grid. ``PaddedPos`` addresses a
finer space where every cell sits on odd coordinates and the even coordinates
between and around cells are routing lanes. The two types never compare equal
and can only be converted through the named methods on ``PaddedPos``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class Direction(str, Enum):
    """One of the four sides of a cell."""

    NORTH = "n"
    SOUTH = "s"
    WEST = "w"
    EAST = "e"

    @property
    def unit(self) -> tuple[int, int]:
        """Unit step (dx, dy) with y growing downwards."""
        return _UNIT_VECTORS[self]

    def reverse(self) -> "Direction":
        return _REVERSED[self]

    def rotate_clockwise(self) -> "Direction":
        return _CLOCKWISE[self]

    def rotate_counter_clockwise(self) -> "Direction":
        return _COUNTER_CLOCKWISE[self]


_UNIT_VECTORS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
    Direction.EAST: (1, 0),
}

_REVERSED = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
    Direction.EAST: Direction.WEST,
}

_CLOCKWISE = {
    Direction.NORTH: Direction.EAST,
    Direction.EAST: Direction.SOUTH,
    Direction.SOUTH: Direction.WEST,
    Direction.WEST: Direction.NORTH,
}

_COUNTER_CLOCKWISE = {after: before for before, after in _CLOCKWISE.items()}


@dataclass(frozen=True)
class IndexPos:
    """Cell coordinate in the author-visible grid (origin top-left)."""

    x: int
    y: int

    def step(self, direction: Direction, distance: int = 1) -> "IndexPos":
        dx, dy = direction.unit
        return IndexPos(self.x + dx * distance, self.y + dy * distance)

    def in_bounds(self, size: "IndexPos") -> bool:
        return 0 <= self.x < size.x and 0 <= self.y < size.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class PaddedPos:
    """Coordinate in routing space: cells on odd values, lanes on even ones."""

    x: int
    y: int

    # Width of the lane between two neighbouring cells.
    PADDING: ClassVar[int] = 1

    @classmethod
    def from_index(cls, pos: IndexPos) -> "PaddedPos":
        scale = cls.PADDING + 1
        return cls(pos.x * scale + cls.PADDING, pos.y * scale + cls.PADDING)

    def to_index(self) -> IndexPos:
        """Cell this point sits on; only defined for cell-aligned points."""
        if not self.is_cell_aligned():
            raise ValueError(f"{self!r} lies on a lane, not on a cell")
        scale = self.PADDING + 1
        return IndexPos((self.x - self.PADDING) // scale, (self.y - self.PADDING) // scale)

    def x_on_cell(self) -> bool:
        return self.x % 2 == 1

    def y_on_cell(self) -> bool:
        return self.y % 2 == 1

    def is_cell_aligned(self) -> bool:
        return self.x_on_cell() and self.y_on_cell()

    def step(self, direction: Direction, distance: int = 1) -> "PaddedPos":
        dx, dy = direction.unit
        return PaddedPos(self.x + dx * distance, self.y + dy * distance)

    def taxicab(self, other: "PaddedPos") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    @staticmethod
    def straight_line(start: "PaddedPos", end: "PaddedPos") -> Optional[Direction]:
        """Direction from ``start`` to ``end`` if exactly one coordinate differs."""
        if start.y == end.y and start.x != end.x:
            return Direction.EAST if start.x < end.x else Direction.WEST
        if start.x == end.x and start.y != end.y:
            return Direction.SOUTH if start.y < end.y else Direction.NORTH
        return None
