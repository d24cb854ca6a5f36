"""Position and identifier lookups over a parsed grid."""

from typing import Optional

from .models import Grid
from .pos import Direction, IndexPos


class GridIndex:
    """Bidirectional position <-> identifier index of the grid block.

    Out-of-bounds positions are treated as empty, never as errors.
    """

    def __init__(
        self,
        size: IndexPos,
        position_to_id: dict[IndexPos, str],
        id_to_positions: dict[str, tuple[IndexPos, ...]],
    ):
        self._size = size
        self._position_to_id = position_to_id
        self._id_to_positions = id_to_positions

    @classmethod
    def from_ast(cls, grid: Grid) -> "GridIndex":
        position_to_id: dict[IndexPos, str] = {}
        id_to_positions: dict[str, list[IndexPos]] = {}

        for pos, node in grid.nodes():
            position_to_id[pos] = node.id
            id_to_positions.setdefault(node.id, []).append(pos)

        return cls(
            grid.size,
            position_to_id,
            {identifier: tuple(positions) for identifier, positions in id_to_positions.items()},
        )

    @property
    def size(self) -> IndexPos:
        """(width, height) in cells."""
        return self._size

    def in_bounds(self, pos: IndexPos) -> bool:
        return pos.in_bounds(self._size)

    def get_id(self, pos: IndexPos) -> Optional[str]:
        return self._position_to_id.get(pos)

    def is_occupied(self, pos: IndexPos) -> bool:
        return pos in self._position_to_id

    def get_positions(self, identifier: str) -> Optional[tuple[IndexPos, ...]]:
        """Every cell using ``identifier``, in row-major order."""
        return self._id_to_positions.get(identifier)

    def positions(self) -> list[IndexPos]:
        """Occupied cells in row-major order."""
        return sorted(self._position_to_id, key=lambda pos: (pos.y, pos.x))

    def walk(self, start: IndexPos, step: Direction) -> Optional[IndexPos]:
        """First occupied cell strictly past ``start`` in direction ``step``.

        Empty cells are skipped; ``None`` as soon as the walk leaves the grid.
        ``start`` itself is never checked, so it may lie just outside.
        """
        current = start
        while True:
            current = current.step(step)
            if not self.in_bounds(current):
                return None
            if current in self._position_to_id:
                return current
