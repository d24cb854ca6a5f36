"""Orthogonal connector routing between grid nodes.

Paths are computed in padded space, where cells sit on odd coordinates and
the even coordinates form one-unit lanes around them. A point on two lane
coordinates can never overlap a node, so corners are pushed onto such points
whenever the direct corner would sit on a node's row or column.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .grid import GridIndex
from .pos import Direction, IndexPos, PaddedPos

assert PaddedPos.PADDING == 1, "routing assumes exactly one lane between neighbouring cells"


class Axis(Enum):
    X = "x"
    Y = "y"


@dataclass(frozen=True)
class FreeAxes:
    """How many coordinates of a point lie on a lane.

    ``count`` is 0 for a cell centre, 1 for a point on a node's row or column
    and 2 for a pure lane intersection. ``on_cell`` names the single axis
    whose coordinate is on a cell when ``count`` is 1.
    """

    count: int
    on_cell: Optional[Axis] = None

    @classmethod
    def of(cls, pos: PaddedPos) -> "FreeAxes":
        x_on_cell, y_on_cell = pos.x_on_cell(), pos.y_on_cell()
        if x_on_cell and y_on_cell:
            return cls(0)
        if x_on_cell:
            return cls(1, Axis.X)
        if y_on_cell:
            return cls(1, Axis.Y)
        return cls(2)


def link_point(pos: IndexPos, side: Direction) -> PaddedPos:
    """The lane point directly outside ``side`` of the cell at ``pos``."""
    return PaddedPos.from_index(pos).step(side)


def segment_is_clear(grid: GridIndex, start: PaddedPos, end: PaddedPos) -> bool:
    """Whether the straight segment between two points avoids every node.

    Segments running along a lane are always clear. Segments on a cell row or
    column walk the grid from the cell just behind ``start`` and must not meet
    a node before passing ``end``.
    """
    if start == end:
        return True

    direction = PaddedPos.straight_line(start, end)
    if direction is None:
        return False

    horizontal = direction in (Direction.EAST, Direction.WEST)
    fixed = start.y if horizontal else start.x
    if fixed % 2 == 0:
        return True

    behind = start
    moving = start.x if horizontal else start.y
    if moving % 2 == 0:
        behind = start.step(direction.reverse())

    hit = grid.walk(behind.to_index(), direction)
    if hit is None:
        return True

    hit_pos = PaddedPos.from_index(hit)
    dx, dy = direction.unit
    overshoot = (hit_pos.x - end.x) * dx + (hit_pos.y - end.y) * dy
    return overshoot > 0


def _collinear(*points: PaddedPos) -> bool:
    return len({p.x for p in points}) == 1 or len({p.y for p in points}) == 1


def _best_corner(grid: GridIndex, start: PaddedPos, end: PaddedPos) -> PaddedPos:
    """Pick one of the two right-angle corners between ``start`` and ``end``.

    The corner with more free axes wins. On a tie, a corner whose two legs
    are both clear of nodes is preferred; otherwise the second candidate is
    used.
    """
    candidates = (PaddedPos(start.x, end.y), PaddedPos(end.x, start.y))
    first, second = (FreeAxes.of(corner).count for corner in candidates)
    if first != second:
        return candidates[0] if first > second else candidates[1]

    clear = [
        segment_is_clear(grid, start, corner) and segment_is_clear(grid, corner, end)
        for corner in candidates
    ]
    if clear[0] and not clear[1]:
        return candidates[0]
    return candidates[1]


def _nudge_corner(corner: PaddedPos, on_cell: Axis, start: PaddedPos, end: PaddedPos) -> list[PaddedPos]:
    """Move a corner off a node's row or column into the neighbouring lane.

    The lane closest to both link points (taxicab) wins, the first one on a
    tie. Extra waypoints keep every leg axis-aligned.
    """
    if on_cell is Axis.X:
        directions = (Direction.WEST, Direction.EAST)
    else:
        directions = (Direction.NORTH, Direction.SOUTH)

    direction, nudged = min(
        ((d, corner.step(d)) for d in directions),
        key=lambda option: start.taxicab(option[1]) + end.taxicab(option[1]),
    )

    waypoints = []
    if PaddedPos.straight_line(start, nudged) is None:
        waypoints.append(start.step(direction))
    waypoints.append(nudged)
    if PaddedPos.straight_line(end, nudged) is None:
        waypoints.append(end.step(direction))
    return waypoints


def get_path(
    grid: GridIndex,
    from_: tuple[IndexPos, Direction],
    to: tuple[IndexPos, Direction],
) -> list[PaddedPos]:
    """
    Route a connection from the exit side of one cell to the entry side of another.

    Returns at least two waypoints; the first and last are the two cell
    centres and every pair of consecutive waypoints shares an axis.

    Steps (first match wins):
    1. Coinciding link points: straight from cell to cell
    2. Link points on a common, unobstructed line: straight between them
    3. Otherwise go around the best corner, moved into a lane if needed
    """
    origin = PaddedPos.from_index(from_[0])
    destination = PaddedPos.from_index(to[0])
    start = link_point(*from_)
    end = link_point(*to)

    if start == end:
        return [origin, destination]

    if segment_is_clear(grid, start, end):
        if _collinear(origin, start, end, destination):
            return [origin, destination]
        return [origin, start, end, destination]

    corner = _best_corner(grid, start, end)
    free = FreeAxes.of(corner)
    if free.count == 2:
        middle = [corner]
    else:
        # The candidates always score (0, 2), (2, 0) or (1, 1), so a chosen
        # corner never sits on a cell centre.
        middle = _nudge_corner(corner, free.on_cell, start, end)

    return [origin, start, *middle, end, destination]
