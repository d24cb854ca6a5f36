"""Tests for orthogonal connector routing."""

import itertools

import pytest

from flou.grid import GridIndex
from flou.models import Grid, GridNode
from flou.pos import Direction, IndexPos, PaddedPos
from flou.router import FreeAxes, get_path, link_point, segment_is_clear


def make_grid(*rows: str) -> GridIndex:
    """Build an index from rows like ``"a _ b"``; ``_`` is an empty cell."""
    return GridIndex.from_ast(
        Grid(rows=[[None if c == "_" else GridNode(id=c) for c in row.split()] for row in rows])
    )


def segment_points(start: PaddedPos, end: PaddedPos) -> list[PaddedPos]:
    xs = range(min(start.x, end.x), max(start.x, end.x) + 1)
    ys = range(min(start.y, end.y), max(start.y, end.y) + 1)
    return [PaddedPos(x, y) for x in xs for y in ys]


def assert_valid_path(grid: GridIndex, path: list[PaddedPos]) -> None:
    """Orthogonal, and only the first and last segments touch occupied cells."""
    assert len(path) >= 2
    for start, end in zip(path, path[1:]):
        assert start.x == end.x or start.y == end.y, path

    for start, end in zip(path[1:-2], path[2:-1]):
        for point in segment_points(start, end):
            if point.is_cell_aligned():
                assert not grid.is_occupied(point.to_index()), path


def test_link_point() -> None:
    assert link_point(IndexPos(0, 0), Direction.EAST) == PaddedPos(2, 1)
    assert link_point(IndexPos(1, 2), Direction.NORTH) == PaddedPos(3, 4)


def test_free_axes() -> None:
    assert FreeAxes.of(PaddedPos(1, 1)).count == 0
    assert FreeAxes.of(PaddedPos(2, 2)).count == 2
    assert FreeAxes.of(PaddedPos(1, 2)).on_cell.value == "x"
    assert FreeAxes.of(PaddedPos(2, 1)).on_cell.value == "y"


def test_segment_is_clear() -> None:
    grid = make_grid("a b _ c")

    # Along a lane
    assert segment_is_clear(grid, PaddedPos(0, 0), PaddedPos(8, 0))
    # Along the cell row, blocked by b
    assert not segment_is_clear(grid, PaddedPos(2, 1), PaddedPos(6, 1))
    # Between b and c only an empty cell
    assert segment_is_clear(grid, PaddedPos(4, 1), PaddedPos(6, 1))
    # Not axis-aligned
    assert not segment_is_clear(grid, PaddedPos(0, 0), PaddedPos(2, 2))


def test_straight_line_shortcut() -> None:
    """Same row, empty cells between: no corners beyond the link points."""
    grid = make_grid("a _ _ b")
    path = get_path(grid, (IndexPos(0, 0), Direction.EAST), (IndexPos(3, 0), Direction.WEST))
    assert path == [PaddedPos(1, 1), PaddedPos(7, 1)]


def test_adjacent_facing_cells() -> None:
    grid = make_grid("a", "b")
    path = get_path(grid, (IndexPos(0, 0), Direction.SOUTH), (IndexPos(0, 1), Direction.NORTH))
    assert path == [PaddedPos(1, 1), PaddedPos(1, 3)]


def test_clear_lane_between_link_points() -> None:
    grid = make_grid("a _", "_ b")
    path = get_path(grid, (IndexPos(0, 0), Direction.SOUTH), (IndexPos(1, 1), Direction.NORTH))
    assert path == [PaddedPos(1, 1), PaddedPos(1, 2), PaddedPos(3, 2), PaddedPos(3, 3)]


def test_lane_corner() -> None:
    """A corner on two lanes is used as-is."""
    grid = make_grid("a _", "_ b")
    path = get_path(grid, (IndexPos(0, 0), Direction.EAST), (IndexPos(1, 1), Direction.NORTH))
    assert path == [
        PaddedPos(1, 1),
        PaddedPos(2, 1),
        PaddedPos(2, 2),
        PaddedPos(3, 2),
        PaddedPos(3, 3),
    ]


def test_goes_around_obstruction() -> None:
    """A node between two link points forces a detour through a lane."""
    grid = make_grid("a wall b")
    path = get_path(grid, (IndexPos(0, 0), Direction.EAST), (IndexPos(2, 0), Direction.WEST))

    assert path == [
        PaddedPos(1, 1),
        PaddedPos(2, 1),
        PaddedPos(2, 0),
        PaddedPos(4, 0),
        PaddedPos(4, 1),
        PaddedPos(5, 1),
    ]
    assert_valid_path(grid, path)


def test_back_to_label_above() -> None:
    grid = make_grid("a _", "q n", "d")
    path = get_path(grid, (IndexPos(0, 2), Direction.NORTH), (IndexPos(0, 0), Direction.SOUTH))

    assert path[0] == PaddedPos(1, 5)
    assert path[-1] == PaddedPos(1, 1)
    assert_valid_path(grid, path)


def test_self_loop() -> None:
    """A loop leaves and re-enters its own cell through the lanes."""
    grid = make_grid("a")
    path = get_path(grid, (IndexPos(0, 0), Direction.NORTH), (IndexPos(0, 0), Direction.WEST))

    assert path == [
        PaddedPos(1, 1),
        PaddedPos(1, 0),
        PaddedPos(0, 0),
        PaddedPos(0, 1),
        PaddedPos(1, 1),
    ]


def test_self_loop_opposite_sides() -> None:
    grid = make_grid("a")
    path = get_path(grid, (IndexPos(0, 0), Direction.EAST), (IndexPos(0, 0), Direction.WEST))

    assert path[0] == path[-1] == PaddedPos(1, 1)
    assert_valid_path(grid, path)


def test_same_side_self_loop_collapses() -> None:
    grid = make_grid("a")
    path = get_path(grid, (IndexPos(0, 0), Direction.SOUTH), (IndexPos(0, 0), Direction.SOUTH))
    assert path == [PaddedPos(1, 1), PaddedPos(1, 1)]


FULL_GRID = make_grid("a b c", "d _ e", "f g h")


@pytest.mark.parametrize(
    "from_, to",
    [
        ((IndexPos(x1, y1), d1), (IndexPos(x2, y2), d2))
        for (x1, y1), (x2, y2) in [((0, 0), (2, 2)), ((0, 0), (2, 0)), ((1, 0), (1, 2)), ((2, 1), (0, 1))]
        for d1, d2 in itertools.product(Direction, repeat=2)
    ],
)
def test_every_side_combination(from_, to) -> None:
    """Test routes in a crowded grid stay orthogonal and avoid other nodes."""
    path = get_path(FULL_GRID, from_, to)

    assert path[0] == PaddedPos.from_index(from_[0])
    assert path[-1] == PaddedPos.from_index(to[0])
    assert_valid_path(FULL_GRID, path)


def test_deterministic() -> None:
    grid = make_grid("a wall b", "_ _ _", "c _ d")
    args = (grid, (IndexPos(0, 0), Direction.SOUTH), (IndexPos(2, 2), Direction.WEST))
    assert get_path(*args) == get_path(*args)
