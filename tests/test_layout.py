"""Tests for pixel layout."""

from flou.layout import (
    RenderConfig,
    calculate_text_size,
    canvas_size,
    connection_points,
    edge_midpoint,
    node_origin,
    padded_to_pixel,
    shape_size,
    wrap_text,
)
from flou.models import NodeShape, Vec2
from flou.pipeline import compile_source
from flou.pos import Direction, IndexPos, PaddedPos


def test_text_size_calculation() -> None:
    """Test text size calculation."""
    size = calculate_text_size("Hello", 12.0)
    assert size.x > 0
    assert size.y > 0

    # Multi-line should be taller
    size_multi = calculate_text_size("Hello\nWorld", 12.0)
    assert size_multi.y > size.y


def test_text_wrapping() -> None:
    """Test that long text gets wrapped."""
    long_label = "This is a very long label that should definitely be wrapped"
    lines = wrap_text(long_label, 100, 10.0)

    assert len(lines) > 1
    assert all(len(line) <= 16 for line in lines)
    assert " ".join(lines) == long_label


def test_explicit_line_breaks_are_kept() -> None:
    assert wrap_text("one\ntwo", 1000, 10.0) == ["one", "two"]


def test_node_origin_without_gap() -> None:
    config = RenderConfig(NODE_WIDTH=50, NODE_HEIGHT=100, GAP_X=0, GAP_Y=0)

    assert node_origin(IndexPos(0, 0), config) == Vec2(0, 0)
    assert node_origin(IndexPos(2, 0), config) == Vec2(100, 0)
    assert node_origin(IndexPos(1, 3), config) == Vec2(50, 300)


def test_node_origin_with_gap() -> None:
    """Test each cell is preceded by one gap per cell before it, plus one."""
    config = RenderConfig(NODE_WIDTH=50, NODE_HEIGHT=100, GAP_X=10, GAP_Y=20)

    assert node_origin(IndexPos(0, 0), config) == Vec2(10, 20)
    assert node_origin(IndexPos(2, 0), config) == Vec2(130, 20)
    assert node_origin(IndexPos(1, 3), config) == Vec2(70, 380)


def test_padded_to_pixel() -> None:
    """Cells map to their centre, lanes to the middle of the gap."""
    config = RenderConfig()

    assert padded_to_pixel(PaddedPos(1, 1), config) == Vec2(150, 100)
    assert padded_to_pixel(PaddedPos(0, 0), config) == Vec2(25, 25)
    assert padded_to_pixel(PaddedPos(2, 3), config) == Vec2(275, 250)


def test_canvas_size() -> None:
    config = RenderConfig()
    assert canvas_size(IndexPos(3, 2), config) == Vec2(800, 350)
    assert canvas_size(IndexPos(0, 0), config) == Vec2(50, 50)


def test_square_shapes_use_short_side() -> None:
    config = RenderConfig()
    assert shape_size(NodeShape.CIRCLE, config) == Vec2(100, 100)
    assert shape_size(NodeShape.DIAMOND, config) == Vec2(200, 100)


def test_edge_midpoint() -> None:
    config = RenderConfig()

    assert edge_midpoint(IndexPos(0, 0), Direction.EAST, NodeShape.RECTANGLE, config) == Vec2(250, 100)
    assert edge_midpoint(IndexPos(0, 0), Direction.NORTH, NodeShape.RECTANGLE, config) == Vec2(150, 50)
    assert edge_midpoint(IndexPos(0, 0), Direction.EAST, NodeShape.SQUARE, config) == Vec2(200, 100)


def test_connection_points_start_on_outlines() -> None:
    """Test routed connections start and end on node outlines."""
    diagram = compile_source("grid { a(connect: e:w@e), _, b; }")
    points = connection_points(diagram, diagram.connections[0], RenderConfig())

    assert points == [Vec2(250, 100), Vec2(550, 100)]


def test_connection_points_are_orthogonal() -> None:
    """Test a connection blocked by a node detours through the lane above it."""
    diagram = compile_source("grid { a(connect: e:w#b), wall, b#b; }")
    points = connection_points(diagram, diagram.connections[0], RenderConfig())

    assert diagram.connections[0].to == (IndexPos(2, 0), Direction.WEST)
    assert points == [
        Vec2(250, 100),
        Vec2(275, 100),
        Vec2(275, 25),
        Vec2(525, 25),
        Vec2(525, 100),
        Vec2(550, 100),
    ]
    for start, end in zip(points, points[1:]):
        assert start.x == end.x or start.y == end.y
        assert start != end
