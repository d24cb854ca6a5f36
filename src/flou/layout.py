"""Pixel layout for flou diagrams."""

from dataclasses import dataclass

from .diagram import Connection, Diagram
from .models import NodeShape, Vec2
from .pos import Direction, IndexPos, PaddedPos
from .router import get_path


@dataclass
class RenderConfig:
    """Fixed sizes used to place the grid on the canvas (pixels)."""

    # Cells
    NODE_WIDTH: float = 200.0
    NODE_HEIGHT: float = 100.0

    # Gap between neighbouring cells, and around the outermost ones
    GAP_X: float = 50.0
    GAP_Y: float = 50.0

    # Typography
    FONT_SIZE: float = 16.0
    TEXT_PADDING: float = 10.0

    # Connections
    ARROWHEAD_WIDTH: float = 10.0
    ARROWHEAD_LENGTH: float = 14.0

    @property
    def node_size(self) -> Vec2:
        return Vec2(self.NODE_WIDTH, self.NODE_HEIGHT)

    @property
    def line_height(self) -> float:
        return self.FONT_SIZE * 1.25


def calculate_text_size(text: str, font_size: float = 16.0) -> Vec2:
    """
    Calculate text bounding box in pixels.
    Uses fixed average glyph metrics (0.6 em wide, 1.25 em line height).
    """
    lines = text.split("\n")

    max_chars = max(len(line) for line in lines) if lines else 0
    width = max_chars * (font_size * 0.6)
    height = len(lines) * (font_size * 1.25)

    return Vec2(width, height)


def wrap_text(text: str, max_width: float, font_size: float) -> list[str]:
    """Wrap every line of ``text`` to ``max_width``; explicit line breaks are kept."""
    char_width = font_size * 0.6
    max_chars = max(1, int(max_width / char_width))

    lines = []
    for paragraph in text.split("\n"):
        if len(paragraph) <= max_chars:
            lines.append(paragraph)
            continue

        current_line: list[str] = []
        current_length = 0
        for word in paragraph.split():
            word_length = len(word)

            if current_line and current_length + word_length + 1 > max_chars:
                lines.append(" ".join(current_line))
                current_line = []
                current_length = 0

            current_line.append(word)
            current_length += word_length + (1 if current_length else 0)

        if current_line:
            lines.append(" ".join(current_line))

    return lines


# Grid to pixel mapping


def _cell_start(index: int, node: float, gap: float) -> float:
    return index * node + (index + 1) * gap


def _padded_axis(value: int, node: float, gap: float) -> float:
    """Centre of the cell (odd) or lane (even) at a padded coordinate."""
    if value % 2 == 1:
        return _cell_start((value - 1) // 2, node, gap) + node / 2
    return (value // 2) * (node + gap) + gap / 2


def node_origin(pos: IndexPos, config: RenderConfig) -> Vec2:
    """Top-left corner of the cell at ``pos``."""
    return Vec2(
        _cell_start(pos.x, config.NODE_WIDTH, config.GAP_X),
        _cell_start(pos.y, config.NODE_HEIGHT, config.GAP_Y),
    )


def node_center(pos: IndexPos, config: RenderConfig) -> Vec2:
    return node_origin(pos, config) + config.node_size * 0.5


def padded_to_pixel(pos: PaddedPos, config: RenderConfig) -> Vec2:
    return Vec2(
        _padded_axis(pos.x, config.NODE_WIDTH, config.GAP_X),
        _padded_axis(pos.y, config.NODE_HEIGHT, config.GAP_Y),
    )


def canvas_size(grid_size: IndexPos, config: RenderConfig) -> Vec2:
    """Cells plus a gap before, between and after them on each axis."""
    return Vec2(
        grid_size.x * config.NODE_WIDTH + (grid_size.x + 1) * config.GAP_X,
        grid_size.y * config.NODE_HEIGHT + (grid_size.y + 1) * config.GAP_Y,
    )


def shape_size(shape: NodeShape, config: RenderConfig) -> Vec2:
    """Drawn size of a node; square-based shapes use the shorter cell side."""
    if shape in (NodeShape.SQUARE, NodeShape.CIRCLE, NodeShape.ANGLED_SQUARE):
        side = min(config.NODE_WIDTH, config.NODE_HEIGHT)
        return Vec2(side, side)
    return config.node_size


def edge_midpoint(pos: IndexPos, side: Direction, shape: NodeShape, config: RenderConfig) -> Vec2:
    """Point where a connection meets the outline of the node at ``pos``."""
    dx, dy = side.unit
    half = shape_size(shape, config) * 0.5
    return node_center(pos, config) + Vec2(dx * half.x, dy * half.y)


def _shape_at(diagram: Diagram, pos: IndexPos) -> NodeShape:
    attributes = diagram.node_attributes.get(pos)
    if attributes is None or attributes.shape is None:
        return NodeShape.RECTANGLE
    return attributes.shape


def connection_points(diagram: Diagram, connection: Connection, config: RenderConfig) -> list[Vec2]:
    """
    Pixel polyline of a routed connection.

    The routed path runs between cell centres; its ends are moved onto the
    node outlines and repeated points are dropped.
    """
    path = get_path(diagram.grid, connection.from_, connection.to)
    points = [padded_to_pixel(point, config) for point in path]

    (from_pos, from_side), (to_pos, to_side) = connection.from_, connection.to
    points[0] = edge_midpoint(from_pos, from_side, _shape_at(diagram, from_pos), config)
    points[-1] = edge_midpoint(to_pos, to_side, _shape_at(diagram, to_pos), config)

    deduplicated = [points[0]]
    for point in points[1:]:
        if point != deduplicated[-1]:
            deduplicated.append(point)
    return deduplicated
