"""SVG generation for flou diagrams."""

from typing import Optional

from .diagram import Connection, Diagram, NodeAttributes
from .layout import (
    RenderConfig,
    calculate_text_size,
    canvas_size,
    connection_points,
    node_center,
    shape_size,
    wrap_text,
)
from .models import ArrowheadType, NodeShape, Vec2
from .pos import Direction, IndexPos


def escape_xml(text: str) -> str:
    """Escape XML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _fmt(value: float) -> str:
    return f"{value:g}"


def _point(p: Vec2) -> str:
    return f"{_fmt(p.x)},{_fmt(p.y)}"


def _class_attr(*names: Optional[str]) -> str:
    return escape_xml(" ".join(name for name in names if name))


def render_shape(shape: NodeShape, center: Vec2, drawn: Vec2) -> str:
    """Outline of a node of size ``drawn`` centred on ``center``."""
    top_left = center - drawn * 0.5

    if shape in (NodeShape.RECTANGLE, NodeShape.SQUARE):
        return (
            f'<rect class="node {shape.value}" x="{_fmt(top_left.x)}" y="{_fmt(top_left.y)}" '
            f'width="{_fmt(drawn.x)}" height="{_fmt(drawn.y)}" />'
        )

    if shape in (NodeShape.DIAMOND, NodeShape.ANGLED_SQUARE):
        # Top, left, bottom and right midpoints
        points = [
            Vec2(center.x, top_left.y),
            Vec2(top_left.x, center.y),
            Vec2(center.x, top_left.y + drawn.y),
            Vec2(top_left.x + drawn.x, center.y),
        ]
        return (
            f'<polygon class="node {shape.value}" '
            f'points="{" ".join(_point(p) for p in points)}" />'
        )

    if shape == NodeShape.ELLIPSE:
        return (
            f'<ellipse class="node ellipse" cx="{_fmt(center.x)}" cy="{_fmt(center.y)}" '
            f'rx="{_fmt(drawn.x / 2)}" ry="{_fmt(drawn.y / 2)}" />'
        )

    return (
        f'<circle class="node circle" cx="{_fmt(center.x)}" cy="{_fmt(center.y)}" '
        f'r="{_fmt(drawn.x / 2)}" />'
    )


def render_text(text: str, center: Vec2, max_width: float, config: RenderConfig, css_class: str = "") -> list[str]:
    """Centred text, one ``<text>`` element per wrapped line."""
    lines = wrap_text(text, max_width, config.FONT_SIZE)
    start_y = center.y - (len(lines) - 1) * config.line_height / 2

    class_attr = f' class="{css_class}"' if css_class else ""
    result = []
    for i, text_line in enumerate(lines):
        y_pos = start_y + i * config.line_height
        result.append(
            f'<text{class_attr} x="{_fmt(center.x)}" y="{_fmt(y_pos)}" '
            f'text-anchor="middle" dominant-baseline="middle">'
            f"{escape_xml(text_line)}</text>"
        )
    return result


def render_node(pos: IndexPos, attributes: Optional[NodeAttributes], config: RenderConfig) -> str:
    """Render a single node; cells without attributes are plain rectangles."""
    attributes = attributes or NodeAttributes()
    shape = attributes.shape or NodeShape.RECTANGLE

    lines = [f'<g class="{_class_attr("node-wrapper", attributes.class_name)}">']
    lines.append("  " + render_shape(shape, node_center(pos, config), shape_size(shape, config)))

    if attributes.text is not None:
        max_width = shape_size(shape, config).x - 2 * config.TEXT_PADDING
        for text_line in render_text(attributes.text, node_center(pos, config), max_width, config):
            lines.append("  " + text_line)

    lines.append("</g>")
    return "\n".join(lines)


def arrowhead_points(tip: Vec2, facing: Direction, config: RenderConfig) -> list[Vec2]:
    """
    Corners of an arrowhead whose tip points towards ``facing``.

    Order: tip, left wing, notch, right wing. The notch sits halfway along
    the arrowhead so the head reads as a chevron.
    """
    back = facing.reverse()
    bx, by = back.unit
    left_x, left_y = back.rotate_clockwise().unit
    right_x, right_y = back.rotate_counter_clockwise().unit

    length = config.ARROWHEAD_LENGTH
    half_width = config.ARROWHEAD_WIDTH / 2

    notch = tip + Vec2(bx, by) * (length / 2)
    base = tip + Vec2(bx, by) * length
    return [
        tip,
        base + Vec2(left_x, left_y) * half_width,
        notch,
        base + Vec2(right_x, right_y) * half_width,
    ]


def render_arrowhead(tip: Vec2, facing: Direction, config: RenderConfig) -> str:
    points = arrowhead_points(tip, facing, config)
    path = "M " + " L ".join(_point(p) for p in points) + " Z"
    return f'<path class="arrowhead" d="{path}" />'


def _label_position(points: list[Vec2]) -> Vec2:
    """Middle of the longest segment of a polyline."""
    best = (points[0], points[0])
    best_length = -1.0
    for start, end in zip(points, points[1:]):
        length = abs(end.x - start.x) + abs(end.y - start.y)
        if length > best_length:
            best, best_length = (start, end), length
    return (best[0] + best[1]) * 0.5


def render_connection(diagram: Diagram, connection: Connection, config: RenderConfig) -> str:
    """Render a single connection."""
    attributes = connection.attributes
    points = connection_points(diagram, connection, config)

    lines = [f'<g class="{_class_attr("connection-wrapper", attributes.class_name)}">']
    path = "M " + " L ".join(_point(p) for p in points)
    lines.append(f'  <path class="connection" d="{path}" />')

    if attributes.arrowheads in (ArrowheadType.START, ArrowheadType.BOTH):
        lines.append("  " + render_arrowhead(points[0], connection.from_[1].reverse(), config))
    if attributes.arrowheads in (ArrowheadType.END, ArrowheadType.BOTH):
        lines.append("  " + render_arrowhead(points[-1], connection.to[1].reverse(), config))

    if attributes.text is not None:
        position = _label_position(points)
        size = calculate_text_size(attributes.text, config.FONT_SIZE)
        corner = position - size * 0.5
        lines.append(
            f'  <rect class="connection-label-background" x="{_fmt(corner.x)}" y="{_fmt(corner.y)}" '
            f'width="{_fmt(size.x)}" height="{_fmt(size.y)}" />'
        )
        for text_line in render_text(attributes.text, position, size.x + 1, config, "connection-label"):
            lines.append("  " + text_line)

    lines.append("</g>")
    return "\n".join(lines)


def render_svg(diagram: Diagram, config: Optional[RenderConfig] = None) -> str:
    """
    Generate complete SVG document.

    Args:
        diagram: Validated diagram
        config: Sizes; defaults to ``RenderConfig()``
    """
    config = config or RenderConfig()
    size = canvas_size(diagram.grid.size, config)
    width, height = _fmt(size.x), _fmt(size.y)

    svg = [
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" ',
        '     xmlns="http://www.w3.org/2000/svg">',
        "",
        "<style>",
        f"  text {{ font-family: sans-serif; font-size: {_fmt(config.FONT_SIZE)}px; }}",
        "  .background { fill: white; }",
        "  .node { fill: white; stroke: black; stroke-width: 2; }",
        "  .connection { fill: none; stroke: black; stroke-width: 2; }",
        "  .arrowhead { fill: black; stroke: black; stroke-width: 1; }",
        "  .connection-label-background { fill: white; }",
        "</style>",
        "",
        f'<rect class="background" x="0" y="0" width="{width}" height="{height}" />',
    ]

    # Layer 1: Connections (below nodes)
    svg.append('<g class="connections">')
    for connection in diagram.connections:
        svg.append(render_connection(diagram, connection, config))
    svg.append("</g>")

    # Layer 2: Nodes (foreground)
    svg.append('<g class="nodes">')
    for pos in diagram.grid.positions():
        svg.append(render_node(pos, diagram.node_attributes.get(pos), config))
    svg.append("</g>")

    svg.append("</svg>")
    return "\n".join(svg)
