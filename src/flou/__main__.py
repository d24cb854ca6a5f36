"""CLI entry point for the flou diagram compiler."""

import logging
from collections import Counter

import click

from .diagram import Diagram
from .errors import FlouError
from .layout import RenderConfig
from .log import configure_logger
from .models import NodeShape
from .pipeline import compile_source
from .svg import render_svg

EXAMPLE = """\
// A small flowchart. Cells are laid out on a grid; `_` leaves a cell empty.
grid {
    start#begin, _;
    question(text: "Ready?"), no(text: "Wait a bit");
    yes(text: "Go!");
}

define {
    start(shape: circle, text: "Start", connect: s:n@s);
    question(shape: diamond, connect: {
        s:n@s(text: "yes");
        e:w@e(text: "no");
    });
    no(connect: n:e#begin(class: "retry"));
}
"""


def _compile(source: str) -> Diagram:
    try:
        return compile_source(source)
    except FlouError as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every pipeline stage to stderr")
def cli(verbose: bool) -> None:
    """flou - compile grid-based flowchart descriptions to SVG."""
    configure_logger(logging.DEBUG if verbose else logging.WARNING)


@cli.command()
@click.argument("input_file", type=click.File("r"))
@click.argument("output_file", type=click.File("w"), default="-")
@click.option("--node", type=(float, float), default=(200.0, 100.0), show_default=True, help="Node size W H in pixels")
@click.option("--gap", type=(float, float), default=(50.0, 50.0), show_default=True, help="Grid gap X Y in pixels")
@click.option("--font-size", type=float, default=16.0, show_default=True, help="Font size in pixels")
def render(input_file, output_file, node: tuple[float, float], gap: tuple[float, float], font_size: float) -> None:
    """Compile INPUT_FILE to SVG (`-` reads stdin; output defaults to stdout)."""
    diagram = _compile(input_file.read())

    config = RenderConfig()
    config.NODE_WIDTH, config.NODE_HEIGHT = node
    config.GAP_X, config.GAP_Y = gap
    config.FONT_SIZE = font_size

    output_file.write(render_svg(diagram, config))
    output_file.write("\n")

    if output_file.name != "<stdout>":
        click.echo(f"✓ {output_file.name}", err=True)


@cli.command()
@click.argument("input_file", type=click.File("r"))
def info(input_file) -> None:
    """Display information about a diagram file."""
    diagram = _compile(input_file.read())
    size = diagram.grid.size
    positions = diagram.grid.positions()

    click.echo(f"Grid: {size.x}×{size.y}")
    click.echo(f"Nodes: {len(positions)}")
    click.echo(f"Identifiers: {len({diagram.grid.get_id(pos) for pos in positions})}")
    click.echo(f"Connections: {len(diagram.connections)}")

    # Shapes breakdown
    shape_counts = Counter(
        getattr(diagram.node_attributes.get(pos), "shape", None) or NodeShape.RECTANGLE
        for pos in positions
    )
    click.echo("\nShapes:")
    for shape, count in sorted(shape_counts.items(), key=lambda item: item[0].value):
        click.echo(f"  {shape.value}: {count}")


@cli.command()
def example() -> None:
    """Print an example flou source."""
    click.echo(EXAMPLE, nl=False)


if __name__ == "__main__":
    cli()
