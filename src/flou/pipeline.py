"""Staged validation pipeline from a parsed document to a diagram."""

from .attributes import (
    ensure_definitions_are_unique,
    fan_out,
    merge_connection_maps,
    merge_node_attribute_maps,
    resolve_connection_descriptors,
    resolve_definitions,
    resolve_grid_nodes,
)
from .diagram import Diagram
from .errors import DuplicateConnectionAttributesInDefinitions, DuplicateConnectionAttributesInGrid
from .grid import GridIndex
from .log import get_logger
from .models import Document
from .parser import parse_document
from .resolver import build_label_table, resolve_connections

LOG = get_logger()


def build_diagram(document: Document) -> Diagram:
    """
    Validate and resolve a document.

    Each stage checks the whole document and raises a ``LogicError`` carrying
    every offender it found; later stages never run on invalid data.

    Stages:
    1. Index the grid
    2. Reject duplicate definitions
    3. Resolve definition attributes, then their connections
    4. Resolve grid attributes, then their connections
    5. Merge definitions into the grid cells using them
    6. Build the unique label table
    7. Resolve connection destinations
    """
    grid = GridIndex.from_ast(document.grid)
    LOG.debug("indexed %dx%d grid", grid.size.x, grid.size.y)

    definitions = ensure_definitions_are_unique(document.definitions)

    def_attributes, def_descriptors = resolve_definitions(definitions)
    def_connections = resolve_connection_descriptors(
        def_descriptors, DuplicateConnectionAttributesInDefinitions
    )

    grid_attributes, grid_descriptors = resolve_grid_nodes(document.grid)
    grid_connections = resolve_connection_descriptors(
        grid_descriptors, DuplicateConnectionAttributesInGrid
    )
    LOG.debug(
        "resolved attributes for %d definitions and %d grid nodes",
        len(def_attributes),
        len(grid_attributes),
    )

    node_attributes = merge_node_attribute_maps(fan_out(grid, def_attributes), grid_attributes)
    unresolved = merge_connection_maps(fan_out(grid, def_connections), grid_connections)

    labels = build_label_table(document.grid)
    connections = resolve_connections(grid, labels, unresolved)
    LOG.debug("resolved %d connections", len(connections))

    return Diagram(grid=grid, node_attributes=node_attributes, connections=connections)


def compile_source(source: str) -> Diagram:
    """Parse and validate flou source text."""
    return build_diagram(parse_document(source))
