"""PEG grammar and syntax tree builder for flou source text.

Whitespace and ``//`` line comments are allowed between any two tokens,
except inside a connection descriptor such as ``s:n@e`` which is written
without spaces.
"""

import re

from parsimonious.exceptions import ParseError as PegParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import NodeVisitor

from .errors import ParseError
from .models import (
    ArrowheadsAttribute,
    ArrowheadType,
    ClassAttribute,
    ConnectAttribute,
    ConnectionDescriptor,
    Definition,
    Document,
    Grid,
    GridNode,
    ItselfDestination,
    LabelDestination,
    NodeShape,
    RelativeDestination,
    ShapeAttribute,
    TextAttribute,
)
from .pos import Direction

GRAMMAR = Grammar(
    r"""
    document            = _ section*
    section             = (grid_block / define_block) _

    grid_block          = "grid" _ "{" _ row* "}"
    row                 = cell (_ "," _ cell)* (_ ",")? _ ";" _
    cell                = empty / node
    empty               = ~r"_(?![A-Za-z0-9_])"
    node                = identifier label? (_ node_attribute_list)?
    label               = "#" identifier

    define_block        = "define" _ "{" _ definition* "}"
    definition          = identifier _ node_attribute_list _ ";" _

    node_attribute_list = "(" _ node_attributes? _ ")"
    node_attributes     = node_attribute (_ "," _ node_attribute)* (_ ",")?
    node_attribute      = text_attribute / class_attribute / shape_attribute / connect_attribute

    connection_attribute_list = "(" _ connection_attributes? _ ")"
    connection_attributes     = connection_attribute (_ "," _ connection_attribute)* (_ ",")?
    connection_attribute      = text_attribute / class_attribute / arrowheads_attribute

    text_attribute       = "text" _ ":" _ string
    class_attribute      = "class" _ ":" _ string
    shape_attribute      = "shape" _ ":" _ shape
    arrowheads_attribute = "arrowheads" _ ":" _ arrowheads
    connect_attribute    = "connect" _ ":" _ (descriptor_block / descriptor)

    descriptor_block    = "{" _ descriptor (_ ";" _ descriptor)* (_ ";")? _ "}"
    descriptor          = direction ":" direction destination (_ connection_attribute_list)?
    destination         = relative / label_destination
    relative            = "@" direction?
    label_destination   = "#" identifier

    shape               = ~r"(rect|square|ellipse|circle|diamond|angled_square)(?![A-Za-z0-9_])"
    arrowheads          = ~r"(none|start|end|both)(?![A-Za-z0-9_])"
    direction           = ~r"[nswe](?![A-Za-z0-9_])"
    identifier          = ~r"[A-Za-z_][A-Za-z0-9_]*"
    string              = ~r'"(?:[^"\\\n]|\\[\\"n])*"'
    _                   = ~r"(?:\s|//[^\n]*)*"
    """
)

_ESCAPES = {"n": "\n", '"': '"', "\\": "\\"}


def _many(visited):
    """Children of a ``*`` or ``?`` match; empty matches come back as the bare node."""
    return visited if isinstance(visited, list) else []


def _optional(visited):
    items = _many(visited)
    return items[0] if items else None


def _location(node) -> tuple[int, int]:
    before = node.full_text[: node.start]
    return before.count("\n") + 1, node.start - before.rfind("\n")


def unescape(text: str) -> str:
    """Resolve the ``\\\\``, ``\\"`` and ``\\n`` escapes of a string literal body."""
    return re.sub(r"\\(.)", lambda match: _ESCAPES[match.group(1)], text)


class _DocumentVisitor(NodeVisitor):
    unwrapped_exceptions = (ParseError,)

    def visit_document(self, node, visited_children):
        _, sections = visited_children
        blocks = {}
        for kind, value, block_node in _many(sections):
            if kind in blocks:
                line, column = _location(block_node)
                raise ParseError(f"duplicate {kind} block", line, column)
            blocks[kind] = value

        if "grid" not in blocks:
            raise ParseError("missing grid block")
        return Document(grid=blocks["grid"], definitions=blocks.get("define", []))

    def visit_section(self, node, visited_children):
        (block,), _ = visited_children
        kind, value = block
        return kind, value, node

    def visit_grid_block(self, node, visited_children):
        rows = visited_children[4]
        return "grid", Grid(rows=_many(rows))

    def visit_row(self, node, visited_children):
        first, rest = visited_children[0], visited_children[1]
        return [first] + [item[3] for item in _many(rest)]

    def visit_cell(self, node, visited_children):
        return visited_children[0]

    def visit_empty(self, node, visited_children):
        return None

    def visit_node(self, node, visited_children):
        identifier, label, attributes = visited_children
        attribute_list = _optional(attributes)
        return GridNode(
            id=identifier,
            label=_optional(label),
            attributes=attribute_list[1] if attribute_list else [],
        )

    def visit_label(self, node, visited_children):
        return visited_children[1]

    def visit_define_block(self, node, visited_children):
        return "define", _many(visited_children[4])

    def visit_definition(self, node, visited_children):
        identifier, _, attributes = visited_children[:3]
        return Definition(id=identifier, attributes=attributes)

    # Attributes

    def visit_node_attribute_list(self, node, visited_children):
        return _optional(visited_children[2]) or []

    visit_connection_attribute_list = visit_node_attribute_list

    def visit_node_attributes(self, node, visited_children):
        first, rest = visited_children[0], visited_children[1]
        return [first] + [item[3] for item in _many(rest)]

    visit_connection_attributes = visit_node_attributes

    def visit_node_attribute(self, node, visited_children):
        return visited_children[0]

    visit_connection_attribute = visit_node_attribute

    def visit_text_attribute(self, node, visited_children):
        return TextAttribute(value=visited_children[4])

    def visit_class_attribute(self, node, visited_children):
        return ClassAttribute(value=visited_children[4])

    def visit_shape_attribute(self, node, visited_children):
        return ShapeAttribute(value=visited_children[4])

    def visit_arrowheads_attribute(self, node, visited_children):
        return ArrowheadsAttribute(value=visited_children[4])

    def visit_connect_attribute(self, node, visited_children):
        (descriptors,) = visited_children[4]
        if isinstance(descriptors, ConnectionDescriptor):
            descriptors = [descriptors]
        return ConnectAttribute(value=descriptors)

    # Connections

    def visit_descriptor_block(self, node, visited_children):
        first, rest = visited_children[2], visited_children[3]
        return [first] + [item[3] for item in _many(rest)]

    def visit_descriptor(self, node, visited_children):
        exit_side, _, entry_side, destination, attributes = visited_children
        attribute_list = _optional(attributes)
        return ConnectionDescriptor(
            exit_side=exit_side,
            entry_side=entry_side,
            destination=destination,
            attributes=attribute_list[1] if attribute_list else [],
        )

    def visit_destination(self, node, visited_children):
        return visited_children[0]

    def visit_relative(self, node, visited_children):
        direction = _optional(visited_children[1])
        if direction is None:
            return ItselfDestination()
        return RelativeDestination(direction=direction)

    def visit_label_destination(self, node, visited_children):
        return LabelDestination(label=visited_children[1])

    # Tokens

    def visit_shape(self, node, visited_children):
        return NodeShape(node.text)

    def visit_arrowheads(self, node, visited_children):
        return ArrowheadType(node.text)

    def visit_direction(self, node, visited_children):
        return Direction(node.text)

    def visit_identifier(self, node, visited_children):
        return node.text

    def visit_string(self, node, visited_children):
        return unescape(node.text[1:-1])

    def generic_visit(self, node, visited_children):
        return visited_children or node


def parse_document(source: str) -> Document:
    """Parse flou source into a ``Document``; raises ``flou.errors.ParseError``."""
    try:
        tree = GRAMMAR.parse(source)
    except PegParseError as exc:
        snippet = exc.text[exc.pos : exc.pos + 20].split("\n", 1)[0]
        raise ParseError(f"unexpected input {snippet!r}", exc.line(), exc.column()) from exc
    return _DocumentVisitor().visit(tree)
