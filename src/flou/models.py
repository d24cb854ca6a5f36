"""Data models for flou documents."""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .pos import Direction, IndexPos


class NodeShape(str, Enum):
    """Shapes a node can be drawn with."""

    RECTANGLE = "rect"
    SQUARE = "square"
    ELLIPSE = "ellipse"
    CIRCLE = "circle"
    DIAMOND = "diamond"
    ANGLED_SQUARE = "angled_square"  # Diamond inscribed in a square


class ArrowheadType(str, Enum):
    """Which ends of a connection carry an arrowhead."""

    NONE = "none"
    START = "start"
    END = "end"
    BOTH = "both"


class AstModel(BaseModel):
    """Base for syntax tree nodes; they never change once parsed."""

    model_config = ConfigDict(frozen=True)


# Destinations


class ItselfDestination(AstModel):
    """Bare ``@``: the connection returns to its own node."""

    kind: Literal["itself"] = "itself"


class RelativeDestination(AstModel):
    """``@n`` etc.: the first node found walking in a direction."""

    kind: Literal["relative"] = "relative"
    direction: Direction


class LabelDestination(AstModel):
    """``#name``: the node carrying a unique label."""

    kind: Literal["label"] = "label"
    label: str


Destination = Annotated[
    Union[ItselfDestination, RelativeDestination, LabelDestination],
    Field(discriminator="kind"),
]


# Attributes


class TextAttribute(AstModel):
    kind: Literal["text"] = "text"
    value: str


class ClassAttribute(AstModel):
    kind: Literal["class"] = "class"
    value: str


class ShapeAttribute(AstModel):
    kind: Literal["shape"] = "shape"
    value: NodeShape


class ArrowheadsAttribute(AstModel):
    kind: Literal["arrowheads"] = "arrowheads"
    value: ArrowheadType


ConnectionAttribute = Annotated[
    Union[TextAttribute, ClassAttribute, ArrowheadsAttribute],
    Field(discriminator="kind"),
]


class ConnectionDescriptor(AstModel):
    """One entry of a ``connect`` attribute, e.g. ``s:n@s(text: "yes")``."""

    exit_side: Direction  # Side of the origin node the line leaves from
    entry_side: Direction  # Side of the destination node the line arrives at
    destination: Destination
    attributes: list[ConnectionAttribute] = []


class ConnectAttribute(AstModel):
    kind: Literal["connect"] = "connect"
    value: list[ConnectionDescriptor]


NodeAttribute = Annotated[
    Union[TextAttribute, ClassAttribute, ShapeAttribute, ConnectAttribute],
    Field(discriminator="kind"),
]


# Document


class GridNode(AstModel):
    """An occupied cell of the grid block."""

    id: str  # Shared by every cell using the same definition
    label: Optional[str] = None  # Unique alias used by ``#label`` destinations
    attributes: list[NodeAttribute] = []


class Grid(AstModel):
    """Rows of cells; ``None`` marks an empty cell (``_``)."""

    rows: list[list[Optional[GridNode]]] = []

    @property
    def size(self) -> IndexPos:
        """Width is the longest row; shorter rows end in empty cells."""
        width = max((len(row) for row in self.rows), default=0)
        return IndexPos(width, len(self.rows))

    def nodes(self) -> Iterator[tuple[IndexPos, GridNode]]:
        """Occupied cells in row-major order."""
        for y, row in enumerate(self.rows):
            for x, node in enumerate(row):
                if node is not None:
                    yield IndexPos(x, y), node


class Definition(AstModel):
    """Named attribute bundle from the ``define`` block."""

    id: str
    attributes: list[NodeAttribute] = []


class Document(AstModel):
    """Complete parsed source."""

    grid: Grid
    definitions: list[Definition] = []  # Source order, duplicates included


# Rendering data structures


@dataclass
class Vec2:
    """2D vector for pixel positions and sizes."""

    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)
