"""Resolved diagram records produced by the pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from .grid import GridIndex
from .models import ArrowheadType, Destination, NodeShape
from .pos import Direction, IndexPos


@dataclass(frozen=True)
class NodeAttributes:
    """Node attributes after duplicate checking; unset fields stay ``None``."""

    text: Optional[str] = None
    class_name: Optional[str] = None
    shape: Optional[NodeShape] = None  # Drawn as a rectangle when unset


def merge_node_attributes(base: NodeAttributes, override: NodeAttributes) -> NodeAttributes:
    """Field-wise merge: every field set on ``override`` wins over ``base``."""
    return NodeAttributes(
        text=override.text if override.text is not None else base.text,
        class_name=override.class_name if override.class_name is not None else base.class_name,
        shape=override.shape if override.shape is not None else base.shape,
    )


@dataclass(frozen=True)
class ConnectionAttributes:
    text: Optional[str] = None
    class_name: Optional[str] = None
    arrowheads: ArrowheadType = ArrowheadType.END


@dataclass(frozen=True)
class UnresolvedConnection:
    """A connection whose attributes are checked but whose destination is not."""

    destination: Destination
    exit_side: Direction
    entry_side: Direction
    attributes: ConnectionAttributes


@dataclass(frozen=True)
class Connection:
    """Connection between two concrete cells."""

    from_: tuple[IndexPos, Direction]  # Origin cell and the side the line leaves from
    to: tuple[IndexPos, Direction]  # Destination cell and the side the line enters
    attributes: ConnectionAttributes = ConnectionAttributes()


@dataclass(frozen=True)
class Diagram:
    """Validated diagram ready for routing and rendering."""

    grid: GridIndex
    node_attributes: Mapping[IndexPos, NodeAttributes] = field(default_factory=dict)
    connections: tuple[Connection, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "node_attributes", MappingProxyType(dict(self.node_attributes)))
        object.__setattr__(self, "connections", tuple(self.connections))
