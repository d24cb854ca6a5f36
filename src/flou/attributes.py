"""Attribute resolution and the definition/grid merge.

Raw attribute lists are checked for repeated kinds and turned into typed
records. Every definition and every grid cell is checked before an error is
raised, so a single error carries all offenders of its category.
"""

from collections import Counter
from collections.abc import Hashable, Iterable, Sequence
from typing import Optional, TypeVar, Union

from .diagram import ConnectionAttributes, NodeAttributes, UnresolvedConnection, merge_node_attributes
from .errors import (
    DuplicateDefinitions,
    DuplicateNodeAttributesInDefinitions,
    DuplicateNodeAttributesInGrid,
    LogicError,
)
from .grid import GridIndex
from .log import get_logger
from .models import (
    ArrowheadsAttribute,
    ClassAttribute,
    ConnectAttribute,
    ConnectionAttribute,
    ConnectionDescriptor,
    Definition,
    Grid,
    NodeAttribute,
    ShapeAttribute,
    TextAttribute,
)
from .pos import IndexPos

LOG = get_logger()

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

Descriptors = list[ConnectionDescriptor]


def duplicate_kinds(attributes: Iterable[Union[NodeAttribute, ConnectionAttribute]]) -> frozenset[str]:
    """Kinds that appear more than once, regardless of order."""
    counts = Counter(attribute.kind for attribute in attributes)
    return frozenset(kind for kind, count in counts.items() if count > 1)


def node_attributes_from(
    attributes: Sequence[NodeAttribute],
) -> tuple[NodeAttributes, Optional[Descriptors]]:
    """Split a duplicate-free attribute list into node attributes and connections.

    The descriptor list is ``None`` when there is no ``connect`` attribute.
    """
    fields = {}
    descriptors = None
    for attribute in attributes:
        if isinstance(attribute, TextAttribute):
            fields["text"] = attribute.value
        elif isinstance(attribute, ClassAttribute):
            fields["class_name"] = attribute.value
        elif isinstance(attribute, ShapeAttribute):
            fields["shape"] = attribute.value
        elif isinstance(attribute, ConnectAttribute):
            descriptors = list(attribute.value)
    return NodeAttributes(**fields), descriptors


def connection_attributes_from(attributes: Sequence[ConnectionAttribute]) -> ConnectionAttributes:
    fields = {}
    for attribute in attributes:
        if isinstance(attribute, TextAttribute):
            fields["text"] = attribute.value
        elif isinstance(attribute, ClassAttribute):
            fields["class_name"] = attribute.value
        elif isinstance(attribute, ArrowheadsAttribute):
            fields["arrowheads"] = attribute.value
    return ConnectionAttributes(**fields)


def ensure_definitions_are_unique(definitions: Sequence[Definition]) -> dict[str, list[NodeAttribute]]:
    """Key definitions by identifier; raises ``DuplicateDefinitions``."""
    counts = Counter(definition.id for definition in definitions)
    duplicates = frozenset(identifier for identifier, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateDefinitions(duplicates)
    return {definition.id: list(definition.attributes) for definition in definitions}


def _resolve_attribute_lists(
    items: Iterable[tuple[K, Sequence[NodeAttribute]]],
) -> tuple[dict[K, NodeAttributes], dict[K, Descriptors], dict[K, frozenset[str]]]:
    resolved: dict[K, NodeAttributes] = {}
    descriptors: dict[K, Descriptors] = {}
    errors: dict[K, frozenset[str]] = {}

    for key, attributes in items:
        duplicates = duplicate_kinds(attributes)
        if duplicates:
            errors[key] = duplicates
            continue
        resolved[key], connect = node_attributes_from(attributes)
        if connect is not None:
            descriptors[key] = connect

    return resolved, descriptors, errors


def resolve_definitions(
    definitions: dict[str, list[NodeAttribute]],
) -> tuple[dict[str, NodeAttributes], dict[str, Descriptors]]:
    """Resolve every definition; raises ``DuplicateNodeAttributesInDefinitions``."""
    resolved, descriptors, errors = _resolve_attribute_lists(definitions.items())
    if errors:
        raise DuplicateNodeAttributesInDefinitions(errors)
    return resolved, descriptors


def resolve_grid_nodes(grid: Grid) -> tuple[dict[IndexPos, NodeAttributes], dict[IndexPos, Descriptors]]:
    """Resolve every occupied cell; raises ``DuplicateNodeAttributesInGrid``."""
    resolved, descriptors, errors = _resolve_attribute_lists(
        (pos, node.attributes) for pos, node in grid.nodes()
    )
    if errors:
        raise DuplicateNodeAttributesInGrid(errors)
    return resolved, descriptors


def resolve_connection_descriptors(
    descriptors: dict[K, Descriptors],
    error_type: type[LogicError],
) -> dict[K, list[UnresolvedConnection]]:
    """Check every descriptor's own attributes.

    Offenders are keyed by owner, then by the descriptor's index in the owner's
    connect list, and raised as ``error_type``.
    """
    resolved: dict[K, list[UnresolvedConnection]] = {}
    errors: dict[K, dict[int, frozenset[str]]] = {}

    for key, owned in descriptors.items():
        connections = []
        for index, descriptor in enumerate(owned):
            duplicates = duplicate_kinds(descriptor.attributes)
            if duplicates:
                errors.setdefault(key, {})[index] = duplicates
                continue
            connections.append(
                UnresolvedConnection(
                    destination=descriptor.destination,
                    exit_side=descriptor.exit_side,
                    entry_side=descriptor.entry_side,
                    attributes=connection_attributes_from(descriptor.attributes),
                )
            )
        resolved[key] = connections

    if errors:
        raise error_type(errors)
    return resolved


# Merge


def fan_out(grid: GridIndex, by_identifier: dict[str, T]) -> dict[IndexPos, T]:
    """Copy each identifier's value to every cell using that identifier."""
    by_position: dict[IndexPos, T] = {}
    for identifier, value in by_identifier.items():
        positions = grid.get_positions(identifier)
        if positions is None:
            LOG.debug("definition %r is not used by any node in the grid", identifier)
            continue
        for pos in positions:
            by_position[pos] = value
    return by_position


def merge_node_attribute_maps(
    from_definitions: dict[IndexPos, NodeAttributes],
    from_grid: dict[IndexPos, NodeAttributes],
) -> dict[IndexPos, NodeAttributes]:
    merged = dict(from_definitions)
    for pos, attributes in from_grid.items():
        base = merged.get(pos)
        merged[pos] = attributes if base is None else merge_node_attributes(base, attributes)
    return merged


def merge_connection_maps(
    from_definitions: dict[IndexPos, list[UnresolvedConnection]],
    from_grid: dict[IndexPos, list[UnresolvedConnection]],
) -> dict[IndexPos, list[UnresolvedConnection]]:
    """A cell's own connect list replaces its definition's list wholesale."""
    merged = dict(from_definitions)
    merged.update(from_grid)
    return merged
