"""Turns connection destinations into concrete grid positions."""

from .diagram import Connection, UnresolvedConnection
from .errors import (
    DuplicateLabels,
    InvalidDestination,
    InvalidDirection,
    ResolutionError,
    UnknownLabel,
    UnresolvedDestination,
)
from .grid import GridIndex
from .models import Destination, Grid, ItselfDestination, LabelDestination, RelativeDestination
from .pos import IndexPos


def build_label_table(grid: Grid) -> dict[str, IndexPos]:
    """Map each label to the single position carrying it.

    Labels are supposed to be unique; any label found at two or more positions
    is reported with all of them in ``DuplicateLabels``.
    """
    positions: dict[str, set[IndexPos]] = {}
    for pos, node in grid.nodes():
        if node.label is not None:
            positions.setdefault(node.label, set()).add(pos)

    duplicates = {label: frozenset(found) for label, found in positions.items() if len(found) > 1}
    if duplicates:
        raise DuplicateLabels(duplicates)

    return {label: next(iter(found)) for label, found in positions.items()}


def resolve_destination(
    grid: GridIndex,
    origin: IndexPos,
    destination: Destination,
    labels: dict[str, IndexPos],
) -> IndexPos:
    """Position a connection from ``origin`` ends at; raises ``UnresolvedDestination``."""
    if isinstance(destination, ItselfDestination):
        return origin

    if isinstance(destination, RelativeDestination):
        target = grid.walk(origin, destination.direction)
        if target is None:
            raise UnresolvedDestination(InvalidDirection(destination.direction))
        return target

    if isinstance(destination, LabelDestination):
        target = labels.get(destination.label)
        if target is None:
            raise UnresolvedDestination(UnknownLabel(destination.label))
        return target

    raise TypeError(f"unsupported destination: {destination!r}")


def resolve_connections(
    grid: GridIndex,
    labels: dict[str, IndexPos],
    connections: dict[IndexPos, list[UnresolvedConnection]],
) -> list[Connection]:
    """Resolve every connection of the document or raise ``InvalidDestination``.

    Origins are visited row-major and each connect list in order, so the
    result is deterministic.
    """
    errors: dict[IndexPos, dict[int, ResolutionError]] = {}
    resolved = []

    for origin in sorted(connections, key=lambda pos: (pos.y, pos.x)):
        for index, unresolved in enumerate(connections[origin]):
            try:
                target = resolve_destination(grid, origin, unresolved.destination, labels)
            except UnresolvedDestination as exc:
                errors.setdefault(origin, {})[index] = exc.reason
                continue
            resolved.append(
                Connection(
                    from_=(origin, unresolved.exit_side),
                    to=(target, unresolved.entry_side),
                    attributes=unresolved.attributes,
                )
            )

    if errors:
        raise InvalidDestination(errors)
    return resolved
