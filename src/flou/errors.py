"""Exception hierarchy shared across the compiler."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional, Union

from .pos import Direction, IndexPos


class FlouError(Exception):
    """Base class for all failures while compiling a diagram."""


class ParseError(FlouError):
    """Source text does not follow the grammar."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


# Destination resolution


@dataclass(frozen=True)
class InvalidDirection:
    """Walking from the origin in ``direction`` left the grid without meeting a node."""

    direction: Direction

    def describe(self) -> str:
        return f"No destination found in direction: {self.direction.name.title()}"


@dataclass(frozen=True)
class UnknownLabel:
    """No node carries ``label`` exactly once."""

    label: str

    def describe(self) -> str:
        return f'No destination with label: "{self.label}"'


ResolutionError = Union[InvalidDirection, UnknownLabel]


class UnresolvedDestination(FlouError):
    """A single connection's destination could not be found."""

    def __init__(self, reason: ResolutionError):
        super().__init__(reason.describe())
        self.reason = reason


# Logic errors


def _row_major(pos: IndexPos) -> tuple[int, int]:
    return pos.y, pos.x


def _quoted(items: Iterable[str]) -> str:
    return ", ".join(f'"{item}"' for item in sorted(items))


class LogicError(FlouError, ABC):
    """A document that parses but cannot form a valid diagram.

    ``details`` holds every offender found by the failing stage, never just
    the first one. Only the subclasses below are raised.
    """

    heading = "Invalid diagram"

    def __init__(self, details):
        self.details = details
        super().__init__(f"{self.heading}:\n\n" + "\n".join(self.describe_lines()))

    @abstractmethod
    def describe_lines(self) -> list[str]:
        """One line per offender, in a stable order."""


class DuplicateLabels(LogicError):
    """A label was used more than once.

    ``details``: label -> every position carrying it.
    """

    heading = "Some labels are used more than once"

    def describe_lines(self) -> list[str]:
        lines = []
        for label in sorted(self.details):
            positions = sorted(self.details[label], key=_row_major)
            lines.append(f'  - "{label}" at: {", ".join(str(pos) for pos in positions)}')
        return lines


class DuplicateDefinitions(LogicError):
    """There is more than one definition for one identifier.

    ``details``: set of identifiers.
    """

    heading = "Some identifiers have multiple definitions"

    def describe_lines(self) -> list[str]:
        return [f'  - "{identifier}"' for identifier in sorted(self.details)]


class DuplicateNodeAttributesInDefinitions(LogicError):
    """``details``: identifier -> duplicated attribute kinds."""

    heading = "Some node definitions have duplicate attributes"

    def describe_lines(self) -> list[str]:
        return [
            f'  - "{identifier}" has duplicate(s): {_quoted(self.details[identifier])}'
            for identifier in sorted(self.details)
        ]


class DuplicateNodeAttributesInGrid(LogicError):
    """``details``: position -> duplicated attribute kinds."""

    heading = "Some nodes declared in the grid have duplicate attributes"

    def describe_lines(self) -> list[str]:
        return [
            f"  - Node at {pos} has duplicate(s): {_quoted(self.details[pos])}"
            for pos in sorted(self.details, key=_row_major)
        ]


def _describe_indexes(index_map: Mapping[int, object], describe) -> list[str]:
    return [
        f"    - For connection at index {index}: {describe(index_map[index])}"
        for index in sorted(index_map)
    ]


class DuplicateConnectionAttributesInDefinitions(LogicError):
    """``details``: identifier -> connection index -> duplicated attribute kinds."""

    heading = "Some connections in node definitions have duplicate attributes"

    def describe_lines(self) -> list[str]:
        lines = []
        for identifier in sorted(self.details):
            lines.append(f'  - At definition "{identifier}":')
            lines.extend(_describe_indexes(self.details[identifier], _quoted))
        return lines


class DuplicateConnectionAttributesInGrid(LogicError):
    """``details``: position -> connection index -> duplicated attribute kinds."""

    heading = "Some connections declared in the grid have duplicate attributes"

    def describe_lines(self) -> list[str]:
        lines = []
        for pos in sorted(self.details, key=_row_major):
            lines.append(f"  - At grid position {pos}:")
            lines.extend(_describe_indexes(self.details[pos], _quoted))
        return lines


class InvalidDestination(LogicError):
    """``details``: position -> connection index -> ``ResolutionError``."""

    heading = "Could not resolve destination for some node's connections"

    def describe_lines(self) -> list[str]:
        lines = []
        for pos in sorted(self.details, key=_row_major):
            lines.append(f"  - For node at grid position {pos}:")
            lines.extend(_describe_indexes(self.details[pos], lambda reason: reason.describe()))
        return lines
