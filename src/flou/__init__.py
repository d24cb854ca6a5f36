"""flou - compile grid-based flowchart descriptions to SVG."""

from .diagram import Connection, ConnectionAttributes, Diagram, NodeAttributes
from .errors import FlouError, LogicError, ParseError
from .grid import GridIndex
from .models import ArrowheadType, Document, NodeShape
from .parser import parse_document
from .pipeline import build_diagram, compile_source
from .pos import Direction, IndexPos, PaddedPos
from .router import get_path
from .svg import render_svg

__version__ = "0.1.0"

__all__ = [
    "ArrowheadType",
    "Connection",
    "ConnectionAttributes",
    "Diagram",
    "Direction",
    "Document",
    "FlouError",
    "GridIndex",
    "IndexPos",
    "LogicError",
    "NodeAttributes",
    "NodeShape",
    "PaddedPos",
    "ParseError",
    "build_diagram",
    "compile_source",
    "get_path",
    "parse_document",
    "render_svg",
]
