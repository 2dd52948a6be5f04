"""Grid model: cells, highlights and cursor state."""

from .cursor import (
    MAX_CURSOR_MODE_INFOS,
    Cursor,
    CursorModeInfo,
    CursorModeTable,
    CursorShape,
)
from .errors import LinegridError, ProtocolError, SessionError
from .grid import BLANK, PLACEHOLDER, Cell, Grid
from .highlight import (
    DEFAULT_COLOR,
    HighlightAttribute,
    HighlightFlags,
    HighlightTable,
    ResolvedHighlight,
)
from .size import GridPoint, GridSize

__all__ = [
    "BLANK",
    "PLACEHOLDER",
    "Cell",
    "Grid",
    "GridPoint",
    "GridSize",
    "Cursor",
    "CursorModeInfo",
    "CursorModeTable",
    "CursorShape",
    "MAX_CURSOR_MODE_INFOS",
    "DEFAULT_COLOR",
    "HighlightAttribute",
    "HighlightFlags",
    "HighlightTable",
    "ResolvedHighlight",
    "LinegridError",
    "ProtocolError",
    "SessionError",
]
