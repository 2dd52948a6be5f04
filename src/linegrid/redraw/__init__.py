"""Redraw command decoding and dispatch."""

from .commands import (
    COMMANDS,
    BusyStart,
    BusyStop,
    DefaultColorsSet,
    Flush,
    GridClear,
    GridCursorGoto,
    GridLine,
    GridResize,
    GridScroll,
    HlAttrDefine,
    LineCell,
    ModeChange,
    ModeInfoSet,
    OptionSet,
    RedrawBatch,
    RedrawCommand,
    decode_batch,
)
from .dispatcher import RedrawDispatcher
from .guifont import GuiFont, guifont_from_config, parse_guifont

__all__ = [
    "COMMANDS",
    "RedrawCommand",
    "RedrawBatch",
    "OptionSet",
    "GridResize",
    "GridClear",
    "DefaultColorsSet",
    "HlAttrDefine",
    "LineCell",
    "GridLine",
    "GridCursorGoto",
    "ModeInfoSet",
    "ModeChange",
    "BusyStart",
    "BusyStop",
    "GridScroll",
    "Flush",
    "decode_batch",
    "RedrawDispatcher",
    "GuiFont",
    "parse_guifont",
    "guifont_from_config",
]
