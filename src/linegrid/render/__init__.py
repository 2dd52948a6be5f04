"""Renderer boundary used by the redraw dispatcher."""

from .sink import (
    FontSize,
    PixelRect,
    RenderSink,
    border_rectangles,
    cursor_cells,
    cursor_col,
    cursor_highlight,
    cursor_in_grid,
    cursor_rect,
    grid_rect,
    iter_runs,
)

__all__ = [
    "FontSize",
    "PixelRect",
    "RenderSink",
    "border_rectangles",
    "cursor_cells",
    "cursor_col",
    "cursor_highlight",
    "cursor_in_grid",
    "cursor_rect",
    "grid_rect",
    "iter_runs",
]
