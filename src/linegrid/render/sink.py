"""Render sink boundary plus geometry helpers shared by sink implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Tuple

from linegrid.grid import PLACEHOLDER, CursorShape, Grid, ResolvedHighlight

FontSize = Tuple[float, float]  # (width, height) of one cell in surface units


@dataclass(frozen=True, slots=True)
class PixelRect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


class RenderSink(Protocol):
    """What the dispatcher needs from a renderer.

    Every call happens between one ``start_draw`` and the matching
    ``finish_draw``.
    """

    def set_font(self, name: str, size: float) -> None:
        ...

    def font_size(self) -> FontSize:
        ...

    def start_draw(self) -> Tuple[int, int]:
        """Begin a frame and return the surface size in pixels."""
        ...

    def finish_draw(self) -> None:
        ...

    def draw_background_rect(
        self, rows: int, cols: int, attr: ResolvedHighlight
    ) -> None:
        ...

    def fill_rect(self, rect: PixelRect, attr: ResolvedHighlight) -> None:
        ...

    def draw_grid_line(self, grid: Grid, row: int) -> None:
        ...

    def draw_cursor(self, grid: Grid) -> None:
        ...

    def draw_border_rectangles(self, grid: Grid, width: int, height: int) -> None:
        ...


def grid_rect(rows: int, cols: int, font_size: FontSize) -> PixelRect:
    font_width, font_height = font_size
    return PixelRect(0.0, 0.0, cols * font_width, rows * font_height)


def border_rectangles(
    grid: Grid, font_size: FontSize, width: float, height: float
) -> List[PixelRect]:
    """Surface areas the character grid does not cover.

    The vertical strip right of the grid spans the full height; the
    horizontal strip below it spans the full width. Either is omitted when
    the grid edge lands exactly on the surface edge.
    """

    font_width, font_height = font_size
    right_edge = font_width * grid.cols
    bottom_edge = font_height * grid.rows
    rects: List[PixelRect] = []
    if right_edge != width:
        rects.append(PixelRect(right_edge, 0.0, float(width), float(height)))
    if bottom_edge != height:
        rects.append(PixelRect(0.0, bottom_edge, float(width), float(height)))
    return rects


def cursor_in_grid(grid: Grid) -> bool:
    cursor = grid.cursor
    return grid.row_in_bounds(cursor.row) and 0 <= cursor.col < grid.cols


def cursor_col(grid: Grid) -> int:
    """Column the cursor is drawn from; the right half of a wide glyph snaps left."""

    col = grid.cursor.col
    if col == 0 or not cursor_in_grid(grid):
        return col
    return col - 1 if grid.chars[grid.cursor_offset] == PLACEHOLDER else col


def cursor_cells(grid: Grid) -> int:
    """Columns the cursor covers: two on either half of a wide glyph."""

    if not cursor_in_grid(grid):
        return 1
    return 2 if grid.wide[grid.offset(grid.cursor.row, cursor_col(grid))] else 1


def cursor_highlight(grid: Grid) -> ResolvedHighlight:
    """The cursor's colors; mode highlight 0 means "the cell, reversed"."""

    hl_id = grid.cursor_hl_id
    return grid.highlights.resolve(hl_id, invert=hl_id == 0)


def cursor_rect(
    grid: Grid, font_size: FontSize, *, thickness: float = 2.0
) -> Optional[PixelRect]:
    if not cursor_in_grid(grid):
        return None
    font_width, font_height = font_size
    left = cursor_col(grid) * font_width
    top = grid.cursor.row * font_height
    rect = PixelRect(
        left, top, left + font_width * cursor_cells(grid), top + font_height
    )
    shape = grid.cursor_shape
    if shape is CursorShape.VERTICAL:
        return PixelRect(rect.left, rect.top, rect.left + thickness, rect.bottom)
    if shape is CursorShape.HORIZONTAL:
        return PixelRect(rect.left, rect.bottom - thickness, rect.right, rect.bottom)
    return rect


def iter_runs(grid: Grid, row: int) -> Iterator[Tuple[int, int, int]]:
    """Yield ``(start_col, end_col, hl_id)`` for each same-highlight span of ``row``."""

    if not grid.cols:
        return
    base = grid.offset(row, 0)
    ids = grid.hl_ids
    start = 0
    current = ids[base]
    for col in range(1, grid.cols):
        hl_id = ids[base + col]
        if hl_id != current:
            yield start, col, current
            start = col
            current = hl_id
    yield start, grid.cols, current


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
