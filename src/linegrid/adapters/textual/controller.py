"""Character-cell render sink that hands composed frames to Textual widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from rich.style import Style
from rich.text import Text

from linegrid.grid import CursorShape, Grid, ResolvedHighlight
from linegrid.render.sink import (
    FontSize,
    PixelRect,
    border_rectangles,
    cursor_cells,
    cursor_col,
    cursor_highlight,
    cursor_in_grid,
    iter_runs,
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the renderer invokes to update Textual widgets."""

    update_frame: Callable[[Sequence[Text]], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


def rgb(value: int) -> Optional[str]:
    """``0xRRGGBB`` to ``#rrggbb``; negative (unknown) colors use the terminal's."""

    if value < 0:
        return None
    return f"#{value & 0xFFFFFF:06x}"


def style_for(attr: ResolvedHighlight) -> Style:
    return Style(
        color=rgb(attr.foreground),
        bgcolor=rgb(attr.background),
        bold=attr.bold,
        italic=attr.italic,
        strike=attr.strikethrough,
        underline=attr.underline,
    )


@dataclass(slots=True)
class _CursorMark:
    row: int
    start: int  # character offsets into the row's Text
    end: int
    style: Style


class TextualGridRenderer:
    """``RenderSink`` for a terminal surface where one cell is one column.

    Rows are cached as ``rich.text.Text`` between frames; only the rows the
    dispatcher repaints are rebuilt. ``finish_draw`` composes the cached rows,
    border fills and the cursor into a frame for ``hooks.update_frame``.
    """

    def __init__(
        self, hooks: TextualUIHooks, *, surface: Tuple[int, int] = (80, 24)
    ) -> None:
        self.hooks = hooks
        self.surface = surface
        self.font: Tuple[str, float] = ("", 0.0)
        self.frames = 0
        self._rows: List[Text] = []
        self._fills: List[Tuple[PixelRect, Style]] = []
        self._cursor: Optional[_CursorMark] = None
        self._drawing = False

    def resize_surface(self, cols: int, rows: int) -> None:
        self.surface = (cols, rows)

    def set_font(self, name: str, size: float) -> None:
        self.font = (name, size)
        self.hooks.update_status(f"guifont {name} {size:g}")

    def font_size(self) -> FontSize:
        return (1.0, 1.0)

    def start_draw(self) -> Tuple[int, int]:
        if not self._drawing:
            self._drawing = True
            self._fills.clear()
            self._cursor = None
        return self.surface

    def draw_background_rect(
        self, rows: int, cols: int, attr: ResolvedHighlight
    ) -> None:
        style = style_for(attr)
        self._rows = [Text(" " * cols, style=style) for _ in range(rows)]

    def fill_rect(self, rect: PixelRect, attr: ResolvedHighlight) -> None:
        if rect.width > 0 and rect.height > 0:
            self._fills.append((rect, style_for(attr)))

    def draw_grid_line(self, grid: Grid, row: int) -> None:
        self._fit_rows(grid.rows)
        base = grid.offset(row, 0)
        line = Text(no_wrap=True, overflow="crop")
        for start, end, hl_id in iter_runs(grid, row):
            chunk = "".join(grid.chars[base + start : base + end])
            line.append(chunk, style_for(grid.highlights.resolve(hl_id)))
        self._rows[row] = line

    def draw_cursor(self, grid: Grid) -> None:
        if not cursor_in_grid(grid):
            self._cursor = None
            return
        row = grid.cursor.row
        col = cursor_col(grid)
        base = grid.offset(row, 0)
        start = sum(len(text) for text in grid.chars[base : base + col])
        covered = grid.chars[base + col : base + col + cursor_cells(grid)]
        end = start + max(1, sum(len(text) for text in covered))

        style = style_for(cursor_highlight(grid))
        if grid.cursor_shape is CursorShape.HORIZONTAL:
            style = Style(underline=True, color=style.bgcolor)
        self._cursor = _CursorMark(row, start, end, style)

    def draw_border_rectangles(self, grid: Grid, width: int, height: int) -> None:
        default = grid.highlights.resolve(0)
        for rect in border_rectangles(grid, self.font_size(), width, height):
            self.fill_rect(rect, default)

    def finish_draw(self) -> None:
        frame = [line.copy() for line in self._rows]
        # Fills only append past existing content, so the leftmost fill
        # claims the overlap of the two border strips.
        for rect, style in sorted(self._fills, key=lambda item: (item[0].left, item[0].top)):
            for row in range(int(rect.top), int(rect.bottom)):
                while len(frame) <= row:
                    frame.append(Text(no_wrap=True, overflow="crop"))
                line = frame[row]
                if line.cell_len < rect.left:
                    line.append(" " * (int(rect.left) - line.cell_len))
                if line.cell_len < rect.right:
                    line.append(" " * (int(rect.right) - line.cell_len), style)

        mark = self._cursor
        if mark is not None and mark.row < len(frame):
            frame[mark.row].stylize(mark.style, mark.start, mark.end)

        self._drawing = False
        self.frames += 1
        self.hooks.update_frame(frame)
        self.hooks.log(f"frame {self.frames} rows={len(frame)}")

    def _fit_rows(self, rows: int) -> None:
        if len(self._rows) > rows:
            del self._rows[rows:]
        while len(self._rows) < rows:
            self._rows.append(Text())


__all__ = ["TextualGridRenderer", "TextualUIHooks", "rgb", "style_for"]
