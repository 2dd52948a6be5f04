"""Row-major cell buffer owned by one UI session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, List

from .cursor import Cursor, CursorModeTable, CursorShape, check_mode_index
from .errors import ProtocolError
from .highlight import HighlightAttribute, HighlightTable
from .size import GridSize, GridSizeListener

BLANK: Final = " "
# Right half of a double-width glyph; carries a highlight but nothing to draw.
PLACEHOLDER: Final = ""


@dataclass(frozen=True, slots=True)
class Cell:
    text: str
    hl_id: int
    wide: bool

    @property
    def is_placeholder(self) -> bool:
        return self.text == PLACEHOLDER


class Grid:
    """Cell text, highlight ids and wide flags stored as parallel flat lists.

    Index ``row * cols + col`` addresses the same cell in ``chars``,
    ``hl_ids`` and ``wide``.
    """

    def __init__(self, rows: int = 0, cols: int = 0) -> None:
        self._size = GridSize()
        self.chars: List[str] = []
        self.hl_ids: List[int] = []
        self.wide: List[bool] = []
        self.cursor = Cursor()
        self.mode_infos = CursorModeTable()
        self.highlights = HighlightTable()
        self.busy = False
        self.sizing = False
        self._size_listeners: List[GridSizeListener] = []
        if rows or cols:
            self.resize(rows, cols)

    @property
    def size(self) -> GridSize:
        return self._size

    @property
    def rows(self) -> int:
        return self._size.rows

    @property
    def cols(self) -> int:
        return self._size.cols

    @property
    def count(self) -> int:
        return self._size.count

    def add_size_listener(self, callback: GridSizeListener) -> None:
        self._size_listeners.append(callback)

    def remove_size_listener(self, callback: GridSizeListener) -> None:
        self._size_listeners.remove(callback)

    def resize(self, rows: int, cols: int) -> bool:
        """Reallocate to ``rows`` x ``cols`` blank cells.

        Returns ``False`` without touching the buffers or the listeners when
        the size is unchanged.
        """

        for name, value in (("rows", rows), ("cols", cols)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ProtocolError(f"invalid {name} {value!r}", command="grid_resize")
        size = GridSize(rows=rows, cols=cols)
        if size == self._size:
            return False

        self._size = size
        count = size.count
        self.chars = [BLANK] * count
        self.hl_ids = [0] * count
        self.wide = [False] * count
        for callback in list(self._size_listeners):
            callback(size)
        return True

    def clear(self) -> None:
        count = self.count
        self.chars[:] = [BLANK] * count
        self.hl_ids[:] = [0] * count
        self.wide[:] = [False] * count

    def row_in_bounds(self, row: int) -> bool:
        return 0 <= row < self.rows

    def offset(self, row: int, col: int) -> int:
        if not self.row_in_bounds(row) or not 0 <= col < self.cols:
            raise ProtocolError(
                f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid"
            )
        return row * self.cols + col

    def cell(self, row: int, col: int) -> Cell:
        index = self.offset(row, col)
        return Cell(self.chars[index], self.hl_ids[index], self.wide[index])

    def row_text(self, row: int) -> str:
        start = self.offset(row, 0) if self.cols else 0
        return "".join(self.chars[start : start + self.cols])

    def put(self, row: int, col: int, text: str, hl_id: int) -> None:
        index = self.offset(row, col)
        self.chars[index] = text
        self.hl_ids[index] = hl_id
        self.wide[index] = False

    def put_wide(self, row: int, col: int, text: str, hl_id: int) -> None:
        """Write a double-width glyph into ``col`` and its placeholder into ``col + 1``."""

        index = self.offset(row, col)
        self.offset(row, col + 1)
        self.chars[index] = text
        self.hl_ids[index] = hl_id
        self.wide[index] = True
        self.chars[index + 1] = PLACEHOLDER
        self.hl_ids[index + 1] = hl_id
        self.wide[index + 1] = False

    def line_copy(self, left: int, right: int, src_row: int, dst_row: int) -> None:
        """Copy columns ``[left, right)`` of ``src_row`` over ``dst_row``."""

        if not 0 <= left <= right <= self.cols:
            raise ProtocolError(
                f"column span [{left}, {right}) outside {self.cols} columns",
                command="grid_scroll",
            )
        for row in (src_row, dst_row):
            if not self.row_in_bounds(row):
                raise ProtocolError(
                    f"row {row} outside {self.rows} rows", command="grid_scroll"
                )
        src = src_row * self.cols
        dst = dst_row * self.cols
        for buffer in (self.chars, self.hl_ids, self.wide):
            buffer[dst + left : dst + right] = buffer[src + left : src + right]

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor.row = row
        self.cursor.col = col

    @property
    def cursor_offset(self) -> int:
        return self.cursor.row * self.cols + self.cursor.col

    def set_cursor_mode(self, index: int) -> None:
        self.cursor.mode_index = check_mode_index(index, command="mode_change")

    @property
    def cursor_shape(self) -> CursorShape:
        if self.cursor.mode_index is None:
            return CursorShape.NONE
        return self.mode_infos[self.cursor.mode_index].shape

    @property
    def cursor_hl_id(self) -> int:
        if self.cursor.mode_index is None:
            return 0
        return self.mode_infos[self.cursor.mode_index].hl_id

    def hl(self, hl_id: int) -> HighlightAttribute:
        return self.highlights.attribute(hl_id)


__all__ = ["BLANK", "PLACEHOLDER", "Cell", "Grid"]
