"""Applies redraw batches to a ``Grid`` and drives a ``RenderSink``."""

from __future__ import annotations

from typing import Any, Callable, Dict, Type

from linegrid.grid import PLACEHOLDER, Grid, ProtocolError
from linegrid.render.sink import RenderSink
from linegrid.runtime import telemetry

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
    ModeChange,
    ModeInfoSet,
    OptionSet,
    RedrawBatch,
    RedrawCommand,
    decode_batch,
)
from .guifont import parse_guifont

Handler = Callable[[Any], None]


class RedrawDispatcher:
    """Owns nothing but the frame bookkeeping; the grid and sink are injected.

    Not reentrant: callers deliver one ``redraw`` notification at a time.
    """

    def __init__(
        self, grid: Grid, sink: RenderSink, *, logger_name: str | None = None
    ) -> None:
        self.grid = grid
        self.sink = sink
        self._logger_name = logger_name
        self._surface = (0, 0)
        self.flushed = False
        self._handlers: Dict[Type[RedrawCommand], Handler] = {
            OptionSet: self._option_set,
            GridResize: self._grid_resize,
            GridClear: self._grid_clear,
            DefaultColorsSet: self._default_colors_set,
            HlAttrDefine: self._hl_attr_define,
            GridLine: self._grid_line,
            GridCursorGoto: self._grid_cursor_goto,
            ModeInfoSet: self._mode_info_set,
            ModeChange: self._mode_change,
            BusyStart: self._busy_start,
            BusyStop: self._busy_stop,
            GridScroll: self._grid_scroll,
            Flush: self._flush,
        }
        missing = set(COMMANDS.values()) - set(self._handlers)
        if missing:
            raise RuntimeError(
                f"No redraw handler for {sorted(cmd.name for cmd in missing)}"
            )

    def dispatch(self, params: object) -> RedrawBatch:
        """Decode and apply one ``redraw`` notification argument."""

        batch = decode_batch(params)
        self.apply(batch)
        return batch

    def apply(self, batch: RedrawBatch) -> None:
        if batch.skipped:
            telemetry.record_event(
                "redraw.skipped",
                level="debug",
                data={"names": ",".join(batch.skipped)},
                logger_name=self._logger_name,
            )
        with telemetry.span(
            "redraw::dispatch",
            logger_name=self._logger_name,
            component="redraw",
            metadata={"commands": len(batch)},
        ):
            self.flushed = False
            self._surface = self.sink.start_draw()
            try:
                for command in batch.commands:
                    self._handlers[type(command)](command)
            finally:
                self.sink.finish_draw()

    def _repaint_cursor_row(self) -> None:
        row = self.grid.cursor.row
        if self.grid.row_in_bounds(row):
            self.sink.draw_grid_line(self.grid, row)

    def _option_set(self, command: OptionSet) -> None:
        if command.option != "guifont" or not isinstance(command.value, str):
            return
        font = parse_guifont(command.value)
        if font is not None:
            self.sink.set_font(*font)

    def _grid_resize(self, command: GridResize) -> None:
        if self.grid.resize(command.rows, command.cols):
            telemetry.record_event(
                "grid.resize",
                level="debug",
                data={"rows": command.rows, "cols": command.cols},
                logger_name=self._logger_name,
            )
        self.grid.sizing = False

    def _grid_clear(self, command: GridClear) -> None:
        grid = self.grid
        grid.clear()
        self.sink.draw_background_rect(
            grid.rows, grid.cols, grid.highlights.resolve(0)
        )

    def _default_colors_set(self, command: DefaultColorsSet) -> None:
        self.grid.highlights.set_defaults(
            command.foreground, command.background, command.special
        )

    def _hl_attr_define(self, command: HlAttrDefine) -> None:
        self.grid.highlights.define(command.hl_id, command.rgb_attr)

    def _grid_line(self, command: GridLine) -> None:
        grid = self.grid
        row = command.row
        if not grid.row_in_bounds(row):
            raise ProtocolError(
                f"row {row} outside {grid.rows} rows", command=command.name
            )

        col = command.col_start
        hl_id = 0
        cells = command.cells
        for index, cell in enumerate(cells):
            if cell.hl_id is not None:
                hl_id = cell.hl_id
            if not cell.text:
                # Either the right half already written with its glyph, or
                # an empty entry with nothing to place.
                continue

            following = cells[index + 1] if index + 1 < len(cells) else None
            if following is not None and following.text == PLACEHOLDER:
                grid.put_wide(row, col, cell.text, hl_id)
                col += 2
                continue

            for _ in range(cell.repeat or 1):
                grid.put(row, col, cell.text, hl_id)
                col += 1

        self.sink.draw_grid_line(grid, row)

    def _grid_cursor_goto(self, command: GridCursorGoto) -> None:
        self._repaint_cursor_row()
        self.grid.set_cursor(command.row, command.col)

    def _mode_info_set(self, command: ModeInfoSet) -> None:
        for index, info in enumerate(command.mode_infos):
            self.grid.mode_infos.set(index, info.shape, info.hl_id)

    def _mode_change(self, command: ModeChange) -> None:
        self._repaint_cursor_row()
        self.grid.set_cursor_mode(command.mode_index)

    def _busy_start(self, command: BusyStart) -> None:
        self.grid.busy = True
        self._repaint_cursor_row()

    def _busy_stop(self, command: BusyStop) -> None:
        self.grid.busy = False

    def _grid_scroll(self, command: GridScroll) -> None:
        grid = self.grid
        top, bottom, rows = command.top, command.bottom, command.rows
        if rows > 0:
            sources = range(top, bottom)
        else:
            sources = range(bottom - 1, top - 1, -1)

        for src in sources:
            dst = src - rows
            if dst < top or dst >= bottom:
                continue
            grid.line_copy(command.left, command.right, src, dst)
            self.sink.draw_grid_line(grid, dst)

        # The cursor may have been scrolled onto, or off, another row.
        cursor_row = grid.cursor.row - rows
        if grid.row_in_bounds(cursor_row):
            self.sink.draw_grid_line(grid, cursor_row)

    def _flush(self, command: Flush) -> None:
        if not self.grid.busy:
            self.sink.draw_cursor(self.grid)
        width, height = self._surface
        self.sink.draw_border_rectangles(self.grid, width, height)
        self.flushed = True


__all__ = ["RedrawDispatcher"]
