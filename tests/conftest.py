from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from linegrid.grid import Grid, ResolvedHighlight
from linegrid.redraw import RedrawDispatcher
from linegrid.render import PixelRect


class RecordingSink:
    """Render sink double that logs every call with a snapshot of what it saw."""

    def __init__(self, surface: Tuple[int, int] = (800, 600)) -> None:
        self.surface = surface
        self.calls: List[Tuple[Any, ...]] = []

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def lines(self) -> List[int]:
        return [call[1] for call in self.calls if call[0] == "line"]

    def set_font(self, name: str, size: float) -> None:
        self.calls.append(("set_font", name, size))

    def font_size(self) -> Tuple[float, float]:
        return (10.0, 20.0)

    def start_draw(self) -> Tuple[int, int]:
        self.calls.append(("start_draw",))
        return self.surface

    def finish_draw(self) -> None:
        self.calls.append(("finish_draw",))

    def draw_background_rect(
        self, rows: int, cols: int, attr: ResolvedHighlight
    ) -> None:
        self.calls.append(("background", rows, cols, attr))

    def fill_rect(self, rect: PixelRect, attr: ResolvedHighlight) -> None:
        self.calls.append(("fill", rect, attr))

    def draw_grid_line(self, grid: Grid, row: int) -> None:
        self.calls.append(("line", row, grid.row_text(row)))

    def draw_cursor(self, grid: Grid) -> None:
        self.calls.append(("cursor", grid.cursor.row, grid.cursor.col))

    def draw_border_rectangles(self, grid: Grid, width: int, height: int) -> None:
        self.calls.append(("borders", width, height))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def grid() -> Grid:
    return Grid(rows=10, cols=10)


@pytest.fixture
def dispatcher(grid: Grid, sink: RecordingSink) -> RedrawDispatcher:
    return RedrawDispatcher(grid, sink)
