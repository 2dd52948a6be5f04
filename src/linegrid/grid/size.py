"""Cell-space value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class GridSize:
    rows: int = 0
    cols: int = 0

    @property
    def count(self) -> int:
        return self.rows * self.cols

    @classmethod
    def from_window_size(
        cls, width: float, height: float, font_width: float, font_height: float
    ) -> "GridSize":
        """How many whole cells fit in a ``width`` x ``height`` pixel surface."""

        return cls(rows=int(height // font_height), cols=int(width // font_width))


@dataclass(frozen=True, slots=True)
class GridPoint:
    row: int
    col: int

    @classmethod
    def from_pixels(
        cls, x: float, y: float, font_width: float, font_height: float
    ) -> "GridPoint":
        return cls(row=int(y // font_height), col=int(x // font_width))


GridSizeListener = Callable[[GridSize], None]

__all__ = ["GridSize", "GridPoint", "GridSizeListener"]
