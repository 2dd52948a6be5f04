"""Cursor position and the per-mode cursor style table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, Optional

from .errors import ProtocolError

MAX_CURSOR_MODE_INFOS: Final = 64


class CursorShape(str, Enum):
    NONE = "none"
    BLOCK = "block"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

    @classmethod
    def parse(cls, value: object) -> "CursorShape":
        """Map a ``cursor_shape`` value; anything unrecognized draws no cursor."""

        if isinstance(value, str):
            for shape in cls:
                if shape.value == value:
                    return shape
        return cls.NONE


@dataclass(slots=True)
class CursorModeInfo:
    shape: CursorShape = CursorShape.NONE
    hl_id: int = 0


@dataclass(slots=True)
class Cursor:
    row: int = 0
    col: int = 0
    # None until the first mode_change selects a slot.
    mode_index: Optional[int] = None


def check_mode_index(index: object, *, command: str | None = None) -> int:
    if (
        isinstance(index, bool)
        or not isinstance(index, int)
        or not 0 <= index < MAX_CURSOR_MODE_INFOS
    ):
        raise ProtocolError(f"cursor mode index out of range: {index!r}", command=command)
    return index


class CursorModeTable:
    """Fixed table of ``MAX_CURSOR_MODE_INFOS`` slots selected by mode index."""

    def __init__(self) -> None:
        self._slots = [CursorModeInfo() for _ in range(MAX_CURSOR_MODE_INFOS)]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[CursorModeInfo]:
        return iter(self._slots)

    def __getitem__(self, index: int) -> CursorModeInfo:
        return self._slots[check_mode_index(index)]

    def set(self, index: int, shape: CursorShape, hl_id: int) -> None:
        slot = self[index]
        slot.shape = shape
        slot.hl_id = hl_id


__all__ = [
    "MAX_CURSOR_MODE_INFOS",
    "Cursor",
    "CursorModeInfo",
    "CursorModeTable",
    "CursorShape",
    "check_mode_index",
]
