"""``guifont`` option parsing, both from ``option_set`` and from init.vim."""

from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

GuiFont = Tuple[str, float]

_SIZE_MARKER = ":h"
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_SET_GUIFONT = "set guifont="


def parse_guifont(value: str) -> Optional[GuiFont]:
    """Split ``"<name>:h<size>"``; ``None`` when there is no ``:h`` marker.

    Only the leading number after the marker counts, so trailing options such
    as ``Consolas:h14:b`` still yield ``("Consolas", 14.0)``. A marker with no
    number gives size ``0.0``.
    """

    marker = value.find(_SIZE_MARKER)
    if marker < 0:
        return None
    match = _LEADING_NUMBER.match(value, marker + len(_SIZE_MARKER))
    size = float(match.group()) if match else 0.0
    return value[:marker], size


def _inside_comment(prefix: str) -> bool:
    return prefix.count('"') % 2 == 1


def _unescape(raw: str) -> str:
    return raw.replace("\\ ", " ")


def guifont_from_config(lines: Iterable[str]) -> Optional[str]:
    """Return the last uncommented ``set guifont=`` value in a vimscript file."""

    found: Optional[str] = None
    for line in lines:
        position = line.find(_SET_GUIFONT)
        if position < 0 or _inside_comment(line[:position]):
            continue
        found = _unescape(line[position + len(_SET_GUIFONT) :].rstrip("\r\n"))
    return found


__all__ = ["GuiFont", "parse_guifont", "guifont_from_config"]
