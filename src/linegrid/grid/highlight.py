"""Highlight attribute table and paint-time color resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Dict, Final, Iterator, Mapping, Optional

from .errors import ProtocolError

# Stored in place of a literal color: "use attribute 0's color". Also what
# the editor sends for an unknown default color.
DEFAULT_COLOR: Final = -1


class HighlightFlags(IntFlag):
    NONE = 0
    REVERSE = 1 << 0
    ITALIC = 1 << 1
    BOLD = 1 << 2
    STRIKETHROUGH = 1 << 3
    UNDERLINE = 1 << 4
    UNDERCURL = 1 << 5


FLAG_KEYS: Final[Mapping[str, HighlightFlags]] = {
    "reverse": HighlightFlags.REVERSE,
    "italic": HighlightFlags.ITALIC,
    "bold": HighlightFlags.BOLD,
    "strikethrough": HighlightFlags.STRIKETHROUGH,
    "underline": HighlightFlags.UNDERLINE,
    "undercurl": HighlightFlags.UNDERCURL,
}

COLOR_KEYS: Final = ("foreground", "background", "special")


@dataclass(slots=True)
class HighlightAttribute:
    """Colors exactly as the editor sent them plus the style bitmask."""

    foreground: int = DEFAULT_COLOR
    background: int = DEFAULT_COLOR
    special: int = DEFAULT_COLOR
    flags: HighlightFlags = HighlightFlags.NONE

    def has(self, flag: HighlightFlags) -> bool:
        return bool(self.flags & flag)

    def set_flag(self, flag: HighlightFlags, enabled: bool) -> None:
        if enabled:
            self.flags |= flag
        else:
            self.flags &= ~flag


@dataclass(frozen=True, slots=True)
class ResolvedHighlight:
    """Paint-ready colors; ``DEFAULT_COLOR`` only survives when attribute 0 holds it."""

    foreground: int
    background: int
    special: int
    flags: HighlightFlags = HighlightFlags.NONE

    @property
    def bold(self) -> bool:
        return bool(self.flags & HighlightFlags.BOLD)

    @property
    def italic(self) -> bool:
        return bool(self.flags & HighlightFlags.ITALIC)

    @property
    def strikethrough(self) -> bool:
        return bool(self.flags & HighlightFlags.STRIKETHROUGH)

    @property
    def underline(self) -> bool:
        return bool(self.flags & (HighlightFlags.UNDERLINE | HighlightFlags.UNDERCURL))


def _check_id(hl_id: object, *, command: str | None = None) -> int:
    if isinstance(hl_id, bool) or not isinstance(hl_id, int) or hl_id < 0:
        raise ProtocolError(f"invalid highlight id {hl_id!r}", command=command)
    return hl_id


def _color(value: object, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(f"{key} must be an integer color, got {value!r}")
    return value


class HighlightTable:
    """Attributes addressed by id; id 0 is the default every other id inherits from.

    Only ids that have been touched hold a record. Ids that were never
    defined read as an all-sentinel attribute without flags, which paints
    with the defaults.
    """

    def __init__(self) -> None:
        self._attrs: Dict[int, HighlightAttribute] = {0: HighlightAttribute()}

    def __len__(self) -> int:
        return len(self._attrs)

    def __iter__(self) -> Iterator[HighlightAttribute]:
        return iter(self._attrs.values())

    @property
    def default(self) -> HighlightAttribute:
        return self._attrs[0]

    def attribute(self, hl_id: int) -> HighlightAttribute:
        """Return the mutable record for ``hl_id``, allocating it if needed."""

        hl_id = _check_id(hl_id)
        attr = self._attrs.get(hl_id)
        if attr is None:
            attr = self._attrs[hl_id] = HighlightAttribute()
        return attr

    def peek(self, hl_id: int) -> Optional[HighlightAttribute]:
        return self._attrs.get(_check_id(hl_id))

    def set_defaults(self, foreground: int, background: int, special: int) -> None:
        default = self._attrs[0]
        default.foreground = _color(foreground, "foreground")
        default.background = _color(background, "background")
        default.special = _color(special, "special")
        default.flags = HighlightFlags.NONE

    def define(self, hl_id: int, rgb_attr: Mapping[str, object]) -> HighlightAttribute:
        """Apply an ``hl_attr_define`` map.

        Absent colors become ``DEFAULT_COLOR``; flags are only touched when
        the map mentions them.
        """

        attr = self.attribute(_check_id(hl_id, command="hl_attr_define"))
        for key in COLOR_KEYS:
            value = rgb_attr.get(key)
            setattr(attr, key, DEFAULT_COLOR if value is None else _color(value, key))
        for key, flag in FLAG_KEYS.items():
            if key in rgb_attr:
                attr.set_flag(flag, bool(rgb_attr[key]))
        return attr

    def resolve(self, hl_id: int, *, invert: bool = False) -> ResolvedHighlight:
        default = self._attrs[0]
        attr = self.peek(hl_id) or HighlightAttribute()
        flags = attr.flags
        if invert:
            flags ^= HighlightFlags.REVERSE

        if flags & HighlightFlags.REVERSE:
            foreground, background = attr.background, attr.foreground
            fallback_fg, fallback_bg = default.background, default.foreground
        else:
            foreground, background = attr.foreground, attr.background
            fallback_fg, fallback_bg = default.foreground, default.background

        return ResolvedHighlight(
            foreground=fallback_fg if foreground == DEFAULT_COLOR else foreground,
            background=fallback_bg if background == DEFAULT_COLOR else background,
            special=default.special if attr.special == DEFAULT_COLOR else attr.special,
            flags=flags,
        )


__all__ = [
    "DEFAULT_COLOR",
    "COLOR_KEYS",
    "FLAG_KEYS",
    "HighlightAttribute",
    "HighlightFlags",
    "HighlightTable",
    "ResolvedHighlight",
]
