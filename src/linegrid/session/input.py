"""Keyboard and mouse events translated to the editor's input notation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Modifiers:
    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    def prefix(self) -> str:
        """``C-``/``S-``/``M-`` prefix in the order the editor documents them."""

        return (
            ("C-" if self.ctrl else "")
            + ("S-" if self.shift else "")
            + ("M-" if self.alt else "")
        )


class InputKind(str, Enum):
    INPUT = "input"  # already in key notation, sent verbatim
    MODIFIED = "modified"  # key name wrapped as <mods-name>
    CHAR = "char"  # typed character
    SYSCHAR = "syschar"  # character typed with a system modifier (alt)


@dataclass(frozen=True, slots=True)
class InputEvent:
    kind: InputKind
    text: str
    modifiers: Modifiers = field(default_factory=Modifiers)

    @classmethod
    def raw(cls, keys: str) -> "InputEvent":
        return cls(InputKind.INPUT, keys)

    @classmethod
    def modified(cls, name: str, modifiers: Modifiers = Modifiers()) -> "InputEvent":
        return cls(InputKind.MODIFIED, name, modifiers)

    @classmethod
    def char(cls, ch: str, modifiers: Modifiers = Modifiers()) -> "InputEvent":
        return cls(InputKind.CHAR, ch, modifiers)

    @classmethod
    def syschar(cls, ch: str, modifiers: Modifiers = Modifiers(alt=True)) -> "InputEvent":
        return cls(InputKind.SYSCHAR, ch, modifiers)


def _wrap(name: str, modifiers: Modifiers) -> str:
    return f"<{modifiers.prefix()}{name}>"


def keys_for(event: InputEvent) -> str:
    """Render ``event`` as the string ``nvim_input`` expects."""

    if event.kind is InputKind.INPUT:
        return event.text
    if event.kind is InputKind.CHAR:
        if event.text == " ":
            return _wrap("Space", event.modifiers)
        if event.text == "<":
            return "<lt>"
        return event.text
    return _wrap(event.text, event.modifiers)


class MouseButton(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    MIDDLE = "middle"
    WHEEL = "wheel"


class MouseAction(str, Enum):
    PRESS = "press"
    DRAG = "drag"
    RELEASE = "release"
    WHEEL_UP = "up"
    WHEEL_DOWN = "down"
    WHEEL_LEFT = "left"
    WHEEL_RIGHT = "right"


@dataclass(frozen=True, slots=True)
class MouseEvent:
    row: int
    col: int
    button: MouseButton
    action: MouseAction
    modifiers: Modifiers = field(default_factory=Modifiers)


__all__ = [
    "InputEvent",
    "InputKind",
    "Modifiers",
    "MouseAction",
    "MouseButton",
    "MouseEvent",
    "keys_for",
]
