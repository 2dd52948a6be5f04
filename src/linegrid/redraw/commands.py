"""Typed redraw commands and decoding of the raw ``redraw`` payload.

Each known command name maps to one frozen dataclass. A wire entry
``[name, args1, args2, ...]`` decodes into one instance per parameter tuple,
so a batch becomes a flat, ordered list of commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from linegrid.grid.cursor import (
    MAX_CURSOR_MODE_INFOS,
    CursorModeInfo,
    CursorShape,
    check_mode_index,
)
from linegrid.grid.errors import ProtocolError

C = TypeVar("C", bound="RedrawCommand")

COMMANDS: Dict[str, Type["RedrawCommand"]] = {}


def _register(cls: Type[C]) -> Type[C]:
    if cls.name in COMMANDS:
        raise ValueError(f"Redraw command '{cls.name}' already registered")
    COMMANDS[cls.name] = cls
    return cls


def _is_array(value: object) -> bool:
    return isinstance(value, (list, tuple))


def _arg(args: Sequence[Any], index: int, command: str) -> Any:
    if index >= len(args):
        raise ProtocolError(
            f"expected at least {index + 1} parameters, got {len(args)}",
            command=command,
            payload=args,
        )
    return args[index]


def _int(args: Sequence[Any], index: int, command: str) -> int:
    value = _arg(args, index, command)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError(
            f"parameter {index} must be an integer, got {value!r}",
            command=command,
            payload=args,
        )
    return value


def _text(value: object, command: str) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    if not isinstance(value, str):
        raise ProtocolError(f"expected a string, got {value!r}", command=command)
    return value


def _map(value: object, command: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ProtocolError(f"expected a map, got {value!r}", command=command)
    return MappingProxyType(
        {_text(key, command): item for key, item in value.items()}
    )


@dataclass(frozen=True, slots=True)
class RedrawCommand:
    name: ClassVar[str] = ""

    @classmethod
    def decode(cls: Type[C], args: Sequence[Any]) -> C:  # pragma: no cover - abstract
        raise NotImplementedError


@_register
@dataclass(frozen=True, slots=True)
class OptionSet(RedrawCommand):
    name: ClassVar[str] = "option_set"
    option: str
    value: Any

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "OptionSet":
        option = _text(_arg(args, 0, cls.name), cls.name)
        value = _arg(args, 1, cls.name)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return cls(option=option, value=value)


@_register
@dataclass(frozen=True, slots=True)
class GridResize(RedrawCommand):
    name: ClassVar[str] = "grid_resize"
    grid: int
    cols: int
    rows: int

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "GridResize":
        return cls(
            grid=_int(args, 0, cls.name),
            cols=_int(args, 1, cls.name),
            rows=_int(args, 2, cls.name),
        )


@_register
@dataclass(frozen=True, slots=True)
class GridClear(RedrawCommand):
    name: ClassVar[str] = "grid_clear"
    grid: int = 1

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "GridClear":
        return cls(grid=_int(args, 0, cls.name) if args else 1)


@_register
@dataclass(frozen=True, slots=True)
class DefaultColorsSet(RedrawCommand):
    name: ClassVar[str] = "default_colors_set"
    foreground: int
    background: int
    special: int
    cterm_foreground: int = 0
    cterm_background: int = 0

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "DefaultColorsSet":
        return cls(
            foreground=_int(args, 0, cls.name),
            background=_int(args, 1, cls.name),
            special=_int(args, 2, cls.name),
            cterm_foreground=_int(args, 3, cls.name) if len(args) > 3 else 0,
            cterm_background=_int(args, 4, cls.name) if len(args) > 4 else 0,
        )


@_register
@dataclass(frozen=True, slots=True)
class HlAttrDefine(RedrawCommand):
    name: ClassVar[str] = "hl_attr_define"
    hl_id: int
    rgb_attr: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "HlAttrDefine":
        hl_id = _int(args, 0, cls.name)
        if hl_id < 0:
            raise ProtocolError(f"invalid highlight id {hl_id}", command=cls.name)
        return cls(hl_id=hl_id, rgb_attr=_map(_arg(args, 1, cls.name), cls.name))


@dataclass(frozen=True, slots=True)
class LineCell:
    """One ``[text, hl_id?, repeat?]`` entry; ``None`` means "omitted"."""

    text: str
    hl_id: Optional[int] = None
    repeat: Optional[int] = None

    @classmethod
    def decode(cls, raw: object) -> "LineCell":
        command = GridLine.name
        if not _is_array(raw) or not raw:
            raise ProtocolError(f"malformed cell {raw!r}", command=command)
        text = _text(raw[0], command)
        hl_id = _int(raw, 1, command) if len(raw) > 1 else None
        repeat = _int(raw, 2, command) if len(raw) > 2 else None
        if hl_id is not None and hl_id < 0:
            raise ProtocolError(f"invalid highlight id {hl_id}", command=command)
        if repeat is not None and repeat < 1:
            raise ProtocolError(f"invalid repeat count {repeat}", command=command)
        return cls(text=text, hl_id=hl_id, repeat=repeat)


@_register
@dataclass(frozen=True, slots=True)
class GridLine(RedrawCommand):
    name: ClassVar[str] = "grid_line"
    grid: int
    row: int
    col_start: int
    cells: Tuple[LineCell, ...]

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "GridLine":
        raw_cells = _arg(args, 3, cls.name)
        if not _is_array(raw_cells):
            raise ProtocolError("cells must be an array", command=cls.name, payload=args)
        return cls(
            grid=_int(args, 0, cls.name),
            row=_int(args, 1, cls.name),
            col_start=_int(args, 2, cls.name),
            cells=tuple(LineCell.decode(raw) for raw in raw_cells),
        )


@_register
@dataclass(frozen=True, slots=True)
class GridCursorGoto(RedrawCommand):
    name: ClassVar[str] = "grid_cursor_goto"
    grid: int
    row: int
    col: int

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "GridCursorGoto":
        return cls(
            grid=_int(args, 0, cls.name),
            row=_int(args, 1, cls.name),
            col=_int(args, 2, cls.name),
        )


@_register
@dataclass(frozen=True, slots=True)
class ModeInfoSet(RedrawCommand):
    name: ClassVar[str] = "mode_info_set"
    enabled: bool
    mode_infos: Tuple[CursorModeInfo, ...]

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "ModeInfoSet":
        enabled = bool(_arg(args, 0, cls.name))
        raw_infos = _arg(args, 1, cls.name)
        if not _is_array(raw_infos):
            raise ProtocolError("mode infos must be an array", command=cls.name)
        if len(raw_infos) > MAX_CURSOR_MODE_INFOS:
            raise ProtocolError(
                f"{len(raw_infos)} mode infos exceed {MAX_CURSOR_MODE_INFOS} slots",
                command=cls.name,
            )
        infos = []
        for raw in raw_infos:
            info = _map(raw, cls.name)
            hl_id = info.get("attr_id", 0)
            if isinstance(hl_id, bool) or not isinstance(hl_id, int) or hl_id < 0:
                raise ProtocolError(f"invalid attr_id {hl_id!r}", command=cls.name)
            shape = info.get("cursor_shape")
            if isinstance(shape, bytes):
                shape = shape.decode("utf-8")
            infos.append(CursorModeInfo(shape=CursorShape.parse(shape), hl_id=hl_id))
        return cls(enabled=enabled, mode_infos=tuple(infos))


@_register
@dataclass(frozen=True, slots=True)
class ModeChange(RedrawCommand):
    name: ClassVar[str] = "mode_change"
    mode: str
    mode_index: int

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "ModeChange":
        return cls(
            mode=_text(_arg(args, 0, cls.name), cls.name),
            mode_index=check_mode_index(_int(args, 1, cls.name), command=cls.name),
        )


@_register
@dataclass(frozen=True, slots=True)
class BusyStart(RedrawCommand):
    name: ClassVar[str] = "busy_start"

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "BusyStart":
        return cls()


@_register
@dataclass(frozen=True, slots=True)
class BusyStop(RedrawCommand):
    name: ClassVar[str] = "busy_stop"

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "BusyStop":
        return cls()


@_register
@dataclass(frozen=True, slots=True)
class GridScroll(RedrawCommand):
    name: ClassVar[str] = "grid_scroll"
    grid: int
    top: int
    bottom: int
    left: int
    right: int
    rows: int
    cols: int = 0

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "GridScroll":
        values = [_int(args, index, cls.name) for index in range(7)]
        command = cls(*values)
        if command.cols != 0:
            raise ProtocolError(
                f"horizontal scroll ({command.cols} cols) is not supported",
                command=cls.name,
                payload=args,
            )
        return command


@_register
@dataclass(frozen=True, slots=True)
class Flush(RedrawCommand):
    name: ClassVar[str] = "flush"

    @classmethod
    def decode(cls, args: Sequence[Any]) -> "Flush":
        return cls()


@dataclass(frozen=True, slots=True)
class RedrawBatch:
    commands: Tuple[RedrawCommand, ...]
    skipped: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.commands)


def decode_batch(params: object) -> RedrawBatch:
    """Decode the ``redraw`` notification argument.

    Unknown command names are collected in ``skipped``; any shape error
    raises ``ProtocolError`` before a single command is returned.
    """

    if not _is_array(params):
        raise ProtocolError("redraw payload must be an array", payload=params)
    commands: list[RedrawCommand] = []
    skipped: list[str] = []
    for entry in params:  # type: ignore[union-attr]
        if not _is_array(entry) or not entry:
            raise ProtocolError(f"malformed redraw entry {entry!r}", payload=entry)
        name = _text(entry[0], "redraw")
        command_type = COMMANDS.get(name)
        if command_type is None:
            skipped.append(name)
            continue
        for args in entry[1:]:
            if not _is_array(args):
                raise ProtocolError(
                    "parameters must be an array", command=name, payload=args
                )
            commands.append(command_type.decode(args))
    return RedrawBatch(commands=tuple(commands), skipped=tuple(skipped))


__all__ = [
    "COMMANDS",
    "RedrawCommand",
    "RedrawBatch",
    "OptionSet",
    "GridResize",
    "GridClear",
    "DefaultColorsSet",
    "HlAttrDefine",
    "LineCell",
    "GridLine",
    "GridCursorGoto",
    "ModeInfoSet",
    "ModeChange",
    "BusyStart",
    "BusyStop",
    "GridScroll",
    "Flush",
    "decode_batch",
]
