"""Editor session: owned RPC channel plus input forwarding."""

from .frontend import Frontend, RpcChannel, read_config_guifont
from .input import (
    InputEvent,
    InputKind,
    Modifiers,
    MouseAction,
    MouseButton,
    MouseEvent,
    keys_for,
)

__all__ = [
    "Frontend",
    "RpcChannel",
    "read_config_guifont",
    "InputEvent",
    "InputKind",
    "Modifiers",
    "MouseAction",
    "MouseButton",
    "MouseEvent",
    "keys_for",
]
