"""Exception types raised by the grid model and the redraw layer."""

from __future__ import annotations


class LinegridError(RuntimeError):
    """Base class for every error raised by this package."""


class ProtocolError(LinegridError):
    """Raised when the editor sends a payload that breaks the UI contract.

    The co-process is trusted and version-matched, so these are never
    clamped or recovered from.
    """

    def __init__(
        self, message: str, *, command: str | None = None, payload: object = None
    ) -> None:
        if command:
            message = f"{command}: {message}"
        super().__init__(message)
        self.command = command
        self.payload = payload


class SessionError(LinegridError):
    """Raised when a closed or detached session is used."""


__all__ = ["LinegridError", "ProtocolError", "SessionError"]
