"""Session object owning the RPC channel, the grid and the dispatcher."""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from linegrid.config import FrontendOptions
from linegrid.grid import Grid, GridSize, HighlightAttribute, SessionError
from linegrid.redraw import GuiFont, RedrawBatch, RedrawDispatcher
from linegrid.redraw.guifont import guifont_from_config, parse_guifont
from linegrid.render.sink import RenderSink
from linegrid.runtime import telemetry

from .input import InputEvent, MouseEvent, keys_for


class RpcChannel(Protocol):
    """The msgpack-rpc connection to the embedded editor."""

    def request(self, method: str, *args: Any) -> Any:
        ...

    def notify(self, method: str, *args: Any) -> None:
        ...

    def close(self) -> None:
        ...


def read_config_guifont(path: Path) -> Optional[str]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    return guifont_from_config(text.splitlines())


class Frontend(AbstractContextManager["Frontend"]):
    """One attached UI session.

    The channel is owned: leaving the ``with`` block (or calling ``close``)
    closes it, after which every call raises ``SessionError``.
    """

    def __init__(
        self,
        channel: RpcChannel,
        *,
        options: Optional[FrontendOptions] = None,
        on_terminated: Optional[Callable[[], None]] = None,
        logger_name: str | None = None,
    ) -> None:
        self._channel = channel
        self.options = options or FrontendOptions()
        self.grid = Grid()
        self.api_info: Any = None
        self._dispatcher: Optional[RedrawDispatcher] = None
        self._on_terminated = on_terminated
        self._logger_name = logger_name
        self._closed = False
        self._terminated = False

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def channel(self) -> RpcChannel:
        if self._closed:
            raise SessionError("session is closed")
        return self._channel

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel.close()
        telemetry.record_event("session.close", logger_name=self._logger_name)

    def initialize(self) -> Optional[GuiFont]:
        """Handshake with the editor and return the ``guifont`` from its config."""

        channel = self.channel
        with telemetry.span(
            "session::initialize",
            logger_name=self._logger_name,
            component="session",
        ) as handle:
            self.api_info = channel.request("nvim_get_api_info")
            channel.notify("nvim_set_var", self.options.client_var, 1)
            config_dir = channel.request("nvim_eval", "stdpath('config')")
            if isinstance(config_dir, bytes):
                config_dir = config_dir.decode("utf-8")
            config_path = Path(str(config_dir)) / self.options.config_file
            handle.add_metadata("config", config_path)
            guifont = read_config_guifont(config_path)
        if not guifont:
            return None
        return parse_guifont(guifont)

    def attach_ui(
        self, sink: RenderSink, rows: Optional[int] = None, cols: Optional[int] = None
    ) -> RedrawDispatcher:
        rows = self.options.rows if rows is None else rows
        cols = self.options.cols if cols is None else cols
        channel = self.channel
        self._dispatcher = RedrawDispatcher(
            self.grid, sink, logger_name=self._logger_name
        )
        channel.notify("nvim_ui_attach", cols, rows, self.options.attach_options())
        telemetry.record_event(
            "session.attach",
            data={"rows": rows, "cols": cols},
            logger_name=self._logger_name,
        )
        return self._dispatcher

    def handle_notification(self, method: str, params: Any) -> Optional[RedrawBatch]:
        """Entry point for the transport's notification callback."""

        if method != "redraw":
            return None
        if self._closed:
            raise SessionError("session is closed")
        if self._dispatcher is None:
            raise SessionError("redraw received before attach_ui")
        return self._dispatcher.dispatch(params)

    def resize_grid(self, rows: int, cols: int) -> None:
        self.channel.notify("nvim_ui_try_resize", cols, rows)
        self.grid.sizing = True

    def input(self, event: InputEvent) -> None:
        self.channel.notify("nvim_input", keys_for(event))

    def mouse(self, event: MouseEvent) -> None:
        self.channel.notify(
            "nvim_input_mouse",
            event.button.value,
            event.action.value,
            event.modifiers.prefix(),
            0,
            event.row,
            event.col,
        )

    def open_file(self, path: str | Path) -> Any:
        return self.channel.request("nvim_command", f"e {path}")

    def terminated(self) -> None:
        """Called by the transport when the editor process exits."""

        if self._terminated:
            return
        self._terminated = True
        telemetry.record_event(
            "session.terminated", level="warning", logger_name=self._logger_name
        )
        if self._on_terminated is not None:
            self._on_terminated()

    @property
    def grid_size(self) -> GridSize:
        return self.grid.size

    @property
    def sizing(self) -> bool:
        return self.grid.sizing

    @property
    def default_attribute(self) -> HighlightAttribute:
        return self.grid.highlights.default


__all__ = ["Frontend", "RpcChannel", "read_config_guifont"]
