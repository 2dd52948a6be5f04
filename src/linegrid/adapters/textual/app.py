"""Textual viewer that replays recorded ``redraw`` batches."""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

try:  # pragma: no cover - imported only when the viewer is run
    from rich.text import Text
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use linegrid.adapters.textual.app"
    ) from exc

from linegrid.config import FrontendOptions
from linegrid.grid import Grid, ProtocolError
from linegrid.redraw import RedrawDispatcher
from linegrid.runtime import telemetry

from .controller import TextualGridRenderer, TextualUIHooks


def load_batches(path: Path) -> List[Any]:
    """Read a capture: one JSON array of batches, or one batch per line."""

    content = path.read_text(encoding="utf-8")
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return [json.loads(line) for line in content.splitlines() if line.strip()]
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of redraw batches")
    return data


@dataclass
class ReplayState:
    position: int = 0
    status_text: str = ""


class ReplayApp(App[None]):
    """Step through a capture one ``redraw`` batch per key press."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#grid-view {
		height: 1fr;
		overflow: hidden;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("space", "step", "Next batch"),
        ("a", "play_all", "Replay all"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, batches: Sequence[Any], *, rows: int, cols: int) -> None:
        super().__init__()
        self._batches = list(batches)
        self._state = ReplayState()
        self._grid_widget: Static | None = None
        self._status_widget: Static | None = None
        self.renderer = TextualGridRenderer(
            TextualUIHooks(
                update_frame=self._update_frame,
                update_status=self._update_status,
            ),
            surface=(cols, rows),
        )
        self.grid = Grid()
        self.dispatcher = RedrawDispatcher(
            self.grid, self.renderer, logger_name="linegrid.replay"
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        self._grid_widget = Static("", id="grid-view")
        yield self._grid_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self._update_status(f"{len(self._batches)} batches loaded")

    def action_step(self) -> None:
        if self._state.position >= len(self._batches):
            self._update_status("end of capture")
            return
        batch = self._batches[self._state.position]
        self._state.position += 1
        try:
            result = self.dispatcher.dispatch(batch)
        except ProtocolError as exc:
            self._update_status(f"batch {self._state.position}: {exc}")
            raise
        self._update_status(
            f"batch {self._state.position}/{len(self._batches)}"
            f" commands={len(result)} grid={self.grid.rows}x{self.grid.cols}"
        )

    def action_play_all(self) -> None:
        while self._state.position < len(self._batches):
            self.action_step()

    def _update_frame(self, lines: Sequence[Text]) -> None:
        if self._grid_widget:
            self._grid_widget.update(Text("\n").join(lines))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = FrontendOptions.from_env()
    parser = argparse.ArgumentParser(description="Replay captured redraw batches.")
    parser.add_argument("capture", type=Path, help="JSON or JSON-lines capture file")
    parser.add_argument(
        "--rows",
        type=int,
        default=defaults.rows,
        help=f"Surface height in cells (default: {defaults.rows})",
    )
    parser.add_argument(
        "--cols",
        type=int,
        default=defaults.cols,
        help=f"Surface width in cells (default: {defaults.cols})",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "quiet", "trace"),
        default="quiet",
        help="Telemetry preset while the viewer owns the terminal",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    app = ReplayApp(load_batches(args.capture), rows=args.rows, cols=args.cols)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
