from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

from linegrid.config import FrontendOptions
from linegrid.grid import GridSize, SessionError
from linegrid.session import (
    Frontend,
    InputEvent,
    Modifiers,
    MouseAction,
    MouseButton,
    MouseEvent,
    keys_for,
)

from conftest import RecordingSink


class FakeChannel:
    def __init__(self, responses: Dict[str, Any] | None = None) -> None:
        self.responses = responses or {}
        self.requests: List[Tuple[Any, ...]] = []
        self.notifications: List[Tuple[Any, ...]] = []
        self.closed = 0

    def request(self, method: str, *args: Any) -> Any:
        self.requests.append((method, *args))
        return self.responses.get(method)

    def notify(self, method: str, *args: Any) -> None:
        self.notifications.append((method, *args))

    def close(self) -> None:
        self.closed += 1


def make_frontend(**responses: Any) -> Tuple[Frontend, FakeChannel]:
    channel = FakeChannel(responses)
    return Frontend(channel), channel


def test_initialize_reads_guifont_from_config(tmp_path: Path) -> None:
    (tmp_path / "init.vim").write_text(
        "set guifont=Consolas:h14\n", encoding="utf-8"
    )
    frontend, channel = make_frontend(
        nvim_get_api_info=[1, {"version": {}}], nvim_eval=str(tmp_path)
    )

    font = frontend.initialize()

    assert font == ("Consolas", 14.0)
    assert frontend.api_info == [1, {"version": {}}]
    assert channel.requests == [
        ("nvim_get_api_info",),
        ("nvim_eval", "stdpath('config')"),
    ]
    assert channel.notifications == [("nvim_set_var", "linegrid", 1)]


def test_initialize_without_config_file(tmp_path: Path) -> None:
    frontend, _ = make_frontend(nvim_eval=str(tmp_path).encode("utf-8"))

    assert frontend.initialize() is None


def test_initialize_with_unreadable_config(tmp_path: Path) -> None:
    (tmp_path / "init.vim").mkdir()
    frontend, channel = make_frontend(nvim_eval=str(tmp_path))

    assert frontend.initialize() is None
    assert channel.notifications == [("nvim_set_var", "linegrid", 1)]


def test_initialize_without_size_marker(tmp_path: Path) -> None:
    (tmp_path / "init.vim").write_text("set guifont=Consolas\n", encoding="utf-8")
    frontend, _ = make_frontend(nvim_eval=str(tmp_path))

    assert frontend.initialize() is None


def test_attach_ui_sends_dimensions() -> None:
    channel = FakeChannel()
    frontend = Frontend(channel, options=FrontendOptions(rows=30, cols=100))

    frontend.attach_ui(RecordingSink())
    frontend.attach_ui(RecordingSink(), rows=5, cols=7)

    assert channel.notifications == [
        ("nvim_ui_attach", 100, 30, {"ext_linegrid": True, "rgb": True}),
        ("nvim_ui_attach", 7, 5, {"ext_linegrid": True, "rgb": True}),
    ]


def test_redraw_notifications_reach_the_grid() -> None:
    frontend, _ = make_frontend()
    sink = RecordingSink()
    frontend.attach_ui(sink)

    batch = frontend.handle_notification(
        "redraw",
        [
            ["grid_resize", [1, 8, 3]],
            ["default_colors_set", [0xABCDEF, 0x123456, 0, 0, 0]],
            ["grid_line", [1, 0, 0, [["h", 0], ["i"]]]],
            ["flush", []],
        ],
    )

    assert batch is not None and len(batch) == 4
    assert frontend.grid_size == GridSize(rows=3, cols=8)
    assert frontend.grid.row_text(0) == "hi      "
    assert frontend.default_attribute.foreground == 0xABCDEF
    assert sink.names()[0] == "start_draw"


def test_other_notifications_are_ignored() -> None:
    frontend, _ = make_frontend()

    assert frontend.handle_notification("nvim_buf_lines_event", []) is None


def test_redraw_before_attach_is_an_error() -> None:
    frontend, _ = make_frontend()

    with pytest.raises(SessionError):
        frontend.handle_notification("redraw", [["flush", []]])


def test_resize_marks_sizing_until_grid_resize() -> None:
    frontend, channel = make_frontend()
    frontend.attach_ui(RecordingSink())

    frontend.resize_grid(rows=40, cols=90)

    assert channel.notifications[-1] == ("nvim_ui_try_resize", 90, 40)
    assert frontend.sizing is True

    frontend.handle_notification("redraw", [["grid_resize", [1, 90, 40]]])

    assert frontend.sizing is False


@pytest.mark.parametrize(
    "event, expected",
    [
        (InputEvent.raw("<Esc>:w<CR>"), "<Esc>:w<CR>"),
        (InputEvent.modified("F5", Modifiers(ctrl=True, shift=True)), "<C-S-F5>"),
        (InputEvent.modified("Up"), "<Up>"),
        (InputEvent.char("a"), "a"),
        (InputEvent.char(" "), "<Space>"),
        (InputEvent.char(" ", Modifiers(ctrl=True)), "<C-Space>"),
        (InputEvent.char("<"), "<lt>"),
        (InputEvent.syschar("x"), "<M-x>"),
    ],
)
def test_keys_for(event: InputEvent, expected: str) -> None:
    assert keys_for(event) == expected


def test_input_and_mouse_notifications() -> None:
    frontend, channel = make_frontend()

    frontend.input(InputEvent.char("j"))
    frontend.mouse(
        MouseEvent(
            row=3,
            col=9,
            button=MouseButton.WHEEL,
            action=MouseAction.WHEEL_DOWN,
            modifiers=Modifiers(alt=True),
        )
    )

    assert channel.notifications == [
        ("nvim_input", "j"),
        ("nvim_input_mouse", "wheel", "down", "M-", 0, 3, 9),
    ]


def test_open_file_runs_edit_command() -> None:
    frontend, channel = make_frontend()

    frontend.open_file(Path("notes") / "todo.txt")

    assert channel.requests == [("nvim_command", f"e {Path('notes') / 'todo.txt'}")]


def test_close_is_idempotent_and_blocks_further_calls() -> None:
    channel = FakeChannel()
    with Frontend(channel) as frontend:
        frontend.attach_ui(RecordingSink())

    frontend.close()

    assert frontend.closed
    assert channel.closed == 1
    with pytest.raises(SessionError):
        frontend.input(InputEvent.char("x"))
    with pytest.raises(SessionError):
        frontend.handle_notification("redraw", [])


def test_terminated_callback_runs_once() -> None:
    calls: List[str] = []
    frontend = Frontend(FakeChannel(), on_terminated=lambda: calls.append("gone"))

    frontend.terminated()
    frontend.terminated()

    assert calls == ["gone"]
