from __future__ import annotations

from typing import Any, List, Optional, Tuple

import pytest

from linegrid.grid import (
    PLACEHOLDER,
    CursorShape,
    Grid,
    HighlightFlags,
    ProtocolError,
)
from linegrid.redraw import RedrawDispatcher
from linegrid.runtime import telemetry

from conftest import RecordingSink


def fill_rows(grid: Grid) -> None:
    for row in range(grid.rows):
        grid.put(row, 0, str(row), row)


def first_column(grid: Grid) -> List[str]:
    return [grid.cell(row, 0).text for row in range(grid.rows)]


def test_each_batch_is_one_frame(
    dispatcher: RedrawDispatcher, sink: RecordingSink
) -> None:
    dispatcher.dispatch([["grid_cursor_goto", [1, 2, 3]], ["flush", []]])

    names = sink.names()
    assert names[0] == "start_draw"
    assert names[-1] == "finish_draw"
    assert names.count("start_draw") == names.count("finish_draw") == 1


def test_unknown_only_batch_still_frames_but_changes_nothing(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    before = list(grid.chars)

    batch = dispatcher.dispatch([["win_pos", [2, 3]], ["msg_clear", []]])

    assert batch.skipped == ("win_pos", "msg_clear")
    assert sink.names() == ["start_draw", "finish_draw"]
    assert grid.chars == before


def test_decode_errors_happen_before_any_mutation(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    with pytest.raises(ProtocolError):
        dispatcher.dispatch(
            [
                ["grid_line", [1, 0, 0, [["z", 1]]]],
                ["grid_scroll", [1, 0, 10, 0, 10, 1, 1]],
            ]
        )

    assert grid.row_text(0) == " " * 10
    assert sink.calls == []


def test_finish_draw_runs_when_a_handler_fails(
    dispatcher: RedrawDispatcher, sink: RecordingSink
) -> None:
    with pytest.raises(ProtocolError):
        dispatcher.dispatch([["grid_line", [1, 10, 0, [["a"]]]]])

    assert sink.names() == ["start_draw", "finish_draw"]


def test_grid_line_carries_highlight_and_repeats(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    dispatcher.dispatch([["grid_line", [1, 1, 2, [["a", 4], ["b"], ["c", 6, 3]]]]])

    assert grid.row_text(1) == "  abccc   "
    assert grid.hl_ids[12:17] == [4, 4, 6, 6, 6]
    assert ("line", 1, "  abccc   ") in sink.calls


def test_repeat_applies_to_its_own_entry_only(
    dispatcher: RedrawDispatcher, grid: Grid
) -> None:
    dispatcher.dispatch([["grid_line", [1, 0, 0, [["a", 1, 3], ["b"]]]]])

    assert grid.row_text(0).startswith("aaab ")
    assert grid.cell(0, 3).hl_id == 1


def test_grid_line_without_highlight_uses_default(
    dispatcher: RedrawDispatcher, grid: Grid
) -> None:
    grid.put(0, 0, "q", 9)

    dispatcher.dispatch([["grid_line", [1, 0, 0, [["x"]]]]])

    assert grid.cell(0, 0).hl_id == 0


def test_grid_line_wide_glyph(dispatcher: RedrawDispatcher, grid: Grid) -> None:
    dispatcher.dispatch([["grid_line", [1, 0, 0, [["字", 3], [""], ["x"]]]]])

    assert grid.cell(0, 0).wide
    assert grid.cell(0, 1).text == PLACEHOLDER
    assert grid.cell(0, 1).hl_id == 3
    assert grid.cell(0, 2).text == "x"
    assert grid.cell(0, 2).hl_id == 3


def test_grid_line_empty_entry_only_updates_highlight(
    dispatcher: RedrawDispatcher, grid: Grid
) -> None:
    dispatcher.dispatch([["grid_line", [1, 0, 0, [["", 5], ["y"]]]]])

    assert grid.row_text(0).startswith("y ")
    assert grid.cell(0, 0).hl_id == 5


def test_grid_line_past_last_column_is_rejected(dispatcher: RedrawDispatcher) -> None:
    with pytest.raises(ProtocolError):
        dispatcher.dispatch([["grid_line", [1, 0, 8, [["x", 0, 3]]]]])


def test_grid_resize_reallocates_and_ends_sizing(
    dispatcher: RedrawDispatcher, grid: Grid
) -> None:
    grid.sizing = True

    dispatcher.dispatch([["grid_resize", [1, 20, 5]]])

    assert (grid.rows, grid.cols) == (5, 20)
    assert grid.sizing is False


def test_resize_event_uses_the_dispatcher_logger(
    monkeypatch, grid: Grid, sink: RecordingSink
) -> None:
    events: List[Tuple[str, Optional[str]]] = []

    def capture(name: str, **kwargs: Any) -> None:
        events.append((name, kwargs.get("logger_name")))

    monkeypatch.setattr(telemetry, "record_event", capture)
    dispatcher = RedrawDispatcher(grid, sink, logger_name="linegrid.replay")

    dispatcher.dispatch([["grid_resize", [1, 20, 5]], ["grid_resize", [1, 20, 5]]])

    assert events == [("grid.resize", "linegrid.replay")]


def test_grid_clear_paints_default_background(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    grid.put(3, 3, "k", 2)

    dispatcher.dispatch(
        [["default_colors_set", [0xEEEEEE, 0x101010, 0xFF0000]], ["grid_clear", [1]]]
    )

    assert grid.cell(3, 3).text == " "
    background = [call for call in sink.calls if call[0] == "background"]
    assert len(background) == 1
    _, rows, cols, attr = background[0]
    assert (rows, cols) == (10, 10)
    assert (attr.foreground, attr.background) == (0xEEEEEE, 0x101010)


def test_highlight_definitions_reach_the_table(
    dispatcher: RedrawDispatcher, grid: Grid
) -> None:
    dispatcher.dispatch(
        [
            ["default_colors_set", [0xFFFFFF, 0x000000, 0x00FF00, 15, 0]],
            ["hl_attr_define", [7, {"foreground": 0x336699, "italic": True}, {}, []]],
        ]
    )

    resolved = grid.highlights.resolve(7)
    assert resolved.foreground == 0x336699
    assert resolved.background == 0x000000
    assert resolved.flags & HighlightFlags.ITALIC


def test_guifont_option_sets_font(
    dispatcher: RedrawDispatcher, sink: RecordingSink
) -> None:
    dispatcher.dispatch(
        [
            [
                "option_set",
                ["guifont", "Consolas:h14"],
                ["guifont", "Consolas"],
                ["linespace", 0],
            ]
        ]
    )

    assert [call for call in sink.calls if call[0] == "set_font"] == [
        ("set_font", "Consolas", 14.0)
    ]


def test_cursor_goto_repaints_the_row_it_leaves(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    grid.set_cursor(4, 1)

    dispatcher.dispatch([["grid_cursor_goto", [1, 7, 2]]])

    assert sink.lines() == [4]
    assert (grid.cursor.row, grid.cursor.col) == (7, 2)


def test_mode_info_and_mode_change(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    dispatcher.dispatch(
        [
            [
                "mode_info_set",
                [
                    True,
                    [
                        {"cursor_shape": "block", "attr_id": 0},
                        {"cursor_shape": "horizontal", "attr_id": 11},
                    ],
                ],
            ],
            ["mode_change", ["replace", 1]],
        ]
    )

    assert grid.cursor_shape is CursorShape.HORIZONTAL
    assert grid.cursor_hl_id == 11
    assert sink.lines() == [0]


def test_flush_draws_cursor_and_borders(
    dispatcher: RedrawDispatcher, sink: RecordingSink
) -> None:
    dispatcher.dispatch([["grid_cursor_goto", [1, 1, 1]], ["flush", []]])

    assert ("cursor", 1, 1) in sink.calls
    assert ("borders", 800, 600) in sink.calls
    assert dispatcher.flushed is True


def test_busy_hides_the_cursor_until_stopped(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    dispatcher.dispatch([["busy_start", []], ["flush", []]])

    assert grid.busy is True
    assert "cursor" not in sink.names()
    assert "borders" in sink.names()
    assert sink.lines() == [0]

    sink.calls.clear()
    dispatcher.dispatch([["busy_stop", []], ["flush", []]])

    assert grid.busy is False
    assert "cursor" in sink.names()


def test_batch_without_flush_is_not_flushed(dispatcher: RedrawDispatcher) -> None:
    dispatcher.dispatch([["flush", []]])
    dispatcher.dispatch([["grid_cursor_goto", [1, 0, 0]]])

    assert dispatcher.flushed is False


def test_scroll_up_moves_rows_toward_top(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    fill_rows(grid)
    grid.set_cursor(4, 0)

    dispatcher.dispatch([["grid_scroll", [1, 0, 5, 0, 10, 2, 0]]])

    assert first_column(grid) == ["2", "3", "4", "3", "4", "5", "6", "7", "8", "9"]
    assert grid.cell(0, 0).hl_id == 2
    # destination rows, then the row the cursor now sits on
    assert sink.lines() == [0, 1, 2, 2]


def test_scroll_down_moves_rows_toward_bottom(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    fill_rows(grid)
    grid.set_cursor(0, 0)

    dispatcher.dispatch([["grid_scroll", [1, 0, 5, 0, 10, -2, 0]]])

    assert first_column(grid) == ["0", "1", "0", "1", "2", "5", "6", "7", "8", "9"]
    assert sink.lines() == [4, 3, 2, 2]


def test_scroll_region_keeps_outside_columns(
    dispatcher: RedrawDispatcher, grid: Grid
) -> None:
    for row in range(grid.rows):
        for col in range(grid.cols):
            grid.put(row, col, chr(ord("a") + row), 0)

    dispatcher.dispatch([["grid_scroll", [1, 2, 6, 3, 7, 1, 0]]])

    assert grid.row_text(2) == "cccdddd" + "ccc"
    assert grid.row_text(5) == "f" * 10
    assert grid.row_text(1) == "b" * 10


def test_scroll_repaint_skips_cursor_row_outside_grid(
    dispatcher: RedrawDispatcher, grid: Grid, sink: RecordingSink
) -> None:
    fill_rows(grid)
    grid.set_cursor(1, 0)

    dispatcher.dispatch([["grid_scroll", [1, 0, 10, 0, 10, 3, 0]]])

    assert sink.lines() == list(range(7))
    assert first_column(grid)[:7] == ["3", "4", "5", "6", "7", "8", "9"]
