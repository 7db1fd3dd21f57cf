"""Tests for the editing session view-model."""

import os
import tempfile
import unittest
from unittest.mock import Mock, patch

import pytest
from rich.cells import cell_len
from splitmark.errors import RenderError
from splitmark.events import QuitCommand, ResizeEvent, ScheduleTick, TickEvent
from splitmark.keyboard import KeyEvent, KeyType
from splitmark.session import Focus, Session
from splitmark.settings import EditorSettings


def key(value):
    return KeyEvent(key_type=KeyType.REGULAR, value=value, raw=value)


def ctrl(value):
    return KeyEvent(key_type=KeyType.CTRL, value=value, is_ctrl=True)


ESC = KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
SAVE = ctrl('s')


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_session(path="note.md", renderer=None, **kwargs):
    renderer = renderer or (lambda text, width, style: text.upper())
    session = Session(path, EditorSettings(style="notty"), renderer=renderer,
                      user_resolver=lambda: "alice", **kwargs)
    session.update(ResizeEvent(80, 24))
    return session


def type_text(session, text):
    for ch in text:
        session.update(key(ch))


class TestSessionConstruction(unittest.TestCase):

    def test_requires_file_path(self):
        with self.assertRaises(ValueError):
            Session("")

    def test_initial_state(self):
        session = Session("note.md", EditorSettings(style="notty"))
        self.assertEqual(session.focus, Focus.UNFOCUSED)
        self.assertEqual(session.title, "A New File")
        self.assertEqual(session.content, "")
        self.assertTrue(session.running)
        self.assertTrue(session.stopwatch.running)

    def test_file_path_is_read_only(self):
        session = Session("note.md")
        with self.assertRaises(AttributeError):
            session.file_path = "other.md"

    def test_init_schedules_tick(self):
        session = Session("note.md", EditorSettings(tick_interval=2.0))
        self.assertEqual(session.init(), [ScheduleTick(2.0)])


def test_first_keystroke_focuses_and_is_not_lost():
    session = make_session()
    assert session.focus == Focus.UNFOCUSED
    session.update(key('h'))
    assert session.focus == Focus.EDITING
    assert session.content == "h"


def test_focus_stays_editing():
    session = make_session()
    type_text(session, "hi")
    session.update(TickEvent())
    session.update(ResizeEvent(100, 30))
    assert session.focus == Focus.EDITING


def test_save_key_does_not_focus():
    with tempfile.TemporaryDirectory() as temp_dir:
        session = make_session(os.path.join(temp_dir, "note.md"))
        session.update(SAVE)
        assert session.focus == Focus.UNFOCUSED


def test_quit_stops_session_and_blurs():
    session = make_session()
    type_text(session, "hi")
    assert session.update(ESC) == [QuitCommand()]
    assert not session.running
    assert session.focus == Focus.UNFOCUSED
    assert session.update(key('x')) == []
    assert session.content == "hi"


@pytest.mark.parametrize("event", [ESC, ctrl('c'), ctrl('q')])
def test_quit_bindings(event):
    session = make_session()
    assert session.update(event) == [QuitCommand()]


def test_quit_discards_unsaved_content():
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "note.md")
        session = make_session(target)
        type_text(session, "unsaved")
        session.update(ESC)
        assert not os.path.exists(target)


def test_quit_leaves_existing_file_unchanged():
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "note.md")
        with open(target, 'w', encoding='utf-8') as f:
            f.write("before")
        session = make_session(target)
        type_text(session, "after")
        session.update(ESC)
        with open(target, 'r', encoding='utf-8') as f:
            assert f.read() == "before"


def test_save_writes_front_matter_and_content():
    clock = FakeClock()
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "note.md")
        session = make_session(target, clock=clock)
        type_text(session, "hello")
        clock.now = 90
        session.update(TickEvent())
        session.update(SAVE)
        with open(target, 'r', encoding='utf-8') as f:
            assert f.read() == '---\nuser = "alice"\ntime = "1m30s"\n---\nhello'
        assert session.status_message == f"Saved to {target}"
        assert session.running


def test_failed_save_is_shown_and_session_continues():
    with tempfile.TemporaryDirectory() as temp_dir:
        session = make_session(os.path.join(temp_dir, "missing", "note.md"))
        type_text(session, "text")
        session.update(SAVE)
        assert session.status_message == "Save failed: directory does not exist"
        assert session.running
        assert "Save failed" in session.view()
        session.update(key('!'))
        assert session.status_message is None
        assert session.content == "text!"


def test_resize_updates_layout_and_resets_preview_scroll():
    session = make_session(renderer=lambda text, width, style: "\n".join(["x"] * 100))
    type_text(session, "a")
    session.update(KeyEvent(key_type=KeyType.SPECIAL, value='page_down'))
    assert session.viewport.y_offset > 0
    session.update(ResizeEvent(101, 40))
    assert session.layout.input_width == 50
    assert session.layout.preview_width == 51
    assert session.layout.input_height == 32
    assert session.viewport.y_offset == 0


def test_negative_resize_clamps():
    session = make_session()
    session.update(ResizeEvent(-5, -5))
    assert (session.width, session.height) == (0, 0)
    assert session.view() == ""


def test_preview_follows_buffer():
    session = make_session()
    type_text(session, "md")
    assert session.preview.text == "MD"
    assert "MD" in session.view()


def test_preview_keeps_last_good_render_on_failure():
    renderer = Mock(side_effect=lambda text, width, style: text.upper())
    session = make_session(renderer=renderer)
    type_text(session, "ok")
    before = session.viewport.view()
    renderer.side_effect = RenderError("bad markup")
    session.update(key('!'))
    assert session.viewport.view() == before
    assert session.last_render_error == "bad markup"
    assert "render error: bad markup" in session.view()


def test_render_is_idempotent():
    session = make_session()
    type_text(session, "# hi\nthere")
    assert session.view() == session.view()
    assert session.frame_lines() == session.frame_lines()


def test_frame_fills_terminal():
    session = make_session()
    type_text(session, "hello")
    lines = session.frame_lines()
    assert len(lines) == 24
    assert all(len(line) == 80 for line in lines)


def test_title_bar_shows_title_and_elapsed_time():
    clock = FakeClock()
    session = make_session(clock=clock)
    clock.now = 45
    session.update(TickEvent())
    title_row = session.frame_lines()[1]
    assert title_row.startswith(" A New File ")
    assert title_row.endswith(" 45s ")
    assert len(title_row) == 80


def test_help_line_lists_bindings():
    session = make_session()
    assert "ctrl+s save • esc quit" in session.frame_lines()[-4]


def test_small_terminal_truncates_frame():
    session = make_session()
    session.update(ResizeEvent(20, 4))
    assert len(session.frame_lines()) == 4


def test_cursor_position_is_below_title_bar():
    session = make_session()
    assert session.cursor_position() is None
    type_text(session, "ab")
    assert session.cursor_position() == (3 + 1, 1 + 4 + 2)


def test_tick_returns_next_tick_command():
    session = make_session()
    assert session.update(TickEvent()) == [ScheduleTick(1.0)]


def test_custom_title_from_settings():
    session = Session("note.md", EditorSettings(title="Journal", style="notty"))
    session.update(ResizeEvent(40, 10))
    assert session.frame_lines()[1].startswith(" Journal ")


def test_reverting_a_broken_edit_clears_render_error():
    def renderer(text, width, style):
        if "!" in text:
            raise RenderError("boom")
        return text.upper()

    session = make_session(renderer=renderer)
    type_text(session, "a!")
    assert "render error: boom" in session.frame_lines()[-3]
    session.update(KeyEvent(key_type=KeyType.SPECIAL, value='backspace'))
    assert session.last_render_error is None
    assert session.frame_lines()[-3].strip() == ""


def test_wide_characters_keep_frame_width():
    session = make_session()
    session.update(ResizeEvent(40, 20))
    type_text(session, "你好世界你好世界")
    lines = session.frame_lines()
    assert len(lines) == 20
    assert all(cell_len(line) == 40 for line in lines)
    # 16 cells typed into a 14-cell text column scrolled by 3 cells
    assert session.cursor_position() == (3 + 1, 1 + 4 + 13)


def test_wide_title_fits_title_bar():
    session = Session("note.md", EditorSettings(title="标题" * 30, style="notty"))
    session.update(ResizeEvent(40, 10))
    title_row = session.frame_lines()[1]
    assert cell_len(title_row) == 40
    assert title_row.endswith(" 0s ")


def test_unknown_style_reports_render_error():
    session = Session("note.md", EditorSettings(style="bogus"))
    session.update(ResizeEvent(40, 10))
    assert session.running
    assert session.last_render_error == "unknown style 'bogus'"
