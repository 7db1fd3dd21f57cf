"""The editing session: all editor state and the rules that change it.

A ``Session`` is the single owner of the text buffer, the rendered preview,
the stopwatch and the terminal layout. The driver hands it one event at a
time through ``update`` and asks it for the next frame through ``view``;
``view`` never changes anything, so drawing the same state twice gives the
same frame.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Tuple

from rich.cells import cell_len, set_cell_size

from .constants import EditorConstants
from .events import Command, QuitCommand, ResizeEvent
from .keyboard import KeyEvent
from .keymap import KeyMap, default_keymap, short_help
from .layout import PaneLayout, compute_layout
from .preview import Preview, Renderer, Viewport, render_markdown
from .save import resolve_user, save_document
from .settings import EditorSettings
from .stopwatch import Stopwatch
from .textarea import TextArea

logger = logging.getLogger(__name__)


def _crop(text: str, width: int) -> str:
    """Cut text to at most ``width`` cells without padding it."""
    if cell_len(text) <= width:
        return text
    return set_cell_size(text, max(0, width))


class Focus(Enum):
    """Whether the text buffer accepts keystrokes."""
    EDITING = "editing"
    UNFOCUSED = "unfocused"


class Session:
    """Editor state for one document, from startup until quit."""

    def __init__(self, file_path: str, settings: Optional[EditorSettings] = None, *,
                 renderer: Renderer = render_markdown,
                 clock: Callable[[], float] = time.monotonic,
                 user_resolver: Callable[[], str] = resolve_user,
                 keymap: Optional[KeyMap] = None):
        if not file_path:
            raise ValueError("a file path is required")
        self._file_path = file_path
        self.settings = settings or EditorSettings()
        self.title = self.settings.title
        self.theme = self.settings.make_theme()
        self.keymap = keymap or default_keymap()
        self._resolve_user = user_resolver

        self.width = 0
        self.height = 0
        self.layout = PaneLayout()
        self.textarea = TextArea(theme=self.theme,
                                 placeholder=self.settings.placeholder,
                                 show_line_numbers=self.settings.show_line_numbers)
        self.preview = Preview(style=self.settings.style, renderer=renderer)
        self.viewport = Viewport()
        self.stopwatch = Stopwatch(interval=self.settings.tick_interval, clock=clock)
        self.stopwatch.start()

        self.status_message: Optional[str] = None
        self.running = True

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def content(self) -> str:
        return self.textarea.value

    @property
    def focus(self) -> Focus:
        return Focus.EDITING if self.textarea.focused else Focus.UNFOCUSED

    @property
    def last_render_error(self) -> Optional[str]:
        return self.preview.last_error

    def init(self) -> List[Command]:
        """Commands to run before the first event arrives."""
        return self.stopwatch.init()

    def update(self, event) -> List[Command]:
        """Apply one event and return the commands it produced."""
        if not self.running:
            return []
        commands: List[Command] = []

        if isinstance(event, KeyEvent):
            self.status_message = None
            if self.keymap.quit.matches(event):
                self.textarea.blur()
                self.running = False
                return [QuitCommand()]
            if self.keymap.save.matches(event):
                self.save()
            elif not self.textarea.focused:
                self.textarea.focus()
        elif isinstance(event, ResizeEvent):
            self.resize(event.width, event.height)

        # Sub-components see every event, including the ones handled above
        _, textarea_commands = self.textarea.update(event)
        commands.extend(textarea_commands)
        commands.extend(self.viewport.update(event))
        commands.extend(self.stopwatch.update(event))

        self._refresh_preview()
        return commands

    def resize(self, width: int, height: int):
        """Record the terminal size and re-derive the panes.

        The preview viewport is rebuilt, so its scroll position resets.
        """
        self.width = max(0, width)
        self.height = max(0, height)
        self.layout = compute_layout(self.width, self.height)
        self.textarea.set_size(self.layout.input_width, self.layout.input_height)
        self.viewport = Viewport(self.layout.preview_width, self.layout.preview_height)
        logger.debug(f"Resized to {self.width}x{self.height}: {self.layout}")

    def _refresh_preview(self):
        text = self.preview.refresh(self.content, self.layout.preview_width)
        self.viewport.set_content(text)

    def save(self) -> bool:
        """Write the buffer and its front matter to the session's file.

        The outcome is shown in the status line; a failed save leaves the
        session running with the buffer intact.
        """
        user = self._resolve_user()
        ok, error = save_document(self._file_path, self.content, user, self.stopwatch.view())
        if ok:
            self.status_message = EditorConstants.SAVED_MESSAGE.format(self._file_path)
        else:
            self.status_message = EditorConstants.SAVE_FAILED_MESSAGE.format(error)
        return ok

    # --- Rendering ---

    def _fit(self, text: str) -> str:
        return set_cell_size(text, self.width)

    def _title_bar(self) -> List[str]:
        elapsed = _crop(f" {self.stopwatch.view()} ", self.width)
        title = _crop(f" {self.title} ", self.width - cell_len(elapsed))
        gap = " " * (self.width - cell_len(title) - cell_len(elapsed))
        middle = self.theme.paint(title, "title") + gap + self.theme.paint(elapsed, "elapsed")
        blank = " " * self.width
        return [blank, middle, blank]

    def _panes(self) -> List[str]:
        left = self.textarea.view()
        right = self.viewport.view()
        return [a + b for a, b in zip(left, right)]

    def _status_text(self) -> str:
        if self.status_message:
            return self.status_message
        if self.preview.last_error:
            return EditorConstants.RENDER_ERROR_MESSAGE.format(self.preview.last_error)
        return ""

    def _footer(self) -> List[str]:
        help_line = self._fit(" " + short_help(self.keymap.help_bindings()))
        status = self._fit(" " + self._status_text()) if self._status_text() else self._fit("")
        rows = [self._fit(""), self.theme.paint(help_line, "help"), self.theme.paint(status, "status")]
        while len(rows) < EditorConstants.HELP_HEIGHT:
            rows.append(self._fit(""))
        return rows

    def frame_lines(self) -> List[str]:
        """The frame as ``height`` rows."""
        lines = self._title_bar() + self._panes() + self._footer()
        return lines[:self.height]

    def view(self) -> str:
        return "\n".join(self.frame_lines())

    def cursor_position(self) -> Optional[Tuple[int, int]]:
        """Where the terminal cursor belongs, or None when it should be hidden."""
        position = self.textarea.cursor_screen_position()
        if position is None:
            return None
        y, x = position
        y += EditorConstants.TITLE_HEIGHT
        if y >= self.height:
            return None
        return y, x
