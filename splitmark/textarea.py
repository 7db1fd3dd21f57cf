"""Editable multi-line text buffer shown in the left pane."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from rich.cells import cell_len, get_character_cell_size, set_cell_size

from .constants import EditorConstants
from .keyboard import KeyEvent, KeyType
from .theme import Theme


_FOCUSED_BORDER = ("╭", "─", "╮", "│", "╰", "╯")
_BLURRED_BORDER = (" ",) * 6


def _cell_window(text: str, start: int, width: int) -> str:
    """The part of ``text`` that falls in cells ``[start, start + width)``, padded to ``width``.

    A wide character cut by either edge of the window shows as spaces.
    """
    out = []
    pos = 0
    end_of_window = start + width
    for ch in text:
        size = get_character_cell_size(ch)
        end = pos + size
        if pos >= end_of_window:
            break
        if end > start or (size == 0 and pos >= start):
            if pos < start or end > end_of_window:
                out.append(" " * (min(end, end_of_window) - max(pos, start)))
            else:
                out.append(ch)
        pos = end
    return set_cell_size("".join(out), width)


class TextArea:
    """A line-oriented text buffer with a cursor, focus and a bordered view.

    Lines are stored without their trailing newline; ``value`` joins them.
    While blurred the buffer ignores every event. Keys map to commands in a
    registry keyed by binding name; printable keys that have no command are
    inserted as text.
    """

    def __init__(self, theme: Optional[Theme] = None,
                 placeholder: str = EditorConstants.PLACEHOLDER,
                 show_line_numbers: bool = True):
        self.theme = theme or Theme.plain()
        self.placeholder = placeholder
        self.show_line_numbers = show_line_numbers
        self.lines: List[str] = [""]
        self.row = 0
        self.col = 0
        self.width = 0
        self.height = 0
        self._focused = False
        self._desired_col: Optional[int] = None
        self._row_offset = 0
        self._col_offset = 0
        self._commands: Dict[str, Callable[[], None]] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default key mappings."""
        # Movement
        self.register('left', self.left_char)
        self.register('right', self.right_char)
        self.register('up', self.line_up)
        self.register('down', self.line_down)
        self.register('home', self.beginning_of_line)
        self.register('end', self.end_of_line)
        self.register('ctrl+a', self.beginning_of_line)
        self.register('ctrl+e', self.end_of_line)
        self.register('alt+left', self.left_word)
        self.register('alt+right', self.right_word)
        self.register('alt+b', self.left_word)
        self.register('alt+f', self.right_word)
        # Editing
        self.register('enter', self.insert_newline)
        self.register('backspace', self.backspace)
        self.register('ctrl+h', self.backspace)
        self.register('delete', self.delete_char)
        self.register('ctrl+d', self.delete_char)
        self.register('ctrl+k', self.kill_line)
        self.register('\t', self.insert_tab)

    def register(self, name: str, command: Callable[[], None]):
        """Bind a key name to a command."""
        self._commands[name] = command

    def unregister(self, name: str):
        """Remove a key binding; unknown names are ignored."""
        self._commands.pop(name, None)

    # --- Focus ---

    @property
    def focused(self) -> bool:
        return self._focused

    def focus(self):
        self._focused = True

    def blur(self):
        self._focused = False

    # --- Content ---

    @property
    def value(self) -> str:
        return "\n".join(self.lines)

    def set_value(self, text: str):
        """Replace the whole buffer and put the cursor at its end."""
        self.lines = text.split("\n")
        self.row = len(self.lines) - 1
        self.col = len(self.lines[-1])
        self._desired_col = None
        self._scroll_to_cursor()

    def set_size(self, width: int, height: int):
        self.width = max(0, width)
        self.height = max(0, height)
        self._scroll_to_cursor()

    def update(self, event) -> Tuple[str, list]:
        """Apply one event and return the new content and follow-up commands."""
        if not self._focused or not isinstance(event, KeyEvent):
            return self.value, []
        command = self._commands.get(event.name)
        if command is not None:
            if command not in (self.line_up, self.line_down):
                self._desired_col = None
            command()
        elif event.key_type == KeyType.REGULAR and event.value.isprintable():
            self._desired_col = None
            self.insert_text(event.value)
        self._scroll_to_cursor()
        return self.value, []

    # --- Editing ---

    def insert_text(self, text: str):
        """Insert text at the cursor; newlines split the current line."""
        parts = text.split("\n")
        current = self.lines[self.row]
        before, after = current[:self.col], current[self.col:]
        parts[0] = before + parts[0]
        self.col = len(parts[-1])
        parts[-1] += after
        self.lines[self.row:self.row + 1] = parts
        self.row += len(parts) - 1

    def insert_newline(self):
        self.insert_text("\n")

    def insert_tab(self):
        """Insert spaces up to the next tab stop."""
        width = EditorConstants.TAB_WIDTH
        self.insert_text(" " * (width - self.col % width))

    def backspace(self):
        if self.col > 0:
            line = self.lines[self.row]
            self.lines[self.row] = line[:self.col - 1] + line[self.col:]
            self.col -= 1
        elif self.row > 0:
            self._join_with_previous_line()

    def delete_char(self):
        line = self.lines[self.row]
        if self.col < len(line):
            self.lines[self.row] = line[:self.col] + line[self.col + 1:]
        elif self.row + 1 < len(self.lines):
            self._join_with_next_line()

    def kill_line(self):
        """Delete to the end of the line, or join the next line when already there."""
        line = self.lines[self.row]
        if self.col < len(line):
            self.lines[self.row] = line[:self.col]
        elif self.row + 1 < len(self.lines):
            self._join_with_next_line()

    def _join_with_previous_line(self):
        prev = self.lines[self.row - 1]
        self.lines[self.row - 1] = prev + self.lines[self.row]
        del self.lines[self.row]
        self.row -= 1
        self.col = len(prev)

    def _join_with_next_line(self):
        self.lines[self.row] += self.lines[self.row + 1]
        del self.lines[self.row + 1]

    # --- Movement ---

    def left_char(self):
        if self.col > 0:
            self.col -= 1
        elif self.row > 0:
            self.row -= 1
            self.col = len(self.lines[self.row])

    def right_char(self):
        if self.col < len(self.lines[self.row]):
            self.col += 1
        elif self.row + 1 < len(self.lines):
            self.row += 1
            self.col = 0

    def line_up(self):
        self._move_vertically(-1)

    def line_down(self):
        self._move_vertically(1)

    def _move_vertically(self, delta: int):
        if self._desired_col is None:
            self._desired_col = self.col
        target = self.row + delta
        if target < 0:
            self.col = 0
            return
        if target >= len(self.lines):
            self.col = len(self.lines[self.row])
            return
        self.row = target
        self.col = min(self._desired_col, len(self.lines[self.row]))

    def beginning_of_line(self):
        self.col = 0

    def end_of_line(self):
        self.col = len(self.lines[self.row])

    def right_word(self):
        """Move past the end of the next word, or to the next line at end of line."""
        line = self.lines[self.row]
        if self.col >= len(line):
            if self.row + 1 < len(self.lines):
                self.row += 1
                self.col = 0
            return
        pos = self.col
        while pos < len(line) and line[pos].isspace():
            pos += 1
        while pos < len(line) and not line[pos].isspace():
            pos += 1
        self.col = pos

    def left_word(self):
        """Move to the start of the previous word, or the previous line at column 0."""
        if self.col == 0:
            if self.row > 0:
                self.row -= 1
                self.col = len(self.lines[self.row])
            return
        line = self.lines[self.row]
        pos = self.col
        while pos > 0 and line[pos - 1].isspace():
            pos -= 1
        while pos > 0 and not line[pos - 1].isspace():
            pos -= 1
        self.col = pos

    # --- View ---

    def _gutter_width(self, inner_width: int) -> int:
        if not self.show_line_numbers:
            return 0
        digits = max(EditorConstants.MIN_LINE_NUMBER_DIGITS, len(str(len(self.lines))))
        gutter = digits + 1
        return gutter if gutter < inner_width else 0

    def _inner_size(self) -> Tuple[int, int]:
        if self.width < 2 or self.height < 2:
            return 0, 0
        return self.width - 2, self.height - 2

    def _cursor_cell(self) -> int:
        """Cells between the start of the line and the cursor."""
        return cell_len(self.lines[self.row][:self.col])

    def _scroll_to_cursor(self):
        inner_width, inner_height = self._inner_size()
        text_width = inner_width - self._gutter_width(inner_width)
        if inner_height > 0:
            if self.row < self._row_offset:
                self._row_offset = self.row
            elif self.row >= self._row_offset + inner_height:
                self._row_offset = self.row - inner_height + 1
        if text_width > 0:
            cursor_cell = self._cursor_cell()
            if cursor_cell < self._col_offset:
                self._col_offset = cursor_cell
            elif cursor_cell >= self._col_offset + text_width:
                self._col_offset = cursor_cell - text_width + 1

    def cursor_screen_position(self) -> Optional[Tuple[int, int]]:
        """Cursor (row, column) relative to the pane's top-left corner."""
        inner_width, inner_height = self._inner_size()
        gutter = self._gutter_width(inner_width)
        if not self._focused or inner_height == 0 or inner_width - gutter <= 0:
            return None
        return 1 + self.row - self._row_offset, 1 + gutter + self._cursor_cell() - self._col_offset

    def view(self) -> List[str]:
        """Render the pane as ``height`` lines, each ``width`` cells wide."""
        inner_width, inner_height = self._inner_size()
        if inner_height == 0:
            return [" " * self.width for _ in range(self.height)]
        paint = self.theme.paint
        if self._focused:
            tl, h, tr, v, bl, br = _FOCUSED_BORDER
        else:
            tl, h, tr, v, bl, br = _BLURRED_BORDER
        gutter = self._gutter_width(inner_width)
        text_width = inner_width - gutter
        digits = gutter - 1

        rows = [paint(tl + h * inner_width + tr, "border")]
        for i in range(inner_height):
            index = self._row_offset + i
            if index < len(self.lines):
                number = f"{index + 1:>{digits}} " if gutter else ""
                text = _cell_window(self.lines[index], self._col_offset, text_width)
                if index == 0 and self.value == "":
                    style = "focused_placeholder" if self._focused else "placeholder"
                    text = paint(set_cell_size(self.placeholder, text_width), style)
                elif self._focused and index == self.row:
                    text = paint(text, "cursor_line")
                body = paint(number, "line_number") + text
            else:
                body = paint(" " * inner_width, "end_of_buffer")
            rows.append(paint(v, "border") + body + paint(v, "border"))
        rows.append(paint(bl + h * inner_width + br, "border"))
        return rows
