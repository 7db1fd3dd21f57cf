"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Optional, Tuple
import sys
import select


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        # Last painted frame, for minimal updates
        self._last_lines: Optional[list] = None

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.hide_cursor, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            from curtsies import Input
            # Enter raw mode immediately so reads work
            self._curtsies_input = Input(keynames='curtsies')
            self._curtsies_input.__enter__()

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)
            finally:
                self._curtsies_input = None
        if self.is_fullscreen:
            print(self.term.normal_cursor, end='')
            print(self.term.exit_fullscreen, end='', flush=True)
            self.is_fullscreen = False

    def invalidate_frame(self) -> None:
        """Forget the last frame so the next one is painted from a clear screen."""
        self._last_lines = None

    def draw_frame(self, lines: list, cursor: Optional[Tuple[int, int]] = None) -> None:
        """Paint a full frame, rewriting only the rows that changed.

        Args:
            lines: One string per terminal row, already padded to the width.
            cursor: (row, column) for the visible cursor, or None to hide it.
        """
        out = []
        if self._last_lines is None or len(self._last_lines) != len(lines):
            out.append(self.term.home + self.term.clear)
            self._last_lines = [None] * len(lines)

        for y, line in enumerate(lines):
            if line != self._last_lines[y]:
                out.append(self.term.move_yx(y, 0) + line + self.term.normal)
                self._last_lines[y] = line

        if cursor is None:
            out.append(self.term.hide_cursor)
        else:
            out.append(self.term.move_yx(*cursor) + self.term.normal_cursor)
        print(''.join(out), end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user as a curtsies key name.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The key name, or None if nothing arrived in time.
        """
        if self._curtsies_input is None:
            return None
        if timeout is None:
            return str(next(self._curtsies_input))
        r, _, _ = select.select([sys.stdin], [], [], float(timeout))
        if not r:
            return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows."""
        return self.term.height
