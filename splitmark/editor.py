"""Event loop driving a Session on a real terminal."""

import logging
import os
import select
import signal
import sys
import termios
import time
from typing import Iterable, Optional

from .constants import EditorConstants
from .events import Command, QuitCommand, ResizeEvent, ScheduleTick, TickEvent
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .session import Session
from .settings import EditorSettings
from .terminal import TerminalInterface

logger = logging.getLogger(__name__)


class Editor:
    """Owns the terminal and feeds keys, resizes and ticks to the session.

    Exactly one event is handled at a time: the session is updated, the
    resulting commands are applied, a frame is painted, and only then is the
    next event read.
    """

    def __init__(self, file_path: str, settings: Optional[EditorSettings] = None,
                 terminal: Optional[TerminalInterface] = None,
                 session: Optional[Session] = None):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.session = session or Session(file_path, settings)
        self.running = False
        self._next_tick: Optional[float] = None
        self._ctrl_c_pressed = False
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Handle SIGINT (Ctrl-C) by turning it into a key event."""
        del signum, frame  # Unused
        self._ctrl_c_pressed = True
        os.write(self._resize_pipe_w, EditorConstants.INTERRUPT_PIPE_MARKER)

    def dispatch(self, event) -> None:
        """Deliver one event to the session and apply what it asks for."""
        self.apply_commands(self.session.update(event))

    def apply_commands(self, commands: Iterable[Command]) -> None:
        for command in commands:
            if isinstance(command, QuitCommand):
                self.running = False
            elif isinstance(command, ScheduleTick):
                self._next_tick = time.monotonic() + command.interval

    def _select_timeout(self) -> Optional[float]:
        """Seconds until the next tick is due, or None to block."""
        if self._next_tick is None:
            return None
        return max(0.0, self._next_tick - time.monotonic())

    def _draw(self):
        self.terminal.draw_frame(self.session.frame_lines(), self.session.cursor_position())

    def run(self):
        """Run the main editor loop until the session quits."""
        self.terminal.setup()
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)

        old_settings = None
        try:
            old_settings = self._disable_flow_control()
            self.apply_commands(self.session.init())
            self.dispatch(ResizeEvent(self.terminal.width, self.terminal.height))

            while self.running:
                self._draw()
                ready, _, _ = select.select([0, self._resize_pipe_r], [], [], self._select_timeout())

                if self._resize_pipe_r in ready:
                    data = os.read(self._resize_pipe_r, 1024)
                    if self._ctrl_c_pressed:
                        self._ctrl_c_pressed = False
                        self.dispatch(KeyEvent(key_type=KeyType.CTRL, value='c',
                                               raw='\x03', is_ctrl=True))
                    if self.running and EditorConstants.RESIZE_PIPE_MARKER in data:
                        self.terminal.invalidate_frame()
                        self.dispatch(ResizeEvent(self.terminal.width, self.terminal.height))
                elif 0 in ready:
                    key_event = self.keyboard.get_key_event(timeout=0)
                    if key_event:
                        self.dispatch(key_event)
                else:
                    self._next_tick = None
                    self.dispatch(TickEvent())
        finally:
            if old_settings is not None:
                try:
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                except (termios.error, OSError):
                    pass
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()

    @staticmethod
    def _disable_flow_control():
        """Let Ctrl-S and Ctrl-Q reach the editor; returns settings to restore."""
        try:
            old_settings = termios.tcgetattr(sys.stdin)
            new_settings = list(old_settings)
            # Disable IXON/IXOFF in input flags (index 0)
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
            return old_settings
        except (termios.error, AttributeError, OSError) as e:
            logger.debug(f"Could not disable flow control: {e}")
            return None
