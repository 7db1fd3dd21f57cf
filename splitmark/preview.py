"""Rendered markdown preview shown in the right pane.

``render_markdown`` is the rendering service: it turns markdown into lines
of ANSI-styled text exactly ``width`` cells wide. ``Preview`` keeps the last
good rendering around when the service fails, and ``Viewport`` scrolls over
whatever text it was last given.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from rich.cells import cell_len
from rich.color import ColorSystem
from rich.console import Console
from rich.markdown import Markdown
from rich.segment import Segment
from rich.text import Text

from .constants import EditorConstants
from .errors import RenderError
from .keyboard import KeyEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyleProfile:
    """How a named preview style maps onto rich console settings."""
    color_system: Optional[str]
    code_theme: str


STYLE_PROFILES = {
    "dark": StyleProfile(color_system="256", code_theme="monokai"),
    "light": StyleProfile(color_system="256", code_theme="friendly"),
    "notty": StyleProfile(color_system=None, code_theme="default"),
}

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
}

# Only used to turn cropped Text back into segments
_CROP_CONSOLE = Console(file=io.StringIO(), color_system="256", force_terminal=True,
                        legacy_windows=False)


def render_markdown(markup: str, width: int, style: str = EditorConstants.DEFAULT_STYLE) -> str:
    """Render markdown to terminal text, one line per row, padded to ``width``.

    Raises:
        RenderError: Unknown style, or rich failed to render the document.
    """
    profile = STYLE_PROFILES.get(style)
    if profile is None:
        raise RenderError(f"unknown style {style!r}")
    if width <= 0:
        return ""

    console = Console(
        file=io.StringIO(),
        width=width,
        color_system=profile.color_system,
        force_terminal=profile.color_system is not None,
        legacy_windows=False,
    )
    color_system = _COLOR_SYSTEMS.get(profile.color_system) if profile.color_system else None
    try:
        document = Markdown(markup, code_theme=profile.code_theme, hyperlinks=False)
        lines = console.render_lines(document, console.options.update_width(width), pad=True)
    except Exception as e:
        # rich and pygments raise many exception types on malformed input
        raise RenderError(str(e) or e.__class__.__name__) from e

    return "\n".join(_segments_to_ansi(line, color_system) for line in lines)


def _segments_to_ansi(segments: Iterable[Segment], color_system: Optional[ColorSystem]) -> str:
    parts = []
    for segment in segments:
        if segment.control:
            continue
        if segment.style and color_system is not None:
            parts.append(segment.style.render(segment.text, color_system=color_system))
        else:
            parts.append(segment.text)
    return "".join(parts)


def _crop_ansi(line: str, width: int) -> str:
    """Cut a line of ANSI-styled text to ``width`` cells, keeping its styling."""
    text = Text.from_ansi(line, end="")
    text.truncate(width, overflow="crop")
    segments = text.render(_CROP_CONSOLE)
    return _segments_to_ansi(segments, ColorSystem.EIGHT_BIT)


Renderer = Callable[[str, int, str], str]


class Preview:
    """The most recent successful rendering of the buffer.

    Rendering is skipped when neither the content nor the width changed
    since the last success. A failed rendering leaves ``text`` untouched and
    records the reason in ``last_error`` until the next success.
    """

    def __init__(self, style: str = EditorConstants.DEFAULT_STYLE,
                 renderer: Renderer = render_markdown):
        self.style = style
        self.text = ""
        self.last_error: Optional[str] = None
        self._renderer = renderer
        self._rendered_key: Optional[tuple] = None

    def refresh(self, content: str, width: int) -> str:
        """Bring the preview up to date with ``content``; never raises."""
        key = (content, width)
        if key == self._rendered_key:
            return self.text
        try:
            text = self._renderer(content, width, self.style)
        except RenderError as e:
            message = str(e) or "rendering failed"
            if message != self.last_error:
                logger.warning("Preview rendering failed: %s", message)
            self.last_error = message
            self._rendered_key = None
            return self.text
        self.text = text
        self.last_error = None
        self._rendered_key = key
        return self.text


class Viewport:
    """A fixed-size window over lines of (possibly styled) text."""

    def __init__(self, width: int = 0, height: int = 0):
        self.width = max(0, width)
        self.height = max(0, height)
        self.y_offset = 0
        self._lines: List[str] = []

    def set_content(self, text: str):
        self._lines = text.split("\n") if text else []
        if self.y_offset > self.max_y_offset:
            self.y_offset = self.max_y_offset

    @property
    def max_y_offset(self) -> int:
        return max(0, len(self._lines) - self.height)

    @property
    def at_top(self) -> bool:
        return self.y_offset <= 0

    @property
    def at_bottom(self) -> bool:
        return self.y_offset >= self.max_y_offset

    def scroll_down(self, n: int):
        self.y_offset = min(self.max_y_offset, self.y_offset + n)

    def scroll_up(self, n: int):
        self.y_offset = max(0, self.y_offset - n)

    def update(self, event) -> list:
        """Scroll on paging keys; every other event passes through."""
        if not isinstance(event, KeyEvent):
            return []
        page = max(1, self.height)
        if event.name == 'page_down':
            self.scroll_down(page)
        elif event.name == 'page_up':
            self.scroll_up(page)
        elif event.name == 'alt+down':
            self.scroll_down(1)
        elif event.name == 'alt+up':
            self.scroll_up(1)
        return []

    def view(self) -> List[str]:
        """Visible lines, padded to ``height`` rows of ``width`` cells."""
        rows = []
        for line in self._lines[self.y_offset:self.y_offset + self.height]:
            visible = cell_len(Text.from_ansi(line).plain)
            if visible > self.width:
                line = _crop_ansi(line, self.width)
                visible = cell_len(Text.from_ansi(line).plain)
            rows.append(line + " " * max(0, self.width - visible))
        while len(rows) < self.height:
            rows.append(" " * self.width)
        return rows
