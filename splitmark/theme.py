"""Colour theme for the editor chrome, painted with rich styles."""

from __future__ import annotations

from typing import Dict, Optional

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style


DEFAULT_STYLES: Dict[str, str] = {
    "cursor": "color(212)",
    "cursor_line": "color(230) on color(57)",
    "placeholder": "color(238)",
    "focused_placeholder": "color(99)",
    "end_of_buffer": "color(235)",
    "border": "color(238)",
    "line_number": "color(241)",
    "title": "bold",
    "elapsed": "bold",
    "help": "color(241)",
    "status": "color(204)",
}


class Theme:
    """Maps named UI elements to styles and paints text with them.

    A disabled theme returns text unchanged, which is what tests and
    colourless terminals use.
    """

    def __init__(self, styles: Optional[Dict[str, str]] = None, enabled: bool = True):
        merged = dict(DEFAULT_STYLES)
        merged.update(styles or {})
        self._styles = {name: Style.parse(spec) for name, spec in merged.items()}
        self.enabled = enabled

    @classmethod
    def plain(cls) -> "Theme":
        return cls(enabled=False)

    def paint(self, text: str, name: str) -> str:
        """Wrap text in the ANSI codes for the named style."""
        if not self.enabled or not text:
            return text
        style = self._styles.get(name)
        if style is None:
            return text
        return style.render(text, color_system=ColorSystem.EIGHT_BIT)


def is_valid_style(spec: str) -> bool:
    """True when ``spec`` parses as a rich style definition."""
    try:
        Style.parse(spec)
    except StyleSyntaxError:
        return False
    return True
