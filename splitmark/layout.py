"""Pane sizing derived from the terminal size."""

from dataclasses import dataclass

from .constants import EditorConstants


@dataclass(frozen=True)
class PaneLayout:
    """Dimensions of the input pane (left) and preview pane (right)."""
    input_width: int = 0
    input_height: int = 0
    preview_width: int = 0
    preview_height: int = 0


def compute_layout(width: int, height: int,
                   title_height: int = EditorConstants.TITLE_HEIGHT,
                   help_height: int = EditorConstants.HELP_HEIGHT) -> PaneLayout:
    """Split the terminal between the input and preview panes.

    The input pane gets the floor of half the width and the preview pane the
    remainder, so the two widths always sum to ``width``. Both panes share the
    height left over after the title and help bars. Nothing goes below zero.
    """
    width = max(0, width)
    height = max(0, height)
    input_width = width // 2
    pane_height = max(0, height - help_height - title_height)
    return PaneLayout(
        input_width=input_width,
        input_height=pane_height,
        preview_width=width - input_width,
        preview_height=pane_height,
    )
