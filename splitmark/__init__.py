"""splitmark - A split-pane terminal markdown editor with live preview."""

from .session import Session, Focus
from .layout import PaneLayout, compute_layout
from .save import build_front_matter, save_document

__all__ = [
    'Session',
    'Focus',
    'PaneLayout',
    'compute_layout',
    'build_front_matter',
    'save_document',
]
