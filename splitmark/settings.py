"""User settings for the splitmark editor.

Settings are read from a JSON file in the OS-appropriate config directory
(e.g. ``~/.config/splitmark/settings.json`` on Linux). Every key is optional;
unknown keys and invalid values are ignored with a warning so a bad settings
file never keeps the editor from starting.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .preview import STYLE_PROFILES
from .theme import Theme, is_valid_style

logger = logging.getLogger(__name__)

APP_NAME = "splitmark"


@dataclass
class EditorSettings:
    """Everything about the editor a user may configure."""
    title: str = EditorConstants.DEFAULT_TITLE
    style: str = EditorConstants.DEFAULT_STYLE
    tick_interval: float = EditorConstants.TICK_INTERVAL
    show_line_numbers: bool = True
    placeholder: str = EditorConstants.PLACEHOLDER
    styles: Dict[str, str] = field(default_factory=dict)

    def make_theme(self) -> Theme:
        """Theme for the editor chrome; colourless under the 'notty' style."""
        profile = STYLE_PROFILES.get(self.style, STYLE_PROFILES[EditorConstants.DEFAULT_STYLE])
        return Theme(self.styles, enabled=profile.color_system is not None)


class SettingsStore:
    """Loads ``EditorSettings`` from the user's config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir(APP_NAME))
        self._settings_file = self._config_dir / "settings.json"

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _read_raw(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> EditorSettings:
        """Read the settings file, falling back to defaults key by key."""
        settings = EditorSettings()
        for key, value in self._read_raw().items():
            if not hasattr(settings, key):
                logger.warning(f"Unknown setting {key!r}, ignoring")
                continue
            if not self.validate_setting(key, value):
                logger.warning(f"Invalid value for setting {key!r}: {value!r}, ignoring")
                continue
            if key == 'tick_interval':
                value = float(value)
            setattr(settings, key, value)
        return settings

    @staticmethod
    def validate_setting(key: str, value: Any) -> bool:
        """Check a single setting value.

        Args:
            key: Setting key name.
            value: Setting value to validate.

        Returns:
            True if the value is acceptable for the key.
        """
        if key in ('title', 'placeholder'):
            return isinstance(value, str)
        if key == 'style':
            return isinstance(value, str) and value in STYLE_PROFILES
        if key == 'show_line_numbers':
            return isinstance(value, bool)
        if key == 'tick_interval':
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            return 0.1 <= value <= 60
        if key == 'styles':
            return isinstance(value, dict) and all(
                isinstance(name, str) and isinstance(spec, str) and is_valid_style(spec)
                for name, spec in value.items()
            )
        return False


def load_settings(config_dir: Optional[Path] = None) -> EditorSettings:
    return SettingsStore(config_dir).load()
