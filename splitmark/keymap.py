"""Global key bindings and the help line built from them."""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .keyboard import KeyEvent


@dataclass
class Binding:
    """One action reachable from one or more key names."""
    keys: Tuple[str, ...]
    help_key: str = ""
    help_desc: str = ""
    enabled: bool = True

    def matches(self, event) -> bool:
        return self.enabled and isinstance(event, KeyEvent) and event.name in self.keys


@dataclass
class KeyMap:
    """Bindings the session handles before the text buffer sees a key."""
    quit: Binding
    save: Binding

    def help_bindings(self) -> List[Binding]:
        return [self.save, self.quit]


def default_keymap() -> KeyMap:
    return KeyMap(
        quit=Binding(keys=("esc", "ctrl+c", "ctrl+q"), help_key="esc", help_desc="quit"),
        save=Binding(keys=("ctrl+s",), help_key="ctrl+s", help_desc="save"),
    )


def short_help(bindings: Iterable[Binding], separator: str = " • ") -> str:
    """One-line help such as 'ctrl+s save • esc quit'."""
    return separator.join(
        f"{b.help_key} {b.help_desc}" for b in bindings if b.enabled and b.help_key
    )
