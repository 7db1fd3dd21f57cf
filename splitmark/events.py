"""Events delivered to the session and commands it hands back to the driver.

The driver feeds exactly one event at a time into ``Session.update`` and
interprets the returned commands before reading the next event.
"""

from dataclasses import dataclass
from typing import Union

from .keyboard import KeyEvent


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal now has the given size in cells."""
    width: int
    height: int


@dataclass(frozen=True)
class TickEvent:
    """A scheduled timer tick fired."""


Event = Union[KeyEvent, ResizeEvent, TickEvent]


@dataclass(frozen=True)
class QuitCommand:
    """Stop the event loop."""


@dataclass(frozen=True)
class ScheduleTick:
    """Deliver a TickEvent after ``interval`` seconds."""
    interval: float


Command = Union[QuitCommand, ScheduleTick]
