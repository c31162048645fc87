"""Typed event bus — decoupled notifications between host and recorder.

The host integration emits session lifecycle events; the mode
controller subscribes to them to drive the autorecord policy.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Session events ------------------------------------------------------

@dataclass(frozen=True)
class SessionRestarted:
    """The host started a new match (map (re)loaded)."""
    map_name: str


@dataclass(frozen=True)
class GameOver:
    """The current match reached its game-over state."""
    winning_team: int = -1


# -- Recorder events -----------------------------------------------------

@dataclass(frozen=True)
class ModeChanged:
    """The mode controller switched mode."""
    old_mode: str
    new_mode: str


@dataclass(frozen=True)
class RecordingSaved:
    """A recording was written to storage."""
    filename: str
    num_ticks: int


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Simple synchronous event bus with typed events.

    Usage:
        bus = EventBus()
        bus.on(GameOver, lambda e: print(e.winning_team))
        bus.emit(GameOver(winning_team=1))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for an event type."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unregister a handler."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers."""
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
