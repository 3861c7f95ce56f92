"""
Event system for the Durak engine.

A `Game` reports each state change to an `EventEmitter`. Each game builds a
private emitter unless one is passed in, so listeners only hear about the
games they were attached to. A hosting service that wants one feed for
every game passes `EventBus.get_instance()` explicitly.

Games are driven by a single writer, so the emitter takes no locks.
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from itertools import count
from typing import Any, Callable, Dict, List, Optional, Union
import logging

logger = logging.getLogger("durachok.events")

EventType = Union[str, Enum]

# Listeners registered with `on_any` are stored under this key
ANY_EVENT = "*"


class EventPriority(Enum):
    """Handlers with a higher priority are called first."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


class EngineEventType(Enum):
    """Events published by a Durak game."""

    GAME_CREATED = "game_created"
    GAME_ENDED = "game_ended"
    ROUND_STARTED = "round_started"
    ROUND_ENDED = "round_ended"
    CARD_PLAYED = "card_played"
    CARD_COVERED = "card_covered"
    PLAYER_PASSED = "player_passed"
    PLAYER_CONCEDED = "player_conceded"
    PLAYER_OUT = "player_out"


def event_name(event_type: EventType) -> str:
    """Enum members are keyed by their name, strings by themselves."""
    return event_type.name if isinstance(event_type, Enum) else event_type


@dataclass
class _Listener:
    callback: Callable
    priority: int
    order: int

    @property
    def sort_key(self):
        return (-self.priority, self.order)


class EventEmitter:
    """
    Dispatches game events to subscribed callbacks.

    Callbacks registered with `on` receive the event data. Callbacks
    registered with `on_any` receive an `(event_name, data)` tuple. An
    exception raised by a callback is logged and does not stop dispatch.
    """

    def __init__(self):
        self._listeners: Dict[str, List[_Listener]] = defaultdict(list)
        self._counter = count()

    def _subscribe(self, key: str, callback: Callable, priority: EventPriority):
        listener = _Listener(callback, priority.value, next(self._counter))
        listeners = self._listeners[key]
        listeners.append(listener)
        listeners.sort(key=lambda listener: listener.sort_key)

        def unsubscribe():
            if listener in self._listeners[key]:
                self._listeners[key].remove(listener)

        return unsubscribe

    def on(
        self,
        event_type: EventType,
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe `callback` to one event type.

        Returns:
            A function removing this subscription
        """
        return self._subscribe(event_name(event_type), callback, priority)

    def once(
        self,
        event_type: EventType,
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """Like `on`, but the subscription ends after the first event."""

        def handle_once(data):
            unsubscribe()
            callback(data)

        unsubscribe = self.on(event_type, handle_once, priority)
        return unsubscribe

    def on_any(
        self, callback: Callable, priority: EventPriority = EventPriority.NORMAL
    ) -> Callable:
        """Subscribe `callback` to every event."""
        return self._subscribe(ANY_EVENT, callback, priority)

    def emit(self, event_type: EventType, data: Dict[str, Any]) -> None:
        name = event_name(event_type)
        # Snapshot so handlers may unsubscribe while being called
        calls = [(each.callback, data) for each in self._listeners.get(name, ())]
        calls += [
            (each.callback, (name, data)) for each in self._listeners.get(ANY_EVENT, ())
        ]

        for callback, argument in calls:
            try:
                callback(argument)
            except Exception:
                logger.error("Error in event handler for %s", name, exc_info=True)

    def remove_all_listeners(self, event_type: Optional[EventType] = None) -> None:
        """Drop the listeners of one event type, or every listener."""
        if event_type is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event_name(event_type), None)

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        if event_type is None:
            return sum(len(listeners) for listeners in self._listeners.values())
        return len(self._listeners.get(event_name(event_type), ()))


class EventBus:
    """
    Process-wide emitter for hosts that want every game on one feed.

    Games never publish here unless it is passed to them as their emitter.
    """

    _instance: Optional[EventEmitter] = None

    @classmethod
    def get_instance(cls) -> EventEmitter:
        if cls._instance is None:
            cls._instance = EventEmitter()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None
