"""
Event system for the Durak engine.

This package provides the emitter that games publish their state changes on.
"""

from durachok.events.emitter import (
    EngineEventType,
    EventBus,
    EventEmitter,
    EventPriority,
)

__all__ = ["EngineEventType", "EventBus", "EventEmitter", "EventPriority"]
