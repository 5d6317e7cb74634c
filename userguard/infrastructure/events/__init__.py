"""In-process event delivery."""

from userguard.infrastructure.events.dispatcher import EventDispatcher, EventHandler

__all__ = ["EventDispatcher", "EventHandler"]
