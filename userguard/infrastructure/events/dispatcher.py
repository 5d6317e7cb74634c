"""
In-process event dispatcher.

Subscribers register per event and may be plain functions or coroutine
functions. A failing subscriber is logged and skipped; it never fails the
operation that emitted the event.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

from userguard.application.ports.outbound.event_dispatcher_port import EventDispatcherPort
from userguard.domain.events import AuthEvent, AuthEventPayload

logger = logging.getLogger(__name__)

EventHandler = Callable[[AuthEventPayload], Union[None, Awaitable[Any]]]


class EventDispatcher(EventDispatcherPort):
    """
    Registry of event subscribers.

    Usage:
        dispatcher = EventDispatcher()

        async def send_welcome_email(payload: AuthEventPayload) -> None:
            ...

        dispatcher.subscribe(AuthEvent.AFTER_REGISTER, send_welcome_email)
    """

    def __init__(self):
        self._handlers: dict[AuthEvent, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: AuthEvent, handler: EventHandler) -> None:
        """Register a handler. Handlers run in subscription order."""
        self._handlers[AuthEvent(event)].append(handler)

    def unsubscribe(self, event: AuthEvent, handler: EventHandler) -> None:
        """
        Remove a handler.

        Raises:
            ValueError: If the handler is not subscribed to the event
        """
        self._handlers[AuthEvent(event)].remove(handler)

    def handlers_for(self, event: AuthEvent) -> list[EventHandler]:
        return list(self._handlers.get(AuthEvent(event), ()))

    async def emit(self, payload: AuthEventPayload) -> None:
        """Deliver a payload to every handler subscribed to its event."""
        for handler in self.handlers_for(payload.event):
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    f"Subscriber {getattr(handler, '__qualname__', handler)!r} "
                    f"failed on {payload.event.value}"
                )
