"""Event dispatcher port interface."""

from typing import Protocol

from userguard.domain.events import AuthEventPayload


class EventDispatcherPort(Protocol):
    """
    Delivers lifecycle events to subscribers.

    emit() never raises because of a subscriber: failures are logged and
    the triggering operation carries on.
    """

    async def emit(self, payload: AuthEventPayload) -> None:
        ...
