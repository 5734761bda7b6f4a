"""Synchronous in-process bus for booking and laboratory events."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

from pydantic import BaseModel


class EventBus:
    """Dispatch each published event to the handlers subscribed to its type.

    Handlers run synchronously in registration order; an exception raised by
    a handler propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[BaseModel], list[Callable[[Any], None]]] = (
            defaultdict(list)
        )

    def subscribe(self, event_type: type[BaseModel], handler: Callable[[Any], None]) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: BaseModel) -> None:
        for handler in list(self._handlers.get(type(event), ())):
            handler(event)
