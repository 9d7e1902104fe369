"""Domain events infrastructure.

Events are emitted synchronously on the caller's event loop. Each emitter is
owned by one producer; there is no process-wide bus.
"""

from abc import ABC
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeVar
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel, ABC):
    """Base class for all domain events."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)

    @property
    def event_type(self) -> str:
        """Return the event type name."""
        return self.__class__.__name__


TEvent = TypeVar("TEvent", bound=DomainEvent)
EventHandler = Callable[[TEvent], None]


class EventEmitter:
    """Per-owner registry of listener callables keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[Callable[..., None]]] = {}

    def subscribe(
        self, event_type: type[TEvent], handler: EventHandler[TEvent]
    ) -> Callable[[], None]:
        """Register ``handler`` and return a callable that unregisters it."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            f"Subscribed {getattr(handler, '__qualname__', handler)!s} "
            f"to {event_type.__name__}"
        )
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(
        self, event_type: type[TEvent], handler: EventHandler[TEvent]
    ) -> None:
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
            except ValueError:
                pass

    def emit(self, event: DomainEvent) -> None:
        # 复制一份，回调中取消订阅不影响本次分发
        handlers = list(self._handlers.get(type(event), []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error handling event {event.event_type} "
                    f"by {getattr(handler, '__qualname__', handler)!s}: {e}"
                )

    def clear_handlers(self) -> None:
        self._handlers.clear()

    def get_handlers_count(self, event_type: type[DomainEvent] | None = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, []))
        return sum(len(handlers) for handlers in self._handlers.values())

    def has_handlers(self, event_type: type[DomainEvent]) -> bool:
        return bool(self._handlers.get(event_type))
