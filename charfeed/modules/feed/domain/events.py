"""Feed observer events.

Three notification kinds: data updated, loading changed, error occurred.
"""

from enum import StrEnum
from typing import Protocol

from pydantic import Field

from charfeed.core.domain.events import DomainEvent, EventEmitter
from charfeed.modules.characters.domain.exceptions import FetchErrorKind
from charfeed.modules.feed.domain.state import FeedMode


class DataChange(StrEnum):
    REPLACED = "replaced"
    APPENDED = "appended"


class DataUpdatedEvent(DomainEvent):
    """The item list was replaced or appended to."""

    change: DataChange
    item_count: int = Field(..., ge=0)
    mode: FeedMode


class LoadingChangedEvent(DomainEvent):
    """Fired on every transition of ``is_loading``.

    ``item_count`` lets observers tell an initial load (nothing shown yet)
    from a background refresh.
    """

    is_loading: bool
    item_count: int = Field(..., ge=0)

    @property
    def is_initial_load(self) -> bool:
        return self.is_loading and self.item_count == 0


class ErrorOccurredEvent(DomainEvent):
    """A controller-initiated request failed."""

    kind: FetchErrorKind
    message: str


class FeedObserver(Protocol):
    """Delegate-style observer with one callback per notification kind."""

    def on_data_updated(self, event: DataUpdatedEvent) -> None: ...

    def on_loading_changed(self, event: LoadingChangedEvent) -> None: ...

    def on_error(self, event: ErrorOccurredEvent) -> None: ...


def attach_observer(emitter: EventEmitter, observer: FeedObserver) -> None:
    """Subscribe all three callbacks of ``observer`` to ``emitter``."""
    emitter.subscribe(DataUpdatedEvent, observer.on_data_updated)
    emitter.subscribe(LoadingChangedEvent, observer.on_loading_changed)
    emitter.subscribe(ErrorOccurredEvent, observer.on_error)


def detach_observer(emitter: EventEmitter, observer: FeedObserver) -> None:
    emitter.unsubscribe(DataUpdatedEvent, observer.on_data_updated)
    emitter.unsubscribe(LoadingChangedEvent, observer.on_loading_changed)
    emitter.unsubscribe(ErrorOccurredEvent, observer.on_error)
