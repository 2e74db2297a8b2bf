"""Notification log and in-process subscriber fan-out."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Final

from sqlalchemy.orm import Session

from prompt_ledger.models import LedgerEvent
from prompt_ledger.services.errors import ReentrantCallError

logger = logging.getLogger(__name__)

PROMPT_SUBMITTED: Final[str] = "PromptSubmitted"
RESPONSE_SET: Final[str] = "ResponseSet"
RESPONSE_BATCH_SET: Final[str] = "ResponseBatchSet"
SESSION_CREATED: Final[str] = "SessionCreated"
SESSION_REQUEST_APPENDED: Final[str] = "SessionRequestAppended"
PAUSE_TOGGLED: Final[str] = "PauseToggled"

MAX_EVENT_PAGE: Final[int] = 500

Subscriber = Callable[[LedgerEvent], None]


def record_event(db: Session, kind: str, block: int, **payload: Any) -> LedgerEvent:
    """Append an event row to the current transaction and return it."""
    event = LedgerEvent(kind=kind, block=block, payload=payload)
    db.add(event)
    return event


def list_events(db: Session, *, after: int = 0, limit: int = 100) -> list[LedgerEvent]:
    """Return events with ``id > after`` in emission order."""
    limit = max(1, min(limit, MAX_EVENT_PAGE))
    return (
        db.query(LedgerEvent)
        .filter(LedgerEvent.id > after)
        .order_by(LedgerEvent.id)
        .limit(limit)
        .all()
    )


class EventBus:
    """Fan committed events out to in-process subscribers.

    Subscribers run after the emitting call has committed. A subscriber that
    raises is logged and skipped; it never affects committed ledger state or
    the remaining subscribers.

    The bus also holds the reentry guard. Every ``Ledger`` built on the same
    bus shares it, so a subscriber that builds a fresh ledger to write back
    is rejected just like one that reuses the emitting instance.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._active: str | None = None

    @property
    def active(self) -> str | None:
        """Name of the mutating call currently holding the guard, if any."""
        return self._active

    @contextmanager
    def exclusive(self, operation: str) -> Iterator[None]:
        """Hold the reentry guard for the duration of ``operation``."""
        if self._active is not None:
            raise ReentrantCallError(
                f"{operation} invoked while {self._active} is in progress"
            )
        self._active = operation
        try:
            yield
        finally:
            self._active = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback and return a function that removes it.

        Registering a callback that is already subscribed is a no-op.
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def __len__(self) -> int:
        return len(self._subscribers)

    def publish(self, events: list[LedgerEvent]) -> None:
        for event in events:
            for callback in list(self._subscribers):
                try:
                    callback(event)
                except Exception as exc:
                    logger.error(
                        "Subscriber %r failed on %s event %s: %s",
                        callback,
                        event.kind,
                        event.id,
                        exc,
                        exc_info=True,
                    )


_DEFAULT_BUS = EventBus()


def get_event_bus() -> EventBus:
    """Return the process-wide event bus."""
    return _DEFAULT_BUS
