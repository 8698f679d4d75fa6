"""
Synchronous event notifier with an append-only history.
"""
from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Iterable

from supply_chain.core.events.event_sink import EventSink
from supply_chain.core.events.events import EmittedEvent, LedgerEvent

LOGGER = logging.getLogger(__name__)


class EventNotifier:
    """Records committed events and dispatches them to registered sinks.

    Recording and dispatch are separate steps. The ledger records an event
    while it still holds its locks, so ``seq`` follows commit order, and
    calls ``flush`` once they are released; a sink may therefore read or
    drive the ledger from ``on_event``. Sinks see events in ``seq`` order.
    A sink failure is logged and never rolls the operation back.
    """

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._history: list[EmittedEvent] = []
        self._pending: deque[EmittedEvent] = deque()
        self._lock = threading.Lock()
        # Reentrant: a sink that drives the ledger flushes from inside a flush.
        self._dispatch_lock = threading.RLock()
        self._closed = False

    def register(self, sink: EventSink) -> None:
        """Register a new sink."""
        self._sinks.append(sink)

    def record(self, event: LedgerEvent) -> EmittedEvent:
        """Append an event to the history and queue it for dispatch."""
        with self._lock:
            emitted = EmittedEvent(seq=len(self._history) + 1, event=event)
            self._history.append(emitted)
            self._pending.append(emitted)
        return emitted

    def flush(self) -> None:
        """Dispatch every queued event to all sinks.

        Must not be called while holding a lock a sink might need.
        """
        with self._dispatch_lock:
            while True:
                with self._lock:
                    if not self._pending:
                        return
                    emitted = self._pending.popleft()
                self._dispatch(emitted.event)

    def emit(self, event: LedgerEvent) -> EmittedEvent:
        """Record an event and dispatch it right away."""
        emitted = self.record(event)
        self.flush()
        return emitted

    def _dispatch(self, event: LedgerEvent) -> None:
        for sink in self._sinks:
            try:
                sink.on_event(event)
            except Exception:  # pylint: disable=broad-exception-caught
                LOGGER.exception(
                    "Event sink failed",
                    extra={"sink": type(sink).__name__, "event_type": event.event_type},
                )

    def history(self) -> tuple[EmittedEvent, ...]:
        """Return all recorded events in commit order."""
        with self._lock:
            return tuple(self._history)

    def events_for(self, order_id: int) -> list[LedgerEvent]:
        """Return the events of a single order in commit order."""
        return [e.event for e in self.history() if e.event.order_id == order_id]

    def close(self) -> None:
        """
        Dispatch anything still queued, then finalize all sinks that expose
        a close() method.
        """
        if self._closed:
            return

        self.flush()
        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True
