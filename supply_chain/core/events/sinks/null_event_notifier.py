from __future__ import annotations

from typing import Any

from supply_chain.core.events.event_notifier import EventNotifier


class _NullSink:
    """Event sink that discards all events."""

    def on_event(self, event: Any) -> None:
        return


class NullEventNotifier(EventNotifier):
    """EventNotifier without external sinks (used for tests).

    The in-memory history is still kept.
    """

    def __init__(self) -> None:
        super().__init__(sinks=[_NullSink()])
