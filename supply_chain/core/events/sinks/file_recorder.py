"""
JSON-lines audit trail of ledger events.
"""
from __future__ import annotations

import json
from pathlib import Path

from supply_chain.core.events.events import LedgerEvent


class FileRecorderSink:
    """Appends one ``to_record()`` object per event to a JSON-lines file.

    Lines are flushed as they are written so the trail survives a crash
    mid-replay.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def on_event(self, event: LedgerEvent) -> None:
        self._fh.write(json.dumps(event.to_record(), separators=(",", ":")) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()
