"""
TokenCraft event log

Append-only log of committed state transitions:
- role grants / revocations
- pause toggles
- token mints / burns
- transfers (with the optional transfer-fixed memo)

Only successful calls are recorded. Memos are carried for auditability and are
never interpreted by the ledger.

The log lives in memory and keeps every event for the lifetime of the
process. It is not capped: ledger_integrity rebuilds balances from the full
history, so dropping old events would read as drift. Readers that only need
recent activity use tail(). Sinks (the API subscribes its Redis audit list)
mirror each event elsewhere, where retention is bounded (see api/store.py).
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional
import json
import logging
import time

log = logging.getLogger(__name__)

EventSink = Callable[["LedgerEvent"], None]


@dataclass
class LedgerEvent:
    seq: int
    ts: float
    kind: str
    caller: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, default=str)


class EventLog:
    def __init__(self) -> None:
        self._events: List[LedgerEvent] = []
        self._sinks: List[EventSink] = []

    def subscribe(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def record(self, kind: str, caller: str, **payload: Any) -> LedgerEvent:
        ev = LedgerEvent(
            seq=len(self._events) + 1,
            ts=time.time(),
            kind=kind,
            caller=caller,
            payload=payload,
        )
        self._events.append(ev)
        log.debug("[TokenEvents] %s", ev.to_json())
        for sink in self._sinks:
            try:
                sink(ev)
            except Exception:
                # a mirror going down must not undo a committed transition
                log.exception("[TokenEvents] sink failed for event seq=%s", ev.seq)
        return ev

    def all_events(self, kind: Optional[str] = None) -> List[LedgerEvent]:
        if kind is None:
            return list(self._events)
        return [ev for ev in self._events if ev.kind == kind]

    def tail(self, limit: int) -> List[LedgerEvent]:
        if limit <= 0:
            return []
        return list(self._events[-limit:])

    def __len__(self) -> int:
        return len(self._events)
