"""
Audit storage for the TokenCraft API: Redis list when REDIS_URL is set,
in-memory list otherwise. Storage trouble never fails a ledger call; the
entry falls back to memory instead.
"""

from __future__ import annotations
import json
import logging
import time
from typing import Any, Dict, List, Optional

import redis

from ledger.events import LedgerEvent

log = logging.getLogger(__name__)

K_AUDIT = "tcraft:audit"
MAX_AUDIT = 500


def now_ts() -> int:
    return int(time.time())


class AuditStore:
    def __init__(self, redis_url: str = "") -> None:
        self._mem_list: List[str] = []
        self.redis_url = redis_url.strip()
        self.redis_client: Optional[redis.Redis] = None
        if self.redis_url:
            try:
                self.redis_client = redis.Redis.from_url(self.redis_url, decode_responses=True)
            except (ValueError, redis.RedisError) as e:
                log.warning("[TokenAPI] Redis unavailable (%s); using memory audit log", e)

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client is not None else "memory"

    def _mem_lpush(self, val: str) -> None:
        self._mem_list.insert(0, val)
        del self._mem_list[MAX_AUDIT:]

    def push(self, event: str, payload: Dict[str, Any]) -> None:
        entry = json.dumps({"ts": now_ts(), "event": event, "payload": payload}, default=str)
        if self.redis_client is None:
            self._mem_lpush(entry)
            return
        try:
            self.redis_client.lpush(K_AUDIT, entry)
            self.redis_client.ltrim(K_AUDIT, 0, MAX_AUDIT - 1)
        except redis.RedisError as e:
            log.warning("[TokenAPI] audit push to Redis failed (%s); kept in memory", e)
            self._mem_lpush(entry)

    def mirror_event(self, ev: LedgerEvent) -> None:
        """Event sink for TokenLedger.events: one audit entry per committed transition."""
        self.push("ledger-event", ev.to_dict())

    def recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        limit = max(1, min(limit, MAX_AUDIT))
        raw: List[str] = self._mem_list[:limit]
        if self.redis_client is not None:
            try:
                raw = self.redis_client.lrange(K_AUDIT, 0, limit - 1)
            except redis.RedisError as e:
                log.warning("[TokenAPI] audit read from Redis failed (%s)", e)
        items: List[Dict[str, Any]] = []
        for line in raw:
            try:
                items.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return items
