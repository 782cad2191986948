# phivolcs_api/events.py
from __future__ import annotations
from collections import deque
from threading import Lock
from time import time
from typing import Any, Dict, List


class CacheEventLog:
    """Bounded record of cache refresh outcomes, newest last."""

    def __init__(self, maxlen: int = 1000):
        self._events = deque(maxlen=maxlen)
        self._lock = Lock()

    def record(self, kind: str, **fields: Any) -> Dict[str, Any]:
        event = {"type": kind, "ts_ms": int(time() * 1000), **fields}
        with self._lock:
            self._events.append(event)
        return event

    def tail(self, n: int = 50) -> List[Dict[str, Any]]:
        if n <= 0:
            return []
        with self._lock:
            return list(self._events)[-n:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
