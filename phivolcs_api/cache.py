# phivolcs_api/cache.py
from __future__ import annotations
import enum
import logging
import threading
import time
from typing import Callable, List, Optional

from phivolcs_api.config import CACHE_TTL_SECONDS
from phivolcs_api.errors import DataUnavailableError, NetworkError, ParseError
from phivolcs_api.events import CacheEventLog
from phivolcs_api.extract import extract_records
from phivolcs_api.fetch import Fetcher
from phivolcs_api.metrics import (
    LAST_REFRESH_TS, REFRESH_COUNT, REFRESH_LATENCY, SNAPSHOT_RECORDS, STALE_SERVED,
)
from phivolcs_api.records import Record, Snapshot

logger = logging.getLogger(__name__)


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    VALID = "valid"
    STALE = "stale"


class CacheManager:
    """
    Owns the one live Snapshot.

    Readers get a reference to an immutable Snapshot; a refresh installs a new
    one and never touches the old. At most one refresh runs at a time: callers
    that arrive while it is in flight block on ``_cond`` and share its outcome.
    """

    def __init__(self,
                 fetcher: Fetcher,
                 ttl_seconds: float = CACHE_TTL_SECONDS,
                 extract: Callable[[str], List[Record]] = extract_records,
                 clock: Callable[[], float] = time.time,
                 events: Optional[CacheEventLog] = None):
        self.fetcher = fetcher
        self.ttl_seconds = ttl_seconds
        self.extract = extract
        self.clock = clock
        self.events = events if events is not None else CacheEventLog()

        self._cond = threading.Condition()
        self._snapshot: Optional[Snapshot] = None
        self._refreshing = False
        self._generation = 0
        self._last_error: Optional[Exception] = None

    # ---------- state ----------
    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    def _valid(self, snapshot: Optional[Snapshot]) -> bool:
        return snapshot is not None and self.clock() - snapshot.fetched_at < self.ttl_seconds

    def is_valid(self) -> bool:
        return self._valid(self._snapshot)

    @property
    def state(self) -> CacheState:
        snapshot = self._snapshot
        if snapshot is None:
            return CacheState.EMPTY
        return CacheState.VALID if self._valid(snapshot) else CacheState.STALE

    # ---------- read path ----------
    def get_snapshot(self, force_refresh: bool = False) -> Snapshot:
        with self._cond:
            if not force_refresh and self._valid(self._snapshot):
                return self._snapshot
            if self._refreshing:
                generation = self._generation
                while self._generation == generation:
                    self._cond.wait()
                return self._outcome()
            self._refreshing = True

        # network and parsing happen outside the lock so readers of a valid snapshot never wait
        snapshot: Optional[Snapshot] = None
        error: Optional[Exception] = None
        try:
            snapshot = self._refresh()
        except (NetworkError, ParseError) as exc:
            error = exc
        finally:
            with self._cond:
                if snapshot is not None:
                    self._snapshot = snapshot
                self._last_error = error
                self._refreshing = False
                self._generation += 1
                self._cond.notify_all()

        with self._cond:
            return self._outcome(error, log=True)

    def _outcome(self, error: Optional[Exception] = None, log: bool = False) -> Snapshot:
        # must hold _cond
        if error is None:
            error = self._last_error
        if error is None:
            if self._snapshot is None:
                raise DataUnavailableError("refresh did not produce a snapshot")
            return self._snapshot
        if self._snapshot is not None:
            if log:
                logger.warning("refresh failed (%s), serving stale snapshot from %.0fs ago",
                               error, self._snapshot.age(self.clock()))
            STALE_SERVED.inc()
            return self._snapshot
        raise DataUnavailableError(str(error)) from error

    # ---------- refresh ----------
    def _refresh(self) -> Snapshot:
        start = time.perf_counter()
        had_data = self._snapshot is not None
        try:
            raw = self.fetcher.fetch()
            records = self.extract(raw)
        except (NetworkError, ParseError) as exc:
            REFRESH_COUNT.labels(outcome="failure").inc()
            self.events.record(
                "RefreshFailed",
                error_type=type(exc).__name__,
                error=str(exc),
                served_stale=had_data,
            )
            raise
        finally:
            REFRESH_LATENCY.observe(time.perf_counter() - start)

        snapshot = Snapshot(records=tuple(records), fetched_at=self.clock())
        duration_ms = int((time.perf_counter() - start) * 1000)
        REFRESH_COUNT.labels(outcome="success").inc()
        SNAPSHOT_RECORDS.set(len(snapshot))
        LAST_REFRESH_TS.set(snapshot.fetched_at)
        self.events.record("SnapshotRefreshed", records=len(snapshot), duration_ms=duration_ms)
        logger.info("refreshed snapshot: %d records in %dms", len(snapshot), duration_ms)
        return snapshot
