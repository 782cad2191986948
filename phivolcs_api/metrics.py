# phivolcs_api/metrics.py
from __future__ import annotations
from prometheus_client import Counter, Gauge, Histogram

REFRESH_COUNT    = Counter("phivolcs_refresh_total", "Upstream refresh attempts", ["outcome"])
STALE_SERVED     = Counter("phivolcs_stale_served_total", "Stale snapshots served after a failed refresh")
SNAPSHOT_RECORDS = Gauge(  "phivolcs_snapshot_records", "Records in the current snapshot")
LAST_REFRESH_TS  = Gauge(  "phivolcs_last_refresh_timestamp", "Last successful refresh epoch seconds")
REFRESH_LATENCY  = Histogram("phivolcs_refresh_duration_seconds", "Fetch plus extract duration")
