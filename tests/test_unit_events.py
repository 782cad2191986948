from phivolcs_api.events import CacheEventLog


def test_tail_returns_newest_last():
    log = CacheEventLog(maxlen=3)
    for i in range(5):
        log.record("SnapshotRefreshed", records=i)
    assert len(log) == 3
    assert [e["records"] for e in log.tail(2)] == [3, 4]
    assert all("ts_ms" in e for e in log.tail())


def test_tail_of_zero_is_empty():
    log = CacheEventLog()
    log.record("RefreshFailed", error="boom")
    assert log.tail(0) == []
