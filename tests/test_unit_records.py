import pytest

from phivolcs_api.records import Record, Snapshot, normalize_whitespace, parse_leading_number


@pytest.mark.parametrize("raw,expected", [
    ("4.5", 4.5),
    (" 3.2 ", 3.2),
    ("017 km", 17.0),
    ("4.5?", 4.5),
    ("-1.5", -1.5),
    (".7", 0.7),
    ("1e2", 100.0),
    ("1e999", 0.0),
    ("-1e999 km", 0.0),
    ("M3.0", 0.0),
    ("", 0.0),
    ("n/a", 0.0),
])
def test_parse_leading_number(raw, expected):
    assert parse_leading_number(raw) == expected


def test_normalize_whitespace():
    assert normalize_whitespace("  a \n\t b  c  ") == "a b c"


def test_build_trims_and_derives(make_record):
    r = Record.build(date=" 17 October 2026 ", time=" 09:15 AM", latitude=" 14.07°N ",
                     longitude="120.63°E ", depth=" 017 km", magnitude=" 4.5 ",
                     location="Calatagan\n   (Batangas)")
    assert r.date == "17 October 2026"
    assert r.time == "09:15 AM"
    assert r.magnitude == "4.5"
    assert r.magnitude_numeric == 4.5
    assert r.depth_numeric == 17.0
    assert r.location == "Calatagan (Batangas)"
    assert r.is_complete()
    assert not make_record(location=" ").is_complete()


def test_to_dict_uses_wire_names(make_record):
    d = make_record(magnitude="5.8").to_dict()
    assert set(d) == {"date", "time", "latitude", "longitude", "depth",
                      "magnitude", "location", "magnitudeNumeric"}
    assert d["magnitudeNumeric"] == 5.8


def test_snapshot_age(make_record):
    snap = Snapshot(records=(make_record(),), fetched_at=100.0)
    assert len(snap) == 1
    assert snap.age(130.0) == 30.0
    assert snap.age(90.0) == 0.0
