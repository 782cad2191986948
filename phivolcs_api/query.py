# phivolcs_api/query.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

from phivolcs_api.errors import EmptyDatasetError
from phivolcs_api.records import Record


def filter_by_magnitude(records: Sequence[Record],
                        min_magnitude: float,
                        max_magnitude: Optional[float] = None) -> List[Record]:
    return [
        r for r in records
        if r.magnitude_numeric >= min_magnitude
        and (max_magnitude is None or r.magnitude_numeric <= max_magnitude)
    ]


def filter_by_location(records: Sequence[Record], text: str) -> List[Record]:
    needle = text.casefold()
    return [r for r in records if needle in r.location.casefold()]


def top_by_magnitude(records: Sequence[Record], n: int) -> List[Record]:
    # sorted() is stable with reverse=True, so equal magnitudes keep page order
    return sorted(records, key=lambda r: r.magnitude_numeric, reverse=True)[:n]


def most_recent(records: Sequence[Record], n: int) -> List[Record]:
    """First n records as published; the page lists newest first."""
    return list(records[:n])


@dataclass(frozen=True)
class Summary:
    max: float
    min: float
    average: float

    @classmethod
    def of(cls, values: Sequence[float]) -> "Summary":
        return cls(max=max(values), min=min(values), average=sum(values) / len(values))

    def to_dict(self) -> dict:
        return {"max": self.max, "min": self.min, "average": self.average}


@dataclass(frozen=True)
class EarthquakeStats:
    total_count: int
    magnitude: Summary
    depth: Summary
    most_recent: Record
    strongest: Record

    def to_dict(self) -> dict:
        return {
            "total_count": self.total_count,
            "magnitude": self.magnitude.to_dict(),
            "depth": self.depth.to_dict(),
            "most_recent": self.most_recent.to_dict(),
            "strongest": self.strongest.to_dict(),
        }


def compute_stats(records: Sequence[Record]) -> EarthquakeStats:
    if not records:
        raise EmptyDatasetError("cannot compute statistics over zero records")

    strongest = records[0]
    for r in records[1:]:
        if r.magnitude_numeric > strongest.magnitude_numeric:
            strongest = r

    return EarthquakeStats(
        total_count=len(records),
        magnitude=Summary.of([r.magnitude_numeric for r in records]),
        depth=Summary.of([r.depth_numeric for r in records]),
        most_recent=records[0],
        strongest=strongest,
    )
