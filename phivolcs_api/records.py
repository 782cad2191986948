# phivolcs_api/records.py
from __future__ import annotations
import math
import re
from dataclasses import dataclass
from typing import Tuple

# leading number the way JavaScript's parseFloat reads it: "4.5", "-0.3e1 km", ".7"
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_leading_number(text: str) -> float:
    """
    Best-effort numeric parse of a published value such as "4.5", "017 km" or "M 3.1?".
    Returns 0.0 when the string does not start with a finite number.
    """
    m = _LEADING_NUMBER.match(text.lstrip())
    if not m:
        return 0.0
    try:
        value = float(m.group(0))
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


@dataclass(frozen=True)
class Record:
    date: str
    time: str
    latitude: str
    longitude: str
    depth: str
    magnitude: str
    location: str
    magnitude_numeric: float

    @classmethod
    def build(cls, date: str, time: str, latitude: str, longitude: str,
              depth: str, magnitude: str, location: str) -> "Record":
        magnitude = magnitude.strip()
        return cls(
            date=date.strip(),
            time=time.strip(),
            latitude=latitude.strip(),
            longitude=longitude.strip(),
            depth=depth.strip(),
            magnitude=magnitude,
            location=normalize_whitespace(location),
            magnitude_numeric=parse_leading_number(magnitude),
        )

    @property
    def depth_numeric(self) -> float:
        return parse_leading_number(self.depth)

    def is_complete(self) -> bool:
        return bool(self.date and self.time and self.magnitude and self.location)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "time": self.time,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "depth": self.depth,
            "magnitude": self.magnitude,
            "location": self.location,
            "magnitudeNumeric": self.magnitude_numeric,
        }


@dataclass(frozen=True)
class Snapshot:
    records: Tuple[Record, ...]
    fetched_at: float  # epoch seconds

    def age(self, now: float) -> float:
        return max(0.0, now - self.fetched_at)

    def __len__(self) -> int:
        return len(self.records)
