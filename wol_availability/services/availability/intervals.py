"""
Half-open interval algebra: [start, end) includes start and excludes end.

Works for any ordered values whose differences can be added back (datetimes and timedeltas,
plain numbers). Zero-length results are empty and are returned as None.
"""
from collections.abc import Iterable
from typing import Any, NamedTuple


class TimeRange(NamedTuple):
    start: Any
    end: Any

    @property
    def is_empty(self) -> bool:
        return not self.start < self.end


def intersects(a: TimeRange, b: TimeRange) -> bool:
    return a.start < b.end and b.start < a.end


def intersection(a: TimeRange, b: TimeRange) -> TimeRange | None:
    """Overlap of a and b, or None when they only touch or are disjoint."""
    r = TimeRange(max(a.start, b.start), min(a.end, b.end))
    return None if r.is_empty else r


def shift(r: TimeRange, origin: Any, new_start: Any) -> TimeRange:
    """Translate r by (new_start - origin); length is preserved."""
    delta = new_start - origin
    return TimeRange(r.start + delta, r.end + delta)


def contains(outer: TimeRange, inner: TimeRange) -> bool:
    return outer.start <= inner.start and inner.end <= outer.end


def find_overlap(ranges: Iterable[TimeRange]) -> tuple[TimeRange, TimeRange] | None:
    """First pair of mutually overlapping ranges (by start order), or None if they are disjoint."""
    ordered = sorted(ranges)
    for prev, curr in zip(ordered, ordered[1:]):
        if intersects(prev, curr):
            return prev, curr
    return None


def overlap_seconds(r: TimeRange, window: TimeRange) -> float:
    """Length of r inside window, in seconds (datetimes) or native units (numbers)."""
    common = intersection(r, window)
    if common is None:
        return 0.0
    length = common.end - common.start
    return length.total_seconds() if hasattr(length, "total_seconds") else float(length)
