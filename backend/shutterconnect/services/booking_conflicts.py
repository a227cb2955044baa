"""
Time-range overlap checks for bookings and availability slots.

Times are zero-padded 24h "HH:MM" strings, so lexical order is
chronological order. Ranges are half-open: [10:00, 12:00) and
[12:00, 14:00) touch but do not overlap.
"""
import re
from typing import Iterable, Optional, Protocol, TypeVar

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class TimeRange(Protocol):
    start_time: str
    end_time: str


R = TypeVar("R", bound=TimeRange)


def is_valid_time(value: str) -> bool:
    """True for zero-padded 24h "HH:MM" strings."""
    return bool(TIME_PATTERN.match(value))


def ranges_overlap(start: str, end: str, other_start: str, other_end: str) -> bool:
    """
    Whether [start, end) and [other_start, other_end) share any instant.

    Covers partial overlap on either side and containment in either
    direction.
    """
    return start < other_end and other_start < end


def find_conflict(start: str, end: str, existing: Iterable[R]) -> Optional[R]:
    """First range in `existing` that overlaps [start, end), or None."""
    for item in existing:
        if ranges_overlap(start, end, item.start_time, item.end_time):
            return item
    return None
