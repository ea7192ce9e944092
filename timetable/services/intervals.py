"""Time-of-day interval arithmetic."""

from __future__ import annotations

from datetime import time


def overlaps(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open intersection test.

    Exact boundary touches (end_a == start_b) are NOT considered overlaps, so
    back-to-back lectures can share a room, instructor or grade.
    """
    return start_a < end_b and start_b < end_a
