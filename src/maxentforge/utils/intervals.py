"""Genomic interval operations.

Intervals here are 1-based and fully closed, matching the coordinates of
transcripts, variants and splice windows.

Example:
    >>> from maxentforge.utils.intervals import Interval, find_overlaps
    >>> find_overlaps(Interval(5, 10), [Interval(1, 4), Interval(10, 20)])
    [(1, Interval(start=10, end=20))]
"""

from typing import NamedTuple

# =============================================================================
# Data Structures
# =============================================================================


class Interval(NamedTuple):
    """A closed genomic interval.

    Attributes:
        start: Start position (1-based, inclusive).
        end: End position (1-based, inclusive).
    """

    start: int
    end: int

    @property
    def length(self) -> int:
        """Get interval length."""
        return self.end - self.start + 1

    def overlaps(self, other: "Interval") -> bool:
        """Check if this interval overlaps another."""
        return overlaps(self, other)

    def contains(self, position: int) -> bool:
        """Check if this interval contains a position."""
        return self.start <= position <= self.end


# =============================================================================
# Overlap Operations
# =============================================================================


def overlaps(a: Interval, b: Interval) -> bool:
    """Check if two closed intervals share at least one position.

    Args:
        a: First interval.
        b: Second interval.

    Returns:
        True if intervals overlap.
    """
    return a.end >= b.start and a.start <= b.end


def find_overlaps(
    query: Interval,
    targets: list[Interval],
) -> list[tuple[int, Interval]]:
    """Find all intervals that overlap a query.

    Args:
        query: Query interval.
        targets: List of target intervals.

    Returns:
        List of (index, interval) tuples for overlapping intervals,
        in target order.
    """
    result = []
    for i, target in enumerate(targets):
        if overlaps(query, target):
            result.append((i, target))
    return result
