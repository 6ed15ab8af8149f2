"""Sliding-window search for the strongest splice site k-mer.

Every window of the model width is scored and the best one is reported
with its 1-based frame. Comparison is strictly greater-than, so when two
windows tie the earlier frame is kept.

Example:
    >>> from maxentforge.core.sliding import sliding_window, max_donor_score
    >>> sliding_window("ACGTA", 3)
    ['ACG', 'CGT', 'GTA']
    >>> best = max_donor_score(scorer, "TTCAGGTAAGTTT")
    >>> best.kmer, best.frame
    ('CAGGTAAGT', 3)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import attrs

from maxentforge.core.scoring import ACCEPTOR_WIDTH, DONOR_WIDTH

if TYPE_CHECKING:
    from maxentforge.core.scoring import MaxEntScorer


# =============================================================================
# Data Structures
# =============================================================================


@attrs.frozen
class KmerScore:
    """Best-scoring k-mer of a sequence.

    Attributes:
        kmer: The k-mer.
        frame: 1-based start of the k-mer in the scanned sequence.
        score: MaxEnt score of the k-mer.
    """

    kmer: str
    frame: int
    score: float


# =============================================================================
# Search
# =============================================================================


def sliding_window(sequence: str, width: int) -> list[str]:
    """Return all contiguous substrings of ``width``, left to right.

    Args:
        sequence: Sequence to scan.
        width: Window width.

    Returns:
        ``max(0, len(sequence) - width + 1)`` windows; window i starts at i.
    """
    return [sequence[i : i + width] for i in range(len(sequence) - width + 1)]


def max_kmer_score(
    sequence: str,
    width: int,
    score_fn: Callable[[str], float],
) -> KmerScore | None:
    """Find the highest scoring window of a sequence.

    Args:
        sequence: Sequence to scan.
        width: Window width.
        score_fn: Scoring function applied to each window.

    Returns:
        The first window with the maximum score, or None if the sequence
        is shorter than ``width``.
    """
    best: KmerScore | None = None
    for i, kmer in enumerate(sliding_window(sequence, width)):
        score = score_fn(kmer)
        if best is None or score > best.score:
            best = KmerScore(kmer=kmer, frame=i + 1, score=score)
    return best


def max_donor_score(scorer: MaxEntScorer, sequence: str) -> KmerScore | None:
    """Best 9-mer donor site in a sequence, scored with score5."""
    return max_kmer_score(sequence, DONOR_WIDTH, scorer.score5)


def max_acceptor_score(scorer: MaxEntScorer, sequence: str) -> KmerScore | None:
    """Best 23-mer acceptor site in a sequence, scored with score3."""
    return max_kmer_score(sequence, ACCEPTOR_WIDTH, scorer.score3)
