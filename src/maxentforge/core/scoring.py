"""Maximum entropy scoring of splice donor and acceptor sites.

This module implements the MaxEntScan scoring functions of Yeo and Burge
(J Comput Biol 2004, 11:377-94):

- score5: 9-mer donor sites, 3 bases of exon + 6 bases of intron::

      (exon)XXX|GTXXXX(intron)

- score3: 23-mer acceptor sites, 20 bases of intron + 3 bases of exon::

      (intron)XXXXXXXXXXXXXXXXXXAG|XXX(exon)

Each score combines a position-specific probability ratio for the two
consensus bases (GT or AG) with a maximum entropy table lookup for the
remaining bases, reported as log2.

Key components:
- MaxEntScorer: Scoring context owning the model tables and caches
- Fixed position tables and helpers for the consensus/rest split

Example:
    >>> from maxentforge.core.scoring import MaxEntScorer
    >>> scorer = MaxEntScorer.from_directory("/opt/maxentscan/fordownload")
    >>> round(scorer.score5("CAGGTAAGT"), 2)
    10.86
    >>> round(scorer.score3("TTCCAAACGAACTTTTGTAGGGA"), 2)
    2.89
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np

from maxentforge.core.cache import DEFAULT_CACHE_SIZE, ScoreCache
from maxentforge.core.hashing import DONOR_REST_POSITIONS, donor_rest_key, to_base4_index
from maxentforge.core.model import MaxEntModel
from maxentforge.utils.sequences import is_acgt

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DONOR_WIDTH = 9
ACCEPTOR_WIDTH = 23

# Nucleotide to column index for the probability tables
BASE_TO_INDEX = {"A": 0, "C": 1, "G": 2, "T": 3}

# Background frequencies, A C G T
BACKGROUND = np.array([0.27, 0.23, 0.23, 0.27])

# Donor consensus: G and T at 0-based positions 3 and 4
DONOR_CONSENSUS_POSITIONS = (3, 4)
DONOR_CONSENSUS = np.array(
    [
        [0.004, 0.0032, 0.9896, 0.0032],  # +1: G
        [0.0034, 0.0039, 0.0042, 0.9884],  # +2: T
    ]
)

# Acceptor consensus: A and G at 0-based positions 18 and 19
ACCEPTOR_CONSENSUS_POSITIONS = (18, 19)
ACCEPTOR_CONSENSUS = np.array(
    [
        [0.9903, 0.0032, 0.0034, 0.0030],  # -2: A
        [0.0027, 0.0037, 0.9905, 0.0030],  # -1: G
    ]
)

# Slices of a 23-mer kept once the AG consensus is removed (21 bases)
ACCEPTOR_REST_SLICES = (slice(0, 18), slice(20, 23))

# (start, length) of the nine overlapping segments of the 21-base rest.
# The first five are numerator terms, the last four denominator terms.
ACCEPTOR_MAXENT_SEGMENTS = (
    (0, 7),
    (7, 7),
    (14, 7),
    (4, 7),
    (11, 7),
    (4, 3),
    (7, 4),
    (11, 3),
    (14, 4),
)
N_NUMERATOR_SEGMENTS = 5


# =============================================================================
# Position Helpers
# =============================================================================


def _consensus_ratio(
    sequence: str,
    positions: tuple[int, int],
    consensus: np.ndarray,
) -> float:
    first = BASE_TO_INDEX[sequence[positions[0]]]
    second = BASE_TO_INDEX[sequence[positions[1]]]
    return float(
        consensus[0, first]
        * consensus[1, second]
        / (BACKGROUND[first] * BACKGROUND[second])
    )


def donor_consensus_score(sequence: str) -> float:
    """Probability ratio of the donor GT positions against background."""
    return _consensus_ratio(sequence, DONOR_CONSENSUS_POSITIONS, DONOR_CONSENSUS)


def acceptor_consensus_score(sequence: str) -> float:
    """Probability ratio of the acceptor AG positions against background."""
    return _consensus_ratio(
        sequence, ACCEPTOR_CONSENSUS_POSITIONS, ACCEPTOR_CONSENSUS
    )


def donor_rest(sequence: str) -> str:
    """Return the 7 non-consensus bases of a donor 9-mer."""
    return donor_rest_key(sequence)


def acceptor_rest(sequence: str) -> str:
    """Return the 21 non-consensus bases of an acceptor 23-mer."""
    return "".join(sequence[s] for s in ACCEPTOR_REST_SLICES)


def acceptor_maxent_score(rest: str, model: MaxEntModel) -> float:
    """Combine the nine 3' sub-table values for a 21-base rest string.

    Args:
        rest: Output of :func:`acceptor_rest`.
        model: Loaded tables.

    Returns:
        (v0 * v1 * v2 * v3 * v4) / (v5 * v6 * v7 * v8).

    Raises:
        ScoringTableMiss: If any segment is absent from its table.
    """
    values = [
        model.acceptor_value(k, to_base4_index(rest[start : start + length]))
        for k, (start, length) in enumerate(ACCEPTOR_MAXENT_SEGMENTS)
    ]
    numerator = math.prod(values[:N_NUMERATOR_SEGMENTS])
    denominator = math.prod(values[N_NUMERATOR_SEGMENTS:])
    return numerator / denominator


def is_scorable(sequence: str | None, width: int) -> bool:
    """Check that a sequence can be fed to a scoring function.

    Args:
        sequence: Candidate sequence, or None if unavailable.
        width: Required width (9 for donors, 23 for acceptors).

    Returns:
        True if the sequence is pure upper-case ACGT of exactly ``width``.
    """
    return sequence is not None and len(sequence) == width and is_acgt(sequence)


# =============================================================================
# Scorer
# =============================================================================


class MaxEntScorer:
    """Score splice sites against a loaded MaxEntScan model.

    The scorer owns the immutable model tables and one cache per scoring
    function. It can be shared between threads.

    Attributes:
        model: Loaded MaxEntScan tables.
        donor_cache: Cache in front of :meth:`score5`.
        acceptor_cache: Cache in front of :meth:`score3`.
        use_cache: Whether the caches are consulted.

    Example:
        >>> scorer = MaxEntScorer(MaxEntModel.load(model_dir))
        >>> scorer.score5("CAGGTAAGT")
    """

    def __init__(
        self,
        model: MaxEntModel,
        cache_size: int = DEFAULT_CACHE_SIZE,
        use_cache: bool = True,
    ) -> None:
        """Initialize scorer.

        Args:
            model: Loaded tables.
            cache_size: Entries kept per scoring function.
            use_cache: Set False to always recompute.
        """
        self.model = model
        self.use_cache = use_cache
        self.donor_cache = ScoreCache(cache_size)
        self.acceptor_cache = ScoreCache(cache_size)

    @classmethod
    def from_directory(cls, model_dir: Path | str, **kwargs) -> MaxEntScorer:
        """Load a model directory and wrap it in a scorer."""
        return cls(MaxEntModel.load(model_dir), **kwargs)

    def score5(self, sequence: str) -> float:
        """Score a 9-base donor site.

        Args:
            sequence: 3 bases of exon followed by 6 bases of intron.

        Returns:
            log2 of (consensus ratio * me2x5 table value).

        Raises:
            ValueError: If the sequence is not 9 bases long.
            ScoringTableMiss: If the model has no entry for the sequence.
        """
        sequence = sequence.upper()
        if len(sequence) != DONOR_WIDTH:
            raise ValueError(
                f"Donor sequence must be {DONOR_WIDTH} bases, got {len(sequence)}"
            )

        if self.use_cache:
            cached = self.donor_cache.get(sequence)
            if cached is not None:
                return cached

        consensus = donor_consensus_score(sequence)
        value = self.model.donor_value(donor_rest(sequence))
        score = math.log2(consensus * value)

        if self.use_cache:
            self.donor_cache.put(sequence, score)
        return score

    def score3(self, sequence: str) -> float:
        """Score a 23-base acceptor site.

        Args:
            sequence: 20 bases of intron followed by 3 bases of exon.

        Returns:
            log2 of (consensus ratio * combined maximum entropy value).

        Raises:
            ValueError: If the sequence is not 23 bases long.
            ScoringTableMiss: If any sub-table has no entry.
        """
        sequence = sequence.upper()
        if len(sequence) != ACCEPTOR_WIDTH:
            raise ValueError(
                f"Acceptor sequence must be {ACCEPTOR_WIDTH} bases, "
                f"got {len(sequence)}"
            )

        if self.use_cache:
            cached = self.acceptor_cache.get(sequence)
            if cached is not None:
                return cached

        consensus = acceptor_consensus_score(sequence)
        value = acceptor_maxent_score(acceptor_rest(sequence), self.model)
        score = math.log2(consensus * value)

        if self.use_cache:
            self.acceptor_cache.put(sequence, score)
        return score

    def score_donor_or_none(self, sequence: str | None) -> float | None:
        """Score a donor site, or return None if the sequence is unusable."""
        if not is_scorable(sequence, DONOR_WIDTH):
            return None
        return self.score5(sequence)

    def score_acceptor_or_none(self, sequence: str | None) -> float | None:
        """Score an acceptor site, or return None if the sequence is unusable."""
        if not is_scorable(sequence, ACCEPTOR_WIDTH):
            return None
        return self.score3(sequence)


__all__ = [
    "ACCEPTOR_CONSENSUS_POSITIONS",
    "ACCEPTOR_MAXENT_SEGMENTS",
    "ACCEPTOR_REST_SLICES",
    "ACCEPTOR_WIDTH",
    "DONOR_CONSENSUS_POSITIONS",
    "DONOR_REST_POSITIONS",
    "DONOR_WIDTH",
    "MaxEntScorer",
    "acceptor_consensus_score",
    "acceptor_maxent_score",
    "acceptor_rest",
    "donor_consensus_score",
    "donor_rest",
    "is_scorable",
]
