"""Core scoring logic for MaxEntForge.

This module contains the MaxEntScan model and the algorithms built on it:

- Model tables and their loader
- score5 / score3 maximum entropy scoring
- Bounded result caching
- Sliding-window k-mer search

Variant annotation and nearest splice site scoring live in
``maxentforge.core.variant`` and ``maxentforge.core.ncss``.

Example:
    >>> from maxentforge.core import MaxEntScorer
    >>> scorer = MaxEntScorer.from_directory("fordownload")
"""

from maxentforge.core.cache import ScoreCache
from maxentforge.core.errors import (
    ConfigError,
    MaxEntError,
    ModelLoadError,
    ScoringTableMiss,
)
from maxentforge.core.model import MaxEntModel
from maxentforge.core.scoring import MaxEntScorer
from maxentforge.core.sliding import (
    KmerScore,
    max_acceptor_score,
    max_donor_score,
    sliding_window,
)

__all__: list[str] = [
    # Errors
    "ConfigError",
    "MaxEntError",
    "ModelLoadError",
    "ScoringTableMiss",
    # Model and scoring
    "MaxEntModel",
    "MaxEntScorer",
    "ScoreCache",
    # Sliding window
    "KmerScore",
    "max_acceptor_score",
    "max_donor_score",
    "sliding_window",
]
