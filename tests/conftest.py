"""Pytest configuration and shared fixtures for MaxEntForge tests.

This module contains fixtures that are shared across multiple test modules.
Fixtures are organized by category:

- Model fixtures: Synthetic MaxEntScan model directories
- Scorer fixtures: Scorers built on the synthetic models
- Genome fixtures: Synthetic genomes (in memory and FASTA)

The published MaxEntScan tables are not redistributed, so models are
generated with the same file layout and table sizes. Set MAXENTSCAN_DIR to
a real ``fordownload`` directory to also run the published-value tests.
"""

from __future__ import annotations

import itertools
import os
from pathlib import Path

import attrs
import numpy as np
import pytest

from maxentforge.core.model import ACCEPTOR_TABLE_FILES, DONOR_SCORE_FILE, DONOR_SEQUENCE_FILE
from maxentforge.core.scoring import MaxEntScorer
from maxentforge.io.fasta import InMemoryGenome

# 3' sub-table sizes: five 7-mer tables, then 3-, 4-, 3-, 4-mer tables
ACCEPTOR_TABLE_SIZES = [4**7] * 5 + [4**3, 4**4, 4**3, 4**4]

GENOME_LENGTH = 1000


# =============================================================================
# Helpers
# =============================================================================


@attrs.frozen
class SyntheticModel:
    """A generated model directory and the values written to it."""

    path: Path
    donor_order: list[str]
    donor_scores: list[float]
    acceptor_tables: list[list[float]]

    def donor_value(self, rest: str) -> float:
        return self.donor_scores[self.donor_order.index(rest)]


def all_kmers(k: int) -> list[str]:
    """All ACGT k-mers in base-4 order."""
    return ["".join(p) for p in itertools.product("ACGT", repeat=k)]


def write_model(
    model_dir: Path,
    donor_order: list[str],
    donor_scores: list[float],
    acceptor_tables: list[list[float]],
) -> SyntheticModel:
    """Write a model directory in the MaxEntScan layout."""
    (model_dir / "splicemodels").mkdir(parents=True, exist_ok=True)

    (model_dir / DONOR_SEQUENCE_FILE).write_text("".join(f"{s}\n" for s in donor_order))
    (model_dir / DONOR_SCORE_FILE).write_text("".join(f"{v}\n" for v in donor_scores))
    for name, values in zip(ACCEPTOR_TABLE_FILES, acceptor_tables):
        (model_dir / name).write_text("".join(f"{v}\n" for v in values))

    return SyntheticModel(model_dir, donor_order, donor_scores, acceptor_tables)


def random_sequence(rng: np.random.Generator, length: int) -> str:
    """Random ACGT sequence."""
    return "".join(rng.choice(list("ACGT"), length))


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def synthetic_model(tmp_path_factory: pytest.TempPathFactory) -> SyntheticModel:
    """Model with random positive table values.

    The sequence file lists 7-mers in reverse base-4 order so that the
    line correspondence between the two 5' files is exercised.
    """
    rng = np.random.default_rng(42)
    donor_order = list(reversed(all_kmers(7)))
    donor_scores = [float(v) for v in rng.uniform(0.05, 20.0, len(donor_order))]
    acceptor_tables = [
        [float(v) for v in rng.uniform(0.05, 5.0, size)] for size in ACCEPTOR_TABLE_SIZES
    ]
    return write_model(
        tmp_path_factory.mktemp("maxentscan"), donor_order, donor_scores, acceptor_tables
    )


@pytest.fixture(scope="session")
def flat_model(tmp_path_factory: pytest.TempPathFactory) -> SyntheticModel:
    """Model whose tables are constant, so only consensus positions matter."""
    donor_order = all_kmers(7)
    donor_scores = [2.0] * len(donor_order)
    acceptor_tables = [[1.0] * size for size in ACCEPTOR_TABLE_SIZES]
    return write_model(
        tmp_path_factory.mktemp("flat_maxentscan"), donor_order, donor_scores, acceptor_tables
    )


@pytest.fixture
def real_model_dir() -> Path:
    """Published MaxEntScan model directory from $MAXENTSCAN_DIR."""
    path = os.environ.get("MAXENTSCAN_DIR")
    if not path:
        pytest.skip("MAXENTSCAN_DIR not set")
    return Path(path)


# =============================================================================
# Scorer Fixtures
# =============================================================================


@pytest.fixture
def scorer(synthetic_model: SyntheticModel) -> MaxEntScorer:
    """Scorer on the random synthetic model, with a fresh cache."""
    return MaxEntScorer.from_directory(synthetic_model.path)


@pytest.fixture
def flat_scorer(flat_model: SyntheticModel) -> MaxEntScorer:
    """Scorer on the constant synthetic model."""
    return MaxEntScorer.from_directory(flat_model.path)


# =============================================================================
# Genome Fixtures
# =============================================================================


@pytest.fixture
def genome_sequence() -> str:
    """Reproducible 1 kb random chromosome."""
    return random_sequence(np.random.default_rng(7), GENOME_LENGTH)


@pytest.fixture
def genome(genome_sequence: str) -> InMemoryGenome:
    """In-memory genome with a single chromosome, chr1."""
    return InMemoryGenome({"chr1": genome_sequence})


@pytest.fixture
def synthetic_fasta(tmp_path: Path, genome_sequence: str) -> Path:
    """FASTA file holding chr1 from ``genome_sequence`` and a short chr2."""
    fasta_path = tmp_path / "test_genome.fa"

    sequences = {"chr1": genome_sequence, "chr2": "ACGTNNNNACGT"}

    with open(fasta_path, "w") as f:
        for seqid, seq in sequences.items():
            f.write(f">{seqid}\n")
            # Write in 80-character lines
            for i in range(0, len(seq), 80):
                f.write(seq[i : i + 80] + "\n")

    return fasta_path


def with_segment(sequence: str, start: int, segment: str) -> str:
    """Overwrite ``sequence`` at 1-based ``start`` with ``segment``."""
    return sequence[: start - 1] + segment + sequence[start - 1 + len(segment) :]
