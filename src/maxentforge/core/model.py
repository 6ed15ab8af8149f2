"""MaxEntScan model tables.

This module loads the lookup tables shipped with the MaxEntScan download
(http://genes.mit.edu/burgelab/maxent/download/) into read-only in-memory
structures.

Expected layout of the model directory::

    <model_dir>/me2x5                          5' score matrix
    <model_dir>/splicemodels/splice5sequences  5' sequence matrix
    <model_dir>/splicemodels/me2x3acc1..9      3' sub-tables

Every file holds one record per line. The line number is the implicit
index: line i of ``splice5sequences`` names the sequence whose score is on
line i of ``me2x5``, and line k of a ``me2x3acc`` file holds the score of the
substring whose base-4 hash is k.

Example:
    >>> from maxentforge.core.model import MaxEntModel
    >>> model = MaxEntModel.load("/opt/maxentscan/fordownload")
    >>> model.n_donor_entries
    16384
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import attrs
import numpy as np

from maxentforge.core.errors import ModelLoadError, ScoringTableMiss

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DONOR_SCORE_FILE = "me2x5"
DONOR_SEQUENCE_FILE = "splicemodels/splice5sequences"
ACCEPTOR_TABLE_FILES = tuple(f"splicemodels/me2x3acc{i}" for i in range(1, 10))


# =============================================================================
# File Parsing
# =============================================================================


def _read_lines(path: Path) -> list[str]:
    """Read a table file as stripped lines, in file order."""
    if not path.is_file():
        raise ModelLoadError(f"Model file not found: {path}")
    try:
        with open(path) as f:
            return [line.strip() for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise ModelLoadError(f"Cannot read model file {path}: {e}") from e


def _parse_value(text: str) -> float:
    # Malformed lines become NaN and fail later, at lookup time
    try:
        return float(text)
    except ValueError:
        return math.nan


def read_score_table(path: Path | str) -> np.ndarray:
    """Read a one-number-per-line table into a read-only float array.

    Args:
        path: Table file.

    Returns:
        Array whose element i is the value on line i.

    Raises:
        ModelLoadError: If the file is missing or unreadable.
    """
    lines = _read_lines(Path(path))
    table = np.array([_parse_value(line) for line in lines], dtype=np.float64)
    table.flags.writeable = False
    return table


def read_sequence_index(path: Path | str) -> dict[str, int]:
    """Read a one-sequence-per-line file into a sequence -> line index map.

    Raises:
        ModelLoadError: If the file is missing or unreadable.
    """
    lines = _read_lines(Path(path))
    return {seq: i for i, seq in enumerate(lines)}


def _lookup(table: np.ndarray, index: int, name: str) -> float:
    if not 0 <= index < len(table):
        raise ScoringTableMiss(name, index)
    value = float(table[index])
    if math.isnan(value):
        raise ScoringTableMiss(name, index)
    return value


# =============================================================================
# Model
# =============================================================================


@attrs.frozen(eq=False)
class MaxEntModel:
    """Immutable MaxEntScan lookup tables.

    Attributes:
        donor_scores: 5' score matrix, indexed by sequence-index value.
        donor_index: 5' sequence matrix, 7-mer -> index.
        acceptor_tables: Nine 3' sub-tables, indexed by base-4 hash.
        source: Directory the tables were loaded from, if any.
    """

    donor_scores: np.ndarray
    donor_index: dict[str, int]
    acceptor_tables: tuple[np.ndarray, ...] = attrs.field(converter=tuple)
    source: Path | None = None

    @acceptor_tables.validator
    def _check_acceptor_tables(self, attribute, value) -> None:
        if len(value) != len(ACCEPTOR_TABLE_FILES):
            raise ValueError(
                f"Expected {len(ACCEPTOR_TABLE_FILES)} acceptor tables, got {len(value)}"
            )

    @classmethod
    def load(cls, model_dir: Path | str) -> MaxEntModel:
        """Load all tables from a MaxEntScan model directory.

        Args:
            model_dir: Unpacked MaxEntScan ``fordownload`` directory.

        Returns:
            Loaded model.

        Raises:
            ModelLoadError: If the directory or any table file is missing
                or unreadable.
        """
        model_dir = Path(model_dir)
        if not model_dir.is_dir():
            raise ModelLoadError(f"MaxEntScan directory not found: {model_dir}")

        donor_scores = read_score_table(model_dir / DONOR_SCORE_FILE)
        donor_index = read_sequence_index(model_dir / DONOR_SEQUENCE_FILE)
        acceptor_tables = tuple(
            read_score_table(model_dir / name) for name in ACCEPTOR_TABLE_FILES
        )

        model = cls(
            donor_scores=donor_scores,
            donor_index=donor_index,
            acceptor_tables=acceptor_tables,
            source=model_dir,
        )

        logger.info(
            f"Loaded MaxEntScan model from {model_dir}: "
            f"{model.n_donor_entries:,} donor entries, "
            f"{sum(len(t) for t in acceptor_tables):,} acceptor entries"
        )
        if not model.is_consistent:
            logger.warning(
                f"Donor sequence index ({len(donor_index):,} keys) does not "
                f"match score table ({len(donor_scores):,} rows)"
            )

        return model

    @property
    def n_donor_entries(self) -> int:
        """Number of rows in the 5' score matrix."""
        return len(self.donor_scores)

    @property
    def is_consistent(self) -> bool:
        """Check that the sequence index covers exactly 0..N-1 of the score table."""
        return sorted(self.donor_index.values()) == list(range(len(self.donor_scores)))

    def donor_value(self, rest: str) -> float:
        """Look up the 5' table value for a 7-base rest key.

        Raises:
            ScoringTableMiss: If the key or its index is absent.
        """
        index = self.donor_index.get(rest)
        if index is None:
            raise ScoringTableMiss("score5 sequence", rest)
        return _lookup(self.donor_scores, index, "score5 matrix")

    def acceptor_value(self, table: int, key: int) -> float:
        """Look up a value in 3' sub-table ``table`` (0-based).

        Raises:
            ScoringTableMiss: If the key is absent.
        """
        return _lookup(self.acceptor_tables[table], key, f"score3 table {table + 1}")
