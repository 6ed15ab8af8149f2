"""Genome sequence access for splice window extraction.

This module provides the sequence collaborator used by the variant
annotator and the nearest-splice-site locator. Any object with a
``get_subsequence(seqid, start, end, strand)`` method returning a string or
None can be used; two implementations are provided:

- GenomeAccessor: indexed FASTA access using pyfaidx
- InMemoryGenome: sequences held in a dictionary

Coordinates are 1-based and fully closed. Sequences are returned upper-case
and reverse-complemented for the minus strand. Requests for unknown
sequences or coordinates outside a sequence return None.

Example:
    >>> from maxentforge.io.fasta import GenomeAccessor
    >>> genome = GenomeAccessor("genome.fa")
    >>> donor = genome.get_subsequence("chr1", 1001, 1009, "-")
    >>> len(donor)
    9
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Protocol, runtime_checkable

import pyfaidx

from maxentforge.utils.sequences import reverse_complement

# =============================================================================
# Type Aliases
# =============================================================================

Strand = Literal["+", "-"]

logger = logging.getLogger(__name__)


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class GenomeSource(Protocol):
    """Anything that can return a stranded genomic subsequence."""

    def get_subsequence(
        self,
        seqid: str,
        start: int,
        end: int,
        strand: Strand = "+",
    ) -> str | None: ...


def _orient(sequence: str, strand: Strand) -> str:
    sequence = sequence.upper()
    if strand == "-":
        sequence = reverse_complement(sequence)
    return sequence


# =============================================================================
# FASTA Accessor
# =============================================================================


class GenomeAccessor:
    """Indexed FASTA access using pyfaidx.

    Attributes:
        path: Path to the FASTA file.

    Example:
        >>> with GenomeAccessor("genome.fa") as genome:
        ...     seq = genome.get_subsequence("chr1", 1000, 1008)
    """

    def __init__(self, fasta_path: Path | str) -> None:
        """Initialize the genome accessor.

        Args:
            fasta_path: Path to FASTA file. Will create .fai index if needed.

        Raises:
            FileNotFoundError: If FASTA file doesn't exist.
        """
        self.path = Path(fasta_path)
        if not self.path.exists():
            raise FileNotFoundError(f"FASTA file not found: {self.path}")

        self._fasta: pyfaidx.Fasta | None = None
        self._scaffold_lengths: dict[str, int] = {}

        self._open()

    def _open(self) -> None:
        """Open the FASTA file with pyfaidx."""
        # pyfaidx will create index if it doesn't exist
        self._fasta = pyfaidx.Fasta(
            str(self.path),
            sequence_always_upper=True,
            read_ahead=10000,
            rebuild=False,
        )
        self._scaffold_lengths = {
            seqid: len(self._fasta[seqid]) for seqid in self._fasta.keys()
        }

        logger.info(
            f"Opened FASTA: {self.path.name}, "
            f"{len(self._scaffold_lengths)} scaffolds"
        )

    @property
    def scaffold_lengths(self) -> dict[str, int]:
        """Return {seqid: length} mapping."""
        return self._scaffold_lengths.copy()

    def __enter__(self) -> GenomeAccessor:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the FASTA file."""
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None

    def get_subsequence(
        self,
        seqid: str,
        start: int,
        end: int,
        strand: Strand = "+",
    ) -> str | None:
        """Get sequence for a 1-based closed region.

        Args:
            seqid: Scaffold/chromosome name.
            start: Start position (1-based, inclusive).
            end: End position (1-based, inclusive).
            strand: Strand (+ or -). Returns reverse complement if "-".

        Returns:
            Sequence string, or None if the region is not available.
        """
        if self._fasta is None:
            raise RuntimeError("FASTA file not opened")

        length = self._scaffold_lengths.get(seqid)
        if length is None or start < 1 or end > length or start > end:
            logger.debug(f"Region {seqid}:{start}-{end} not available")
            return None

        # pyfaidx slices are 0-based half-open
        return _orient(str(self._fasta[seqid][start - 1 : end]), strand)

    def __contains__(self, seqid: str) -> bool:
        """Check if scaffold exists in FASTA."""
        return seqid in self._scaffold_lengths


# =============================================================================
# In-Memory Genome
# =============================================================================


class InMemoryGenome:
    """Genome held as a {seqid: sequence} dictionary.

    Useful when the host pipeline already holds the sequence of interest.
    """

    def __init__(self, sequences: dict[str, str]) -> None:
        self.sequences = dict(sequences)

    def get_subsequence(
        self,
        seqid: str,
        start: int,
        end: int,
        strand: Strand = "+",
    ) -> str | None:
        """Get sequence for a 1-based closed region, or None if unavailable."""
        sequence = self.sequences.get(seqid)
        if sequence is None or start < 1 or end > len(sequence) or start > end:
            return None
        return _orient(sequence[start - 1 : end], strand)

    def __contains__(self, seqid: str) -> bool:
        return seqid in self.sequences
