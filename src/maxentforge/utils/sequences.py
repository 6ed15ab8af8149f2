"""Sequence manipulation utilities.

This module provides utilities for working with nucleotide sequences:

- Reverse complement
- Validation of scorable (pure ACGT) sequence
- Allele substitution

Example:
    >>> from maxentforge.utils.sequences import reverse_complement, substitute
    >>> reverse_complement("ATGCATGC")
    'GCATGCAT'
    >>> substitute("AAGGTAAGT", 1, 1, "C")
    'ACGGTAAGT'
"""

import re

# =============================================================================
# Constants
# =============================================================================

# Complement table, IUPAC aware, case preserving
COMPLEMENT_TABLE = str.maketrans(
    "ACGTacgtNnRYSWKMBDHVryswkmbdhv",
    "TGCAtgcaNnYRSWMKVHDByrswmkvhdb",
)

_ACGT_RE = re.compile(r"[ACGT]+")


# =============================================================================
# Complement
# =============================================================================


def complement(sequence: str) -> str:
    """Get the complement of a DNA sequence.

    Args:
        sequence: DNA sequence string.

    Returns:
        Complement sequence.
    """
    return sequence.translate(COMPLEMENT_TABLE)


def reverse_complement(sequence: str) -> str:
    """Get the reverse complement of a DNA sequence.

    Args:
        sequence: DNA sequence string.

    Returns:
        Reverse complement sequence.
    """
    return complement(sequence)[::-1]


# =============================================================================
# Validation
# =============================================================================


def is_acgt(sequence: str) -> bool:
    """Check that a sequence is non-empty and only upper-case A, C, G, T."""
    return _ACGT_RE.fullmatch(sequence) is not None


# =============================================================================
# Editing
# =============================================================================


def substitute(sequence: str, offset: int, length: int, replacement: str) -> str:
    """Replace ``length`` bases starting at ``offset`` with ``replacement``.

    A zero ``length`` inserts, an empty ``replacement`` deletes.

    Raises:
        ValueError: If the edited span falls outside the sequence.
    """
    if offset < 0 or length < 0 or offset + length > len(sequence):
        raise ValueError(
            f"Cannot replace {length} bases at offset {offset} "
            f"in a sequence of length {len(sequence)}"
        )
    return sequence[:offset] + replacement + sequence[offset + length :]
