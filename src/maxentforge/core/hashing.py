"""Sequence keys for MaxEnt table lookups.

The 3' model indexes its nine sub-tables by the base-4 value of short
substrings (A=0, C=1, G=2, T=3, most significant digit first). The 5' model
uses the 7-base "rest" string itself as the key into its sequence index.

Example:
    >>> from maxentforge.core.hashing import to_base4_index
    >>> to_base4_index("CAGAAGT")
    4619
"""

from __future__ import annotations

# =============================================================================
# Constants
# =============================================================================

BASE_TO_DIGIT = {"A": 0, "C": 1, "G": 2, "T": 3}

# Positions kept from a 9-mer donor once the GT consensus (3, 4) is removed
DONOR_REST_POSITIONS = (0, 1, 2, 5, 6, 7, 8)


# =============================================================================
# Hash Functions
# =============================================================================


def to_base4_index(sequence: str) -> int:
    """Map an ACGT string to its base-4 integer index.

    Args:
        sequence: Upper-case ACGT string of any length.

    Returns:
        Sum of digit[i] * 4 ** (len - 1 - i).

    Raises:
        ValueError: If the sequence contains a character outside ACGT.
    """
    index = 0
    for base in sequence:
        try:
            digit = BASE_TO_DIGIT[base]
        except KeyError:
            raise ValueError(
                f"Cannot hash {sequence!r}: invalid base {base!r}"
            ) from None
        index = index * 4 + digit
    return index


def donor_rest_key(sequence: str) -> str:
    """Return the 5' sequence-index key for a 9-mer.

    The key is the 9-mer with its consensus positions (3 and 4) removed.
    """
    return "".join(sequence[i] for i in DONOR_REST_POSITIONS)
