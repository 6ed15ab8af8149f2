"""Transcript structure and variant representation.

All coordinates are 1-based and fully closed, as in Ensembl and VCF.
Exons are stored in transcript order (5' to 3'), so on the minus strand
the first exon is the one with the highest genomic coordinates. Introns
are derived from consecutive exons.

Example:
    >>> tr = Transcript.from_exon_coords("tx1", "chr1", "+", [(101, 200), (301, 400)])
    >>> tr.introns[0].start, tr.introns[0].end
    (201, 300)
    >>> tr.feature_numbers(250, 250)
    (None, '1/1')
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

import attrs

from maxentforge.utils.intervals import Interval, find_overlaps
from maxentforge.utils.sequences import reverse_complement

# =============================================================================
# Type Aliases
# =============================================================================

Strand = Literal["+", "-"]

DELETION_ALLELE = "-"


# =============================================================================
# Transcript Features
# =============================================================================


@attrs.frozen
class Feature:
    """A stranded genomic feature.

    Attributes:
        seqid: Scaffold/chromosome name.
        start: Start position (1-based, inclusive).
        end: End position (1-based, inclusive).
        strand: Strand (+ or -).
    """

    seqid: str
    start: int
    end: int
    strand: Strand

    @property
    def length(self) -> int:
        """Feature length in base pairs."""
        return self.end - self.start + 1

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)


@attrs.frozen
class Exon(Feature):
    """An exon."""


@attrs.frozen
class Intron(Feature):
    """An intron."""


@attrs.define(slots=True)
class Transcript:
    """A transcript with exons in transcript order.

    Attributes:
        transcript_id: Transcript identifier.
        seqid: Scaffold/chromosome name.
        strand: Strand (+ or -).
        exons: Exons ordered 5' to 3' along the transcript.
    """

    transcript_id: str
    seqid: str
    strand: Strand
    exons: list[Exon] = attrs.Factory(list)
    _introns: list[Intron] | None = attrs.field(default=None, init=False, repr=False)

    @classmethod
    def from_exon_coords(
        cls,
        transcript_id: str,
        seqid: str,
        strand: Strand,
        coords: list[tuple[int, int]],
    ) -> Transcript:
        """Build a transcript from (start, end) exon coordinates in any order."""
        ordered = sorted(coords, reverse=strand == "-")
        exons = [Exon(seqid, start, end, strand) for start, end in ordered]
        return cls(transcript_id=transcript_id, seqid=seqid, strand=strand, exons=exons)

    @property
    def introns(self) -> list[Intron]:
        """Introns between consecutive exons, in transcript order."""
        if self._introns is None:
            introns = []
            for upstream, downstream in zip(self.exons, self.exons[1:]):
                if self.strand == "+":
                    start, end = upstream.end + 1, downstream.start - 1
                else:
                    start, end = downstream.end + 1, upstream.start - 1
                if start <= end:
                    introns.append(Intron(self.seqid, start, end, self.strand))
            self._introns = introns
        return self._introns

    @property
    def n_exons(self) -> int:
        """Number of exons."""
        return len(self.exons)

    @property
    def n_introns(self) -> int:
        """Number of introns."""
        return len(self.introns)

    def overlapped_introns(self, start: int, end: int) -> list[Intron]:
        """Introns overlapping [start, end], in transcript order."""
        hits = find_overlaps(Interval(start, end), [i.interval for i in self.introns])
        return [self.introns[i] for i, _ in hits]

    def feature_numbers(self, start: int, end: int) -> tuple[str | None, str | None]:
        """Exon and intron numbers overlapped by [start, end].

        Numbers use the "current/total" shape, e.g. "3/7", or "2-3/7" when
        several features are overlapped.

        Returns:
            Tuple of (exon_number, intron_number); None where nothing overlaps.
        """
        query = Interval(min(start, end), max(start, end))
        exon_hits = find_overlaps(query, [e.interval for e in self.exons])
        intron_hits = find_overlaps(query, [i.interval for i in self.introns])
        return (
            _format_number([i for i, _ in exon_hits], self.n_exons),
            _format_number([i for i, _ in intron_hits], self.n_introns),
        )


def _format_number(indices: list[int], total: int) -> str | None:
    if not indices:
        return None
    first, last = indices[0] + 1, indices[-1] + 1
    current = str(first) if first == last else f"{first}-{last}"
    return f"{current}/{total}"


def parse_feature_number(number: str) -> tuple[int, int]:
    """Parse a "current/total" feature number.

    Args:
        number: e.g. "3/7" or "2-3/7".

    Returns:
        Tuple of (current, total); the first value of a range is used.

    Raises:
        ValueError: If the string is not in "current/total" shape.
    """
    try:
        current, total = number.split("/")
        return int(current.split("-")[0]), int(total)
    except ValueError:
        raise ValueError(f"Invalid feature number: {number!r}") from None


# =============================================================================
# Variants
# =============================================================================


class VariantShape(Enum):
    """Variant classification used to pick the scoring strategy."""

    SINGLE_NUCLEOTIDE = "single_nucleotide"
    OTHER = "other"


def classify_variant(start: int, end: int, alt_allele: str) -> VariantShape:
    """Classify a variant as a single-nucleotide substitution or other."""
    if start == end and alt_allele in ("A", "C", "G", "T"):
        return VariantShape.SINGLE_NUCLEOTIDE
    return VariantShape.OTHER


@attrs.frozen
class Variant:
    """A small variant on the forward strand.

    Insertions follow the Ensembl convention ``start == end + 1``.

    Attributes:
        seqid: Scaffold/chromosome name.
        start: First reference base replaced (1-based).
        end: Last reference base replaced (1-based, inclusive).
        alt_allele: Forward-strand alternate allele; "" or "-" for deletions.
        shape: Classification, computed once at construction.
    """

    seqid: str
    start: int
    end: int
    alt_allele: str = attrs.field(converter=lambda a: "" if a == DELETION_ALLELE else a.upper())
    shape: VariantShape = attrs.field(init=False)

    @shape.default
    def _classify(self) -> VariantShape:
        return classify_variant(self.start, self.end, self.alt_allele)

    @property
    def ref_length(self) -> int:
        """Number of reference bases replaced (0 for insertions)."""
        return self.end - self.start + 1

    @property
    def is_single_nucleotide(self) -> bool:
        return self.shape is VariantShape.SINGLE_NUCLEOTIDE

    def allele_on(self, strand: Strand) -> str:
        """Alternate allele read on the given strand."""
        return self.alt_allele if strand == "+" else reverse_complement(self.alt_allele)
