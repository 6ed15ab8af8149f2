"""Nearest canonical splice site scoring.

For a variant inside an exon or intron, this module extracts the
annotated donor and acceptor sites immediately upstream and downstream of
it and scores them. This gives a baseline against which cryptic sites
created by the variant can be compared.

Window offsets, relative to the feature boundary on the plus strand
(the minus strand mirrors them around the opposite boundary)::

    donor from exon      [end - 2,    end + 6]     9 bases
    acceptor from exon   [start - 20, start + 2]  23 bases
    donor from intron    [start - 3,  start + 5]   9 bases
    acceptor from intron [end - 19,   end + 3]    23 bases

Example:
    >>> locator = NearestSpliceSiteLocator(scorer, genome)
    >>> sites = locator.locate(transcript, exon_number="2/5")
    >>> sites.upstream_donor.score
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import attrs

from maxentforge.core.transcripts import Exon, Intron, Transcript, parse_feature_number

if TYPE_CHECKING:
    from maxentforge.core.scoring import MaxEntScorer
    from maxentforge.io.fasta import GenomeSource

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

FIELD_PREFIX = "MES-NCSS"

# (anchoring boundary, window start offset, window end offset) on the plus strand
DONOR_FROM_EXON = ("end", -2, 6)
ACCEPTOR_FROM_EXON = ("start", -20, 2)
DONOR_FROM_INTRON = ("start", -3, 5)
ACCEPTOR_FROM_INTRON = ("end", -19, 3)


# =============================================================================
# Data Structures
# =============================================================================


@attrs.frozen
class SpliceWindow:
    """A stranded window around a splice boundary.

    Attributes:
        seqid: Scaffold/chromosome name.
        start: Start position (1-based, inclusive).
        end: End position (1-based, inclusive).
        strand: Strand (+ or -).
    """

    seqid: str
    start: int
    end: int
    strand: str

    @property
    def width(self) -> int:
        return self.end - self.start + 1


@attrs.frozen
class ScoredSite:
    """Sequence and score of a splice window.

    Either value is None when it could not be obtained.
    """

    sequence: str | None = None
    score: float | None = None


@attrs.frozen
class NearestSpliceSites:
    """The four splice sites flanking a variant."""

    upstream_donor: ScoredSite = ScoredSite()
    upstream_acceptor: ScoredSite = ScoredSite()
    downstream_donor: ScoredSite = ScoredSite()
    downstream_acceptor: ScoredSite = ScoredSite()

    def to_fields(self, include_sequences: bool = False) -> dict[str, str | float]:
        """Flatten into annotation fields, dropping absent values."""
        fields: dict[str, str | float] = {}
        for name in (
            "upstream_donor",
            "downstream_donor",
            "upstream_acceptor",
            "downstream_acceptor",
        ):
            site: ScoredSite = getattr(self, name)
            if include_sequences and site.sequence is not None:
                fields[f"{FIELD_PREFIX}_{name}_seq"] = site.sequence
            if site.score is not None:
                fields[f"{FIELD_PREFIX}_{name}_score"] = site.score
        return fields


# =============================================================================
# Window Extraction
# =============================================================================


def _window(feature: Exon | Intron, rule: tuple[str, int, int]) -> SpliceWindow:
    boundary, before, after = rule
    if feature.strand == "+":
        anchor = feature.end if boundary == "end" else feature.start
        start, end = anchor + before, anchor + after
    else:
        anchor = feature.start if boundary == "end" else feature.end
        start, end = anchor - after, anchor - before
    return SpliceWindow(feature.seqid, start, end, feature.strand)


def donor_window_from_exon(exon: Exon) -> SpliceWindow:
    """Donor window at the 3' boundary of an exon."""
    return _window(exon, DONOR_FROM_EXON)


def acceptor_window_from_exon(exon: Exon) -> SpliceWindow:
    """Acceptor window at the 5' boundary of an exon."""
    return _window(exon, ACCEPTOR_FROM_EXON)


def donor_window_from_intron(intron: Intron) -> SpliceWindow:
    """Donor window at the 5' boundary of an intron."""
    return _window(intron, DONOR_FROM_INTRON)


def acceptor_window_from_intron(intron: Intron) -> SpliceWindow:
    """Acceptor window at the 3' boundary of an intron."""
    return _window(intron, ACCEPTOR_FROM_INTRON)


# =============================================================================
# Locator
# =============================================================================


class NearestSpliceSiteLocator:
    """Score the annotated splice sites adjacent to an exon or intron.

    Attributes:
        scorer: MaxEnt scorer.
        genome: Sequence source.
    """

    def __init__(self, scorer: MaxEntScorer, genome: GenomeSource) -> None:
        self.scorer = scorer
        self.genome = genome

    def score_donor(self, window: SpliceWindow) -> ScoredSite:
        """Fetch and score a donor window; the score is None if not ACGT."""
        sequence = self._fetch(window)
        return ScoredSite(sequence, self.scorer.score_donor_or_none(sequence))

    def score_acceptor(self, window: SpliceWindow) -> ScoredSite:
        """Fetch and score an acceptor window; the score is None if not ACGT."""
        sequence = self._fetch(window)
        return ScoredSite(sequence, self.scorer.score_acceptor_or_none(sequence))

    def _fetch(self, window: SpliceWindow) -> str | None:
        return self.genome.get_subsequence(
            window.seqid, window.start, window.end, window.strand
        )

    def locate(
        self,
        transcript: Transcript,
        exon_number: str | None = None,
        intron_number: str | None = None,
    ) -> NearestSpliceSites:
        """Score the splice sites nearest to an exon or intron.

        Args:
            transcript: Transcript holding the feature.
            exon_number: "current/total" exon number, e.g. "3/7".
            intron_number: "current/total" intron number. Takes precedence
                over ``exon_number``.

        Returns:
            Scored flanking sites. Sites without a neighbouring feature
            are left empty.
        """
        if intron_number:
            return self._from_intron(transcript, intron_number)
        if exon_number:
            return self._from_exon(transcript, exon_number)
        return NearestSpliceSites()

    def _from_exon(self, transcript: Transcript, exon_number: str) -> NearestSpliceSites:
        number, total = parse_feature_number(exon_number)
        exons = transcript.exons
        idx = number - 1
        if not 0 <= idx < len(exons):
            logger.debug(f"Exon {exon_number} not in {transcript.transcript_id}")
            return NearestSpliceSites()
        exon = exons[idx]

        sites: dict[str, ScoredSite] = {}

        # No upstream sites for the first exon
        if number != 1:
            sites["upstream_donor"] = self.score_donor(
                donor_window_from_exon(exons[idx - 1])
            )
            sites["upstream_acceptor"] = self.score_acceptor(
                acceptor_window_from_exon(exon)
            )

        # No downstream sites for the last exon
        if number != total and idx + 1 < len(exons):
            sites["downstream_donor"] = self.score_donor(donor_window_from_exon(exon))
            sites["downstream_acceptor"] = self.score_acceptor(
                acceptor_window_from_exon(exons[idx + 1])
            )

        return NearestSpliceSites(**sites)

    def _from_intron(
        self, transcript: Transcript, intron_number: str
    ) -> NearestSpliceSites:
        number, total = parse_feature_number(intron_number)
        introns = transcript.introns
        idx = number - 1
        if not 0 <= idx < len(introns):
            logger.debug(f"Intron {intron_number} not in {transcript.transcript_id}")
            return NearestSpliceSites()
        intron = introns[idx]

        sites = {
            "upstream_donor": self.score_donor(donor_window_from_intron(intron)),
            "downstream_acceptor": self.score_acceptor(
                acceptor_window_from_intron(intron)
            ),
        }

        if number != 1:
            sites["upstream_acceptor"] = self.score_acceptor(
                acceptor_window_from_intron(introns[idx - 1])
            )

        if number != total and idx + 1 < len(introns):
            sites["downstream_donor"] = self.score_donor(
                donor_window_from_intron(introns[idx + 1])
            )

        return NearestSpliceSites(**sites)
