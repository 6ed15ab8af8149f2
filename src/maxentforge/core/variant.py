"""Splice effect annotation of variants with MaxEntScan.

This module assesses how a variant changes splice site strength on a
transcript. Three analyses are available:

- MES: if a single-nucleotide variant falls in a donor window (3 bases of
  exon + 6 of intron) or acceptor window (20 bases of intron + 3 of exon),
  the reference and alternate windows are scored and their difference
  (REF - ALT) reported.
- SWA: a sliding window over the sequence around the variant finds the
  strongest donor and acceptor k-mers containing the reference and the
  alternate allele. For SNVs the reference comparison score is read in
  the frame of the best alternate k-mer; for other variants it is the
  best reference k-mer. The difference is REF_COMP - ALT.
- NCSS: scores of the nearest annotated donor and acceptor sites
  upstream and downstream of the variant.

Per-variant problems (non-ACGT sequence, sequence unavailable, no
neighbouring exon or intron) only remove fields from the result.

Example:
    >>> from maxentforge.config import MaxEntConfig
    >>> from maxentforge.core.variant import VariantSpliceAnnotator
    >>> from maxentforge.io.fasta import GenomeAccessor
    >>>
    >>> config = MaxEntConfig(model_dir="fordownload", run_swa=True)
    >>> annotator = VariantSpliceAnnotator.from_config(config, GenomeAccessor("genome.fa"))
    >>> fields = annotator.annotate(variant, transcript)
    >>> fields["MaxEntScan_diff"] == fields["MaxEntScan_ref"] - fields["MaxEntScan_alt"]
    True
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Callable, Iterable

from maxentforge.config import (
    DEFAULT_ACCEPTOR_FLANK,
    DEFAULT_DONOR_FLANK,
    DEFAULT_SEARCH_MARGIN,
    MaxEntConfig,
)
from maxentforge.core.ncss import (
    NearestSpliceSiteLocator,
    SpliceWindow,
    acceptor_window_from_intron,
    donor_window_from_intron,
)
from maxentforge.core.scoring import ACCEPTOR_WIDTH, DONOR_WIDTH, MaxEntScorer
from maxentforge.core.sliding import KmerScore, max_acceptor_score, max_donor_score
from maxentforge.core.transcripts import Transcript, Variant, VariantShape
from maxentforge.utils.intervals import Interval, overlaps
from maxentforge.utils.sequences import is_acgt, substitute

if TYPE_CHECKING:
    from maxentforge.io.fasta import GenomeSource

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MES_PREFIX = "MaxEntScan"
SWA_PREFIX = "MES-SWA"

Fields = dict[str, str | int | float]


# =============================================================================
# Annotator
# =============================================================================


class VariantSpliceAnnotator:
    """Annotate variants with MaxEntScan splice site scores.

    Attributes:
        scorer: MaxEnt scorer, shared by all analyses.
        genome: Sequence source.
        config: Enabled analyses and output options.
        locator: Nearest canonical splice site locator.
    """

    def __init__(
        self,
        scorer: MaxEntScorer,
        genome: GenomeSource,
        config: MaxEntConfig | None = None,
    ) -> None:
        self.scorer = scorer
        self.genome = genome
        self.config = config or MaxEntConfig()
        self.locator = NearestSpliceSiteLocator(scorer, genome)

    @classmethod
    def from_config(
        cls, config: MaxEntConfig, genome: GenomeSource
    ) -> VariantSpliceAnnotator:
        """Load the model named by the configuration and build an annotator.

        Raises:
            ConfigError: If no model directory is configured.
            ModelLoadError: If the model files cannot be read.
        """
        scorer = MaxEntScorer.from_directory(
            config.resolve_model_dir(), cache_size=config.cache_size
        )
        return cls(scorer, genome, config)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def annotate(
        self,
        variant: Variant,
        transcript: Transcript,
        exon_number: str | None = None,
        intron_number: str | None = None,
    ) -> Fields:
        """Run the enabled analyses for one variant on one transcript.

        Args:
            variant: Variant to annotate.
            transcript: Transcript the variant is assessed against.
            exon_number: "current/total" exon number of the variant, derived
                from the transcript if neither number is given.
            intron_number: "current/total" intron number of the variant.

        Returns:
            Annotation fields. May be empty.
        """
        fields = self.run_mes(variant, transcript)

        if self.config.run_swa:
            fields.update(self.run_swa(variant, transcript))

        if self.config.run_ncss:
            fields.update(
                self.run_ncss(variant, transcript, exon_number, intron_number)
            )

        return self.select_fields(fields)

    def annotate_many(
        self,
        pairs: Iterable[tuple[Variant, Transcript]],
        n_workers: int | None = None,
    ) -> list[Fields]:
        """Annotate many (variant, transcript) pairs.

        Args:
            pairs: Variants and the transcripts to assess them against.
            n_workers: Number of threads (defaults to config.max_workers).

        Returns:
            One field dict per pair, in input order.
        """
        pairs_list = list(pairs)
        n_workers = n_workers or self.config.max_workers

        if n_workers <= 1:
            return [self.annotate(v, t) for v, t in pairs_list]

        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            futures = [executor.submit(self.annotate, v, t) for v, t in pairs_list]
            results = []
            for future, (variant, transcript) in zip(futures, pairs_list):
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.error(
                        f"Error annotating {variant.seqid}:{variant.start} "
                        f"on {transcript.transcript_id}: {e}"
                    )
                    raise
        return results

    def select_fields(self, fields: Fields) -> Fields:
        """Drop sequence fields unless verbose output is enabled."""
        if self.config.verbose:
            return fields
        return {
            key: value
            for key, value in fields.items()
            if key.endswith(("_score", "_diff"))
            or (key.startswith(f"{MES_PREFIX}_") and not key.endswith("_seq"))
        }

    # -------------------------------------------------------------------------
    # Sequence helpers
    # -------------------------------------------------------------------------

    def get_seqs(
        self,
        variant: Variant,
        transcript: Transcript,
        start: int,
        end: int,
    ) -> tuple[str | None, str | None]:
        """Reference and alternate sequence of a window, on the transcript strand.

        Args:
            variant: Variant contained in the window.
            transcript: Transcript giving the strand.
            start: Window start (1-based, inclusive).
            end: Window end (1-based, inclusive).

        Returns:
            Tuple of (reference, alternate); None where unavailable.
        """
        strand = transcript.strand
        ref_seq = self.genome.get_subsequence(variant.seqid, start, end, strand)
        if ref_seq is None:
            return None, None

        offset = variant.start - start if strand == "+" else end - variant.end
        try:
            alt_seq = substitute(
                ref_seq, offset, variant.ref_length, variant.allele_on(strand)
            )
        except ValueError as e:
            logger.debug(f"Variant does not fit window {start}-{end}: {e}")
            return ref_seq, None

        return ref_seq, alt_seq

    # -------------------------------------------------------------------------
    # MES
    # -------------------------------------------------------------------------

    def run_mes(self, variant: Variant, transcript: Transcript) -> Fields:
        """Score the donor or acceptor window overlapped by an SNV.

        The first intron (in transcript order) whose donor window, checked
        first, or acceptor window overlaps the variant is used.
        """
        if variant.shape is not VariantShape.SINGLE_NUCLEOTIDE:
            return {}

        position = Interval(variant.start, variant.end)
        margin = DEFAULT_SEARCH_MARGIN

        for intron in transcript.overlapped_introns(
            variant.start - margin, variant.end + margin
        ):
            five = donor_window_from_intron(intron)
            if overlaps(position, Interval(five.start, five.end)):
                return self._score_window(variant, transcript, five, self.scorer.score5)

            three = acceptor_window_from_intron(intron)
            if overlaps(position, Interval(three.start, three.end)):
                return self._score_window(variant, transcript, three, self.scorer.score3)

        return {}

    def _score_window(
        self,
        variant: Variant,
        transcript: Transcript,
        window: SpliceWindow,
        score_fn: Callable[[str], float],
    ) -> Fields:
        ref_seq, alt_seq = self.get_seqs(variant, transcript, window.start, window.end)
        if ref_seq is None or alt_seq is None:
            return {}
        if not (is_acgt(ref_seq) and is_acgt(alt_seq)):
            logger.debug(f"Skipping non-ACGT window {ref_seq}/{alt_seq}")
            return {}

        ref_score = score_fn(ref_seq)
        alt_score = score_fn(alt_seq)

        return {
            f"{MES_PREFIX}_ref": ref_score,
            f"{MES_PREFIX}_ref_seq": ref_seq,
            f"{MES_PREFIX}_alt": alt_score,
            f"{MES_PREFIX}_alt_seq": alt_seq,
            f"{MES_PREFIX}_diff": ref_score - alt_score,
        }

    # -------------------------------------------------------------------------
    # SWA
    # -------------------------------------------------------------------------

    def run_swa(self, variant: Variant, transcript: Transcript) -> Fields:
        """Find the best donor and acceptor k-mers around a variant."""
        fields = self._swa_site(
            variant,
            transcript,
            "donor",
            DEFAULT_DONOR_FLANK,
            DONOR_WIDTH,
            lambda seq: max_donor_score(self.scorer, seq),
            self.scorer.score5,
        )
        fields.update(
            self._swa_site(
                variant,
                transcript,
                "acceptor",
                DEFAULT_ACCEPTOR_FLANK,
                ACCEPTOR_WIDTH,
                lambda seq: max_acceptor_score(self.scorer, seq),
                self.scorer.score3,
            )
        )
        return fields

    def _swa_site(
        self,
        variant: Variant,
        transcript: Transcript,
        site: str,
        flank: int,
        width: int,
        find_best: Callable[[str], KmerScore | None],
        score_fn: Callable[[str], float],
    ) -> Fields:
        ref_subseq, alt_subseq = self.get_seqs(
            variant, transcript, variant.start - flank, variant.end + flank
        )
        if ref_subseq is None or alt_subseq is None:
            return {}
        if not (is_acgt(ref_subseq) and is_acgt(alt_subseq)):
            return {}

        alt_best = find_best(alt_subseq)
        ref_best = find_best(ref_subseq)
        if alt_best is None or ref_best is None:
            return {}

        if variant.shape is VariantShape.SINGLE_NUCLEOTIDE:
            # Reference read in the same frame as the best alternate k-mer
            offset = alt_best.frame - 1
            comp_seq = ref_subseq[offset : offset + width]
            comp_score = score_fn(comp_seq)
        else:
            comp_seq, comp_score = ref_best.kmer, ref_best.score

        prefix = f"{SWA_PREFIX}_{site}"
        return {
            f"{prefix}_alt_subseq": alt_subseq,
            f"{prefix}_alt_kmer": alt_best.kmer,
            f"{prefix}_alt_frame": alt_best.frame,
            f"{prefix}_alt_score": alt_best.score,
            f"{prefix}_ref_comp_seq": comp_seq,
            f"{prefix}_ref_comp_score": comp_score,
            f"{prefix}_ref_subseq": ref_subseq,
            f"{prefix}_ref_kmer": ref_best.kmer,
            f"{prefix}_ref_frame": ref_best.frame,
            f"{prefix}_ref_score": ref_best.score,
            f"{prefix}_diff": comp_score - alt_best.score,
        }

    # -------------------------------------------------------------------------
    # NCSS
    # -------------------------------------------------------------------------

    def run_ncss(
        self,
        variant: Variant,
        transcript: Transcript,
        exon_number: str | None = None,
        intron_number: str | None = None,
    ) -> Fields:
        """Score the nearest canonical splice sites around the variant's feature."""
        if exon_number is None and intron_number is None:
            exon_number, intron_number = transcript.feature_numbers(
                variant.start, variant.end
            )

        sites = self.locator.locate(transcript, exon_number, intron_number)
        return sites.to_fields(include_sequences=True)
