"""Tests for transcript structure and variant representation."""

from __future__ import annotations

import pytest

from maxentforge.core.transcripts import (
    Exon,
    Intron,
    Transcript,
    Variant,
    VariantShape,
    classify_variant,
    parse_feature_number,
)

EXONS = [(101, 200), (301, 400), (501, 600)]


@pytest.fixture
def plus_transcript() -> Transcript:
    return Transcript.from_exon_coords("tx_plus", "chr1", "+", EXONS)


@pytest.fixture
def minus_transcript() -> Transcript:
    return Transcript.from_exon_coords("tx_minus", "chr1", "-", EXONS)


# =============================================================================
# Transcripts
# =============================================================================


class TestTranscript:
    """Test exon ordering and intron derivation."""

    def test_plus_order(self, plus_transcript):
        """Plus-strand exons run low to high."""
        assert [e.start for e in plus_transcript.exons] == [101, 301, 501]
        assert plus_transcript.exons[0] == Exon("chr1", 101, 200, "+")

    def test_minus_order(self, minus_transcript):
        """Minus-strand exons run high to low."""
        assert [e.start for e in minus_transcript.exons] == [501, 301, 101]

    def test_introns_plus(self, plus_transcript):
        assert plus_transcript.introns == [
            Intron("chr1", 201, 300, "+"),
            Intron("chr1", 401, 500, "+"),
        ]

    def test_introns_minus(self, minus_transcript):
        """Minus-strand introns are in transcript order too."""
        assert minus_transcript.introns == [
            Intron("chr1", 401, 500, "-"),
            Intron("chr1", 201, 300, "-"),
        ]

    def test_counts(self, plus_transcript):
        assert plus_transcript.n_exons == 3
        assert plus_transcript.n_introns == 2

    def test_single_exon(self):
        """A single-exon transcript has no introns."""
        tr = Transcript.from_exon_coords("tx1", "chr1", "+", [(1, 100)])
        assert tr.introns == []

    def test_feature_length(self):
        assert Exon("chr1", 101, 200, "+").length == 100

    def test_overlapped_introns(self, minus_transcript):
        """Overlapping introns are reported in transcript order."""
        hits = minus_transcript.overlapped_introns(250, 450)
        assert [i.start for i in hits] == [401, 201]
        assert minus_transcript.overlapped_introns(150, 160) == []


class TestFeatureNumbers:
    """Test "current/total" numbering of the features a variant hits."""

    def test_exon(self, plus_transcript):
        assert plus_transcript.feature_numbers(150, 150) == ("1/3", None)

    def test_intron(self, plus_transcript):
        assert plus_transcript.feature_numbers(450, 450) == (None, "2/2")

    def test_minus_strand_numbering(self, minus_transcript):
        """Numbers follow transcript order."""
        assert minus_transcript.feature_numbers(550, 550) == ("1/3", None)
        assert minus_transcript.feature_numbers(450, 450) == (None, "1/2")

    def test_spanning(self, plus_transcript):
        """A span over a boundary gets both numbers."""
        assert plus_transcript.feature_numbers(199, 202) == ("1/3", "1/2")

    def test_range(self, plus_transcript):
        """Several exons give a range."""
        assert plus_transcript.feature_numbers(150, 350) == ("1-2/3", "1/2")

    def test_insertion_coordinates(self, plus_transcript):
        """Insertions (start > end) are handled."""
        assert plus_transcript.feature_numbers(151, 150) == ("1/3", None)


class TestParseFeatureNumber:
    """Test parsing of "current/total" strings."""

    @pytest.mark.parametrize(
        "number,expected",
        [("3/7", (3, 7)), ("2-3/7", (2, 7)), ("1/1", (1, 1))],
    )
    def test_valid(self, number, expected):
        assert parse_feature_number(number) == expected

    @pytest.mark.parametrize("number", ["3", "a/7", "3/7/9", ""])
    def test_invalid(self, number):
        with pytest.raises(ValueError, match="Invalid feature number"):
            parse_feature_number(number)


# =============================================================================
# Variants
# =============================================================================


class TestVariant:
    """Test variant classification and alleles."""

    def test_snv(self):
        variant = Variant("chr1", 150, 150, "c")
        assert variant.alt_allele == "C"
        assert variant.shape is VariantShape.SINGLE_NUCLEOTIDE
        assert variant.is_single_nucleotide
        assert variant.ref_length == 1

    def test_deletion(self):
        """A "-" allele marks a deletion."""
        variant = Variant("chr1", 150, 152, "-")
        assert variant.alt_allele == ""
        assert variant.shape is VariantShape.OTHER
        assert variant.ref_length == 3

    def test_insertion(self):
        """Insertions replace zero reference bases."""
        variant = Variant("chr1", 151, 150, "TT")
        assert variant.ref_length == 0
        assert variant.shape is VariantShape.OTHER

    def test_mnv_is_other(self):
        assert classify_variant(150, 151, "AC") is VariantShape.OTHER

    def test_ambiguous_base_is_other(self):
        assert classify_variant(150, 150, "N") is VariantShape.OTHER

    def test_allele_on_strand(self):
        """Minus-strand transcripts read the reverse complement."""
        variant = Variant("chr1", 150, 151, "AC")
        assert variant.allele_on("+") == "AC"
        assert variant.allele_on("-") == "GT"
