"""Input/output handlers for MaxEntForge.

- FASTA: Genome sequence access for splice window extraction

Example:
    >>> from maxentforge.io import GenomeAccessor
    >>> genome = GenomeAccessor("genome.fa")
"""

from maxentforge.io.fasta import GenomeAccessor, GenomeSource, InMemoryGenome

__all__: list[str] = [
    "GenomeAccessor",
    "GenomeSource",
    "InMemoryGenome",
]
