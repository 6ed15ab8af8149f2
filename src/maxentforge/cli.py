"""Command-line interface for MaxEntForge.

This module provides the main entry point for the maxentforge CLI tool.
It uses Click to define commands for scoring splice site sequences.

Commands:
    score5: Score 9-base donor sites (3 exon + 6 intron bases)
    score3: Score 23-base acceptor sites (20 intron + 3 exon bases)
    scan: Find the best donor or acceptor k-mer in a longer sequence

Example:
    $ maxentforge --help
    $ maxentforge score5 fordownload/ CAGGTAAGT GAGGTAAGT
    $ maxentforge score3 fordownload/ -i acceptors.txt
    $ maxentforge scan fordownload/ TTCAGGTAAGTTTT --site donor
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import click
from rich.console import Console

from maxentforge import __version__
from maxentforge.core.errors import MaxEntError
from maxentforge.core.scoring import ACCEPTOR_WIDTH, DONOR_WIDTH, MaxEntScorer, is_scorable
from maxentforge.core.sliding import max_acceptor_score, max_donor_score
from maxentforge.utils.logging import ProgressLogger, Timer, get_logger, setup_logging
from maxentforge.utils.sequences import is_acgt

# Rich console for errors; results go to stdout as plain TSV
err_console = Console(stderr=True)

logger = get_logger(__name__)


@click.group()
@click.version_option(__version__, prog_name="maxentforge")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """MaxEntForge: maximum entropy splice site scoring.

    Scores splice donor and acceptor sequences with the MaxEntScan model of
    Yeo and Burge. MODEL_DIR is the unpacked MaxEntScan "fordownload"
    directory.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(verbosity=0 if quiet else (2 if verbose else 1))


# =============================================================================
# Helpers
# =============================================================================


def _load_scorer(model_dir: Path) -> MaxEntScorer:
    try:
        with Timer("Loading MaxEntScan model", logger):
            return MaxEntScorer.from_directory(model_dir)
    except MaxEntError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e


def _collect_sequences(sequences: tuple[str, ...], input_file: Path | None) -> list[str]:
    collected = [s.strip().upper() for s in sequences]
    if input_file is not None:
        with open(input_file) as f:
            collected.extend(line.strip().upper() for line in f if line.strip())
    if not collected:
        raise click.UsageError("No sequences given (use arguments or --input).")
    return collected


def _score_all(
    sequences: list[str],
    width: int,
    score_fn: Callable[[str], float],
    description: str,
) -> None:
    progress = ProgressLogger(logger, total=len(sequences), interval=1000, description=description)
    n_skipped = 0
    for seq in sequences:
        progress.update()
        if not is_scorable(seq, width):
            logger.warning(f"Skipping {seq!r}: need {width} bases of A, C, G, T")
            n_skipped += 1
            continue
        try:
            score = score_fn(seq)
        except MaxEntError as e:
            err_console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1) from e
        click.echo(f"{seq}\t{score:.2f}")

    if n_skipped:
        logger.warning(f"Skipped {n_skipped} of {len(sequences)} sequences")


_model_dir_argument = click.argument(
    "model_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
_sequences_argument = click.argument("sequences", nargs=-1)
_input_option = click.option(
    "-i",
    "--input",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File with one sequence per line.",
)


# =============================================================================
# score5 / score3 commands
# =============================================================================


@main.command()
@_model_dir_argument
@_sequences_argument
@_input_option
def score5(model_dir: Path, sequences: tuple[str, ...], input_file: Path | None) -> None:
    """Score 9-base splice donor sequences.

    Each sequence is 3 bases of exon followed by 6 bases of intron.
    Prints "sequence<TAB>score" per line.
    """
    seqs = _collect_sequences(sequences, input_file)
    scorer = _load_scorer(model_dir)
    _score_all(seqs, DONOR_WIDTH, scorer.score5, "Scoring donors")


@main.command()
@_model_dir_argument
@_sequences_argument
@_input_option
def score3(model_dir: Path, sequences: tuple[str, ...], input_file: Path | None) -> None:
    """Score 23-base splice acceptor sequences.

    Each sequence is 20 bases of intron followed by 3 bases of exon.
    Prints "sequence<TAB>score" per line.
    """
    seqs = _collect_sequences(sequences, input_file)
    scorer = _load_scorer(model_dir)
    _score_all(seqs, ACCEPTOR_WIDTH, scorer.score3, "Scoring acceptors")


# =============================================================================
# scan command
# =============================================================================


@main.command()
@_model_dir_argument
@click.argument("sequence")
@click.option(
    "--site",
    type=click.Choice(["donor", "acceptor"]),
    default="donor",
    show_default=True,
    help="Splice site model to scan with.",
)
def scan(model_dir: Path, sequence: str, site: str) -> None:
    """Find the highest scoring k-mer in SEQUENCE.

    Prints "kmer<TAB>frame<TAB>score" where frame is the 1-based start of
    the k-mer.
    """
    sequence = sequence.strip().upper()
    if not is_acgt(sequence):
        raise click.BadParameter("sequence must contain only A, C, G, T", param_hint="SEQUENCE")

    scorer = _load_scorer(model_dir)
    finder = max_donor_score if site == "donor" else max_acceptor_score
    try:
        best = finder(scorer, sequence)
    except MaxEntError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    if best is None:
        width = DONOR_WIDTH if site == "donor" else ACCEPTOR_WIDTH
        err_console.print(f"[yellow]Sequence shorter than {width} bases, nothing to scan[/yellow]")
        raise SystemExit(1)

    click.echo(f"{best.kmer}\t{best.frame}\t{best.score:.2f}")


if __name__ == "__main__":
    main()
