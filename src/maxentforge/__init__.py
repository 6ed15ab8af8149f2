"""MaxEntForge: maximum entropy splice site scoring for variant annotation.

MaxEntForge scores splice donor (5') and acceptor (3') sites with the
MaxEntScan model of Yeo and Burge, and uses those scores to assess how
variants change splicing on a transcript.

Example:
    >>> import maxentforge
    >>> maxentforge.__version__
    '0.1.0'

Modules:
    core: Model tables, scoring, caching, sliding-window search,
          nearest splice site scoring and variant annotation
    io: Genome sequence access
    utils: Intervals, sequences and logging
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
