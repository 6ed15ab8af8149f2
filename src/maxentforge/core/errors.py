"""Exceptions raised by MaxEntForge.

Two classes of failure exist:

- Fatal errors (``MaxEntError`` and subclasses): the model files are missing,
  unreadable or inconsistent, so no trustworthy score can be produced.
- Per-variant soft failures (non-ACGT sequence, sequence unavailable, no
  neighbouring exon/intron). These are not exceptions; the affected fields
  are simply omitted from the annotation.
"""

# =============================================================================
# Exceptions
# =============================================================================


class MaxEntError(Exception):
    """Base class for fatal MaxEntForge errors."""

    pass


class ModelLoadError(MaxEntError):
    """Raised when a model directory or table file cannot be read."""

    pass


class ScoringTableMiss(MaxEntError, KeyError):
    """Raised when a key is absent from a loaded model table.

    A miss means the model files are corrupt or mismatched.
    """

    def __init__(self, table: str, key: object) -> None:
        self.table = table
        self.key = key
        super().__init__(f"No {table} entry for {key!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class ConfigError(MaxEntError, ValueError):
    """Raised when a configuration file is invalid."""

    pass
