"""Configuration management for MaxEntForge.

This module handles loading and providing access to MaxEntForge
configuration settings. Configuration can come from:
- Default values
- A TOML configuration file with a ``[maxentscan]`` table
- The ``MAXENTSCAN_DIR`` environment variable (model directory only)

Example:
    >>> from maxentforge.config import Config
    >>> config = Config.load("maxentforge.toml")
    >>> config.maxentscan.run_swa
    True

Example file::

    [maxentscan]
    model_dir = "/opt/maxentscan/fordownload"
    run_swa = true
    run_ncss = false
    verbose = false
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import attrs

from maxentforge.core.errors import ConfigError

# =============================================================================
# Default Configuration Values
# =============================================================================

MODEL_DIR_ENV = "MAXENTSCAN_DIR"

# Scores kept per scoring function
DEFAULT_CACHE_SIZE = 50

# Splice windows reach up to 21 bases from an intron boundary
DEFAULT_SEARCH_MARGIN = 21

# Sliding-window context either side of a variant
DEFAULT_DONOR_FLANK = 8
DEFAULT_ACCEPTOR_FLANK = 22

DEFAULT_MAX_WORKERS = 1


# =============================================================================
# Configuration Classes
# =============================================================================


def _optional_path(value: Any) -> Path | None:
    return None if value is None else Path(value)


@attrs.define
class MaxEntConfig:
    """Configuration for MaxEntScan scoring and variant annotation.

    Attributes:
        model_dir: Unpacked MaxEntScan ``fordownload`` directory.
        run_swa: Run the sliding-window search around each variant.
        run_ncss: Score the nearest canonical splice sites.
        verbose: Include sequences, k-mers and frames, not just scores.
        cache_size: Scores cached per scoring function.
        max_workers: Threads used for batch annotation.
    """

    model_dir: Path | None = attrs.field(default=None, converter=_optional_path)
    run_swa: bool = False
    run_ncss: bool = False
    verbose: bool = False
    cache_size: int = attrs.field(default=DEFAULT_CACHE_SIZE)
    max_workers: int = attrs.field(default=DEFAULT_MAX_WORKERS)

    @cache_size.validator
    def _check_cache_size(self, attribute, value) -> None:
        if value < 0:
            raise ConfigError(f"cache_size cannot be negative: {value}")

    @max_workers.validator
    def _check_max_workers(self, attribute, value) -> None:
        if value < 1:
            raise ConfigError(f"max_workers must be at least 1: {value}")

    @property
    def scores_only(self) -> bool:
        """True when only score and difference fields are reported."""
        return not self.verbose

    def resolve_model_dir(self) -> Path:
        """Return the model directory, falling back to $MAXENTSCAN_DIR.

        Raises:
            ConfigError: If neither is set.
        """
        if self.model_dir is not None:
            return self.model_dir
        env_dir = os.environ.get(MODEL_DIR_ENV)
        if env_dir:
            return Path(env_dir)
        raise ConfigError(
            f"MaxEntScan directory not specified (set model_dir or ${MODEL_DIR_ENV})"
        )


@attrs.define
class Config:
    """Main configuration container for MaxEntForge.

    Attributes:
        maxentscan: Scoring and annotation configuration.
    """

    maxentscan: MaxEntConfig = attrs.Factory(MaxEntConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration from a TOML file.

        Args:
            path: Path to configuration file.
                  If None, returns default configuration.

        Returns:
            Loaded configuration object.

        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            ConfigError: If configuration file is invalid.
        """
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e

        section = data.get("maxentscan", {})
        if not isinstance(section, dict):
            raise ConfigError(f"[maxentscan] must be a table in {path}")

        known = {a.name for a in attrs.fields(MaxEntConfig)}
        unknown = set(section) - known
        if unknown:
            raise ConfigError(
                f"Unknown [maxentscan] settings in {path}: {', '.join(sorted(unknown))}"
            )

        return cls(maxentscan=MaxEntConfig(**section))

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration.
        """
        return attrs.asdict(self)
