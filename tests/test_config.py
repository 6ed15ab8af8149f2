"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from maxentforge.config import (
    DEFAULT_CACHE_SIZE,
    MODEL_DIR_ENV,
    Config,
    MaxEntConfig,
)
from maxentforge.core.errors import ConfigError


class TestMaxEntConfig:
    """Test the [maxentscan] settings."""

    def test_defaults(self):
        config = MaxEntConfig()
        assert config.model_dir is None
        assert not config.run_swa
        assert not config.run_ncss
        assert not config.verbose
        assert config.scores_only
        assert config.cache_size == DEFAULT_CACHE_SIZE
        assert config.max_workers == 1

    def test_model_dir_converted(self):
        assert MaxEntConfig(model_dir="fordownload").model_dir == Path("fordownload")

    def test_negative_cache_size(self):
        with pytest.raises(ConfigError):
            MaxEntConfig(cache_size=-1)

    def test_zero_workers(self):
        with pytest.raises(ConfigError):
            MaxEntConfig(max_workers=0)

    def test_resolve_explicit(self, monkeypatch, tmp_path):
        """An explicit directory wins over the environment."""
        monkeypatch.setenv(MODEL_DIR_ENV, "/elsewhere")
        assert MaxEntConfig(model_dir=tmp_path).resolve_model_dir() == tmp_path

    def test_resolve_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv(MODEL_DIR_ENV, str(tmp_path))
        assert MaxEntConfig().resolve_model_dir() == tmp_path

    def test_resolve_missing(self, monkeypatch):
        monkeypatch.delenv(MODEL_DIR_ENV, raising=False)
        with pytest.raises(ConfigError, match=MODEL_DIR_ENV):
            MaxEntConfig().resolve_model_dir()


class TestConfigLoad:
    """Test TOML configuration files."""

    def test_no_path(self):
        assert Config.load() == Config()

    def test_load(self, tmp_path):
        path = tmp_path / "maxentforge.toml"
        path.write_text(
            "[maxentscan]\n"
            'model_dir = "/opt/maxentscan/fordownload"\n'
            "run_swa = true\n"
            "verbose = true\n"
            "cache_size = 100\n"
        )
        config = Config.load(path)
        assert config.maxentscan.model_dir == Path("/opt/maxentscan/fordownload")
        assert config.maxentscan.run_swa
        assert not config.maxentscan.run_ncss
        assert config.maxentscan.verbose
        assert config.maxentscan.cache_size == 100

    def test_empty_file(self, tmp_path):
        """A file without a [maxentscan] table gives defaults."""
        path = tmp_path / "empty.toml"
        path.write_text("")
        assert Config.load(path).maxentscan == MaxEntConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[maxentscan\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            Config.load(path)

    def test_unknown_setting(self, tmp_path):
        path = tmp_path / "typo.toml"
        path.write_text("[maxentscan]\nrun_swaa = true\n")
        with pytest.raises(ConfigError, match="run_swaa"):
            Config.load(path)

    def test_section_not_table(self, tmp_path):
        path = tmp_path / "flat.toml"
        path.write_text('maxentscan = "fordownload"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            Config.load(path)

    def test_to_dict(self):
        data = Config(maxentscan=MaxEntConfig(run_ncss=True)).to_dict()
        assert data["maxentscan"]["run_ncss"] is True
        assert data["maxentscan"]["cache_size"] == DEFAULT_CACHE_SIZE
