"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from blastradius.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from blastradius.exceptions import ConfigError


class TestConfig:
    def test_default_config(self):
        config = ProjectConfig()
        assert config.analysis.max_depth == 5
        assert config.analysis.risk_threshold == 60
        assert config.analysis.tsconfig_path is None
        assert config.risk.weights == {}
        assert len(config.indexer.exclude_patterns) > 0

    def test_save_and_load(self, tmp_path: Path):
        config = ProjectConfig(name="web-app")
        config.analysis.max_depth = 3
        config.risk.path_patterns = {"ledger": "payment"}

        save_config(tmp_path, config)
        loaded = load_config(tmp_path)

        assert loaded.name == "web-app"
        assert loaded.analysis.max_depth == 3
        assert loaded.risk.path_patterns == {"ledger": "payment"}

    def test_load_missing_returns_defaults(self, tmp_path: Path):
        loaded = load_config(tmp_path)
        assert loaded.name == tmp_path.name
        assert loaded.analysis.max_depth == 5

    def test_load_invalid_json(self, tmp_path: Path):
        (tmp_path / ".blastradius").mkdir()
        (tmp_path / ".blastradius" / "config.json").write_text("{ broken")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_load_invalid_values(self, tmp_path: Path):
        (tmp_path / ".blastradius").mkdir()
        (tmp_path / ".blastradius" / "config.json").write_text(
            '{"analysis": {"max_depth": -1}}'
        )
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_find_project_root(self, tmp_path: Path):
        # No .blastradius dir - should return None
        assert find_project_root(tmp_path) is None

        (tmp_path / ".blastradius").mkdir()
        assert find_project_root(tmp_path) == tmp_path.resolve()

        # Should find from subdirectory
        sub = tmp_path / "src" / "module"
        sub.mkdir(parents=True)
        assert find_project_root(sub) == tmp_path.resolve()

    def test_set_config_value(self):
        config = ProjectConfig()
        updated = set_config_value(config, "analysis.max_depth", 8)
        assert updated.analysis.max_depth == 8
        assert config.analysis.max_depth == 5

    def test_set_config_top_level(self):
        updated = set_config_value(ProjectConfig(), "name", "renamed")
        assert updated.name == "renamed"

    def test_set_config_invalid_key(self):
        config = ProjectConfig()
        with pytest.raises(KeyError):
            set_config_value(config, "nonexistent.key", "value")
        with pytest.raises(KeyError):
            set_config_value(config, "analysis.unknown", 1)

    def test_set_config_invalid_value(self):
        with pytest.raises(ConfigError):
            set_config_value(ProjectConfig(), "analysis.risk_threshold", 250)

    def test_exclude_patterns(self):
        config = ProjectConfig()
        assert "node_modules" in config.indexer.exclude_patterns
        assert "dist" in config.indexer.exclude_patterns
        assert ".git" in config.indexer.exclude_patterns
