"""Configuration management for blastradius."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from blastradius.exceptions import ConfigError

BLASTRADIUS_DIR = ".blastradius"
CONFIG_FILE = "config.json"


class IndexerConfig(BaseModel):
    """Source discovery configuration."""

    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "node_modules",
            ".git",
            ".blastradius",
            "dist",
            "build",
            "out",
            "coverage",
            ".next",
            ".turbo",
            ".venv",
            "venv",
            "*.min.js",
            "*.map",
            "*.lock",
            "package-lock.json",
            "yarn.lock",
        ]
    )
    max_file_size_kb: int = 500
    use_gitignore: bool = True


class AnalysisConfig(BaseModel):
    """Blast radius analysis defaults."""

    max_depth: int = Field(default=5, ge=0)
    risk_threshold: int = Field(default=60, ge=0, le=100)
    tsconfig_path: str | None = None


class RiskConfig(BaseModel):
    """Overrides for the risk tagger tables.

    Keys of ``weights`` are risk tag values (e.g. ``"auth"``). Entries in
    ``path_patterns`` and ``symbol_keywords`` map a lowercase substring to a
    risk tag value and are merged over the built-in tables.
    """

    weights: dict[str, int] = Field(default_factory=dict)
    path_patterns: dict[str, str] = Field(default_factory=dict)
    symbol_keywords: dict[str, str] = Field(default_factory=dict)


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    risk: RiskConfig = Field(default_factory=RiskConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .blastradius directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / BLASTRADIUS_DIR).is_dir():
            return current
        current = current.parent
    if (current / BLASTRADIUS_DIR).is_dir():
        return current
    return None


def get_blastradius_dir(root: Path) -> Path:
    """Get the .blastradius directory for a project root."""
    return root / BLASTRADIUS_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .blastradius/config.json."""
    config_path = get_blastradius_dir(root) / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return ProjectConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .blastradius/config.json."""
    br_dir = get_blastradius_dir(root)
    br_dir.mkdir(parents=True, exist_ok=True)
    config_path = br_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'analysis.max_depth')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e}") from e
