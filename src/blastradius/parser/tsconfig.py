"""Loading of explicit TypeScript project configurations (tsconfig.json)."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from blastradius.config import IndexerConfig
from blastradius.exceptions import ConfigError
from blastradius.parser.core import has_source_extension, should_exclude

_TS_EXTENSIONS = (".ts", ".tsx")
_JS_EXTENSIONS = (".js", ".jsx")
_DEFAULT_TSCONFIG_EXCLUDE = ["node_modules", "bower_components", "jspm_packages"]
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


@dataclass
class TsConfig:
    """The parts of a tsconfig.json that affect file discovery and resolution."""

    config_path: str
    files: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    allow_js: bool = False
    base_url: str | None = None
    paths: dict[str, list[str]] = field(default_factory=dict)

    @property
    def config_dir(self) -> str:
        return os.path.dirname(self.config_path)

    @property
    def extensions(self) -> tuple[str, ...]:
        return _TS_EXTENSIONS + _JS_EXTENSIONS if self.allow_js else _TS_EXTENSIONS


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments and trailing commas outside of strings."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return _TRAILING_COMMA.sub(r"\1", "".join(out))


def load_tsconfig(config_path: str | Path) -> TsConfig:
    """Read a tsconfig.json file.

    ``extends`` is not followed; options must be declared in the file itself.
    """
    config_path = os.path.normpath(str(Path(config_path).resolve()))
    try:
        raw = Path(config_path).read_text(encoding="utf-8")
        data = json.loads(strip_json_comments(raw))
    except OSError as e:
        raise ConfigError(f"Cannot read project config {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid project config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config {config_path}: expected an object")

    options = data.get("compilerOptions") or {}
    config = TsConfig(
        config_path=config_path,
        files=list(data.get("files") or []),
        include=list(data.get("include") or []),
        exclude=list(data.get("exclude") or _DEFAULT_TSCONFIG_EXCLUDE),
        allow_js=bool(options.get("allowJs", False)),
        paths={k: list(v) for k, v in (options.get("paths") or {}).items()},
    )

    base_url = options.get("baseUrl")
    if base_url is not None:
        config.base_url = os.path.normpath(os.path.join(config.config_dir, base_url))
    elif config.paths:
        # paths without baseUrl resolve relative to the config file
        config.base_url = config.config_dir

    # Neither files nor include given: everything under the config directory
    if not config.files and not config.include:
        config.include = ["**/*"]

    return config


def collect_tsconfig_files(config: TsConfig, indexer: IndexerConfig | None = None) -> list[str]:
    """Expand files/include/exclude of a tsconfig into absolute source paths."""
    if indexer is None:
        indexer = IndexerConfig()

    base = Path(config.config_dir)
    found: set[str] = set()

    for rel in config.files:
        full = os.path.normpath(os.path.join(config.config_dir, rel))
        if os.path.isfile(full):
            found.add(full)

    exclude = config.exclude + indexer.exclude_patterns
    for pattern in config.include:
        pattern = pattern.replace("\\", "/").rstrip("/")
        # A bare directory (no wildcard, no extension) includes everything below it
        last = pattern.rsplit("/", 1)[-1]
        if "*" not in last and "." not in last:
            pattern = f"{pattern}/**/*"
        for path in base.glob(pattern):
            if not path.is_file():
                continue
            rel_path = path.relative_to(base).as_posix()
            if should_exclude(rel_path, exclude):
                continue
            if not has_source_extension(path.name, config.extensions):
                continue
            found.add(os.path.normpath(str(path)))

    return sorted(found)
