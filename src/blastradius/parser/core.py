"""Project file discovery."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

from blastradius.config import IndexerConfig
from blastradius.parser.models import DEFAULT_SOURCE_EXTENSIONS


def collect_files(
    root: str | Path,
    config: IndexerConfig | None = None,
    extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS,
) -> list[str]:
    """Collect all source files under `root`, respecting exclusion patterns.

    Returns absolute, normalized paths in sorted order.
    """
    root = Path(root).resolve()
    if config is None:
        config = IndexerConfig()

    files = []
    max_size = config.max_file_size_kb * 1024

    all_exclude = list(config.exclude_patterns)
    if config.use_gitignore:
        all_exclude += _read_gitignore(root)

    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)

        # Filter out excluded directories
        dirnames[:] = [
            d
            for d in dirnames
            if not should_exclude(os.path.join(rel_dir, d) if rel_dir != "." else d, all_exclude)
        ]

        for filename in filenames:
            rel_path = (
                os.path.join(rel_dir, filename) if rel_dir != "." else filename
            )

            if should_exclude(rel_path, all_exclude):
                continue

            if not has_source_extension(filename, extensions):
                continue

            full_path = os.path.join(dirpath, filename)

            try:
                if os.stat(full_path).st_size > max_size:
                    continue
            except OSError:
                continue

            files.append(os.path.normpath(full_path))

    return sorted(files)


def has_source_extension(filename: str, extensions: tuple[str, ...]) -> bool:
    """Check a file name against a set of extensions (``.d.ts`` counts as ``.ts``)."""
    lower = filename.lower()
    return any(lower.endswith(ext) for ext in extensions)


def should_exclude(path: str, patterns: list[str]) -> bool:
    """Check if a path matches any exclusion pattern."""
    path = path.replace("\\", "/")
    path_parts = Path(path).parts
    for pattern in patterns:
        # Check against full path
        if fnmatch.fnmatch(path, pattern):
            return True
        # Check against any path component
        for part in path_parts:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False


def _read_gitignore(root: Path) -> list[str]:
    """Read .gitignore patterns from the project root."""
    gitignore = root / ".gitignore"
    if not gitignore.exists():
        return []

    patterns = []
    try:
        for line in gitignore.read_text().splitlines():
            line = line.strip()
            if line and not line.startswith("#") and not line.startswith("!"):
                # Normalize the pattern
                line = line.strip("/")
                if line:
                    patterns.append(line)
    except OSError:
        pass
    return patterns
