"""Source symbol extractor: the parse context over one project."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from blastradius.config import IndexerConfig
from blastradius.exceptions import ConfigError, NotInitializedError, ParserError
from blastradius.parser.core import collect_files
from blastradius.parser.models import DependencyNode, SymbolLocation, detect_language
from blastradius.parser.resolver import ModuleResolver
from blastradius.parser.tree_sitter_parser import (
    collect_declarations,
    extract_dependency_node,
    is_available,
    parse_source,
)
from blastradius.parser.tsconfig import TsConfig, collect_tsconfig_files, load_tsconfig

logger = logging.getLogger("blastradius.parser")


@dataclass(frozen=True)
class _Project:
    root: str
    files: tuple[str, ...]
    file_set: frozenset[str]
    resolver: ModuleResolver
    tsconfig: TsConfig | None = None


class SourceExtractor:
    """Extracts DependencyNodes from the source files of one project.

    The project is either discovered recursively under a root directory or
    described by an explicit tsconfig.json. Every query method requires
    ``initialize`` to have been called first.
    """

    def __init__(self, indexer_config: IndexerConfig | None = None) -> None:
        self.indexer_config = indexer_config or IndexerConfig()
        self._project: _Project | None = None

    @property
    def is_initialized(self) -> bool:
        return self._project is not None

    @property
    def root(self) -> str:
        return self._require_project().root

    def initialize(self, root_dir: str | Path, config_path: str | Path | None = None) -> None:
        """Load the project rooted at `root_dir`.

        Args:
            root_dir: Project root directory.
            config_path: Optional tsconfig.json describing the project files.
        """
        root = os.path.normpath(str(Path(root_dir).resolve()))
        if not os.path.isdir(root):
            raise ConfigError(f"Project root is not a directory: {root_dir}")

        tsconfig = None
        if config_path:
            tsconfig = load_tsconfig(config_path)
            files = collect_tsconfig_files(tsconfig, self.indexer_config)
        else:
            files = collect_files(root, self.indexer_config)

        self._project = _Project(
            root=root,
            files=tuple(files),
            file_set=frozenset(files),
            resolver=ModuleResolver(files, tsconfig),
            tsconfig=tsconfig,
        )
        logger.debug(f"Loaded {len(files)} source files under {root}")

    def dispose(self) -> None:
        self._project = None

    def resolve_path(self, file_path: str | Path) -> str:
        """Normalize a path to a file identity; relative paths are taken from the root.

        The root is stored with symlinks resolved, so a path reached through a
        symlinked directory is mapped onto its real location.
        """
        project = self._require_project()
        path = str(file_path)
        if not os.path.isabs(path):
            path = os.path.join(project.root, path)
        path = os.path.normpath(path)
        if path in project.file_set:
            return path
        return os.path.realpath(path)

    def get_all_source_files(self) -> list[str]:
        return list(self._require_project().files)

    def parse_file(self, file_path: str | Path) -> DependencyNode | None:
        """Extract the exports and imports of a project file.

        Returns None if the file is not part of the loaded project or cannot
        be read.
        """
        project = self._require_project()
        path = self.resolve_path(file_path)
        if path not in project.file_set:
            return None

        root = self._parse(path)
        if root is None:
            return None

        resolver = project.resolver
        return extract_dependency_node(
            path, root, lambda specifier: resolver.resolve(specifier, path)
        )

    def find_symbol_definition(self, symbol_name: str) -> list[SymbolLocation]:
        """Find every top-level declaration named `symbol_name`, exported or not."""
        project = self._require_project()
        results: list[SymbolLocation] = []

        for path in project.files:
            root = self._parse(path)
            if root is None:
                continue
            for decl in collect_declarations(root):
                if decl.name == symbol_name:
                    results.append(SymbolLocation(file_path=path, line=decl.line))

        return results

    def _parse(self, path: str):
        language = detect_language(path)
        if language is None or not is_available(language):
            logger.debug(f"No grammar available for {path}")
            return None

        try:
            source = Path(path).read_bytes()
            return parse_source(source, language)
        except (OSError, ParserError) as e:
            logger.debug(f"Skipping {path}: {e}")
            return None

    def _require_project(self) -> _Project:
        if self._project is None:
            raise NotInitializedError("SourceExtractor")
        return self._project
