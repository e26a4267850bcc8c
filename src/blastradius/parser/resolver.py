"""Resolve import module specifiers to project file identities."""

from __future__ import annotations

import os
from collections.abc import Iterable

from blastradius.parser.tsconfig import TsConfig

# Extensions appended to an extension-less specifier, in priority order
RESOLVE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".d.ts", ".js", ".jsx")

# ESM-style specifiers name the emitted file; the source may be TypeScript
_EMITTED_TO_SOURCE: dict[str, tuple[str, ...]] = {
    ".js": (".ts", ".tsx"),
    ".jsx": (".tsx",),
}


class ModuleResolver:
    """Best-effort module resolution restricted to a known set of project files.

    A specifier resolves only if it maps to a file in ``project_files``;
    everything else (packages, unknown aliases, files outside the project)
    resolves to None.
    """

    def __init__(self, project_files: Iterable[str], tsconfig: TsConfig | None = None) -> None:
        self._files = frozenset(project_files)
        self._tsconfig = tsconfig

    def resolve(self, specifier: str, importer: str) -> str | None:
        """Resolve `specifier` as imported from the file `importer`."""
        if not specifier:
            return None

        for base in self._candidate_bases(specifier, importer):
            resolved = self._try_extensions(base)
            if resolved:
                return resolved
        return None

    def _candidate_bases(self, specifier: str, importer: str) -> list[str]:
        if specifier.startswith("./") or specifier.startswith("../") or specifier in (".", ".."):
            importer_dir = os.path.dirname(importer)
            return [os.path.normpath(os.path.join(importer_dir, specifier))]

        if os.path.isabs(specifier):
            return [os.path.normpath(specifier)]

        bases: list[str] = []
        tsconfig = self._tsconfig
        if tsconfig is None or tsconfig.base_url is None:
            return bases

        for pattern, targets in tsconfig.paths.items():
            matched = _match_path_pattern(pattern, specifier)
            if matched is None:
                continue
            for target in targets:
                substituted = target.replace("*", matched, 1)
                bases.append(os.path.normpath(os.path.join(tsconfig.base_url, substituted)))

        # Non-relative specifiers also resolve against baseUrl
        bases.append(os.path.normpath(os.path.join(tsconfig.base_url, specifier)))
        return bases

    def _try_extensions(self, base: str) -> str | None:
        files = self._files

        if base in files:
            return base

        root, ext = os.path.splitext(base)
        for source_ext in _EMITTED_TO_SOURCE.get(ext.lower(), ()):
            candidate = root + source_ext
            if candidate in files:
                return candidate

        for ext in RESOLVE_EXTENSIONS:
            candidate = base + ext
            if candidate in files:
                return candidate

        for ext in RESOLVE_EXTENSIONS:
            candidate = os.path.join(base, "index" + ext)
            if candidate in files:
                return candidate

        return None


def _match_path_pattern(pattern: str, specifier: str) -> str | None:
    """Match a tsconfig ``paths`` key; return the text captured by ``*``."""
    if "*" not in pattern:
        return "" if pattern == specifier else None
    prefix, _, suffix = pattern.partition("*")
    if (
        specifier.startswith(prefix)
        and specifier.endswith(suffix)
        and len(specifier) >= len(prefix) + len(suffix)
    ):
        return specifier[len(prefix):len(specifier) - len(suffix)]
    return None
