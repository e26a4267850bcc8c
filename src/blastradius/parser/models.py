"""Data models for extracted source symbols and imports."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SymbolKind(str, Enum):
    """Kinds of exported declarations."""

    FUNCTION = "function"
    CLASS = "class"
    VARIABLE = "variable"
    INTERFACE = "interface"
    TYPE = "type"
    ENUM = "enum"


class SymbolInfo(BaseModel):
    """An exported declaration of a source file."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: SymbolKind
    line: int  # 1-based definition line
    references: frozenset[str] = Field(default_factory=frozenset)


class ImportInfo(BaseModel):
    """A single import statement.

    ``symbols`` holds named bindings in declaration order, then the default
    binding, then ``"* as <name>"`` for a namespace binding.
    ``resolved_path`` is None when the specifier does not point into the
    project (e.g. a package from node_modules).
    """

    symbols: list[str] = Field(default_factory=list)
    source: str
    resolved_path: str | None = None


class DependencyNode(BaseModel):
    """Exports and imports extracted from a single file."""

    file_path: str
    exports: list[SymbolInfo] = Field(default_factory=list)
    imports: list[ImportInfo] = Field(default_factory=list)

    @property
    def export_names(self) -> list[str]:
        return [s.name for s in self.exports]


class SymbolLocation(BaseModel):
    """Where a symbol is declared."""

    file_path: str
    line: int


# Language detection by file extension
EXTENSION_LANGUAGE_MAP: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
}

# Extensions discovered when no explicit project configuration is given
DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")


def detect_language(file_path: str) -> str | None:
    """Detect the grammar to use from a file extension."""
    from pathlib import Path

    ext = Path(file_path).suffix.lower()
    return EXTENSION_LANGUAGE_MAP.get(ext)
