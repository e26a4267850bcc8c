"""TypeScript/JavaScript source extraction for blastradius."""

from blastradius.parser.extractor import SourceExtractor
from blastradius.parser.models import (
    DependencyNode,
    ImportInfo,
    SymbolInfo,
    SymbolKind,
    SymbolLocation,
)

__all__ = [
    "DependencyNode",
    "ImportInfo",
    "SourceExtractor",
    "SymbolInfo",
    "SymbolKind",
    "SymbolLocation",
]
