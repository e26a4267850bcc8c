"""Data models for file-level dependency edges."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class EdgeKind(str, Enum):
    """Types of file-to-file dependencies.

    Only IMPORT edges are produced by the graph builder; the other kinds are
    reserved for richer extractors.
    """

    IMPORT = "import"
    CALL = "call"
    TYPE_REFERENCE = "type-reference"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    REEXPORT = "reexport"


class DependencyEdge(BaseModel):
    """A dependency from `source` (the importer) to `target` (the imported file)."""

    source: str
    target: str
    kind: EdgeKind = EdgeKind.IMPORT
    symbols: list[str] = Field(default_factory=list)


class TransitiveDependent(BaseModel):
    """A file reached by walking reverse imports, with its hop distance."""

    path: str
    distance: int = Field(ge=0)
