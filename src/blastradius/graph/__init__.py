"""File-level dependency graph."""

from blastradius.graph.dependency import DependencyGraph
from blastradius.graph.models import DependencyEdge, EdgeKind, TransitiveDependent

__all__ = ["DependencyGraph", "DependencyEdge", "EdgeKind", "TransitiveDependent"]
