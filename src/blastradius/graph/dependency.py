"""File-level dependency graph built from extracted imports."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

import networkx as nx

from blastradius.graph.models import DependencyEdge, EdgeKind, TransitiveDependent
from blastradius.parser.extractor import SourceExtractor
from blastradius.parser.models import DependencyNode

logger = logging.getLogger("blastradius.graph")

DEFAULT_MAX_DEPTH = 5


@dataclass(frozen=True)
class _GraphState:
    """One complete build. Replaced as a whole, never mutated after creation."""

    nodes: dict[str, DependencyNode] = field(default_factory=dict)
    edges: list[DependencyEdge] = field(default_factory=list)
    # importer -> imported; predecessors(T) is the reverse-import set of T
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)


class DependencyGraph:
    """Import graph over every file of a project.

    Holds the extracted node of each file, a reverse-import index (who
    imports me) and the flat list of import edges. ``build`` assembles a
    fresh state and swaps it in with a single assignment, so readers see
    either the previous build or the new one.
    """

    def __init__(self, extractor: SourceExtractor) -> None:
        self.extractor = extractor
        self._state = _GraphState()

    def build(self) -> None:
        """Extract every project file and index its imports.

        Files that fail to extract are skipped. Repeated calls replace the
        previous state entirely.
        """
        nodes: dict[str, DependencyNode] = {}
        for file_path in self.extractor.get_all_source_files():
            node = self.extractor.parse_file(file_path)
            if node is None:
                logger.debug(f"Skipping unparsable file: {file_path}")
                continue
            nodes[file_path] = node

        graph = nx.DiGraph()
        graph.add_nodes_from(nodes)
        edges: list[DependencyEdge] = []

        for file_path, node in nodes.items():
            for imp in node.imports:
                if not imp.resolved_path:
                    continue
                graph.add_edge(file_path, imp.resolved_path)
                edges.append(
                    DependencyEdge(
                        source=file_path,
                        target=imp.resolved_path,
                        kind=EdgeKind.IMPORT,
                        symbols=list(imp.symbols),
                    )
                )

        self._state = _GraphState(nodes=nodes, edges=edges, graph=graph)

    def clear(self) -> None:
        self._state = _GraphState()

    @property
    def size(self) -> int:
        return len(self._state.nodes)

    def __len__(self) -> int:
        return self.size

    @property
    def nodes(self) -> dict[str, DependencyNode]:
        return dict(self._state.nodes)

    @property
    def reverse_imports(self) -> dict[str, set[str]]:
        """Map of file -> files that import it (only files with importers)."""
        graph = self._state.graph
        return {
            target: set(graph.predecessors(target))
            for target in graph.nodes
            if graph.in_degree(target) > 0
        }

    def get_node(self, file_path: str) -> DependencyNode | None:
        return self._state.nodes.get(file_path)

    def get_dependents(self, file_path: str) -> list[str]:
        """Files that directly import `file_path`, in insertion order."""
        graph = self._state.graph
        if file_path not in graph:
            return []
        return list(graph.predecessors(file_path))

    def get_dependencies(self, file_path: str) -> list[str]:
        """Project files that `file_path` directly imports."""
        node = self._state.nodes.get(file_path)
        if node is None:
            return []
        return [imp.resolved_path for imp in node.imports if imp.resolved_path]

    def get_transitive_dependents(
        self, file_path: str, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> list[TransitiveDependent]:
        """Breadth-first walk over reverse imports starting at `file_path`.

        The start file is excluded from the result. Each file is reported once
        at its shortest hop distance; files beyond `max_depth` are not visited.
        """
        state = self._state
        visited = {file_path}
        result: list[TransitiveDependent] = []
        queue: deque[tuple[str, int]] = deque([(file_path, 0)])

        while queue:
            current, distance = queue.popleft()
            if distance > 0:
                result.append(TransitiveDependent(path=current, distance=distance))
            if distance >= max_depth:
                continue

            if current not in state.graph:
                continue
            for dependent in state.graph.predecessors(current):
                if dependent not in visited:
                    visited.add(dependent)
                    queue.append((dependent, distance + 1))

        return result

    def find_symbol_usages(self, symbol_name: str, source_file: str) -> list[str]:
        """Direct importers of `source_file` whose import names `symbol_name`.

        Matching is literal against the recorded import names: an aliased
        import ``{ foo as bar }`` is recorded as ``foo``, so a query for
        ``bar`` does not match it.
        """
        state = self._state
        usages: list[str] = []

        for dependent in self.get_dependents(source_file):
            node = state.nodes.get(dependent)
            if node is None:
                continue
            if any(
                imp.resolved_path == source_file and symbol_name in imp.symbols
                for imp in node.imports
            ):
                usages.append(dependent)

        return usages

    def get_edges_for_file(self, file_path: str) -> list[DependencyEdge]:
        return [
            edge.model_copy(deep=True)
            for edge in self._state.edges
            if edge.source == file_path or edge.target == file_path
        ]

    def get_all_edges(self) -> list[DependencyEdge]:
        return [edge.model_copy(deep=True) for edge in self._state.edges]

    def get_stats(self) -> dict:
        """Get graph statistics."""
        state = self._state
        total_imports = 0
        unresolved = 0
        kinds: dict[str, int] = {}

        for node in state.nodes.values():
            total_imports += len(node.imports)
            unresolved += sum(1 for imp in node.imports if not imp.resolved_path)
            for symbol in node.exports:
                kinds[symbol.kind.value] = kinds.get(symbol.kind.value, 0) + 1

        return {
            "files": len(state.nodes),
            "exports": sum(kinds.values()),
            "export_kinds": kinds,
            "imports": total_imports,
            "edges": len(state.edges),
            "unresolved_imports": unresolved,
            "files_with_dependents": sum(
                1 for n in state.graph.nodes if state.graph.in_degree(n) > 0
            ),
        }
