"""Blast radius engine: computes the impact and risk of changing a symbol.

Pipeline:
1. The SourceExtractor loads and parses the project
2. The DependencyGraph indexes imports into a reverse-import graph
3. Direct symbol users and transitive dependents of the target are merged
4. The RiskTagger and a RiskPolicy assign tags, levels and a total score
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from blastradius.config import ProjectConfig
from blastradius.engine.models import BlastRadiusResult
from blastradius.exceptions import EngineBusyError, EngineNotInitializedError
from blastradius.graph.dependency import DEFAULT_MAX_DEPTH, DependencyGraph
from blastradius.graph.models import DependencyEdge
from blastradius.parser.extractor import SourceExtractor
from blastradius.parser.models import SymbolLocation
from blastradius.risk.policy import DefaultRiskPolicy, RiskPolicy
from blastradius.risk.tagger import RiskTagger

logger = logging.getLogger("blastradius.engine")

# Distance assigned to files that import the target symbol directly
DIRECT_USAGE_DISTANCE = 1


class BlastRadiusEngine:
    """Owns the extractor, the dependency graph and the risk model of one project.

    The engine is either uninitialized or initialized. ``initialize`` moves it
    to initialized; ``dispose`` moves it back. ``rebuild`` re-extracts the
    whole project. Analysis methods raise EngineNotInitializedError until the
    engine is initialized. Only one build may run at a time; a concurrent
    ``initialize``/``rebuild`` raises EngineBusyError.
    """

    def __init__(
        self,
        extractor: SourceExtractor | None = None,
        tagger: RiskTagger | None = None,
        policy: RiskPolicy | None = None,
    ) -> None:
        self.extractor = extractor or SourceExtractor()
        self.graph = DependencyGraph(self.extractor)
        self.tagger = tagger or RiskTagger()
        self.policy: RiskPolicy = policy or DefaultRiskPolicy()
        self._initialized = False
        self._build_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ProjectConfig) -> BlastRadiusEngine:
        """Create an engine using the indexer and risk settings of a project config."""
        return cls(
            extractor=SourceExtractor(config.indexer),
            tagger=RiskTagger.from_config(config.risk),
        )

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, root_dir: str | Path, config_path: str | Path | None = None) -> None:
        """Load the project and build its dependency graph.

        Args:
            root_dir: Project root directory.
            config_path: Optional tsconfig.json describing the project files.
        """
        with self._exclusive_build():
            self._build(root_dir, config_path)

    def rebuild(self, root_dir: str | Path, config_path: str | Path | None = None) -> None:
        """Dispose and re-initialize after the source tree changed.

        The previous graph stays readable until the new one is swapped in.
        """
        with self._exclusive_build():
            self._initialized = False
            self.extractor.dispose()
            self._build(root_dir, config_path)

    def dispose(self) -> None:
        self._initialized = False
        self.extractor.dispose()
        self.graph.clear()

    def analyze(
        self,
        target_file: str | Path,
        target_symbol: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> BlastRadiusResult:
        """Compute the blast radius of changing `target_symbol` in `target_file`.

        Files importing the symbol directly are reported at distance 1; every
        other transitive dependent at its BFS hop distance. A target with no
        dependents yields an empty result scored from the target alone.
        """
        self._require_initialized()
        target = self.extractor.resolve_path(target_file)

        logger.info(f"Analyzing impact of {target_symbol} @ {os.path.basename(target)}")

        symbol_usages = self.graph.find_symbol_usages(target_symbol, target)
        transitive_deps = self.graph.get_transitive_dependents(target, max_depth)

        # Direct users first, so BFS distances never overwrite them
        impacted: dict[str, dict] = {}
        for usage_path in symbol_usages:
            impacted[usage_path] = {
                "path": usage_path,
                "symbols": self._export_names(usage_path),
                "distance": DIRECT_USAGE_DISTANCE,
            }
        for dep in transitive_deps:
            if dep.path not in impacted:
                impacted[dep.path] = {
                    "path": dep.path,
                    "symbols": self._export_names(dep.path),
                    "distance": dep.distance,
                }

        impacted_files = self.tagger.enrich_impacted_files(impacted.values())
        impacted_files.sort(key=lambda f: f.distance)

        target_tags = self.tagger.tag_all(target, [target_symbol])
        all_tags = set(target_tags)
        for impacted_file in impacted_files:
            all_tags |= impacted_file.risk_tags

        total_risk_score = self.policy.total_risk(
            self.tagger.calculate_risk_score(target_tags), impacted_files
        )

        result = BlastRadiusResult(
            target_file=target,
            target_symbol=target_symbol,
            impacted_files=impacted_files,
            total_risk_score=total_risk_score,
            risk_tags=all_tags,
            dependency_chain=self._collect_dependency_chain(target, impacted.keys()),
        )

        logger.info(
            f"Impact analysis done: {len(impacted_files)} files impacted, "
            f"risk {total_risk_score}"
        )
        return result

    def analyze_file(
        self, target_file: str | Path, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> BlastRadiusResult:
        """Analyze a file using its first exported symbol (or its base name)."""
        self._require_initialized()
        target = self.extractor.resolve_path(target_file)
        node = self.graph.get_node(target)
        if node is not None and node.exports:
            primary_symbol = node.exports[0].name
        else:
            primary_symbol = os.path.basename(target)
        return self.analyze(target, primary_symbol, max_depth)

    def find_symbol_definition(self, symbol_name: str) -> list[SymbolLocation]:
        self._require_initialized()
        return self.extractor.find_symbol_definition(symbol_name)

    def _build(self, root_dir: str | Path, config_path: str | Path | None) -> None:
        logger.info(f"Initializing blast radius engine: {root_dir}")
        self.extractor.initialize(root_dir, config_path)
        self.graph.build()
        self._initialized = True
        logger.info(f"Dependency graph built: {self.graph.size} files")

    @contextmanager
    def _exclusive_build(self) -> Iterator[None]:
        if not self._build_lock.acquire(blocking=False):
            raise EngineBusyError("A build is already in progress for this engine")
        try:
            yield
        finally:
            self._build_lock.release()

    def _export_names(self, file_path: str) -> list[str]:
        node = self.graph.get_node(file_path)
        return node.export_names if node is not None else []

    def _collect_dependency_chain(
        self, target: str, impacted_paths: Iterable[str]
    ) -> list[DependencyEdge]:
        relevant = {target, *impacted_paths}
        return [
            edge
            for edge in self.graph.get_all_edges()
            if edge.source in relevant or edge.target in relevant
        ]

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise EngineNotInitializedError()
