"""Tests for the dependency graph."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from blastradius.graph.dependency import DependencyGraph
from blastradius.graph.models import EdgeKind
from blastradius.parser.extractor import SourceExtractor


def _p(root: Path, rel: str) -> str:
    return os.path.normpath(str(root / rel))


def _build(root: Path) -> DependencyGraph:
    extractor = SourceExtractor()
    extractor.initialize(root)
    graph = DependencyGraph(extractor)
    graph.build()
    return graph


class TestGraphBuild:
    def test_build_from_directory(self, tmp_project: Path):
        graph = _build(tmp_project)
        assert graph.size == 6
        assert len(graph) == 6

    def test_stats(self, tmp_project: Path):
        stats = _build(tmp_project).get_stats()
        assert stats["files"] == 6
        assert stats["imports"] == 6
        assert stats["edges"] == 5
        assert stats["unresolved_imports"] == 1
        assert stats["export_kinds"]["function"] == 4
        assert stats["export_kinds"]["enum"] == 1

    def test_edges(self, tmp_project: Path):
        graph = _build(tmp_project)
        edges = graph.get_edges_for_file(_p(tmp_project, "src/auth/session.ts"))
        pairs = {(e.source, e.target) for e in edges}
        assert pairs == {
            (_p(tmp_project, "src/auth/session.ts"), _p(tmp_project, "src/lib/crypto.ts")),
            (_p(tmp_project, "src/api/routes.ts"), _p(tmp_project, "src/auth/session.ts")),
        }
        assert all(e.kind == EdgeKind.IMPORT for e in edges)

    def test_unresolved_import_creates_no_edge(self, tmp_project: Path):
        graph = _build(tmp_project)
        consumer = _p(tmp_project, "src/consumer.ts")
        assert len(graph.get_node(consumer).imports) == 3
        assert len([e for e in graph.get_all_edges() if e.source == consumer]) == 2

    def test_idempotent_build(self, tmp_project: Path):
        graph = _build(tmp_project)
        nodes = graph.nodes
        edges = {(e.source, e.target, tuple(e.symbols)) for e in graph.get_all_edges()}
        reverse = graph.reverse_imports

        graph.build()

        assert graph.nodes == nodes
        assert {(e.source, e.target, tuple(e.symbols)) for e in graph.get_all_edges()} == edges
        assert graph.reverse_imports == reverse

    def test_rebuild_picks_up_changes(self, tmp_project: Path):
        graph = _build(tmp_project)
        (tmp_project / "src" / "extra.ts").write_text('import main from "./app";\n')
        graph.extractor.initialize(tmp_project)
        graph.build()
        assert graph.size == 7
        assert _p(tmp_project, "src/extra.ts") in graph.get_dependents(_p(tmp_project, "src/app.ts"))

    def test_reverse_imports_invariant(self, tmp_project: Path):
        graph = _build(tmp_project)
        reverse = graph.reverse_imports
        expected: dict[str, set[str]] = {}
        for path, node in graph.nodes.items():
            for imp in node.imports:
                if imp.resolved_path:
                    expected.setdefault(imp.resolved_path, set()).add(path)
        assert reverse == expected

    def test_clear(self, tmp_project: Path):
        graph = _build(tmp_project)
        graph.clear()
        assert graph.size == 0
        assert graph.get_all_edges() == []


class TestGraphQueries:
    def test_get_dependents(self, tmp_project: Path):
        graph = _build(tmp_project)
        crypto = _p(tmp_project, "src/lib/crypto.ts")
        assert set(graph.get_dependents(crypto)) == {
            _p(tmp_project, "src/auth/session.ts"),
            _p(tmp_project, "src/consumer.ts"),
        }

    def test_get_dependents_unknown_file(self, tmp_project: Path):
        assert _build(tmp_project).get_dependents("/nowhere.ts") == []

    def test_get_dependencies(self, tmp_project: Path):
        graph = _build(tmp_project)
        assert graph.get_dependencies(_p(tmp_project, "src/app.ts")) == [
            _p(tmp_project, "src/api/routes.ts")
        ]

    def test_transitive_dependents(self, tmp_project: Path):
        graph = _build(tmp_project)
        found = graph.get_transitive_dependents(_p(tmp_project, "src/lib/crypto.ts"))
        distances = {d.path: d.distance for d in found}
        assert distances == {
            _p(tmp_project, "src/auth/session.ts"): 1,
            _p(tmp_project, "src/consumer.ts"): 1,
            _p(tmp_project, "src/api/routes.ts"): 2,
            _p(tmp_project, "src/app.ts"): 3,
        }

    def test_transitive_dependents_excludes_start(self, tmp_project: Path):
        graph = _build(tmp_project)
        start = _p(tmp_project, "src/lib/crypto.ts")
        assert start not in {d.path for d in graph.get_transitive_dependents(start)}

    def test_cycle_terminates(self, make_project):
        root = make_project("cycle", {
            "a.ts": 'import { b } from "./b";\nexport const a = 1;\n',
            "b.ts": 'import { a } from "./a";\nexport const b = 2;\n',
        })
        graph = _build(root)
        found = graph.get_transitive_dependents(_p(root, "a.ts"), max_depth=5)
        assert [(d.path, d.distance) for d in found] == [(_p(root, "b.ts"), 1)]

    def test_depth_bound(self, make_project):
        files = {"f0.ts": "export const v0 = 0;\n"}
        for i in range(1, 10):
            files[f"f{i}.ts"] = f'import {{ v{i - 1} }} from "./f{i - 1}";\nexport const v{i} = v{i - 1};\n'
        root = make_project("chain10", files)

        graph = _build(root)
        found = graph.get_transitive_dependents(_p(root, "f0.ts"), max_depth=3)
        assert {d.path: d.distance for d in found} == {
            _p(root, "f1.ts"): 1,
            _p(root, "f2.ts"): 2,
            _p(root, "f3.ts"): 3,
        }

    def test_depth_zero(self, chain_project: Path):
        graph = _build(chain_project)
        assert graph.get_transitive_dependents(_p(chain_project, "a.ts"), max_depth=0) == []

    def test_find_symbol_usages(self, chain_project: Path):
        graph = _build(chain_project)
        a = _p(chain_project, "a.ts")
        assert graph.find_symbol_usages("foo", a) == [_p(chain_project, "b.ts")]
        assert graph.find_symbol_usages("missing", a) == []

    def test_find_symbol_usages_aliased_import(self, make_project):
        root = make_project("alias", {
            "a.ts": "export function foo() {}\n",
            "b.ts": 'import { foo as bar } from "./a";\nbar();\n',
        })
        graph = _build(root)
        a = _p(root, "a.ts")
        assert graph.find_symbol_usages("foo", a) == [_p(root, "b.ts")]
        assert graph.find_symbol_usages("bar", a) == []

    def test_find_symbol_usages_any_import_statement(self, make_project):
        root = make_project("multi", {
            "a.ts": "export const x = 1;\nexport const y = 2;\n",
            "b.ts": 'import { x } from "./a";\nimport { y } from "./a";\n',
        })
        graph = _build(root)
        assert graph.find_symbol_usages("y", _p(root, "a.ts")) == [_p(root, "b.ts")]

    def test_edges_are_copies(self, chain_project: Path):
        graph = _build(chain_project)
        edges = graph.get_all_edges()
        edges[0].symbols.append("tampered")
        edges.clear()
        assert len(graph.get_all_edges()) == 2
        assert all("tampered" not in e.symbols for e in graph.get_all_edges())

    def test_nodes_is_a_copy(self, chain_project: Path):
        graph = _build(chain_project)
        graph.nodes.clear()
        assert graph.size == 3

    @pytest.mark.parametrize("rel", ["a.ts", "b.ts", "c.ts"])
    def test_get_node(self, chain_project: Path, rel: str):
        graph = _build(chain_project)
        node = graph.get_node(_p(chain_project, rel))
        assert node is not None
        assert node.file_path == _p(chain_project, rel)
