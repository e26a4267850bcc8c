#!/usr/bin/env python3
"""Demo: Using blastradius as a Python library.

This shows how to use blastradius programmatically, not just as a CLI tool.
Run it from the root of a TypeScript or JavaScript project.
"""

from pathlib import Path

from blastradius import BlastRadiusEngine, RiskLevel
from blastradius.report import render_blast_radius


def main():
    # Point at any TS/JS project
    project_root = Path(".").resolve()

    # 1. Build the dependency graph
    print("Building dependency graph...")
    engine = BlastRadiusEngine()
    engine.initialize(project_root)

    stats = engine.graph.get_stats()
    print(f"  Files: {stats['files']}")
    print(f"  Exports: {stats['exports']}")
    print(f"  Import edges: {stats['edges']}")
    print(f"  Unresolved imports: {stats['unresolved_imports']}")

    # 2. Pick the most imported file as the change target
    reverse = engine.graph.reverse_imports
    if not reverse:
        print("\nNo file imports another project file; nothing to analyze.")
        return
    target = max(reverse, key=lambda path: len(reverse[path]))
    print(f"\n--- Most imported file: {target} ({len(reverse[target])} importers) ---")

    # 3. Blast radius of its first export
    result = engine.analyze_file(target)
    print(f"  Symbol: {result.target_symbol}")
    print(f"  Risk score: {result.total_risk_score}")
    print(f"  Risk tags: {', '.join(sorted(t.value for t in result.risk_tags)) or '-'}")
    print(f"  Impacted files: {result.impacted_count}")
    for impacted in result.impacted_files[:10]:
        print(f"    [{impacted.distance}] {impacted.path} ({impacted.risk_level.value})")

    critical = result.files_at_level(RiskLevel.CRITICAL)
    if critical:
        print(f"  Critical files: {len(critical)}")

    # 4. Where is the symbol declared?
    print(f"\n--- Definitions of '{result.target_symbol}' ---")
    for loc in engine.find_symbol_definition(result.target_symbol):
        print(f"  {loc.file_path}:{loc.line}")

    # 5. Markdown report, e.g. for a pull request comment
    print("\n--- Markdown report ---")
    print(render_blast_radius(result, root=str(project_root)))


if __name__ == "__main__":
    main()
