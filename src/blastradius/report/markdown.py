"""Markdown rendering of a blast radius result.

Generates GitHub-flavored markdown with:
  - Risk score badge (color-coded)
  - Risk tags
  - Impacted files table, nearest first
  - Impacted files tree
"""

from __future__ import annotations

import os

from blastradius.engine.models import BlastRadiusResult
from blastradius.risk.models import RiskLevel, score_to_level

_LEVEL_BADGES = {
    RiskLevel.LOW: ("🟢", "LOW"),
    RiskLevel.MEDIUM: ("🟠", "MEDIUM"),
    RiskLevel.HIGH: ("🔴", "HIGH"),
    RiskLevel.CRITICAL: ("⛔", "CRITICAL"),
}


def render_blast_radius(
    result: BlastRadiusResult,
    root: str | None = None,
    max_files: int = 50,
) -> str:
    """Render a BlastRadiusResult as a markdown report.

    Args:
        result: The analysis result.
        root: Project root; file paths are shown relative to it when given.
        max_files: Maximum number of rows in the impacted files table.
    """
    sections: list[str] = []
    target = _display_path(result.target_file, root)

    sections.append("## Blast Radius Analysis")
    sections.append("")

    emoji, label = risk_badge(result.total_risk_score)
    direct = sum(1 for f in result.impacted_files if f.distance <= 1)
    sections.append(f"| {emoji} Risk | Target | Impacted Files | Direct |")
    sections.append("|:---:|:---|:---:|:---:|")
    sections.append(
        f"| **{label}** ({result.total_risk_score}) | "
        f"`{result.target_symbol}` in `{target}` | "
        f"{len(result.impacted_files)} | "
        f"{direct} |"
    )
    sections.append("")

    if result.risk_tags:
        tags = ", ".join(f"`{t.value}`" for t in sorted(result.risk_tags, key=lambda t: t.value))
        sections.append(f"**Risk tags:** {tags}")
        sections.append("")

    if not result.impacted_files:
        sections.append("> No other files are affected by this change.")
        sections.append("")
        return "\n".join(sections)

    sections.append("### Impacted Files")
    sections.append("")
    sections.append("| File | Distance | Risk | Tags |")
    sections.append("|:-----|:--------:|:----:|:-----|")
    for impacted in result.impacted_files[:max_files]:
        emoji, label = _LEVEL_BADGES[impacted.risk_level]
        tags = ", ".join(sorted(t.value for t in impacted.risk_tags)) or "-"
        sections.append(
            f"| `{_display_path(impacted.path, root)}` | "
            f"{impacted.distance} | "
            f"{emoji} {label} | "
            f"{tags} |"
        )
    if len(result.impacted_files) > max_files:
        sections.append(f"| ... and {len(result.impacted_files) - max_files} more | | | |")
    sections.append("")

    sections.append("<details>")
    sections.append("<summary>File tree</summary>")
    sections.append("")
    sections.append("```")
    sections.extend(
        render_file_tree([_display_path(f.path, root) for f in result.impacted_files])
    )
    sections.append("```")
    sections.append("")
    sections.append("</details>")
    sections.append("")

    return "\n".join(sections)


def risk_badge(score: int) -> tuple[str, str]:
    """Return (emoji, label) for a 0-100 risk score."""
    return _LEVEL_BADGES[score_to_level(score)]


def render_file_tree(files: list[str]) -> list[str]:
    """Render a list of file paths as an ASCII tree."""
    if not files:
        return []

    # Build tree structure
    tree: dict = {}
    for fp in sorted(files):
        parts = fp.replace("\\", "/").strip("/").split("/")
        node = tree
        for part in parts:
            node = node.setdefault(part, {})

    lines: list[str] = []
    _render_tree_recursive(tree, "", lines, is_root=True)
    return lines


def _render_tree_recursive(
    node: dict, prefix: str, lines: list[str], is_root: bool = False
) -> None:
    """Recursively render tree nodes."""
    items = list(node.items())
    for i, (name, children) in enumerate(items):
        is_last_item = i == len(items) - 1
        connector = "└── " if is_last_item else "├── "
        if is_root:
            connector = ""
            next_prefix = ""
        else:
            next_prefix = prefix + ("    " if is_last_item else "│   ")

        if children:
            lines.append(f"{prefix}{connector}{name}/")
            _render_tree_recursive(children, next_prefix, lines)
        else:
            lines.append(f"{prefix}{connector}{name}")


def _display_path(path: str, root: str | None) -> str:
    if root:
        try:
            rel = os.path.relpath(path, root)
        except ValueError:
            return path
        if not rel.startswith(".."):
            return rel.replace(os.sep, "/")
    return path
