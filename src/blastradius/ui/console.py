"""Rich-powered console output for blastradius."""

from __future__ import annotations

import os

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from blastradius import __version__
from blastradius.engine.models import BlastRadiusResult
from blastradius.graph.models import TransitiveDependent
from blastradius.parser.models import SymbolLocation
from blastradius.risk.models import RiskLevel, RiskTag, score_to_level

_LEVEL_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold red",
}


class Console:
    """Terminal output for blastradius using Rich."""

    def __init__(self, root: str | None = None) -> None:
        self.console = RichConsole()
        self.root = root

    def banner(self) -> None:
        """Show the blastradius banner."""
        self.console.print(
            Panel(
                f"[bold cyan]blastradius[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Impact and risk of changing TypeScript/JavaScript code[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_stats(self, stats: dict) -> None:
        """Display dependency graph statistics in a table."""
        table = Table(title="Dependency Graph Statistics", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right", style="cyan")

        table.add_row("Files", str(stats.get("files", 0)))
        table.add_row("Exports", str(stats.get("exports", 0)))
        table.add_row("Imports", str(stats.get("imports", 0)))
        table.add_row("Import Edges", str(stats.get("edges", 0)))
        table.add_row("Unresolved Imports", str(stats.get("unresolved_imports", 0)))
        table.add_row("Files With Dependents", str(stats.get("files_with_dependents", 0)))

        kinds = stats.get("export_kinds", {})
        if kinds:
            table.add_section()
            for kind, count in sorted(kinds.items(), key=lambda x: -x[1]):
                table.add_row(f"  {kind} exports", str(count))

        self.console.print(table)

    def show_blast_radius(self, result: BlastRadiusResult, threshold: int | None = None) -> None:
        """Display a blast radius result."""
        score = result.total_risk_score
        level = score_to_level(score)
        color = _LEVEL_COLORS[level]

        self.console.print(
            Panel(
                f"[bold]Target:[/bold] {result.target_symbol} "
                f"[dim]in[/dim] [cyan]{self._rel(result.target_file)}[/cyan]\n"
                f"[bold]Risk Score:[/bold] [{color}]{score} ({level.value})[/{color}]\n"
                f"[bold]Impacted Files:[/bold] {len(result.impacted_files)}\n"
                f"[bold]Risk Tags:[/bold] {self._tags(result.risk_tags) or '-'}",
                title="[bold]Blast Radius[/bold]",
                border_style=color,
            )
        )

        if result.impacted_files:
            table = Table(border_style="dim")
            table.add_column("Distance", justify="right")
            table.add_column("File", style="cyan")
            table.add_column("Risk")
            table.add_column("Tags", style="dim")
            for impacted in result.impacted_files:
                lcolor = _LEVEL_COLORS[impacted.risk_level]
                table.add_row(
                    str(impacted.distance),
                    self._rel(impacted.path),
                    f"[{lcolor}]{impacted.risk_level.value}[/{lcolor}]",
                    self._tags(impacted.risk_tags),
                )
            self.console.print(table)
        else:
            self.info("No other files are affected by this change.")

        if threshold is not None and score >= threshold:
            self.warning(f"Risk score {score} is at or above the threshold ({threshold})")

    def show_dependents(self, file_path: str, dependents: list[TransitiveDependent]) -> None:
        """Display transitive dependents as a tree grouped by distance."""
        tree = Tree(f"[bold cyan]{self._rel(file_path)}[/bold cyan]")
        by_distance: dict[int, Tree] = {}
        for dep in dependents:
            branch = by_distance.get(dep.distance)
            if branch is None:
                branch = tree.add(f"[bold]distance {dep.distance}[/bold]")
                by_distance[dep.distance] = branch
            branch.add(f"[cyan]{self._rel(dep.path)}[/cyan]")
        self.console.print(tree)

    def show_definitions(self, symbol_name: str, locations: list[SymbolLocation]) -> None:
        for loc in locations:
            self.console.print(
                f"  [bold]{symbol_name}[/bold] at [cyan]{self._rel(loc.file_path)}:{loc.line}[/cyan]"
            )

    def show_tags(self, file_path: str, tags: set[RiskTag], score: int) -> None:
        level = score_to_level(score)
        color = _LEVEL_COLORS[level]
        self.console.print(
            f"  [cyan]{file_path}[/cyan]: {self._tags(tags) or '-'} "
            f"[{color}]{score} ({level.value})[/{color}]"
        )

    def _rel(self, path: str) -> str:
        if self.root:
            rel = os.path.relpath(path, self.root)
            if not rel.startswith(".."):
                return rel
        return path

    @staticmethod
    def _tags(tags: set[RiskTag]) -> str:
        return ", ".join(sorted(t.value for t in tags))
