"""Command-line interface for blastradius."""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import click

from blastradius import __version__
from blastradius.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from blastradius.exceptions import BlastRadiusError
from blastradius.ui.console import Console

console = Console()


def _get_project_root(path: str | None = None) -> Path:
    """Resolve the project root: --path, then the nearest initialized project, then cwd."""
    if path:
        root = Path(path).resolve()
        if not root.is_dir():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root

    return find_project_root() or Path.cwd().resolve()


def _load_config(root: Path) -> ProjectConfig:
    try:
        return load_config(root)
    except BlastRadiusError as e:
        console.error(str(e))
        sys.exit(1)


def _build_engine(root: Path, config: ProjectConfig, tsconfig: str | None, quiet: bool = False):
    """Create an engine for `root` and build its dependency graph."""
    from blastradius.engine.blast_radius import BlastRadiusEngine

    tsconfig_path = tsconfig or config.analysis.tsconfig_path
    if tsconfig_path and not Path(tsconfig_path).is_absolute():
        tsconfig_path = str(root / tsconfig_path)

    console.root = str(root)
    try:
        engine = BlastRadiusEngine.from_config(config)
        start_time = time.time()
        engine.initialize(root, tsconfig_path)
    except BlastRadiusError as e:
        console.error(str(e))
        sys.exit(1)

    if not quiet:
        elapsed = time.time() - start_time
        console.success(f"Built dependency graph of {engine.graph.size} files in {elapsed:.1f}s")
    return engine


def _resolve_target(engine, file: str) -> str:
    """Map a user-supplied file to a file identity (cwd-relative paths first)."""
    candidate = Path(file)
    if not candidate.is_absolute() and candidate.exists():
        candidate = candidate.resolve()
    return engine.extractor.resolve_path(candidate)


@click.group()
@click.version_option(version=__version__, prog_name="blastradius")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """blastradius - estimate what a code change affects and how risky it is."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console.console, show_path=False)],
        )


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--tsconfig", default=None, help="tsconfig.json describing the project files.")
def init(path: str | None, tsconfig: str | None):
    """Initialize blastradius for a repository and report its dependency graph."""
    root = Path(path or ".").resolve()
    if not root.is_dir():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing blastradius for: {root}")

    config = _load_config(root)
    config.name = root.name
    config.root_path = str(root)
    if tsconfig:
        config.analysis.tsconfig_path = tsconfig

    save_config(root, config)
    console.success("Configuration saved to .blastradius/")

    engine = _build_engine(root, config, None)
    console.show_stats(engine.graph.get_stats())


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--tsconfig", default=None, help="tsconfig.json describing the project files.")
def status(path: str | None, tsconfig: str | None):
    """Show dependency graph statistics."""
    root = _get_project_root(path)
    config = _load_config(root)
    engine = _build_engine(root, config, tsconfig)
    console.info(f"Project: {root.name}")
    console.show_stats(engine.graph.get_stats())


@main.command()
@click.argument("file")
@click.argument("symbol", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--depth", "-d", default=None, type=int, help="Max traversal depth.")
@click.option("--tsconfig", default=None, help="tsconfig.json describing the project files.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "markdown"]),
    default="text",
    help="Output format.",
)
def analyze(
    file: str, symbol: str | None, path: str | None, depth: int | None,
    tsconfig: str | None, output_format: str,
):
    """Analyze the blast radius of changing SYMBOL in FILE.

    Without SYMBOL, the file's first exported symbol is used.

    Examples:

        blastradius analyze src/auth/session.ts createSession

        blastradius analyze src/db/client.ts --format markdown
    """
    root = _get_project_root(path)
    config = _load_config(root)
    quiet = output_format != "text"
    engine = _build_engine(root, config, tsconfig, quiet=quiet)

    max_depth = depth if depth is not None else config.analysis.max_depth
    target = _resolve_target(engine, file)
    if engine.graph.get_node(target) is None and not quiet:
        console.warning(f"{file} is not part of the analyzed project")

    try:
        if symbol:
            result = engine.analyze(target, symbol, max_depth)
        else:
            result = engine.analyze_file(target, max_depth)
    except BlastRadiusError as e:
        console.error(str(e))
        sys.exit(1)

    if output_format == "json":
        click.echo(result.model_dump_json(indent=2))
    elif output_format == "markdown":
        from blastradius.report.markdown import render_blast_radius

        click.echo(render_blast_radius(result, root=str(root)))
    else:
        console.show_blast_radius(result, threshold=config.analysis.risk_threshold)


@main.command()
@click.argument("file")
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--depth", "-d", default=None, type=int, help="Max traversal depth.")
@click.option("--tsconfig", default=None, help="tsconfig.json describing the project files.")
def dependents(file: str, path: str | None, depth: int | None, tsconfig: str | None):
    """List the files that depend on FILE, directly or transitively."""
    root = _get_project_root(path)
    config = _load_config(root)
    engine = _build_engine(root, config, tsconfig)

    max_depth = depth if depth is not None else config.analysis.max_depth
    target = _resolve_target(engine, file)
    found = engine.graph.get_transitive_dependents(target, max_depth)

    if found:
        console.info(f"{len(found)} file(s) depend on '{file}':")
        console.show_dependents(target, found)
    else:
        console.warning(f"No dependents found for '{file}'")


@main.command()
@click.argument("symbol_name")
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--tsconfig", default=None, help="tsconfig.json describing the project files.")
def find(symbol_name: str, path: str | None, tsconfig: str | None):
    """Find where a symbol is declared."""
    root = _get_project_root(path)
    config = _load_config(root)
    engine = _build_engine(root, config, tsconfig, quiet=True)

    locations = engine.find_symbol_definition(symbol_name)
    if locations:
        console.info(f"Found {len(locations)} definition(s) of '{symbol_name}':")
        console.show_definitions(symbol_name, locations)
    else:
        console.warning(f"No definitions found for '{symbol_name}'")


@main.command()
@click.argument("file_path")
@click.argument("symbols", nargs=-1)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def tags(file_path: str, symbols: tuple[str, ...], path: str | None):
    """Show the risk tags and score of a path and optional symbol names."""
    from blastradius.risk.tagger import RiskTagger

    root = _get_project_root(path)
    config = _load_config(root)
    try:
        tagger = RiskTagger.from_config(config.risk)
    except BlastRadiusError as e:
        console.error(str(e))
        sys.exit(1)

    found = tagger.tag_all(file_path, symbols)
    console.show_tags(file_path, found, tagger.calculate_risk_score(found))


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage blastradius configuration."""
    root = _get_project_root(path)
    config = _load_config(root)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: blastradius config get <key>")
            sys.exit(1)
        data = config.model_dump()
        parts = key.split(".")
        for part in parts:
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: blastradius config set <key> <value>")
            sys.exit(1)
        try:
            # Try to parse as JSON for non-string values
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except BlastRadiusError as e:
            console.error(str(e))
            sys.exit(1)


if __name__ == "__main__":
    main()
