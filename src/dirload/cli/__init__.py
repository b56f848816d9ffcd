"""
CLI for dirload.

Provides command-line access to walking a directory tree, resolving a single
artifact and listing the registered extensions.
"""

import asyncio
import types
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from dirload.core.config import DirloadConfig, load_config
from dirload.core.path_utils import predicate_from_patterns, resolve_against
from dirload.core.walker import (
    LoadResult,
    get_default_registry,
    resolve as resolve_artifact,
    walk as walk_tree,
)
from dirload.infrastructure import DefaultArtifactLoader, PyprojectManifestReader

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="dirload",
    help="Directory-tree artifact loader",
    add_completion=False,
)


def get_config(config_path: Optional[Path] = None) -> DirloadConfig:
    """Load .env, the configuration file and environment overrides, then set up logging."""
    load_dotenv()
    cfg = load_config(config_path)
    cfg.logging.apply()
    return cfg


def _manifest_reader(cfg: DirloadConfig) -> PyprojectManifestReader:
    return PyprojectManifestReader(filename=cfg.manifest.filename, table=cfg.manifest.table)


def describe_value(value: Any) -> str:
    """Short human-readable summary of a loaded value."""
    if isinstance(value, types.ModuleType):
        public = sorted(name for name in vars(value) if not name.startswith("_"))
        return f"module ({', '.join(public)})" if public else "module"
    if isinstance(value, dict):
        return f"dict ({len(value)} keys)"
    if isinstance(value, list):
        return f"list ({len(value)} items)"
    return type(value).__name__


@app.command()
def walk(
    root: Path = typer.Argument(..., help="Directory to walk"),
    extensions: Optional[list[str]] = typer.Option(
        None, "--ext", "-e", help="Extension to load (repeatable)"
    ),
    recursive: Optional[bool] = typer.Option(
        None, "--recursive/--no-recursive", help="Descend into subdirectories"
    ),
    stop_at_indexes: Optional[bool] = typer.Option(
        None,
        "--stop-at-indexes/--no-stop-at-indexes",
        help="Load only the index file of directories that have one",
    ),
    default_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Format for ambiguous extensions (static or dynamic)"
    ),
    include: Optional[list[str]] = typer.Option(
        None, "--include", help="Gitignore-style pattern files must match (repeatable)"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", help="Gitignore-style pattern of files to skip (repeatable)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Load every matching file under a directory."""
    try:
        cfg = get_config(config)
        root_path = resolve_against(root)

        include_patterns = include or cfg.walk.include
        exclude_patterns = exclude or cfg.walk.exclude
        results: list[LoadResult] = []

        asyncio.run(
            walk_tree(
                root_path,
                visit=results.append,
                extensions=extensions or cfg.walk.extensions,
                include=predicate_from_patterns(root_path, include_patterns) if include_patterns else None,
                exclude=predicate_from_patterns(root_path, exclude_patterns) if exclude_patterns else None,
                recursive=cfg.walk.recursive if recursive is None else recursive,
                stop_at_indexes=cfg.walk.stop_at_indexes if stop_at_indexes is None else stop_at_indexes,
                default_format=default_format or cfg.walk.default_format,
                loader=DefaultArtifactLoader(),
                manifest_reader=_manifest_reader(cfg),
            )
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not results:
        console.print("[yellow]No artifacts found.[/yellow]")
        return

    table = Table(title=f"Artifacts under {root_path}")
    table.add_column("Path", style="cyan")
    table.add_column("Format")
    table.add_column("Value")
    for result in sorted(results, key=lambda r: str(r.path)):
        table.add_row(
            str(result.path.relative_to(root_path)),
            result.format.value,
            describe_value(result.value),
        )
    console.print(table)
    console.print(f"\nLoaded [bold]{len(results)}[/bold] artifacts.")


@app.command()
def resolve(
    stem: Path = typer.Argument(..., help="Path to resolve, with or without extension"),
    default_format: Optional[str] = typer.Option(
        None, "--format", "-f", help="Format for ambiguous extensions (static or dynamic)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file"),
):
    """Load the first existing form of a path."""
    try:
        cfg = get_config(config)
        artifact = asyncio.run(
            resolve_artifact(
                stem,
                default_format=default_format or cfg.walk.default_format,
                manifest_reader=_manifest_reader(cfg),
            )
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if artifact is None:
        console.print(f"[yellow]Nothing to load at[/yellow] {stem}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] {artifact.path} ({artifact.format.value})")
    console.print(f"  {describe_value(artifact.value)}")


@app.command()
def formats():
    """List registered extensions and the strategies they allow."""
    table = Table(title="Registered extensions")
    table.add_column("Extension", style="cyan")
    table.add_column("Kind")
    for extension, kind in get_default_registry().items():
        table.add_row(extension, kind.value)
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
