"""Composition CLI commands for Schema Composer.

Registered on the root app: `schema-composer compose`, `schema-composer discover`.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from schema_composer.cli.app import app
from schema_composer.compose import Composer
from schema_composer.config import ComposerConfig, OutputFormat, get_config
from schema_composer.errors import ComposerError
from schema_composer.file_utils import FileWriteError, write_file_atomic
from schema_composer.persistence import dump_model, source_schema_to_model
from schema_composer.schema import Source, SourceSet, UnifiedSchema, load_source
from schema_composer.schema.discovery import discover_schema

console = Console()


def _config_with(threshold: Optional[float], output_format: Optional[OutputFormat]) -> ComposerConfig:
    """Apply CLI overrides on top of the loaded configuration."""
    overrides: dict = {}
    if threshold is not None:
        overrides["class_matching_threshold"] = threshold
    if output_format is not None:
        overrides["output_format"] = output_format
    config = get_config()
    return config.model_copy(update=overrides) if overrides else config


def _print_summary(schema: UnifiedSchema, unknown_used: bool, unknown_name: str) -> None:
    table = Table(title=f"Unified schema: {schema.name}")
    table.add_column("Class", style="cyan")
    table.add_column("Attributes", justify="right")
    table.add_column("References", justify="right")
    table.add_column("Targets")

    for schema_class in schema.classes:
        targets = sorted(
            {r.target_class.name for r in schema_class.references if r.target_class is not None}
        )
        table.add_row(
            schema_class.name,
            str(len(schema_class.attributes)),
            str(len(schema_class.references)),
            ", ".join(targets),
        )

    console.print(table)
    if unknown_used:
        console.print(
            f"[yellow]Some references could not be resolved and point to {unknown_name}.[/yellow]"
        )


def load_sources(paths: list[Path]) -> list[Source]:
    """Load every source path, suffixing repeated names (``people``, ``people_2``).

    Documents and provenance files are looked up by source name, so names
    must be unique within a run.
    """
    sources: list[Source] = []
    taken: set[str] = set()
    for path in paths:
        source = load_source(path)
        name, suffix = source.name, 2
        while name in taken:
            name = f"{source.name}_{suffix}"
            suffix += 1
        if name != source.name:
            logger.info(f"Source {path} renamed to {name}, its name is already taken")
            source.name = name
        taken.add(name)
        sources.append(source)
    return sources


def provenance_paths(directory: Path, source_names: list[str], output_format: str) -> list[Path]:
    """One provenance file per source: ``<directory>/<source>.provenance.<format>``."""
    return [directory / f"{name}.provenance.{output_format}" for name in source_names]


# --- Compose ---


@app.command()
def compose(
    sources: Annotated[
        list[Path],
        typer.Argument(help="JSON files or directories of JSON files, one per source"),
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the unified schema"),
    ],
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Name of the unified schema"),
    ] = "composed",
    provenance_dir: Annotated[
        Optional[Path],
        typer.Option("--provenance-dir", help="Directory receiving one provenance file per source"),
    ] = None,
    threshold: Annotated[
        Optional[float],
        typer.Option("--threshold", min=0.0, max=1.0, help="Class matching threshold (0-1)"),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option("--format", help="Output format when the file suffix does not say: json or yaml"),
    ] = None,
):
    """Compose the schemas of several JSON sources into one unified schema.

    Each SOURCE is discovered, then all of them are merged in the order given.
    Use --provenance-dir to also write where every original element ended up.
    """
    if output_format is not None and output_format not in ("json", "yaml"):
        console.print(f"[red]Error: unsupported format: {output_format}[/red]")
        raise typer.Exit(1)

    try:
        config = _config_with(threshold, output_format)  # pyright: ignore[reportArgumentType]
        source_set = SourceSet(name=name, sources=load_sources(sources))
        composer = Composer(source_set, config=config)
        composer.compose()
    except ComposerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    schema = source_set.composed_schema
    assert schema is not None and composer.context is not None
    _print_summary(schema, composer.context.unknown_used, composer.context.unknown.name)

    failed = False
    report = composer.save(output)
    if report.ok:
        console.print(f"Unified schema written to [green]{output}[/green]")
    else:
        failed = True
        for path, error in report.failed.items():
            console.print(f"[red]Could not write {path}: {error}[/red]")

    if provenance_dir is not None:
        paths = provenance_paths(
            provenance_dir, [s.name for s in source_set.sources], config.output_format
        )
        provenance_report = composer.save_provenance(paths)
        for path in provenance_report.written:
            console.print(f"Provenance written to [green]{path}[/green]")
        for path, error in provenance_report.failed.items():
            failed = True
            console.print(f"[red]Could not write {path}: {error}[/red]")

    if failed:
        raise typer.Exit(1)


# --- Discover ---


@app.command()
def discover(
    source: Annotated[
        Path,
        typer.Argument(help="JSON file or directory of JSON files"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the schema here instead of printing it"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="json or yaml"),
    ] = "json",
):
    """Discover the schema of a single JSON source."""
    if output_format not in ("json", "yaml"):
        console.print(f"[red]Error: unsupported format: {output_format}[/red]")
        raise typer.Exit(1)

    try:
        loaded = load_source(source)
    except ComposerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    schema = discover_schema(loaded)
    content = dump_model(source_schema_to_model(schema), output_format)  # pyright: ignore[reportArgumentType]

    if output is None:
        typer.echo(content)
        return

    try:
        write_file_atomic(output, content)
    except FileWriteError as e:
        logger.error(f"Error during discover: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"Schema for {loaded.name} written to [green]{output}[/green]")
