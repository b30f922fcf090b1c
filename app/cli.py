from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.artifact_repository import FileSystemArtifactRepository
from adapters.filesystem.timeline_source import FileSystemTimelineSource
from adapters.layout.timeline import TimelineLayoutEngine
from app.config import load_settings
from app.render_wiring import build_export_service
from domain.errors import RenderEncodingError, TimelineNotFoundError
from domain.models import ExportFormat

app = typer.Typer(no_args_is_help=True)
export_app = typer.Typer(no_args_is_help=True)
app.add_typer(export_app, name="export")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _export(
    fmt: ExportFormat,
    timeline_id: str,
    data_dir: Optional[Path],
    output: Optional[Path],
    config: Optional[Path],
) -> None:
    settings = load_settings(config)
    source = FileSystemTimelineSource(data_dir or settings.storage.data_dir)
    service = build_export_service(settings, source)
    try:
        artifact = service.export(timeline_id, fmt)
    except TimelineNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc
    except RenderEncodingError as exc:
        console.print(f"[red]Export failed:[/] {exc}")
        raise typer.Exit(code=2) from exc

    target_path = output or settings.storage.output_dir / artifact.filename
    FileSystemArtifactRepository().save(artifact.content, target_path)
    console.print(f"[green]Wrote[/] {target_path}")


@export_app.command("svg")
def export_svg(
    timeline_id: str = typer.Argument(..., help="Timeline id (snapshot file stem)."),
    data_dir: Optional[Path] = typer.Option(
        None, help="Directory with timeline snapshot JSON files.",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="File to write; defaults to the configured output dir.",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    _export(ExportFormat.SVG, timeline_id, data_dir, output, config)


@export_app.command("pdf")
def export_pdf(
    timeline_id: str = typer.Argument(..., help="Timeline id (snapshot file stem)."),
    data_dir: Optional[Path] = typer.Option(
        None, help="Directory with timeline snapshot JSON files.",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="File to write; defaults to the configured output dir.",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    _export(ExportFormat.PDF, timeline_id, data_dir, output, config)


@app.command("list")
def list_timelines(
    data_dir: Optional[Path] = typer.Option(
        None, help="Directory with timeline snapshot JSON files.",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    settings = load_settings(config)
    source = FileSystemTimelineSource(data_dir or settings.storage.data_dir)
    timeline_ids = source.list_ids()
    if not timeline_ids:
        console.print(f"[yellow]No timelines found in {source.directory}[/]")
        raise typer.Exit(code=0)

    table = Table("id", "title", "tracks", "events")
    for timeline_id in timeline_ids:
        snapshot = source.get(timeline_id)
        if snapshot is None:
            continue
        table.add_row(
            timeline_id,
            snapshot.timeline.title,
            str(len(snapshot.tracks)),
            str(len(snapshot.events)),
        )
    console.print(table)


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Timeline snapshot file to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        snapshot = FileSystemTimelineSource(input_path.parent).load_by_path(input_path)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    placed = {item.event.id for item in TimelineLayoutEngine().resolve_events(snapshot.events)}
    unplaced = [event.id for event in snapshot.events if event.id not in placed]
    console.print(f"[green]Valid timeline snapshot:[/] {input_path}")
    if unplaced:
        console.print(
            f"[yellow]{len(unplaced)} event(s) with unparseable start dates will not be drawn:[/] "
            + ", ".join(unplaced)
        )


if __name__ == "__main__":
    app()
