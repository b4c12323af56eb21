"""CLI entry point for contactsheet.

Usage:
    contactsheet run VIDEO_OR_DIR...        # Build a sheet for every video
    contactsheet run --frames 16 --workers 4 ~/Videos
    contactsheet info                       # Show effective configuration
"""

from __future__ import annotations

from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from contactsheet.core.contracts import ContactSheetConfig
from contactsheet.core.logging import setup_logging

app = typer.Typer(name="contactsheet", help="Video contact sheet generator")
console = Console()


def _build_config(config: Path | None, **overrides) -> ContactSheetConfig:
    from contactsheet.core.pipeline_runner import apply_overrides, load_config

    try:
        base = load_config(config) if config is not None else ContactSheetConfig()
        return apply_overrides(base, **overrides)
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(1)


@app.command()
def run(
    paths: list[Path] = typer.Argument(..., help="Video files or directories"),
    config: Path = typer.Option(None, "--config", "-c", help="YAML config path"),
    frames: int = typer.Option(None, "--frames", help="Frames per sheet"),
    frames_per_row: int = typer.Option(None, "--frames-per-row", help="Tiles per grid row"),
    frame_width: int = typer.Option(None, "--frame-width", help="Tile width in pixels (0 = native)"),
    workers: int = typer.Option(None, "--workers", "-w", help="Concurrent sheet workers"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Output directory (with --no-in-place)"),
    in_place: bool = typer.Option(None, "--in-place/--no-in-place", help="Write outputs next to videos"),
    write_info: bool = typer.Option(None, "--write-info/--no-write-info", help="Write JSON sidecars"),
    walk: bool = typer.Option(None, "--walk/--no-walk", help="Recurse into directories"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Build one contact sheet per video."""
    try:
        setup_logging(log_level)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    from contactsheet.core.pipeline_runner import prepare_directories, resolve_binaries, run_batch

    cfg = _build_config(
        config,
        frame_count=frames,
        frames_per_row=frames_per_row,
        frame_width=frame_width,
        workers=workers,
        output_dir=output_dir,
        in_place=in_place,
        write_info=write_info,
        walk_directories=walk,
    )
    try:
        prepare_directories(cfg)
    except OSError as exc:
        console.print(f"[red]Cannot create output directories:[/red] {exc}")
        raise typer.Exit(1)
    cfg = resolve_binaries(cfg)

    summary = run_batch(paths, cfg)

    table = Table(title="Contact sheets")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", style="yellow")
    table.add_column("Videos", style="dim")
    for outcome, names in (
        ("succeeded", summary.succeeded),
        ("skipped", summary.skipped),
        ("failed", summary.failed),
    ):
        table.add_row(outcome, str(len(names)), ", ".join(sorted(names)) or "-")
    console.print(table)


@app.command()
def info(config: Path = typer.Option(None, "--config", "-c", help="YAML config path")) -> None:
    """Show the effective configuration."""
    cfg = _build_config(config)
    table = Table(title="contactsheet configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in cfg.model_dump().items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                table.add_row(f"{key}.{sub_key}", str(sub_value))
        else:
            table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    app()
