"""Command-line interface for seasnap.

This module provides CLI commands for contouring decoded gridded messages
into SVG, PNG and GeoJSON files using the Typer framework.
"""
from typing import Optional

import typer

from . import config
from .data_sources import records
from .errors import InvalidConfig, MessageNotFound
from . import pipeline

app = typer.Typer(add_completion=False)


@app.callback()
def callback():
    """Contour forecast and radar grids into SVG, PNG and GeoJSON snapshots."""


@app.command()
def render(
    path: Optional[str] = typer.Option(None, "--path", help="Decoded message file (JSON or NetCDF)."),
    var: Optional[str] = typer.Option(None, "--var", help="Variable key of the message to render."),
    list_vars: bool = typer.Option(False, "--list", help="List available variable keys and exit."),
    min_threshold: Optional[float] = typer.Option(None, "--min-threshold", help="Override the field minimum."),
    max_threshold: Optional[float] = typer.Option(None, "--max-threshold", help="Override the field maximum."),
    steps: Optional[int] = typer.Option(None, "--steps", help="Number of thresholds (default 20)."),
    svg: bool = typer.Option(False, "--svg/--no-svg", help="Write an SVG file."),
    png: bool = typer.Option(True, "--png/--no-png", help="Write a PNG file."),
    geojson: bool = typer.Option(False, "--geojson/--no-geojson", help="Write a GeoJSON file."),
    svg_out: Optional[str] = typer.Option(None, "--svg-out", help="SVG output path."),
    png_out: Optional[str] = typer.Option(None, "--png-out", help="PNG output path."),
    geojson_out: Optional[str] = typer.Option(None, "--geojson-out", help="GeoJSON output path."),
    env: str = typer.Option("DEFAULT", "--env", help="Settings environment."),
    verbose: bool = typer.Option(True, "--verbose/--quiet", help="Print progress messages."),
):
    """Render one message to contour snapshots."""
    if env != "DEFAULT":
        config.change_env(env)
    config.settings.set("verbose", verbose)

    if path is None:
        typer.echo("You must specify the path to the file to render with --path", err=True)
        raise typer.Exit(code=1)

    if list_vars:
        for key in records.available_messages(path):
            typer.echo(key)
        raise typer.Exit(code=0)

    if var is None:
        typer.echo("You must specify the variable to render with --var", err=True)
        raise typer.Exit(code=1)

    try:
        field = records.get_message(path, var)
    except MessageNotFound:
        typer.echo("Failed to find matching message. Exiting.", err=True)
        raise typer.Exit(code=1)
    if verbose:
        typer.echo("Found matching grib message, contouring...")

    outputs = [kind for kind, wanted in (("svg", svg), ("png", png), ("geojson", geojson))
               if wanted]
    try:
        snap = pipeline.snapshot(field, steps=steps, min_threshold=min_threshold,
                                 max_threshold=max_threshold)
        written = pipeline.write_outputs(snap, outputs, svg_path=svg_out,
                                         png_path=png_out, geojson_path=geojson_out)
    except InvalidConfig as err:
        typer.echo(f"Invalid configuration: {err}", err=True)
        raise typer.Exit(code=2)

    for kind, fn in written.items():
        typer.echo(f"{kind}: {fn}")
    typer.echo("Operation Successful!")


def main():
    app()
