"""Command-line interface for Plume.

This module defines the CLI commands using Click framework.

Commands:
- new: Scaffold a new Plume project.
- build: Build the site into the output directory.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import click

from . import __version__

# Path to the default project skeleton
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold" / "default"


@click.group()
@click.version_option(version=__version__, prog_name="plume")
def cli():
    """Plume static site generator."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Plume project."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Plume site created at {target}")


@cli.command()
@click.option("--clean", is_flag=True, help="Empty the output directory first")
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Directory to write the site to (overrides plume.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every skipped document")
def build(clean: bool, output_dir: Path | None, verbose: bool):
    """Build the site into the output directory."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    project_root = Path.cwd()
    from .build import build_site
    from .errors import PlumeError

    try:
        result = build_site(
            project_root, clean_output=clean, output_dir_override=output_dir
        )
    except PlumeError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  Error: {exc}", fg="white"), err=True)
        raise SystemExit(1) from None

    for warning in result.warnings:
        click.echo(click.style(f"Warning: {warning}", fg="yellow"), err=True)
    for error in result.errors:
        click.echo(click.style(f"Error: {error}", fg="red"), err=True)

    click.echo(f"Built {len(result.pages)} posts into {result.output_dir}")
    if not result.ok:
        raise SystemExit(1)


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Create the directory structure and files for a new Plume project.

    Args:
        root: Root directory for the new project.
    """
    for src_path in _SCAFFOLD_DIR.rglob("*"):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
