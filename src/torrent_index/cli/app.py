"""
Root Typer application for the torrent index configuration CLI.

Resolution diagnostics are logged to stderr so that ``config show -f json``
keeps stdout machine-readable.
"""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError, version

import typer

from torrent_index import __version__
from torrent_index.cli.config import app as config_app
from torrent_index.core.logging import configure_logging

app = typer.Typer(
    name="torrent-index-config",
    help="Resolve and inspect Torrust Index configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _installed_version() -> str:
    try:
        return version("torrent-index-config")
    except PackageNotFoundError:
        return __version__


def _show_version(requested: bool) -> None:
    if requested:
        typer.echo(f"torrent-index-config {_installed_version()}")
        raise typer.Exit()


@app.callback()
def main(
    show_version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Print the version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Level for resolution diagnostics on stderr."),
) -> None:
    """Show, validate and check the index configuration."""
    configure_logging(level=log_level, json_format=False, stream=sys.stderr)


app.add_typer(config_app, name="config", help="Configuration inspection.")
