"""
CLI layer for the torrent index configuration engine.

Provides a Typer application for inspecting and checking the settings
document the index would resolve from the current environment.  All
resolution logic lives in ``torrent_index.core.config``; this package only
handles terminal transport: argument parsing, coloured output and tables.

Entry point::

    torrent-index-config --help
"""

from torrent_index.cli.app import app

__all__ = ["app"]
