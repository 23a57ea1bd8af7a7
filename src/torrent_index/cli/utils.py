"""
CLI utility helpers: consoles and output formatting.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from torrent_index.core.config import SettingsError

console = Console()
err_console = Console(stderr=True)


# ── Output helpers ───────────────────────────────────────────────────────


def flatten(tree: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted.path, value)`` for every leaf of a nested mapping."""
    for key, value in tree.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping) and value:
            yield from flatten(value, path)
        else:
            yield path, value


def format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def fail(error: SettingsError) -> NoReturn:
    """Report a resolution failure and exit with status 1."""
    console.print(f"[red]Configuration Error:[/red] {escape(error.message)}")
    raise typer.Exit(1) from error
