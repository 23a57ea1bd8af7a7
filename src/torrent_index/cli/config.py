"""
CLI: ``torrent-index-config config``: inspect the resolved settings document.

Every command resolves from the current process environment exactly as the
index does at startup (``TORRUST_INDEX_CONFIG_TOML``,
``TORRUST_INDEX_CONFIG_TOML_PATH`` and ``TORRUST_INDEX_CONFIG_OVERRIDE_*``).
"""

from __future__ import annotations

import typer
from rich.markup import escape

from torrent_index.cli.utils import console, fail, flatten, format_value
from torrent_index.core.config import (
    MANDATORY_OPTIONS,
    ResolutionInput,
    SettingsError,
    build_user_provider,
    load_settings,
    resolve_settings,
)

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
) -> None:
    """Show the resolved configuration. Secrets are redacted."""
    if format not in ("table", "json"):
        console.print(f"[red]Unknown format:[/red] {escape(format)}")
        raise typer.Exit(2)

    try:
        info = ResolutionInput.from_environment()
        resolution = resolve_settings(info)
    except SettingsError as e:
        fail(e)

    settings, provider = resolution.settings, resolution.provider

    if format == "json":
        console.print_json(settings.model_dump_json(by_alias=True))
        return

    from rich.table import Table

    source = "inline (TORRUST_INDEX_CONFIG_TOML)" if info.is_inline else info.file_path
    console.print(f"[bold]Source:[/bold] {escape(source)}")
    console.print(f"[bold]Schema Version:[/bold] {settings.metadata.schema_version}")

    table = Table()
    table.add_column("Option")
    table.add_column("Value")
    table.add_column("From")
    for path, value in flatten(settings.model_dump(mode="json", by_alias=True)):
        table.add_row(path, escape(format_value(value)), provider.origin(path) or "defaults")
    console.print(table)


@app.command("validate")
def validate_config() -> None:
    """Resolve the configuration and report the first problem, if any."""
    try:
        settings = load_settings(ResolutionInput.from_environment())
    except SettingsError as e:
        fail(e)

    console.print(f"[green]✓ Configuration valid[/green] (schema {settings.metadata.schema_version})")


@app.command("mandatory")
def mandatory_options(
    check: bool = typer.Option(False, "--check", "-c", help="Check which options the environment supplies"),
) -> None:
    """List the options that must be supplied explicitly."""
    if not check:
        for option in MANDATORY_OPTIONS:
            console.print(option)
        return

    try:
        provider = build_user_provider(ResolutionInput.from_environment())
    except SettingsError as e:
        fail(e)

    missing = 0
    for option in MANDATORY_OPTIONS:
        origin = provider.origin(option)
        if origin is None:
            missing += 1
            console.print(f"[red]✗[/red] {option}")
        else:
            console.print(f"[green]✓[/green] {option} ({origin})")

    if missing:
        raise typer.Exit(1)
