"""
Environment-variable overrides for individual options.

Variables named ``TORRUST_INDEX_CONFIG_OVERRIDE_<SEG>__<SEG>...`` map onto
nested document paths: the prefix is stripped, the remainder is split on
``__`` and every segment is lower-cased::

    TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER__TOKEN=XYZ   →   tracker.token = "XYZ"
    TORRUST_INDEX_CONFIG_OVERRIDE_NET__TSL__SSL_KEY_PATH=/k.pem

Values keep the exact text of the variable, so a secret such as
``0xdeadbeef`` reaches the document as written; the settings model turns
``"true"`` or ``"3002"`` into a boolean or integer where the option is
typed that way.  Only a TOML array (``["a", "b"]``) or inline table
(``{ a = 1 }``) is parsed into structure.  No check is made that the path
exists in the document.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from typing import Any

from torrent_index.core.logging import get_logger

from .layers import Layer

logger = get_logger(__name__)

#: Prefix for env vars that overwrite configuration options.
CONFIG_OVERRIDE_PREFIX = "TORRUST_INDEX_CONFIG_OVERRIDE_"

#: Path separator in env var names for nested values.
CONFIG_OVERRIDE_SEPARATOR = "__"

OVERRIDES_LAYER = "env-overrides"


def parse_override_value(raw: str) -> str | list[Any] | dict[str, Any]:
    """Value an override variable contributes to the layer.

    Scalars are returned untouched; arrays and inline tables are parsed as
    TOML.  Text that merely starts like one (``[::1]:3001``) stays a string.
    """
    if not raw.startswith(("[", "{")) or "\n" in raw or "\r" in raw:
        return raw
    try:
        return tomllib.loads(f"value = {raw}")["value"]
    except tomllib.TOMLDecodeError:
        return raw


def override_path(
    name: str,
    prefix: str = CONFIG_OVERRIDE_PREFIX,
    separator: str = CONFIG_OVERRIDE_SEPARATOR,
) -> list[str] | None:
    """Turn a variable name into path segments, or ``None`` if it doesn't apply."""
    if not name.startswith(prefix):
        return None
    segments = [segment.lower() for segment in name[len(prefix):].split(separator)]
    if not segments or any(not segment for segment in segments):
        return None
    return segments


def _assign(tree: dict[str, Any], segments: list[str], value: Any) -> None:
    node = tree
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def collect_overrides(
    environ: Mapping[str, str] | None = None,
    prefix: str = CONFIG_OVERRIDE_PREFIX,
    separator: str = CONFIG_OVERRIDE_SEPARATOR,
) -> Layer:
    """Build the override layer from *environ* (defaults to ``os.environ``).

    Variables are applied in name order so the result doesn't depend on the
    environment's iteration order.
    """
    env = os.environ if environ is None else environ
    tree: dict[str, Any] = {}
    applied: list[str] = []

    for name in sorted(env):
        segments = override_path(name, prefix, separator)
        if segments is None:
            if name.startswith(prefix):
                logger.warning("config_override_ignored", variable=name, reason="empty path segment")
            continue
        _assign(tree, segments, parse_override_value(env[name]))
        applied.append(".".join(segments))

    if applied:
        # Option paths only; values may be secrets.
        logger.info("config_overrides_collected", count=len(applied), paths=applied)

    return Layer(OVERRIDES_LAYER, tree)


__all__ = [
    "CONFIG_OVERRIDE_PREFIX",
    "CONFIG_OVERRIDE_SEPARATOR",
    "OVERRIDES_LAYER",
    "collect_overrides",
    "override_path",
    "parse_override_value",
]
