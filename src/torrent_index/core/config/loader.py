"""
Settings resolution pass.

Manifesto:
    Mandatory-ness is checked *before* defaults exist; extraction happens
    *after*.  Merging defaults first would make every mandatory option
    trivially present, so the two provider views are kept apart::

        user provider  = [source layer, env-override layer]     → mandatory check
        full provider  = [defaults] + user provider              → extract + version gate

    The pass is synchronous and run-to-completion.  It returns a document
    or raises; nothing partial escapes, so it can be repeated freely.

Examples:
    >>> info = ResolutionInput.from_toml(Path("index.toml").read_text())
    >>> settings = load_settings(info, environ={})
    >>> settings.metadata.schema_version
    '2.0.0'
    >>> resolve_settings(info, environ={}).provider.names
    ['inline', 'env-overrides']

Tags:
    torrent-index, configuration, loader, layering, version-gate
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import ValidationError

from torrent_index.core.errors import ErrorContext
from torrent_index.core.logging import get_logger

from .errors import ConfigError, UnsupportedVersion
from .layers import Layer, LayeredProvider
from .mandatory import check_mandatory_options
from .overrides import collect_overrides
from .settings import VERSION_2, Settings
from .sources import ResolutionInput, load_source_layer

logger = get_logger(__name__)

DEFAULTS_LAYER = "defaults"


def build_user_provider(
    info: ResolutionInput,
    environ: Mapping[str, str] | None = None,
) -> LayeredProvider:
    """The user-supplied view: document text, then environment overrides on top."""
    source = load_source_layer(info)
    overrides = collect_overrides(os.environ if environ is None else environ)
    return LayeredProvider.from_layers(source, overrides)


def defaults_layer() -> Layer:
    """Compiled-in defaults as the lowest-priority layer."""
    return Layer(DEFAULTS_LAYER, Settings().to_layer_data())


def extract_settings(provider: LayeredProvider) -> Settings:
    """Deserialize the merged *provider* into the typed document.

    Raises:
        ConfigError: wrapping the pydantic validation error.
    """
    try:
        return Settings.model_validate(provider.merged())
    except ValidationError as e:
        paths = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        logger.error("config_extract_failed", error_count=e.error_count(), paths=paths)
        raise ConfigError(
            f"{e.error_count()} invalid option(s): {', '.join(paths)}",
            context=ErrorContext(option_path=paths[0] if paths else None, details={"layers": provider.names}),
            cause=e,
        ) from e


def check_version(settings: Settings) -> Settings:
    """Reject documents declaring any schema version but the one this build reads."""
    version = settings.metadata.schema_version
    if version != VERSION_2:
        logger.error("config_version_unsupported", version=version, supported=VERSION_2)
        raise UnsupportedVersion(version)
    return settings


@dataclass(frozen=True)
class Resolution:
    """A resolved document together with the user layers it was built from."""

    settings: Settings
    provider: LayeredProvider


def resolve_settings(
    info: ResolutionInput,
    environ: Mapping[str, str] | None = None,
) -> Resolution:
    """Resolve the settings document for *info*, keeping the user provider.

    Args:
        info: where the user's document comes from.
        environ: environment to read overrides from; defaults to ``os.environ``.

    Raises:
        UnableToLoadFromConfigFile: the document file can't be read.
        ConfigError: malformed TOML, or the merged tree doesn't fit the schema.
        MissingMandatoryOption: a mandatory option is only available as a default.
        UnsupportedVersion: ``metadata.schema_version`` isn't ``"2.0.0"``.
    """
    provider = build_user_provider(info, environ)

    check_mandatory_options(provider)

    full = provider.join(defaults_layer())
    settings = check_version(extract_settings(full))

    logger.info(
        "config_loaded",
        source="inline" if info.is_inline else info.file_path,
        layers=full.names,
        schema_version=settings.metadata.schema_version,
    )
    return Resolution(settings, provider)


def load_settings(
    info: ResolutionInput,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve the settings document for *info*; see :func:`resolve_settings`."""
    return resolve_settings(info, environ).settings


__all__ = [
    "DEFAULTS_LAYER",
    "Resolution",
    "build_user_provider",
    "check_version",
    "defaults_layer",
    "extract_settings",
    "load_settings",
    "resolve_settings",
]
