"""Settings document resolution and the shared configuration handle.

Manifesto:
    The index reads one configuration document at startup.  It can arrive
    inline in an environment variable or as a TOML file, individual options
    can be overridden through ``TORRUST_INDEX_CONFIG_OVERRIDE_*`` variables,
    and everything the user leaves out falls back to compiled-in defaults.
    A handful of options must never fall back: they are checked before the
    defaults are joined in.

Quick start::

    from torrent_index.core.config import Configuration, ResolutionInput

    configuration = Configuration.load(ResolutionInput.from_environment())
    print(configuration.site_name())          # "Torrust"
    settings = configuration.read_snapshot()  # deep copy, safe to keep

Architecture::

    sources.py     ResolutionInput + inline / file source layer
    overrides.py   TORRUST_INDEX_CONFIG_OVERRIDE_* → override layer
    layers.py      Layer / LayeredProvider, last applied wins
    mandatory.py   options the user must supply explicitly
    settings.py    Settings (Pydantic) schema v2 with defaults
    loader.py      resolve_settings() / load_settings(): the resolution pass
    handle.py      Configuration: RW-locked shared document
    errors.py      SettingsError taxonomy

Guardrails:
    ❌ Reading ``os.environ`` for options in application code
    ✅ ``configuration.project(lambda s: s.tracker.url)``
    ❌ Holding on to the live document across calls
    ✅ ``configuration.read_snapshot()`` for a private copy

Tags:
    torrent-index, configuration, settings, toml, pydantic, layering
"""

from .errors import (
    ConfigError,
    Infallible,
    MissingMandatoryOption,
    SettingsError,
    UnableToLoadFromConfigFile,
    UnableToLoadFromEnvironmentVariable,
    UnsupportedVersion,
)
from .handle import Configuration, ReadWriteLock
from .layers import Layer, LayeredProvider, deep_merge
from .loader import (
    Resolution,
    build_user_provider,
    check_version,
    defaults_layer,
    extract_settings,
    load_settings,
    resolve_settings,
)
from .mandatory import MANDATORY_OPTIONS, check_mandatory_options
from .overrides import CONFIG_OVERRIDE_PREFIX, CONFIG_OVERRIDE_SEPARATOR, collect_overrides, parse_override_value
from .settings import LATEST_VERSION, VERSION_2, Settings, Threshold
from .sources import (
    DEFAULT_CONFIG_TOML_PATH,
    ENV_VAR_CONFIG_TOML,
    ENV_VAR_CONFIG_TOML_PATH,
    ResolutionInput,
    load_source_layer,
)

__all__ = [
    # Errors
    "ConfigError",
    "Infallible",
    "MissingMandatoryOption",
    "SettingsError",
    "UnableToLoadFromConfigFile",
    "UnableToLoadFromEnvironmentVariable",
    "UnsupportedVersion",
    # Handle
    "Configuration",
    "ReadWriteLock",
    # Layers
    "Layer",
    "LayeredProvider",
    "deep_merge",
    # Loader
    "Resolution",
    "build_user_provider",
    "check_version",
    "defaults_layer",
    "extract_settings",
    "load_settings",
    "resolve_settings",
    # Mandatory
    "MANDATORY_OPTIONS",
    "check_mandatory_options",
    # Overrides
    "CONFIG_OVERRIDE_PREFIX",
    "CONFIG_OVERRIDE_SEPARATOR",
    "collect_overrides",
    "parse_override_value",
    # Settings
    "LATEST_VERSION",
    "VERSION_2",
    "Settings",
    "Threshold",
    # Sources
    "DEFAULT_CONFIG_TOML_PATH",
    "ENV_VAR_CONFIG_TOML",
    "ENV_VAR_CONFIG_TOML_PATH",
    "ResolutionInput",
    "load_source_layer",
]
