"""
Where the user's configuration document comes from.

Two environment variables select the source::

    TORRUST_INDEX_CONFIG_TOML        the whole document, inline
    TORRUST_INDEX_CONFIG_TOML_PATH   path to the document file

An inline document always wins; the path is then never consulted.  When
the path variable is unset the compiled-in default path is used instead,
while an unset inline variable simply means "not inline".

Tags:
    torrent-index, configuration, sources, toml, pydantic-settings
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from torrent_index.core.errors import ErrorContext
from torrent_index.core.logging import get_logger

from .errors import ConfigError, UnableToLoadFromConfigFile, UnableToLoadFromEnvironmentVariable
from .layers import Layer

logger = get_logger(__name__)

#: The whole ``index.toml`` content. It has priority over the config file.
ENV_VAR_CONFIG_TOML = "TORRUST_INDEX_CONFIG_TOML"

#: The ``index.toml`` file location.
ENV_VAR_CONFIG_TOML_PATH = "TORRUST_INDEX_CONFIG_TOML_PATH"

DEFAULT_CONFIG_TOML_PATH = "./share/default/config/index.development.sqlite3.toml"

INLINE_LAYER = "inline"
FILE_LAYER = "file"


class BootstrapEnvironment(BaseSettings):
    """The two discovery variables, read from the process environment."""

    model_config = SettingsConfigDict(
        env_file=None,
        case_sensitive=True,
        extra="ignore",
    )

    config_toml: str | None = Field(default=None, alias=ENV_VAR_CONFIG_TOML)
    config_toml_path: str | None = Field(default=None, alias=ENV_VAR_CONFIG_TOML_PATH)


@dataclass(frozen=True)
class ResolutionInput:
    """Information required for loading the configuration.

    If ``inline_payload`` is set it is used exclusively and ``file_path``
    may be empty.
    """

    inline_payload: str | None = None
    file_path: str = ""

    @classmethod
    def from_environment(cls, default_config_toml_path: str = DEFAULT_CONFIG_TOML_PATH) -> ResolutionInput:
        """Discover the input from ``TORRUST_INDEX_CONFIG_TOML[_PATH]``.

        Raises:
            UnableToLoadFromEnvironmentVariable: if the variables can't be read.
        """
        try:
            env = BootstrapEnvironment()
        except ValidationError as e:
            raise UnableToLoadFromEnvironmentVariable(ENV_VAR_CONFIG_TOML, cause=e) from e

        if env.config_toml is not None:
            logger.info("config_source_selected", source="env", variable=ENV_VAR_CONFIG_TOML)

        if env.config_toml_path is not None:
            config_toml_path = env.config_toml_path
            logger.info("config_file_selected", path=config_toml_path, variable=ENV_VAR_CONFIG_TOML_PATH)
        else:
            config_toml_path = default_config_toml_path
            logger.info("config_file_selected", path=config_toml_path, default=True)

        return cls(inline_payload=env.config_toml, file_path=config_toml_path)

    @classmethod
    def from_toml(cls, config_toml: str) -> ResolutionInput:
        """Input consisting of literal TOML text only."""
        return cls(inline_payload=config_toml, file_path="")

    @property
    def is_inline(self) -> bool:
        return self.inline_payload is not None


def parse_toml(text: str, *, source_name: str, source_type: str) -> dict:
    """Parse TOML *text*, wrapping syntax errors in :class:`ConfigError`."""
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(
            f"malformed TOML in {source_name}: {e}",
            context=ErrorContext(source_name=source_name, source_type=source_type),
            cause=e,
        ) from e


def load_source_layer(info: ResolutionInput) -> Layer:
    """Read the user's document as a single layer.

    Raises:
        UnableToLoadFromConfigFile: if the file can't be read.
        ConfigError: if the text isn't valid TOML.
    """
    if info.inline_payload is not None:
        data = parse_toml(info.inline_payload, source_name="inline payload", source_type=INLINE_LAYER)
        logger.debug("config_source_loaded", source=INLINE_LAYER, keys=sorted(data))
        return Layer(INLINE_LAYER, data)

    path = Path(info.file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("config_file_unreadable", path=info.file_path, error=str(e))
        raise UnableToLoadFromConfigFile(info.file_path, cause=e) from e

    data = parse_toml(text, source_name=info.file_path, source_type=FILE_LAYER)
    logger.debug("config_source_loaded", source=FILE_LAYER, path=info.file_path, keys=sorted(data))
    return Layer(FILE_LAYER, data)


__all__ = [
    "ENV_VAR_CONFIG_TOML",
    "ENV_VAR_CONFIG_TOML_PATH",
    "DEFAULT_CONFIG_TOML_PATH",
    "INLINE_LAYER",
    "FILE_LAYER",
    "BootstrapEnvironment",
    "ResolutionInput",
    "load_source_layer",
    "parse_toml",
]
