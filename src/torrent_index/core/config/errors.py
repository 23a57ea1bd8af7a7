"""
Errors raised while resolving the settings document.

Every failure aborts the whole resolution pass; nothing is retried and no
half-resolved document is ever installed. Callers at process start treat
these as fatal; admin reload paths may report them and keep the previous
document.

Hierarchy::

    SettingsError (CONFIG)
        UnableToLoadFromEnvironmentVariable
        UnableToLoadFromConfigFile
        ConfigError
        MissingMandatoryOption(path)
        UnsupportedVersion(version)
        Infallible
"""

from __future__ import annotations

from torrent_index.core.errors import ErrorCategory, ErrorContext, TorrentIndexError


class SettingsError(TorrentIndexError):
    """
    Base class for settings resolution failures.

    Never retryable - the configuration must be fixed.
    """

    category = ErrorCategory.CONFIG
    retryable = False


class UnableToLoadFromEnvironmentVariable(SettingsError):
    """The inline-payload or path variable could not be read from the environment."""

    def __init__(self, variable: str, cause: Exception | None = None):
        self.variable = variable
        super().__init__(
            f"Unable to load from environment variable {variable}: {cause}",
            context=ErrorContext(source_name=variable, source_type="env"),
            cause=cause,
        )


class UnableToLoadFromConfigFile(SettingsError):
    """The file named by the resolution input could not be read."""

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        super().__init__(
            f"Unable to load from config file {path}: {cause}",
            context=ErrorContext(source_name=path, source_type="file"),
            cause=cause,
        )


class ConfigError(SettingsError):
    """The layered provider could not be merged or deserialized."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(f"Failed processing the configuration: {message}", context=context, cause=cause)


class MissingMandatoryOption(SettingsError):
    """A mandatory option was not supplied by the user (defaults don't count)."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Missing mandatory configuration option. Option path: {path}",
            context=ErrorContext(option_path=path),
        )


class UnsupportedVersion(SettingsError):
    """The document declares a schema version this build does not understand."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(
            f"Unsupported configuration version: {version}",
            context=ErrorContext(option_path="metadata.schema_version"),
        )


class Infallible(SettingsError):
    """Marker for error channels that are structurally required but never populated."""

    category = ErrorCategory.INTERNAL

    def __init__(self) -> None:
        super().__init__("The error for errors that can never happen.")


__all__ = [
    "SettingsError",
    "UnableToLoadFromEnvironmentVariable",
    "UnableToLoadFromConfigFile",
    "ConfigError",
    "MissingMandatoryOption",
    "UnsupportedVersion",
    "Infallible",
]
