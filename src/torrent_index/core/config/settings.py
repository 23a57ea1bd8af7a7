"""
Typed settings document (schema version 2).

Manifesto:
    The resolved configuration is one strongly-typed Pydantic tree.  Every
    section carries compiled-in defaults so that a document supplying only
    the mandatory options is complete; those defaults are joined in *after*
    the mandatory-option check, never before.

Sections::

    metadata                      app / purpose / schema_version
    logging                       threshold
    website                       name, demo, terms
    tracker                       api_url, listed, private, token, url, ...
    net                           base_url, bind_address, tsl
    auth                          user_claim_token_pepper, password_constraints
    database                      connect_url
    mail                          from, reply_to, smtp
    image_cache                   capacity and per-user quotas
    api                           torrent page sizes
    registration                  optional e-mail requirements
    tracker_statistics_importer   cron job, port, update interval

Secret values (tracker token, token pepper, SMTP password) are
:class:`~pydantic.SecretStr`: redacted in ``repr`` and JSON dumps, compared
by value.

Tags:
    torrent-index, configuration, settings, pydantic, schema
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import (
    AnyHttpUrl,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    SecretStr,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    WrapSerializer,
    field_validator,
)

#: The only schema version this build accepts.
VERSION_2 = "2.0.0"

LATEST_VERSION = VERSION_2


def _numbers_to_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _serialize_secret(value: SecretStr, handler: SerializerFunctionWrapHandler, info: SerializationInfo) -> Any:
    if isinstance(info.context, dict) and info.context.get("reveal_secrets"):
        return value.get_secret_value()
    return handler(value)


Secret = Annotated[SecretStr, BeforeValidator(_numbers_to_text), WrapSerializer(_serialize_secret)]


class SettingsModel(BaseModel):
    """Base for every section: unknown keys are ignored, numbers may fill text fields."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
        validate_assignment=True,
    )


# ── Metadata ─────────────────────────────────────────────────────────────


class App(str, Enum):
    """The application a configuration is valid for."""

    TORRUST_INDEX = "torrust-index"


class Purpose(str, Enum):
    """The purpose of a parsed file."""

    CONFIGURATION = "configuration"


class Metadata(SettingsModel):
    """What a configuration document is for and which schema it follows."""

    app: App = Field(default=App.TORRUST_INDEX)
    purpose: Purpose = Field(default=Purpose.CONFIGURATION)
    schema_version: str = Field(default=LATEST_VERSION, description="Semantic version of the document shape")

    def __str__(self) -> str:
        return (
            f"Metadata(app: {self.app.value}, purpose: {self.purpose.value}, "
            f"schema_version: {self.schema_version})"
        )


# ── Logging ──────────────────────────────────────────────────────────────


class Threshold(str, Enum):
    """Logging verbosity threshold."""

    OFF = "off"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"


class Logging(SettingsModel):
    threshold: Threshold = Field(default=Threshold.INFO)


# ── Website ──────────────────────────────────────────────────────────────

DEFAULT_TERMS_CONTENT = """
# Usage Policies

## Copyright

Only upload content you are authorised to share. Content that infringes a
third party's rights will be removed and the uploader may be banned.

## Illegal content

Uploading illegal content is forbidden and will be reported.
""".strip()

DEFAULT_UPLOAD_AGREEMENT = (
    "I confirm that the content I am uploading is authorized, "
    "and I have read and agree to the terms."
)


class Demo(SettingsModel):
    """Banner shown when the site runs as a public demo."""

    warning: str = Field(default="⚠️ Please be aware: This demo resets all data weekly.")


class TermsPage(SettingsModel):
    title: str = Field(default="Usage Policies")
    content: str = Field(default=DEFAULT_TERMS_CONTENT, description="Markdown body of the terms page")


class TermsUpload(SettingsModel):
    content_upload_agreement: str = Field(default=DEFAULT_UPLOAD_AGREEMENT)


class Terms(SettingsModel):
    page: TermsPage = Field(default_factory=TermsPage)
    upload: TermsUpload = Field(default_factory=TermsUpload)


class Website(SettingsModel):
    name: str = Field(default="Torrust", description="Name shown on the website")
    demo: Demo | None = Field(default=None)
    terms: Terms = Field(default_factory=Terms)


# ── Tracker ──────────────────────────────────────────────────────────────


class Tracker(SettingsModel):
    api_url: AnyHttpUrl = Field(default="http://localhost:1212/", validate_default=True)
    listed: bool = Field(default=False, description="Tracker is listed: torrents don't need to be registered")
    private: bool = Field(default=False, description="Tracker requires per-user keys")
    token: Secret = Field(default=SecretStr("MyAccessToken"), description="Tracker API access token")
    token_valid_seconds: int = Field(default=7_257_600, ge=0)
    url: AnyUrl = Field(default="udp://localhost:6969", validate_default=True)


# ── Network ──────────────────────────────────────────────────────────────

#: Port number meaning "let the OS choose a free one".
FREE_PORT = 0


class Tsl(SettingsModel):
    """TLS certificate and key. An empty path means "not set"."""

    ssl_cert_path: str | None = Field(default=None)
    ssl_key_path: str | None = Field(default=None)

    @field_validator("ssl_cert_path", "ssl_key_path", mode="before")
    @classmethod
    def _empty_as_none(cls, v: Any) -> Any:
        if v == "":
            return None
        return v


class Network(SettingsModel):
    base_url: AnyHttpUrl | None = Field(
        default=None,
        description="Public base URL of the API, used when links can't be built from the request",
    )
    bind_address: str = Field(default="0.0.0.0:3001")
    tsl: Tsl | None = Field(default=None)


# ── Authentication ───────────────────────────────────────────────────────


class PasswordConstraints(SettingsModel):
    min_password_length: int = Field(default=6, ge=0)
    max_password_length: int = Field(default=64, ge=0)


class Auth(SettingsModel):
    user_claim_token_pepper: Secret = Field(
        default=SecretStr("MaxVerstappenWC2021"),
        description="Secret mixed into user claim tokens",
    )
    password_constraints: PasswordConstraints = Field(default_factory=PasswordConstraints)


# ── Storage / mail / cache ───────────────────────────────────────────────


class Database(SettingsModel):
    connect_url: str = Field(default="sqlite://data.db?mode=rwc")


class Credentials(SettingsModel):
    username: str = Field(default="")
    password: Secret = Field(default=SecretStr(""))


class Smtp(SettingsModel):
    server: str = Field(default="")
    port: int = Field(default=25, ge=0, le=65535)
    credentials: Credentials = Field(default_factory=Credentials)


class Mail(SettingsModel):
    from_: str = Field(default="example@email.com", alias="from")
    reply_to: str = Field(default="noreply@email.com")
    smtp: Smtp = Field(default_factory=Smtp)


class ImageCache(SettingsModel):
    max_request_timeout_ms: int = Field(default=1000, ge=0)
    capacity: int = Field(default=128_000_000, ge=0)
    entry_size_limit: int = Field(default=4_000_000, ge=0)
    user_quota_period_seconds: int = Field(default=3600, ge=0)
    user_quota_bytes: int = Field(default=64_000_000, ge=0)


class Api(SettingsModel):
    default_torrent_page_size: int = Field(default=10, ge=0)
    max_torrent_page_size: int = Field(default=30, ge=0)


class Email(SettingsModel):
    required: bool = Field(default=False)
    verified: bool = Field(default=False)


class Registration(SettingsModel):
    email: Email | None = Field(default=None)


class TrackerStatisticsImporter(SettingsModel):
    cron_job: str = Field(default="0 */10 * * * *")
    port: int = Field(default=3002, ge=0, le=65535)
    torrent_info_update_interval: int = Field(default=3600, ge=0)


# ── Document ─────────────────────────────────────────────────────────────


class Settings(SettingsModel):
    """The whole index configuration."""

    metadata: Metadata = Field(default_factory=Metadata)
    logging: Logging = Field(default_factory=Logging)
    website: Website = Field(default_factory=Website)
    tracker: Tracker = Field(default_factory=Tracker)
    net: Network = Field(default_factory=Network)
    auth: Auth = Field(default_factory=Auth)
    database: Database = Field(default_factory=Database)
    mail: Mail = Field(default_factory=Mail)
    image_cache: ImageCache = Field(default_factory=ImageCache)
    api: Api = Field(default_factory=Api)
    registration: Registration | None = Field(default=None)
    tracker_statistics_importer: TrackerStatisticsImporter = Field(default_factory=TrackerStatisticsImporter)

    def to_layer_data(self) -> dict[str, Any]:
        """Plain nested mapping of this document, keyed by TOML names, secrets unmasked."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            context={"reveal_secrets": True},
        )


__all__ = [
    "VERSION_2",
    "LATEST_VERSION",
    "FREE_PORT",
    "App",
    "Purpose",
    "Metadata",
    "Threshold",
    "Logging",
    "Demo",
    "TermsPage",
    "TermsUpload",
    "Terms",
    "Website",
    "Tracker",
    "Tsl",
    "Network",
    "PasswordConstraints",
    "Auth",
    "Database",
    "Credentials",
    "Smtp",
    "Mail",
    "ImageCache",
    "Api",
    "Email",
    "Registration",
    "TrackerStatisticsImporter",
    "Settings",
]
