"""Tests for torrent_index.core.config.settings: schema v2 and its defaults."""

from __future__ import annotations

import json

import pytest
from pydantic import SecretStr, ValidationError

from torrent_index.core.config.settings import (
    FREE_PORT,
    VERSION_2,
    App,
    Metadata,
    Settings,
    Threshold,
    Tsl,
)


# ── Defaults ─────────────────────────────────────────────────────────────


class TestDefaults:
    def test_metadata(self):
        settings = Settings()
        assert settings.metadata.app is App.TORRUST_INDEX
        assert settings.metadata.schema_version == VERSION_2 == "2.0.0"

    def test_sections(self):
        settings = Settings()
        assert settings.logging.threshold is Threshold.INFO
        assert settings.website.name == "Torrust"
        assert settings.website.demo is None
        assert str(settings.tracker.api_url) == "http://localhost:1212/"
        assert settings.tracker.token_valid_seconds == 7_257_600
        assert settings.net.base_url is None
        assert settings.net.bind_address == "0.0.0.0:3001"
        assert settings.net.tsl is None
        assert settings.auth.password_constraints.min_password_length == 6
        assert settings.auth.password_constraints.max_password_length == 64
        assert settings.database.connect_url == "sqlite://data.db?mode=rwc"
        assert settings.mail.from_ == "example@email.com"
        assert settings.mail.smtp.port == 25
        assert settings.image_cache.capacity == 128_000_000
        assert settings.api.max_torrent_page_size == 30
        assert settings.registration is None
        assert settings.tracker_statistics_importer.port == 3002

    def test_secret_defaults(self):
        settings = Settings()
        assert settings.tracker.token.get_secret_value() == "MyAccessToken"
        assert settings.auth.user_claim_token_pepper.get_secret_value() == "MaxVerstappenWC2021"

    def test_free_port(self):
        assert FREE_PORT == 0

    def test_metadata_str(self):
        assert str(Metadata()) == (
            "Metadata(app: torrust-index, purpose: configuration, schema_version: 2.0.0)"
        )


# ── Secrets ──────────────────────────────────────────────────────────────


class TestSecrets:
    def test_redacted_in_repr(self):
        assert "MyAccessToken" not in repr(Settings())

    def test_redacted_in_json(self):
        dumped = json.loads(Settings().model_dump_json(by_alias=True))
        assert dumped["tracker"]["token"] == "**********"
        assert dumped["auth"]["user_claim_token_pepper"] == "**********"

    def test_revealed_in_layer_data(self):
        data = Settings().to_layer_data()
        assert data["tracker"]["token"] == "MyAccessToken"
        assert data["mail"]["smtp"]["credentials"]["password"] == ""

    def test_compared_by_value(self):
        a = Settings.model_validate({"tracker": {"token": "x"}})
        b = Settings.model_validate({"tracker": {"token": "x"}})
        c = Settings.model_validate({"tracker": {"token": "y"}})
        assert a == b
        assert a != c

    def test_number_becomes_secret_text(self):
        settings = Settings.model_validate({"tracker": {"token": 42}})
        assert settings.tracker.token == SecretStr("42")


# ── Parsing rules ────────────────────────────────────────────────────────


class TestParsing:
    def test_mail_from_alias(self):
        settings = Settings.model_validate({"mail": {"from": "admin@example.org"}})
        assert settings.mail.from_ == "admin@example.org"
        assert settings.to_layer_data()["mail"]["from"] == "admin@example.org"

    def test_unknown_keys_are_ignored(self):
        settings = Settings.model_validate({"unknown": {"a": 1}, "tracker": {"color": "red"}})
        assert settings == Settings()

    def test_empty_tls_paths_mean_unset(self):
        tsl = Tsl.model_validate({"ssl_cert_path": "", "ssl_key_path": "/k.pem"})
        assert tsl.ssl_cert_path is None
        assert tsl.ssl_key_path == "/k.pem"

    def test_optional_sections(self):
        settings = Settings.model_validate(
            {
                "website": {"demo": {}},
                "registration": {"email": {"required": True}},
            }
        )
        assert settings.website.demo is not None
        assert settings.registration.email.required is True
        assert settings.registration.email.verified is False

    def test_numbers_fill_text_fields(self):
        assert Settings.model_validate({"website": {"name": 7}}).website.name == "7"

    def test_invalid_url_rejected(self):
        with pytest.raises(ValidationError):
            Settings.model_validate({"net": {"base_url": "not a url"}})

    def test_negative_port_rejected(self):
        with pytest.raises(ValidationError):
            Settings.model_validate({"mail": {"smtp": {"port": -1}}})

    def test_assignment_is_validated(self):
        settings = Settings()
        settings.net.base_url = "http://localhost"
        assert str(settings.net.base_url) == "http://localhost/"
        with pytest.raises(ValidationError):
            settings.logging.threshold = "loud"
