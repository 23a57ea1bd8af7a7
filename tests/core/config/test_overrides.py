"""Tests for torrent_index.core.config.overrides: env var → option mapping."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from torrent_index.core.config.overrides import (
    CONFIG_OVERRIDE_PREFIX,
    OVERRIDES_LAYER,
    collect_overrides,
    override_path,
    parse_override_value,
)


# ── parse_override_value ─────────────────────────────────────────────────


class TestParseOverrideValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('["a", "b"]', ["a", "b"]),
            ("[1, 2]", [1, 2]),
            ("{ a = 1, b = true }", {"a": 1, "b": True}),
        ],
    )
    def test_arrays_and_inline_tables_are_parsed(self, raw, expected):
        assert parse_override_value(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "true",
            "3002",
            "1.5",
            '"quoted"',
            "0xdeadbeef",
            "1e3",
            "1_000",
            "+42",
            "0o17",
            "123 #tail",
            "1979-05-27",
        ],
    )
    def test_scalars_keep_their_exact_text(self, raw):
        assert parse_override_value(raw) == raw

    @pytest.mark.parametrize(
        "raw",
        [
            "XYZ",
            "OVERRIDDEN API TOKEN",
            "0.0.0.0:3001",
            "[::1]:3001",
            "{not toml",
            "2.0.0",
            "http://localhost",
            "",
        ],
    )
    def test_non_toml_text_stays_a_string(self, raw):
        assert parse_override_value(raw) == raw

    def test_multiline_stays_a_string(self):
        assert parse_override_value("[1,\n2]") == "[1,\n2]"


# ── override_path ────────────────────────────────────────────────────────


class TestOverridePath:
    def test_nested_path_is_lower_cased(self):
        assert override_path("TORRUST_INDEX_CONFIG_OVERRIDE_NET__TSL__SSL_KEY_PATH") == [
            "net",
            "tsl",
            "ssl_key_path",
        ]

    def test_single_underscore_is_part_of_the_segment(self):
        assert override_path("TORRUST_INDEX_CONFIG_OVERRIDE_AUTH__USER_CLAIM_TOKEN_PEPPER") == [
            "auth",
            "user_claim_token_pepper",
        ]

    def test_unrelated_variable(self):
        assert override_path("HOME") is None

    def test_empty_segment(self):
        assert override_path("TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER____TOKEN") is None
        assert override_path(CONFIG_OVERRIDE_PREFIX) is None


# ── collect_overrides ────────────────────────────────────────────────────


class TestCollectOverrides:
    def test_builds_nested_layer(self):
        layer = collect_overrides(
            {
                "TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER__TOKEN": "XYZ",
                "TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER__LISTED": "true",
                "TORRUST_INDEX_CONFIG_OVERRIDE_WEBSITE__NAME": "My Index",
                "PATH": "/usr/bin",
            }
        )
        assert layer.name == OVERRIDES_LAYER
        assert layer.data == {
            "tracker": {"token": "XYZ", "listed": "true"},
            "website": {"name": "My Index"},
        }

    def test_empty_environment(self):
        assert collect_overrides({}).data == {}

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER__TOKEN", "from-os")
        assert collect_overrides().data == {"tracker": {"token": "from-os"}}

    def test_invalid_names_are_ignored_with_warning(self):
        with capture_logs() as logs:
            layer = collect_overrides({"TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER____TOKEN": "x"})
        assert layer.data == {}
        assert any(e["event"] == "config_override_ignored" for e in logs)

    def test_values_are_never_logged(self):
        with capture_logs() as logs:
            collect_overrides({"TORRUST_INDEX_CONFIG_OVERRIDE_TRACKER__TOKEN": "s3cr3t"})
        collected = [e for e in logs if e["event"] == "config_overrides_collected"]
        assert collected[0]["paths"] == ["tracker.token"]
        assert "s3cr3t" not in repr(logs)

    def test_deeper_path_wins_over_scalar_in_name_order(self):
        layer = collect_overrides(
            {
                "TORRUST_INDEX_CONFIG_OVERRIDE_NET__TSL": "x",
                "TORRUST_INDEX_CONFIG_OVERRIDE_NET__TSL__SSL_CERT_PATH": "/c.pem",
            }
        )
        assert layer.data == {"net": {"tsl": {"ssl_cert_path": "/c.pem"}}}

    def test_custom_prefix_and_separator(self):
        layer = collect_overrides({"APP_A_B": "1"}, prefix="APP_", separator="_")
        assert layer.data == {"a": {"b": "1"}}
