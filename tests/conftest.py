"""
Shared pytest fixtures and configuration for torrent-index tests.

This module provides:
- Environment isolation: every ``TORRUST_INDEX_*`` variable is removed
- Logging reset so structlog/stdlib state never leaks between tests
- Configuration document fixtures (full defaults, mandatory-only)

Usage:
    Fixtures are auto-discovered by pytest. Simply use them as function
    arguments (pytest injects them automatically).

    def test_something(mandatory_toml):
        ...
"""

import logging
import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

# Ensure torrent_index package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_index_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Remove every ``TORRUST_INDEX_*`` variable for the duration of a test.

    Overrides and discovery variables set by the developer's shell must not
    change what the tests resolve.
    """
    for name in list(os.environ):
        if name.startswith("TORRUST_INDEX_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults and the root logger after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


# =============================================================================
# Configuration Documents
# =============================================================================


MANDATORY_TOML = """
[metadata]
schema_version = "2.0.0"

[logging]
threshold = "info"

[tracker]
token = "MyAccessToken"

[auth]
user_claim_token_pepper = "MaxVerstappenWC2021"
"""


@pytest.fixture
def mandatory_toml() -> str:
    """Only the mandatory options, set to their compiled-in default values."""
    return MANDATORY_TOML


@pytest.fixture
def default_config_toml() -> str:
    """A full document whose values equal the compiled-in defaults."""
    return (FIXTURES_DIR / "default_configuration.toml").read_text(encoding="utf-8")


@pytest.fixture
def config_file(tmp_path: Path, default_config_toml: str) -> Path:
    """The full default document written to ``index.toml`` in a temp dir."""
    path = tmp_path / "index.toml"
    path.write_text(default_config_toml, encoding="utf-8")
    return path
