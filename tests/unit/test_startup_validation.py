"""Tests for startup validation functions."""

import pytest

from src.core.config import settings
from src.main import validate_startup_configuration


def test_production_without_secret_key_exits(monkeypatch) -> None:
    """Production refuses to start with per-process signing keys."""
    monkeypatch.setattr(settings, "environment", "production")
    monkeypatch.setattr(settings, "secret_key", None)

    with pytest.raises(SystemExit) as exc_info:
        validate_startup_configuration()

    assert exc_info.value.code == 1


def test_production_with_secret_key_passes(monkeypatch) -> None:
    monkeypatch.setattr(settings, "environment", "production")
    monkeypatch.setattr(settings, "secret_key", "configured")

    validate_startup_configuration()


def test_development_without_secret_key_warns(monkeypatch, caplog) -> None:
    """Outside production a missing key is a warning, not a failure."""
    monkeypatch.setattr(settings, "environment", "development")
    monkeypatch.setattr(settings, "secret_key", None)

    with caplog.at_level("WARNING", logger="src.main"):
        validate_startup_configuration()

    assert any(record.message == "startup_validation" for record in caplog.records)
