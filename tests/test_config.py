"""Tests for env-based settings."""

from __future__ import annotations

import logging

import pytest

from vault_deck.config import settings
from vault_deck.logger import setup_logging


@pytest.fixture(autouse=True)
def fresh_settings():
    settings.cache_clear()
    yield
    settings.cache_clear()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("VAULT_API_URL", "https://db.example")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("REFRESH_SECONDS", "15")
    monkeypatch.setenv("MOCK_FALLBACK", "false")

    cfg = settings()

    assert cfg["VAULT_API_URL"] == "https://db.example"
    assert cfg["REQUEST_TIMEOUT"] == 2.5
    assert cfg["REFRESH_SECONDS"] == 15
    assert cfg["MOCK_FALLBACK"] is False


@pytest.mark.parametrize("raw, expected", [("1", True), ("YES", True), ("on", True), ("0", False), ("nope", False)])
def test_mock_fallback_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("MOCK_FALLBACK", raw)
    assert settings()["MOCK_FALLBACK"] is expected


def test_mock_fallback_defaults_on(monkeypatch):
    monkeypatch.delenv("MOCK_FALLBACK", raising=False)
    assert settings()["MOCK_FALLBACK"] is True


def test_setup_logging_level():
    setup_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING

    setup_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING
