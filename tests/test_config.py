"""Tests for report settings."""

import pytest

from ledgerlens.config import DEFAULT_CURRENCY, ReportSettings


def test_defaults():
    settings = ReportSettings()
    assert settings.top_n == 10
    assert settings.lookup_timeout == 5.0
    assert settings.max_workers == 8
    assert settings.home_currency == DEFAULT_CURRENCY == "VND"
    assert settings.default_currency == "VND"


def test_from_env_reads_overrides():
    settings = ReportSettings.from_env(
        {
            "LEDGERLENS_TOP_N": "3",
            "LEDGERLENS_LOOKUP_TIMEOUT": "0.5",
            "LEDGERLENS_MAX_WORKERS": "2",
            "LEDGERLENS_HOME_CURRENCY": "EUR",
            "LEDGERLENS_DEFAULT_CURRENCY": "USD",
        }
    )
    assert settings == ReportSettings(
        top_n=3, lookup_timeout=0.5, max_workers=2, home_currency="EUR", default_currency="USD"
    )


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("LEDGERLENS_TOP_N", "7")
    assert ReportSettings.from_env().top_n == 7


def test_from_env_rejects_bad_numbers():
    with pytest.raises(ValueError, match="Invalid report setting"):
        ReportSettings.from_env({"LEDGERLENS_MAX_WORKERS": "many"})
