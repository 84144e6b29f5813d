"""Tests for configuration."""

import pytest

from cashflow.config import (
    AppSettings,
    ReportSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CASHFLOW_STORAGE_BACKEND", raising=False)
        assert StorageSettings().backend == "file"
        assert ReportSettings().filename_prefix == "cashflow"
        assert AppSettings().max_amount == 10_000_000.0

    def test_storage_from_env(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("CASHFLOW_STORAGE_RETRY_ATTEMPTS", "5")
        settings = get_settings().storage
        assert settings.backend == "memory"
        assert settings.retry_attempts == 5

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_STORAGE_BACKEND", "s3")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_default_currency_upper_cased(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_REPORT_DEFAULT_CURRENCY", "gbp")
        assert ReportSettings().default_currency == "GBP"

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_STORAGE_BACKEND", "memory")
        results = validate_all_settings()
        assert results == {"storage": True, "reports": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("CASHFLOW_STORAGE_RETRY_ATTEMPTS", "0")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results
