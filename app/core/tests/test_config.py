"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings


def test_settings_has_defaults():
    """Settings should have sensible defaults."""
    settings = Settings()

    assert settings.app_name == "ProductSalesAPI"
    assert settings.app_env == "development"
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.api_port == 5000
    assert settings.cors_origins == ["http://localhost:3000"]


def test_settings_report_defaults():
    """Report settings should match the dashboard's expectations."""
    settings = Settings()

    assert settings.search_year == 2021
    assert settings.min_year == 1900
    assert settings.product_categories == [
        "men's clothing",
        "women's clothing",
        "electronics",
        "jewelry",
    ]


def test_settings_is_development_property():
    """is_development should return True for development env."""
    settings = Settings(app_env="development")
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_is_production_property():
    """is_production should return True for production env."""
    settings = Settings(app_env="production")
    assert settings.is_development is False
    assert settings.is_production is True


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SEARCH_YEAR", "2022")
    monkeypatch.setenv("PRODUCT_CATEGORIES", '["books", "toys"]')

    settings = Settings()

    assert settings.app_name == "TestApp"
    assert settings.debug is True
    assert settings.log_level == "DEBUG"
    assert settings.search_year == 2022
    assert settings.product_categories == ["books", "toys"]


def test_settings_rejects_empty_categories():
    """An empty category list cannot produce a distribution."""
    with pytest.raises(ValidationError):
        Settings(product_categories=[])


def test_settings_rejects_duplicate_categories():
    """Duplicated labels would be reported twice."""
    with pytest.raises(ValidationError, match="Duplicate"):
        Settings(product_categories=["electronics", "electronics"])
