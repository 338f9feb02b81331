"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from decimal import Decimal

from bulkfiling.core.config import AppSettings, CRMConfig, ParserConfig, PricingConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.pricing.source == "static"
    assert settings.s3.bucket == "bulkfiling-uploads"


def test_pricing_defaults():
    config = PricingConfig()
    assert config.monitoring_fee == Decimal("249")
    assert config.filing_fee == Decimal("398")


def test_crm_defaults():
    config = CRMConfig()
    assert config.base_url == "https://services.leadconnectorhq.com"
    assert config.api_version == "2021-07-28"
    assert config.api_key == ""


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BULKFILING_PARSER_CHUNK_SIZE", "10")
    monkeypatch.setenv("BULKFILING_PRICING_FILING_FEE", "410.00")
    assert ParserConfig().chunk_size == 10
    assert PricingConfig().filing_fee == Decimal("410.00")
