"""
Tests for configuration and formatting helpers.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import PropertyType
from utils import (
    Config,
    format_compact_price,
    format_currency,
    format_percent,
    format_price,
)


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "MAX_COMPARISONS", "ALLOWED_ORIGINS", "RECOMMENDATION_LIMIT"):
            monkeypatch.delenv(name, raising=False)

        config = Config.load()

        assert config.port == 8000
        assert config.max_comparisons == 3
        assert config.allowed_origins == []
        assert config.recommendation_limit == 12

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_COMPARISONS", "4")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
        monkeypatch.setenv("LUXURY_PRICE_THRESHOLD", "2000000")

        config = Config.load()

        assert config.max_comparisons == 4
        assert config.allowed_origins == ["http://a.test", "http://b.test"]
        assert config.luxury_price_threshold == 2000000

    def test_recommendation_config(self):
        config = Config(
            luxury_price_threshold=900000,
            budget_price_threshold=100000,
            new_listing_years=3,
            recommendation_limit=5,
        )

        rec_config = config.recommendation_config()

        assert rec_config.luxury_price_threshold == 900000
        assert rec_config.budget_price_threshold == 100000
        assert rec_config.recent_years == 3
        assert rec_config.limit == 5

    def test_to_dict(self):
        assert Config(port=9000).to_dict()["port"] == 9000


class TestFormatting:

    def test_currency(self):
        assert format_currency(1234567.4) == "$1,234,567"
        assert format_currency(500, "GBP") == "£500"
        assert format_currency(500, "KES") == "KES 500"

    def test_percent(self):
        assert format_percent(12.345) == "12.35%"
        assert format_percent(40, decimals=0) == "40%"

    def test_rent_price_is_monthly(self):
        assert format_price(2500, PropertyType.RENT) == "$2,500/month"
        assert format_price(450000, PropertyType.BUY) == "$450,000"

    @pytest.mark.parametrize("price,expected", [
        (1500000, "$1.5M"),
        (750000, "$750K"),
        (950, "$950"),
    ])
    def test_compact_price(self, price, expected):
        assert format_compact_price(price) == expected
