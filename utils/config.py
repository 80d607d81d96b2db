"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from typing import List

from core.recommendation import RecommendationConfig


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    allowed_origins: List[str] = field(
        default_factory=lambda: _split_origins(os.getenv("ALLOWED_ORIGINS", ""))
    )

    # Comparison
    max_comparisons: int = field(default_factory=lambda: int(os.getenv("MAX_COMPARISONS", "3")))

    # Market statistics / trending
    new_listing_years: int = field(
        default_factory=lambda: int(os.getenv("NEW_LISTING_YEARS", "2"))
    )

    # Recommendations
    luxury_price_threshold: float = field(
        default_factory=lambda: float(os.getenv("LUXURY_PRICE_THRESHOLD", "1500000"))
    )
    budget_price_threshold: float = field(
        default_factory=lambda: float(os.getenv("BUDGET_PRICE_THRESHOLD", "600000"))
    )
    recommendation_limit: int = field(
        default_factory=lambda: int(os.getenv("RECOMMENDATION_LIMIT", "12"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def recommendation_config(self) -> RecommendationConfig:
        """Scorer thresholds from this configuration."""
        return RecommendationConfig(
            luxury_price_threshold=self.luxury_price_threshold,
            budget_price_threshold=self.budget_price_threshold,
            recent_years=self.new_listing_years,
            limit=self.recommendation_limit,
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "allowed_origins": list(self.allowed_origins),
            "max_comparisons": self.max_comparisons,
            "new_listing_years": self.new_listing_years,
            "luxury_price_threshold": self.luxury_price_threshold,
            "budget_price_threshold": self.budget_price_threshold,
            "recommendation_limit": self.recommendation_limit,
        }
