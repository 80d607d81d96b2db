"""
Property Analytics Engine - Core Business Logic

Pure, deterministic engines over in-memory property collections:
1. Mortgage Calculator (monthly payment breakdown)
2. Market Statistics (collection summaries)
3. Comparison Analyzer (side-by-side metrics)
4. Recommendation Scorer (ranked, explained suggestions)

None of the engines perform I/O or depend on each other's output.
"""

from .models import (
    InputValidationError,
    PropertyId,
    PropertyRecord,
    PropertyType,
    UserPreferenceProfile,
    index_by_id,
)
from .mortgage import (
    AmortizationYear,
    MortgageBreakdown,
    MortgageCalculator,
    MortgageInputs,
)
from .market_stats import MarketStats, MarketStatsAggregator
from .comparison import ComparisonAnalyzer, ComparisonMetrics

# Recommendation Engine
from .recommendation import (
    Category,
    ReasonKind,
    Recommendation,
    RecommendationConfig,
    RecommendationReason,
    RecommendationScorer,
    filter_by_category,
)

# Catalog helpers
from .catalog import CatalogFilter, SortOrder, filter_properties, sort_properties

__all__ = [
    # Models
    "InputValidationError",
    "PropertyId",
    "PropertyRecord",
    "PropertyType",
    "UserPreferenceProfile",
    "index_by_id",
    # Mortgage
    "AmortizationYear",
    "MortgageBreakdown",
    "MortgageCalculator",
    "MortgageInputs",
    # Market statistics
    "MarketStats",
    "MarketStatsAggregator",
    # Comparison
    "ComparisonAnalyzer",
    "ComparisonMetrics",
    # Recommendations
    "Category",
    "ReasonKind",
    "Recommendation",
    "RecommendationConfig",
    "RecommendationReason",
    "RecommendationScorer",
    "filter_by_category",
    # Catalog
    "CatalogFilter",
    "SortOrder",
    "filter_properties",
    "sort_properties",
]
