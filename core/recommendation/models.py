"""
Data models for the recommendation engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..models import InputValidationError, PropertyRecord


# =============================================================================
# Configuration Constants
# =============================================================================

LUXURY_PRICE_THRESHOLD = 1_500_000
BUDGET_PRICE_THRESHOLD = 600_000

# "Trending" when built within this many years
RECENT_BUILD_YEARS = 2

RECOMMENDATION_LIMIT = 12
MAX_REASONS = 3

# Relative price difference counted as "similar price"
PRICE_PROXIMITY = 0.20


class ReasonKind(Enum):
    """What aspect of the property a reason refers to."""
    LOCATION = "location"
    PRICE = "price"
    TYPE = "type"
    SIZE = "size"
    AMENITIES = "amenities"
    FEATURED = "featured"


class Category(Enum):
    """
    Coarse display category, independent of the match score.

    Luxury: price above the luxury threshold
    Budget: price below the budget threshold
    Trending: featured or recently built
    Similar: everything else
    """
    LUXURY = "luxury"
    BUDGET = "budget"
    TRENDING = "trending"
    SIMILAR = "similar"

    @classmethod
    def from_string(cls, value: str) -> Optional["Category"]:
        """Convert string to Category, case-insensitive."""
        normalised = value.lower().strip()
        for member in cls:
            if member.value == normalised:
                return member
        return None


@dataclass(frozen=True)
class RecommendationConfig:
    """Tunable thresholds for scoring and categorisation."""

    luxury_price_threshold: float = LUXURY_PRICE_THRESHOLD
    budget_price_threshold: float = BUDGET_PRICE_THRESHOLD
    recent_years: int = RECENT_BUILD_YEARS
    reference_year: Optional[int] = None
    limit: int = RECOMMENDATION_LIMIT
    price_proximity: float = PRICE_PROXIMITY
    max_reasons: int = MAX_REASONS

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.budget_price_threshold > self.luxury_price_threshold:
            raise InputValidationError(
                "budget_price_threshold", "must not exceed luxury_price_threshold"
            )
        if self.recent_years < 0:
            raise InputValidationError("recent_years", "must not be negative")
        if self.limit < 0:
            raise InputValidationError("limit", "must not be negative")
        if self.price_proximity < 0:
            raise InputValidationError("price_proximity", "must not be negative")
        if self.max_reasons < 0:
            raise InputValidationError("max_reasons", "must not be negative")


@dataclass(frozen=True)
class RecommendationReason:
    """One satisfied scoring rule."""

    kind: ReasonKind
    text: str
    points: int

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "reason": self.text, "score": self.points}


@dataclass(frozen=True)
class Recommendation:
    """A scored candidate with its top reasons and display category."""

    property: PropertyRecord
    match_score: int
    category: Category
    reasons: List[RecommendationReason] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Flatten the property and add the recommendation fields."""
        data = self.property.to_dict()
        data.update({
            "matchScore": self.match_score,
            "reasons": [reason.to_dict() for reason in self.reasons],
            "category": self.category.value,
        })
        return data
