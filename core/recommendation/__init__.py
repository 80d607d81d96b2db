"""
Recommendation Engine

Rule-based property recommendations with explanations and display
categories.
"""

from .models import (
    Category,
    ReasonKind,
    Recommendation,
    RecommendationConfig,
    RecommendationReason,
)
from .rules import SCORING_RULES, ScoringContext, ScoringRule
from .scorer import RecommendationScorer, filter_by_category

__all__ = [
    # Models
    "Category",
    "ReasonKind",
    "Recommendation",
    "RecommendationConfig",
    "RecommendationReason",
    # Rules
    "SCORING_RULES",
    "ScoringContext",
    "ScoringRule",
    # Engine
    "RecommendationScorer",
    "filter_by_category",
]
