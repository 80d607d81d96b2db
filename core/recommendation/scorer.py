"""
Recommendation Scorer

Ranks a candidate pool against a reference property ("more like this"),
a user preference profile, or both.

Pipeline order:
1. EXCLUDE - Drop the reference property from the pool
2. SCORE - Sum every satisfied rule in SCORING_RULES
3. EXPLAIN - Keep the highest-point reasons
4. CATEGORISE - Luxury / Budget / Trending / Similar
5. RANK - Stable sort by score, truncate to the configured limit
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from ..models import InputValidationError, PropertyRecord, UserPreferenceProfile
from .models import Category, Recommendation, RecommendationConfig
from .rules import SCORING_RULES, ScoringContext, ScoringRule


logger = logging.getLogger(__name__)


class RecommendationScorer:
    """
    Additive, rule-based recommendation engine.

    Deterministic: identical inputs always produce identical output.
    """

    def __init__(
        self,
        config: Optional[RecommendationConfig] = None,
        rules: Optional[List[ScoringRule]] = None,
    ):
        """
        Initialize scorer.

        Args:
            config: Thresholds and limits (default: RecommendationConfig())
            rules: Scoring rules in tie-break order (default: SCORING_RULES)
        """
        self._config = config or RecommendationConfig()
        self._rules = list(rules) if rules is not None else list(SCORING_RULES)
        self._reference_year = self._config.reference_year or date.today().year

    @property
    def config(self) -> RecommendationConfig:
        return self._config

    def recommend(
        self,
        records: Iterable[PropertyRecord],
        reference: Optional[PropertyRecord] = None,
        preferences: Optional[UserPreferenceProfile] = None,
    ) -> List[Recommendation]:
        """
        Produce the top recommendations.

        Args:
            records: Full candidate collection
            reference: Property being viewed, excluded from the results
            preferences: User preference profile

        Returns:
            Recommendations sorted by match score (descending), ties in
            collection order, truncated to the configured limit
        """
        context = ScoringContext(
            reference=reference,
            preferences=preferences,
            config=self._config,
        )

        candidates = [
            r for r in records
            if reference is None or r.id != reference.id
        ]
        scored = [self.score(candidate, context) for candidate in candidates]

        # sorted() is stable, so equal scores keep collection order
        ranked = sorted(scored, key=lambda rec: rec.match_score, reverse=True)

        logger.debug(
            "Scored %d candidates (reference=%s, preferences=%s)",
            len(candidates),
            reference.id if reference is not None else None,
            preferences is not None,
        )

        return ranked[:self._config.limit]

    def score(self, candidate: PropertyRecord, context: ScoringContext) -> Recommendation:
        """Score a single candidate against the context."""
        reasons = []
        for rule in self._rules:
            reason = rule.evaluate(candidate, context)
            if reason is not None:
                reasons.append(reason)

        total = sum(reason.points for reason in reasons)
        top_reasons = sorted(reasons, key=lambda r: r.points, reverse=True)

        return Recommendation(
            property=candidate,
            match_score=total,
            category=self.categorise(candidate),
            reasons=top_reasons[:self._config.max_reasons],
        )

    def categorise(self, record: PropertyRecord) -> Category:
        """Assign the display category from price and recency."""
        if record.price > self._config.luxury_price_threshold:
            return Category.LUXURY
        if record.price < self._config.budget_price_threshold:
            return Category.BUDGET
        if record.featured or record.is_recent(self._reference_year, self._config.recent_years):
            return Category.TRENDING
        return Category.SIMILAR


def filter_by_category(
    recommendations: Iterable[Recommendation],
    category: Optional[str],
) -> List[Recommendation]:
    """
    Keep recommendations in one category.

    None or "all" keeps everything.

    Raises:
        InputValidationError: if the category name is unknown
    """
    if category is None or category.lower().strip() == "all":
        return list(recommendations)
    wanted = Category.from_string(category)
    if wanted is None:
        raise InputValidationError("category", f"unknown category {category!r}")
    return [rec for rec in recommendations if rec.category == wanted]
