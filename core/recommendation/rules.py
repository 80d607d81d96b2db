"""
Scoring rules for the recommendation engine.

Each rule is a (predicate, weight, reason template) entry evaluated the
same way for every candidate. Rules are listed in tie-break order: when
two reasons carry equal points, the one listed first ranks first.

Reference rules compare a candidate with the property being viewed.
Preference rules compare it with the user's stated preferences.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from ..models import PropertyRecord, UserPreferenceProfile
from .models import ReasonKind, RecommendationConfig, RecommendationReason


# =============================================================================
# Rule Weights
# =============================================================================

POINTS_SAME_LOCATION = 30
POINTS_SIMILAR_PRICE = 25
POINTS_SAME_TYPE = 20
POINTS_SAME_BEDROOMS = 15
POINTS_PER_SHARED_AMENITY = 5
MAX_POINTS_SHARED_AMENITIES = 20

POINTS_WITHIN_BUDGET = 25
POINTS_PREFERRED_TYPE = 20
POINTS_PREFERRED_LOCATION = 20
POINTS_PREFERRED_BEDROOMS = 15
POINTS_PER_PREFERRED_AMENITY = 3
MAX_POINTS_PREFERRED_AMENITIES = 15

POINTS_FEATURED = 10


@dataclass(frozen=True)
class ScoringContext:
    """Everything a rule may look at besides the candidate."""

    reference: Optional[PropertyRecord]
    preferences: Optional[UserPreferenceProfile]
    config: RecommendationConfig


@dataclass(frozen=True)
class ScoringRule:
    """
    A single additive scoring rule.

    `weight` returns the points awarded (0 means the rule does not
    apply); `reason` renders the explanation for a non-zero award.
    """

    name: str
    kind: ReasonKind
    weight: Callable[[PropertyRecord, ScoringContext], int]
    reason: Callable[[PropertyRecord, ScoringContext], str]

    def evaluate(
        self,
        candidate: PropertyRecord,
        context: ScoringContext,
    ) -> Optional[RecommendationReason]:
        points = self.weight(candidate, context)
        if points <= 0:
            return None
        return RecommendationReason(
            kind=self.kind,
            text=self.reason(candidate, context),
            points=points,
        )


def _fixed(points: int, predicate: Callable[[PropertyRecord, ScoringContext], bool]):
    """Award `points` when `predicate` holds."""
    def weight(candidate: PropertyRecord, context: ScoringContext) -> int:
        return points if predicate(candidate, context) else 0
    return weight


def _text(template: str):
    def reason(candidate: PropertyRecord, context: ScoringContext) -> str:
        return template
    return reason


# =============================================================================
# Reference Rules
# =============================================================================

def _same_location(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return context.reference is not None and candidate.location == context.reference.location


def _similar_price(candidate: PropertyRecord, context: ScoringContext) -> bool:
    reference = context.reference
    if reference is None:
        return False
    difference = abs(candidate.price - reference.price) / reference.price
    return difference <= context.config.price_proximity


def _same_type(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return (
        context.reference is not None
        and candidate.property_type == context.reference.property_type
    )


def _same_bedrooms(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return context.reference is not None and candidate.bedrooms == context.reference.bedrooms


def _shared_amenities(candidate: PropertyRecord, context: ScoringContext) -> int:
    if context.reference is None:
        return 0
    return len(candidate.amenities & context.reference.amenities)


def _shared_amenity_points(candidate: PropertyRecord, context: ScoringContext) -> int:
    shared = _shared_amenities(candidate, context)
    return min(shared * POINTS_PER_SHARED_AMENITY, MAX_POINTS_SHARED_AMENITIES)


# =============================================================================
# Preference Rules
# =============================================================================

def _within_budget(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return context.preferences is not None and context.preferences.price_in_range(candidate.price)


def _preferred_type(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return (
        context.preferences is not None
        and candidate.property_type in context.preferences.property_types
    )


def _preferred_location(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return context.preferences is not None and candidate.location in context.preferences.locations


def _preferred_bedrooms(candidate: PropertyRecord, context: ScoringContext) -> bool:
    return (
        context.preferences is not None
        and context.preferences.bedrooms is not None
        and candidate.bedrooms == context.preferences.bedrooms
    )


def _preferred_amenities(candidate: PropertyRecord, context: ScoringContext) -> int:
    if context.preferences is None:
        return 0
    return len(candidate.amenities & context.preferences.amenities)


def _preferred_amenity_points(candidate: PropertyRecord, context: ScoringContext) -> int:
    matched = _preferred_amenities(candidate, context)
    return min(matched * POINTS_PER_PREFERRED_AMENITY, MAX_POINTS_PREFERRED_AMENITIES)


SCORING_RULES: List[ScoringRule] = [
    ScoringRule(
        name="same_location",
        kind=ReasonKind.LOCATION,
        weight=_fixed(POINTS_SAME_LOCATION, _same_location),
        reason=lambda c, ctx: f"Same area as {ctx.reference.display_name}",
    ),
    ScoringRule(
        name="similar_price",
        kind=ReasonKind.PRICE,
        weight=_fixed(POINTS_SIMILAR_PRICE, _similar_price),
        reason=_text("Similar price range"),
    ),
    ScoringRule(
        name="same_type",
        kind=ReasonKind.TYPE,
        weight=_fixed(POINTS_SAME_TYPE, _same_type),
        reason=_text("Same property type"),
    ),
    ScoringRule(
        name="same_bedrooms",
        kind=ReasonKind.SIZE,
        weight=_fixed(POINTS_SAME_BEDROOMS, _same_bedrooms),
        reason=lambda c, ctx: f"{c.bedrooms} bedrooms like current property",
    ),
    ScoringRule(
        name="shared_amenities",
        kind=ReasonKind.AMENITIES,
        weight=_shared_amenity_points,
        reason=lambda c, ctx: f"{_shared_amenities(c, ctx)} shared amenities",
    ),
    ScoringRule(
        name="within_budget",
        kind=ReasonKind.PRICE,
        weight=_fixed(POINTS_WITHIN_BUDGET, _within_budget),
        reason=_text("Within your budget"),
    ),
    ScoringRule(
        name="preferred_type",
        kind=ReasonKind.TYPE,
        weight=_fixed(POINTS_PREFERRED_TYPE, _preferred_type),
        reason=_text("Matches your preferred type"),
    ),
    ScoringRule(
        name="preferred_location",
        kind=ReasonKind.LOCATION,
        weight=_fixed(POINTS_PREFERRED_LOCATION, _preferred_location),
        reason=_text("In your preferred area"),
    ),
    ScoringRule(
        name="preferred_bedrooms",
        kind=ReasonKind.SIZE,
        weight=_fixed(POINTS_PREFERRED_BEDROOMS, _preferred_bedrooms),
        reason=_text("Perfect bedroom count"),
    ),
    ScoringRule(
        name="preferred_amenities",
        kind=ReasonKind.AMENITIES,
        weight=_preferred_amenity_points,
        reason=lambda c, ctx: f"Has {_preferred_amenities(c, ctx)} preferred amenities",
    ),
    ScoringRule(
        name="featured",
        kind=ReasonKind.FEATURED,
        weight=_fixed(POINTS_FEATURED, lambda c, ctx: c.featured),
        reason=_text("Featured property"),
    ),
]
