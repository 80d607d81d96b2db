"""
Tests for the Recommendation Scorer

Comprehensive tests verifying:
- Reference-based scoring rules and points
- Preference-based scoring rules and points
- Both inputs combine additively
- Reasons limited to the top three, ties in rule order
- Categories driven by configurable thresholds
- Stable ranking and top-K truncation
- Reference property excluded by id
- Degenerate inputs (empty pool, no reference, no preferences)
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import (
    Category,
    InputValidationError,
    PropertyRecord,
    PropertyType,
    ReasonKind,
    RecommendationConfig,
    RecommendationScorer,
    UserPreferenceProfile,
    filter_by_category,
)
from core.recommendation import SCORING_RULES


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def config():
    """Default thresholds with a fixed reference year."""
    return RecommendationConfig(reference_year=2024)


@pytest.fixture
def scorer(config):
    return RecommendationScorer(config=config)


@pytest.fixture
def create_property():
    """Factory fixture for creating property records."""
    def _create(
        property_id,
        price: float = 800000,
        location: str = "Westlands",
        property_type: PropertyType = PropertyType.BUY,
        bedrooms: int = 3,
        amenities=(),
        featured: bool = False,
        year_built=None,
        title: str = "",
    ) -> PropertyRecord:
        return PropertyRecord(
            id=property_id,
            price=price,
            location=location,
            address=f"{property_id} Test Street",
            property_type=property_type,
            bedrooms=bedrooms,
            bathrooms=2,
            sqft=1800,
            amenities=frozenset(amenities),
            featured=featured,
            year_built=year_built,
            title=title,
        )
    return _create


@pytest.fixture
def reference(create_property):
    """The property the user is viewing."""
    return create_property(
        1,
        price=800000,
        location="Westlands",
        property_type=PropertyType.BUY,
        bedrooms=3,
        amenities={"Pool", "Gym", "Garage"},
        title="Westlands Residence",
    )


def _score_of(results, property_id):
    for rec in results:
        if rec.property.id == property_id:
            return rec.match_score
    raise AssertionError(f"{property_id} not in results")


# =============================================================================
# Test: Reference Rules
# =============================================================================

class TestReferenceRules:
    """Scoring against the property being viewed."""

    def test_close_match_scores_every_rule(self, scorer, reference, create_property):
        candidate = create_property(
            2, price=850000, amenities={"Pool", "Gym"}, featured=True
        )

        [rec] = scorer.recommend([reference, candidate], reference=reference)

        # 30 location + 25 price + 20 type + 15 bedrooms + 10 amenities + 10 featured
        assert rec.match_score == 110

    def test_location_type_bedrooms_match_scores_at_least_65(
        self, scorer, reference, create_property
    ):
        candidate = create_property(2, price=300000)

        [rec] = scorer.recommend([candidate], reference=reference)

        assert rec.match_score >= 65
        assert rec.match_score == 65

    def test_price_within_twenty_percent(self, scorer, reference, create_property):
        near = create_property(2, price=960000, location="Karen", property_type=PropertyType.LAND, bedrooms=0)
        far = create_property(3, price=961000, location="Karen", property_type=PropertyType.LAND, bedrooms=0)

        results = scorer.recommend([near, far], reference=reference)

        assert _score_of(results, 2) == 25
        assert _score_of(results, 3) == 0

    def test_shared_amenities_capped_at_twenty(self, scorer, create_property):
        amenities = {"Pool", "Gym", "Garage", "Garden", "Security", "Lift"}
        reference = create_property(1, amenities=amenities, location="A", bedrooms=9)
        candidate = create_property(
            2, price=5000000, amenities=amenities, location="B",
            property_type=PropertyType.RENT, bedrooms=1,
        )

        [rec] = scorer.recommend([candidate], reference=reference)

        assert rec.match_score == 20
        assert rec.reasons[0].text == "6 shared amenities"

    def test_shared_amenities_five_points_each(self, scorer, reference, create_property):
        candidate = create_property(
            2, price=5000000, location="Karen", property_type=PropertyType.RENT,
            bedrooms=1, amenities={"Pool", "Gym", "Sauna"},
        )

        [rec] = scorer.recommend([candidate], reference=reference)

        assert rec.match_score == 10

    def test_location_reason_names_reference(self, scorer, reference, create_property):
        [rec] = scorer.recommend([create_property(2)], reference=reference)

        assert rec.reasons[0].kind == ReasonKind.LOCATION
        assert rec.reasons[0].text == "Same area as Westlands Residence"

    def test_reference_excluded_by_id(self, scorer, reference, create_property):
        # A different object with the reference's id is still excluded
        copy_of_reference = create_property(1, price=123456)

        results = scorer.recommend(
            [copy_of_reference, create_property(2)], reference=reference
        )

        assert [rec.property.id for rec in results] == [2]


# =============================================================================
# Test: Preference Rules
# =============================================================================

class TestPreferenceRules:
    """Scoring against a user preference profile."""

    @pytest.fixture
    def preferences(self):
        return UserPreferenceProfile(
            price_min=500000,
            price_max=900000,
            property_types={PropertyType.BUY},
            locations={"Karen"},
            bedrooms=4,
            amenities={"Pool", "Garden"},
        )

    def test_full_preference_match(self, scorer, preferences, create_property):
        candidate = create_property(
            2, price=700000, location="Karen", bedrooms=4, amenities={"Pool", "Garden"}
        )

        [rec] = scorer.recommend([candidate], preferences=preferences)

        # 25 budget + 20 type + 20 location + 15 bedrooms + 6 amenities
        assert rec.match_score == 86

    def test_budget_bounds_inclusive(self, scorer, preferences, create_property):
        results = scorer.recommend(
            [
                create_property(2, price=500000, location="X", property_type=PropertyType.LAND, bedrooms=0),
                create_property(3, price=900000, location="X", property_type=PropertyType.LAND, bedrooms=0),
                create_property(4, price=900001, location="X", property_type=PropertyType.LAND, bedrooms=0),
            ],
            preferences=preferences,
        )

        assert _score_of(results, 2) == 25
        assert _score_of(results, 3) == 25
        assert _score_of(results, 4) == 0

    def test_preferred_amenities_capped_at_fifteen(self, scorer, create_property):
        amenities = {"A", "B", "C", "D", "E", "F"}
        preferences = UserPreferenceProfile(amenities=amenities)

        [rec] = scorer.recommend(
            [create_property(2, amenities=amenities)], preferences=preferences
        )

        assert rec.match_score == 15
        assert rec.reasons[0].text == "Has 6 preferred amenities"

    def test_empty_profile_scores_nothing(self, scorer, create_property):
        [rec] = scorer.recommend(
            [create_property(2, amenities={"Pool"})],
            preferences=UserPreferenceProfile(),
        )

        assert rec.match_score == 0
        assert rec.reasons == []


# =============================================================================
# Test: Combined Inputs
# =============================================================================

class TestCombinedInputs:

    def test_reference_and_preferences_add_up(self, scorer, reference, create_property):
        preferences = UserPreferenceProfile(
            property_types={PropertyType.BUY}, locations={"Westlands"}
        )
        candidate = create_property(2, price=300000)

        [rec] = scorer.recommend([candidate], reference=reference, preferences=preferences)

        # 65 from the reference, 40 from the preferences
        assert rec.match_score == 105

    def test_top_three_reasons_only(self, scorer, reference, create_property):
        preferences = UserPreferenceProfile(price_min=0, price_max=10_000_000)
        candidate = create_property(2, price=850000, featured=True)

        [rec] = scorer.recommend([candidate], reference=reference, preferences=preferences)

        assert len(rec.reasons) == 3
        assert [r.points for r in rec.reasons] == [30, 25, 25]

    def test_equal_points_keep_rule_order(self, scorer, reference, create_property):
        """Similar price (reference) is listed before within budget (preferences)."""
        preferences = UserPreferenceProfile(price_min=0, price_max=10_000_000)
        candidate = create_property(2, price=850000)

        [rec] = scorer.recommend([candidate], reference=reference, preferences=preferences)

        assert [r.text for r in rec.reasons[:3]] == [
            "Same area as Westlands Residence",
            "Similar price range",
            "Within your budget",
        ]

    def test_rules_listed_in_documented_order(self):
        assert [rule.name for rule in SCORING_RULES] == [
            "same_location",
            "similar_price",
            "same_type",
            "same_bedrooms",
            "shared_amenities",
            "within_budget",
            "preferred_type",
            "preferred_location",
            "preferred_bedrooms",
            "preferred_amenities",
            "featured",
        ]


# =============================================================================
# Test: Degenerate Inputs
# =============================================================================

class TestDegenerateInputs:

    def test_empty_pool(self, scorer, reference):
        assert scorer.recommend([], reference=reference) == []

    def test_pool_of_only_the_reference(self, scorer, reference):
        assert scorer.recommend([reference], reference=reference) == []

    def test_no_reference_no_preferences_only_featured(self, scorer, create_property):
        records = [
            create_property(1),
            create_property(2, featured=True),
            create_property(3),
            create_property(4, featured=True),
        ]

        results = scorer.recommend(records)

        assert [rec.property.id for rec in results] == [2, 4, 1, 3]
        assert [rec.match_score for rec in results] == [10, 10, 0, 0]
        assert results[0].reasons[0].kind == ReasonKind.FEATURED


# =============================================================================
# Test: Ranking
# =============================================================================

class TestRanking:

    def test_sorted_by_score_descending(self, scorer, reference, create_property):
        records = [
            create_property(2, price=5000000, location="Karen", property_type=PropertyType.RENT, bedrooms=1),
            create_property(3, price=850000),
            create_property(4, price=300000),
        ]

        results = scorer.recommend(records, reference=reference)

        assert [rec.property.id for rec in results] == [3, 4, 2]

    def test_ties_keep_collection_order(self, scorer, create_property):
        records = [create_property(pid) for pid in (9, 3, 7, 1)]

        results = scorer.recommend(records)

        assert [rec.property.id for rec in results] == [9, 3, 7, 1]

    def test_truncated_to_limit(self, scorer, create_property):
        records = [create_property(pid) for pid in range(1, 21)]

        results = scorer.recommend(records)

        assert len(results) == 12
        assert [rec.property.id for rec in results] == list(range(1, 13))

    def test_limit_configurable(self, create_property):
        scorer = RecommendationScorer(RecommendationConfig(limit=2, reference_year=2024))

        assert len(scorer.recommend([create_property(pid) for pid in range(5)])) == 2

    def test_deterministic(self, scorer, reference, create_property):
        records = [create_property(pid, price=600000 + pid * 50000) for pid in range(2, 10)]

        first = scorer.recommend(records, reference=reference)
        second = scorer.recommend(records, reference=reference)

        assert first == second
        assert [r.to_dict() for r in first] == [r.to_dict() for r in second]


# =============================================================================
# Test: Categories
# =============================================================================

class TestCategories:

    @pytest.mark.parametrize("price,featured,year_built,expected", [
        (1500001, False, None, Category.LUXURY),
        (1500001, True, 2024, Category.LUXURY),
        (599999, True, None, Category.BUDGET),
        (1500000, False, None, Category.SIMILAR),
        (600000, False, None, Category.SIMILAR),
        (800000, True, None, Category.TRENDING),
        (800000, False, 2022, Category.TRENDING),
        (800000, False, 2021, Category.SIMILAR),
    ])
    def test_default_thresholds(self, scorer, create_property, price, featured, year_built, expected):
        record = create_property(2, price=price, featured=featured, year_built=year_built)

        assert scorer.categorise(record) == expected

    def test_thresholds_configurable(self, create_property):
        scorer = RecommendationScorer(
            RecommendationConfig(
                luxury_price_threshold=300000,
                budget_price_threshold=100000,
                reference_year=2024,
            )
        )

        assert scorer.categorise(create_property(2, price=400000)) == Category.LUXURY
        assert scorer.categorise(create_property(3, price=50000)) == Category.BUDGET

    def test_category_independent_of_score(self, scorer, reference, create_property):
        [rec] = scorer.recommend([create_property(2, price=2000000)], reference=reference)

        assert rec.category == Category.LUXURY

    def test_inverted_thresholds_rejected(self):
        with pytest.raises(InputValidationError):
            RecommendationConfig(luxury_price_threshold=100, budget_price_threshold=200)

    def test_filter_by_category(self, scorer, create_property):
        results = scorer.recommend([
            create_property(1, price=2000000),
            create_property(2, price=100000),
            create_property(3, price=800000),
        ])

        luxury = filter_by_category(results, "luxury")

        assert [rec.property.id for rec in luxury] == [1]
        assert len(filter_by_category(results, "all")) == 3
        assert len(filter_by_category(results, None)) == 3

    def test_unknown_category_rejected(self, scorer):
        with pytest.raises(InputValidationError):
            filter_by_category([], "bargain")


# =============================================================================
# Test: Output
# =============================================================================

class TestOutput:

    def test_to_dict_flattens_property(self, scorer, reference, create_property):
        [rec] = scorer.recommend([create_property(2, price=850000)], reference=reference)

        payload = rec.to_dict()

        assert payload["id"] == 2
        assert payload["matchScore"] == rec.match_score
        assert payload["category"] == "similar"
        assert payload["reasons"][0] == {
            "type": "location",
            "reason": "Same area as Westlands Residence",
            "score": 30,
        }
