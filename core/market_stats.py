"""
Market Statistics Aggregator

Summarises a (usually filtered) property collection into market metrics:
- Listing counts, average price and price range
- Average size and price per square foot
- Breakdown by property type and location
- New listings and featured counts
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from .models import InputValidationError, PropertyRecord


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

# A listing counts as new when built within this many years
DEFAULT_NEW_LISTING_YEARS = 2

DEFAULT_TOP_LOCATIONS = 5


@dataclass(frozen=True)
class MarketStats:
    """
    Market metrics for a property collection.

    An empty collection yields zero counts and averages with no
    price range.
    """

    total_properties: int = 0
    average_price: float = 0.0
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    average_size: float = 0.0
    price_per_sqft: float = 0.0
    property_type_counts: Dict[str, int] = field(default_factory=dict)
    location_counts: Dict[str, int] = field(default_factory=dict)
    new_listings_count: int = 0
    featured_count: int = 0

    @property
    def has_data(self) -> bool:
        return self.total_properties > 0

    def property_type_shares(self) -> Dict[str, float]:
        """Percentage of the collection per property type."""
        if not self.total_properties:
            return {}
        return {
            property_type: count / self.total_properties * 100
            for property_type, count in self.property_type_counts.items()
        }

    def top_locations(self, limit: int = DEFAULT_TOP_LOCATIONS) -> List[Tuple[str, int]]:
        """Busiest locations first; ties keep first-seen order."""
        ranked = sorted(self.location_counts.items(), key=lambda item: item[1], reverse=True)
        return ranked[:limit]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        price_range = None
        if self.has_data:
            price_range = {"min": self.price_min, "max": self.price_max}
        return {
            "totalProperties": self.total_properties,
            "averagePrice": self.average_price,
            "priceRange": price_range,
            "averageSize": self.average_size,
            "pricePerSqft": self.price_per_sqft,
            "propertyTypeCounts": dict(self.property_type_counts),
            "locationCounts": dict(self.location_counts),
            "newListingsCount": self.new_listings_count,
            "featuredCount": self.featured_count,
            "propertyTypeShares": self.property_type_shares(),
            "topLocations": [
                {"location": location, "count": count}
                for location, count in self.top_locations()
            ],
        }


class MarketStatsAggregator:
    """
    Aggregates a property collection into MarketStats.

    The reference year is fixed at construction so repeated calls on
    the same instance are deterministic.
    """

    def __init__(
        self,
        new_listing_years: int = DEFAULT_NEW_LISTING_YEARS,
        reference_year: Optional[int] = None,
    ):
        """
        Initialize aggregator.

        Args:
            new_listing_years: Recency window for "new listing" classification
            reference_year: Year to measure recency from (default: current year)
        """
        if new_listing_years < 0:
            raise InputValidationError("new_listing_years", "must not be negative")
        self._new_listing_years = new_listing_years
        self._reference_year = reference_year or date.today().year

    @property
    def reference_year(self) -> int:
        return self._reference_year

    def aggregate(self, records: Iterable[PropertyRecord]) -> MarketStats:
        """
        Compute market statistics.

        Args:
            records: Property collection, typically already filtered

        Returns:
            MarketStats (the "no data" result for an empty collection)
        """
        records = list(records)
        if not records:
            logger.debug("Market stats requested for empty collection")
            return MarketStats()

        prices = [r.price for r in records]
        sizes = [r.sqft for r in records if r.sqft > 0]

        # Float summation can drift just outside the observed range
        average_price = min(max(sum(prices) / len(prices), min(prices)), max(prices))
        average_size = sum(sizes) / len(sizes) if sizes else 0.0
        price_per_sqft = average_price / average_size if average_size > 0 else 0.0

        # Counter preserves first-seen order
        type_counts = Counter(r.property_type.value for r in records)
        location_counts = Counter(r.location for r in records)

        new_listings = sum(
            1 for r in records
            if r.is_recent(self._reference_year, self._new_listing_years)
        )
        featured = sum(1 for r in records if r.featured)

        logger.debug(
            "Market stats over %d properties (%d sized, %d new)",
            len(records),
            len(sizes),
            new_listings,
        )

        return MarketStats(
            total_properties=len(records),
            average_price=average_price,
            price_min=min(prices),
            price_max=max(prices),
            average_size=average_size,
            price_per_sqft=price_per_sqft,
            property_type_counts=dict(type_counts),
            location_counts=dict(location_counts),
            new_listings_count=new_listings,
            featured_count=featured,
        )
