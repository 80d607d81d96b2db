"""
Comparison Analyzer

Side-by-side metrics for a small, user-curated set of properties.
The selection is owned by the caller (one analyzer per session) and is
never shared between users.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .models import InputValidationError, PropertyId, PropertyRecord


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

DEFAULT_MAX_COMPARISONS = 3

# Metrics need at least this many selections
MIN_COMPARISONS_FOR_METRICS = 2


@dataclass(frozen=True)
class ComparisonMetrics:
    """Cross-property metrics for the current selection."""

    property_count: int
    average_price: float
    average_sqft: float
    average_bedrooms: float
    price_min: float
    price_max: float
    price_per_sqft: Dict[PropertyId, Optional[float]] = field(default_factory=dict)

    @property
    def price_spread(self) -> float:
        return self.price_max - self.price_min

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "propertyCount": self.property_count,
            "averagePrice": self.average_price,
            "averageSqft": self.average_sqft,
            "averageBedrooms": self.average_bedrooms,
            "priceRange": {"min": self.price_min, "max": self.price_max},
            "pricePerSqft": [
                {"id": property_id, "value": value}
                for property_id, value in self.price_per_sqft.items()
            ],
        }


class ComparisonAnalyzer:
    """
    Bounded, insertion-ordered comparison set.

    Adding beyond capacity or re-adding a selected id is a no-op.
    """

    def __init__(
        self,
        max_comparisons: int = DEFAULT_MAX_COMPARISONS,
        selected: Iterable[PropertyRecord] = (),
    ):
        """
        Initialize analyzer.

        Args:
            max_comparisons: Capacity of the comparison set
            selected: Initial selection, added in order under the same rules
        """
        if max_comparisons < 1:
            raise InputValidationError("max_comparisons", "must be at least 1")
        self._max_comparisons = max_comparisons
        self._selected: List[PropertyRecord] = []
        for record in selected:
            self.add(record)

    @property
    def max_comparisons(self) -> int:
        return self._max_comparisons

    @property
    def selected(self) -> tuple:
        """Snapshot of the selection in insertion order."""
        return tuple(self._selected)

    @property
    def is_full(self) -> bool:
        return len(self._selected) >= self._max_comparisons

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, property_id: PropertyId) -> bool:
        return any(r.id == property_id for r in self._selected)

    def add(self, record: PropertyRecord) -> bool:
        """
        Add a property to the comparison.

        Returns:
            True if added, False if the set is full or already holds the id
        """
        if self.is_full:
            logger.debug("Comparison full (%d), ignoring %r", self._max_comparisons, record.id)
            return False
        if record.id in self:
            return False
        self._selected.append(record)
        return True

    def remove(self, property_id: PropertyId) -> bool:
        """
        Remove a property by id, keeping the order of the rest.

        Returns:
            True if a property was removed
        """
        remaining = [r for r in self._selected if r.id != property_id]
        removed = len(remaining) != len(self._selected)
        self._selected = remaining
        return removed

    def clear(self) -> None:
        self._selected = []

    def metrics(self) -> Optional[ComparisonMetrics]:
        """
        Compute comparison metrics.

        Returns:
            ComparisonMetrics, or None with fewer than two selections
        """
        if len(self._selected) < MIN_COMPARISONS_FOR_METRICS:
            return None

        count = len(self._selected)
        prices = [r.price for r in self._selected]

        return ComparisonMetrics(
            property_count=count,
            average_price=sum(prices) / count,
            average_sqft=sum(r.sqft for r in self._selected) / count,
            average_bedrooms=sum(r.bedrooms for r in self._selected) / count,
            price_min=min(prices),
            price_max=max(prices),
            price_per_sqft={r.id: r.price_per_sqft for r in self._selected},
        )

    @staticmethod
    def search(records: Iterable[PropertyRecord], term: str) -> List[PropertyRecord]:
        """
        Find candidates to add by title or location.

        Case-insensitive substring match; an empty term matches all.
        """
        needle = term.strip().lower()
        return [
            r for r in records
            if needle in r.title.lower() or needle in r.location.lower()
        ]
