"""
Catalog filtering and sorting.

Listing-page helpers that narrow the catalog before it is handed to the
engines (market stats are usually computed over a filtered collection).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .models import InputValidationError, PropertyRecord, PropertyType


# Bedroom/bathroom filter value meaning "this many or more"
OPEN_ENDED_COUNT = "5+"
OPEN_ENDED_MINIMUM = 5


class SortOrder(Enum):
    """Listing sort orders."""
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"
    FEATURED = "featured"

    @classmethod
    def from_string(cls, value: str) -> Optional["SortOrder"]:
        """Convert string to SortOrder, case-insensitive."""
        normalised = value.lower().strip().replace("_", "-")
        for member in cls:
            if member.value == normalised:
                return member
        return None


def _parse_count_filter(field_name: str, value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    value = str(value).strip()
    if value == OPEN_ENDED_COUNT or value.isdigit():
        return value
    raise InputValidationError(field_name, f"must be a number or '{OPEN_ENDED_COUNT}'")


def _count_matches(actual: int, wanted: Optional[str]) -> bool:
    if wanted is None:
        return True
    if wanted == OPEN_ENDED_COUNT:
        return actual >= OPEN_ENDED_MINIMUM
    return actual == int(wanted)


@dataclass(frozen=True)
class CatalogFilter:
    """
    Listing filter.

    Empty fields do not filter. Bedrooms and bathrooms match exactly,
    except "5+" which matches five or more. Every listed amenity must
    be present.
    """

    location: Optional[str] = None
    property_type: Optional[PropertyType] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    amenities: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        """Normalise and validate filter values."""
        if isinstance(self.property_type, str):
            parsed = PropertyType.from_string(self.property_type) if self.property_type else None
            if self.property_type and parsed is None:
                raise InputValidationError("property_type", f"unknown property type {self.property_type!r}")
            object.__setattr__(self, "property_type", parsed)
        object.__setattr__(self, "bedrooms", _parse_count_filter("bedrooms", self.bedrooms))
        object.__setattr__(self, "bathrooms", _parse_count_filter("bathrooms", self.bathrooms))
        object.__setattr__(self, "amenities", frozenset(self.amenities))

        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise InputValidationError("price_min", "must not exceed price_max")

    def matches(self, record: PropertyRecord) -> bool:
        """Whether a record passes every active filter."""
        if self.location and record.location != self.location:
            return False
        if self.property_type is not None and record.property_type != self.property_type:
            return False
        if self.price_min is not None and record.price < self.price_min:
            return False
        if self.price_max is not None and record.price > self.price_max:
            return False
        if not _count_matches(record.bedrooms, self.bedrooms):
            return False
        if not _count_matches(record.bathrooms, self.bathrooms):
            return False
        return self.amenities <= record.amenities


def filter_properties(
    records: Iterable[PropertyRecord],
    catalog_filter: CatalogFilter,
) -> List[PropertyRecord]:
    """Records passing the filter, in catalog order."""
    return [r for r in records if catalog_filter.matches(r)]


def sort_properties(
    records: Iterable[PropertyRecord],
    order: SortOrder = SortOrder.FEATURED,
) -> List[PropertyRecord]:
    """
    Sort a copy of the records.

    Featured order puts featured listings first, each group by price
    descending. Newest treats a missing build year as 0.
    """
    records = list(records)
    if order == SortOrder.PRICE_ASC:
        return sorted(records, key=lambda r: r.price)
    if order == SortOrder.PRICE_DESC:
        return sorted(records, key=lambda r: r.price, reverse=True)
    if order == SortOrder.NEWEST:
        return sorted(records, key=lambda r: r.year_built or 0, reverse=True)
    return sorted(records, key=lambda r: (not r.featured, -r.price))
