"""
Data models shared by the analytics engines.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Union


PropertyId = Union[int, str]


class InputValidationError(ValueError):
    """
    Raised when an input value is rejected before computation.

    Carries the offending field name so callers can surface the
    problem next to the right form control.
    """

    def __init__(self, field_name: str, reason: str):
        self.field = field_name
        self.reason = reason
        super().__init__(f"{field_name}: {reason}")


class PropertyType(Enum):
    """
    Property type classification.

    The listing-level types (buy, rent, commercial, land) and the finer
    building taxonomy both appear in catalogs, so both are accepted.
    """
    BUY = "buy"
    RENT = "rent"
    COMMERCIAL = "commercial"
    LAND = "land"
    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    VILLA = "villa"

    @classmethod
    def from_string(cls, value: str) -> Optional["PropertyType"]:
        """Convert string to PropertyType, case-insensitive."""
        normalised = value.lower().strip().replace("_", "").replace("-", "").replace(" ", "")
        if normalised == "sale":
            return cls.BUY
        for member in cls:
            if member.value == normalised:
                return member
        return None


def require_finite(field_name: str, value: float) -> None:
    """Reject NaN and infinities, which would leak into every derived value."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InputValidationError(field_name, f"must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InputValidationError(field_name, "must be a finite number")


def require_integer(field_name: str, value: Any) -> None:
    """Reject anything but a plain int (bools included)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputValidationError(field_name, f"must be an integer, got {value!r}")


def _parse_count(field_name: str, value: Any) -> int:
    """Catalog counts may arrive as numeric strings or whole floats."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    require_integer(field_name, value)
    return value


def _coerce_property_type(value: Any) -> PropertyType:
    if isinstance(value, PropertyType):
        return value
    if isinstance(value, str):
        parsed = PropertyType.from_string(value)
        if parsed is not None:
            return parsed
    raise InputValidationError("property_type", f"unknown property type {value!r}")


@dataclass(frozen=True)
class PropertyRecord:
    """
    A single catalog property.

    Records are supplied by the catalog and never modified by the
    engines. `price` is a sale price or a monthly rent depending on
    `property_type`. A `sqft` of 0 means the size does not apply.
    """

    id: PropertyId
    price: float
    location: str
    address: str
    property_type: PropertyType
    bedrooms: int = 0
    bathrooms: int = 0
    sqft: float = 0
    amenities: frozenset = field(default_factory=frozenset)
    year_built: Optional[int] = None
    featured: bool = False
    images: tuple = ()

    # Display fields
    title: str = ""
    description: str = ""
    lot_size: Optional[str] = None

    def __post_init__(self):
        """Normalise collections and validate record invariants."""
        object.__setattr__(self, "property_type", _coerce_property_type(self.property_type))
        object.__setattr__(self, "amenities", frozenset(self.amenities))
        object.__setattr__(self, "images", tuple(self.images))

        require_finite("price", self.price)
        if self.price <= 0:
            raise InputValidationError("price", "must be positive")
        require_finite("sqft", self.sqft)
        if self.sqft < 0:
            raise InputValidationError("sqft", "must be non-negative")
        require_integer("bedrooms", self.bedrooms)
        if self.bedrooms < 0:
            raise InputValidationError("bedrooms", "must be non-negative")
        require_integer("bathrooms", self.bathrooms)
        if self.bathrooms < 0:
            raise InputValidationError("bathrooms", "must be non-negative")
        if self.year_built is not None:
            require_integer("year_built", self.year_built)
            if self.year_built <= 0:
                raise InputValidationError("year_built", "must be a positive year")

    @property
    def display_name(self) -> str:
        """Title if the catalog supplied one, otherwise the address."""
        return self.title or self.address

    @property
    def price_per_sqft(self) -> Optional[float]:
        """Price per square foot, None when size does not apply."""
        if self.sqft <= 0:
            return None
        return self.price / self.sqft

    def is_recent(self, reference_year: int, years: int) -> bool:
        """Whether the property was built within `years` of `reference_year`."""
        return self.year_built is not None and self.year_built >= reference_year - years

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PropertyRecord":
        """
        Build a record from catalog JSON.

        Accepts the catalog's camelCase keys as well as snake_case.

        Raises:
            InputValidationError: if a required field is missing or invalid
        """
        def pick(*keys, default=None):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        for required in ("id", "price"):
            if required not in data or data[required] is None:
                raise InputValidationError(required, "is required")

        property_type = pick("propertyType", "property_type")
        if property_type is None:
            raise InputValidationError("property_type", "is required")

        return cls(
            id=data["id"],
            price=data["price"],
            location=pick("location", default=""),
            address=pick("address", default=""),
            property_type=property_type,
            bedrooms=_parse_count("bedrooms", pick("bedrooms", default=0)),
            bathrooms=_parse_count("bathrooms", pick("bathrooms", default=0)),
            sqft=pick("sqft", default=0),
            amenities=frozenset(pick("amenities", default=())),
            year_built=pick("yearBuilt", "year_built"),
            featured=bool(pick("featured", default=False)),
            images=tuple(pick("images", default=())),
            title=pick("title", default=""),
            description=pick("description", default=""),
            lot_size=pick("lotSize", "lot_size"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "address": self.address,
            "propertyType": self.property_type.value,
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "sqft": self.sqft,
            "amenities": sorted(self.amenities),
            "images": list(self.images),
            "featured": self.featured,
            "yearBuilt": self.year_built,
            "lotSize": self.lot_size,
        }


@dataclass(frozen=True)
class UserPreferenceProfile:
    """
    What a user has told us they want.

    Any part may be left empty; an empty part never matches.
    A missing price bound is treated as open.
    """

    price_min: Optional[float] = None
    price_max: Optional[float] = None
    property_types: frozenset = field(default_factory=frozenset)
    locations: frozenset = field(default_factory=frozenset)
    bedrooms: Optional[int] = None
    amenities: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        """Normalise collections and validate the price range."""
        object.__setattr__(
            self,
            "property_types",
            frozenset(_coerce_property_type(t) for t in self.property_types),
        )
        object.__setattr__(self, "locations", frozenset(self.locations))
        object.__setattr__(self, "amenities", frozenset(self.amenities))

        if self.price_min is not None:
            require_finite("price_min", self.price_min)
        if self.price_max is not None:
            require_finite("price_max", self.price_max)
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise InputValidationError("price_min", "must not exceed price_max")

    @property
    def has_price_range(self) -> bool:
        return self.price_min is not None or self.price_max is not None

    def price_in_range(self, price: float) -> bool:
        """Inclusive range check; requires at least one bound."""
        if not self.has_price_range:
            return False
        if self.price_min is not None and price < self.price_min:
            return False
        if self.price_max is not None and price > self.price_max:
            return False
        return True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferenceProfile":
        """Build a profile from the catalog's preference JSON."""
        price_range = data.get("priceRange") or {}
        return cls(
            price_min=price_range.get("min", data.get("price_min")),
            price_max=price_range.get("max", data.get("price_max")),
            property_types=frozenset(data.get("propertyTypes", data.get("property_types", ()))),
            locations=frozenset(data.get("locations", ())),
            bedrooms=data.get("bedrooms"),
            amenities=frozenset(data.get("amenities", ())),
        )


def index_by_id(records: Iterable[PropertyRecord]) -> dict[PropertyId, PropertyRecord]:
    """
    Map records by id.

    Raises:
        InputValidationError: if two records share an id
    """
    index: dict[PropertyId, PropertyRecord] = {}
    for record in records:
        if record.id in index:
            raise InputValidationError("id", f"duplicate property id {record.id!r}")
        index[record.id] = record
    return index
