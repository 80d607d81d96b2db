"""
FastAPI application exposing the analytics engines as a JSON API.

Every request carries the property collection it is computed over; the
service keeps no catalog or session state between requests.
"""

import logging
import os
from typing import List, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from core import (
    CatalogFilter,
    ComparisonAnalyzer,
    InputValidationError,
    MarketStatsAggregator,
    MortgageCalculator,
    MortgageInputs,
    PropertyRecord,
    RecommendationScorer,
    SortOrder,
    UserPreferenceProfile,
    filter_by_category,
    filter_properties,
    index_by_id,
    sort_properties,
)
from utils.config import Config


logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

# Production mode detection
IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

API_VERSION = "0.1.0"


# =============================================================================
# Request Models
# =============================================================================

class PropertyInput(BaseModel):
    """A catalog property as sent by the client."""
    id: Union[int, str]
    price: float
    location: str = ""
    address: str = ""
    property_type: str
    bedrooms: int = 0
    bathrooms: int = 0
    sqft: float = 0
    amenities: List[str] = Field(default_factory=list)
    year_built: Optional[int] = None
    featured: bool = False
    images: List[str] = Field(default_factory=list)
    title: str = ""
    description: str = ""
    lot_size: Optional[str] = None

    def to_record(self) -> PropertyRecord:
        return PropertyRecord(
            id=self.id,
            price=self.price,
            location=self.location,
            address=self.address,
            property_type=self.property_type,
            bedrooms=self.bedrooms,
            bathrooms=self.bathrooms,
            sqft=self.sqft,
            amenities=frozenset(self.amenities),
            year_built=self.year_built,
            featured=self.featured,
            images=tuple(self.images),
            title=self.title,
            description=self.description,
            lot_size=self.lot_size,
        )


class PreferencesInput(BaseModel):
    """User preference profile."""
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    property_types: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    bedrooms: Optional[int] = None
    amenities: List[str] = Field(default_factory=list)

    def to_profile(self) -> UserPreferenceProfile:
        return UserPreferenceProfile(
            price_min=self.price_min,
            price_max=self.price_max,
            property_types=frozenset(self.property_types),
            locations=frozenset(self.locations),
            bedrooms=self.bedrooms,
            amenities=frozenset(self.amenities),
        )


class MortgageRequest(BaseModel):
    """Loan scenario. Percentages are 0-100."""
    property_price: float = 500000
    down_payment_percent: float = 20.0
    annual_interest_rate_percent: float = 6.5
    loan_term_years: int = 30
    annual_property_tax_percent: float = 1.2
    annual_insurance_percent: float = 0.5
    monthly_hoa: float = 0.0
    annual_pmi_percent: float = 0.5
    include_schedule: bool = False


class CollectionRequest(BaseModel):
    """Request body carrying a property collection."""
    properties: List[PropertyInput] = Field(default_factory=list)


class CompareRequest(CollectionRequest):
    selected_ids: List[Union[int, str]] = Field(default_factory=list)


class RecommendationRequest(CollectionRequest):
    reference_id: Optional[Union[int, str]] = None
    preferences: Optional[PreferencesInput] = None
    category: Optional[str] = None


class SearchRequest(CollectionRequest):
    location: Optional[str] = None
    property_type: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    sort: str = SortOrder.FEATURED.value


def _records(request_data: CollectionRequest) -> List[PropertyRecord]:
    """Convert and validate the request's property collection."""
    records = [p.to_record() for p in request_data.properties]
    index_by_id(records)
    return records


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()

    app = FastAPI(
        title="Property Analytics Engine",
        description="Recommendations, comparisons, mortgage and market statistics for property catalogs",
        version=API_VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug and not IS_PRODUCTION,
    )

    @app.get("/health", include_in_schema=False)
    def health():
        """Health endpoint. No dependencies, no IO."""
        return {"status": "healthy"}

    # CORS middleware - only when origins are configured
    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.exception_handler(InputValidationError)
    async def input_validation_handler(request: Request, exc: InputValidationError):
        """Field-level validation failures become 422 responses."""
        logger.warning("Rejected %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"field": exc.field, "detail": exc.reason},
        )

    # The mortgage calculator holds no state, so one instance serves every request.
    # Market stats and the scorer pin the current year at construction, and the
    # comparison analyzer holds a selection, so those are built per request.
    mortgage_calculator = MortgageCalculator()

    @app.post("/api/mortgage")
    def calculate_mortgage(request_data: MortgageRequest):
        """Monthly payment breakdown, optionally with a yearly schedule."""
        inputs = MortgageInputs(
            **request_data.model_dump(exclude={"include_schedule"})
        )
        breakdown = mortgage_calculator.calculate(inputs)
        payload = breakdown.to_dict()
        if request_data.include_schedule:
            payload["schedule"] = [
                year.to_dict() for year in mortgage_calculator.amortization_schedule(inputs)
            ]
        return payload

    @app.post("/api/market-stats")
    def market_stats(request_data: CollectionRequest):
        """Market statistics over the supplied collection."""
        aggregator = MarketStatsAggregator(new_listing_years=config.new_listing_years)
        return aggregator.aggregate(_records(request_data)).to_dict()

    @app.post("/api/compare")
    def compare(request_data: CompareRequest):
        """Comparison metrics for the selected ids, in selection order."""
        index = index_by_id(_records(request_data))

        missing = [pid for pid in request_data.selected_ids if pid not in index]
        if missing:
            raise HTTPException(status_code=404, detail=f"Unknown property ids: {missing}")

        analyzer = ComparisonAnalyzer(max_comparisons=config.max_comparisons)
        ignored = [
            pid for pid in request_data.selected_ids
            if not analyzer.add(index[pid])
        ]
        metrics = analyzer.metrics()

        return {
            "selected": [record.to_dict() for record in analyzer.selected],
            "ignoredIds": ignored,
            "maxComparisons": analyzer.max_comparisons,
            "metrics": metrics.to_dict() if metrics else None,
        }

    @app.post("/api/recommendations")
    def recommendations(request_data: RecommendationRequest):
        """Ranked recommendations for a reference property and/or preferences."""
        records = _records(request_data)

        reference = None
        if request_data.reference_id is not None:
            index = index_by_id(records)
            reference = index.get(request_data.reference_id)
            if reference is None:
                raise HTTPException(
                    status_code=404,
                    detail=f"Unknown reference property: {request_data.reference_id}",
                )

        preferences = (
            request_data.preferences.to_profile() if request_data.preferences else None
        )

        scorer = RecommendationScorer(config=config.recommendation_config())
        results = scorer.recommend(records, reference=reference, preferences=preferences)
        results = filter_by_category(results, request_data.category)

        return {
            "count": len(results),
            "recommendations": [rec.to_dict() for rec in results],
        }

    @app.post("/api/properties/search")
    def search_properties(request_data: SearchRequest):
        """Filter and sort the catalog."""
        order = SortOrder.from_string(request_data.sort)
        if order is None:
            raise InputValidationError("sort", f"unknown sort order {request_data.sort!r}")

        catalog_filter = CatalogFilter(
            location=request_data.location,
            property_type=request_data.property_type,
            price_min=request_data.price_min,
            price_max=request_data.price_max,
            bedrooms=request_data.bedrooms,
            bathrooms=request_data.bathrooms,
            amenities=frozenset(request_data.amenities),
        )
        matched = sort_properties(filter_properties(_records(request_data), catalog_filter), order)

        return {
            "count": len(matched),
            "properties": [record.to_dict() for record in matched],
        }

    @app.get("/api/health")
    def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": API_VERSION,
            "environment": "production" if IS_PRODUCTION else "development",
        }

    return app


# Create app instance for uvicorn
app = create_app()
