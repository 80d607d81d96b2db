#!/usr/bin/env python3
"""
CLI for running the analytics engines over a JSON property catalog.

Usage:
    python -m reporting.cli stats <catalog_json>
    python -m reporting.cli recommend <catalog_json> [--reference-id ID] [--preferences FILE]
    python -m reporting.cli compare <catalog_json> <id> <id> [<id> ...]
    python -m reporting.cli mortgage [--price N] [--down-payment PCT] ...

Examples:
    # Market summary as text
    python -m reporting.cli stats data/catalog.json --format text

    # Properties like listing 7, luxury only
    python -m reporting.cli recommend data/catalog.json --reference-id 7 --category luxury

The catalog file holds a list of properties, or an object with a
"properties" list, using the catalog's camelCase keys.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core import (
    ComparisonAnalyzer,
    InputValidationError,
    MarketStatsAggregator,
    MortgageCalculator,
    MortgageInputs,
    PropertyRecord,
    RecommendationScorer,
    UserPreferenceProfile,
    filter_by_category,
    index_by_id,
)
from core.recommendation import RecommendationConfig
from utils.config import Config
from utils.formatting import format_compact_price, format_currency, format_percent


logger = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_VALIDATION_ERROR = 2


class CatalogLoadError(Exception):
    """Raised when a catalog or preferences file cannot be read."""


def _read_json(path_str: str):
    path = Path(path_str)
    if not path.exists():
        raise CatalogLoadError(f"File not found: {path}")
    try:
        with open(path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e


def load_catalog(path_str: str) -> List[PropertyRecord]:
    """
    Load property records from a JSON file.

    Args:
        path_str: Path to a JSON list of properties or {"properties": [...]}

    Returns:
        Validated PropertyRecord list

    Raises:
        CatalogLoadError: if the file is missing or not valid JSON
        InputValidationError: if a record is invalid or ids repeat
    """
    data = _read_json(path_str)
    if isinstance(data, dict):
        data = data.get("properties", [])
    if not isinstance(data, list):
        raise CatalogLoadError("Catalog must be a list of properties")

    records = [PropertyRecord.from_dict(item) for item in data]
    index_by_id(records)
    logger.info("Loaded %d properties from %s", len(records), path_str)
    return records


def _find(records: List[PropertyRecord], raw_id: str) -> Optional[PropertyRecord]:
    """Match a command-line id against record ids of any type."""
    for record in records:
        if str(record.id) == raw_id:
            return record
    return None


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2))


def cmd_stats(args, config: Config) -> int:
    """Print market statistics for a catalog."""
    records = load_catalog(args.catalog)
    aggregator = MarketStatsAggregator(
        new_listing_years=args.new_listing_years
        if args.new_listing_years is not None
        else config.new_listing_years,
        reference_year=args.reference_year,
    )
    stats = aggregator.aggregate(records)

    if args.format == "json":
        _emit(stats.to_dict())
        return EXIT_OK

    if not stats.has_data:
        print("No properties in catalog.")
        return EXIT_OK

    print(f"Properties:      {stats.total_properties}")
    print(f"Average price:   {format_currency(stats.average_price)}")
    print(
        f"Price range:     {format_compact_price(stats.price_min)}"
        f" - {format_compact_price(stats.price_max)}"
    )
    print(f"Average size:    {round(stats.average_size):,} sqft")
    print(f"Price per sqft:  {format_currency(stats.price_per_sqft)}")
    print(f"New listings:    {stats.new_listings_count}")
    print(f"Featured:        {stats.featured_count}")
    print("Property types:")
    for property_type, share in stats.property_type_shares().items():
        print(f"  {property_type:<12} {format_percent(share, 1)}")
    print("Top locations:")
    for location, count in stats.top_locations():
        print(f"  {location:<20} {count}")
    return EXIT_OK


def cmd_recommend(args, config: Config) -> int:
    """Print recommendations for a reference property and/or preferences."""
    records = load_catalog(args.catalog)

    reference = None
    if args.reference_id is not None:
        reference = _find(records, args.reference_id)
        if reference is None:
            print(f"Error: Unknown reference property: {args.reference_id}", file=sys.stderr)
            return EXIT_INPUT_ERROR

    preferences = None
    if args.preferences:
        preferences = UserPreferenceProfile.from_dict(_read_json(args.preferences))

    base = config.recommendation_config()
    scorer = RecommendationScorer(
        config=RecommendationConfig(
            luxury_price_threshold=base.luxury_price_threshold,
            budget_price_threshold=base.budget_price_threshold,
            recent_years=base.recent_years,
            reference_year=args.reference_year,
            limit=args.limit if args.limit is not None else base.limit,
        )
    )
    results = scorer.recommend(records, reference=reference, preferences=preferences)
    results = filter_by_category(results, args.category)

    _emit([rec.to_dict() for rec in results])
    return EXIT_OK


def cmd_compare(args, config: Config) -> int:
    """Print comparison metrics for the given property ids."""
    records = load_catalog(args.catalog)
    analyzer = ComparisonAnalyzer(
        max_comparisons=args.max_comparisons
        if args.max_comparisons is not None
        else config.max_comparisons,
    )

    for raw_id in args.ids:
        record = _find(records, raw_id)
        if record is None:
            print(f"Error: Unknown property: {raw_id}", file=sys.stderr)
            return EXIT_INPUT_ERROR
        if not analyzer.add(record):
            logger.warning("Property %s not added (duplicate or comparison full)", raw_id)

    metrics = analyzer.metrics()
    _emit({
        "selected": [record.to_dict() for record in analyzer.selected],
        "metrics": metrics.to_dict() if metrics else None,
    })
    return EXIT_OK


def cmd_mortgage(args, config: Config) -> int:
    """Print a mortgage payment breakdown."""
    inputs = MortgageInputs(
        property_price=args.price,
        down_payment_percent=args.down_payment,
        annual_interest_rate_percent=args.rate,
        loan_term_years=args.term,
        annual_property_tax_percent=args.tax,
        annual_insurance_percent=args.insurance,
        monthly_hoa=args.hoa,
        annual_pmi_percent=args.pmi,
    )
    calculator = MortgageCalculator()
    breakdown = calculator.calculate(inputs)

    if args.format == "json":
        payload = breakdown.rounded().to_dict()
        if args.schedule:
            payload["schedule"] = [
                year.to_dict() for year in calculator.amortization_schedule(inputs)
            ]
        _emit(payload)
        return EXIT_OK

    print(f"Loan amount:          {format_currency(breakdown.loan_amount)}")
    print(f"Principal & interest: {format_currency(breakdown.principal_and_interest)}")
    print(f"Property tax:         {format_currency(breakdown.monthly_tax)}")
    print(f"Insurance:            {format_currency(breakdown.monthly_insurance)}")
    if breakdown.monthly_hoa > 0:
        print(f"HOA:                  {format_currency(breakdown.monthly_hoa)}")
    if breakdown.pmi_required:
        print(f"PMI:                  {format_currency(breakdown.monthly_pmi)}")
    print(f"Total monthly:        {format_currency(breakdown.total_monthly)}")
    print(f"Total interest:       {format_currency(breakdown.total_interest)}")
    print(f"Total cost:           {format_currency(breakdown.total_cost)}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Property Analytics Engine - catalog analytics from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli stats data/catalog.json --format text
    python -m reporting.cli recommend data/catalog.json --reference-id 7
    python -m reporting.cli compare data/catalog.json 1 4 9
    python -m reporting.cli mortgage --price 650000 --down-payment 10
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Market statistics for a catalog")
    stats_parser.add_argument("catalog", help="Path to JSON catalog file")
    stats_parser.add_argument("--new-listing-years", type=int, default=None)
    stats_parser.add_argument("--reference-year", type=int, default=None)
    stats_parser.add_argument("--format", choices=("json", "text"), default="json")
    stats_parser.set_defaults(func=cmd_stats)

    # Recommend command
    rec_parser = subparsers.add_parser("recommend", help="Ranked recommendations")
    rec_parser.add_argument("catalog", help="Path to JSON catalog file")
    rec_parser.add_argument("--reference-id", default=None, help="Property being viewed")
    rec_parser.add_argument("--preferences", default=None, help="Path to preferences JSON")
    rec_parser.add_argument("--category", default=None, help="luxury, budget, trending, similar or all")
    rec_parser.add_argument("--limit", type=int, default=None)
    rec_parser.add_argument("--reference-year", type=int, default=None)
    rec_parser.set_defaults(func=cmd_recommend)

    # Compare command
    cmp_parser = subparsers.add_parser("compare", help="Compare selected properties")
    cmp_parser.add_argument("catalog", help="Path to JSON catalog file")
    cmp_parser.add_argument("ids", nargs="+", help="Property ids in selection order")
    cmp_parser.add_argument("--max-comparisons", type=int, default=None)
    cmp_parser.set_defaults(func=cmd_compare)

    # Mortgage command
    defaults = MortgageInputs()
    mtg_parser = subparsers.add_parser("mortgage", help="Mortgage payment breakdown")
    mtg_parser.add_argument("--price", type=float, default=defaults.property_price)
    mtg_parser.add_argument("--down-payment", type=float, default=defaults.down_payment_percent)
    mtg_parser.add_argument("--rate", type=float, default=defaults.annual_interest_rate_percent)
    mtg_parser.add_argument("--term", type=int, default=defaults.loan_term_years)
    mtg_parser.add_argument("--tax", type=float, default=defaults.annual_property_tax_percent)
    mtg_parser.add_argument("--insurance", type=float, default=defaults.annual_insurance_percent)
    mtg_parser.add_argument("--hoa", type=float, default=defaults.monthly_hoa)
    mtg_parser.add_argument("--pmi", type=float, default=defaults.annual_pmi_percent)
    mtg_parser.add_argument("--schedule", action="store_true", help="Include yearly schedule")
    mtg_parser.add_argument("--format", choices=("json", "text"), default="json")
    mtg_parser.set_defaults(func=cmd_mortgage)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    config = Config.load()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    args = build_parser().parse_args(argv)

    try:
        return args.func(args, config)
    except CatalogLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except InputValidationError as e:
        logger.warning("Validation failed: %s", e)
        print(f"Error: Invalid input: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
