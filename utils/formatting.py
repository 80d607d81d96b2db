"""
Formatting utilities.
"""

from core.models import PropertyType


CURRENCY_SYMBOLS = {
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
}


def format_currency(amount: float, currency: str = "USD") -> str:
    """
    Format an amount as whole-unit currency.

    Args:
        amount: The amount (rounded to whole units).
        currency: Currency code (default USD).

    Returns:
        Formatted currency string.
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    return f"{symbol}{round(amount):,}"


def format_percent(value: float, decimals: int = 2) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value:.{decimals}f}%"


def format_price(price: float, property_type: PropertyType) -> str:
    """Listing price, with a monthly suffix for rentals."""
    if property_type == PropertyType.RENT:
        return f"{format_currency(price)}/month"
    return format_currency(price)


def format_compact_price(price: float) -> str:
    """Short dashboard form: $1.5M, $750K."""
    if price >= 1_000_000:
        return f"${price / 1_000_000:.1f}M"
    if price >= 1_000:
        return f"${price / 1_000:.0f}K"
    return format_currency(price)
