"""
Utility modules for the analytics engine.
"""

from .formatting import format_compact_price, format_currency, format_percent, format_price
from .config import Config

__all__ = [
    "format_compact_price",
    "format_currency",
    "format_percent",
    "format_price",
    "Config",
]
