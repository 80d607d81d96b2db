"""
Reporting module for the Property Analytics Engine.

Command-line access to the analytics engines over a JSON catalog file.

Usage:
    python -m reporting.cli stats data/catalog.json --format text
"""

from .cli import CatalogLoadError, load_catalog, main

__all__ = ["CatalogLoadError", "load_catalog", "main"]
