"""
JSON API for the analytics engines.
"""
