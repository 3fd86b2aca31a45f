"""Clubs reference-data API: countries, provinces and product styles."""

__version__ = "0.1.0"
