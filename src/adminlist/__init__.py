"""Listing-state coordination for administrative record tables."""

__version__ = "0.1.0"
