"""Storefront: local cache layer for store-facing commerce data."""

__version__ = "0.1.0"
