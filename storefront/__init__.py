"""Storefront core: cart store, catalog queries and records-backend services."""

__version__ = "0.1.0"
