"""Data store adapters for persisting the marketplace aggregates.

Implementations:
- JSON files (one for users, one for products)
"""
