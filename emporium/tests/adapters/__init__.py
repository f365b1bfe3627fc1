"""Tests for adapter implementations.

Covers the JSON file store, terminal console and registration validator.
"""
