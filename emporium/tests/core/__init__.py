"""Unit tests for core domain logic.

Tests for models, ledgers, session state and the marketplace service.
"""
