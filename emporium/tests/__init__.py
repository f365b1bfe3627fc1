"""Test suite for the Emporium marketplace.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - JSON file store against a temporary directory
   - Terminal console and pydantic registration validator

3. fakes/: Port implementations for testing
   - In-memory implementations of DataStorePort, ConsolePort, etc.
   - Used by core unit tests and the menu tests

Top-level modules cover the interactive menu and the composition root.
"""
