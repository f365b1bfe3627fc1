"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeDataStorePort: In-memory aggregates with failure injection
- FakeConsolePort: Scripted input and captured output
- FakeRegistrationValidator: Accept-all validator with optional rejection
"""

from .console import FakeConsolePort
from .store import FakeDataStorePort
from .validation import FakeRegistrationValidator

__all__ = [
    "FakeConsolePort",
    "FakeDataStorePort",
    "FakeRegistrationValidator",
]
