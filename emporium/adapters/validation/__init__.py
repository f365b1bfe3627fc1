"""Input validation adapters (registration fields)."""
