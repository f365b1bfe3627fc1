"""Console adapters for interactive input and output."""
