"""External adapters for the Emporium marketplace.

This package contains all external dependencies (JSON files, terminal I/O,
pydantic validation) and provides implementations of the core port
interfaces.

Adapter Organization:

- store/: Adapters for aggregate persistence (JSON files)
- console/: Adapters for terminal input and output
- validation/: Adapters for registration field validation
- cli/: Interactive menu driving the marketplace use cases
"""
