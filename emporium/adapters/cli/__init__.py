"""Command-line interface adapters.

Provides the interactive marketplace menu:
- anonymous: register, login, browse catalog, exit
- customer: browse, search, buy, view and search own orders, logout
- admin: customer actions plus add/edit product, approve and list all orders
"""
