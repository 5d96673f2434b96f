"""Circulation - Library Catalog and Checkout Engine

This package contains the core application modules including:
- State store for books, accounts and checkouts (library.py)
- Command variants and their JSON encoding (commands.py)
- Command execution and narration (invocation.py)
- Command log replay and export (journal.py)
- CLI interface (main.py)
"""
