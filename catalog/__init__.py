"""
Catalog package for the bookshop service.

This package contains:
- Book and review models
- The per-book review ledger (one review per user per book)
- The in-memory book catalog with ISBN, author and title lookups
"""

__version__ = "1.0.0"
