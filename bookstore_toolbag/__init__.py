# bookstore_toolbag/__init__.py
"""
Public package API.
Use only relative imports here to avoid circular imports.
"""
from .config import BookstoreConfig
from .book import Book
from .book_queries import BookQueries

__all__ = [
    "BookstoreConfig",
    "Book",
    "BookQueries",
]
