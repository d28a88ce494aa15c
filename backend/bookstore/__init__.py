"""Bookstore: MongoDB query walkthrough for a catalog of books."""

__version__ = "0.1.0"
__author__ = "Bookstore Team"

__all__ = ["__version__", "__author__"]
