"""
Remote page fetching.

This package handles HTTP retrieval and parsing of collection pages.
"""

from .loader import PageLoader, parse_page

__all__ = ["PageLoader", "parse_page"]
