"""
pageselect - cross-page selection over a paginated remote collection.

Browse a large remote collection one fixed-size page at a time and build a
selection that reaches pages never opened, including a bulk "select the
first N items" pass that fetches further pages on demand.

Main entry point is the CLI via the `pageselect` command.

Example:
    $ pageselect select --page 1 --count 30
"""

__all__ = [
    "__version__",
    "BrowseSession",
    "BulkSelectResult",
    "Item",
    "Page",
    "PageLoader",
    "SelectionTracker",
]
__version__ = "0.1.0"

from .core.selection import SelectionTracker
from .core.types import BulkSelectResult, Item, Page
from .fetch.loader import PageLoader
from .session import BrowseSession
