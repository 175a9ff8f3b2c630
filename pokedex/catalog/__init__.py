"""
Catalog package for the Pokédex viewer.

This package holds the view state controller that decides which
records are visible (filter text, page index, API cursors), the
PokéAPI fetcher it depends on, and the routes that expose the view to
a front-end as JSON cards.
"""

from .router import router as catalog_router  # noqa: F401
