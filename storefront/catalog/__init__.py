"""
Catalog package for the storefront API.

This package holds the product schemas, the read-only catalogue store,
the query engine (search, availability filter, sort, pagination and
the cheapest-in-stock shortcut) and the routes that expose it under
``/api/products``. The catalogue is loaded once and passed around as
a ``Catalog`` handle; swap ``store.load_catalog`` for another loader
if products ever come from a database.
"""

from .router import router as products_router  # noqa: F401
