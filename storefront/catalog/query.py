"""
Query engine for the product catalogue.

Every function here is pure: it reads the products it is given and
returns a new list, never touching the catalogue itself. The same
snapshot can therefore be queried from any number of requests at
once.
"""

from __future__ import annotations

import math
from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional, Union

from .schemas import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    PaginatedProducts,
    Pagination,
    Product,
    ProductQuery,
    ProductStats,
    SortField,
    SortOrder,
)

DEFAULT_TOP_N = 3

_SORT_KEYS: dict = {
    "name": lambda p: p.name.lower(),
    "price": lambda p: p.price,
}


def _compare(a: Union[str, float], b: Union[str, float]) -> int:
    return -1 if a < b else 1 if a > b else 0


def _comparator(sort: SortField, order: SortOrder) -> Callable[[Product, Product], int]:
    """Build a single comparator for ``sort``/``order``.

    Descending flips the sign of the ascending comparison, so both
    directions share one extractor and one comparison.
    """
    key = _SORT_KEYS[sort]
    direction = -1 if order == "desc" else 1

    def compare(a: Product, b: Product) -> int:
        return direction * _compare(key(a), key(b))

    return compare


def _matches_search(product: Product, needle: str) -> bool:
    return needle in product.name.lower() or needle in product.category.lower()


def _clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, limit))


def query_catalog(catalog: Iterable[Product], query: ProductQuery) -> PaginatedProducts:
    """Filter, sort and paginate ``catalog`` according to ``query``.

    Steps run in a fixed order: text search on name or category,
    availability filter, sort, then slicing. ``total`` and
    ``totalPages`` describe the filtered set, so a page past the end
    returns an empty ``data`` list with the real totals.
    """
    items: List[Product] = list(catalog)

    if query.search:
        needle = query.search.lower()
        items = [p for p in items if _matches_search(p, needle)]

    if query.available is not None:
        items = [p for p in items if p.is_available == query.available]

    # list.sort is stable, equal keys keep catalogue order
    items.sort(key=cmp_to_key(_comparator(query.sort, query.order)))

    page = max(DEFAULT_PAGE, query.page if query.page is not None else DEFAULT_PAGE)
    limit = _clamp_limit(query.limit)
    start = (page - 1) * limit
    end = start + limit

    total = len(items)
    return PaginatedProducts(
        data=items[start:end],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


def get_by_id(catalog: Iterable[Product], product_id: str) -> Optional[Product]:
    """Return the product with ``product_id`` or ``None`` if there is none."""
    return next((p for p in catalog if p.id == product_id), None)


def available_products(catalog: Iterable[Product]) -> List[Product]:
    return [p for p in catalog if p.is_available]


def cheapest_available(catalog: Iterable[Product], top_n: int = DEFAULT_TOP_N) -> List[Product]:
    """Return the ``top_n`` cheapest products that are in stock.

    Equal prices keep catalogue order. ``top_n`` is not clamped: asking
    for more than exist returns every available product.
    """
    items = available_products(catalog)
    items.sort(key=lambda p: p.price)
    return items[: max(0, top_n)]


def average_available_price(catalog: Iterable[Product]) -> float:
    """Mean price of the in-stock products, rounded to cents (0.0 if none)."""
    items = available_products(catalog)
    if not items:
        return 0.0
    return round(sum(p.price for p in items) / len(items), 2)


def catalog_stats(catalog: Iterable[Product]) -> ProductStats:
    items = list(catalog)
    return ProductStats(
        total=len(items),
        available=len(available_products(items)),
        average_price=average_available_price(items),
    )
