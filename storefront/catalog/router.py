"""
Route definitions for the product API.

Endpoints under /api/products:
- GET  ""                : list products (search, availability, sort, pagination)
- GET  /cheapest         : N cheapest products in stock (alias /top-cheapest)
- GET  /stats            : product count, in-stock count, average in-stock price
- GET  /{product_id}     : get one product

The catalogue is read from ``request.app.state.catalog`` through the
``get_catalog`` dependency; nothing in this module holds product data.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from ..models import ProductErrorBody
from .errors import GET_FAILED, INVALID_PARAMETER, LIST_FAILED, NOT_FOUND, ProductError
from .query import DEFAULT_TOP_N, catalog_stats, cheapest_available, get_by_id, query_catalog
from .schemas import PaginatedProducts, Product, ProductQuery, ProductStats
from .store import Catalog

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

router = APIRouter(prefix="/api/products", tags=["products"])


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Read the leading integer of a query value, ``None`` if there is none.

    ``"2"`` and ``"2abc"`` both give 2; ``"abc"``, ``""`` and numbers too
    long to convert give ``None`` so the caller's default applies.
    """
    if value is None:
        return None
    m = _LEADING_INT.match(value)
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # past the interpreter's int digit limit
        return None


@router.get(
    "",
    response_model=PaginatedProducts,
    responses={400: {"model": ProductErrorBody}, 500: {"model": ProductErrorBody}},
)
def list_products(
    search: Optional[str] = Query(default=None, description="Search in name or category"),
    sort: Optional[str] = Query(default=None, description="Sort field: name | price"),
    order: Optional[str] = Query(default=None, description="Sort order: asc | desc"),
    page: Optional[str] = Query(default=None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(default=None, description="Page size (1-100)"),
    available: Optional[str] = Query(default=None, description="Filter by stock flag: true | false"),
    catalog: Catalog = Depends(get_catalog),
) -> PaginatedProducts:
    """
    Returns a paginated list of products.

    Invalid ``sort``/``order``/``page``/``limit`` values fall back to
    their defaults. Omitting ``available``, or sending it blank, means no
    stock filter; any other non-boolean value is a 400.
    """
    try:
        query = ProductQuery(
            search=search,
            sort=sort,
            order=order,
            page=_parse_int(page),
            limit=_parse_int(limit),
            available=available,
        )
    except ValidationError as exc:
        params = ", ".join(str(err["loc"][0]) for err in exc.errors())
        raise ProductError(INVALID_PARAMETER, f"Invalid parameter(s): {params}", 400) from exc
    try:
        return query_catalog(catalog, query)
    except Exception as exc:
        logger.exception("Error listing products for %s", query)
        raise ProductError(LIST_FAILED, str(exc) or "Error listing products") from exc


def top_cheapest(
    top: Optional[str] = Query(default=None, description="How many products to return"),
    limit: Optional[str] = Query(default=None, description="Alias of top"),
    catalog: Catalog = Depends(get_catalog),
) -> List[Product]:
    n = _parse_int(top)
    if n is None:
        n = _parse_int(limit)
    if not n or n < 1:
        n = DEFAULT_TOP_N
    return cheapest_available(catalog, n)


# Registered before /{product_id} so "cheapest" and "stats" are not read as ids.
router.add_api_route("/cheapest", top_cheapest, methods=["GET"], response_model=List[Product])
router.add_api_route(
    "/top-cheapest", top_cheapest, methods=["GET"], response_model=List[Product], include_in_schema=False
)


@router.get("/stats", response_model=ProductStats)
def product_stats(catalog: Catalog = Depends(get_catalog)) -> ProductStats:
    return catalog_stats(catalog)


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={
        400: {"model": ProductErrorBody},
        404: {"model": ProductErrorBody},
        500: {"model": ProductErrorBody},
    },
)
def get_product(product_id: str, catalog: Catalog = Depends(get_catalog)) -> Product:
    if not product_id.strip():
        raise ProductError(INVALID_PARAMETER, "Product id is required", 400)

    try:
        product = get_by_id(catalog, product_id)
    except Exception as exc:
        logger.exception("Error fetching product %s", product_id)
        raise ProductError(GET_FAILED, str(exc) or "Error fetching product") from exc

    if product is None:
        raise ProductError(NOT_FOUND, f"Product {product_id!r} not found", 404)
    return product
