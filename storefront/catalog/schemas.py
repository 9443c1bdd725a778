"""
Pydantic schema definitions for the catalog module.

The ``Product`` model mirrors one entry of the catalogue data file.
Field names are snake_case in Python and camelCase on the wire
(``isAvailable``, ``totalPages``) so the JSON matches what the
storefront front-end already consumes. ``ProductQuery`` carries the
search/sort/pagination parameters of a single catalogue read and
``PaginatedProducts`` bundles one page of products with pagination
metadata.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt, field_validator
from typing_extensions import Literal

SortField = Literal["name", "price"]
SortOrder = Literal["asc", "desc"]

DEFAULT_SORT: SortField = "name"
DEFAULT_ORDER: SortOrder = "asc"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class Product(BaseModel):
    """A single product entry.

    Products are frozen: the catalogue is read-only once loaded, and
    every query hands out the same instances in a new list. ``image``
    is a URL or a path under ``/images`` and may be empty.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    # Whole prices stay ints on the wire (10, not 10.0)
    price: Union[NonNegativeInt, NonNegativeFloat]
    # Missing stock flag means in stock.
    is_available: bool = Field(default=True, alias="isAvailable")
    category: str
    image: str = ""


class ProductQuery(BaseModel):
    """Parameters of one catalogue read.

    ``available`` is three-valued: ``None`` means "no filter", not
    ``False``. Unknown ``sort``/``order`` values fall back to the
    defaults instead of failing. ``page`` and ``limit`` are kept as
    requested; the query engine clamps them.
    """

    search: Optional[str] = None
    available: Optional[bool] = None
    sort: SortField = DEFAULT_SORT
    order: SortOrder = DEFAULT_ORDER
    page: Optional[int] = None
    limit: Optional[int] = None

    @field_validator("search", mode="before")
    @classmethod
    def _strip_search(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("available", mode="before")
    @classmethod
    def _blank_available(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("sort", mode="before")
    @classmethod
    def _fallback_sort(cls, v: object) -> object:
        if isinstance(v, str) and v.strip().lower() in ("name", "price"):
            return v.strip().lower()
        return DEFAULT_SORT

    @field_validator("order", mode="before")
    @classmethod
    def _fallback_order(cls, v: object) -> object:
        if isinstance(v, str) and v.strip().lower() in ("asc", "desc"):
            return v.strip().lower()
        return DEFAULT_ORDER


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")


class PaginatedProducts(BaseModel):
    """A wrapper for paginated results returned from ``/api/products``."""

    data: List[Product]
    pagination: Pagination


class ProductStats(BaseModel):
    """Catalogue summary returned from ``/api/products/stats``."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    available: int
    average_price: float = Field(alias="averagePrice")
