"""
HTTP client for the storefront API.

This is the data layer the browsing front-end uses, written in
Python so scripts and tests can talk to a running server. It exposes
four calls matching the API:

* ``get_products()`` — one page of the catalogue for a
  ``ProductQuery`` (search, availability, sort, page, limit).

* ``get_product()`` — a single product by id.

* ``get_cheapest_products()`` — the N cheapest products in stock.

* ``get_stats()`` — product count, in-stock count and average
  in-stock price.

Only the Python standard library is used for HTTP requests. Failed
requests are logged and raised as ``StorefrontAPIError``.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from . import config
from .catalog.schemas import PaginatedProducts, Product, ProductQuery, ProductStats

logger = logging.getLogger(__name__)


class StorefrontAPIError(Exception):
    """A request to the storefront API failed.

    ``status`` is the HTTP status (``None`` when the server could not
    be reached) and ``body`` the decoded JSON error body, if any.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[dict] = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body or {}

    @property
    def error_code(self) -> Optional[str]:
        return self.body.get("error_code")


def _query_params(query: ProductQuery) -> Dict[str, str]:
    params: Dict[str, str] = {"sort": query.sort, "order": query.order}
    if query.search:
        params["search"] = query.search
    if query.available is not None:
        params["available"] = "true" if query.available else "false"
    if query.page is not None:
        params["page"] = str(query.page)
    if query.limit is not None:
        params["limit"] = str(query.limit)
    return params


class StorefrontClient:
    def __init__(self, base_url: Optional[str] = None, timeout: float = 10) -> None:
        self.base_url = (base_url or config.API_BASE).rstrip("/")
        self.timeout = timeout

    def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Perform an HTTP GET and return the parsed JSON body."""
        url = self.base_url + path
        if params:
            url += "?" + urllib.parse.urlencode(params)
        request = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                data = response.read().decode("utf-8")
                return json.loads(data)
        except urllib.error.HTTPError as exc:
            body = _read_error_body(exc)
            logger.error("Request to %s returned status %s: %s", url, exc.code, body)
            raise StorefrontAPIError(f"GET {path} failed with status {exc.code}", exc.code, body) from exc
        except urllib.error.URLError as exc:
            logger.error("Error fetching %s: %s", url, exc.reason)
            raise StorefrontAPIError(f"GET {path} failed: {exc.reason}") from exc

    def get_products(self, query: Optional[ProductQuery] = None) -> PaginatedProducts:
        data = self._get_json("/api/products", _query_params(query or ProductQuery()))
        return PaginatedProducts.model_validate(data)

    def get_product(self, product_id: str) -> Product:
        data = self._get_json("/api/products/" + urllib.parse.quote(product_id, safe=""))
        return Product.model_validate(data)

    def get_cheapest_products(self, top: int = 3) -> List[Product]:
        data = self._get_json("/api/products/cheapest", {"top": str(top)})
        return [Product.model_validate(item) for item in data]

    def get_stats(self) -> ProductStats:
        return ProductStats.model_validate(self._get_json("/api/products/stats"))


def _read_error_body(exc: urllib.error.HTTPError) -> dict:
    try:
        body = json.loads(exc.read().decode("utf-8", errors="ignore"))
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
