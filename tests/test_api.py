"""
HTTP tests for the storefront API.

Each test builds the app around a small synthetic catalogue through
create_app(catalog=...), so nothing depends on the bundled data file.
"""

import logging
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from storefront.catalog.schemas import Product
from storefront.catalog.store import Catalog
from storefront.main import create_app


def _catalog() -> Catalog:
    return Catalog(
        [
            Product(id="a", name="Widget", price=10, is_available=True, category="tools", image="/images/w.png"),
            Product(id="b", name="Gadget", price=5, is_available=False, category="tools"),
            Product(id="c", name="Lamp", price=20, is_available=True, category="home"),
            Product(id="d", name="Candle", price=3, is_available=True, category="home"),
            Product(id="e", name="Rug", price=45, is_available=True, category="home"),
        ]
    )


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app(catalog=_catalog())
        self.client = TestClient(self.app, raise_server_exceptions=False)


class TestListProducts(ApiTestCase):
    def test_default_listing(self) -> None:
        response = self.client.get("/api/products")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([p["id"] for p in body["data"]], ["d", "b", "c", "e", "a"])
        self.assertEqual(body["pagination"], {"page": 1, "limit": 10, "total": 5, "totalPages": 1})

    def test_product_json_uses_camel_case_stock_flag(self) -> None:
        product = self.client.get("/api/products", params={"search": "widget"}).json()["data"][0]

        self.assertEqual(
            product,
            {"id": "a", "name": "Widget", "price": 10.0, "isAvailable": True, "category": "tools", "image": "/images/w.png"},
        )

    def test_search_sort_and_available(self) -> None:
        response = self.client.get(
            "/api/products",
            params={"search": "  HOME ", "sort": "price", "order": "desc", "available": "true"},
        )

        self.assertEqual([p["id"] for p in response.json()["data"]], ["e", "c", "d"])

    def test_available_false(self) -> None:
        response = self.client.get("/api/products", params={"available": "false"})

        self.assertEqual([p["id"] for p in response.json()["data"]], ["b"])

    def test_pagination_params(self) -> None:
        response = self.client.get("/api/products", params={"sort": "price", "page": "2", "limit": "2"})

        body = response.json()
        self.assertEqual([p["id"] for p in body["data"]], ["a", "c"])
        self.assertEqual(body["pagination"], {"page": 2, "limit": 2, "total": 5, "totalPages": 3})

    def test_limit_is_clamped(self) -> None:
        high = self.client.get("/api/products", params={"limit": "500"}).json()
        low = self.client.get("/api/products", params={"limit": "0"}).json()

        self.assertEqual(high["pagination"]["limit"], 100)
        self.assertEqual(low["pagination"]["limit"], 1)
        self.assertEqual(low["pagination"]["totalPages"], 5)

    def test_page_out_of_range_is_empty(self) -> None:
        body = self.client.get("/api/products", params={"page": "40"}).json()

        self.assertEqual(body["data"], [])
        self.assertEqual(body["pagination"]["total"], 5)

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        response = self.client.get(
            "/api/products",
            params={"sort": "rating", "order": "up", "page": "abc", "limit": "many"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([p["id"] for p in body["data"]], ["d", "b", "c", "e", "a"])
        self.assertEqual(body["pagination"]["page"], 1)
        self.assertEqual(body["pagination"]["limit"], 10)

    def test_leading_integer_is_honoured(self) -> None:
        body = self.client.get("/api/products", params={"limit": "2abc"}).json()

        self.assertEqual(body["pagination"]["limit"], 2)

    def test_non_boolean_available_is_a_400(self) -> None:
        response = self.client.get("/api/products", params={"available": "maybe"})

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error_code"], "4001")
        self.assertEqual(body["error"], "Invalid parameter")
        self.assertIn("available", body["error_detail"])

    def test_whole_prices_stay_integers(self) -> None:
        data = self.client.get("/api/products", params={"sort": "price"}).json()["data"]

        self.assertIsInstance(data[0]["price"], int)
        self.assertEqual([p["price"] for p in data], [3, 5, 10, 20, 45])

    def test_oversized_page_and_limit_fall_back_to_defaults(self) -> None:
        huge = "9" * 5000
        response = self.client.get("/api/products", params={"page": huge, "limit": huge})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["pagination"], {"page": 1, "limit": 10, "total": 5, "totalPages": 1})

    def test_blank_available_means_no_filter(self) -> None:
        response = self.client.get("/api/products", params={"available": ""})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["pagination"]["total"], 5)

    def test_engine_failure_is_a_500_with_list_code(self) -> None:
        with patch("storefront.catalog.router.query_catalog", side_effect=RuntimeError("disk on fire")):
            response = self.client.get("/api/products")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Error listing products", "error_detail": "disk on fire", "error_code": "2002"},
        )


class TestGetProduct(ApiTestCase):
    def test_found(self) -> None:
        response = self.client.get("/api/products/c")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Lamp")

    def test_not_found(self) -> None:
        response = self.client.get("/api/products/missing")

        self.assertEqual(response.status_code, 404)
        body = response.json()
        self.assertEqual(body["error_code"], "4041")
        self.assertEqual(body["error"], "Resource not found")
        self.assertIn("missing", body["error_detail"])

    def test_blank_id_is_a_400(self) -> None:
        response = self.client.get("/api/products/%20")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_code"], "4001")

    def test_lookup_failure_is_a_500_with_get_code(self) -> None:
        with patch("storefront.catalog.router.get_by_id", side_effect=RuntimeError("boom")):
            response = self.client.get("/api/products/a")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error_code"], "2003")
        self.assertEqual(response.json()["error_detail"], "boom")


class TestCheapest(ApiTestCase):
    def test_default_top_is_three(self) -> None:
        response = self.client.get("/api/products/cheapest")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["id"] for p in response.json()], ["d", "a", "c"])

    def test_top_param(self) -> None:
        response = self.client.get("/api/products/cheapest", params={"top": "1"})

        self.assertEqual([p["id"] for p in response.json()], ["d"])

    def test_top_beyond_available_returns_all_available(self) -> None:
        response = self.client.get("/api/products/cheapest", params={"top": "10"})

        self.assertEqual([p["id"] for p in response.json()], ["d", "a", "c", "e"])

    def test_limit_is_accepted_as_top(self) -> None:
        response = self.client.get("/api/products/cheapest", params={"limit": "2"})

        self.assertEqual([p["id"] for p in response.json()], ["d", "a"])

    def test_invalid_or_zero_top_uses_default(self) -> None:
        for value in ("0", "abc", "-4"):
            response = self.client.get("/api/products/cheapest", params={"top": value})
            self.assertEqual(len(response.json()), 3)

    def test_oversized_top_uses_default(self) -> None:
        response = self.client.get("/api/products/cheapest", params={"top": "9" * 5000})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["id"] for p in response.json()], ["d", "a", "c"])

    def test_top_cheapest_alias(self) -> None:
        response = self.client.get("/api/products/top-cheapest", params={"top": "2"})

        self.assertEqual([p["id"] for p in response.json()], ["d", "a"])


class TestAppShell(ApiTestCase):
    def test_health_check(self) -> None:
        response = self.client.get("/")

        self.assertEqual(response.json(), {"status": "ok", "products": 5})

    def test_unknown_route_is_a_404_with_path(self) -> None:
        response = self.client.get("/api/nothing-here")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {"error": "Not found", "message": "Endpoint not found", "path": "/api/nothing-here"},
        )

    def test_unsupported_method_is_a_404_with_path(self) -> None:
        response = self.client.post("/api/products")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {"error": "Not found", "message": "Endpoint not found", "path": "/api/products"},
        )

    def test_not_found_path_keeps_query_string(self) -> None:
        response = self.client.get("/api/nothing-here?page=2&sort=price")

        self.assertEqual(response.json()["path"], "/api/nothing-here?page=2&sort=price")

    def test_create_app_configures_storefront_logger(self) -> None:
        root = logging.getLogger("storefront")
        saved = root.handlers[:]
        root.handlers = []
        try:
            with patch("storefront.config.LOG_DIR", None):
                create_app(catalog=_catalog())
            self.assertEqual(len(root.handlers), 1)
            self.assertEqual(root.level, logging.INFO)
        finally:
            root.handlers = saved

    def test_uncaught_error_is_a_generic_500(self) -> None:
        @self.app.get("/boom")
        def boom():
            raise RuntimeError("unexpected")

        response = self.client.get("/boom")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Internal server error", "message": "Something went wrong on the server"},
        )

    def test_requests_are_logged(self) -> None:
        with self.assertLogs("storefront.main", level="INFO") as logs:
            self.client.get("/api/products")

        self.assertTrue(any("GET /api/products -> 200" in line for line in logs.output))

    def test_cors_headers(self) -> None:
        response = self.client.get("/api/products", headers={"Origin": "http://localhost:3000"})

        self.assertEqual(response.headers.get("access-control-allow-origin"), "*")


class TestStats(ApiTestCase):
    def test_stats_summarise_catalogue(self) -> None:
        response = self.client.get("/api/products/stats")

        self.assertEqual(response.status_code, 200)
        # in stock: 10 + 20 + 3 + 45
        self.assertEqual(response.json(), {"total": 5, "available": 4, "averagePrice": 19.5})

    def test_stats_on_empty_catalogue(self) -> None:
        client = TestClient(create_app(catalog=Catalog()))

        self.assertEqual(client.get("/api/products/stats").json(), {"total": 0, "available": 0, "averagePrice": 0.0})
