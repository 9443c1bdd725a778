"""Error codes and the error type raised by the product routes."""

from __future__ import annotations

from typing import Dict

# Product error catalogue: code -> stable message shown to clients
ERROR_CODES: Dict[str, str] = {
    "2001": "Error creating product",
    "2002": "Error listing products",
    "2003": "Error fetching product",
    "4001": "Invalid parameter",
    "4041": "Resource not found",
    "5001": "Internal server error",
}

LIST_FAILED = "2002"
GET_FAILED = "2003"
INVALID_PARAMETER = "4001"
NOT_FOUND = "4041"


class ProductError(Exception):
    """A product API failure with a code from ``ERROR_CODES``.

    ``detail`` is the specific message for this failure; the
    user-facing message is always the catalogue entry for ``code``.
    """

    def __init__(self, code: str, detail: str, status_code: int = 500) -> None:
        super().__init__(detail)
        self.code = code
        self.detail = detail
        self.status_code = status_code

    @property
    def message(self) -> str:
        return ERROR_CODES.get(self.code, "Unknown error")

    def to_body(self) -> Dict[str, str]:
        return {
            "error": self.message,
            "error_detail": self.detail,
            "error_code": self.code,
        }
