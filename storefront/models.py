# storefront/models.py
from typing import Optional

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str
    products: int


class ProductErrorBody(BaseModel):
    error: str
    error_detail: str
    error_code: str


class ErrorBody(BaseModel):
    error: str
    message: str
    path: Optional[str] = None
