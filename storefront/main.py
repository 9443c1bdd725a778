# storefront/main.py
import logging
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .catalog import products_router
from .catalog.errors import ProductError
from .catalog.store import Catalog, load_catalog
from .logger import setup_logging
from .models import ErrorBody, HealthStatus

logger = logging.getLogger(__name__)


def create_app(catalog: Optional[Catalog] = None) -> FastAPI:
    """Build the storefront API around ``catalog``.

    When no catalogue is given the configured products file is loaded.
    Also configures the ``storefront`` logger.
    """
    setup_logging()
    if catalog is None:
        catalog = load_catalog(config.PRODUCTS_FILE)

    app = FastAPI(
        title="Storefront API",
        description="Product catalogue with search, sorting, availability filter and pagination.",
        version="1.0.0",
    )
    app.state.catalog = catalog

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(ProductError)
    async def product_error_handler(request: Request, exc: ProductError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    # No route for this path and method: 404 body with the requested URL
    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)
        path = request.url.path
        if request.url.query:
            path += "?" + request.url.query
        body = ErrorBody(error="Not found", message="Endpoint not found", path=path)
        return JSONResponse(status_code=404, content=body.model_dump())

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = ErrorBody(error="Internal server error", message="Something went wrong on the server")
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    @app.get("/", response_model=HealthStatus)
    def health_check(request: Request):
        return HealthStatus(status="ok", products=len(request.app.state.catalog))

    app.include_router(products_router)

    if config.IMAGES_DIR.is_dir():
        app.mount("/images", StaticFiles(directory=config.IMAGES_DIR), name="images")
    else:
        logger.info("Images directory %s not found, /images is not served", config.IMAGES_DIR)

    return app


def run() -> None:
    uvicorn.run(create_app(), host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
