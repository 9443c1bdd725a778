"""
Read-only data store for the catalogue API.

The catalogue is loaded once from a JSON file (a list of product
objects) into a ``Catalog`` handle. The handle is created by the
application factory and passed to the query engine explicitly, so
tests can build their own catalogue from a handful of ``Product``
instances instead of relying on the bundled data file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple, Union

from pydantic import ValidationError

from .schemas import Product

logger = logging.getLogger(__name__)

# Bundled sample catalogue
DATA_FILE = Path(__file__).resolve().parents[1] / "data" / "products.json"


class CatalogLoadError(Exception):
    """Raised when the catalogue data file cannot be turned into products."""


class Catalog:
    """An immutable, ordered collection of products.

    Order is the order in which products were given (file order for a
    loaded catalogue). Product ids must be unique.
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products: Tuple[Product, ...] = tuple(products)
        seen = set()
        for product in self._products:
            if product.id in seen:
                raise CatalogLoadError(f"Duplicate product id: {product.id!r}")
            seen.add(product.id)

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __getitem__(self, index: int) -> Product:
        return self._products[index]

    def __repr__(self) -> str:
        return f"Catalog({len(self._products)} products)"


def load_catalog(path: Optional[Union[str, Path]] = None) -> Catalog:
    """Load a catalogue from a JSON file.

    Parameters
    ----------
    path : Optional[Union[str, Path]]
        The JSON file to read. Defaults to the bundled ``products.json``.

    Returns
    -------
    Catalog
        The products in file order. A missing file gives an empty
        catalogue so the API still starts.

    Raises
    ------
    CatalogLoadError
        If the file is not valid JSON, is not a list, or holds an
        entry that is not a valid product.
    """
    data_file = Path(path) if path is not None else DATA_FILE
    if not data_file.exists():
        logger.warning("Catalogue file %s not found, starting with no products", data_file)
        return Catalog()

    try:
        with data_file.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"{data_file}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise CatalogLoadError(f"{data_file}: expected a list of products")

    products = []
    for index, entry in enumerate(raw):
        try:
            products.append(Product.model_validate(entry))
        except ValidationError as exc:
            raise CatalogLoadError(f"{data_file}: entry {index} is not a valid product: {exc}") from exc

    catalog = Catalog(products)
    logger.info("Loaded %d products from %s", len(catalog), data_file)
    return catalog
