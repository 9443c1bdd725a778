import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

_PKG_DIR = Path(__file__).resolve().parent

# Server
HOST = os.getenv("STOREFRONT_HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))

# Catalogue and static files
PRODUCTS_FILE = Path(os.getenv("STOREFRONT_PRODUCTS_FILE", str(_PKG_DIR / "data" / "products.json")))
IMAGES_DIR = Path(os.getenv("STOREFRONT_IMAGES_DIR", "public/images"))

# Comma separated, "*" allows every origin
CORS_ORIGINS = [o.strip() for o in os.getenv("STOREFRONT_CORS_ORIGINS", "*").split(",") if o.strip()]

# Logging
LOG_LEVEL = os.getenv("STOREFRONT_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("STOREFRONT_LOG_DIR")  # unset: console only

# Client
API_BASE = os.getenv("STOREFRONT_API_BASE", "http://localhost:3001")
