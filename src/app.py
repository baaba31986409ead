"""Storefront FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in storefront/domain.toml.
from storefront.domain import storefront

storefront.init()

from storefront.api import create_app  # noqa: E402
from storefront.config import Settings  # noqa: E402
from storefront.utils.db import setup_db  # noqa: E402

settings = Settings.from_env()

# Creates tables for database providers; a no-op for the memory provider
setup_db(storefront)

app = create_app(settings)
