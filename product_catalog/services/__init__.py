"""Service layer."""

from product_catalog.services.product_store import ProductStore
from product_catalog.services.startup_checks import run_startup_checks

__all__ = ["ProductStore", "run_startup_checks"]
