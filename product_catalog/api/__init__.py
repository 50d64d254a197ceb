"""HTTP layer of the product catalog."""

from product_catalog.api.dependencies import get_product_store

__all__ = ["get_product_store"]
