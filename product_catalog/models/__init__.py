"""Data models module."""

from product_catalog.models.column_info import ColumnInfo
from product_catalog.models.product import Product

__all__ = ["ColumnInfo", "Product"]
