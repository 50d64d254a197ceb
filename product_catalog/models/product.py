"""Product model for database representation."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Product:
    """Product data model representing a row of the products table."""

    id: int
    name: str
    category: str
    price: Decimal
    description: Optional[str]
    brand: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Product":
        return cls(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            price=row["price"],
            description=row["description"],
            brand=row["brand"],
        )
