"""Product store: CRUD operations over the products table.

Every operation is one or two sequential statements against the pool.
"Not found" and "duplicate" are reported as a None result, never raised.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from ..clients import PostgresClient
from ..models import ColumnInfo, Product

logger = logging.getLogger(__name__)

# SQL statements
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS products (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    category VARCHAR(100) NOT NULL,
    price DECIMAL(10,2) NOT NULL,
    description TEXT,
    brand VARCHAR(100) NOT NULL
)
"""

# Backs ON CONFLICT (name) so concurrent inserts cannot both succeed
CREATE_NAME_INDEX_SQL = """
CREATE UNIQUE INDEX IF NOT EXISTS products_name_key ON products (name)
"""

DESCRIBE_TABLE_SQL = """
SELECT column_name, data_type, is_nullable
FROM information_schema.columns
WHERE table_name = 'products' AND table_schema = current_schema()
ORDER BY ordinal_position
"""

PRODUCT_COLUMNS = "id, name, category, price, description, brand"


class ProductStore:
    """Service for reading and writing products."""

    def __init__(self, client: PostgresClient):
        """Initialize the product store.

        Args:
            client: Connected PostgreSQL client used for every statement.
        """
        self._client = client

    async def check_connection(self) -> datetime:
        """Return the current time as reported by the database server."""
        row = await self._client.fetch_one("SELECT NOW() AS now")
        return row["now"]

    async def ensure_schema(self) -> None:
        """Create the products table and its name index if they don't exist."""
        await self._client.execute(CREATE_TABLE_SQL)
        await self._client.execute(CREATE_NAME_INDEX_SQL)
        logger.info("Products table is ready")

    async def describe_schema(self) -> list[ColumnInfo]:
        """Get the columns of the products table in declaration order."""
        rows = await self._client.fetch_all(DESCRIBE_TABLE_SQL)
        return [
            ColumnInfo(
                column_name=row["column_name"],
                data_type=row["data_type"],
                is_nullable=row["is_nullable"] == "YES",
            )
            for row in rows
        ]

    async def list_all(self) -> list[Product]:
        """Get all products ordered by id."""
        rows = await self._client.fetch_all(
            f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY id"
        )
        logger.debug(f"Found products: {len(rows)}")
        return [Product.from_row(row) for row in rows]

    async def list_by_category(self, category: str) -> list[Product]:
        """Get products whose category equals the given one, ordered by id.

        Returns:
            Matching products, empty if the category has none.
        """
        rows = await self._client.fetch_all(
            f"SELECT {PRODUCT_COLUMNS} FROM products WHERE category = %s ORDER BY id",
            (category,),
        )
        logger.debug(f"Found products in category \"{category}\": {len(rows)}")
        return [Product.from_row(row) for row in rows]

    async def get(self, product_id: int) -> Optional[Product]:
        """Get a product by its id, or None if it doesn't exist."""
        row = await self._client.fetch_one(
            f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = %s",
            (product_id,),
        )
        return Product.from_row(row) if row else None

    async def find_by_name(self, name: str) -> Optional[Product]:
        """Get the product carrying the given name, or None."""
        row = await self._client.fetch_one(
            f"SELECT {PRODUCT_COLUMNS} FROM products WHERE name = %s::text",
            (name,),
        )
        return Product.from_row(row) if row else None

    async def add(
        self,
        name: str,
        category: str,
        price: Any,
        description: Optional[str],
        brand: str,
    ) -> Optional[Product]:
        """Insert a new product unless one with the same name exists.

        Args:
            name: Product name, unique across the table.
            category: Product category.
            price: Price, passed to the query as given.
            description: Optional free text.
            brand: Product brand.

        Returns:
            The created product, or None if the name is already taken.
        """
        existing = await self.find_by_name(name)
        if existing:
            logger.info(f"Product \"{name}\" already exist with ID: {existing.id}")
            return None

        row = await self._client.fetch_one(
            f"""INSERT INTO products (name, category, price, description, brand)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (name) DO NOTHING
                RETURNING {PRODUCT_COLUMNS}""",
            (name, category, price, description, brand),
        )

        if row is None:
            # Lost the race against a concurrent insert of the same name
            logger.info(f"Product \"{name}\" was inserted concurrently, skipping")
            return None

        product = Product.from_row(row)
        logger.info(f"Product added: id={product.id} name={product.name} price={product.price}")
        return product

    async def update(
        self,
        product_id: int,
        name: str,
        category: str,
        price: Any,
        description: Optional[str],
        brand: str,
    ) -> Optional[Product]:
        """Replace every field of an existing product except its id.

        Returns:
            The updated product, or None if no product has that id.

        Raises:
            psycopg.errors.UniqueViolation: If the new name belongs to another product.
        """
        row = await self._client.fetch_one(
            f"""UPDATE products
                SET name = %s, category = %s, price = %s, description = %s, brand = %s
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}""",
            (name, category, price, description, brand, product_id),
        )

        if row is None:
            logger.info(f"Product with ID {product_id} was not found!")
            return None

        product = Product.from_row(row)
        logger.info(f"Product was updated: id={product.id} name={product.name} price={product.price}")
        return product

    async def delete(self, product_id: int) -> Optional[Product]:
        """Delete a product.

        Returns:
            The deleted product, or None if no product has that id.
        """
        row = await self._client.fetch_one(
            f"DELETE FROM products WHERE id = %s RETURNING {PRODUCT_COLUMNS}",
            (product_id,),
        )

        if row is None:
            logger.info(f"Product with ID {product_id} was not found!")
            return None

        product = Product.from_row(row)
        logger.info(f"Product was deleted: id={product.id} name={product.name}")
        return product
