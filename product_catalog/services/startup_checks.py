"""One-off console diagnostics run when the service starts.

Can also be run on its own:

    python -m product_catalog.services.startup_checks
"""

import asyncio
import logging

from ..clients import PostgresClient
from ..config import AppConfig, get_config
from .product_store import ProductStore

logger = logging.getLogger(__name__)


async def run_startup_checks(store: ProductStore) -> None:
    """Check the connection, ensure the table and log its contents."""
    logger.info("Checking connection to DB ...")
    db_time = await store.check_connection()
    logger.info(f"Current time in DB is: {db_time}")

    logger.info("Creating table of products ...")
    await store.ensure_schema()

    logger.info("Checking table structure ...")
    for column in await store.describe_schema():
        nullable = "NULL" if column.is_nullable else "NOT NULL"
        logger.info(f"- {column.column_name}: {column.data_type} {nullable}")

    products = await store.list_all()
    logger.info(f"Found products: {len(products)}")
    for product in products:
        logger.info(f"ID: {product.id} | {product.name} | {product.price} | {product.category}")


async def _check(config: AppConfig) -> None:
    async with PostgresClient(
        config.database.conninfo,
        min_size=config.database.min_pool_size,
        max_size=config.database.max_pool_size,
    ) as client:
        await run_startup_checks(ProductStore(client))


def main() -> None:
    """Run the checks once from the console with the configured logging."""
    config = get_config()
    logging.basicConfig(level=config.logging.level, format=config.logging.format)
    asyncio.run(_check(config))


if __name__ == "__main__":
    main()
