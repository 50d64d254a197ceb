"""Client modules for external services."""

from product_catalog.clients.postgres_client import PostgresClient

__all__ = ["PostgresClient"]
