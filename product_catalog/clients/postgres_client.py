"""Async PostgreSQL client backed by a psycopg connection pool."""

import logging
from typing import Any, Optional, Sequence

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class PostgresClient:
    """Async PostgreSQL client with connection pool management.

    Every call borrows a pooled connection for a single statement, which
    is committed when the connection goes back to the pool.
    Supports async context manager pattern for proper resource cleanup.
    """

    def __init__(self, conninfo: str, min_size: int = 1, max_size: int = 5):
        """Initialize the client without opening any connection.

        Args:
            conninfo: libpq connection string
            min_size: Connections kept open by the pool
            max_size: Upper bound of pooled connections
        """
        self._conninfo = conninfo
        self._min_size = min_size
        self._max_size = max_size

        self._pool: Optional[AsyncConnectionPool] = None

    async def connect(self) -> None:
        """Open the pool and wait until the first connections are ready."""
        pool = AsyncConnectionPool(
            self._conninfo,
            min_size=self._min_size,
            max_size=self._max_size,
            kwargs={"row_factory": dict_row},
            open=False,
        )
        await pool.open(wait=True)
        self._pool = pool
        logger.info(f"Connection pool opened (min={self._min_size}, max={self._max_size})")

    async def close(self) -> None:
        """Close the pool and every connection it holds."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Connection pool closed")

    async def __aenter__(self) -> "PostgresClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Async context manager exit with cleanup."""
        await self.close()
        return False

    def _require_pool(self) -> AsyncConnectionPool:
        if self._pool is None:
            raise RuntimeError("PostgreSQL client not connected. Call connect() first.")
        return self._pool

    async def fetch_all(
        self,
        query: str,
        params: Optional[Sequence[Any]] = None,
    ) -> list[dict[str, Any]]:
        """Execute a query and return all rows as dictionaries.

        Raises:
            RuntimeError: If client is not connected.
            psycopg.Error: On any database failure.
        """
        async with self._require_pool().connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    async def fetch_one(
        self,
        query: str,
        params: Optional[Sequence[Any]] = None,
    ) -> Optional[dict[str, Any]]:
        """Execute a query and return its first row, or None if it produced none.

        Raises:
            RuntimeError: If client is not connected.
            psycopg.Error: On any database failure.
        """
        async with self._require_pool().connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()

    async def execute(
        self,
        query: str,
        params: Optional[Sequence[Any]] = None,
    ) -> int:
        """Execute a statement that returns no rows.

        Returns:
            Number of rows affected (-1 for DDL).

        Raises:
            RuntimeError: If client is not connected.
            psycopg.Error: On any database failure.
        """
        async with self._require_pool().connection() as conn:
            cursor = await conn.execute(query, params)
            return cursor.rowcount
