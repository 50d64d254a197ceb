"""Tests for ProductStore against a mocked PostgreSQL client.

These tests verify:
- Rows are mapped to Product and ColumnInfo models
- Duplicate names are reported without inserting
- Missing ids are reported as None on update and delete
- Schema creation statements are idempotent
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from product_catalog.clients import PostgresClient
from product_catalog.models import ColumnInfo, Product
from product_catalog.services import ProductStore


def make_row(product_id=1, name="Widget", category="tools", price="9.99",
             description="desc", brand="BrandX"):
    return {
        "id": product_id,
        "name": name,
        "category": category,
        "price": Decimal(price),
        "description": description,
        "brand": brand,
    }


@pytest.fixture
def client():
    """PostgresClient double; every statement is an AsyncMock call."""
    return AsyncMock(spec=PostgresClient)


@pytest.fixture
def store(client):
    return ProductStore(client)


class TestSchema:
    """Test schema creation and inspection."""

    @pytest.mark.asyncio
    async def test_ensure_schema_creates_table_and_index(self, store, client):
        await store.ensure_schema()

        statements = [call.args[0] for call in client.execute.await_args_list]
        assert len(statements) == 2
        assert "CREATE TABLE IF NOT EXISTS products" in statements[0]
        assert "CREATE UNIQUE INDEX IF NOT EXISTS products_name_key" in statements[1]

    @pytest.mark.asyncio
    async def test_ensure_schema_twice_issues_same_statements(self, store, client):
        await store.ensure_schema()
        await store.ensure_schema()

        statements = [call.args[0] for call in client.execute.await_args_list]
        assert statements[:2] == statements[2:]

    @pytest.mark.asyncio
    async def test_describe_schema_maps_nullability(self, store, client):
        client.fetch_all.return_value = [
            {"column_name": "id", "data_type": "integer", "is_nullable": "NO"},
            {"column_name": "description", "data_type": "text", "is_nullable": "YES"},
        ]

        columns = await store.describe_schema()

        assert columns == [
            ColumnInfo(column_name="id", data_type="integer", is_nullable=False),
            ColumnInfo(column_name="description", data_type="text", is_nullable=True),
        ]
        assert "ORDER BY ordinal_position" in client.fetch_all.await_args.args[0]

    @pytest.mark.asyncio
    async def test_check_connection_returns_server_time(self, store, client):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        client.fetch_one.return_value = {"now": now}

        assert await store.check_connection() == now


class TestReads:
    """Test list and lookup operations."""

    @pytest.mark.asyncio
    async def test_list_all_maps_rows_in_order(self, store, client):
        client.fetch_all.return_value = [make_row(1, "A"), make_row(2, "B")]

        products = await store.list_all()

        assert [p.id for p in products] == [1, 2]
        assert all(isinstance(p, Product) for p in products)
        assert "ORDER BY id" in client.fetch_all.await_args.args[0]

    @pytest.mark.asyncio
    async def test_list_by_category_passes_parameter(self, store, client):
        client.fetch_all.return_value = [make_row(3, "Phone", category="smartphone")]

        products = await store.list_by_category("smartphone")

        assert products[0].category == "smartphone"
        assert client.fetch_all.await_args.args[1] == ("smartphone",)

    @pytest.mark.asyncio
    async def test_list_by_category_empty(self, store, client):
        client.fetch_all.return_value = []

        assert await store.list_by_category("nonexistent") == []

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store, client):
        client.fetch_one.return_value = None

        assert await store.get(42) is None

    @pytest.mark.asyncio
    async def test_get_existing(self, store, client):
        client.fetch_one.return_value = make_row(7)

        product = await store.get(7)

        assert product.id == 7
        assert product.price == Decimal("9.99")


class TestAdd:
    """Test insert with dedup check."""

    @pytest.mark.asyncio
    async def test_add_new_product(self, store, client):
        client.fetch_one.side_effect = [None, make_row(1)]

        product = await store.add("Widget", "tools", 9.99, "desc", "BrandX")

        assert product.id == 1
        assert product.name == "Widget"
        assert product.price == Decimal("9.99")
        insert_sql, insert_params = client.fetch_one.await_args_list[1].args
        assert "ON CONFLICT (name) DO NOTHING" in insert_sql
        assert insert_params == ("Widget", "tools", 9.99, "desc", "BrandX")

    @pytest.mark.asyncio
    async def test_add_duplicate_skips_insert(self, store, client):
        client.fetch_one.return_value = make_row(5, "Widget")

        result = await store.add("Widget", "tools", 9.99, "desc", "BrandX")

        assert result is None
        assert client.fetch_one.await_count == 1

    @pytest.mark.asyncio
    async def test_add_losing_concurrent_insert_is_duplicate(self, store, client):
        client.fetch_one.side_effect = [None, None]

        assert await store.add("Widget", "tools", 9.99, None, "BrandX") is None

    @pytest.mark.asyncio
    async def test_dedup_check_compares_name_as_text(self, store, client):
        client.fetch_one.side_effect = [None, make_row(2, "123")]

        product = await store.add(123, "tools", 1, None, "BrandX")

        check_sql, check_params = client.fetch_one.await_args_list[0].args
        assert "WHERE name = %s::text" in check_sql
        assert check_params == (123,)
        assert product.name == "123"


class TestWrites:
    """Test update and delete outcomes."""

    @pytest.mark.asyncio
    async def test_update_existing(self, store, client):
        client.fetch_one.return_value = make_row(4, "MacBook Pro 14 M3 Max", price="2299.99")

        product = await store.update(4, "MacBook Pro 14 M3 Max", "laptops", 2299.99, "M3 Max", "Apple")

        assert product.name == "MacBook Pro 14 M3 Max"
        assert product.price == Decimal("2299.99")
        assert client.fetch_one.await_args.args[1][-1] == 4

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, store, client):
        client.fetch_one.return_value = None

        assert await store.update(999, "X", "c", 1, None, "b") is None

    @pytest.mark.asyncio
    async def test_delete_existing(self, store, client):
        client.fetch_one.return_value = make_row(8, "Old")

        product = await store.delete(8)

        assert (product.id, product.name) == (8, "Old")
        assert client.fetch_one.await_args.args[1] == (8,)

    @pytest.mark.asyncio
    async def test_delete_missing_returns_none(self, store, client):
        client.fetch_one.return_value = None

        assert await store.delete(999) is None


class TestStartupChecks:
    """Test the once-at-startup console diagnostics."""

    @pytest.mark.asyncio
    async def test_runs_checks_in_order(self, caplog):
        from product_catalog.services import run_startup_checks

        store = AsyncMock(spec=ProductStore)
        store.check_connection.return_value = datetime(2024, 5, 1, tzinfo=timezone.utc)
        store.describe_schema.return_value = [
            ColumnInfo(column_name="id", data_type="integer", is_nullable=False),
        ]
        store.list_all.return_value = [Product.from_row(make_row(1))]

        with caplog.at_level("INFO"):
            await run_startup_checks(store)

        store.check_connection.assert_awaited_once()
        store.ensure_schema.assert_awaited_once()
        store.describe_schema.assert_awaited_once()
        store.list_all.assert_awaited_once()
        assert "- id: integer NOT NULL" in caplog.text
        assert "ID: 1 | Widget | 9.99 | tools" in caplog.text

    def test_console_entry_uses_configured_logging(self, monkeypatch):
        from product_catalog.config import AppConfig, DatabaseConfig, LoggingConfig, ServerConfig, StartupConfig
        from product_catalog.services import startup_checks

        config = AppConfig(
            database=DatabaseConfig("localhost", 5432, "catalog", "user", "secret", 1, 2),
            server=ServerConfig("127.0.0.1", 3000),
            logging=LoggingConfig(level="DEBUG", format="%(levelname)s %(message)s"),
            startup=StartupConfig(run_checks=True),
        )
        basic_config_calls = []
        check = AsyncMock()
        monkeypatch.setattr(startup_checks, "get_config", lambda: config)
        monkeypatch.setattr(startup_checks.logging, "basicConfig", lambda **kwargs: basic_config_calls.append(kwargs))
        monkeypatch.setattr(startup_checks, "_check", check)

        startup_checks.main()

        assert basic_config_calls == [{"level": "DEBUG", "format": "%(levelname)s %(message)s"}]
        check.assert_awaited_once_with(config)
