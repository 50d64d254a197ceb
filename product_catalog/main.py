"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import psycopg
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from product_catalog.api.controller import product_router
from product_catalog.clients import PostgresClient
from product_catalog.config import get_config
from product_catalog.services import ProductStore, run_startup_checks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the connection pool, prepare the table and close the pool on shutdown."""
    config = get_config()
    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    client = PostgresClient(
        config.database.conninfo,
        min_size=config.database.min_pool_size,
        max_size=config.database.max_pool_size,
    )
    await client.connect()
    try:
        store = ProductStore(client)
        if config.startup.run_checks:
            await run_startup_checks(store)
        else:
            await store.ensure_schema()

        app.state.product_store = store
        logger.info(f"Server is running on port {config.server.port}!")
        yield
    finally:
        await client.close()


async def database_error_handler(request: Request, exc: psycopg.Error) -> JSONResponse:
    """Answer database failures with a 500 instead of leaving the request open."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Database error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Product Catalog API",
        description="CRUD API over the products table",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(psycopg.Error, database_error_handler)

    # Include routers
    app.include_router(product_router)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return "<h1>HELLO</h1>"

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
