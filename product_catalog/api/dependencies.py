"""FastAPI dependencies shared by the controllers."""

from fastapi import Request

from product_catalog.services import ProductStore


def get_product_store(request: Request) -> ProductStore:
    """Return the store created by the application lifespan."""
    return request.app.state.product_store
