"""REST controller for the products resource."""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from psycopg.errors import UniqueViolation
from pydantic import BaseModel, ConfigDict

from product_catalog.api.dependencies import get_product_store
from product_catalog.models import Product
from product_catalog.services import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

MISSING_FIELDS_ERROR = "Field name, category, price and brand are required!"


class ProductPayload(BaseModel):
    """Incoming product body. Values pass through to the query untyped."""

    name: Any = None
    category: Any = None
    price: Any = None
    description: Any = None
    brand: Any = None

    def has_required_fields(self) -> bool:
        return bool(self.name and self.category and self.price and self.brand)


class ProductOut(BaseModel):
    """Product as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    price: float
    description: Optional[str] = None
    brand: str


class ProductResponse(BaseModel):
    success: bool = True
    data: ProductOut


class ProductListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[ProductOut]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def _not_found(product_id: int) -> JSONResponse:
    return _error(404, f"Product with ID {product_id} was not found")


def _single(product: Product) -> ProductResponse:
    return ProductResponse(data=ProductOut.model_validate(product))


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = None,
    store: ProductStore = Depends(get_product_store),
):
    if category is None:
        products = await store.list_all()
    else:
        products = await store.list_by_category(category)

    return ProductListResponse(
        count=len(products),
        data=[ProductOut.model_validate(p) for p in products],
    )


@router.post(
    "",
    status_code=201,
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_product(
    payload: Optional[ProductPayload] = Body(None),
    store: ProductStore = Depends(get_product_store),
):
    if payload is None or not payload.has_required_fields():
        return _error(400, MISSING_FIELDS_ERROR)

    product = await store.add(
        payload.name,
        payload.category,
        payload.price,
        payload.description,
        payload.brand,
    )
    if product is None:
        return _error(409, f"Product \"{payload.name}\" already exist")

    return _single(product)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    store: ProductStore = Depends(get_product_store),
):
    product = await store.get(product_id)
    if product is None:
        return _not_found(product_id)
    return _single(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    payload: Optional[ProductPayload] = Body(None),
    store: ProductStore = Depends(get_product_store),
):
    if payload is None or not payload.has_required_fields():
        return _error(400, MISSING_FIELDS_ERROR)

    try:
        product = await store.update(
            product_id,
            payload.name,
            payload.category,
            payload.price,
            payload.description,
            payload.brand,
        )
    except UniqueViolation:
        logger.info(f"Rename of product {product_id} to \"{payload.name}\" rejected")
        return _error(409, f"Product \"{payload.name}\" already exist")

    if product is None:
        return _not_found(product_id)
    return _single(product)


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    store: ProductStore = Depends(get_product_store),
):
    product = await store.delete(product_id)
    if product is None:
        return _not_found(product_id)
    return _single(product)
