"""Product and stock ledger endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status

from stockroom.api.dependencies import get_adjust_stock_use_case, get_product_store
from stockroom.application.dto.mappers import movement_to_response, product_to_response
from stockroom.application.dto.requests import (
    ProductCreateRequest,
    ProductUpdateRequest,
    StockAdjustmentRequest,
)
from stockroom.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    StockMovementResponse,
)
from stockroom.application.use_cases import AdjustStockUseCase
from stockroom.core.entities.product import Product
from stockroom.core.exceptions import ProductNotFoundError
from stockroom.core.interfaces import IProductStore

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: IProductStore = Depends(get_product_store),
) -> ProductListResponse:
    """List products by name."""
    products = await store.list_products(search=search, limit=limit, offset=offset)
    return ProductListResponse(
        products=[product_to_response(p) for p in products],
        total=len(products),
    )


@router.get("/low-stock", response_model=ProductListResponse)
async def list_low_stock(
    limit: int = Query(default=100, ge=1, le=500),
    store: IProductStore = Depends(get_product_store),
) -> ProductListResponse:
    """Products at or below their minimum stock level."""
    products = await store.list_low_stock(limit=limit)
    return ProductListResponse(
        products=[product_to_response(p) for p in products],
        total=len(products),
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_product(
    request: ProductCreateRequest,
    store: IProductStore = Depends(get_product_store),
) -> ProductResponse:
    """Create a product with zero stock."""
    product = await store.create_product(
        Product(
            name=request.name.strip(),
            unit=request.unit,
            min_stock_level=request.min_stock_level,
        )
    )
    return product_to_response(product)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    store: IProductStore = Depends(get_product_store),
) -> ProductResponse:
    product = await store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product_to_response(product)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    store: IProductStore = Depends(get_product_store),
) -> ProductResponse:
    """Update name, unit or minimum level. Stock is not editable."""
    product = await store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)

    updated = product.model_copy(update=request.model_dump(exclude_none=True))
    return product_to_response(await store.update_product(updated))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    store: IProductStore = Depends(get_product_store),
) -> Response:
    """Delete a product together with its movements."""
    if not await store.delete_product(product_id):
        raise ProductNotFoundError(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{product_id}/movements",
    response_model=list[StockMovementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_movements(
    product_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    store: IProductStore = Depends(get_product_store),
) -> list[StockMovementResponse]:
    """Ledger entries for a product, newest first."""
    if await store.get_product(product_id) is None:
        raise ProductNotFoundError(product_id)
    movements = await store.get_movements(product_id, limit=limit)
    return [movement_to_response(m) for m in movements]


@router.post(
    "/{product_id}/adjustments",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def adjust_stock(
    product_id: int,
    request: StockAdjustmentRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> StockMovementResponse:
    """Record a signed manual stock adjustment."""
    movement = await use_case.execute(product_id, request)
    return movement_to_response(movement)
