"""Sales endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status

from stockroom.api.dependencies import get_record_sale_use_case, get_sales_store
from stockroom.application.dto.mappers import sale_to_response
from stockroom.application.dto.requests import CreateSaleRequest
from stockroom.application.dto.responses import ErrorResponse, SaleListResponse, SaleResponse
from stockroom.application.use_cases import RecordSaleUseCase
from stockroom.core.exceptions import SaleNotFoundError
from stockroom.core.interfaces import ISalesStore

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_sale(
    request: CreateSaleRequest,
    use_case: RecordSaleUseCase = Depends(get_record_sale_use_case),
) -> SaleResponse:
    """Record a sale and take its items out of stock."""
    sale = await use_case.execute(request)
    return use_case.to_response(sale)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: ISalesStore = Depends(get_sales_store),
) -> SaleListResponse:
    sales = await store.list_sales(limit=limit, offset=offset)
    return SaleListResponse(sales=[sale_to_response(s) for s in sales], total=len(sales))


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: int,
    store: ISalesStore = Depends(get_sales_store),
) -> SaleResponse:
    """Get a sale with its items."""
    sale = await store.get_sale(sale_id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return sale_to_response(sale)


@router.delete(
    "/{sale_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_sale(
    sale_id: int,
    store: ISalesStore = Depends(get_sales_store),
) -> Response:
    """Delete a sale; its items return to stock."""
    if not await store.delete_sale(sale_id):
        raise SaleNotFoundError(sale_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
