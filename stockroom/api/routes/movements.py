"""Stock movement endpoints."""

from fastapi import APIRouter, Depends, Response, status

from stockroom.api.dependencies import get_adjust_stock_use_case
from stockroom.application.dto.mappers import movement_to_response
from stockroom.application.dto.requests import MovementUpdateRequest
from stockroom.application.dto.responses import ErrorResponse, StockMovementResponse
from stockroom.application.use_cases import AdjustStockUseCase

router = APIRouter(prefix="/api/movements", tags=["movements"])


@router.patch(
    "/{movement_id}",
    response_model=StockMovementResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_movement(
    movement_id: int,
    request: MovementUpdateRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> StockMovementResponse:
    """Change a movement's quantity or notes; stock follows the delta."""
    movement = await use_case.update_movement(movement_id, request)
    return movement_to_response(movement)


@router.delete(
    "/{movement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_movement(
    movement_id: int,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> Response:
    """Delete a movement, reversing its stock effect."""
    await use_case.delete_movement(movement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
