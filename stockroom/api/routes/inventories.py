"""Inventory count (stocktake) endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status

from stockroom.api.dependencies import (
    get_export_inventory_use_case,
    get_inventory_store,
    get_reconcile_inventory_use_case,
)
from stockroom.application.dto.mappers import inventory_item_to_response, inventory_to_response
from stockroom.application.dto.requests import CreateInventoryRequest, RecordCountRequest
from stockroom.application.dto.responses import (
    CompleteInventoryResponse,
    ErrorResponse,
    InventoryItemResponse,
    InventoryListResponse,
    InventoryResponse,
)
from stockroom.application.use_cases import ExportInventoryUseCase, ReconcileInventoryUseCase
from stockroom.core.exceptions import InventoryNotFoundError
from stockroom.core.interfaces import IInventoryStore

router = APIRouter(prefix="/api/inventories", tags=["inventories"])

STATE_ERRORS = {404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=InventoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_inventory(
    request: CreateInventoryRequest,
    use_case: ReconcileInventoryUseCase = Depends(get_reconcile_inventory_use_case),
) -> InventoryResponse:
    """Create a draft inventory over the selected products."""
    inventory = await use_case.create(request)
    return inventory_to_response(inventory)


@router.get("", response_model=InventoryListResponse)
async def list_inventories(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: IInventoryStore = Depends(get_inventory_store),
) -> InventoryListResponse:
    inventories = await store.list_inventories(limit=limit, offset=offset)
    return InventoryListResponse(
        inventories=[inventory_to_response(i) for i in inventories],
        total=len(inventories),
    )


@router.get(
    "/{inventory_id}",
    response_model=InventoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_inventory(
    inventory_id: int,
    store: IInventoryStore = Depends(get_inventory_store),
) -> InventoryResponse:
    """Inventory with its items, product names and units."""
    inventory = await store.get_inventory(inventory_id)
    if inventory is None:
        raise InventoryNotFoundError(inventory_id)
    return inventory_to_response(inventory)


@router.post("/{inventory_id}/start", response_model=InventoryResponse, responses=STATE_ERRORS)
async def start_inventory(
    inventory_id: int,
    use_case: ReconcileInventoryUseCase = Depends(get_reconcile_inventory_use_case),
) -> InventoryResponse:
    """draft -> in_progress."""
    return inventory_to_response(await use_case.start(inventory_id))


@router.patch(
    "/{inventory_id}/items/{item_id}",
    response_model=InventoryItemResponse,
    responses={400: {"model": ErrorResponse}, **STATE_ERRORS},
)
async def record_count(
    inventory_id: int,
    item_id: int,
    request: RecordCountRequest,
    use_case: ReconcileInventoryUseCase = Depends(get_reconcile_inventory_use_case),
) -> InventoryItemResponse:
    """Record or clear the counted quantity of one item."""
    item = await use_case.record_count(inventory_id, item_id, request)
    return inventory_item_to_response(item)


@router.post(
    "/{inventory_id}/complete",
    response_model=CompleteInventoryResponse,
    responses=STATE_ERRORS,
)
async def complete_inventory(
    inventory_id: int,
    use_case: ReconcileInventoryUseCase = Depends(get_reconcile_inventory_use_case),
) -> CompleteInventoryResponse:
    """in_progress -> completed, posting correction movements."""
    result = await use_case.complete(inventory_id)
    return use_case.to_response(result)


@router.delete(
    "/{inventory_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_inventory(
    inventory_id: int,
    use_case: ReconcileInventoryUseCase = Depends(get_reconcile_inventory_use_case),
) -> Response:
    """Delete an inventory and reverse its corrections."""
    await use_case.delete(inventory_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{inventory_id}/export",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
)
async def export_inventory(
    inventory_id: int,
    use_case: ExportInventoryUseCase = Depends(get_export_inventory_use_case),
) -> Response:
    """Download the count report as PDF."""
    result = await use_case.execute(inventory_id)
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
