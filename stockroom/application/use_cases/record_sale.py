"""Record Sale Use Case: sale, items and outgoing movements in one transaction."""

from datetime import date

from stockroom.application.dto.mappers import sale_to_response
from stockroom.application.dto.requests import CreateSaleRequest
from stockroom.application.dto.responses import SaleResponse
from stockroom.config import get_logger
from stockroom.core.entities.sale import Sale, SaleItem
from stockroom.core.exceptions import ProductNotFoundError, ValidationError
from stockroom.core.interfaces.product_store import IProductStore
from stockroom.core.interfaces.sales_store import ISalesStore

logger = get_logger(__name__)


class RecordSaleUseCase:
    """Record a sale. Quantities are positive here and negated in the ledger."""

    def __init__(self, sales_store: ISalesStore, product_store: IProductStore):
        self._sales_store = sales_store
        self._product_store = product_store

    async def execute(self, request: CreateSaleRequest) -> Sale:
        """Execute record sale use case."""
        if not request.items:
            raise ValidationError("items", "sale has no items")

        for idx, item in enumerate(request.items):
            if item.quantity <= 0:
                raise ValidationError(
                    f"items[{idx}].quantity", "quantity must be positive", item.quantity
                )
            if await self._product_store.get_product(item.product_id) is None:
                raise ProductNotFoundError(item.product_id)

        sale = Sale(
            sale_number=request.sale_number,
            sale_date=request.sale_date or date.today(),
            customer=request.customer,
            items=[
                SaleItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in request.items
            ],
        )
        sale = await self._sales_store.create_sale(sale)

        logger.info(
            "record_sale_complete",
            sale_id=sale.id,
            items=len(sale.items),
            total=round(sale.total_amount, 2),
        )
        return sale

    def to_response(self, sale: Sale) -> SaleResponse:
        """Convert result to API response."""
        return sale_to_response(sale)
