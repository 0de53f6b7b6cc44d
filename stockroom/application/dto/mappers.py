"""Entity to response DTO conversion."""

from stockroom.application.dto.responses import (
    InventoryItemResponse,
    InventoryResponse,
    InvoiceItemResponse,
    InvoiceResponse,
    ParsedInvoiceResponse,
    ProductResponse,
    SaleItemResponse,
    SaleResponse,
    StockMovementResponse,
)
from stockroom.core.entities import (
    Inventory,
    InventoryItem,
    Invoice,
    InvoiceItem,
    ParsedInvoiceData,
    Product,
    Sale,
    StockMovement,
)


def invoice_item_to_response(item: InvoiceItem) -> InvoiceItemResponse:
    return InvoiceItemResponse(
        id=item.id,
        name=item.name,
        quantity=item.quantity,
        unit=item.unit,
        percentage=item.percentage,
        net_price=item.net_price,
        gross_price=item.gross_price,
        total_net=item.total_net,
        total_gross=item.total_gross,
    )


def parsed_invoice_to_response(
    data: ParsedInvoiceData, filename: str = ""
) -> ParsedInvoiceResponse:
    return ParsedInvoiceResponse(
        invoice_number=data.invoice_number,
        date=data.date,
        vendor=data.vendor,
        filename=filename,
        items=[invoice_item_to_response(i) for i in data.items],
        total_net=data.total_net,
        total_gross=data.total_gross,
        source=data.source,
    )


def invoice_to_response(invoice: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        id=invoice.id,  # type: ignore[arg-type]
        filename=invoice.filename,
        invoice_number=invoice.invoice_number,
        invoice_date=invoice.invoice_date,
        vendor=invoice.vendor,
        total_net=invoice.total_net,
        total_gross=invoice.total_gross,
        processed_at=invoice.processed_at,
        items=[invoice_item_to_response(i) for i in invoice.items],
    )


def product_to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        unit=product.unit,
        current_stock=product.current_stock,
        min_stock_level=product.min_stock_level,
        last_purchase_price=product.last_purchase_price,
        is_low_stock=product.is_low_stock,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def movement_to_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        product_id=movement.product_id,
        movement_type=movement.movement_type.value,
        quantity=movement.quantity,
        reference_id=movement.reference_id,
        reference_type=movement.reference_type.value if movement.reference_type else None,
        notes=movement.notes,
        created_at=movement.created_at,
    )


def sale_to_response(sale: Sale) -> SaleResponse:
    return SaleResponse(
        id=sale.id,  # type: ignore[arg-type]
        sale_number=sale.sale_number,
        sale_date=sale.sale_date,
        customer=sale.customer,
        total_amount=sale.total_amount,
        created_at=sale.created_at,
        items=[
            SaleItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in sale.items
        ],
    )


def inventory_item_to_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=item.id,  # type: ignore[arg-type]
        product_id=item.product_id,
        product_name=item.product_name,
        product_unit=item.product_unit,
        expected_quantity=item.expected_quantity,
        counted_quantity=item.counted_quantity,
        difference=item.difference,
        status=item.count_status.value,
        notes=item.notes,
    )


def inventory_to_response(inventory: Inventory) -> InventoryResponse:
    return InventoryResponse(
        id=inventory.id,  # type: ignore[arg-type]
        name=inventory.name,
        status=inventory.status.value,
        created_at=inventory.created_at,
        completed_at=inventory.completed_at,
        counted_count=inventory.counted_count,
        total_difference=inventory.total_difference,
        items=[inventory_item_to_response(i) for i in inventory.items],
    )
