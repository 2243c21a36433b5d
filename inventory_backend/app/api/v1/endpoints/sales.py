"""
Sales API endpoints.

Recording sales, listing them, the sellable-items picker and invoice data.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.api.v1.params import jalali_datetime
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.catalog import SellableItemsResponse
from inventory_backend.app.schemas.sale import InvoiceData, SaleCreate, SaleResponse
from inventory_backend.app.services import inventory
from inventory_backend.app.services.sales import SaleOrchestrator, SaleRequest, item_ref

router = APIRouter(tags=["Sales"])


@router.post("/sales", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def record_sale(
    sale_data: SaleCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Record a sale of a bulk product or a phone unit.

    Stock, the sale row and the customer's ledger change together or not at
    all. A linked customer is debited the sale total when it is positive.
    """
    request = SaleRequest(
        item=item_ref(sale_data.item_type, sale_data.item_id),
        quantity=sale_data.quantity,
        transaction_date=jalali_datetime(sale_data.transaction_date),
        customer_id=sale_data.customer_id,
        notes=sale_data.notes,
        discount=sale_data.discount,
        payment_method=sale_data.payment_method,
    )
    sale = await SaleOrchestrator.record_sale(db, request)
    return SaleResponse.from_sale(sale)


@router.get("/sales", response_model=List[SaleResponse])
async def list_sales(
    customer_id: Optional[int] = Query(None, alias="customerId", description="Only sales of this customer"),
    db: AsyncSession = Depends(get_db)
):
    sales = await SaleOrchestrator.list_sales(db, customer_id)
    return [SaleResponse.from_sale(sale) for sale in sales]


@router.get("/sellable-items", response_model=SellableItemsResponse)
async def sellable_items(db: AsyncSession = Depends(get_db)):
    """Products with stock and a selling price, and in-stock phones with a sale price."""
    return await inventory.list_sellable(db)


@router.get("/invoice-data/{sale_id}", response_model=InvoiceData)
async def invoice_data(sale_id: int, db: AsyncSession = Depends(get_db)):
    return await SaleOrchestrator.invoice_data(db, sale_id)
