"""
Sale Transaction Orchestrator.

Executes a sale as one all-or-nothing unit:

1. take the item out of stock (bulk product) or mark it sold (phone unit)
2. price it: subtotal = quantity x unit price, total = subtotal - discount
3. insert the immutable sale transaction with price/name snapshots
4. debit the linked customer's ledger when the total is positive
5. commit

Any failure rolls the whole unit back and re-raises the original error.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import (
    InvalidDiscountError,
    NegativeTotalError,
    ResourceNotFoundError,
)
from inventory_backend.app.models.enums import AccountKind, ItemType, PaymentMethod
from inventory_backend.app.models.sales_transaction import SalesTransaction
from inventory_backend.app.models.setting import Setting
from inventory_backend.app.services import inventory
from inventory_backend.app.services.ledger import LedgerStore, rollback_quietly
from inventory_backend.app.utils.calendar import utc_to_jalali

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkItemRef:
    product_id: int


@dataclass(frozen=True)
class SerializedUnitRef:
    phone_id: int


ItemRef = Union[BulkItemRef, SerializedUnitRef]


@dataclass
class SaleRequest:
    item: ItemRef
    quantity: int
    transaction_date: datetime
    customer_id: Optional[int] = None
    notes: Optional[str] = None
    discount: float = field(default=0.0)
    payment_method: PaymentMethod = PaymentMethod.CASH


def item_ref(item_type: ItemType, item_id: int) -> ItemRef:
    """Build the item variant from its wire representation."""
    if ItemType(item_type) == ItemType.PHONE:
        return SerializedUnitRef(phone_id=item_id)
    return BulkItemRef(product_id=item_id)


def compute_total(quantity: int, unit_price: float, discount: float) -> float:
    subtotal = quantity * unit_price
    if not math.isfinite(discount) or discount < 0 or discount > subtotal:
        raise InvalidDiscountError(discount, subtotal)
    total = subtotal - discount
    if total < 0:
        raise NegativeTotalError(total)
    return total


class SaleOrchestrator:

    @staticmethod
    async def _take_item(db: AsyncSession, request: SaleRequest):
        match request.item:
            case BulkItemRef(product_id=product_id):
                sold = await inventory.reserve_and_sell(db, product_id, request.quantity)
                return ItemType.INVENTORY, product_id, sold
            case SerializedUnitRef(phone_id=phone_id):
                sold = await inventory.sell_unit(db, phone_id, request.quantity, request.transaction_date)
                return ItemType.PHONE, phone_id, sold
            case _:
                raise TypeError(f"Unsupported item reference: {request.item!r}")

    @staticmethod
    async def record_sale(db: AsyncSession, request: SaleRequest) -> SalesTransaction:
        """
        Record a sale atomically.

        Args:
            db: Database session; this call owns its transaction
            request: Sale request with the item variant

        Returns:
            The persisted sale transaction

        Raises:
            NotFoundError, ValidationFailedError, UnavailableError from the
            inventory and ledger steps; nothing is persisted in that case.
        """
        try:
            item_type, item_id, sold = await SaleOrchestrator._take_item(db, request)

            total = compute_total(request.quantity, sold.unit_price, request.discount)

            if request.customer_id:
                await LedgerStore.ensure_account(db, AccountKind.CUSTOMER, request.customer_id)

            sale = SalesTransaction(
                transaction_date=request.transaction_date,
                item_type=item_type,
                item_id=item_id,
                item_name=sold.item_name,
                quantity=request.quantity,
                price_per_item=sold.unit_price,
                discount=request.discount,
                total_price=total,
                payment_method=request.payment_method,
                customer_id=request.customer_id,
                notes=request.notes,
            )
            db.add(sale)
            await db.flush()

            if request.customer_id and total > 0:
                await LedgerStore.post_entry(
                    db,
                    AccountKind.CUSTOMER,
                    request.customer_id,
                    f"Purchase of {request.quantity} x {sold.item_name} (sale #{sale.id})",
                    debit=total,
                    credit=0.0,
                    transaction_date=request.transaction_date,
                )

            await db.commit()
        except Exception:
            await rollback_quietly(db, "sale")
            raise

        logger.info(
            "Sale recorded",
            extra={"sale_id": sale.id, "item_type": item_type.value, "item_id": item_id, "total": total},
        )
        return await SaleOrchestrator.get_sale(db, sale.id)

    @staticmethod
    async def get_sale(db: AsyncSession, sale_id: int) -> SalesTransaction:
        result = await db.execute(
            select(SalesTransaction)
            .where(SalesTransaction.id == sale_id)
            .execution_options(populate_existing=True)
        )
        sale = result.unique().scalar_one_or_none()
        if sale is None:
            raise ResourceNotFoundError("Sale", sale_id)
        return sale

    @staticmethod
    async def list_sales(db: AsyncSession, customer_id: Optional[int] = None) -> List[SalesTransaction]:
        """Sales newest first, optionally for a single customer."""
        stmt = select(SalesTransaction)
        if customer_id:
            stmt = stmt.where(SalesTransaction.customer_id == customer_id)
        result = await db.execute(stmt.order_by(SalesTransaction.id.desc()))
        return list(result.unique().scalars().all())

    @staticmethod
    async def invoice_data(db: AsyncSession, sale_id: int) -> dict:
        """Everything needed to render an invoice for one sale."""
        sale = await SaleOrchestrator.get_sale(db, sale_id)
        store = {s.key: s.value for s in (await db.execute(select(Setting))).scalars().all()}

        customer = sale.customer
        subtotal = sale.quantity * sale.price_per_item

        return {
            "business_details": {
                "store_name": store.get("store_name") or "",
                "address_line1": store.get("store_address_line1") or "",
                "address_line2": store.get("store_address_line2") or "",
                "city_state_zip": store.get("store_city_state_zip") or "",
                "phone": store.get("store_phone") or "",
                "email": store.get("store_email") or "",
                "logo_url": store.get("store_logo_path") or None,
            },
            "customer_details": {
                "id": customer.id,
                "full_name": customer.full_name,
                "phone_number": customer.phone_number,
                "address": customer.address,
            } if customer else None,
            "invoice_metadata": {
                "invoice_number": str(sale.id),
                "transaction_date": utc_to_jalali(sale.transaction_date),
            },
            "line_items": [
                {
                    "id": 1,
                    "description": sale.item_name,
                    "quantity": sale.quantity,
                    "unit_price": sale.price_per_item,
                    "total_price": subtotal,
                }
            ],
            "financial_summary": {
                "subtotal": subtotal,
                "discount_amount": sale.discount,
                "grand_total": sale.total_price,
            },
            "notes": sale.notes,
        }
