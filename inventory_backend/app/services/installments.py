"""
Installment sales.

A phone sold on installments is taken out of stock like a regular sale,
gets a monthly payment schedule and optional checks, and the full sale
price is debited to the customer's ledger, all in one transaction.
"""

import logging
from datetime import date, datetime, time
from typing import List, Optional

import jdatetime
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import ResourceNotFoundError, ValidationFailedError
from inventory_backend.app.models.enums import AccountKind, CheckStatus, InstallmentSaleStatus, PaymentStatus, PhoneStatus
from inventory_backend.app.models.installment import InstallmentCheck, InstallmentPayment, InstallmentSale
from inventory_backend.app.services import inventory
from inventory_backend.app.services.ledger import LedgerStore, rollback_quietly
from inventory_backend.app.utils.calendar import add_jalali_months

logger = logging.getLogger(__name__)


def payment_schedule(start: date, count: int) -> List[date]:
    """Due dates one Jalali month apart, starting at ``start``."""
    first = jdatetime.date.fromgregorian(date=start)
    return [add_jalali_months(first, offset).togregorian() for offset in range(count)]


async def create_installment_sale(
    db: AsyncSession,
    customer_id: int,
    phone_id: int,
    actual_sale_price: float,
    down_payment: float,
    number_of_installments: int,
    installment_amount: float,
    installments_start_date: date,
    checks: Optional[List[dict]] = None,
    notes: Optional[str] = None,
) -> InstallmentSale:
    """
    Record an installment sale atomically.

    Raises:
        AccountNotFoundError: unknown customer
        ItemNotFoundError / ItemNotAvailableError: phone missing or not in stock
        ValidationFailedError: down payment larger than the sale price
    """
    if down_payment > actual_sale_price:
        raise ValidationFailedError(
            "Down payment cannot exceed the sale price",
            details={"down_payment": down_payment, "actual_sale_price": actual_sale_price},
        )

    sold_at = datetime.combine(installments_start_date, time.min)
    try:
        await LedgerStore.ensure_account(db, AccountKind.CUSTOMER, customer_id)
        sold = await inventory.sell_unit(
            db, phone_id, 1, sold_at=sold_at, new_status=PhoneStatus.SOLD_INSTALLMENT
        )

        sale = InstallmentSale(
            customer_id=customer_id,
            phone_id=phone_id,
            actual_sale_price=actual_sale_price,
            down_payment=down_payment,
            number_of_installments=number_of_installments,
            installment_amount=installment_amount,
            installments_start_date=installments_start_date,
            notes=notes,
        )
        db.add(sale)
        await db.flush()

        for number, due_date in enumerate(payment_schedule(installments_start_date, number_of_installments), start=1):
            db.add(InstallmentPayment(
                sale_id=sale.id,
                installment_number=number,
                due_date=due_date,
                amount_due=installment_amount,
                status=PaymentStatus.UNPAID,
            ))

        for check in checks or []:
            db.add(InstallmentCheck(
                sale_id=sale.id,
                check_number=check["check_number"],
                bank_name=check["bank_name"],
                due_date=check["due_date"],
                amount=check["amount"],
                status=check.get("status") or CheckStatus.WITH_CUSTOMER,
            ))

        await LedgerStore.post_entry(
            db,
            AccountKind.CUSTOMER,
            customer_id,
            f"Installment sale of {sold.item_name} (installment sale #{sale.id})",
            debit=actual_sale_price,
            credit=0.0,
            transaction_date=sold_at,
        )
        await db.commit()
    except Exception:
        await rollback_quietly(db, "installment sale")
        raise

    logger.info("Installment sale recorded", extra={"installment_sale_id": sale.id, "phone_id": phone_id})
    return await _load_sale(db, sale.id)


async def _load_sale(db: AsyncSession, sale_id: int) -> InstallmentSale:
    result = await db.execute(
        select(InstallmentSale)
        .where(InstallmentSale.id == sale_id)
        .execution_options(populate_existing=True)
    )
    sale = result.unique().scalar_one_or_none()
    if sale is None:
        raise ResourceNotFoundError("Installment sale", sale_id)
    return sale


def summarize(sale: InstallmentSale, today: Optional[date] = None) -> dict:
    """Derived totals and overall status of an installment sale."""
    today = today or datetime.utcnow().date()
    payments = list(sale.payments)

    total_paid = sum(p.amount_due for p in payments if p.status == PaymentStatus.PAID)
    remaining = sale.actual_sale_price - sale.down_payment - total_paid
    unpaid = [p for p in payments if p.status != PaymentStatus.PAID]

    if remaining <= 0 and not unpaid:
        status = InstallmentSaleStatus.COMPLETED
    elif any(p.due_date < today for p in unpaid):
        status = InstallmentSaleStatus.OVERDUE
    else:
        status = InstallmentSaleStatus.PAYING

    return {
        "total_installment_price": sale.number_of_installments * sale.installment_amount + sale.down_payment,
        "total_paid": total_paid,
        "remaining_amount": remaining,
        "overall_status": status,
        "next_due_date": unpaid[0].due_date if unpaid else None,
    }


async def list_installment_sales(db: AsyncSession) -> List[InstallmentSale]:
    result = await db.execute(
        select(InstallmentSale).order_by(InstallmentSale.date_created.desc(), InstallmentSale.id.desc())
    )
    return list(result.unique().scalars().all())


async def get_installment_sale(db: AsyncSession, sale_id: int) -> InstallmentSale:
    return await _load_sale(db, sale_id)


async def set_payment_status(
    db: AsyncSession,
    payment_id: int,
    paid: bool,
    payment_date: Optional[date] = None,
) -> InstallmentPayment:
    payment = await db.get(InstallmentPayment, payment_id)
    if payment is None:
        raise ResourceNotFoundError("Installment payment", payment_id)

    payment.status = PaymentStatus.PAID if paid else PaymentStatus.UNPAID
    payment.payment_date = (payment_date or datetime.utcnow().date()) if paid else None
    await db.commit()
    await db.refresh(payment)
    return payment


async def set_check_status(db: AsyncSession, check_id: int, status: CheckStatus) -> InstallmentCheck:
    check = await db.get(InstallmentCheck, check_id)
    if check is None:
        raise ResourceNotFoundError("Installment check", check_id)

    check.status = status
    await db.commit()
    await db.refresh(check)
    return check
