"""
Installment sale API endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.api.v1.params import jalali_day
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.installment import (
    CheckStatusUpdate,
    InstallmentCheckResponse,
    InstallmentPaymentResponse,
    InstallmentSaleCreate,
    InstallmentSaleDetail,
    InstallmentSaleSummary,
    PaymentStatusUpdate,
)
from inventory_backend.app.services import installments

router = APIRouter(prefix="/installment-sales", tags=["Installment Sales"])


def _detail(sale) -> InstallmentSaleDetail:
    fields = InstallmentSaleSummary.fields_from(sale, installments.summarize(sale))
    return InstallmentSaleDetail(
        **fields,
        payments=[InstallmentPaymentResponse.from_payment(p) for p in sale.payments],
        checks=[InstallmentCheckResponse.from_check(c) for c in sale.checks],
    )


@router.post("", response_model=InstallmentSaleDetail, status_code=status.HTTP_201_CREATED)
async def create_installment_sale(
    sale_data: InstallmentSaleCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Sell a phone on installments.

    Marks the phone sold, builds the monthly payment schedule, stores the
    checks and debits the full sale price to the customer, atomically.
    """
    checks = [
        {
            "check_number": check.check_number,
            "bank_name": check.bank_name,
            "due_date": jalali_day(check.due_date),
            "amount": check.amount,
            "status": check.status,
        }
        for check in sale_data.checks
    ]
    sale = await installments.create_installment_sale(
        db,
        customer_id=sale_data.customer_id,
        phone_id=sale_data.phone_id,
        actual_sale_price=sale_data.actual_sale_price,
        down_payment=sale_data.down_payment,
        number_of_installments=sale_data.number_of_installments,
        installment_amount=sale_data.installment_amount,
        installments_start_date=jalali_day(sale_data.installments_start_date),
        checks=checks,
        notes=sale_data.notes,
    )
    return _detail(sale)


@router.get("", response_model=List[InstallmentSaleSummary])
async def list_installment_sales(db: AsyncSession = Depends(get_db)):
    sales = await installments.list_installment_sales(db)
    return [
        InstallmentSaleSummary(**InstallmentSaleSummary.fields_from(sale, installments.summarize(sale)))
        for sale in sales
    ]


@router.get("/{sale_id}", response_model=InstallmentSaleDetail)
async def get_installment_sale(sale_id: int, db: AsyncSession = Depends(get_db)):
    return _detail(await installments.get_installment_sale(db, sale_id))


@router.put("/payment/{payment_id}", response_model=InstallmentPaymentResponse)
async def update_payment_status(
    payment_id: int,
    payment_data: PaymentStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Mark an installment paid (defaulting the payment date to today) or unpaid."""
    payment = await installments.set_payment_status(
        db,
        payment_id,
        payment_data.paid,
        payment_date=jalali_day(payment_data.payment_date, required=False),
    )
    return InstallmentPaymentResponse.from_payment(payment)


@router.put("/check/{check_id}", response_model=InstallmentCheckResponse)
async def update_check_status(
    check_id: int,
    check_data: CheckStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    check = await installments.set_check_status(db, check_id, check_data.status)
    return InstallmentCheckResponse.from_check(check)
