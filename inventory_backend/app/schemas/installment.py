"""
Installment sale Pydantic schemas.

Dates on the wire are Jalali ``YYYY/MM/DD`` strings.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List

from inventory_backend.app.models.enums import CheckStatus, InstallmentSaleStatus, PaymentStatus
from inventory_backend.app.utils.calendar import utc_to_jalali


class InstallmentCheckCreate(BaseModel):
    check_number: str = Field(..., min_length=1, max_length=100)
    bank_name: str = Field(..., min_length=1, max_length=255)
    due_date: str = Field(..., description="Jalali date YYYY/MM/DD")
    amount: float = Field(..., allow_inf_nan=False, gt=0)
    status: Optional[CheckStatus] = None


class InstallmentSaleCreate(BaseModel):
    customer_id: int
    phone_id: int
    actual_sale_price: float = Field(..., allow_inf_nan=False, gt=0)
    down_payment: float = Field(0.0, allow_inf_nan=False, ge=0)
    number_of_installments: int = Field(..., ge=1, le=120)
    installment_amount: float = Field(..., allow_inf_nan=False, gt=0)
    installments_start_date: str = Field(..., description="Jalali date of the first installment")
    checks: List[InstallmentCheckCreate] = Field(default_factory=list)
    notes: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    paid: bool
    payment_date: Optional[str] = Field(None, description="Jalali date, defaults to today when paid")


class CheckStatusUpdate(BaseModel):
    status: CheckStatus


class InstallmentPaymentResponse(BaseModel):
    id: int
    installment_number: int
    due_date: str
    amount_due: float
    payment_date: Optional[str]
    status: PaymentStatus

    @classmethod
    def from_payment(cls, payment) -> "InstallmentPaymentResponse":
        return cls(
            id=payment.id,
            installment_number=payment.installment_number,
            due_date=utc_to_jalali(payment.due_date),
            amount_due=payment.amount_due,
            payment_date=utc_to_jalali(payment.payment_date),
            status=payment.status,
        )


class InstallmentCheckResponse(BaseModel):
    id: int
    check_number: str
    bank_name: str
    due_date: str
    amount: float
    status: CheckStatus

    @classmethod
    def from_check(cls, check) -> "InstallmentCheckResponse":
        return cls(
            id=check.id,
            check_number=check.check_number,
            bank_name=check.bank_name,
            due_date=utc_to_jalali(check.due_date),
            amount=check.amount,
            status=check.status,
        )


class InstallmentSaleSummary(BaseModel):
    id: int
    customer_id: int
    customer_full_name: Optional[str]
    phone_id: int
    phone_model: Optional[str]
    phone_imei: Optional[str]
    actual_sale_price: float
    down_payment: float
    number_of_installments: int
    installment_amount: float
    installments_start_date: str
    notes: Optional[str]
    date_created: datetime
    total_installment_price: float
    total_paid: float
    remaining_amount: float
    overall_status: InstallmentSaleStatus
    next_due_date: Optional[str]

    @staticmethod
    def fields_from(sale, totals: dict) -> dict:
        return dict(
            id=sale.id,
            customer_id=sale.customer_id,
            customer_full_name=sale.customer.full_name if sale.customer else None,
            phone_id=sale.phone_id,
            phone_model=sale.phone.model if sale.phone else None,
            phone_imei=sale.phone.imei if sale.phone else None,
            actual_sale_price=sale.actual_sale_price,
            down_payment=sale.down_payment,
            number_of_installments=sale.number_of_installments,
            installment_amount=sale.installment_amount,
            installments_start_date=utc_to_jalali(sale.installments_start_date),
            notes=sale.notes,
            date_created=sale.date_created,
            total_installment_price=totals["total_installment_price"],
            total_paid=totals["total_paid"],
            remaining_amount=totals["remaining_amount"],
            overall_status=totals["overall_status"],
            next_due_date=utc_to_jalali(totals["next_due_date"]),
        )


class InstallmentSaleDetail(InstallmentSaleSummary):
    payments: List[InstallmentPaymentResponse]
    checks: List[InstallmentCheckResponse]
