"""
Sale Pydantic schemas.

Defines the sale request, the sale transaction response and the invoice
payload.
"""

from pydantic import BaseModel, Field, computed_field
from datetime import datetime
from typing import Optional, List

from inventory_backend.app.models.enums import ItemType, PaymentMethod
from inventory_backend.app.utils.calendar import utc_to_jalali


class SaleCreate(BaseModel):
    """
    Schema for recording a sale.

    Quantity, discount and price rules are enforced by the sale service so
    that violations surface as 400 responses with a specific error code.
    """
    item_type: ItemType = Field(..., description="inventory (bulk product) or phone (serialized unit)")
    item_id: int = Field(..., description="Product or phone ID")
    quantity: int = Field(..., description="Units sold; must be 1 for phones")
    transaction_date: str = Field(..., description="Jalali date YYYY/MM/DD")
    customer_id: Optional[int] = Field(None, description="Linked customer; a positive total is debited to them")
    notes: Optional[str] = None
    discount: float = Field(0.0, allow_inf_nan=False, description="Absolute discount, 0 <= discount <= subtotal")
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, description="cash or credit; recorded on the sale only")


class SaleResponse(BaseModel):
    id: int
    transaction_date: datetime
    item_type: ItemType
    item_id: int
    item_name: str
    quantity: int
    price_per_item: float
    discount: float
    total_price: float
    payment_method: PaymentMethod
    customer_id: Optional[int]
    customer_full_name: Optional[str] = None
    notes: Optional[str]

    @computed_field
    @property
    def transaction_date_jalali(self) -> Optional[str]:
        return utc_to_jalali(self.transaction_date)

    class Config:
        from_attributes = True

    @classmethod
    def from_sale(cls, sale) -> "SaleResponse":
        response = cls.model_validate(sale)
        response.customer_full_name = sale.customer.full_name if sale.customer else None
        return response


class BusinessDetails(BaseModel):
    store_name: str
    address_line1: str
    address_line2: str
    city_state_zip: str
    phone: str
    email: str
    logo_url: Optional[str]


class CustomerDetails(BaseModel):
    id: int
    full_name: str
    phone_number: Optional[str]
    address: Optional[str]


class InvoiceMetadata(BaseModel):
    invoice_number: str
    transaction_date: Optional[str]


class InvoiceLineItem(BaseModel):
    id: int
    description: str
    quantity: int
    unit_price: float
    total_price: float


class FinancialSummary(BaseModel):
    subtotal: float
    discount_amount: float
    grand_total: float


class InvoiceData(BaseModel):
    business_details: BusinessDetails
    customer_details: Optional[CustomerDetails]
    invoice_metadata: InvoiceMetadata
    line_items: List[InvoiceLineItem]
    financial_summary: FinancialSummary
    notes: Optional[str]
