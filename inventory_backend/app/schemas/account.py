"""
Customer, partner and ledger Pydantic schemas.

Defines request and response models for account management and manual
ledger postings.
"""

from pydantic import BaseModel, Field, computed_field
from datetime import datetime
from typing import Optional, List

from inventory_backend.app.models.enums import ItemType
from inventory_backend.app.utils.calendar import utc_to_jalali


class CustomerCreate(BaseModel):
    """Schema for creating a customer."""
    full_name: str = Field(..., min_length=1, max_length=255, description="Customer full name")
    phone_number: Optional[str] = Field(None, max_length=50, description="Unique contact number")
    address: Optional[str] = None
    notes: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Schema for updating a customer; omitted fields are left unchanged."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    notes: Optional[str] = None


class CustomerResponse(BaseModel):
    id: int
    full_name: str
    phone_number: Optional[str]
    address: Optional[str]
    notes: Optional[str]
    date_added: datetime
    current_balance: float = 0.0

    class Config:
        from_attributes = True


class PartnerCreate(BaseModel):
    """Schema for creating a partner (supplier)."""
    partner_name: str = Field(..., min_length=1, max_length=255, description="Partner or company name")
    partner_type: str = Field("Supplier", min_length=1, max_length=50)
    contact_person: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=50, description="Unique contact number")
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    notes: Optional[str] = None


class PartnerUpdate(BaseModel):
    partner_name: Optional[str] = Field(None, min_length=1, max_length=255)
    partner_type: Optional[str] = Field(None, min_length=1, max_length=50)
    contact_person: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    notes: Optional[str] = None


class PartnerResponse(BaseModel):
    id: int
    partner_name: str
    partner_type: str
    contact_person: Optional[str]
    phone_number: Optional[str]
    email: Optional[str]
    address: Optional[str]
    notes: Optional[str]
    date_added: datetime
    current_balance: float = 0.0

    class Config:
        from_attributes = True


class LedgerEntryCreate(BaseModel):
    """
    Manual ledger adjustment.

    Exactly one of debit/credit must be non-zero. For customers a credit is
    a payment received; for partners a debit is a payment made.
    """
    description: str = Field(..., description="What the entry is for")
    debit: float = Field(0.0, allow_inf_nan=False, description="Debit amount (>= 0)")
    credit: float = Field(0.0, allow_inf_nan=False, description="Credit amount (>= 0)")
    transaction_date: Optional[str] = Field(None, description="Jalali date YYYY/MM/DD, defaults to now")


class LedgerEntryResponse(BaseModel):
    id: int
    transaction_date: datetime
    description: str
    debit: float
    credit: float
    balance: float

    @computed_field
    @property
    def transaction_date_jalali(self) -> Optional[str]:
        return utc_to_jalali(self.transaction_date)

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    account_kind: str
    account_id: int
    current_balance: float


class SaleHistoryItem(BaseModel):
    id: int
    transaction_date: datetime
    item_type: ItemType
    item_id: int
    item_name: str
    quantity: int
    price_per_item: float
    discount: float
    total_price: float
    notes: Optional[str]

    class Config:
        from_attributes = True


class CustomerDetailResponse(BaseModel):
    profile: CustomerResponse
    current_balance: float
    ledger: List[LedgerEntryResponse]
    purchase_history: List[SaleHistoryItem]


class PurchasedItem(BaseModel):
    id: int
    type: str
    name: str
    identifier: str
    purchase_price: float
    quantity: int
    purchase_date: Optional[datetime]


class PartnerDetailResponse(BaseModel):
    profile: PartnerResponse
    current_balance: float
    ledger: List[LedgerEntryResponse]
    purchased_items: List[PurchasedItem]
