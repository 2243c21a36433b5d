"""
Catalogue Pydantic schemas: categories, bulk products and phone units.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Unique category name")


class CategoryResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    """
    Schema for registering a bulk product.

    When ``supplier_id`` is given, purchase_price x stock_quantity is
    credited to that supplier's ledger.
    """
    name: str = Field(..., min_length=1, max_length=255)
    purchase_price: float = Field(..., allow_inf_nan=False, ge=0, description="Unit cost")
    selling_price: float = Field(..., allow_inf_nan=False, gt=0, description="Unit selling price")
    stock_quantity: int = Field(..., ge=0)
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    purchase_price: float
    selling_price: float
    stock_quantity: int
    sale_count: int
    category_id: Optional[int]
    category_name: Optional[str] = None
    supplier_id: Optional[int]
    supplier_name: Optional[str] = None
    date_added: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        response = cls.model_validate(product)
        response.category_name = product.category.name if product.category else None
        response.supplier_name = product.supplier.partner_name if product.supplier else None
        return response


class PhoneCreate(BaseModel):
    """
    Schema for registering a phone unit.

    Dates are Jalali ``YYYY/MM/DD`` strings.
    """
    model: str = Field(..., min_length=1, max_length=255)
    color: Optional[str] = Field(None, max_length=100)
    storage: Optional[str] = Field(None, max_length=50)
    ram: Optional[str] = Field(None, max_length=50)
    imei: str = Field(..., pattern=r"^\d{15,16}$", description="15 or 16 digit IMEI")
    battery_health: Optional[int] = Field(None, ge=0, le=100)
    condition: Optional[str] = Field(None, max_length=100)
    purchase_price: float = Field(..., allow_inf_nan=False, ge=0)
    sale_price: Optional[float] = Field(None, allow_inf_nan=False, ge=0)
    seller_name: Optional[str] = Field(None, max_length=255)
    purchase_date: Optional[str] = None
    sale_date: Optional[str] = None
    register_date: Optional[str] = None
    status: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    supplier_id: Optional[int] = None


class PhoneResponse(BaseModel):
    id: int
    model: str
    color: Optional[str]
    storage: Optional[str]
    ram: Optional[str]
    imei: str
    battery_health: Optional[int]
    condition: Optional[str]
    purchase_price: float
    sale_price: Optional[float]
    seller_name: Optional[str]
    purchase_date: Optional[datetime]
    sale_date: Optional[datetime]
    register_date: datetime
    status: str
    notes: Optional[str]
    supplier_id: Optional[int]
    supplier_name: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_phone(cls, phone) -> "PhoneResponse":
        response = cls.model_validate(phone)
        response.supplier_name = phone.supplier.partner_name if phone.supplier else None
        return response


class SellableItem(BaseModel):
    id: int
    type: str
    name: str
    price: float
    stock: int
    model: Optional[str] = None
    imei: Optional[str] = None


class SellableItemsResponse(BaseModel):
    """Items that can currently be picked in a sale form."""
    inventory: List[SellableItem]
    phones: List[SellableItem]
