"""
Catalogue API endpoints: categories, bulk products and phone units.

Registering stock bought from a supplier credits the supplier's ledger.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.api.v1.params import jalali_datetime
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.catalog import (
    CategoryCreate,
    CategoryResponse,
    PhoneCreate,
    PhoneResponse,
    ProductCreate,
    ProductResponse,
)
from inventory_backend.app.services import inventory

router = APIRouter(tags=["Catalogue"])


# --- Categories ---

@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await inventory.list_categories(db)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(category_data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await inventory.create_category(db, category_data.name)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    category_data: CategoryCreate,
    db: AsyncSession = Depends(get_db)
):
    return await inventory.update_category(db, category_id, category_data.name)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Products of the category keep existing without a category."""
    await inventory.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Products ---

@router.get("/products", response_model=List[ProductResponse])
async def list_products(
    supplier_id: Optional[int] = Query(None, alias="supplierId"),
    db: AsyncSession = Depends(get_db)
):
    products = await inventory.list_products(db, supplier_id)
    return [ProductResponse.from_product(product) for product in products]


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(product_data: ProductCreate, db: AsyncSession = Depends(get_db)):
    product = await inventory.create_product(
        db,
        name=product_data.name,
        purchase_price=product_data.purchase_price,
        selling_price=product_data.selling_price,
        stock_quantity=product_data.stock_quantity,
        category_id=product_data.category_id,
        supplier_id=product_data.supplier_id,
    )
    return ProductResponse.from_product(product)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return ProductResponse.from_product(await inventory.get_product(db, product_id))


# --- Phones ---

@router.get("/phones", response_model=List[PhoneResponse])
async def list_phones(
    supplier_id: Optional[int] = Query(None, alias="supplierId"),
    phone_status: Optional[str] = Query(None, alias="status", description="e.g. 'in stock'"),
    db: AsyncSession = Depends(get_db)
):
    phones = await inventory.list_phones(db, supplier_id=supplier_id, status=phone_status)
    return [PhoneResponse.from_phone(phone) for phone in phones]


@router.post("/phones", response_model=PhoneResponse, status_code=status.HTTP_201_CREATED)
async def create_phone(phone_data: PhoneCreate, db: AsyncSession = Depends(get_db)):
    """Register a phone unit; the IMEI must be unique."""
    data = phone_data.model_dump()
    for field in ("purchase_date", "sale_date", "register_date"):
        data[field] = jalali_datetime(data[field], required=False)
    phone = await inventory.create_phone(db, data)
    return PhoneResponse.from_phone(phone)


@router.get("/phones/{phone_id}", response_model=PhoneResponse)
async def get_phone(phone_id: int, db: AsyncSession = Depends(get_db)):
    return PhoneResponse.from_phone(await inventory.get_phone(db, phone_id))
