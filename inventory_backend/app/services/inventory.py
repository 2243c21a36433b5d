"""
Inventory Mutator.

Sellability checks and stock/status mutations for bulk products and
serialized phone units, plus the catalogue operations that feed them.

The sell paths never commit. Their mutations are guarded conditional
UPDATEs executed in the caller's transaction, so two racing sales cannot
both take the last unit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import (
    DuplicateNameError,
    DuplicateSerialError,
    InsufficientStockError,
    InvalidPriceError,
    InvalidQuantityError,
    ItemNotAvailableError,
    ItemNotFoundError,
    ResourceNotFoundError,
)
from inventory_backend.app.models.category import Category
from inventory_backend.app.models.enums import AccountKind, PhoneStatus
from inventory_backend.app.models.phone import Phone
from inventory_backend.app.models.product import Product
from inventory_backend.app.services.ledger import LedgerStore, rollback_quietly

logger = logging.getLogger(__name__)

# Prefixes of partner ledger postings created by purchases; top-suppliers
# reporting selects on them.
GOODS_RECEIVED_PREFIX = "Goods received:"
PHONE_RECEIVED_PREFIX = "Phone received:"


@dataclass(frozen=True)
class SoldItem:
    unit_price: float
    item_name: str


def _has_price(price: Optional[float]) -> bool:
    return price is not None and price > 0


# --- Sell paths ---

async def reserve_and_sell(db: AsyncSession, product_id: int, quantity: int) -> SoldItem:
    """
    Take ``quantity`` units of a bulk product out of stock.

    Raises:
        InvalidQuantityError: quantity below 1
        ItemNotFoundError: unknown product
        InsufficientStockError: stock lower than quantity
        InvalidPriceError: selling price missing or not positive
    """
    if quantity is None or quantity < 1:
        raise InvalidQuantityError("Quantity must be at least 1", quantity)

    product = await db.get(Product, product_id)
    if product is None:
        raise ItemNotFoundError("product", product_id)
    if product.stock_quantity < quantity:
        raise InsufficientStockError(product.name, product.stock_quantity, quantity)
    if not _has_price(product.selling_price):
        raise InvalidPriceError(product.name)

    result = await db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock_quantity >= quantity)
        .values(
            stock_quantity=Product.stock_quantity - quantity,
            sale_count=Product.sale_count + quantity,
        )
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount != 1:
        # stock changed between the check and the update
        await db.refresh(product)
        raise InsufficientStockError(product.name, product.stock_quantity, quantity)

    return SoldItem(unit_price=product.selling_price, item_name=product.name)


async def sell_unit(
    db: AsyncSession,
    phone_id: int,
    quantity: int = 1,
    sold_at: Optional[datetime] = None,
    new_status: PhoneStatus = PhoneStatus.SOLD,
) -> SoldItem:
    """
    Mark a single phone unit as sold.

    Raises:
        ItemNotFoundError: unknown phone
        ItemNotAvailableError: status is not ``in stock``
        InvalidQuantityError: quantity other than 1 on an available unit
        InvalidPriceError: sale price missing or not positive
    """
    phone = await db.get(Phone, phone_id)
    if phone is None:
        raise ItemNotFoundError("phone", phone_id)
    if phone.status != PhoneStatus.IN_STOCK.value:
        raise ItemNotAvailableError(phone.display_name, phone.status)
    if quantity != 1:
        raise InvalidQuantityError("A phone unit can only be sold with quantity 1", quantity)
    if not _has_price(phone.sale_price):
        raise InvalidPriceError(phone.display_name)

    result = await db.execute(
        update(Phone)
        .where(Phone.id == phone_id, Phone.status == PhoneStatus.IN_STOCK.value)
        .values(status=new_status.value, sale_date=sold_at or datetime.utcnow())
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount != 1:
        await db.refresh(phone)
        raise ItemNotAvailableError(phone.display_name, phone.status)

    return SoldItem(unit_price=phone.sale_price, item_name=phone.display_name)


async def list_sellable(db: AsyncSession) -> Dict[str, List[dict]]:
    """Products with stock and a price, in-stock phones with a price."""
    products = await db.execute(
        select(Product)
        .where(Product.stock_quantity > 0, Product.selling_price.is_not(None), Product.selling_price > 0)
        .order_by(Product.name)
    )
    phones = await db.execute(
        select(Phone)
        .where(Phone.status == PhoneStatus.IN_STOCK.value, Phone.sale_price.is_not(None), Phone.sale_price > 0)
        .order_by(Phone.id)
    )
    return {
        "inventory": [
            {"id": p.id, "type": "inventory", "name": p.name, "price": p.selling_price, "stock": p.stock_quantity}
            for p in products.scalars().unique().all()
        ],
        "phones": [
            {"id": ph.id, "type": "phone", "name": ph.display_name, "price": ph.sale_price, "stock": 1,
             "model": ph.model, "imei": ph.imei}
            for ph in phones.scalars().unique().all()
        ],
    }


# --- Categories ---

async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def create_category(db: AsyncSession, name: str) -> Category:
    category = Category(name=name.strip())
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await rollback_quietly(db, "create category")
        raise DuplicateNameError("category", name)
    await db.refresh(category)
    return category


async def update_category(db: AsyncSession, category_id: int, name: str) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise ResourceNotFoundError("Category", category_id)
    category.name = name.strip()
    try:
        await db.commit()
    except IntegrityError:
        await rollback_quietly(db, "update category")
        raise DuplicateNameError("category", name)
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await db.get(Category, category_id)
    if category is None:
        raise ResourceNotFoundError("Category", category_id)
    await db.delete(category)
    await db.commit()


# --- Products ---

async def _ensure_category(db: AsyncSession, category_id: Optional[int]) -> None:
    if category_id is not None and await db.get(Category, category_id) is None:
        raise ResourceNotFoundError("Category", category_id)


async def create_product(
    db: AsyncSession,
    name: str,
    purchase_price: float,
    selling_price: float,
    stock_quantity: int,
    category_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
) -> Product:
    """
    Register a bulk product.

    When bought from a supplier, the purchase value (unit cost x quantity)
    is credited to the supplier's ledger in the same transaction.
    """
    try:
        await _ensure_category(db, category_id)
        if supplier_id is not None:
            await LedgerStore.ensure_account(db, AccountKind.PARTNER, supplier_id)

        product = Product(
            name=name,
            purchase_price=purchase_price,
            selling_price=selling_price,
            stock_quantity=stock_quantity,
            sale_count=0,
            category_id=category_id,
            supplier_id=supplier_id,
        )
        db.add(product)
        await db.flush()

        if supplier_id and purchase_price > 0 and stock_quantity > 0:
            await LedgerStore.post_entry(
                db,
                AccountKind.PARTNER,
                supplier_id,
                f"{GOODS_RECEIVED_PREFIX} {stock_quantity} x {name} (product #{product.id}) "
                f"at {purchase_price:,.0f} each",
                debit=0.0,
                credit=purchase_price * stock_quantity,
            )
        await db.commit()
    except Exception:
        await rollback_quietly(db, "create product")
        raise

    logger.info("Product created", extra={"product_id": product.id, "supplier_id": supplier_id})
    return await get_product(db, product.id)


async def get_product(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(
        select(Product).where(Product.id == product_id).execution_options(populate_existing=True)
    )
    product = result.unique().scalar_one_or_none()
    if product is None:
        raise ItemNotFoundError("product", product_id)
    return product


async def list_products(db: AsyncSession, supplier_id: Optional[int] = None) -> List[Product]:
    stmt = select(Product)
    if supplier_id:
        stmt = stmt.where(Product.supplier_id == supplier_id)
    result = await db.execute(stmt.order_by(Product.date_added.desc(), Product.id.desc()))
    return list(result.unique().scalars().all())


# --- Phones ---

async def create_phone(db: AsyncSession, data: dict) -> Phone:
    """
    Register a phone unit.

    Duplicate IMEIs are rejected. A purchase from a supplier credits the
    purchase price to the supplier's ledger atomically.
    """
    imei = data["imei"]
    existing = await db.execute(select(Phone.id).where(Phone.imei == imei))
    if existing.first() is not None:
        raise DuplicateSerialError(imei)

    supplier_id = data.get("supplier_id")
    try:
        if supplier_id is not None:
            await LedgerStore.ensure_account(db, AccountKind.PARTNER, supplier_id)

        phone = Phone(**data)
        if not phone.status:
            phone.status = PhoneStatus.IN_STOCK.value
        if phone.register_date is None:
            phone.register_date = datetime.utcnow()
        db.add(phone)
        await db.flush()

        purchase_price = phone.purchase_price or 0
        if supplier_id and purchase_price > 0:
            await LedgerStore.post_entry(
                db,
                AccountKind.PARTNER,
                supplier_id,
                f"{PHONE_RECEIVED_PREFIX} {phone.model} (IMEI: {imei}, phone #{phone.id}) "
                f"at {purchase_price:,.0f}",
                debit=0.0,
                credit=purchase_price,
                transaction_date=phone.purchase_date,
            )
        await db.commit()
    except IntegrityError:
        await rollback_quietly(db, "create phone")
        raise DuplicateSerialError(imei)
    except Exception:
        await rollback_quietly(db, "create phone")
        raise

    logger.info("Phone registered", extra={"phone_id": phone.id, "supplier_id": supplier_id})
    return await get_phone(db, phone.id)


async def get_phone(db: AsyncSession, phone_id: int) -> Phone:
    result = await db.execute(
        select(Phone).where(Phone.id == phone_id).execution_options(populate_existing=True)
    )
    phone = result.unique().scalar_one_or_none()
    if phone is None:
        raise ItemNotFoundError("phone", phone_id)
    return phone


async def list_phones(
    db: AsyncSession,
    supplier_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[Phone]:
    stmt = select(Phone)
    if supplier_id:
        stmt = stmt.where(Phone.supplier_id == supplier_id)
    if status:
        stmt = stmt.where(Phone.status == status)
    result = await db.execute(stmt.order_by(Phone.register_date.desc(), Phone.id.desc()))
    return list(result.unique().scalars().all())
