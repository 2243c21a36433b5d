"""
Account Balance Projection and account maintenance.

Current balances are never stored on the account row; they are read from
the latest ledger entry of the account.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import AccountNotFoundError, DuplicateContactError
from inventory_backend.app.models.enums import AccountKind
from inventory_backend.app.models.phone import Phone
from inventory_backend.app.models.product import Product
from inventory_backend.app.models.sales_transaction import SalesTransaction
from inventory_backend.app.services.ledger import LedgerStore, binding_for, rollback_quietly

logger = logging.getLogger(__name__)


def latest_balance_subquery(kind: AccountKind):
    """Correlated scalar subquery: balance of the account's latest ledger row, 0 if none."""
    binding = binding_for(kind)
    entry = binding.entry_model
    latest = (
        select(entry.balance)
        .where(binding.account_fk() == binding.account_model.id)
        .order_by(entry.id.desc())
        .limit(1)
        .correlate(binding.account_model)
        .scalar_subquery()
    )
    return func.coalesce(latest, 0.0)


async def current_balance(db: AsyncSession, kind: AccountKind, account_id: int) -> float:
    await LedgerStore.ensure_account(db, kind, account_id)
    return await LedgerStore.balance_as_of(db, kind, account_id)


async def list_accounts(
    db: AsyncSession,
    kind: AccountKind,
    partner_type: Optional[str] = None,
) -> List[Tuple[object, float]]:
    """All accounts of a kind, alphabetically, paired with their current balance."""
    binding = binding_for(kind)
    model = binding.account_model
    name_column = model.full_name if AccountKind(kind) == AccountKind.CUSTOMER else model.partner_name

    stmt = select(model, latest_balance_subquery(kind).label("current_balance"))
    if partner_type and AccountKind(kind) == AccountKind.PARTNER:
        stmt = stmt.where(model.partner_type == partner_type)

    result = await db.execute(stmt.order_by(name_column.asc()))
    return [(account, balance) for account, balance in result.all()]


async def get_account(db: AsyncSession, kind: AccountKind, account_id: int):
    model = binding_for(kind).account_model
    account = await db.get(model, account_id)
    if account is None:
        raise AccountNotFoundError(AccountKind(kind).value, account_id)
    return account


async def _ensure_unique_phone(
    db: AsyncSession,
    kind: AccountKind,
    phone_number: Optional[str],
    exclude_id: Optional[int] = None,
) -> None:
    if not phone_number:
        return
    model = binding_for(kind).account_model
    stmt = select(model.id).where(model.phone_number == phone_number)
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        raise DuplicateContactError(phone_number)


async def create_account(db: AsyncSession, kind: AccountKind, data: dict):
    """Create a customer or partner; phone numbers are unique per kind."""
    data = {key: (value or None) if isinstance(value, str) else value for key, value in data.items()}
    await _ensure_unique_phone(db, kind, data.get("phone_number"))

    account = binding_for(kind).account_model(**data)
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        await rollback_quietly(db, f"create {AccountKind(kind).value}")
        raise DuplicateContactError(data.get("phone_number"))
    await db.refresh(account)

    logger.info("Account created", extra={"kind": AccountKind(kind).value, "account_id": account.id})
    return account


async def update_account(db: AsyncSession, kind: AccountKind, account_id: int, changes: dict):
    """Apply the provided fields only; empty strings clear optional fields."""
    account = await get_account(db, kind, account_id)
    changes = {key: (value or None) if isinstance(value, str) else value for key, value in changes.items()}
    if "phone_number" in changes:
        await _ensure_unique_phone(db, kind, changes["phone_number"], exclude_id=account_id)

    for key, value in changes.items():
        setattr(account, key, value)
    try:
        await db.commit()
    except IntegrityError:
        await rollback_quietly(db, f"update {AccountKind(kind).value}")
        raise DuplicateContactError(changes.get("phone_number"))
    await db.refresh(account)
    return account


async def delete_account(db: AsyncSession, kind: AccountKind, account_id: int) -> None:
    """Delete an account; its ledger goes with it, references elsewhere become NULL."""
    model = binding_for(kind).account_model
    await get_account(db, kind, account_id)
    await db.execute(delete(model).where(model.id == account_id))
    await db.commit()
    logger.info("Account deleted", extra={"kind": AccountKind(kind).value, "account_id": account_id})


async def customer_detail(db: AsyncSession, customer_id: int) -> dict:
    """Profile, balance, ledger and purchase history of a customer."""
    customer = await get_account(db, AccountKind.CUSTOMER, customer_id)
    ledger = await LedgerStore.entries_for(db, AccountKind.CUSTOMER, customer_id)
    sales = await db.execute(
        select(SalesTransaction)
        .where(SalesTransaction.customer_id == customer_id)
        .order_by(SalesTransaction.id.desc())
    )
    return {
        "profile": customer,
        "current_balance": ledger[-1].balance if ledger else 0.0,
        "ledger": ledger,
        "purchase_history": list(sales.unique().scalars().all()),
    }


async def partner_detail(db: AsyncSession, partner_id: int) -> dict:
    """Profile, balance, ledger and everything bought from the partner."""
    partner = await get_account(db, AccountKind.PARTNER, partner_id)
    ledger = await LedgerStore.entries_for(db, AccountKind.PARTNER, partner_id)

    products = await db.execute(
        select(Product).where(Product.supplier_id == partner_id).order_by(Product.date_added.desc())
    )
    phones = await db.execute(
        select(Phone).where(Phone.supplier_id == partner_id).order_by(Phone.register_date.desc())
    )
    purchased = [
        {
            "id": product.id,
            "type": "product",
            "name": product.name,
            "identifier": f"product #{product.id}",
            "purchase_price": product.purchase_price,
            "quantity": product.stock_quantity + product.sale_count,
            "purchase_date": product.date_added,
        }
        for product in products.unique().scalars().all()
    ] + [
        {
            "id": phone.id,
            "type": "phone",
            "name": phone.model,
            "identifier": f"IMEI: {phone.imei}",
            "purchase_price": phone.purchase_price,
            "quantity": 1,
            "purchase_date": phone.purchase_date or phone.register_date,
        }
        for phone in phones.unique().scalars().all()
    ]

    return {
        "profile": partner,
        "current_balance": ledger[-1].balance if ledger else 0.0,
        "ledger": ledger,
        "purchased_items": purchased,
    }
