"""
Reporting / aggregation.

Read-only projections over sale transactions and ledger entries. Date
ranges arrive as inclusive UTC datetimes already converted from the Jalali
calendar at the API edge.
"""

from collections import OrderedDict
from datetime import datetime
from typing import List

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.models.customer import Customer
from inventory_backend.app.models.enums import AccountKind, ItemType
from inventory_backend.app.models.ledger_entry import PartnerLedgerEntry
from inventory_backend.app.models.partner import Partner
from inventory_backend.app.models.phone import Phone
from inventory_backend.app.models.product import Product
from inventory_backend.app.models.sales_transaction import SalesTransaction
from inventory_backend.app.services.accounts import latest_balance_subquery
from inventory_backend.app.services.inventory import GOODS_RECEIVED_PREFIX, PHONE_RECEIVED_PREFIX
from inventory_backend.app.utils.calendar import utc_to_jalali

TOP_N = 10


async def sales_summary(db: AsyncSession, start: datetime, end: datetime) -> dict:
    """
    Revenue and gross profit for a date range.

    Profit is total price minus the item's stored purchase cost times the
    quantity; items that no longer exist count with zero cost.
    """
    unit_cost = case(
        (SalesTransaction.item_type == ItemType.INVENTORY, func.coalesce(Product.purchase_price, 0.0)),
        (SalesTransaction.item_type == ItemType.PHONE, func.coalesce(Phone.purchase_price, 0.0)),
        else_=0.0,
    )
    stmt = (
        select(
            SalesTransaction.item_type,
            SalesTransaction.item_id,
            SalesTransaction.item_name,
            SalesTransaction.quantity,
            SalesTransaction.total_price,
            SalesTransaction.transaction_date,
            unit_cost.label("unit_cost"),
        )
        .select_from(SalesTransaction)
        .outerjoin(Product, and_(SalesTransaction.item_type == ItemType.INVENTORY, SalesTransaction.item_id == Product.id))
        .outerjoin(Phone, and_(SalesTransaction.item_type == ItemType.PHONE, SalesTransaction.item_id == Phone.id))
        .where(SalesTransaction.transaction_date >= start, SalesTransaction.transaction_date <= end)
        .order_by(SalesTransaction.transaction_date.asc(), SalesTransaction.id.asc())
    )
    rows = (await db.execute(stmt)).all()

    total_revenue = 0.0
    gross_profit = 0.0
    daily = OrderedDict()
    items = {}

    for row in rows:
        total_revenue += row.total_price
        gross_profit += row.total_price - row.unit_cost * row.quantity

        day = utc_to_jalali(row.transaction_date)
        daily[day] = daily.get(day, 0.0) + row.total_price

        key = (ItemType(row.item_type).value, row.item_id)
        item = items.setdefault(key, {
            "id": row.item_id,
            "item_type": key[0],
            "item_name": row.item_name,
            "total_revenue": 0.0,
            "quantity_sold": 0,
        })
        item["total_revenue"] += row.total_price
        item["quantity_sold"] += row.quantity

    count = len(rows)
    return {
        "total_revenue": total_revenue,
        "gross_profit": gross_profit,
        "total_transactions": count,
        "average_sale_value": total_revenue / count if count else 0.0,
        "daily_sales": [{"date": day, "total_sales": value} for day, value in daily.items()],
        "top_selling_items": sorted(items.values(), key=lambda i: i["total_revenue"], reverse=True)[:TOP_N],
    }


async def debtors(db: AsyncSession) -> List[dict]:
    """Customers who owe money: latest balance > 0, largest first."""
    balance = latest_balance_subquery(AccountKind.CUSTOMER).label("balance")
    stmt = select(Customer.id, Customer.full_name, Customer.phone_number, balance).subquery()
    result = await db.execute(select(stmt).where(stmt.c.balance > 0).order_by(stmt.c.balance.desc()))
    return [dict(row._mapping) for row in result.all()]


async def creditors(db: AsyncSession) -> List[dict]:
    """Partners the business owes: latest balance > 0, largest first."""
    balance = latest_balance_subquery(AccountKind.PARTNER).label("balance")
    stmt = select(Partner.id, Partner.partner_name, Partner.partner_type, balance).subquery()
    result = await db.execute(select(stmt).where(stmt.c.balance > 0).order_by(stmt.c.balance.desc()))
    return [dict(row._mapping) for row in result.all()]


async def top_customers(db: AsyncSession, start: datetime, end: datetime) -> List[dict]:
    total_spent = func.sum(SalesTransaction.total_price)
    stmt = (
        select(
            Customer.id.label("customer_id"),
            Customer.full_name,
            total_spent.label("total_spent"),
            func.count(SalesTransaction.id).label("transaction_count"),
        )
        .join(Customer, SalesTransaction.customer_id == Customer.id)
        .where(SalesTransaction.transaction_date >= start, SalesTransaction.transaction_date <= end)
        .group_by(Customer.id, Customer.full_name)
        .order_by(total_spent.desc())
        .limit(TOP_N)
    )
    return [dict(row._mapping) for row in (await db.execute(stmt)).all()]


async def top_suppliers(db: AsyncSession, start: datetime, end: datetime) -> List[dict]:
    """Partners ranked by purchase-receipt credits posted in the range."""
    total_purchases = func.sum(PartnerLedgerEntry.credit)
    stmt = (
        select(
            Partner.id.label("partner_id"),
            Partner.partner_name,
            total_purchases.label("total_purchase_value"),
            func.count(PartnerLedgerEntry.id).label("transaction_count"),
        )
        .join(Partner, PartnerLedgerEntry.partner_id == Partner.id)
        .where(
            PartnerLedgerEntry.transaction_date >= start,
            PartnerLedgerEntry.transaction_date <= end,
            PartnerLedgerEntry.credit > 0,
            or_(
                PartnerLedgerEntry.description.startswith(GOODS_RECEIVED_PREFIX),
                PartnerLedgerEntry.description.startswith(PHONE_RECEIVED_PREFIX),
            ),
        )
        .group_by(Partner.id, Partner.partner_name)
        .order_by(total_purchases.desc())
        .limit(TOP_N)
    )
    return [dict(row._mapping) for row in (await db.execute(stmt)).all()]
