"""
Dashboard aggregates: KPIs, sales chart and recent activity feed.
"""

from datetime import datetime, timedelta
from typing import List, Optional

import jdatetime
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.models.customer import Customer
from inventory_backend.app.models.enums import PhoneStatus
from inventory_backend.app.models.phone import Phone
from inventory_backend.app.models.product import Product
from inventory_backend.app.models.sales_transaction import SalesTransaction
from inventory_backend.app.utils.calendar import (
    day_bounds,
    days_in_jalali_month,
    jalali_month_bounds,
    jalali_today,
    jalali_year_bounds,
    previous_days,
)

RECENT_ACTIVITY_LIMIT = 7
CHART_PERIODS = ("weekly", "monthly", "yearly")


async def _sales_total(db: AsyncSession, start: datetime, end: datetime) -> float:
    result = await db.execute(
        select(func.coalesce(func.sum(SalesTransaction.total_price), 0.0))
        .where(SalesTransaction.transaction_date >= start, SalesTransaction.transaction_date <= end)
    )
    return result.scalar_one()


async def kpis(db: AsyncSession, today: Optional[jdatetime.date] = None) -> dict:
    today = today or jalali_today()
    month_start, month_end = jalali_month_bounds(today)
    today_start, today_end = day_bounds(today.togregorian())

    products = await db.execute(select(func.count(Product.id)).where(Product.stock_quantity > 0))
    phones = await db.execute(select(func.count(Phone.id)).where(Phone.status == PhoneStatus.IN_STOCK.value))
    customers = await db.execute(select(func.count(Customer.id)))

    return {
        "total_sales_month": await _sales_total(db, month_start, month_end),
        "revenue_today": await _sales_total(db, today_start, today_end),
        "active_products_count": products.scalar_one() + phones.scalar_one(),
        "total_customers_count": customers.scalar_one(),
    }


async def _daily_totals(db: AsyncSession, start: datetime, end: datetime) -> dict:
    rows = await db.execute(
        select(SalesTransaction.transaction_date, SalesTransaction.total_price)
        .where(SalesTransaction.transaction_date >= start, SalesTransaction.transaction_date <= end)
    )
    totals = {}
    for transaction_date, total in rows.all():
        day = transaction_date.date()
        totals[day] = totals.get(day, 0.0) + total
    return totals


async def sales_chart(db: AsyncSession, period: str = "monthly", today: Optional[jdatetime.date] = None) -> List[dict]:
    """
    Chart points for the selected period.

    weekly:  last 7 days including today, one point per weekday
    monthly: every day of the current Jalali month
    yearly:  every month of the current Jalali year
    """
    today = today or jalali_today()

    if period == "weekly":
        days = previous_days(7, today.togregorian())
        totals = await _daily_totals(db, day_bounds(days[0])[0], day_bounds(days[-1])[1])
        return [
            {"name": jdatetime.date.fromgregorian(date=day).strftime("%A"), "sales": totals.get(day, 0.0)}
            for day in days
        ]

    if period == "yearly":
        start, end = jalali_year_bounds(today.year)
        totals = await _daily_totals(db, start, end)
        by_month = {}
        for day, total in totals.items():
            month = jdatetime.date.fromgregorian(date=day).month
            by_month[month] = by_month.get(month, 0.0) + total
        return [
            {"name": jdatetime.date(today.year, month, 1).strftime("%B"), "sales": by_month.get(month, 0.0)}
            for month in range(1, 13)
        ]

    start, end = jalali_month_bounds(today)
    totals = await _daily_totals(db, start, end)
    first = start.date()
    return [
        {"name": str(offset + 1), "sales": totals.get(first + timedelta(days=offset), 0.0)}
        for offset in range(days_in_jalali_month(today.year, today.month))
    ]


async def recent_activities(db: AsyncSession, limit: int = RECENT_ACTIVITY_LIMIT) -> List[dict]:
    """Latest sales, stock arrivals and new customers merged by timestamp."""
    activities = []

    sales = await db.execute(select(SalesTransaction).order_by(SalesTransaction.id.desc()).limit(limit // 2 + 1))
    for sale in sales.unique().scalars().all():
        customer = sale.customer.full_name if sale.customer else "walk-in customer"
        activities.append({
            "id": f"sale-{sale.id}",
            "type_description": "New sale",
            "details": f"{sale.item_name} to {customer} (amount: {sale.total_price:,.0f})",
            "timestamp": sale.transaction_date,
            "link": f"/invoices/{sale.id}",
        })

    products = await db.execute(select(Product).order_by(Product.id.desc()).limit(limit // 3 + 1))
    for product in products.unique().scalars().all():
        activities.append({
            "id": f"product-{product.id}",
            "type_description": "New product",
            "details": f"Product \"{product.name}\" added to stock.",
            "timestamp": product.date_added,
            "link": "/products",
        })

    phones = await db.execute(select(Phone).order_by(Phone.id.desc()).limit(limit // 3 + 1))
    for phone in phones.unique().scalars().all():
        activities.append({
            "id": f"phone-{phone.id}",
            "type_description": "New phone",
            "details": f"Phone {phone.display_name} registered.",
            "timestamp": phone.register_date,
            "link": "/mobile-phones",
        })

    customers = await db.execute(select(Customer).order_by(Customer.id.desc()).limit(limit // 4 + 1))
    for customer in customers.scalars().all():
        activities.append({
            "id": f"customer-{customer.id}",
            "type_description": "New customer",
            "details": f"Customer \"{customer.full_name}\" registered.",
            "timestamp": customer.date_added,
            "link": f"/customers/{customer.id}",
        })

    activities.sort(key=lambda a: a["timestamp"] or datetime.min, reverse=True)
    return activities[:limit]


async def summary(db: AsyncSession, period: str = "monthly") -> dict:
    return {
        "kpis": await kpis(db),
        "sales_chart_data": await sales_chart(db, period),
        "recent_activities": await recent_activities(db),
    }
