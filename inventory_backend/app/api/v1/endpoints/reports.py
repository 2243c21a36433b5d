"""
Reporting API endpoints.

Date ranges are Jalali ``YYYY/MM/DD`` strings, inclusive on both ends.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.api.v1.params import jalali_range
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.report import (
    CreditorResponse,
    DebtorResponse,
    SalesSummaryResponse,
    TopCustomerResponse,
    TopSupplierResponse,
)
from inventory_backend.app.services import reports

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/sales-summary", response_model=SalesSummaryResponse)
async def sales_summary(
    from_date: str = Query(..., alias="fromDate", description="Jalali start date"),
    to_date: str = Query(..., alias="toDate", description="Jalali end date"),
    db: AsyncSession = Depends(get_db)
):
    """Revenue, gross profit, daily totals and best sellers for the range."""
    start, end = jalali_range(from_date, to_date)
    return await reports.sales_summary(db, start, end)


@router.get("/debtors", response_model=List[DebtorResponse])
async def debtors(db: AsyncSession = Depends(get_db)):
    return await reports.debtors(db)


@router.get("/creditors", response_model=List[CreditorResponse])
async def creditors(db: AsyncSession = Depends(get_db)):
    return await reports.creditors(db)


@router.get("/top-customers", response_model=List[TopCustomerResponse])
async def top_customers(
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    db: AsyncSession = Depends(get_db)
):
    start, end = jalali_range(from_date, to_date)
    return await reports.top_customers(db, start, end)


@router.get("/top-suppliers", response_model=List[TopSupplierResponse])
async def top_suppliers(
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    db: AsyncSession = Depends(get_db)
):
    """Suppliers ranked by the value of goods and phones received in the range."""
    start, end = jalali_range(from_date, to_date)
    return await reports.top_suppliers(db, start, end)
