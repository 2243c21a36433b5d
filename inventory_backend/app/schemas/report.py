"""
Report and dashboard Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List


class DailySales(BaseModel):
    date: str
    total_sales: float


class TopSellingItem(BaseModel):
    id: int
    item_type: str
    item_name: str
    total_revenue: float
    quantity_sold: int


class SalesSummaryResponse(BaseModel):
    total_revenue: float
    gross_profit: float
    total_transactions: int
    average_sale_value: float
    daily_sales: List[DailySales]
    top_selling_items: List[TopSellingItem]


class DebtorResponse(BaseModel):
    id: int
    full_name: str
    phone_number: Optional[str]
    balance: float


class CreditorResponse(BaseModel):
    id: int
    partner_name: str
    partner_type: str
    balance: float


class TopCustomerResponse(BaseModel):
    customer_id: int
    full_name: str
    total_spent: float
    transaction_count: int


class TopSupplierResponse(BaseModel):
    partner_id: int
    partner_name: str
    total_purchase_value: float
    transaction_count: int


class DashboardKPIs(BaseModel):
    total_sales_month: float
    revenue_today: float
    active_products_count: int
    total_customers_count: int


class ChartPoint(BaseModel):
    name: str
    sales: float


class ActivityItem(BaseModel):
    id: str
    type_description: str
    details: str
    timestamp: Optional[datetime]
    link: Optional[str]


class DashboardSummaryResponse(BaseModel):
    kpis: DashboardKPIs
    sales_chart_data: List[ChartPoint]
    recent_activities: List[ActivityItem]
