from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from jewelry_backend.admin_dashboard.analytics.schemas import Growth


class OverviewStat(BaseModel):
    total: float  # all time
    growth: Growth  # this month against last month


class RecentOrder(BaseModel):
    order_id: str
    created_at: Optional[datetime] = None
    customer_name: str
    status: str
    payment_status: str
    total_amount: float
    items_count: int


class DashboardOverview(BaseModel):
    month: str
    revenue: OverviewStat
    orders: OverviewStat
    products: OverviewStat
    customers: OverviewStat
    recent_orders: List[RecentOrder]
