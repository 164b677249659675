import logging
from datetime import datetime
from typing import List, Optional, Sequence

from jewelry_backend.admin_dashboard.analytics.data_source import AnalyticsDataSource, fetch_collections
from jewelry_backend.admin_dashboard.analytics.exporter import customer_name
from jewelry_backend.admin_dashboard.analytics.filters import CUSTOMER_ROLE, partition_records
from jewelry_backend.admin_dashboard.analytics.growth import calculate_growth
from jewelry_backend.admin_dashboard.analytics.periods import resolve_period, utc_now
from jewelry_backend.admin_dashboard.analytics.schemas import (
    OrderRecord, ProductRecord, ReportKind, ReportPeriod, UserRecord
)
from .schemas import DashboardOverview, OverviewStat, RecentOrder

RECENT_ORDERS_LIMIT = 5


def _revenue(orders: Sequence[OrderRecord]) -> float:
    return sum(order.total_amount for order in orders)


def recent_orders(
    orders: Sequence[OrderRecord],
    users: Sequence[UserRecord] = (),
    limit: int = RECENT_ORDERS_LIMIT
) -> List[RecentOrder]:
    """Newest orders first; orders without a timestamp sort last"""
    user_names = {user.id: user.name for user in users if user.name}
    newest = sorted(
        orders,
        key=lambda order: (order.created_at is not None, order.created_at or datetime.min),
        reverse=True
    )

    return [
        RecentOrder(
            order_id=order.id,
            created_at=order.created_at,
            customer_name=customer_name(order, user_names),
            status=order.status,
            payment_status=order.payment_status,
            total_amount=order.total_amount,
            items_count=len(order.items)
        )
        for order in newest[:limit]
    ]


def build_overview(
    period: ReportPeriod,
    orders: Sequence[OrderRecord],
    users: Sequence[UserRecord],
    products: Sequence[ProductRecord],
    customer_role: str = CUSTOMER_ROLE,
    recent_orders_limit: int = RECENT_ORDERS_LIMIT
) -> DashboardOverview:
    """
    All-time store totals, each paired with its month-over-month growth.

    `period` is a monthly period; its current and previous windows are the
    two months being compared. Growth for products and customers compares
    how many were added in each month.
    """
    filtered = partition_records(period, orders, users, customer_role)
    customers = [user for user in users if user.role == customer_role]
    current_products = [product for product in products if period.current.contains(product.created_at)]
    previous_products = [product for product in products if period.previous.contains(product.created_at)]

    return DashboardOverview(
        month=period.anchor,
        revenue=OverviewStat(
            total=_revenue(orders),
            growth=calculate_growth(_revenue(filtered.current_orders), _revenue(filtered.previous_orders))
        ),
        orders=OverviewStat(
            total=len(orders),
            growth=calculate_growth(len(filtered.current_orders), len(filtered.previous_orders))
        ),
        products=OverviewStat(
            total=len(products),
            growth=calculate_growth(len(current_products), len(previous_products))
        ),
        customers=OverviewStat(
            total=len(customers),
            growth=calculate_growth(len(filtered.current_users), len(filtered.previous_users))
        ),
        recent_orders=recent_orders(orders, customers, recent_orders_limit)
    )


class OverviewService:
    def __init__(
        self,
        data_source: AnalyticsDataSource,
        customer_role: str = CUSTOMER_ROLE,
        recent_orders_limit: int = RECENT_ORDERS_LIMIT,
        fetch_timeout: Optional[float] = None
    ):
        self.data_source = data_source
        self.customer_role = customer_role
        self.recent_orders_limit = recent_orders_limit
        self.fetch_timeout = fetch_timeout
        self.logger = logging.getLogger(__name__)

    async def get_overview(self, now: Optional[datetime] = None) -> DashboardOverview:
        period = resolve_period(ReportKind.MONTHLY, now=now or utc_now())
        orders, users, products = await fetch_collections(self.data_source, self.customer_role, self.fetch_timeout)

        self.logger.info(f"Computing dashboard overview for {period.anchor}")
        return build_overview(
            period, orders, users, products,
            customer_role=self.customer_role,
            recent_orders_limit=self.recent_orders_limit
        )
