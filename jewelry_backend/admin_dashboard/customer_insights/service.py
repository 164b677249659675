import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from jewelry_backend.admin_dashboard.analytics.data_source import AnalyticsDataSource, fetch_collections
from jewelry_backend.admin_dashboard.analytics.filters import CUSTOMER_ROLE
from jewelry_backend.admin_dashboard.analytics.periods import utc_now
from jewelry_backend.admin_dashboard.analytics.schemas import OrderRecord, UserRecord
from .schemas import CustomerBaseSummary, CustomerInsights, CustomerStats, LoyaltyTier

# Lifetime spend a customer has to exceed to reach each tier, highest first
LOYALTY_THRESHOLDS = [
    (500000, LoyaltyTier.PLATINUM),
    (100000, LoyaltyTier.GOLD),
    (50000, LoyaltyTier.SILVER),
]


def loyalty_tier(total_spent: float) -> LoyaltyTier:
    for threshold, tier in LOYALTY_THRESHOLDS:
        if total_spent > threshold:
            return tier
    return LoyaltyTier.BRONZE


def _orders_by_buyer(orders: Sequence[OrderRecord]) -> Dict[str, List[OrderRecord]]:
    grouped: Dict[str, List[OrderRecord]] = {}
    for order in orders:
        if order.buyer_id:
            grouped.setdefault(order.buyer_id, []).append(order)
    return grouped


def customer_stats(user: UserRecord, orders: Sequence[OrderRecord]) -> CustomerStats:
    """Spend statistics for one customer over the orders placed under their id"""
    own_orders = [order for order in orders if order.buyer_id == user.id]
    total_spent = sum(order.total_amount for order in own_orders)

    return CustomerStats(
        customer_id=user.id,
        name=user.name,
        email=user.email,
        order_count=len(own_orders),
        total_spent=total_spent,
        average_order_value=total_spent / len(own_orders) if own_orders else 0.0,
        loyalty_tier=loyalty_tier(total_spent)
    )


def customer_base_summary(
    users: Sequence[UserRecord],
    orders: Sequence[OrderRecord],
    now: datetime
) -> CustomerBaseSummary:
    orders_by_buyer = _orders_by_buyer(orders)
    total = len(users)

    total_spent = 0.0
    active = 0
    new_this_month = 0
    tier_counts = {tier: 0 for tier in LoyaltyTier}

    for user in users:
        own_orders = orders_by_buyer.get(user.id, [])
        spent = sum(order.total_amount for order in own_orders)
        total_spent += spent
        if own_orders:
            active += 1
        tier_counts[loyalty_tier(spent)] += 1

        joined = user.created_at
        if joined is not None and joined.year == now.year and joined.month == now.month:
            new_this_month += 1

    return CustomerBaseSummary(
        total_customers=total,
        active_customers=active,
        average_spent=total_spent / total if total > 0 else 0.0,
        new_this_month=new_this_month,
        tier_counts=tier_counts
    )


class CustomerInsightsService:
    def __init__(self, data_source: AnalyticsDataSource, customer_role: str = CUSTOMER_ROLE, fetch_timeout: Optional[float] = None):
        self.data_source = data_source
        self.customer_role = customer_role
        self.fetch_timeout = fetch_timeout
        self.logger = logging.getLogger(__name__)

    async def get_insights(self, now: Optional[datetime] = None) -> CustomerInsights:
        orders, users, _ = await fetch_collections(self.data_source, self.customer_role, self.fetch_timeout)
        customers = [user for user in users if user.role == self.customer_role]
        orders_by_buyer = _orders_by_buyer(orders)

        self.logger.info(f"Computing customer insights for {len(customers)} customers")
        return CustomerInsights(
            summary=customer_base_summary(customers, orders, now or utc_now()),
            customers=[customer_stats(user, orders_by_buyer.get(user.id, [])) for user in customers]
        )
