from typing import Dict, Sequence

from .schemas import CANCELLED_STATUS, COMPLETED_STATUS, OrderRecord, PeriodMetrics


def aggregate_metrics(orders: Sequence[OrderRecord]) -> PeriodMetrics:
    """Reduce an order set to its revenue, volume and status metrics"""
    order_count = len(orders)
    if order_count == 0:
        return PeriodMetrics()

    revenue = 0.0
    completed_count = 0
    cancelled_count = 0
    orders_per_hour: Dict[int, int] = {}

    for order in orders:
        revenue += order.total_amount

        if order.status == COMPLETED_STATUS:
            completed_count += 1
        elif order.status == CANCELLED_STATUS:
            cancelled_count += 1

        if order.created_at is not None:
            hour = order.created_at.hour
            orders_per_hour[hour] = orders_per_hour.get(hour, 0) + 1

    return PeriodMetrics(
        revenue=revenue,
        order_count=order_count,
        average_order_value=revenue / order_count,
        completed_count=completed_count,
        cancelled_count=cancelled_count,
        cancellation_rate_pct=round(cancelled_count / order_count * 100, 1),
        peak_hour=peak_hour(orders_per_hour)
    )


def peak_hour(orders_per_hour: Dict[int, int]):
    """Busiest hour of day; the earliest hour wins a tie. None without data."""
    if not orders_per_hour:
        return None
    return min(orders_per_hour, key=lambda hour: (-orders_per_hour[hour], hour))
