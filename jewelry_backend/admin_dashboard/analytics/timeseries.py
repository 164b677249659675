import math
from datetime import datetime, timedelta
from typing import List, Sequence

from .schemas import ChartPoint, OrderRecord, ReportKind, ReportPeriod

MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
MAX_CHART_BUCKETS = 30


def build_chart_series(
    orders: Sequence[OrderRecord],
    period: ReportPeriod,
    max_buckets: int = MAX_CHART_BUCKETS
) -> List[ChartPoint]:
    """
    Revenue per bucket across the whole current window, empty buckets included.

    Yearly reports get one bucket per calendar month. Everything else is
    bucketed by day, widening each bucket to several days when the window
    would otherwise need more than `max_buckets` of them.
    """
    if period.kind == ReportKind.YEARLY:
        return _monthly_buckets(orders, period.current.start)
    return _day_buckets(orders, period.current.start, period.current.end, max_buckets)


def _monthly_buckets(orders: Sequence[OrderRecord], year_start: datetime) -> List[ChartPoint]:
    revenue_by_month = [0.0] * 12
    for order in orders:
        if order.created_at is None or order.created_at.year != year_start.year:
            continue
        revenue_by_month[order.created_at.month - 1] += order.total_amount

    return [
        ChartPoint(
            label=MONTH_LABELS[month_index],
            start=year_start.replace(month=month_index + 1).date(),
            revenue=revenue
        )
        for month_index, revenue in enumerate(revenue_by_month)
    ]


def _day_buckets(
    orders: Sequence[OrderRecord],
    start: datetime,
    end: datetime,
    max_buckets: int
) -> List[ChartPoint]:
    total_days = max(1, math.ceil((end - start) / timedelta(days=1)))
    step = max(1, math.ceil(total_days / max_buckets))
    bucket_count = math.ceil(total_days / step)

    revenue_by_bucket = [0.0] * bucket_count
    for order in orders:
        if order.created_at is None or not (start <= order.created_at < end):
            continue
        bucket = (order.created_at - start).days // step
        revenue_by_bucket[bucket] += order.total_amount

    points = []
    for bucket, revenue in enumerate(revenue_by_bucket):
        bucket_start = start + timedelta(days=bucket * step)
        points.append(ChartPoint(
            label=f"{bucket_start.day}/{bucket_start.month}",
            start=bucket_start.date(),
            revenue=revenue
        ))
    return points
