import logging
from datetime import datetime
from typing import Optional, Sequence, Union

from jewelry_backend.errors import JewelryException
from .data_source import AnalyticsDataSource, fetch_collections
from .exporter import export_csv, suggest_filename
from .filters import CUSTOMER_ROLE, partition_records
from .growth import calculate_growth
from .metrics import aggregate_metrics
from .periods import resolve_period, utc_now
from .ranking import TOP_PRODUCTS_LIMIT, rank_top_products
from .schemas import (
    ExportResult, FailureDetail, GrowthSummary, OrderRecord, ProductRecord,
    Report, ReportKind, ReportPeriod, ReportResult, UserRecord
)
from .timeseries import MAX_CHART_BUCKETS, build_chart_series


def build_report(
    period: ReportPeriod,
    orders: Sequence[OrderRecord],
    users: Sequence[UserRecord],
    products: Sequence[ProductRecord],
    customer_role: str = CUSTOMER_ROLE,
    top_products_limit: int = TOP_PRODUCTS_LIMIT,
    max_chart_buckets: int = MAX_CHART_BUCKETS
) -> Report:
    """Compute a complete report from already fetched records"""
    filtered = partition_records(period, orders, users, customer_role)

    current_metrics = aggregate_metrics(filtered.current_orders)
    previous_metrics = aggregate_metrics(filtered.previous_orders)
    ranking = rank_top_products(filtered.current_orders, products, top_products_limit)
    chart_series = build_chart_series(filtered.current_orders, period, max_chart_buckets)

    new_customers = len(filtered.current_users)
    previous_new_customers = len(filtered.previous_users)

    growth = GrowthSummary(
        revenue=calculate_growth(current_metrics.revenue, previous_metrics.revenue),
        orders=calculate_growth(current_metrics.order_count, previous_metrics.order_count),
        average_order_value=calculate_growth(current_metrics.average_order_value, previous_metrics.average_order_value),
        new_customers=calculate_growth(new_customers, previous_new_customers)
    )

    return Report(
        period=period,
        current_metrics=current_metrics,
        previous_metrics=previous_metrics,
        growth=growth,
        top_products=ranking.top_products,
        chart_series=chart_series,
        filtered_order_count=current_metrics.order_count,
        new_customers=new_customers,
        previous_new_customers=previous_new_customers,
        unresolved_line_items=ranking.unresolved_line_items,
        has_data=current_metrics.order_count > 0
    )


class AnalyticsService:
    def __init__(
        self,
        data_source: AnalyticsDataSource,
        store_name: str = "jewelry",
        customer_role: str = CUSTOMER_ROLE,
        top_products_limit: int = TOP_PRODUCTS_LIMIT,
        max_chart_buckets: int = MAX_CHART_BUCKETS,
        fetch_timeout: Optional[float] = None
    ):
        self.data_source = data_source
        self.store_name = store_name
        self.customer_role = customer_role
        self.top_products_limit = top_products_limit
        self.max_chart_buckets = max_chart_buckets
        self.fetch_timeout = fetch_timeout
        self.logger = logging.getLogger(__name__)

    async def compute_report(
        self,
        report_kind: Union[ReportKind, str],
        anchor: Optional[str] = None,
        end_anchor: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ReportResult:
        """
        Resolve the period, fetch the store data and compute the report.

        Invalid anchors and failed fetches come back as a failed result
        rather than an exception. A period without orders still yields a
        report, with `has_data` set to False.
        """
        try:
            period = resolve_period(report_kind, anchor, end_anchor, now or utc_now())
            orders, users, products = await fetch_collections(
                self.data_source, self.customer_role, self.fetch_timeout
            )
        except JewelryException as e:
            self.logger.warning(f"Report {report_kind} for {anchor!r} failed: {e}")
            return ReportResult(failure=FailureDetail.from_exception(e))

        report = build_report(
            period, orders, users, products,
            customer_role=self.customer_role,
            top_products_limit=self.top_products_limit,
            max_chart_buckets=self.max_chart_buckets
        )
        self.logger.info(
            f"Computed {period.kind.value} report for {period.anchor}: "
            f"{report.filtered_order_count} orders, revenue {report.current_metrics.revenue}"
        )
        return ReportResult(report=report)

    async def export_report(
        self,
        report_kind: Union[ReportKind, str],
        anchor: Optional[str] = None,
        end_anchor: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> ExportResult:
        """CSV export of the orders in the resolved current period"""
        try:
            period = resolve_period(report_kind, anchor, end_anchor, now or utc_now())
            orders, users, _ = await fetch_collections(
                self.data_source, self.customer_role, self.fetch_timeout
            )
        except JewelryException as e:
            self.logger.warning(f"Export {report_kind} for {anchor!r} failed: {e}")
            return ExportResult(failure=FailureDetail.from_exception(e))

        filtered = partition_records(period, orders, users, self.customer_role)
        return export_csv(
            filtered.current_orders,
            users,
            filename=suggest_filename(self.store_name, period.anchor, period.kind)
        )
