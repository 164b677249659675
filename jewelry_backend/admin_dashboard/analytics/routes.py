from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from typing import Optional

from jewelry_backend.config import Config
from jewelry_backend.errors import exception_from_failure
from .data_source import SQLModelDataSource
from .schemas import Report, ReportKind
from .service import AnalyticsService

analytics_router = APIRouter()


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(
        SQLModelDataSource(),
        store_name=Config.STORE_NAME,
        customer_role=Config.CUSTOMER_ROLE,
        top_products_limit=Config.TOP_PRODUCTS_LIMIT,
        max_chart_buckets=Config.MAX_CHART_BUCKETS,
        fetch_timeout=Config.DATA_FETCH_TIMEOUT_SECONDS
    )


@analytics_router.get("/report", response_model=Report)
async def get_report(
    report_type: ReportKind = Query(ReportKind.MONTHLY, description="Report period type"),
    anchor: Optional[str] = Query(None, description="YYYY-MM-DD (daily, custom start), YYYY-MM (monthly) or YYYY (yearly)"),
    end_date: Optional[str] = Query(None, description="Inclusive end date for custom ranges (YYYY-MM-DD format)"),
    service: AnalyticsService = Depends(get_analytics_service)
) -> Report:
    """
    Get the analytics report for a period:
    - Revenue, orders, average order value, cancellations and peak hour
    - Growth against the previous period
    - Top 5 products by revenue
    - Revenue chart series
    """
    result = await service.compute_report(report_type, anchor, end_date)
    if not result.ok:
        raise exception_from_failure(result.failure.error_code, result.failure.message)
    return result.report


@analytics_router.get("/report/export")
async def export_report(
    report_type: ReportKind = Query(ReportKind.MONTHLY, description="Report period type"),
    anchor: Optional[str] = Query(None, description="YYYY-MM-DD (daily, custom start), YYYY-MM (monthly) or YYYY (yearly)"),
    end_date: Optional[str] = Query(None, description="Inclusive end date for custom ranges (YYYY-MM-DD format)"),
    service: AnalyticsService = Depends(get_analytics_service)
) -> Response:
    result = await service.export_report(report_type, anchor, end_date)
    if not result.ok:
        raise exception_from_failure(result.failure.error_code, result.failure.message)
    return Response(
        content=result.content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'}
    )
