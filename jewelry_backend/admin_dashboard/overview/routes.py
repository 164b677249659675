from fastapi import APIRouter, Depends

from jewelry_backend.config import Config
from jewelry_backend.admin_dashboard.analytics.data_source import SQLModelDataSource
from .schemas import DashboardOverview
from .service import OverviewService

overview_router = APIRouter()


def get_overview_service() -> OverviewService:
    return OverviewService(
        SQLModelDataSource(),
        customer_role=Config.CUSTOMER_ROLE,
        recent_orders_limit=Config.RECENT_ORDERS_LIMIT,
        fetch_timeout=Config.DATA_FETCH_TIMEOUT_SECONDS
    )


@overview_router.get("/overview", response_model=DashboardOverview)
async def get_overview(
    service: OverviewService = Depends(get_overview_service)
) -> DashboardOverview:
    return await service.get_overview()
