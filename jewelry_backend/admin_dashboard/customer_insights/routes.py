from fastapi import APIRouter, Depends

from jewelry_backend.config import Config
from jewelry_backend.admin_dashboard.analytics.data_source import SQLModelDataSource
from .schemas import CustomerInsights
from .service import CustomerInsightsService

customer_insights_router = APIRouter()


def get_customer_insights_service() -> CustomerInsightsService:
    return CustomerInsightsService(
        SQLModelDataSource(),
        customer_role=Config.CUSTOMER_ROLE,
        fetch_timeout=Config.DATA_FETCH_TIMEOUT_SECONDS
    )


@customer_insights_router.get("/", response_model=CustomerInsights)
async def get_customer_insights(
    service: CustomerInsightsService = Depends(get_customer_insights_service)
) -> CustomerInsights:
    """Customer base summary plus spend and loyalty tier per customer"""
    return await service.get_insights()
