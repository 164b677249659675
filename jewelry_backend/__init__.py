from fastapi import FastAPI

from jewelry_backend.admin_dashboard.analytics.routes import analytics_router
from jewelry_backend.admin_dashboard.customer_insights.routes import customer_insights_router
from jewelry_backend.admin_dashboard.overview.routes import overview_router

from .errors import register_all_errors
from .admin_dashboard.middleware import register_middleware

version = "v1"

app = FastAPI(
    title = "Jewelry Store Analytics",
    description = "Reporting API for the jewelry store admin dashboard",
    version = version,
)


register_all_errors(app)
register_middleware(app)


app.include_router(analytics_router, prefix=f"/admin/analytics", tags=["admin analytics"])
app.include_router(customer_insights_router, prefix=f"/admin/customer-insights", tags=["admin customer insights"])
app.include_router(overview_router, prefix=f"/admin/dashboard", tags=["admin dashboard overview"])
