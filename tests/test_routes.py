"""
Tests for the admin analytics HTTP endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from jewelry_backend import app
from jewelry_backend.admin_dashboard.analytics.data_source import InMemoryDataSource
from jewelry_backend.admin_dashboard.analytics.routes import get_analytics_service
from jewelry_backend.admin_dashboard.analytics.service import AnalyticsService
from jewelry_backend.admin_dashboard.customer_insights.routes import get_customer_insights_service
from jewelry_backend.admin_dashboard.customer_insights.service import CustomerInsightsService
from jewelry_backend.admin_dashboard.overview.routes import get_overview_service
from jewelry_backend.admin_dashboard.overview.service import OverviewService


class BrokenDataSource(InMemoryDataSource):
    async def list_orders(self):
        raise ConnectionError("database is down")


@pytest.fixture
def client(data_source):
    """API client backed by the in-memory store data."""
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(data_source, store_name="jewelry")
    app.dependency_overrides[get_customer_insights_service] = lambda: CustomerInsightsService(data_source)
    app.dependency_overrides[get_overview_service] = lambda: OverviewService(data_source)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestReportEndpoint:

    def test_monthly_report(self, client):
        response = client.get("/admin/analytics/report", params={"report_type": "monthly", "anchor": "2024-03"})

        assert response.status_code == 200
        data = response.json()
        assert data["current_metrics"]["revenue"] == 6000
        assert data["current_metrics"]["order_count"] == 3
        assert data["growth"]["revenue"] == {"percentage": 300.0, "is_up": True}
        assert data["top_products"][0]["title"] == "Diamond Necklace"
        assert data["period"]["current"]["start"] == "2024-03-01T00:00:00"

    def test_custom_range(self, client):
        response = client.get(
            "/admin/analytics/report",
            params={"report_type": "custom", "anchor": "2024-03-01", "end_date": "2024-03-10"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["filtered_order_count"] == 1
        assert len(data["chart_series"]) == 10

    def test_invalid_anchor(self, client):
        response = client.get("/admin/analytics/report", params={"report_type": "monthly", "anchor": "2024-3x"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "invalid_period_anchor"

    def test_unknown_report_type(self, client):
        response = client.get("/admin/analytics/report", params={"report_type": "weekly"})

        assert response.status_code == 422

    def test_fetch_failure(self, client, march_orders):
        app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(BrokenDataSource(orders=march_orders))

        response = client.get("/admin/analytics/report", params={"report_type": "monthly", "anchor": "2024-03"})

        assert response.status_code == 503
        assert response.json()["error_code"] == "data_fetch_failure"


class TestExportEndpoint:

    def test_csv_download(self, client):
        response = client.get("/admin/analytics/report/export", params={"report_type": "monthly", "anchor": "2024-03"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="jewelry_analytics_2024-03_monthly.csv"' in response.headers["content-disposition"]
        assert response.text.splitlines()[0] == "Order ID,Date,Customer ID,Customer Name,Status,Payment Status,Amount,Items Count"
        assert len(response.text.splitlines()) == 4

    def test_no_data_for_period(self, client):
        response = client.get("/admin/analytics/report/export", params={"report_type": "yearly", "anchor": "2020"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "no_data_for_period"


def test_customer_insights(client):
    response = client.get("/admin/customer-insights/")

    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["total_customers"] == 2
    assert {c["customer_id"] for c in data["customers"]} == {"u1", "u2"}


class TestOverviewEndpoint:

    def test_overview(self, client):
        response = client.get("/admin/dashboard/overview")

        assert response.status_code == 200
        data = response.json()
        assert data["revenue"]["total"] == 7500
        assert data["customers"]["total"] == 2
        assert len(data["recent_orders"]) == 4
        assert data["recent_orders"][0]["order_id"] == "o3"

    def test_overview_fetch_failure(self, client, march_orders):
        app.dependency_overrides[get_overview_service] = lambda: OverviewService(BrokenDataSource(orders=march_orders))

        response = client.get("/admin/dashboard/overview")

        assert response.status_code == 503
        assert response.json()["error_code"] == "data_fetch_failure"
