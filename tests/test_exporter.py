"""
Tests for the CSV report export.
"""
import csv
import io

from jewelry_backend.admin_dashboard.analytics.exporter import CSV_HEADERS, export_csv, suggest_filename


def _rows(result):
    return list(csv.reader(io.StringIO(result.content.decode("utf-8"))))


class TestExportCsv:

    def test_header_and_one_row_per_order(self, march_orders, users):
        result = export_csv(march_orders, users)

        rows = _rows(result)
        assert result.ok
        assert result.row_count == 3
        assert rows[0] == CSV_HEADERS
        assert [row[0] for row in rows[1:]] == ["o1", "o2", "o3"]

    def test_row_values(self, march_orders, users):
        rows = _rows(export_csv(march_orders, users))

        assert rows[1] == ["o1", "05/03/2024", "u1", "Asha Verma", "Delivered", "Pending", "1000", "1"]
        assert rows[3] == ["o3", "20/03/2024", "N/A", "Guest", "Cancelled", "Pending", "3000", "2"]

    def test_values_with_commas_are_quoted(self, make_order):
        orders = [
            make_order("o9", "2024-03-01T10:00:00", 1250.5, buyer_id={"_id": "u9", "name": "Sharma, Priya"})
        ]

        result = export_csv(orders)

        assert b'"Sharma, Priya"' in result.content
        row = _rows(result)[1]
        assert row[3] == "Sharma, Priya"
        assert row[6] == "1250.50"
        assert len(row) == len(CSV_HEADERS)

    def test_guest_contact_name_used(self, make_order):
        orders = [make_order("g1", "2024-03-01T10:00:00", 100, guest_contact={"name": "Walk-in Buyer"})]

        row = _rows(export_csv(orders))[1]

        assert row[2] == "N/A"
        assert row[3] == "Walk-in Buyer"

    def test_empty_period_declined(self):
        result = export_csv([])

        assert not result.ok
        assert result.content is None
        assert result.failure.error_code == "no_data_for_period"


def test_suggested_filename():
    assert suggest_filename("jewelry", "2024-03", "monthly") == "jewelry_analytics_2024-03_monthly.csv"
