"""
Tests for the top products ranking.
"""
import logging

from jewelry_backend.admin_dashboard.analytics.ranking import rank_top_products
from jewelry_backend.admin_dashboard.analytics.schemas import ProductRecord


def _catalog(count):
    return [
        ProductRecord(id=f"p{i}", title=f"Piece {i}", price=100 * i)
        for i in range(1, count + 1)
    ]


class TestRanking:

    def test_ranked_by_revenue(self, march_orders, products):
        result = rank_top_products(march_orders, products)

        assert [p.product_id for p in result.top_products] == ["p2", "p1"]
        necklace, ring = result.top_products
        assert necklace.title == "Diamond Necklace"
        assert necklace.revenue == 4000
        assert necklace.units_sold == 2
        assert ring.revenue == 2000
        assert ring.units_sold == 2

    def test_revenue_uses_line_item_price(self, make_order, line, products):
        # Sold at a discount against the catalog price of 1000
        orders = [make_order("o", "2024-03-01T10:00:00", 1600, items=[line("p1", 2, 800)])]

        result = rank_top_products(orders, products)

        assert result.top_products[0].revenue == 1600
        assert result.top_products[0].price == 1000

    def test_truncated_to_five_non_increasing(self, make_order, line):
        catalog = _catalog(7)
        orders = [
            make_order(f"o{i}", "2024-03-01T10:00:00", 100 * i, items=[line(f"p{i}", 1, 100 * i)])
            for i in range(1, 8)
        ]

        result = rank_top_products(orders, catalog)

        assert len(result.top_products) == 5
        revenues = [p.revenue for p in result.top_products]
        assert revenues == sorted(revenues, reverse=True)
        assert result.top_products[0].product_id == "p7"

    def test_ties_keep_first_sold_order(self, make_order, line):
        catalog = _catalog(3)
        orders = [
            make_order("a", "2024-03-01T10:00:00", 300, items=[line("p3", 1, 300)]),
            make_order("b", "2024-03-02T10:00:00", 300, items=[line("p1", 3, 100)]),
        ]

        result = rank_top_products(orders, catalog)

        assert [p.product_id for p in result.top_products] == ["p3", "p1"]

    def test_unresolved_products_skipped_and_counted(self, make_order, line, products, caplog):
        orders = [
            make_order("o", "2024-03-01T10:00:00", 3500, items=[
                line("p1", 1, 1000),
                line("deleted-product", 1, 2500),
                {"quantity": 1, "price": 10},
            ])
        ]

        with caplog.at_level(logging.WARNING):
            result = rank_top_products(orders, products)

        assert [p.product_id for p in result.top_products] == ["p1"]
        assert result.unresolved_line_items == 2
        assert "deleted-product" in caplog.text

    def test_no_orders(self, products):
        result = rank_top_products([], products)

        assert result.top_products == []
        assert result.unresolved_line_items == 0
