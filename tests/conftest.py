"""
Shared pytest fixtures for the analytics tests.
"""
import pytest

from jewelry_backend.admin_dashboard.analytics.data_source import InMemoryDataSource
from jewelry_backend.admin_dashboard.analytics.schemas import OrderRecord, ProductRecord, UserRecord


def _make_order(order_id, created_at, amount=None, status=None, items=(), buyer_id=None, **extra):
    return OrderRecord.model_validate({
        "_id": order_id,
        "createdAt": created_at,
        "totalAmount": amount,
        "status": status,
        "products": list(items),
        "userId": buyer_id,
        **extra
    })


def _line(product_id, quantity=1, price=0):
    return {"productId": product_id, "quantity": quantity, "price": price}


@pytest.fixture
def make_order():
    """Build an order record from storefront-style fields."""
    return _make_order


@pytest.fixture
def line():
    """Build a storefront-style line item."""
    return _line


@pytest.fixture
def products():
    return [
        ProductRecord.model_validate({"_id": "p1", "title": "Rose Gold Ring", "price": 1000, "category": "Rings", "createdAt": "2024-01-10T09:00:00Z"}),
        ProductRecord.model_validate({"_id": "p2", "title": "Diamond Necklace", "price": 2000, "category": "Necklaces", "createdAt": "2024-02-20T09:00:00Z"}),
        ProductRecord.model_validate({"_id": "p3", "title": "Pearl Earrings", "price": 1500, "category": "Earrings", "createdAt": "2024-03-02T09:00:00Z"}),
    ]


@pytest.fixture
def users():
    return [
        UserRecord.model_validate({"_id": "u1", "name": "Asha Verma", "role": "user", "createdAt": "2024-03-01T08:00:00Z"}),
        UserRecord.model_validate({"_id": "u2", "name": "Ravi Kumar", "role": "user", "createdAt": "2024-02-15T08:00:00Z"}),
        UserRecord.model_validate({"_id": "a1", "name": "Store Admin", "role": "admin", "createdAt": "2024-03-03T08:00:00Z"}),
    ]


@pytest.fixture
def march_orders():
    """Three March 2024 orders worth 1000, 2000 and 3000, the last one cancelled."""
    return [
        _make_order("o1", "2024-03-05T10:15:00Z", 1000, "Delivered", [_line("p1", 1, 1000)], buyer_id="u1"),
        _make_order("o2", "2024-03-12T14:30:00Z", 2000, "Pending", [_line("p2", 1, 2000)], buyer_id="u2"),
        _make_order("o3", "2024-03-20T14:05:00Z", 3000, "Cancelled", [_line("p1", 1, 1000), _line("p2", 1, 2000)]),
    ]


@pytest.fixture
def february_orders():
    return [
        _make_order("o4", "2024-02-10T09:00:00Z", 1500, "Delivered", [_line("p3", 1, 1500)], buyer_id="u2"),
    ]


@pytest.fixture
def data_source(march_orders, february_orders, users, products):
    return InMemoryDataSource(
        orders=march_orders + february_orders,
        users=users,
        products=products
    )
