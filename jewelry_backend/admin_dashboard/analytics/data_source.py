import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Tuple, Type, TypeVar

from sqlmodel import select
from sqlalchemy.orm import selectinload

from jewelry_backend.db.main import Session
from jewelry_backend.db.models import Order, Product, User
from jewelry_backend.errors import DataFetchFailure
from .schemas import GuestContact, LineItemRecord, OrderRecord, ProductRecord, UserRecord

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class AnalyticsDataSource(ABC):
    """Read-only access to the collections a report is computed from"""

    @abstractmethod
    async def list_orders(self) -> List[OrderRecord]:
        ...

    @abstractmethod
    async def list_users(self, role: Optional[str] = None) -> List[UserRecord]:
        ...

    @abstractmethod
    async def list_products(self) -> List[ProductRecord]:
        ...


def _as_records(items: Iterable[Any], record_class: Type[RecordT]) -> List[RecordT]:
    return [
        item if isinstance(item, record_class) else record_class.model_validate(item)
        for item in items
    ]


class InMemoryDataSource(AnalyticsDataSource):
    """Serves already materialized records or plain dicts."""

    def __init__(self, orders: Iterable[Any] = (), users: Iterable[Any] = (), products: Iterable[Any] = ()):
        self.orders = _as_records(orders, OrderRecord)
        self.users = _as_records(users, UserRecord)
        self.products = _as_records(products, ProductRecord)

    async def list_orders(self) -> List[OrderRecord]:
        return list(self.orders)

    async def list_users(self, role: Optional[str] = None) -> List[UserRecord]:
        return [user for user in self.users if role is None or user.role == role]

    async def list_products(self) -> List[ProductRecord]:
        return list(self.products)


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


class SQLModelDataSource(AnalyticsDataSource):
    """Reads the store tables, one session per collection so reads can overlap"""

    def __init__(self, session_factory=Session):
        self.session_factory = session_factory

    async def list_orders(self) -> List[OrderRecord]:
        async with self.session_factory() as session:
            stmt = select(Order).options(selectinload(Order.items), selectinload(Order.user))
            result = await session.exec(stmt)
            orders = result.all()

        return [self._order_record(order) for order in orders]

    async def list_users(self, role: Optional[str] = None) -> List[UserRecord]:
        async with self.session_factory() as session:
            stmt = select(User)
            if role is not None:
                stmt = stmt.where(User.role == role)
            result = await session.exec(stmt)
            users = result.all()

        return [
            UserRecord(id=str(user.uid), created_at=user.created_at, role=user.role, name=user.name, email=user.email)
            for user in users
        ]

    async def list_products(self) -> List[ProductRecord]:
        async with self.session_factory() as session:
            result = await session.exec(select(Product))
            products = result.all()

        return [
            ProductRecord(
                id=str(product.uid),
                title=product.title,
                price=_money(product.price),
                category=product.category,
                material=product.material,
                created_at=product.created_at
            )
            for product in products
        ]

    @staticmethod
    def _order_record(order: Order) -> OrderRecord:
        guest_contact = None
        if order.user_uid is None and (order.guest_name or order.guest_email or order.contact_number):
            guest_contact = GuestContact(name=order.guest_name, email=order.guest_email, phone=order.contact_number)

        return OrderRecord(
            id=str(order.uid),
            created_at=order.created_at,
            total_amount=_money(order.total_amount),
            status=order.status,
            payment_status=order.payment_status,
            items=[
                LineItemRecord(
                    product_id=item.product_uid,
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=_money(item.price)
                )
                for item in order.items
            ],
            buyer_id=order.user_uid,
            buyer_name=order.user.name if order.user else None,
            guest_contact=guest_contact
        )


async def fetch_collections(
    source: AnalyticsDataSource,
    customer_role: Optional[str] = None,
    timeout: Optional[float] = None
) -> Tuple[List[OrderRecord], List[UserRecord], List[ProductRecord]]:
    """
    Fetch orders, users and products concurrently.

    All three reads must succeed; any failure or a timeout is reported as a
    single `DataFetchFailure`.
    """
    try:
        orders, users, products = await asyncio.wait_for(
            asyncio.gather(
                source.list_orders(),
                source.list_users(customer_role),
                source.list_products()
            ),
            timeout=timeout
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Fetching analytics data timed out after {timeout}s")
        raise DataFetchFailure(f"Fetching analytics data timed out after {timeout}s") from e
    except DataFetchFailure:
        raise
    except Exception as e:
        logger.error(f"Error fetching analytics data: {str(e)}")
        raise DataFetchFailure(f"Error fetching analytics data: {str(e)}") from e

    logger.info(f"Fetched {len(orders)} orders, {len(users)} users and {len(products)} products for analytics")
    return list(orders), list(users), list(products)
