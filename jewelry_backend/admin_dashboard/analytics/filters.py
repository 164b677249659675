from pydantic import BaseModel, ConfigDict
from typing import Iterable, List

from .schemas import OrderRecord, ReportPeriod, UserRecord

CUSTOMER_ROLE = "user"


class FilteredRecords(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_orders: List[OrderRecord]
    previous_orders: List[OrderRecord]
    current_users: List[UserRecord]
    previous_users: List[UserRecord]


def partition_records(
    period: ReportPeriod,
    orders: Iterable[OrderRecord],
    users: Iterable[UserRecord],
    customer_role: str = CUSTOMER_ROLE
) -> FilteredRecords:
    """
    Split orders and customers into the current and previous windows.

    Records without a usable timestamp fall in neither window. Only users
    with the customer role are kept. The inputs are not modified and the
    original ordering is preserved.
    """
    current_orders, previous_orders = [], []
    for order in orders:
        if period.current.contains(order.created_at):
            current_orders.append(order)
        elif period.previous.contains(order.created_at):
            previous_orders.append(order)

    current_users, previous_users = [], []
    for user in users:
        if user.role != customer_role:
            continue
        if period.current.contains(user.created_at):
            current_users.append(user)
        elif period.previous.contains(user.created_at):
            previous_users.append(user)

    return FilteredRecords(
        current_orders=current_orders,
        previous_orders=previous_orders,
        current_users=current_users,
        previous_users=previous_users
    )
