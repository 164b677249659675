import csv
import io
import logging
from typing import Iterable, Optional, Sequence, Union

from jewelry_backend.errors import NoDataForPeriod
from .schemas import ExportResult, FailureDetail, OrderRecord, ReportKind, UserRecord

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Order ID", "Date", "Customer ID", "Customer Name", "Status", "Payment Status", "Amount", "Items Count"]


def suggest_filename(store_name: str, anchor: str, report_kind: Union[ReportKind, str]) -> str:
    kind = ReportKind(report_kind).value
    return f"{store_name}_analytics_{anchor}_{kind}.csv"


def customer_name(order: OrderRecord, user_names: dict) -> str:
    if order.buyer_name:
        return order.buyer_name
    if order.buyer_id and user_names.get(order.buyer_id):
        return user_names[order.buyer_id]
    if order.guest_contact and order.guest_contact.name:
        return order.guest_contact.name
    return "Guest"


def _format_amount(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else f"{amount:.2f}"


def export_csv(
    orders: Sequence[OrderRecord],
    users: Iterable[UserRecord] = (),
    filename: Optional[str] = None
) -> ExportResult:
    """
    Write one CSV row per order, in the given order.

    An empty order set is declined with a `no_data_for_period` failure
    instead of producing a header-only file.
    """
    if not orders:
        logger.info("CSV export declined: no orders in the selected period")
        return ExportResult(failure=FailureDetail.from_exception(NoDataForPeriod()))

    user_names = {user.id: user.name for user in users if user.name}

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for order in orders:
        writer.writerow([
            order.id,
            order.created_at.strftime("%d/%m/%Y") if order.created_at else "",
            order.buyer_id or "N/A",
            customer_name(order, user_names),
            order.status,
            order.payment_status,
            _format_amount(order.total_amount),
            len(order.items)
        ])

    return ExportResult(
        content=buffer.getvalue().encode("utf-8"),
        filename=filename,
        row_count=len(orders)
    )
