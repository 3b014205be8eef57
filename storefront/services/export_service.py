# storefront/services/export_service.py
import csv
import io
from typing import Iterable

from storefront.domain.schemas import Order

CSV_HEADER = ["ID", "Date", "User", "Status", "Items", "Total"]


def order_items_label(order: Order) -> str:
    return "; ".join(f"{line.quantity} x {line.name}" for line in order.items)


def orders_to_csv(orders: Iterable[Order]) -> str:
    """Billing export: one row per order, every field quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for order in orders:
        writer.writerow(
            [
                order.id,
                order.date,
                order.user or "",
                order.status.value,
                order_items_label(order),
                order.total,
            ]
        )

    return buf.getvalue()
