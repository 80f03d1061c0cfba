"""
CSV and PDF exports of orders and users
"""

import csv
import io
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from storefront.core.exceptions import BadRequestException
from storefront.utils.helpers import format_currency, format_local_datetime

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class ExportFile(NamedTuple):
    filename: str
    content: bytes
    media_type: str


def _dated_filename(prefix: str, extension: str) -> str:
    return f"{prefix}_{datetime.now(timezone.utc).date().isoformat()}.{extension}"

def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return "" if value is None else str(value)

def _nested(record: Row, *path: str) -> Any:
    value: Any = record
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value

def _first(*values: Any, default: Any = "N/A") -> Any:
    for value in values:
        if value:
            return value
    return default


def export_to_csv(data: Sequence[Row], filename: str) -> ExportFile:
    """
    Serialize rows as CSV; headers come from the first row

    Every value is quoted, nested values are written as JSON.
    """
    if not data:
        raise BadRequestException("No data to export")

    headers = list(data[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in data:
        writer.writerow([_cell(row.get(header)) for header in headers])

    return ExportFile(filename, buffer.getvalue().encode("utf-8"), "text/csv; charset=utf-8")


def order_rows(orders: Sequence[Row]) -> List[Row]:
    rows = []
    for order in orders:
        shipping = order.get("shipping") or {}
        items = _first(_nested(order, "order", "items"), order.get("items"), default=[])
        address = (
            f"{shipping.get('addressLine1', '')}, {shipping.get('city', '')}, "
            f"{shipping.get('state', '')} {shipping.get('pincode', '')}"
        ).strip()
        rows.append({
            "Order ID": order.get("orderId") or order.get("id"),
            "Customer Name": _first(shipping.get("name"), order.get("customerName")),
            "Customer Email": _first(shipping.get("email"), order.get("customerEmail")),
            "Customer Phone": _first(shipping.get("phone")),
            "Items Count": len(items),
            "Total Amount": _first(_nested(order, "order", "total"), order.get("total"), default=0),
            "Status": order.get("status") or "pending",
            "Payment Method": _first(_nested(order, "payment", "method")),
            "Date": format_local_datetime(order.get("createdAt")),
            "Shipping Address": address,
        })
    return rows

def user_rows(users: Sequence[Row]) -> List[Row]:
    rows = []
    for user in users:
        rows.append({
            "Name": _first(user.get("fullName")),
            "Email": _first(user.get("email")),
            "Phone": _first(user.get("phone")),
            "City": _first(_nested(user, "address", "city")),
            "State": _first(_nested(user, "address", "state")),
            "Postal Code": _first(_nested(user, "address", "postalCode")),
            "Joined Date": format_local_datetime(user.get("createdAt") or user.get("lastUpdated")),
            "Email Verified": "Yes" if user.get("emailVerified") else "No",
            "Provider": _first(user.get("provider")),
        })
    return rows

def export_orders_to_csv(orders: Sequence[Row]) -> ExportFile:
    return export_to_csv(order_rows(orders), _dated_filename("orders", "csv"))

def export_users_to_csv(users: Sequence[Row]) -> ExportFile:
    return export_to_csv(user_rows(users), _dated_filename("users", "csv"))


def export_to_pdf(data: Sequence[Row], title: str, filename: str) -> ExportFile:
    """
    Render rows as a plain text PDF report

    Each row is headed by its "title" or "name" value, followed by one
    "key: value" line per remaining field.
    """
    if not data:
        raise BadRequestException("No data to export")

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    _, page_height = A4

    y = page_height - 40
    c.setFont("Helvetica-Bold", 18)
    c.drawString(40, y, title)
    y -= 20

    c.setFont("Helvetica", 10)
    c.drawString(40, y, f"Generated on: {format_local_datetime(datetime.now(timezone.utc))}")
    y -= 24

    def ensure_room(y: float, font: str, size: int) -> float:
        if y < 60:
            c.showPage()
            y = page_height - 40
        c.setFont(font, size)
        return y

    for index, item in enumerate(data, start=1):
        y = ensure_room(y, "Helvetica-Bold", 12)
        heading = item.get("title") or item.get("name") or f"Item {index}"
        c.drawString(40, y, f"{index}. {heading}")
        y -= 16

        for key, value in item.items():
            if key in ("title", "name"):
                continue
            y = ensure_room(y, "Helvetica", 10)
            display = json.dumps(value) if isinstance(value, (dict, list)) else value
            c.drawString(56, y, f"{key}: {display}"[:110])
            y -= 13

        y -= 10

    c.save()
    logger.info(f"Rendered {len(data)} rows into {filename}")
    return ExportFile(filename, buffer.getvalue(), "application/pdf")


def export_orders_to_pdf(orders: Sequence[Row]) -> ExportFile:
    rows = []
    for order in orders:
        shipping = order.get("shipping") or {}
        items = _first(_nested(order, "order", "items"), order.get("items"), default=[])
        total = _first(_nested(order, "order", "total"), order.get("total"), default=0)
        rows.append({
            "title": f"Order {order.get('orderId') or order.get('id')}",
            "Customer": _first(shipping.get("name"), order.get("customerName")),
            "Email": _first(shipping.get("email"), order.get("customerEmail")),
            "Phone": _first(shipping.get("phone")),
            "Items": len(items),
            "Total": format_currency(total) if _is_number(total) else total,
            "Status": order.get("status") or "pending",
            "Payment": _first(_nested(order, "payment", "method")),
            "Date": format_local_datetime(order.get("createdAt")),
        })
    return export_to_pdf(rows, "Orders Report", _dated_filename("orders", "pdf"))

def export_users_to_pdf(users: Sequence[Row]) -> ExportFile:
    rows = [{
        "name": _first(user.get("fullName")),
        "Email": _first(user.get("email")),
        "Phone": _first(user.get("phone")),
        "City": _first(_nested(user, "address", "city")),
        "Joined": format_local_datetime(user.get("createdAt") or user.get("lastUpdated")),
    } for user in users]
    return export_to_pdf(rows, "Users Report", _dated_filename("users", "pdf"))

def _is_number(value: Optional[Any]) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True
