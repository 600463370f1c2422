"""
Best-effort display normalization for AI-extracted invoice records.

Gemini returns loosely shaped data: amounts arrive as numbers or as strings
with currency symbols, dates in any format, line items may be missing or
malformed. Nothing is validated at write time, so every function here is
total: it returns a documented fallback instead of raising, and the review
pages can always render.
"""

import math
import re
from datetime import date, datetime, UTC
from typing import Any
from dateutil import parser as date_parser
from loguru import logger
from ..models.invoice import InvoiceView, LineItemView

NOT_SPECIFIED = "Not specified"
ZERO_AMOUNT = "$0.00"

SECONDS_PER_YEAR = 31_536_000
SECONDS_PER_MONTH = 2_592_000  # 30-day months
SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600
SECONDS_PER_MINUTE = 60

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
_LEADING_FLOAT = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})


def parse_amount(value: Any) -> float | None:
    """
    Parse a currency-ish value into a float.

    Strings are stripped of everything except digits, "." and "-", then the
    leading number is read ("$1,234.50" -> 1234.5, "1.2.3" -> 1.2).
    Returns None when no finite number can be recovered.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            amount = float(value)
        elif isinstance(value, str):
            match = _LEADING_FLOAT.match(_NON_NUMERIC.sub("", value))
            if not match:
                return None
            amount = float(match.group())
        else:
            return None
    except (OverflowError, ValueError):
        # ints beyond float range
        return None
    return amount if math.isfinite(amount) else None


def format_currency(value: Any) -> str:
    """
    Format as US dollars with thousands separators; "$0.00" when unparseable.

    Negative zero keeps its sign ("-0" -> "-$0.00"), as browsers format it.
    """
    amount = parse_amount(value)
    if amount is None:
        return ZERO_AMOUNT
    sign = "-" if math.copysign(1.0, amount) < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _parse_date(value: Any) -> datetime | date:
    if isinstance(value, (datetime, date)):
        return value
    if isinstance(value, str):
        return date_parser.parse(value)
    raise ValueError(f"Unsupported date value: {value!r}")


def format_date(value: Any) -> Any:
    """
    Render a date as M/D/YYYY.

    Missing values render as "Not specified". Values that do not parse as a
    date are returned unchanged, so the result is display text, not a
    validated date.
    """
    if not value:
        return NOT_SPECIFIED
    try:
        parsed = _parse_date(value)
    except (ValueError, OverflowError):
        return value
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def format_datetime(value: Any) -> str:
    """Render a timestamp as "M/D/YYYY, h:mm:ss AM"; "Invalid date" on failure."""
    try:
        parsed = _to_utc(value)
    except (ValueError, OverflowError, TypeError):
        return "Invalid date"
    clock = parsed.strftime("%I:%M:%S %p").lstrip("0")
    return f"{parsed.month}/{parsed.day}/{parsed.year}, {clock}"


def calculate_subtotal(record: Any) -> float:
    """
    Sum line item amounts.

    Without line items the record's totalAmount is used instead. Items that
    are missing or whose amount cannot be parsed contribute zero.
    """
    if not isinstance(record, dict):
        return 0.0

    items = record.get("items")
    if not isinstance(items, list) or not items:
        return parse_amount(record.get("totalAmount")) or 0.0

    subtotal = 0.0
    for item in items:
        if not isinstance(item, dict):
            continue
        subtotal += parse_amount(item.get("amount")) or 0.0
    return subtotal


def _to_utc(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            parsed = date_parser.parse(value)
    else:
        raise TypeError(f"Unsupported timestamp: {value!r}")
    # Stored timestamps are UTC; treat naive values the same way
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _ago(count: int, unit: str, singular: str) -> str:
    return singular if count == 1 else f"{count} {unit}s ago"


def time_ago(timestamp: Any, now: datetime | None = None) -> str:
    """
    Describe how long ago a timestamp was, using the largest whole unit.

    Units are approximate (30-day months, 365-day years). Anything under a
    minute, including future timestamps, is "just now". Any failure yields
    "recently".
    """
    try:
        current = _to_utc(now or datetime.now(UTC))
        seconds = math.floor((current - _to_utc(timestamp)).total_seconds())

        for size, unit, singular in (
            (SECONDS_PER_YEAR, "year", "a year ago"),
            (SECONDS_PER_MONTH, "month", "a month ago"),
            (SECONDS_PER_DAY, "day", "yesterday"),
            (SECONDS_PER_HOUR, "hour", "an hour ago"),
            (SECONDS_PER_MINUTE, "minute", "a minute ago"),
        ):
            count = seconds // size
            if count >= 1:
                return _ago(count, unit, singular)
        return "just now"
    except Exception as e:
        logger.debug(f"time_ago fallback for {timestamp!r}: {e}")
        return "recently"


def sanitize(value: Any) -> str:
    """Escape the five HTML-significant characters; None becomes ""."""
    if value is None:
        return ""
    return str(value).translate(_HTML_ESCAPES)


def _text(value: Any, fallback: str) -> str:
    if value is None or value == "" or value == [] or value == {}:
        return fallback
    return str(value)


def _vendor_name(record: dict) -> Any:
    vendor = record.get("vendorName")
    if not vendor and isinstance(record.get("vendor"), dict):
        vendor = record["vendor"].get("name")
    return vendor


def _list_amount(total: Any) -> str:
    if not total:
        return "N/A"
    if isinstance(total, str):
        return total.strip()
    if isinstance(total, (int, float)) and not isinstance(total, bool):
        return format_currency(total)
    return "N/A"


def _line_items(items: Any) -> list[LineItemView]:
    if not isinstance(items, list):
        return []
    views = []
    for item in items:
        item = item if isinstance(item, dict) else {}
        views.append(LineItemView(
            description=_text(item.get("description"), "No description"),
            quantity=_text(item.get("quantity"), "1"),
            unit_price=format_currency(item.get("unitPrice") or "0"),
            amount=format_currency(item.get("amount") or "0"),
        ))
    return views


def summarize_invoice(record: Any, now: datetime | None = None) -> InvoiceView:
    """Build the display model used by the review pages."""
    if not isinstance(record, dict):
        return InvoiceView()

    upload_date = record.get("uploadDate")
    list_date = record.get("date") or upload_date

    return InvoiceView(
        id=_text(record.get("_id"), "") or None,
        vendor=_text(_vendor_name(record), "Unknown Vendor"),
        invoice_number=_text(record.get("invoiceNumber"), "N/A"),
        list_date=str(format_date(list_date)) if list_date else "No date",
        date=str(format_date(record.get("date"))),
        due_date=str(format_date(record.get("dueDate"))),
        upload_date=format_datetime(upload_date),
        uploaded=time_ago(upload_date, now=now),
        amount=_list_amount(record.get("totalAmount")),
        subtotal=format_currency(calculate_subtotal(record)),
        tax=format_currency(record.get("taxAmount") or "0"),
        total=format_currency(record.get("totalAmount") or "0"),
        payment_terms=_text(record.get("paymentTerms"), NOT_SPECIFIED),
        notes=_text(record.get("notes"), "No notes available"),
        items=_line_items(record.get("items")),
    )
