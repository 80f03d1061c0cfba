"""
Helper utilities
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Union

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware datetime

    Args:
        value: datetime, ISO-8601 string or epoch milliseconds

    Returns:
        Aware datetime, or None when the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    return None

def to_decimal(value: Union[Decimal, int, float, str, None]) -> Decimal:
    """Convert a numeric value to Decimal without float artefacts"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))

def format_currency(
    amount: Union[Decimal, int, float],
    currency: str = "INR",
    decimals: int = 2
) -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code
        decimals: Digits after the decimal point

    Returns:
        Formatted currency string, e.g. "₹ 1,23,456.50"
    """
    amount = to_decimal(amount)
    quantum = Decimal(1).scaleb(-decimals)
    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)

    if currency != "INR":
        return f"{currency} {amount:,.{decimals}f}"

    sign = "-" if amount < 0 else ""
    amount_str = f"{abs(amount):.{decimals}f}"

    # Split into integer and decimal parts
    parts = amount_str.split('.')
    integer_part = parts[0]
    decimal_part = parts[1] if len(parts) > 1 else ""

    # Indian grouping: last 3 digits, then groups of 2
    if len(integer_part) > 3:
        result = integer_part[-3:]
        integer_part = integer_part[:-3]
        while integer_part:
            result = integer_part[-2:] + "," + result
            integer_part = integer_part[:-2]
    else:
        result = integer_part

    if decimal_part:
        result = f"{result}.{decimal_part}"
    return f"₹ {sign}{result}"

def format_local_datetime(value: Any) -> str:
    """Render a timestamp the way the storefront shows dates (dd/mm/yyyy, hh:mm:ss am)"""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "N/A"
    return parsed.strftime("%d/%m/%Y, %I:%M:%S %p").lower()
