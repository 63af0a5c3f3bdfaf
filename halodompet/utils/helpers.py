"""Formatting and date helpers shared by services and routes."""

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def format_utc_datetime(dt: datetime | None) -> str | None:
    """Format a naive UTC datetime as ISO-8601 with a Z suffix.

    Args:
        dt: datetime object (assumed UTC) or None

    Returns:
        ISO format string with Z suffix (e.g., "2026-01-10T10:30:00Z") or None
    """
    if dt is None:
        return None
    return f"{dt.isoformat()}Z"


def to_decimal(value: Any) -> Decimal:
    """Coerce a DB aggregate / JSON number into Decimal (None -> 0)."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_rupiah(value: Decimal | int | float, signed: bool = False) -> str:
    """Indonesian number format: 1234567.5 -> "1.234.567,5".

    Args:
        value: Amount
        signed: Prefix positive numbers with "+"

    Returns:
        Formatted number without currency symbol
    """
    amount = to_decimal(value)
    sign = "-" if amount < 0 else ("+" if signed and amount > 0 else "")
    amount = abs(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    whole, _, fraction = f"{amount:f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    return f"{sign}{grouped},{fraction}" if fraction else f"{sign}{grouped}"


def round_percentage(value: Decimal | float) -> float:
    """Round a percentage to one decimal place."""
    return float(to_decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def month_range(today: date | None = None) -> tuple[date, date]:
    """First and last day of the month containing ``today``."""
    today = today or date.today()
    start = today.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)
