"""
Formatting helpers for panel responses.
Money is always rendered with exactly two decimals.
"""
from decimal import Decimal, InvalidOperation
from datetime import date, datetime
from typing import Union, Optional


def money(value: Union[int, float, Decimal, str, None], symbol: str = '') -> str:
    """
    Format an amount with exactly 2 decimals and comma thousands separators.

    Args:
        value: Amount to format
        symbol: Optional currency prefix

    Returns:
        Formatted string, or "-" if the value is invalid

    Examples:
        money(Decimal('25')) -> "25.00"
        money(1500.5) -> "1,500.50"
        money(Decimal('9.999'), '$') -> "$10.00"
        money(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    sign = "-" if num < 0 else ""
    return f"{sign}{symbol}{abs(num):,.2f}"


def date_short(value: Union[date, datetime, None]) -> str:
    """
    Format a date as YYYY-MM-DD.

    Examples:
        date_short(datetime(2026, 1, 12, 15, 30)) -> "2026-01-12"
        date_short(None) -> "-"
    """
    if value is None:
        return "-"

    if isinstance(value, datetime):
        value = value.date()

    if not isinstance(value, date):
        return "-"

    return value.isoformat()


def status_tone(status: Optional[str]) -> str:
    """Badge tone for an order status: success, warning or neutral."""
    if status == 'COMPLETED':
        return 'success'
    if status == 'PENDING':
        return 'warning'
    return 'neutral'
