"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Union

from . import config


def group_indian(digits: str) -> str:
    """Insert Indian-style separators into a string of digits.

    The last three digits form one group and the rest are grouped in
    pairs.

    Example:
        >>> group_indian('1234567')
        '12,34,567'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ','.join(pairs + [tail])


def format_currency(
    amount: Union[float, int],
    include_symbol: bool = True,
    decimals: int = 2,
) -> str:
    """Format a currency amount with Indian digit grouping.

    Args:
        amount: The amount to format
        include_symbol: Whether to prefix the configured currency symbol
        decimals: Number of decimal places

    Returns:
        Formatted currency string (e.g. "₹12,34,567.50" or "-₹500.00")

    Example:
        >>> format_currency(1234567.5)
        '₹12,34,567.50'
        >>> format_currency(-500, include_symbol=False, decimals=0)
        '-500'
    """
    rounded = round(float(amount), decimals)
    sign = '-' if rounded < 0 else ''
    fixed = f"{abs(rounded):.{decimals}f}"
    whole, _, fraction = fixed.partition('.')
    body = group_indian(whole) + (f".{fraction}" if fraction else '')
    symbol = config.CURRENCY_SYMBOL if include_symbol else ''
    return f"{sign}{symbol}{body}"


def format_percent(value: float, digits: int = 1) -> str:
    """Format a percentage, e.g. ``format_percent(12.345) == '12.3%'``."""
    return f"{value:.{digits}f}%"
