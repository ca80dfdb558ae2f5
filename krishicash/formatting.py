"""
Currency formatting in Indian digit grouping.

    >>> format_indian_currency(150000)
    '₹1,50,000'
"""

from __future__ import annotations

RUPEE = "₹"


def format_indian_currency(amount: int | float) -> str:
    """
    Format an amount with lakh/crore grouping (1,50,000 not 150,000).

    Amounts under 1000 carry no currency sign. Fractions are truncated.
    """
    sign = "-" if amount < 0 else ""
    whole = int(abs(amount))

    if whole < 1000:
        return f"{sign}{whole}"

    digits = str(whole)
    result = digits[-3:]
    remaining = digits[:-3]
    while remaining:
        result = f"{remaining[-2:]},{result}"
        remaining = remaining[:-2]

    return f"{sign}{RUPEE}{result}"
