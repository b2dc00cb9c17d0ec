"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

# Currency symbols and trailing ISO codes accepted around a number
_SYMBOLS = re.compile(r"[$€£¥₫]")
_SUFFIX = re.compile(r"(?:\s*(?:đ|[a-z]{3}))$", re.IGNORECASE)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a non-negative Decimal.

    Handles "1500000", "1,500,000", "1,500,000.50", "1500000 VND",
    "₫1,500,000", "$12.30" and "250000đ". Ledger amounts are unsigned;
    the entry type decides the direction.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = _SUFFIX.sub("", amount_str.strip())
    text = _SYMBOLS.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: '{amount_str}'")
    return amount
