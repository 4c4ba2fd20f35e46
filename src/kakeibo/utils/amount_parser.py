"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> int:
    """Parse an amount string into an integer amount.

    Handles various formats:
    - "1200"
    - "¥1,200"
    - "-1200"
    - "(1200)" (negative in parentheses)
    - "1200.0" (a zero fractional part is accepted)

    Args:
        amount_str: Amount string

    Returns:
        Integer amount

    Raises:
        ValueError: If amount string cannot be parsed or has a fractional part
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols, commas and whitespace
    amount_str = re.sub(r"[¥￥円$€£,\s]", "", amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if amount != amount.to_integral_value():
        raise ValueError(f"Amount '{amount_str}' must be a whole number")

    value = int(amount)
    return -value if is_negative else value
