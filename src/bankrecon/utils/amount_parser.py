"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str) -> Decimal:
    """Parse an amount into a signed Decimal.

    Handles various formats:
    - "123.45", "-123.45"
    - "R$ 1.234,56" (Brazilian separators)
    - "1,234.56"
    - "1234,56"
    - "(123.45)" (negative in parentheses)
    - plain int/float/Decimal values from JSON payloads

    Args:
        amount_str: Amount string or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount cannot be parsed
    """
    if isinstance(amount_str, bool):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if isinstance(amount_str, (int, float, Decimal)):
        return Decimal(str(amount_str))

    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and whitespace
    amount_str = re.sub(r"R\$|[$€£¥]|\s", "", amount_str)

    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]
    elif amount_str.startswith("+"):
        amount_str = amount_str[1:]

    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    return -amount if is_negative else amount


def _normalize_separators(amount_str: str) -> str:
    """Rewrite thousands/decimal separators to a plain dotted decimal."""
    if "," in amount_str and "." in amount_str:
        # Whichever separator comes last is the decimal one
        if amount_str.rfind(",") > amount_str.rfind("."):
            return amount_str.replace(".", "").replace(",", ".")
        return amount_str.replace(",", "")

    if "," in amount_str:
        head, _, tail = amount_str.rpartition(",")
        if amount_str.count(",") == 1 and len(tail) <= 2:
            return f"{head}.{tail}"
        return amount_str.replace(",", "")

    if amount_str.count(".") > 1:
        return amount_str.replace(".", "")

    return amount_str
