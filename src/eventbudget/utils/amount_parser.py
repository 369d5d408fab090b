"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "€123.45"
    - "-123.45"
    - "1,234.56"
    - "1.234,56" (Turkish grouping, as amounts are displayed)
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£₺]", "", amount_str)

    amount_str = _normalize_separators(amount_str.strip())

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if is_negative else amount


def _normalize_separators(amount_str: str) -> str:
    """Drop grouping separators and make "." the decimal point.

    With both separators present the last one is the decimal point. A lone
    comma is a decimal comma unless it groups thousands ("1,234"). Grouping
    that does not come in threes is rejected.
    """
    sign = ""
    if amount_str[:1] in "+-":
        sign, amount_str = amount_str[0], amount_str[1:]

    if "." in amount_str and "," in amount_str:
        decimal_sep = "." if amount_str.rfind(".") > amount_str.rfind(",") else ","
        group_sep = "," if decimal_sep == "." else "."
        whole, _, fraction = amount_str.rpartition(decimal_sep)
        if not _is_grouped(whole, group_sep):
            raise ValueError(f"Could not parse amount '{sign}{amount_str}': ambiguous grouping")
        return f"{sign}{whole.replace(group_sep, '')}.{fraction}"

    if "," in amount_str:
        if _is_grouped(amount_str, ","):
            return sign + amount_str.replace(",", "")
        if amount_str.count(",") == 1:
            return sign + amount_str.replace(",", ".")
        raise ValueError(f"Could not parse amount '{sign}{amount_str}': ambiguous grouping")

    if amount_str.count(".") > 1:
        if _is_grouped(amount_str, "."):
            return sign + amount_str.replace(".", "")
        raise ValueError(f"Could not parse amount '{sign}{amount_str}': ambiguous grouping")

    return sign + amount_str


def _is_grouped(digits: str, separator: str) -> bool:
    return re.fullmatch(rf"\d{{1,3}}(?:{re.escape(separator)}\d{{3}})+", digits) is not None


def coerce_decimal(value) -> Decimal:
    """Normalize a stored numeric value to Decimal.

    None becomes 0. Floats go through ``str`` so 0.1 stays 0.1.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    return Decimal(str(value))


def coerce_amount(value) -> Decimal:
    """Coerce user input to an amount, falling back to 0.

    Anything that is not a finite number (empty strings, words, NaN) becomes 0
    so the financial model never sees an invalid value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError:
            return Decimal("0")
    try:
        amount = coerce_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def coerce_non_negative_amount(value) -> Decimal:
    """Coerce user input to an amount that is at least 0."""
    amount = coerce_amount(value)
    return amount if amount > 0 else Decimal("0")


def coerce_quantity(value) -> int:
    """Coerce user input to a whole, non-negative quantity.

    Fractions are truncated; invalid input and negatives become 0.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    amount = coerce_amount(value)
    return max(int(amount), 0)
