"""Conversion between decimal amounts and integer cents.

The engine stores and computes every amount in cents. Decimals appear only
when reading user input and when displaying results.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")

# Optional sign, optional currency symbol, digits with optional thousands
# separators, optional fraction.
_AMOUNT_RE = re.compile(r"^(?P<sign>[-+]?)\s*[$€£¥]?\s*(?P<number>[\d,]*\.?\d*)$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse user input such as "1,234.56", "$12", "-5.00" or "(42.10)" into a Decimal.

    Parentheses mark a negative amount, as on bank statements.

    Raises:
        ValueError: If the string is not an amount
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1].strip()

    match = _AMOUNT_RE.match(text)
    number = match.group("number").replace(",", "") if match else ""
    if not any(ch.isdigit() for ch in number):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    try:
        amount = Decimal(number)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    if match.group("sign") == "-":
        negative = not negative
    return -amount if negative else amount


def to_cents(amount: Decimal) -> int:
    """Convert a decimal amount to cents, rounding half up to two places."""
    return int((Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def from_cents(cents: int) -> Decimal:
    """Convert cents to a two-place decimal amount."""
    return (Decimal(cents) / 100).quantize(CENT)


def format_amount(cents: int) -> str:
    """Render cents for display, e.g. 123456 -> '$1,234.56', -500 -> '-$5.00'."""
    amount = from_cents(cents)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
