"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY = re.compile(r"R\$|[$€£¥]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles Brazilian and US notations:
    - "1.234,56" / "R$ 1.234,56" / "-R$ 6.000,00" / "+ 12,00"
    - "1,234.56" / "$123.45" / "-123.45"
    - "(123,45)" (negative in parentheses)

    When both separators appear, the rightmost one is the decimal mark. A lone
    comma followed by one or two digits is a decimal comma.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount, negative when the string carries a minus sign

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = _CURRENCY.sub("", text)
    text = re.sub(r"\s+", "", text)

    if text.startswith("-"):
        is_negative = not is_negative
        text = text[1:]
    elif text.startswith("+"):
        text = text[1:]

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        if re.search(r",\d{1,2}$", text):
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
    elif re.fullmatch(r"\d{1,3}(?:\.\d{3}){2,}", text):
        text = text.replace(".", "")

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}") from e
    return -amount if is_negative else amount
