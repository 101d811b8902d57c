"""
Numeric quantity parsing.

Block numbers and timestamps reach us in several spellings:

- JSON-RPC responses encode quantities as ``0x``-prefixed hex strings
- Progress ticks from the indexer carry decimal strings or plain integers

Both funnel through :func:`parse_quantity` so there is exactly one place
that decides what counts as a number.
"""

from __future__ import annotations

from typing import Any


def parse_quantity(value: Any) -> int:
    """
    Parse a non-negative integer quantity.

    Args:
        value: An ``int``, a decimal string (``"1024"``) or a hex string (``"0x400"``).

    Returns:
        The parsed integer.

    Raises:
        TypeError: If the value is neither an integer nor a string.
        ValueError: If the string is not numeric or the value is negative.
    """
    # bool is an int subclass; True must not silently become block 1.
    if isinstance(value, bool):
        raise TypeError("expected an integer quantity, got bool")

    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if text[:2].lower() == "0x":
            digits, base = text[2:], 16
        else:
            digits, base = text, 10
        # int() tolerates "_" separators and signs; quantities never have them.
        if not digits or not digits.isalnum() or not digits.isascii():
            raise ValueError(f"not a numeric quantity: {value!r}")
        number = int(digits, base)
    else:
        raise TypeError(f"expected an integer quantity, got {type(value).__name__}")

    if number < 0:
        raise ValueError(f"quantity must be non-negative: {value!r}")
    return number
