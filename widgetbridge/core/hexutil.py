"""Hex quantity encoding for chain ids.

Quantities on the wallet RPC surface are "0x"-prefixed, lowercase hex with no
leading zeros (``1`` -> ``"0x1"``, ``0`` -> ``"0x0"``).
"""

import re
from typing import Any

from widgetbridge.core.errors import HexDecodeError

_HEX_QUANTITY = re.compile(r"0[xX][0-9a-fA-F]+")


def to_hex(value: int) -> str:
    """Encode a non-negative integer as a hex quantity.

    Raises:
        ValueError: If value is negative or not an int.
    """
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected int, got: {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Quantity must be non-negative, got: {value}")
    return hex(value)


def hex_to_int(value: Any) -> int:
    """Decode a "0x"-prefixed hex string to an integer.

    Raises:
        HexDecodeError: If value is not a string, lacks the prefix, or
            contains non-hex digits.
    """
    if not isinstance(value, str):
        raise HexDecodeError(value, f"expected string, got {type(value).__name__}")
    if not _HEX_QUANTITY.fullmatch(value):
        raise HexDecodeError(value, "not a 0x-prefixed hex string")
    return int(value, 16)
