from __future__ import annotations

from esrdecode.errors import ParseError
from esrdecode.utils.bits import mask_for_width


def parse_number(s: str) -> int:
    """
    Parse a register value given on the command line.
    Accepts decimal or 0x-prefixed hex; the result must fit in 64 bits.
    """
    text = s.strip()
    base = 10
    if text[:2].lower() == "0x":
        text, base = text[2:], 16
    if not text:
        raise ParseError(s, "empty value")
    # int() would otherwise accept a sign or inner whitespace after the prefix
    if not (text[0].isalnum() and text[-1].isalnum()):
        raise ParseError(s)
    try:
        value = int(text, base)
    except ValueError:
        raise ParseError(s) from None
    if value > mask_for_width(64):
        raise ParseError(s, "does not fit in 64 bits")
    return value
