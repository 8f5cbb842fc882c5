from __future__ import annotations


def mask_for_width(width: int) -> int:
    if width == 8:
        return 0xFF
    if width == 16:
        return 0xFFFF
    if width == 32:
        return 0xFFFFFFFF
    if width == 64:
        return 0xFFFFFFFFFFFFFFFF
    return (1 << width) - 1


def extract(value: int, start: int, end: int) -> int:
    """Bits [start, end) of value, shifted down to bit 0."""
    return (value >> start) & mask_for_width(end - start)
