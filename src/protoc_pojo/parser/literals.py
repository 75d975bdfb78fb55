"""Decoding of integer literals used as field tags and enum numbers.

Decoding is lenient: a malformed literal or one whose magnitude does not fit
in a signed 64-bit integer decodes to 0 instead of raising.
"""

from __future__ import annotations

import re

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")
_OCT_DIGITS = re.compile(r"[0-7]+")
_DEC_DIGITS = re.compile(r"[0-9]+")

_INT64_MAX = (1 << 63) - 1
_UINT32_MASK = 0xFFFFFFFF


def decode_integer(token: str) -> int:
    """Decode a decimal, hex (``0x``) or octal (leading ``0``) literal."""
    negative = token.startswith("-")
    rest = token[1:] if negative else token

    if rest[:2] in ("0x", "0X"):
        digits, pattern, base = rest[2:], _HEX_DIGITS, 16
    elif rest.startswith("0") and len(rest) > 1:
        digits, pattern, base = rest[1:], _OCT_DIGITS, 8
    else:
        digits, pattern, base = rest, _DEC_DIGITS, 10

    if not pattern.fullmatch(digits):
        return 0
    magnitude = int(digits, base)
    if magnitude > _INT64_MAX:
        return 0
    return -magnitude if negative else magnitude


def decode_tag(token: str) -> int:
    """Decode a field tag: negative values clamp to 0, then unsigned 32-bit."""
    value = decode_integer(token)
    if value < 0:
        value = 0
    return value & _UINT32_MASK


def decode_enum_number(token: str) -> int:
    """Decode an enum value number, wrapped to a signed 32-bit integer."""
    return _to_int32(decode_integer(token))


def _to_int32(value: int) -> int:
    value &= _UINT32_MASK
    if value > 0x7FFFFFFF:
        value -= 1 << 32
    return value
