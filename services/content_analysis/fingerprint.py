"""
Content fingerprint used as the dedup key for stored analyses.

A 32-bit multiplicative rolling hash (h * 31 + unit) over the UTF-16 code
units of the raw content, rendered in base 36. Rows written by the browser
integration used the same scheme, so existing hashes stay valid.

Not cryptographic and collisions are possible. Never use it to authenticate.
"""

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_signed32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS[rem])
    return sign + "".join(reversed(digits))


def _utf16_units(content: str):
    data = content.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def content_hash_value(content: str) -> int:
    h = 0
    for unit in _utf16_units(content or ""):
        h = _to_signed32((h << 5) - h + unit)
    return h


def content_fingerprint(content: str) -> str:
    return to_base36(content_hash_value(content))
