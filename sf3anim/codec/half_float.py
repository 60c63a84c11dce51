"""
IEEE 754 binary16 (half precision) conversion.

Positions in the animation body are stored as three half floats per bone.
Python has no native half type, so both directions are done on the raw
bit patterns:

- decode: sign (bit 15), 5-bit exponent, 10-bit mantissa
- encode: round-to-nearest from the binary32 representation of the value
"""

import math
import struct

HALF_POSITIVE_INFINITY = 0x7C00
HALF_NEGATIVE_INFINITY = 0xFC00


def half_to_float(bits: int) -> float:
    """
    Decode a 16-bit half float pattern.

    Args:
        bits: Raw 16-bit value (0..0xFFFF)

    Returns:
        The decoded value as a Python float
    """
    sign = -1.0 if (bits & 0x8000) else 1.0
    exponent = (bits & 0x7C00) >> 10
    mantissa = bits & 0x03FF

    if exponent == 0:
        # Subnormal (and signed zero)
        return sign * math.ldexp(mantissa / 1024.0, -14)
    if exponent == 0x1F:
        if not mantissa:
            return sign * math.inf
        # NaN: widen through binary32 so sign and payload survive
        wide = ((bits & 0x8000) << 16) | 0x7F800000 | (mantissa << 13)
        return struct.unpack('<f', struct.pack('<I', wide))[0]

    return sign * math.ldexp(1.0 + mantissa / 1024.0, exponent - 15)


def _float_bits(value: float) -> int:
    """Get the binary32 bit pattern of a value."""
    try:
        return struct.unpack('<I', struct.pack('<f', value))[0]
    except OverflowError:
        # Finite double outside the float32 range
        return 0xFF800000 if value < 0 else 0x7F800000


def float_to_half(value: float) -> int:
    """
    Encode a value as a 16-bit half float pattern.

    Works on the binary32 bits: the exponent is rebiased from 127 to 15,
    one extra mantissa bit is kept for rounding. Values too large for a
    half saturate to infinity, values under half the smallest subnormal
    become signed zero.

    Args:
        value: Value to encode

    Returns:
        Raw 16-bit pattern
    """
    x = _float_bits(value)

    bits = (x >> 16) & 0x8000      # sign
    m = (x >> 12) & 0x07FF         # 10 mantissa bits + 1 rounding bit
    e = (x >> 23) & 0xFF           # biased binary32 exponent

    # Below half of the smallest subnormal
    if e < 103:
        return bits

    # Infinity, NaN, or too large for a half
    if e > 142:
        bits |= HALF_POSITIVE_INFINITY
        if e == 255 and (x & 0x007FFFFF):
            # Keep the top payload bits, at least one set
            bits |= ((x >> 13) & 0x03FF) or 0x0200
        return bits

    # Subnormal half
    if e < 113:
        m |= 0x0800
        bits |= (m >> (114 - e)) + ((m >> (113 - e)) & 1)
        return bits

    bits |= ((e - 112) << 10) | (m >> 1)
    # A carry out of the mantissa bumps the exponent, up to infinity
    bits += m & 1
    return bits
