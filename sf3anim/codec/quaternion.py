"""
Smallest-three quaternion compression.

A unit quaternion is packed into three 16-bit words (48 bits):

    v0: [15] sign of omitted | [14:13] omitted index | [12:0] a >> 2
    v1: [15:14] a & 3        | [13:0] b >> 1
    v2: [15] b & 1           | [14:0] c

The largest-magnitude component is dropped and rebuilt from the unit-length
constraint (on near-ties, the lowest such slot). The remaining three (a, b, c), kept in slot order, are mapped
from [-sqrt(2)/2, sqrt(2)/2] onto 15-bit integers.

Slot order is the order of the 4-tuple handled here. How slots map to
x/y/z/w is a file-format variant, see RotationOrder.
"""

import math
from enum import Enum
from typing import Sequence, Tuple

SCALE = 1.0 / 32767.0
MAX_VALUE = math.sqrt(2.0)
SHIFT = math.sqrt(2.0) / 2.0
STEP = SCALE * MAX_VALUE

FIELD_MAX = 0x7FFF

IDENTITY_SLOTS = (0.0, 0.0, 0.0, 1.0)


class RotationOrder(str, Enum):
    """Labeling of the four decompressed slots."""
    XYZW = "xyzw"
    WXYZ = "wxyz"

    def to_xyzw(self, slots: Sequence[float]) -> Tuple[float, float, float, float]:
        """Relabel decompressed slots as (x, y, z, w)."""
        if self is RotationOrder.WXYZ:
            return (slots[1], slots[2], slots[3], slots[0])
        return (slots[0], slots[1], slots[2], slots[3])

    def from_xyzw(self, x: float, y: float, z: float, w: float) -> Tuple[float, float, float, float]:
        """Lay out (x, y, z, w) in slot order for compression."""
        if self is RotationOrder.WXYZ:
            return (w, x, y, z)
        return (x, y, z, w)


def _quantize(value: float) -> int:
    bits = int(round((value + SHIFT) / STEP))
    return min(max(bits, 0), FIELD_MAX)


def _dequantize(bits: int) -> float:
    return bits * SCALE * MAX_VALUE - SHIFT


def compress_quaternion(q0: float, q1: float, q2: float, q3: float) -> Tuple[int, int, int]:
    """
    Pack a quaternion given in slot order into three 16-bit words.

    The input is normalized first; a zero-length input is treated as the
    identity (slot 3 = 1).

    Returns:
        (v0, v1, v2)
    """
    length = math.sqrt(q0 * q0 + q1 * q1 + q2 * q2 + q3 * q3)
    if length == 0.0 or not math.isfinite(length):
        slots = IDENTITY_SLOTS
    else:
        slots = (q0 / length, q1 / length, q2 / length, q3 / length)

    # Components within one step of the largest count as tied; the lowest
    # index wins so a decoded tie re-selects the same slot.
    largest = max(abs(v) for v in slots)
    omitted = next(i for i, v in enumerate(slots) if abs(v) >= largest - STEP)
    sign = 1 if slots[omitted] < 0 else 0

    a, b, c = (_quantize(v) for i, v in enumerate(slots) if i != omitted)

    v0 = (sign << 15) | (omitted << 13) | (a >> 2)
    v1 = ((a & 0x3) << 14) | (b >> 1)
    v2 = ((b & 0x1) << 15) | c
    return v0, v1, v2


def decompress_quaternion(v0: int, v1: int, v2: int) -> Tuple[float, float, float, float]:
    """
    Unpack three 16-bit words into a quaternion in slot order.

    Returns:
        Four floats; the rebuilt component sits at the omitted index
    """
    omitted = (v0 >> 13) & 0x3
    sign = (v0 >> 15) & 0x1

    a = _dequantize(((v0 & 0x1FFF) << 2) | (v1 >> 14))
    b = _dequantize(((v1 & 0x3FFF) << 1) | (v2 >> 15))
    c = _dequantize(v2 & 0x7FFF)

    d_squared = 1.0 - (a * a + b * b + c * c)
    d = math.sqrt(d_squared) if d_squared > 0.0 else 0.0
    if sign:
        d = -d

    components = [a, b, c]
    components.insert(omitted, d)
    return (components[0], components[1], components[2], components[3])
