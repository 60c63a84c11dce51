"""
Format variant switches for the codec.
"""

from dataclasses import dataclass
from typing import Optional

from sf3anim.codec.quaternion import RotationOrder


@dataclass(frozen=True)
class CodecOptions:
    """
    Variant flags shared by reader and writer.

    rotation_order: labeling of decompressed rotation slots
    scan_limit: restrict the signature search to offsets below this value
                (None scans the whole buffer)
    multiply_trailing_data: tile trailing bytes when the frame count grows
    """
    rotation_order: RotationOrder = RotationOrder.XYZW
    scan_limit: Optional[int] = None
    multiply_trailing_data: bool = True


DEFAULT_OPTIONS = CodecOptions()
