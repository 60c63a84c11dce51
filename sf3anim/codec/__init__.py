"""
SF3 Animation Codec

Decodes and re-encodes the fixed-layout binary skeletal animation format:
per-bone half-float positions and smallest-three compressed rotations for
every frame of a fixed skeleton.

Entry points:
- decode(buffer) -> (AnimationData, FormatDescriptor)
- encode(animation, descriptor, original_buffer) -> bytes

Unmodified data repacks byte-for-byte, including bytes before the
signature, the opaque header words and the trailing footer.
"""

from sf3anim.codec.animation import (
    AnimationData,
    BoneFrameEntry,
    FormatDescriptor,
    Frame,
    Quaternion,
    Vector3,
)
from sf3anim.codec.errors import (
    CorruptHeader,
    FormatError,
    MissingBaseDescriptor,
    SignatureNotFound,
    Truncated,
)
from sf3anim.codec.options import CodecOptions
from sf3anim.codec.quaternion import RotationOrder
from sf3anim.codec.reader import AnimationReader, decode
from sf3anim.codec.writer import AnimationWriter, encode

__all__ = [
    'AnimationData',
    'BoneFrameEntry',
    'FormatDescriptor',
    'Frame',
    'Quaternion',
    'Vector3',
    'FormatError',
    'SignatureNotFound',
    'Truncated',
    'CorruptHeader',
    'MissingBaseDescriptor',
    'CodecOptions',
    'RotationOrder',
    'AnimationReader',
    'AnimationWriter',
    'decode',
    'encode',
]
