"""
Animation file reader.

Finds the magic signature, decodes the header that follows it and the frame
body, and returns the decoded animation together with a FormatDescriptor
describing the source layout.

Header layout (little-endian, offsets from the signature):
- 0:   magic (u64)
- 8:   array count (i16)
- 10:  opaque words (array count x 8 bytes), preserved, never interpreted
- +0:  frames count (i32)
- +4:  bones count (i32)
- +8:  bone ids (bones count x i16)
- header end: frame body
- animation data end: trailing bytes until end of file
"""

import os
import struct
from typing import Optional, Tuple

from sf3anim.codec.animation import (
    ARRAY_COUNT_SIZE,
    BONE_ID_SIZE,
    COUNT_FIELD_SIZE,
    GARBAGE_WORD_SIZE,
    MAGIC,
    MAGIC_SIZE,
    AnimationData,
    FormatDescriptor,
)
from sf3anim.codec.errors import CorruptHeader, SignatureNotFound, Truncated
from sf3anim.codec.frames import decode_frames
from sf3anim.codec.options import DEFAULT_OPTIONS, CodecOptions

MAGIC_BYTES = struct.pack('<Q', MAGIC)


def _read(data: bytes, fmt: str, offset: int, what: str) -> Tuple[int, int]:
    """Read one struct value, returning (value, new_offset)."""
    size = struct.calcsize(fmt)
    if offset + size > len(data):
        raise Truncated(offset, size, max(len(data) - offset, 0), what)
    return struct.unpack_from(fmt, data, offset)[0], offset + size


def locate_header(data: bytes, scan_limit: Optional[int] = None) -> int:
    """
    Find the offset of the magic signature.

    Args:
        data: Complete buffer
        scan_limit: Only consider offsets below this value (None = all)

    Returns:
        Offset of the first occurrence

    Raises:
        SignatureNotFound: if the signature does not occur in range
    """
    candidates = max(len(data) - MAGIC_SIZE + 1, 0)
    if scan_limit is not None:
        candidates = min(candidates, max(scan_limit, 0))

    if candidates:
        offset = data.find(MAGIC_BYTES, 0, candidates - 1 + MAGIC_SIZE)
        if offset >= 0:
            return offset

    # Offset 0 is checked even when the scan range excludes it
    if data.startswith(MAGIC_BYTES):
        return 0

    raise SignatureNotFound(candidates)


def read_header(data: bytes, header_start: int) -> FormatDescriptor:
    """
    Decode the header at header_start (the signature itself is assumed matched).

    Raises:
        Truncated: if the header runs past the end of the buffer
        CorruptHeader: on a negative count
    """
    offset = header_start + MAGIC_SIZE

    array_count, offset = _read(data, '<h', offset, "array count")
    if array_count < 0:
        raise CorruptHeader("array count", array_count, offset - ARRAY_COUNT_SIZE)

    garbage_size = array_count * GARBAGE_WORD_SIZE
    if offset + garbage_size > len(data):
        raise Truncated(offset, garbage_size, len(data) - offset, "header arrays")
    offset += garbage_size

    frames_count_offset = offset
    frames_count, offset = _read(data, '<i', offset, "frames count")
    if frames_count < 0:
        raise CorruptHeader("frames count", frames_count, frames_count_offset)

    bones_count, offset = _read(data, '<i', offset, "bones count")
    if bones_count < 0:
        raise CorruptHeader("bones count", bones_count, offset - COUNT_FIELD_SIZE)

    table_size = bones_count * BONE_ID_SIZE
    if offset + table_size > len(data):
        raise Truncated(offset, table_size, len(data) - offset, "bone table")
    bone_ids = struct.unpack_from(f'<{bones_count}h', data, offset)
    offset += table_size

    return FormatDescriptor(
        header_start=header_start,
        header_end=offset,
        garbage_word_count=array_count,
        frames_count_offset=frames_count_offset,
        original_frames_count=frames_count,
        bones_count=bones_count,
        bone_ids=tuple(bone_ids),
    )


class AnimationReader:
    """
    Reader for binary skeletal animation files.

    The reader keeps no state between calls; everything needed to repack
    is returned in the FormatDescriptor.

    Usage:
        reader = AnimationReader()
        animation, descriptor = reader.load("path/to/anim.bytes")
        print(animation.frames_count, animation.bone_ids)
    """

    def __init__(self, options: Optional[CodecOptions] = None, logger=None):
        self.options = options or DEFAULT_OPTIONS
        self.logger = logger

    def _log(self, level: str, message: str):
        """Log a message if logger is available."""
        if self.logger:
            getattr(self.logger, level, self.logger.info)(message)

    def load(self, file_path: str) -> Tuple[AnimationData, FormatDescriptor]:
        """
        Load and decode an animation file.

        Args:
            file_path: Path to the animation file

        Returns:
            (animation, descriptor)
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Animation file not found: {file_path}")

        with open(file_path, 'rb') as f:
            data = f.read()

        return self.load_bytes(data, os.path.basename(file_path))

    def load_bytes(self, data: bytes, name: str = "memory") -> Tuple[AnimationData, FormatDescriptor]:
        """
        Decode an animation from a complete buffer.

        Args:
            data: Raw file contents
            name: Name for log messages

        Returns:
            (animation, descriptor)
        """
        data = bytes(data)

        header_start = locate_header(data, self.options.scan_limit)
        if header_start:
            self._log('info', f"{name}: signature at offset {header_start}")

        descriptor = read_header(data, header_start)
        self._log(
            'info',
            f"{name}: {descriptor.original_frames_count} frames, "
            f"{descriptor.bones_count} bones, {descriptor.garbage_word_count} opaque header words"
        )

        frames = decode_frames(
            data,
            descriptor.header_end,
            descriptor.original_frames_count,
            descriptor.bone_ids,
            self.options.rotation_order,
        )

        trailing = data[descriptor.animation_data_end:]
        if trailing:
            self._log('info', f"{name}: {len(trailing)} trailing bytes preserved")

        animation = AnimationData(
            bones_count=descriptor.bones_count,
            frames_count=descriptor.original_frames_count,
            bone_ids=list(descriptor.bone_ids),
            frames=frames,
            trailing_data=trailing,
        )
        return animation, descriptor


def decode(data: bytes, options: Optional[CodecOptions] = None,
           logger=None) -> Tuple[AnimationData, FormatDescriptor]:
    """
    Convenience function to decode an animation buffer.

    Raises:
        FormatError: if the buffer is not a valid animation
    """
    return AnimationReader(options, logger).load_bytes(data)
