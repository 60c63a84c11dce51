"""
Animation file writer (repacker).

Rebuilds a file around new frames using the source buffer as the template:
bytes before the signature, the opaque header words and the bone table are
copied verbatim; only the frame count, the body and the footer change.
"""

import struct
from typing import Optional

from sf3anim.codec.animation import AnimationData, FormatDescriptor
from sf3anim.codec.errors import CorruptHeader, MissingBaseDescriptor, Truncated
from sf3anim.codec.frames import count_missing, encode_frames
from sf3anim.codec.options import DEFAULT_OPTIONS, CodecOptions

INT32_MAX = 0x7FFFFFFF


def trailing_repeat_count(frames_count: int, original_frames_count: int) -> int:
    """
    How many copies of the trailing bytes follow a body of frames_count frames.

    The footer scales with duration: once the animation is longer than the
    original it is tiled ceil(frames / original) times.
    """
    if original_frames_count <= 0 or frames_count <= original_frames_count:
        return 1
    return (frames_count + original_frames_count - 1) // original_frames_count


class AnimationWriter:
    """
    Writer that repacks AnimationData into the layout of a base file.

    Usage:
        reader = AnimationReader()
        animation, descriptor = reader.load("base.bytes")
        writer = AnimationWriter()
        data = writer.write_bytes(animation, descriptor, original_bytes)
    """

    def __init__(self, options: Optional[CodecOptions] = None, logger=None):
        self.options = options or DEFAULT_OPTIONS
        self.logger = logger

    def _log(self, level: str, message: str):
        """Log a message if logger is available."""
        if self.logger:
            getattr(self.logger, level, self.logger.info)(message)

    def write_bytes(self, animation: AnimationData, descriptor: Optional[FormatDescriptor],
                    original: bytes) -> bytes:
        """
        Encode animation into a complete file buffer.

        Args:
            animation: Frames to write; frames_count may differ from the base
            descriptor: Layout of the base file, from the reader
            original: The base file buffer the descriptor was decoded from

        Returns:
            New file contents

        Raises:
            MissingBaseDescriptor: if no descriptor is given
            Truncated: if original is shorter than the described header
            CorruptHeader: if frames_count does not fit the i32 field
        """
        if descriptor is None:
            raise MissingBaseDescriptor()

        if len(original) < descriptor.header_end:
            raise Truncated(len(original), descriptor.header_end, len(original), "base header")

        frames_count = animation.frames_count
        if not 0 <= frames_count <= INT32_MAX:
            raise CorruptHeader("frames count", frames_count)

        # Prefix, signature, opaque words and bone table, verbatim
        output = bytearray(original[:descriptor.header_end])
        struct.pack_into('<i', output, descriptor.frames_count_offset, frames_count)

        missing = count_missing(animation.frames, frames_count, descriptor.bone_ids)
        if missing:
            self._log('debug', f"Filling {missing} missing bone poses with rest pose")

        output += encode_frames(
            animation.frames,
            frames_count,
            descriptor.bone_ids,
            self.options.rotation_order,
        )

        trailing = animation.trailing_data
        if trailing:
            repeat = 1
            if self.options.multiply_trailing_data:
                repeat = trailing_repeat_count(frames_count, descriptor.original_frames_count)
            if repeat > 1:
                self._log(
                    'info',
                    f"Frame count grew {descriptor.original_frames_count} -> {frames_count}, "
                    f"trailing data x{repeat}"
                )
            output += bytes(trailing) * repeat

        self._log('info', f"Repacked {frames_count} frames, {len(output)} bytes")
        return bytes(output)

    def save(self, file_path: str, animation: AnimationData, descriptor: Optional[FormatDescriptor],
             original: bytes) -> int:
        """
        Repack and write to file_path.

        Returns:
            Number of bytes written
        """
        data = self.write_bytes(animation, descriptor, original)
        with open(file_path, 'wb') as f:
            f.write(data)
        return len(data)


def encode(animation: AnimationData, descriptor: Optional[FormatDescriptor], original: bytes,
           options: Optional[CodecOptions] = None, logger=None) -> bytes:
    """
    Convenience function to repack an animation.

    Raises:
        FormatError: if no base descriptor is available or the base is unusable
    """
    return AnimationWriter(options, logger).write_bytes(animation, descriptor, original)
