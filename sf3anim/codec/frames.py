"""
Frame body codec.

The body is framesCount x bonesCount records of six little-endian u16:
three half-float position components followed by the three words of a
smallest-three quaternion. Bones appear in bone-table order.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from sf3anim.codec.animation import BONE_RECORD_SIZE, BoneFrameEntry, Frame, Quaternion, Vector3
from sf3anim.codec.errors import Truncated
from sf3anim.codec.half_float import float_to_half, half_to_float
from sf3anim.codec.quaternion import RotationOrder, compress_quaternion, decompress_quaternion

WORDS_PER_RECORD = BONE_RECORD_SIZE // 2
RECORD_DTYPE = np.dtype('<u2')


def body_size(frames_count: int, bones_count: int) -> int:
    return frames_count * bones_count * BONE_RECORD_SIZE


def _same_value(a: float, b: float) -> bool:
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)
    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


def _decode_record(words: Sequence[int], rotation_order: RotationOrder) -> Tuple[Vector3, Quaternion]:
    px, py, pz, v0, v1, v2 = words
    slots = decompress_quaternion(v0, v1, v2)
    return (
        Vector3(half_to_float(px), half_to_float(py), half_to_float(pz)),
        Quaternion(*rotation_order.to_xyzw(slots)),
    )


def _unchanged(entry: BoneFrameEntry, rotation_order: RotationOrder) -> bool:
    """Whether entry still holds exactly what its source words decode to."""
    if entry.source_words is None:
        return False
    position, rotation = _decode_record(entry.source_words, rotation_order)
    current = entry.position.to_tuple() + entry.rotation.to_tuple()
    decoded = position.to_tuple() + rotation.to_tuple()
    return all(_same_value(a, b) for a, b in zip(current, decoded))


def decode_frames(data: bytes, offset: int, frames_count: int, bone_ids: Sequence[int],
                  rotation_order: RotationOrder = RotationOrder.XYZW) -> List[Frame]:
    """
    Decode the frame body starting at offset.

    Args:
        data: Complete source buffer
        offset: Start of the first frame record (header end)
        frames_count: Number of frames to read
        bone_ids: Bone table, in record order
        rotation_order: Slot labeling for decompressed rotations

    Returns:
        One Frame per stored frame, each keyed by bone id

    Raises:
        Truncated: if the buffer ends inside the body
    """
    bones_count = len(bone_ids)
    size = body_size(frames_count, bones_count)
    available = len(data) - offset
    if size > available:
        # Report the first record that cannot be read in full
        bad_offset = offset + (max(available, 0) // BONE_RECORD_SIZE) * BONE_RECORD_SIZE
        raise Truncated(bad_offset, size, available, "frame body")

    if size == 0:
        return [Frame() for _ in range(frames_count)]

    words = np.frombuffer(
        data, dtype=RECORD_DTYPE, count=size // 2, offset=offset
    ).reshape(frames_count, bones_count, WORDS_PER_RECORD)

    frames = []
    for frame_words in words.tolist():
        frame = Frame()
        for bone_id, record_words in zip(bone_ids, frame_words):
            position, rotation = _decode_record(record_words, rotation_order)
            frame.add(BoneFrameEntry(
                bone_id=bone_id,
                position=position,
                rotation=rotation,
                source_words=tuple(record_words),
            ))
        frames.append(frame)
    return frames


def encode_frames(frames: Sequence[Frame], frames_count: int, bone_ids: Sequence[int],
                  rotation_order: RotationOrder = RotationOrder.XYZW) -> bytes:
    """
    Encode frames_count frames in bone-table order.

    A bone with no entry in a frame, or a frame index past the end of
    frames, is written as rest pose. This never fails on missing data.
    Entries whose values were not changed since decoding are written back
    with their source words.
    """
    bones_count = len(bone_ids)
    if frames_count * bones_count == 0:
        return b""

    words = np.empty((frames_count, bones_count, WORDS_PER_RECORD), dtype=RECORD_DTYPE)
    for f in range(frames_count):
        frame = frames[f] if f < len(frames) else None
        for b, bone_id in enumerate(bone_ids):
            entry = frame.get(bone_id) if frame is not None else None
            if entry is None:
                entry = BoneFrameEntry.rest_pose(bone_id)

            if _unchanged(entry, rotation_order):
                words[f, b] = entry.source_words
                continue

            pos = entry.position
            rot = entry.rotation
            v0, v1, v2 = compress_quaternion(*rotation_order.from_xyzw(rot.x, rot.y, rot.z, rot.w))
            words[f, b] = (
                float_to_half(pos.x), float_to_half(pos.y), float_to_half(pos.z),
                v0, v1, v2,
            )
    return words.tobytes()


def count_missing(frames: Sequence[Frame], frames_count: int, bone_ids: Sequence[int]) -> int:
    """Number of (frame, bone) slots that encode_frames fills with rest pose."""
    missing = 0
    for f in range(frames_count):
        if f >= len(frames):
            missing += len(bone_ids)
            continue
        missing += sum(1 for bone_id in bone_ids if bone_id not in frames[f])
    return missing
