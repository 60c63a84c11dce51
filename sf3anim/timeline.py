"""
Frame sequence helpers.
"""

import copy

from sf3anim.codec.animation import AnimationData


def loop_frames(animation: AnimationData, frames_count: int) -> AnimationData:
    """
    Lengthen (or shorten) an animation by cycling its frames.

    Frame i of the result is a copy of frame i % len(frames). Bone table and
    trailing data are carried over unchanged, so a repack against the
    original descriptor tiles the footer to the new length.

    Args:
        animation: Source animation (not modified)
        frames_count: Number of frames in the result

    Returns:
        New AnimationData with frames_count frames
    """
    if frames_count < 0:
        raise ValueError(f"frames_count must be non-negative, got {frames_count}")
    if frames_count and not animation.frames:
        raise ValueError("Cannot loop an animation with no frames")

    source = animation.frames
    frames = [copy.deepcopy(source[i % len(source)]) for i in range(frames_count)]

    return AnimationData(
        bones_count=animation.bones_count,
        frames_count=frames_count,
        bone_ids=list(animation.bone_ids),
        frames=frames,
        trailing_data=animation.trailing_data,
    )
