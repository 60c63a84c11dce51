"""
Animation data structures.

AnimationData is the decoded, caller-owned value: bone table, frames and the
opaque bytes that followed the body. FormatDescriptor records where things
sit in the source buffer so the writer can rebuild a file around new frames.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

MAGIC = 457546134634734
MAGIC_SIZE = 8
ARRAY_COUNT_SIZE = 2
GARBAGE_WORD_SIZE = 8
COUNT_FIELD_SIZE = 4
BONE_ID_SIZE = 2
BONE_RECORD_SIZE = 12  # px, py, pz, v0, v1, v2 as u16


@dataclass
class Vector3:
    """3D vector for bone position."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'z': self.z}


@dataclass
class Quaternion:
    """Quaternion for bone rotation."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls) -> 'Quaternion':
        return cls(0.0, 0.0, 0.0, 1.0)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'z': self.z, 'w': self.w}

    def normalized(self) -> 'Quaternion':
        """Unit-length copy (identity for a zero quaternion)."""
        length = math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2 + self.w ** 2)
        if length == 0.0:
            return Quaternion.identity()
        return Quaternion(self.x / length, self.y / length, self.z / length, self.w / length)


@dataclass
class BoneFrameEntry:
    """
    Pose of one bone in one frame.

    source_words holds the six raw u16 of the record the entry was decoded
    from. The writer reuses them while position and rotation still match
    what they decode to.
    """
    bone_id: int
    position: Vector3 = field(default_factory=Vector3)
    rotation: Quaternion = field(default_factory=Quaternion)
    source_words: Optional[Tuple[int, ...]] = field(default=None, repr=False, compare=False)

    @classmethod
    def rest_pose(cls, bone_id: int) -> 'BoneFrameEntry':
        """Zero translation, identity rotation."""
        return cls(bone_id, Vector3(0.0, 0.0, 0.0), Quaternion.identity())

    def to_dict(self) -> Dict:
        return {
            'bone_id': self.bone_id,
            'position': self.position.to_dict(),
            'rotation': self.rotation.to_dict(),
        }


@dataclass
class Frame:
    """
    One animation frame, keyed by bone id.

    Entries may be sparse; a bone with no entry is written as rest pose.
    """
    bones: Dict[int, BoneFrameEntry] = field(default_factory=dict)

    @classmethod
    def from_entries(cls, entries) -> 'Frame':
        frame = cls()
        for entry in entries:
            frame.add(entry)
        return frame

    def add(self, entry: BoneFrameEntry):
        """Insert or replace the entry for entry.bone_id."""
        self.bones[entry.bone_id] = entry

    def get(self, bone_id: int) -> Optional[BoneFrameEntry]:
        return self.bones.get(bone_id)

    def remove(self, bone_id: int) -> Optional[BoneFrameEntry]:
        return self.bones.pop(bone_id, None)

    def __contains__(self, bone_id: int) -> bool:
        return bone_id in self.bones

    def __iter__(self) -> Iterator[BoneFrameEntry]:
        return iter(self.bones.values())

    def __len__(self) -> int:
        return len(self.bones)


@dataclass(frozen=True)
class FormatDescriptor:
    """
    Layout of a decoded source buffer.

    Produced by the reader, consumed unchanged by any number of repacks.
    Offsets are absolute positions in the source buffer.
    """
    header_start: int
    header_end: int
    garbage_word_count: int
    frames_count_offset: int
    original_frames_count: int
    bones_count: int
    bone_ids: Tuple[int, ...]

    @property
    def frame_record_size(self) -> int:
        """Bytes per frame (12 per bone)."""
        return self.bones_count * BONE_RECORD_SIZE

    @property
    def animation_data_end(self) -> int:
        """Offset just past the last original frame record."""
        return self.header_end + self.original_frames_count * self.frame_record_size

    def to_dict(self) -> Dict:
        return {
            'header_start': self.header_start,
            'header_end': self.header_end,
            'garbage_word_count': self.garbage_word_count,
            'frames_count_offset': self.frames_count_offset,
            'original_frames_count': self.original_frames_count,
            'bones_count': self.bones_count,
            'frame_record_size': self.frame_record_size,
            'animation_data_end': self.animation_data_end,
        }


@dataclass
class AnimationData:
    """
    A decoded skeletal animation.

    frames_count is the number of frames written on repack. It normally
    equals len(frames); frames past the end of the list are written as
    rest pose.
    """
    bones_count: int
    frames_count: int
    bone_ids: List[int] = field(default_factory=list)
    frames: List[Frame] = field(default_factory=list)
    # Bytes after the body; None means no footer on repack
    trailing_data: Optional[bytes] = None

    def get_frame(self, index: int) -> Optional[Frame]:
        if 0 <= index < len(self.frames):
            return self.frames[index]
        return None

    def replace_frames(self, frames: List[Frame]):
        """Swap in a new frame sequence and update frames_count."""
        self.frames = list(frames)
        self.frames_count = len(self.frames)

    def to_dict(self) -> Dict:
        """Summary for JSON serialization."""
        return {
            'bones_count': self.bones_count,
            'frames_count': self.frames_count,
            'bone_ids': list(self.bone_ids),
            'trailing_data_length': len(self.trailing_data) if self.trailing_data is not None else None,
        }
