"""
Tests for the animation reader

Signature scanning, header decoding, frame body decoding and the
decode error cases.
"""

import logging
import struct
import pytest
import sys
import os

# Add the parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from anim_builders import MAGIC, POSES, animation_file, body, header, normalize, record
from sf3anim.codec import (
    AnimationReader,
    CodecOptions,
    CorruptHeader,
    FormatError,
    RotationOrder,
    SignatureNotFound,
    Truncated,
    decode,
)
from sf3anim.codec.reader import locate_header, read_header

MAGIC_BYTES = struct.pack('<Q', MAGIC)


def frame_poses(frame):
    """Comparable view of a frame."""
    return {
        entry.bone_id: (entry.position.to_tuple(), entry.rotation.to_tuple())
        for entry in frame
    }


class TestLocateHeader:
    """Test signature scanning."""

    def test_signature_at_start(self):
        """Test a buffer that starts with the signature."""
        assert locate_header(MAGIC_BYTES + b"\x00" * 16) == 0

    def test_signature_after_prefix(self):
        """Test that leading unrelated bytes are skipped."""
        assert locate_header(bytes(range(37)) + MAGIC_BYTES) == 37

    def test_first_occurrence_wins(self):
        """Test that the earliest match is returned."""
        data = b"\x01" * 5 + MAGIC_BYTES + b"\x02" * 3 + MAGIC_BYTES
        assert locate_header(data) == 5

    def test_missing_signature(self):
        """Test buffers with no signature."""
        with pytest.raises(SignatureNotFound):
            locate_header(b"\x00" * 64)
        with pytest.raises(SignatureNotFound):
            locate_header(b"")
        with pytest.raises(SignatureNotFound):
            locate_header(MAGIC_BYTES[:7])

    def test_signature_not_aligned(self):
        """Test that every byte offset is a candidate."""
        data = b"\xff" * 3 + MAGIC_BYTES
        assert locate_header(data) == 3

    def test_scan_limit(self):
        """Test that a scan limit hides later signatures."""
        data = b"\x00" * 100 + MAGIC_BYTES
        assert locate_header(data) == 100
        assert locate_header(data, scan_limit=101) == 100
        with pytest.raises(SignatureNotFound):
            locate_header(data, scan_limit=100)

    def test_offset_zero_always_checked(self):
        """Test the offset-0 fallback with an empty scan range."""
        assert locate_header(MAGIC_BYTES + b"\x00" * 8, scan_limit=0) == 0


class TestReadHeader:
    """Test header decoding."""

    def test_descriptor_offsets(self):
        """Test that offsets account for the opaque words."""
        garbage = bytes(range(24))
        data = header(4, [1, 2, 3], garbage) + body(4, [1, 2, 3])

        d = read_header(data, 0)
        assert d.header_start == 0
        assert d.garbage_word_count == 3
        assert d.frames_count_offset == 8 + 2 + 24
        assert d.original_frames_count == 4
        assert d.bones_count == 3
        assert d.bone_ids == (1, 2, 3)
        assert d.header_end == 8 + 2 + 24 + 4 + 4 + 3 * 2
        assert d.frame_record_size == 36
        assert d.animation_data_end == d.header_end + 4 * 36

    def test_negative_bone_ids(self):
        """Test that bone ids are signed."""
        d = read_header(header(0, [-1, 300, -32768]), 0)
        assert d.bone_ids == (-1, 300, -32768)

    def test_negative_array_count(self):
        """Test that a negative array count is rejected."""
        data = MAGIC_BYTES + struct.pack('<h', -2) + b"\x00" * 32
        with pytest.raises(CorruptHeader):
            read_header(data, 0)

    def test_negative_counts(self):
        """Test that negative frame and bone counts are rejected."""
        data = MAGIC_BYTES + struct.pack('<hii', 0, -1, 1) + b"\x00" * 16
        with pytest.raises(CorruptHeader) as exc:
            read_header(data, 0)
        assert exc.value.field_name == "frames count"

        data = MAGIC_BYTES + struct.pack('<hii', 0, 1, -5) + b"\x00" * 16
        with pytest.raises(CorruptHeader):
            read_header(data, 0)

    def test_truncated_in_garbage(self):
        """Test a buffer that ends inside the opaque words."""
        data = MAGIC_BYTES + struct.pack('<h', 4) + b"\x00" * 10
        with pytest.raises(Truncated) as exc:
            read_header(data, 0)
        assert exc.value.offset == 10

    def test_truncated_in_bone_table(self):
        """Test a buffer that ends inside the bone table."""
        data = header(1, [1, 2, 3, 4])[:-3]
        with pytest.raises(Truncated) as exc:
            read_header(data, 0)
        assert exc.value.offset == 18

    def test_truncated_in_counts(self):
        """Test a buffer that ends inside the count fields."""
        data = MAGIC_BYTES + struct.pack('<h', 0) + b"\x01\x00"
        with pytest.raises(Truncated) as exc:
            read_header(data, 0)
        assert exc.value.offset == 10


class TestDecode:
    """Test full decoding."""

    def test_two_frames_one_bone(self):
        """Test a minimal file: two frames of bone 5."""
        data = (
            header(2, [5])
            + record((1.5, -2.0, 0.25), (0.0, 0.0, 0.0, 1.0))
            + record((0.0, 1.0, 2.0), (0.1, -0.3, 0.2, 0.9))
        )
        animation, descriptor = decode(data)

        assert animation.bones_count == 1
        assert animation.frames_count == 2
        assert animation.bone_ids == [5]
        assert len(animation.frames) == 2
        for frame in animation.frames:
            assert len(frame) == 1
            assert 5 in frame

        first = animation.frames[0].get(5)
        assert first.bone_id == 5
        assert first.position.to_tuple() == (1.5, -2.0, 0.25)
        assert first.rotation.to_tuple() == pytest.approx((0.0, 0.0, 0.0, 1.0), abs=1e-4)

        second = animation.frames[1].get(5)
        assert second.position.to_tuple() == (0.0, 1.0, 2.0)
        assert second.rotation.to_tuple() == pytest.approx(normalize((0.1, -0.3, 0.2, 0.9)), abs=2e-4)

        assert animation.trailing_data == b""
        assert descriptor.animation_data_end == len(data)

    def test_prefix_decodes_identically(self):
        """Test that a 37-byte prefix only shifts the descriptor."""
        bone_ids = [0, 4, 12]
        plain = animation_file(3, bone_ids, garbage=b"\x07" * 16, trailing=b"tail")
        prefixed = bytes(range(37)) + plain

        a0, d0 = decode(plain)
        a37, d37 = decode(prefixed)

        assert d0.header_start == 0
        assert d37.header_start == 37
        assert d37.header_end == d0.header_end + 37
        assert d37.frames_count_offset == d0.frames_count_offset + 37
        assert d37.animation_data_end == d0.animation_data_end + 37

        assert a37.bone_ids == a0.bone_ids
        assert a37.trailing_data == a0.trailing_data == b"tail"
        assert [frame_poses(f) for f in a37.frames] == [frame_poses(f) for f in a0.frames]

    def test_trailing_data_preserved(self):
        """Test that bytes after the body become trailing data."""
        trailing = bytes(range(200, 256)) * 3
        animation, descriptor = decode(animation_file(2, [1, 2], trailing=trailing))
        assert animation.trailing_data == trailing
        assert descriptor.animation_data_end == len(animation_file(2, [1, 2]))

    def test_frames_are_keyed_by_bone_id(self):
        """Test that entries are reachable by id regardless of table order."""
        bone_ids = [42, 3, 17]
        animation, _ = decode(animation_file(1, bone_ids))
        frame = animation.frames[0]

        for index, bone_id in enumerate(bone_ids):
            position, _ = POSES[index % len(POSES)]
            assert frame.get(bone_id).position.to_tuple() == position
        assert frame.get(99) is None

    def test_truncated_body(self):
        """Test that a short body reports the failing record offset."""
        data = animation_file(3, [1, 2])
        cut = data[:-20]
        with pytest.raises(Truncated) as exc:
            decode(cut)
        header_end = len(header(3, [1, 2]))
        # 3 * 2 records of 12 bytes; 52 bytes remain -> 4 whole records
        assert exc.value.offset == header_end + 4 * 12
        assert isinstance(exc.value, FormatError)

    def test_zero_frames(self):
        """Test an animation with no frames."""
        animation, descriptor = decode(header(0, [1, 2, 3]) + b"footer")
        assert animation.frames == []
        assert animation.trailing_data == b"footer"
        assert descriptor.animation_data_end == descriptor.header_end

    def test_zero_bones(self):
        """Test frames with an empty skeleton."""
        animation, _ = decode(header(3, []))
        assert len(animation.frames) == 3
        assert all(len(frame) == 0 for frame in animation.frames)

    def test_wxyz_rotation_order(self):
        """Test that WXYZ reads slot 0 as w."""
        x, y, z, w = normalize((0.1, -0.3, 0.2, 0.9))
        data = header(1, [7]) + record((0.0, 0.0, 0.0), (w, x, y, z))

        wxyz, _ = decode(data, CodecOptions(rotation_order=RotationOrder.WXYZ))
        assert wxyz.frames[0].get(7).rotation.to_tuple() == pytest.approx((x, y, z, w), abs=2e-4)

        xyzw, _ = decode(data)
        assert xyzw.frames[0].get(7).rotation.to_tuple() == pytest.approx((w, x, y, z), abs=2e-4)

    def test_scan_limit_option(self):
        """Test that the scan limit option reaches the locator."""
        data = b"\x00" * 2000 + animation_file(1, [1])
        decode(data)
        with pytest.raises(SignatureNotFound):
            decode(data, CodecOptions(scan_limit=1024))


class TestAnimationReader:
    """Test the reader class."""

    def test_load_file(self, tmp_path):
        """Test loading from disk."""
        path = tmp_path / "anim.bytes"
        path.write_bytes(animation_file(2, [1, 2, 3], trailing=b"xyz"))

        animation, descriptor = AnimationReader().load(str(path))
        assert animation.frames_count == 2
        assert animation.bone_ids == [1, 2, 3]
        assert animation.trailing_data == b"xyz"

    def test_load_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            AnimationReader().load(str(tmp_path / "nope.bytes"))

    def test_reader_keeps_no_state(self):
        """Test that one reader decodes unrelated files independently."""
        reader = AnimationReader()
        a1, d1 = reader.load_bytes(animation_file(2, [1, 2]))
        a2, d2 = reader.load_bytes(b"\x00" * 5 + animation_file(4, [9]))

        assert d1.bone_ids == (1, 2)
        assert d2.bone_ids == (9,)
        assert d2.header_start == 5
        assert a1.frames_count == 2

    def test_logging(self, caplog):
        """Test that decoding logs counts through the given logger."""
        logger = logging.getLogger("test.sf3anim.reader")
        with caplog.at_level(logging.INFO, logger="test.sf3anim.reader"):
            AnimationReader(logger=logger).load_bytes(b"\x00" * 3 + animation_file(2, [1], trailing=b"ab"), "x.bytes")

        messages = [r.getMessage() for r in caplog.records]
        assert any("signature at offset 3" in m for m in messages)
        assert any("2 frames, 1 bones" in m for m in messages)
        assert any("2 trailing bytes" in m for m in messages)
