"""
CSV export of decoded frames.

One row per (frame, bone):
bone_id,bone_name,frame_number,position_x,position_y,position_z,
rotation_x,rotation_y,rotation_z,rotation_w
"""

import csv
import io
import os
from typing import Iterator, List

from sf3anim.codec.animation import AnimationData
from sf3anim.skeleton import bone_name

CSV_COLUMNS = [
    'bone_id', 'bone_name', 'frame_number',
    'position_x', 'position_y', 'position_z',
    'rotation_x', 'rotation_y', 'rotation_z', 'rotation_w',
]


def csv_filename(source_file: str) -> str:
    """anim.bytes -> anim_extracted.csv"""
    stem, _ = os.path.splitext(os.path.basename(source_file))
    return f"{stem}_extracted.csv"


class CsvExporter:
    """Writes per-frame bone poses as CSV rows."""

    def __init__(self, precision: int = 6, frame_base: int = 1,
                 sort_by_bone_id: bool = True, logger=None):
        self.precision = precision
        self.frame_base = frame_base
        self.sort_by_bone_id = sort_by_bone_id
        self.logger = logger

    def _log(self, level: str, message: str):
        """Log a message if logger is available."""
        if self.logger:
            getattr(self.logger, level, self.logger.info)(message)

    def _fmt(self, value: float) -> str:
        return f"{value:.{self.precision}f}"

    def rows(self, animation: AnimationData) -> Iterator[List[str]]:
        """Yield data rows (without header)."""
        for index, frame in enumerate(animation.frames[:animation.frames_count]):
            entries = list(frame)
            if self.sort_by_bone_id:
                entries.sort(key=lambda e: e.bone_id)

            for entry in entries:
                pos = entry.position
                rot = entry.rotation
                yield [
                    str(entry.bone_id),
                    bone_name(entry.bone_id),
                    str(index + self.frame_base),
                    self._fmt(pos.x), self._fmt(pos.y), self._fmt(pos.z),
                    self._fmt(rot.x), self._fmt(rot.y), self._fmt(rot.z), self._fmt(rot.w),
                ]

    def write(self, animation: AnimationData, stream) -> int:
        """
        Write CSV to a text stream.

        Returns:
            Number of data rows written
        """
        writer = csv.writer(stream, lineterminator='\n')
        writer.writerow(CSV_COLUMNS)
        count = 0
        for row in self.rows(animation):
            writer.writerow(row)
            count += 1
        return count

    def to_string(self, animation: AnimationData) -> str:
        buffer = io.StringIO()
        self.write(animation, buffer)
        return buffer.getvalue()

    def save(self, animation: AnimationData, file_path: str) -> int:
        """Write CSV to file_path, returning the number of data rows."""
        with open(file_path, 'w', newline='') as f:
            count = self.write(animation, f)
        self._log('info', f"Exported {count} rows to {file_path}")
        return count
