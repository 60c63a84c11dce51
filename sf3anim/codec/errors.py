"""
Codec exceptions.

Every failure while decoding or repacking surfaces as a FormatError
subclass. Nothing is partially returned.
"""

from typing import Optional


class FormatError(Exception):
    """Base class for animation format errors."""
    pass


class SignatureNotFound(FormatError):
    """The magic signature does not occur in the buffer."""

    def __init__(self, scanned: int):
        self.scanned = scanned
        super().__init__(f"Animation signature not found (scanned {scanned} offsets)")


class Truncated(FormatError):
    """A read would run past the end of the buffer."""

    def __init__(self, offset: int, needed: int, available: int, what: str = "data"):
        self.offset = offset
        self.needed = needed
        self.available = available
        self.what = what
        super().__init__(
            f"Truncated {what} at offset {offset}: need {needed} bytes, "
            f"{available} available"
        )


class CorruptHeader(FormatError):
    """A header count is negative or otherwise unusable."""

    def __init__(self, field_name: str, value: int, offset: Optional[int] = None):
        self.field_name = field_name
        self.value = value
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"Invalid {field_name} {value}{where}")


class MissingBaseDescriptor(FormatError):
    """Repack was attempted without a decoded base file."""

    def __init__(self):
        super().__init__("No base animation loaded: decode an original file before repacking")
