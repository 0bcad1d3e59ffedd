"""
Bounds-checked integer reads over an immutable byte buffer.

Every read returns ``None`` when ``offset + width`` runs past the end of the
buffer instead of raising, so callers can turn a truncated file into
"not found" with a plain ``is None`` check.
"""

import struct

_FORMATS = {
    (1, False): ">B", (1, True): "<B",
    (2, False): ">H", (2, True): "<H",
    (4, False): ">I", (4, True): "<I",
}


class ByteReader:
    __slots__ = ("_data",)

    def __init__(self, data):
        self._data = bytes(data)

    def in_bounds(self, offset, width):
        return offset >= 0 and width >= 0 and offset + width <= len(self._data)

    def _unpack(self, offset, width, little):
        if not self.in_bounds(offset, width):
            return None
        return struct.unpack_from(_FORMATS[(width, little)], self._data, offset)[0]

    def u8(self, offset):
        return self._unpack(offset, 1, False)

    def u16(self, offset, little=False):
        return self._unpack(offset, 2, little)

    def u32(self, offset, little=False):
        return self._unpack(offset, 4, little)

    def raw(self, offset, width):
        if not self.in_bounds(offset, width):
            return None
        return self._data[offset:offset + width]

    def tag(self, offset):
        """4-byte ASCII tag such as ``b"pHYs"`` decoded to ``str``."""
        b = self.raw(offset, 4)
        if b is None:
            return None
        try:
            return b.decode("ascii")
        except UnicodeDecodeError:
            return None

    def matches(self, offset, signature):
        return self.raw(offset, len(signature)) == signature
