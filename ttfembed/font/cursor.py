"""
Low-level big-endian reading primitives for sfnt font programs.

All multi-byte quantities in TrueType fonts are stored in big-endian byte
order. The :class:`BinaryCursor` wraps a seekable binary stream and turns every
premature end-of-data condition into a :class:`.ShortReadError`, so that
truncated input can never produce a silently wrong value.
"""

import os
from typing import BinaryIO

from ttfembed.misc import ShortReadError

__all__ = ['BinaryCursor']


class BinaryCursor:
    """
    Sequential reader over a seekable binary stream.

    :param stream:
        A readable, seekable binary file-like object.
    """

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, offset: int):
        """
        Move to an absolute offset. Seeking past the end of the data is
        allowed, but the next read will fail.
        """
        self.stream.seek(offset, os.SEEK_SET)

    def skip(self, length: int):
        self.stream.seek(length, os.SEEK_CUR)

    def read(self, length: int) -> bytes:
        """
        Read exactly ``length`` bytes.

        :raises ShortReadError:
            if fewer bytes are available.
        """
        if length == 0:
            return b''
        offset = self.stream.tell()
        data = self.stream.read(length)
        if len(data) != length:
            raise ShortReadError(length, len(data), offset=offset)
        return data

    def read_uint(self, width: int) -> int:
        """
        Read a big-endian unsigned integer.

        :param width:
            Width of the value in bytes; must be 2 or 4.
        """
        if width not in (2, 4):
            raise ValueError(f"Unsupported integer width {width}")
        return int.from_bytes(self.read(width), 'big')

    def read_ushort(self) -> int:
        return self.read_uint(2)

    def read_ulong(self) -> int:
        return self.read_uint(4)

    def read_short(self) -> int:
        raw = self.read_uint(2)
        return raw - 0x10000 if raw >= 0x8000 else raw

    def read_ushorts(self, count: int):
        return [self.read_ushort() for _ in range(count)]
