"""
Reading the sfnt table directory.

The table directory follows the 12-byte offset subtable at the start of every
TrueType font, and lists the offset, length and checksum of every table
in the file.
"""

import logging
import types
from dataclasses import dataclass
from typing import Dict, Mapping

from ttfembed.font.cursor import BinaryCursor
from ttfembed.misc import TableNotFoundError, UnsupportedFormatError

__all__ = [
    'SFNT_VERSION_TRUETYPE', 'TableDirectoryEntry', 'FontParseContext',
    'read_table_directory',
]

logger = logging.getLogger(__name__)

SFNT_VERSION_TRUETYPE = b'\x00\x01\x00\x00'
"""
The sfnt version tag of TrueType-flavoured font programs.
"""


@dataclass(frozen=True)
class TableDirectoryEntry:
    offset: int
    """Offset of the table from the start of the font file."""

    length: int
    """Length of the table in bytes, without padding."""

    checksum: int


def read_table_directory(cursor: BinaryCursor) \
        -> Mapping[str, TableDirectoryEntry]:
    """
    Read the offset subtable and the table directory of a TrueType font.
    The cursor must be positioned at the start of the font.

    :param cursor:
        The cursor to read from.
    :return:
        A read-only mapping of table tags to directory entries.
    :raises UnsupportedFormatError:
        if the font does not start with the TrueType sfnt version tag.
    """
    version = cursor.read(4)
    if version != SFNT_VERSION_TRUETYPE:
        raise UnsupportedFormatError(
            f"Unrecognized font format; sfnt version tag is {version.hex()}"
        )
    num_tables = cursor.read_ushort()
    # searchRange, entrySelector, rangeShift
    cursor.skip(6)

    tables: Dict[str, TableDirectoryEntry] = {}
    for _ in range(num_tables):
        tag = cursor.read(4).decode('latin-1')
        checksum = cursor.read_ulong()
        offset = cursor.read_ulong()
        length = cursor.read_ulong()
        tables[tag] = TableDirectoryEntry(
            offset=offset, length=length, checksum=checksum
        )
    logger.debug(
        "Table directory lists %d tables: %s",
        num_tables, ', '.join(tables.keys())
    )
    return types.MappingProxyType(tables)


@dataclass(frozen=True)
class FontParseContext:
    """
    State shared by the table parsers while reading a single font: the cursor
    and the table directory that was read from the font header.
    """

    cursor: BinaryCursor
    tables: Mapping[str, TableDirectoryEntry]

    @classmethod
    def from_cursor(cls, cursor: BinaryCursor) -> 'FontParseContext':
        """
        Read the table directory at the cursor's current position and
        set up a parse context around it.
        """
        return cls(cursor=cursor, tables=read_table_directory(cursor))

    def table(self, tag: str) -> TableDirectoryEntry:
        try:
            return self.tables[tag]
        except KeyError:
            raise TableNotFoundError(tag)

    def seek_table(self, tag: str) -> TableDirectoryEntry:
        """
        Position the cursor at the start of the table with the given tag.

        :param tag:
            A four-character table tag, e.g. ``'head'`` or ``'OS/2'``.
        :return:
            The directory entry of the table.
        :raises TableNotFoundError:
            if the font has no such table.
        """
        entry = self.table(tag)
        self.cursor.seek(entry.offset)
        return entry
