"""
Decoding of the ``cmap`` table.

Only the Microsoft Unicode BMP subtable (platform 3, encoding 1) in format 4
(segment mapping to delta values) is supported. Format 4 subtables describe
the character map as a sorted list of codepoint segments, each with four
parallel attributes:

* ``endCode`` and ``startCode`` delimit the segment (inclusive),
* ``idDelta`` is added (modulo 65536) to the resolved glyph index,
* ``idRangeOffset`` is either 0, in which case the glyph index is computed
  from the codepoint directly, or the distance in bytes between the
  ``idRangeOffset`` entry itself and the segment's first slot in the
  ``glyphIdArray``.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from ttfembed.font.directory import FontParseContext
from ttfembed.font.settings import (
    DEFAULT_PARSE_SETTINGS,
    FontParseSettings,
    SymbolicDetection,
)
from ttfembed.misc import (
    MalformedTableError,
    NoUnicodeEncodingError,
    UnsupportedSubtableFormatError,
)

__all__ = ['CMapSubtable', 'parse_cmap']

logger = logging.getLogger(__name__)

PLATFORM_MICROSOFT = 3
ENCODING_MS_SYMBOL = 0
ENCODING_MS_UNICODE_BMP = 1

# format, length, language, segCountX2, searchRange, entrySelector,
# rangeShift, and the reservedPad word between endCode and startCode
FORMAT_4_HEADER_SIZE = 16

# codepoint that terminates every format 4 subtable
SENTINEL_CODEPOINT = 0xFFFF


@dataclass(frozen=True)
class CMapSubtable:
    """
    Decoded format 4 ``cmap`` subtable.
    """

    end_codes: List[int]
    start_codes: List[int]

    id_deltas: List[int]
    """Raw (unsigned) ``idDelta`` values."""

    id_range_offsets: List[int]
    glyph_id_array: List[int]

    chars: Dict[int, int] = field(default_factory=dict)
    """
    Unicode codepoint to glyph index map.
    Codepoints that map to the missing glyph are not included.
    """

    symbolic: bool = False

    @property
    def seg_count(self) -> int:
        return len(self.end_codes)


def _select_subtable(ctx: FontParseContext, settings: FontParseSettings):
    cursor = ctx.cursor
    # version
    cursor.skip(2)
    num_tables = cursor.read_ushort()

    # offset 0 means the subtable is absent
    unicode_offset = 0
    symbol_offset = 0
    for _ in range(num_tables):
        platform_id = cursor.read_ushort()
        encoding_id = cursor.read_ushort()
        offset = cursor.read_ulong()
        if platform_id != PLATFORM_MICROSOFT:
            continue
        if encoding_id == ENCODING_MS_UNICODE_BMP:
            unicode_offset = offset
        elif encoding_id == ENCODING_MS_SYMBOL:
            symbol_offset = offset

    if settings.symbolic_detection == SymbolicDetection.MICROSOFT_SYMBOL:
        symbolic = symbol_offset != 0
        if not unicode_offset:
            unicode_offset = symbol_offset
    else:
        symbolic = False

    if not unicode_offset:
        raise NoUnicodeEncodingError()
    return unicode_offset, symbolic


def parse_cmap(ctx: FontParseContext,
               settings: FontParseSettings = DEFAULT_PARSE_SETTINGS) \
        -> CMapSubtable:
    """
    Locate the Unicode subtable of the ``cmap`` table and decode it.

    :param ctx:
        The parse context.
    :param settings:
        Parser settings, used to determine the symbolic detection policy.
    :return:
        A :class:`.CMapSubtable`.
    :raises NoUnicodeEncodingError:
        if there is no suitable subtable.
    :raises UnsupportedSubtableFormatError:
        if the selected subtable is not in format 4.
    """
    cursor = ctx.cursor
    cmap_entry = ctx.seek_table('cmap')
    subtable_offset, symbolic = _select_subtable(ctx, settings)

    cursor.seek(cmap_entry.offset + subtable_offset)
    subtable_format = cursor.read_ushort()
    if subtable_format != 4:
        raise UnsupportedSubtableFormatError(subtable_format)

    length = cursor.read_ushort()
    # language
    cursor.skip(2)
    seg_count = cursor.read_ushort() // 2
    # searchRange, entrySelector, rangeShift
    cursor.skip(6)

    # whatever is left after the header and the four segment arrays
    # is the glyph index array
    glyph_count = (length - (FORMAT_4_HEADER_SIZE + 8 * seg_count)) // 2
    if glyph_count < 0:
        raise MalformedTableError(
            f"cmap subtable length {length} is too small to hold "
            f"{seg_count} segments"
        )

    end_codes = cursor.read_ushorts(seg_count)
    # reservedPad
    cursor.skip(2)
    start_codes = cursor.read_ushorts(seg_count)
    id_deltas = cursor.read_ushorts(seg_count)
    # idRangeOffset values are relative to their own position in the file
    id_range_offsets_pos = cursor.tell()
    id_range_offsets = cursor.read_ushorts(seg_count)
    glyph_id_array = cursor.read_ushorts(glyph_count)

    chars: Dict[int, int] = {}
    for i, (start, end, delta, range_offset) in enumerate(
        zip(start_codes, end_codes, id_deltas, id_range_offsets)
    ):
        if range_offset:
            # glyph slots for consecutive codepoints are consecutive words
            cursor.seek(id_range_offsets_pos + 2 * i + range_offset)
        for c in range(start, end + 1):
            if c == SENTINEL_CODEPOINT:
                break
            if range_offset:
                glyph_index = cursor.read_ushort()
                if glyph_index:
                    glyph_index = (glyph_index + delta) % 0x10000
            else:
                glyph_index = (c + delta) % 0x10000
            if glyph_index:
                chars[c] = glyph_index

    if not chars:
        logger.warning("Unicode cmap subtable does not map any characters")

    return CMapSubtable(
        end_codes=end_codes,
        start_codes=start_codes,
        id_deltas=id_deltas,
        id_range_offsets=id_range_offsets,
        glyph_id_array=glyph_id_array,
        chars=chars,
        symbolic=symbolic,
    )
