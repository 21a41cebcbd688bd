"""
Builders for synthetic TrueType font data used throughout the test suite.

The byte-level builders produce exactly the table layouts described in the
OpenType specification, so that individual table parsers can be tested
against hand-picked values. :func:`fonttools_font` builds a realistic font
using fontTools' ``FontBuilder``, for cross-checking against an independent
implementation.
"""

import struct
from io import BytesIO
from typing import Dict, List, Optional, Sequence, Tuple

from ttfembed.font.cursor import BinaryCursor
from ttfembed.font.directory import FontParseContext

SFNT_VERSION = b'\x00\x01\x00\x00'


def _pad4(data: bytes) -> bytes:
    return data + b'\x00' * (-len(data) % 4)


def build_sfnt(tables: Dict[str, bytes], version: bytes = SFNT_VERSION,
               duplicate: Sequence[Tuple[str, bytes]] = ()) -> bytes:
    """
    Lay out an sfnt file with the given tables, in insertion order.
    Extra directory records for the ``duplicate`` entries are appended after
    the regular ones.
    """
    entries = list(tables.items()) + list(duplicate)
    num_tables = len(entries)
    header = version + struct.pack('>HHHH', num_tables, 0, 0, 0)
    offset = len(header) + 16 * num_tables
    records = []
    data = []
    for tag, table_data in entries:
        records.append(
            struct.pack(
                '>4sLLL', tag.encode('latin-1'), 0, offset, len(table_data)
            )
        )
        padded = _pad4(table_data)
        data.append(padded)
        offset += len(padded)
    return header + b''.join(records) + b''.join(data)


def context_for(tables: Dict[str, bytes]) -> FontParseContext:
    """Set up a parse context for a synthetic font with the given tables."""
    cursor = BinaryCursor(BytesIO(build_sfnt(tables)))
    return FontParseContext.from_cursor(cursor)


def head_table(units_per_em=1000, bbox=(-50, -200, 1050, 900),
               index_to_loc_format=0, magic=0x5F0F3CF5) -> bytes:
    x_min, y_min, x_max, y_max = bbox
    return struct.pack(
        '>LLLLHHqqhhhhHHhhh',
        0x00010000, 0x00010000, 0, magic, 0x000B, units_per_em, 0, 0,
        x_min, y_min, x_max, y_max, 0, 8, 2, index_to_loc_format, 0
    )


def hhea_table(ascender=800, descender=-200, number_of_hmetrics=2) -> bytes:
    return struct.pack(
        '>Lhh13hH', 0x00010000, ascender, descender,
        *([0] * 13), number_of_hmetrics
    )


def maxp_table(num_glyphs=4) -> bytes:
    return struct.pack('>LH', 0x00005000, num_glyphs)


def hmtx_table(metrics: Sequence[Tuple[int, int]], extra_lsbs=0) -> bytes:
    return b''.join(struct.pack('>Hh', adv, lsb) for adv, lsb in metrics) + \
        struct.pack('>%dh' % extra_lsbs, *([0] * extra_lsbs))


def os2_table(version=4, fs_type=0, fs_selection=0x40, typo_ascender=750,
              typo_descender=-250, typo_line_gap=100, win_ascent=900,
              win_descent=300, x_height=500, cap_height=700) -> bytes:
    result = struct.pack('>HhHHH', version, 500, 400, 5, fs_type)
    # subscript, superscript & strikeout metrics, family class, panose,
    # unicode ranges and vendor ID
    result += struct.pack('>11h', *range(1, 12))
    result += bytes(range(10)) + b'\xff' * 16 + b'TEST'
    result += struct.pack('>HHH', fs_selection, 0x20, 0x7e)
    result += struct.pack(
        '>hhhHH', typo_ascender, typo_descender, typo_line_gap,
        win_ascent, win_descent
    )
    if version >= 1:
        result += struct.pack('>LL', 1, 0)
    if version >= 2:
        result += struct.pack('>hhHHH', x_height, cap_height, 0, 0x20, 1)
    return result


def post_table(italic_angle=-12, underline_position=-100,
               underline_thickness=50, is_fixed_pitch=0) -> bytes:
    return struct.pack(
        '>LhHhhLLLLL', 0x00030000, italic_angle, 0x8000, underline_position,
        underline_thickness, is_fixed_pitch, 0, 0, 0, 0
    )


def name_table(records: Sequence[Tuple[int, int, int, int, bytes]]) -> bytes:
    """
    Build a format 0 ``name`` table.

    :param records:
        Tuples of (platformID, encodingID, languageID, nameID, raw bytes).
    """
    count = len(records)
    string_offset = 6 + 12 * count
    header = struct.pack('>HHH', 0, count, string_offset)
    storage = b''
    record_data = b''
    for platform_id, encoding_id, language_id, name_id, raw in records:
        record_data += struct.pack(
            '>HHHHHH', platform_id, encoding_id, language_id, name_id,
            len(raw), len(storage)
        )
        storage += raw
    return header + record_data + storage


def ps_name_table(name: str) -> bytes:
    return name_table([
        (1, 0, 0, 1, b'Family'),
        (3, 1, 0x409, 1, 'Family'.encode('utf-16be')),
        (3, 1, 0x409, 6, name.encode('utf-16be')),
    ])


def cmap_format4(segments: Sequence[Tuple[int, int, int, int]],
                 glyph_ids: Sequence[int] = (),
                 length: Optional[int] = None) -> bytes:
    """
    Build a format 4 ``cmap`` subtable.

    :param segments:
        Tuples of (startCode, endCode, idDelta, idRangeOffset). The sentinel
        segment is not added automatically.
    :param glyph_ids:
        Contents of the glyph index array.
    :param length:
        Override the subtable length field.
    """
    seg_count = len(segments)
    if length is None:
        length = 16 + 8 * seg_count + 2 * len(glyph_ids)
    starts = [s[0] for s in segments]
    ends = [s[1] for s in segments]
    deltas = [s[2] & 0xFFFF for s in segments]
    range_offsets = [s[3] for s in segments]
    arr = '>%dH' % seg_count
    return (
        struct.pack('>HHHHHHH', 4, length, 0, seg_count * 2, 0, 0, 0)
        + struct.pack(arr, *ends) + b'\x00\x00'
        + struct.pack(arr, *starts)
        + struct.pack(arr, *deltas)
        + struct.pack(arr, *range_offsets)
        + struct.pack('>%dH' % len(glyph_ids), *glyph_ids)
    )


def range_offset_for(seg_index: int, seg_count: int, glyph_id_index: int):
    """
    Compute the ``idRangeOffset`` value that makes segment ``seg_index``
    start at position ``glyph_id_index`` of the glyph index array.
    """
    return 2 * (seg_count - seg_index) + 2 * glyph_id_index


def cmap_table(subtables: Sequence[Tuple[int, int, bytes]]) -> bytes:
    """
    Build a ``cmap`` table.

    :param subtables:
        Tuples of (platformID, encodingID, subtable data).
    """
    header = struct.pack('>HH', 0, len(subtables))
    offset = 4 + 8 * len(subtables)
    records = b''
    data = b''
    for platform_id, encoding_id, subtable in subtables:
        records += struct.pack('>HHL', platform_id, encoding_id, offset)
        data += subtable
        offset += len(subtable)
    return header + records + data


SENTINEL_SEGMENT = (0xFFFF, 0xFFFF, 1, 0)


def simple_cmap(segments=((65, 67, -64, 0),)) -> bytes:
    return cmap_table([
        (3, 1, cmap_format4(list(segments) + [SENTINEL_SEGMENT]))
    ])


def loca_table(offsets: Sequence[int], short=True) -> bytes:
    if short:
        return struct.pack('>%dH' % len(offsets), *(o // 2 for o in offsets))
    return struct.pack('>%dL' % len(offsets), *offsets)


SAMPLE_GLYPH_OFFSETS = [0, 0, 12, 24, 36]


def sample_tables(**overrides) -> Dict[str, bytes]:
    """
    Tables of a complete, small synthetic font with four glyphs:
    ``.notdef`` and glyphs for 'A', 'B' and 'C'.
    Only the first two glyphs have explicit metrics.
    """
    tables = {
        'OS/2': os2_table(),
        'cmap': simple_cmap(),
        'glyf': b'\x00' * 36,
        'head': head_table(),
        'hhea': hhea_table(number_of_hmetrics=2),
        'hmtx': hmtx_table([(500, 0), (600, 50)], extra_lsbs=2),
        'maxp': maxp_table(4),
        'name': ps_name_table('Sample-Regular'),
        'post': post_table(),
        'loca': loca_table(SAMPLE_GLYPH_OFFSETS),
    }
    tables.update(overrides)
    return tables


def sample_font(**overrides) -> bytes:
    return build_sfnt(sample_tables(**overrides))


FONTTOOLS_ADVANCES = {
    '.notdef': 500,
    'space': 250,
    'A': 600,
    'B': 650,
    'C': 620,
    'a': 500,
    'b': 500,
}

FONTTOOLS_CMAP = {
    0x20: 'space',
    0x41: 'A',
    0x42: 'B',
    0x43: 'C',
    0x61: 'a',
    0x62: 'b',
    # out-of-order glyph assignments
    0x391: 'A',
    0x392: 'C',
    0x393: 'B',
}


def _box_glyph(width, height):
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, height))
    pen.lineTo((width - 50, height))
    pen.lineTo((width - 50, 0))
    pen.closePath()
    return pen.glyph()


def fonttools_font(ps_name='TTFEmbed-Regular', os2_values=None) -> bytes:
    """
    Build a TrueType font with fontTools.
    """
    from fontTools.fontBuilder import FontBuilder
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    glyph_order = list(FONTTOOLS_ADVANCES.keys())
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(FONTTOOLS_CMAP)
    glyphs = {
        name: (
            TTGlyphPen(None).glyph() if name == 'space'
            else _box_glyph(FONTTOOLS_ADVANCES[name], 700)
        )
        for name in glyph_order
    }
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(
        {name: (adv, 0) for name, adv in FONTTOOLS_ADVANCES.items()}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({
        'familyName': 'TTFEmbed Test',
        'styleName': 'Regular',
        'psName': ps_name,
    })
    values = dict(
        version=4, fsType=0, sTypoAscender=750, sTypoDescender=-250,
        sTypoLineGap=100, usWinAscent=900, usWinDescent=250,
        sxHeight=480, sCapHeight=700,
    )
    values.update(os2_values or {})
    fb.setupOS2(**values)
    fb.setupPost(underlinePosition=-100, underlineThickness=50)
    out = BytesIO()
    fb.save(out)
    return out.getvalue()


def glyph_names_to_ids(glyph_order: List[str]) -> Dict[str, int]:
    return {name: ix for ix, name in enumerate(glyph_order)}
