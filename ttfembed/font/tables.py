"""
Parsers for the fixed-layout TrueType tables: ``head``, ``hhea``, ``maxp``,
``hmtx``, ``OS/2``, ``post`` and ``loca``.

Every parser takes a :class:`.FontParseContext`, seeks to its own table
and only reads the fields that are relevant for embedding purposes.
Fields that are not retained are skipped over.
"""

from dataclasses import dataclass
from typing import List

from ttfembed.font.directory import FontParseContext
from ttfembed.misc import BadMagicNumberError, MalformedTableError

__all__ = [
    'HEAD_MAGIC_NUMBER',
    'HeadTable', 'HheaTable', 'MaxpTable', 'OS2Table', 'PostTable',
    'parse_head', 'parse_hhea', 'parse_maxp', 'parse_hmtx', 'parse_os2',
    'parse_post', 'parse_loca',
]

HEAD_MAGIC_NUMBER = 0x5F0F3CF5

# fsType bits (OS/2 table)
FS_TYPE_RESTRICTED_LICENSE = 0x0002
FS_TYPE_BITMAP_ONLY = 0x0200

# fsSelection bits (OS/2 table)
FS_SELECTION_BOLD = 1 << 5


@dataclass(frozen=True)
class HeadTable:
    units_per_em: int
    x_min: int
    y_min: int
    x_max: int
    y_max: int

    index_to_loc_format: int
    """
    0 for short (16-bit, halved) ``loca`` offsets, anything else for long
    (32-bit) offsets.
    """

    @property
    def short_loca_index(self) -> bool:
        return self.index_to_loc_format == 0

    @property
    def bbox(self):
        return self.x_min, self.y_min, self.x_max, self.y_max


@dataclass(frozen=True)
class HheaTable:
    ascender: int
    descender: int
    number_of_hmetrics: int


@dataclass(frozen=True)
class MaxpTable:
    num_glyphs: int


@dataclass(frozen=True)
class OS2Table:
    version: int
    fs_type: int
    embeddable: bool
    bold: bool
    typo_ascender: int
    typo_descender: int
    typo_line_gap: int
    win_ascent: int
    win_descent: int

    x_height: int
    """
    The ``sxHeight`` value. Only present in version 2 and up; 0 otherwise.
    """

    cap_height: int
    """
    The ``sCapHeight`` value, or the ``hhea`` ascender for tables older than
    version 2.
    """


@dataclass(frozen=True)
class PostTable:
    italic_angle: int
    """Integer part of the italic angle, in degrees."""

    underline_position: int
    underline_thickness: int
    is_fixed_pitch: bool


def parse_head(ctx: FontParseContext) -> HeadTable:
    cursor = ctx.cursor
    ctx.seek_table('head')
    # version, fontRevision, checkSumAdjustment
    cursor.skip(12)
    magic_number = cursor.read_ulong()
    if magic_number != HEAD_MAGIC_NUMBER:
        raise BadMagicNumberError(
            f"Incorrect magic number {magic_number:#010x} in head table"
        )
    # flags
    cursor.skip(2)
    units_per_em = cursor.read_ushort()
    # created, modified
    cursor.skip(16)
    x_min = cursor.read_short()
    y_min = cursor.read_short()
    x_max = cursor.read_short()
    y_max = cursor.read_short()
    # macStyle, lowestRecPPEM, fontDirectionHint
    cursor.skip(6)
    index_to_loc_format = cursor.read_short()
    return HeadTable(
        units_per_em=units_per_em,
        x_min=x_min, y_min=y_min, x_max=x_max, y_max=y_max,
        index_to_loc_format=index_to_loc_format,
    )


def parse_hhea(ctx: FontParseContext) -> HheaTable:
    cursor = ctx.cursor
    ctx.seek_table('hhea')
    cursor.skip(4)
    ascender = cursor.read_short()
    descender = cursor.read_short()
    # lineGap up to and including metricDataFormat
    cursor.skip(26)
    number_of_hmetrics = cursor.read_ushort()
    return HheaTable(
        ascender=ascender, descender=descender,
        number_of_hmetrics=number_of_hmetrics,
    )


def parse_maxp(ctx: FontParseContext) -> MaxpTable:
    cursor = ctx.cursor
    ctx.seek_table('maxp')
    cursor.skip(4)
    return MaxpTable(num_glyphs=cursor.read_ushort())


def parse_hmtx(ctx: FontParseContext, hhea: HheaTable,
               maxp: MaxpTable) -> List[int]:
    """
    Read the advance widths of all glyphs in the font.

    The ``hmtx`` table only lists ``numberOfHMetrics`` explicit entries; all
    glyphs beyond that share the advance width of the last explicit entry.

    :return:
        A list of advance widths, indexed by glyph ID.
    :raises MalformedTableError:
        if the widths need padding, but there are no explicit entries.
    """
    cursor = ctx.cursor
    ctx.seek_table('hmtx')
    widths = []
    for _ in range(hhea.number_of_hmetrics):
        widths.append(cursor.read_ushort())
        # left side bearing
        cursor.skip(2)

    num_glyphs = maxp.num_glyphs
    if len(widths) < num_glyphs:
        if not widths:
            raise MalformedTableError(
                f"hmtx table has no metrics, but the font "
                f"has {num_glyphs} glyphs"
            )
        widths.extend([widths[-1]] * (num_glyphs - len(widths)))
    return widths


def parse_os2(ctx: FontParseContext, hhea: HheaTable) -> OS2Table:
    cursor = ctx.cursor
    ctx.seek_table('OS/2')
    version = cursor.read_ushort()
    # xAvgCharWidth, usWeightClass, usWidthClass
    cursor.skip(6)
    fs_type = cursor.read_ushort()
    embeddable = (
        fs_type != FS_TYPE_RESTRICTED_LICENSE
        and not (fs_type & FS_TYPE_BITMAP_ONLY)
    )
    # subscript/superscript/strikeout metrics and sFamilyClass (11 shorts),
    # panose (10), ulUnicodeRange1-4 (16), achVendID (4)
    cursor.skip(11 * 2 + 10 + 4 * 4 + 4)
    fs_selection = cursor.read_ushort()
    # usFirstCharIndex, usLastCharIndex
    cursor.skip(4)
    typo_ascender = cursor.read_short()
    typo_descender = cursor.read_short()
    typo_line_gap = cursor.read_short()
    win_ascent = cursor.read_ushort()
    win_descent = cursor.read_ushort()
    if version >= 2:
        # ulCodePageRange1-2
        cursor.skip(8)
        x_height = cursor.read_short()
        cap_height = cursor.read_short()
    else:
        x_height = 0
        cap_height = hhea.ascender
    return OS2Table(
        version=version,
        fs_type=fs_type,
        embeddable=embeddable,
        bold=bool(fs_selection & FS_SELECTION_BOLD),
        typo_ascender=typo_ascender,
        typo_descender=typo_descender,
        typo_line_gap=typo_line_gap,
        win_ascent=win_ascent,
        win_descent=win_descent,
        x_height=x_height,
        cap_height=cap_height,
    )


def parse_post(ctx: FontParseContext) -> PostTable:
    cursor = ctx.cursor
    ctx.seek_table('post')
    cursor.skip(4)
    italic_angle = cursor.read_short()
    # fractional part of the italic angle
    cursor.skip(2)
    underline_position = cursor.read_short()
    underline_thickness = cursor.read_short()
    is_fixed_pitch = cursor.read_ulong() != 0
    return PostTable(
        italic_angle=italic_angle,
        underline_position=underline_position,
        underline_thickness=underline_thickness,
        is_fixed_pitch=is_fixed_pitch,
    )


def parse_loca(ctx: FontParseContext, head: HeadTable) -> List[int]:
    """
    Read the glyph location index.

    :return:
        Byte offsets into the ``glyf`` table. Glyph ``i`` occupies the range
        between entries ``i`` and ``i + 1``.
    """
    cursor = ctx.cursor
    entry = ctx.seek_table('loca')
    if head.short_loca_index:
        # offsets are stored in 16-bit words
        return [cursor.read_ushort() * 2 for _ in range(entry.length // 2)]
    else:
        return [cursor.read_ulong() for _ in range(entry.length // 4)]
