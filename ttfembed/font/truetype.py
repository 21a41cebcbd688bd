"""
Parsing of TrueType font programs for embedding purposes.

The :class:`TrueTypeFont` class is the main entry point of this package.
It reads the tables required to describe a font in a PDF font descriptor,
and caches the font program's raw bytes for embedding.

.. note::
    This parser doesn't decode glyph outlines; the ``loca`` table is only used
    to delimit per-glyph byte ranges in the ``glyf`` table.
"""

import logging
import os
from dataclasses import dataclass, field
from io import BytesIO
from types import MappingProxyType
from typing import BinaryIO, List, Mapping, Optional, Tuple, Union

from ttfembed.font.cmap import CMapSubtable, parse_cmap
from ttfembed.font.cursor import BinaryCursor
from ttfembed.font.directory import FontParseContext, TableDirectoryEntry
from ttfembed.font.name import parse_name
from ttfembed.font.settings import DEFAULT_PARSE_SETTINGS, FontParseSettings
from ttfembed.font.tables import (
    HeadTable,
    HheaTable,
    OS2Table,
    PostTable,
    parse_head,
    parse_hhea,
    parse_hmtx,
    parse_loca,
    parse_maxp,
    parse_os2,
    parse_post,
)

__all__ = [
    'FLAG_SYMBOLIC', 'FLAG_NONSYMBOLIC', 'FontSource',
    'FontMetrics', 'TrueTypeFont',
]

logger = logging.getLogger(__name__)

FLAG_SYMBOLIC = 1 << 2
"""Font descriptor flag for fonts with glyphs outside the Adobe standard
Latin character set."""

FLAG_NONSYMBOLIC = 1 << 5
"""Font descriptor flag for fonts using the Adobe standard Latin character
set."""

FontSource = Union[str, os.PathLike, bytes, BinaryIO]


@dataclass(frozen=True)
class FontMetrics:
    """
    Scalar font metrics collected from the ``head``, ``hhea``, ``OS/2``,
    ``post`` and ``cmap`` tables.
    """

    units_per_em: int

    x_min: int
    y_min: int
    x_max: int
    y_max: int

    ascender: int
    """Ascender according to the ``hhea`` table."""

    descender: int
    """Descender according to the ``hhea`` table."""

    os2_version: int
    typo_ascender: int
    typo_descender: int
    line_gap: int
    win_ascent: int
    win_descent: int
    cap_height: int

    sx_height: int
    """Raw x-height from the OS/2 table; 0 when not available."""

    italic_angle: int
    underline_position: int
    underline_thickness: int
    is_fixed_pitch: bool
    embeddable: bool
    bold: bool
    symbolic: bool

    descender_follows_hhea_sign: bool = field(default=False, compare=False)
    """
    Parser policy rather than a font metric: see
    :attr:`.FontParseSettings.descender_follows_hhea_sign`. Only affects
    :attr:`effective_descender`, and is ignored when comparing metrics.
    """

    @classmethod
    def from_tables(cls, head: HeadTable, hhea: HheaTable, os2: OS2Table,
                    post: PostTable, cmap: CMapSubtable,
                    settings: FontParseSettings = DEFAULT_PARSE_SETTINGS) \
            -> 'FontMetrics':
        return cls(
            units_per_em=head.units_per_em,
            x_min=head.x_min, y_min=head.y_min,
            x_max=head.x_max, y_max=head.y_max,
            ascender=hhea.ascender,
            descender=hhea.descender,
            os2_version=os2.version,
            typo_ascender=os2.typo_ascender,
            typo_descender=os2.typo_descender,
            line_gap=os2.typo_line_gap,
            win_ascent=os2.win_ascent,
            win_descent=os2.win_descent,
            cap_height=os2.cap_height,
            sx_height=os2.x_height,
            italic_angle=post.italic_angle,
            underline_position=post.underline_position,
            underline_thickness=post.underline_thickness,
            is_fixed_pitch=post.is_fixed_pitch,
            embeddable=os2.embeddable,
            bold=os2.bold,
            symbolic=cmap.symbolic,
            descender_follows_hhea_sign=settings.descender_follows_hhea_sign,
        )

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        return self.x_min, self.y_min, self.x_max, self.y_max

    @property
    def effective_ascender(self) -> int:
        """
        The ``hhea`` ascender if the typographic ascender is not set,
        ``usWinAscent`` otherwise.
        """
        if self.typo_ascender == 0:
            return self.ascender
        return self.win_ascent

    @property
    def effective_descender(self) -> int:
        """
        The ``hhea`` descender if the typographic descender is not set,
        the magnitude of ``usWinDescent`` otherwise.

        If :attr:`descender_follows_hhea_sign` is set, the ``usWinDescent``
        value is negated whenever the ``hhea`` descender is negative.
        """
        if self.typo_descender == 0:
            return self.descender
        descender = abs(self.win_descent)
        if self.descender_follows_hhea_sign and self.descender < 0:
            descender = -descender
        return descender

    @property
    def x_height(self) -> int:
        if self.os2_version >= 2 and self.sx_height != 0:
            return self.sx_height
        return round(0.66 * self.ascender)

    @property
    def flags(self) -> int:
        return FLAG_SYMBOLIC if self.symbolic else FLAG_NONSYMBOLIC


class TrueTypeFont:
    """
    A parsed TrueType font program.

    Instances are normally created through :meth:`parse`. They are immutable
    after construction, and hold no reference to the source they were
    read from.
    """

    def __init__(self, *, postscript_name: str, metrics: FontMetrics,
                 widths: List[int], cmap_subtable: CMapSubtable,
                 glyph_locations: List[int],
                 tables: Mapping[str, TableDirectoryEntry],
                 num_glyphs: int, number_of_hmetrics: int,
                 font_bytes: bytes):
        self.postscript_name = postscript_name
        self.metrics = metrics
        self.cmap_subtable = cmap_subtable
        self.num_glyphs = num_glyphs
        self.number_of_hmetrics = number_of_hmetrics
        self._widths = tuple(widths)
        self._glyph_locations = tuple(glyph_locations)
        self._chars = MappingProxyType(cmap_subtable.chars)
        self._tables = tables
        self._font_bytes = font_bytes

    @classmethod
    def parse(cls, source: FontSource,
              settings: Optional[FontParseSettings] = None) -> 'TrueTypeFont':
        """
        Parse a TrueType font.

        :param source:
            Path to a font file, the font's bytes, or a readable and seekable
            binary stream.
            Files opened by this method are always closed before it returns.
            Streams passed in by the caller are left open.
        :param settings:
            Parser settings.
        :return:
            A :class:`TrueTypeFont`.
        :raises ttfembed.misc.FontReadError:
            if the font could not be parsed.
        """
        settings = settings or DEFAULT_PARSE_SETTINGS
        if isinstance(source, (bytes, bytearray, memoryview)):
            return cls._parse_stream(BytesIO(bytes(source)), settings)
        elif isinstance(source, (str, os.PathLike)):
            with open(source, 'rb') as inf:
                return cls._parse_stream(inf, settings)
        else:
            return cls._parse_stream(source, settings)

    @classmethod
    def _parse_stream(cls, stream: BinaryIO, settings: FontParseSettings) \
            -> 'TrueTypeFont':
        stream.seek(0)
        ctx = FontParseContext.from_cursor(BinaryCursor(stream))

        head = parse_head(ctx)
        hhea = parse_hhea(ctx)
        maxp = parse_maxp(ctx)
        widths = parse_hmtx(ctx, hhea, maxp)
        cmap = parse_cmap(ctx, settings)
        postscript_name = parse_name(ctx)
        os2 = parse_os2(ctx, hhea)
        post = parse_post(ctx)
        glyph_locations = parse_loca(ctx, head)

        stream.seek(0)
        font_bytes = stream.read()
        logger.debug(
            "Parsed TrueType font %s: %d glyphs, %d mapped characters, "
            "%d bytes", postscript_name, maxp.num_glyphs, len(cmap.chars),
            len(font_bytes)
        )
        return cls(
            postscript_name=postscript_name,
            metrics=FontMetrics.from_tables(
                head, hhea, os2, post, cmap, settings=settings
            ),
            widths=widths,
            cmap_subtable=cmap,
            glyph_locations=glyph_locations,
            tables=ctx.tables,
            num_glyphs=maxp.num_glyphs,
            number_of_hmetrics=hhea.number_of_hmetrics,
            font_bytes=font_bytes,
        )

    @property
    def tables(self) -> Mapping[str, TableDirectoryEntry]:
        return self._tables

    @property
    def widths(self) -> Tuple[int, ...]:
        """Advance widths in font units, indexed by glyph ID."""
        return self._widths

    @property
    def chars(self) -> Mapping[int, int]:
        """Unicode codepoint to glyph index map."""
        return self._chars

    @property
    def glyph_locations(self) -> Tuple[int, ...]:
        """Byte offsets of glyphs in the ``glyf`` table."""
        return self._glyph_locations

    @property
    def font_bytes(self) -> bytes:
        """The raw font program."""
        return self._font_bytes

    @property
    def units_per_em(self) -> int:
        return self.metrics.units_per_em

    @property
    def flags(self) -> int:
        return self.metrics.flags

    def glyph_index(self, codepoint: int) -> int:
        """
        Look up the glyph index of a Unicode codepoint.
        Unmapped codepoints resolve to 0, the missing glyph.
        """
        return self._chars.get(codepoint, 0)

    def advance_width(self, glyph_index: int) -> int:
        return self._widths[glyph_index]

    def glyph_byte_range(self, glyph_index: int) -> Tuple[int, int]:
        """
        Return the start and end offsets of a glyph's outline data,
        relative to the start of the ``glyf`` table.
        Glyphs without outlines have an empty range.
        """
        if not 0 <= glyph_index < len(self._glyph_locations) - 1:
            raise IndexError(f"Glyph index {glyph_index} out of range")
        return (
            self._glyph_locations[glyph_index],
            self._glyph_locations[glyph_index + 1],
        )

    def __repr__(self):
        return f"<TrueTypeFont: {self.postscript_name}>"
