"""
Rendering of PDF font descriptors for parsed TrueType fonts.

This module doesn't manage PDF objects; the caller supplies an indirect
reference (e.g. ``b'12 0 R'``) to the stream object that will hold the
embedded font program, and is responsible for writing the stream itself.
"""

import enum
import logging
from typing import List, Tuple

from ttfembed.font.truetype import TrueTypeFont

__all__ = [
    'FontProgramType', 'descriptor_entries', 'build_font_descriptor',
    'font_file_stream_dict', 'DEFAULT_STEMV',
]

logger = logging.getLogger(__name__)

DEFAULT_STEMV = 80
"""
Dominant vertical stem width. TrueType fonts don't record this value, so
we fall back to a reasonable approximation.
"""


class FontProgramType(enum.Enum):
    """
    Kinds of font programs, along with the font descriptor key under which
    the embedded program is referenced.
    """

    TYPE1 = '/FontFile'
    TRUETYPE = '/FontFile2'

    @property
    def descriptor_key(self) -> str:
        return self.value


def _num(value) -> str:
    return '%d' % value


def _pdf_name(name: str) -> str:
    # characters outside the printable ASCII range must be hex-escaped
    return ''.join(
        c if 0x21 <= ord(c) <= 0x7e and c != '#' else '#%02X' % ord(c)
        for c in name
    )


def descriptor_entries(font: TrueTypeFont) -> List[Tuple[str, str]]:
    """
    Compute the metric entries of a font descriptor, in PDF syntax.
    All values are expressed in font units, as the original font program
    defines them.

    :param font:
        A parsed TrueType font.
    :return:
        A list of (key, value) pairs.
    """
    metrics = font.metrics
    bbox = ' '.join(_num(x) for x in metrics.bbox)
    entries = [
        ('/Ascent', _num(metrics.effective_ascender)),
        ('/Descent', _num(metrics.effective_descender)),
        ('/CapHeight', _num(metrics.cap_height)),
        ('/Flags', _num(metrics.flags)),
        ('/FontBBox', f'[{bbox}]'),
        ('/ItalicAngle', _num(metrics.italic_angle)),
        ('/StemV', _num(DEFAULT_STEMV)),
        ('/XHeight', _num(metrics.x_height)),
    ]
    if font.widths:
        entries.append(('/MissingWidth', _num(font.advance_width(0))))
    return entries


def build_font_descriptor(font: TrueTypeFont, font_file_ref: bytes,
                          program_type: FontProgramType =
                          FontProgramType.TRUETYPE) -> bytes:
    """
    Render a ``/FontDescriptor`` dictionary for a font.

    :param font:
        A parsed TrueType font.
    :param font_file_ref:
        Reference to the stream containing the embedded font program,
        e.g. ``b'12 0 R'``.
    :param program_type:
        The type of the embedded font program. This determines the key
        used to reference the font file.
    :return:
        The dictionary, followed by a newline.
    """
    if not font.metrics.embeddable:
        logger.warning(
            "The license of font %s does not permit embedding",
            font.postscript_name
        )
    parts = [
        '<</Type /FontDescriptor',
        f'/FontName /{_pdf_name(font.postscript_name)}',
    ]
    parts.extend(f'{key} {value}' for key, value in descriptor_entries(font))
    parts.append(program_type.descriptor_key)
    header = ' '.join(parts).encode('ascii') + b' '
    return header + font_file_ref + b'>>\n'


def font_file_stream_dict(font: TrueTypeFont,
                          program_type: FontProgramType =
                          FontProgramType.TRUETYPE) -> bytes:
    """
    Render the stream dictionary of an uncompressed embedded font program.
    """
    length = len(font.font_bytes)
    if program_type == FontProgramType.TRUETYPE:
        return b'<</Length %d /Length1 %d>>' % (length, length)
    return b'<</Length %d>>' % length
