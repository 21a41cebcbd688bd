"""
Extraction of the PostScript name from the ``name`` table.
"""

import re

from ttfembed.font.directory import FontParseContext
from ttfembed.misc import PostScriptNameNotFoundError

__all__ = ['NAME_ID_POSTSCRIPT', 'sanitise_postscript_name', 'parse_name']

NAME_ID_POSTSCRIPT = 6

# PDF delimiters and whitespace aren't allowed in names without escaping
_FORBIDDEN_NAME_CHARS = re.compile(r'[ \[\](){}<>/%]')


def sanitise_postscript_name(raw: bytes) -> str:
    """
    Turn the raw bytes of a PostScript name record into a string that can be
    used as a PDF name.

    Zero bytes are dropped first, which collapses the UTF-16BE encoding
    used by Windows name records for ASCII names.
    """
    name = raw.replace(b'\x00', b'').decode('latin-1')
    return _FORBIDDEN_NAME_CHARS.sub('', name)


def parse_name(ctx: FontParseContext) -> str:
    """
    Read the PostScript name (name ID 6) of the font.

    :return:
        The sanitised PostScript name of the first matching record.
    :raises PostScriptNameNotFoundError:
        if there is no such record, or if it is empty after sanitisation.
    """
    cursor = ctx.cursor
    table_offset = ctx.seek_table('name').offset
    # format
    cursor.skip(2)
    count = cursor.read_ushort()
    string_offset = cursor.read_ushort()

    for _ in range(count):
        # platformID, encodingID, languageID
        cursor.skip(6)
        name_id = cursor.read_ushort()
        length = cursor.read_ushort()
        offset = cursor.read_ushort()
        if name_id != NAME_ID_POSTSCRIPT:
            continue
        cursor.seek(table_offset + string_offset + offset)
        ps_name = sanitise_postscript_name(cursor.read(length))
        if not ps_name:
            raise PostScriptNameNotFoundError(
                "PostScript name record is empty"
            )
        return ps_name

    raise PostScriptNameNotFoundError()
