"""
The exception hierarchy for ttfembed.
"""

import enum
from typing import Optional

__all__ = [
    'FontError', 'FontReadError', 'FontReadErrorKind',
    'TableNotFoundError', 'UnsupportedFormatError', 'BadMagicNumberError',
    'ShortReadError', 'NoUnicodeEncodingError',
    'UnsupportedSubtableFormatError', 'PostScriptNameNotFoundError',
    'MalformedTableError',
]


class FontReadErrorKind(enum.Enum):
    """
    Closed set of reasons why a font could not be read.
    """

    NOT_FOUND = enum.auto()
    """A required table is missing from the table directory."""

    UNSUPPORTED_FORMAT = enum.auto()
    """The file does not start with the TrueType sfnt version tag."""

    BAD_MAGIC_NUMBER = enum.auto()
    """The ``head`` table's magic number is wrong."""

    SHORT_READ = enum.auto()
    """The source ran out of bytes in the middle of a read."""

    NO_UNICODE_ENCODING = enum.auto()
    """The ``cmap`` table has no usable Microsoft Unicode subtable."""

    UNSUPPORTED_SUBTABLE_FORMAT = enum.auto()
    """The selected ``cmap`` subtable is not in format 4."""

    POSTSCRIPT_NAME_NOT_FOUND = enum.auto()
    """The ``name`` table has no PostScript name record."""

    MALFORMED_TABLE = enum.auto()
    """A table's contents are internally inconsistent."""


class FontError(Exception):

    def __init__(self, msg: str, *args):
        self.msg = msg
        super().__init__(msg, *args)


class FontReadError(FontError):
    """
    Error raised when a font program cannot be parsed.
    The :attr:`kind` attribute allows callers to branch on the failure reason
    without matching on subclasses.
    """

    kind: Optional[FontReadErrorKind] = None


class TableNotFoundError(FontReadError):
    kind = FontReadErrorKind.NOT_FOUND

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Font has no '{tag}' table")


class UnsupportedFormatError(FontReadError):
    kind = FontReadErrorKind.UNSUPPORTED_FORMAT


class BadMagicNumberError(FontReadError):
    kind = FontReadErrorKind.BAD_MAGIC_NUMBER


class ShortReadError(FontReadError):
    kind = FontReadErrorKind.SHORT_READ

    def __init__(self, expected: int, actual: int, offset: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(
            f"Expected {expected} bytes{where}, but only {actual} "
            f"were available"
        )


class NoUnicodeEncodingError(FontReadError):
    kind = FontReadErrorKind.NO_UNICODE_ENCODING

    def __init__(self, msg: Optional[str] = None):
        super().__init__(msg or "No Unicode encoding found in cmap table")


class UnsupportedSubtableFormatError(FontReadError):
    kind = FontReadErrorKind.UNSUPPORTED_SUBTABLE_FORMAT

    def __init__(self, subtable_format: int):
        self.subtable_format = subtable_format
        super().__init__(
            f"Unexpected cmap subtable format {subtable_format}; "
            f"only format 4 is supported"
        )


class PostScriptNameNotFoundError(FontReadError):
    kind = FontReadErrorKind.POSTSCRIPT_NAME_NOT_FOUND

    def __init__(self, msg: Optional[str] = None):
        super().__init__(msg or "PostScript name not found")


class MalformedTableError(FontReadError):
    kind = FontReadErrorKind.MALFORMED_TABLE

