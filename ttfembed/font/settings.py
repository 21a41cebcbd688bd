import enum
from dataclasses import dataclass

from ttfembed.config.api import (
    ConfigurableMixin,
    process_bool,
    process_enum_value,
)

__all__ = ['SymbolicDetection', 'FontParseSettings', 'DEFAULT_PARSE_SETTINGS']


class SymbolicDetection(enum.Enum):
    """
    Policy for deciding whether a font is symbolic based on its ``cmap``
    subtable records.
    """

    LEGACY = 'legacy'
    """
    Only the Microsoft Unicode BMP subtable ``(3, 1)`` is considered, and the
    font is never flagged as symbolic. This reproduces the output of earlier
    releases.
    """

    MICROSOFT_SYMBOL = 'microsoft-symbol'
    """
    A Microsoft Symbol subtable ``(3, 0)`` flags the font as symbolic. If the
    font has no ``(3, 1)`` subtable, the symbol subtable is used to build the
    character map instead.
    """


@dataclass(frozen=True)
class FontParseSettings(ConfigurableMixin):
    """
    Tunable behaviour of the TrueType parser.
    """

    symbolic_detection: SymbolicDetection = SymbolicDetection.LEGACY
    """
    How to decide whether a font is symbolic.
    """

    descender_follows_hhea_sign: bool = False
    """
    If ``True``, the effective descender derived from ``usWinDescent`` takes
    the sign of the ``hhea`` descender (negative for almost all fonts).
    By default, the magnitude of ``usWinDescent`` is reported.
    """

    @classmethod
    def process_entries(cls, config_dict):
        super().process_entries(config_dict)
        try:
            config_dict['symbolic_detection'] = process_enum_value(
                SymbolicDetection, config_dict['symbolic_detection'],
                'symbolic-detection'
            )
        except KeyError:
            pass
        try:
            config_dict['descender_follows_hhea_sign'] = process_bool(
                config_dict['descender_follows_hhea_sign'],
                'descender-follows-hhea-sign'
            )
        except KeyError:
            pass


DEFAULT_PARSE_SETTINGS = FontParseSettings()
