from .descriptor import FontProgramType, build_font_descriptor
from .settings import FontParseSettings, SymbolicDetection
from .truetype import FontMetrics, TrueTypeFont

__all__ = [
    'TrueTypeFont', 'FontMetrics', 'FontParseSettings', 'SymbolicDetection',
    'FontProgramType', 'build_font_descriptor',
]
