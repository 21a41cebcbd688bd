from dataclasses import dataclass

import pytest

from ttfembed.config.api import ConfigurableMixin, check_config_keys
from ttfembed.config.errors import ConfigurationError
from ttfembed.config.loader import TTFEmbedConfig, load_config, parse_config
from ttfembed.font import FontParseSettings, SymbolicDetection
from ttfembed.font.settings import DEFAULT_PARSE_SETTINGS


def test_empty_config():
    config = parse_config('')
    assert config == TTFEmbedConfig()
    assert config.parse_settings == DEFAULT_PARSE_SETTINGS


def test_font_parsing_config():
    config = parse_config(
        """
        font-parsing:
            symbolic-detection: microsoft-symbol
            descender-follows-hhea-sign: true
        """
    )
    assert config.parse_settings == FontParseSettings(
        symbolic_detection=SymbolicDetection.MICROSOFT_SYMBOL,
        descender_follows_hhea_sign=True,
    )


def test_font_parsing_enum_case_insensitive():
    config = parse_config(
        """
        font-parsing:
            symbolic-detection: LEGACY
        """
    )
    assert config.parse_settings.symbolic_detection \
        == SymbolicDetection.LEGACY


def test_font_parsing_empty_section():
    config = parse_config("font-parsing:\n")
    assert config.parse_settings == DEFAULT_PARSE_SETTINGS


@pytest.mark.parametrize('config_str, err', [
    ("font-parsing:\n    symbolic-detection: maybe\n", 'not a valid'),
    ("font-parsing:\n    symbolic-detection: 3\n", 'not a string'),
    ("font-parsing:\n    descender-follows-hhea-sign: 'yes'\n",
     'must be a boolean'),
    ("font-parsing:\n    foo: bar\n", 'Unexpected key'),
    ("font-parsing:\n    foo: bar\n    baz: 1\n", 'Unexpected keys'),
    ("font-parsing: 1\n", 'requires a dictionary'),
    ("fonts:\n    foo: bar\n", 'Unexpected key'),
    ("logging:\n    root-level: DEBUG\n", 'Unexpected key'),
    ("- a\n- b\n", 'requires a dictionary'),
])
def test_config_errors(config_str, err):
    with pytest.raises(ConfigurationError, match=err):
        parse_config(config_str)


def test_invalid_yaml():
    with pytest.raises(ConfigurationError, match='Failed to parse'):
        parse_config("font-parsing: [unclosed\n")


def test_load_config(tmp_path):
    config_file = tmp_path / 'ttfembed.yml'
    config_file.write_text(
        "font-parsing:\n    symbolic-detection: microsoft-symbol\n",
        encoding='utf-8'
    )
    config = load_config(config_file)
    assert config.parse_settings.symbolic_detection \
        == SymbolicDetection.MICROSOFT_SYMBOL


def test_settings_from_config_underscores():
    settings = FontParseSettings.from_config(
        {'descender-follows-hhea-sign': False}
    )
    assert settings == DEFAULT_PARSE_SETTINGS


def test_settings_from_config_enum_member():
    settings = FontParseSettings.from_config(
        {'symbolic-detection': SymbolicDetection.MICROSOFT_SYMBOL}
    )
    assert settings.symbolic_detection == SymbolicDetection.MICROSOFT_SYMBOL


@dataclass(frozen=True)
class RequiredKeySettings(ConfigurableMixin):
    font_path: str
    verbose: bool = False


def test_required_key_missing():
    with pytest.raises(ConfigurationError, match='Missing required key.*'
                                                 'font-path'):
        RequiredKeySettings.from_config({'verbose': True})


def test_required_key_present():
    result = RequiredKeySettings.from_config({'font-path': 'a.ttf'})
    assert result == RequiredKeySettings(font_path='a.ttf')


def test_check_config_keys_accepts_underscores():
    check_config_keys('Test', {'font_path'}, {'font-path': 'x'})
    check_config_keys('Test', {'font_path'}, {'font_path': 'x'})
