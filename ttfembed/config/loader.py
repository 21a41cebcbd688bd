"""
Loading of ttfembed configuration from YAML.

Example::

    font-parsing:
        symbolic-detection: microsoft-symbol
        descender-follows-hhea-sign: true
"""

from dataclasses import dataclass

import yaml

from ttfembed.config.api import check_config_keys
from ttfembed.config.errors import ConfigurationError
from ttfembed.font.settings import DEFAULT_PARSE_SETTINGS, FontParseSettings

__all__ = ['TTFEmbedConfig', 'parse_config', 'load_config']


@dataclass(frozen=True)
class TTFEmbedConfig:
    parse_settings: FontParseSettings = DEFAULT_PARSE_SETTINGS
    """
    Settings for the TrueType parser.
    """


def process_config_dict(config_dict: dict) -> TTFEmbedConfig:
    check_config_keys('TTFEmbedConfig', ('font-parsing',), config_dict)
    parse_settings_dict = config_dict.get('font-parsing', None)
    if parse_settings_dict is None:
        return TTFEmbedConfig()
    return TTFEmbedConfig(
        parse_settings=FontParseSettings.from_config(parse_settings_dict)
    )


def parse_config(yaml_str) -> TTFEmbedConfig:
    """
    Parse a YAML configuration document.

    :param yaml_str:
        The YAML document, as a string or a text stream.
    :return:
        A :class:`TTFEmbedConfig`.
    :raises ConfigurationError:
        if the configuration is invalid.
    """
    try:
        config_dict = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse configuration: {e}") from e
    if config_dict is None:
        return TTFEmbedConfig()
    return process_config_dict(config_dict)


def load_config(path) -> TTFEmbedConfig:
    with open(path, 'r', encoding='utf-8') as inf:
        return parse_config(inf)
