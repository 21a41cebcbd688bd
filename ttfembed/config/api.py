"""
Utilities for populating dataclasses from user-provided configuration
(e.g. a YAML file).

.. note::
    Configuration keys use hyphens, which are converted to underscores
    before they are matched against dataclass fields.
"""

import dataclasses
import enum
from typing import Type, TypeVar

from ttfembed.config.errors import ConfigurationError

__all__ = [
    'ConfigurableMixin', 'check_config_keys', 'enforce_required_keys',
    'process_enum_value', 'process_bool',
]

E = TypeVar('E', bound=enum.Enum)


def _has_default(f: dataclasses.Field):
    return (
        f.default_factory is not dataclasses.MISSING
        or f.default is not dataclasses.MISSING
    )


def _plural(word, items):
    return word if len(items) == 1 else word + 's'


@dataclasses.dataclass(frozen=True)
class ConfigurableMixin:
    """Configuration mixin for settings dataclasses."""

    @classmethod
    def process_entries(cls, config_dict):
        """
        Hook to convert raw configuration values into the types the
        dataclass expects. Subclasses should call ``super().process_entries()``
        and only touch the keys they know about.

        :param config_dict:
            Configuration values, with underscores in key names.
        :raises ConfigurationError:
            if a value is invalid.
        """
        pass

    @classmethod
    def from_config(cls, config_dict):
        """
        Instantiate the class from a configuration dictionary.

        :param config_dict:
            A dictionary containing configuration values.
        :return:
            An instance of the class on which it is called.
        :raises ConfigurationError:
            if a key is unexpected or missing, or a value is invalid.
        """
        field_names = {f.name for f in dataclasses.fields(cls)}
        check_config_keys(cls.__name__, field_names, config_dict)
        config_dict = {
            key.replace('-', '_'): v for key, v in config_dict.items()
        }
        cls.process_entries(config_dict)
        enforce_required_keys(
            cls.__name__,
            {f.name for f in dataclasses.fields(cls) if not _has_default(f)},
            config_dict
        )
        return cls(**config_dict)


def _dashed(keys):
    return {key.replace('_', '-') for key in keys}


def check_config_keys(config_name, expected_keys, config_dict):
    """
    Make sure ``config_dict`` is a dictionary that only contains keys
    from ``expected_keys``.
    Required keys are checked separately by :func:`enforce_required_keys`.
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"{config_name} requires a dictionary to initialise."
        )
    unexpected = _dashed(config_dict.keys()) - _dashed(expected_keys)
    if unexpected:
        raise ConfigurationError(
            f"Unexpected {_plural('key', unexpected)} in configuration "
            f"for {config_name}: {', '.join(sorted(unexpected))}."
        )


def enforce_required_keys(config_name, required_keys, config_dict):
    missing = _dashed(required_keys) - _dashed(config_dict.keys())
    if missing:
        raise ConfigurationError(
            f"Missing required {_plural('key', missing)} in configuration "
            f"for {config_name}: {', '.join(sorted(missing))}."
        )


def process_enum_value(enum_class: Type[E], value, param_name) -> E:
    """
    Translate a configuration value into a member of an enum whose values
    are strings. Matching is case-insensitive.
    """
    if isinstance(value, enum_class):
        return value
    if not isinstance(value, str):
        raise ConfigurationError(
            f"Value '{repr(value)}' in '{param_name}' is not a string."
        )
    try:
        return enum_class(value.lower())
    except ValueError:
        valid_values = ', '.join(member.value for member in enum_class)
        raise ConfigurationError(
            f"'{value}' in '{param_name}' is not a valid "
            f"{enum_class.__name__}; expected one of {valid_values}."
        )


def process_bool(value, param_name) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"'{param_name}' must be a boolean, not {type(value).__name__}."
        )
    return value
