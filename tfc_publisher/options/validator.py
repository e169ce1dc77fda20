"""Plugin option validation.

Collects one ConfigError per offending option so every problem is reported
at once. Never raises.
"""

from typing import Any, Callable

from tfc_publisher.core.errors import ConfigError
from tfc_publisher.options.types import OPTION_FIELDS, PluginConfig


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


# Host option key -> (predicate, expected description)
VALIDATORS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "publish": (_is_bool, "a boolean"),
    "orgName": (_is_non_empty_string, "a non-empty string"),
    "tarballDir": (_is_non_empty_string, "a non-empty string"),
    "pkgRoot": (_is_non_empty_string, "a non-empty string"),
}


def verify_config(config: PluginConfig) -> list[ConfigError]:
    """Return a ConfigError for every set option that fails its predicate."""
    errors: list[ConfigError] = []
    for option, field_name in OPTION_FIELDS.items():
        value = getattr(config, field_name)
        if value is None:
            continue
        predicate, expected = VALIDATORS[option]
        if not predicate(value):
            errors.append(ConfigError(option, value, expected))
    return errors
