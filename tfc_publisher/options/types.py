"""Typed plugin configuration.

The release host passes options as a camelCase mapping. Values are kept as
supplied (no coercion) so `verify_config()` can report bad shapes instead
of silently fixing them.
"""

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

# Host option key -> PluginConfig field
OPTION_FIELDS: dict[str, str] = {
    "orgName": "org_name",
    "publish": "publish",
    "tarballDir": "tarball_dir",
    "pkgRoot": "pkg_root",
}

# Field -> default applied when neither the local nor the sibling config sets it.
# Order is the precedence table's row order; None keeps "absent" semantics.
FIELD_DEFAULTS: dict[str, Any] = {
    "org_name": None,
    "publish": None,
    "tarball_dir": None,
    "pkg_root": None,
}

# Publish plugin whose options are inherited when ours leave a field unset
SIBLING_PLUGIN = "@semantic-release/npm"


@dataclass(frozen=True)
class PluginConfig:
    """Options controlling one publish run. None means "not set"."""

    org_name: Optional[str] = None
    publish: Optional[bool] = None
    tarball_dir: Optional[str] = None
    pkg_root: Optional[str] = None

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> "PluginConfig":
        """Build a config from host options, ignoring unknown keys."""
        options = options or {}
        values = {
            field_name: options[key]
            for key, field_name in OPTION_FIELDS.items()
            if key in options
        }
        return cls(**values)

    @property
    def publish_enabled(self) -> bool:
        return self.publish is not False

    def to_options(self) -> dict[str, Any]:
        return {
            key: getattr(self, field_name)
            for key, field_name in OPTION_FIELDS.items()
            if getattr(self, field_name) is not None
        }


def merge_plugin_config(local: PluginConfig, sibling: Optional[PluginConfig]) -> PluginConfig:
    """Fill unset local fields from the sibling config, then from defaults."""
    merged: dict[str, Any] = {}
    for field in fields(PluginConfig):
        value = getattr(local, field.name)
        if value is None and sibling is not None:
            value = getattr(sibling, field.name)
        if value is None:
            value = FIELD_DEFAULTS[field.name]
        merged[field.name] = value
    return replace(local, **merged)


def find_sibling_config(host_options: Optional[Mapping[str, Any]]) -> Optional[PluginConfig]:
    """Return the sibling publish plugin's config from the host's global options.

    The host's `publish` entry may be a single plugin or a list; each plugin
    is either a bare path string or a mapping with a `path` key.
    """
    if not host_options:
        return None

    plugins = host_options.get("publish")
    if plugins is None:
        return None
    if not isinstance(plugins, (list, tuple)):
        plugins = [plugins]

    for plugin in plugins:
        if isinstance(plugin, Mapping) and plugin.get("path") == SIBLING_PLUGIN:
            return PluginConfig.from_options(plugin)
    return None
