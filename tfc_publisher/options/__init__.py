"""Plugin options: typed config, sibling-plugin merge and validation.

Public API:
    PluginConfig.from_options(mapping) -> PluginConfig
    merge_plugin_config(local, sibling) -> PluginConfig
    find_sibling_config(host_options) -> PluginConfig | None
    verify_config(config) -> list[ConfigError]
"""

from tfc_publisher.options.types import (
    PluginConfig,
    find_sibling_config,
    merge_plugin_config,
)
from tfc_publisher.options.validator import verify_config

__all__ = [
    "PluginConfig",
    "find_sibling_config",
    "merge_plugin_config",
    "verify_config",
]
