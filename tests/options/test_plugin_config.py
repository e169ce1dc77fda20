"""Tests for PluginConfig construction and the sibling-plugin merge."""

from tfc_publisher.options.types import (
    SIBLING_PLUGIN,
    PluginConfig,
    find_sibling_config,
    merge_plugin_config,
)


class TestFromOptions:
    def test_maps_camel_case_keys(self):
        config = PluginConfig.from_options({
            "orgName": "acme",
            "publish": False,
            "tarballDir": "dist",
            "pkgRoot": "modules/vpc",
        })
        assert config == PluginConfig(org_name="acme", publish=False, tarball_dir="dist", pkg_root="modules/vpc")

    def test_none_and_unknown_keys(self):
        assert PluginConfig.from_options(None) == PluginConfig()
        assert PluginConfig.from_options({"registry": "x"}) == PluginConfig()

    def test_values_are_not_coerced(self):
        assert PluginConfig.from_options({"publish": "false"}).publish == "false"

    def test_publish_enabled_unless_explicitly_false(self):
        assert PluginConfig().publish_enabled
        assert PluginConfig(publish=True).publish_enabled
        assert not PluginConfig(publish=False).publish_enabled

    def test_to_options_drops_unset_fields(self):
        assert PluginConfig(org_name="acme").to_options() == {"orgName": "acme"}


class TestMerge:
    def test_local_wins_over_sibling(self):
        local = PluginConfig(tarball_dir="local-dist")
        sibling = PluginConfig(tarball_dir="npm-dist", pkg_root="pkg")
        merged = merge_plugin_config(local, sibling)
        assert merged.tarball_dir == "local-dist"
        assert merged.pkg_root == "pkg"

    def test_explicit_false_is_not_overridden(self):
        merged = merge_plugin_config(PluginConfig(publish=False), PluginConfig(publish=True))
        assert merged.publish is False

    def test_without_sibling_keeps_local(self):
        local = PluginConfig(org_name="acme")
        assert merge_plugin_config(local, None) == local


class TestFindSiblingConfig:
    def test_finds_sibling_in_publish_list(self):
        host = {"publish": ["@other/plugin", {"path": SIBLING_PLUGIN, "pkgRoot": "dist", "tarballDir": "out"}]}
        sibling = find_sibling_config(host)
        assert sibling == PluginConfig(pkg_root="dist", tarball_dir="out")

    def test_single_mapping_entry(self):
        host = {"publish": {"path": SIBLING_PLUGIN, "publish": False}}
        assert find_sibling_config(host).publish is False

    def test_bare_string_sibling_has_no_options(self):
        assert find_sibling_config({"publish": [SIBLING_PLUGIN]}) is None

    def test_missing_publish_entry(self):
        assert find_sibling_config({}) is None
        assert find_sibling_config(None) is None
