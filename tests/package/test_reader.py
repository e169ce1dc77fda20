"""Tests for the package.json reader."""

import pytest

from tfc_publisher.core.errors import (
    InvalidPackageFileError,
    MissingNameError,
    MissingPackageFileError,
    MissingProviderError,
    MissingVersionError,
)
from tfc_publisher.package.reader import read_package, resolve_package_root


def test_reads_required_fields(tmp_path, write_package):
    write_package(tmp_path, org_name="acme")
    descriptor = read_package(tmp_path)
    assert descriptor.name == "vpc-module"
    assert descriptor.version == "1.2.0"
    assert descriptor.provider == "aws"
    assert descriptor.org_name == "acme"
    assert descriptor.root == tmp_path.resolve()
    assert descriptor.archive_name == "vpc-module-1.2.0.tgz"


def test_camel_case_org_fallback(tmp_path, write_package):
    write_package(tmp_path, orgName="fallback")
    assert read_package(tmp_path).org_name == "fallback"


def test_org_name_optional(tmp_path, write_package):
    write_package(tmp_path)
    assert read_package(tmp_path).org_name is None


def test_pkg_root_is_relative_to_cwd(tmp_path, write_package):
    write_package(tmp_path / "modules" / "vpc", name="nested")
    descriptor = read_package(tmp_path, "modules/vpc")
    assert descriptor.name == "nested"
    assert descriptor.root == (tmp_path / "modules" / "vpc").resolve()


def test_resolve_package_root_defaults_to_cwd(tmp_path):
    assert resolve_package_root(tmp_path, None) == tmp_path.resolve()


def test_missing_file(tmp_path):
    with pytest.raises(MissingPackageFileError) as exc_info:
        read_package(tmp_path)
    assert exc_info.value.code == "ENOPKG"


def test_malformed_json(tmp_path):
    (tmp_path / "package.json").write_text("{not json")
    with pytest.raises(InvalidPackageFileError):
        read_package(tmp_path)


def test_non_object_json(tmp_path):
    (tmp_path / "package.json").write_text("[1, 2]")
    with pytest.raises(InvalidPackageFileError):
        read_package(tmp_path)


@pytest.mark.parametrize(
    "field, error",
    [
        ("name", MissingNameError),
        ("version", MissingVersionError),
        ("provider", MissingProviderError),
    ],
)
def test_required_field_missing(tmp_path, write_package, field, error):
    write_package(tmp_path, **{field: None})
    with pytest.raises(error):
        read_package(tmp_path)


def test_blank_name_is_missing(tmp_path, write_package):
    write_package(tmp_path, name="   ")
    with pytest.raises(MissingNameError):
        read_package(tmp_path)


def test_skip_run_only_requires_name(tmp_path, write_package):
    write_package(tmp_path, version=None, provider=None)
    descriptor = read_package(tmp_path, require_release=False)
    assert descriptor.name == "vpc-module"
    assert descriptor.version is None
    assert descriptor.provider is None


def test_skip_run_still_requires_name(tmp_path, write_package):
    write_package(tmp_path, name=None)
    with pytest.raises(MissingNameError):
        read_package(tmp_path, require_release=False)
