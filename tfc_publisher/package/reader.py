"""package.json reader for the module being published.

Only a handful of fields are needed: name, version, provider and an optional
organization override (`org_name`, or `orgName`).
"""

import json
import logging
from pathlib import Path
from typing import Optional

from tfc_publisher.core.errors import (
    InvalidPackageFileError,
    MissingNameError,
    MissingPackageFileError,
    MissingProviderError,
    MissingVersionError,
)
from tfc_publisher.package.types import PACKAGE_FILE, PackageDescriptor

logger = logging.getLogger(__name__)


def resolve_package_root(cwd: Path, pkg_root: Optional[str]) -> Path:
    """Return the directory holding package.json and the module sources."""
    cwd = Path(cwd)
    return (cwd / str(pkg_root)).resolve() if pkg_root else cwd.resolve()


def read_package(
    cwd: Path,
    pkg_root: Optional[str] = None,
    require_release: bool = True,
) -> PackageDescriptor:
    """Load and check package.json.

    Only `name` is always required. `version` and `provider` are required
    when `require_release` is set, i.e. when the run will publish.

    Raises:
        MissingPackageFileError: no package.json at the resolved root.
        InvalidPackageFileError: the file is not a JSON object.
        MissingNameError / MissingVersionError / MissingProviderError:
            a required field is absent or blank.
    """
    root = resolve_package_root(cwd, pkg_root)
    pkg_path = root / PACKAGE_FILE

    try:
        raw = pkg_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise MissingPackageFileError(str(pkg_path)) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidPackageFileError(str(pkg_path), str(exc)) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidPackageFileError(str(pkg_path), str(exc)) from exc

    if not isinstance(data, dict):
        raise InvalidPackageFileError(str(pkg_path), "top-level value must be an object")

    name = _string_field(data, "name")
    if not name:
        raise MissingNameError(str(pkg_path))

    version = _string_field(data, "version")
    if require_release and not version:
        raise MissingVersionError(str(pkg_path))

    provider = _string_field(data, "provider")
    if require_release and not provider:
        raise MissingProviderError(str(pkg_path))

    org_name = _string_field(data, "org_name") or _string_field(data, "orgName")

    logger.debug("Loaded %s: %s@%s (provider=%s)", pkg_path, name, version, provider)
    return PackageDescriptor(
        name=name,
        version=version,
        provider=provider,
        org_name=org_name,
        root=root,
    )


def _string_field(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None
