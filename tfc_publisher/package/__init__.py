"""Local package handling: descriptor loading, identity derivation, archiving.

Public API:
    read_package(cwd, pkg_root, require_release) -> PackageDescriptor
    ModuleIdentity.resolve(descriptor, config) -> ModuleIdentity
    compress_module(...) -> Path
"""

from tfc_publisher.package.archiver import compress_module
from tfc_publisher.package.reader import read_package
from tfc_publisher.package.types import ModuleIdentity, PackageDescriptor

__all__ = ["ModuleIdentity", "PackageDescriptor", "compress_module", "read_package"]
