"""Types describing the local package and its registry identity."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tfc_publisher.core.errors import (
    MissingOrganizationError,
    MissingProviderError,
    MissingVersionError,
)
from tfc_publisher.options.types import PluginConfig

PACKAGE_FILE = "package.json"

# Modules are always published to the organization's private registry
PRIVATE_REGISTRY = "private"


@dataclass(frozen=True)
class PackageDescriptor:
    """Fields read from package.json.

    name is always non-empty. version and provider may be None only when the
    descriptor was read for a run that skips publishing.
    """

    name: str
    version: Optional[str] = None
    provider: Optional[str] = None
    org_name: Optional[str] = None
    root: Path = Path(".")

    @property
    def path(self) -> Path:
        return self.root / PACKAGE_FILE

    @property
    def archive_name(self) -> str:
        return f"{self.name}-{self.version}.tgz"


@dataclass(frozen=True)
class ModuleIdentity:
    """Key that uniquely addresses a module in the registry.

    The namespace of a private-registry module is its organization.
    """

    organization: str
    name: str
    provider: str
    registry_name: str = PRIVATE_REGISTRY

    @property
    def namespace(self) -> str:
        return self.organization

    @classmethod
    def resolve(cls, descriptor: PackageDescriptor, config: PluginConfig) -> "ModuleIdentity":
        """Derive the identity; package.json's organization wins over config.

        Raises:
            MissingVersionError / MissingProviderError: the descriptor cannot
                be published.
            MissingOrganizationError: neither source names an organization.
        """
        if not descriptor.version:
            raise MissingVersionError(str(descriptor.path))
        if not descriptor.provider:
            raise MissingProviderError(str(descriptor.path))
        organization = descriptor.org_name or config.org_name
        if not organization:
            raise MissingOrganizationError(descriptor.name)
        return cls(
            organization=organization,
            name=descriptor.name,
            provider=descriptor.provider,
        )

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}/{self.provider}"

    def to_dict(self) -> dict:
        return {
            "organization": self.organization,
            "registry_name": self.registry_name,
            "namespace": self.namespace,
            "name": self.name,
            "provider": self.provider,
        }
