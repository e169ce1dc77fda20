"""Registry wire documents and client-side value types.

The registry speaks JSON:API. Only the fields the publisher reads are
modelled; everything else is ignored.
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tfc_publisher.package.types import ModuleIdentity


# ---------------------------------------------------------------------------
# Request documents
# ---------------------------------------------------------------------------

def module_document(identity: ModuleIdentity) -> dict:
    return {
        "data": {
            "type": "registry-modules",
            "attributes": {
                "name": identity.name,
                "provider": identity.provider,
                "registry-name": identity.registry_name,
                "no-code": True,
            },
        }
    }


def module_version_document(version: str, commit_sha: str) -> dict:
    return {
        "data": {
            "type": "registry-module-versions",
            "attributes": {
                "version": version,
                "commit-sha": commit_sha,
            },
        }
    }


# ---------------------------------------------------------------------------
# Response documents
# ---------------------------------------------------------------------------

class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ModuleAttributes(_Lenient):
    name: Optional[str] = None
    provider: Optional[str] = None


class ModuleResource(_Lenient):
    id: Optional[str] = None
    attributes: ModuleAttributes = Field(default_factory=ModuleAttributes)


class Pagination(_Lenient):
    current_page: Optional[int] = Field(default=None, alias="current-page")
    next_page: Optional[int] = Field(default=None, alias="next-page")
    total_count: Optional[int] = Field(default=None, alias="total-count")


class ListMeta(_Lenient):
    pagination: Optional[Pagination] = None


class ModuleListDocument(_Lenient):
    data: list[ModuleResource] = Field(default_factory=list)
    meta: Optional[ListMeta] = None

    @property
    def names(self) -> set[str]:
        return {item.attributes.name for item in self.data if item.attributes.name}

    @property
    def has_more(self) -> bool:
        return bool(self.meta and self.meta.pagination and self.meta.pagination.next_page)


class VersionLinks(_Lenient):
    upload: str


class VersionResource(_Lenient):
    id: Optional[str] = None
    links: VersionLinks


class ModuleVersionDocument(_Lenient):
    data: VersionResource


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModuleVersion:
    """One registered version of a module."""

    identity: ModuleIdentity
    version: str
    commit_sha: str


@dataclass
class UploadTicket:
    """One-time upload URL returned by version creation.

    consume() hands out the URL exactly once; the ticket is discarded after
    the upload and never persisted.
    """

    version: ModuleVersion
    url: str = field(repr=False)
    _consumed: bool = field(default=False, repr=False)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self) -> str:
        if self._consumed:
            raise RuntimeError(f"Upload ticket for {self.version.version} was already used")
        self._consumed = True
        return self.url
