"""Registry API client.

Public API:
    list_organizations(token, ...)           auth probe
    list_modules(token, identity, ...)       -> set[str]
    create_module(token, identity, ...)      -> dict
    create_module_version(token, version, ...) -> UploadTicket
    upload_module(ticket, archive_path, ...)
    get_module(token, identity, ...)         -> dict | None
"""

from tfc_publisher.registry.client import (
    create_module,
    create_module_version,
    get_module,
    list_modules,
    list_organizations,
    upload_module,
)
from tfc_publisher.registry.types import ModuleVersion, UploadTicket

__all__ = [
    "ModuleVersion",
    "UploadTicket",
    "create_module",
    "create_module_version",
    "get_module",
    "list_modules",
    "list_organizations",
    "upload_module",
]
