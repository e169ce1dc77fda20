"""Registry API client for module publication.

Uses httpx for async HTTP calls, one client per operation. Every
authenticated call sends the bearer token; the artifact upload does not,
because its URL is pre-signed.

Each function performs exactly one request and never retries. Failures are
translated uniformly:
  - the request never reached the registry   -> RegistryError(NETWORKERROR)
  - the registry answered with a non-2xx code -> RegistryError(HTTPERROR)
    carrying the status and response body
  - a 2xx body missing documented fields      -> RegistryError(EINVALIDRESPONSE)

Operations:
1. list_organizations     GET  /api/v2/organizations (auth probe)
2. list_modules           GET  /api/v2/organizations/{org}/registry-modules
3. create_module          POST /api/v2/organizations/{org}/registry-modules
4. create_module_version  POST .../registry-modules/private/{ns}/{name}/{provider}/versions
5. upload_module          PUT  {upload-url}
6. get_module             GET  .../registry-modules/private/{ns}/{name}/{provider}/versions
"""

import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Optional, TypeVar

import aiofiles
import httpx
from pydantic import BaseModel

from tfc_publisher.core.config import DEFAULT_REGISTRY_URL, DEFAULT_REQUEST_TIMEOUT
from tfc_publisher.core.errors import INVALID_RESPONSE, PackagingError, RegistryError
from tfc_publisher.package.types import ModuleIdentity
from tfc_publisher.registry.types import (
    ModuleListDocument,
    ModuleVersion,
    ModuleVersionDocument,
    UploadTicket,
    module_document,
    module_version_document,
)

logger = logging.getLogger(__name__)

JSON_API_CONTENT_TYPE = "application/vnd.api+json"

# Server-side page size cap; results beyond the first page are not fetched
MODULE_PAGE_SIZE = 100

UPLOAD_CHUNK_SIZE = 64 * 1024

_Document = TypeVar("_Document", bound=BaseModel)


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def organizations_url(registry_url: str = DEFAULT_REGISTRY_URL) -> str:
    return f"{registry_url.rstrip('/')}/api/v2/organizations"


def modules_url(organization: str, registry_url: str = DEFAULT_REGISTRY_URL) -> str:
    return f"{organizations_url(registry_url)}/{organization}/registry-modules"


def module_versions_url(identity: ModuleIdentity, registry_url: str = DEFAULT_REGISTRY_URL) -> str:
    return (
        f"{modules_url(identity.organization, registry_url)}/{identity.registry_name}"
        f"/{identity.namespace}/{identity.name}/{identity.provider}/versions"
    )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

async def list_organizations(
    token: str,
    registry_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> dict:
    """Read-only probe used to confirm the token is accepted."""
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(
                organizations_url(registry_url),
                headers=_auth_headers(token),
            )
    except httpx.RequestError as exc:
        raise RegistryError.from_transport(exc) from exc

    _raise_for_status(response)
    return _json_body(response)


async def list_modules(
    token: str,
    identity: ModuleIdentity,
    registry_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> set[str]:
    """Return the names of registry modules matching the identity's filters.

    Only the first page (MODULE_PAGE_SIZE results) is read.
    """
    params = [
        ("q", identity.name),
        ("filter[provider]", identity.provider),
        ("filter[registry_name]", identity.registry_name),
        ("filter[organization_name]", identity.organization),
        ("page[size]", str(MODULE_PAGE_SIZE)),
    ]
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(
                modules_url(identity.organization, registry_url),
                headers=_auth_headers(token),
                params=params,
            )
    except httpx.RequestError as exc:
        raise RegistryError.from_transport(exc) from exc

    _raise_for_status(response)
    document = _parse(ModuleListDocument, response)
    if document.has_more:
        logger.warning(
            "Module lookup for %s returned more than %d results; only the first page was checked",
            identity, MODULE_PAGE_SIZE,
        )
    names = document.names
    logger.debug("Registry modules matching %s: %s", identity, sorted(names))
    return names


async def create_module(
    token: str,
    identity: ModuleIdentity,
    registry_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> dict:
    """Register a new no-code module in the private registry.

    Not idempotent: the caller checks list_modules() first.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                modules_url(identity.organization, registry_url),
                headers=_auth_headers(token),
                json=module_document(identity),
            )
    except httpx.RequestError as exc:
        raise RegistryError.from_transport(exc) from exc

    _raise_for_status(response)
    return _json_body(response)


async def create_module_version(
    token: str,
    version: ModuleVersion,
    registry_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> UploadTicket:
    """Register a module version and return its one-time upload ticket."""
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                module_versions_url(version.identity, registry_url),
                headers=_auth_headers(token),
                json=module_version_document(version.version, version.commit_sha),
            )
    except httpx.RequestError as exc:
        raise RegistryError.from_transport(exc) from exc

    _raise_for_status(response)
    document = _parse(ModuleVersionDocument, response)
    return UploadTicket(version=version, url=document.data.links.upload)


async def upload_module(
    ticket: UploadTicket,
    archive_path: Path,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> None:
    """Stream the archive to the ticket's pre-signed URL.

    Consumes the ticket. No Authorization header is sent.
    """
    archive_path = Path(archive_path)
    try:
        size = archive_path.stat().st_size
    except OSError as exc:
        raise PackagingError(f"Archive not found: {archive_path}") from exc

    url = ticket.consume()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.put(
                url,
                headers={
                    "Content-Type": "application/octet-stream",
                    "Content-Length": str(size),
                },
                content=_iter_file(archive_path),
            )
    except httpx.RequestError as exc:
        raise RegistryError.from_transport(exc) from exc

    _raise_for_status(response)
    logger.debug("Uploaded %s (%d bytes)", archive_path.name, size)


async def get_module(
    token: str,
    identity: ModuleIdentity,
    registry_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> Optional[dict]:
    """Fetch the module's version collection.

    Returns None on 404: the version may simply not be visible yet.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(
                module_versions_url(identity, registry_url),
                headers=_auth_headers(token),
            )
    except httpx.RequestError as exc:
        raise RegistryError.from_transport(exc) from exc

    if response.status_code == 404:
        return None
    _raise_for_status(response)
    return _json_body(response)


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _auth_headers(token: str) -> dict:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": JSON_API_CONTENT_TYPE,
    }


def _raise_for_status(response: httpx.Response) -> None:
    if 200 <= response.status_code < 300:
        return
    raise RegistryError.from_status(
        response.status_code,
        response.reason_phrase,
        response.text,
    )


def _json_body(response: httpx.Response) -> dict:
    if response.status_code == 204 or not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as exc:
        raise RegistryError(
            "Invalid registry response",
            INVALID_RESPONSE,
            f"Response status: {response.status_code}, {exc}",
            status=response.status_code,
            body=response.text,
        ) from exc
    return body if isinstance(body, dict) else {"data": body}


def _parse(model: type[_Document], response: httpx.Response) -> _Document:
    try:
        return model.model_validate(response.json())
    except ValueError as exc:
        raise RegistryError(
            "Invalid registry response",
            INVALID_RESPONSE,
            f"Response status: {response.status_code}, {exc}",
            status=response.status_code,
            body=response.text,
        ) from exc


async def _iter_file(path: Path) -> AsyncIterator[bytes]:
    async with aiofiles.open(path, "rb") as handle:
        while True:
            chunk = await handle.read(UPLOAD_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
