"""Credential verification for the verify phase.

Surfaces a missing or rejected token before anything is packaged or
registered. The probe is a single read-only request and never mutates
registry state.
"""

import logging
from typing import Optional

from tfc_publisher.core.config import Settings
from tfc_publisher.core.errors import (
    HTTP_ERROR,
    AuthenticationError,
    MissingCommitShaError,
    MissingCredentialError,
    PublishError,
    RegistryError,
)
from tfc_publisher.core.logging import HostLogger
from tfc_publisher.registry import client as registry

logger = logging.getLogger(__name__)


def verify_environment(settings: Settings) -> list[PublishError]:
    """Return an error for each publish-time variable that is missing."""
    errors: list[PublishError] = []
    if not settings.tfc_token:
        errors.append(MissingCredentialError())
    if not settings.github_sha:
        errors.append(MissingCommitShaError())
    return errors


async def verify_auth(settings: Settings, host_logger: Optional[HostLogger] = None) -> None:
    """Confirm the registry accepts the configured token.

    Raises:
        MissingCredentialError: no token; no request is made.
        AuthenticationError: the registry rejected the token (status and
            body preserved).
        RegistryError: the probe never reached the registry.
    """
    if not settings.tfc_token:
        raise MissingCredentialError()

    if host_logger is not None:
        host_logger.log(f"Verify authentication for {settings.tfc_registry_url}")

    try:
        await registry.list_organizations(
            settings.tfc_token,
            registry_url=settings.tfc_registry_url,
            timeout=settings.tfc_request_timeout,
        )
    except RegistryError as exc:
        if exc.code == HTTP_ERROR and exc.status is not None:
            logger.warning("Registry rejected token with status %d", exc.status)
            raise AuthenticationError(exc.status, exc.body) from exc
        raise

    if host_logger is not None:
        host_logger.log("Registry token verified")
