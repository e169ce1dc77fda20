"""Publish orchestrator: sequences one module release end to end.

Pipeline:
  1. publish disabled     -> skipped, no packaging and no network activity
  2. derive ModuleIdentity from package.json + plugin config
  3. compress_module()    -> {name}-{version}.tgz
  4. list_modules()       -> create_module() when the name is absent
  5. create_module_version() -> one-time UploadTicket
  6. upload_module()      -> archive streamed to the ticket URL
  7. get_module()         -> confirmation (None on 404, not a failure)

Steps are strictly sequential: each registry call needs the previous one's
result. Nothing is retried or rolled back. A failure after step 5 leaves a
version without an artifact in the registry; re-running will try to create
the same version again and the registry is expected to reject it.

Module creation is check-then-act and assumes a single publisher per
module name.

Every PublishError raised by steps 2-7 is wrapped in AggregatePublishError.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional, TextIO

from tfc_publisher.core.config import Settings
from tfc_publisher.core.errors import AggregatePublishError, PublishError
from tfc_publisher.core.logging import HostLogger, StructlogHostLogger
from tfc_publisher.options.types import PluginConfig
from tfc_publisher.package import archiver
from tfc_publisher.package.types import ModuleIdentity, PackageDescriptor
from tfc_publisher.publish.types import STATUS_PUBLISHED, STATUS_SKIPPED, PublishResult
from tfc_publisher.registry import client as registry
from tfc_publisher.registry.types import ModuleVersion

logger = logging.getLogger(__name__)


def resolve_archive_path(cwd: Path, config: PluginConfig, descriptor: PackageDescriptor) -> Path:
    """Archive goes to cwd/tarballDir when configured, else cwd."""
    cwd = Path(cwd)
    directory = cwd / config.tarball_dir if config.tarball_dir else cwd
    return directory.resolve() / descriptor.archive_name


async def publish_module(
    config: PluginConfig,
    descriptor: PackageDescriptor,
    settings: Settings,
    cwd: Path,
    host_logger: Optional[HostLogger] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    env: Optional[Mapping[str, str]] = None,
) -> PublishResult:
    """Publish `descriptor` as a new module version.

    Returns:
        PublishResult with status "skipped" or "published".

    Raises:
        AggregatePublishError: any step failed; the underlying error (with
            status and body for registry failures) is its only entry.
    """
    host_logger = host_logger or StructlogHostLogger()
    release = f"{descriptor.name}@{descriptor.version}"
    token = settings.tfc_token
    registry_url = settings.tfc_registry_url
    timeout = settings.tfc_request_timeout

    if not config.publish_enabled:
        host_logger.log("Skip publishing to Terraform registry")
        return PublishResult(status=STATUS_SKIPPED, version=descriptor.version)

    try:
        identity = ModuleIdentity.resolve(descriptor, config)
        archive_path = resolve_archive_path(cwd, config, descriptor)

        host_logger.log(f"Compress module {release}")
        await archiver.compress_module(
            descriptor.root,
            archive_path,
            stdout=stdout,
            stderr=stderr,
            cwd=cwd,
            env=env,
        )

        existing = await registry.list_modules(token, identity, registry_url=registry_url, timeout=timeout)
        module_created = False
        if identity.name not in existing:
            host_logger.log(f'Module "{identity.name}" not found. Create module {identity}')
            await registry.create_module(token, identity, registry_url=registry_url, timeout=timeout)
            module_created = True

        host_logger.log(f"Create module version {release}")
        version = ModuleVersion(identity=identity, version=descriptor.version, commit_sha=settings.github_sha)
        ticket = await registry.create_module_version(token, version, registry_url=registry_url, timeout=timeout)

        host_logger.log(f"Uploading module {release}")
        await registry.upload_module(ticket, archive_path, timeout=timeout)

        host_logger.log(f"Published {release}")
        confirmation = await registry.get_module(token, identity, registry_url=registry_url, timeout=timeout)
    except PublishError as exc:
        logger.error("Publishing %s failed: %s", release, exc)
        raise AggregatePublishError([exc]) from exc

    if confirmation is None:
        logger.info("Version collection for %s not visible yet (404)", identity)

    return PublishResult(
        status=STATUS_PUBLISHED,
        version=descriptor.version,
        identity=identity,
        archive_path=archive_path,
        module_created=module_created,
        confirmation=confirmation,
    )
