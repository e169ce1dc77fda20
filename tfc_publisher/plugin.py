"""Release-host lifecycle hooks: verify_conditions and publish.

The host calls verify_conditions() first, then publish() with the
PipelineState it got back. Both hooks collect every failure they find and
raise a single AggregatePublishError, so one report lists every problem.
No state is kept at module level; independent pipelines can run in the
same process.
"""

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, TextIO

from pydantic import ValidationError

from tfc_publisher.auth.verifier import verify_auth, verify_environment
from tfc_publisher.core.config import Settings, load_settings
from tfc_publisher.core.errors import AggregatePublishError, PublishError, SettingsError
from tfc_publisher.core.logging import HostLogger, StructlogHostLogger
from tfc_publisher.options.types import PluginConfig, find_sibling_config, merge_plugin_config
from tfc_publisher.options.validator import verify_config
from tfc_publisher.package.reader import read_package
from tfc_publisher.publish.orchestrator import publish_module
from tfc_publisher.publish.types import PipelineState, PublishResult

logger = logging.getLogger(__name__)


@dataclass
class PluginContext:
    """Everything the release host hands to a lifecycle hook.

    options holds the host's global configuration; its `publish` entry is
    searched for the sibling plugin whose options fill our unset fields.
    """

    cwd: Path
    env: Mapping[str, str]
    logger: HostLogger = field(default_factory=StructlogHostLogger)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    options: Mapping[str, Any] = field(default_factory=dict)


def resolve_config(plugin_options: Optional[Mapping[str, Any]], context: PluginContext) -> PluginConfig:
    local = PluginConfig.from_options(plugin_options)
    return merge_plugin_config(local, find_sibling_config(context.options))


def _load_settings(context: PluginContext, errors: list[PublishError]) -> Optional[Settings]:
    try:
        return load_settings(context.env)
    except ValidationError as exc:
        errors.append(SettingsError("Invalid publisher settings", str(exc)))
        return None


async def verify_conditions(
    plugin_options: Optional[Mapping[str, Any]],
    context: PluginContext,
) -> PipelineState:
    """Validate options, environment and credentials before anything mutates.

    Raises:
        AggregatePublishError: every config, environment and auth failure.
    """
    config = resolve_config(plugin_options, context)
    errors: list[PublishError] = list(verify_config(config))
    settings = _load_settings(context, errors)

    if settings is not None and config.publish_enabled:
        errors.extend(verify_environment(settings))
        if settings.tfc_token:
            try:
                await verify_auth(settings, context.logger)
            except PublishError as exc:
                errors.append(exc)

    if errors:
        logger.error("Verification failed with %d error(s)", len(errors))
        raise AggregatePublishError(errors)

    return PipelineState(config=config, verified=True)


async def publish(
    plugin_options: Optional[Mapping[str, Any]],
    context: PluginContext,
    state: Optional[PipelineState] = None,
) -> PublishResult:
    """Publish the package at the configured root to the registry.

    package.json is reloaded in case an earlier release step rewrote it.
    Validation is skipped when `state` records a successful verify phase.

    Raises:
        AggregatePublishError: validation, package.json or publish failures.
    """
    verified = state is not None and state.verified
    config = state.config if verified else resolve_config(plugin_options, context)
    errors: list[PublishError] = [] if verified else list(verify_config(config))
    settings = _load_settings(context, errors)

    descriptor = None
    try:
        descriptor = read_package(context.cwd, config.pkg_root, require_release=config.publish_enabled)
        if not verified and config.publish_enabled and settings is not None:
            environment_errors = verify_environment(settings)
            errors.extend(environment_errors)
            if not environment_errors:
                await verify_auth(settings, context.logger)
    except PublishError as exc:
        errors.append(exc)

    if errors or descriptor is None or settings is None:
        raise AggregatePublishError(errors)

    return await publish_module(
        config,
        descriptor,
        settings,
        cwd=Path(context.cwd),
        host_logger=context.logger,
        stdout=context.stdout,
        stderr=context.stderr,
        env=context.env,
    )
