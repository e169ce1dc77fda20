"""Publish workflow.

Public API:
    publish_module(config, descriptor, settings, ...) -> PublishResult
"""

from tfc_publisher.publish.orchestrator import publish_module, resolve_archive_path
from tfc_publisher.publish.types import (
    STATUS_PUBLISHED,
    STATUS_SKIPPED,
    PipelineState,
    PublishResult,
)

__all__ = [
    "STATUS_PUBLISHED",
    "STATUS_SKIPPED",
    "PipelineState",
    "PublishResult",
    "publish_module",
    "resolve_archive_path",
]
