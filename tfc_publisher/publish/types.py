"""Types shared by the lifecycle hooks and the publish orchestrator."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tfc_publisher.options.types import PluginConfig
from tfc_publisher.package.types import ModuleIdentity

# Terminal states; failure is signalled by AggregatePublishError
STATUS_SKIPPED = "skipped"
STATUS_PUBLISHED = "published"


@dataclass(frozen=True)
class PipelineState:
    """Outcome of the verify phase, threaded into publish.

    Carries the merged config so publish does not repeat validation that
    already succeeded for the same pipeline.
    """

    config: PluginConfig
    verified: bool = False


@dataclass
class PublishResult:
    """Result of one publish run.

    confirmation is the registry's version collection, or None when the
    registry answered 404 (the new version is not visible yet).
    """

    status: str
    version: Optional[str]
    identity: Optional[ModuleIdentity] = None
    archive_path: Optional[Path] = None
    module_created: bool = False
    confirmation: Optional[dict] = None

    @property
    def skipped(self) -> bool:
        return self.status == STATUS_SKIPPED

    @property
    def published(self) -> bool:
        return self.status == STATUS_PUBLISHED

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "version": self.version,
            "identity": self.identity.to_dict() if self.identity else None,
            "archive_path": str(self.archive_path) if self.archive_path else None,
            "module_created": self.module_created,
            "confirmation": self.confirmation,
        }
