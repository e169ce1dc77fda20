"""Publish Terraform modules to a private Terraform Cloud registry.

Lifecycle hooks for a release pipeline host:
    verify_conditions(options, context) -> PipelineState
    publish(options, context, state) -> PublishResult
"""

__version__ = "0.1.0"

from tfc_publisher.core.errors import AggregatePublishError, PublishError
from tfc_publisher.plugin import PluginContext, publish, verify_conditions
from tfc_publisher.publish.types import PipelineState, PublishResult

__all__ = [
    "__version__",
    "AggregatePublishError",
    "PipelineState",
    "PluginContext",
    "PublishError",
    "PublishResult",
    "publish",
    "verify_conditions",
]
