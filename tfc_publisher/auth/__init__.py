"""Pre-flight credential checks.

Public API:
    verify_environment(settings) -> list[PublishError]
    verify_auth(settings, logger)
"""

from tfc_publisher.auth.verifier import verify_auth, verify_environment

__all__ = ["verify_auth", "verify_environment"]
