"""Error taxonomy for the verify and publish phases.

Every failure the publisher can report is a `PublishError` with a stable
`code`, a human-readable `message` and free-form `details` for diagnostics.
Lifecycle hooks never raise a bare `PublishError`: they collect every failure
they hit into an `AggregatePublishError` so the caller sees all problems in a
single report.

Codes:
  EINVALID<OPTION>   ConfigError, one per offending option
  ENOTFCTOKEN        MissingCredentialError
  ENOCOMMITSHA       MissingCommitShaError
  EINVALIDTFCTOKEN   AuthenticationError
  ECOMPRESS          PackagingError
  HTTPERROR          RegistryError, the registry answered with a non-2xx status
  NETWORKERROR       RegistryError, the request never reached the registry
  EINVALIDRESPONSE   RegistryError, 2xx body without the documented shape
  ENOPKG / EINVALIDPKG / ENOPKGNAME / ENOPKGVERSION / ENOPKGPROVIDER
                     package.json problems
  ENOORGNAME         no organization in package.json or plugin config
  EINVALIDSETTINGS   environment-derived settings are malformed
"""

from typing import Iterable, Optional

HTTP_ERROR = "HTTPERROR"
NETWORK_ERROR = "NETWORKERROR"
INVALID_RESPONSE = "EINVALIDRESPONSE"


class PublishError(Exception):
    """Base class for every reportable publisher failure."""

    code = "EPUBLISH"

    def __init__(self, message: str, details: str = "", code: Optional[str] = None):
        if code is not None:
            self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


class ConfigError(PublishError):
    """A plugin option is present but has the wrong shape."""

    def __init__(self, option: str, value: object, expected: str):
        self.option = option
        self.value = value
        super().__init__(
            f"Invalid `{option}` option",
            f"Expected {expected}, got {value!r}",
            code=f"EINVALID{option.upper()}",
        )


class MissingCredentialError(PublishError):
    code = "ENOTFCTOKEN"

    def __init__(self, variable: str = "TFC_TOKEN"):
        super().__init__(
            "No registry token specified",
            f"The {variable} environment variable must be set to publish modules",
        )


class MissingCommitShaError(PublishError):
    code = "ENOCOMMITSHA"

    def __init__(self, variable: str = "GITHUB_SHA"):
        super().__init__(
            "No commit identifier specified",
            f"The {variable} environment variable must be set to register a module version",
        )


class AuthenticationError(PublishError):
    """The registry rejected the bearer token during the auth probe."""

    code = "EINVALIDTFCTOKEN"

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(
            "Invalid registry token",
            f"Response status: {status}, Response body: {body}",
        )


class PackagingError(PublishError):
    """The archive command could not be started or exited non-zero."""

    code = "ECOMPRESS"

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        details = f"Exit code: {returncode}" if returncode is not None else ""
        if stderr:
            details = f"{details}, stderr: {stderr}" if details else stderr
        super().__init__(message, details)


class RegistryError(PublishError):
    """A registry call failed.

    `code` distinguishes an HTTP-level rejection (HTTPERROR, with `status`
    and `body` preserved) from a transport failure (NETWORKERROR) and from a
    successful response that could not be understood (EINVALIDRESPONSE).
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: str = "",
        status: Optional[int] = None,
        body: str = "",
    ):
        self.status = status
        self.body = body
        super().__init__(message, details, code=code)

    @classmethod
    def from_status(cls, status: int, reason: str, body: str) -> "RegistryError":
        return cls(
            f"HTTP error: {reason}",
            HTTP_ERROR,
            f"Response status: {status}, Response body: {body}",
            status=status,
            body=body,
        )

    @classmethod
    def from_transport(cls, exc: Exception) -> "RegistryError":
        return cls("Network error", NETWORK_ERROR, str(exc) or type(exc).__name__)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["status"] = self.status
        return payload


class MissingPackageFileError(PublishError):
    code = "ENOPKG"

    def __init__(self, path: str):
        super().__init__("Missing package.json file", f"No package.json found at {path}")


class InvalidPackageFileError(PublishError):
    code = "EINVALIDPKG"

    def __init__(self, path: str, reason: str):
        super().__init__("Invalid package.json file", f"{path}: {reason}")


class MissingNameError(PublishError):
    code = "ENOPKGNAME"

    def __init__(self, path: str):
        super().__init__("Missing `name` property in package.json", path)


class MissingVersionError(PublishError):
    code = "ENOPKGVERSION"

    def __init__(self, path: str):
        super().__init__("Missing `version` property in package.json", path)


class MissingProviderError(PublishError):
    code = "ENOPKGPROVIDER"

    def __init__(self, path: str):
        super().__init__(
            "Missing `provider` property in package.json",
            f"{path}: registry modules are addressed by provider (e.g. \"aws\")",
        )


class MissingOrganizationError(PublishError):
    code = "ENOORGNAME"

    def __init__(self, name: str):
        super().__init__(
            "No registry organization specified",
            f"Set `org_name` in package.json or the `orgName` option to publish {name}",
        )


class SettingsError(PublishError):
    """Environment-derived settings failed validation."""

    code = "EINVALIDSETTINGS"


class AggregatePublishError(Exception):
    """All failures collected during one verify or publish invocation."""

    def __init__(self, errors: Iterable[PublishError]):
        self.errors: list[PublishError] = list(errors)
        super().__init__(self._render())

    def _render(self) -> str:
        lines = [f"{len(self.errors)} error(s) occurred:"]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)

    @property
    def codes(self) -> list[str]:
        return [error.code for error in self.errors]

    def to_dict(self) -> dict:
        return {"errors": [error.to_dict() for error in self.errors]}
