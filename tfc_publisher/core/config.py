from collections.abc import Mapping

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGISTRY_URL = "https://app.terraform.io"

# Per-request timeout for every registry call (seconds)
DEFAULT_REQUEST_TIMEOUT = 30.0


def _normalise_registry_url(url: str) -> str:
    """Strip trailing slashes so API paths can be appended verbatim.

    An empty value falls back to the public Terraform Cloud host.
    """
    url = (url or "").strip().rstrip("/")
    return url or DEFAULT_REGISTRY_URL


class Settings(BaseSettings):
    """Publisher settings loaded from environment variables.

    TFC_TOKEN and GITHUB_SHA are required at publish time, but default to
    empty here so their absence can be reported as a verify-phase error
    rather than a settings validation failure.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Registry bearer credential
    tfc_token: str = ""

    # Commit identifier registered as the version's commit-sha
    github_sha: str = ""

    tfc_registry_url: str = DEFAULT_REGISTRY_URL
    tfc_request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # App
    debug: bool = False

    @field_validator("tfc_registry_url", mode="before")
    @classmethod
    def normalise_registry_url(cls, v: str) -> str:
        return _normalise_registry_url(v)

    @field_validator("tfc_request_timeout")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("TFC_REQUEST_TIMEOUT must be greater than zero")
        return v


def get_settings() -> Settings:
    return Settings()


def load_settings(env: Mapping[str, str]) -> Settings:
    """Build settings from a host-supplied environment mapping.

    Keys present in `env` take precedence over the process environment and
    the .env file; anything missing falls back to those sources.
    """
    overrides: dict[str, str] = {}
    lowered = {key.lower(): value for key, value in env.items()}
    for field_name in Settings.model_fields:
        if field_name in lowered:
            overrides[field_name] = lowered[field_name]
    return Settings(**overrides)
