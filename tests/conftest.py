"""Shared fixtures for the publisher test suite.

Registry calls are mocked at the httpx.AsyncClient level (or by patching
the client module functions); no test talks to a real registry.
"""

import json
from pathlib import Path

import pytest

from tfc_publisher.core.config import Settings

STUB_TOKEN = "tfc-test-token"
STUB_SHA = "0123456789abcdef0123456789abcdef01234567"
STUB_ORG = "acme"


class RecordingLogger:
    """HostLogger that keeps every progress message."""

    def __init__(self):
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)


def _write_package(root: Path, **fields) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    data = {"name": "vpc-module", "version": "1.2.0", "provider": "aws"}
    data.update(fields)
    data = {key: value for key, value in data.items() if value is not None}
    path = root / "package.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def write_package():
    """Write a package.json under a directory; None drops a default field."""
    return _write_package


@pytest.fixture
def host_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        tfc_token=STUB_TOKEN,
        github_sha=STUB_SHA,
        tfc_registry_url="https://tfc.example.com",
        tfc_request_timeout=5,
    )


@pytest.fixture
def module_dir(tmp_path: Path) -> Path:
    """A minimal module checkout: package.json plus one Terraform file."""
    _write_package(tmp_path, org_name=STUB_ORG)
    (tmp_path / "main.tf").write_text('variable "cidr" {}\n')
    return tmp_path


@pytest.fixture
def env() -> dict:
    return {"TFC_TOKEN": STUB_TOKEN, "GITHUB_SHA": STUB_SHA}
